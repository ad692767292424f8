from __future__ import annotations

import dataclasses

import pytest

from tidi import Provider, dependency, provider


def test_provider_keeps_given_fields() -> None:
    url = dependency("URL")
    engine = dependency("ENGINE")

    def build_engine(value: str) -> str:
        return f"engine:{value}"

    engine_provider = provider(provides=engine, requires=[url], use=build_engine)

    assert isinstance(engine_provider, Provider)
    assert engine_provider.provides is engine
    assert engine_provider.requires == (url,)
    assert engine_provider.use is build_engine


def test_provider_requires_defaults_to_empty_tuple() -> None:
    assert provider(provides=dependency("VALUE"), use=lambda: None).requires == ()


def test_provider_normalizes_requires_to_tuple() -> None:
    first = dependency("FIRST")
    second = dependency("SECOND")

    direct = Provider(provides=dependency("VALUE"), use=lambda a, b: None, requires=[first, second])  # type: ignore[arg-type]
    from_generator = provider(
        provides=dependency("OTHER"),
        use=lambda a, b: None,
        requires=(item for item in (first, second)),
    )

    assert direct.requires == (first, second)
    assert from_generator.requires == (first, second)


def test_provider_is_frozen() -> None:
    value_provider = provider(provides=dependency("VALUE"), use=lambda: None)

    with pytest.raises(dataclasses.FrozenInstanceError):
        value_provider.requires = ()  # type: ignore[misc]


def test_providers_compare_by_identity() -> None:
    value = dependency("VALUE")

    def use() -> None:
        return None

    assert provider(provides=value, use=use) != provider(provides=value, use=use)


def test_provider_repr_lists_requirements() -> None:
    value_provider = provider(
        provides=dependency("C"),
        requires=[dependency("A"), dependency("B")],
        use=lambda a, b: None,
    )

    assert repr(value_provider) == "Provider('C', requires=[A, B])"
