"""Shared pytest fixtures for tidi tests.

The default graph is ``A`` and ``B`` independent and ``C`` requiring
``[A, B]``. ``C`` only accepts ``VALUE_C``; the child scope overrides ``C`` with
a provider producing an invalid value.
"""

from __future__ import annotations

from typing import Any

import pytest

from tidi import Dependency, Provider, Scope, dependency, provider

VALUE_A = "testA"
VALUE_B = "testB"
VALUE_C = "testC"


class RecordingFactory:
    """Provider factory that returns a fixed value and records its calls."""

    def __init__(self, value: Any) -> None:
        self.value = value
        self.calls: list[tuple[Any, ...]] = []

    def __call__(self, *args: Any) -> Any:
        self.calls.append(args)
        return self.value

    @property
    def call_count(self) -> int:
        return len(self.calls)


@pytest.fixture()
def dependency_a() -> Dependency[str]:
    return dependency("DEPENDENCY_A")


@pytest.fixture()
def dependency_b() -> Dependency[str]:
    return dependency("DEPENDENCY_B")


@pytest.fixture()
def dependency_c() -> Dependency[str]:
    return dependency("DEPENDENCY_C", validate=lambda value: value == VALUE_C)


@pytest.fixture()
def factory_a() -> RecordingFactory:
    return RecordingFactory(VALUE_A)


@pytest.fixture()
def factory_b() -> RecordingFactory:
    return RecordingFactory(VALUE_B)


@pytest.fixture()
def factory_c() -> RecordingFactory:
    return RecordingFactory(VALUE_C)


@pytest.fixture()
def provider_a(dependency_a: Dependency[str], factory_a: RecordingFactory) -> Provider[str]:
    return provider(provides=dependency_a, use=factory_a)


@pytest.fixture()
def provider_b(dependency_b: Dependency[str], factory_b: RecordingFactory) -> Provider[str]:
    return provider(provides=dependency_b, use=factory_b)


@pytest.fixture()
def provider_c(
    dependency_a: Dependency[str],
    dependency_b: Dependency[str],
    dependency_c: Dependency[str],
    factory_c: RecordingFactory,
) -> Provider[str]:
    return provider(
        provides=dependency_c,
        requires=[dependency_a, dependency_b],
        use=factory_c,
    )


@pytest.fixture()
def provider_c_invalid(dependency_c: Dependency[str]) -> Provider[str]:
    return provider(provides=dependency_c, use=RecordingFactory("invalid"))


@pytest.fixture()
def scope(
    provider_a: Provider[str],
    provider_b: Provider[str],
    provider_c: Provider[str],
) -> Scope:
    return Scope([provider_a, provider_b, provider_c])


@pytest.fixture()
def child_scope(scope: Scope, provider_c_invalid: Provider[str]) -> Scope:
    return Scope(scope, [provider_c_invalid])
