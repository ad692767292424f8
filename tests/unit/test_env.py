from __future__ import annotations

import pytest

from tidi import Scope, dependency, env_provider, get_env, identity


def test_identity_returns_value() -> None:
    marker = object()

    assert identity(marker) is marker


def test_get_env_reads_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TIDI_TEST_VALUE", "from-env")

    assert get_env("TIDI_TEST_VALUE", "default") == "from-env"


def test_get_env_falls_back_to_default(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("TIDI_TEST_VALUE", raising=False)

    assert get_env("TIDI_TEST_VALUE", "default") == "default"
    assert get_env("TIDI_TEST_VALUE") == ""


def test_get_env_keeps_empty_value(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TIDI_TEST_VALUE", "")

    assert get_env("TIDI_TEST_VALUE", "default") == ""


async def test_env_provider_passes_raw_value(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TIDI_TEST_URL", "postgres://db")
    url = dependency("URL")

    scope = Scope([env_provider(url, "TIDI_TEST_URL")])

    assert await scope.resolve(url) == "postgres://db"


async def test_env_provider_passes_empty_string_when_unset(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("TIDI_TEST_PORT", raising=False)
    port = dependency("PORT")
    seen: list[str] = []

    def parse_port(raw: str) -> int:
        seen.append(raw)
        return int(raw or "8000")

    scope = Scope([env_provider(port, "TIDI_TEST_PORT", use=parse_port)])

    assert await scope.resolve(port) == 8000
    assert seen == [""]


async def test_env_provider_default_use_returns_empty_string(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("TIDI_TEST_URL", raising=False)
    url = dependency("URL")

    scope = Scope([env_provider(url, "TIDI_TEST_URL")])

    assert await scope.resolve(url) == ""


async def test_env_provider_rereads_on_invalidate(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TIDI_TEST_PORT", "1")
    port = dependency("PORT")
    scope = Scope([env_provider(port, "TIDI_TEST_PORT", use=int)])
    await scope.resolve(port)

    monkeypatch.setenv("TIDI_TEST_PORT", "2")
    assert scope.get(port) == 1

    await scope.invalidate(port)
    assert scope.get(port) == 2


def test_env_provider_has_no_requirements() -> None:
    port = dependency("PORT")

    env_port = env_provider(port, "TIDI_TEST_PORT")

    assert env_port.provides is port
    assert env_port.requires == ()
