from __future__ import annotations

import os
from collections.abc import Callable
from typing import Any, TypeVar

from tidi.dependency import Dependency
from tidi.provider import Provider, provider

T = TypeVar("T")


def identity(value: T) -> T:
    """Return ``value`` unchanged."""
    return value


def get_env(key: str, default: str | None = None) -> str:
    """Read an environment variable.

    Returns:
        The variable's value, else ``default``, else an empty string.

    """
    value = os.environ.get(key)
    if value is not None:
        return value
    if default is not None:
        return default
    return ""


def env_provider(
    provides: Dependency[T],
    key: str,
    use: Callable[[str], Any] = identity,
) -> Provider[T]:
    """Declare a provider that reads ``key`` from the environment.

    The variable is read each time the provider runs, so invalidating the
    dependency picks up a changed environment. ``use`` receives the value as
    returned by ``get_env``, an empty string when the variable is unset, and may
    convert it.

    Examples:
        .. code-block:: python

            Port = dependency("PORT", validate=lambda value: 0 < value < 65536)
            PortProvider = env_provider(Port, "PORT", use=lambda raw: int(raw or "8000"))

    """

    def _read_env() -> Any:
        return use(get_env(key))

    return provider(provides=provides, use=_read_env)
