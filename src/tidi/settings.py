from __future__ import annotations

from typing import Any, TypeVar

from pydantic_settings import BaseSettings

from tidi.dependency import Dependency
from tidi.provider import Provider, provider

SettingsT = TypeVar("SettingsT", bound=BaseSettings)


def is_settings_class(candidate: object) -> bool:
    """Return true when candidate subclasses ``pydantic_settings.BaseSettings``."""
    return isinstance(candidate, type) and issubclass(candidate, BaseSettings)


def settings_provider(
    provides: Dependency[SettingsT],
    settings_type: type[SettingsT],
    **overrides: Any,
) -> Provider[SettingsT]:
    """Declare a provider that builds a pydantic-settings model.

    Environment variables, dotenv files and defaults are loaded by
    pydantic-settings when the provider runs. ``overrides`` are passed to the
    settings constructor and take precedence over every other source.
    ``pydantic.ValidationError`` from the settings class propagates from
    ``Scope.resolve``.

    Raises:
        TypeError: If ``settings_type`` is not a ``BaseSettings`` subclass.

    Examples:
        .. code-block:: python

            class AppSettings(BaseSettings):
                model_config = SettingsConfigDict(env_prefix="APP_")
                debug: bool = False

            Settings = dependency("SETTINGS")
            SettingsProvider = settings_provider(Settings, AppSettings)

    """
    if not is_settings_class(settings_type):
        msg = f"settings_type must be a BaseSettings subclass, got {settings_type!r}."
        raise TypeError(msg)

    def _build_settings() -> SettingsT:
        return settings_type(**overrides)

    return provider(provides=provides, use=_build_settings)
