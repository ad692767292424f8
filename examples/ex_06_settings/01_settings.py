"""Configuration from the environment and pydantic-settings models.

``env_provider`` reads one variable each time it runs, and ``settings_provider``
builds a ``BaseSettings`` model. Both are ordinary providers, so values are
cached and ``invalidate`` re-reads the environment.
"""

from __future__ import annotations

import asyncio
import os

from pydantic_settings import BaseSettings, SettingsConfigDict

from tidi import Scope, dependency, env_provider, get_env, settings_provider


class AppSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="EXAMPLE_APP_")

    name: str = "tidi-app"
    workers: int = 1


Workers = dependency("WORKERS", validate=lambda value: value > 0)
Settings = dependency("SETTINGS")


async def main() -> None:
    os.environ["EXAMPLE_WORKERS"] = "4"
    os.environ["EXAMPLE_APP_WORKERS"] = "8"

    scope = Scope(
        [
            env_provider(Workers, "EXAMPLE_WORKERS", use=lambda raw: int(raw or "1")),
            settings_provider(Settings, AppSettings),
        ],
    )

    print(f"workers={await scope.resolve(Workers)}")  # => workers=4

    settings = await scope.resolve(Settings)
    print(f"settings={settings.name}:{settings.workers}")  # => settings=tidi-app:8

    os.environ["EXAMPLE_WORKERS"] = "6"
    print(f"cached_workers={scope.get(Workers)}")  # => cached_workers=4
    await scope.invalidate(Workers)
    print(f"refreshed_workers={scope.get(Workers)}")  # => refreshed_workers=6

    print(f"default={get_env('EXAMPLE_UNSET_VARIABLE', 'fallback')}")  # => default=fallback


if __name__ == "__main__":
    asyncio.run(main())
