"""Quickstart: declare dependencies, bind providers, resolve from a scope.

A ``Dependency`` is the key you ask for, a ``Provider`` says how to build it,
and a ``Scope`` resolves values on demand and caches them.
"""

from __future__ import annotations

import asyncio

from tidi import Scope, dependency, provider


class Database:
    def __init__(self, url: str) -> None:
        self.url = url


class UserRepository:
    def __init__(self, database: Database) -> None:
        self.database = database


DatabaseURL = dependency("DATABASE_URL")
DatabaseDep = dependency("DATABASE")
UserRepositoryDep = dependency("USER_REPOSITORY")


async def main() -> None:
    calls = {"database": 0}

    def build_database(url: str) -> Database:
        calls["database"] += 1
        return Database(url)

    scope = Scope(
        [
            provider(provides=DatabaseURL, use=lambda: "sqlite:///app.db"),
            provider(provides=DatabaseDep, requires=[DatabaseURL], use=build_database),
            provider(provides=UserRepositoryDep, requires=[DatabaseDep], use=UserRepository),
        ],
    )

    repository = await scope.resolve(UserRepositoryDep)
    print(f"db_url={repository.database.url}")  # => db_url=sqlite:///app.db

    again = await scope.resolve(DatabaseDep)
    print(f"database_cached={again is repository.database}")  # => database_cached=True
    print(f"database_calls={calls['database']}")  # => database_calls=1

    print(f"sync_get={scope.get(DatabaseURL)}")  # => sync_get=sqlite:///app.db
    print(f"all_resolved={scope.is_all_resolved()}")  # => all_resolved=True


if __name__ == "__main__":
    asyncio.run(main())
