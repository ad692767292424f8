"""Async providers and concurrent resolution.

Providers may be ``async def``. Requirements and batches are resolved
concurrently. With the default ``LockMode.ASYNC`` two tasks asking for the same
uncached dependency share one provider call; ``LockMode.NONE`` lets both run.
"""

from __future__ import annotations

import asyncio

from tidi import LockMode, Scope, dependency, provider

Connection = dependency("CONNECTION")
Greeting = dependency("GREETING")


async def main() -> None:
    opened = {"count": 0}

    async def open_connection() -> str:
        opened["count"] += 1
        await asyncio.sleep(0.01)
        return "connection"

    async def greet(connection: str) -> str:
        await asyncio.sleep(0)
        return f"hello over {connection}"

    providers = [
        provider(provides=Connection, use=open_connection),
        provider(provides=Greeting, requires=[Connection], use=greet),
    ]

    scope = Scope(providers)
    greeting, connection = await scope.resolve([Greeting, Connection])
    print(f"greeting={greeting}")  # => greeting=hello over connection
    print(f"batch_order_kept={connection == 'connection'}")  # => batch_order_kept=True
    print(f"locked_opens={opened['count']}")  # => locked_opens=1

    opened["count"] = 0
    unlocked = Scope(providers, lock_mode=LockMode.NONE)
    await asyncio.gather(unlocked.resolve(Connection), unlocked.resolve(Connection))
    print(f"unlocked_opens={opened['count']}")  # => unlocked_opens=2


if __name__ == "__main__":
    asyncio.run(main())
