"""Invalidation: refresh a value and everything built from it.

``invalidate`` drops the cached value, resolves it again, and refreshes every
dependent in the same scope. Unrelated values keep their cached instances.
"""

from __future__ import annotations

import asyncio
from collections import Counter

from tidi import Scope, dependency, provider

Token = dependency("TOKEN")
Region = dependency("REGION")
Client = dependency("CLIENT")


async def main() -> None:
    calls: Counter[str] = Counter()
    tokens = iter(["token-1", "token-2"])

    def issue_token() -> str:
        calls["token"] += 1
        return next(tokens)

    def pick_region() -> str:
        calls["region"] += 1
        return "eu-west-1"

    def build_client(token: str, region: str) -> str:
        calls["client"] += 1
        return f"{region}:{token}"

    scope = Scope(
        [
            provider(provides=Token, use=issue_token),
            provider(provides=Region, use=pick_region),
            provider(provides=Client, requires=[Token, Region], use=build_client),
        ],
    )

    await scope.resolve_all()
    print(f"client={scope.get(Client)}")  # => client=eu-west-1:token-1

    dependents = [dependent.name for dependent in scope.get_dependents(Token)]
    print(f"token_dependents={dependents}")  # => token_dependents=['CLIENT']

    await scope.invalidate(Token)
    print(f"client={scope.get(Client)}")  # => client=eu-west-1:token-2

    summary = ",".join(f"{name}={calls[name]}" for name in ("token", "region", "client"))
    print(f"calls={summary}")  # => calls=token=2,region=1,client=2


if __name__ == "__main__":
    asyncio.run(main())
