"""Errors: missing providers, failed validation, and provider loops.

Every tidi error derives from ``TidiError`` and keeps the offending
dependency on ``error.dependency``. Failed validation never caches a value,
so fixing the cause and resolving again succeeds.
"""

from __future__ import annotations

import asyncio

from tidi import (
    Scope,
    TidiCircularDependencyError,
    TidiError,
    TidiNotResolvedError,
    TidiResolutionError,
    TidiValidationError,
    dependency,
    provider,
)

Port = dependency("PORT", validate=lambda value: 0 < value < 65536)
Missing = dependency("MISSING")
A = dependency("A")
B = dependency("B")


async def main() -> None:
    state = {"port": 70000}
    scope = Scope([provider(provides=Port, use=lambda: state["port"])])

    try:
        await scope.resolve(Missing)
    except TidiResolutionError as error:
        print(f"missing={error.dependency.name}")  # => missing=MISSING

    try:
        scope.get(Port)
    except TidiNotResolvedError as error:
        print(f"not_resolved={type(error).__name__}")  # => not_resolved=TidiNotResolvedError

    try:
        await scope.resolve(Port)
    except TidiValidationError as error:
        print(f"invalid={error}")  # => invalid=Dependency PORT failed validation
    print(f"port_cached={scope.is_resolved(Port)}")  # => port_cached=False

    state["port"] = 8080
    print(f"port={await scope.resolve(Port)}")  # => port=8080

    looping = Scope(
        [
            provider(provides=A, requires=[B], use=lambda b: b),
            provider(provides=B, requires=[A], use=lambda a: a),
        ],
    )
    try:
        await looping.resolve(A)
    except TidiCircularDependencyError as error:
        print(f"loop={error}")  # => loop=Provider for B closes a loop with A
        print(f"is_tidi_error={isinstance(error, TidiError)}")  # => is_tidi_error=True


if __name__ == "__main__":
    asyncio.run(main())
