"""Nested scopes: override some providers, share everything else.

A child scope resolves its own providers first and delegates the rest to its
parent. Delegated values are cached in the parent, so every child sees the
same instance. ``SCOPE_DEPENDENCY`` hands a provider the scope resolving it.
"""

from __future__ import annotations

import asyncio
import itertools

from tidi import SCOPE_DEPENDENCY, Scope, dependency, provider

Config = dependency("CONFIG")
RequestId = dependency("REQUEST_ID")
Handler = dependency("HANDLER")


async def main() -> None:
    request_ids = itertools.count(1)

    app_scope = Scope([provider(provides=Config, use=lambda: {"env": "prod"})])

    def request_scope() -> Scope:
        return Scope(
            app_scope,
            [
                provider(provides=RequestId, use=lambda: next(request_ids)),
                provider(
                    provides=Handler,
                    requires=[Config, RequestId, SCOPE_DEPENDENCY],
                    use=lambda config, request_id, scope: (config["env"], request_id, scope),
                ),
            ],
        )

    first = request_scope()
    second = request_scope()

    env, first_id, owner = await first.resolve(Handler)
    _, second_id, _ = await second.resolve(Handler)

    print(f"env={env}")  # => env=prod
    print(f"request_ids={first_id},{second_id}")  # => request_ids=1,2
    print(f"handler_got_own_scope={owner is first}")  # => handler_got_own_scope=True

    shared = first.get(Config) is second.get(Config)
    print(f"config_shared={shared}")  # => config_shared=True
    print(f"config_cached_in_child={first.is_resolved(Config)}")  # => config_cached_in_child=False
    print(f"config_cached_in_parent={app_scope.is_resolved(Config)}")  # => config_cached_in_parent=True


if __name__ == "__main__":
    asyncio.run(main())
