from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Iterable, Mapping, Sequence
from types import MappingProxyType
from typing import Any, TypeVar, cast, overload

from tidi.dependency import Dependency
from tidi.exceptions import (
    TidiCircularDependencyError,
    TidiNotResolvedError,
    TidiProviderNotFoundError,
    TidiResolutionError,
    TidiValidationError,
)
from tidi.lock_mode import LockMode
from tidi.provider import Provider

T = TypeVar("T")

logger = logging.getLogger(__name__)


class Scope:
    """Hold providers and resolve their values, optionally falling back to a parent.

    A scope owns a fixed provider registry and a cache of resolved values. A
    dependency is resolved from the cache, then from the scope's own provider,
    then from the parent scope. Values are cached only in the scope that owns
    the provider, so a child scope that overrides some providers shares every
    other value with its parent.

    Examples:
        .. code-block:: python

            scope = Scope([DatabaseURLProvider, EngineProvider])
            engine = await scope.resolve(Engine)

            # Values already resolved can be read synchronously.
            scope.get(Engine)

            # A sub-scope overriding part of the parent.
            request_scope = Scope(scope, [RequestProvider])

    """

    @overload
    def __init__(
        self,
        parent: Scope | None = None,
        providers: Iterable[Provider[Any]] | None = None,
        *,
        lock_mode: LockMode = LockMode.ASYNC,
    ) -> None: ...

    @overload
    def __init__(
        self,
        parent: Iterable[Provider[Any]],
        *,
        lock_mode: LockMode = LockMode.ASYNC,
    ) -> None: ...

    def __init__(
        self,
        parent: Scope | Iterable[Provider[Any]] | None = None,
        providers: Iterable[Provider[Any]] | None = None,
        *,
        lock_mode: LockMode = LockMode.ASYNC,
    ) -> None:
        """Initialize a scope from an optional parent and optional providers.

        ``Scope(providers)`` is accepted as a shorthand for a scope without a
        parent. When several providers supply the same dependency, the last one
        wins.

        Args:
            parent: Parent scope consulted for dependencies this scope does not
                provide, or the provider list when no parent is needed.
            providers: Providers owned by this scope.
            lock_mode: How concurrent first resolutions of the same dependency
                are guarded.

        Raises:
            TypeError: If providers are passed both positionally as ``parent``
                and as ``providers``.

        """
        if parent is not None and not isinstance(parent, Scope):
            if providers is not None:
                msg = "Scope() got providers twice; pass the parent scope first."
                raise TypeError(msg)
            providers = parent
            parent = None

        self._parent = parent
        self._providers: dict[Dependency[Any], Provider[Any]] = {
            provider.provides: provider for provider in providers or ()
        }
        self._cache: dict[Dependency[Any], Any] = {}
        self._lock_mode = lock_mode
        self._locks: dict[Dependency[Any], asyncio.Lock] = {}
        self._lock_users: dict[Dependency[Any], int] = {}

    @property
    def parent(self) -> Scope | None:
        """The parent scope, if any."""
        return self._parent

    @property
    def providers(self) -> Mapping[Dependency[Any], Provider[Any]]:
        """Read-only view of the providers owned by this scope."""
        return MappingProxyType(self._providers)

    @property
    def lock_mode(self) -> LockMode:
        """How concurrent first resolutions of a provided dependency are guarded."""
        return self._lock_mode

    @overload
    async def resolve(self, dependency: Dependency[T]) -> T: ...

    @overload
    async def resolve(self, dependency: Sequence[Dependency[Any]]) -> list[Any]: ...

    async def resolve(self, dependency: Any) -> Any:
        """Resolve a dependency, or a list of dependencies, asynchronously.

        A single dependency is looked up in this order: the scope itself for
        ``SCOPE_DEPENDENCY``, this scope's cache, this scope's provider, then the
        parent scope. Values produced by this scope's providers are validated
        and cached here. Delegated values are cached by the scope that owns the
        provider.

        A list or tuple is resolved concurrently and the values are returned in
        the same order.

        Args:
            dependency: Dependency descriptor, or a list/tuple of them.

        Returns:
            The resolved value, or a list of values for a batch.

        Raises:
            TidiResolutionError: If no scope in the chain provides the
                dependency.
            TidiValidationError: If the provided value fails validation.
            TidiCircularDependencyError: If the provider's requirements loop
                back to it.

        """
        if isinstance(dependency, (list, tuple)):
            return list(await asyncio.gather(*(self.resolve(item) for item in dependency)))

        if dependency is SCOPE_DEPENDENCY:
            return self

        if dependency in self._cache:
            logger.debug("Cache hit for %s", dependency.name)
            return self._cache[dependency]

        provider = self._providers.get(dependency)
        if provider is not None:
            return await self._resolve_provided(provider)

        if self._parent is not None:
            logger.debug("Delegating %s to parent scope", dependency.name)
            return await self._parent.resolve(dependency)

        msg = f"Unable to resolve dependency {dependency.name}"
        raise TidiResolutionError(msg, dependency=dependency)

    async def resolve_all(self) -> None:
        """Clear the cache and resolve every dependency this scope provides.

        Providers are started in ascending order of requirement count. The
        ordering is only a hint: requirements are resolved on demand, so a
        provider that needs a dependency not yet resolved simply resolves it
        first.

        Raises:
            TidiValidationError: If any provided value fails validation.
            TidiCircularDependencyError: If any provider's requirements loop.
            TidiResolutionError: If a requirement cannot be resolved.

        """
        self._cache.clear()

        providers = sorted(self._providers.values(), key=lambda provider: len(provider.requires))
        logger.info("Resolving all %d providers", len(providers))

        for provider in providers:
            if provider.provides not in self._cache:
                await self._resolve_provided(provider)

    @overload
    def get(self, dependency: Dependency[T]) -> T: ...

    @overload
    def get(self, dependency: Sequence[Dependency[Any]]) -> list[Any]: ...

    def get(self, dependency: Any) -> Any:
        """Return an already resolved value without running any provider.

        Args:
            dependency: Dependency descriptor, or a list/tuple of them.

        Returns:
            The cached value from this scope or the nearest ancestor holding
            it, or a list of values for a batch.

        Raises:
            TidiNotResolvedError: If no scope in the chain has a cached value.

        """
        if isinstance(dependency, (list, tuple)):
            return [self.get(item) for item in dependency]

        if dependency is SCOPE_DEPENDENCY:
            return self

        if dependency in self._cache:
            return self._cache[dependency]

        if self._parent is not None:
            return self._parent.get(dependency)

        msg = f"No value resolved for dependency {dependency.name}"
        raise TidiNotResolvedError(msg, dependency=dependency)

    def get_provider(self, dependency: Dependency[T]) -> Provider[T]:
        """Return this scope's provider for a dependency.

        The parent scope is not consulted.

        Raises:
            TidiProviderNotFoundError: If this scope does not provide the
                dependency.

        """
        provider = self._providers.get(dependency)
        if provider is None:
            msg = f"No provider found for dependency {dependency.name}"
            raise TidiProviderNotFoundError(msg, dependency=dependency)
        return cast("Provider[T]", provider)

    async def use_provider(self, provider: Provider[T]) -> T:
        """Run a provider and return its raw value.

        Requirements are resolved through ``resolve``. The produced value is
        neither validated nor cached.

        Raises:
            TidiCircularDependencyError: If the provider's requirements loop
                back to it.

        """
        self.check_for_circular_dependencies(provider)

        arguments = await self.resolve(provider.requires)
        logger.debug("Invoking provider for %s", provider.provides.name)
        value = provider.use(*arguments)
        if inspect.isawaitable(value):
            value = await value
        return cast("T", value)

    def is_resolved(self, dependency: Dependency[Any]) -> bool:
        """Return whether this scope (not a parent) holds a value for the dependency."""
        return dependency in self._cache

    def is_all_resolved(self) -> bool:
        """Return whether every dependency this scope provides is resolved here."""
        return all(self.is_resolved(dependency) for dependency in self._providers)

    def validate(self, value: object, dependency: Dependency[Any]) -> None:
        """Check a value against the dependency's validator.

        A validator result is coerced to ``bool``; ``None`` counts as a
        rejection.

        Raises:
            TidiValidationError: If the validator raises or returns a falsy
                value.

        """
        validator = dependency.validate
        if validator is None:
            return

        try:
            is_valid = bool(validator(value))
        except Exception as exc:
            msg = f"Dependency {dependency.name} failed validation: {exc!r}"
            raise TidiValidationError(msg, dependency=dependency, cause=exc) from exc

        if not is_valid:
            msg = f"Dependency {dependency.name} failed validation"
            raise TidiValidationError(msg, dependency=dependency)

    def check_for_circular_dependencies(
        self,
        provider: Provider[Any],
        origin: Provider[Any] | None = None,
    ) -> None:
        """Raise if the provider's requirements lead back to ``origin``.

        Only this scope's providers are followed. Requirements supplied by a
        parent scope and ``SCOPE_DEPENDENCY`` end the walk.

        Args:
            provider: Provider whose requirements are walked.
            origin: Provider that must not be reached again. Defaults to
                ``provider``.

        Raises:
            TidiCircularDependencyError: If a requirement chain reaches
                ``origin``.

        """
        self._walk_requirements(provider, origin or provider, set())

    def _walk_requirements(
        self,
        provider: Provider[Any],
        origin: Provider[Any],
        visited: set[Provider[Any]],
    ) -> None:
        visited.add(provider)
        for required in provider.requires:
            if required is SCOPE_DEPENDENCY:
                continue

            required_provider = self._providers.get(required)
            if required_provider is None:
                continue

            if required_provider is origin:
                msg = f"Provider for {provider.provides.name} closes a loop with {required.name}"
                raise TidiCircularDependencyError(msg, dependency=required, provider=provider)

            # A loop that does not pass through origin is reported when its own provider is used.
            if required_provider not in visited:
                self._walk_requirements(required_provider, origin, visited)

    def get_dependents(
        self,
        dependency: Dependency[Any],
        origin: Dependency[Any] | None = None,
    ) -> list[Dependency[Any]]:
        """Return the dependencies that require ``dependency``, directly or indirectly.

        Each direct dependent is followed by its own dependents. Diamond shaped
        graphs may list a dependent more than once.

        Args:
            dependency: Dependency whose dependents are collected.
            origin: Dependency that must not be reached again. Defaults to
                ``dependency``.

        Raises:
            TidiCircularDependencyError: If the dependents lead back to
                ``origin``.

        """
        return self._collect_dependents(dependency, origin or dependency, set())

    def _collect_dependents(
        self,
        dependency: Dependency[Any],
        origin: Dependency[Any],
        visited: set[Dependency[Any]],
    ) -> list[Dependency[Any]]:
        visited.add(dependency)
        dependents: list[Dependency[Any]] = []
        for provider in self._providers.values():
            if dependency not in provider.requires:
                continue

            if provider.provides is origin:
                msg = f"Provider for {origin.name} closes a loop with {dependency.name}"
                raise TidiCircularDependencyError(msg, dependency=dependency, provider=provider)

            dependents.append(provider.provides)
            if provider.provides not in visited:
                dependents.extend(self._collect_dependents(provider.provides, origin, visited))
        return dependents

    async def invalidate(self, dependency: Dependency[Any]) -> None:
        """Drop a cached value and its dependents' values, then resolve them again.

        The dependency is refreshed only if this scope provides it. Its
        dependents within this scope are always refreshed, and each affected
        provider runs once.

        All affected values are evicted before any is resolved again. If a
        refresh fails, the values not yet refreshed stay uncached rather than
        keeping their stale values, and the next ``resolve`` runs their
        providers.

        Raises:
            TidiCircularDependencyError: If the dependents lead back to
                ``dependency``.
            TidiValidationError: If a refreshed value fails validation.

        """
        refreshed: list[Dependency[Any]] = []
        if dependency in self._providers:
            refreshed.append(dependency)
        for dependent in self.get_dependents(dependency):
            if dependent not in refreshed:
                refreshed.append(dependent)

        for stale in refreshed:
            self._cache.pop(stale, None)
            logger.debug("Evicted %s", stale.name)

        logger.info(
            "Invalidating %s refreshes %d dependencies",
            dependency.name,
            len(refreshed),
        )
        for stale in refreshed:
            await self.resolve(stale)

    async def _resolve_provided(self, provider: Provider[T]) -> T:
        dependency = provider.provides
        if self._lock_mode is LockMode.NONE:
            return await self._provide(provider)

        lock = self._locks.get(dependency)
        if lock is None:
            lock = self._locks[dependency] = asyncio.Lock()
        self._lock_users[dependency] = self._lock_users.get(dependency, 0) + 1

        try:
            async with lock:
                if dependency in self._cache:
                    logger.debug("Cache hit for %s after waiting", dependency.name)
                    return cast("T", self._cache[dependency])
                return await self._provide(provider)
        finally:
            # A lock binds to the loop it first waits on; drop it once idle.
            remaining = self._lock_users[dependency] - 1
            if remaining:
                self._lock_users[dependency] = remaining
            else:
                del self._lock_users[dependency]
                del self._locks[dependency]

    async def _provide(self, provider: Provider[T]) -> T:
        dependency = provider.provides
        value = await self.use_provider(provider)
        self.validate(value, dependency)
        self._cache[dependency] = value
        logger.debug("Cached %s", dependency.name)
        return value

    def __repr__(self) -> str:
        provided = ", ".join(dependency.name for dependency in self._providers)
        return f"Scope(providers=[{provided}], parent={self._parent!r})"


def _is_scope(value: object) -> bool:
    return isinstance(value, Scope)


SCOPE_DEPENDENCY: Dependency[Scope] = Dependency(name="SCOPE", validate=_is_scope)
"""Resolves to the enclosing ``Scope``; usable in ``requires`` to receive the scope itself."""
