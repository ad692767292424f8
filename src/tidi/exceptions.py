from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from tidi.dependency import Dependency
    from tidi.provider import Provider


class TidiError(Exception):
    """Represent a base class for all tidi-specific failures.

    Catch this type when you want to handle any tidi error path without
    matching each concrete exception class individually. Every subclass keeps
    the offending descriptor on ``dependency``.
    """

    def __init__(self, msg: str, *, dependency: Dependency[Any]) -> None:
        super().__init__(msg)
        self.dependency = dependency


class TidiResolutionError(TidiError):
    """Signal that no scope in the chain can supply a dependency.

    Raised by ``Scope.resolve`` when the dependency is not cached, has no
    provider in the scope, and the scope has no parent to delegate to.

    Typical fixes include adding a provider for the dependency to the scope
    (or one of its ancestors) or resolving from a child of the scope that
    owns the provider.
    """


class TidiProviderNotFoundError(TidiError):
    """Signal that a scope has no local provider for a dependency.

    Raised by ``Scope.get_provider``. Provider lookup never consults the
    parent scope.
    """


class TidiNotResolvedError(TidiError):
    """Signal a synchronous read of a value that was never resolved.

    Raised by ``Scope.get`` when no scope in the ancestor chain holds a cached
    value for the dependency.

    Typical fix is awaiting ``scope.resolve(dependency)`` (or
    ``scope.resolve_all()``) before calling ``get``.
    """


class TidiValidationError(TidiError):
    """Signal that a provided value was rejected by its dependency validator.

    Raised by ``Scope.validate`` and therefore by ``resolve``/``resolve_all``/
    ``invalidate``. The value is not cached, so a later ``resolve`` runs the
    provider again. When the validator itself raised, the original exception
    is kept on ``cause`` and chained as ``__cause__``.
    """

    def __init__(
        self,
        msg: str,
        *,
        dependency: Dependency[Any],
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(msg, dependency=dependency)
        self.cause = cause


class TidiCircularDependencyError(TidiError):
    """Signal a provider graph that loops back on itself.

    Raised by ``Scope.check_for_circular_dependencies`` (and so by
    ``use_provider``/``resolve``) and by ``Scope.get_dependents``. ``provider``
    is the provider whose requirement closes the loop and ``dependency`` is
    the dependency it requires.

    Typical fix is splitting one of the providers so the requirement chain
    within a single scope is acyclic.
    """

    def __init__(
        self,
        msg: str,
        *,
        dependency: Dependency[Any],
        provider: Provider[Any],
    ) -> None:
        super().__init__(msg, dependency=dependency)
        self.provider = provider
