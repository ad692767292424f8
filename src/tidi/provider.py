from __future__ import annotations

from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass
from typing import Any, Generic, TypeAlias, TypeVar

from tidi.dependency import Dependency

T = TypeVar("T")

ProviderFactory: TypeAlias = Callable[..., T] | Callable[..., Awaitable[T]]
"""A sync or async callable receiving resolved requirements positionally."""


@dataclass(frozen=True, eq=False, slots=True)
class Provider(Generic[T]):
    """Bind a ``Dependency`` to the factory that produces its value.

    The values of ``requires`` are resolved by the scope and passed to ``use``
    in declared order.
    """

    provides: Dependency[T]
    """The dependency this provider supplies."""

    use: ProviderFactory[T]
    """Factory for the provided value, sync or async."""

    requires: tuple[Dependency[Any], ...] = ()
    """Dependencies resolved and passed to ``use``."""

    def __post_init__(self) -> None:
        object.__setattr__(self, "requires", tuple(self.requires))

    def __repr__(self) -> str:
        required = ", ".join(dependency.name for dependency in self.requires)
        return f"Provider({self.provides.name!r}, requires=[{required}])"


def provider(
    provides: Dependency[T],
    use: ProviderFactory[T],
    requires: Iterable[Dependency[Any]] = (),
) -> Provider[T]:
    """Declare a ``Provider``.

    Args:
        provides: Dependency supplied by the provider.
        use: Sync or async factory receiving the resolved ``requires`` values.
        requires: Dependencies resolved before ``use`` is called.

    Returns:
        A new frozen provider.

    Examples:
        .. code-block:: python

            EngineProvider = provider(
                provides=Engine,
                requires=[DatabaseURL],
                use=create_engine,
            )

    """
    return Provider(provides=provides, use=use, requires=tuple(requires))
