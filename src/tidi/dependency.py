from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Generic, TypeAlias, TypeVar

T = TypeVar("T")

Validator: TypeAlias = Callable[[Any], object]
"""A predicate over a provided value. It may raise, or return a value that is coerced to ``bool``."""


@dataclass(frozen=True, eq=False, slots=True)
class Dependency(Generic[T]):
    """A value that can be requested from a ``Scope``.

    Where other DI libraries key on a type or a string token, tidi keys on the
    descriptor object itself. ``name`` is only a label used in messages, so two
    descriptors with the same name are still different dependencies.

    Descriptors are frozen and hashed by identity.
    """

    name: str
    """Human-readable identifier used in error messages and logs."""

    validate: Validator | None = None
    """Optional validator applied to every value produced for this dependency."""

    def __repr__(self) -> str:
        return f"Dependency({self.name!r})"


def dependency(name: str, validate: Validator | None = None) -> Dependency[Any]:
    """Declare a ``Dependency``.

    Args:
        name: Label used in error messages and logs.
        validate: Optional validator run against every provided value.

    Returns:
        A new frozen descriptor.

    Examples:
        .. code-block:: python

            DatabaseURL = dependency("DATABASE_URL", validate=lambda value: value.startswith("postgres"))

    """
    return Dependency(name=name, validate=validate)
