from __future__ import annotations

from enum import Enum


class LockMode(Enum):
    """Select how a scope guards the first resolution of a dependency.

    Pass a value as ``Scope(..., lock_mode=...)``. The mode applies to
    dependencies the scope provides itself; delegated resolutions follow the
    mode of the scope that owns the provider.
    """

    ASYNC = "async"
    """Guard each dependency with an ``asyncio.Lock`` so concurrent callers share one resolution."""

    NONE = "none"
    """Disable locking; concurrent first resolutions each run the provider and the last write wins."""
