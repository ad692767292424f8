from tidi.dependency import Dependency, dependency
from tidi.env import env_provider, get_env, identity
from tidi.exceptions import (
    TidiCircularDependencyError,
    TidiError,
    TidiNotResolvedError,
    TidiProviderNotFoundError,
    TidiResolutionError,
    TidiValidationError,
)
from tidi.lock_mode import LockMode
from tidi.provider import Provider, provider
from tidi.scope import SCOPE_DEPENDENCY, Scope
from tidi.settings import settings_provider

__all__ = [
    "SCOPE_DEPENDENCY",
    "Dependency",
    "LockMode",
    "Provider",
    "Scope",
    "TidiCircularDependencyError",
    "TidiError",
    "TidiNotResolvedError",
    "TidiProviderNotFoundError",
    "TidiResolutionError",
    "TidiValidationError",
    "dependency",
    "env_provider",
    "get_env",
    "identity",
    "provider",
    "settings_provider",
]
