"""Domain models and reserved names shared by the bootstrap chain."""

from dataclasses import dataclass
from typing import Any, Optional, Protocol, runtime_checkable

__all__ = [
    "DI",
    "SPECIAL_MARKER",
    "SERVICE_MARKER",
    "CONTAINER_SLOT",
    "ENVIRONMENT_SLOT",
    "DI_SLOT",
    "Parameter",
    "ServiceLocator",
]

DI = "di"
"""Name of the container variable holding the service locator."""

SPECIAL_MARKER = "$"
SERVICE_MARKER = "@"

CONTAINER_SLOT = "$container"
ENVIRONMENT_SLOT = "$environment"
DI_SLOT = SPECIAL_MARKER + DI


@runtime_checkable
class ServiceLocator(Protocol):
    """Name-indexed provider of shared services.

    Any object with ``has(name)`` and ``get(name)`` methods satisfies this
    protocol; ``get`` is expected to raise for names ``has`` reports missing.
    """

    def has(self, name: str) -> bool: ...

    def get(self, name: str) -> Any: ...


@dataclass(frozen=True)
class Parameter:
    """Describes one argument a module callable expects.

    Attributes:
        parameter_name: The parameter name in the callable's signature, or the
            descriptor name for explicitly specified modules.
        lookup_name: The name searched for in the container and service locator.
        declared_type: The annotated type of the parameter, if any.
        has_default: Whether a default value is available.
        default: The default value; only meaningful when ``has_default`` is set.
        keyword_only: Whether the argument must be passed by keyword.
    """

    parameter_name: str
    lookup_name: str
    declared_type: Optional[type] = None
    has_default: bool = False
    default: Any = None
    keyword_only: bool = False
