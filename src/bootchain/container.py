"""User space for passing variables between bootstrap modules.

A :class:`Container` is an ordered mapping of variable names to values, shared
by every module in a chain. One name, :data:`~bootchain.domain.DI`, is reserved
for the service locator and only accepts objects implementing
:class:`~bootchain.domain.ServiceLocator`.

Example:
    >>> container = Container({"debug": True})
    >>> container.set("db_url", "sqlite://")
    >>> container.has("db_url")
    True
    >>> container.get("missing") is None
    True
"""

from collections.abc import Mapping
from typing import Any, Iterator, Optional

from bootchain.domain import DI, ServiceLocator
from bootchain.errors import InvalidArgumentError

__all__ = ["Container"]


class Container:
    """Ordered, string-keyed variable store with a reserved service locator slot.

    A variable is present when its name has been set, whatever its value; a
    variable explicitly set to ``None`` is distinct from a missing one.

    Args:
        variables: Optional initial variables, merged with :meth:`merge`.

    Raises:
        InvalidArgumentError: If ``variables`` is not a mapping, or assigns a
            non-locator to the reserved name.
    """

    DI = DI

    def __init__(self, variables: Optional[Mapping[str, Any]] = None):
        self._variables: dict[str, Any] = {}
        if variables is not None:
            self.merge(variables)

    def merge(self, variables: Mapping[str, Any]) -> "Container":
        """Set every entry of ``variables``, keeping the reserved name checked."""
        if not isinstance(variables, Mapping):
            raise InvalidArgumentError(
                f"Container variables must be a mapping, got {type(variables).__name__}"
            )
        for name, value in variables.items():
            self.set(name, value)
        return self

    def get(self, name: str, default: Any = None) -> Any:
        return self._variables.get(name, default)

    def set(self, name: str, value: Any):
        if name == DI:
            self.set_service_locator(value)
            return
        _validate_name(name)
        self._variables[name] = value

    def has(self, name: str) -> bool:
        return name in self._variables

    def delete(self, name: str):
        self._variables.pop(name, None)

    def set_service_locator(self, locator: ServiceLocator) -> "Container":
        """Store the service locator under the reserved name.

        Raises:
            InvalidArgumentError: If ``locator`` has no ``has``/``get`` methods.
        """
        # the protocol check only tests that the attributes exist
        if not (
            isinstance(locator, ServiceLocator)
            and callable(getattr(locator, "has", None))
            and callable(getattr(locator, "get", None))
        ):
            raise InvalidArgumentError(
                "Variable %r must implement has(name) and get(name), got %s"
                % (DI, type(locator).__name__)
            )
        self._variables[DI] = locator
        return self

    def get_service_locator(self) -> Optional[ServiceLocator]:
        return self._variables.get(DI)

    @property
    def service_locator(self) -> Optional[ServiceLocator]:
        return self.get_service_locator()

    @service_locator.setter
    def service_locator(self, locator: ServiceLocator):
        self.set_service_locator(locator)

    def __getitem__(self, name: str) -> Any:
        return self._variables[name]

    def __setitem__(self, name: str, value: Any):
        self.set(name, value)

    def __delitem__(self, name: str):
        del self._variables[name]

    def __contains__(self, name: object) -> bool:
        return name in self._variables

    def __iter__(self) -> Iterator[str]:
        return iter(self._variables)

    def __len__(self) -> int:
        return len(self._variables)

    def __repr__(self) -> str:
        return f"Container({list(self._variables)!r})"


def _validate_name(name: Any):
    if not isinstance(name, str):
        raise InvalidArgumentError(f"Variable name must be a string, got {name!r}")
