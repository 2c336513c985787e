"""A simple service locator with lazily built, shared services.

:class:`ServiceSet` satisfies :class:`~bootchain.domain.ServiceLocator` and can be
stored in a :class:`~bootchain.container.Container` under the reserved ``"di"``
name. Services are either registered as ready-made instances or as factories,
which are called once on first lookup.

Service sets may be layered: a child set falls back to its parent for names it
does not provide itself.
"""

from collections.abc import Mapping
from typing import Any, Callable, Optional

from bootchain.errors import InvalidArgumentError

__all__ = ["ServiceSet", "inferred_name"]

_UNBUILT = object()


def inferred_name(func: Callable) -> str:
    """Derive a service name from a factory's name, removing any 'make_' prefix.

    Example:
        >>> inferred_name(make_router)  # Returns "router"
        >>> inferred_name(router)       # Returns "router"
    """
    if func.__name__.startswith("make_"):
        return func.__name__[5:]
    return func.__name__


class ServiceSet:
    """Collection of named services with hierarchical lookup.

    Attributes:
        _services: Dictionary mapping service names to built instances.
        _factories: Dictionary mapping service names to factories not yet called.
        _parent: Optional parent ServiceSet for fallback lookup.

    Example:
        >>> services = ServiceSet({"clock": time.monotonic})
        >>> @services.provides()
        ... def make_router() -> Router:
        ...     return Router()
        >>> services.get("router") is services.get("router")
        True
    """

    def __init__(
        self,
        services: Optional[Mapping[str, Any]] = None,
        parent: Optional["ServiceSet"] = None,
    ):
        self._services: dict[str, Any] = dict(services or {})
        self._factories: dict[str, Callable[[], Any]] = {}
        self._parent = parent

    def set(self, name: str, service: Any) -> "ServiceSet":
        """Register a ready-made service instance."""
        _validate_name(name)
        self._factories.pop(name, None)
        self._services[name] = service
        return self

    def set_factory(self, name: str, factory: Callable[[], Any]) -> "ServiceSet":
        """Register a zero-argument factory, called once on first lookup."""
        _validate_name(name)
        if not callable(factory):
            raise InvalidArgumentError(f"Factory for service {name!r} is not callable")
        self._services.pop(name, None)
        self._factories[name] = factory
        return self

    def provides(self, name: Optional[str] = None) -> Callable:
        """Decorator to register a function as a service factory.

        Args:
            name: Optional service name; defaults to the function name with
                any 'make_' prefix removed.

        Returns:
            A decorator that registers the function and returns it unchanged.

        Example:
            @services.provides()
            def make_router() -> Router:
                return Router()
        """

        def decorator(func: Callable) -> Callable:
            self.set_factory(name or inferred_name(func), func)
            return func

        return decorator

    def has(self, name: str) -> bool:
        return (
            name in self._services
            or name in self._factories
            or (self._parent is not None and self._parent.has(name))
        )

    def get(self, name: str) -> Any:
        """Return the named service, building it first if it has a factory.

        Raises:
            KeyError: If no service of that name exists here or in a parent.
        """
        if name in self._factories:
            self._services[name] = self._factories[name]()
            del self._factories[name]
        service = self._services.get(name, _UNBUILT)
        if service is not _UNBUILT:
            return service
        if self._parent is not None and self._parent.has(name):
            return self._parent.get(name)
        raise KeyError(name)

    def __contains__(self, name: str) -> bool:
        return self.has(name)

    def __getitem__(self, name: str) -> Any:
        return self.get(name)


def _validate_name(name: Any):
    if not isinstance(name, str) or not name.strip():
        raise InvalidArgumentError(f"Service name must be a non-blank string, got {name!r}")
