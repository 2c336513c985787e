"""Bootstrap modules and resolution of their arguments.

A module wraps one callable, a small piece of code that initializes part of an
application. Its arguments are bound at execution time, either by inspecting
the callable (reflective binding) or from an explicit specification.

Reflective binding::

    def setup_router(container: Container, environment: Environment, router, debug=False):
        ...

    Module(setup_router)

Parameters annotated with :class:`~bootchain.container.Container` or
:class:`~bootchain.environment.Environment` receive the chain's container and
environment. Every other parameter is looked up by name in the container and in
the service locator; a name present in both is ambiguous. If neither has it,
the parameter's default is used.

Specified binding::

    Module(["$container", "$environment", "$di", "@router", "a", {"b": True}, setup])

The last element is the callable; each preceding entry names one positional
argument. ``$container``, ``$environment`` and ``$di`` are special slots,
``@name`` is a service from the locator and any other name is a container
variable. A one-entry mapping ``{name: default}`` supplies a default.
"""

import logging
from collections.abc import Mapping
from typing import Any, Callable, Optional, Sequence, Union

from bootchain.container import Container
from bootchain.domain import (
    CONTAINER_SLOT,
    DI_SLOT,
    ENVIRONMENT_SLOT,
    SERVICE_MARKER,
    SPECIAL_MARKER,
    Parameter,
    ServiceLocator,
)
from bootchain.environment import Environment
from bootchain.errors import AmbiguousError, InvalidArgumentError, UnresolvableError
from bootchain.signature import callable_name, check_arity, get_parameters

__all__ = ["Module", "ModuleSpecification"]

logger = logging.getLogger(__name__)

ModuleSpecification = Union[Callable, Sequence[Any]]

_SPECIAL_SLOTS: dict[str, Callable[[Container, Environment, Optional[ServiceLocator]], Any]] = {
    CONTAINER_SLOT: lambda container, environment, locator: container,
    ENVIRONMENT_SLOT: lambda container, environment, locator: environment,
    DI_SLOT: lambda container, environment, locator: locator,
}


class Module:
    """A bootstrap callable together with the way its arguments are resolved.

    Args:
        specification: Either a callable, bound reflectively, or a list whose
            last element is the callable and whose preceding entries describe
            its parameters.

    Raises:
        InvalidArgumentError: If the specification is malformed, or a bare
            callable's signature cannot be inspected.
    """

    def __init__(self, specification: ModuleSpecification):
        if isinstance(specification, (list, tuple)):
            if not specification or not callable(specification[-1]):
                raise InvalidArgumentError(
                    "The last element of a module specification must be a callable"
                )
            *descriptors, func = specification
            parameters = [
                _parse_descriptor(descriptor, position)
                for position, descriptor in enumerate(descriptors)
            ]
            check_arity(func, len(parameters))
            specified = True
        elif callable(specification):
            func = specification
            parameters = get_parameters(func)
            specified = False
        else:
            raise InvalidArgumentError(
                "Module must be a callable or a specification list, got %r" % (specification,)
            )

        self._callable = func
        self._parameters = tuple(parameters)
        self._specified = specified
        self._environment: Optional[Environment] = None

    @property
    def callable(self) -> Callable:
        return self._callable

    @property
    def parameters(self) -> tuple[Parameter, ...]:
        return self._parameters

    @property
    def specified(self) -> bool:
        """Whether arguments come from an explicit specification rather than reflection."""
        return self._specified

    @property
    def environment(self) -> Optional[Environment]:
        return self._environment

    @property
    def name(self) -> str:
        return callable_name(self._callable)

    def set_environment(self, environment: Union[str, Callable[[], str], Environment]) -> "Module":
        """Restrict this module to run only under the given environment.

        Raises:
            InvalidArgumentError: If ``environment`` is not a non-blank string,
                a detector function or an Environment.
        """
        self._environment = (
            environment if isinstance(environment, Environment) else Environment(environment)
        )
        return self

    def execute(self, container: Container, environment: Environment):
        """Resolve the callable's arguments and invoke it. Its return value is ignored.

        Args:
            container: The variables container shared by the chain.
            environment: The environment the chain runs under.

        Raises:
            InvalidArgumentError: If a specification names an unsupported special slot.
            AmbiguousError: If a reflectively bound name is both a variable and a service.
            UnresolvableError: If a parameter has no value and no default.
            DetectionError: If the environment cannot be detected for the gate check.
        """
        if self._environment is not None and not environment.is_(self._environment):
            logger.debug(
                "Skipping module %s: environment %s is not %s",
                self.name,
                environment,
                self._environment,
            )
            return

        locator = container.get_service_locator()
        resolve = self._resolve_specified if self._specified else self._resolve_reflected

        args = []
        kwargs = {}
        for parameter in self._parameters:
            value = resolve(parameter, container, environment, locator)
            if parameter.keyword_only:
                kwargs[parameter.parameter_name] = value
            else:
                args.append(value)

        logger.debug("Executing module %s", self.name)
        self._callable(*args, **kwargs)

    def _resolve_reflected(
        self,
        parameter: Parameter,
        container: Container,
        environment: Environment,
        locator: Optional[ServiceLocator],
    ) -> Any:
        if _is_declared_as(parameter.declared_type, container):
            return container
        if _is_declared_as(parameter.declared_type, environment):
            return environment

        name = parameter.lookup_name
        in_container = container.has(name)
        in_locator = locator is not None and locator.has(name)

        if in_container and in_locator:
            raise AmbiguousError(
                'Parameter name "%s" of module %s is ambiguous: '
                "it is both a container variable and a service" % (name, self.name)
            )
        if in_container:
            return container.get(name)
        if in_locator:
            return locator.get(name)
        if parameter.has_default:
            return parameter.default
        raise UnresolvableError(
            'Unable to resolve a value for the "%s" parameter of module %s' % (name, self.name)
        )

    def _resolve_specified(
        self,
        parameter: Parameter,
        container: Container,
        environment: Environment,
        locator: Optional[ServiceLocator],
    ) -> Any:
        name = parameter.parameter_name

        if name.startswith(SPECIAL_MARKER):
            slot = _SPECIAL_SLOTS.get(name.lower())
            if slot is None:
                raise InvalidArgumentError('Unsupported "%s" parameter' % name)
            return slot(container, environment, locator)

        if name.startswith(SERVICE_MARKER):
            if locator is None:
                raise UnresolvableError(
                    'No service locator exists in the container to resolve "%s"' % name
                )
            return locator.get(parameter.lookup_name)

        if container.has(parameter.lookup_name):
            return container.get(parameter.lookup_name)
        if parameter.has_default:
            return parameter.default
        raise UnresolvableError(
            'Unable to resolve a value for the "%s" parameter of module %s' % (name, self.name)
        )

    def __repr__(self) -> str:
        mode = "specified" if self._specified else "reflective"
        return f"Module({self.name}, {mode}, environment={self._environment!r})"


def _parse_descriptor(descriptor: Any, position: int) -> Parameter:
    """Turn one specification entry into a Parameter.

    Entries are either a parameter name or a one-entry ``{name: default}`` mapping.
    """
    if isinstance(descriptor, Mapping):
        if len(descriptor) != 1:
            raise InvalidArgumentError(
                "Parameter with a default in position [%d] must have exactly one entry" % position
            )
        ((name, default),) = descriptor.items()
        has_default = True
    else:
        name, default, has_default = descriptor, None, False

    if not isinstance(name, str) or not name.strip():
        raise InvalidArgumentError(
            "Invalid parameter name in position [%d], must be a non-blank string" % position
        )

    name = name.strip()
    lookup_name = name
    if name.startswith(SPECIAL_MARKER) and name.lower() not in _SPECIAL_SLOTS:
        raise InvalidArgumentError(
            'Unsupported "%s" parameter in position [%d]' % (name, position)
        )
    if name.startswith(SERVICE_MARKER):
        lookup_name = name[len(SERVICE_MARKER):].strip()
        if not lookup_name:
            raise InvalidArgumentError("Missing service name in position [%d]" % position)

    return Parameter(name, lookup_name, None, has_default, default)


def _is_declared_as(declared_type: Optional[type], instance: Any) -> bool:
    # nominal match only; structural protocols such as ServiceLocator never match
    return (
        declared_type is not None
        and declared_type is not object
        and declared_type in type(instance).__mro__
    )
