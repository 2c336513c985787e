"""The bootstrap chain: an ordered, single-use sequence of modules.

Example:
    >>> Bootstrap.init({"debug": True}, Environment.from_variable()) \\
    ...     .add_module(configure_logging) \\
    ...     .add_module(["$container", "@router", register_routes]) \\
    ...     .add_module(enable_profiler, "development") \\
    ...     .execute()

Modules run strictly in the order they were added, against one container and
one environment. The first failure aborts the chain and reaches the caller.
"""

import logging
from collections.abc import Mapping
from typing import Any, Callable, Optional, Union

from bootchain.container import Container
from bootchain.environment import Environment, EnvironmentLike
from bootchain.errors import InvalidArgumentError
from bootchain.module import Module, ModuleSpecification

__all__ = ["Bootstrap"]

logger = logging.getLogger(__name__)

ContainerLike = Union[Container, Mapping[str, Any]]
EnvironmentInput = Union[EnvironmentLike, Callable[[], str]]


class Bootstrap:
    """Lightweight application bootstrap chain.

    Out of the box a bootstrap runs with an empty container under the
    development environment.

    Args:
        container: A Container, or a mapping of initial variables.
        environment: An Environment, an environment name or a detector function.
    """

    def __init__(
        self,
        container: Optional[ContainerLike] = None,
        environment: Optional[EnvironmentInput] = None,
    ):
        self._chain: list[Module] = []
        self.container = Container() if container is None else container
        self.environment = Environment() if environment is None else environment

    @classmethod
    def init(
        cls,
        container: Optional[ContainerLike] = None,
        environment: Optional[EnvironmentInput] = None,
    ) -> "Bootstrap":
        """Start a bootstrap chain, validating its inputs strictly.

        Args:
            container: None, a mapping of initial variables, or a Container.
            environment: None, an environment name, a detector function, or an
                Environment.

        Raises:
            InvalidArgumentError: If either argument has an unsupported type.
        """
        if container is not None and not isinstance(container, (Container, Mapping)):
            raise InvalidArgumentError(
                "Argument container must be a mapping or an instance of Container, "
                f"got {type(container).__name__}"
            )
        if environment is not None and not (
            isinstance(environment, (str, Environment)) or callable(environment)
        ):
            raise InvalidArgumentError(
                "Argument environment must be a string, a detector function or an instance "
                f"of Environment, got {type(environment).__name__}"
            )
        return cls(container, environment)

    @property
    def container(self) -> Container:
        return self._container

    @container.setter
    def container(self, container: ContainerLike):
        self._container = container if isinstance(container, Container) else Container(container)

    @property
    def environment(self) -> Environment:
        return self._environment

    @environment.setter
    def environment(self, environment: EnvironmentInput):
        self._environment = (
            environment if isinstance(environment, Environment) else Environment(environment)
        )

    @property
    def modules(self) -> tuple[Module, ...]:
        """Modules waiting to be executed, in execution order."""
        return tuple(self._chain)

    def add_module(
        self,
        module: Union[Module, ModuleSpecification],
        environment: Optional[EnvironmentInput] = None,
    ) -> "Bootstrap":
        """Append a module to the chain.

        Args:
            module: A Module, a callable bound reflectively, or a specification
                list ending with the callable.
            environment: If given, the module only runs under this environment.

        Raises:
            InvalidArgumentError: If the module or environment is malformed.
        """
        if not isinstance(module, Module):
            module = Module(module)
        if environment is not None:
            module.set_environment(environment)

        self._chain.append(module)
        return self

    def module(
        self, *parameters: Any, environment: Optional[EnvironmentInput] = None
    ) -> Callable:
        """Decorator to append a function to the chain.

        Args:
            parameters: Optional parameter descriptors; when given the function
                is bound by specification instead of by reflection.
            environment: If given, the function only runs under this environment.

        Returns:
            A decorator that adds the function and returns it unchanged.

        Example:
            @bootstrap.module("$container", "@router")
            def register_routes(container, router):
                ...
        """

        def decorator(func: Callable) -> Callable:
            self.add_module([*parameters, func] if parameters else func, environment)
            return func

        return decorator

    def execute(self) -> "Bootstrap":
        """Run every module in order, then empty the chain.

        The chain is emptied even when a module fails, so a module never runs
        twice. The failure is logged and re-raised.
        """
        chain, self._chain = self._chain, []
        logger.info("Executing %d bootstrap modules", len(chain))

        for position, module in enumerate(chain):
            try:
                module.execute(self._container, self._environment)
            except Exception:
                logger.error(
                    "Bootstrap module %s failed at position %d; %d modules not run",
                    module.name,
                    position,
                    len(chain) - position - 1,
                )
                raise

        logger.info("Bootstrap chain completed")
        return self

    def __len__(self) -> int:
        return len(self._chain)
