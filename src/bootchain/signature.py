"""Introspection of module callables."""

import inspect
import types
from typing import Annotated, Any, Callable, Optional, Union, get_args, get_origin, get_type_hints

from bootchain.domain import Parameter
from bootchain.errors import InvalidArgumentError

__all__ = ["get_parameters", "check_arity", "callable_name"]

_VARIADIC = (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD)
_POSITIONAL = (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD)


def get_parameters(func: Callable) -> list[Parameter]:
    """Extract parameter information from a callable's signature and annotations.

    Variadic ``*args`` and ``**kwargs`` parameters are left out, since they
    cannot be resolved by name. An ``Annotated[T, "name"]`` annotation makes
    ``"name"`` the lookup name instead of the parameter name.

    Args:
        func: The callable to analyze.

    Returns:
        One Parameter per bindable parameter, in declaration order.

    Raises:
        InvalidArgumentError: If the callable's signature cannot be inspected.

    Example:
        >>> def module(container: Container, router: Annotated[Router, "cli_router"], debug=False):
        ...     pass
        >>> get_parameters(module)
        >>> # Returns:
        >>> # [Parameter("container", "container", Container),
        >>> #  Parameter("router", "cli_router", Router),
        >>> #  Parameter("debug", "debug", None, True, False)]
    """
    signature = _signature(func)
    if signature is None:
        raise InvalidArgumentError("Unable to inspect the parameters of %r" % (func,))

    hints = _type_hints(func, signature)
    return [
        _make_parameter(parameter, hints.get(name))
        for name, parameter in signature.parameters.items()
        if parameter.kind not in _VARIADIC
    ]


def check_arity(func: Callable, count: int):
    """Check that ``count`` positional arguments suit the callable.

    Specified arguments are only ever passed by position, so a required
    keyword-only parameter can never be satisfied. Callables whose signature
    cannot be inspected are accepted as they are.

    Raises:
        InvalidArgumentError: If the callable declares a different number of
            positional parameters, more than ``count`` when it takes ``*args``,
            or a keyword-only parameter without a default.
    """
    signature = _signature(func)
    if signature is None:
        return

    parameters = signature.parameters.values()
    positional = sum(1 for p in parameters if p.kind in _POSITIONAL)
    takes_varargs = any(p.kind is inspect.Parameter.VAR_POSITIONAL for p in parameters)
    required_keywords = [
        p.name
        for p in parameters
        if p.kind is inspect.Parameter.KEYWORD_ONLY and p.default is inspect.Parameter.empty
    ]

    if required_keywords:
        raise InvalidArgumentError(
            "Keyword-only parameters %s of %s cannot be specified by position"
            % (required_keywords, callable_name(func))
        )
    if count == positional or (takes_varargs and count > positional):
        return
    raise InvalidArgumentError(
        "Specification lists %d parameters but %s declares %d"
        % (count, callable_name(func), positional)
    )


def _signature(func: Callable) -> Optional[inspect.Signature]:
    try:
        return inspect.signature(func)
    except (TypeError, ValueError):
        return None


def _type_hints(func: Callable, signature: inspect.Signature) -> dict[str, Any]:
    target = func
    if inspect.isclass(func):
        target = func.__init__
    elif not (inspect.isfunction(func) or inspect.ismethod(func)) and hasattr(func, "__call__"):
        target = func.__call__

    try:
        return get_type_hints(target, include_extras=True)
    except (NameError, TypeError):
        return _resolve_each(target, signature)


def _resolve_each(target: Callable, signature: inspect.Signature) -> dict[str, Any]:
    """Resolve annotations one by one, dropping only those that cannot be evaluated.

    A single unresolvable forward reference, such as a name imported under
    ``TYPE_CHECKING``, must not hide the types of the other parameters.
    """
    namespace = getattr(inspect.unwrap(target), "__globals__", {})
    hints = {}

    for name, parameter in signature.parameters.items():
        annotation = parameter.annotation
        if annotation is inspect.Parameter.empty:
            continue
        if isinstance(annotation, str):
            try:
                annotation = eval(annotation, namespace)
            except (NameError, AttributeError, SyntaxError, TypeError):
                continue
        hints[name] = annotation

    return hints


def _make_parameter(parameter: inspect.Parameter, annotation: Any) -> Parameter:
    qualifier = None
    if get_origin(annotation) is Annotated:
        annotation, *metadata = get_args(annotation)
        qualifier = next((m for m in metadata if isinstance(m, str) and m.strip()), None)

    has_default = parameter.default is not inspect.Parameter.empty
    return Parameter(
        parameter.name,
        qualifier.strip() if qualifier else parameter.name,
        _declared_type(annotation),
        has_default,
        parameter.default if has_default else None,
        parameter.kind is inspect.Parameter.KEYWORD_ONLY,
    )


def _declared_type(annotation: Any) -> Optional[type]:
    """Reduce an annotation to a class, unwrapping ``Optional[T]``."""
    if get_origin(annotation) in (Union, types.UnionType):
        candidates = [a for a in get_args(annotation) if a is not type(None)]
        annotation = candidates[0] if len(candidates) == 1 else None
    if get_origin(annotation) is not None:
        return None
    return annotation if inspect.isclass(annotation) else None


def callable_name(func: Callable) -> str:
    return getattr(func, "__qualname__", None) or repr(func)
