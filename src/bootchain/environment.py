"""Detection of, and access to, the environment an application runs under.

An :class:`Environment` behaves like a string in comparisons::

    >>> environment = Environment("staging")
    >>> environment == "STAGING"
    True

Detecting the environment may be expensive, so a zero-argument detector can
be given instead of a string. The detector runs the first time the value is
needed and its result is fixed for the lifetime of the instance.
"""

import logging
import os
import warnings
from typing import Callable, Optional, Union

from bootchain.errors import DetectionError, DetectionWarning, InvalidArgumentError

__all__ = [
    "DEVELOPMENT",
    "TEST",
    "STAGING",
    "PRODUCTION",
    "ENVIRONMENT_VARIABLE",
    "Environment",
    "EnvironmentLike",
]

logger = logging.getLogger(__name__)

DEVELOPMENT = "development"
TEST = "test"
STAGING = "staging"
PRODUCTION = "production"

ENVIRONMENT_VARIABLE = "BOOTCHAIN_ENV"
"""Process environment variable read by :meth:`Environment.from_variable`."""

Detector = Callable[[], str]


class Environment:
    """An immutable, lazily resolved label for the runtime context.

    Args:
        value: A non-blank environment name, or a zero-argument detector
            returning one.

    Raises:
        InvalidArgumentError: If ``value`` is a blank string or neither a
            string nor a callable.
    """

    DEVELOPMENT = DEVELOPMENT
    TEST = TEST
    STAGING = STAGING
    PRODUCTION = PRODUCTION

    def __init__(self, value: Union[str, Detector] = DEVELOPMENT):
        self._value: Optional[str] = None
        self._detector: Optional[Detector] = None
        self._failure: Optional[tuple[str, Optional[Exception]]] = None

        if isinstance(value, str) and value.strip():
            self._value = value.strip()
        elif callable(value):
            self._detector = value
        else:
            raise InvalidArgumentError(
                f"Environment must be a non-blank string or a detector function, got {value!r}"
            )

    @classmethod
    def of(cls, value: str) -> "Environment":
        """Create an environment with a fixed value."""
        if not isinstance(value, str):
            raise InvalidArgumentError(f"Environment must be a string, got {value!r}")
        return cls(value)

    @classmethod
    def of_detector(cls, detector: Detector) -> "Environment":
        """Create an environment whose value is detected on first use."""
        if not callable(detector):
            raise InvalidArgumentError(f"{detector!r} is not a detector function")
        return cls(detector)

    @classmethod
    def from_variable(
        cls, name: str = ENVIRONMENT_VARIABLE, default: Optional[str] = DEVELOPMENT
    ) -> "Environment":
        """Create an environment read from a process environment variable.

        The variable is read on first use, not when this method is called.

        Args:
            name: The process environment variable to read.
            default: Value used when the variable is unset or blank. If None,
                a missing variable is a detection failure.

        Example:
            >>> os.environ["BOOTCHAIN_ENV"] = "test"
            >>> Environment.from_variable().is_("test")
            True
        """

        def detect() -> str:
            value = os.environ.get(name, "").strip()
            if value:
                return value
            if default is None:
                raise KeyError(f"Environment variable {name} is not set")
            return default

        return cls(detect)

    @property
    def resolved(self) -> bool:
        """Whether the value has been fixed, either directly or by detection."""
        return self._value is not None

    def is_(self, other: "EnvironmentLike") -> bool:
        """Test whether this environment matches ``other``.

        Comparison is case-insensitive and ignores surrounding whitespace.

        Args:
            other: A non-blank environment name or another Environment.

        Raises:
            InvalidArgumentError: If ``other`` is blank or of the wrong type.
            DetectionError: If the detector of either environment fails.
        """
        if isinstance(other, Environment):
            other_value = other.value
        elif isinstance(other, str) and other.strip():
            other_value = other.strip()
        else:
            raise InvalidArgumentError(
                f"Argument must be a non-blank string or an Environment, got {other!r}"
            )

        return self.value.casefold() == other_value.casefold()

    @property
    def value(self) -> str:
        """The environment name, detecting it if necessary.

        Raises:
            DetectionError: If the detector fails or returns an invalid value.
        """
        self._detect()
        return self._value

    def _detect(self):
        if self._value is not None:
            return

        # a failed detector is not re-run; the failure is reported on every access
        if self._failure is None:
            self._failure = self._run_detector()
            if self._failure is None:
                return

        message, cause = self._failure
        raise DetectionError(message) from cause

    def _run_detector(self) -> Optional[tuple[str, Optional[Exception]]]:
        try:
            detected = self._detector()
        except Exception as exc:
            return "Environment detector function failed to execute", exc

        if not isinstance(detected, str) or not detected.strip():
            return f"Environment detector function returned invalid value {detected!r}", None

        self._value = detected.strip()
        logger.debug("Detected environment %r", self._value)
        return None

    def __str__(self) -> str:
        try:
            self._detect()
        except DetectionError as exc:
            logger.error("Unable to detect current environment: %s", exc)
            warnings.warn(str(exc), DetectionWarning, stacklevel=2)
        return self._value or ""

    def __repr__(self) -> str:
        if self._value is None:
            return f"Environment(detector={self._detector!r})"
        return f"Environment({self._value!r})"

    def __eq__(self, other) -> bool:
        if isinstance(other, str) and not other.strip():
            return False
        if isinstance(other, (str, Environment)):
            return self.is_(other)
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.value.casefold())


EnvironmentLike = Union[str, Environment]
