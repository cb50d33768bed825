"""Custom exceptions for the subsidy core.

Business outcomes (a program not applying, a missing document, a wage below a
threshold) are never raised; they are returned as data on the calculation
results. The exceptions here cover caller and configuration mistakes only.
All of them inherit from SubsidyCoreError.

Example:
    try:
        report = analyzer.analyze(bundle, programs=["YOUTH_JOB_LEAP"])
    except ValidationError as e:
        logger.warning("bad_program_request", **e.details)
    except SubsidyCoreError as e:
        logger.error("analysis_failed", error=str(e))
"""

from typing import Any, Optional


class SubsidyCoreError(Exception):
    """Base exception for all subsidy core errors.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary with additional context.
        recoverable: Whether the caller can fix the input and retry.
    """

    def __init__(
        self,
        message: str,
        *,
        details: Optional[dict[str, Any]] = None,
        recoverable: bool = False,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.recoverable = recoverable

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"details={self.details!r}, "
            f"recoverable={self.recoverable!r})"
        )


class ValidationError(SubsidyCoreError):
    """Raised when a caller-supplied value cannot be interpreted.

    Example:
        >>> raise ValidationError(
        ...     "Unknown subsidy program",
        ...     field="program",
        ...     value="YOUTH_BONUS",
        ...     constraint="Must be one of: YOUTH_JOB_LEAP, ...",
        ... )
        ValidationError: Unknown subsidy program
    """

    def __init__(
        self,
        message: str,
        *,
        field: Optional[str] = None,
        value: Optional[Any] = None,
        constraint: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
        recoverable: bool = True,
    ) -> None:
        """Initialize ValidationError.

        Args:
            message: Human-readable error description.
            field: The name of the argument or field that failed validation.
            value: The rejected value. Never pass a resident ID here.
            constraint: Description of the rule that was violated.
            details: Optional dictionary with additional context.
            recoverable: Defaults to True since the caller can correct input.
        """
        super().__init__(message, details=details, recoverable=recoverable)
        self.field = field
        self.value = value
        self.constraint = constraint

        if field:
            self.details["field"] = field
        if value is not None:
            self.details["value"] = value
        if constraint:
            self.details["constraint"] = constraint


class ConfigurationError(SubsidyCoreError):
    """Raised when settings cannot produce a working configuration.

    Configuration errors are not recoverable at runtime; the environment
    or settings object has to be fixed.
    """

    def __init__(
        self,
        message: str,
        *,
        config_key: Optional[str] = None,
        expected: Optional[str] = None,
        actual: Optional[Any] = None,
        details: Optional[dict[str, Any]] = None,
        recoverable: bool = False,
    ) -> None:
        super().__init__(message, details=details, recoverable=recoverable)
        self.config_key = config_key
        self.expected = expected
        self.actual = actual

        if config_key:
            self.details["config_key"] = config_key
        if expected:
            self.details["expected"] = expected
        if actual is not None:
            self.details["actual"] = actual


__all__ = [
    "SubsidyCoreError",
    "ValidationError",
    "ConfigurationError",
]
