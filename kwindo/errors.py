"""
Error handling for kwindo.

Compile errors are fatal and raised before any script text exists.
Transport errors come from the KWin D-Bus interface or the journal.
Out-of-range stack selections are not exceptions at all: the generated
script reports them on its ERROR channel and keeps going.
"""

from enum import Enum
from typing import Optional, Dict, Any


class ErrorCode(Enum):
    """
    Error codes for kwindo.

    - 1000-1099: Compile errors (command line grammar)
    - 1100-1199: Configuration errors
    - 1200-1299: Transport errors (D-Bus, journal, script file)
    """

    # Compile errors (1000-1099)
    UNKNOWN_COMMAND = 1000
    MISSING_OPERAND = 1001
    UNEXPECTED_OPTION = 1002
    INVALID_SELECTOR = 1003

    # Configuration errors (1100-1199)
    INVALID_SETTING = 1100

    # Transport errors (1200-1299)
    DBUS_UNAVAILABLE = 1200
    SCRIPT_LOAD_FAILED = 1201
    SCRIPT_RUN_FAILED = 1202
    JOURNAL_READ_FAILED = 1203
    SCRIPT_WRITE_FAILED = 1204


class KwindoError(Exception):
    """Base exception for kwindo errors."""

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        suggestion: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None
    ):
        """
        Initialize kwindo error.

        Args:
            code: Error code from ErrorCode enum
            message: Human-readable error message
            suggestion: Suggested recovery action
            context: Additional context for debugging
        """
        self.code = code
        self.message = message
        self.suggestion = suggestion
        self.context = context or {}
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert error to dictionary for JSON output.

        Returns:
            Error dictionary with code, message, suggestion, and context
        """
        result = {
            "code": self.code.value,
            "message": self.message
        }

        if self.suggestion:
            result["suggestion"] = self.suggestion

        if self.context:
            result["context"] = self.context

        return result


class CompileError(KwindoError):
    """Malformed command line. Nothing is generated after one of these."""

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        token: Optional[str] = None,
        suggestion: Optional[str] = None
    ):
        """
        Initialize compile error.

        Args:
            code: One of the compile error codes
            message: Error message, naming the offending token where there is one
            token: The command line token that caused the error
            suggestion: Suggested fix
        """
        self.token = token
        context = {}
        if token is not None:
            context["token"] = token

        super().__init__(
            code=code,
            message=message,
            suggestion=suggestion or "Run 'kwindo --help' for the command syntax",
            context=context
        )


class ConfigError(KwindoError):
    """Invalid environment override."""

    def __init__(self, variable: str, value: str, reason: str):
        """
        Initialize configuration error.

        Args:
            variable: Environment variable name
            value: Offending value
            reason: Reason the value was rejected
        """
        super().__init__(
            code=ErrorCode.INVALID_SETTING,
            message=f"Invalid value for {variable}: {value!r} ({reason})",
            suggestion=f"Unset {variable} or fix its value",
            context={"variable": variable, "value": value, "reason": reason}
        )


class TransportError(KwindoError):
    """Loading, running or reading back a script failed."""

    def __init__(
        self,
        code: ErrorCode,
        operation: str,
        reason: str,
        suggestion: Optional[str] = None
    ):
        """
        Initialize transport error.

        Args:
            code: One of the transport error codes
            operation: Operation that failed (e.g., "loadScript", "journalctl")
            reason: Reason for failure
            suggestion: Recovery suggestion
        """
        super().__init__(
            code=code,
            message=f"{operation} failed: {reason}",
            suggestion=suggestion or "Ensure KWin is running and the D-Bus session bus is reachable",
            context={"operation": operation, "reason": reason}
        )
