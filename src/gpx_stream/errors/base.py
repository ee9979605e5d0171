"""Base error classes for gpx-stream.

Provides a layered error hierarchy:
- GpxStreamError: Base class for all library errors
- StructuralError: Input ended early or is not well formed
- SourceError: Failure reading the byte source
- SinkError: Failure writing the output sink
- ConfigError: Configuration loading/validation errors

Records that fail validation are not errors: the filter stage drops them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class ErrorContext:
    """Structured error context for diagnostics.

    Provides actionable information for debugging and error handling.
    """

    location: str | None = None
    """Where the problem was found (e.g., 'line 12, column 4' or a file path)"""

    details: dict[str, Any] = field(default_factory=dict)
    """Additional details about the error"""

    source: str | None = None
    """Error source (e.g., 'structure', 'source', 'sink', 'config')"""

    hint: str | None = None
    """Actionable hint for resolving the error"""

    def __str__(self) -> str:
        parts = []
        if self.source:
            parts.append(f"[{self.source}]")
        if self.location:
            parts.append(f"at '{self.location}'")
        if self.hint:
            parts.append(f"(hint: {self.hint})")
        return " ".join(parts)


class GpxStreamError(Exception):
    """Base class for all gpx-stream errors.

    Attributes:
        message: Human-readable error message
        context: Optional structured error context
    """

    def __init__(
        self,
        message: str,
        context: ErrorContext | None = None,
    ) -> None:
        self.message = message
        self.context = context or ErrorContext()
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the full error message."""
        ctx_str = str(self.context)
        if ctx_str:
            return f"{self.message} {ctx_str}"
        return self.message

    def with_hint(self, hint: str) -> GpxStreamError:
        """Add a hint to this error."""
        self.context.hint = hint
        return self


class StructuralError(GpxStreamError):
    """Fatal structural problem in the input.

    Raised when:
    - The byte source ends before the envelope terminator
    - A record is opened but never closed
    - The XML is not well formed
    - The document root is not the expected envelope
    """

    def __init__(
        self,
        message: str,
        context: ErrorContext | None = None,
        *,
        line: int | None = None,
        column: int | None = None,
        state: str | None = None,
    ) -> None:
        ctx = context or ErrorContext(source="structure")
        if line is not None:
            ctx.location = f"line {line}, column {column or 0}"
            ctx.details["line"] = line
            ctx.details["column"] = column
        if state:
            ctx.details["state"] = state
        super().__init__(message, ctx)
        self.line = line
        self.column = column
        self.state = state


class SourceError(GpxStreamError):
    """Failure reading the underlying byte source.

    Raised when:
    - A file cannot be read
    - An HTTP source fails to connect, times out or answers with an error
    """

    def __init__(
        self,
        message: str,
        context: ErrorContext | None = None,
        *,
        location: str | None = None,
        status_code: int | None = None,
        cause: Exception | None = None,
    ) -> None:
        ctx = context or ErrorContext(source="source")
        if location:
            ctx.location = location
        if status_code:
            ctx.details["status_code"] = status_code
        super().__init__(message, ctx)
        self.location = location
        self.status_code = status_code
        self.__cause__ = cause


class SinkError(GpxStreamError):
    """Failure writing the output sink.

    Bytes already written before the failure are left in place.
    """

    def __init__(
        self,
        message: str,
        context: ErrorContext | None = None,
        *,
        cause: Exception | None = None,
    ) -> None:
        ctx = context or ErrorContext(source="sink")
        super().__init__(message, ctx)
        self.__cause__ = cause


class ConfigError(GpxStreamError):
    """Error during configuration loading or validation.

    Raised when:
    - Config file not found
    - Invalid YAML/JSON syntax
    - Field validation failure
    """

    def __init__(
        self,
        message: str,
        context: ErrorContext | None = None,
        *,
        config_path: str | None = None,
    ) -> None:
        ctx = context or ErrorContext(source="config")
        if config_path:
            ctx.details["config_path"] = config_path
        super().__init__(message, ctx)
        self.config_path = config_path
