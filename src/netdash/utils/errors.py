"""Error values and exceptions for addressing operations.

Parse and planning functions return an ``AddressError`` instead of raising,
so a caller re-rendering on every keystroke can show the message inline.
Callers that would rather raise use ``unwrap()``, which converts the value
into a ``ToolError``.
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import Any, TypeGuard, TypeVar


T = TypeVar('T')


# Common error codes for consistency
class ErrorCodes:
    """Standard error codes for netdash operations."""

    # Parse errors
    INVALID_ADDRESS = 'INVALID_ADDRESS'
    INVALID_MASK = 'INVALID_MASK'
    INVALID_WILDCARD = 'INVALID_WILDCARD'

    # Planning errors
    INSUFFICIENT_SPACE = 'INSUFFICIENT_SPACE'

    # Definition errors (off-boundary networks, incomplete routes, duplicates)
    INVALID_DEFINITION = 'INVALID_DEFINITION'


class AddressError(BaseModel):
    """A recoverable failure returned by a parse, validate or plan call."""

    model_config = ConfigDict(frozen=True)

    error_code: str = Field(description='One of ErrorCodes')
    message: str = Field(description='Human-readable error description')
    value: str | None = Field(default=None, description='The offending input, if any')
    label: str | None = Field(default=None, description='Label of the entry the error belongs to')
    suggestion: str | None = Field(default=None, description='Optional recovery hint')

    def __str__(self) -> str:
        return self._format()

    def _format(self) -> str:
        """Format error message with structured information."""
        prefix = f'[{self.error_code}]'
        if self.label:
            prefix = f'{prefix} {self.label}:'
        parts = [f'{prefix} {self.message}']

        if self.suggestion:
            parts.append(f'Suggestion: {self.suggestion}')

        return '\n'.join(parts)

    def to_dict(self) -> dict[str, str]:
        """Convert to dictionary for structured logging and export."""
        return {
            'error_code': self.error_code,
            'message': self.message,
            'value': self.value or '',
            'label': self.label or '',
            'suggestion': self.suggestion or '',
        }

    def with_label(self, label: str) -> 'AddressError':
        """Return a copy of this error attached to an entry label."""
        return self.model_copy(update={'label': label})


class ToolError(Exception):
    """Raised when a caller unwraps a failed result."""

    def __init__(
        self,
        message: str,
        error_code: str,
        suggestion: str | None = None,
    ):
        """Initialize tool error with structured context.

        Args:
            message: Human-readable error description
            error_code: Structured error code (e.g., 'INVALID_MASK')
            suggestion: Optional recovery suggestion for the user
        """
        self.message = message
        self.error_code = error_code
        self.suggestion = suggestion
        super().__init__(self._format())

    def _format(self) -> str:
        parts = [f'[{self.error_code}] {self.message}']

        if self.suggestion:
            parts.append(f'Suggestion: {self.suggestion}')

        return '\n'.join(parts)

    @classmethod
    def from_error(cls, error: AddressError) -> 'ToolError':
        message = f'{error.label}: {error.message}' if error.label else error.message
        return cls(message=message, error_code=error.error_code, suggestion=error.suggestion)

    def to_dict(self) -> dict[str, str]:
        return {
            'error_code': self.error_code,
            'message': self.message,
            'suggestion': self.suggestion or '',
        }


def is_error(result: Any) -> TypeGuard[AddressError]:
    """True when ``result`` is a failure value."""
    return isinstance(result, AddressError)


def unwrap(result: T | AddressError) -> T:
    """Return the successful value or raise ``ToolError`` for a failure value."""
    if isinstance(result, AddressError):
        raise ToolError.from_error(result)
    return result
