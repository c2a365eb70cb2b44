"""
Custom exceptions for dtsbridge.

Provides structured error handling with detailed context for diagnostics.
Every error is fatal for the compilation unit being translated; the batch
driver reports it against the file and moves on.
"""


class TranslationError(Exception):
    """Base exception for translation errors."""

    def __init__(self, message: str, details: dict = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> dict:
        """Convert to report format."""
        return {
            'type': self.__class__.__name__,
            'message': self.message,
            'details': self.details
        }


class UnsupportedNodeError(TranslationError):
    """A source construct has no defined mapping."""

    def __init__(self, node, reason: str = None):
        kind = getattr(node, 'kind', None)
        kind_name = getattr(kind, 'value', None) or getattr(node, 'type', None) or type(node).__name__
        text = getattr(node, 'text', None)
        if isinstance(text, bytes):
            text = text.decode('utf-8', errors='replace')
        line = getattr(node, 'line', None)
        if line is None and hasattr(node, 'start_point'):
            line = node.start_point[0] + 1

        message = f"Unsupported node: {kind_name}"
        if text:
            message += f" '{text}'"
        if line:
            message += f" at line {line}"
        if reason:
            message += f" ({reason})"

        super().__init__(
            message,
            details={
                'kind': kind_name,
                'text': text,
                'line': line or None,
                'reason': reason
            }
        )
        self.node = node


class MergeConflictError(TranslationError):
    """Two same-named declarations cannot be reconciled."""

    def __init__(self, first, second, reason: str = None):
        message = (
            f"Cannot merge {_kind_of(first)} '{_name_of(first)}' "
            f"with {_kind_of(second)} '{_name_of(second)}'"
        )
        if reason:
            message += f": {reason}"
        super().__init__(
            message,
            details={
                'first': {'name': _name_of(first), 'kind': _kind_of(first)},
                'second': {'name': _name_of(second), 'kind': _kind_of(second)},
                'reason': reason
            }
        )
        self.first = first
        self.second = second


class InvariantViolationError(TranslationError):
    """Internal consistency check failed."""

    def __init__(self, message: str, **details):
        super().__init__(message, details=details)


class ParsingError(TranslationError):
    """Failed to parse a declaration file."""

    def __init__(self, file_path: str, reason: str, line: int = None):
        super().__init__(
            f"Failed to parse {file_path}: {reason}",
            details={
                'file': file_path,
                'reason': reason,
                'line': line
            }
        )


class ConfigurationError(TranslationError):
    """Invalid configuration."""

    def __init__(self, message: str, config_file: str = None):
        super().__init__(
            message,
            details={'config_file': config_file}
        )


def _kind_of(member) -> str:
    return getattr(member, 'kind_name', type(member).__name__)


def _name_of(member) -> str:
    return getattr(member, 'name', '?')
