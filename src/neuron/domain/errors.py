"""Exception taxonomy shared by every layer.

Infrastructure raises these; services translate them into
:class:`~neuron.services.result.ServiceResult` failures.
"""

from __future__ import annotations


class NeuronError(Exception):
    """Base class for all neuron errors."""


class ParseError(NeuronError):
    """A single source file could not be turned into a note (recoverable)."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"Failed to parse {path}: {reason}")
        self.path = path
        self.reason = reason


class StorageError(NeuronError):
    """The note store failed to read or write.

    Recoverable per record during sync; fatal when the store cannot be
    opened at all.
    """

    def __init__(self, operation: str, reason: str, *, source_path: str | None = None) -> None:
        where = f" [{source_path}]" if source_path else ""
        super().__init__(f"Store {operation} failed{where}: {reason}")
        self.operation = operation
        self.source_path = source_path
        self.reason = reason


class NoteNotFoundError(NeuronError):
    """No note matched a query. An expected outcome, not a failure."""


class ProviderError(NeuronError):
    """The question provider could not produce a result."""


class ProviderUnavailableError(ProviderError):
    """The provider could not be reached (connection refused, timeout)."""


class ProviderProtocolError(ProviderError):
    """The provider answered, but not with a usable payload."""


class RenderError(NeuronError):
    """Markdown could not be rendered for the terminal."""
