"""Interfaces shared by the per-engine schema extractors."""

from typing import Protocol, runtime_checkable

from dbdiff.errors import ExtractionCancelledError
from dbdiff.models import DatabaseSchema, EngineVariant


class CancelSignal(Protocol):
    """Anything that can report a cancellation request, e.g. ``threading.Event``"""

    def is_set(self) -> bool: ...


@runtime_checkable
class SchemaExtractor(Protocol):
    """Produces a ``DatabaseSchema`` from a connection string"""

    variant: EngineVariant

    def extract_schema(self, connection_string: str, cancel: CancelSignal | None = None) -> DatabaseSchema: ...


def raise_if_cancelled(cancel: CancelSignal | None) -> None:
    """Abort extraction when the caller has asked us to stop."""
    if cancel is not None and cancel.is_set():
        raise ExtractionCancelledError("Schema extraction was cancelled")
