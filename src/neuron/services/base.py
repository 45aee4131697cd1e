"""BaseService — shared foundation for neuron services.

Every service receives the :class:`NoteStore` at construction time. The
store is created once by the CLI entry point and passed in explicitly.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from neuron.infrastructure.store import NoteStore


class BaseService:
    """Base for service-layer classes.

    Usage::

        class SyncService(BaseService):
            def sync(self, directory: Path) -> ServiceResult:
                self._store.upsert(...)
    """

    def __init__(self, store: NoteStore) -> None:
        self._store = store
