"""
Collaborator interfaces for the session engine.

The engine does no I/O of its own. Everything it reads or writes goes
through these two protocols, so any persistence format (markdown sidecars,
YAML front matter, SQLite) stays the collaborator's concern.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from .models import Item, MemoryState, ReviewRecord


@runtime_checkable
class ItemStore(Protocol):
    """Supplies items and persists their memory states and review log."""

    async def list_items(self) -> list[Item]: ...

    async def get_state(self, item_id: str) -> MemoryState | None: ...

    async def set_state(self, item_id: str, state: MemoryState) -> None: ...

    async def append_review(self, record: ReviewRecord) -> None: ...

    async def set_scroll_pos(self, item_id: str, pos: float) -> None: ...

    async def get_scroll_pos(self, item_id: str) -> float | None: ...


@runtime_checkable
class NotePlatform(Protocol):
    """Note content and outgoing link lookup."""

    async def get_note(self, note_id: str) -> str | None: ...

    async def set_note(self, note_id: str, content: str) -> None: ...

    async def get_links(self, note_id: str) -> list[str]: ...
