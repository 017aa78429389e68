"""
In-memory collaborators.

InMemoryStore implements ItemStore and InMemoryNotePlatform implements
NotePlatform, both backed by plain dicts. They are used by the test suite
and by the developer CLI to run sessions without a vault.

Ids follow the vault convention: notes are "note-<n>", cloze fragments are
"<note_id>::c<k>".
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from .models import Item, ItemType, MemoryState, ReviewRecord

DEFAULT_PRIORITY = 50


@dataclass
class NoteRecord:
    id: str
    content: str
    path: str
    priority: int = DEFAULT_PRIORITY
    created: datetime | None = None


@dataclass
class ClozeRecord:
    id: str
    note_id: str
    index: int
    priority: int = DEFAULT_PRIORITY


@dataclass
class InMemoryStore:
    """Dict-backed item/state store."""

    notes: dict[str, NoteRecord] = field(default_factory=dict)
    clozes: dict[str, ClozeRecord] = field(default_factory=dict)
    states: dict[str, MemoryState] = field(default_factory=dict)
    reviews: list[ReviewRecord] = field(default_factory=list)
    scroll: dict[str, float] = field(default_factory=dict)
    dismissed: set[str] = field(default_factory=set)
    _note_counter: int = 0

    # -------------------------------------------------------------------------
    # Fixture builders
    # -------------------------------------------------------------------------

    def create_note(
        self,
        content: str = "",
        priority: int = DEFAULT_PRIORITY,
        note_id: str | None = None,
        path: str | None = None,
        created: datetime | None = None,
    ) -> str:
        """Add a topic note and return its id."""
        if note_id is None:
            self._note_counter += 1
            note_id = f"note-{self._note_counter}"
        self.notes[note_id] = NoteRecord(
            id=note_id,
            content=content,
            path=path or f"{note_id}.md",
            priority=priority,
            created=created,
        )
        return note_id

    def add_cloze(self, note_id: str, priority: int | None = None) -> str:
        """Add the next cloze fragment of a note and return its id."""
        if note_id not in self.notes:
            raise KeyError(f"Unknown note: {note_id}")
        index = 1 + sum(1 for c in self.clozes.values() if c.note_id == note_id)
        cloze_id = f"{note_id}::c{index}"
        self.clozes[cloze_id] = ClozeRecord(
            id=cloze_id,
            note_id=note_id,
            index=index,
            priority=self.notes[note_id].priority if priority is None else priority,
        )
        return cloze_id

    def set_priority(self, item_id: str, priority: int) -> None:
        if item_id in self.notes:
            self.notes[item_id].priority = priority
        elif item_id in self.clozes:
            self.clozes[item_id].priority = priority
        else:
            raise KeyError(f"Unknown item: {item_id}")

    def dismiss(self, item_id: str) -> None:
        """Exclude an item from future list_items() calls."""
        self.dismissed.add(item_id)

    # -------------------------------------------------------------------------
    # ItemStore
    # -------------------------------------------------------------------------

    async def list_items(self) -> list[Item]:
        items: list[Item] = []

        for note in self.notes.values():
            if note.id in self.dismissed:
                continue
            items.append(Item(
                id=note.id,
                note_id=note.id,
                note_path=note.path,
                type=ItemType.TOPIC,
                priority=note.priority,
                created=note.created,
            ))

        for cloze in self.clozes.values():
            if cloze.id in self.dismissed:
                continue
            note = self.notes[cloze.note_id]
            items.append(Item(
                id=cloze.id,
                note_id=cloze.note_id,
                note_path=note.path,
                type=ItemType.CLOZE,
                priority=cloze.priority,
                cloze_index=cloze.index,
                created=note.created,
            ))

        return items

    async def get_state(self, item_id: str) -> MemoryState | None:
        return self.states.get(item_id)

    async def set_state(self, item_id: str, state: MemoryState) -> None:
        self.states[item_id] = state

    async def append_review(self, record: ReviewRecord) -> None:
        self.reviews.append(record)

    async def set_scroll_pos(self, item_id: str, pos: float) -> None:
        self.scroll[item_id] = pos

    async def get_scroll_pos(self, item_id: str) -> float | None:
        return self.scroll.get(item_id)


@dataclass
class InMemoryNotePlatform:
    """Dict-backed note content and link graph."""

    contents: dict[str, str] = field(default_factory=dict)
    links: dict[str, list[str]] = field(default_factory=dict)

    def add_link(self, from_note: str, to_note: str) -> None:
        targets = self.links.setdefault(from_note, [])
        if to_note not in targets:
            targets.append(to_note)

    async def get_note(self, note_id: str) -> str | None:
        return self.contents.get(note_id)

    async def set_note(self, note_id: str, content: str) -> None:
        self.contents[note_id] = content

    async def get_links(self, note_id: str) -> list[str]:
        return list(self.links.get(note_id, []))
