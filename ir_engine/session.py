"""
Session Manager: the stateful review-session orchestrator.

Responsibilities:
- Load the item pool and memory states from the item store
- Rank eligible items with the configured strategy
- Apply selection-time constraints:
    * volatile queue: items graded "Again" are held back for a cooldown
    * clump limit: no more than N consecutive items from one note
    * interleaving: JD1 occasionally picks below rank 1 (80/20)
- Grade items through the scheduler and persist the result

history_ids is the single record of what was shown and in which order;
cooldown and clump limit are derived from it on every pick, so replaying
the same grades over the same pool reproduces the same session.

Not safe for concurrent use: callers serialize calls on one instance.
"""

from __future__ import annotations

import random
import time
from dataclasses import replace
from datetime import datetime

from loguru import logger

from .models import (
    DeckCounts,
    Item,
    MemoryState,
    Rating,
    ReviewRecord,
    SessionConfig,
    SessionItem,
    SessionStats,
    StrategyId,
    as_utc,
    utcnow,
)
from .ports import ItemStore, NotePlatform
from .scheduling import Scheduler, TopicScheduler, get_scheduler, to_rating
from .strategies import StrategyContext, get_strategy

# JD1 interleaving: above this draw, pick uniformly from ranks 2..N
INTERLEAVE_THRESHOLD = 0.8


def filter_by_folder(items: list[Item], folder: str) -> list[Item]:
    """
    Keep items whose note lives in the given folder (or below it).

    "/" selects notes at the vault root, i.e. paths without a folder.
    """
    if folder == "/":
        return [item for item in items if "/" not in item.note_path]
    normalized = folder.rstrip("/")
    return [
        item
        for item in items
        if item.note_path == normalized or item.note_path.startswith(f"{normalized}/")
    ]


class SessionManager:
    """
    Hands out one item at a time and records grades.

    Usage:
        manager = SessionManager(store, notes, SessionConfig(deterministic=True))
        await manager.load_pool()
        while (si := await manager.get_next()) is not None:
            await manager.record_review(si.id, Rating.GOOD)
    """

    def __init__(
        self,
        store: ItemStore,
        notes: NotePlatform,
        config: SessionConfig | None = None,
        rng: random.Random | None = None,
    ):
        """
        Initialize the session manager.

        Args:
            store: Item/state store collaborator
            notes: Note/link platform collaborator
            config: Session configuration (defaults if None)
            rng: Random source for interleaving (seeded from config.seed if None)
        """
        self.store = store
        self.notes = notes
        self._config = config or SessionConfig()

        self._seed = self._config.seed if self._config.seed is not None else time.time_ns() // 1_000_000
        self._rng = rng or random.Random(self._seed)

        self._pool: list[SessionItem] = []
        self._volatile_queue: list[SessionItem] = []
        self._history_ids: list[str] = []
        self._last_note_id: str | None = None
        self._stats = SessionStats()

    # =========================================================================
    # Accessors
    # =========================================================================

    @property
    def config(self) -> SessionConfig:
        return self._config

    def set_config(self, config: SessionConfig) -> None:
        self._config = config

    @property
    def pool(self) -> list[SessionItem]:
        return list(self._pool)

    @property
    def volatile_queue(self) -> list[str]:
        return [si.id for si in self._volatile_queue]

    @property
    def history_ids(self) -> list[str]:
        return list(self._history_ids)

    @property
    def last_note_id(self) -> str | None:
        return self._last_note_id

    @property
    def seed(self) -> int:
        return self._seed

    @property
    def scheduler(self) -> Scheduler:
        """Scheduler for non-topic items, per the current config."""
        return get_scheduler(self._config.scheduler_id, self._config.scheduling_params)

    def get_session_stats(self) -> SessionStats:
        return replace(self._stats)

    def get_counts(self, now: datetime | None = None) -> DeckCounts:
        """Count new, learning and due items in the pool."""
        now = as_utc(now) if now else utcnow()
        new = learning = due = 0

        for si in self._pool:
            if si.state.is_new:
                new += 1
            elif si.state.is_learning:
                learning += 1
            elif si.state.due is not None and as_utc(si.state.due) <= now:
                due += 1

        return DeckCounts(new=new, learning=learning, due=due)

    # =========================================================================
    # Pool loading
    # =========================================================================

    async def load_pool(
        self,
        now: datetime | None = None,
        folder_filter: str | None = None,
    ) -> int:
        """
        Load items and their memory states from the store.

        Replaces the pool and the volatile queue. History is kept so items
        already reviewed this session are not offered again.

        Args:
            now: Reference time for exam adjustment
            folder_filter: Only load notes in this folder ("/" for root)

        Returns:
            Number of items in the pool
        """
        now = as_utc(now) if now else utcnow()
        items = await self.store.list_items()

        if folder_filter:
            items = filter_by_folder(items, folder_filter)

        scheduler = self.scheduler
        exam_date = self._config.exam_date

        pool: list[SessionItem] = []
        for item in items:
            state = await self.store.get_state(item.id)
            if state is None:
                state = MemoryState()

            if exam_date is not None:
                state = scheduler.apply_exam_adjustment(state, exam_date, now)

            pool.append(SessionItem(item=item, state=state))

        limit = self._config.new_cards_limit
        if limit is not None:
            new_items = [si for si in pool if si.state.is_new]
            kept_new = {si.id for si in new_items[:limit]}
            pool = [si for si in pool if not si.state.is_new or si.id in kept_new]

        self._pool = pool
        self._volatile_queue = []

        logger.info(
            f"Pool loaded: {len(pool)} items "
            f"(strategy={self._config.strategy.value}, scheduler={self._config.scheduler_id.value})"
        )
        return len(pool)

    # =========================================================================
    # Selection
    # =========================================================================

    async def get_next(self, now: datetime | None = None) -> SessionItem | None:
        """
        Pick the next item to show.

        Returns:
            The next SessionItem, or None when the session is complete
        """
        candidates = await self._ranked_candidates(now)
        if not candidates:
            return None

        if (
            self._config.strategy is StrategyId.JD1
            and not self._config.deterministic
            and len(candidates) > 1
            and self._rng.random() > INTERLEAVE_THRESHOLD
        ):
            index = 1 + self._rng.randrange(len(candidates) - 1)
            logger.debug(f"Interleaving: picked rank {index + 1} of {len(candidates)}")
            return candidates[index]

        return candidates[0]

    async def get_next_n(self, limit: int, now: datetime | None = None) -> list[SessionItem]:
        """Preview the top `limit` candidates in ranked order."""
        candidates = await self._ranked_candidates(now)
        return candidates[:limit]

    async def _ranked_candidates(self, now: datetime | None) -> list[SessionItem]:
        if not self._pool:
            return []

        now = as_utc(now) if now else utcnow()

        linked: frozenset[str] = frozenset()
        if self._last_note_id is not None:
            linked = frozenset(await self.notes.get_links(self._last_note_id) or [])

        context = StrategyContext(
            now=now,
            last_note_id=self._last_note_id,
            linked_note_ids=linked,
            seed=self._seed,
        )

        shown = set(self._history_ids)
        parked = {si.id for si in self._volatile_queue}
        available = [si for si in self._pool if si.id not in shown and si.id not in parked]
        ready = [si for si in self._volatile_queue if self._cooled_down(si.id)]

        if not available and not ready:
            return []

        ranked = get_strategy(self._config.strategy).rank(available + ready, self._config, context)
        return self._apply_clump_limit(ranked)

    def _cooled_down(self, item_id: str) -> bool:
        """True once `cooldown` other items were shown since the item's last showing."""
        if item_id not in self._history_ids:
            return True
        last_index = len(self._history_ids) - 1 - self._history_ids[::-1].index(item_id)
        shown_since = len(self._history_ids) - 1 - last_index
        return shown_since >= self._config.cooldown

    def _apply_clump_limit(self, candidates: list[SessionItem]) -> list[SessionItem]:
        """Drop the last note's items if the last `clump_limit` picks all came from it."""
        limit = self._config.clump_limit
        if limit <= 0 or len(self._history_ids) < limit:
            return candidates

        note_by_id = {si.id: si.note_id for si in self._pool}
        recent = [note_by_id.get(item_id) for item_id in self._history_ids[-limit:]]
        recent = [note_id for note_id in recent if note_id is not None]

        if len(recent) == limit and len(set(recent)) == 1:
            clumped = recent[-1]
            logger.debug(f"Clump limit reached for note {clumped}")
            return [si for si in candidates if si.note_id != clumped]

        return candidates

    # =========================================================================
    # Grading
    # =========================================================================

    async def record_review(
        self,
        item_id: str,
        rating: int | Rating,
        now: datetime | None = None,
        elapsed_ms: int | None = None,
    ) -> MemoryState | None:
        """
        Grade an item, persist its new state and advance the session.

        Topics use the fixed-interval TopicScheduler; everything else uses
        the configured scheduler. "Again" parks the item in the volatile
        queue; any other grade graduates it out.

        Args:
            item_id: Item being graded
            rating: 1 (Again) to 4 (Easy)
            now: Review time
            elapsed_ms: Time spent on the item, logged as-is

        Returns:
            The new MemoryState, or None if the item is not in the pool
        """
        si = self._find(item_id)
        if si is None:
            logger.debug(f"record_review ignored: {item_id} not in pool")
            return None

        rating = to_rating(rating)
        now = as_utc(now) if now else utcnow()

        scheduler = TopicScheduler() if si.item.is_topic else self.scheduler
        before = si.state
        new_state = scheduler.grade(before, rating, now)

        if rating is Rating.AGAIN:
            await self.store.append_review(self._review_record(item_id, rating, before, now))

        await self.store.set_state(item_id, new_state)

        # Session state only changes once the new state is persisted
        if rating is Rating.AGAIN:
            if all(v.id != item_id for v in self._volatile_queue):
                self._volatile_queue.append(si)
        else:
            self._volatile_queue = [v for v in self._volatile_queue if v.id != item_id]
        si.state = new_state
        self._stats.record(rating)
        self._history_ids.append(item_id)
        self._last_note_id = si.note_id

        await self.store.append_review(
            self._review_record(item_id, rating, before, now, elapsed_ms=elapsed_ms)
        )

        logger.debug(
            f"Recorded review for {item_id}: rating={rating.name}, "
            f"status={new_state.status.value}, due={new_state.due.isoformat() if new_state.due else None}"
        )
        return new_state

    def dismiss(self, item_id: str) -> bool:
        """Remove an item from the pool for the rest of the session."""
        before = len(self._pool)
        self._pool = [si for si in self._pool if si.id != item_id]
        self._volatile_queue = [si for si in self._volatile_queue if si.id != item_id]
        return len(self._pool) < before

    def reset_session(self) -> None:
        """Clear counters, history and the volatile queue; keep the pool."""
        self._stats = SessionStats()
        self._history_ids = []
        self._volatile_queue = []
        self._last_note_id = None

    # =========================================================================
    # Scroll position pass-through
    # =========================================================================

    async def get_scroll_pos(self, item_id: str) -> float | None:
        return await self.store.get_scroll_pos(item_id)

    async def set_scroll_pos(self, item_id: str, pos: float) -> None:
        await self.store.set_scroll_pos(item_id, pos)

    # =========================================================================
    # Helpers
    # =========================================================================

    def _find(self, item_id: str) -> SessionItem | None:
        return next((si for si in self._pool if si.id == item_id), None)

    @staticmethod
    def _review_record(
        item_id: str,
        rating: Rating,
        before: MemoryState,
        now: datetime,
        elapsed_ms: int | None = None,
    ) -> ReviewRecord:
        return ReviewRecord(
            ts=now.isoformat(),
            item_id=item_id,
            rating=rating.value,
            elapsed_ms=elapsed_ms,
            state_before=before.status.value,
            stability_before=before.stability,
            difficulty_before=before.difficulty,
        )
