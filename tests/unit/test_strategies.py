"""
Unit tests for the JD1 and Anki ranking strategies.
"""

from datetime import timedelta

import pytest

from ir_engine.models import (
    Item,
    ItemType,
    MemoryState,
    SessionConfig,
    SessionItem,
    Status,
)
from ir_engine.strategies import AnkiStrategy, JD1Strategy, StrategyContext, get_strategy


def make_item(
    item_id,
    note_id=None,
    item_type=ItemType.TOPIC,
    priority=50,
    created=None,
    **state_fields,
):
    item = Item(
        id=item_id,
        note_id=note_id or item_id.split("::")[0],
        note_path=f"{item_id}.md",
        type=item_type,
        priority=priority,
        created=created,
    )
    return SessionItem(item=item, state=MemoryState(**state_fields))


def ids(items):
    return [si.item.id for si in items]


@pytest.fixture
def context(now):
    return StrategyContext(now=now)


class TestJD1Score:

    def test_new_topic_score(self, context):
        si = make_item("a", priority=50)
        # 50*100 + topic 50 + new urgency 25
        assert JD1Strategy().score(si, context) == pytest.approx(5075)

    def test_new_cloze_has_no_topic_bonus(self, context):
        si = make_item("a::c1", item_type=ItemType.CLOZE, priority=50)
        assert JD1Strategy().score(si, context) == pytest.approx(5025)

    def test_reviewed_item_urgency_and_recency(self, now, context):
        si = make_item(
            "a::c1",
            item_type=ItemType.CLOZE,
            priority=10,
            status=Status.REVIEW,
            stability=14.0,
            last_review=now - timedelta(days=14),
        )
        urgency = (1 - 2.718281828459045 ** -1) * 25
        assert JD1Strategy().score(si, context) == pytest.approx(1000 + urgency + 2)

    def test_recency_capped(self, now, context):
        si = make_item(
            "a::c1",
            item_type=ItemType.CLOZE,
            priority=0,
            status=Status.REVIEW,
            stability=1.0,
            last_review=now - timedelta(days=365),
        )
        assert JD1Strategy().score(si, context) == pytest.approx(25 + 10)

    def test_just_reviewed_has_no_urgency(self, now, context):
        si = make_item("a::c1", item_type=ItemType.CLOZE, priority=0, last_review=now)
        assert JD1Strategy().score(si, context) == pytest.approx(0)

    def test_link_affinity(self, now):
        si = make_item("b", priority=50)
        linked = StrategyContext(now=now, last_note_id="a", linked_note_ids=frozenset({"b"}))

        assert JD1Strategy().score(si, linked) == pytest.approx(5105)

    def test_created_age_bonus_for_new_only(self, now, context):
        fresh = make_item("a", priority=0, created=now - timedelta(days=3))
        old = make_item("b", priority=0, created=now - timedelta(days=100))
        seen = make_item("c", priority=0, created=now - timedelta(days=100), status=Status.REVIEW, last_review=now)

        strategy = JD1Strategy()
        assert strategy.score(fresh, context) == pytest.approx(50 + 25 + 3)
        assert strategy.score(old, context) == pytest.approx(50 + 25 + 10)
        assert strategy.score(seen, context) == pytest.approx(50)


class TestJD1Rank:

    def test_priority_dominates(self, context):
        low = make_item("a", priority=10)
        high = make_item("b", priority=90)

        assert ids(JD1Strategy().rank([low, high], SessionConfig(), context)) == ["b", "a"]

    def test_ties_broken_by_id(self, context):
        items = [make_item("c"), make_item("a"), make_item("b")]
        assert ids(JD1Strategy().rank(items, SessionConfig(), context)) == ["a", "b", "c"]

    def test_returns_new_list_with_same_items(self, context):
        items = [make_item("b", priority=10), make_item("a", priority=90)]
        ranked = JD1Strategy().rank(items, SessionConfig(), context)

        assert ranked is not items
        assert ids(items) == ["b", "a"]
        assert sorted(ids(ranked)) == ["a", "b"]

    def test_stable_for_identical_input(self, context):
        items = [make_item(f"n{i}", priority=i % 3) for i in range(9)]
        strategy = JD1Strategy()

        assert ids(strategy.rank(items, SessionConfig(), context)) == ids(
            strategy.rank(list(reversed(items)), SessionConfig(), context)
        )


class TestAnkiRank:

    def test_bucket_order(self, now, context):
        not_due = make_item("a", status=Status.REVIEW, due=now + timedelta(days=3))
        new = make_item("b")
        due = make_item("c", status=Status.REVIEW, due=now - timedelta(days=1))
        learning = make_item("d", status=Status.LEARNING, due=now + timedelta(minutes=5))
        relearning = make_item("e", status=Status.RELEARNING, due=now + timedelta(minutes=5))

        ranked = AnkiStrategy().rank([not_due, new, due, learning, relearning], SessionConfig(), context)

        assert ids(ranked) == ["d", "e", "c", "b", "a"]

    def test_due_boundary_inclusive(self, now, context):
        due_now = make_item("z", status=Status.REVIEW, due=now)
        new = make_item("a")

        assert ids(AnkiStrategy().rank([new, due_now], SessionConfig(), context)) == ["z", "a"]

    def test_clozes_before_topics_within_bucket(self, context):
        topic = make_item("a")
        cloze = make_item("b::c1", item_type=ItemType.CLOZE)
        basic = make_item("a::b1", item_type=ItemType.BASIC)

        ranked = AnkiStrategy().rank([topic, basic, cloze], SessionConfig(), context)

        assert ids(ranked) == ["b::c1", "a", "a::b1"]

    def test_priority_ignored(self, context):
        low = make_item("a", priority=1)
        high = make_item("b", priority=99)

        assert ids(AnkiStrategy().rank([high, low], SessionConfig(), context)) == ["a", "b"]


class TestGetStrategy:

    @pytest.mark.parametrize(
        "strategy_id, expected",
        [("JD1", JD1Strategy), ("Anki", AnkiStrategy), ("unknown", JD1Strategy)],
    )
    def test_select_by_id(self, strategy_id, expected):
        assert isinstance(get_strategy(strategy_id), expected)
