"""Unit tests for history windowing."""
import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'backend'))

from models.conversation import ContextPair, Turn
from services.history_window import build_context_pairs


def make_turns(count):
    """Turns numbered 1..count, returned newest first like the store does."""
    turns = [
        Turn(user_id="u1", session_id="s1", user_input=f"Query {i}", assistant_raw=f"Response {i}")
        for i in range(1, count + 1)
    ]
    return list(reversed(turns))


def test_empty_history():
    assert build_context_pairs([]) == []


def test_oldest_first_order():
    pairs = build_context_pairs(make_turns(3))

    assert pairs == [
        ContextPair(user="Query 1", assistant="Response 1"),
        ContextPair(user="Query 2", assistant="Response 2"),
        ContextPair(user="Query 3", assistant="Response 3"),
    ]


def test_one_pair_per_turn():
    for k in range(0, 6):
        assert len(build_context_pairs(make_turns(k))) == k


def test_does_not_truncate():
    pairs = build_context_pairs(make_turns(8))
    assert len(pairs) == 8


def test_drops_incomplete_turns():
    turns = [
        Turn(user_id="u1", session_id="s1", user_input="Query 3", assistant_raw="Response 3"),
        Turn(user_id="u1", session_id="s1", user_input="Query 2", assistant_raw=None),
        Turn(user_id="u1", session_id="s1", user_input="Query 1", assistant_raw=""),
        Turn(user_id="u1", session_id="s1", user_input="", assistant_raw="Orphan"),
    ]

    pairs = build_context_pairs(turns)

    assert pairs == [ContextPair(user="Query 3", assistant="Response 3")]


def test_raw_assistant_text_passed_through():
    raw = '{"type": "response", "answer": "O(n)"}'
    turns = [Turn(user_id="u1", session_id="s1", user_input="complexity?", assistant_raw=raw)]

    assert build_context_pairs(turns)[0].assistant == raw


def test_accepts_any_iterable():
    pairs = build_context_pairs(iter(make_turns(2)))
    assert [p.user for p in pairs] == ["Query 1", "Query 2"]
