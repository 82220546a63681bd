"""Tests for multi-key sequence matching and timeout disambiguation."""

from __future__ import annotations

import unittest

from lazyfm.input.matcher import COUNTING, DISCARDED, MATCHED, PENDING, SequenceMatcher
from lazyfm.keybindings.registry import BindingRegistry
from lazyfm.state import Mode


class _FakeClock:
    def __init__(self) -> None:
        self.now = 100.0

    def __call__(self) -> float:
        return self.now


def _noop(ctx) -> None:
    return None


class SequenceMatcherTests(unittest.TestCase):
    def setUp(self) -> None:
        self.registry = BindingRegistry()
        self.clock = _FakeClock()
        self.matcher = SequenceMatcher(self.registry, timeout_ms=1000, clock=self.clock)

    def test_single_key_binding_matches_immediately(self) -> None:
        binding = self.registry.register(Mode.NORMAL, ["j"], "down", _noop)
        result = self.matcher.feed(Mode.NORMAL, "j")
        self.assertEqual(result.status, MATCHED)
        self.assertIs(result.binding, binding)
        self.assertEqual(result.count, 0)
        self.assertEqual(self.matcher.pending_keys, ())

    def test_numeric_prefix_sets_count(self) -> None:
        self.registry.register(Mode.NORMAL, ["j"], "down", _noop)
        self.assertEqual(self.matcher.feed(Mode.NORMAL, "3").status, COUNTING)
        result = self.matcher.feed(Mode.NORMAL, "j")
        self.assertEqual(result.status, MATCHED)
        self.assertEqual(result.count, 3)
        self.assertEqual(self.matcher.pending_count, "")

    def test_multi_digit_count(self) -> None:
        self.registry.register(Mode.NORMAL, ["G"], "last", _noop)
        self.matcher.feed(Mode.NORMAL, "1")
        self.matcher.feed(Mode.NORMAL, "0")
        self.assertEqual(self.matcher.feed(Mode.NORMAL, "G").count, 10)

    def test_partial_sequence_is_pending_without_fallback(self) -> None:
        binding = self.registry.register(Mode.NORMAL, ["g", "g"], "first", _noop)
        first = self.matcher.feed(Mode.NORMAL, "g")
        self.assertEqual(first.status, PENDING)
        self.assertIsNone(first.fallback)
        self.assertIsNone(first.binding)
        second = self.matcher.feed(Mode.NORMAL, "g")
        self.assertEqual(second.status, MATCHED)
        self.assertIs(second.binding, binding)

    def test_partial_without_fallback_is_discarded_on_timeout(self) -> None:
        self.registry.register(Mode.NORMAL, ["g", "g"], "first", _noop)
        self.matcher.feed(Mode.NORMAL, "g")
        self.clock.now += 1.5
        result = self.matcher.expire()
        self.assertEqual(result.status, DISCARDED)
        self.assertEqual(self.matcher.pending_keys, ())

    def test_ambiguous_key_fires_fallback_once_after_timeout(self) -> None:
        short = self.registry.register(Mode.NORMAL, ["d"], "d", _noop)
        self.registry.register(Mode.NORMAL, ["d", "d"], "dd", _noop)

        pending = self.matcher.feed(Mode.NORMAL, "d")
        self.assertEqual(pending.status, PENDING)
        self.assertIs(pending.fallback, short)

        self.clock.now += 0.5
        self.assertIsNone(self.matcher.expire())
        self.assertAlmostEqual(self.matcher.timeout_remaining(), 0.5)

        self.clock.now += 0.6
        fired = self.matcher.expire()
        self.assertEqual(fired.status, MATCHED)
        self.assertIs(fired.binding, short)
        self.assertIsNone(self.matcher.expire())
        self.assertIsNone(self.matcher.timeout_remaining())

    def test_second_key_cancels_timer_and_runs_only_longer_binding(self) -> None:
        self.registry.register(Mode.NORMAL, ["d"], "d", _noop)
        long = self.registry.register(Mode.NORMAL, ["d", "d"], "dd", _noop)
        self.matcher.feed(Mode.NORMAL, "d")
        result = self.matcher.feed(Mode.NORMAL, "d")
        self.assertEqual(result.status, MATCHED)
        self.assertIs(result.binding, long)
        self.clock.now += 5
        self.assertIsNone(self.matcher.expire())

    def test_count_survives_pending_fallback(self) -> None:
        self.registry.register(Mode.NORMAL, ["d"], "d", _noop)
        self.registry.register(Mode.NORMAL, ["d", "d"], "dd", _noop)
        self.matcher.feed(Mode.NORMAL, "4")
        self.matcher.feed(Mode.NORMAL, "d")
        self.clock.now += 2
        self.assertEqual(self.matcher.expire().count, 4)

    def test_unknown_sequence_discards_tokens_and_count(self) -> None:
        self.registry.register(Mode.NORMAL, ["j"], "down", _noop)
        self.matcher.feed(Mode.NORMAL, "5")
        self.assertEqual(self.matcher.feed(Mode.NORMAL, "z").status, DISCARDED)
        self.assertEqual(self.matcher.pending_count, "")
        self.assertEqual(self.matcher.feed(Mode.NORMAL, "j").count, 0)

    def test_digit_after_partial_is_an_ordinary_token(self) -> None:
        self.registry.register(Mode.NORMAL, ["g", "g"], "first", _noop)
        self.matcher.feed(Mode.NORMAL, "g")
        self.assertEqual(self.matcher.feed(Mode.NORMAL, "3").status, DISCARDED)
        self.assertEqual(self.matcher.pending_keys, ())

    def test_bindings_are_scoped_by_mode(self) -> None:
        self.registry.register(Mode.PREVIEW, ["j"], "down", _noop)
        self.assertEqual(self.matcher.feed(Mode.NORMAL, "j").status, DISCARDED)
        self.assertEqual(self.matcher.feed(Mode.PREVIEW, "j").status, MATCHED)

    def test_zero_is_a_count_digit_only_when_buffer_is_empty(self) -> None:
        self.registry.register(Mode.NORMAL, ["j"], "down", _noop)
        self.assertEqual(self.matcher.feed(Mode.NORMAL, "0").status, COUNTING)
        self.assertEqual(self.matcher.feed(Mode.NORMAL, "j").count, 0)

    def test_reset_clears_pending_state(self) -> None:
        self.registry.register(Mode.NORMAL, ["g", "g"], "first", _noop)
        self.matcher.feed(Mode.NORMAL, "2")
        self.matcher.feed(Mode.NORMAL, "g")
        self.matcher.reset()
        self.assertEqual(self.matcher.pending_keys, ())
        self.assertEqual(self.matcher.pending_count, "")
        self.assertIsNone(self.matcher.timeout_remaining())


if __name__ == "__main__":
    unittest.main()
