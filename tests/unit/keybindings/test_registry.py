"""Tests for binding registration and exact/partial lookup."""

from __future__ import annotations

import unittest

from lazyfm.keybindings.registry import BindingRegistry
from lazyfm.state import Mode


def _noop(ctx) -> None:
    return None


class BindingRegistryTests(unittest.TestCase):
    def test_gg_prefix_is_partial_and_full_sequence_is_exact(self) -> None:
        registry = BindingRegistry()
        binding = registry.register(Mode.NORMAL, ["g", "g"], "first", _noop)

        prefix = registry.find(Mode.NORMAL, ["g"])
        self.assertIsNone(prefix.exact)
        self.assertIs(prefix.partial, binding)

        full = registry.find(Mode.NORMAL, ["g", "g"])
        self.assertIs(full.exact, binding)
        self.assertIsNone(full.partial)

    def test_exact_and_partial_reported_together(self) -> None:
        registry = BindingRegistry()
        short = registry.register(Mode.NORMAL, ["d"], "d", _noop)
        long = registry.register(Mode.NORMAL, ["d", "d"], "dd", _noop)
        match = registry.find(Mode.NORMAL, ["d"])
        self.assertIs(match.exact, short)
        self.assertIs(match.partial, long)
        self.assertFalse(match.is_empty)

    def test_no_match_is_empty(self) -> None:
        registry = BindingRegistry()
        registry.register(Mode.NORMAL, ["j"], "down", _noop)
        self.assertTrue(registry.find(Mode.NORMAL, ["x"]).is_empty)
        self.assertTrue(registry.find(Mode.VISUAL, ["j"]).is_empty)

    def test_first_registered_binding_wins(self) -> None:
        registry = BindingRegistry()
        first = registry.register(Mode.NORMAL, ["j"], "one", _noop)
        registry.register(Mode.NORMAL, ["j"], "two", _noop)
        self.assertIs(registry.find(Mode.NORMAL, ["j"]).exact, first)

    def test_bindings_for_returns_registration_order_copy(self) -> None:
        registry = BindingRegistry()
        registry.register(Mode.PREVIEW, ["j"], "down", _noop)
        registry.register(Mode.PREVIEW, ["k"], "up", _noop)
        listed = registry.bindings_for(Mode.PREVIEW)
        self.assertEqual([b.keys for b in listed], [("j",), ("k",)])
        listed.clear()
        self.assertEqual(len(registry.bindings_for(Mode.PREVIEW)), 2)
        self.assertEqual(registry.bindings_for(Mode.VISUAL), [])

    def test_empty_sequence_is_rejected(self) -> None:
        with self.assertRaises(ValueError):
            BindingRegistry().register(Mode.NORMAL, [], "nothing", _noop)


if __name__ == "__main__":
    unittest.main()
