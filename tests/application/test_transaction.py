"""Unit tests for the compensating Transaction."""

import pytest

from storefront.application.transaction import Transaction


class TestTransaction:

    def test_commit_runs_no_compensation(self):
        undone: list[str] = []
        with Transaction("t") as tx:
            tx.on_rollback("a", undone.append, "a")
        assert undone == []

    def test_failure_undoes_in_reverse_order(self):
        undone: list[str] = []
        with pytest.raises(RuntimeError, match="boom"):
            with Transaction("t") as tx:
                tx.on_rollback("a", undone.append, "a")
                tx.on_rollback("b", undone.append, "b")
                raise RuntimeError("boom")
        assert undone == ["b", "a"]

    def test_failing_compensation_does_not_stop_the_rest(self):
        undone: list[str] = []

        def broken() -> None:
            raise OSError("disk gone")

        with pytest.raises(ValueError):
            with Transaction("t") as tx:
                tx.on_rollback("a", undone.append, "a")
                tx.on_rollback("broken", broken)
                raise ValueError("original")
        assert undone == ["a"]

    def test_register_outside_block_rejected(self):
        tx = Transaction("t")
        with pytest.raises(RuntimeError, match="not open"):
            tx.on_rollback("a", print)

    def test_reusable_after_commit(self):
        undone: list[str] = []
        tx = Transaction("t")
        with tx:
            tx.on_rollback("first", undone.append, "first")
        with pytest.raises(KeyError):
            with tx:
                tx.on_rollback("second", undone.append, "second")
                raise KeyError("x")
        assert undone == ["second"]
