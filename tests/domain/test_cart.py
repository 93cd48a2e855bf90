"""Unit tests for the Cart aggregate."""

import pytest

from storefront.domain.exceptions import EntityNotFoundError
from storefront.domain.model.cart import Cart
from storefront.domain.model.value_objects import Customization, Quantity


class TestCartAdd:

    def test_add_creates_line(self):
        cart = Cart(user_id="u1")
        line = cart.add("1", Quantity(2))
        assert line.id == 1
        assert cart.lines == [line]

    def test_same_customization_merges(self):
        cart = Cart(user_id="u1")
        cart.add("1", Quantity(1), Customization.of(["large", "oat"]))
        merged = cart.add("1", Quantity(2), Customization.of(["oat", "large"]))
        assert len(cart.lines) == 1
        assert merged.quantity == Quantity(3)

    def test_different_customization_adds_line(self):
        cart = Cart(user_id="u1")
        cart.add("1", Quantity(1), Customization.of(["large"]))
        cart.add("1", Quantity(1), Customization.of(["small"]))
        assert len(cart.lines) == 2

    def test_line_ids_keep_increasing_after_removal(self):
        cart = Cart(user_id="u1")
        cart.add("1", Quantity(1))
        second = cart.add("2", Quantity(1))
        cart.remove(1)
        third = cart.add("3", Quantity(1))
        assert third.id == second.id + 1


class TestCartEdits:

    def test_update_quantity_replaces(self):
        cart = Cart(user_id="u1")
        line = cart.add("1", Quantity(2))
        updated = cart.update_quantity(line.id, Quantity(5))
        assert updated.quantity == Quantity(5)
        assert cart.get_line(line.id).quantity == Quantity(5)

    def test_unknown_line_not_found(self):
        cart = Cart(user_id="u1")
        with pytest.raises(EntityNotFoundError, match="Cart item #9 not found"):
            cart.update_quantity(9, Quantity(1))
        with pytest.raises(EntityNotFoundError):
            cart.remove(9)

    def test_clear(self):
        cart = Cart(user_id="u1")
        cart.add("1", Quantity(2))
        cart.clear()
        assert cart.is_empty


class TestCartSnapshot:

    def test_snapshot_unaffected_by_later_edits(self):
        cart = Cart(user_id="u1")
        line = cart.add("1", Quantity(2))
        snapshot = cart.snapshot()

        cart.update_quantity(line.id, Quantity(7))
        cart.add("2", Quantity(1))

        assert snapshot.lines[0].quantity == Quantity(2)
        assert len(snapshot.lines) == 1
        assert snapshot != cart.snapshot()

    def test_item_count(self):
        cart = Cart(user_id="u1")
        cart.add("1", Quantity(2))
        cart.add("2", Quantity(3))
        assert cart.snapshot().item_count == 5

    def test_equal_snapshots(self):
        cart = Cart(user_id="u1")
        cart.add("1", Quantity(2), Customization.of(["a", "b"]))
        assert cart.snapshot() == Cart(user_id="u1", lines=list(cart.lines)).snapshot()
