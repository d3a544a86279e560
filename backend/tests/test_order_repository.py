"""
Tests for OrderRepository: atomic creation, the status state machine,
table billing and read queries.
"""

from decimal import Decimal

import pytest
from sqlalchemy import func, select

from rest_api.models import DiningTable, Order, OrderLine, OrderLineAddOn
from rest_api.repositories import (
    AddOnDraft,
    MenuItemRepository,
    OrderLineDraft,
    OrderRepository,
    TableRepository,
)
from shared.utils.exceptions import (
    InvalidTransitionError,
    OrderNotFoundError,
    PersistenceError,
    TableNotFoundError,
    ValidationError,
)


def _line(item, quantity=1, addons=(), observation=None):
    return OrderLineDraft(
        item_id=item.id,
        quantity=quantity,
        unit_price=item.price,
        observation=observation,
        addons=[AddOnDraft(addon_id=a.id, price=a.price) for a in addons],
    )


def _count(db, model) -> int:
    return db.scalar(select(func.count()).select_from(model))


# =============================================================================
# create_order
# =============================================================================


class TestCreateOrder:
    """Order, lines and add-ons are written together or not at all."""

    def test_two_lomos_with_cheese_totals_46(self, db_session, seed_table, seed_item, seed_addon):
        repo = OrderRepository(db_session)

        created = repo.create_order(
            seed_table.id,
            [_line(seed_item, quantity=2, addons=[seed_addon], observation="sin cebolla")],
        )

        assert created.total_price == Decimal("46.00")
        order = repo.get_order(created.id)
        assert order.status == "pending"
        assert order.table.number == 4
        assert len(order.lines) == 1
        line = order.lines[0]
        assert line.quantity == 2
        assert line.price_at_time == Decimal("20.00")
        assert line.observation == "sin cebolla"
        assert [a.addon.name for a in line.addons] == ["Extra cheese"]
        assert line.addons[0].price_at_time == Decimal("3.00")

    def test_counter_order_without_table(self, db_session, seed_item):
        repo = OrderRepository(db_session)

        created = repo.create_order(None, [_line(seed_item)])

        order = repo.get_order(created.id)
        assert order.table_id is None
        assert order.total_price == Decimal("20.00")

    def test_multiple_lines_sum(self, db_session, seed_table, seed_item, seed_drink, seed_addon):
        repo = OrderRepository(db_session)

        created = repo.create_order(
            seed_table.id,
            [
                _line(seed_item, quantity=1, addons=[seed_addon]),
                _line(seed_drink, quantity=3),
            ],
        )

        # 23.00 + 3 * 4.50
        assert created.total_price == Decimal("36.50")
        assert _count(db_session, OrderLine) == 2
        assert _count(db_session, OrderLineAddOn) == 1

    def test_empty_order_rejected_and_nothing_written(self, db_session, seed_table):
        repo = OrderRepository(db_session)

        with pytest.raises(ValidationError) as exc_info:
            repo.create_order(seed_table.id, [])

        assert exc_info.value.status_code == 400
        assert _count(db_session, Order) == 0

    @pytest.mark.parametrize("quantity", [0, -1, 100])
    def test_bad_quantity_rejected_and_nothing_written(self, db_session, seed_table, seed_item, quantity):
        repo = OrderRepository(db_session)

        with pytest.raises(ValidationError):
            repo.create_order(
                seed_table.id,
                [_line(seed_item, quantity=1), _line(seed_item, quantity=quantity)],
            )

        assert _count(db_session, Order) == 0
        assert _count(db_session, OrderLine) == 0

    def test_negative_price_rejected(self, db_session, seed_table, seed_item):
        repo = OrderRepository(db_session)
        draft = _line(seed_item)
        draft.unit_price = Decimal("-1.00")

        with pytest.raises(ValidationError):
            repo.create_order(seed_table.id, [draft])

        assert _count(db_session, Order) == 0

    def test_unknown_table(self, db_session, seed_item):
        repo = OrderRepository(db_session)

        with pytest.raises(TableNotFoundError) as exc_info:
            repo.create_order(999, [_line(seed_item)])

        assert exc_info.value.status_code == 404
        assert _count(db_session, Order) == 0

    def test_failed_commit_rolls_back_whole_order(self, db_session, seed_table, seed_item):
        """A line pointing at a missing menu item fails on the FK; the order row goes too."""
        repo = OrderRepository(db_session)
        bad = OrderLineDraft(item_id=9999, quantity=1, unit_price=Decimal("5.00"))

        with pytest.raises(PersistenceError) as exc_info:
            repo.create_order(seed_table.id, [_line(seed_item), bad])

        assert exc_info.value.status_code == 500
        assert _count(db_session, Order) == 0
        assert _count(db_session, OrderLine) == 0

        # Session is usable again after the rollback
        created = repo.create_order(seed_table.id, [_line(seed_item)])
        assert created.id is not None

    def test_price_snapshot_survives_catalog_change(self, db_session, seed_table, seed_item, seed_addon):
        repo = OrderRepository(db_session)
        created = repo.create_order(seed_table.id, [_line(seed_item, quantity=2, addons=[seed_addon])])

        MenuItemRepository(db_session).update(seed_item.id, price=Decimal("25.00"))

        order = repo.get_order(created.id)
        assert order.lines[0].price_at_time == Decimal("20.00")
        assert order.total_price == Decimal("46.00")


# =============================================================================
# update_status
# =============================================================================


class TestUpdateStatus:
    """Status state machine."""

    @pytest.fixture
    def order_id(self, db_session, seed_table, seed_item):
        return OrderRepository(db_session).create_order(seed_table.id, [_line(seed_item)]).id

    def test_full_forward_path(self, db_session, order_id):
        repo = OrderRepository(db_session)

        for previous, new in [
            ("pending", "preparing"),
            ("preparing", "ready"),
            ("ready", "delivered"),
            ("delivered", "paid"),
        ]:
            order, was = repo.update_status(order_id, new)
            assert was == previous
            assert order.status == new

        assert repo.get_order(order_id).status == "paid"

    def test_skipping_a_step_rejected(self, db_session, order_id):
        repo = OrderRepository(db_session)

        with pytest.raises(InvalidTransitionError) as exc_info:
            repo.update_status(order_id, "paid")

        assert exc_info.value.status_code == 400
        assert repo.get_order(order_id).status == "pending"

    def test_going_back_rejected(self, db_session, order_id):
        repo = OrderRepository(db_session)
        repo.update_status(order_id, "preparing")

        with pytest.raises(InvalidTransitionError):
            repo.update_status(order_id, "pending")

    def test_paid_is_terminal(self, db_session, order_id):
        repo = OrderRepository(db_session)
        for status in ["preparing", "ready", "delivered", "paid"]:
            repo.update_status(order_id, status)

        with pytest.raises(InvalidTransitionError):
            repo.update_status(order_id, "delivered")

    def test_same_status_is_accepted(self, db_session, order_id):
        repo = OrderRepository(db_session)

        order, previous = repo.update_status(order_id, "pending")

        assert previous == "pending"
        assert order.status == "pending"

    def test_lenient_mode_allows_any_known_status(self, db_session, order_id):
        repo = OrderRepository(db_session)

        order, _ = repo.update_status(order_id, "delivered", strict=False)
        assert order.status == "delivered"

        order, _ = repo.update_status(order_id, "pending", strict=False)
        assert order.status == "pending"

    @pytest.mark.parametrize("strict", [True, False])
    def test_unknown_status_rejected(self, db_session, order_id, strict):
        repo = OrderRepository(db_session)

        with pytest.raises(ValidationError) as exc_info:
            repo.update_status(order_id, "cancelled", strict=strict)

        assert "cancelled" in exc_info.value.detail
        assert repo.get_order(order_id).status == "pending"

    def test_missing_order(self, db_session):
        repo = OrderRepository(db_session)

        with pytest.raises(OrderNotFoundError) as exc_info:
            repo.update_status(12345, "preparing")

        assert exc_info.value.status_code == 404


# =============================================================================
# close_table
# =============================================================================


class TestCloseTable:
    """Billing a table pays every open order at once."""

    def test_close_pays_all_open_orders(self, db_session, seed_table, seed_item):
        repo = OrderRepository(db_session)
        first = repo.create_order(seed_table.id, [_line(seed_item)]).id
        second = repo.create_order(seed_table.id, [_line(seed_item, quantity=2)]).id
        repo.update_status(second, "preparing")

        closed = repo.close_table(seed_table.id)

        assert sorted(closed) == sorted([first, second])
        assert repo.get_order(first).status == "paid"
        assert repo.get_order(second).status == "paid"
        assert list(repo.list_open_orders_for_table(seed_table.id)) == []
        assert TableRepository(db_session).get_status(seed_table.id) == "available"

    def test_close_is_idempotent(self, db_session, seed_table, seed_item):
        repo = OrderRepository(db_session)
        repo.create_order(seed_table.id, [_line(seed_item)])

        assert len(repo.close_table(seed_table.id)) == 1
        assert repo.close_table(seed_table.id) == []

    def test_close_only_touches_that_table(self, db_session, seed_table, seed_item):
        other = DiningTable(number=7)
        db_session.add(other)
        db_session.commit()
        repo = OrderRepository(db_session)
        repo.create_order(seed_table.id, [_line(seed_item)])
        other_order = repo.create_order(other.id, [_line(seed_item)]).id

        repo.close_table(seed_table.id)

        assert repo.get_order(other_order).status == "pending"
        assert TableRepository(db_session).get_status(other.id) == "occupied"

    def test_close_unknown_table(self, db_session):
        with pytest.raises(TableNotFoundError):
            OrderRepository(db_session).close_table(404)


# =============================================================================
# Reads and delete
# =============================================================================


class TestQueries:

    def test_open_orders_oldest_first_and_exclude_paid(self, db_session, seed_table, seed_item):
        repo = OrderRepository(db_session)
        ids = [repo.create_order(seed_table.id, [_line(seed_item)]).id for _ in range(3)]
        repo.update_status(ids[1], "delivered", strict=False)
        repo.update_status(ids[1], "paid")

        open_orders = repo.list_open_orders_for_table(seed_table.id)

        assert [o.id for o in open_orders] == [ids[0], ids[2]]

    def test_open_orders_unknown_table(self, db_session):
        with pytest.raises(TableNotFoundError):
            OrderRepository(db_session).list_open_orders_for_table(77)

    def test_list_orders_newest_first_with_status_filter(self, db_session, seed_table, seed_item):
        repo = OrderRepository(db_session)
        ids = [repo.create_order(seed_table.id, [_line(seed_item)]).id for _ in range(3)]
        repo.update_status(ids[0], "preparing")

        assert [o.id for o in repo.list_orders()] == list(reversed(ids))
        assert [o.id for o in repo.list_orders("preparing")] == [ids[0]]

    def test_kitchen_queue_excludes_delivered_and_paid(self, db_session, seed_table, seed_item):
        repo = OrderRepository(db_session)
        ids = [repo.create_order(seed_table.id, [_line(seed_item)]).id for _ in range(4)]
        repo.update_status(ids[1], "ready", strict=False)
        repo.update_status(ids[2], "delivered", strict=False)
        repo.update_status(ids[3], "paid", strict=False)

        assert [o.id for o in repo.list_kitchen_queue()] == [ids[0], ids[1]]

    def test_delete_cascades_to_lines(self, db_session, seed_table, seed_item, seed_addon):
        repo = OrderRepository(db_session)
        order_id = repo.create_order(seed_table.id, [_line(seed_item, addons=[seed_addon])]).id

        repo.delete_order(order_id)

        assert _count(db_session, Order) == 0
        assert _count(db_session, OrderLine) == 0
        assert _count(db_session, OrderLineAddOn) == 0
        with pytest.raises(OrderNotFoundError):
            repo.delete_order(order_id)
