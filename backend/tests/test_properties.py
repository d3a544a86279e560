"""
Property-based Testing with Hypothesis.

Money arithmetic and the stored order total.
"""

from decimal import Decimal

from hypothesis import HealthCheck, given, settings, strategies as st

from rest_api.models import AddOn, MenuItem
from rest_api.repositories import AddOnDraft, OrderLineDraft, OrderRepository
from shared.config.constants import Limits
from shared.utils.money import line_total, order_total, to_money, totals_match


cents = st.integers(min_value=0, max_value=1_000_00)
prices = cents.map(lambda c: Decimal(c) / 100)
quantities = st.integers(min_value=Limits.MIN_QUANTITY, max_value=Limits.MAX_QUANTITY)

line_specs = st.lists(
    st.tuples(prices, st.lists(prices, max_size=4), quantities),
    min_size=1,
    max_size=8,
)


class TestMoneyProperties:
    """Property-based tests for money helpers."""

    @given(unit=prices, addons=st.lists(prices, max_size=5), quantity=quantities)
    @settings(max_examples=200)
    def test_line_total_is_unit_plus_addons_times_quantity(self, unit, addons, quantity):
        """Property: (unit + sum(addons)) * quantity, exact to the cent."""
        expected = (unit + sum(addons, Decimal("0"))) * quantity
        assert line_total(unit, addons, quantity) == expected

    @given(specs=line_specs)
    @settings(max_examples=200)
    def test_order_total_is_sum_of_line_totals(self, specs):
        """Property: order total never drifts from the per-line sum."""
        expected = sum((line_total(u, a, q) for u, a, q in specs), Decimal("0"))
        assert order_total(specs) == expected

    @given(value=st.floats(min_value=0, max_value=1_000_000, allow_nan=False, allow_infinity=False))
    @settings(max_examples=200)
    def test_to_money_has_two_decimal_places(self, value):
        """Property: any float input quantizes to cents."""
        assert to_money(value).as_tuple().exponent == -2

    @given(total=prices)
    @settings(max_examples=100)
    def test_total_matches_its_float_rendering(self, total):
        """Property: a total survives the trip through a JSON float."""
        assert totals_match(total, float(total), Decimal("0.005"))


class TestStoredTotalProperties:
    """The stored order total equals the sum of its stored lines."""

    @given(specs=line_specs)
    @settings(
        max_examples=100,
        deadline=None,
        suppress_health_check=[HealthCheck.function_scoped_fixture],
    )
    def test_stored_total_equals_sum_of_lines(self, specs, db_session, seed_table):
        drafts = []
        for unit, addon_prices, quantity in specs:
            item = MenuItem(name="Item", price=unit, category="dish")
            addons = [AddOn(name="Extra", price=p) for p in addon_prices]
            db_session.add(item)
            db_session.add_all(addons)
            db_session.flush()
            drafts.append(
                OrderLineDraft(
                    item_id=item.id,
                    quantity=quantity,
                    unit_price=unit,
                    addons=[AddOnDraft(addon_id=a.id, price=a.price) for a in addons],
                )
            )

        repo = OrderRepository(db_session)
        created = repo.create_order(seed_table.id, drafts)
        order = repo.get_order(created.id)

        stored_lines = sum(
            (
                line_total(line.price_at_time, [a.price_at_time for a in line.addons], line.quantity)
                for line in order.lines
            ),
            Decimal("0"),
        )
        assert order.total_price == stored_lines
        assert len(order.lines) == len(specs)
