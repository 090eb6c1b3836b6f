"""Tests for the order lifecycle engine."""

import pytest
from pydantic import ValidationError

from foodorder.core.config import settings
from foodorder.core.errors import (
    Forbidden, InvalidInput, InvalidTransition, NotFound, TerminalState
)
from foodorder.models.order import OrderCreate, OrderStatus
from foodorder.models.user import UserPublic
from foodorder.services.lifecycle import (
    ALLOWED_TRANSITIONS, TERMINAL_STATUSES, can_transition, expected_total, is_terminal
)

from .conftest import PIZZA_ORDER


def owner(user_id=None):
    return UserPublic(id=user_id or "owner", email="o@example.com", first_name="O",
                      last_name="W", role="customer")


class TestTransitionGraph:
    def test_happy_path_is_linear(self):
        assert can_transition(OrderStatus.CONFIRMED, OrderStatus.PREPARING)
        assert can_transition(OrderStatus.PREPARING, OrderStatus.ON_THE_WAY)
        assert can_transition(OrderStatus.ON_THE_WAY, OrderStatus.DELIVERED)
        assert not can_transition(OrderStatus.CONFIRMED, OrderStatus.ON_THE_WAY)
        assert not can_transition(OrderStatus.PREPARING, OrderStatus.CONFIRMED)

    def test_cancel_from_every_open_status(self):
        for status in OrderStatus:
            if status in TERMINAL_STATUSES:
                continue
            assert can_transition(status, OrderStatus.CANCELLED)

    def test_terminal_statuses_have_no_exits(self):
        for status in TERMINAL_STATUSES:
            assert is_terminal(status)
            assert ALLOWED_TRANSITIONS[status] == frozenset()

    def test_expected_total_rounds_tax(self):
        assert expected_total(760) == 836
        assert expected_total(125) == 138  # 12.5 tax rounds up
        assert expected_total(760, 50) == 886


class TestCreate:
    def test_defaults(self, lifecycle, order_input):
        order = lifecycle.create("owner", order_input)
        assert order.status == OrderStatus.CONFIRMED
        assert order.estimated_delivery_time == 35
        assert order.user_id == "owner"
        assert order.total == 836
        assert order.created_at == order.updated_at

    def test_ids_are_unique(self, lifecycle, order_input):
        ids = {lifecycle.create("owner", order_input).id for _ in range(10)}
        assert len(ids) == 10

    def test_estimate_override(self, lifecycle):
        order = lifecycle.create("owner", OrderCreate(**PIZZA_ORDER, estimatedDeliveryTime=50))
        assert order.estimated_delivery_time == 50

    def test_items_accepted_as_json_string(self, lifecycle):
        data = dict(PIZZA_ORDER, items='[{"name": "Pizza", "quantity": 2, "price": 380}]')
        order = lifecycle.create("owner", OrderCreate(**data))
        assert order.items[0].name == "Pizza"

    def test_empty_items_rejected(self, lifecycle, repo):
        with pytest.raises(InvalidInput) as exc_info:
            lifecycle.create("owner", OrderCreate(**dict(PIZZA_ORDER, items=[])))
        assert exc_info.value.field == "items"
        assert repo.list_all() == []

    @pytest.mark.parametrize("key, field", [
        ("deliveryAddress", "delivery_address"),
        ("customerName", "customer_name"),
        ("customerPhone", "customer_phone"),
    ])
    def test_blank_contact_fields_rejected(self, lifecycle, key, field):
        with pytest.raises(InvalidInput) as exc_info:
            lifecycle.create("owner", OrderCreate(**dict(PIZZA_ORDER, **{key: "   "})))
        assert exc_info.value.field == field

    def test_payment_method_is_required(self):
        body = {k: v for k, v in PIZZA_ORDER.items() if k != "paymentMethod"}
        with pytest.raises(ValidationError):
            OrderCreate(**body)

    def test_only_cash_is_accepted(self):
        with pytest.raises(ValidationError):
            OrderCreate(**dict(PIZZA_ORDER, paymentMethod="card"))

    def test_snake_case_keys_accepted(self, lifecycle):
        order_input = OrderCreate(
            items=[{"name": "Pizza", "quantity": 2, "price": 380}], total=836,
            delivery_address="12 MG Road", payment_method="cash",
            customer_name="Asha", customer_phone="900",
        )
        order = lifecycle.create("owner", order_input)
        assert order.payment_method == "cash"
        assert order.delivery_address == "12 MG Road"

    def test_mismatched_total_is_trusted_by_default(self, lifecycle):
        order = lifecycle.create("owner", OrderCreate(**dict(PIZZA_ORDER, total=1)))
        assert order.total == 1

    def test_mismatched_total_rejected_when_enforced(self, lifecycle, monkeypatch):
        monkeypatch.setattr(settings, "ENFORCE_ORDER_TOTAL", True)
        with pytest.raises(InvalidInput):
            lifecycle.create("owner", OrderCreate(**dict(PIZZA_ORDER, total=1)))
        # express delivery fee is an accepted variant
        order = lifecycle.create("owner", OrderCreate(**dict(PIZZA_ORDER, total=886)))
        assert order.total == 886


class TestTransition:
    def test_forward_then_backward(self, lifecycle, repo, order_input):
        order = lifecycle.create("owner", order_input)

        preparing = lifecycle.transition(order.id, "preparing")
        assert preparing.status == OrderStatus.PREPARING

        with pytest.raises(InvalidTransition):
            lifecycle.transition(order.id, "confirmed")
        assert repo.get_by_id(order.id).status == OrderStatus.PREPARING

    def test_full_happy_path(self, lifecycle, order_input):
        order = lifecycle.create("owner", order_input)
        for status in ("preparing", "on_the_way", "delivered"):
            order = lifecycle.transition(order.id, status)
        assert order.status == OrderStatus.DELIVERED

    def test_skipping_a_step_rejected(self, lifecycle, order_input):
        order = lifecycle.create("owner", order_input)
        with pytest.raises(InvalidTransition):
            lifecycle.transition(order.id, "delivered")

    def test_same_status_rejected(self, lifecycle, order_input):
        order = lifecycle.create("owner", order_input)
        with pytest.raises(InvalidTransition):
            lifecycle.transition(order.id, "confirmed")

    @pytest.mark.parametrize("terminal", ["delivered", "cancelled"])
    def test_terminal_orders_are_frozen(self, lifecycle, repo, order_input, terminal):
        order = lifecycle.create("owner", order_input)
        if terminal == "delivered":
            for status in ("preparing", "on_the_way", "delivered"):
                lifecycle.transition(order.id, status)
        else:
            lifecycle.transition(order.id, "cancelled")
        before = repo.get_by_id(order.id)

        for status in OrderStatus:
            with pytest.raises(InvalidTransition):
                lifecycle.transition(order.id, status.value)
        with pytest.raises(TerminalState):
            lifecycle.reestimate(order.id, 20)

        assert repo.get_by_id(order.id) == before

    def test_unknown_status(self, lifecycle, order_input):
        order = lifecycle.create("owner", order_input)
        with pytest.raises(InvalidInput):
            lifecycle.transition(order.id, "onTheWay")

    def test_unknown_order(self, lifecycle):
        with pytest.raises(NotFound):
            lifecycle.transition("missing", "preparing")


class TestReestimate:
    def test_updates_estimate(self, lifecycle, order_input):
        order = lifecycle.create("owner", order_input)
        updated = lifecycle.reestimate(order.id, 60)
        assert updated.estimated_delivery_time == 60
        assert updated.updated_at >= order.updated_at

    def test_large_estimates_allowed(self, lifecycle, order_input):
        order = lifecycle.create("owner", order_input)
        assert lifecycle.reestimate(order.id, 10_000).estimated_delivery_time == 10_000

    @pytest.mark.parametrize("minutes", [0, -5])
    def test_non_positive_rejected(self, lifecycle, repo, order_input, minutes):
        order = lifecycle.create("owner", order_input)
        with pytest.raises(InvalidInput):
            lifecycle.reestimate(order.id, minutes)
        assert repo.get_by_id(order.id).estimated_delivery_time == 35

    def test_unknown_order(self, lifecycle):
        with pytest.raises(NotFound):
            lifecycle.reestimate("missing", 10)


class TestCustomerCancel:
    def test_owner_can_cancel_confirmed(self, lifecycle, order_input):
        order = lifecycle.create("owner", order_input)
        cancelled = lifecycle.cancel_by_customer(order.id, owner())
        assert cancelled.status == OrderStatus.CANCELLED

    def test_not_after_preparation_started(self, lifecycle, order_input):
        order = lifecycle.create("owner", order_input)
        lifecycle.transition(order.id, "preparing")
        with pytest.raises(InvalidTransition):
            lifecycle.cancel_by_customer(order.id, owner())

    def test_other_users_cannot_cancel(self, lifecycle, order_input):
        order = lifecycle.create("owner", order_input)
        with pytest.raises(Forbidden):
            lifecycle.cancel_by_customer(order.id, owner("intruder"))
