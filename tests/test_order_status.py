"""
Tests for order status policies.
"""

import pytest

from models import Order
from services.exceptions import InvalidTransitionError, NotFoundError
from services.order_status import ORDER_STATUSES, TRANSITION_POLICIES, is_allowed, set_order_status


class TestTransitionPolicies:
    def test_policies_cover_every_status(self):
        for policy in TRANSITION_POLICIES.values():
            assert set(policy) == set(ORDER_STATUSES)

    def test_permissive_accepts_any_pair(self):
        for current in ORDER_STATUSES:
            for requested in ORDER_STATUSES:
                assert is_allowed(current, requested, "permissive")

    def test_strict_follows_happy_path(self):
        assert is_allowed("pending", "processing", "strict")
        assert is_allowed("processing", "shipped", "strict")
        assert is_allowed("shipped", "delivered", "strict")
        assert is_allowed("shipped", "cancelled", "strict")
        assert not is_allowed("pending", "delivered", "strict")
        assert not is_allowed("delivered", "pending", "strict")
        assert not is_allowed("cancelled", "processing", "strict")

    def test_same_status_always_allowed(self):
        assert is_allowed("delivered", "delivered", "strict")

    def test_unlisted_status_rejected(self):
        assert not is_allowed("pending", "completed", "permissive")

    def test_unknown_policy(self):
        with pytest.raises(ValueError):
            is_allowed("pending", "processing", "relaxed")


class TestSetOrderStatus:
    def test_delivered_back_to_pending_when_permissive(self, db, make):
        order = make.order(make.user(), make.producer(), status="delivered")

        set_order_status(db, order.id, "pending", policy="permissive")

        db.expire_all()
        stored = db.get(Order, order.id)
        assert stored.status == "pending"
        assert stored.updated_at is not None

    def test_strict_rejects_and_keeps_status(self, db, make):
        order = make.order(make.user(), make.producer(), status="delivered")

        with pytest.raises(InvalidTransitionError):
            set_order_status(db, order.id, "pending", policy="strict")

        db.expire_all()
        assert db.get(Order, order.id).status == "delivered"

    def test_missing_order(self, db):
        with pytest.raises(NotFoundError):
            set_order_status(db, 42, "shipped")
