# backend/services/order_status.py
import logging
from datetime import datetime
from typing import Dict, FrozenSet

from sqlalchemy.orm import Session

from config.settings import ORDER_TRANSITION_POLICY
from models.order_model import Order
from services.exceptions import NotFoundError, InvalidTransitionError

logger = logging.getLogger(__name__)

ORDER_STATUSES = ("pending", "processing", "shipped", "delivered", "cancelled")

_ALL: FrozenSet[str] = frozenset(ORDER_STATUSES)

# Edge sets per policy. "permissive" is the historical behaviour: any listed
# status may follow any other (delivered -> pending included).
TRANSITION_POLICIES: Dict[str, Dict[str, FrozenSet[str]]] = {
    "permissive": {status: _ALL for status in ORDER_STATUSES},
    "strict": {
        "pending":    frozenset({"processing", "cancelled"}),
        "processing": frozenset({"shipped", "cancelled"}),
        "shipped":    frozenset({"delivered", "cancelled"}),
        "delivered":  frozenset(),
        "cancelled":  frozenset(),
    },
}


def is_allowed(current: str, requested: str, policy: str = ORDER_TRANSITION_POLICY) -> bool:
    if policy not in TRANSITION_POLICIES:
        raise ValueError(f"Unknown order transition policy: {policy}")
    if requested not in _ALL:
        return False
    if current == requested:
        return True
    return requested in TRANSITION_POLICIES[policy].get(current, frozenset())


def set_order_status(db: Session, order_id: int, status: str, policy: str = ORDER_TRANSITION_POLICY) -> Order:
    try:
        order = db.get(Order, order_id)
        if order is None:
            raise NotFoundError("Order", order_id)
        if not is_allowed(order.status, status, policy):
            raise InvalidTransitionError(order.status, status)

        previous = order.status
        order.status = status
        order.updated_at = datetime.utcnow()
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info(f"Order {order_id} status {previous} -> {status}")
    return order
