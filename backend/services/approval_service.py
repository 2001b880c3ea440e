# backend/services/approval_service.py
"""
Approval workflow for producers and products.

A producer profile and each product start PENDING (is_approved = false) and
are moved to APPROVED or REJECTED by an admin. Approving a producer also
approves every product it owns, in the same transaction as the profile update.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Dict, Any

from sqlalchemy.orm import Session

from config.settings import PRODUCER_REJECTION_POLICY
from models.producer_profile_model import ProducerProfile
from models.product_model import Product
from services.exceptions import NotFoundError

logger = logging.getLogger(__name__)

REJECTION_POLICIES = ("retain", "revoke")


@dataclass
class ApprovalResult:
    message: str
    is_approved: bool
    activity: Optional[Dict[str, Any]] = None
    cascaded: int = 0


def _activity(kind: str, description: str, reference_id: int) -> Dict[str, Any]:
    return {
        "type": kind,
        "description": description,
        "created_at": datetime.utcnow(),
        "reference_id": reference_id,
    }


def set_producer_approval(
    db: Session,
    producer_id: int,
    approved: bool,
    reason: Optional[str] = None,
    rejection_policy: str = PRODUCER_REJECTION_POLICY,
) -> ApprovalResult:
    if rejection_policy not in REJECTION_POLICIES:
        raise ValueError(f"Unknown producer rejection policy: {rejection_policy}")

    now = datetime.utcnow()
    try:
        producer = db.get(ProducerProfile, producer_id)
        if producer is None:
            raise NotFoundError("Producer", producer_id)

        producer.is_approved = approved
        producer.updated_at = now
        db.flush()

        cascaded = 0
        if approved:
            cascaded = (
                db.query(Product)
                .filter(Product.producer_id == producer_id, Product.is_approved.is_(False))
                .update({Product.is_approved: True, Product.updated_at: now}, synchronize_session=False)
            )
        elif rejection_policy == "revoke":
            cascaded = (
                db.query(Product)
                .filter(Product.producer_id == producer_id, Product.is_approved.is_(True))
                .update({Product.is_approved: False, Product.updated_at: now}, synchronize_session=False)
            )

        business_name = producer.business_name
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info(
        f"Producer {producer_id} {'approved' if approved else 'rejected'} "
        f"({cascaded} products updated, reason={reason!r})"
    )
    return ApprovalResult(
        message=f"Producer {'approved' if approved else 'rejected'} successfully",
        is_approved=approved,
        activity=_activity("producer_approval", f"Producer approved: {business_name}", producer_id) if approved else None,
        cascaded=cascaded,
    )


def set_product_approval(
    db: Session,
    product_id: int,
    approved: bool,
    reason: Optional[str] = None,
) -> ApprovalResult:
    try:
        product = db.get(Product, product_id)
        if product is None:
            raise NotFoundError("Product", product_id)

        # no ordering constraint against the owning producer's approval
        product.is_approved = approved
        product.updated_at = datetime.utcnow()
        name = product.name
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info(f"Product {product_id} {'approved' if approved else 'rejected'} (reason={reason!r})")
    return ApprovalResult(
        message=f"Product {'approved' if approved else 'rejected'} successfully",
        is_approved=approved,
        activity=_activity("product_approval", f"Product approved: {name}", product_id) if approved else None,
    )
