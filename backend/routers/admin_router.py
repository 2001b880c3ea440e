# backend/routers/admin_router.py
import logging
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Query
from fastapi.responses import JSONResponse
from fastapi.encoders import jsonable_encoder
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from database.session import get_db
from models.user_model import User
from queries import admin_queries
from routers.dependencies import get_broadcaster, require_admin
from schemas.admin import (
    ApprovalUpdate, ApprovalResponse,
    UserStatusFilter, UserStatusUpdate, UserStatusResponse, AdminUserOut,
    OrderStatusUpdate, OrderStatusResponse,
    SettingsUpdate, PreferencesUpdate, MessageResponse,
    Notification, PendingStats, RealtimeStats, Activity, HealthResponse,
)
from services.approval_service import set_producer_approval, set_product_approval
from services.broadcaster import Broadcaster, ADMIN_GROUP
from services.exceptions import NotFoundError, InvalidTransitionError
from services.order_status import set_order_status

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["admin"], dependencies=[Depends(require_admin)])

# Static until a settings table exists; PUT validates and acknowledges only
PLATFORM_SETTINGS = {
    "platform": {
        "name": "Harvest Hub",
        "description": "Digital Farmers Market Platform",
        "email": "admin@harvesthub.com",
        "phone": "+1-555-0123",
        "maintenance_mode": False,
    },
    "fees": {
        "platform_fee_percentage": 5.0,
        "payment_processing_fee": 2.9,
        "minimum_order_amount": 10.00,
    },
    "limits": {
        "max_products_per_producer": 100,
        "max_order_items": 50,
        "max_file_size_mb": 10,
    },
    "notifications": {
        "email_notifications": True,
        "sms_notifications": False,
        "push_notifications": True,
    },
}

# Echoed by GET /profile; PUT /preferences is not persisted either
DEFAULT_PREFERENCES = {
    "email_notifications": True,
    "dashboard_theme": "light",
    "timezone": "UTC-5",
}


def _server_error(what: str) -> HTTPException:
    logger.exception(f"Admin {what} failed")
    return HTTPException(status_code=500, detail=f"Server error {what}")

# ---------- overview ----------

@router.get("/overview")
def get_overview(db: Session = Depends(get_db)):
    try:
        return admin_queries.get_overview(db)
    except SQLAlchemyError:
        raise _server_error("getting admin overview")

# ---------- producers ----------

@router.get("/producers/pending")
def get_pending_producers(db: Session = Depends(get_db)):
    try:
        return admin_queries.list_pending_producers(db)
    except SQLAlchemyError:
        raise _server_error("getting pending producers")

@router.patch("/producers/{producer_id}/approval", response_model=ApprovalResponse)
def update_producer_approval(
    producer_id: int,
    body: ApprovalUpdate,
    bg: BackgroundTasks,
    db: Session = Depends(get_db),
    broadcaster: Broadcaster = Depends(get_broadcaster),
):
    try:
        result = set_producer_approval(db, producer_id, body.is_approved, body.reason)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except SQLAlchemyError:
        raise _server_error("updating producer approval")

    # activity goes out after the commit, only for approvals
    if result.activity:
        bg.add_task(broadcaster.publish, ADMIN_GROUP, "activityUpdate", result.activity)
    return ApprovalResponse(message=result.message, is_approved=result.is_approved)

# ---------- products ----------

@router.get("/products/pending")
def get_pending_products(db: Session = Depends(get_db)):
    try:
        return admin_queries.list_pending_products(db)
    except SQLAlchemyError:
        raise _server_error("getting pending products")

@router.patch("/products/{product_id}/approval", response_model=ApprovalResponse)
def update_product_approval(
    product_id: int,
    body: ApprovalUpdate,
    bg: BackgroundTasks,
    db: Session = Depends(get_db),
    broadcaster: Broadcaster = Depends(get_broadcaster),
):
    try:
        result = set_product_approval(db, product_id, body.is_approved, body.reason)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except SQLAlchemyError:
        raise _server_error("updating product approval")

    if result.activity:
        bg.add_task(broadcaster.publish, ADMIN_GROUP, "activityUpdate", result.activity)
    return ApprovalResponse(message=result.message, is_approved=result.is_approved)

# ---------- users ----------

@router.get("/users", response_model=List[AdminUserOut])
def get_users(
    role: Optional[str] = Query(default=None),
    status: Optional[UserStatusFilter] = Query(default=None),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=20, ge=1, le=100),
    db: Session = Depends(get_db),
):
    try:
        return admin_queries.list_users(db, role=role, status=status, page=page, limit=limit)
    except SQLAlchemyError:
        raise _server_error("getting users")

@router.patch("/users/{user_id}/status", response_model=UserStatusResponse)
def update_user_status(user_id: int, body: UserStatusUpdate, db: Session = Depends(get_db)):
    try:
        found = admin_queries.set_user_verified(db, user_id, body.is_verified)
    except SQLAlchemyError:
        raise _server_error("updating user status")
    if not found:
        raise HTTPException(status_code=404, detail="User not found")

    return UserStatusResponse(
        message=f"User {'verified' if body.is_verified else 'unverified'} successfully",
        is_verified=body.is_verified,
    )

# ---------- analytics / health ----------

@router.get("/analytics")
def get_analytics(period: int = Query(default=30, ge=1, le=3650), db: Session = Depends(get_db)):
    try:
        return admin_queries.get_analytics(db, period_days=period)
    except SQLAlchemyError:
        raise _server_error("getting analytics")

@router.get("/health", response_model=HealthResponse)
def get_system_health(db: Session = Depends(get_db)):
    try:
        health = admin_queries.get_health_metrics(db)
    except SQLAlchemyError:
        logger.exception("Admin system health check failed")
        return JSONResponse(status_code=500, content=jsonable_encoder({
            "status": "unhealthy",
            "error": "database unavailable",
            "timestamp": datetime.utcnow(),
        }))
    return {"status": "healthy", **health, "timestamp": datetime.utcnow()}

# ---------- orders / payments ----------

@router.get("/orders")
def get_orders(
    status: Optional[str] = Query(default=None),
    search: Optional[str] = Query(default=None),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=20, ge=1, le=100),
    db: Session = Depends(get_db),
):
    try:
        return admin_queries.list_orders(db, status=status, search=search, page=page, limit=limit)
    except SQLAlchemyError:
        raise _server_error("getting orders")

@router.patch("/orders/{order_id}/status", response_model=OrderStatusResponse)
def update_order_status(order_id: int, body: OrderStatusUpdate, db: Session = Depends(get_db)):
    try:
        set_order_status(db, order_id, body.status)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except InvalidTransitionError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except SQLAlchemyError:
        raise _server_error("updating order status")
    return OrderStatusResponse(message="Order status updated successfully", status=body.status)

@router.get("/payments/stats")
def get_payment_stats(db: Session = Depends(get_db)):
    try:
        return admin_queries.get_payment_stats(db)
    except SQLAlchemyError:
        raise _server_error("getting payment stats")

# ---------- settings / profile ----------

@router.get("/settings")
def get_settings():
    return PLATFORM_SETTINGS

@router.put("/settings", response_model=MessageResponse)
def update_settings(body: SettingsUpdate):
    sections = [name for name, value in body.model_dump().items() if value is not None]
    logger.info(f"Platform settings update received for sections: {sections}")
    return MessageResponse(message="Settings updated successfully")

@router.get("/profile")
def get_profile(admin: User = Depends(require_admin)):
    return {
        "id": admin.id,
        "first_name": admin.first_name,
        "last_name": admin.last_name,
        "email": admin.email,
        "phone": admin.phone,
        "role": admin.role,
        "created_at": admin.created_at,
        "last_login": admin.last_login,
        "preferences": dict(DEFAULT_PREFERENCES),
    }

@router.put("/preferences", response_model=MessageResponse)
def update_preferences(body: PreferencesUpdate, admin: User = Depends(require_admin)):
    logger.info(f"Admin {admin.id} preferences updated: {body.model_dump(exclude_none=True)}")
    return MessageResponse(message="Preferences updated successfully")

# ---------- dashboard polling fallbacks ----------

@router.get("/stats/realtime", response_model=RealtimeStats)
def get_realtime_stats(db: Session = Depends(get_db)):
    try:
        return admin_queries.get_realtime_stats(db)
    except SQLAlchemyError:
        raise _server_error("getting realtime stats")

@router.get("/notifications", response_model=List[Notification], response_model_exclude_none=True)
def get_notifications(db: Session = Depends(get_db)):
    try:
        counts = admin_queries.get_notification_counts(db)
    except SQLAlchemyError:
        raise _server_error("getting notifications")
    return admin_queries.build_notifications(counts, detailed=True)

@router.get("/recent-activity", response_model=List[Activity])
def get_recent_activity(limit: int = Query(default=20, ge=1, le=100), db: Session = Depends(get_db)):
    try:
        return admin_queries.get_recent_activity(db, limit=limit)
    except SQLAlchemyError:
        raise _server_error("getting recent activity")

@router.get("/pending-stats", response_model=PendingStats)
def get_pending_stats(db: Session = Depends(get_db)):
    try:
        return admin_queries.get_pending_stats(db)
    except SQLAlchemyError:
        raise _server_error("getting pending stats")
