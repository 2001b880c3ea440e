# backend/queries/admin_queries.py
"""
Read-only dashboard queries for the admin surface.

Every figure is derived live from the store on each call; nothing here keeps
counters between requests. Time windows are computed in UTC on the Python side
so the same SQL runs on MySQL and SQLite.
"""

from datetime import datetime, timedelta
from typing import List, Optional, Dict, Any, Tuple

from sqlalchemy import func, or_, case, select, text
from sqlalchemy.orm import Session, joinedload, contains_eager, selectinload

from models.user_model import User
from models.producer_profile_model import ProducerProfile
from models.category_model import Category
from models.product_model import Product
from models.order_model import Order
from models.order_item_model import OrderItem
from models.payment_model import Payment

NEW_ORDERS_WINDOW = timedelta(hours=1)
ACTIVITY_WINDOW = timedelta(hours=24)
TOP_N = 10
RECENT_N = 10


def _day_bounds(now: datetime) -> Tuple[datetime, datetime]:
    start = datetime(now.year, now.month, now.day)
    return start, start + timedelta(days=1)


def _count(db: Session, column, *criteria) -> int:
    q = db.query(func.count(column))
    if criteria:
        q = q.filter(*criteria)
    return int(q.scalar() or 0)


def _num(value) -> Optional[float]:
    return float(value) if value is not None else None


# ---------- row helpers ----------

def _user_row(u: User) -> Dict[str, Any]:
    return {
        "id": u.id,
        "first_name": u.first_name,
        "last_name": u.last_name,
        "email": u.email,
        "phone": u.phone,
        "role": u.role,
        "is_verified": u.is_verified,
        "last_login": u.last_login,
        "created_at": u.created_at,
    }


def _order_row(o: Order) -> Dict[str, Any]:
    return {
        "id": o.id,
        "customer_id": o.customer_id,
        "producer_id": o.producer_id,
        "status": o.status,
        "total_amount": _num(o.total_amount),
        "created_at": o.created_at,
        "updated_at": o.updated_at,
        "first_name": o.customer.first_name if o.customer else None,
        "last_name": o.customer.last_name if o.customer else None,
        "business_name": o.producer.business_name if o.producer else None,
    }


def _product_row(p: Product) -> Dict[str, Any]:
    return {
        "id": p.id,
        "producer_id": p.producer_id,
        "category_id": p.category_id,
        "name": p.name,
        "description": p.description,
        "price": _num(p.price),
        "stock_quantity": p.stock_quantity,
        "is_available": p.is_available,
        "is_approved": p.is_approved,
        "created_at": p.created_at,
        "updated_at": p.updated_at,
    }


# ---------- overview ----------

def get_overview(db: Session) -> Dict[str, Any]:
    counts = {
        "users": _count(db, User.id),
        "producers": _count(db, ProducerProfile.id, ProducerProfile.is_approved.is_(True)),
        "products": _count(db, Product.id, Product.is_available.is_(True), Product.is_approved.is_(True)),
        "orders": _count(db, Order.id),
        "payments": _count(db, Payment.id, Payment.status == "completed"),
    }

    # 'completed' is not one of the order statuses the admin can set; kept as the
    # revenue filter so existing data imported with that status is still counted
    total_revenue, avg_order_value, total_orders = (
        db.query(func.sum(Order.total_amount), func.avg(Order.total_amount), func.count(Order.id))
        .filter(Order.status == "completed")
        .one()
    )

    recent_orders = (
        db.query(Order)
        .options(joinedload(Order.customer), joinedload(Order.producer))
        .order_by(Order.created_at.desc(), Order.id.desc())
        .limit(RECENT_N)
        .all()
    )
    recent_users = db.query(User).order_by(User.created_at.desc(), User.id.desc()).limit(RECENT_N).all()

    return {
        "counts": counts,
        "revenue": {
            "total_revenue": _num(total_revenue),
            "avg_order_value": _num(avg_order_value),
            "total_orders": int(total_orders or 0),
        },
        "recentActivity": {
            "orders": [_order_row(o) for o in recent_orders],
            "users": [_user_row(u) for u in recent_users],
        },
    }


# ---------- approval queues ----------

def list_pending_producers(db: Session) -> List[Dict[str, Any]]:
    rows = (
        db.query(ProducerProfile, User)
        .join(User, ProducerProfile.user_id == User.id)
        .filter(ProducerProfile.is_approved.is_(False))
        .order_by(User.created_at.asc(), ProducerProfile.id.asc())
        .all()
    )
    return [
        {
            "id": pp.id,
            "user_id": pp.user_id,
            "business_name": pp.business_name,
            "description": pp.description,
            "is_approved": pp.is_approved,
            "updated_at": pp.updated_at,
            "first_name": u.first_name,
            "last_name": u.last_name,
            "email": u.email,
            "phone": u.phone,
            "created_at": u.created_at,
        }
        for pp, u in rows
    ]


def list_pending_products(db: Session) -> List[Dict[str, Any]]:
    rows = (
        db.query(Product, Category.name, ProducerProfile.business_name, User.first_name, User.last_name)
        .outerjoin(Category, Product.category_id == Category.id)
        .join(ProducerProfile, Product.producer_id == ProducerProfile.id)
        .join(User, ProducerProfile.user_id == User.id)
        .filter(Product.is_approved.is_(False))
        .order_by(Product.created_at.asc(), Product.id.asc())
        .all()
    )
    out = []
    for p, category_name, producer_name, first_name, last_name in rows:
        row = _product_row(p)
        row.update(
            category_name=category_name,
            producer_name=producer_name,
            first_name=first_name,
            last_name=last_name,
        )
        out.append(row)
    return out


# ---------- users / orders / payments ----------

def list_users(
    db: Session,
    role: Optional[str] = None,
    status: Optional[str] = None,
    page: int = 1,
    limit: int = 20,
) -> List[Dict[str, Any]]:
    q = (
        db.query(User, ProducerProfile.business_name, ProducerProfile.is_approved)
        .outerjoin(ProducerProfile, ProducerProfile.user_id == User.id)
    )
    if role:
        q = q.filter(User.role == role)
    if status == "verified":
        q = q.filter(User.is_verified.is_(True))
    elif status == "unverified":
        q = q.filter(User.is_verified.is_(False))

    rows = (
        q.order_by(User.created_at.desc(), User.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    out = []
    for u, business_name, producer_approved in rows:
        row = _user_row(u)
        row.update(business_name=business_name, producer_approved=producer_approved)
        out.append(row)
    return out


def set_user_verified(db: Session, user_id: int, verified: bool) -> bool:
    """Returns False when no row matched."""
    try:
        updated = (
            db.query(User)
            .filter(User.id == user_id)
            .update({User.is_verified: verified}, synchronize_session=False)
        )
        db.commit()
    except Exception:
        db.rollback()
        raise
    return updated > 0


def list_orders(
    db: Session,
    status: Optional[str] = None,
    search: Optional[str] = None,
    page: int = 1,
    limit: int = 20,
) -> List[Dict[str, Any]]:
    q = (
        db.query(Order)
        .join(User, Order.customer_id == User.id)
        .join(ProducerProfile, Order.producer_id == ProducerProfile.id)
        .options(
            contains_eager(Order.customer),
            contains_eager(Order.producer),
            selectinload(Order.items).joinedload(OrderItem.product),
        )
    )
    if status:
        q = q.filter(Order.status == status)
    if search:
        like = f"%{search}%"
        q = q.filter(or_(
            User.first_name.ilike(like),
            User.last_name.ilike(like),
            User.email.ilike(like),
            ProducerProfile.business_name.ilike(like),
        ))

    orders = (
        q.order_by(Order.created_at.desc(), Order.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    out = []
    for o in orders:
        row = _order_row(o)
        names = [it.product.name for it in o.items if it.product is not None]
        row.update(
            email=o.customer.email,
            producer_name=o.producer.business_name,
            item_count=len(o.items),
            product_names=", ".join(names) if names else None,
        )
        out.append(row)
    return out


def get_payment_stats(db: Session) -> Dict[str, Any]:
    total, revenue, pending, failed, avg_payment = db.query(
        func.count(Payment.id),
        func.sum(case((Payment.status == "completed", Payment.amount), else_=0)),
        func.sum(case((Payment.status == "pending", Payment.amount), else_=0)),
        func.sum(case((Payment.status == "failed", Payment.amount), else_=0)),
        func.avg(case((Payment.status == "completed", Payment.amount), else_=None)),
    ).one()

    recent = (
        db.query(Payment, User.first_name, User.last_name)
        .join(Order, Payment.order_id == Order.id)
        .join(User, Order.customer_id == User.id)
        .order_by(Payment.created_at.desc(), Payment.id.desc())
        .limit(RECENT_N)
        .all()
    )
    return {
        "stats": {
            "total_payments": int(total or 0),
            "total_revenue": _num(revenue),
            "pending_amount": _num(pending),
            "failed_amount": _num(failed),
            "avg_payment": _num(avg_payment),
        },
        "recent": [
            {
                "id": p.id,
                "order_id": p.order_id,
                "amount": _num(p.amount),
                "status": p.status,
                "created_at": p.created_at,
                "first_name": first_name,
                "last_name": last_name,
            }
            for p, first_name, last_name in recent
        ],
    }


# ---------- pending counts / notifications ----------

def get_pending_stats(db: Session, now: Optional[datetime] = None) -> Dict[str, Any]:
    # unbounded pending-orders count, unlike the one-hour notification window
    return {
        "pending_producers": _count(db, ProducerProfile.id, ProducerProfile.is_approved.is_(False)),
        "pending_products": _count(db, Product.id, Product.is_approved.is_(False)),
        "pending_orders": _count(db, Order.id, Order.status == "pending"),
        "timestamp": now or datetime.utcnow(),
    }


def get_notification_counts(db: Session, now: Optional[datetime] = None) -> Dict[str, int]:
    now = now or datetime.utcnow()
    return {
        "pending_producers": _count(db, ProducerProfile.id, ProducerProfile.is_approved.is_(False)),
        "pending_products": _count(db, Product.id, Product.is_approved.is_(False)),
        "new_orders": _count(db, Order.id, Order.status == "pending", Order.created_at >= now - NEW_ORDERS_WINDOW),
    }


_NOTIFICATION_TEMPLATES = (
    (1, "producer_approval", "pending_producers", "Producer Approvals Needed", "{} producers awaiting approval", "high"),
    (2, "product_approval", "pending_products", "Product Reviews Needed", "{} products awaiting review", "medium"),
    (3, "new_orders", "new_orders", "New Orders", "{} new orders in the last hour", "normal"),
)


def build_notifications(
    counts: Dict[str, int],
    detailed: bool = False,
    now: Optional[datetime] = None,
) -> List[Dict[str, Any]]:
    """Turn pending counts into notification objects, dropping zero counts."""
    now = now or datetime.utcnow()
    out = []
    for nid, kind, key, title, template, priority in _NOTIFICATION_TEMPLATES:
        count = int(counts.get(key, 0))
        if count <= 0:
            continue
        item = {"id": nid, "type": kind, "count": count, "message": template.format(count)}
        if detailed:
            item.update(title=title, priority=priority, timestamp=now)
        out.append(item)
    return out


def get_realtime_stats(db: Session, now: Optional[datetime] = None) -> Dict[str, Any]:
    now = now or datetime.utcnow()
    start, end = _day_bounds(now)

    new_users_today = (
        select(func.count(User.id))
        .where(User.created_at >= start, User.created_at < end)
        .scalar_subquery()
    )
    orders_today = (
        select(func.count(Order.id))
        .where(Order.created_at >= start, Order.created_at < end)
        .scalar_subquery()
    )
    revenue_today = (
        select(func.coalesce(func.sum(Order.total_amount), 0))
        .where(Order.created_at >= start, Order.created_at < end)
        .scalar_subquery()
    )
    pending_producers = (
        select(func.count(ProducerProfile.id))
        .where(ProducerProfile.is_approved.is_(False))
        .scalar_subquery()
    )
    pending_products = (
        select(func.count(Product.id))
        .where(Product.is_approved.is_(False))
        .scalar_subquery()
    )
    row = db.execute(select(
        new_users_today.label("new_users_today"),
        orders_today.label("orders_today"),
        revenue_today.label("revenue_today"),
        pending_producers.label("pending_producers"),
        pending_products.label("pending_products"),
    )).one()

    return {
        "new_users_today": int(row.new_users_today or 0),
        "orders_today": int(row.orders_today or 0),
        "revenue_today": float(row.revenue_today or 0),
        "pending_producers": int(row.pending_producers or 0),
        "pending_products": int(row.pending_products or 0),
        "active_users_now": _count(db, User.id, User.last_login >= now - ACTIVITY_WINDOW),
        "timestamp": now,
    }


# ---------- analytics ----------

def get_analytics(db: Session, period_days: int = 30, now: Optional[datetime] = None) -> Dict[str, Any]:
    end = now or datetime.utcnow()
    start = end - timedelta(days=period_days)
    in_window = (Order.created_at >= start, Order.created_at <= end)

    day = func.date(Order.created_at).label("date")
    trends = (
        db.query(day, func.count(Order.id), func.sum(Order.total_amount))
        .filter(*in_window)
        .group_by(day)
        .order_by(func.date(Order.created_at).asc())
        .all()
    )

    product_orders = func.count(OrderItem.id).label("order_count")
    top_products = (
        db.query(Product.id, Product.name, Category.name.label("category"), product_orders, func.sum(OrderItem.quantity))
        .select_from(Product)
        .join(OrderItem, OrderItem.product_id == Product.id)
        .join(Order, OrderItem.order_id == Order.id)
        .outerjoin(Category, Product.category_id == Category.id)
        .filter(*in_window)
        .group_by(Product.id, Product.name, Category.name)
        .order_by(product_orders.desc(), Product.id.asc())
        .limit(TOP_N)
        .all()
    )

    producer_revenue = func.sum(Order.total_amount).label("total_revenue")
    top_producers = (
        db.query(ProducerProfile.id, ProducerProfile.business_name, func.count(Order.id), producer_revenue)
        .select_from(ProducerProfile)
        .join(Order, Order.producer_id == ProducerProfile.id)
        .filter(*in_window)
        .group_by(ProducerProfile.id, ProducerProfile.business_name)
        .order_by(producer_revenue.desc(), ProducerProfile.id.asc())
        .limit(TOP_N)
        .all()
    )

    return {
        "period": period_days,
        "orderTrends": [
            {"date": str(d), "order_count": int(c), "daily_revenue": _num(r)}
            for d, c, r in trends
        ],
        "topProducts": [
            {"id": pid, "name": name, "category": category, "order_count": int(c), "total_quantity": int(q or 0)}
            for pid, name, category, c, q in top_products
        ],
        "topProducers": [
            {"id": pid, "business_name": name, "order_count": int(c), "total_revenue": _num(r)}
            for pid, name, c, r in top_producers
        ],
    }


# ---------- activity feed ----------

def get_recent_activity(db: Session, limit: int = 20, now: Optional[datetime] = None) -> List[Dict[str, Any]]:
    since = (now or datetime.utcnow()) - ACTIVITY_WINDOW
    activities: List[Dict[str, Any]] = []

    for u in (
        db.query(User).filter(User.created_at >= since)
        .order_by(User.created_at.desc()).limit(5)
    ):
        activities.append({
            "type": "user_registration",
            "description": f"New user registered: {u.first_name} {u.last_name}",
            "created_at": u.created_at,
            "reference_id": u.id,
        })

    for pp in (
        db.query(ProducerProfile)
        .filter(ProducerProfile.is_approved.is_(True), ProducerProfile.updated_at >= since)
        .order_by(ProducerProfile.updated_at.desc()).limit(5)
    ):
        activities.append({
            "type": "producer_approval",
            "description": f"Producer approved: {pp.business_name}",
            "created_at": pp.updated_at,
            "reference_id": pp.id,
        })

    for p in (
        db.query(Product)
        .filter(Product.is_approved.is_(True), Product.updated_at >= since)
        .order_by(Product.updated_at.desc()).limit(5)
    ):
        activities.append({
            "type": "product_approval",
            "description": f"Product approved: {p.name}",
            "created_at": p.updated_at,
            "reference_id": p.id,
        })

    for o, first_name, last_name in (
        db.query(Order, User.first_name, User.last_name)
        .join(User, Order.customer_id == User.id)
        .filter(Order.created_at >= since)
        .order_by(Order.created_at.desc()).limit(10)
    ):
        activities.append({
            "type": "order_placed",
            "description": f"New order #{o.id} placed by {first_name} {last_name}",
            "created_at": o.created_at,
            "reference_id": o.id,
        })

    for o in (
        db.query(Order)
        .filter(Order.updated_at.isnot(None), Order.updated_at >= since, Order.updated_at != Order.created_at)
        .order_by(Order.updated_at.desc()).limit(5)
    ):
        activities.append({
            "type": "order_status_change",
            "description": f"Order #{o.id} marked as {o.status}",
            "created_at": o.updated_at,
            "reference_id": o.id,
        })

    activities.sort(key=lambda a: a["created_at"], reverse=True)
    return activities[:limit]


# ---------- health ----------

def get_health_metrics(db: Session) -> Dict[str, Any]:
    ping = db.execute(text("SELECT 1")).scalar()
    return {
        "database": "connected" if ping == 1 else "disconnected",
        "metrics": {
            "users": _count(db, User.id),
            "orders": _count(db, Order.id),
            "products": _count(db, Product.id),
        },
    }
