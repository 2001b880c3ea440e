# backend/schemas/admin.py
from typing import Optional, Literal, Dict, Any
from datetime import datetime
from pydantic import BaseModel, constr

OrderStatus = Literal["pending", "processing", "shipped", "delivered", "cancelled"]
UserStatusFilter = Literal["verified", "unverified"]
DashboardTheme = Literal["light", "dark", "auto"]

# ---------- approvals ----------

class ApprovalUpdate(BaseModel):
    is_approved: bool
    reason: Optional[constr(max_length=500)] = None

class ApprovalResponse(BaseModel):
    message: str
    is_approved: bool

# ---------- users ----------

class UserStatusUpdate(BaseModel):
    is_verified: bool

class UserStatusResponse(BaseModel):
    message: str
    is_verified: bool

class AdminUserOut(BaseModel):
    id: int
    first_name: str
    last_name: str
    email: str
    phone: Optional[str] = None
    role: str
    is_verified: bool
    last_login: Optional[datetime] = None
    created_at: datetime
    business_name: Optional[str] = None
    producer_approved: Optional[bool] = None

# ---------- orders ----------

class OrderStatusUpdate(BaseModel):
    status: OrderStatus

class OrderStatusResponse(BaseModel):
    message: str
    status: OrderStatus

# ---------- settings / preferences ----------

class SettingsUpdate(BaseModel):
    platform: Optional[Dict[str, Any]] = None
    fees: Optional[Dict[str, Any]] = None
    limits: Optional[Dict[str, Any]] = None
    notifications: Optional[Dict[str, Any]] = None

class PreferencesUpdate(BaseModel):
    email_notifications: Optional[bool] = None
    dashboard_theme: Optional[DashboardTheme] = None
    timezone: Optional[str] = None

class MessageResponse(BaseModel):
    message: str

# ---------- dashboard ----------

class Notification(BaseModel):
    id: int
    type: str
    count: int
    message: str
    title: Optional[str] = None
    priority: Optional[str] = None
    timestamp: Optional[datetime] = None

class PendingStats(BaseModel):
    pending_producers: int
    pending_products: int
    pending_orders: int
    timestamp: datetime

class RealtimeStats(BaseModel):
    new_users_today: int
    orders_today: int
    revenue_today: float
    pending_producers: int
    pending_products: int
    active_users_now: int = 0
    timestamp: datetime

class Activity(BaseModel):
    type: str
    description: str
    created_at: datetime
    reference_id: int

class HealthMetrics(BaseModel):
    users: int
    orders: int
    products: int

class HealthResponse(BaseModel):
    status: str
    database: str
    metrics: HealthMetrics
    timestamp: datetime

