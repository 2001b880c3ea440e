# backend/schemas/__init__.py

# auth
from .users import LoginPayload, LoginResponse, UserOut

# admin surface
from .admin import (
    OrderStatus, ApprovalUpdate, ApprovalResponse,
    UserStatusUpdate, UserStatusResponse, AdminUserOut,
    OrderStatusUpdate, OrderStatusResponse,
    SettingsUpdate, PreferencesUpdate, MessageResponse,
    Notification, PendingStats, RealtimeStats, Activity,
    HealthMetrics, HealthResponse,
)

__all__ = [
    # auth
    "LoginPayload", "LoginResponse", "UserOut",
    # admin
    "OrderStatus", "ApprovalUpdate", "ApprovalResponse",
    "UserStatusUpdate", "UserStatusResponse", "AdminUserOut",
    "OrderStatusUpdate", "OrderStatusResponse",
    "SettingsUpdate", "PreferencesUpdate", "MessageResponse",
    "Notification", "PendingStats", "RealtimeStats", "Activity",
    "HealthMetrics", "HealthResponse",
]
