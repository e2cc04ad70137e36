"""
CRM - Models Package

Request/response shapes for every resource.
from crm_backend.models import CustomerCreate, SaleCreate, etc.
"""

from .auth import (
    UserLogin,
    UserCreate,
    UserUpdate,
    ProfileUpdate,
    PasswordChange,
    AgentCreate,
    AgentUpdate,
    UserResponse,
    public_user,
)

from .customer import (
    CustomerCreate,
    CustomerUpdate,
    CustomerResponse,
    validate_customer_create,
    validate_customer_update,
)

from .sale import (
    SaleStatus,
    SaleCreate,
    SaleUpdate,
    SaleResponse,
    validate_sale_create,
)

from .payment import (
    PaymentMethod,
    PaymentStatus,
    PaymentCreate,
    PaymentUpdate,
    validate_payment_create,
)

from .revenue import (
    RevenueCreate,
    RevenueUpdate,
    validate_revenue_create,
)

from .target import (
    TargetPeriod,
    TargetStatus,
    VALID_TARGET_TRANSITIONS,
    TargetCreate,
    TargetUpdate,
    validate_target_create,
    validate_target_transition,
    is_date_order_valid,
)

from .performance import (
    PerformancePeriod,
    PerformanceCreate,
    PerformanceUpdate,
)

from .comment import (
    CommentCreate,
    CommentUpdate,
    validate_comment_create,
)

from .audit_log import (
    AuditLogCreate,
    validate_audit_log_create,
)

from .notification import (
    NotificationType,
    NotificationCreate,
    validate_notification_create,
)

from .settings import (
    SettingsUpdate,
)

__all__ = [
    # Auth
    "UserLogin",
    "UserCreate",
    "UserUpdate",
    "ProfileUpdate",
    "PasswordChange",
    "AgentCreate",
    "AgentUpdate",
    "UserResponse",
    "public_user",
    # Customer
    "CustomerCreate",
    "CustomerUpdate",
    "CustomerResponse",
    "validate_customer_create",
    "validate_customer_update",
    # Sale
    "SaleStatus",
    "SaleCreate",
    "SaleUpdate",
    "SaleResponse",
    "validate_sale_create",
    # Payment
    "PaymentMethod",
    "PaymentStatus",
    "PaymentCreate",
    "PaymentUpdate",
    "validate_payment_create",
    # Revenue
    "RevenueCreate",
    "RevenueUpdate",
    "validate_revenue_create",
    # Target
    "TargetPeriod",
    "TargetStatus",
    "VALID_TARGET_TRANSITIONS",
    "TargetCreate",
    "TargetUpdate",
    "validate_target_create",
    "validate_target_transition",
    "is_date_order_valid",
    # Performance
    "PerformancePeriod",
    "PerformanceCreate",
    "PerformanceUpdate",
    # Comment
    "CommentCreate",
    "CommentUpdate",
    "validate_comment_create",
    # Audit log
    "AuditLogCreate",
    "validate_audit_log_create",
    # Notification
    "NotificationType",
    "NotificationCreate",
    "validate_notification_create",
    # Settings
    "SettingsUpdate",
]
