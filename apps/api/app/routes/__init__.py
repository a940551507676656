"""Route modules."""

from .admin import router as admin_router
from .claims import router as claims_router
from .documents import router as documents_router
from .health import router as health_router
from .messages import router as messages_router
from .payments import router as payments_router
from .policies import router as policies_router
from .users import router as users_router

__all__ = [
    "admin_router",
    "claims_router",
    "documents_router",
    "health_router",
    "messages_router",
    "payments_router",
    "policies_router",
    "users_router",
]
