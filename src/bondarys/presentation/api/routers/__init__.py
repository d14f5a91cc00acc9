from bondarys.presentation.api.routers.admin import router as admin_router
from bondarys.presentation.api.routers.auth import router as auth_router

__all__ = [
    "admin_router",
    "auth_router",
]
