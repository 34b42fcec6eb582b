from notevault.web.routers.auth import router as auth_router
from notevault.web.routers.export import router as export_router
from notevault.web.routers.notes import router as notes_router
from notevault.web.routers.profile import router as profile_router

__all__ = [
    "auth_router",
    "export_router",
    "notes_router",
    "profile_router",
]
