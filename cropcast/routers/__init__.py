from cropcast.routers.auth import router as auth_router
from cropcast.routers.farms import router as farms_router
from cropcast.routers.fields import router as fields_router
from cropcast.routers.crops import router as crops_router
from cropcast.routers.reminders import router as reminders_router
from cropcast.routers.profile import router as profile_router
from cropcast.routers.chat import router as chat_router
from cropcast.routers.dashboard import router as dashboard_router
from cropcast.routers.functions import router as functions_router

__all__ = [
    "auth_router", "farms_router", "fields_router", "crops_router", "reminders_router",
    "profile_router", "chat_router", "dashboard_router", "functions_router",
]
