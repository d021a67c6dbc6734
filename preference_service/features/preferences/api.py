from fastapi import APIRouter

from preference_service.features.preferences.services.common import (
    get_org_preference,
    get_user_preference,
    list_org_preferences,
    list_user_preferences,
    update_user_preference,
)
from preference_service.features.preferences.services.admin import update_org_preference


common_preferences_router = APIRouter(prefix="/api/v1/common/preferences", tags=["Preferences"])
common_preferences_router.include_router(list_user_preferences.router)
common_preferences_router.include_router(get_user_preference.router)
common_preferences_router.include_router(update_user_preference.router)
common_preferences_router.include_router(list_org_preferences.router)
common_preferences_router.include_router(get_org_preference.router)

admin_preferences_router = APIRouter(prefix="/api/v1/admin/preferences", tags=["Preferences"])
admin_preferences_router.include_router(update_org_preference.router)
