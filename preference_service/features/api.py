from fastapi import APIRouter

from preference_service.features.preferences.api import admin_preferences_router, common_preferences_router


router = APIRouter()

router.include_router(common_preferences_router)
router.include_router(admin_preferences_router)
