from fastapi import APIRouter

from preference_service.core.auth import AuthenticationFailedException, CurrentUserDep
from preference_service.core.exceptions import raises
from preference_service.features.preferences.errors import (
    PreferenceNotFoundException,
    PreferenceScopeNotEnabledException,
    PreferenceStorageException,
)
from preference_service.features.preferences.schemas import PreferenceKV
from preference_service.features.preferences.store import PreferenceStoreDep


router = APIRouter()


# Get user preference endpoint
# ----------------------------------------------------------------------------------------------------------------------


@raises(PreferenceNotFoundException)
@raises(PreferenceScopeNotEnabledException)
@raises(PreferenceStorageException)
@raises(AuthenticationFailedException)
@router.get("/user/{preference_id}")
async def get_user_preference(
    preference_id: str, current_user: CurrentUserDep, store: PreferenceStoreDep
) -> PreferenceKV:
    """
    Get the effective value of a preference for the current user.
    The user's own value wins over the organization's value, which wins over the default.
    """
    return await store.get_user_preference(current_user, preference_id)
