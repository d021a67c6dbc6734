from fastapi import APIRouter
from pydantic import BaseModel

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

# Input/Output
# ----------------------------------------------------------------------------------------------------------------------


class UpdateUserPreferenceInput(BaseModel):
    preference_value: str


# Update user preference endpoint
# ----------------------------------------------------------------------------------------------------------------------


@raises(PreferenceNotFoundException)
@raises(PreferenceScopeNotEnabledException)
@raises(PreferenceStorageException)
@raises(AuthenticationFailedException)
@router.put("/user/{preference_id}")
async def update_user_preference(
    preference_id: str, form: UpdateUserPreferenceInput, current_user: CurrentUserDep, store: PreferenceStoreDep
) -> PreferenceKV:
    """
    Set the current user's own value for a preference that is enabled at user scope.
    """
    return await store.set_user_preference(current_user, preference_id, form.preference_value)
