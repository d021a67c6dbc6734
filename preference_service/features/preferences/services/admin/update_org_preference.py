from fastapi import APIRouter
from pydantic import BaseModel

from preference_service.core.auth import AuthenticationFailedException, AuthorizationFailedException, CurrentAdminDep
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


class UpdateOrgPreferenceInput(BaseModel):
    preference_value: str


# Update org preference endpoint
# ----------------------------------------------------------------------------------------------------------------------


@raises(PreferenceNotFoundException)
@raises(PreferenceScopeNotEnabledException)
@raises(PreferenceStorageException)
@raises(AuthenticationFailedException)
@raises(AuthorizationFailedException)
@router.put("/org/{preference_id}")
async def update_org_preference(
    preference_id: str, form: UpdateOrgPreferenceInput, current_user: CurrentAdminDep, store: PreferenceStoreDep
) -> PreferenceKV:
    """
    Set the organization wide value for a preference that is enabled at org scope.
    Users without a value of their own will see this value. Only organization administrators can do this.
    """
    return await store.set_org_preference(current_user, preference_id, form.preference_value)
