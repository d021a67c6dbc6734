from fastapi import APIRouter

from preference_service.core.auth import AuthenticationFailedException, CurrentUserDep
from preference_service.core.exceptions import raises
from preference_service.features.preferences.errors import PreferenceStorageException
from preference_service.features.preferences.schemas import GroupNode
from preference_service.features.preferences.store import PreferenceStoreDep


router = APIRouter()


# List org preferences endpoint
# ----------------------------------------------------------------------------------------------------------------------


@raises(PreferenceStorageException)
@raises(AuthenticationFailedException)
@router.get("/org")
async def list_org_preferences(current_user: CurrentUserDep, store: PreferenceStoreDep) -> list[GroupNode] | None:
    """
    List all org scoped preferences with the values of the current user's organization, nested by group.
    Responds with null when no preference is enabled for org scope.
    """
    return await store.list_org_preferences(current_user)
