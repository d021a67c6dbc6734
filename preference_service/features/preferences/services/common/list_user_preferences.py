from fastapi import APIRouter

from preference_service.core.auth import AuthenticationFailedException, CurrentUserDep
from preference_service.core.exceptions import raises
from preference_service.features.preferences.errors import PreferenceStorageException
from preference_service.features.preferences.schemas import GroupNode
from preference_service.features.preferences.store import PreferenceStoreDep


router = APIRouter()


# List user preferences endpoint
# ----------------------------------------------------------------------------------------------------------------------


@raises(PreferenceStorageException)
@raises(AuthenticationFailedException)
@router.get("/user")
async def list_user_preferences(current_user: CurrentUserDep, store: PreferenceStoreDep) -> list[GroupNode] | None:
    """
    List all user scoped preferences with the values the current user sees, nested by preference group.
    Responds with null when no preference is enabled for user scope.
    """
    return await store.list_user_preferences(current_user)
