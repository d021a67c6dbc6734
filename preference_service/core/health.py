import logging
from fastapi import APIRouter
from pydantic import BaseModel
from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError

from preference_service.core.database import DbDep
from preference_service.core.exceptions import ServiceException, raises
from preference_service.features.preferences.models import Preference, PreferenceGroup

logger = logging.getLogger(__name__)

router = APIRouter()

# Input/Output models
# ----------------------------------------------------------------------------------------------------------------------


class HealthCheckResponseModel(BaseModel):
    status: str = "ok"
    preference_definitions: int
    preference_groups: int


# Exceptions
# ----------------------------------------------------------------------------------------------------------------------


class ServiceUnavailableException(ServiceException):
    status_code = 503
    type = "core/health/service-unavailable"
    detail = "Service Unavailable"


class PreferencesNotInitializedException(ServiceException):
    status_code = 503
    type = "core/health/preferences-not-initialized"
    detail = "No preference definitions are stored, the schema bootstrap has not run"


# Endpoint
# ----------------------------------------------------------------------------------------------------------------------


@raises(ServiceUnavailableException)
@raises(PreferencesNotInitializedException)
@router.get("/health", tags=["Health"])
async def health_check(db: DbDep) -> HealthCheckResponseModel:
    """
    Verify the preference tables are reachable and seeded.
    Without definitions every preference read would fail with not found, so that is reported as unavailable too.
    """
    try:
        definitions = (await db.execute(select(func.count()).select_from(Preference))).scalar_one()
        groups = (await db.execute(select(func.count()).select_from(PreferenceGroup))).scalar_one()
    except SQLAlchemyError as e:
        logger.error("Health check failed", exc_info=e)
        raise ServiceUnavailableException() from e

    if definitions == 0:
        logger.warning("Health check found no preference definitions")
        raise PreferencesNotInitializedException()
    return HealthCheckResponseModel(preference_definitions=definitions, preference_groups=groups)
