from preference_service.features.users.models.organization import Organization
from preference_service.features.users.models.user import User

__all__ = [
    "Organization",
    "User",
]
