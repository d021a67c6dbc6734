from preference_service.features.users.models import Organization, User
from preference_service.features.preferences.models import OrgPreference, Preference, PreferenceGroup, UserPreference

__all__ = [
    "Organization",
    "User",
    "Preference",
    "PreferenceGroup",
    "UserPreference",
    "OrgPreference",
]
