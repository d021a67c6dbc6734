from preference_service.features.preferences.models.preference import OrgPreference, Preference, UserPreference
from preference_service.features.preferences.models.preference_group import PreferenceGroup

__all__ = [
    "Preference",
    "PreferenceGroup",
    "UserPreference",
    "OrgPreference",
]
