import factory

from preference_service.features.preferences.models import OrgPreference, Preference, PreferenceGroup, UserPreference


class PreferenceGroupFactory(factory.Factory[PreferenceGroup]):
    class Meta:  # pyright: ignore[reportIncompatibleVariableOverride]
        model = PreferenceGroup

    id = factory.Sequence(lambda n: f"group_{n}")
    name = factory.Faker("word")
    parent_group = ""


class PreferenceFactory(factory.Factory[Preference]):
    class Meta:  # pyright: ignore[reportIncompatibleVariableOverride]
        model = Preference

    id = factory.Sequence(lambda n: f"PREFERENCE_{n}")
    name = factory.Faker("sentence", nb_words=3)
    default_value = "false"
    depends_on = ""
    user = 1
    org = 1
    group_id = None


class UserPreferenceFactory(factory.Factory[UserPreference]):
    class Meta:  # pyright: ignore[reportIncompatibleVariableOverride]
        model = UserPreference

    preference_value = factory.Faker("word")


class OrgPreferenceFactory(factory.Factory[OrgPreference]):
    class Meta:  # pyright: ignore[reportIncompatibleVariableOverride]
        model = OrgPreference

    preference_value = factory.Faker("word")
