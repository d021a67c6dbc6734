import factory

from preference_service.features.users.models.organization import Organization


class OrganizationFactory(factory.Factory[Organization]):
    class Meta:  # pyright: ignore[reportIncompatibleVariableOverride]
        model = Organization

    id = factory.Faker("uuid4")
    name = factory.Faker("company")
