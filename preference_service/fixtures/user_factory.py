import factory

from preference_service.features.users.models.user import User
from preference_service.fixtures.organization_factory import OrganizationFactory


class UserFactory(factory.Factory[User]):
    class Meta:  # pyright: ignore[reportIncompatibleVariableOverride]
        model = User

    id = factory.Faker("uuid4")
    email = factory.Faker("email")
    name = factory.Faker("name")
    organization = factory.SubFactory(OrganizationFactory)
    org_id = factory.LazyAttribute(lambda user: user.organization.id)
