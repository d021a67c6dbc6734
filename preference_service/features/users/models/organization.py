import uuid
import typing

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from preference_service.core.database import Base

if typing.TYPE_CHECKING:
    from preference_service.features.users.models.user import User


# Organization
# Owned by the identity provider of the composing application, only mirrored here so that
# org scoped preference values can reference it. Rows are created on the first preference write by a member.
# ----------------------------------------------------------------------------------------------------------------------


class Organization(Base):
    __tablename__ = "organizations"

    id: Mapped[str] = mapped_column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    name: Mapped[str] = mapped_column(String, default="")

    users: Mapped[list["User"]] = relationship(back_populates="organization", passive_deletes=True, lazy="raise_on_sql")
