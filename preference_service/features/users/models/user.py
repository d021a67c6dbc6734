import uuid
import typing

from sqlalchemy import ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from preference_service.core.database import Base

if typing.TYPE_CHECKING:
    from preference_service.features.users.models.organization import Organization


# User
# Every user belongs to at most one organization, whose id is carried in the access token.
# Rows are mirrored from the access token on the first preference write, so only the id is guaranteed.
# ----------------------------------------------------------------------------------------------------------------------


class User(Base):
    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    email: Mapped[str | None] = mapped_column(String, unique=True)
    name: Mapped[str] = mapped_column(String, default="")
    org_id: Mapped[str | None] = mapped_column(ForeignKey("organizations.id", ondelete="CASCADE", onupdate="CASCADE"))

    organization: Mapped["Organization | None"] = relationship(back_populates="users", lazy="raise_on_sql")
