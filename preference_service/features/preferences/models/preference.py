from sqlalchemy import ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from preference_service.core.database import Base


# Preference definition
# Static metadata seeded at startup. The user/org columns are integer flags (1 = the scope may override the default).
# depends_on names another preference id and is advisory only.
# ----------------------------------------------------------------------------------------------------------------------


class Preference(Base):
    __tablename__ = "preference"

    id: Mapped[str] = mapped_column(Text, primary_key=True)
    name: Mapped[str | None] = mapped_column(Text, nullable=True)
    default_value: Mapped[str | None] = mapped_column(Text, nullable=True)
    depends_on: Mapped[str | None] = mapped_column(Text, nullable=True)
    user: Mapped[int] = mapped_column(Integer, default=0, server_default="0")
    org: Mapped[int] = mapped_column(Integer, default=0, server_default="0")
    group_id: Mapped[str | None] = mapped_column(
        ForeignKey("preference_group.id", onupdate="CASCADE", ondelete="CASCADE"), nullable=True
    )

    @property
    def user_scope_enabled(self) -> bool:
        return self.user == 1

    @property
    def org_scope_enabled(self) -> bool:
        return self.org == 1


# Explicit values per user and per organization, one row per (preference, owner) pair.
# ----------------------------------------------------------------------------------------------------------------------


class UserPreference(Base):
    __tablename__ = "user_preference"

    preference_id: Mapped[str] = mapped_column(
        ForeignKey("preference.id", onupdate="CASCADE", ondelete="CASCADE"), primary_key=True
    )
    user_id: Mapped[str] = mapped_column(
        String, ForeignKey("users.id", onupdate="CASCADE", ondelete="CASCADE"), primary_key=True
    )
    preference_value: Mapped[str | None] = mapped_column(Text, nullable=True)


class OrgPreference(Base):
    __tablename__ = "org_preference"

    preference_id: Mapped[str] = mapped_column(
        ForeignKey("preference.id", onupdate="CASCADE", ondelete="CASCADE"), primary_key=True
    )
    org_id: Mapped[str] = mapped_column(
        String, ForeignKey("organizations.id", onupdate="CASCADE", ondelete="CASCADE"), primary_key=True
    )
    preference_value: Mapped[str | None] = mapped_column(Text, nullable=True)
