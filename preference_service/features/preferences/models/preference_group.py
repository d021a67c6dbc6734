from sqlalchemy import Text
from sqlalchemy.orm import Mapped, mapped_column

from preference_service.core.database import Base


# Preference group
# Groups form a tree through parent_group, an empty string marks a root group.
# ----------------------------------------------------------------------------------------------------------------------


class PreferenceGroup(Base):
    __tablename__ = "preference_group"

    id: Mapped[str] = mapped_column(Text, primary_key=True)
    name: Mapped[str | None] = mapped_column(Text, nullable=True)
    parent_group: Mapped[str] = mapped_column(Text, default="")
