from collections.abc import Sequence
import logging
from typing import Annotated, TypeVar

from fastapi import Depends
from sqlalchemy import Select, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from preference_service.core.auth import AuthUser
from preference_service.core.database import DbDep
from preference_service.features.preferences.errors import PreferenceError, PreferenceErrorKind
from preference_service.features.preferences.models import OrgPreference, Preference, PreferenceGroup, UserPreference
from preference_service.features.preferences.schemas import GroupNode, PreferenceKV, PreferenceWithValue
from preference_service.features.preferences.tree import build_group_tree
from preference_service.features.users.models import Organization, User

logger = logging.getLogger(__name__)

T = TypeVar("T")


# Preference store resolving values over the user > org > default precedence.
# Every read is independent, no transaction spans the reads of a single call.
# ----------------------------------------------------------------------------------------------------------------------


class PreferenceStore:
    def __init__(self, db: AsyncSession):
        super().__init__()
        self.db = db

    async def get_user_preference(self, user: AuthUser, preference_id: str) -> PreferenceKV:
        """Resolve the value the given user sees: user value, else org value (if org scoped), else default."""
        user_value = await self.fetch_one(
            select(UserPreference)
            .where(UserPreference.preference_id == preference_id)
            .where(UserPreference.user_id == user.id),
            "error in fetching the user preference value",
        )
        org_value = await self.fetch_one(
            select(OrgPreference)
            .where(OrgPreference.preference_id == preference_id)
            .where(OrgPreference.org_id == user.org_id),
            "error in fetching the org preference value",
        )
        preference = await self.get_definition(preference_id)
        if not preference.user_scope_enabled:
            raise PreferenceError(
                PreferenceErrorKind.FORBIDDEN, f"preference not enabled for user scope with key: {preference_id}"
            )

        value = preference.default_value
        if preference.org_scope_enabled and org_value is not None:
            value = org_value.preference_value
        if user_value is not None:
            value = user_value.preference_value
        return PreferenceKV(preference_id=preference_id, preference_value=value)

    async def get_org_preference(self, user: AuthUser, preference_id: str) -> PreferenceKV:
        """Resolve the value set for the caller's organization, else the default."""
        org_value = await self.fetch_one(
            select(OrgPreference)
            .where(OrgPreference.preference_id == preference_id)
            .where(OrgPreference.org_id == user.org_id),
            "error in fetching the org preference value",
        )
        preference = await self.get_definition(preference_id)
        if not preference.org_scope_enabled:
            raise PreferenceError(
                PreferenceErrorKind.FORBIDDEN, f"preference not enabled for org scope with key: {preference_id}"
            )

        value = preference.default_value
        if org_value is not None:
            value = org_value.preference_value
        return PreferenceKV(preference_id=preference_id, preference_value=value)

    async def set_user_preference(self, user: AuthUser, preference_id: str, value: str) -> PreferenceKV:
        if not preference_id:
            raise PreferenceError(PreferenceErrorKind.NOT_FOUND, "no preference id found in the request")

        preference = await self.get_definition(preference_id)
        if not preference.user_scope_enabled:
            raise PreferenceError(
                PreferenceErrorKind.FORBIDDEN, f"this preference is not enabled at user scope: {preference_id}"
            )

        await self.upsert(UserPreference, user, preference_id=preference_id, user_id=user.id, preference_value=value)
        logger.debug("user preference set", extra={"preference_id": preference_id, "user_id": user.id})
        return PreferenceKV(preference_id=preference_id, preference_value=value)

    async def set_org_preference(self, user: AuthUser, preference_id: str, value: str) -> PreferenceKV:
        if not preference_id:
            raise PreferenceError(PreferenceErrorKind.NOT_FOUND, "no preference id found in the request")
        if not user.org_id:
            raise PreferenceError(PreferenceErrorKind.NOT_FOUND, "no org id found in the request")

        preference = await self.get_definition(preference_id)
        if not preference.org_scope_enabled:
            raise PreferenceError(
                PreferenceErrorKind.FORBIDDEN, f"this preference is not enabled at org scope: {preference_id}"
            )

        await self.upsert(OrgPreference, user, preference_id=preference_id, org_id=user.org_id, preference_value=value)
        logger.debug("org preference set", extra={"preference_id": preference_id, "org_id": user.org_id})
        return PreferenceKV(preference_id=preference_id, preference_value=value)

    async def list_user_preferences(self, user: AuthUser) -> list[GroupNode] | None:
        """
        List every user scoped preference with the value the user sees, arranged in the group tree.
        Returns None when no preference is enabled for user scope.
        """
        preferences = await self.fetch_all(
            select(Preference).where(Preference.user == 1), "error in getting all user preferences"
        )
        if not preferences:
            return None

        org_values = await self.fetch_all(
            select(OrgPreference).where(OrgPreference.org_id == user.org_id),
            "error in getting all org preference values",
        )
        user_values = await self.fetch_all(
            select(UserPreference).where(UserPreference.user_id == user.id),
            "error in getting all user preference values",
        )
        org_value_map = {row.preference_id: row.preference_value for row in org_values}
        user_value_map = {row.preference_id: row.preference_value for row in user_values}

        resolved: dict[str, str | None] = {}
        for preference in preferences:
            value = preference.default_value
            if preference.org_scope_enabled and preference.id in org_value_map:
                value = org_value_map[preference.id]
            if preference.id in user_value_map:
                value = user_value_map[preference.id]
            resolved[preference.id] = value

        return await self.build_tree(preferences, resolved)

    async def list_org_preferences(self, user: AuthUser) -> list[GroupNode] | None:
        """
        List every org scoped preference with the organization's value, arranged in the group tree.
        Returns None when no preference is enabled for org scope.
        """
        preferences = await self.fetch_all(
            select(Preference).where(Preference.org == 1), "error in getting all org preferences"
        )
        if not preferences:
            return None

        org_values = await self.fetch_all(
            select(OrgPreference).where(OrgPreference.org_id == user.org_id),
            "error in getting all org preference values",
        )
        org_value_map = {row.preference_id: row.preference_value for row in org_values}
        resolved = {pref.id: org_value_map.get(pref.id, pref.default_value) for pref in preferences}

        return await self.build_tree(preferences, resolved)

    # Helpers
    # ------------------------------------------------------------------------------------------------------------------

    async def get_definition(self, preference_id: str) -> Preference:
        preference = await self.fetch_one(
            select(Preference).where(Preference.id == preference_id), "error in fetching the preference"
        )
        if preference is None:
            raise PreferenceError(PreferenceErrorKind.NOT_FOUND, f"no such preference exists: {preference_id}")
        return preference

    async def build_tree(
        self, preferences: Sequence[Preference], resolved: dict[str, str | None]
    ) -> list[GroupNode]:
        preferences_by_group: dict[str, list[PreferenceWithValue]] = {}
        for preference in preferences:
            preferences_by_group.setdefault(preference.group_id or "", []).append(
                PreferenceWithValue(
                    id=preference.id,
                    name=preference.name,
                    default_value=preference.default_value,
                    depends_on=preference.depends_on,
                    user=preference.user,
                    org=preference.org,
                    group_id=preference.group_id,
                    value=resolved[preference.id],
                )
            )

        groups = await self.fetch_all(select(PreferenceGroup), "error in getting all preference groups")
        return build_group_tree(groups, "", preferences_by_group)

    async def fetch_one(self, stmt: Select[tuple[T]], error_message: str) -> T | None:
        try:
            result = await self.db.execute(stmt)
        except SQLAlchemyError as e:
            raise PreferenceError(PreferenceErrorKind.EXECUTION, f"{error_message}: {e}") from e
        return result.scalar_one_or_none()

    async def fetch_all(self, stmt: Select[tuple[T]], error_message: str) -> Sequence[T]:
        try:
            result = await self.db.execute(stmt)
        except SQLAlchemyError as e:
            raise PreferenceError(PreferenceErrorKind.EXECUTION, f"{error_message}: {e}") from e
        return result.scalars().all()

    async def upsert(self, model: type[UserPreference] | type[OrgPreference], owner: AuthUser, **values: str):
        """
        Insert the value row, or overwrite its value when the (preference, owner) pair exists.
        The owner's organization and user rows are mirrored from the token first when they are missing,
        so the value row's foreign keys hold for callers this database has not seen before.
        """
        insert = self.dialect_insert()
        statements = []
        if owner.org_id:
            statements.append(insert(Organization).values(id=owner.org_id).on_conflict_do_nothing())
        if model is UserPreference:
            statements.append(insert(User).values(id=owner.id, org_id=owner.org_id or None).on_conflict_do_nothing())

        stmt = insert(model).values(**values)
        stmt = stmt.on_conflict_do_update(
            index_elements=[column.name for column in model.__table__.primary_key.columns],
            set_={"preference_value": stmt.excluded.preference_value},
        )
        statements.append(stmt)

        try:
            for statement in statements:
                _ = await self.db.execute(statement)
            await self.db.commit()
        except SQLAlchemyError as e:
            raise PreferenceError(PreferenceErrorKind.EXECUTION, f"error in setting the preference value: {e}") from e

    def dialect_insert(self):
        dialect = self.db.get_bind().dialect.name
        if dialect == "postgresql":
            return postgresql.insert
        if dialect == "sqlite":
            return sqlite.insert
        raise PreferenceError(
            PreferenceErrorKind.EXECUTION, f"preference upserts are not supported on the {dialect} dialect"
        )


# Dependency to provide PreferenceStore instance.
# ----------------------------------------------------------------------------------------------------------------------


def get_preference_store(db: DbDep) -> PreferenceStore:
    return PreferenceStore(db=db)


PreferenceStoreDep = Annotated[PreferenceStore, Depends(get_preference_store)]
