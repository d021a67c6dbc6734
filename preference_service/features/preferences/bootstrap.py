"""
Schema bootstrapper for the preference store.

Creates the preference tables when they are missing and seeds the static group and preference definitions.
Seeding only inserts rows whose id is not present yet, so edits to seed records that already exist
in the database are never applied. Any storage failure aborts immediately and leaves whatever was
created so far in place.
"""

import logging
from pathlib import Path

import orjson
from pydantic import TypeAdapter, ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from preference_service.core.database import Base
from preference_service.core.settings import Settings
from preference_service.features import models  # noqa: F401
from preference_service.features.preferences.errors import PreferenceError, PreferenceErrorKind
from preference_service.features.preferences.models import Preference, PreferenceGroup
from preference_service.features.preferences.schemas import PreferenceGroupSeed, PreferenceSeed

logger = logging.getLogger(__name__)

PREFERENCE_GROUPS_SEED_FILE = "bootstrap_preference_groups.json"
PREFERENCES_SEED_FILE = "bootstrap_preferences.json"


# Seed documents
# ----------------------------------------------------------------------------------------------------------------------


def packaged_seed_path(filename: str) -> Path:
    return Path(__file__).parent / "data" / filename


def read_seed_document(path: Path) -> object:
    try:
        return orjson.loads(path.read_bytes())
    except OSError as e:
        raise PreferenceError(PreferenceErrorKind.EXECUTION, f"error in reading seed file {path}: {e}") from e
    except orjson.JSONDecodeError as e:
        raise PreferenceError(PreferenceErrorKind.EXECUTION, f"error in parsing seed file {path}: {e}") from e


def load_seed_groups(path: Path) -> list[PreferenceGroupSeed]:
    document = read_seed_document(path)
    try:
        return TypeAdapter(list[PreferenceGroupSeed]).validate_python(document)
    except ValidationError as e:
        raise PreferenceError(PreferenceErrorKind.EXECUTION, f"invalid preference group seed in {path}: {e}") from e


def load_seed_preferences(path: Path) -> list[PreferenceSeed]:
    document = read_seed_document(path)
    try:
        return TypeAdapter(list[PreferenceSeed]).validate_python(document)
    except ValidationError as e:
        raise PreferenceError(PreferenceErrorKind.EXECUTION, f"invalid preference seed in {path}: {e}") from e


# Table creation and seeding
# ----------------------------------------------------------------------------------------------------------------------


async def create_preference_tables(db: AsyncSession):
    try:
        await db.run_sync(lambda session: Base.metadata.create_all(session.connection(), checkfirst=True))
        await db.commit()
    except SQLAlchemyError as e:
        raise PreferenceError(PreferenceErrorKind.EXECUTION, f"error in creating preference tables: {e}") from e


async def seed_preference_groups(db: AsyncSession, groups: list[PreferenceGroupSeed]) -> int:
    inserted = 0
    for group in groups:
        try:
            if await db.get(PreferenceGroup, group.id) is not None:
                logger.debug("preference group already present", extra={"group_id": group.id})
                continue
            db.add(PreferenceGroup(id=group.id, name=group.name, parent_group=group.parent_group))
            await db.commit()
        except SQLAlchemyError as e:
            raise PreferenceError(
                PreferenceErrorKind.EXECUTION, f"error in adding bootstrap preference group {group.id}: {e}"
            ) from e
        inserted += 1
    return inserted


async def seed_preferences(db: AsyncSession, preferences: list[PreferenceSeed]) -> int:
    inserted = 0
    for preference in preferences:
        try:
            if await db.get(Preference, preference.id) is not None:
                logger.debug("preference already present", extra={"preference_id": preference.id})
                continue
            db.add(
                Preference(
                    id=preference.id,
                    name=preference.name,
                    default_value=preference.default_value,
                    depends_on=preference.depends_on,
                    user=preference.user,
                    org=preference.org,
                    group_id=preference.group_id or None,
                )
            )
            await db.commit()
        except SQLAlchemyError as e:
            raise PreferenceError(
                PreferenceErrorKind.EXECUTION, f"error in adding bootstrap preference {preference.id}: {e}"
            ) from e
        inserted += 1
    return inserted


async def initialize_preferences(
    db: AsyncSession, groups: list[PreferenceGroupSeed], preferences: list[PreferenceSeed]
):
    """Create the preference tables if absent and insert the seed rows that are missing."""
    await create_preference_tables(db)
    inserted_groups = await seed_preference_groups(db, groups)
    inserted_preferences = await seed_preferences(db, preferences)
    logger.info(
        "preference store initialized",
        extra={"inserted_groups": inserted_groups, "inserted_preferences": inserted_preferences},
    )


async def initialize_preferences_from_settings(db: AsyncSession, settings: Settings):
    groups_path = Path(settings.preference_groups_seed_path or packaged_seed_path(PREFERENCE_GROUPS_SEED_FILE))
    preferences_path = Path(settings.preferences_seed_path or packaged_seed_path(PREFERENCES_SEED_FILE))
    await initialize_preferences(db, load_seed_groups(groups_path), load_seed_preferences(preferences_path))
