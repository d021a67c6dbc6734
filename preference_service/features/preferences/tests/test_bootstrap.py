from pathlib import Path
from unittest.mock import AsyncMock

import pytest
from pytest import MonkeyPatch
from sqlalchemy import select
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from preference_service.core.settings import Settings
from preference_service.features.preferences.bootstrap import (
    PREFERENCE_GROUPS_SEED_FILE,
    PREFERENCES_SEED_FILE,
    initialize_preferences,
    initialize_preferences_from_settings,
    load_seed_groups,
    load_seed_preferences,
    packaged_seed_path,
)
from preference_service.features.preferences.errors import PreferenceError, PreferenceErrorKind
from preference_service.features.preferences.models import Preference, PreferenceGroup
from preference_service.features.preferences.schemas import PreferenceGroupSeed, PreferenceSeed


GROUPS = [
    PreferenceGroupSeed(id="general", name="General", parent_group=""),
    PreferenceGroupSeed(id="appearance", name="Appearance", parent_group="general"),
]
PREFERENCES = [
    PreferenceSeed(id="THEME", name="Theme", default_value="dark", user=1, org=1, group_id="appearance"),
    PreferenceSeed(id="ONBOARDING", name="Onboarding", default_value="false", org=1, group_id="general"),
]


# Seeding
# ----------------------------------------------------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_initialize_preferences_inserts_seed_groups_and_preferences(db_fixture: AsyncSession):
    await initialize_preferences(db_fixture, GROUPS, PREFERENCES)

    groups = (await db_fixture.execute(select(PreferenceGroup.id, PreferenceGroup.parent_group))).all()
    assert sorted(groups) == [("appearance", "general"), ("general", "")]

    result = await db_fixture.execute(select(Preference).where(Preference.id == "THEME"))
    theme = result.scalar_one()
    assert theme.default_value == "dark"
    assert theme.user == 1
    assert theme.org == 1
    assert theme.group_id == "appearance"


@pytest.mark.asyncio
async def test_initialize_preferences_never_updates_existing_rows(db_fixture: AsyncSession):
    await initialize_preferences(db_fixture, GROUPS, PREFERENCES)

    changed_preferences = [
        PreferenceSeed(id="THEME", name="Theme", default_value="light", user=0, org=0, group_id="appearance"),
        PreferenceSeed(id="LAYOUT", name="Layout", default_value="grid", user=1, group_id="appearance"),
    ]
    await initialize_preferences(db_fixture, GROUPS, changed_preferences)

    result = await db_fixture.execute(select(Preference.id, Preference.default_value, Preference.user))
    assert sorted(result.all()) == [("LAYOUT", "grid", 1), ("ONBOARDING", "false", 0), ("THEME", "dark", 1)]


@pytest.mark.asyncio
async def test_initialize_preferences_stops_at_first_storage_error(db_fixture: AsyncSession, monkeypatch: MonkeyPatch):
    monkeypatch.setattr(db_fixture, "get", AsyncMock(side_effect=OperationalError("SELECT", {}, Exception("boom"))))

    with pytest.raises(PreferenceError) as exc_info:
        await initialize_preferences(db_fixture, GROUPS, PREFERENCES)

    assert exc_info.value.kind == PreferenceErrorKind.EXECUTION
    assert "general" in exc_info.value.message
    assert isinstance(exc_info.value.__cause__, OperationalError)


@pytest.mark.asyncio
async def test_initialize_preferences_from_settings_uses_packaged_seed_files(
    db_fixture: AsyncSession, settings_fixture: Settings
):
    await initialize_preferences_from_settings(db_fixture, settings_fixture)

    result = await db_fixture.execute(select(Preference.id))
    preference_ids = set(result.scalars().all())
    assert {"THEME", "DASHBOARDS_LIST_VIEW", "ORG_ONBOARDING"} <= preference_ids


# Seed documents
# ----------------------------------------------------------------------------------------------------------------------


def test_packaged_seed_files_are_valid():
    groups = load_seed_groups(packaged_seed_path(PREFERENCE_GROUPS_SEED_FILE))
    preferences = load_seed_preferences(packaged_seed_path(PREFERENCES_SEED_FILE))

    group_ids = {group.id for group in groups}
    assert all(preference.group_id in group_ids for preference in preferences)
    assert all(group.parent_group in group_ids | {""} for group in groups)


def test_load_seed_preferences_reads_records(tmp_path: Path):
    seed_file = tmp_path / "preferences.json"
    _ = seed_file.write_text('[{"id": "THEME", "default_value": "dark", "user": 1, "group_id": "general"}]')

    preferences = load_seed_preferences(seed_file)

    assert preferences == [PreferenceSeed(id="THEME", default_value="dark", user=1, org=0, group_id="general")]


def test_load_seed_groups_rejects_malformed_json(tmp_path: Path):
    seed_file = tmp_path / "groups.json"
    _ = seed_file.write_text("[{")

    with pytest.raises(PreferenceError) as exc_info:
        _ = load_seed_groups(seed_file)
    assert exc_info.value.kind == PreferenceErrorKind.EXECUTION


def test_load_seed_groups_rejects_records_without_id(tmp_path: Path):
    seed_file = tmp_path / "groups.json"
    _ = seed_file.write_text('[{"name": "General"}]')

    with pytest.raises(PreferenceError) as exc_info:
        _ = load_seed_groups(seed_file)
    assert exc_info.value.kind == PreferenceErrorKind.EXECUTION


def test_load_seed_groups_reports_missing_file(tmp_path: Path):
    with pytest.raises(PreferenceError) as exc_info:
        _ = load_seed_groups(tmp_path / "missing.json")
    assert "missing.json" in exc_info.value.message
