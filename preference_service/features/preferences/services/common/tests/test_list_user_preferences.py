import pytest
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import AsyncSession

from preference_service.core.auth import AuthUser
from preference_service.fixtures.preference_factory import (
    PreferenceFactory,
    PreferenceGroupFactory,
    UserPreferenceFactory,
)

URL = "/api/v1/common/preferences/user"


@pytest.mark.asyncio
async def test_user_can_list_preferences_as_group_tree(
    test_client_fixture: TestClient, db_fixture: AsyncSession, authenticated_user_fixture: AuthUser
):
    db_fixture.add_all(
        [
            PreferenceGroupFactory.build(id="general", name="General", parent_group=""),
            PreferenceGroupFactory.build(id="appearance", name="Appearance", parent_group="general"),
            PreferenceGroupFactory.build(id="unused", name="Unused", parent_group=""),
        ]
    )
    await db_fixture.flush()
    db_fixture.add(
        PreferenceFactory.build(id="THEME", name="Theme", default_value="dark", user=1, org=0, group_id="appearance")
    )
    await db_fixture.flush()
    db_fixture.add(
        UserPreferenceFactory.build(preference_id="THEME", user_id=authenticated_user_fixture.id, preference_value="light")
    )
    await db_fixture.commit()

    response = test_client_fixture.get(URL)
    assert response.status_code == 200
    assert response.json() == [
        {
            "group_id": "general",
            "group_name": "General",
            "preferences": [],
            "child_groups": [
                {
                    "group_id": "appearance",
                    "group_name": "Appearance",
                    "preferences": [
                        {
                            "id": "THEME",
                            "name": "Theme",
                            "default_value": "dark",
                            "depends_on": "",
                            "user": 1,
                            "org": 0,
                            "group_id": "appearance",
                            "value": "light",
                        }
                    ],
                    "child_groups": [],
                }
            ],
        }
    ]


@pytest.mark.asyncio
async def test_list_user_preferences_is_null_when_no_preference_has_user_scope(
    test_client_fixture: TestClient, db_fixture: AsyncSession, authenticated_user_fixture: AuthUser
):
    db_fixture.add(PreferenceFactory.build(id="ORG_ONBOARDING", user=0, org=1))
    await db_fixture.commit()

    response = test_client_fixture.get(URL)
    assert response.status_code == 200
    assert response.json() is None
