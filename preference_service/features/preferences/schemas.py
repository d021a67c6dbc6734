from pydantic import BaseModel, Field


# Seed records
# These mirror the packaged bootstrap JSON documents one to one.
# ----------------------------------------------------------------------------------------------------------------------


class PreferenceGroupSeed(BaseModel):
    id: str
    name: str = ""
    parent_group: str = ""


class PreferenceSeed(BaseModel):
    id: str
    name: str = ""
    default_value: str = ""
    depends_on: str = ""
    user: int = 0
    org: int = 0
    group_id: str = ""


# Resolved values
# ----------------------------------------------------------------------------------------------------------------------


class PreferenceKV(BaseModel):
    preference_id: str
    preference_value: str | None


class PreferenceWithValue(BaseModel):
    id: str
    name: str | None
    default_value: str | None
    depends_on: str | None
    user: int
    org: int
    group_id: str | None
    value: str | None


class GroupNode(BaseModel):
    group_id: str
    group_name: str | None
    preferences: list[PreferenceWithValue] = Field(default_factory=list)
    child_groups: list["GroupNode"] = Field(default_factory=list)
