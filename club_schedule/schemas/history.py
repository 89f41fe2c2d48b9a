from datetime import datetime
from typing import Any

from pydantic import AliasChoices, BaseModel, Field, field_validator

from club_schedule.codec.values import parse_optional_text, parse_timestamp
from club_schedule.models.history import RemovalHistoryEntry, UserRef


def _object_id(value: Any) -> str | None:
    if isinstance(value, dict):
        value = value.get("$oid") or value.get("_id") or value.get("id")
    if value is None:
        return None
    return str(value)


class UserRefIn(BaseModel):
    id: str | None = Field(default=None, validation_alias=AliasChoices("_id", "id", "userId"))
    name: str | None = None
    external_id: str | None = Field(
        default=None, validation_alias=AliasChoices("studentId", "externalId", "external_id")
    )

    model_config = {"extra": "ignore"}

    @field_validator("id", mode="before")
    @classmethod
    def _id(cls, value: Any) -> str | None:
        return _object_id(value)

    @field_validator("name", "external_id", mode="before")
    @classmethod
    def _text(cls, value: Any) -> str | None:
        return parse_optional_text(value)

    def to_domain(self) -> UserRef | None:
        if self.id is None:
            return None
        return UserRef(id=self.id, name=self.name, external_id=self.external_id)


class RemovalHistoryEntryIn(BaseModel):
    removed_at: datetime | None = Field(default=None, alias="removedAt")
    removed_by: UserRefIn | None = Field(default=None, alias="removedBy")
    removal_reason: str | None = Field(default=None, alias="removalReason")
    restored_at: datetime | None = Field(default=None, alias="restoredAt")
    restored_by: UserRefIn | None = Field(default=None, alias="restoredBy")
    restoration_reason: str | None = Field(default=None, alias="restorationReason")

    model_config = {"populate_by_name": True, "extra": "ignore"}

    @field_validator("removed_at", "restored_at", mode="before")
    @classmethod
    def _timestamp(cls, value: Any) -> datetime | None:
        return parse_timestamp(value)

    @field_validator("removal_reason", "restoration_reason", mode="before")
    @classmethod
    def _reason(cls, value: Any) -> str | None:
        return parse_optional_text(value)

    @field_validator("removed_by", "restored_by", mode="before")
    @classmethod
    def _user(cls, value: Any) -> Any:
        # Unpopulated references arrive as a bare id.
        if isinstance(value, (str, int)) and not isinstance(value, bool):
            return {"_id": value}
        if isinstance(value, dict) and "$oid" in value:
            return {"_id": value["$oid"]}
        return value

    def to_domain(self) -> RemovalHistoryEntry:
        return RemovalHistoryEntry(
            removed_at=self.removed_at,
            removed_by=self.removed_by.to_domain() if self.removed_by is not None else None,
            removal_reason=self.removal_reason,
            restored_at=self.restored_at,
            restored_by=self.restored_by.to_domain() if self.restored_by is not None else None,
            restoration_reason=self.restoration_reason,
        )


def parse_removal_history(payload: list[dict] | None) -> list[RemovalHistoryEntry]:
    return [RemovalHistoryEntryIn.model_validate(item).to_domain() for item in payload or []]
