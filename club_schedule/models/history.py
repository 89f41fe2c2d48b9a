from dataclasses import dataclass
from datetime import datetime


@dataclass(slots=True)
class UserRef:
    id: str
    name: str | None = None
    external_id: str | None = None


@dataclass(slots=True)
class RemovalHistoryEntry:
    removed_at: datetime | None
    removed_by: UserRef | None = None
    removal_reason: str | None = None
    restored_at: datetime | None = None
    restored_by: UserRef | None = None
    restoration_reason: str | None = None

    @property
    def has_restoration_info(self) -> bool:
        return self.restored_at is not None and bool(self.restoration_reason)
