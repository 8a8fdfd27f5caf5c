from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone

# The directory only ever holds these two users
PARTNER_USERNAMES: tuple[str, str] = ("Shivam", "Shreya")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class User:
    username: str
    id: uuid.UUID = field(default_factory=uuid.uuid4)
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime = field(default_factory=_utcnow)


def is_partner_username(username: str) -> bool:
    return username in PARTNER_USERNAMES
