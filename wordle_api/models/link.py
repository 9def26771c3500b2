"""
Account Linking Data Models

Short-lived PINs and the bindings they produce between an app identity
(primary) and a voice-assistant identity (secondary).
"""

import datetime
from dataclasses import dataclass
from typing import Any, Dict


@dataclass
class LinkPin:
    """Single-use PIN, keyed by its numeric code."""
    code: str
    owner_id: str
    created_at: datetime.datetime

    def is_expired(self, now: datetime.datetime, ttl_seconds: int) -> bool:
        return (now - self.created_at).total_seconds() > ttl_seconds

    def expires_at(self, ttl_seconds: int) -> datetime.datetime:
        return self.created_at + datetime.timedelta(seconds=ttl_seconds)

    def to_document(self) -> Dict[str, Any]:
        return {
            "_id": self.code,
            "pin": self.code,
            "userId": self.owner_id,
            "createdAt": self.created_at,
        }

    @classmethod
    def from_document(cls, doc: Dict[str, Any]) -> "LinkPin":
        return cls(code=doc["_id"], owner_id=doc["userId"], created_at=doc["createdAt"])


@dataclass
class LinkedAccount:
    """Binding keyed by the secondary identity."""
    secondary_id: str
    primary_id: str
    linked_at: datetime.datetime

    def to_document(self) -> Dict[str, Any]:
        return {
            "_id": self.secondary_id,
            "secondaryUserId": self.secondary_id,
            "primaryUserId": self.primary_id,
            "linkedAt": self.linked_at,
        }

    @classmethod
    def from_document(cls, doc: Dict[str, Any]) -> "LinkedAccount":
        return cls(
            secondary_id=doc["_id"],
            primary_id=doc["primaryUserId"],
            linked_at=doc["linkedAt"],
        )
