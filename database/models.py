"""
Account document model and its mapping to/from MongoDB documents.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from bson import ObjectId


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Account:
    email: str
    wallet_address: str
    password_hash: str
    id: Optional[str] = None
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime = field(default_factory=_utcnow)

    def to_document(self) -> Dict[str, Any]:
        """Document body for insertion; ``_id`` is left to the store."""
        return {
            "email": self.email,
            "walletAddress": self.wallet_address,
            "password": self.password_hash,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }

    @classmethod
    def from_document(cls, doc: Dict[str, Any]) -> "Account":
        return cls(
            id=str(doc["_id"]),
            email=doc["email"],
            wallet_address=doc["walletAddress"],
            password_hash=doc["password"],
            created_at=doc.get("createdAt") or _utcnow(),
            updated_at=doc.get("updatedAt") or _utcnow(),
        )


def object_id(account_id: str) -> ObjectId:
    """Parse an account id back into the store's native key type."""
    return ObjectId(account_id)
