import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Optional, Tuple


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class IssuanceRecord:
    """Proof that a key was handed out for one completion hash.

    Only the HMAC digest of the key is kept; the plaintext is gone once the
    response that showed it has been sent.
    """
    key_digest: str
    issued_at: datetime = field(default_factory=utcnow)

    def created_iso(self) -> str:
        """ISO 8601 UTC with millis, e.g. ``2025-01-01T12:00:00.000Z``."""
        return self.issued_at.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class IssuanceLedger(ABC):
    """Store of issuance records keyed by completion hash."""

    @abstractmethod
    def has(self, completion_hash: str) -> bool:
        pass

    @abstractmethod
    def get(self, completion_hash: str) -> Optional[IssuanceRecord]:
        pass

    @abstractmethod
    def put(self, completion_hash: str, record: IssuanceRecord) -> bool:
        """Insert ``record`` unless the hash already has one.

        Returns True when this call created the record. An existing record
        is never overwritten.
        """

    @abstractmethod
    def items(self) -> List[Tuple[str, IssuanceRecord]]:
        pass

    @abstractmethod
    def find_by_digest(self, key_digest: str) -> Optional[Tuple[str, IssuanceRecord]]:
        pass

    @abstractmethod
    def close(self) -> None:
        pass


class InMemoryLedger(IssuanceLedger):
    """Process-local ledger. Everything is lost on restart."""

    def __init__(self):
        self._records = {}
        self._lock = threading.Lock()

    def has(self, completion_hash: str) -> bool:
        with self._lock:
            return completion_hash in self._records

    def get(self, completion_hash: str) -> Optional[IssuanceRecord]:
        with self._lock:
            return self._records.get(completion_hash)

    def put(self, completion_hash: str, record: IssuanceRecord) -> bool:
        with self._lock:
            if completion_hash in self._records:
                return False
            self._records[completion_hash] = record
            return True

    def items(self) -> List[Tuple[str, IssuanceRecord]]:
        with self._lock:
            return list(self._records.items())

    def find_by_digest(self, key_digest: str) -> Optional[Tuple[str, IssuanceRecord]]:
        for completion_hash, record in self.items():
            if record.key_digest == key_digest:
                return completion_hash, record
        return None

    def close(self) -> None:
        with self._lock:
            self._records.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)
