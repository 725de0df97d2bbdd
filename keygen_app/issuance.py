"""One key per Linkvertise completion.

``KeyIssuer.issue`` decides what a completion callback gets and records the
grant in the ledger. It knows nothing about HTTP; the routes turn its
``IssuanceOutcome`` into a page.
"""

import enum
from dataclasses import dataclass
from typing import Callable, Optional

import structlog

from keygen_app.crypto_utils import MIN_KEY_BYTES, generate_key, hash_key
from keygen_app.ledger import IssuanceLedger, IssuanceRecord, utcnow

log = structlog.get_logger(__name__)


class IssuanceStatus(enum.Enum):
    INVALID_INPUT = "invalid_input"
    ALREADY_ISSUED = "already_issued"
    REJECTED = "rejected"
    ISSUED = "issued"


@dataclass(frozen=True)
class IssuanceOutcome:
    status: IssuanceStatus
    credential: Optional[str] = None   # plaintext, only set when ISSUED


class KeyIssuer:
    def __init__(
        self,
        ledger: IssuanceLedger,
        verify: Callable[[str], bool],
        salt: str,
        key_bytes: int = MIN_KEY_BYTES,
    ):
        self.ledger = ledger
        self.verify = verify
        self.salt = salt
        self.key_bytes = key_bytes

    def issue(self, completion_hash: Optional[str]) -> IssuanceOutcome:
        if not completion_hash or not completion_hash.strip():
            return IssuanceOutcome(IssuanceStatus.INVALID_INPUT)

        if self.ledger.has(completion_hash):
            log.info("key_already_issued", hash=completion_hash)
            return IssuanceOutcome(IssuanceStatus.ALREADY_ISSUED)

        if not self.verify(completion_hash):
            # ledger stays untouched so the user can retry the same hash
            log.info("key_rejected", hash=completion_hash)
            return IssuanceOutcome(IssuanceStatus.REJECTED)

        plain_key = generate_key(self.key_bytes)
        record = IssuanceRecord(key_digest=hash_key(plain_key, self.salt), issued_at=utcnow())

        if not self.ledger.put(completion_hash, record):
            # a concurrent request for the same hash got there first
            log.warning("key_issue_lost_race", hash=completion_hash)
            return IssuanceOutcome(IssuanceStatus.ALREADY_ISSUED)

        log.info("key_issued", hash=completion_hash)
        return IssuanceOutcome(IssuanceStatus.ISSUED, credential=plain_key)
