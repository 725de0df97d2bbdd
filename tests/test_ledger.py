from datetime import datetime, timezone

from keygen_app.ledger import InMemoryLedger, IssuanceRecord


def test_put_get_has():
    ledger = InMemoryLedger()
    record = IssuanceRecord(key_digest="d1")
    assert not ledger.has("abc123")
    assert ledger.get("abc123") is None

    assert ledger.put("abc123", record) is True
    assert ledger.has("abc123")
    assert ledger.get("abc123") == record
    assert len(ledger) == 1


def test_put_existing_hash_keeps_first_record():
    ledger = InMemoryLedger()
    first = IssuanceRecord(key_digest="first")
    assert ledger.put("abc123", first)
    assert ledger.put("abc123", IssuanceRecord(key_digest="second")) is False
    assert ledger.get("abc123") == first
    assert len(ledger) == 1


def test_items_in_insertion_order():
    ledger = InMemoryLedger()
    ledger.put("b", IssuanceRecord(key_digest="2"))
    ledger.put("a", IssuanceRecord(key_digest="1"))
    assert [h for h, _ in ledger.items()] == ["b", "a"]


def test_find_by_digest():
    ledger = InMemoryLedger()
    record = IssuanceRecord(key_digest="digest")
    ledger.put("abc123", record)
    assert ledger.find_by_digest("digest") == ("abc123", record)
    assert ledger.find_by_digest("nope") is None


def test_close_clears_records():
    ledger = InMemoryLedger()
    ledger.put("abc123", IssuanceRecord(key_digest="d"))
    ledger.close()
    assert len(ledger) == 0


def test_created_iso_format():
    record = IssuanceRecord(
        key_digest="d",
        issued_at=datetime(2025, 1, 2, 3, 4, 5, 678000, tzinfo=timezone.utc),
    )
    assert record.created_iso() == "2025-01-02T03:04:05.678Z"


def test_default_issued_at_is_utc():
    record = IssuanceRecord(key_digest="d")
    assert record.issued_at.tzinfo is not None
    assert record.issued_at.utcoffset().total_seconds() == 0
