import hashlib
import hmac
import secrets

MIN_KEY_BYTES = 10
GROUP_SIZE = 5

# ---------- KEY GENERATION ----------
def generate_key(num_bytes: int = MIN_KEY_BYTES) -> str:
    """Random uppercase hex key split into dash-separated groups of five."""
    if num_bytes < MIN_KEY_BYTES:
        raise ValueError(f"keys need at least {MIN_KEY_BYTES} bytes of entropy")
    raw = secrets.token_bytes(num_bytes).hex().upper()
    return "-".join(raw[i:i + GROUP_SIZE] for i in range(0, len(raw), GROUP_SIZE))

# ---------- HMAC DIGEST ----------
def hash_key(key: str, salt: str) -> str:
    return hmac.new(salt.encode("utf-8"), key.encode("utf-8"), hashlib.sha256).hexdigest()

def verify_key_digest(key: str, digest: str, salt: str) -> bool:
    expected = hash_key(key, salt)
    return hmac.compare_digest(expected, digest)

# ---------- SHARED SECRETS ----------
def secrets_match(provided: str, expected: str) -> bool:
    return hmac.compare_digest(provided.encode("utf-8"), expected.encode("utf-8"))
