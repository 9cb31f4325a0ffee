"""SHA-256 content fingerprinting for image deduplication"""

import hashlib


def sha256_bytes(data: bytes) -> str:
    """Return hex-encoded SHA-256 hash of raw bytes (64 chars)."""
    return hashlib.sha256(data).hexdigest()
