"""SHA-256 digests for comparing generated document states"""

import hashlib


def sha256(content: bytes) -> str:
    """Return hex-encoded SHA-256 hash of content."""
    return hashlib.sha256(content).hexdigest()
