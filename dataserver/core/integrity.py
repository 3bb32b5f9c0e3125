"""
Integrity validation for incoming envelopes.
MD5 over the payload bytes, lowercase hex - the format producers already compute.
"""

import hashlib
from typing import Union

from .schema import DataEnvelope


def digest(payload: Union[str, bytes]) -> str:
    """Return the lowercase hex MD5 digest of a payload (str payloads are UTF-8 encoded)."""
    if isinstance(payload, str):
        payload = payload.encode("utf-8")
    return hashlib.md5(payload).hexdigest()


def verify(envelope: DataEnvelope) -> bool:
    """True iff the producer checksum equals the payload digest, compared case-sensitively."""
    return digest(envelope.body.payload) == envelope.checksum
