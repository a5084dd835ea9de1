import hmac
import hashlib

SIGNATURE_HEADER = "cko-signature"


def sign(secret: bytes, raw_body: bytes) -> str:
    """hex HMAC-SHA256 of the raw request body."""
    return hmac.new(secret, raw_body, hashlib.sha256).hexdigest()


def verify(secret: bytes, raw_body: bytes, supplied_signature: str | None) -> bool:
    """
    Check a notification signature against the exact bytes received.

    The digest must be taken over the wire bytes: a body that was parsed and
    re-serialised will not, in general, reproduce the provider's signature.
    A missing secret or signature counts as a mismatch.
    """
    if not secret or not supplied_signature:
        return False
    computed = sign(secret, raw_body)
    try:
        return hmac.compare_digest(computed, supplied_signature)
    except TypeError:
        # compare_digest refuses non-ASCII str input
        return False
