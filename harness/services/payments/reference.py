import random
import string

ALPHABET = string.ascii_letters + string.digits


def generate_reference(length: int = 6) -> str:
    """random alphanumeric order reference, not meant to be a secret."""
    if length < 0:
        raise ValueError("length must be non-negative")
    return "".join(random.choices(ALPHABET, k=length))
