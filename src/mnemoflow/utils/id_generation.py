"""Identifiers for records and derived objects."""
import uuid

RECORD_ID_PREFIX = "mem"
CONTRADICTION_ID_PREFIX = "contra"


def generate_id(prefix: str = RECORD_ID_PREFIX, length: int = 16) -> str:
    """``<prefix>_<hex>``; the hex part is the first ``length`` characters of a random uuid4."""
    if not 0 < length <= 32:
        raise ValueError(f"length must be in 1..32, got {length}")
    return "_".join((prefix, uuid.uuid4().hex[:length]))
