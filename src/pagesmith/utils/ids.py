"""Node identifier generation for pagesmith."""

import itertools
import secrets
import time
from typing import Container


_counter = itertools.count()

_DIGITS = "0123456789abcdefghijklmnopqrstuvwxyz"


def _base36(value: int) -> str:
    if value == 0:
        return "0"
    digits = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(_DIGITS[rem])
    return "".join(reversed(digits))


def generate_node_id() -> str:
    """
    Generate a fresh node identifier.

    Format is ``n_<millis>_<random>_<counter>`` with every part in base 36.
    The process-wide counter makes ids unique within a session; the
    timestamp and random part keep ids from different sessions apart.

    Returns:
        Node id string

    Example:
        >>> generate_node_id()
        'n_m2f8k1qz_3k9x0a_0'
    """
    millis = int(time.time() * 1000)
    token = _base36(secrets.randbits(32))
    return f"n_{_base36(millis)}_{token}_{_base36(next(_counter))}"


def generate_unique_node_id(taken: Container[str]) -> str:
    """
    Generate a node id guaranteed not to be in ``taken``.

    Args:
        taken: Ids already in use (typically every id of the current page)

    Returns:
        Node id string absent from ``taken``
    """
    while True:
        candidate = generate_node_id()
        if candidate not in taken:
            return candidate
