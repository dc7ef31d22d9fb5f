"""
Entity identifier issuance.

Ids are uuid4 values (122 random bits) encoded as 22 characters of
unpadded URL-safe base64. They are never reused and need no coordination
with stored snapshots.
"""

import base64
from typing import Callable
from uuid import uuid4


IdFactory = Callable[[], str]


def generate_id() -> str:
    """Return a fresh compact id."""
    return base64.urlsafe_b64encode(uuid4().bytes).rstrip(b"=").decode("ascii")


class IdGenerator:
    """
    Callable id source with an optional prefix.

    The ledger only needs something that returns a new string on each
    call. This class exists so a prefix (e.g. per entity kind in tests)
    can be configured and the number of issued ids inspected.
    """

    def __init__(self, prefix: str = ""):
        self._prefix = prefix
        self._issued = 0

    @property
    def issued(self) -> int:
        return self._issued

    def __call__(self) -> str:
        self._issued += 1
        return f"{self._prefix}{generate_id()}"
