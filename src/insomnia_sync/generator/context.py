"""Per-run generation context: the epoch and the random-id source.

Every conversion creates exactly one :class:`GenerationContext` and passes it
explicitly to each builder. All timestamps and sort keys in a workspace are
fixed offsets from :attr:`GenerationContext.epoch`, so the relative order of
entities is identical on every run while ids and absolute times change.

Timestamp offsets (milliseconds from the epoch):

============================  =========  ==========
Entity                        created    modified
============================  =========  ==========
workspace                     +0         -1
cookie jar                    -5         -5
base environment              -7         +8
spec container                +3         +4
folder                        +5         +5
request                       +10        +10
sub-environment *i*           +9+i       +9+i
============================  =========  ==========
"""

from __future__ import annotations

import logging
import os
import time
from dataclasses import dataclass, field
from typing import Callable, Optional

logger = logging.getLogger(__name__)

WORKSPACE_PREFIX = "wrk"
SPEC_PREFIX = "spc"
FOLDER_PREFIX = "fld"
REQUEST_PREFIX = "req"
ENVIRONMENT_PREFIX = "env"
COOKIE_JAR_PREFIX = "jar"

WORKSPACE_CREATED = 0
WORKSPACE_MODIFIED = -1
COOKIE_JAR_CREATED = -5
BASE_ENVIRONMENT_CREATED = -7
BASE_ENVIRONMENT_MODIFIED = 8
SPEC_CREATED = 3
SPEC_MODIFIED = 4
FOLDER_CREATED = 5
REQUEST_CREATED = 10
SUB_ENVIRONMENT_FIRST = 9

_ID_BYTES = 16


@dataclass(frozen=True)
class GenerationContext:
    """Immutable bundle of the run epoch and a random-byte source.

    Args:
        epoch: Milliseconds since the Unix epoch, captured once per run.
        random_bytes: Callable returning *n* random bytes. Tests inject a
            deterministic source here.

    Example::

        ctx = GenerationContext.create()
        ctx.new_id("req")   # 'req_3f0c...'
        ctx.at(10)          # epoch + 10
    """

    epoch: int
    random_bytes: Callable[[int], bytes] = field(default=os.urandom, repr=False)

    @classmethod
    def create(
        cls,
        random_bytes: Optional[Callable[[int], bytes]] = None,
        clock: Callable[[], float] = time.time,
    ) -> GenerationContext:
        """Capture the current time as the epoch for a new run."""
        return cls(
            epoch=int(clock() * 1000),
            random_bytes=random_bytes or os.urandom,
        )

    def at(self, offset: int) -> int:
        """Return the timestamp *offset* milliseconds from the epoch."""
        return self.epoch + offset

    @property
    def first_sort_key(self) -> int:
        """Starting value of the folder and request sort-key counters."""
        return -self.epoch

    def new_id(self, prefix: str) -> str:
        """Return ``"<prefix>_<32 hex chars>"``.

        When the random source fails or returns a short read, the id falls
        back to the epoch followed by the sub-second nanosecond clock. That
        is less unique but never raises.
        """
        try:
            raw = self.random_bytes(_ID_BYTES)
        except Exception as exc:
            logger.debug("Random source failed (%s); using clock-based id", exc)
            raw = b""
        if not isinstance(raw, bytes) or len(raw) != _ID_BYTES:
            return f"{prefix}_{self.epoch}{time.time_ns() % 1_000_000_000}"
        return f"{prefix}_{raw.hex()}"
