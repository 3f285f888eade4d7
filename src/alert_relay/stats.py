"""In-memory relay counters.

Counters live for the process lifetime and reset on restart. They make
dropped alerts and failed tickets countable instead of only visible in logs.
"""

from dataclasses import asdict, dataclass


@dataclass
class RelayStats:
    """Counts of alerts and tickets handled since start-up."""

    alerts_received: int = 0
    alerts_posted: int = 0
    alerts_dropped: int = 0
    tickets_created: int = 0
    tickets_failed: int = 0
    alerts_reset: int = 0

    def as_dict(self) -> dict[str, int]:
        return asdict(self)
