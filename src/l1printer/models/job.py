"""Print job models."""

from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel, Field


class JobState(StrEnum):
    """Lifecycle of a single print run.

    States only move forward; FAILED and COMPLETED are terminal.
    """

    IDLE = "idle"
    CONNECTING = "connecting"
    AWAITING_FIRMWARE = "awaiting_firmware"
    RENDERING = "rendering"
    SENDING = "sending"
    FINALIZING = "finalizing"
    COMPLETED = "completed"
    FAILED = "failed"


# Order used to reject backward transitions (FAILED is handled separately)
JOB_STATE_ORDER = [
    JobState.IDLE,
    JobState.CONNECTING,
    JobState.AWAITING_FIRMWARE,
    JobState.RENDERING,
    JobState.SENDING,
    JobState.FINALIZING,
    JobState.COMPLETED,
]


class PrintResult(BaseModel):
    """Completion record of a successful print run."""

    template_name: str
    firmware_version: str
    bytes_sent: int
    splits: int
    packets: int
    finished_at: datetime = Field(default_factory=datetime.now)
