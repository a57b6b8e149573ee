from dataclasses import dataclass


@dataclass
class RotationState:
    """
    Daily-pick cursor shared by every request of the process.

    Not persisted and not locked: two requests crossing a UTC day boundary at
    the same time may both see the old date and advance the index twice.
    """

    index: int = 0
    last_rotation_date: str = ""


@dataclass(frozen=True)
class Exceeded:
    """No video exists at the requested position."""

    message: str = "No more videos available"

    def to_dict(self) -> dict:
        return {"exceeded": self.message}
