"""Caller-visible status model.

Plain data returned by the room controller: the per-poll DeviceStatus
snapshot, the controllable properties it advertises, and the call/mute
summaries used by call-control callers.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum, auto

from zrshell.core.state_machine import SessionState


class MuteState(Enum):
    """Microphone mute state. UNKNOWN while the room is not in a meeting."""

    MUTED = auto()
    UNMUTED = auto()
    UNKNOWN = auto()


class CallStatusState(Enum):
    CONNECTED = auto()
    DISCONNECTED = auto()


@dataclass(frozen=True)
class CallStatus:
    """Call status summary.

    Attributes:
        state: CONNECTED while the room is in a meeting.
        call_id: Active meeting number, or the id the caller asked about.
    """

    state: CallStatusState
    call_id: str = ""


@dataclass(frozen=True)
class Switch:
    """Two-state toggle control."""

    label_on: str = "on"
    label_off: str = "off"


@dataclass(frozen=True)
class Button:
    """Momentary push control.

    Attributes:
        label: Label shown at rest.
        label_pressed: Label shown while the action runs.
        grace_period: Milliseconds to pause monitoring after a press.
    """

    label: str
    label_pressed: str
    grace_period: int = 0


@dataclass
class ControllableProperty:
    """A control exposed alongside the statistics.

    Attributes:
        name: Statistics key the control belongs to, e.g. "Call Control#Microphone Mute".
        control: Switch or Button description.
        value: Current value; 1/0 for switches, empty for buttons.
        timestamp: When the control was built.
    """

    name: str
    control: Switch | Button
    value: int | str = ""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


@dataclass
class DeviceStatus:
    """One full poll of the room.

    Attributes:
        state: Session state at the time of the poll.
        statistics: Flat "Category#Field" to value map.
        controls: Controls available for this poll.
        call_id: Active meeting number while in a meeting.
        microphone_muted: Microphone mute state while in a meeting.
    """

    state: SessionState
    statistics: dict[str, str] = field(default_factory=dict)
    controls: list[ControllableProperty] = field(default_factory=list)
    call_id: str | None = None
    microphone_muted: bool | None = None

    @property
    def in_call(self) -> bool:
        """Whether the room was in a meeting at the time of the poll."""
        return self.state is SessionState.IN_MEETING

    def to_dict(self) -> dict[str, object]:
        """JSON-friendly representation."""
        return {
            "state": self.state.name,
            "in_call": self.in_call,
            "call_id": self.call_id,
            "microphone_muted": self.microphone_muted,
            "statistics": dict(sorted(self.statistics.items())),
            "controls": [
                {
                    "name": control.name,
                    "type": type(control.control).__name__.lower(),
                    "value": control.value,
                }
                for control in self.controls
            ],
        }
