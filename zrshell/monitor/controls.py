"""In-call controls advertised with the room statistics.

Each control is named by its statistics key. The same names come back
from callers as control requests, so the enum doubles as the dispatch key.
"""

from __future__ import annotations

from enum import Enum

from zrshell.meeting.session import CameraDirection
from zrshell.monitor.models import Button, ControllableProperty, Switch


class CallControl(Enum):
    """Controls available while the room is in a meeting."""

    MICROPHONE_MUTE = "Call Control#Microphone Mute"
    CAMERA_MUTE = "Call Control#Video Camera Mute"
    MOVE_UP = "Video Camera#Move Up"
    MOVE_DOWN = "Video Camera#Move Down"
    MOVE_LEFT = "Video Camera#Move Left"
    MOVE_RIGHT = "Video Camera#Move Right"


CAMERA_MOVES: dict[CallControl, CameraDirection] = {
    CallControl.MOVE_UP: CameraDirection.UP,
    CallControl.MOVE_DOWN: CameraDirection.DOWN,
    CallControl.MOVE_LEFT: CameraDirection.LEFT,
    CallControl.MOVE_RIGHT: CameraDirection.RIGHT,
}


def create_switch(control: CallControl, on: bool) -> ControllableProperty:
    """Build an on/off switch for ``control`` with its current state."""
    return ControllableProperty(name=control.value, control=Switch(), value=1 if on else 0)


def create_button(control: CallControl, label: str, grace_period: int = 0) -> ControllableProperty:
    """Build a momentary button for ``control``."""
    return ControllableProperty(
        name=control.value,
        control=Button(label=label, label_pressed=label, grace_period=grace_period),
    )


def create_in_call_controls(
    microphone_muted: bool, camera_muted: bool
) -> list[ControllableProperty]:
    """All controls shown while in a meeting, in display order."""
    controls = [
        create_switch(CallControl.MICROPHONE_MUTE, microphone_muted),
        create_switch(CallControl.CAMERA_MUTE, camera_muted),
    ]
    for control, direction in CAMERA_MOVES.items():
        controls.append(create_button(control, direction.value))
    return controls
