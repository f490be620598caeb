"""Room status aggregation.

Each poll rebuilds the whole statistics map from the device. Audio,
camera and system blocks describe the room itself and are always read;
meeting details and in-call controls are added only while in a meeting.
"""

from __future__ import annotations

import logging
from enum import Enum

from zrshell.core.state_machine import SessionState
from zrshell.meeting.session import MeetingSession
from zrshell.monitor.controls import CallControl, create_in_call_controls
from zrshell.monitor.models import DeviceStatus
from zrshell.protocol import commands
from zrshell.protocol.executor import CommandExecutor
from zrshell.protocol.properties import parse_properties

logger = logging.getLogger(__name__)

ACTIVE_MEETING_KEY = "Meeting Number (Active)"
AUDIO_SETTINGS = "Audio Settings#"
CAMERA_SETTINGS = "Video Camera Settings#"


class SystemField(Enum):
    """``zstatus systemunit`` fields reported as statistics."""

    ROOM_VERSION = "room_version"
    MEETING_NUMBER = "meeting_number"
    ACCOUNT_EMAIL = "account_email"
    ROOM_NAME = "room_name"
    PLATFORM = "platform"


SYSTEM_FIELD_KEYS: dict[SystemField, str] = {
    SystemField.ROOM_VERSION: "Zoom Rooms Version",
    SystemField.MEETING_NUMBER: "Meeting Number (Personal)",
    SystemField.ACCOUNT_EMAIL: "Account Email",
    SystemField.ROOM_NAME: "Room Name",
    SystemField.PLATFORM: "Platform",
}

IN_CALL_KEYS = frozenset({ACTIVE_MEETING_KEY, *(control.value for control in CallControl)})


def _is_reported_line_property(key: str) -> bool:
    return key.endswith("Name") or key.endswith(" Selected")


def map_line_properties(properties: dict[str, str]) -> dict[str, str]:
    """Map audio/camera line properties to statistics keys.

    Only device names and selection flags are reported, e.g.
    ``Audio Input Line 1 Name`` becomes ``Audio Settings#Audio Input Line 1 Name``.
    """
    statistics: dict[str, str] = {}
    for key, value in properties.items():
        if not _is_reported_line_property(key):
            continue
        if key.startswith("Audio"):
            statistics[AUDIO_SETTINGS + key] = value
        elif key.startswith("Video Camera"):
            statistics[CAMERA_SETTINGS + key] = value
    return statistics


def map_system_properties(properties: dict[str, str]) -> dict[str, str]:
    """Map ``SystemUnit`` properties to statistics keys.

    Keys arrive as ``SystemUnit room_version`` or
    ``SystemUnit room_info room_name``; the last word names the field.
    """
    statistics: dict[str, str] = {}
    for key, value in properties.items():
        words = key.split()
        try:
            system_field = SystemField(words[-1] if words else "")
        except ValueError:
            continue
        statistics[SYSTEM_FIELD_KEYS[system_field]] = value
    return statistics


class StatusAggregator:
    """Builds DeviceStatus snapshots for a room.

    Args:
        executor: Command executor bound to the room's shell.
        session: Session state machine sharing the same executor.
    """

    def __init__(self, executor: CommandExecutor, session: MeetingSession) -> None:
        self._executor = executor
        self._session = session

    def poll(self) -> DeviceStatus:
        """Read the room and return a fresh status snapshot."""
        self._executor.refresh_connection()

        state = self._session.get_state()
        status = DeviceStatus(state=state)
        status.statistics.update(self._device_statistics())

        if state is SessionState.IN_MEETING:
            meeting_id = self._session.get_meeting_id()
            microphone_muted = self._session.is_microphone_muted()
            camera_muted = self._session.is_camera_muted()

            status.call_id = meeting_id
            status.microphone_muted = microphone_muted
            status.controls = create_in_call_controls(microphone_muted, camera_muted)
            for control in status.controls:
                status.statistics[control.name] = ""
            status.statistics[ACTIVE_MEETING_KEY] = meeting_id

        logger.debug(
            "Polled room: state=%s, %d statistics, %d controls",
            state.name, len(status.statistics), len(status.controls),
        )
        return status

    def _device_statistics(self) -> dict[str, str]:
        line_properties = parse_properties(
            self._executor.execute(commands.AUDIO_INPUT_LINE), commands.AUDIO_INPUT_PREFIX
        )
        line_properties.update(parse_properties(
            self._executor.execute(commands.AUDIO_OUTPUT_LINE), commands.AUDIO_OUTPUT_PREFIX
        ))
        line_properties.update(parse_properties(
            self._executor.execute(commands.CAMERA_LINE), commands.CAMERA_LINE_PREFIX
        ))
        system_properties = parse_properties(
            self._executor.execute(commands.SYSTEM_UNIT), commands.SYSTEM_UNIT_PREFIX
        )

        statistics = map_line_properties(line_properties)
        statistics.update(map_system_properties(system_properties))
        return statistics
