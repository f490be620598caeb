"""Call session state machine for a Zoom Room.

The room, not the client, is the source of truth: every operation reads
the current call status from the device before acting. The only state kept
here is the role recorded by the last successful dial, which decides
whether hanging up ends the meeting or just leaves it.
"""

from __future__ import annotations

import logging
import time
from enum import Enum
from typing import Callable

from zrshell.core.errors import (
    CommandFailureError,
    DialFailureError,
    InvalidStateError,
    ProtocolError,
)
from zrshell.core.state_machine import SessionRole, SessionState
from zrshell.meeting.dial import DialTarget, parse_dial_string
from zrshell.monitor.models import CallStatus, CallStatusState, MuteState
from zrshell.protocol import commands
from zrshell.protocol.executor import CommandExecutor
from zrshell.protocol.properties import parse_properties

logger = logging.getLogger(__name__)

_STATUS_TEXT = {
    "in meeting": SessionState.IN_MEETING,
    "connecting meeting": SessionState.CONNECTING,
    "not in meeting": SessionState.NOT_IN_MEETING,
}


class CameraDirection(Enum):
    """Directions accepted by the camera control command."""

    UP = "Up"
    DOWN = "Down"
    LEFT = "Left"
    RIGHT = "Right"


def classify_call_status(response: str) -> SessionState:
    """Map a ``zstatus call status`` response to a SessionState.

    The text between ``Call Status:`` and ``** end`` is lower-cased, has
    underscores replaced with spaces and is trimmed before matching, so
    ``IN_MEETING`` and ``In Meeting`` both classify as IN_MEETING.

    Unrecognized text (or a response without the status marker) yields
    UNKNOWN rather than silently passing for NOT_IN_MEETING.
    """
    text = response.lower()
    _, sep, tail = text.partition(commands.STATUS_MARKER)
    if not sep:
        logger.warning("Call status marker missing from response: %r", response)
        return SessionState.UNKNOWN
    end = tail.find(commands.BLOCK_END)
    if end >= 0:
        tail = tail[:end]
    status = tail.replace("_", " ").strip()
    state = _STATUS_TEXT.get(status)
    if state is None:
        logger.warning("Unrecognized call status '%s'", status)
        return SessionState.UNKNOWN
    return state


def _parse_switch(command: str, response: str) -> bool:
    """Read the on/off value of a ``zconfiguration ... mute`` response."""
    text = response.lower()
    start = text.find(commands.MUTE_MARKER)
    end = text.rfind(commands.BLOCK_END)
    if start < 0 or end < start:
        raise ProtocolError(command, response, f"Unable to read mute value for '{command}'.")
    return text[start + len(commands.MUTE_MARKER):end].strip() == commands.ON


class MeetingSession:
    """Drives the room's single call session through the command executor.

    Args:
        executor: Serialized command executor bound to the room's shell.
        status_poll_attempts: Status polls to make while the room is stuck
            connecting before forcing a disconnect.
        status_poll_interval: Seconds between those polls.
        sleep: Sleep function, injectable for tests.
    """

    def __init__(
        self,
        executor: CommandExecutor,
        status_poll_attempts: int = 5,
        status_poll_interval: float = 1.0,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._executor = executor
        self._status_poll_attempts = status_poll_attempts
        self._status_poll_interval = status_poll_interval
        self._sleep = sleep
        self._role: SessionRole | None = None

    @property
    def role(self) -> SessionRole | None:
        """Role recorded by the last successful dial, None if unknown."""
        return self._role

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_state(self) -> SessionState:
        """Query the device's current call status."""
        return classify_call_status(self._executor.execute(commands.CALL_STATUS))

    def get_meeting_id(self) -> str:
        """Meeting number of the active call.

        Only valid while in a meeting; the device rejects ``call info``
        otherwise and CommandFailureError propagates.

        Raises:
            ProtocolError: The response carries no meeting_id line.
        """
        response = self._executor.execute(commands.CALL_INFO)
        properties = parse_properties(response, commands.MEETING_ID_PREFIX)
        meeting_id = properties.get(commands.MEETING_ID_PREFIX, "")
        if not meeting_id:
            raise ProtocolError(
                commands.CALL_INFO, response, "Call info did not report a meeting id."
            )
        return meeting_id

    def is_microphone_muted(self) -> bool:
        return _parse_switch(
            commands.MICROPHONE_MUTE, self._executor.execute(commands.MICROPHONE_MUTE)
        )

    def is_camera_muted(self) -> bool:
        return _parse_switch(commands.CAMERA_MUTE, self._executor.execute(commands.CAMERA_MUTE))

    def get_mute_state(self) -> MuteState:
        """Microphone mute state, UNKNOWN when not in a meeting."""
        if self.get_state() is not SessionState.IN_MEETING:
            return MuteState.UNKNOWN
        return MuteState.MUTED if self.is_microphone_muted() else MuteState.UNMUTED

    def retrieve_call_status(self, call_id: str = "") -> CallStatus:
        """Summarize the call state.

        The meeting id can only be read while in a meeting, so outside one
        the caller's ``call_id`` is echoed back.
        """
        if self.get_state() is SessionState.IN_MEETING:
            return CallStatus(CallStatusState.CONNECTED, self.get_meeting_id())
        return CallStatus(CallStatusState.DISCONNECTED, call_id)

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def dial(self, dial_string: str) -> str:
        """Connect the room to a meeting.

        A room already in a meeting is never redialed; the active meeting
        number is returned instead. A room stuck connecting (a wrong
        meeting number or a missing passcode can leave it there for good)
        is polled, then forcibly disconnected before dialing.

        Args:
            dial_string: ``meetingNumber[.passcode]@domain.tld``.

        Returns:
            Meeting number the room is in or was asked to join.

        Raises:
            InvalidArgumentError: Malformed dial string; nothing is sent.
            DialFailureError: Neither start nor join was accepted.
        """
        target = parse_dial_string(dial_string)

        state = self.get_state()
        if state is SessionState.IN_MEETING:
            meeting_id = self.get_meeting_id()
            logger.info("Not dialing: meeting %s is in progress.", meeting_id)
            return meeting_id

        if state is SessionState.CONNECTING:
            for attempt in range(self._status_poll_attempts):
                if attempt > 0:
                    self._sleep(self._status_poll_interval)
                state = self.get_state()
                if state is SessionState.IN_MEETING:
                    return self.get_meeting_id()
                if state is not SessionState.CONNECTING:
                    return self._start_or_join(target)
            logger.warning("Room is stuck connecting, disconnecting before dialing.")
            self._disconnect()

        return self._start_or_join(target)

    def hangup(self) -> None:
        """Leave or end the current meeting. No-op when not in one."""
        state = self.get_state()
        if state in (SessionState.NOT_IN_MEETING, SessionState.UNKNOWN):
            logger.debug("Hangup ignored, call status is %s.", state.name)
            return
        self._disconnect()

    def set_microphone_mute(self, muted: bool) -> None:
        """Mute or unmute the room microphone. Requires an active meeting."""
        self._require_in_meeting("change microphone mute")
        self._executor.execute(
            commands.SET_MICROPHONE_MUTE.format(value=commands.ON if muted else commands.OFF)
        )

    def set_camera_mute(self, muted: bool) -> None:
        """Mute or unmute the room camera feed. Requires an active meeting."""
        self._require_in_meeting("change camera mute")
        self._executor.execute(
            commands.SET_CAMERA_MUTE.format(value=commands.ON if muted else commands.OFF)
        )

    def move_camera(self, direction: CameraDirection) -> None:
        """Start moving the camera one step in ``direction``. Allowed in any state."""
        self._executor.execute(commands.CAMERA_CONTROL.format(direction=direction.value))

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _start_or_join(self, target: DialTarget) -> str:
        """Start the meeting as host, falling back to joining it.

        There is no way to tell from the address whether it is this room's
        own meeting or someone else's, so "start" is tried first and a
        device rejection switches to "join".
        """
        suffix = f" password:{target.passcode}" if target.passcode else ""
        logger.debug(
            "Dialing meeting %s (passcode %s)",
            target.meeting_number, target.masked_passcode or "none",
        )
        try:
            self._executor.execute(
                commands.DIAL_START.format(meeting_number=target.meeting_number) + suffix
            )
        except CommandFailureError:
            logger.debug("Unable to start meeting %s, joining instead.", target.meeting_number)
        else:
            self._role = SessionRole.HOST
            logger.info("Started meeting %s.", target.meeting_number)
            return target.meeting_number

        try:
            self._executor.execute(
                commands.DIAL_JOIN.format(meeting_number=target.meeting_number) + suffix
            )
        except ProtocolError as e:
            raise DialFailureError(target.meeting_number) from e
        self._role = SessionRole.PARTICIPANT
        logger.info("Joined meeting %s.", target.meeting_number)
        return target.meeting_number

    def _disconnect(self) -> None:
        command = (
            commands.CALL_DISCONNECT if self._role is SessionRole.HOST else commands.CALL_LEAVE
        )
        self._executor.execute(command)
        logger.info("Call ended (%s).", command)
        self._role = None

    def _require_in_meeting(self, action: str) -> None:
        if self.get_state() is not SessionState.IN_MEETING:
            raise InvalidStateError(f"Not in a meeting. Not able to {action}.")
