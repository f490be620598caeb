"""Room controller: the caller-facing entry point of the client.

Wires the shell channel, command executor, meeting session and status
aggregator together from Settings, and routes control requests coming
back from the statistics view to session operations.
"""

from __future__ import annotations

import logging
import time
from typing import Callable, Iterable

from zrshell.channel.interfaces import ShellChannel
from zrshell.channel.ssh import SshShellChannel
from zrshell.core.config import Settings
from zrshell.core.errors import InvalidArgumentError
from zrshell.meeting.session import CameraDirection, MeetingSession
from zrshell.monitor.aggregator import StatusAggregator
from zrshell.monitor.controls import CAMERA_MOVES, CallControl
from zrshell.monitor.models import CallStatus, DeviceStatus, MuteState
from zrshell.protocol.executor import CommandExecutor

logger = logging.getLogger(__name__)


def _is_on(value: object) -> bool:
    return str(value).strip() == "1"


class RoomController:
    """Monitors and controls one Zoom Room.

    Every method blocks until the device has answered. Methods may be
    called from several threads; commands are serialized underneath.

    Args:
        settings: Application settings.
        channel: Shell channel to use. Defaults to an SSH channel built from settings.
        sleep: Sleep function for retry and poll delays, injectable for tests.
    """

    def __init__(
        self,
        settings: Settings,
        channel: ShellChannel | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._settings = settings
        self._channel = channel or SshShellChannel(
            settings.host,
            port=settings.port,
            username=settings.username,
            password=settings.password,
            connect_timeout=settings.connect_timeout,
            read_timeout=settings.read_timeout,
        )
        self._executor = CommandExecutor(
            self._channel,
            retry_limit=settings.command_retry_limit,
            retry_delay=settings.command_retry_delay,
            sleep=sleep,
        )
        self._session = MeetingSession(
            self._executor,
            status_poll_attempts=settings.status_poll_attempts,
            status_poll_interval=settings.status_poll_interval,
            sleep=sleep,
        )
        self._aggregator = StatusAggregator(self._executor, self._session)

        self._control_handlers: dict[CallControl, Callable[[object], None]] = {
            CallControl.MICROPHONE_MUTE: lambda value: self.set_microphone_mute(_is_on(value)),
            CallControl.CAMERA_MUTE: lambda value: self.set_camera_mute(_is_on(value)),
        }
        for control, direction in CAMERA_MOVES.items():
            self._control_handlers[control] = (
                lambda value, direction=direction: self.move_camera(direction)
            )

    @property
    def session(self) -> MeetingSession:
        """The underlying meeting session."""
        return self._session

    # ------------------------------------------------------------------
    # Monitoring
    # ------------------------------------------------------------------

    def get_status(self) -> DeviceStatus:
        """Poll the room for a full status snapshot."""
        return self._aggregator.poll()

    def get_mute_state(self) -> MuteState:
        return self._session.get_mute_state()

    def retrieve_call_status(self, call_id: str = "") -> CallStatus:
        return self._session.retrieve_call_status(call_id)

    # ------------------------------------------------------------------
    # Call control
    # ------------------------------------------------------------------

    def dial(self, dial_string: str) -> str:
        """Start or join the meeting at ``dial_string`` and return its number."""
        return self._session.dial(dial_string)

    def hangup(self) -> None:
        self._session.hangup()

    def mute(self) -> None:
        self.set_microphone_mute(True)

    def unmute(self) -> None:
        self.set_microphone_mute(False)

    def set_microphone_mute(self, muted: bool) -> None:
        self._session.set_microphone_mute(muted)

    def set_camera_mute(self, muted: bool) -> None:
        self._session.set_camera_mute(muted)

    def move_camera(self, direction: CameraDirection) -> None:
        self._session.move_camera(direction)

    # ------------------------------------------------------------------
    # Controllable properties
    # ------------------------------------------------------------------

    def control_property(self, name: str, value: object = "") -> None:
        """Apply a control request by statistics key.

        Switch values of "1" mean on. Unknown names are ignored.

        Args:
            name: Control name, e.g. "Call Control#Microphone Mute".
            value: Requested value.
        """
        try:
            control = CallControl(name)
        except ValueError:
            logger.debug("Control '%s' is not supported, ignoring.", name)
            return
        logger.debug("Control '%s' set to %r", name, value)
        self._control_handlers[control](value)

    def control_properties(self, requests: Iterable[tuple[str, object]]) -> None:
        """Apply several control requests in order.

        Raises:
            InvalidArgumentError: If no requests are given.
        """
        requests = list(requests or [])
        if not requests:
            raise InvalidArgumentError("Controllable properties cannot be null or empty")
        for name, value in requests:
            self.control_property(name, value)

    def close(self) -> None:
        """Close the shell channel."""
        self._channel.disconnect()
