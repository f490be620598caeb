"""In-memory stand-in for a Zoom Room's zCommand shell.

StubRoomChannel answers the commands this client issues with the same
framing a real room uses, so development and tests can run without a
device:
- status blocks end with ``** end`` followed by ``OK``
- command results carry a ``*r <Name>Result`` line
- rejected commands end with ``ERROR``
"""

from __future__ import annotations

import re
from collections import defaultdict, deque
from typing import Iterable

from zrshell.channel.interfaces import ShellChannel
from zrshell.core.errors import TransportError
from zrshell.protocol import commands

_MEETING_NUMBER = re.compile(r"meetingNumber:(\d+)", re.IGNORECASE)
_CAMERA_ACTION = re.compile(r"action:(\w+)", re.IGNORECASE)

IN_MEETING = "IN_MEETING"
CONNECTING_MEETING = "CONNECTING_MEETING"
NOT_IN_MEETING = "NOT_IN_MEETING"


def _ok(*lines: str) -> str:
    body = "".join(f"{line}\r\n" for line in lines)
    return f"{body}** end\r\n\r\nOK\r\n"


def _error(*lines: str) -> str:
    body = "".join(f"{line}\r\n" for line in lines)
    return f"{body}** end\r\n\r\nERROR\r\n\n"


class StubRoomChannel(ShellChannel):
    """Simulates a Zoom Room shell.

    Device state is kept in public attributes so tests can arrange it
    directly. Responses queued with :meth:`queue_response` are returned
    before the simulation is consulted.

    Args:
        call_status: Raw status string reported by ``zstatus call status``.
        meeting_id: Active meeting number while in a meeting.
        startable_meetings: Meeting numbers ``dial start`` accepts.
        joinable_meetings: Meeting numbers ``dial join`` accepts.
        connected: Whether the channel starts out connected.
    """

    def __init__(
        self,
        call_status: str = NOT_IN_MEETING,
        meeting_id: str = "",
        startable_meetings: Iterable[str] = (),
        joinable_meetings: Iterable[str] = (),
        connected: bool = True,
    ) -> None:
        self.call_status = call_status
        self.meeting_id = meeting_id
        self.startable_meetings = set(startable_meetings)
        self.joinable_meetings = set(joinable_meetings)
        self.microphone_muted = False
        self.camera_muted = False
        self.last_camera_action = ""
        self.notification = ""
        self.audio_inputs = ["Logitech Rally Mic"]
        self.audio_outputs = ["Logitech Rally Speaker"]
        self.cameras = ["Logi Rally Camera"]
        self.system_unit = {
            "room_version": "5.15.1 (2345)",
            "platform": "Windows 10",
            "room_info room_name": "Board Room",
            "room_info account_email": "boardroom@example.com",
            "room_info meeting_number": "2149695280",
        }
        self.sent: list[str] = []
        self.connect_count = 0
        self.fail_connect = False
        self._connected = connected
        self._scripted: dict[str, deque[str]] = defaultdict(deque)

    def connect(self) -> None:
        """Mark the channel connected, or fail if ``fail_connect`` is set."""
        self.connect_count += 1
        if self.fail_connect:
            raise TransportError("Stub room is unreachable.")
        self._connected = True

    def disconnect(self) -> None:
        """Mark the channel disconnected."""
        self._connected = False

    def is_connected(self) -> bool:
        """Check if the channel is currently connected."""
        return self._connected

    def queue_response(self, command: str, response: str) -> None:
        """Return ``response`` the next time a command with the same key is sent."""
        self._scripted[commands.command_key(command)].append(response)

    def send(self, command: str) -> str:
        """Record the command and answer it like a room would."""
        if not self._connected:
            raise TransportError("Stub room channel is not connected.")
        command = command.rstrip("\r\n")
        self.sent.append(command)

        queued = self._scripted.get(commands.command_key(command))
        if queued:
            return self.notification + queued.popleft()
        return self.notification + self._respond(command)

    def sent_keys(self) -> list[str]:
        """Canonical keys of every command sent so far, in order."""
        return [commands.command_key(command) for command in self.sent]

    # ------------------------------------------------------------------
    # Simulation
    # ------------------------------------------------------------------

    def _respond(self, command: str) -> str:
        key = commands.command_key(command)
        handlers = {
            commands.command_key(commands.CALL_STATUS): self._call_status,
            commands.command_key(commands.CALL_INFO): self._call_info,
            commands.command_key(commands.DIAL_START): self._dial_start,
            commands.command_key(commands.DIAL_JOIN): self._dial_join,
            commands.command_key(commands.CALL_DISCONNECT): self._hang_up,
            commands.command_key(commands.CALL_LEAVE): self._hang_up,
            commands.command_key(commands.MICROPHONE_MUTE): self._microphone_mute,
            commands.command_key(commands.CAMERA_MUTE): self._camera_mute,
            commands.command_key(commands.CAMERA_CONTROL): self._camera_control,
            commands.command_key(commands.AUDIO_INPUT_LINE): self._audio_input_line,
            commands.command_key(commands.AUDIO_OUTPUT_LINE): self._audio_output_line,
            commands.command_key(commands.CAMERA_LINE): self._camera_line,
            commands.command_key(commands.SYSTEM_UNIT): self._system_unit,
        }
        handler = handlers.get(key)
        if handler is None:
            return "*e Unknown command\r\nERROR\r\n\n"
        return handler(command)

    def _call_status(self, command: str) -> str:
        return _ok(f"*s Call Status: {self.call_status}")

    def _call_info(self, command: str) -> str:
        if self.call_status != IN_MEETING:
            return _error("*r InfoResult (status=Error):", '  reason: "Not in meeting"')
        return _ok(
            "*r InfoResult (status=OK):",
            f"*r InfoResult Info meeting_id: {self.meeting_id}",
            "*r InfoResult Info meeting_list_item topic: Weekly sync",
        )

    def _dial_start(self, command: str) -> str:
        return self._dial(command, "DialStartResult", self.startable_meetings)

    def _dial_join(self, command: str) -> str:
        return self._dial(command, "DialJoinResult", self.joinable_meetings)

    def _dial(self, command: str, result: str, accepted: set[str]) -> str:
        match = _MEETING_NUMBER.search(command)
        number = match.group(1) if match else ""
        if number not in accepted:
            return _error(f"*r {result} (status=Error):", '  reason: "Invalid meeting number"')
        self.call_status = IN_MEETING
        self.meeting_id = number
        return _ok(f"*r {result} (status=OK):")

    def _hang_up(self, command: str) -> str:
        self.call_status = NOT_IN_MEETING
        self.meeting_id = ""
        return _ok("*r CallDisconnectResult (status=OK):")

    def _microphone_mute(self, command: str) -> str:
        value = self._configure(command, "microphone_muted")
        if value is None:
            return _error("*c zConfiguration Call Microphone Mute (status=Error):")
        return _ok(f"*c zConfiguration Call Microphone Mute: {value}")

    def _camera_mute(self, command: str) -> str:
        value = self._configure(command, "camera_muted")
        if value is None:
            return _error("*c zConfiguration Call Camera Mute (status=Error):")
        return _ok(f"*c zConfiguration Call Camera Mute: {value}")

    def _configure(self, command: str, attribute: str) -> str | None:
        if self.call_status != IN_MEETING:
            return None
        _, sep, value = command.partition(":")
        if sep:
            setattr(self, attribute, value.strip().lower() == commands.ON)
        return commands.ON if getattr(self, attribute) else commands.OFF

    def _camera_control(self, command: str) -> str:
        match = _CAMERA_ACTION.search(command)
        self.last_camera_action = match.group(1) if match else ""
        return _ok("*r CameraControl (status=OK):")

    def _audio_input_line(self, command: str) -> str:
        return _ok(*self._lines(commands.AUDIO_INPUT_PREFIX, self.audio_inputs))

    def _audio_output_line(self, command: str) -> str:
        return _ok(*self._lines(commands.AUDIO_OUTPUT_PREFIX, self.audio_outputs))

    def _camera_line(self, command: str) -> str:
        return _ok(*self._lines(commands.CAMERA_LINE_PREFIX, self.cameras))

    def _system_unit(self, command: str) -> str:
        return _ok(*(
            f"{commands.SYSTEM_UNIT_PREFIX} {field}: {value}"
            for field, value in self.system_unit.items()
        ))

    @staticmethod
    def _lines(prefix: str, names: list[str]) -> list[str]:
        lines: list[str] = []
        for index, name in enumerate(names, start=1):
            lines.append(f"{prefix} {index} id: device-{index}")
            lines.append(f"{prefix} {index} Name: {name}")
            lines.append(f"{prefix} {index} Selected: {'on' if index == 1 else 'off'}")
        return lines
