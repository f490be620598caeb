"""Error types raised by the Zoom Rooms shell client.

Local validation errors subclass the matching built-in so callers may catch
either ValueError/RuntimeError or the specific client error.
"""

from __future__ import annotations


class ZoomRoomsError(Exception):
    """Base class for all client errors."""


class InvalidArgumentError(ZoomRoomsError, ValueError):
    """Caller input failed local validation and was never sent to the device."""


class InvalidStateError(ZoomRoomsError, RuntimeError):
    """The operation needs a session state the device is not currently in."""


class TransportError(ZoomRoomsError, ConnectionError):
    """The shell channel could not connect, send, or receive."""


class ProtocolError(ZoomRoomsError):
    """A command was sent but did not produce a usable response.

    Args:
        command: The command text as sent (without trailing carriage return).
        response: The last raw response received for the command.
        message: Optional human-readable summary.
    """

    def __init__(self, command: str, response: str, message: str = "") -> None:
        self.command = command
        self.response = response
        super().__init__(message or f"Command '{command}' failed.")


class CommandFailureError(ProtocolError):
    """The device answered the command with an explicit error literal."""


class VerificationTimeoutError(ProtocolError):
    """The response never satisfied the completeness check within the retry ceiling."""


class DialFailureError(ZoomRoomsError):
    """Neither starting nor joining the requested meeting succeeded."""

    def __init__(self, meeting_number: str) -> None:
        self.meeting_number = meeting_number
        super().__init__(f"Unable to start or join meeting {meeting_number}.")
