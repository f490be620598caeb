"""zCommand shell vocabulary.

Command templates sent to the Zoom Rooms CLI, the response markers used to
verify them, and the literal terminators the shell emits.
"""

from __future__ import annotations

# Commands
DIAL_START = "zcommand dial start meetingNumber:{meeting_number}"
DIAL_JOIN = "zcommand dial join meetingNumber:{meeting_number}"
CALL_LEAVE = "zcommand call leave"
CALL_DISCONNECT = "zcommand call disconnect"
CALL_INFO = "zcommand call info"
CAMERA_CONTROL = "zcommand call cameracontrol id:0 state:start action:{direction}"
CALL_STATUS = "zstatus call status"
AUDIO_INPUT_LINE = "zstatus audio input line"
AUDIO_OUTPUT_LINE = "zstatus audio output line"
CAMERA_LINE = "zstatus video camera line"
SYSTEM_UNIT = "zstatus systemunit"
MICROPHONE_MUTE = "zconfiguration call microphone mute"
CAMERA_MUTE = "zconfiguration call camera mute"
SET_MICROPHONE_MUTE = MICROPHONE_MUTE + ": {value}"
SET_CAMERA_MUTE = CAMERA_MUTE + ": {value}"

ON = "on"
OFF = "off"

# Line prefixes of property blocks
AUDIO_INPUT_PREFIX = "*s Audio Input Line"
AUDIO_OUTPUT_PREFIX = "*s Audio Output Line"
CAMERA_LINE_PREFIX = "*s Video Camera Line"
SYSTEM_UNIT_PREFIX = "*s SystemUnit"
MEETING_ID_PREFIX = "*r InfoResult Info meeting_id"

# Response framing
BLOCK_END = "** end"
OK = "OK"
STATUS_MARKER = "call status:"
MUTE_MARKER = "mute:"

COMMAND_FAMILIES = ("zcommand", "zstatus", "zconfiguration")

COMMAND_SUCCESS_LITERALS = ("** end\r\n\r\nOK\r\n",)
COMMAND_ERROR_LITERALS = ("*e Connection rejected\r\n\n", "ERROR\r\n\n")
LOGIN_SUCCESS_LITERALS = ("\r\n** end\r\n\n", "*r Login successful\r\nOK\r\n\n")
LOGIN_ERROR_LITERALS = ("Permission denied, please try again.\n",)


def command_key(command: str) -> str:
    """Canonical verifier key for a command.

    Everything from the first colon on is a parameter and is dropped, e.g.
    ``zcommand dial start meetingNumber:123 password:4`` maps to
    ``zcommand dial start meetingnumber``.
    """
    return command.split(":", 1)[0].strip().lower()


def is_family_command(command: str) -> bool:
    """Whether the command belongs to the zCommand/zStatus/zConfiguration family."""
    return command.strip().lower().startswith(COMMAND_FAMILIES)


# Expected response substring per command key.
RESPONSE_MARKERS: dict[str, str] = {
    command_key(AUDIO_INPUT_LINE): AUDIO_INPUT_PREFIX,
    command_key(AUDIO_OUTPUT_LINE): AUDIO_OUTPUT_PREFIX,
    command_key(SYSTEM_UNIT): SYSTEM_UNIT_PREFIX,
    command_key(CAMERA_LINE): CAMERA_LINE_PREFIX,
    command_key(CALL_STATUS): "*s Call Status:",
    command_key(CALL_INFO): "*r InfoResult",
    command_key(MICROPHONE_MUTE): "*c zConfiguration Call Microphone Mute",
    command_key(CAMERA_MUTE): "*c zConfiguration Call Camera Mute",
    command_key(CALL_DISCONNECT): "*r CallDisconnectResult",
    command_key(CALL_LEAVE): "*r CallDisconnectResult",
    command_key(DIAL_JOIN): "*r DialJoinResult",
    command_key(DIAL_START): "*r DialStartResult",
    command_key(CAMERA_CONTROL): "*r CameraControl",
}
