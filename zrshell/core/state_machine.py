"""Call session state definitions.

Defines the states a Zoom Room reports for its single call session and
the role the local room holds in that session.
"""

from __future__ import annotations

from enum import Enum, auto


class SessionState(Enum):
    """States of the room's call session, as reported by ``zstatus call status``.

    Transitions:
        NOT_IN_MEETING → CONNECTING (dial start/join accepted)
        CONNECTING → IN_MEETING (meeting joined)
        CONNECTING → NOT_IN_MEETING (self-cleared, or forced disconnect when stuck)
        IN_MEETING → NOT_IN_MEETING (hangup)

    UNKNOWN is reported for status text the client does not recognize and
    behaves as NOT_IN_MEETING for every precondition check.
    """

    NOT_IN_MEETING = auto()
    CONNECTING = auto()
    IN_MEETING = auto()
    UNKNOWN = auto()


class SessionRole(Enum):
    """Role recorded by the last successful dial.

    HOST rooms started the meeting and may end it for everyone;
    PARTICIPANT rooms joined someone else's meeting and may only leave.
    """

    HOST = auto()
    PARTICIPANT = auto()
