"""Dial string parsing.

A Zoom Room is dialed with a meeting SIP address of the form
``<meetingNumber>[.<passcode>]@<domain>.<tld>``, e.g.
``2754909175.013196@zoomcrc.com``. The domain is only checked against the
general pattern; no specific Zoom SIP domain is required.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from zrshell.core.errors import InvalidArgumentError

DIAL_STRING_PATTERN = re.compile(r"^(\d+)(\.(\d+))?@([a-z]+\.[a-z]{2,5})$")


@dataclass(frozen=True)
class DialTarget:
    """A parsed meeting address.

    Attributes:
        meeting_number: Numeric Zoom meeting id.
        passcode: Meeting passcode, empty if none was given.
        domain: SIP domain the address was written against.
    """

    meeting_number: str
    passcode: str = ""
    domain: str = ""

    @property
    def masked_passcode(self) -> str:
        """Passcode suitable for logs."""
        return "*" * len(self.passcode)


def parse_dial_string(dial_string: str | None) -> DialTarget:
    """Parse and validate a dial string.

    Args:
        dial_string: Address such as ``2754909175.013196@zoomcrc.com``.

    Returns:
        The parsed DialTarget.

    Raises:
        InvalidArgumentError: If the string is empty or does not match
            ``digits[.digits]@name.tld``.
    """
    if not dial_string:
        raise InvalidArgumentError("Dial string is empty.")
    match = DIAL_STRING_PATTERN.fullmatch(dial_string)
    if match is None:
        raise InvalidArgumentError(
            f"Dial string '{dial_string}' does not match the expected pattern "
            "ddddddddd.dddddd@sssssss.sssss"
        )
    return DialTarget(
        meeting_number=match.group(1),
        passcode=match.group(3) or "",
        domain=match.group(4),
    )
