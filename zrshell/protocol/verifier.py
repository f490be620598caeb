"""Response completeness checks for the zCommand shell.

The shell has no single terminator: some commands print their result and
then ``** end``, others finish with an ``OK`` line, and unsolicited
notifications may be interleaved with either. A response in the zCommand
family is therefore only complete when it carries the command's expected
marker *and* ends with a terminal token.
"""

from __future__ import annotations

import logging
from enum import Enum, auto
from types import MappingProxyType
from typing import Iterable, Mapping

from zrshell.protocol import commands

logger = logging.getLogger(__name__)


class Verdict(Enum):
    """Outcome of checking an accumulated response."""

    INCOMPLETE = auto()
    SUCCESS = auto()
    ERROR = auto()


def _ends_with_any(response: str, literals: Iterable[str]) -> str | None:
    """Return the first literal the response ends with, ignoring trailing whitespace."""
    tail = response.rstrip()
    for literal in literals:
        if tail.endswith(literal.rstrip()):
            return literal
    return None


class ResponseVerifier:
    """Decides whether a raw response to a command is complete.

    Args:
        markers: Expected response substring per canonical command key.
        success_literals: Generic success suffixes for commands without a marker.
        error_literals: Suffixes that mark a device-reported error.
    """

    def __init__(
        self,
        markers: Mapping[str, str] | None = None,
        success_literals: Iterable[str] = commands.COMMAND_SUCCESS_LITERALS,
        error_literals: Iterable[str] = commands.COMMAND_ERROR_LITERALS,
    ) -> None:
        self._markers = MappingProxyType(
            dict(commands.RESPONSE_MARKERS if markers is None else markers)
        )
        self._success_literals = tuple(success_literals)
        self._error_literals = tuple(error_literals)

    @property
    def markers(self) -> Mapping[str, str]:
        """Read-only view of the registered response markers."""
        return self._markers

    def verify(self, command: str, response: str) -> Verdict:
        """Classify an accumulated response.

        Args:
            command: Command text as sent.
            response: Everything read back for the command so far.

        Returns:
            ERROR if the response ends with a registered error literal,
            SUCCESS if it satisfies the framing rules for the command,
            INCOMPLETE otherwise.
        """
        error = _ends_with_any(response, self._error_literals)
        if error is not None:
            logger.debug("Error literal %r closes response to '%s'", error.strip(), command)
            return Verdict.ERROR

        marker = None
        if commands.is_family_command(command):
            marker = self._markers.get(commands.command_key(command))

        if marker is None:
            if _ends_with_any(response, self._success_literals) is not None:
                return Verdict.SUCCESS
            return Verdict.INCOMPLETE

        trimmed = response.strip()
        if marker in response and trimmed.endswith((commands.OK, commands.BLOCK_END)):
            return Verdict.SUCCESS
        return Verdict.INCOMPLETE
