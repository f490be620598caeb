"""Serialized command execution over a shared shell channel."""

from __future__ import annotations

import logging
import threading
import time
from typing import Callable

from zrshell.channel.interfaces import ShellChannel
from zrshell.core.errors import CommandFailureError, VerificationTimeoutError
from zrshell.protocol.verifier import ResponseVerifier, Verdict

logger = logging.getLogger(__name__)


class CommandExecutor:
    """Runs one command at a time against a shell channel.

    The channel cannot pair responses with concurrent commands, so every
    execution holds a single lock across the reconnect check, the send and
    the verify/retry loop.

    Args:
        channel: Connected (or connectable) shell channel.
        verifier: Response verifier. Defaults to the standard zCommand markers.
        retry_limit: Maximum number of send attempts for an incomplete response.
        retry_delay: Seconds to wait between attempts.
        sleep: Sleep function, injectable for tests.
    """

    def __init__(
        self,
        channel: ShellChannel,
        verifier: ResponseVerifier | None = None,
        retry_limit: int = 10,
        retry_delay: float = 0.0,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        if retry_limit < 1:
            raise ValueError("retry_limit must be at least 1.")
        self._channel = channel
        self._verifier = verifier or ResponseVerifier()
        self._retry_limit = retry_limit
        self._retry_delay = retry_delay
        self._sleep = sleep
        self._lock = threading.Lock()

    @property
    def channel(self) -> ShellChannel:
        """The underlying shell channel."""
        return self._channel

    def refresh_connection(self) -> None:
        """Reconnect the channel if it has dropped."""
        with self._lock:
            self._ensure_connected()

    def execute(self, command: str) -> str:
        """Send a command and return its verified response.

        Args:
            command: Command text. A trailing carriage return is optional.

        Returns:
            The raw response that satisfied the verifier.

        Raises:
            CommandFailureError: The device answered with an error literal.
            VerificationTimeoutError: No complete response within the retry limit.
            TransportError: The channel could not connect or send.
        """
        command = command.rstrip("\r\n")
        with self._lock:
            self._ensure_connected()
            response = ""
            for attempt in range(1, self._retry_limit + 1):
                if attempt > 1 and self._retry_delay > 0:
                    self._sleep(self._retry_delay)
                logger.debug("Sending '%s' (attempt %d/%d)", command, attempt, self._retry_limit)
                response = self._channel.send(command)
                verdict = self._verifier.verify(command, response)
                if verdict is Verdict.SUCCESS:
                    return response
                if verdict is Verdict.ERROR:
                    raise CommandFailureError(
                        command, response, f"Device rejected '{command}'."
                    )

            logger.warning(
                "No complete response to '%s' after %d attempts.", command, self._retry_limit
            )
            raise VerificationTimeoutError(
                command,
                response,
                f"Incomplete response to '{command}' after {self._retry_limit} attempts.",
            )

    def _ensure_connected(self) -> None:
        if not self._channel.is_connected():
            logger.info("Shell channel is not connected, reconnecting.")
            self._channel.connect()
