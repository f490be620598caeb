"""SSH shell channel for a Zoom Room's zCommand CLI.

Opens an interactive paramiko shell, checks the post-login banner, and
reads command output until it ends with a terminal token or the read
timeout elapses. Partial output is returned as-is; deciding whether it
is complete is the verifier's job.
"""

from __future__ import annotations

import codecs
import logging
import time
from typing import Callable, Iterable

import paramiko

from zrshell.channel.interfaces import ShellChannel
from zrshell.core.errors import TransportError
from zrshell.protocol import commands

logger = logging.getLogger(__name__)

_RECV_BYTES = 4096
_POLL_INTERVAL = 0.02
_BLOCK_END_QUIET = 0.3
_READ_TERMINATORS = (commands.OK, "ERROR")


def _ends_with_any(text: str, literals: Iterable[str]) -> bool:
    tail = text.rstrip()
    return any(tail.endswith(literal.rstrip()) for literal in literals)


class SshShellChannel(ShellChannel):
    """Interactive SSH shell on a Zoom Room.

    Args:
        host: Device address.
        port: SSH port of the zCommand CLI.
        username: Login name.
        password: Login password.
        connect_timeout: Seconds allowed for TCP connect, banner and auth.
        read_timeout: Seconds to wait for a command's output to finish.
        login_success: Banner suffixes that confirm a successful login.
        login_error: Banner suffixes that signal a rejected login.
    """

    def __init__(
        self,
        host: str,
        port: int = 2244,
        username: str = "zoom",
        password: str = "",
        connect_timeout: float = 10.0,
        read_timeout: float = 5.0,
        login_success: Iterable[str] = commands.LOGIN_SUCCESS_LITERALS,
        login_error: Iterable[str] = commands.LOGIN_ERROR_LITERALS,
    ) -> None:
        self._host = host
        self._port = port
        self._username = username
        self._password = password
        self._connect_timeout = connect_timeout
        self._read_timeout = read_timeout
        self._login_success = tuple(login_success)
        self._login_error = tuple(login_error)
        self._client: paramiko.SSHClient | None = None
        self._shell: paramiko.Channel | None = None

    def connect(self) -> None:
        """Open the SSH session and verify the zCommand login banner."""
        self.disconnect()
        logger.info("Connecting to %s@%s:%d", self._username, self._host, self._port)

        client = paramiko.SSHClient()
        client.set_missing_host_key_policy(paramiko.AutoAddPolicy())
        try:
            client.connect(
                self._host,
                port=self._port,
                username=self._username,
                password=self._password,
                timeout=self._connect_timeout,
                banner_timeout=self._connect_timeout,
                auth_timeout=self._connect_timeout,
                allow_agent=False,
                look_for_keys=False,
            )
            shell = client.invoke_shell()
            shell.settimeout(self._read_timeout)
        except paramiko.AuthenticationException as e:
            client.close()
            raise TransportError(
                f"Authentication failed for {self._username}@{self._host}: {e}"
            ) from e
        except (paramiko.SSHException, OSError) as e:
            client.close()
            raise TransportError(f"Unable to connect to {self._host}:{self._port}: {e}") from e

        self._client = client
        self._shell = shell

        banner = self._read_until(
            lambda text: _ends_with_any(text, self._login_success + self._login_error),
            self._connect_timeout,
        )
        if _ends_with_any(banner, self._login_error):
            self.disconnect()
            raise TransportError(f"Login rejected by {self._host}: {banner.strip()}")
        if not _ends_with_any(banner, self._login_success):
            logger.warning("No login confirmation from %s, continuing.", self._host)
        logger.info("Connected to %s", self._host)

    def disconnect(self) -> None:
        """Close the shell and the SSH session."""
        shell, client = self._shell, self._client
        self._shell = None
        self._client = None
        if shell is not None:
            shell.close()
        if client is not None:
            client.close()
            logger.info("Disconnected from %s", self._host)

    def is_connected(self) -> bool:
        """Check if the shell is open and its transport is active."""
        if self._shell is None or self._client is None:
            return False
        transport = self._client.get_transport()
        return bool(
            not self._shell.closed and transport is not None and transport.is_active()
        )

    def send(self, command: str) -> str:
        """Write a command and read output until a terminal token or timeout."""
        if self._shell is None:
            raise TransportError("Shell channel is not connected.")

        # Leftovers from a previous command or unsolicited notifications.
        stale = self._drain()
        if stale.strip():
            logger.debug("Discarded %d stale bytes before '%s'", len(stale), command)

        try:
            self._shell.send(command.rstrip("\r\n") + "\r")
        except (paramiko.SSHException, OSError) as e:
            self.disconnect()
            raise TransportError(f"Failed to send '{command}': {e}") from e

        return self._read_until(
            lambda text: _ends_with_any(text, _READ_TERMINATORS),
            self._read_timeout,
            settled=lambda text: _ends_with_any(text, (commands.BLOCK_END,)),
        )

    def _read_until(
        self,
        done: Callable[[str], bool],
        timeout: float,
        settled: Callable[[str], bool] | None = None,
    ) -> str:
        """Accumulate output until ``done`` accepts it or ``timeout`` elapses.

        Output accepted by ``settled`` ends the read once the device has
        been quiet for ``_BLOCK_END_QUIET`` seconds. A block end is usually
        followed by an OK or ERROR line that may arrive in a later packet.
        """
        decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        buffer = ""
        deadline = time.monotonic() + timeout
        last_data = time.monotonic()
        while time.monotonic() < deadline:
            data = self._recv_ready_chunk()
            if data is None:
                if (
                    settled is not None
                    and settled(buffer)
                    and time.monotonic() - last_data >= _BLOCK_END_QUIET
                ):
                    break
                time.sleep(_POLL_INTERVAL)
                continue
            last_data = time.monotonic()
            buffer += decoder.decode(data)
            if done(buffer):
                break
        return buffer + decoder.decode(b"", final=True)

    def _drain(self) -> str:
        decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        drained = ""
        while True:
            data = self._recv_ready_chunk()
            if data is None:
                return drained + decoder.decode(b"", final=True)
            drained += decoder.decode(data)

    def _recv_ready_chunk(self) -> bytes | None:
        shell = self._shell
        if shell is None:
            raise TransportError("Shell channel is not connected.")
        try:
            if not shell.recv_ready():
                if shell.closed or shell.exit_status_ready():
                    self.disconnect()
                    raise TransportError(f"Shell on {self._host} closed by the device.")
                return None
            data = shell.recv(_RECV_BYTES)
        except (paramiko.SSHException, OSError) as e:
            self.disconnect()
            raise TransportError(f"Failed to read from {self._host}: {e}") from e
        if not data:
            self.disconnect()
            raise TransportError(f"Shell on {self._host} closed by the device.")
        return data
