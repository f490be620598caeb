"""Abstract shell channel interface for the Zoom Rooms client.

All client code that talks to the device goes through this interface.
Concrete channels live next to it: ``ssh`` for a real room and ``stubs``
for development and testing without one.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


class ShellChannel(ABC):
    """An authenticated, line-oriented command shell on the device."""

    @abstractmethod
    def connect(self) -> None:
        """Open and authenticate the channel.

        Raises:
            TransportError: If the device cannot be reached or rejects the login.
        """
        ...

    @abstractmethod
    def disconnect(self) -> None:
        """Close the channel. Safe to call when already closed."""
        ...

    @abstractmethod
    def is_connected(self) -> bool:
        """Check if the channel is currently open."""
        ...

    @abstractmethod
    def send(self, command: str) -> str:
        """Write one command and return the output read back for it.

        Args:
            command: Command text. Implementations append the carriage
                return the shell expects if it is missing.

        Returns:
            Raw accumulated output, which may be partial.

        Raises:
            TransportError: If the channel is closed or the write fails.
        """
        ...
