"""UDP datagram channel for the STUN client.

Wraps a non-blocking UDP socket bound to an ephemeral local port so the
retry engine can await sends and receives on the running event loop.
"""

import asyncio
import ipaddress
import socket
from typing import Optional, Protocol

# Arbitrarily large; a STUN response shouldn't realistically exceed it
RECV_BUFFER_SIZE = 2048

Address = tuple  # (host, port) or (host, port, flowinfo, scope_id)


class DatagramChannel(Protocol):
    """Datagram transport used by the retry engine."""

    async def send_to(self, data: bytes, address: Address) -> int:
        """Send one datagram to ``address``, returning the bytes sent."""
        ...

    async def recv_from(self, bufsize: int) -> tuple[bytes, Address]:
        """Wait for the next datagram and return it with its origin."""
        ...

    def close(self) -> None:
        """Release the underlying socket."""
        ...


class UdpChannel:
    """Asyncio-friendly UDP socket bound to an ephemeral port.

    Usage:
        with UdpChannel(socket.AF_INET) as channel:
            await channel.send_to(data, ("198.51.100.1", 3478))
            data, origin = await channel.recv_from(RECV_BUFFER_SIZE)
    """

    def __init__(
        self,
        family: int = socket.AF_INET,
        bind_host: Optional[str] = None,
        bind_port: int = 0,
    ):
        """Create and bind the socket.

        Args:
            family: socket.AF_INET or socket.AF_INET6.
            bind_host: Local address. Default: the family's wildcard address.
            bind_port: Local port. Default: 0 (ephemeral).

        Raises:
            OSError: If the socket cannot be created or bound.
        """
        self.family = family
        self._sock: Optional[socket.socket] = self._create_socket(family, bind_host, bind_port)

    @staticmethod
    def _create_socket(family: int, bind_host: Optional[str], bind_port: int) -> socket.socket:
        """Create and configure the UDP socket."""
        if bind_host is None:
            bind_host = "::" if family == socket.AF_INET6 else "0.0.0.0"
        sock = socket.socket(family, socket.SOCK_DGRAM)
        try:
            sock.setblocking(False)
            sock.bind((bind_host, bind_port))
        except OSError:
            sock.close()
            raise
        return sock

    @property
    def sock(self) -> socket.socket:
        if self._sock is None:
            raise OSError("UDP channel is closed")
        return self._sock

    @property
    def local_address(self) -> Address:
        return self.sock.getsockname()

    async def send_to(self, data: bytes, address: Address) -> int:
        loop = asyncio.get_running_loop()
        return await loop.sock_sendto(self.sock, data, address)

    async def recv_from(self, bufsize: int = RECV_BUFFER_SIZE) -> tuple[bytes, Address]:
        loop = asyncio.get_running_loop()
        return await loop.sock_recvfrom(self.sock, bufsize)

    def close(self) -> None:
        """Close the UDP socket."""
        if self._sock:
            self._sock.close()
            self._sock = None

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()


def same_endpoint(a: Address, b: Address) -> bool:
    """Whether two socket addresses name the same IP and port.

    IP text is normalised, so IPv6 zero compression or letter case don't
    cause false mismatches.
    """
    try:
        ip_a = ipaddress.ip_address(a[0])
        ip_b = ipaddress.ip_address(b[0])
    except ValueError:
        return tuple(a[:2]) == tuple(b[:2])
    return ip_a == ip_b and a[1] == b[1]
