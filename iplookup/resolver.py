"""Endpoint parsing and resolution.

Turns a ``host:port`` argument into a concrete UDP socket address.
"""

import asyncio
import socket
from dataclasses import dataclass

from .errors import ArgumentError, ResolutionError


@dataclass(frozen=True)
class Endpoint:
    """A resolved STUN server endpoint."""
    host: str
    port: int
    family: int
    address: tuple  # sockaddr as returned by getaddrinfo

    def __str__(self) -> str:
        return f"{self.host}:{self.port}"


def parse_endpoint(endpoint: str) -> tuple[str, int]:
    """Split ``host:port`` (or ``[v6]:port``) into its parts.

    Raises:
        ArgumentError: If the text isn't a host:port pair.
    """
    if not endpoint:
        raise ArgumentError("Missing required argument")
    if endpoint.startswith("-"):
        # Probably an option like -h, don't try to resolve it
        raise ArgumentError(f"Unrecognized argument: {endpoint}")

    if endpoint.startswith("["):
        host, sep, port_str = endpoint[1:].partition("]:")
    else:
        host, sep, port_str = endpoint.rpartition(":")
        if ":" in host:
            raise ArgumentError(
                f"Invalid endpoint: {endpoint} (IPv6 addresses must be written as [addr]:port)"
            )

    if not sep or not host:
        raise ArgumentError(f"Invalid endpoint: {endpoint} (expected host:port)")

    try:
        port = int(port_str)
    except ValueError:
        raise ArgumentError(f"Invalid port in endpoint: {endpoint}") from None
    if not 0 < port <= 65535:
        raise ArgumentError(f"Port out of range in endpoint: {endpoint}")

    return host, port


async def resolve_endpoint(endpoint: str) -> Endpoint:
    """Resolve ``host:port`` to the first UDP socket address found.

    Raises:
        ArgumentError: If the text isn't a host:port pair.
        ResolutionError: If the host can't be resolved.
    """
    host, port = parse_endpoint(endpoint)
    loop = asyncio.get_running_loop()

    try:
        infos = await loop.getaddrinfo(host, port, type=socket.SOCK_DGRAM)
    except (socket.gaierror, UnicodeError) as e:
        raise ResolutionError(f"Invalid or unresolvable endpoint: {endpoint} ({e})") from e

    if not infos:
        raise ResolutionError(f"Missing addresses in endpoint resolution: {endpoint}")

    family, _, _, _, sockaddr = infos[0]
    return Endpoint(host=host, port=port, family=family, address=sockaddr)
