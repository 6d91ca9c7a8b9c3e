"""STUN lookup client - orchestrates a single binding transaction.

Coordinates the full lookup flow:
1. Resolve the server endpoint
2. Bind a UDP socket to an ephemeral port
3. Build the binding request
4. Send with exponential backoff until the server replies
5. Validate the response and extract the mapped address
"""

import logging
import time
from dataclasses import dataclass
from typing import Optional

from .errors import TransportError
from .protocol import SocketAddress, build_request, decode, extract_address
from .resolver import resolve_endpoint
from .transport import BackoffPolicy, DatagramChannel, UdpChannel, send_and_await
from .transport.udp_channel import Address

logger = logging.getLogger(__name__)


@dataclass
class LookupResult:
    """Public address reported by a STUN server."""
    ip: str
    port: int
    server: str
    duration_ms: int = 0

    def __str__(self) -> str:
        return self.ip


async def run_client(
    channel: DatagramChannel,
    destination: Address,
    debug: bool = False,
    policy: Optional[BackoffPolicy] = None,
) -> SocketAddress:
    """Run one binding transaction over an already bound channel.

    Args:
        channel: Datagram channel, used exclusively for this transaction.
        destination: Resolved server socket address.
        debug: Trace the outbound request and inbound response.
        policy: Backoff policy for the retry engine.

    Returns:
        (ip, port) the server saw the request come from.
    """
    request = build_request()
    if debug:
        logger.debug("Sending: %r (transaction %s)", request.message, request.transaction_id.hex())

    data = await send_and_await(
        channel,
        destination,
        request.data,
        request.transaction_id,
        policy=policy,
    )

    if debug:
        logger.debug("Received (%db): %r", len(data), decode(data))

    return extract_address(data, request.transaction_id)


async def lookup(
    endpoint: str,
    debug: bool = False,
    policy: Optional[BackoffPolicy] = None,
) -> LookupResult:
    """Resolve ``endpoint`` and ask it for our public address.

    Args:
        endpoint: STUN server as ``host:port``.
        debug: Trace the outbound request and inbound response.
        policy: Backoff policy. Default: 5 attempts, 1s doubling windows.

    Returns:
        LookupResult with the public IP and port.

    Raises:
        IPLookupError: On any failure (see iplookup.errors).
    """
    start_time = time.time()
    server = await resolve_endpoint(endpoint)
    logger.debug("Resolved %s to %s", endpoint, server.address)

    try:
        channel = UdpChannel(server.family)
    except OSError as e:
        raise TransportError(f"Failed to bind local UDP socket: {e}") from e

    with channel:
        logger.debug("Bound local UDP socket %s", channel.local_address)
        ip, port = await run_client(channel, server.address, debug=debug, policy=policy)

    return LookupResult(
        ip=ip,
        port=port,
        server=endpoint,
        duration_ms=int((time.time() - start_time) * 1000),
    )
