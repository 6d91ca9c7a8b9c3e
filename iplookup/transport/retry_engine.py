"""Send/receive loop for a single STUN transaction.

The request is re-sent at the start of every attempt, since UDP delivery
isn't guaranteed, and each attempt waits twice as long as the previous one.
Datagrams from any origin other than the destination are dropped without
ending the current receive window.
"""

import asyncio
import logging
from typing import Callable, Optional

from ..errors import LookupTimeoutError, TransportError
from .retry_policy import BackoffPolicy, RetryState, default_backoff_policy
from .udp_channel import RECV_BUFFER_SIZE, Address, DatagramChannel, same_endpoint

logger = logging.getLogger(__name__)


async def send_and_await(
    channel: DatagramChannel,
    destination: Address,
    request_bytes: bytes,
    transaction_id: bytes,
    policy: Optional[BackoffPolicy] = None,
    on_timeout: Optional[Callable[[RetryState], None]] = None,
) -> bytes:
    """Send a request and wait for the destination's reply, with backoff.

    Args:
        channel: Bound datagram channel, owned by the caller.
        destination: Server socket address.
        request_bytes: Serialized request, sent unchanged on every attempt.
        transaction_id: Id carried by the request (used in diagnostics).
        policy: Backoff policy. Default: 5 attempts, 1s doubling windows.
        on_timeout: Optional callback invoked each time a receive window elapses.

    Returns:
        Payload of the first datagram received from ``destination``.

    Raises:
        TransportError: If a send or receive fails for any reason other than
            the receive window elapsing.
        LookupTimeoutError: If every attempt's window elapsed.
    """
    policy = policy or default_backoff_policy()
    tid = transaction_id.hex()

    for attempt in range(policy.max_attempts):
        await _send(channel, destination, request_bytes, policy.send_timeout)

        timeout = policy.get_timeout(attempt)
        try:
            return await _receive_from(channel, destination, timeout)
        except TimeoutError:
            state = RetryState(attempt=attempt, timeout=timeout)
            if attempt + 1 == policy.max_attempts:
                logger.warning("Timed out after %dms, giving up.", state.timeout_ms)
            else:
                logger.warning(
                    "Timed out after %dms, trying %s again... (transaction %s)",
                    state.timeout_ms, _format(destination), tid,
                )
            if on_timeout:
                on_timeout(state)
        except OSError as e:
            raise TransportError(f"Failed to receive STUN response: {e}") from e

    raise LookupTimeoutError(
        f"Timed out waiting for response from {_format(destination)}",
        attempts=policy.max_attempts,
    )


async def _send(
    channel: DatagramChannel,
    destination: Address,
    data: bytes,
    timeout: float,
) -> None:
    # Sending on a local UDP socket shouldn't block; a timeout here isn't retried
    try:
        await asyncio.wait_for(channel.send_to(data, destination), timeout)
    except TimeoutError as e:
        raise TransportError(
            f"Timed out sending request to {_format(destination)}"
        ) from e
    except OSError as e:
        raise TransportError(
            f"Failed to send STUN request to {_format(destination)}: {e}"
        ) from e


async def _receive_from(
    channel: DatagramChannel,
    destination: Address,
    timeout: float,
) -> bytes:
    """Wait up to ``timeout`` for a datagram from ``destination``.

    Raises:
        TimeoutError: If the window elapses first.
        OSError: On any other receive failure.
    """
    async with asyncio.timeout(timeout):
        while True:
            data, origin = await channel.recv_from(RECV_BUFFER_SIZE)
            if same_endpoint(origin, destination):
                return data
            logger.warning(
                "Response origin %s doesn't match request target %s",
                _format(origin), _format(destination),
            )


def _format(address: Address) -> str:
    host, port = address[0], address[1]
    if ":" in host:
        return f"[{host}]:{port}"
    return f"{host}:{port}"
