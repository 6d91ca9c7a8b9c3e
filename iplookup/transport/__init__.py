"""Transport module - UDP send/receive with exponential backoff."""

from .retry_engine import send_and_await
from .retry_policy import (
    BackoffPolicy,
    RetryState,
    default_backoff_policy,
    legacy_backoff_policy,
)
from .udp_channel import RECV_BUFFER_SIZE, DatagramChannel, UdpChannel, same_endpoint

__all__ = [
    "BackoffPolicy",
    "DatagramChannel",
    "RECV_BUFFER_SIZE",
    "RetryState",
    "UdpChannel",
    "default_backoff_policy",
    "legacy_backoff_policy",
    "same_endpoint",
    "send_and_await",
]
