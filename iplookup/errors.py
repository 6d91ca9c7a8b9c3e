"""Error types raised by the lookup pipeline.

Every failure after argument parsing is fatal: errors bubble up unchanged to
the CLI, which prints them and exits non-zero.
"""

from typing import Optional


class IPLookupError(Exception):
    """Base class for all lookup failures."""


class ArgumentError(IPLookupError):
    """Missing or malformed endpoint argument."""


class ConfigError(IPLookupError):
    """Configuration file could not be loaded or failed validation."""


class ResolutionError(IPLookupError):
    """Endpoint could not be resolved to a socket address."""


class EncodingError(IPLookupError):
    """A STUN message could not be serialized."""


class CodecError(IPLookupError):
    """A received datagram could not be parsed as a STUN message."""


class TransportError(IPLookupError):
    """Socket send/receive failed for a reason other than a receive timeout."""


class LookupTimeoutError(IPLookupError):
    """All attempts elapsed without a response from the server."""

    def __init__(self, message: str, attempts: int = 0):
        super().__init__(message)
        self.attempts = attempts


class TransactionMismatchError(IPLookupError):
    """Response transaction id differs from the one sent."""

    def __init__(self, received: bytes, expected: bytes):
        super().__init__(
            f"Returned transaction id {received.hex()} doesn't match sent {expected.hex()}"
        )
        self.received = received
        self.expected = expected


class NoAddressAttributeError(IPLookupError):
    """Well-formed response without any mapped-address attribute."""

    def __init__(self, message: str, raw: bytes = b"", response: Optional[object] = None):
        super().__init__(message)
        self.raw = raw
        self.response = response
