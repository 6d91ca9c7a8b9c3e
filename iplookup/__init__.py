"""iplookup - query a STUN service for the current public IP address."""

from .client import LookupResult, lookup, run_client
from .errors import IPLookupError

__version__ = "0.1.0"

__all__ = [
    "IPLookupError",
    "LookupResult",
    "lookup",
    "run_client",
]
