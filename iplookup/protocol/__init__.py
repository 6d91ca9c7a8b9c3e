"""Protocol module - STUN binding request/response handling."""

from .builder import BindingRequest, build_request, new_transaction_id
from .codec import (
    ADDRESS_ATTRIBUTES,
    Attribute,
    Response,
    decode,
    encode,
)
from .validator import SocketAddress, extract_address

__all__ = [
    "ADDRESS_ATTRIBUTES",
    "Attribute",
    "BindingRequest",
    "Response",
    "SocketAddress",
    "build_request",
    "decode",
    "encode",
    "extract_address",
    "new_transaction_id",
]
