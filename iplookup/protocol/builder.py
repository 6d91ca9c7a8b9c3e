"""Binding request construction."""

from typing import NamedTuple

from aioice import stun
from aioice.utils import random_transaction_id

from .codec import encode


class BindingRequest(NamedTuple):
    """A serialized Binding Request and the id it carries."""
    transaction_id: bytes
    data: bytes
    message: stun.Message


def new_transaction_id() -> bytes:
    """Draw a fresh 96-bit transaction id."""
    return random_transaction_id()


def build_request() -> BindingRequest:
    """Build a Binding Request with a fresh transaction id.

    The returned bytes are reused verbatim for every retransmission.

    Returns:
        BindingRequest with the transaction id, wire bytes and message.

    Raises:
        EncodingError: If the message fails to serialize.
    """
    transaction_id = new_transaction_id()
    message = stun.Message(
        message_method=stun.Method.BINDING,
        message_class=stun.Class.REQUEST,
        transaction_id=transaction_id,
    )
    return BindingRequest(transaction_id, encode(message), message)
