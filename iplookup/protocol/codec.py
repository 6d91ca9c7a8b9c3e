"""STUN codec boundary.

Wraps ``aioice.stun`` so the rest of the package only deals with
:class:`Response` values and :mod:`iplookup.errors` exceptions.

aioice collapses attributes into a name-keyed dict and ignores the 0x8020
XOR-MAPPED-ADDRESS code point still sent by some servers, so attributes are
walked here in wire order and decoded with aioice's own unpackers.
"""

import struct
from dataclasses import dataclass, field
from typing import Any, Iterator

from aioice import stun

from ..errors import CodecError, EncodingError

MAPPED_ADDRESS = "MAPPED-ADDRESS"
XOR_MAPPED_ADDRESS = "XOR-MAPPED-ADDRESS"
XOR_MAPPED_ADDRESS_ALT = "XOR-MAPPED-ADDRESS-ALT"

# Pre-RFC 5389 code point for XOR-MAPPED-ADDRESS
XOR_MAPPED_ADDRESS_ALT_TYPE = 0x8020

ADDRESS_ATTRIBUTES = (MAPPED_ADDRESS, XOR_MAPPED_ADDRESS, XOR_MAPPED_ADDRESS_ALT)


@dataclass(frozen=True)
class Attribute:
    """A decoded STUN attribute."""
    type: int
    name: str
    value: Any  # raw bytes for types the codec doesn't know

    @property
    def is_address(self) -> bool:
        return self.name in ADDRESS_ATTRIBUTES


@dataclass(frozen=True)
class Response:
    """A decoded STUN message with its attributes in wire order."""
    message_class: stun.Class
    message_method: stun.Method
    transaction_id: bytes
    attributes: tuple[Attribute, ...] = field(default_factory=tuple)

    def get(self, name: str) -> Any:
        """Value of the first attribute called ``name``, or None."""
        for attribute in self.attributes:
            if attribute.name == name:
                return attribute.value
        return None


def encode(message: stun.Message) -> bytes:
    """Serialize a STUN message.

    Raises:
        EncodingError: If the library fails to pack the message.
    """
    try:
        return bytes(message)
    except (ValueError, KeyError, struct.error) as e:
        raise EncodingError(f"Codec error when encoding request: {e}") from e


def decode(data: bytes) -> Response:
    """Parse a datagram into a :class:`Response`.

    Args:
        data: Raw datagram payload.

    Returns:
        Decoded response, attributes in the order they appear on the wire.

    Raises:
        CodecError: If the datagram is not a well-formed STUN message.
    """
    if len(data) >= stun.HEADER_LENGTH:
        cookie = struct.unpack("!I", data[4:8])[0]
        if cookie != stun.COOKIE:
            raise CodecError(
                f"Codec error when decoding response: bad magic cookie 0x{cookie:08x}"
            )

    try:
        message = stun.parse_message(data)
        attributes = tuple(_iter_attributes(data, message.transaction_id))
    except (ValueError, struct.error) as e:
        raise CodecError(f"Codec error when decoding response: {e}") from e

    return Response(
        message_class=message.message_class,
        message_method=message.message_method,
        transaction_id=message.transaction_id,
        attributes=attributes,
    )


def _iter_attributes(data: bytes, transaction_id: bytes) -> Iterator[Attribute]:
    pos = stun.HEADER_LENGTH
    while pos <= len(data) - 4:
        attr_type, attr_len = struct.unpack("!HH", data[pos:pos + 4])
        value = data[pos + 4:pos + 4 + attr_len]
        if len(value) != attr_len:
            raise ValueError(f"STUN attribute 0x{attr_type:04x} is truncated")
        yield _decode_attribute(attr_type, value, transaction_id)
        pos += 4 + attr_len + stun.padding_length(attr_len)


def _decode_attribute(attr_type: int, value: bytes, transaction_id: bytes) -> Attribute:
    if attr_type == XOR_MAPPED_ADDRESS_ALT_TYPE:
        return Attribute(
            attr_type,
            XOR_MAPPED_ADDRESS_ALT,
            stun.unpack_xor_address(value, transaction_id),
        )

    entry = stun.ATTRIBUTES_BY_TYPE.get(attr_type)
    if entry is None:
        return Attribute(attr_type, f"0x{attr_type:04X}", value)

    _, name, _, unpack = entry
    if unpack is stun.unpack_xor_address:
        return Attribute(attr_type, name, unpack(value, transaction_id))
    return Attribute(attr_type, name, unpack(value))
