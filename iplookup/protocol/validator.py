"""Response validation and mapped-address extraction."""

from typing import Union

from aioice import stun

from ..errors import NoAddressAttributeError, TransactionMismatchError
from .codec import Response, decode

SocketAddress = tuple[str, int]


def extract_address(
    response: Union[bytes, Response],
    expected_transaction_id: bytes,
) -> SocketAddress:
    """Validate a Binding response and return the address it reports.

    Only the first mapped-address attribute (plain, XOR or alternate XOR
    encoding) is used; anything after it is ignored.

    Args:
        response: Raw datagram, or an already decoded Response.
        expected_transaction_id: Id carried by the request that was sent.

    Returns:
        (ip, port) tuple as seen by the server.

    Raises:
        CodecError: If the raw datagram is not a valid STUN message.
        TransactionMismatchError: If the transaction id doesn't match.
        NoAddressAttributeError: If no mapped-address attribute is present.
    """
    raw = b""
    if isinstance(response, (bytes, bytearray, memoryview)):
        raw = bytes(response)
        response = decode(raw)

    if response.transaction_id != expected_transaction_id:
        raise TransactionMismatchError(response.transaction_id, expected_transaction_id)

    for attribute in response.attributes:
        if attribute.is_address:
            host, port = attribute.value
            return host, port

    raise NoAddressAttributeError(_describe_missing(response, raw), raw=raw, response=response)


def _describe_missing(response: Response, raw: bytes) -> str:
    message = f"No address attribute found in response: {response!r}"
    if response.message_class == stun.Class.ERROR:
        error_code = response.get("ERROR-CODE")
        if error_code:
            message += f" (error {error_code[0]} - {error_code[1]})"
    if raw:
        message += f" raw={raw.hex()}"
    return message
