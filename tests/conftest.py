"""Shared fixtures: fake datagram channels and STUN message helpers."""

from __future__ import annotations

import asyncio
import struct
from typing import Callable, Optional

import pytest
from aioice import stun

SERVER = ("198.51.100.7", 3478)


def binding_response(
    transaction_id: bytes,
    attributes: Optional[dict] = None,
    message_class: stun.Class = stun.Class.RESPONSE,
) -> bytes:
    """Serialize a Binding response with aioice."""
    message = stun.Message(
        message_method=stun.Method.BINDING,
        message_class=message_class,
        transaction_id=transaction_id,
        attributes=attributes or {},
    )
    return bytes(message)


def raw_message(transaction_id: bytes, attributes: list[tuple[int, bytes]]) -> bytes:
    """Hand-assemble a Binding response from (type, value) pairs."""
    body = b""
    for attr_type, value in attributes:
        body += struct.pack("!HH", attr_type, len(value)) + value
        body += bytes(stun.padding_length(len(value)))
    header = struct.pack("!HHI12s", 0x0101, len(body), stun.COOKIE, transaction_id)
    return header + body


class FakeChannel:
    """Datagram channel driven by a reply function.

    ``reply(send_count, data)`` is called on each send and returns a list of
    (payload, origin) datagrams to make available to the receiver.
    """

    def __init__(self, reply: Optional[Callable[[int, bytes], list]] = None):
        self.reply = reply or (lambda count, data: [])
        self.sent: list[tuple[bytes, tuple]] = []
        self.closed = False
        self._queue: asyncio.Queue = asyncio.Queue()

    async def send_to(self, data: bytes, address: tuple) -> int:
        self.sent.append((data, address))
        for datagram in self.reply(len(self.sent), data):
            self._queue.put_nowait(datagram)
        return len(data)

    async def recv_from(self, bufsize: int) -> tuple[bytes, tuple]:
        item = await self._queue.get()
        if isinstance(item, BaseException):
            raise item
        return item

    def close(self) -> None:
        self.closed = True


class StallingSendChannel(FakeChannel):
    """Channel whose send never completes."""

    async def send_to(self, data: bytes, address: tuple) -> int:
        await asyncio.sleep(3600)
        return 0


class FailingSendChannel(FakeChannel):
    async def send_to(self, data: bytes, address: tuple) -> int:
        raise OSError(101, "Network is unreachable")


@pytest.fixture
def server() -> tuple:
    return SERVER


@pytest.fixture
def transaction_id() -> bytes:
    return bytes(range(1, 13))


@pytest.fixture
def channel_factory():
    return FakeChannel
