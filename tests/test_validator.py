"""Tests for response validation and address extraction."""

import pytest
from aioice import stun

from conftest import binding_response, raw_message
from iplookup.errors import CodecError, NoAddressAttributeError, TransactionMismatchError
from iplookup.protocol import decode, extract_address
from iplookup.protocol.codec import XOR_MAPPED_ADDRESS_ALT_TYPE


def test_extracts_xor_mapped_address(transaction_id: bytes) -> None:
    data = binding_response(
        transaction_id, {"XOR-MAPPED-ADDRESS": ("203.0.113.5", 54321)}
    )

    assert extract_address(data, transaction_id) == ("203.0.113.5", 54321)


def test_extracts_plain_mapped_address(transaction_id: bytes) -> None:
    data = binding_response(transaction_id, {"MAPPED-ADDRESS": ("192.0.2.44", 6000)})

    assert extract_address(data, transaction_id) == ("192.0.2.44", 6000)


def test_extracts_alternate_xor_encoding(transaction_id: bytes) -> None:
    value = stun.pack_xor_address(("198.51.100.20", 40000), transaction_id)
    data = raw_message(transaction_id, [(XOR_MAPPED_ADDRESS_ALT_TYPE, value)])

    assert extract_address(data, transaction_id) == ("198.51.100.20", 40000)


def test_first_address_attribute_wins_mapped_first(transaction_id: bytes) -> None:
    data = binding_response(transaction_id, {
        "MAPPED-ADDRESS": ("192.0.2.1", 1111),
        "XOR-MAPPED-ADDRESS": ("192.0.2.2", 2222),
    })

    assert extract_address(data, transaction_id) == ("192.0.2.1", 1111)


def test_first_address_attribute_wins_xor_first(transaction_id: bytes) -> None:
    data = binding_response(transaction_id, {
        "XOR-MAPPED-ADDRESS": ("192.0.2.2", 2222),
        "MAPPED-ADDRESS": ("192.0.2.1", 1111),
    })

    assert extract_address(data, transaction_id) == ("192.0.2.2", 2222)


def test_non_address_attributes_are_skipped(transaction_id: bytes) -> None:
    data = binding_response(transaction_id, {
        "SOFTWARE": "stund",
        "OTHER-ADDRESS": ("192.0.2.9", 3479),
        "XOR-MAPPED-ADDRESS": ("203.0.113.5", 54321),
    })

    assert extract_address(data, transaction_id) == ("203.0.113.5", 54321)


def test_accepts_decoded_response(transaction_id: bytes) -> None:
    response = decode(binding_response(
        transaction_id, {"XOR-MAPPED-ADDRESS": ("203.0.113.5", 54321)}
    ))

    assert extract_address(response, transaction_id) == ("203.0.113.5", 54321)


def test_transaction_mismatch_rejected(transaction_id: bytes) -> None:
    other_id = b"\xff" * 12
    data = binding_response(other_id, {"XOR-MAPPED-ADDRESS": ("203.0.113.5", 54321)})

    with pytest.raises(TransactionMismatchError) as exc_info:
        extract_address(data, transaction_id)

    assert exc_info.value.received == other_id
    assert exc_info.value.expected == transaction_id


def test_missing_address_includes_raw_response(transaction_id: bytes) -> None:
    data = binding_response(transaction_id, {"SOFTWARE": "stund"})

    with pytest.raises(NoAddressAttributeError) as exc_info:
        extract_address(data, transaction_id)

    assert exc_info.value.raw == data
    assert data.hex() in str(exc_info.value)
    assert "SOFTWARE" in str(exc_info.value)


def test_error_response_reports_error_code(transaction_id: bytes) -> None:
    data = binding_response(
        transaction_id,
        {"ERROR-CODE": (400, "Bad Request")},
        message_class=stun.Class.ERROR,
    )

    with pytest.raises(NoAddressAttributeError, match="400 - Bad Request"):
        extract_address(data, transaction_id)


def test_malformed_bytes_raise_codec_error(transaction_id: bytes) -> None:
    with pytest.raises(CodecError):
        extract_address(b"\x00" * 7, transaction_id)


def test_missing_address_carries_decoded_response(transaction_id: bytes) -> None:
    data = binding_response(transaction_id, {"SOFTWARE": "stund"})

    with pytest.raises(NoAddressAttributeError) as exc_info:
        extract_address(data, transaction_id)

    response = exc_info.value.response
    assert response.transaction_id == transaction_id
    assert [a.name for a in response.attributes] == ["SOFTWARE"]
