import json
import pytest
from webhook_service.decoder import decode_full, decode_transaction_id_only
from webhook_service.errors import DecodeError

VALID = {
    "transaction_id": "abc123",
    "amount": "49.90",
    "currency": "BRL",
    "event": "payment_success",
    "timestamp": "2023-10-01T12:00:00Z",
}


def test_decode_full_accepts_complete_payload():
    payload = decode_full(json.dumps(VALID).encode())

    assert payload.transaction_id == "abc123"
    assert payload.amount == "49.90"
    assert payload.timestamp == "2023-10-01T12:00:00Z"


def test_decode_full_ignores_unknown_keys():
    payload = decode_full(json.dumps({**VALID, "extra": 1}))
    assert payload.currency == "BRL"


def test_decode_full_lists_missing_fields():
    body = {k: v for k, v in VALID.items() if k not in ("amount", "event")}

    with pytest.raises(DecodeError) as exc_info:
        decode_full(json.dumps(body).encode())

    assert sorted(exc_info.value.fields) == ["amount", "event"]


def test_decode_full_rejects_non_string_amount():
    """Amounts are exact strings; a JSON number is a mistyped field."""
    with pytest.raises(DecodeError) as exc_info:
        decode_full(json.dumps({**VALID, "amount": 49.9}).encode())

    assert exc_info.value.fields == ["amount"]


@pytest.mark.parametrize("body", [b"", b"not json {{{", b"[1, 2]", b'"abc123"'])
def test_decode_full_rejects_garbage(body):
    with pytest.raises(DecodeError):
        decode_full(body)


def test_transaction_id_recovered_from_partial_payload():
    body = json.dumps({"transaction_id": "abc123abc", "currency": "BRL"}).encode()
    assert decode_transaction_id_only(body) == "abc123abc"


@pytest.mark.parametrize(
    "body",
    [b"{}", b'{"transaction_id": 42}', b"{broken", b'{"amount": "1.00"}'],
)
def test_transaction_id_unrecoverable(body):
    with pytest.raises(DecodeError):
        decode_transaction_id_only(body)
