"""Tests for the derived attribute and credential metadata."""
import pytest

from medcred.config import LEAF_FIELD_ORDER
from medcred.credentials.derive import (
    BN254_FIELD_MODULUS,
    DERIVATION_FUNCTION,
    DERIVATION_INPUT_FIELDS,
    derive_hash,
)
from medcred.credentials.signer import build_credential_metadata, build_credential_response
from medcred.db.models import IdentityRecord


def _record(**overrides) -> IdentityRecord:
    fields = {
        "id": "rec-1",
        "registry_number": "1234567890",
        "specialty_code": 15,
        "license": "A123456",
        "credential_type": "MD",
    }
    fields.update(overrides)
    return IdentityRecord(**fields)


class TestDeriveHash:
    def test_is_deterministic(self):
        assert derive_hash("1234567890", "A123456", "MD") == derive_hash(
            "1234567890", "A123456", "MD"
        )

    def test_is_decimal_field_element(self):
        value = derive_hash("1234567890", "A123456", "MD")
        assert value.isdigit()
        assert 0 <= int(value) < BN254_FIELD_MODULUS

    @pytest.mark.parametrize(
        "args",
        [
            ("1234567891", "A123456", "MD"),
            ("1234567890", "A123457", "MD"),
            ("1234567890", "A123456", "DO"),
        ],
    )
    def test_each_input_changes_value(self, args):
        assert derive_hash(*args) != derive_hash("1234567890", "A123456", "MD")

    def test_inputs_are_length_prefixed(self):
        # Plain concatenation would make these collide
        assert derive_hash("12", "3", "MD") != derive_hash("1", "23", "MD")

    def test_order_matters(self):
        assert derive_hash("A", "B", "MD") != derive_hash("B", "A", "MD")


class TestCredentialMetadata:
    def test_layout(self):
        record = _record()
        derived = derive_hash("1234567890", "A123456", "MD")
        metadata = build_credential_metadata(record, derived)

        assert metadata["rawAttributes"] == {
            "registryNumber": "1234567890",
            "specialtyCode": 15,
            "license": "A123456",
            "credentialType": "MD",
        }
        assert metadata["derivedAttribute"] == {
            "value": derived,
            "derivationFunction": DERIVATION_FUNCTION,
            "inputFields": list(DERIVATION_INPUT_FIELDS),
        }
        assert metadata["leafFieldOrder"] == list(LEAF_FIELD_ORDER)

    def test_leaf_field_order(self):
        assert LEAF_FIELD_ORDER == (
            "issuer",
            "secret",
            "specialty",
            "derivedHash",
            "issuedAt",
            "scope",
        )

    def test_response_keeps_signed_payload(self):
        signed = {"credentials": {"scope": "0"}, "signature": {"S": "3"}}
        response = build_credential_response(signed, {"leafFieldOrder": []})

        assert response["credentials"] == {"scope": "0"}
        assert response["signature"] == {"S": "3"}
        assert response["metadata"] == {"leafFieldOrder": []}
        assert "metadata" not in signed
