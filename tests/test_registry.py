"""Tests for the NPI registry cross-check.

Tests cover:
- Each failing step and the order steps run in
- Malformed registry payloads
- First-match specialty resolution
- Query parameters sent to the registry
"""
import httpx
import pytest

from medcred.exceptions import RegistryError, RegistryFailure
from medcred.registry.npi import (
    NPIRegistryClient,
    check_registry_record,
    normalize_credential,
)
from medcred.registry.specialties import SPECIALTY_CODES, resolve_specialty

from tests.fakes import TEST_REGISTRY_URL, FakeRegistry, npi_response


def _check(data, first="Jane", last="Doe"):
    return check_registry_record(data, "1234567890", first, last)


def _reason(data, **kwargs) -> str:
    with pytest.raises(RegistryError) as exc:
        _check(data, **kwargs)
    return exc.value.reason


# =============================================================================
# Record checks
# =============================================================================


class TestCheckRegistryRecord:
    def test_matching_record(self):
        attributes = _check(npi_response())
        assert attributes.registry_number == "1234567890"
        assert attributes.license == "A123456"
        assert attributes.specialty_code == 15
        assert attributes.credential_type == "MD"

    def test_doctor_of_osteopathy(self):
        attributes = _check(npi_response(credential="D.O."))
        assert attributes.credential_type == "DO"

    def test_registry_errors_mean_not_found(self):
        data = {"Errors": [{"description": "Invalid NPI number", "field": "number"}]}
        assert _reason(data) == RegistryFailure.NOT_FOUND.value

    def test_zero_results(self):
        assert _reason({"result_count": 0, "results": []}) == "NotFound"

    def test_missing_results_key(self):
        assert _reason({"result_count": 1}) == "NotFound"

    def test_non_object_payload(self):
        assert _reason(["unexpected"]) == "NotFound"

    def test_names_compare_case_insensitively(self):
        attributes = _check(npi_response(first_name="jane", last_name="DOE"))
        assert attributes.specialty_code == 15

    def test_names_compare_by_casefold(self):
        attributes = _check(npi_response(last_name="STRASSE"), last="Straße")
        assert attributes.credential_type == "MD"

    def test_prefix_name_is_rejected(self):
        # The registry answers "Jan" queries with "JANE" records
        assert _reason(npi_response(), first="Jan") == "NameMismatch"

    def test_last_name_mismatch(self):
        assert _reason(npi_response(last_name="DOERR")) == "NameMismatch"

    def test_missing_basic_section(self):
        data = npi_response()
        del data["results"][0]["basic"]
        assert _reason(data) == "NameMismatch"

    @pytest.mark.parametrize("credential", ["N.P.", "PA-C", "", None])
    def test_unsupported_credential(self, credential):
        assert _reason(npi_response(credential=credential)) == "UnsupportedCredentialType"

    def test_no_primary_taxonomy_is_missing_license(self):
        assert _reason(npi_response(primary=False)) == "MissingLicense"

    def test_missing_license(self):
        assert _reason(npi_response(license=None)) == "MissingLicense"

    def test_missing_description(self):
        assert _reason(npi_response(desc=None)) == "MissingSpecialty"

    def test_unmapped_description(self):
        assert _reason(npi_response(desc="Chiropractor")) == "UnsupportedSpecialty"

    def test_primary_taxonomy_is_selected(self):
        data = npi_response(desc="Dermatology", license="L-1")
        data["results"][0]["taxonomies"].insert(
            0, {"primary": False, "desc": "Pediatrics", "license": "L-0"}
        )
        attributes = _check(data)
        assert attributes.license == "L-1"
        assert attributes.specialty_code == 5

    def test_name_checked_before_credential(self):
        data = npi_response(last_name="SMITH", credential="N.P.", license=None)
        assert _reason(data) == "NameMismatch"

    def test_credential_checked_before_license(self):
        data = npi_response(credential="N.P.", license=None, desc=None)
        assert _reason(data) == "UnsupportedCredentialType"

    def test_license_checked_before_specialty(self):
        data = npi_response(license=None, desc="Chiropractor")
        assert _reason(data) == "MissingLicense"


class TestNormalizeCredential:
    @pytest.mark.parametrize(
        "raw, expected",
        [("M.D.", "MD"), ("md", "MD"), (" D.O. ", "DO"), ("MD", "MD")],
    )
    def test_normalize(self, raw, expected):
        assert normalize_credential(raw) == expected


# =============================================================================
# Specialty resolution
# =============================================================================


class TestResolveSpecialty:
    def test_table_keeps_declared_codes(self):
        codes = sorted(code for _, code in SPECIALTY_CODES)
        assert codes == list(range(1, len(SPECIALTY_CODES) + 1))

    def test_every_key_resolves_to_its_own_code(self):
        shadowed = [(key, code) for key, code in SPECIALTY_CODES if resolve_specialty(key) != code]
        assert shadowed == []

    def test_substring_match(self):
        assert resolve_specialty("Family Medicine Physician") == 8

    def test_case_insensitive(self):
        assert resolve_specialty("INTERNAL MEDICINE") == 15

    def test_first_key_in_table_order_wins(self):
        assert resolve_specialty("Internal Medicine, Cardiovascular Disease") == 3

    def test_narrow_key_wins_over_broader_key(self):
        assert resolve_specialty("Thoracic Surgery") == 40
        assert resolve_specialty("Vascular Surgery") == 42
        assert resolve_specialty("Radiation Oncology") == 34
        assert resolve_specialty("Surgery, General") == 39
        assert resolve_specialty("Oncology, Medical") == 22

    def test_no_match(self):
        assert resolve_specialty("Chiropractor") is None

    def test_custom_table(self):
        table = (("Surgery", 1), ("Thoracic Surgery", 2))
        assert resolve_specialty("Thoracic Surgery", table) == 1


# =============================================================================
# Registry client
# =============================================================================


class TestNPIRegistryClient:
    @pytest.mark.asyncio
    async def test_sends_number_and_names(self):
        registry = FakeRegistry()
        async with httpx.AsyncClient(transport=httpx.MockTransport(registry)) as client:
            npi = NPIRegistryClient(TEST_REGISTRY_URL, client)
            attributes = await npi.cross_check("1234567890", "Jane", "Doe")

        assert attributes.specialty_code == 15
        (request,) = registry.requests
        assert request.url.params["number"] == "1234567890"
        assert request.url.params["first_name"] == "Jane"
        assert request.url.params["last_name"] == "Doe"
        assert request.url.params["version"] == "2.1"

    @pytest.mark.asyncio
    async def test_record_failure_raises_registry_error(self):
        registry = FakeRegistry(payload={"result_count": 0, "results": []})
        async with httpx.AsyncClient(transport=httpx.MockTransport(registry)) as client:
            npi = NPIRegistryClient(TEST_REGISTRY_URL, client)
            with pytest.raises(RegistryError) as exc:
                await npi.cross_check("1234567890", "Jane", "Doe")
        assert exc.value.reason == "NotFound"

    @pytest.mark.asyncio
    async def test_http_error_is_not_a_registry_error(self):
        registry = FakeRegistry(payload={"error": "down"}, status_code=503)
        async with httpx.AsyncClient(transport=httpx.MockTransport(registry)) as client:
            npi = NPIRegistryClient(TEST_REGISTRY_URL, client)
            with pytest.raises(httpx.HTTPStatusError):
                await npi.cross_check("1234567890", "Jane", "Doe")
