"""Tests for src.intake.validator -- per-step payload rules."""

import pytest

from shared.schemas.steps import Step3Data, Step7Data
from src.intake.errors import StepValidationError
from src.intake.validator import validate

from tests.fakes import step_payload


def _fields(exc_info):
    return exc_info.value.fields


class TestValidPayloads:
    @pytest.mark.parametrize("step", [1, 2, 3, 4, 5, 6, 7])
    def test_accepts_valid_payload(self, step):
        payload = validate(step, step_payload(step))
        assert payload.model_dump(mode="json") is not None

    def test_strips_whitespace(self):
        data = step_payload(2)
        data["hosting"]["provider"] = "  Cafe24  "
        assert validate(2, data).hosting.provider == "Cafe24"


class TestStepNumber:
    @pytest.mark.parametrize("step", [0, 8, -1])
    def test_out_of_range(self, step):
        with pytest.raises(StepValidationError) as exc_info:
            validate(step, {})
        assert _fields(exc_info) == ["step"]

    def test_non_object_payload(self):
        with pytest.raises(StepValidationError) as exc_info:
            validate(1, ["not", "an", "object"])
        assert _fields(exc_info) == ["__root__"]


class TestStep1:
    def test_short_address(self):
        data = step_payload(1)
        data["company"]["address"] = "Seoul"
        with pytest.raises(StepValidationError) as exc_info:
            validate(1, data)
        assert "company.address" in _fields(exc_info)

    def test_invalid_email_and_short_phone_reported_together(self):
        data = step_payload(1)
        data["manager"]["email"] = "not-an-email"
        data["manager"]["phone"] = "123"
        with pytest.raises(StepValidationError) as exc_info:
            validate(1, data)
        assert {"manager.email", "manager.phone"} <= set(_fields(exc_info))

    def test_fax_optional(self):
        data = step_payload(1)
        data["company"]["fax"] = "02-1234-5679"
        assert validate(1, data).company.fax == "02-1234-5679"

    def test_unknown_key_rejected(self):
        data = step_payload(1)
        data["company"]["ceo_birthday"] = "1970-01-01"
        with pytest.raises(StepValidationError) as exc_info:
            validate(1, data)
        assert "company.ceo_birthday" in _fields(exc_info)


class TestStep2:
    def test_empty_hosting_provider(self):
        data = step_payload(2)
        data["hosting"]["provider"] = ""
        with pytest.raises(StepValidationError) as exc_info:
            validate(2, data)
        assert _fields(exc_info) == ["hosting.provider"]

    def test_blank_counts_as_empty(self):
        data = step_payload(2)
        data["domain"]["password"] = "   "
        with pytest.raises(StepValidationError) as exc_info:
            validate(2, data)
        assert _fields(exc_info) == ["domain.password"]

    def test_missing_section(self):
        data = step_payload(2)
        del data["domain"]
        with pytest.raises(StepValidationError) as exc_info:
            validate(2, data)
        assert _fields(exc_info) == ["domain"]


class TestStep3:
    def test_empty_list_is_skip(self):
        assert validate(3, {"mail_records": []}).mail_records == []

    def test_explicit_skip(self):
        assert validate(3, None, skip=True) == Step3Data()

    def test_mx_without_priority_and_cname_with_priority(self):
        data = {
            "mail_records": [
                {"type": "MX", "host": "@", "value": "mx1.mailplug.co.kr"},
                {"type": "CNAME", "host": "mail", "value": "mail.mailplug.co.kr", "priority": 5},
            ]
        }
        with pytest.raises(StepValidationError) as exc_info:
            validate(3, data)
        assert _fields(exc_info) == ["mail_records.0.priority", "mail_records.1.priority"]
        reasons = [e.reason for e in exc_info.value.errors]
        assert "MX records require a numeric priority" in reasons[0]
        assert not reasons[0].startswith("Value error")

    def test_unknown_record_type(self):
        data = {"mail_records": [{"type": "A", "host": "@", "value": "1.2.3.4"}]}
        with pytest.raises(StepValidationError) as exc_info:
            validate(3, data)
        assert "mail_records.0.type" in _fields(exc_info)

    def test_txt_record(self):
        data = {"mail_records": [{"type": "TXT", "host": "@", "value": "v=spf1 include:mailplug.co.kr ~all"}]}
        assert validate(3, data).mail_records[0].priority is None


class TestStep4:
    def test_short_description(self):
        data = step_payload(4)
        data["site_info"]["description"] = "too short"
        with pytest.raises(StepValidationError) as exc_info:
            validate(4, data)
        assert _fields(exc_info) == ["site_info.description"]


class TestStep5:
    def test_needs_one_reference(self):
        with pytest.raises(StepValidationError) as exc_info:
            validate(5, {"references": []})
        assert _fields(exc_info) == ["references"]

    def test_cannot_skip(self):
        with pytest.raises(StepValidationError) as exc_info:
            validate(5, {}, skip=True)
        assert _fields(exc_info) == ["step"]


class TestStep6:
    def test_needs_primary_menu(self):
        with pytest.raises(StepValidationError) as exc_info:
            validate(6, {"menu_structure": {"primary_menu": []}})
        assert _fields(exc_info) == ["menu_structure.primary_menu"]

    def test_secondary_must_hang_under_primary(self):
        data = {"menu_structure": {"primary_menu": ["About"], "secondary_menu": {"Shop": ["Cart"]}}}
        with pytest.raises(StepValidationError) as exc_info:
            validate(6, data)
        assert _fields(exc_info) == ["menu_structure.secondary_menu"]
        assert "Shop" in exc_info.value.errors[0].reason

    def test_blank_menu_name(self):
        data = {"menu_structure": {"primary_menu": ["About", ""]}}
        with pytest.raises(StepValidationError) as exc_info:
            validate(6, data)
        assert _fields(exc_info) == ["menu_structure.primary_menu"]


class TestStep7:
    def test_empty_file_list(self):
        assert validate(7, {}) == Step7Data()

    def test_explicit_skip(self):
        assert validate(7, {"ignored": True}, skip=True) == Step7Data()
