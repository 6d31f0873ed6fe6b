# tests/test_forms.py
import pytest
from provisioning.errors import IncompleteRequestError
from provisioning.forms import (
    MASK, STEP_SCHEMAS, AggregatedRequest, InstanceDetails, build_forms, validate_field,
)
from state import Step

from conftest import VALID_INPUT


def _spec(step, name):
    return next(s for s in STEP_SCHEMAS[step] if s.name == name)

def test_every_step_but_summary_has_a_form():
    assert set(build_forms()) == {Step.FLAVOR, Step.IMAGE, Step.NETWORK, Step.DETAILS}

def test_set_values_reports_change():
    form = build_forms()[Step.FLAVOR]
    assert form.set_values(flavor_id="f1")
    assert not form.set_values(flavor_id="f1")
    assert form.set_values(flavor_id=None)
    assert form.values["flavor_id"] == ""

def test_key_name_length_checked_before_catalog(resources):
    ok, msg = validate_field(_spec(Step.NETWORK, "key_name"), "k" * 65, resources)
    assert not ok
    assert "too long" in msg

def test_security_group_must_exist(resources):
    ok, msg = validate_field(_spec(Step.NETWORK, "security_group"), "web", resources)
    assert not ok
    assert "security group" in msg

def test_selection_without_resources():
    ok, msg = validate_field(_spec(Step.IMAGE, "image_id"), "i1", None)
    assert not ok
    assert msg == "Image options could not be loaded."

def test_details_do_not_need_resources():
    form = build_forms()[Step.DETAILS]
    form.set_values(**VALID_INPUT[Step.DETAILS])
    assert form.validate(None)

def test_details_record(resources):
    form = build_forms()[Step.DETAILS]
    form.set_values(name=" vm-01 ", admin_username="admin", admin_password="Secret123")
    assert form.validate(resources)
    assert form.to_record() == InstanceDetails(
        name="vm-01", admin_username="admin", admin_password="Secret123")

@pytest.mark.parametrize("password", ["", "short", "x" * 73])
def test_bad_passwords(password):
    form = build_forms()[Step.DETAILS]
    form.set_values(name="vm-01", admin_username="admin", admin_password=password)
    assert not form.validate()
    assert set(form.errors) == {"admin_password"}

def test_clear_resets_values_and_errors():
    form = build_forms()[Step.FLAVOR]
    form.validate()
    form.set_values(flavor_id="f1")
    form.clear()
    assert form.values == {"flavor_id": ""}
    assert form.errors == {}

def test_aggregated_request_rejects_missing_fields():
    with pytest.raises(IncompleteRequestError) as exc:
        AggregatedRequest.from_aggregate({"flavor_id": "f1", "image_id": "i1"})
    assert "network_id" in exc.value.missing
    assert "admin_password" in str(exc.value)

def test_aggregated_request_masks_password():
    data = {k: v for step in VALID_INPUT.values() for k, v in step.items()}
    request = AggregatedRequest.from_aggregate(data)
    assert request.masked()["admin_password"] == MASK
    assert request.to_payload()["admin_password"] == "Secret123"
    assert list(request.to_payload()) == [
        "flavor_id", "image_id", "network_id", "key_name",
        "security_group", "name", "admin_username", "admin_password",
    ]
