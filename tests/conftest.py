# tests/conftest.py
import sys, os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from unittest.mock import MagicMock

import pytest
from provisioning.controller import WizardController
from provisioning.gateway import ServerRecord
from provisioning.resources import (
    Flavor, Image, Keypair, Network, Resources, SecurityGroup,
)
from state import Step

VALID_INPUT = {
    Step.FLAVOR: {"flavor_id": "f1"},
    Step.IMAGE: {"image_id": "i1"},
    Step.NETWORK: {"network_id": "n1", "key_name": "k1", "security_group": "s1"},
    Step.DETAILS: {"name": "vm-01", "admin_username": "admin", "admin_password": "Secret123"},
}


class StaticProvider:
    """In-memory ResourceProvider; set ``error`` to make it fail."""

    def __init__(self, resources):
        self.resources = resources
        self.error = None
        self.calls = 0

    def list_resources(self):
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.resources


@pytest.fixture
def resources():
    return Resources(
        flavors=[
            Flavor(id="f1", name="m1.small", vcpus=2, ram=2048, disk=20),
            Flavor(id="f2", name="m1.tiny", vcpus=1, ram=512, disk=1,
                   ephemeral=5, swap=256, is_public=False),
        ],
        images=[Image(id="i1", name="ubuntu-24.04"), Image(id="i2", name="debian-12")],
        networks=[Network(id="n1", name="private"), Network(id="n2", name="public")],
        keypairs=[Keypair(name="k1"), Keypair(name="k2")],
        security_groups=[SecurityGroup(name="s1"), SecurityGroup(name="default")],
    )


@pytest.fixture
def provider(resources):
    return StaticProvider(resources)


@pytest.fixture
def gateway():
    gw = MagicMock()
    gw.create_from_aggregate.return_value = ServerRecord(id="srv-1", name="vm-01", status="BUILD")
    return gw


@pytest.fixture
def controller(provider, gateway):
    c = WizardController(provider, gateway)
    assert c.load_resources()
    return c


@pytest.fixture
def walk():
    """Fill each step with valid input and advance until ``until`` is active."""
    def _walk(controller, until=Step.SUMMARY):
        while controller.current_step != until:
            step = controller.current_step
            controller.edit(step, **VALID_INPUT[step])
            assert controller.advance(), controller.state.field_errors
    return _walk
