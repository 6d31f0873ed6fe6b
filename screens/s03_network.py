# screens/s03_network.py
from textual.app import ComposeResult
from textual.widgets import Label, Select, Static

from screens.base import StepScreen
from state import Step


class NetworkScreen(StepScreen):
    """Step 3: network, SSH key pair and security group."""

    STEP = Step.NETWORK
    EMPTY_HINT = "No networks, key pairs or security groups available."

    def compose_fields(self) -> ComposeResult:
        yield Label("Network:")
        yield Select([], id="f_network_id", prompt="Select network")
        yield Static("", id="err_network_id", classes="field_error")
        yield Label("Key Pair:")
        yield Select([], id="f_key_name", prompt="Select key pair")
        yield Static("", id="err_key_name", classes="field_error")
        yield Label("Security Group:")
        yield Select([], id="f_security_group", prompt="Select security group")
        yield Static("", id="err_security_group", classes="field_error")

    def field_options(self):
        resources = self.controller.resources
        if resources is None:
            return {}
        return {
            "network_id": [(n.name, n.id) for n in resources.networks],
            "key_name": [(k.name, k.name) for k in resources.keypairs],
            "security_group": [(s.name, s.name) for s in resources.security_groups],
        }
