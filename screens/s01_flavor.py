# screens/s01_flavor.py
from textual.app import ComposeResult
from textual.widgets import Label, Select, Static

from screens.base import StepScreen
from state import Step


class FlavorScreen(StepScreen):
    """Step 1: pick the flavor (vCPUs, RAM, disk) for the new VM."""

    STEP = Step.FLAVOR
    EMPTY_HINT = (
        "No flavors available. Contact your administrator to create flavors "
        "before you can launch instances."
    )

    def compose_fields(self) -> ComposeResult:
        yield Label("Flavor:")
        yield Select([], id="f_flavor_id", prompt="Choose flavor…")
        yield Static("", id="err_flavor_id", classes="field_error")
        yield Static("", id="flavor_details")

    def field_options(self):
        resources = self.controller.resources
        if resources is None:
            return {}
        return {"flavor_id": [(f.display_str(), f.id) for f in resources.flavors]}

    def on_select_changed(self, event: Select.Changed) -> None:
        details = self.query_one("#flavor_details", Static)
        resources = self.controller.resources
        flavor = None
        if resources is not None and isinstance(event.value, str):
            flavor = resources.find_flavor(event.value)
        if flavor is None:
            details.update("")
            return
        lines = [
            f"  vCPUs    : {flavor.vcpus}",
            f"  RAM      : {flavor.ram_label}",
            f"  Disk     : {flavor.disk} GB",
        ]
        if flavor.ephemeral > 0:
            lines.append(f"  Ephemeral: {flavor.ephemeral} GB")
        if flavor.swap > 0:
            lines.append(f"  Swap     : {flavor.swap} MB")
        lines.append(f"  Public   : {'Yes' if flavor.is_public else 'No'}")
        details.update("\n".join(lines))
