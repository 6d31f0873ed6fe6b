# screens/s04_details.py
from textual.app import ComposeResult
from textual.widgets import Input, Label, Static

from screens.base import StepScreen
from state import Step


class DetailsScreen(StepScreen):
    """Step 4: VM name and administrator credentials."""

    STEP = Step.DETAILS
    NEEDS_RESOURCES = False

    def compose_fields(self) -> ComposeResult:
        yield Label("VM Name:")
        yield Input(placeholder="Enter VM name", id="f_name")
        yield Static("", id="err_name", classes="field_error")
        yield Label("Admin Username:")
        yield Input(placeholder="Enter admin username", id="f_admin_username")
        yield Static("", id="err_admin_username", classes="field_error")
        yield Label("Admin Password:")
        yield Input(placeholder="Enter admin password", id="f_admin_password", password=True)
        yield Static("", id="err_admin_password", classes="field_error")
