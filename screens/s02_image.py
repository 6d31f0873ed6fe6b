# screens/s02_image.py
from textual.app import ComposeResult
from textual.widgets import Label, Select, Static

from screens.base import StepScreen
from state import Step


class ImageScreen(StepScreen):
    """Step 2: pick the operating system image."""

    STEP = Step.IMAGE
    EMPTY_HINT = "No images available. Upload or import an image first."

    def compose_fields(self) -> ComposeResult:
        yield Label("Operating System Image:")
        yield Select([], id="f_image_id", prompt="Choose image…")
        yield Static("", id="err_image_id", classes="field_error")

    def field_options(self):
        resources = self.controller.resources
        if resources is None:
            return {}
        return {"image_id": [(f"{i.name}  ({i.id})", i.id) for i in resources.images]}
