# app.py
import asyncio
from typing import Optional

from textual.app import App
from textual.screen import Screen

from logger import log
from provisioning.controller import WizardController
from session import SessionContext
from state import STEP_SEQUENCE, Step
from widgets.step_indicator import StepIndicator


class ProvisioningWizard(App):
    """Create-instance wizard for the infrastructure console."""

    TITLE = "Provisioning Wizard"

    CSS = """
    Screen {
        background: $surface;
    }
    .title {
        text-style: bold;
        color: $accent;
        margin-bottom: 1;
    }
    .description {
        text-style: italic;
        margin-bottom: 1;
    }
    .field_error {
        color: $error;
    }
    #form, #content {
        margin: 0 2;
    }
    #resource_error {
        height: auto;
        margin: 0 2 1 2;
        border: round $error;
        padding: 0 1;
    }
    #nav_buttons {
        dock: bottom;
        height: 3;
        align: center middle;
        margin: 1 2;
    }
    Button {
        margin: 0 1;
    }
    #err_msg {
        margin-top: 1;
        color: $error;
    }
    #flavor_details {
        margin-top: 1;
    }
    Input, Select {
        margin-bottom: 0;
    }
    """

    def __init__(
        self,
        controller: WizardController,
        session: Optional[SessionContext] = None,
    ) -> None:
        super().__init__()
        self.controller = controller
        self.session = session or SessionContext()
        log.info("ProvisioningWizard started (user=%s project=%s)",
                 self.session.username or "-", self.session.project_id or "-")

    async def on_mount(self) -> None:
        if self.session.active:
            self.sub_title = f"{self.session.username} @ {self.session.project_id or 'default project'}"
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(None, self.controller.load_resources)
        await self.push_screen(self.step_screen(self.controller.current_step))

    def step_screen(self, step: Step) -> Screen:
        from screens.s01_flavor import FlavorScreen
        from screens.s02_image import ImageScreen
        from screens.s03_network import NetworkScreen
        from screens.s04_details import DetailsScreen
        from screens.s05_summary import SummaryScreen

        screens = {
            Step.FLAVOR: FlavorScreen,
            Step.IMAGE: ImageScreen,
            Step.NETWORK: NetworkScreen,
            Step.DETAILS: DetailsScreen,
            Step.SUMMARY: SummaryScreen,
        }
        return screens[Step(step)]()

    def return_to_first_step(self) -> None:
        """Unwind the step screens after a reset; the Flavor screen resyncs on resume."""
        # screen_stack[0] is the default screen, [1] the first step
        while len(self.screen_stack) > 2:
            self.pop_screen()

    def action_go_to_step(self, step: str) -> None:
        """Stepper link: save the visible step, then jump and rebuild the screen stack."""
        target = Step(step)
        screen = self.screen
        if getattr(screen, "in_flight", False):
            return
        if hasattr(screen, "read_values"):
            self.controller.edit(screen.STEP, **screen.read_values())
        current = self.controller.current_step
        if target == current or not self.controller.go_to(target):
            # an edit may have reopened the visible step
            screen.query_one("#stepper", StepIndicator).show(current, self.controller.state.completed)
            return
        if target.position < current.position:
            while len(self.screen_stack) > target.position + 2:
                self.pop_screen()
        else:
            for s in STEP_SEQUENCE[current.position + 1:target.position + 1]:
                self.push_screen(self.step_screen(s))
