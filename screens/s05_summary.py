# screens/s05_summary.py
from __future__ import annotations
import asyncio
from rich.markup import escape
from textual.app import ComposeResult
from textual.screen import Screen
from textual.widgets import Button, Footer, Static
from textual.containers import Horizontal, VerticalScroll
from widgets.step_indicator import StepIndicator
from widgets.wizard_header import WizardHeader
from provisioning.summary import SummaryReview
from state import Step
from logger import log


class SummaryScreen(Screen):
    """Step 5: review the collected configuration and create the VM."""

    BINDINGS = [
        ("escape", "go_back", "Back"),
    ]

    def __init__(self) -> None:
        super().__init__()
        self._review = None
        self.in_flight = False

    def compose(self) -> ComposeResult:
        yield WizardHeader()
        yield StepIndicator(id="stepper")
        with VerticalScroll(id="content"):
            yield Static(f"Step 5: {Step.SUMMARY.label}", classes="title")
            yield Static(Step.SUMMARY.description, classes="description")
            yield Static("", id="summary")
            yield Static("", id="status_msg")
            yield Static("", id="err_msg")
        with Horizontal(id="nav_buttons"):
            yield Button("← Back", id="btn_back", variant="default")
            yield Button("✓ Create VM", id="btn_create", variant="success")
        yield Footer()

    def on_mount(self) -> None:
        self._review = SummaryReview(self.app.controller)
        self._refresh()

    def on_screen_resume(self) -> None:
        if self._review is not None and self.app.screen is self:
            self._refresh()

    def _refresh(self) -> None:
        controller = self.app.controller
        self.query_one("#stepper", StepIndicator).show(Step.SUMMARY, controller.state.completed)
        self.query_one("#summary", Static).update(self._review.render())
        self.query_one("#btn_create", Button).disabled = not controller.can_submit

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "btn_back":
            self.action_go_back()
        elif event.button.id == "btn_create":
            self.in_flight = True
            event.button.disabled = True
            self.query_one("#btn_back", Button).disabled = True
            asyncio.create_task(self._create())

    def action_go_back(self) -> None:
        if self.in_flight:
            return
        if self._review.cancel():
            self.app.pop_screen()

    async def _create(self) -> None:
        controller = self.app.controller
        status = self.query_one("#status_msg", Static)
        err = self.query_one("#err_msg", Static)
        err.update("")
        status.update("[cyan]Creating VM…[/cyan]")

        loop = asyncio.get_running_loop()
        record = await loop.run_in_executor(None, self._review.confirm)

        if record is None:
            message = controller.state.submit_error or "An unexpected error occurred"
            log.warning("Create VM failed: %s", message)
            status.update("")
            err.update(f"[red]Error: {escape(message)}[/red]")
            self.in_flight = False
            self.query_one("#btn_back", Button).disabled = False
            self.query_one("#btn_create", Button).disabled = not controller.can_submit
            return

        status.update("")
        self.app.notify(
            f'VM "{record.name}" is being deployed',
            title="VM created successfully!",
        )
        self.app.return_to_first_step()
