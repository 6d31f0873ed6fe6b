# screens/base.py
from __future__ import annotations
import asyncio
from rich.markup import escape
from typing import Dict, List, Tuple

from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical, VerticalScroll
from textual.screen import Screen
from textual.widgets import Button, Footer, Input, Select, Static

from logger import log
from provisioning.forms import STEP_SCHEMAS
from state import Step
from widgets.step_indicator import StepIndicator
from widgets.wizard_header import WizardHeader

RESOURCE_ERROR_DEFAULT = (
    "Unable to fetch VM resources. Please check your connection and try again."
)


class StepScreen(Screen):
    """Common frame for the four input steps.

    Subclasses set ``STEP`` and yield their field widgets from
    ``compose_fields``.  Widgets are looked up by ``#f_<field name>`` and their
    error labels by ``#err_<field name>``.
    """

    STEP: Step = Step.FLAVOR
    NEEDS_RESOURCES = True
    EMPTY_HINT = ""

    BINDINGS = [
        ("escape", "go_back", "Back"),
    ]

    @property
    def controller(self):
        return self.app.controller

    def compose(self) -> ComposeResult:
        yield WizardHeader()
        yield StepIndicator(id="stepper")
        with Vertical(id="resource_error"):
            yield Static("", id="resource_banner")
            yield Button("↻ Retry", id="btn_retry", variant="warning")
        with VerticalScroll(id="form"):
            yield Static(f"Step {self.STEP.position + 1}: {self.STEP.label}", classes="title")
            yield Static(self.STEP.description, classes="description")
            yield from self.compose_fields()
            yield Static("", id="hint")
            yield Static("", id="err_msg")
        with Horizontal(id="nav_buttons"):
            yield Button("← Previous", id="btn_back", variant="default",
                         disabled=self.STEP.position == 0)
            yield Button("Next →", id="btn_next", variant="primary")
        yield Footer()

    def compose_fields(self) -> ComposeResult:
        return iter(())

    def field_options(self) -> Dict[str, List[Tuple[str, str]]]:
        """Select options per field, built from the loaded resources."""
        return {}

    # -- State <-> widgets -------------------------------------------------

    def on_mount(self) -> None:
        self._refresh()

    def on_screen_resume(self) -> None:
        """Re-sync widgets with the controller whenever this step becomes active again."""
        # screens popped while unwinding to the first step still get resume events
        if self.app.screen is not self:
            return
        self._refresh()

    def _refresh(self) -> None:
        self._populate()
        self._show_resource_state()
        self._show_errors({})
        self.query_one("#stepper", StepIndicator).show(
            self.STEP, self.controller.state.completed
        )

    def _populate(self) -> None:
        form = self.controller.forms[self.STEP]
        options = self.field_options()
        for spec in STEP_SCHEMAS[self.STEP]:
            widget = self.query_one(f"#f_{spec.name}")
            value = form.values[spec.name]
            if isinstance(widget, Select):
                opts = options.get(spec.name, [])
                widget.set_options(opts)
                widget.value = value if value in {v for _, v in opts} else Select.BLANK
            elif isinstance(widget, Input):
                widget.value = value
        hint = ""
        if self.NEEDS_RESOURCES and self.controller.resources is not None:
            if not any(options.values()):
                hint = f"[yellow]{self.EMPTY_HINT}[/yellow]"
        self.query_one("#hint", Static).update(hint)

    def read_values(self) -> Dict[str, str]:
        values = {}
        for spec in STEP_SCHEMAS[self.STEP]:
            widget = self.query_one(f"#f_{spec.name}")
            if isinstance(widget, Select):
                value = widget.value
                values[spec.name] = value if isinstance(value, str) else ""
            else:
                values[spec.name] = widget.value
        return values

    def _show_errors(self, errors: Dict[str, str]) -> None:
        for spec in STEP_SCHEMAS[self.STEP]:
            msg = errors.get(spec.name, "")
            self.query_one(f"#err_{spec.name}", Static).update(
                f"[red]{escape(msg)}[/red]" if msg else ""
            )
        summary = "Please correct the highlighted fields." if errors else ""
        self.query_one("#err_msg", Static).update(
            f"[red]Error: {summary}[/red]" if summary else ""
        )

    def _show_resource_state(self) -> None:
        failed = self.NEEDS_RESOURCES and self.controller.resources is None
        self.query_one("#resource_error").display = failed
        if failed:
            message = self.controller.state.resource_error or RESOURCE_ERROR_DEFAULT
            self.query_one("#resource_banner", Static).update(
                f"[bold red]Failed to Load Resources[/bold red]\n{escape(message)}"
            )

    async def _retry_resources(self) -> None:
        button = self.query_one("#btn_retry", Button)
        button.disabled = True
        loop = asyncio.get_running_loop()
        ok = await loop.run_in_executor(None, self.controller.load_resources)
        log.info("Step %s: resource retry %s", self.STEP.value, "succeeded" if ok else "failed")
        button.disabled = False
        self._populate()
        self._show_resource_state()

    # -- Navigation --------------------------------------------------------

    def action_next_step(self) -> None:
        controller = self.controller
        controller.edit(self.STEP, **self.read_values())
        if controller.advance():
            self.app.push_screen(self.app.step_screen(controller.current_step))
        else:
            self._show_errors(controller.state.field_errors)

    def action_go_back(self) -> None:
        if self.STEP.position == 0:
            return
        self.controller.edit(self.STEP, **self.read_values())
        if self.controller.retreat():
            self.app.pop_screen()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "btn_next":
            self.action_next_step()
        elif event.button.id == "btn_back":
            self.action_go_back()
        elif event.button.id == "btn_retry":
            asyncio.create_task(self._retry_resources())
