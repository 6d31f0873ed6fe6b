# widgets/step_indicator.py
from __future__ import annotations
from textual.widgets import Static

from state import STEP_SEQUENCE, Step


def reachable(step: Step, current: Step, completed) -> bool:
    """Steps the stepper may jump to: any earlier step, or one whose predecessors are all done."""
    if step == current:
        return False
    if step.position < current.position:
        return True
    return all(s in completed for s in STEP_SEQUENCE[:step.position])


def render_steps(current: Step, completed) -> str:
    """One-line stepper: completed steps get a check, the active step is highlighted.

    Reachable steps are links to ``app.go_to_step``.
    """
    parts = []
    for step in STEP_SEQUENCE:
        if step == current:
            parts.append(f"[bold reverse] {step.position + 1} {step.label} [/bold reverse]")
            continue
        if step in completed:
            text = f"[green]✓ {step.label}[/green]"
        else:
            text = f"[dim]{step.position + 1} {step.label}[/dim]"
        if reachable(step, current, completed):
            text = f"[@click=app.go_to_step('{step.value}')]{text}[/]"
        parts.append(text)
    return " ── ".join(parts)


class StepIndicator(Static):
    """Progress line across the top of each step screen; reachable steps are clickable."""

    DEFAULT_CSS = """
    StepIndicator {
        margin: 0 2 1 2;
    }
    """

    def show(self, current: Step, completed) -> None:
        self.update(render_steps(current, completed))
