# state.py
from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Set


class Step(str, Enum):
    FLAVOR = "flavor"
    IMAGE = "image"
    NETWORK = "network"
    DETAILS = "details"
    SUMMARY = "summary"

    @property
    def position(self) -> int:
        return STEP_SEQUENCE.index(self)

    @property
    def label(self) -> str:
        return STEP_INFO[self][0]

    @property
    def description(self) -> str:
        return STEP_INFO[self][1]


STEP_SEQUENCE = (Step.FLAVOR, Step.IMAGE, Step.NETWORK, Step.DETAILS, Step.SUMMARY)

STEP_INFO = {
    Step.FLAVOR: (
        "Flavor & Resources",
        "Select the flavor and verify available resources for your VM",
    ),
    Step.IMAGE: (
        "Operating System",
        "Choose the operating system image for your VM",
    ),
    Step.NETWORK: (
        "Network & Security",
        "Configure network settings and security for your VM",
    ),
    Step.DETAILS: (
        "VM Details",
        "Set VM name and administrative credentials",
    ),
    Step.SUMMARY: (
        "Summary",
        "Review your configuration and create the VM",
    ),
}


@dataclass
class WizardState:
    current_step: Step = Step.FLAVOR

    # Last validated record per step
    step_data: Dict[Step, Any] = field(default_factory=dict)
    # Flat union of every validated field, keyed by payload name
    aggregate: Dict[str, str] = field(default_factory=dict)
    completed: Set[Step] = field(default_factory=set)

    field_errors: Dict[str, str] = field(default_factory=dict)
    resource_error: Optional[str] = None
    submit_error: Optional[str] = None
    submitting: bool = False
    submit_attempts: int = 0

    @property
    def is_first_step(self) -> bool:
        return self.current_step == STEP_SEQUENCE[0]

    @property
    def is_last_step(self) -> bool:
        return self.current_step == STEP_SEQUENCE[-1]
