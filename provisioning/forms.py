# provisioning/forms.py
"""Per-step field schemas, step forms and the aggregated request."""
from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from typing import Callable, ClassVar, Dict, Optional, Sequence, Tuple

from provisioning.errors import IncompleteRequestError
from provisioning.resources import Resources
from state import Step
from validators import (
    validate_admin_password,
    validate_admin_username,
    validate_choice,
    validate_length,
    validate_required,
    validate_vm_name,
)

MASK = "********"


@dataclass(frozen=True)
class FieldSpec:
    name: str
    label: str
    required_msg: str = ""
    max_len: Optional[int] = None
    # Resources attribute listing the valid choices for this field
    catalog: Optional[str] = None
    # Full rule for free-text fields; replaces the generic checks
    check: Optional[Callable[[str], Tuple[bool, str]]] = None
    strip: bool = True
    secret: bool = False


def validate_field(
    spec: FieldSpec, value: str, resources: Optional[Resources]
) -> Tuple[bool, str]:
    if spec.strip:
        value = value.strip()
    if spec.check is not None:
        return spec.check(value)

    ok, msg = validate_required(value, spec.label, spec.required_msg)
    if not ok:
        return ok, msg
    if spec.max_len is not None:
        ok, msg = validate_length(value, spec.label, max_len=spec.max_len)
        if not ok:
            return ok, msg
    if spec.catalog is not None:
        if resources is None:
            return False, f"{spec.label} options could not be loaded."
        return validate_choice(value, resources.choices(spec.catalog), spec.label)
    return True, ""


# -- Step records --------------------------------------------------------

@dataclass(frozen=True)
class FlavorSelection:
    STEP: ClassVar[Step] = Step.FLAVOR
    flavor_id: str


@dataclass(frozen=True)
class ImageSelection:
    STEP: ClassVar[Step] = Step.IMAGE
    image_id: str


@dataclass(frozen=True)
class NetworkSelection:
    STEP: ClassVar[Step] = Step.NETWORK
    network_id: str
    key_name: str
    security_group: str


@dataclass(frozen=True)
class InstanceDetails:
    STEP: ClassVar[Step] = Step.DETAILS
    name: str
    admin_username: str
    admin_password: str


RECORD_TYPES = {
    Step.FLAVOR: FlavorSelection,
    Step.IMAGE: ImageSelection,
    Step.NETWORK: NetworkSelection,
    Step.DETAILS: InstanceDetails,
}

STEP_SCHEMAS: Dict[Step, Tuple[FieldSpec, ...]] = {
    Step.FLAVOR: (
        FieldSpec("flavor_id", "Flavor", "Please select a flavor.", catalog="flavors"),
    ),
    Step.IMAGE: (
        FieldSpec("image_id", "Image", "Please select an image.", catalog="images"),
    ),
    Step.NETWORK: (
        FieldSpec("network_id", "Network", "Please select a network.", catalog="networks"),
        FieldSpec("key_name", "Key pair", "Key pair name is required",
                  max_len=64, catalog="keypairs"),
        FieldSpec("security_group", "Security group", "Security group is required",
                  max_len=64, catalog="security_groups"),
    ),
    Step.DETAILS: (
        FieldSpec("name", "VM name", check=validate_vm_name),
        FieldSpec("admin_username", "Admin username", check=validate_admin_username),
        FieldSpec("admin_password", "Admin password", check=validate_admin_password,
                  strip=False, secret=True),
    ),
}


class StepForm:
    """Raw values, field errors and validation for one step."""

    def __init__(self, step: Step, specs: Sequence[FieldSpec]) -> None:
        self.step = step
        self.specs = tuple(specs)
        self.values: Dict[str, str] = {s.name: "" for s in self.specs}
        self.errors: Dict[str, str] = {}

    def set_values(self, **values: str) -> bool:
        """Store raw input; returns True when any value actually changed."""
        changed = False
        for name, value in values.items():
            if name not in self.values:
                raise KeyError(f"{self.step.value} form has no field {name!r}")
            value = "" if value is None else str(value)
            if self.values[name] != value:
                self.values[name] = value
                changed = True
        return changed

    def get_values(self) -> Dict[str, str]:
        return {
            s.name: self.values[s.name].strip() if s.strip else self.values[s.name]
            for s in self.specs
        }

    def validate(self, resources: Optional[Resources] = None) -> bool:
        errors = {}
        for spec in self.specs:
            ok, msg = validate_field(spec, self.values[spec.name], resources)
            if not ok:
                errors[spec.name] = msg
        self.errors = errors
        return not errors

    def to_record(self):
        return RECORD_TYPES[self.step](**self.get_values())

    def clear(self) -> None:
        self.values = {s.name: "" for s in self.specs}
        self.errors = {}


def build_forms() -> Dict[Step, StepForm]:
    return {step: StepForm(step, specs) for step, specs in STEP_SCHEMAS.items()}


@dataclass(frozen=True)
class AggregatedRequest:
    flavor_id: str
    image_id: str
    network_id: str
    key_name: str
    security_group: str
    name: str
    admin_username: str
    admin_password: str

    @classmethod
    def from_aggregate(cls, aggregate: Dict[str, str]) -> "AggregatedRequest":
        names = [f.name for f in fields(cls)]
        missing = [n for n in names if not aggregate.get(n)]
        if missing:
            raise IncompleteRequestError(missing)
        return cls(**{n: aggregate[n] for n in names})

    def to_payload(self) -> Dict[str, str]:
        return asdict(self)

    def masked(self) -> Dict[str, str]:
        payload = self.to_payload()
        payload["admin_password"] = MASK
        return payload
