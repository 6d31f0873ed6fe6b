# provisioning/summary.py
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Tuple

from rich.markup import escape

from provisioning.forms import MASK
from provisioning.gateway import ServerRecord

NOT_AVAILABLE = "N/A"


@dataclass(frozen=True)
class SummarySection:
    title: str
    rows: Tuple[Tuple[str, str], ...]


class SummaryReview:
    """Read-only view of the aggregate plus the confirm/cancel actions."""

    def __init__(self, controller) -> None:
        self.controller = controller

    def sections(self) -> List[SummarySection]:
        data = self.controller.state.aggregate
        resources = self.controller.resources

        flavor = image = network = None
        if resources is not None:
            flavor = resources.find_flavor(data.get("flavor_id", ""))
            image = resources.find_image(data.get("image_id", ""))
            network = resources.find_network(data.get("network_id", ""))

        compute = [("Flavor", flavor.name if flavor else NOT_AVAILABLE)]
        if flavor:
            compute.append(("vCPUs", str(flavor.vcpus)))
            compute.append(("RAM", flavor.ram_label))
            compute.append(("Storage", f"{flavor.disk} GB"))
            if flavor.ephemeral > 0:
                compute.append(("Ephemeral", f"{flavor.ephemeral} GB"))
            if flavor.swap > 0:
                compute.append(("Swap", f"{flavor.swap} MB"))
        compute.append(("Flavor ID", data.get("flavor_id", "")))

        return [
            SummarySection("Compute Resources", tuple(compute)),
            SummarySection("Operating System", (
                ("Image", image.name if image else NOT_AVAILABLE),
                ("Image ID", data.get("image_id", "")),
            )),
            SummarySection("Network & Security", (
                ("Network", network.name if network else NOT_AVAILABLE),
                ("Network ID", data.get("network_id", "")),
                ("Key Pair", data.get("key_name", "")),
                ("Security Group", data.get("security_group", "")),
            )),
            SummarySection("VM Details", (
                ("Name", data.get("name", "")),
                ("Admin Username", data.get("admin_username", "")),
                ("Admin Password", MASK if data.get("admin_password") else ""),
            )),
        ]

    def render(self) -> str:
        lines = []
        for section in self.sections():
            lines.append(f"[bold]{section.title}[/bold]")
            width = max(len(label) for label, _ in section.rows)
            for label, value in section.rows:
                lines.append(f"  {label:<{width}} : {escape(value) if value else '—'}")
            lines.append("")
        return "\n".join(lines).rstrip()

    def confirm(self) -> Optional[ServerRecord]:
        return self.controller.submit()

    def cancel(self) -> bool:
        return self.controller.retreat()
