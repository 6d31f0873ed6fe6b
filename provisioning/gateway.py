# provisioning/gateway.py
from __future__ import annotations

import json
import os
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Protocol

from logger import log
from provisioning.errors import SubmissionError
from provisioning.forms import AggregatedRequest

REQUEST_SUFFIX = ".request.json"


@dataclass(frozen=True)
class ServerRecord:
    id: str
    name: str
    status: str


class SubmissionGateway(Protocol):
    def create_from_aggregate(self, request: AggregatedRequest) -> ServerRecord:
        """Provision an instance; raise SubmissionError when rejected."""
        ...


class SpoolSubmissionGateway:
    """Hands create requests to the provisioning agent through a spool directory.

    Every request becomes one JSON file named after the new server id.  The
    agent removes a file once it has picked the request up, so a file still
    present for the same instance name and project means a pending duplicate.
    """

    def __init__(self, spool_dir: str, session=None) -> None:
        self.spool_dir = Path(spool_dir)
        self.session = session

    def _project_id(self) -> Optional[str]:
        if self.session is None:
            return None
        return self.session.project_id

    def _pending_names(self, project_id: Optional[str]) -> set:
        names = set()
        if not self.spool_dir.is_dir():
            return names
        for path in self.spool_dir.glob(f"*{REQUEST_SUFFIX}"):
            try:
                entry = json.loads(path.read_text())
            except (OSError, ValueError) as e:
                log.warning("Skipping unreadable spool entry %s: %s", path, e)
                continue
            if not isinstance(entry, dict) or not isinstance(entry.get("request"), dict):
                log.warning("Skipping malformed spool entry %s", path)
                continue
            if entry.get("project_id") == project_id:
                names.add(entry["request"].get("name"))
        return names

    def create_from_aggregate(self, request: AggregatedRequest) -> ServerRecord:
        project_id = self._project_id()
        if request.name in self._pending_names(project_id):
            raise SubmissionError(
                f'A server named "{request.name}" is already being created',
                "Choose a different VM name.",
            )

        record = ServerRecord(id=str(uuid.uuid4()), name=request.name, status="BUILD")
        entry = {
            "id": record.id,
            "status": record.status,
            "project_id": project_id,
            "requested_by": self.session.username if self.session else None,
            "requested_at": datetime.now(timezone.utc).isoformat(),
            "request": request.to_payload(),
        }
        path = self.spool_dir / f"{record.id}{REQUEST_SUFFIX}"
        try:
            self.spool_dir.mkdir(parents=True, exist_ok=True)
            # Created 0600: the request carries the admin password
            fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_EXCL, 0o600)
            with os.fdopen(fd, "w") as f:
                json.dump(entry, f, indent=2)
        except OSError as e:
            log.error("Failed to spool request for %s: %s", request.name, e)
            raise SubmissionError(f"Error creating VM: {e.strerror or e}") from e

        log.info("Spooled create request %s for %s -> %s", record.id, request.name, path)
        return record
