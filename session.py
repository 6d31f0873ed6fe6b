# session.py
from __future__ import annotations
from dataclasses import dataclass
from typing import Optional

from logger import log
from provisioning.errors import SessionError
from validators import LOGIN_PATTERN, validate_length, validate_pattern, validate_uuid


@dataclass
class SessionContext:
    """Who is using the console and which project they act in.

    Created at login, replaced at project switch, cleared at logout.  It is
    passed explicitly to whatever needs it instead of living in globals.
    """

    username: str = ""
    project_id: Optional[str] = None
    token: Optional[str] = None

    @property
    def active(self) -> bool:
        return bool(self.username)

    def start(self, username: str, password: str, token: Optional[str] = None) -> None:
        username = username.strip()
        for ok, msg in (
            validate_length(username, "Username", min_len=2, max_len=32),
            validate_pattern(
                username, LOGIN_PATTERN,
                "Username must start with a letter and contain only alphanumeric, "
                "dot, underscore, or hyphen",
            ),
            validate_length(password, "Password", min_len=8, max_len=72),
        ):
            if not ok:
                raise SessionError(msg)
        self.username = username
        self.token = token
        self.project_id = None
        log.info("Session started for %s", username)

    def switch_project(self, project_id: str) -> None:
        if not self.active:
            raise SessionError("Not logged in", "Log in before switching projects.")
        ok, msg = validate_uuid(project_id, "project ID")
        if not ok:
            raise SessionError(msg)
        log.info("Session %s: project %s -> %s", self.username, self.project_id, project_id)
        self.project_id = project_id

    def clear(self) -> None:
        if self.active:
            log.info("Session for %s cleared", self.username)
        self.username = ""
        self.project_id = None
        self.token = None
