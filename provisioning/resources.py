# provisioning/resources.py
from __future__ import annotations

import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Protocol

import yaml

from logger import log
from provisioning.errors import ResourceFetchError


@dataclass
class Flavor:
    id: str
    name: str
    vcpus: int = 0
    ram: int = 0            # MB
    disk: int = 0           # GB
    ephemeral: int = 0      # GB
    swap: int = 0           # MB
    is_public: bool = True

    @property
    def ram_label(self) -> str:
        if self.ram >= 1024:
            return f"{self.ram / 1024:.1f} GB"
        return f"{self.ram} MB"

    def display_str(self) -> str:
        return f"{self.name}  ({self.vcpus} vCPU, {self.ram_label} RAM, {self.disk} GB disk)"


@dataclass
class Image:
    id: str
    name: str


@dataclass
class Network:
    id: str
    name: str


@dataclass
class Keypair:
    name: str


@dataclass
class SecurityGroup:
    name: str


@dataclass
class Resources:
    flavors: List[Flavor] = field(default_factory=list)
    images: List[Image] = field(default_factory=list)
    networks: List[Network] = field(default_factory=list)
    keypairs: List[Keypair] = field(default_factory=list)
    security_groups: List[SecurityGroup] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Resources":
        """Build from the provider's mapping; unknown keys on items are ignored."""
        if not isinstance(data, dict):
            raise ResourceFetchError("Resource listing must be a mapping")
        try:
            return cls(
                flavors=[_pick(Flavor, f) for f in data.get("flavors") or []],
                images=[_pick(Image, i) for i in data.get("images") or []],
                networks=[_pick(Network, n) for n in data.get("networks") or []],
                keypairs=[_pick(Keypair, k) for k in data.get("keypairs") or []],
                security_groups=[
                    _pick(SecurityGroup, s) for s in data.get("security_groups") or []
                ],
            )
        except (TypeError, ValueError, AttributeError) as e:
            raise ResourceFetchError(f"Malformed resource listing: {e}") from e

    # Lookups used by the forms (valid choices) and the summary (details)

    def choices(self, catalog: str) -> List[str]:
        items = getattr(self, catalog)
        if catalog in ("keypairs", "security_groups"):
            return [item.name for item in items]
        return [item.id for item in items]

    def find_flavor(self, flavor_id: str) -> Optional[Flavor]:
        return next((f for f in self.flavors if f.id == flavor_id), None)

    def find_image(self, image_id: str) -> Optional[Image]:
        return next((i for i in self.images if i.id == image_id), None)

    def find_network(self, network_id: str) -> Optional[Network]:
        return next((n for n in self.networks if n.id == network_id), None)


INT_FIELDS = ("vcpus", "ram", "disk", "ephemeral", "swap")


def _as_bool(value) -> bool:
    if isinstance(value, str):
        if value.strip().lower() in ("true", "yes", "1"):
            return True
        if value.strip().lower() in ("false", "no", "0"):
            return False
        raise ValueError(f"not a boolean: {value!r}")
    return bool(value)


def _pick(kind, item: Dict[str, Any]):
    known = kind.__dataclass_fields__
    # key pairs and security groups may be listed by bare name
    if isinstance(item, str) and list(known) == ["name"]:
        return kind(name=item)
    kwargs = {k: v for k, v in item.items() if k in known}
    if "id" in kwargs:
        kwargs["id"] = str(kwargs["id"])
    for key in INT_FIELDS:
        if key in kwargs:
            kwargs[key] = int(kwargs[key])
    if "is_public" in kwargs:
        kwargs["is_public"] = _as_bool(kwargs["is_public"])
    return kind(**kwargs)


class ResourceProvider(Protocol):
    def list_resources(self) -> Resources:
        """Return every selectable resource; raise ResourceFetchError on failure."""
        ...


class CatalogResourceProvider:
    """Lists resources from a YAML catalog file kept in sync with the platform."""

    def __init__(self, path: str) -> None:
        self.path = Path(path)

    def list_resources(self) -> Resources:
        try:
            with open(self.path) as f:
                data = yaml.safe_load(f) or {}
        except OSError as e:
            log.error("Resource catalog unreadable: %s: %s", self.path, e)
            raise ResourceFetchError(
                f"Unable to read resource catalog {self.path}: {e.strerror or e}",
                "Check your connection to the catalog and try again.",
            ) from e
        except yaml.YAMLError as e:
            log.error("Resource catalog invalid: %s: %s", self.path, e)
            raise ResourceFetchError(f"Resource catalog {self.path} is not valid YAML") from e

        resources = Resources.from_dict(data)
        log.info(
            "Loaded catalog %s: %d flavors, %d images, %d networks, %d keypairs, %d security groups",
            self.path, len(resources.flavors), len(resources.images),
            len(resources.networks), len(resources.keypairs),
            len(resources.security_groups),
        )
        return resources


class CachedResourceProvider:
    """Serves the last successful listing while it is younger than ``ttl`` seconds."""

    def __init__(self, inner: ResourceProvider, ttl: float = 300.0, clock=time.monotonic) -> None:
        self._inner = inner
        self._ttl = ttl
        self._clock = clock
        self._cached: Optional[Resources] = None
        self._fetched_at = 0.0

    def list_resources(self) -> Resources:
        now = self._clock()
        if self._cached is not None and now - self._fetched_at < self._ttl:
            log.debug("Resource cache hit (age %.1fs)", now - self._fetched_at)
            return self._cached
        resources = self._inner.list_resources()
        self._cached = resources
        self._fetched_at = now
        return resources

    def invalidate(self) -> None:
        self._cached = None
