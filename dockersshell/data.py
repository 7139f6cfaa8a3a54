"""Data classes for dockersshell."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class EndpointLoad:
    """An endpoint address together with its running container count.

    The count is only meaningful for the duration of endpoint selection.
    """

    address: str
    containers: int


@dataclass(frozen=True)
class ContainerSummary:
    """A container as reported by the engine's list call."""

    id: str
    names: tuple[str, ...] = ()


@dataclass(frozen=True)
class ContainerName:
    """A parsed ``<owner>-<unix-seconds>`` container name."""

    owner: str
    created: int


@dataclass(frozen=True)
class SessionTarget:
    """Resolved host and port of a container's published SSH service."""

    host: str
    port: int

    def __str__(self) -> str:
        """Return ``host:port``."""
        return f"{self.host}:{self.port}"


@dataclass
class ReapResult:
    """Outcome of a reaper pass across the endpoint pool."""

    removed: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)
    skipped_endpoints: list[str] = field(default_factory=list)

    @property
    def success(self) -> bool:
        """Check if every expired container was stopped and removed."""
        return not self.failed
