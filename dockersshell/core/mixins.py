"""Mixins for common functionality."""

from typing import Any, Protocol

from dockersshell.data import ContainerSummary


class ContainerAPI(Protocol):
    """Protocol for the container engine operations a run consumes."""

    def list_containers(self, all: bool = False) -> list[ContainerSummary]:  # noqa: A002
        """List containers, running ones only unless ``all`` is set."""
        ...

    def create_container(self, name: str, image: str) -> str:
        """Create container and return its engine identifier."""
        ...

    def start_container(self, container_id: str) -> None:
        """Start container."""
        ...

    def resolve_ssh_port(self, container_id: str) -> int:
        """Return the host port published for the container's 22/tcp."""
        ...

    def stop_container(self, container_id: str) -> None:
        """Stop container."""
        ...

    def remove_container(self, container_id: str) -> None:
        """Remove container."""
        ...


class LoggingMixin:
    """Mixin for level-selectable logging."""

    logger: Any

    def _log(self, message: str, level: str = "info") -> None:
        """Log message at the given level."""
        getattr(self.logger, level)(message)
