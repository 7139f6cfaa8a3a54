import logging
from typing import Any

import docker
from docker.errors import DockerException
from requests.exceptions import RequestException

from dockersshell.const import SSH_PORT_KEY
from dockersshell.data import ContainerSummary
from dockersshell.exceptions import ContainerError, PortResolutionError

logger = logging.getLogger(__name__)

ENGINE_ERRORS = (DockerException, RequestException)


def connect(endpoint: str) -> "DockerContainerAPI":
    """Connect to the container engine at ``endpoint``.

    The client negotiates the API version on construction, so an
    unreachable engine fails here rather than on the first call.

    Raises:
        ContainerError: If the engine cannot be reached.

    """
    try:
        client = docker.DockerClient(base_url=endpoint)
    except ENGINE_ERRORS as e:
        msg = f"Unable to communicate with {endpoint}: {e}"
        raise ContainerError(msg) from e
    logger.debug("Connected to %s", endpoint)
    return DockerContainerAPI(client)


def _engine_message(e: Exception) -> str:
    explanation = getattr(e, "explanation", None)
    return str(explanation or e)


class DockerContainerAPI:
    """Docker implementation of the ContainerAPI protocol."""

    def __init__(self, client: docker.DockerClient) -> None:
        """Initialize Docker container API."""
        self.client = client

    def list_containers(self, all: bool = False) -> list[ContainerSummary]:  # noqa: A002
        """List Docker containers."""
        try:
            containers = self.client.api.containers(all=all)
        except ENGINE_ERRORS as e:
            msg = f"Unable to list containers: {_engine_message(e)}"
            raise ContainerError(msg) from e
        return [ContainerSummary(id=c["Id"], names=tuple(c.get("Names") or ())) for c in containers]

    def create_container(self, name: str, image: str) -> str:
        """Create Docker container.

        Current engine API versions reject host configuration on start, so the
        request to publish every exposed port is attached here.
        """
        try:
            host_config = self.client.api.create_host_config(publish_all_ports=True)
            container = self.client.api.create_container(image=image, name=name, host_config=host_config)
        except ENGINE_ERRORS as e:
            msg = f"Unable to create container: {_engine_message(e)}"
            raise ContainerError(msg) from e
        return str(container["Id"])

    def start_container(self, container_id: str) -> None:
        """Start Docker container."""
        try:
            self.client.api.start(container_id)
        except ENGINE_ERRORS as e:
            msg = f"Unable to start container: {_engine_message(e)}"
            raise ContainerError(msg) from e

    def resolve_ssh_port(self, container_id: str) -> int:
        """Resolve the host port bound to the container's 22/tcp."""
        try:
            info = self.client.api.inspect_container(container_id)
        except ENGINE_ERRORS as e:
            raise PortResolutionError(container_id, _engine_message(e)) from e

        ports: dict[str, Any] = (info.get("NetworkSettings") or {}).get("Ports") or {}
        bindings = ports.get(SSH_PORT_KEY)
        if not bindings:
            raise PortResolutionError(container_id, f"{SSH_PORT_KEY} is not published")

        host_port = bindings[0].get("HostPort")
        try:
            return int(host_port)
        except (TypeError, ValueError) as e:
            raise PortResolutionError(container_id, f"invalid host port {host_port!r}") from e

    def stop_container(self, container_id: str) -> None:
        """Stop Docker container without a grace period."""
        try:
            self.client.api.stop(container_id, timeout=0)
        except ENGINE_ERRORS as e:
            msg = f"Unable to stop container: {_engine_message(e)}"
            raise ContainerError(msg) from e

    def remove_container(self, container_id: str) -> None:
        """Remove Docker container, keeping its volumes."""
        try:
            self.client.api.remove_container(container_id, v=False)
        except ENGINE_ERRORS as e:
            msg = f"Unable to remove container: {_engine_message(e)}"
            raise ContainerError(msg) from e
