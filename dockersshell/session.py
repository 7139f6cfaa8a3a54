import logging
import types

from dockersshell.core.config import ShellConfig
from dockersshell.core.mixins import ContainerAPI, LoggingMixin
from dockersshell.data import SessionTarget
from dockersshell.docker import connect as docker_connect
from dockersshell.exceptions import DockerSShellError, NotOpenSessionError
from dockersshell.naming import container_name
from dockersshell.readiness import wait_for_ssh
from dockersshell.selector import Connector, endpoint_host, select_endpoint
from dockersshell.ssh import run_ssh


class ShellSession(LoggingMixin):
    r"""A throwaway container serving one interactive SSH session.

    Opening the session picks the least loaded endpoint, creates and starts a
    container named ``<owner>-<unix-seconds>``, resolves the host port
    published for its SSH service and waits until the service answers.
    Closing it stops and removes the container. At most one container is
    owned by a session at any time.

    Example:
        with ShellSession(config, owner="alice") as session:
            exit_code = session.interact()

    """

    def __init__(
        self,
        config: ShellConfig,
        owner: str | None = None,
        connect: Connector | None = None,
    ) -> None:
        r"""Initialize the session.

        Args:
            config (ShellConfig): The run configuration.
            owner (str | None): Invoking user, used as the container name prefix and
                exported to ssh. Defaults to the configured login user.
            connect (Connector | None): Builds a container API client for an endpoint.
                Defaults to the Docker client.

        """
        self.config = config
        self.owner = owner or config.user
        self.connect: Connector = connect or docker_connect
        self.logger = logging.getLogger(__name__)

        self.endpoint: str | None = None
        self.container_api: ContainerAPI | None = None
        self.container_id: str | None = None
        self.container_name: str | None = None
        self.target: SessionTarget | None = None

    @property
    def is_open(self) -> bool:
        """Check if a container is currently owned by this session."""
        return self.container_id is not None

    def open(self) -> SessionTarget:
        r"""Provision the container and wait for its SSH service.

        If anything fails once the container exists, the container is torn
        down before the error propagates.

        Returns:
            SessionTarget: Where the SSH service is reachable.

        Raises:
            NoEndpointsError: If no endpoint could be used.
            EndpointError: If the chosen endpoint has no network host.
            ContainerError: If an engine operation fails.
            PortResolutionError: If the SSH port mapping cannot be read.
            ReadinessTimeoutError: If the SSH service never answered.

        """
        self.endpoint = select_endpoint(self.config.endpoints, self.connect)
        host = endpoint_host(self.endpoint)
        self.container_api = self.connect(self.endpoint)

        self.container_name = container_name(self.owner)
        self.container_id = self.container_api.create_container(self.container_name, self.config.image)
        self._log(f"Created container {self.container_name} ({self.container_id}) on {self.endpoint}")

        try:
            self.container_api.start_container(self.container_id)
            port = self.container_api.resolve_ssh_port(self.container_id)
            self.target = SessionTarget(host=host, port=port)
            self._log(f"Waiting for SSH on {self.target}", "debug")
            wait_for_ssh(host, port, check_banner=self.config.check_banner)
        except BaseException:
            self._teardown_after_failure()
            raise

        return self.target

    def interact(self) -> int:
        r"""Run the interactive ssh session and return its exit status.

        Raises:
            NotOpenSessionError: If the session has not been opened.
            SessionError: If the ssh client could not be launched.

        """
        if not self.is_open or self.target is None:
            raise NotOpenSessionError

        exit_code = run_ssh(self.target, self.config.user, invoking_user=self.owner)
        if exit_code != 0:
            self._log(f"ssh session to {self.target} exited with status {exit_code}", "warning")
        return exit_code

    def close(self) -> None:
        r"""Stop and remove the container.

        Does nothing if no container is owned. The handle is released even if
        the engine refuses, so a failed teardown is reported once and never
        retried.

        Raises:
            ContainerError: If stopping or removing the container fails.

        """
        if self.container_id is None or self.container_api is None:
            return

        container_id = self.container_id
        self.container_id = None
        self.target = None

        self.container_api.stop_container(container_id)
        self.container_api.remove_container(container_id)
        self._log(f"Stopped and removed container {self.container_name}")

    def _teardown_after_failure(self) -> None:
        try:
            self.close()
        except DockerSShellError as e:
            self._log(f"Error cleaning up container {self.container_name}: {e}", "error")

    def __enter__(self) -> "ShellSession":
        r"""Enter the runtime context for the session (invokes `open()`)."""
        self.open()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: types.TracebackType | None,
    ) -> None:
        r"""Exit the runtime context for the session (invokes `close()`).

        Teardown runs regardless of whether the block raised.
        """
        self.close()
