"""Custom exceptions for dockersshell."""


class DockerSShellError(Exception):
    """Base exception for all dockersshell errors."""

    def __init__(self, message: str) -> None:
        """Initialize the DockerSShellError."""
        super().__init__(message)


class NoEndpointsError(DockerSShellError):
    """Raised when no endpoint in the pool could be connected to and listed."""

    def __init__(self) -> None:
        """Initialize the NoEndpointsError."""
        super().__init__("No acceptable endpoints found")


class EndpointError(DockerSShellError):
    """Raised when an endpoint address cannot be turned into a network host."""


class ContainerError(DockerSShellError):
    """Raised when a container engine operation fails."""


class PortResolutionError(DockerSShellError):
    """Raised when the host port bound to the container SSH port cannot be found."""

    def __init__(self, container_id: str, reason: str) -> None:
        """Initialize the PortResolutionError."""
        super().__init__(f"Unable to get port information for container {container_id}: {reason}")
        self.container_id = container_id


class ReadinessTimeoutError(DockerSShellError):
    """Raised when the SSH service never became reachable."""

    def __init__(self, host: str, port: int, attempts: int) -> None:
        """Initialize the ReadinessTimeoutError."""
        super().__init__(f"{host}:{port} never became available after {attempts} attempts")
        self.host = host
        self.port = port
        self.attempts = attempts


class SessionError(DockerSShellError):
    """Raised when the local ssh client cannot be launched."""


class NotOpenSessionError(DockerSShellError):
    """Raised when the session is not open."""

    def __init__(self) -> None:
        """Initialize the NotOpenSessionError."""
        super().__init__("Session is not open. Please call open() before interact().")
