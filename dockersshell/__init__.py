"""dockersshell - throwaway SSH shells in freshly started containers."""

from .core.config import ShellConfig, load_config
from .data import ContainerName, EndpointLoad, ReapResult, SessionTarget
from .exceptions import (
    ContainerError,
    DockerSShellError,
    EndpointError,
    NoEndpointsError,
    PortResolutionError,
    ReadinessTimeoutError,
    SessionError,
)
from .reaper import reap
from .readiness import wait_for_ssh
from .selector import select_endpoint
from .session import ShellSession

__all__ = [
    "ContainerError",
    "ContainerName",
    "DockerSShellError",
    "EndpointError",
    "EndpointLoad",
    "NoEndpointsError",
    "PortResolutionError",
    "ReadinessTimeoutError",
    "ReapResult",
    "SessionError",
    "SessionTarget",
    "ShellConfig",
    "ShellSession",
    "load_config",
    "reap",
    "select_endpoint",
    "wait_for_ssh",
]
