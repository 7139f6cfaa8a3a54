"""Maintenance pass removing dockersshell containers past their maximum age."""

import logging
import time

from dockersshell.core.config import ShellConfig
from dockersshell.data import ContainerSummary, ReapResult
from dockersshell.docker import connect as docker_connect
from dockersshell.exceptions import ContainerError
from dockersshell.naming import parse_container_name
from dockersshell.selector import Connector

logger = logging.getLogger(__name__)


def is_expired(created: int, now: float, max_age: int) -> bool:
    """Check if a container created at ``created`` is older than ``max_age`` seconds.

    A ``max_age`` of 0 disables expiry.
    """
    return max_age > 0 and now - created > max_age


def _container_created(container: ContainerSummary) -> int | None:
    if len(container.names) != 1:
        return None
    parsed = parse_container_name(container.names[0])
    return parsed.created if parsed else None


def reap(config: ShellConfig, connect: Connector = docker_connect, now: float | None = None) -> ReapResult:
    """Stop and remove expired containers on every reachable endpoint.

    Only running containers whose single name follows the ``<owner>-<unix-seconds>``
    contract are considered; any other container is skipped silently.
    Endpoints that cannot be connected to or listed are skipped. A container
    that fails to stop or be removed is logged and recorded in the result,
    and the pass carries on with the remaining containers.

    Args:
        config: Run configuration providing the endpoints and ``max_age``.
        connect: Builds a container API client for an endpoint.
        now: Reference Unix time, defaults to the current time.

    Returns:
        ReapResult: Removed and failed container ids and skipped endpoints.

    """
    result = ReapResult()
    if not config.reaping_enabled:
        logger.info("max_age is 0, nothing to reap")
        return result

    reference = time.time() if now is None else now

    for endpoint in config.endpoints:
        try:
            api = connect(endpoint)
            containers = api.list_containers(all=False)
        except ContainerError as e:
            logger.warning("Skipping endpoint %s: %s", endpoint, e)
            result.skipped_endpoints.append(endpoint)
            continue

        for container in containers:
            created = _container_created(container)
            if created is None or not is_expired(created, reference, config.max_age):
                continue

            try:
                api.stop_container(container.id)
                api.remove_container(container.id)
            except ContainerError as e:
                logger.error("Unable to reap container %s on %s: %s", container.names[0], endpoint, e)
                result.failed.append(container.id)
                continue

            logger.info("Reaped container %s on %s", container.names[0], endpoint)
            result.removed.append(container.id)

    return result
