"""Least-loaded endpoint selection across the container engine pool."""

import logging
from collections.abc import Callable, Iterable
from urllib.parse import urlparse

from dockersshell.core.mixins import ContainerAPI
from dockersshell.data import EndpointLoad
from dockersshell.docker import connect as docker_connect
from dockersshell.exceptions import ContainerError, EndpointError, NoEndpointsError

logger = logging.getLogger(__name__)

Connector = Callable[[str], ContainerAPI]


def select_endpoint(endpoints: Iterable[str], connect: Connector = docker_connect) -> str:
    """Choose the endpoint running the fewest containers.

    Endpoints are scanned in order. One that cannot be connected to or
    listed is skipped. An endpoint with no running containers is taken
    immediately and the rest of the pool is not queried. Otherwise the
    first endpoint with the strictly smallest count wins, so pool order
    breaks ties.

    Args:
        endpoints: Ordered endpoint addresses.
        connect: Builds a container API client for an address.

    Returns:
        str: The chosen endpoint address.

    Raises:
        NoEndpointsError: If every endpoint was skipped.

    """
    best: EndpointLoad | None = None

    for endpoint in endpoints:
        try:
            api = connect(endpoint)
            count = len(api.list_containers(all=False))
        except ContainerError as e:
            logger.warning("Skipping endpoint %s: %s", endpoint, e)
            continue

        logger.debug("Endpoint %s is running %d containers", endpoint, count)
        if count == 0:
            best = EndpointLoad(endpoint, 0)
            break
        if best is None or count < best.containers:
            best = EndpointLoad(endpoint, count)

    if best is None:
        raise NoEndpointsError

    logger.info("Selected endpoint %s (%d running containers)", best.address, best.containers)
    return best.address


def endpoint_host(address: str) -> str:
    """Extract the network host from an endpoint address.

    ``tcp://`` addresses are accepted alongside ``http(s)://`` ones. Socket
    based addresses carry no host and are rejected, since the published SSH
    port would be unreachable through them.

    Raises:
        EndpointError: If the address has no host part.

    """
    try:
        host = urlparse(address).hostname
    except ValueError as e:
        msg = f"Unable to parse endpoint URL {address}: {e}"
        raise EndpointError(msg) from e
    if not host:
        msg = f"No host found in endpoint {address}"
        raise EndpointError(msg)
    return host
