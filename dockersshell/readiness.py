"""Readiness wait for a freshly started container's SSH service.

The engine reports a container as started before the service inside it is
listening, and the engine's port proxy may accept connections before the
daemon does. The waiter therefore polls the published port and, by default,
only succeeds once the SSH protocol banner has been read.
"""

import logging
import socket
import time

from dockersshell.const import READINESS_ATTEMPTS, READINESS_INTERVAL, SSH_BANNER_MARKER, SSH_BANNER_READ_SIZE
from dockersshell.exceptions import ReadinessTimeoutError

logger = logging.getLogger(__name__)

# Floor for an attempt that starts after its slot has already run out.
MIN_ATTEMPT_TIMEOUT = 0.05


def _attempt(host: str, port: int, timeout: float, check_banner: bool) -> bool:
    try:
        with socket.create_connection((host, port), timeout=timeout) as sock:
            if not check_banner:
                return True
            data = sock.recv(SSH_BANNER_READ_SIZE)
    except OSError as e:
        logger.debug("%s:%s not ready: %s", host, port, e)
        return False
    return SSH_BANNER_MARKER in data


def wait_for_ssh(
    host: str,
    port: int,
    attempts: int = READINESS_ATTEMPTS,
    interval: float = READINESS_INTERVAL,
    check_banner: bool = True,
) -> None:
    r"""Block until ``host:port`` serves SSH.

    Attempts run on a fixed ``interval`` schedule, so the whole wait is
    bounded by ``attempts * interval``. Each attempt opens a TCP connection
    whose socket timeout is what remains of its slot. With ``check_banner``
    the attempt also reads the first bytes sent by the server and requires
    them to contain ``SSH``. A failed attempt sleeps out the rest of its
    slot; there is no backoff.

    Args:
        host: Host the container port is published on.
        port: Published host port.
        attempts: Number of attempts before giving up.
        interval: Seconds between attempts.
        check_banner: Whether to require the SSH banner.

    Raises:
        ReadinessTimeoutError: If no attempt succeeded.

    """
    start = time.monotonic()
    for attempt in range(1, attempts + 1):
        slot_end = start + attempt * interval
        timeout = max(slot_end - time.monotonic(), MIN_ATTEMPT_TIMEOUT)
        if _attempt(host, port, timeout, check_banner):
            logger.debug("%s:%s ready after %d attempt(s)", host, port, attempt)
            return
        time.sleep(max(slot_end - time.monotonic(), 0.0))

    raise ReadinessTimeoutError(host, port, attempts)
