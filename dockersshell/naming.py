"""Container naming contract shared by session creation and the reaper.

Version 1: ``<owner>-<unix-seconds>``. The owner never contains the
separator, and the timestamp is a non-empty run of ASCII digits. Anything
else is not a dockersshell container and must be left alone.
"""

import re
import time

from dockersshell.const import NAME_OWNER_REPLACEMENT, NAME_SEPARATOR
from dockersshell.data import ContainerName

_NAME_PATTERN = re.compile(r"([^-/\s]+)-([0-9]+)")


def container_name(owner: str, now: float | None = None) -> str:
    """Build a container name for ``owner`` stamped with the creation time."""
    safe_owner = owner.replace(NAME_SEPARATOR, NAME_OWNER_REPLACEMENT).replace("/", NAME_OWNER_REPLACEMENT)
    stamp = int(time.time() if now is None else now)
    return f"{safe_owner}{NAME_SEPARATOR}{stamp}"


def parse_container_name(name: str) -> ContainerName | None:
    """Parse a container name, returning ``None`` if it does not follow the contract.

    The engine's list call reports names with a leading ``/``; one is stripped.
    """
    match = _NAME_PATTERN.fullmatch(name.removeprefix("/"))
    if match is None:
        return None
    return ContainerName(owner=match.group(1), created=int(match.group(2)))
