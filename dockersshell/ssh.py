import logging
import os
import subprocess

from dockersshell.const import INVOKING_USER_ENV
from dockersshell.data import SessionTarget
from dockersshell.exceptions import SessionError

logger = logging.getLogger(__name__)


def ssh_command(target: SessionTarget, login_user: str) -> list[str]:
    """Build the quiet-mode ssh command line for ``target``."""
    return ["ssh", "-q", "-p", str(target.port), "-l", login_user, target.host]


def run_ssh(target: SessionTarget, login_user: str, invoking_user: str | None = None) -> int:
    """Run an interactive ssh session against ``target``.

    The caller's terminal is inherited, so the ssh client handles control
    characters and window resizing itself. The invoking user is exported to
    the ssh process only.

    Returns:
        int: The ssh exit status, which is the remote exit status when the
        session was established.

    Raises:
        SessionError: If the ssh client could not be launched.

    """
    env = dict(os.environ)
    if invoking_user:
        env[INVOKING_USER_ENV] = invoking_user

    command = ssh_command(target, login_user)
    logger.debug("Running %s", " ".join(command))
    try:
        result = subprocess.run(command, env=env, check=False)  # noqa: S603
    except OSError as e:
        msg = f"Unable to initiate ssh connection: {e}"
        raise SessionError(msg) from e
    return result.returncode
