"""Command line entry point for dockersshell.

Usage:
    dockersshell              Open a throwaway container and ssh into it
    dockersshell --clean      Remove containers older than max_age
"""

import argparse
import logging
import os
import sys

from dockersshell.const import DEFAULT_CONFIG_PATH, EXIT_FAILURE, EXIT_INTERRUPTED, EXIT_OK
from dockersshell.core.config import ShellConfig, load_config
from dockersshell.docker import connect as docker_connect
from dockersshell.exceptions import DockerSShellError
from dockersshell.reaper import reap
from dockersshell.selector import Connector
from dockersshell.session import ShellSession

logger = logging.getLogger("dockersshell")


def _invoking_user(config: ShellConfig) -> str:
    return os.environ.get("USER") or os.environ.get("LOGNAME") or config.user


def run_clean(config: ShellConfig, connect: Connector = docker_connect) -> int:
    """Run the reaper pass and return the process exit status."""
    result = reap(config, connect)
    logger.info("Reaped %d container(s)", len(result.removed))
    if not result.success:
        logger.error("Failed to reap %d container(s)", len(result.failed))
        return EXIT_FAILURE
    return EXIT_OK


def run_shell(config: ShellConfig, owner: str, connect: Connector = docker_connect) -> int:
    """Open a session, run ssh and tear the container down.

    Teardown is attempted whatever happened to the ssh session. A teardown
    failure wins over the session's exit status.
    """
    session = ShellSession(config, owner=owner, connect=connect)
    try:
        session.open()
    except KeyboardInterrupt:
        logger.error("Interrupted while provisioning")
        return EXIT_INTERRUPTED
    except DockerSShellError as e:
        logger.error("%s", e)
        return EXIT_FAILURE

    exit_code = EXIT_OK
    try:
        exit_code = session.interact()
    except KeyboardInterrupt:
        logger.error("Interrupted during the ssh session")
        exit_code = EXIT_INTERRUPTED
    except DockerSShellError as e:
        logger.error("%s", e)
        exit_code = EXIT_FAILURE
    finally:
        try:
            session.close()
        except DockerSShellError as e:
            logger.error("%s", e)
            exit_code = EXIT_FAILURE

    return exit_code


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="dockersshell",
        description="Start a throwaway container and open an ssh session in it",
    )
    parser.add_argument("--clean", action="store_true", help="Clean up old containers")
    parser.add_argument(
        "--config",
        default=DEFAULT_CONFIG_PATH,
        help=f"Configuration file (default: {DEFAULT_CONFIG_PATH})",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser


def main(argv: list[str] | None = None) -> int:
    """Parse arguments and run the selected mode."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="[%(asctime)s] [%(name)s] [%(levelname)s] %(message)s",
    )

    config = load_config(args.config)
    if args.clean:
        return run_clean(config)
    return run_shell(config, owner=_invoking_user(config))


def main_entry() -> None:
    """Console script entry point."""
    sys.exit(main())


if __name__ == "__main__":
    main_entry()
