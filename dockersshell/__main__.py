"""Entry point for `python -m dockersshell`."""

from dockersshell.cli import main_entry

main_entry()
