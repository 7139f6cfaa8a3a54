"""Constants used throughout dockersshell.

Defaults for the configuration file, the readiness poll budget and the
container naming contract live here so every component agrees on them.
"""

DEFAULT_CONFIG_PATH = "/etc/dockersshell.yaml"

DEFAULT_ENDPOINT = "http://127.0.0.1:4243"
DEFAULT_IMAGE = "ssh"
DEFAULT_USER = "ubuntu"
DEFAULT_MAX_AGE = 86400

SSH_PORT_KEY = "22/tcp"
SSH_BANNER_MARKER = b"SSH"
SSH_BANNER_READ_SIZE = 256

READINESS_ATTEMPTS = 60
READINESS_INTERVAL = 0.5

# Version 1 of the container naming contract: "<owner>-<unix-seconds>".
NAME_SEPARATOR = "-"
NAME_OWNER_REPLACEMENT = "_"

INVOKING_USER_ENV = "DSSHUSER"

EXIT_OK = 0
EXIT_FAILURE = 2
EXIT_INTERRUPTED = 130
