import enum
import os

VERSION = "1.0.0"
BUILD_TIME = "unknown-time"

PROGRAM_NAME = "RIM - Remote Interfaces Monitor"

# Environment variables
CONF_FILE_ENV = "RIM_CONF_FILE"
SSH_AUTH_SOCK_ENV = "SSH_AUTH_SOCK"
ASKPASS_PASSWORD_ENV = "RIM_SSH_PASSWORD"

# SSH defaults
SSH_BIN = "ssh"
DEFAULT_SSH_PORT = 22
DEFAULT_SSH_USER = "root"
DEFAULT_CONNECT_TIMEOUT = 10
SSH_CONNECTION_FAILED_EXIT = 255

# Remote probe. The sentinel line separates the two /proc/net/dev dumps and the
# sleep defines the sampling interval used for every rate.
PROBE_SENTINEL = "ZZZ"
PROBE_INTERVAL_SECONDS = 1
REMOTE_COMMAND = (
    f"cat /proc/net/dev; echo {PROBE_SENTINEL}; "
    f"sleep {PROBE_INTERVAL_SECONDS}; cat /proc/net/dev;"
)

# Counters are unsigned 64 bit on the remote side
COUNTER_MODULUS = 2 ** 64
COUNTER_MAX = COUNTER_MODULUS - 1

# /proc/net/dev column index -> rate key
COUNTER_COLUMNS = {
    0: "rx-Bps",
    1: "rx-pps",
    2: "rx-eps",
    3: "rx-dps",
    8: "tx-Bps",
    9: "tx-pps",
    10: "tx-eps",
    11: "tx-dps",
}
COUNTER_KEYS = tuple(COUNTER_COLUMNS.values())
MIN_COUNTER_COLUMNS = max(COUNTER_COLUMNS) + 1
HEADER_MARKER = "|"

# Sort keys accepted from users, and how they map onto stored rate keys
SORT_KEYS = ("tx-Kbps", "tx-pps", "tx-eps", "tx-dps", "rx-Kbps", "rx-pps", "rx-eps", "rx-dps")
SORT_KEY_ALIASES = {
    "rx-Kbps": "rx-Bps",
    "tx-Kbps": "tx-Bps",
    "receive-bytes": "rx-Bps",
    "received-bytes": "rx-Bps",
    "receive-bytes-rate": "rx-Bps",
    "received-bytes-rate": "rx-Bps",
    "receive-packets": "rx-pps",
    "receive-errors": "rx-eps",
    "receive-drops": "rx-dps",
    "transmit-bytes": "tx-Bps",
    "transmitted-bytes": "tx-Bps",
    "transmit-bytes-rate": "tx-Bps",
    "transmitted-bytes-rate": "tx-Bps",
    "transmit-packets": "tx-pps",
    "transmit-errors": "tx-eps",
    "transmit-drops": "tx-dps",
}
ASCENDING_PREFIX = "+"
DEFAULT_SORT_KEYS = ("rx-dps", "rx-Kbps")

# Output
OUTPUT_FORMATS = ("table", "json", "csv")
DEFAULT_OUTPUT_FORMAT = "table"
HEADER_REPEAT_ROWS = 20


def default_workers():
    return os.cpu_count() or 1


class EXIT_CODE(enum.IntEnum):
    SUCCESS = 0
    GENERAL_ERROR = 1
    INVALID_ARGUMENTS = 2
    FILE_NOT_FOUND = 3
    INCOMPLETE = 4
    FAILURE = 5
    INTERRUPTED = 130


# Full stack traces on unexpected errors
RIM_DEBUG = os.environ.get("RIM_DEBUG", "").lower() in ("1", "true", "yes")
