"""
Exit codes for PomoSync CLI.

Scripts wrapping the CLI can tell a bad argument from an unreachable sync
endpoint without parsing output.
"""

SUCCESS = 0
ERROR_GENERAL = 1
ERROR_INVALID_ARGS = 2  # bad option, unknown config key, rejected value
ERROR_NETWORK = 4  # sync endpoint unreachable, timed out or answered garbage
ERROR_BUSY = 7  # a sync is already outstanding

_NAMES = {
    SUCCESS: "SUCCESS",
    ERROR_GENERAL: "ERROR_GENERAL",
    ERROR_INVALID_ARGS: "ERROR_INVALID_ARGS",
    ERROR_NETWORK: "ERROR_NETWORK",
    ERROR_BUSY: "ERROR_BUSY",
}


def get_exit_code_name(code: int) -> str:
    """Symbolic name of *code*, used in the log."""
    return _NAMES.get(code, f"UNKNOWN({code})")
