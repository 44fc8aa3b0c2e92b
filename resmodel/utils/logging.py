"""
Unified logging for the resource model library.

Provides console output plus an optional log file.
Tracks warnings and errors so callers can inspect them after a batch job.

Usage:
    from resmodel.utils import log, logWarning, logError, logDebug, init_logging

    # Optionally, before loading resources:
    init_logging(Path("resmodel.log"))

    # Throughout code:
    log("Loading options...")                 # Info - major points
    logWarning("decoded size mismatch")       # Output may be incomplete
    logError("entry could not be parsed")     # Output is broken
    logDebug("deep uncache from entry 12")    # Only written to the log file

    # After a batch:
    errors, warnings = get_counts()
"""

import sys
import atexit
from pathlib import Path
from datetime import datetime
from typing import List, Optional, Tuple

# ANSI color codes
class Colors:
    YELLOW = '\033[93m'
    RED = '\033[91m'
    RESET = '\033[0m'


# Module state
_log_file = None
_log_path: Optional[Path] = None
_initialized = False
_warnings: List[str] = []
_errors: List[str] = []


def init_logging(log_path: Path = None):
    """
    Initialize logging.

    Args:
        log_path: Path to a log file. When None, messages only go to the
                  console and debug messages are dropped.
    """
    global _log_file, _log_path, _initialized

    if _initialized:
        return

    _initialized = True

    if log_path is None:
        return

    _log_path = Path(log_path)
    _log_path.parent.mkdir(parents=True, exist_ok=True)

    try:
        _log_file = open(_log_path, 'w', encoding='utf-8')

        timestamp = datetime.now().strftime('%Y-%m-%d %H:%M:%S')
        _log_file.write(f"Log started: {timestamp}\n")
        _log_file.write("=" * 70 + "\n\n")
        _log_file.flush()

        atexit.register(close_logging)

    except OSError as e:
        print(f"Warning: Could not open log file {_log_path}: {e}", file=sys.stderr)
        _log_file = None


def close_logging():
    """Close the log file and allow init_logging() to run again."""
    global _log_file, _log_path, _initialized

    if _log_file is not None:
        timestamp = datetime.now().strftime('%Y-%m-%d %H:%M:%S')
        _log_file.write(f"\n{'=' * 70}\n")
        _log_file.write(f"Log finished: {timestamp}\n")
        _log_file.close()
        _log_file = None

    _log_path = None
    _initialized = False


def get_counts() -> Tuple[int, int]:
    """Return (error_count, warning_count)."""
    return len(_errors), len(_warnings)


def reset_counts():
    """Forget tracked warnings and errors."""
    _warnings.clear()
    _errors.clear()


def _write_to_file(msg: str, end: str = "\n"):
    if _log_file is not None:
        _log_file.write(msg + end)
        _log_file.flush()


def log(msg: str = "", end: str = "\n"):
    """Log an info message to the console and the log file."""
    if not _initialized:
        init_logging()

    print(msg, end=end)
    _write_to_file(msg, end)


def logWarning(msg: str, end: str = "\n"):
    """
    Log a warning message. Warnings mean a result may be incomplete.
    Displayed in yellow and tracked for get_counts().
    """
    if not _initialized:
        init_logging()

    formatted = f"Warning: {msg}"
    print(f"{Colors.YELLOW}{formatted}{Colors.RESET}", end=end, file=sys.stderr)
    _write_to_file(formatted, end)
    _warnings.append(msg)


def logError(msg: str, end: str = "\n"):
    """
    Log an error message. Errors mean a result is broken.
    Displayed in red and tracked for get_counts().
    """
    if not _initialized:
        init_logging()

    formatted = f"ERROR: {msg}"
    print(f"{Colors.RED}{formatted}{Colors.RESET}", end=end, file=sys.stderr)
    _write_to_file(formatted, end)
    _errors.append(msg)


def logDebug(msg: str, end: str = "\n"):
    """
    Log a debug message. Only written to the log file, never to the console.
    """
    if not _initialized:
        init_logging()

    _write_to_file(f"[DEBUG] {msg}", end)
