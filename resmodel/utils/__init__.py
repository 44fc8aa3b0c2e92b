# Library utilities
from .logging import log, logWarning, logError, logDebug, init_logging, close_logging, get_counts, reset_counts
from .binary import read_uint8, read_bytes, read_uint_be, write_uint_be, write_uint8
