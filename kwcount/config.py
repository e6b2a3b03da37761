"""Run settings taken from the environment.

KWCOUNT_BACKEND picks how stages run and is read once, on import. The
tunables below it are read on every call so tests can patch the
environment; a value that does not parse raises ConfigError.
"""
import codecs
import math
import os

from .errors import ConfigError

class Backend:
    THREADING = "threading"
    MULTIPROCESSING = "multiprocessing"
    DUMMY = "dummy"

    ALL = (THREADING, MULTIPROCESSING, DUMMY)

_backend = None

def get_backend():
    return _backend

def is_backend(value):
    return _backend == value

def set_backend(value):
    global _backend
    _backend = value

def _initialize():
    if _backend:
        return
    backend = os.getenv("KWCOUNT_BACKEND", Backend.MULTIPROCESSING)
    if backend not in Backend.ALL:
        raise ConfigError("KWCOUNT_BACKEND must be one of {0}, got {1!r}".format(
            ", ".join(Backend.ALL), backend))
    set_backend(backend)

_initialize()

## Tunables
#

def _env_number(name, default, convert, minimum):
    raw = os.getenv(name, default)
    try:
        value = convert(raw.strip())
    except ValueError:
        raise ConfigError("{0} is not a number: {1!r}".format(name, raw))
    if not math.isfinite(value) or value < minimum:
        raise ConfigError("{0} must be at least {1}, got {2!r}".format(name, minimum, raw))
    return value

def queue_size():
    """Capacity of the line channel; 1 keeps a single line in flight"""
    return _env_number("KWCOUNT_QUEUE_SIZE", "1", int, 1)

def poll_interval():
    """Seconds a blocked source waits before looking at the cancel signal again"""
    value = _env_number("KWCOUNT_POLL_INTERVAL", "0.05", float, 0)
    if value == 0:
        raise ConfigError("KWCOUNT_POLL_INTERVAL must be greater than 0")
    return value

def close_timeout():
    return _env_number("KWCOUNT_CLOSE_TIMEOUT", "1.0", float, 0)

def encoding():
    name = os.getenv("KWCOUNT_ENCODING", "utf-8")
    try:
        codecs.lookup(name)
    except LookupError:
        raise ConfigError("KWCOUNT_ENCODING names an unknown codec: {0!r}".format(name))
    return name

def check_environment():
    """Parse every tunable once so a bad value fails the run before any I/O"""
    queue_size()
    poll_interval()
    close_timeout()
    encoding()

def parse_worker_count(value):
    """Convert :value: to a positive worker count or raise ConfigError.

    Accepts ints and decimal strings; bools and anything else are rejected.
    """
    if value is None or isinstance(value, bool):
        raise ConfigError("worker count is missing or not a number: %r" % (value,))
    try:
        count = int(str(value).strip())
    except ValueError:
        raise ConfigError("worker count is not an integer: %r" % (value,))
    if count <= 0:
        raise ConfigError("worker count must be positive, got %d" % count)
    return count
