from contextlib import contextmanager
from queue import Queue
import multiprocessing
import threading

from .config import is_backend, Backend, queue_size

# Marker that closes the line channel; one is sent per consumer
END_OF_LINES = None

class Reason:
    READ_ERROR = "read-error"
    STAGE_FAILED = "stage-failed"
    EXTERNAL = "external"

class RunContext:
    """Cancellation signal shared by every activity of one run.

    The first recorded reason is the one the coordinator reports. Reasons are
    (kind, message) tuples, kind being one of the Reason constants.
    """

    def __init__(self, event, reasons):
        self._event = event
        self._reasons = reasons

    def cancel(self, kind=Reason.EXTERNAL, message="run cancelled"):
        self._reasons.append((kind, message))
        self._event.set()

    def cancelled(self):
        return self._event.is_set()

    def reasons(self):
        return [tuple(reason) for reason in self._reasons]

@contextmanager
def run_context():
    """Yield a RunContext whose primitives match the current backend"""
    if is_backend(Backend.MULTIPROCESSING):
        # Reasons come back from worker processes, so keep them on a manager
        manager = multiprocessing.Manager()
        try:
            yield RunContext(multiprocessing.Event(), manager.list())
        finally:
            manager.shutdown()
    else:
        yield RunContext(threading.Event(), [])

def make_channel():
    """Create the handoff channel between the line source and the workers.

    The dummy backend runs stages one after another, so its channel has to
    hold the whole input.
    """
    if is_backend(Backend.MULTIPROCESSING):
        return multiprocessing.Queue(queue_size())
    if is_backend(Backend.DUMMY):
        return Queue()
    return Queue(queue_size())

def close_channel(channel):
    """Release a channel once every worker has been joined.

    Markers left behind by workers that died are dropped instead of holding
    up interpreter exit.
    """
    if isinstance(channel, Queue):
        return
    channel.close()
    channel.cancel_join_thread()
