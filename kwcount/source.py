from queue import Full
import logging
import time

from .config import is_backend, Backend, poll_interval, close_timeout
from .context import END_OF_LINES, Reason
from .stage import Stage, _StageThread

logger = logging.getLogger(__name__)

def strip_line_ending(line):
    """Drop a trailing "\\n" and then a single "\\r" before it"""
    if line.endswith("\n"):
        line = line[:-1]
    if line.endswith("\r"):
        line = line[:-1]
    return line

def produce(reader, out_channel, context, consumers=1):
    """Send every line of :reader: into :out_channel:, in order, exactly once.

    Stops without error as soon as :context: is cancelled. Always finishes by
    sending one END_OF_LINES marker per consumer, even when sending a line
    raised. A read failure is recorded on :context: as a READ_ERROR and ends
    production like a cancellation. Returns the number of lines sent.
    """
    sent = 0
    try:
        for line in reader:
            if context.cancelled():
                logger.debug("cancelled after %d lines", sent)
                break
            if not _put(out_channel, strip_line_ending(line), context):
                break
            sent += 1
    except (OSError, UnicodeDecodeError) as exc:
        logger.error("reading input failed after %d lines: %s", sent, exc)
        context.cancel(Reason.READ_ERROR, "reading input failed: {0}".format(exc))
    finally:
        _close(out_channel, context, consumers)
    return sent

def _put(channel, item, context):
    """Block until :channel: accepts :item:; give up once :context: is cancelled"""
    while True:
        try:
            channel.put(item, timeout=poll_interval())
            return True
        except Full:
            if context.cancelled():
                return False

def _close(channel, context, consumers):
    deadline = None
    for _ in range(consumers):
        while True:
            try:
                channel.put(END_OF_LINES, timeout=poll_interval())
                break
            except Full:
                # After a cancellation some consumers may be gone for good
                if not context.cancelled():
                    continue
                if deadline is None:
                    deadline = time.monotonic() + close_timeout()
                elif time.monotonic() > deadline:
                    logger.warning("channel not drained, giving up on closing it")
                    return
            except Exception:
                logger.exception("timed put of end marker failed, blocking instead")
                channel.put(END_OF_LINES)
                break

class LineSource(Stage):
    """Stage that feeds the lines of an open text reader into the channel.

    The reader belongs to the coordinating process, so under the
    multiprocessing backend the source runs as a thread beside the
    coordinator rather than as a separate process.
    """

    def __init__(self, reader, channel, context, consumers=1):
        self.reader = reader
        self.channel = channel
        self.consumers = consumers
        self.lines_sent = 0
        Stage.__init__(self, context)

    def work(self, name):
        self.lines_sent = produce(self.reader, self.channel, self.context, self.consumers)
        logger.debug("%s sent %d lines", name, self.lines_sent)

    def _runner_class(self):
        if is_backend(Backend.MULTIPROCESSING):
            return _StageThread
        return Stage._runner_class(self)
