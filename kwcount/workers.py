import logging

from .context import END_OF_LINES
from .stage import Stage
from .tally import count_keywords

logger = logging.getLogger(__name__)

def consume(in_channel, tally, keywords):
    """Merge the partial tally of every line taken from :in_channel:.

    Returns the number of lines processed once the channel delivers its
    END_OF_LINES marker.
    """
    processed = 0
    while True:
        line = in_channel.get()
        if line is END_OF_LINES:
            return processed
        tally.merge(count_keywords(line, keywords))
        processed += 1

class WorkerPool(Stage):
    """Fixed number of identical consumers sharing one channel and one tally.

    Example:
        pool = WorkerPool(context, channel, tally, ["cat", "dog"], processes=3)
        pool.start()
        pool.join()
    """

    def __init__(self, context, channel, tally, keywords, processes=1):
        self.channel = channel
        self.tally = tally
        self.keywords = list(dict.fromkeys(keywords))
        Stage.__init__(self, context, processes=processes)

    @property
    def size(self):
        return len(self._runners)

    def work(self, name):
        processed = consume(self.channel, self.tally, self.keywords)
        logger.debug("%s processed %d lines", name, processed)
