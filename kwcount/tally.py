import multiprocessing
import threading

from .config import is_backend, Backend

def count_keywords(line, keywords):
    """Build the partial tally of one line.

    Matching is case-insensitive and non-overlapping: the line and every
    keyword are lower-cased and counted with str.count, so "aaa" holds "aa"
    once. Duplicate keywords collapse into one entry.
    """
    lowered = line.lower()
    return {keyword: lowered.count(keyword.lower()) for keyword in keywords}

class KeywordTally:
    """Running count per keyword plus a grand total, shared by all workers.

    All writes go through merge(), which holds the tally lock for the whole
    update so merges never interleave. The read accessors take no part in
    that coordination; use them only once every worker has been joined.

    Under the multiprocessing backend the counters live in shared memory so
    worker processes update the same values.
    """

    def __init__(self, keywords):
        # Keyword order is kept for reporting; duplicates share a counter
        self.keywords = list(dict.fromkeys(keywords))
        self._index = {keyword: i for i, keyword in enumerate(self.keywords)}

        if is_backend(Backend.MULTIPROCESSING):
            self._lock = multiprocessing.Lock()
            self._counts = multiprocessing.RawArray("q", len(self.keywords))
            self._total = multiprocessing.RawValue("q", 0)
        else:
            self._lock = threading.Lock()
            self._counts = [0] * len(self.keywords)
            self._total = _Total()

    def merge(self, partial):
        """Atomically add :partial: (keyword -> count) into the tally.

        Raises KeyError for a keyword the tally does not track, before any
        count is changed.
        """
        updates = [(self._index[keyword], count) for keyword, count in partial.items()]
        with self._lock:
            for i, count in updates:
                self._counts[i] += count
                self._total.value += count

    def count(self, keyword):
        return self._counts[self._index[keyword]]

    def counts(self):
        return {keyword: self._counts[i] for keyword, i in self._index.items()}

    @property
    def total(self):
        return self._total.value

    def snapshot(self):
        """Return (counts, total) read under the tally lock"""
        with self._lock:
            return self.counts(), self.total

class _Total:
    __slots__ = ("value",)

    def __init__(self):
        self.value = 0
