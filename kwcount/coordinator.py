"""Wires the line source, the worker pool and the shared tally into one run.

A run moves through the states

    init -> keywords-loaded -> input-opened -> running -> draining
         -> reported -> done

and ends in failed when any step raises. Nothing is reported for a failed
run, and nothing is retried.
"""
import logging
import time

from .config import (parse_worker_count, check_environment, encoding,
                     close_timeout, poll_interval)
from .context import run_context, make_channel, close_channel, Reason
from .errors import KeywordFileError, InputFileError, InputReadError, RunCancelled
from .report import write_report
from .source import LineSource, strip_line_ending
from .tally import KeywordTally
from .workers import WorkerPool

logger = logging.getLogger(__name__)

class State:
    INIT = "init"
    KEYWORDS_LOADED = "keywords-loaded"
    INPUT_OPENED = "input-opened"
    RUNNING = "running"
    DRAINING = "draining"
    REPORTED = "reported"
    DONE = "done"
    FAILED = "failed"

class Result:
    """Final counts of a completed run.

    :keywords: the keyword list in file order, duplicates included
    :counts: keyword -> count
    :total: sum of all counts
    """

    def __init__(self, keywords, counts, total):
        self.keywords = list(keywords)
        self.counts = dict(counts)
        self.total = total

    def __eq__(self, other):
        if not isinstance(other, Result):
            return NotImplemented
        return (self.keywords, self.counts, self.total) == \
            (other.keywords, other.counts, other.total)

    def __repr__(self):
        return "Result(keywords={0!r}, counts={1!r}, total={2!r})".format(
            self.keywords, self.counts, self.total)

def load_keywords(path):
    """Read the keyword list, one keyword per line.

    Lines are split on "\\n" only, with a "\\r" before it dropped. Lines
    holding only whitespace are dropped; every other line is kept exactly
    as written.
    """
    try:
        with open(path, encoding=encoding(), newline="\n") as f:
            lines = [strip_line_ending(line) for line in f]
    except (OSError, UnicodeDecodeError) as exc:
        raise KeywordFileError("cannot read keyword file {0}: {1}".format(path, exc)) from exc
    return [line for line in lines if line.strip()]

def open_input(path):
    try:
        return open(path, encoding=encoding(), newline="\n")
    except OSError as exc:
        raise InputFileError("cannot open input file {0}: {1}".format(path, exc)) from exc

class Coordinator:
    """Owns the lifecycle of one keyword count run.

    Subclasses may swap in their own :source_class: or :pool_class:.
    """

    source_class = LineSource
    pool_class = WorkerPool

    def __init__(self):
        self.state = State.INIT
        self._context = None
        self._cancel_requested = None

    def cancel(self, message="run cancelled"):
        """Raise the run's cancellation signal, now or as soon as the run starts"""
        if self._context is not None:
            self._context.cancel(Reason.EXTERNAL, message)
        else:
            self._cancel_requested = message

    def run(self, input_path, keywords_path, worker_count, out=None):
        """Count the keywords of :keywords_path: in :input_path: with
        :worker_count: workers. Writes the report to :out: when given and
        returns the Result.
        """
        if self.state != State.INIT:
            raise RuntimeError("A coordinator runs only once")
        try:
            result = self._run(input_path, keywords_path, worker_count, out)
        except BaseException:
            self.state = State.FAILED
            raise
        finally:
            self._context = None
        self.state = State.DONE
        return result

    def _run(self, input_path, keywords_path, worker_count, out):
        workers = parse_worker_count(worker_count)
        check_environment()

        keywords = load_keywords(keywords_path)
        self.state = State.KEYWORDS_LOADED
        logger.info("loaded %d keywords from %s", len(keywords), keywords_path)

        input_file = open_input(input_path)
        self.state = State.INPUT_OPENED

        with input_file, run_context() as context:
            self._context = context
            if self._cancel_requested is not None:
                context.cancel(Reason.EXTERNAL, self._cancel_requested)

            channel = make_channel()
            tally = KeywordTally(keywords)
            source = self.source_class(input_file, channel, context, consumers=workers)
            pool = self.pool_class(context, channel, tally, keywords, processes=workers)

            self.state = State.RUNNING
            started = time.monotonic()
            source.start()
            pool.start()

            self.state = State.DRAINING
            try:
                pool.join()
            except KeyboardInterrupt:
                self.cancel("interrupted")
                raise
            source.join(close_timeout() + poll_interval())

            failed = pool.failed_runners()
            if failed:
                context.cancel(Reason.STAGE_FAILED,
                               "workers exited abnormally: " + ", ".join(failed))
            close_channel(channel)

            reasons = context.reasons()
            if reasons:
                raise _error_for(reasons)

            result = Result(keywords, tally.counts(), tally.total)
            logger.info("counted %d lines with %d workers in %.2fs",
                        source.lines_sent, workers, time.monotonic() - started)

        if out is not None:
            write_report(result, out)
        self.state = State.REPORTED
        return result

def _error_for(reasons):
    for kind, message in reasons:
        if kind == Reason.READ_ERROR:
            return InputReadError(message)
    return RunCancelled(reasons[0][1])

def run(input_path, keywords_path, worker_count, out=None):
    """Run one keyword count with a fresh Coordinator"""
    return Coordinator().run(input_path, keywords_path, worker_count, out)
