import logging
import multiprocessing
import threading

from .config import is_backend, Backend
from .context import Reason

logger = logging.getLogger(__name__)

class Stage:
    """
    Subclass this class to create one concurrent activity of a run.

    Implement Stage behavior by overriding any of the following methods:

    :setup: called once on each runner before any work
    :work: called once on each runner with the runner's name; does the job
    :teardown: called once when work has returned

    A Stage built with processes=N is executed by N identical runners. The
    runner kind (process, thread, or synchronous dummy) follows the backend.
    An exception escaping a runner cancels the run's context.
    """

    ## Methods that run on stage runner(s)
    #

    def setup(self):
        """Overridden to initialize per-runner state
        """
        pass

    def work(self, name):
        """Should be overridden by user class
        """
        pass

    def teardown(self):
        """Overridden to execute code before the runner finishes
        """
        pass

    ## Methods that run on the constructing/main thread
    #

    def __init__(self, context, processes=1):
        self.context = context
        self._started = False

        runner_class = self._runner_class()
        self._runners = []
        for i in range(processes):
            name = "{0}{1}".format(self.__class__.__name__, i)
            self._runners.append(runner_class(name=name, stage=self))

    def start(self):
        """Start every runner, do not block until completion.
        """
        if self._started:
            raise RuntimeError("You cannot start a stage that has already been run")
        self._started = True
        for runner in self._runners:
            runner.start()

    def join(self, timeout=None):
        """Block until every runner has finished (or :timeout: per runner).
        """
        for runner in self._runners:
            runner.join(timeout)

    def is_alive(self):
        return any(runner.is_alive() for runner in self._runners)

    def failed_runners(self):
        """Names of process runners that exited abnormally"""
        return [runner.name for runner in self._runners
                if getattr(runner, "exitcode", 0) not in (0, None)]

    def _runner_class(self):
        if is_backend(Backend.THREADING):
            return _StageThread
        elif is_backend(Backend.MULTIPROCESSING):
            return _StageProcess
        elif is_backend(Backend.DUMMY):
            return _StageDummy
        raise RuntimeError("No stage runner for backend")

    def __getstate__(self):
        # Runners stay with the process that started them
        state = self.__dict__.copy()
        state["_runners"] = []
        return state

def _run_stage(stage, name):
    try:
        stage.setup()
        stage.work(name)
        stage.teardown()
    except Exception as exc:
        logger.exception("%s failed", name)
        stage.context.cancel(Reason.STAGE_FAILED, "{0} failed: {1}".format(name, exc))

class _StageProcess(multiprocessing.Process):

    def __init__(self, name, stage):
        multiprocessing.Process.__init__(self, name=name)
        self.stage = stage

    def run(self):
        _run_stage(self.stage, self.name)

class _StageThread(threading.Thread):

    def __init__(self, name, stage):
        threading.Thread.__init__(self, name=name, daemon=True)
        self.stage = stage

    def run(self):
        _run_stage(self.stage, self.name)

class _StageDummy:
    """Runner that fakes a real process.

    When start() is called, it simply runs the stage to completion on the
    calling thread. Used for testing. Only works when every stage it depends
    on has already been run.
    """

    def __init__(self, name, stage):
        self.name = name
        self.stage = stage

    def start(self):
        _run_stage(self.stage, self.name)

    def join(self, timeout=None):
        pass

    def is_alive(self):
        return False
