import logging
import sys

from .coordinator import run
from .errors import KwCountError
from .log import setup_logging

logger = logging.getLogger(__name__)

USAGE = ("Необходимо указать 3 аргумента: путь к файлу с текстом, "
         "путь к файлу с ключевыми словами, кол-во процессов.")

def main(argv=None, out=None, err=None):
    """Command line entry point; returns the process exit code.

    Usage: kwcount INPUT KEYWORDS WORKERS
    """
    if argv is None:
        argv = sys.argv[1:]
    out = out or sys.stdout
    err = err or sys.stderr

    if len(argv) != 3:
        out.write(USAGE + "\n")
        return 0

    setup_logging()
    input_path, keywords_path, worker_count = argv
    try:
        run(input_path, keywords_path, worker_count, out=out)
    except KwCountError as exc:
        logger.debug("run failed", exc_info=True)
        err.write("Произошла ошибка: {0}\n".format(exc))
        return 1
    except KeyboardInterrupt:
        err.write("Произошла ошибка: прервано\n")
        return 130
    return 0

def main_exit():
    sys.exit(main())
