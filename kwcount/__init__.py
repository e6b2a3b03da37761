from .config import Backend, get_backend, set_backend, is_backend
from .context import RunContext, run_context, make_channel
from .coordinator import Coordinator, Result, State, load_keywords, run
from .errors import (KwCountError, ConfigError, KeywordFileError,
                     InputFileError, InputReadError, RunCancelled)
from .report import format_report, write_report
from .source import LineSource, produce
from .tally import KeywordTally, count_keywords
from .workers import WorkerPool, consume
