from .duration import Duration
from .events import Call, CallEntry, CallExit
from .lexer import MalformedLine, parse_line
from .matcher import CallMatcher
from .pipeline import PassSummary, Pipeline, parse_trace
from .source import LineSource
from .stats import FunctionStats, StatsAggregator

__version__ = "0.1.0"
