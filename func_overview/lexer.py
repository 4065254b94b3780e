"""
Lexer for function_graph tracer output.

A call record line has a fixed layout:

     0)               |  foo() {
     0)   0.450 us    |    bar();
     0) + 12.345 us   |  }

and is scanned left to right in four stages: the CPU field up to ')', the
overhead markers and duration up to the unit or the first '|', the trailing
terminator, and finally the function name after the '|'. Every other line a
trace file can contain (header comments, context switch banners, irq markers)
is skipped.
"""

import enum
import logging

from .duration import USEC_PER_SEC, Duration
from .events import Call, CallEntry, CallExit

logger = logging.getLogger(__name__)

DIGITS = "0123456789"

# +, ! are the classic overhead markers, newer kernels add #, *, @ and $
OVERHEAD_MARKERS = "+!#*@$"

NAME_TERMINATORS = "();{ "

# The name starts two characters after the pipe: "|  foo();"
NAME_OFFSET = 2

# "CPU:3 [LOST 1024 EVENTS]"
LOST_EVENTS_PREFIX = "CPU:"


class Stage(enum.Enum):
    CPU = "cpu"
    TAGS = "tags"
    TERMINATOR = "terminator"
    NAME = "name"


class MalformedLine(ValueError):
    """
    A line that starts like a call record but breaks its grammar.
    """

    def __init__(self, line, reason, stage=None, lineno=None):
        super().__init__(reason)
        self.line = line
        self.reason = reason
        self.stage = stage
        self.lineno = lineno

    def __str__(self):
        where = f"line {self.lineno}: " if self.lineno is not None else ""
        stage = f" ({self.stage.value} field)" if self.stage is not None else ""
        return f"{where}{self.reason}{stage}: {self.line!r}"


class _SkipLine(Exception):
    pass


def scan_cpu(line):
    """
    Read the CPU number, returning it with the index just past the ')'.
    """
    start = end = None
    for i, char in enumerate(line):
        if char in DIGITS:
            if end is not None:
                raise MalformedLine(line, "space inside CPU number", Stage.CPU)
            if start is None:
                start = i
        elif char == " ":
            if start is not None and end is None:
                end = i
        elif char == ")":
            if start is None:
                raise MalformedLine(line, "missing CPU number", Stage.CPU)
            return int(line[start:end if end is not None else i]), i + 1
        elif char == "<":
            # Process context switch, e.g. " 0)  <idle>-0  =>  bash-123"
            raise _SkipLine("context switch")
        elif char == "-" and start is None:
            raise _SkipLine("separator")
        else:
            raise MalformedLine(line, f"unexpected character {char!r}", Stage.CPU)
    raise MalformedLine(line, "unterminated CPU field", Stage.CPU)


def scan_tags(line, index):
    """
    Scan overhead markers and the optional duration after the CPU field.

    Returns (duration, index). A duration of None means the line is a call
    entry and index points at its '|'. Otherwise index points at the space
    before the unit.
    """
    run = None
    seconds = None
    for i in range(index, len(line)):
        char = line[i]
        if char in DIGITS:
            if run is None:
                run = i
        elif char in OVERHEAD_MARKERS:
            if run is not None or seconds is not None:
                raise MalformedLine(line, f"marker {char!r} inside duration", Stage.TAGS)
        elif char == ".":
            if run is None or seconds is not None:
                raise MalformedLine(line, "misplaced '.' in duration", Stage.TAGS)
            seconds = int(line[run:i])
            run = None
        elif char == " ":
            if run is None and seconds is None:
                continue
            if run is None:
                raise MalformedLine(line, "missing fractional digits", Stage.TAGS)
            if line[i + 1:i + 2] != "u":
                raise MalformedLine(line, "duration without unit", Stage.TAGS)
            if seconds is None:
                raise MalformedLine(line, "duration without fractional part", Stage.TAGS)
            microseconds = int(line[run:i])
            if microseconds >= USEC_PER_SEC:
                raise MalformedLine(line, "fractional part too long", Stage.TAGS)
            return Duration(seconds, microseconds), i
        elif char == "|":
            if run is not None or seconds is not None:
                raise MalformedLine(line, "incomplete duration before '|'", Stage.TAGS)
            return None, i
        else:
            # Some other record in the duration column: "=>", "==========>",
            # or a funcgraph-proc task column.
            raise _SkipLine(f"unexpected {char!r} after CPU field")
    raise MalformedLine(line, "line ends before duration or '|'", Stage.TAGS)


def scan_terminator(line):
    """
    Classify a timed record by its last character.
    """
    last = line[-1]
    if last == ";":
        return Call
    if last == "}":
        return CallExit
    raise MalformedLine(line, f"invalid trailing character {last!r}", Stage.TERMINATOR)


def scan_name(line, index):
    pipe = line.find("|", index)
    if pipe < 0:
        raise MalformedLine(line, "no '|' before function name", Stage.NAME)
    name = line[pipe + NAME_OFFSET:].strip()
    for i, char in enumerate(name):
        if char in NAME_TERMINATORS or char.isspace():
            name = name[:i]
            break
    if not name:
        raise MalformedLine(line, "empty function name", Stage.NAME)
    return name


def parse_line(raw_line, lineno=None):
    """
    Parse one line of function_graph output.

    Args:
        raw_line (str): the line, with or without its newline.
        lineno (int, optional): line number used in diagnostics.

    Returns:
        A CallEntry, CallExit or Call event, or None when the line is not a
        call record (blank, comment, context switch, irq marker...).

    Raises:
        MalformedLine: the line looks like a call record but is damaged.
    """
    line = raw_line.rstrip()
    stripped = line.lstrip()
    if not stripped or stripped.startswith("#"):
        return None
    if stripped.startswith(LOST_EVENTS_PREFIX):
        logger.debug("Lost events reported at line %s: %s", lineno, stripped)
        return None

    try:
        cpu, index = scan_cpu(line)
        duration, index = scan_tags(line, index)
        if duration is None:
            if not line.endswith("{"):
                # Annotation in the call column, e.g. "|  /* trace_printk */"
                raise _SkipLine("entry without opening brace")
            return CallEntry(cpu, scan_name(line, index))
        if scan_terminator(line) is CallExit:
            return CallExit(cpu, duration)
        return Call(cpu, scan_name(line, index), duration)
    except _SkipLine as skip:
        logger.debug("Skipping line %s (%s)", lineno, skip)
        return None
    except MalformedLine as error:
        error.line = raw_line.rstrip("\n")
        error.lineno = lineno
        raise
