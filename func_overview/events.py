"""
Trace events produced by the lexer.

A function_graph trace has three kinds of call records. An entry line opens
a call whose duration is not known yet, an exit line closes the innermost open
call on its CPU, and a leaf call line carries both the name and the duration.
"""

from typing import NamedTuple, Union

from .duration import Duration


class CallEntry(NamedTuple):
    cpu: int
    name: str


class CallExit(NamedTuple):
    cpu: int
    duration: Duration


class Call(NamedTuple):
    cpu: int
    name: str
    duration: Duration


TraceEvent = Union[CallEntry, CallExit, Call]
