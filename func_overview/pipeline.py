import logging
from dataclasses import dataclass

from .lexer import MalformedLine, Stage, parse_line
from .matcher import CallMatcher
from .source import LineSource
from .stats import StatsAggregator

logger = logging.getLogger(__name__)


@dataclass
class PassSummary:
    lines: int = 0
    events: int = 0
    samples: int = 0
    skipped: int = 0
    malformed: int = 0
    unmatched_exits: int = 0
    discarded: int = 0


class Pipeline:
    """
    One parsing pass: lines are lexed, matched and aggregated in arrival order.

    Args:
        strict (bool): raise on the first malformed line instead of logging
            it and moving on.
        max_cpus (int, optional): reject events from CPUs at or above this
            number as malformed.
        progress_every (int): log a progress message every N samples.
    """

    def __init__(self, strict=False, max_cpus=None, progress_every=1000):
        self.strict = strict
        self.max_cpus = max_cpus
        self.progress_every = progress_every
        self.matcher = CallMatcher()
        self.stats = StatsAggregator()
        self.summary = PassSummary()
        self.finished = False

    def feed_line(self, line, lineno=None):
        """
        Process one raw line, returning the completed sample if there is one.
        """
        if self.finished:
            raise RuntimeError("This pass is finished, start a new Pipeline")

        self.summary.lines += 1
        try:
            event = parse_line(line, lineno)
        except MalformedLine as error:
            self._malformed(error)
            return None

        if event is None:
            self.summary.skipped += 1
            return None

        if self.max_cpus is not None and event.cpu >= self.max_cpus:
            self._malformed(
                MalformedLine(
                    line.rstrip("\n"),
                    f"CPU {event.cpu} out of range (max {self.max_cpus})",
                    Stage.CPU,
                    lineno,
                )
            )
            return None

        self.summary.events += 1
        sample = self.matcher.feed(event)
        if sample is None:
            return None

        self.stats.record(sample.name, sample.duration)
        self.summary.samples += 1
        if self.progress_every and self.summary.samples % self.progress_every == 0:
            logger.debug("call count=%d", self.summary.samples)
        return sample

    def _malformed(self, error):
        if self.strict:
            raise error
        self.summary.malformed += 1
        logger.warning("Ignoring malformed record, %s", error)

    def finish(self):
        """
        End the pass: drop unfinished calls and return the aggregated stats.
        """
        if not self.finished:
            self.summary.unmatched_exits = self.matcher.unmatched_exits
            self.summary.discarded = self.matcher.discard_pending()
            self.finished = True
        return self.stats

    def run(self, source):
        """
        Feed every line of source (a LineSource or any iterable of lines).
        """
        if not isinstance(source, LineSource):
            source = LineSource(source)
        for line in source:
            self.feed_line(line, source.lineno)
        return self.finish()


def parse_trace(filepath, **kwargs):
    """
    Parse a function_graph trace file in a single pass.

    Returns:
        (StatsAggregator, PassSummary)
    """
    pipeline = Pipeline(**kwargs)
    with LineSource.open(filepath) as source:
        stats = pipeline.run(source)
    return stats, pipeline.summary
