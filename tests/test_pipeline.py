import logging

import pytest

from func_overview.duration import Duration
from func_overview.lexer import MalformedLine
from func_overview.matcher import Sample
from func_overview.pipeline import Pipeline, parse_trace
from func_overview.source import LineSource


def test_sample_trace(sample_lines):
    pipeline = Pipeline()
    stats = pipeline.run(sample_lines)

    rows = {row.name: row for row in stats.report()}
    assert sorted(rows) == ["do_sys_open", "getname", "schedule", "sys_open"]
    assert rows["getname"].count == 2
    assert rows["getname"].cumulative == Duration(0, 750)
    assert rows["do_sys_open"].cumulative == Duration(2, 100)
    assert rows["schedule"].cumulative == Duration(15, 0)
    assert rows["sys_open"].cumulative == Duration(120, 500)

    summary = pipeline.summary
    assert summary.lines == 18
    assert summary.events == 10
    assert summary.samples == 5
    assert summary.skipped == 8
    assert summary.malformed == 0
    assert summary.unmatched_exits == 1
    assert summary.discarded == 1


def test_same_trace_same_report(sample_lines):
    first = Pipeline().run(sample_lines)
    second = Pipeline().run(LineSource(sample_lines))
    assert first.report() == second.report()


def test_malformed_lines_are_logged_and_skipped(caplog):
    lines = [
        " 0)               |  outer() {",
        " 0)   0.450 us    |  broken()x",
        " 0)   1.000 us    |  }",
    ]
    pipeline = Pipeline()
    with caplog.at_level(logging.WARNING, logger="func_overview"):
        stats = pipeline.run(lines)
    assert pipeline.summary.malformed == 1
    assert stats.samples("outer") == (Duration(1, 0),)
    assert "line 2" in caplog.text


def test_strict_mode_aborts():
    pipeline = Pipeline(strict=True)
    with pytest.raises(MalformedLine) as excinfo:
        pipeline.run([" 0)   0.450 us  | foo();", " 0)   0.450 us  | foo()x"])
    assert excinfo.value.lineno == 2


def test_cpu_bound():
    pipeline = Pipeline(max_cpus=2)
    stats = pipeline.run([" 1)   0.450 us  | ok();", " 2)   0.450 us  | too_far();"])
    assert "ok" in stats
    assert "too_far" not in stats
    assert pipeline.summary.malformed == 1


def test_feed_line_returns_samples():
    pipeline = Pipeline()
    assert pipeline.feed_line(" 0)               |  f() {") is None
    assert pipeline.feed_line(" 0)   3.000 us    |  }") == Sample("f", Duration(3, 0))


def test_finished_pass_is_closed(sample_lines):
    pipeline = Pipeline()
    pipeline.run(sample_lines)
    with pytest.raises(RuntimeError):
        pipeline.feed_line(" 0)   0.450 us  | foo();")


def test_parse_trace_file(trace_file):
    stats, summary = parse_trace(trace_file)
    assert len(stats) == 4
    assert summary.samples == 5


def test_line_source_next_line():
    source = LineSource(["a\n", "b\n"])
    assert source.next_line() == "a\n"
    assert source.next_line() == "b\n"
    assert source.next_line() is None
    assert source.lineno == 2


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        parse_trace(str(tmp_path / "missing.txt"))
