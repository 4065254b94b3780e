import pytest

from func_overview.duration import Duration
from func_overview.stats import StatsAggregator, cumulative, median


def seconds(*values):
    return [Duration.from_seconds(value) for value in values]


def test_median_odd_and_even():
    assert median(seconds(3.0, 1.0, 2.0)) == 2.0
    assert median(seconds(4.0, 1.0, 3.0, 2.0)) == 2.5
    assert median(seconds(7.0)) == 7.0


def test_cumulative_mean_count():
    stats = StatsAggregator()
    stats.record("f", Duration(0, 500000))
    stats.record("f", Duration(1, 0))
    (row,) = stats.report()
    assert row.name == "f"
    assert row.cumulative == Duration(1, 500000)
    assert row.cumulative.total_seconds() == 1.5
    assert row.mean == 0.75
    assert row.count == 2


def test_cumulative_carries():
    assert cumulative([Duration(0, 999999), Duration(0, 2), Duration(1, 0)]) == Duration(2, 1)


def test_report_sorted_by_name_by_default():
    stats = StatsAggregator()
    for name in ("zap", "alpha", "mid"):
        stats.record(name, Duration(0, 1))
    assert [row.name for row in stats.report()] == ["alpha", "mid", "zap"]


def test_report_sorted_by_metric():
    stats = StatsAggregator()
    stats.record("small", Duration(0, 1))
    stats.record("big", Duration(5, 0))
    stats.record("often", Duration(0, 2))
    stats.record("often", Duration(0, 2))
    assert [row.name for row in stats.report(sort="cumulative")] == ["big", "often", "small"]
    assert [row.name for row in stats.report(sort="count")] == ["often", "big", "small"]

    with pytest.raises(ValueError):
        stats.report(sort="bogus")


def test_samples_keep_arrival_order():
    stats = StatsAggregator()
    stats.record("f", Duration(0, 3))
    stats.record("g", Duration(0, 1))
    stats.record("f", Duration(0, 2))
    assert stats.samples("f") == (Duration(0, 3), Duration(0, 2))
    assert stats.samples("missing") == ()
    assert stats.total_samples == 3
    assert len(stats) == 2
    assert "g" in stats


def test_empty_report():
    assert StatsAggregator().report() == []
