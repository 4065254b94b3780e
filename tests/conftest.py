import os

import pytest

SAMPLE_TRACE = """\
# tracer: function_graph
#
# CPU  DURATION                  FUNCTION CALLS
# |     |   |                     |   |   |   |
 1)   0.250 us    |  }
 0)               |  sys_open() {
 0)               |    do_sys_open() {
 0)   0.450 us    |      getname();
 0)   0.300 us    |      getname();
 1)               |  schedule() {
 0)   2.100 us    |    }
 ------------------------------------------
 1)    <idle>-0    =>   bash-1234
 ------------------------------------------

 1) + 15.000 us   |  }
 0) ! 120.500 us  |  }
 0)               |  sys_close() {
"""


@pytest.fixture
def sample_lines():
    return SAMPLE_TRACE.splitlines(keepends=True)


@pytest.fixture
def trace_file(tmp_path):
    path = tmp_path / "trace.txt"
    path.write_text(SAMPLE_TRACE)
    return str(path)


@pytest.fixture
def tracefs(tmp_path):
    """
    A fake tracefs directory with the files tracer control writes to.
    """
    root = tmp_path / "tracing"
    root.mkdir()
    for name, content in (("current_tracer", "nop\n"), ("trace", SAMPLE_TRACE), ("tracing_on", "0\n")):
        (root / name).write_text(content)
    return str(root)


def read(path):
    with open(path) as f:
        return f.read()


@pytest.fixture
def read_file():
    return read


@pytest.fixture
def outdir(tmp_path):
    return os.path.join(str(tmp_path), "out")
