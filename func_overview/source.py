class LineSource:
    """
    Successive raw lines of a trace.

    Wraps any iterable of text lines. next_line() returns None once the input
    is exhausted. Use LineSource.open() to read a trace file; the result is a
    context manager that closes the file.
    """

    def __init__(self, lines, name="<lines>"):
        self.name = name
        self.lineno = 0
        self._lines = iter(lines)
        self._handle = None

    @classmethod
    def open(cls, filepath):
        handle = open(filepath, "r", encoding="utf-8", errors="replace")
        source = cls(handle, name=str(filepath))
        source._handle = handle
        return source

    def next_line(self):
        line = next(self._lines, None)
        if line is not None:
            self.lineno += 1
        return line

    def __iter__(self):
        while True:
            line = self.next_line()
            if line is None:
                return
            yield line

    def close(self):
        if self._handle is not None:
            self._handle.close()
            self._handle = None

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()
