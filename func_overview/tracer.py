"""
Control of the kernel function tracer through tracefs.

Recording needs root. A Ctrl-C while tracing is enabled stops the recording
early and disables tracing; a second Ctrl-C interrupts as usual.
"""

import logging
import os
import signal
import time

logger = logging.getLogger(__name__)

DEFAULT_TRACING_DIR = "/sys/kernel/debug/tracing"
POLL_INTERVAL = 0.25


class TracerError(RuntimeError):
    pass


class Tracer:
    def __init__(self, tracing_dir=DEFAULT_TRACING_DIR, sleep=time.sleep):
        self.tracing_dir = tracing_dir
        self.need_disable = False
        self._sleep = sleep

    @property
    def trace_path(self):
        return os.path.join(self.tracing_dir, "trace")

    @property
    def switch_path(self):
        # tracing_enabled was replaced by tracing_on in newer kernels
        path = os.path.join(self.tracing_dir, "tracing_on")
        if os.path.exists(path):
            return path
        return os.path.join(self.tracing_dir, "tracing_enabled")

    def _write(self, path, value, action):
        try:
            with open(path, "w") as f:
                f.write(value)
        except OSError as e:
            raise TracerError(f"Cannot {action}: {e}") from e

    def set_tracer(self, name):
        self._write(os.path.join(self.tracing_dir, "current_tracer"), f"{name}\n", f"set tracer to {name}")
        logger.info(f"Tracer set to {name}.")

    def clear(self):
        self._write(self.trace_path, "\n", "clear trace")

    def enable(self):
        self._write(self.switch_path, "1\n", "enable tracer")
        self.need_disable = True
        logger.info("Tracing enabled.")

    def disable(self):
        self._write(self.switch_path, "0\n", "disable tracer")
        self.need_disable = False
        logger.info("Tracing disabled.")

    def _on_sigint(self, signum, frame):
        if not self.need_disable:
            raise KeyboardInterrupt
        print("\nSIGINT caught; disabling tracing.")
        self.disable()

    def record(self, seconds=10, tracer="function_graph"):
        """
        Trace for the given number of seconds and return the trace file path.
        """
        previous = signal.signal(signal.SIGINT, self._on_sigint)
        try:
            self.clear()
            self.set_tracer(tracer)
            print(f"Tracing for {seconds} seconds.")
            self.enable()
            deadline = time.monotonic() + seconds
            while self.need_disable:
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    break
                self._sleep(min(POLL_INTERVAL, remaining))
        finally:
            if self.need_disable:
                self.disable()
            signal.signal(signal.SIGINT, previous)
        return self.trace_path
