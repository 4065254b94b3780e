from dataclasses import dataclass

USEC_PER_SEC = 1_000_000


@dataclass(frozen=True, order=True)
class Duration:
    """
    Elapsed time as whole seconds plus microseconds.

    Ordering compares seconds first, then microseconds. Adding two durations
    carries overflowing microseconds into seconds, so the microseconds field
    always stays below one second.
    """

    seconds: int = 0
    microseconds: int = 0

    def __post_init__(self):
        if self.seconds < 0:
            raise ValueError(f"seconds must be non-negative, got {self.seconds}")
        if not 0 <= self.microseconds < USEC_PER_SEC:
            raise ValueError(
                f"microseconds must be in [0, {USEC_PER_SEC}), got {self.microseconds}"
            )

    @classmethod
    def from_seconds(cls, value: float) -> "Duration":
        """
        Build a duration from floating point seconds, rounded to the microsecond.
        """
        if value < 0:
            raise ValueError(f"duration cannot be negative, got {value}")
        seconds, microseconds = divmod(round(value * USEC_PER_SEC), USEC_PER_SEC)
        return cls(int(seconds), int(microseconds))

    def total_seconds(self) -> float:
        return self.seconds + self.microseconds / USEC_PER_SEC

    def __add__(self, other):
        if not isinstance(other, Duration):
            return NotImplemented
        carry, microseconds = divmod(self.microseconds + other.microseconds, USEC_PER_SEC)
        return Duration(self.seconds + other.seconds + carry, microseconds)

    def __str__(self):
        return f"{self.seconds}.{self.microseconds:06d}"


ZERO = Duration()
