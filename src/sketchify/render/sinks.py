"""
Drawing sinks for the rough renderer.

A sink receives move, line and cubic bezier operations. PathRecorder
builds SVG path data; OpsRecorder keeps the raw call sequence.
"""

from typing import Protocol


class DrawingSink(Protocol):
    """Anything that can receive pen operations."""

    def move_to(self, x: float, y: float) -> None:
        ...

    def line_to(self, x: float, y: float) -> None:
        ...

    def bezier_curve_to(self, x1: float, y1: float, x2: float, y2: float, x3: float, y3: float) -> None:
        ...


class PathRecorder:
    """
    Sink that accumulates SVG path data.

    Numbers are written with a fixed number of decimals.
    """

    def __init__(self, precision=3):
        self.precision = precision
        self._parts = []

    def _fmt(self, value):
        return f"{value:.{self.precision}f}"

    def move_to(self, x, y):
        self._parts.append(f"M {self._fmt(x)} {self._fmt(y)}")

    def line_to(self, x, y):
        self._parts.append(f"L {self._fmt(x)} {self._fmt(y)}")

    def bezier_curve_to(self, x1, y1, x2, y2, x3, y3):
        coords = " ".join(self._fmt(v) for v in (x1, y1, x2, y2, x3, y3))
        self._parts.append(f"C {coords}")

    @property
    def path(self):
        """Path data recorded so far."""
        return " ".join(self._parts)

    def get_and_clear(self):
        """Return the recorded path data and reset the recorder."""
        path = self.path
        self._parts = []
        return path


class OpsRecorder:
    """Sink that records every call as an (op, args) tuple."""

    def __init__(self):
        self.ops = []

    def move_to(self, x, y):
        self.ops.append(("move_to", (x, y)))

    def line_to(self, x, y):
        self.ops.append(("line_to", (x, y)))

    def bezier_curve_to(self, x1, y1, x2, y2, x3, y3):
        self.ops.append(("bezier_curve_to", (x1, y1, x2, y2, x3, y3)))

    def count(self, op):
        return sum(1 for name, _ in self.ops if name == op)
