"""
Error types raised inside the resolution engine.

Parsing and grouping faults are recovered where they occur (logged, record
degraded or dropped). Integrity faults are caught by the session layer and
turned into a blocked export with a visible warning.
"""


class CutPlanError(Exception):
    """Base class for every fault raised by the engine."""


class MalformedTimecode(CutPlanError, ValueError):
    """A time value that is not SS, MM:SS or HH:MM:SS."""

    def __init__(self, value):
        self.value = value
        super().__init__(f"Malformed timecode: {value!r}")


class InvalidCluster(CutPlanError):
    """A cluster with no attempts or an inverted time range."""


class DataIntegrityError(CutPlanError):
    """An upstream invariant (non-overlap, monotonic mapping) was violated."""


class PlaybackGuardFailure(CutPlanError):
    """Auto-skip kept jumping into the same span."""

    def __init__(self, span_start: float, jumps: int):
        self.span_start = span_start
        self.jumps = jumps
        super().__init__(f"Repeated auto-skip into span at {span_start:.2f}s ({jumps} jumps)")


class ExportBlocked(CutPlanError):
    """Export refused because the plan failed an integrity check."""

    def __init__(self, warnings):
        self.warnings = list(warnings)
        super().__init__("; ".join(self.warnings) or "Export blocked")
