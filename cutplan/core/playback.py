"""
Playback Skip Controller - auto-skips removed spans during live preview

The host calls tick() from its own playback clock (timeupdate / animation
frame). When the playhead is inside a removal span the controller seeks to
just past the span end. The span most recently skipped is remembered by its
start time so that rounding on the jump target cannot cause a seek loop.
"""

import bisect
import logging
from typing import Dict, Optional, Protocol, Sequence, Set

from cutplan.schemas.segments import RemovalSpan
from .config import settings
from .errors import PlaybackGuardFailure

logger = logging.getLogger(__name__)


class MediaHandle(Protocol):
    """The seekable player provided by the host page."""
    current_time: float
    paused: bool
    has_metadata: bool


class PlaybackSkipController:
    def __init__(
        self,
        media: Optional[MediaHandle],
        spans: Sequence[RemovalSpan] = (),
        epsilon: Optional[float] = None,
        max_repeat_jumps: Optional[int] = None,
    ):
        """
        Args:
            media: Player to drive; None makes the controller a no-op
            spans: Resolved removal spans (the skip schedule)
            epsilon: Seconds added past a span end when jumping
            max_repeat_jumps: Jumps into one span, with neither a user seek nor
                              playback getting past the span in between,
                              before auto-skip gives up on that span
        """
        self.media = media
        self.EPSILON = settings.skip_epsilon if epsilon is None else epsilon
        self.MAX_REPEAT_JUMPS = settings.max_repeat_jumps if max_repeat_jumps is None else max_repeat_jumps

        self.last_skipped: Optional[float] = None
        self.disabled_spans: Set[float] = set()
        self._jump_counts: Dict[float, int] = {}
        self._spans: Sequence[RemovalSpan] = ()
        self._starts = []
        self._ends: Dict[float, float] = {}
        self.update_spans(spans)

    @property
    def spans(self) -> Sequence[RemovalSpan]:
        return self._spans

    def update_spans(self, spans: Sequence[RemovalSpan]):
        """Replace the skip schedule after the removal set was recomputed."""
        valid = [s for s in spans if s.end > s.start]
        self._spans = tuple(sorted(valid, key=lambda s: (s.start, s.end)))
        self._starts = [s.start for s in self._spans]
        self._ends = {s.start: s.end for s in self._spans}

        if self.last_skipped is not None and self.last_skipped not in self._starts:
            self.last_skipped = None
        logger.debug(f"Skip schedule updated: {len(self._spans)} spans")

    def span_at(self, position: float) -> Optional[RemovalSpan]:
        """The removal span containing position, by binary search over starts."""
        idx = bisect.bisect_right(self._starts, position) - 1
        if idx >= 0 and position < self._spans[idx].end:
            return self._spans[idx]
        return None

    def tick(self) -> Optional[float]:
        """
        Check the playhead once. Returns the seek target if a jump was issued.
        Never raises: any fault means "do not skip".
        """
        if self.media is None or not self._spans:
            return None

        try:
            if not self.media.has_metadata or self.media.paused:
                return None

            position = float(self.media.current_time)
            self._forget_passed_spans(position)
            span = self.span_at(position)

            if span is None:
                self.last_skipped = None
                return None
            if span.start == self.last_skipped or span.start in self.disabled_spans:
                return None

            self._count_jump(span)
            target = span.end + self.EPSILON
            self.media.current_time = target
            self.last_skipped = span.start
            logger.debug(f"Auto-skip {span.start:.2f}s-{span.end:.2f}s -> {target:.2f}s")
            return target

        except PlaybackGuardFailure as e:
            self.disabled_spans.add(e.span_start)
            logger.error(f"{e}; auto-skip disabled for this span")
            return None
        except Exception as e:
            logger.warning(f"Auto-skip check failed, not skipping: {e}")
            return None

    def notify_user_seek(self):
        """The editor moved the playhead; re-entering any span is honoured again."""
        self.last_skipped = None
        self._jump_counts.clear()

    def _forget_passed_spans(self, position: float):
        """Playback got past these spans, so earlier jumps into them were not a loop."""
        passed = [start for start in self._jump_counts if self._ends.get(start, start) <= position]
        for start in passed:
            del self._jump_counts[start]

    def _count_jump(self, span: RemovalSpan):
        count = self._jump_counts.get(span.start, 0) + 1
        self._jump_counts[span.start] = count
        if count > self.MAX_REPEAT_JUMPS:
            raise PlaybackGuardFailure(span.start, count)
