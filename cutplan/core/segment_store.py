"""
Segment Store - read-only snapshot of the AI-proposed candidate spans

Normalizes raw analysis records once per analysis pass:
- Timecodes parsed to seconds (malformed -> zero-duration at zero)
- Legacy category names mapped onto the current category set
- Missing duration / severity / confidence filled with defaults
"""

import logging
from typing import Dict, Iterable, Iterator, List, Optional, Tuple, Union

from pydantic import ValidationError

from cutplan.schemas.segments import RawSegment, Segment, SegmentCategory, Severity
from .errors import MalformedTimecode
from .timecode import parse_timecode

logger = logging.getLogger(__name__)

CATEGORY_ALIASES = {
    "bad_take": SegmentCategory.REDUNDANT_TAKE,
    "bad-take": SegmentCategory.REDUNDANT_TAKE,
    "redundant": SegmentCategory.REDUNDANT_TAKE,
    "redundancy": SegmentCategory.REDUNDANT_TAKE,
    "filler": SegmentCategory.FILLER_WORDS,
    "dead_air": SegmentCategory.SILENCE,
    "dead-air": SegmentCategory.SILENCE,
    "off-topic": SegmentCategory.TANGENT,
    "off_topic": SegmentCategory.TANGENT,
}


def normalize_category(name: str) -> Optional[SegmentCategory]:
    """Map a category string (current or legacy spelling) to a SegmentCategory."""
    key = name.strip().lower()
    if key in CATEGORY_ALIASES:
        return CATEGORY_ALIASES[key]
    try:
        return SegmentCategory(key.replace("_", "-"))
    except ValueError:
        return None


def normalize_segment(raw: RawSegment) -> Optional[Segment]:
    """
    Turn one raw analysis record into a Segment.
    Returns None if the record cannot be used at all (unknown category).
    """
    category = normalize_category(raw.category)
    if category is None:
        logger.warning(f"Segment {raw.id}: unknown category '{raw.category}', skipping")
        return None

    try:
        start = parse_timecode(raw.startTime)
        if raw.endTime is not None:
            end = parse_timecode(raw.endTime)
        elif raw.duration is not None:
            end = start + raw.duration
        else:
            raise MalformedTimecode(raw.endTime)
    except MalformedTimecode as e:
        logger.warning(f"Segment {raw.id}: {e}; treating as zero-duration at 0")
        start = end = 0.0

    severity = Severity.MEDIUM
    if raw.severity:
        try:
            severity = Severity(raw.severity.lower())
        except ValueError:
            logger.warning(f"Segment {raw.id}: unknown severity '{raw.severity}', using medium")

    confidence = 1.0 if raw.confidence is None else min(1.0, max(0.0, raw.confidence))

    return Segment(
        id=raw.id,
        category=category,
        startTime=start,
        endTime=end,
        duration=end - start,
        confidence=confidence,
        severity=severity,
        sourceText=raw.sourceText or raw.transcript,
        reason=raw.reason,
    )


class SegmentStore:
    """Immutable, start-ordered collection of the session's candidate segments."""

    def __init__(self, segments: Iterable[Segment]):
        # sorted() is stable, so equal start times keep input order
        self._segments: Tuple[Segment, ...] = tuple(
            sorted(segments, key=lambda s: (s.startTime, s.endTime))
        )
        self._by_id: Dict[str, Segment] = {}
        for seg in self._segments:
            if seg.id in self._by_id:
                logger.warning(f"Duplicate segment id {seg.id}; keeping the first occurrence for lookups")
                continue
            self._by_id[seg.id] = seg

    @classmethod
    def from_raw(cls, records: Iterable[Union[RawSegment, Dict]]) -> "SegmentStore":
        """Build a store from raw analysis records, skipping unusable ones."""
        segments: List[Segment] = []
        for record in records:
            try:
                raw = record if isinstance(record, RawSegment) else RawSegment.model_validate(record)
            except ValidationError as e:
                logger.warning(f"Skipping unreadable segment record: {e.error_count()} validation errors")
                continue
            seg = normalize_segment(raw)
            if seg is not None:
                segments.append(seg)

        logger.info(f"Segment store loaded {len(segments)} segments")
        return cls(segments)

    @property
    def segments(self) -> Tuple[Segment, ...]:
        return self._segments

    def get(self, segment_id: str) -> Optional[Segment]:
        return self._by_id.get(segment_id)

    def by_category(self, category: SegmentCategory) -> List[Segment]:
        return [s for s in self._segments if s.category == category]

    def __len__(self) -> int:
        return len(self._segments)

    def __iter__(self) -> Iterator[Segment]:
        return iter(self._segments)

    def __contains__(self, segment_id: str) -> bool:
        return segment_id in self._by_id
