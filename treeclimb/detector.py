import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field

from .config import CLIMB_THRESHOLD_M

logger = logging.getLogger(__name__)


class ContractViolation(ValueError):
    """Raised in strict mode when a series does not extend the folded prefix."""


@dataclass(frozen=True)
class Sample:
    timestamp: int    # seconds
    altitude: float   # meters

    @classmethod
    def coerce(cls, obj) -> "Sample":
        """Accept a Sample, a (timestamp, altitude) pair or a mapping with those keys."""
        if isinstance(obj, Sample):
            return obj
        if isinstance(obj, Mapping):
            return cls(timestamp=obj["timestamp"], altitude=obj["altitude"])
        t, a = obj
        return cls(timestamp=t, altitude=a)


@dataclass(frozen=True)
class ClimbStart:
    time: int
    altitude: float


@dataclass(frozen=True)
class Climb:
    id: int
    start_time: int
    end_time: int
    start_altitude: float
    peak_altitude: float
    end_altitude: float
    total_ascent: float
    total_descent: float
    duration: int

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "startTime": self.start_time,
            "endTime": self.end_time,
            "startAltitude": self.start_altitude,
            "peakAltitude": self.peak_altitude,
            "endAltitude": self.end_altitude,
            "totalAscent": self.total_ascent,
            "totalDescent": self.total_descent,
            "duration": self.duration,
        }

    @classmethod
    def from_dict(cls, d: Mapping) -> "Climb":
        return cls(
            id=int(d["id"]),
            start_time=d["startTime"],
            end_time=d["endTime"],
            start_altitude=d["startAltitude"],
            peak_altitude=d["peakAltitude"],
            end_altitude=d["endAltitude"],
            total_ascent=d["totalAscent"],
            total_descent=d["totalDescent"],
            duration=d["duration"],
        )


@dataclass
class DetectorState:
    """
    Running excursion state of one detector.

    cursor is the index of the last folded sample in the cumulative series
    (-1 before anything was folded). events is append-only.
    """
    baseline: float | None = None
    peak: float | None = None
    valley: float | None = None
    climbing: bool = False
    climb_start: ClimbStart | None = None
    cursor: int = -1
    events: list[Climb] = field(default_factory=list)
    last_timestamp: int | None = None

    def to_dict(self) -> dict:
        return {
            "baseline": self.baseline,
            "peak": self.peak,
            "valley": self.valley,
            "climbing": self.climbing,
            "climbStart": (
                {"time": self.climb_start.time, "altitude": self.climb_start.altitude}
                if self.climb_start is not None else None
            ),
            "cursor": self.cursor,
            "events": [c.to_dict() for c in self.events],
            "lastTimestamp": self.last_timestamp,
        }

    @classmethod
    def from_dict(cls, d: Mapping) -> "DetectorState":
        start = d.get("climbStart")
        return cls(
            baseline=d.get("baseline"),
            peak=d.get("peak"),
            valley=d.get("valley"),
            climbing=bool(d.get("climbing", False)),
            climb_start=ClimbStart(start["time"], start["altitude"]) if start else None,
            cursor=int(d.get("cursor", -1)),
            events=[Climb.from_dict(c) for c in d.get("events", [])],
            last_timestamp=d.get("lastTimestamp"),
        )


@dataclass(frozen=True)
class IngestResult:
    events: tuple[Climb, ...]
    event_count: int

    def to_dict(self) -> dict:
        return {
            "events": [c.to_dict() for c in self.events],
            "eventCount": self.event_count,
        }


@dataclass(frozen=True)
class DetectorStatus:
    climbing: bool
    baseline: float | None
    peak: float | None
    valley: float | None
    total_climbs: int
    threshold: float

    def to_dict(self) -> dict:
        return {
            "climbing": self.climbing,
            "baseline": self.baseline,
            "peak": self.peak,
            "valley": self.valley,
            "totalClimbs": self.total_climbs,
            "threshold": self.threshold,
        }


def anchor_baseline(state: DetectorState, altitude: float):
    state.baseline = altitude
    state.peak = altitude
    state.valley = altitude


def fold_sample(state: DetectorState, sample: Sample, threshold: float) -> Climb | None:
    """
    Fold one sample into an anchored state and return the climb it completes, if any.

    Ascent starts when the altitude is strictly above baseline + threshold.
    The excursion completes once the altitude has fallen at least threshold
    below the peak; its end altitude becomes the next baseline.
    """
    t, a = sample.timestamp, sample.altitude
    state.peak = max(state.peak, a)
    state.valley = min(state.valley, a)

    if not state.climbing and a > state.baseline + threshold:
        state.climbing = True
        state.climb_start = ClimbStart(time=t, altitude=state.baseline)
        logger.info(
            "Climbing started at %.1fm (+%.1fm from base %.1fm)",
            a, a - state.baseline, state.baseline,
        )

    climb = None
    if state.climbing and state.peak - a >= threshold:
        start = state.climb_start
        climb = Climb(
            id=len(state.events) + 1,
            start_time=start.time,
            end_time=t,
            start_altitude=start.altitude,
            peak_altitude=state.peak,
            end_altitude=a,
            total_ascent=state.peak - start.altitude,
            total_descent=state.peak - a,
            duration=t - start.time,
        )
        state.events.append(climb)
        logger.info(
            "Climb #%d completed: peak %.1fm, ascent %.1fm, descent %.1fm",
            climb.id, climb.peak_altitude, climb.total_ascent, climb.total_descent,
        )
        anchor_baseline(state, a)
        state.climbing = False
        state.climb_start = None

    state.cursor += 1
    state.last_timestamp = t
    return climb


class ClimbDetector:
    """
    Incremental climb counter over a cumulative, append-only altitude series.

    Callers may hand over the whole series seen so far on every call; only the
    suffix past the cursor is folded. The folded prefix must stay unchanged
    between calls (sorted, deduplicated, never shortened). That is a caller
    obligation: outside strict mode it is not checked and a violating series
    gives undefined climb boundaries.

    Instances are not thread-safe; serialize calls per instance.
    """

    def __init__(self, threshold: float = CLIMB_THRESHOLD_M, strict: bool = False,
                 state: DetectorState | None = None):
        self.threshold = float(threshold)
        self.strict = strict
        self._state = state if state is not None else DetectorState()

    @property
    def state(self) -> DetectorState:
        return self._state

    @property
    def events(self) -> tuple[Climb, ...]:
        return tuple(self._state.events)

    @property
    def event_count(self) -> int:
        return len(self._state.events)

    def ingest(self, series: Sequence) -> IngestResult:
        n = len(series)
        if n == 0:
            return self._result()

        state = self._state
        if self.strict:
            self._check_contract(series)
        if state.baseline is None:
            anchor_baseline(state, Sample.coerce(series[0]).altitude)

        for i in range(state.cursor + 1, n):
            fold_sample(state, Sample.coerce(series[i]), self.threshold)

        return self._result()

    def ingest_one(self, sample) -> Climb | None:
        """Fold a single new sample; the streaming counterpart of ingest."""
        sample = Sample.coerce(sample)
        if self.strict and self._state.last_timestamp is not None \
                and sample.timestamp < self._state.last_timestamp:
            raise ContractViolation(
                f"sample at t={sample.timestamp} precedes last folded t={self._state.last_timestamp}"
            )
        if self._state.baseline is None:
            anchor_baseline(self._state, sample.altitude)
        return fold_sample(self._state, sample, self.threshold)

    def status(self) -> DetectorStatus:
        s = self._state
        return DetectorStatus(
            climbing=s.climbing,
            baseline=s.baseline,
            peak=s.peak,
            valley=s.valley,
            total_climbs=len(s.events),
            threshold=self.threshold,
        )

    def reset(self):
        self._state = DetectorState()
        logger.debug("Detector reset")

    def _result(self) -> IngestResult:
        return IngestResult(events=self.events, event_count=self.event_count)

    def _check_contract(self, series: Sequence):
        # O(1): only the boundary between folded prefix and new suffix is inspected
        s = self._state
        if s.cursor < 0:
            return
        if len(series) <= s.cursor:
            raise ContractViolation(
                f"series has {len(series)} samples but {s.cursor + 1} were already folded"
            )
        if s.last_timestamp is None:
            # restored state saved without its boundary timestamp
            return
        if Sample.coerce(series[s.cursor]).timestamp != s.last_timestamp:
            raise ContractViolation(
                f"sample {s.cursor} no longer matches the last folded timestamp {s.last_timestamp}"
            )
        if len(series) > s.cursor + 1:
            nxt = Sample.coerce(series[s.cursor + 1]).timestamp
            if nxt < s.last_timestamp:
                raise ContractViolation(
                    f"sample at t={nxt} precedes last folded t={s.last_timestamp}"
                )


def detect_climbs(series: Sequence, threshold: float = CLIMB_THRESHOLD_M) -> list[Climb]:
    """One-shot detection over a complete series on a fresh detector."""
    return list(ClimbDetector(threshold=threshold).ingest(series).events)
