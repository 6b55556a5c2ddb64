from dataclasses import dataclass, field
from typing import Any

from pipeflow.network.records import Position


def _point(position: Position) -> dict[str, float]:
    return {"lat": position.lat, "lng": position.lon}


@dataclass(frozen=True, slots=True)
class FlowSegment:
    pipeline_id: str | int
    start: Position
    end: Position
    source_tank: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "pipelineId": self.pipeline_id,
            "start": _point(self.start),
            "end": _point(self.end),
            "sourceTankLabel": self.source_tank,
        }


@dataclass(frozen=True, slots=True)
class BlockedSegment:
    pipeline_id: str | int
    start: Position
    end: Position
    blocked_by: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "pipelineId": self.pipeline_id,
            "start": _point(self.start),
            "end": _point(self.end),
            "blockedByValveLabel": self.blocked_by,
        }


@dataclass(frozen=True)
class FlowResult:
    flowing: list[FlowSegment] = field(default_factory=list)
    blocked: list[BlockedSegment] = field(default_factory=list)
    total_segments: int = 0

    def flowing_pipeline_ids(self) -> set[str | int]:
        return {s.pipeline_id for s in self.flowing}

    def blocked_pipeline_ids(self) -> set[str | int]:
        return {s.pipeline_id for s in self.blocked}

    @property
    def unreached_count(self) -> int:
        return max(0, self.total_segments - len(self.flowing) - len(self.blocked))

    @property
    def coverage_percent(self) -> float:
        if self.total_segments == 0:
            return 0.0
        return round(len(self.flowing) / self.total_segments * 100, 1)

    def to_dict(self) -> dict[str, Any]:
        return {
            "flowing": [s.to_dict() for s in self.flowing],
            "blocked": [s.to_dict() for s in self.blocked],
            "totalSegments": self.total_segments,
        }
