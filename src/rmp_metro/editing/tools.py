"""The two snapping tools used while drawing and editing features.

Both are built on :mod:`rmp_metro.editing.snap` and take their
:class:`SnapPolicy` from the caller. Hand the same policy object to both
tools to keep their thresholds in lockstep.

AssistLineTool
    Guidance: corrects a point onto a fixed axis line or a picked
    feature when close enough, otherwise lets the raw point through.
ControlPointTool
    Editing: moves and inserts control points of existing lines and
    polygons. With a snap target set, points that miss it are refused.
    Changes stay pending until :meth:`ControlPointTool.commit`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable

from rmp_metro.editing.features import Feature, FeatureMode
from rmp_metro.editing.snap import (
    AxisLineTarget,
    Insertion,
    RingTarget,
    SnapPolicy,
    SnapResult,
    SnapTarget,
    insert_point,
    snap_point,
)
from rmp_metro.geometry.nearest import GeometryRings, WorldPoint

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DrawDecision:
    """What to do with a clicked point: use ``point`` unless ``blocked``."""

    point: WorldPoint | None
    blocked: bool = False
    reason: str = ""


@dataclass(frozen=True)
class ControlPointPatch:
    feature_id: int
    coords: tuple[WorldPoint, ...]


class AssistLineTool:
    def __init__(self, policy: SnapPolicy | None = None) -> None:
        self.policy = policy or SnapPolicy()
        self.enabled = False
        self.target: SnapTarget | None = None

    @property
    def target_label(self) -> str | None:
        return self.target.label if self.target else None

    def set_fixed_line(self, axis: str, raw: str) -> AxisLineTarget:
        target = AxisLineTarget.from_input(axis, raw)
        self.target = target
        return target

    def set_feature(self, rings: GeometryRings, label: str = "") -> RingTarget:
        target = RingTarget(geometry=rings, label=label)
        self.target = target
        return target

    def clear(self) -> None:
        self.target = None

    def transform(self, p: WorldPoint) -> SnapResult:
        """Corrected point if within the threshold, else ``p`` unaccepted."""
        if not self.enabled or self.target is None:
            return SnapResult(point=p, accepted=False)
        return snap_point(p, self.target, self.policy)


class ControlPointTool:
    def __init__(
        self,
        features: Iterable[Feature] = (),
        policy: SnapPolicy | None = None,
    ) -> None:
        self.policy = policy or SnapPolicy()
        self.features: dict[int, Feature] = {f.id: f for f in features}
        self.snap_target: RingTarget | None = None
        self.pending: dict[int, tuple[WorldPoint, ...]] = {}

    def set_snap_target(self, rings: GeometryRings, label: str = "") -> RingTarget:
        self.snap_target = RingTarget(geometry=rings, label=label)
        return self.snap_target

    def clear_snap_target(self) -> None:
        self.snap_target = None

    def coords(self, feature_id: int) -> tuple[WorldPoint, ...]:
        """Current coordinates of a feature, including uncommitted edits."""
        if feature_id in self.pending:
            return self.pending[feature_id]
        return self.features[feature_id].coords

    def transform(self, p: WorldPoint) -> SnapResult:
        return snap_point(p, self.snap_target, self.policy)

    def transform_for_draw(self, p: WorldPoint) -> DrawDecision:
        """Check a drawn point against the snap target before it is placed."""
        result = self.transform(p)
        # No target, or a target with no segments: nothing to enforce
        if result.distance is None:
            return DrawDecision(point=p)
        if not result.accepted:
            return DrawDecision(
                point=None,
                blocked=True,
                reason=f"Missed: more than {self.policy.threshold:g} blocks from the target",
            )
        return DrawDecision(point=result.point)

    def move_vertex(self, feature_id: int, index: int, p: WorldPoint) -> DrawDecision:
        """Move control point ``index`` of a feature to ``p`` (after snapping)."""
        decision = self.transform_for_draw(p)
        if decision.blocked:
            return decision

        coords = self._editable_coords(feature_id)
        if not 0 <= index < len(coords):
            raise IndexError(f"Feature {feature_id} has no control point #{index}")

        self.pending[feature_id] = coords[:index] + (decision.point,) + coords[index + 1 :]
        logger.debug("Moved feature %d point #%d to %s", feature_id, index, decision.point)
        return decision

    def insert_vertex(self, feature_id: int, p: WorldPoint) -> Insertion | None:
        """Insert a control point on the nearest segment of a feature.

        Clicks beyond the threshold insert nothing and return None.
        """
        feature = self.features[feature_id]
        coords = self._editable_coords(feature_id)
        closed = feature.mode is FeatureMode.POLYGON
        insertion = insert_point(coords, p, closed, self.policy)
        if insertion is None:
            return None
        self.pending[feature_id] = insertion.coords
        logger.debug(
            "Inserted point into feature %d at #%d", feature_id, insertion.index
        )
        return insertion

    def commit(self) -> list[ControlPointPatch]:
        """Hand back every pending edit and clear them."""
        patches = [
            ControlPointPatch(feature_id=fid, coords=coords)
            for fid, coords in self.pending.items()
        ]
        self.pending = {}
        return patches

    def discard(self) -> None:
        self.pending = {}

    def _editable_coords(self, feature_id: int) -> tuple[WorldPoint, ...]:
        feature = self.features[feature_id]
        if not feature.editable:
            raise ValueError(f"Feature {feature_id} is a {feature.mode.value}, not a line or polygon")
        return self.coords(feature_id)


def draw_point(
    p: WorldPoint,
    assist: AssistLineTool | None = None,
    control: ControlPointTool | None = None,
) -> DrawDecision:
    """Run a clicked point through assist-line guidance, then control-point snapping."""
    if assist is not None:
        p = assist.transform(p).point
    if control is not None:
        return control.transform_for_draw(p)
    return DrawDecision(point=p)
