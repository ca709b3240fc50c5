"""
Dual-quaternion forward kinematics for a serial chain of joints.

Every segment carries a chain index i; its world pose is

    identity * dq_0 * dq_1 * ... * dq_i  ∘  segment.local_transform

The whole chain is recomputed from the controls on every call.  Nothing is
cached between frames and intermediate products are not re-normalized.
"""
import logging
from dataclasses import dataclass, field
from typing import List, Sequence

from dq_arm_sim.dual_quaternion import DualQuaternion
from dq_arm_sim.errors import ChainConfigError, ChainIndexError
from dq_arm_sim.joint import JointControl, JointParameterization, joint_to_dual_quaternion
from dq_arm_sim.pose import Transform, export_pose

logger = logging.getLogger(__name__)


# ── chain description ────────────────────────────────────────────────────
@dataclass(frozen=True)
class Segment:
    """
    One renderable body part.

    base_transform places the segment along the arm (one per chain index),
    node_transform is the shape's own offset, e.g. an arm box that extends
    away from its joint.
    """
    name: str
    chain_index: int
    node_transform: Transform = field(default_factory=Transform, compare=False)
    base_transform: Transform = field(default_factory=Transform, compare=False)
    shape: str = "box"
    size: tuple = (1.0, 1.0, 1.0)

    @property
    def local_transform(self) -> Transform:
        return self.base_transform * self.node_transform


@dataclass(frozen=True)
class ChainLayout:
    joint_count: int
    segments: tuple

    def validate(self) -> "ChainLayout":
        """Reject layouts whose segments point past the joint list."""
        if self.joint_count < 1:
            raise ChainConfigError(f"joint_count must be >= 1, got {self.joint_count}")
        for seg in self.segments:
            if not 0 <= seg.chain_index < self.joint_count:
                raise ChainConfigError(
                    f"segment {seg.name!r} has chain index {seg.chain_index}, "
                    f"valid range is 0..{self.joint_count - 1}"
                )
        return self


@dataclass(frozen=True)
class ChainPose:
    segment: Segment
    transform: DualQuaternion    # cumulative joint transform for the segment
    pose: Transform              # what the renderer receives


# ── composition ──────────────────────────────────────────────────────────
def compose_chain(joint_dqs: Sequence[DualQuaternion], chain_index: int) -> DualQuaternion:
    """Left-associative product identity * dq_0 * ... * dq_chain_index."""
    if not 0 <= chain_index < len(joint_dqs):
        raise ChainIndexError(chain_index, len(joint_dqs))
    dq = DualQuaternion.identity()
    for k in range(chain_index + 1):
        dq = dq * joint_dqs[k]
    return dq


def cumulative_transforms(joint_dqs: Sequence[DualQuaternion]) -> List[DualQuaternion]:
    """All prefix products in one pass: element i equals compose_chain(joint_dqs, i)."""
    out = []
    dq = DualQuaternion.identity()
    for joint_dq in joint_dqs:
        dq = dq * joint_dq
        out.append(dq)
    return out


def joint_transforms(controls: Sequence[JointControl],
                     params: JointParameterization) -> List[DualQuaternion]:
    return [joint_to_dual_quaternion(c, params) for c in controls]


def evaluate_chain(controls: Sequence[JointControl],
                   layout: ChainLayout,
                   params: JointParameterization = JointParameterization()
                   ) -> List[ChainPose]:
    """
    Poses of every segment in layout order for the current controls.

    controls is read, never modified.  Its length must match the layout.
    """
    if len(controls) != layout.joint_count:
        raise ChainConfigError(
            f"got {len(controls)} joint control(s) for a {layout.joint_count}-joint chain"
        )
    prefixes = cumulative_transforms(joint_transforms(controls, params))

    poses = []
    for seg in layout.segments:
        if not 0 <= seg.chain_index < len(prefixes):
            raise ChainIndexError(seg.chain_index, len(prefixes))
        dq = prefixes[seg.chain_index]
        poses.append(ChainPose(seg, dq, export_pose(dq, seg.local_transform)))

    logger.debug("evaluated %d segment pose(s) over %d joint(s)",
                 len(poses), layout.joint_count)
    return poses
