"""
Renderer-facing poses.

A Transform is translation + rotation (scalar-first quaternion) + scale, and
composes parent-first:  (A * B) places B inside A's frame.
"""
from dataclasses import dataclass, field

import numpy as np

from dq_arm_sim.dual_quaternion import DualQuaternion
from dq_arm_sim.quaternion_utils import (
    quat_identity,
    quat_mul,
    quat_normalize,
    quat_to_rotmat,
    quat_to_xyzw,
    rotvec,
)


@dataclass(eq=False)
class Transform:
    translation: np.ndarray = field(default_factory=lambda: np.zeros(3))
    rotation: np.ndarray = field(default_factory=quat_identity)
    scale: np.ndarray = field(default_factory=lambda: np.ones(3))

    def __post_init__(self):
        self.translation = np.asarray(self.translation, dtype=float).reshape(3)
        self.rotation = np.asarray(self.rotation, dtype=float).reshape(4)
        self.scale = np.asarray(self.scale, dtype=float).reshape(3)

    @classmethod
    def identity(cls) -> "Transform":
        return cls()

    @classmethod
    def from_translation(cls, translation) -> "Transform":
        return cls(translation=translation)

    @classmethod
    def from_xyz(cls, x: float, y: float, z: float) -> "Transform":
        return cls(translation=(x, y, z))

    def __mul__(self, other: "Transform") -> "Transform":
        if not isinstance(other, Transform):
            return NotImplemented
        return Transform(
            translation=self.translation + rotvec(self.rotation, self.scale * other.translation),
            rotation=quat_mul(self.rotation, other.rotation),
            scale=self.scale * other.scale,
        )

    def transform_point(self, p: np.ndarray) -> np.ndarray:
        return self.translation + rotvec(self.rotation, self.scale * np.asarray(p, dtype=float))

    def to_matrix(self) -> np.ndarray:
        T = np.eye(4)
        T[:3, :3] = quat_to_rotmat(self.rotation) * self.scale
        T[:3, 3] = self.translation
        return T

    @property
    def rotation_xyzw(self) -> np.ndarray:
        return quat_to_xyzw(self.rotation)


def dual_quaternion_to_transform(dq: DualQuaternion) -> Transform:
    """
    Rigid part of *dq* as a Transform.  The rotation is re-normalized here;
    this is the only place where drift from long products is corrected.
    """
    return Transform(
        translation=dq.translation_part(),
        rotation=quat_normalize(dq.rotation_part()),
    )


def export_pose(dq: DualQuaternion, local: Transform) -> Transform:
    """Final segment pose: joint-chain transform first, then the segment's own offset."""
    return dual_quaternion_to_transform(dq) * local
