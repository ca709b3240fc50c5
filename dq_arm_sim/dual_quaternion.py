"""
Dual quaternions  dq = real + ε·dual  for rigid transforms.

real is the rotation quaternion, dual = ½·t·real encodes the translation t
(both scalar-first, see quaternion_utils).  Products chain transforms right
to left, like homogeneous matrices: (a * b) applies b first, then a.
"""
from numbers import Real

import numpy as np

from dq_arm_sim.quaternion_utils import (
    pure_quat,
    quat_conj,
    quat_identity,
    quat_mul,
    quat_to_rotmat,
    rotvec,
)


class DualQuaternion:
    """
    Pair of quaternions (real, dual).  Nothing is normalized on construction;
    real must be unit-norm for the value to be a rigid transform.
    """

    __slots__ = ("real", "dual")

    def __init__(self, real: np.ndarray, dual: np.ndarray):
        self.real = np.asarray(real, dtype=float).reshape(4)
        self.dual = np.asarray(dual, dtype=float).reshape(4)

    def __repr__(self):
        return f"DualQuaternion(real={self.real.tolist()}, dual={self.dual.tolist()})"

    # -------------------------------------------------------------- #
    # Construction
    # -------------------------------------------------------------- #
    @classmethod
    def identity(cls) -> "DualQuaternion":
        return cls(quat_identity(), np.zeros(4))

    @classmethod
    def from_rotation_translation(cls, rotation: np.ndarray,
                                  translation: np.ndarray) -> "DualQuaternion":
        """Rotate by *rotation*, then translate by *translation*."""
        real = np.asarray(rotation, dtype=float)
        dual = 0.5 * quat_mul(pure_quat(translation), real)
        return cls(real, dual)

    @classmethod
    def from_array(cls, arr: np.ndarray) -> "DualQuaternion":
        """Inverse of as_array(): [w x y z | w' x' y' z']."""
        arr = np.asarray(arr, dtype=float)
        return cls(arr[:4], arr[4:8])

    # -------------------------------------------------------------- #
    # Algebra
    # -------------------------------------------------------------- #
    def __mul__(self, other):
        if isinstance(other, Real):
            return DualQuaternion(self.real * other, self.dual * other)
        if not isinstance(other, DualQuaternion):
            return NotImplemented
        return DualQuaternion(
            quat_mul(self.real, other.real),
            quat_mul(self.real, other.dual) + quat_mul(self.dual, other.real),
        )

    def __rmul__(self, other):
        if isinstance(other, Real):
            return self * other
        return NotImplemented

    def conjugate(self) -> "DualQuaternion":
        """Quaternion conjugate of both parts (the inverse of a unit value)."""
        return DualQuaternion(quat_conj(self.real), quat_conj(self.dual))

    def inverse(self) -> "DualQuaternion":
        """Inverse of a unit dual quaternion."""
        return self.conjugate()

    def normalized(self) -> "DualQuaternion":
        """
        Closest unit dual quaternion: real rescaled to norm 1 and the part of
        dual parallel to real removed.
        """
        n = np.linalg.norm(self.real)
        if n == 0.0:
            raise ValueError("cannot normalize a dual quaternion with zero real part")
        real = self.real / n
        dual = self.dual / n
        dual = dual - np.dot(real, dual) * real
        return DualQuaternion(real, dual)

    def is_unit(self, tol: float = 1e-9) -> bool:
        return (abs(np.linalg.norm(self.real) - 1.0) <= tol
                and abs(np.dot(self.real, self.dual)) <= tol)

    # -------------------------------------------------------------- #
    # Extraction
    # -------------------------------------------------------------- #
    def rotation_part(self) -> np.ndarray:
        return self.real.copy()

    def translation_part(self) -> np.ndarray:
        """t = 2 · dual · conj(real), vector part only."""
        return (2.0 * quat_mul(self.dual, quat_conj(self.real)))[1:]

    def transform_point(self, p: np.ndarray) -> np.ndarray:
        return rotvec(self.real, p) + self.translation_part()

    def as_array(self) -> np.ndarray:
        return np.concatenate((self.real, self.dual))

    def to_matrix(self) -> np.ndarray:
        """4 × 4 homogeneous transform."""
        T = np.eye(4)
        T[:3, :3] = quat_to_rotmat(self.real)
        T[:3, 3] = self.translation_part()
        return T

    def allclose(self, other: "DualQuaternion", atol: float = 1e-9) -> bool:
        """Equality as rigid transforms: dq and -dq describe the same one."""
        a, b = self.as_array(), other.as_array()
        return bool(np.allclose(a, b, atol=atol) or np.allclose(a, -b, atol=atol))
