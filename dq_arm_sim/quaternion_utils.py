"""
Quaternion utilities (scalar–first convention: q = [w, x, y, z]).

Every other module in the package goes through these helpers, so that the
ordering convention lives in exactly one place.  The renderer speaks
(x, y, z, w); use quat_to_xyzw / quat_from_xyzw at that boundary.
"""
import numpy as np


# Below this magnitude an axis is treated as "no rotation".
AXIS_EPS = 1e-12


# ------------------------------------------------------------------ #
# Basic quaternion algebra
# ------------------------------------------------------------------ #
def quat_identity() -> np.ndarray:
    return np.array([1.0, 0.0, 0.0, 0.0])


def quat_mul(q1: np.ndarray, q2: np.ndarray) -> np.ndarray:
    """Quaternion product  q = q1 ⊗ q2."""
    w1, x1, y1, z1 = q1
    w2, x2, y2, z2 = q2
    return np.array([
        w1 * w2 - x1 * x2 - y1 * y2 - z1 * z2,
        w1 * x2 + x1 * w2 + y1 * z2 - z1 * y2,
        w1 * y2 - x1 * z2 + y1 * w2 + z1 * x2,
        w1 * z2 + x1 * y2 - y1 * x2 + z1 * w2
    ], dtype=float)


def quat_conj(q: np.ndarray) -> np.ndarray:
    """Quaternion conjugate."""
    w, x, y, z = q
    return np.array([w, -x, -y, -z], dtype=float)


def quat_norm(q: np.ndarray) -> float:
    return float(np.linalg.norm(q))


def quat_normalize(q: np.ndarray) -> np.ndarray:
    """Return q / ‖q‖.  A zero quaternion has no direction and is rejected."""
    n = quat_norm(q)
    if n <= AXIS_EPS:
        raise ValueError(f"cannot normalize zero-norm quaternion {q!r}")
    return np.asarray(q, dtype=float) / n


def quat_real(q: np.ndarray) -> float:
    """Scalar part w."""
    return float(q[0])


def quat_imag(q: np.ndarray) -> np.ndarray:
    """Vector part (x, y, z)."""
    return np.array(q[1:], dtype=float)


def pure_quat(v: np.ndarray) -> np.ndarray:
    """Embed a 3-vector as the pure quaternion [0, v]."""
    return np.concatenate(([0.0], np.asarray(v, dtype=float)))


def rotvec(q: np.ndarray, v: np.ndarray) -> np.ndarray:
    """Rotate the 3-vector *v* by quaternion *q*."""
    return quat_mul(quat_mul(q, pure_quat(v)), quat_conj(q))[1:]


# ------------------------------------------------------------------ #
# Exponential / logarithmic map
# ------------------------------------------------------------------ #
def quat_exp(v: np.ndarray) -> np.ndarray:
    """
    Exponential of the pure quaternion [0, v].

    *v* is a rotation axis scaled by the half angle.  The vector part is
    written with np.sinc so nothing is divided by ‖v‖: v = 0 gives the
    identity exactly, and small ‖v‖ stays accurate without normalizing.
    """
    v = np.asarray(v, dtype=float)
    m = np.linalg.norm(v)
    # np.sinc(x) = sin(pi x) / (pi x)
    s = np.sinc(m / np.pi)
    return np.concatenate(([np.cos(m)], s * v))


def quat_log(q: np.ndarray) -> np.ndarray:
    """
    Logarithm of a unit quaternion, returned as the 3-vector v with
    quat_exp(v) == q (v = half angle times axis).
    """
    q = quat_normalize(q)
    w = np.clip(q[0], -1.0, 1.0)
    m = np.arccos(w)
    s = np.sinc(m / np.pi)
    if s <= AXIS_EPS:
        # w == -1: 360° turn about an undefined axis
        return np.array([np.pi, 0.0, 0.0])
    return q[1:] / s


def quat_from_axis_angle(axis: np.ndarray, angle: float) -> np.ndarray:
    """Trigonometric construction; a (near) zero axis gives the identity."""
    axis = np.asarray(axis, dtype=float)
    n = np.linalg.norm(axis)
    if n <= AXIS_EPS:
        return quat_identity()
    half = 0.5 * angle
    return np.concatenate(([np.cos(half)], np.sin(half) * axis / n))


# ------------------------------------------------------------------ #
# Conversions
# ------------------------------------------------------------------ #
def quat_to_xyzw(q: np.ndarray) -> np.ndarray:
    """[w, x, y, z] → [x, y, z, w] (vector-first, renderer ordering)."""
    return np.concatenate((quat_imag(q), [quat_real(q)]))


def quat_from_xyzw(q: np.ndarray) -> np.ndarray:
    """[x, y, z, w] → [w, x, y, z]."""
    x, y, z, w = q
    return np.array([w, x, y, z], dtype=float)


def quat_to_rotmat(q: np.ndarray) -> np.ndarray:
    """Rotation matrix of the (normalized) quaternion *q*."""
    w, x, y, z = quat_normalize(q)
    return np.array([
        [1 - 2*(y*y + z*z), 2*(x*y - z*w),     2*(x*z + y*w)],
        [2*(x*y + z*w),     1 - 2*(x*x + z*z), 2*(y*z - x*w)],
        [2*(x*z - y*w),     2*(y*z + x*w),     1 - 2*(x*x + y*y)]
    ], dtype=float)


def rotmat_to_quat(R: np.ndarray) -> np.ndarray:
    """Convert a 3 × 3 rotation matrix into a unit quaternion."""
    m00, m01, m02 = R[0]
    m10, m11, m12 = R[1]
    m20, m21, m22 = R[2]

    tr = m00 + m11 + m22
    if tr > 0.0:
        s = 0.5 / np.sqrt(tr + 1.0)
        w = 0.25 / s
        x = (m21 - m12) * s
        y = (m02 - m20) * s
        z = (m10 - m01) * s
    elif m00 > m11 and m00 > m22:
        s = 2.0 * np.sqrt(1.0 + m00 - m11 - m22)
        w = (m21 - m12) / s
        x = 0.25 * s
        y = (m01 + m10) / s
        z = (m02 + m20) / s
    elif m11 > m22:
        s = 2.0 * np.sqrt(1.0 + m11 - m00 - m22)
        w = (m02 - m20) / s
        x = (m01 + m10) / s
        y = 0.25 * s
        z = (m12 + m21) / s
    else:
        s = 2.0 * np.sqrt(1.0 + m22 - m00 - m11)
        w = (m10 - m01) / s
        x = (m02 + m20) / s
        y = (m12 + m21) / s
        z = 0.25 * s
    return quat_normalize(np.array([w, x, y, z], dtype=float))
