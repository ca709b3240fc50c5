"""
Joint parameterization: one control vector → one unit dual quaternion.

A joint is driven by three groups of values
    theta              – rotation magnitude
    rot_axis           – pitch / yaw / roll axis components
    rigid_body_offset  – translation of the joint
and the mapping is selected by a JointParameterization (rotation path and
whether the translation is scaled by theta).
"""
import enum
from dataclasses import dataclass, field

import numpy as np

from dq_arm_sim.dual_quaternion import DualQuaternion
from dq_arm_sim.quaternion_utils import quat_exp, quat_from_axis_angle, quat_log

# theta == 0 collapses every other control, so controls start just above it.
MIN_THETA = 1e-3

# Slider units → radians; keeps usable rotations reachable while theta sits
# near MIN_THETA.
DEFAULT_AXIS_GAIN = 100.0


class RotationMode(enum.Enum):
    EXPONENTIAL = "exponential"
    TRIGONOMETRIC = "trigonometric"


class TranslationMode(enum.Enum):
    COUPLED = "coupled"        # offset scaled by cos(theta / 2)
    DECOUPLED = "decoupled"    # offset used as is


def _zero3() -> np.ndarray:
    return np.zeros(3)


@dataclass
class JointControl:
    theta: float = MIN_THETA
    rot_axis: np.ndarray = field(default_factory=_zero3)
    rigid_body_offset: np.ndarray = field(default_factory=_zero3)

    def __post_init__(self):
        self.theta = float(self.theta)
        self.rot_axis = np.array(self.rot_axis, dtype=float).reshape(3)
        self.rigid_body_offset = np.array(self.rigid_body_offset, dtype=float).reshape(3)

    def reset(self) -> None:
        self.theta = MIN_THETA
        self.rot_axis = _zero3()
        self.rigid_body_offset = _zero3()

    def as_array(self) -> np.ndarray:
        """[theta, rx, ry, rz, ox, oy, oz] (used for logging frames)."""
        return np.concatenate(([self.theta], self.rot_axis, self.rigid_body_offset))


@dataclass(frozen=True)
class JointParameterization:
    gain: float = DEFAULT_AXIS_GAIN
    rotation_mode: RotationMode = RotationMode.EXPONENTIAL
    translation_mode: TranslationMode = TranslationMode.COUPLED


def rotation_vector(control: JointControl, params: JointParameterization) -> np.ndarray:
    """phi = theta · gain · rot_axis  (axis times full angle, radians)."""
    return control.theta * params.gain * control.rot_axis


def joint_rotation(control: JointControl, params: JointParameterization) -> np.ndarray:
    phi = rotation_vector(control, params)
    if params.rotation_mode is RotationMode.EXPONENTIAL:
        return quat_exp(0.5 * phi)
    return quat_from_axis_angle(phi, np.linalg.norm(phi))


def joint_translation(control: JointControl, params: JointParameterization) -> np.ndarray:
    if params.translation_mode is TranslationMode.COUPLED:
        return control.rigid_body_offset * np.cos(0.5 * control.theta)
    return control.rigid_body_offset.copy()


def joint_to_dual_quaternion(control: JointControl,
                             params: JointParameterization = JointParameterization()
                             ) -> DualQuaternion:
    """Unit dual quaternion of one joint: rotate, then translate."""
    return DualQuaternion.from_rotation_translation(
        joint_rotation(control, params),
        joint_translation(control, params),
    )


def joint_control_from_rotation(q: np.ndarray, theta: float = MIN_THETA,
                                gain: float = DEFAULT_AXIS_GAIN) -> JointControl:
    """
    Control whose exponential-map rotation reproduces *q* for the given
    theta and gain.  Offsets are left at zero.
    """
    if theta * gain == 0.0:
        raise ValueError("theta * gain must be non-zero to invert the rotation")
    phi = 2.0 * quat_log(q)
    return JointControl(theta=theta, rot_axis=phi / (theta * gain))
