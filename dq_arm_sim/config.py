"""
Chain configuration and per-session control state.

The configuration (segments, joint count, parameterization) is static and
validated once when it is built or loaded.  ControlState holds the live
slider values; it is owned by the UI loop and only read by the kinematics.
"""
import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Tuple

import numpy as np

from dq_arm_sim.errors import ChainConfigError
from dq_arm_sim.forward_kinematics import ChainLayout, Segment
from dq_arm_sim.joint import (
    DEFAULT_AXIS_GAIN,
    JointControl,
    JointParameterization,
    RotationMode,
    TranslationMode,
)
from dq_arm_sim.pose import Transform
from dq_arm_sim.quaternion_utils import quat_normalize

logger = logging.getLogger(__name__)


# ── live controls ────────────────────────────────────────────────────────
@dataclass
class ControlState:
    joints: List[JointControl] = field(default_factory=list)

    @classmethod
    def for_joints(cls, n: int) -> "ControlState":
        return cls(joints=[JointControl() for _ in range(n)])

    def reset(self, index: Optional[int] = None) -> None:
        """Reset one joint, or all of them when *index* is None."""
        targets = self.joints if index is None else [self.joints[index]]
        for j in targets:
            j.reset()

    def __len__(self):
        return len(self.joints)

    def __getitem__(self, i) -> JointControl:
        return self.joints[i]


# ── static configuration ─────────────────────────────────────────────────
@dataclass(frozen=True)
class ChainConfig:
    joint_count: int
    segments: Tuple[Segment, ...]
    gain: float = DEFAULT_AXIS_GAIN
    rotation_mode: RotationMode = RotationMode.EXPONENTIAL
    translation_mode: TranslationMode = TranslationMode.COUPLED
    slider_range: Tuple[float, float] = (-100.0, 100.0)

    def layout(self) -> ChainLayout:
        return ChainLayout(self.joint_count, self.segments)

    def parameterization(self) -> JointParameterization:
        return JointParameterization(self.gain, self.rotation_mode, self.translation_mode)

    def new_controls(self) -> ControlState:
        return ControlState.for_joints(self.joint_count)

    def validate(self) -> "ChainConfig":
        lo, hi = self.slider_range
        if not lo < hi:
            raise ChainConfigError(f"slider_range must be increasing, got {self.slider_range}")
        self.layout().validate()
        return self


def arm_segments(chain_index: int, spacing: float = 5.0) -> List[Segment]:
    """Base cylinder, middle cylinder and arm box for one stage of the arm."""
    base = Transform.from_xyz(0.0, 0.0, chain_index * spacing)
    return [
        Segment(f"base_{chain_index}", chain_index,
                base_transform=base, shape="cylinder", size=(1.5, 1.0)),
        Segment(f"middle_{chain_index}", chain_index,
                base_transform=base, shape="cylinder", size=(0.5, 2.0)),
        Segment(f"arm_{chain_index}", chain_index,
                node_transform=Transform.from_xyz(0.0, 0.0, -2.0),
                base_transform=base, shape="box", size=(1.0, 0.9, 4.0)),
    ]


def default_config(joint_count: int = 3, spacing: float = 5.0) -> ChainConfig:
    segments = []
    for i in range(joint_count):
        segments.extend(arm_segments(i, spacing))
    return ChainConfig(joint_count=joint_count, segments=tuple(segments)).validate()


# ── JSON loading ─────────────────────────────────────────────────────────
def _enum_cast(enum_cls):
    def cast(v):
        try:
            return enum_cls(str(v).lower())
        except ValueError as e:
            choices = ", ".join(m.value for m in enum_cls)
            raise ChainConfigError(f"unknown {enum_cls.__name__} {v!r} (expected one of {choices})") from e
    return cast


def _transform_cast(raw) -> Transform:
    """Static segment offset: rotation is normalized, scale must stay unit."""
    if raw is None:
        return Transform()
    if isinstance(raw, (list, tuple)):
        return Transform.from_translation(raw)
    raw_scale = raw.get("scale", (1.0, 1.0, 1.0))
    scale = np.asarray(raw_scale, dtype=float)
    if scale.shape != (3,) or not np.allclose(scale, 1.0):
        raise ChainConfigError(f"segment transforms must have unit scale, got {raw_scale!r}")

    raw_rotation = raw.get("rotation", (1.0, 0.0, 0.0, 0.0))
    try:
        rotation = quat_normalize(np.asarray(raw_rotation, dtype=float).reshape(4))
    except ValueError as e:
        raise ChainConfigError(f"invalid segment rotation {raw_rotation!r} ({e})") from e

    return Transform(translation=raw.get("translation", (0.0, 0.0, 0.0)), rotation=rotation)


def _segment_cast(raw: dict) -> Segment:
    try:
        return Segment(
            name=str(raw["name"]),
            chain_index=int(raw["chain_index"]),
            node_transform=_transform_cast(raw.get("node_transform")),
            base_transform=_transform_cast(raw.get("base_transform")),
            shape=str(raw.get("shape", "box")),
            size=tuple(float(x) for x in raw.get("size", (1.0, 1.0, 1.0))),
        )
    except ChainConfigError:
        raise
    except (KeyError, TypeError, ValueError) as e:
        raise ChainConfigError(f"invalid segment entry {raw!r} ({e!r})") from e


# (key, cast, default); a callable default is called per load.
CONFIG_FIELDS = [
    ("joint_count", int, 3),
    ("gain", float, DEFAULT_AXIS_GAIN),
    ("rotation_mode", _enum_cast(RotationMode), "exponential"),
    ("translation_mode", _enum_cast(TranslationMode), "coupled"),
    ("slider_range", lambda v: (float(v[0]), float(v[1])), (-100.0, 100.0)),
    ("segment_spacing", float, 5.0),
    ("segments", lambda v: tuple(_segment_cast(s) for s in v), None),
]


def config_from_dict(raw: dict) -> ChainConfig:
    values = {}
    for key, cast, default in CONFIG_FIELDS:
        value = raw[key] if key in raw else (default() if callable(default) else default)
        if value is not None:
            try:
                value = cast(value)
            except ChainConfigError:
                raise
            except (TypeError, ValueError, IndexError) as e:
                raise ChainConfigError(f"invalid value for {key!r}: {value!r}") from e
        values[key] = value

    spacing = values.pop("segment_spacing")
    if values["segments"] is None:
        values["segments"] = tuple(
            seg for i in range(values["joint_count"]) for seg in arm_segments(i, spacing)
        )
    return ChainConfig(**values).validate()


def load_config(config_path: Path) -> ChainConfig:
    config_path = Path(config_path)
    try:
        raw = json.loads(config_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ChainConfigError(f"{config_path}: not valid JSON ({e})") from e
    if not isinstance(raw, dict):
        raise ChainConfigError(f"{config_path}: top level must be an object")

    config = config_from_dict(raw)
    logger.info("Loaded chain config from %s: %d joint(s), %d segment(s), %s/%s",
                config_path, config.joint_count, len(config.segments),
                config.rotation_mode.value, config.translation_mode.value)
    return config
