"""
MuJoCo scene for the arm segments.

Each segment becomes a mocap body, so the renderer draws exactly the pose we
hand it and never simulates anything.  The kinematics use a Y-up frame;
cylinders are aligned with Y to match.
"""
import logging
import textwrap
from typing import Dict, Sequence

import mujoco
import numpy as np

from dq_arm_sim.errors import ChainConfigError
from dq_arm_sim.forward_kinematics import ChainLayout, ChainPose, Segment

logger = logging.getLogger(__name__)


def body_name(segment: Segment) -> str:
    return f"seg_{segment.name}"


def geom_xml(segment: Segment, rgba: str = "0.9 0.9 0.9 1") -> str:
    if segment.shape == "cylinder":
        radius, height = segment.size[:2]
        return (f'<geom type="cylinder" size="{radius} {0.5 * height}" '
                f'zaxis="0 1 0" rgba="{rgba}"/>')
    if segment.shape == "box":
        hx, hy, hz = (0.5 * s for s in segment.size[:3])
        return f'<geom type="box" size="{hx} {hy} {hz}" rgba="{rgba}"/>'
    raise ChainConfigError(f"segment {segment.name!r}: unsupported shape {segment.shape!r}")


def segment_body_xml(segment: Segment) -> str:
    x, y, z = segment.local_transform.translation
    return textwrap.dedent(f"""
      <body name="{body_name(segment)}" mocap="true" pos="{x} {y} {z}">
        {geom_xml(segment)}
      </body>
    """)


def build_scene_xml(layout: ChainLayout, model_name: str = "dq_arm") -> str:
    bodies = "".join(segment_body_xml(seg) for seg in layout.segments)
    return textwrap.dedent(f"""
    <mujoco model="{model_name}">
      <visual>
        <global offwidth="1920" offheight="1088"/>
      </visual>
      <worldbody>
        <light pos="3 3 3" dir="-1 -1 -1" diffuse="0.8 0.8 0.8"/>
        <light pos="0 10 20" dir="0 -0.5 -1" diffuse="0.4 0.4 0.4"/>
    """) + bodies + textwrap.dedent("""
      </worldbody>
    </mujoco>
    """)


def load_scene(layout: ChainLayout):
    """Compile the scene; returns (model, data)."""
    model = mujoco.MjModel.from_xml_string(build_scene_xml(layout))
    data = mujoco.MjData(model)
    logger.info("Scene compiled: %d mocap bodies", model.nmocap)
    return model, data


def bind_segments(model, layout: ChainLayout) -> Dict[str, int]:
    """segment name → mocap index, resolved once at startup."""
    handles = {}
    for seg in layout.segments:
        body_id = mujoco.mj_name2id(model, mujoco.mjtObj.mjOBJ_BODY, body_name(seg))
        if body_id == -1:
            raise ChainConfigError(f"scene has no body for segment {seg.name!r}")
        mocap_id = int(model.body_mocapid[body_id])
        if mocap_id < 0:
            raise ChainConfigError(f"body {body_name(seg)!r} is not a mocap body")
        handles[seg.name] = mocap_id
    return handles


def apply_poses(data, handles: Dict[str, int], poses: Sequence[ChainPose]) -> None:
    """Write one pose per segment into the mocap buffers (MuJoCo is scalar-first too)."""
    for cp in poses:
        i = handles[cp.segment.name]
        data.mocap_pos[i] = cp.pose.translation
        data.mocap_quat[i] = cp.pose.rotation


def default_camera(lookat=(0.0, 0.0, 5.0), distance: float = 25.0):
    cam = mujoco.MjvCamera()
    cam.type = mujoco.mjtCamera.mjCAMERA_FREE
    cam.distance = distance
    cam.azimuth = -45
    cam.elevation = -25
    cam.lookat[:] = np.asarray(lookat, dtype=float)
    return cam
