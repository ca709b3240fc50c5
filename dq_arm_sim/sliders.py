"""
Keyboard stand-in for the per-joint slider panel.

Each joint exposes seven controls; the panel tracks which one is selected and
steps it.  Values are never clamped: value_range is only the typical span,
and status() flags a value that has left it.
"""
from dq_arm_sim.config import ControlState

CONTROL_LABELS = ["theta", "pitch axis", "yaw axis", "roll axis",
                  "Rigid Body X", "Rigid Body Y", "Rigid Body Z"]


class KeyboardSliders:
    """Selection + stepping over the controls of a ControlState."""

    def __init__(self, state: ControlState, step: float = 0.001,
                 value_range=(-100.0, 100.0)):
        self.state = state
        self.step = step
        self.value_range = value_range
        self.joint = 0
        self.field = 0

    def _get(self):
        j = self.state[self.joint]
        if self.field == 0:
            return j.theta
        if self.field < 4:
            return j.rot_axis[self.field - 1]
        return j.rigid_body_offset[self.field - 4]

    def _set(self, value):
        j = self.state[self.joint]
        if self.field == 0:
            j.theta = value
        elif self.field < 4:
            j.rot_axis[self.field - 1] = value
        else:
            j.rigid_body_offset[self.field - 4] = value

    def select_joint(self, i):
        if 0 <= i < len(self.state):
            self.joint = i

    def next_field(self):
        self.field = (self.field + 1) % len(CONTROL_LABELS)

    def nudge(self, direction, fast=False):
        self._set(self._get() + direction * self.step * (10.0 if fast else 1.0))

    def in_range(self):
        lo, hi = self.value_range
        return lo <= self._get() <= hi

    def status(self):
        text = f"joint {self.joint + 1} | {CONTROL_LABELS[self.field]} = {self._get():.4f}"
        if not self.in_range():
            lo, hi = self.value_range
            text += f" (outside slider range {lo:g}..{hi:g})"
        return text
