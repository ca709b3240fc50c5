import numpy as np
import pytest

from dq_arm_sim.dual_quaternion import DualQuaternion
from dq_arm_sim.quaternion_utils import quat_normalize


@pytest.fixture
def rng():
    return np.random.default_rng(1234)


def random_unit_quat(rng):
    return quat_normalize(rng.normal(size=4))


def random_unit_dq(rng):
    return DualQuaternion.from_rotation_translation(
        random_unit_quat(rng), rng.uniform(-5.0, 5.0, size=3))


@pytest.fixture
def unit_dq_factory(rng):
    return lambda: random_unit_dq(rng)


@pytest.fixture
def unit_quat_factory(rng):
    return lambda: random_unit_quat(rng)
