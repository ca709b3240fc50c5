import numpy as np
import pytest

from dq_arm_sim.dual_quaternion import DualQuaternion
from dq_arm_sim.quaternion_utils import quat_from_axis_angle, quat_identity


def test_identity_parts():
    dq = DualQuaternion.identity()
    np.testing.assert_array_equal(dq.real, [1.0, 0.0, 0.0, 0.0])
    np.testing.assert_array_equal(dq.dual, np.zeros(4))
    assert dq.is_unit()


def test_identity_law(unit_dq_factory):
    I = DualQuaternion.identity()
    for _ in range(10):
        dq = unit_dq_factory()
        assert (I * dq).allclose(dq, atol=1e-12)
        assert (dq * I).allclose(dq, atol=1e-12)


def test_product_is_associative(unit_dq_factory):
    for _ in range(10):
        a, b, c = unit_dq_factory(), unit_dq_factory(), unit_dq_factory()
        assert ((a * b) * c).allclose(a * (b * c), atol=1e-9)


def test_product_of_unit_values_is_unit(unit_dq_factory):
    dq = DualQuaternion.identity()
    for _ in range(25):
        dq = dq * unit_dq_factory()
        assert dq.is_unit(tol=1e-8)


def test_translation_and_rotation_recovered(unit_quat_factory):
    q = unit_quat_factory()
    t = np.array([1.5, -2.0, 0.25])
    dq = DualQuaternion.from_rotation_translation(q, t)
    np.testing.assert_allclose(dq.translation_part(), t, atol=1e-12)
    np.testing.assert_array_equal(dq.rotation_part(), q)


def test_right_operand_applies_first():
    shift = DualQuaternion.from_rotation_translation(quat_identity(), [1.0, 0.0, 0.0])
    turn = DualQuaternion.from_rotation_translation(
        quat_from_axis_angle([0.0, 0.0, 1.0], np.pi / 2), np.zeros(3))

    p = np.array([1.0, 0.0, 0.0])
    np.testing.assert_allclose((shift * turn).transform_point(p), [1.0, 1.0, 0.0], atol=1e-12)
    np.testing.assert_allclose((turn * shift).transform_point(p), [0.0, 2.0, 0.0], atol=1e-12)


def test_matrix_matches_composition(unit_dq_factory):
    a, b = unit_dq_factory(), unit_dq_factory()
    np.testing.assert_allclose((a * b).to_matrix(), a.to_matrix() @ b.to_matrix(), atol=1e-9)


def test_inverse_of_unit_value(unit_dq_factory):
    dq = unit_dq_factory()
    assert (dq * dq.inverse()).allclose(DualQuaternion.identity(), atol=1e-9)


def test_new_does_not_normalize():
    dq = DualQuaternion([2.0, 0.0, 0.0, 0.0], [0.0, 1.0, 0.0, 0.0])
    np.testing.assert_array_equal(dq.real, [2.0, 0.0, 0.0, 0.0])
    assert not dq.is_unit()


def test_normalized_restores_unit(unit_dq_factory):
    dq = unit_dq_factory()
    drifted = DualQuaternion(dq.real * 1.01, dq.dual * 1.01 + 1e-3 * dq.real)
    fixed = drifted.normalized()
    assert fixed.is_unit(tol=1e-12)
    assert fixed.allclose(dq, atol=1e-12)


def test_normalized_rejects_zero_real():
    with pytest.raises(ValueError):
        DualQuaternion(np.zeros(4), np.ones(4)).normalized()


def test_scalar_multiplication_and_array_round_trip(unit_dq_factory):
    dq = unit_dq_factory()
    np.testing.assert_allclose((2.0 * dq).as_array(), 2.0 * dq.as_array())
    np.testing.assert_array_equal(DualQuaternion.from_array(dq.as_array()).as_array(), dq.as_array())


def test_allclose_accepts_double_cover(unit_dq_factory):
    dq = unit_dq_factory()
    assert dq.allclose(dq * -1.0)


def test_addition_is_not_defined(unit_dq_factory):
    dq = unit_dq_factory()
    with pytest.raises(TypeError):
        dq + dq
