import json

import numpy as np
import pytest

from dq_arm_sim.config import ControlState, config_from_dict, default_config, load_config
from dq_arm_sim.errors import ChainConfigError
from dq_arm_sim.forward_kinematics import evaluate_chain
from dq_arm_sim.joint import MIN_THETA, RotationMode, TranslationMode


def test_default_config_matches_three_stage_arm():
    config = default_config()
    assert config.joint_count == 3
    assert len(config.segments) == 9
    assert config.gain == 100.0
    assert config.rotation_mode is RotationMode.EXPONENTIAL
    assert config.translation_mode is TranslationMode.COUPLED

    arms = [s for s in config.segments if s.name.startswith("arm_")]
    assert [s.chain_index for s in arms] == [0, 1, 2]
    np.testing.assert_allclose(arms[2].local_transform.translation, [0.0, 0.0, 8.0])


def test_empty_json_gives_defaults(tmp_path):
    path = tmp_path / "chain.json"
    path.write_text("{}", encoding="utf-8")
    config = load_config(path)
    expected = default_config()
    assert config.joint_count == expected.joint_count
    assert config.gain == expected.gain
    assert [s.name for s in config.segments] == [s.name for s in expected.segments]
    for got, want in zip(config.segments, expected.segments):
        np.testing.assert_array_equal(got.local_transform.translation,
                                      want.local_transform.translation)


def test_modes_and_segments_from_json(tmp_path):
    path = tmp_path / "chain.json"
    path.write_text(json.dumps({
        "joint_count": 2,
        "gain": 1.0,
        "rotation_mode": "Trigonometric",
        "translation_mode": "decoupled",
        "segments": [
            {"name": "hub", "chain_index": 0, "shape": "cylinder", "size": [1.0, 0.5]},
            {"name": "tip", "chain_index": 1,
             "base_transform": [0.0, 0.0, 4.0],
             "node_transform": {"translation": [0.0, 0.0, -1.0]}},
        ],
    }), encoding="utf-8")

    config = load_config(path)
    assert config.rotation_mode is RotationMode.TRIGONOMETRIC
    assert config.translation_mode is TranslationMode.DECOUPLED
    assert config.parameterization().gain == 1.0
    tip = config.segments[1]
    np.testing.assert_allclose(tip.local_transform.translation, [0.0, 0.0, 3.0])


@pytest.mark.parametrize("raw", [
    {"joint_count": 2, "segments": [{"name": "x", "chain_index": 2}]},
    {"joint_count": 0},
    {"rotation_mode": "quadratic"},
    {"slider_range": [10, -10]},
    {"segments": [{"chain_index": 0}]},
    {"gain": "lots"},
    {"joint_count": 1, "segments": [
        {"name": "a", "chain_index": 0, "node_transform": {"rotation": [0, 0, 0, 0]}}]},
    {"joint_count": 1, "segments": [
        {"name": "a", "chain_index": 0, "node_transform": {"scale": [3, 3, 3]}}]},
])
def test_invalid_configs_fail_at_load(raw):
    with pytest.raises(ChainConfigError):
        config_from_dict(raw)


def test_malformed_json_is_a_config_error(tmp_path):
    path = tmp_path / "chain.json"
    path.write_text("[1, 2", encoding="utf-8")
    with pytest.raises(ChainConfigError):
        load_config(path)


def test_control_state_reset():
    state = ControlState.for_joints(3)
    for j in state.joints:
        j.theta = 2.0
        j.rot_axis[:] = 1.0
    state.reset(1)
    assert state[1].theta == MIN_THETA
    assert state[0].theta == 2.0
    state.reset()
    assert all(j.theta == MIN_THETA for j in state.joints)
    assert all(not j.rot_axis.any() for j in state.joints)


def test_segment_rotation_is_normalized_at_load():
    config = config_from_dict({"joint_count": 1, "segments": [
        {"name": "a", "chain_index": 0,
         "base_transform": {"translation": [0, 0, 1], "rotation": [2, 0, 0, 0]}},
    ]})
    base = config.segments[0].base_transform
    np.testing.assert_array_equal(base.rotation, [1.0, 0.0, 0.0, 0.0])
    np.testing.assert_array_equal(base.scale, [1.0, 1.0, 1.0])

    pose = evaluate_chain(config.new_controls().joints, config.layout())[0].pose
    assert np.linalg.norm(pose.rotation) == pytest.approx(1.0)
    np.testing.assert_allclose(pose.translation, [0.0, 0.0, 1.0])


def test_configs_compare_equal():
    assert default_config() == default_config()
    assert default_config(2) != default_config(3)
    assert hash(default_config()) == hash(default_config())
