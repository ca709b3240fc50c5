#!/usr/bin/env python3
"""
Interactive viewer for the dual-quaternion arm.

The keyboard stands in for the slider panel:
    1-9          select joint
    TAB          next control (theta, pitch/yaw/roll axis, rigid body X/Y/Z)
    UP / DOWN    change the selected control (hold SHIFT for x10)
    R            reset the selected joint
    P            save a screenshot
    ESC          quit
"""
import argparse
import logging
from pathlib import Path

import mujoco
import numpy as np
from mujoco.glfw import glfw
from PIL import Image

from dq_arm_sim.config import default_config, load_config
from dq_arm_sim.forward_kinematics import evaluate_chain
from dq_arm_sim.logging_config import setup_logging
from dq_arm_sim.scene import apply_poses, bind_segments, default_camera, load_scene
from dq_arm_sim.sliders import KeyboardSliders


def save_screenshot(context, viewport, path):
    rgb = np.zeros((viewport.height, viewport.width, 3), dtype=np.uint8)
    depth = np.zeros((viewport.height, viewport.width), dtype=np.float32)
    mujoco.mjr_readPixels(rgb, depth, viewport, context)
    Image.fromarray(np.flipud(rgb)).save(path)
    print(f"Screenshot saved as {path}")


def run_viewer(config, step=0.001, screenshot_name="dq_arm.png"):
    model, data = load_scene(config.layout())
    handles = bind_segments(model, config.layout())
    params = config.parameterization()
    controls = config.new_controls()
    sliders = KeyboardSliders(controls, step, config.slider_range)

    if not glfw.init():
        raise RuntimeError("Failed to initialise GLFW")

    width, height = 1200, 900
    window = glfw.create_window(width, height, "Quaternion Forward Kinematics Demo", None, None)
    if not window:
        glfw.terminate()
        raise RuntimeError("Failed to create GLFW window")
    glfw.make_context_current(window)

    cam = default_camera()
    scene = mujoco.MjvScene(model, maxgeom=1000)
    context = mujoco.MjrContext(model, mujoco.mjtFontScale.mjFONTSCALE_150.value)
    opt = mujoco.MjvOption()
    viewport = mujoco.MjrRect(0, 0, width, height)
    pending = {"screenshot": False}

    def on_key(win, key, scancode, action, mods):
        if action not in (glfw.PRESS, glfw.REPEAT):
            return
        if key == glfw.KEY_ESCAPE:
            glfw.set_window_should_close(win, True)
            return
        if glfw.KEY_1 <= key <= glfw.KEY_9:
            sliders.select_joint(key - glfw.KEY_1)
        elif key == glfw.KEY_TAB:
            sliders.next_field()
        elif key in (glfw.KEY_UP, glfw.KEY_DOWN):
            sliders.nudge(1 if key == glfw.KEY_UP else -1, fast=bool(mods & glfw.MOD_SHIFT))
        elif key == glfw.KEY_R:
            controls.reset(sliders.joint)
        elif key == glfw.KEY_P:
            pending["screenshot"] = True
            return
        else:
            return
        print(sliders.status())

    glfw.set_key_callback(window, on_key)

    print("Viewer active – press Esc to close.")
    print(sliders.status())
    while not glfw.window_should_close(window):
        glfw.poll_events()

        poses = evaluate_chain(controls.joints, config.layout(), params)
        apply_poses(data, handles, poses)
        mujoco.mj_kinematics(model, data)

        fb_w, fb_h = glfw.get_framebuffer_size(window)
        viewport = mujoco.MjrRect(0, 0, max(1, fb_w), max(1, fb_h))
        mujoco.mjv_updateScene(model, data, opt, None, cam,
                               mujoco.mjtCatBit.mjCAT_ALL.value, scene)
        mujoco.mjr_render(viewport, scene, context)

        if pending["screenshot"]:
            save_screenshot(context, viewport, screenshot_name)
            pending["screenshot"] = False

        glfw.swap_buffers(window)

    glfw.terminate()


def main():
    parser = argparse.ArgumentParser(
        description="Interactive dual-quaternion forward kinematics viewer")
    parser.add_argument("--config", type=Path, default=None,
                        help="JSON chain configuration (default: built-in 3-stage arm)")
    parser.add_argument("--step", type=float, default=0.001,
                        help="Slider increment per key press")
    parser.add_argument("--screenshot_name", type=str, default="dq_arm.png")
    parser.add_argument("--log-level", default="INFO",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    args = parser.parse_args()

    setup_logging(getattr(logging, args.log_level))
    config = load_config(args.config) if args.config else default_config()
    run_viewer(config, step=args.step, screenshot_name=args.screenshot_name)


if __name__ == "__main__":
    main()
