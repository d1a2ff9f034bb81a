# test_level.py
import json
import os
import tempfile
import unittest

import pygame

from engine.anim.animator import ConfigurationError
from engine.anim.palette import DEFAULT_COLOR, Palette, hex_to_rgb, parse_color
from engine.anim.pose import Pose, Vector3
from engine.level import get_bpm, get_color_palette, load_level_file, platforms_from_level
from engine.settings import AnimCfg, AppCfg, load_settings
from game.scenes.preview import PreviewScene, project_platform


LEVEL = {
    "bpm": 90,
    "colorPalette": ["0xff6b6b", "#4ecdc4", 0x1a535c],
    "platforms": [
        {"position": {"x": 1, "y": 2, "z": 3}, "size": {"x": 4, "y": 1, "z": 2}, "color": "0x00ff00"},
        {
            "type": "moving",
            "position": {"x": 0, "y": 0, "z": 0},
            "states": {
                "startState": {"colorIndex": 0},
                "transitions": [
                    {"beats": 2, "transforms": {"translate": {"y": 3}, "colorIndex": 1}},
                    {"beats": 2, "transforms": {"translate": {"y": 0}}},
                ],
            },
        },
    ],
}


def _write_tmp(text: str, suffix: str) -> str:
    fd, path = tempfile.mkstemp(suffix=suffix)
    with os.fdopen(fd, "w", encoding="utf-8") as f:
        f.write(text)
    return path


class TestPalette(unittest.TestCase):
    def test_parse_color_formats(self):
        self.assertEqual(parse_color(0xFF6B6B), 0xFF6B6B)
        self.assertEqual(parse_color("0xff6b6b"), 0xFF6B6B)
        self.assertEqual(parse_color("0XFF6B6B"), 0xFF6B6B)
        self.assertEqual(parse_color("#ff6b6b"), 0xFF6B6B)
        self.assertEqual(parse_color("ff6b6b"), 0xFF6B6B)

    def test_parse_color_garbage_is_grey(self):
        for bad in ("teal", None, 1.5, [255, 0, 0]):
            with self.subTest(value=bad):
                with self.assertLogs("engine.anim.palette", level="WARNING"):
                    self.assertEqual(parse_color(bad), DEFAULT_COLOR)

    def test_lookup(self):
        p = Palette(["0xff0000", "0x0000ff"])
        self.assertEqual(len(p), 2)
        self.assertEqual(p.hex(1), 0x0000FF)
        self.assertEqual(p.rgb(0), (1.0, 0.0, 0.0))
        self.assertIsNone(p.rgb(2))
        self.assertIsNone(p.rgb(-1))
        self.assertIsNone(p.rgb(None))
        self.assertEqual(p.color(1), pygame.Color(0, 0, 255))
        self.assertIsNone(p.color(5))

    def test_hex_to_rgb(self):
        self.assertEqual(hex_to_rgb(0xFFFFFF), (1.0, 1.0, 1.0))
        self.assertEqual(hex_to_rgb(0x000000), (0.0, 0.0, 0.0))


class TestLevel(unittest.TestCase):
    def test_bpm_and_palette(self):
        self.assertEqual(get_bpm(LEVEL), 90)
        self.assertEqual(get_bpm({}), 120.0)
        self.assertEqual(get_bpm({}, default=100), 100)
        # a 0 bpm in a level file means "unset"; only TransformAnimator rejects it
        self.assertEqual(get_bpm({"bpm": 0}), 120.0)
        self.assertEqual(get_bpm({"bpm": None}, default=100), 100)
        self.assertEqual(list(get_color_palette(LEVEL)), [0xFF6B6B, 0x4ECDC4, 0x1A535C])
        self.assertEqual(len(get_color_palette({"colorPalette": "red"})), 0)

    def test_platforms(self):
        static, moving = platforms_from_level(LEVEL)
        self.assertFalse(static.is_moving)
        self.assertEqual(static.position, Vector3(1, 2, 3))
        self.assertEqual(static.size, Vector3(4, 1, 2))
        self.assertEqual(static.color, 0x00FF00)

        self.assertTrue(moving.is_moving)
        self.assertEqual(moving.size, Vector3(1, 1, 1))
        anim = moving.animator
        self.assertEqual(anim.bpm, 90.0)
        self.assertEqual(len(anim.transitions), 2)
        self.assertAlmostEqual(anim.transitions[0].duration, 2 * 60 / 90)
        self.assertEqual(anim.current_color(), hex_to_rgb(0xFF6B6B))

    def test_moving_platforms_share_palette(self):
        level = dict(LEVEL, platforms=[LEVEL["platforms"][1], LEVEL["platforms"][1]])
        a, b = platforms_from_level(level)
        self.assertIs(a.animator.palette, b.animator.palette)
        self.assertIsNot(a.animator, b.animator)

    def test_settings_flow_into_animators(self):
        cfg = AnimCfg(default_easing="linear", carry_remainder=True)
        _, moving = platforms_from_level(LEVEL, cfg)
        self.assertTrue(moving.animator.carry_remainder)
        self.assertEqual(moving.animator.transitions[0].easing.translate.control_points, (0.0, 0.0, 1.0, 1.0))

    def test_missing_platforms(self):
        with self.assertLogs("engine.level", level="WARNING"):
            self.assertEqual(platforms_from_level({"bpm": 120}), [])

    def test_bad_platform_names_platform_and_transition(self):
        level = {"platforms": [
            {},
            {"type": "moving", "states": {"transitions": [{"beats": 1}, {"beats": 0}]}},
        ]}
        with self.assertLogs("engine.level", level="ERROR"):
            with self.assertRaises(ConfigurationError) as ctx:
                platforms_from_level(level)
        self.assertIn("platform 1", str(ctx.exception))
        self.assertIn("transition 1", str(ctx.exception))
        self.assertEqual(ctx.exception.index, 1)

    def test_non_mapping_platform(self):
        with self.assertRaises(ConfigurationError):
            platforms_from_level({"platforms": ["floor"]})

    def test_load_json_level(self):
        path = _write_tmp(json.dumps(LEVEL), ".json")
        try:
            data = load_level_file(path)
        finally:
            os.remove(path)
        self.assertEqual(data["bpm"], 90)
        self.assertEqual(len(platforms_from_level(data)), 2)

    def test_load_rejects_non_mapping(self):
        path = _write_tmp("- 1\n- 2\n", ".yaml")
        try:
            with self.assertRaises(ValueError):
                load_level_file(path)
        finally:
            os.remove(path)

    def test_load_missing_file(self):
        with self.assertRaises(FileNotFoundError):
            load_level_file("does/not/exist.yaml")


class TestSettings(unittest.TestCase):
    def test_missing_file_gives_defaults(self):
        cfg = load_settings("does/not/exist.yaml")
        self.assertEqual(cfg.fps, 60)
        self.assertEqual(cfg.anim.default_bpm, 120.0)
        self.assertEqual(cfg.anim.default_easing, "easeOutQuart")
        self.assertFalse(cfg.anim.carry_remainder)

    def test_overrides(self):
        path = _write_tmp(
            "fps: 30\nlog_level: debug\nanim:\n  default_easing: linear\n  carry_remainder: true\n",
            ".yaml",
        )
        try:
            cfg = load_settings(path)
        finally:
            os.remove(path)
        self.assertEqual(cfg.fps, 30)
        self.assertEqual(cfg.log_level, "DEBUG")
        self.assertEqual(cfg.anim.default_easing, "linear")
        self.assertTrue(cfg.anim.carry_remainder)
        self.assertEqual(cfg.window.width, 1280)


class TestPreviewProjection(unittest.TestCase):
    def test_static_platform(self):
        static = platforms_from_level(LEVEL)[0]
        center, size, angle = project_platform(static, None, (100, 100), 10)
        self.assertEqual(center, (110, 130))
        self.assertEqual(size, (40, 20))
        self.assertEqual(angle, 0.0)

    def test_pose_applied(self):
        static = platforms_from_level(LEVEL)[0]
        pose = Pose(translate=Vector3(1, 5, -1), scale=Vector3(0.5, 1, 2), rotate=Vector3(0, 3.141592653589793 / 2, 0))
        center, size, angle = project_platform(static, pose, (0, 0), 10)
        self.assertEqual(center, (20, 20))
        self.assertEqual(size, (20, 40))
        self.assertAlmostEqual(angle, 90.0)


class _RecordingFont:
    def __init__(self):
        self.texts = []

    def render(self, text, antialias, color):
        self.texts.append(text)
        return pygame.Surface((8, 8))


class TestPreviewScene(unittest.TestCase):
    def _scene(self, level):
        scene = PreviewScene(AppCfg(), level, pygame.Surface((320, 200)))
        scene._font = _RecordingFont()
        return scene

    def test_hud_shows_beat_of_first_animator(self):
        scene = self._scene(LEVEL)
        scene.update(0.6)   # 90 bpm -> 0.9 beats
        scene.draw(pygame.Surface((320, 200)))
        self.assertIn("beat   0.90", scene._font.texts[-1])
        self.assertIn("moving 1/2", scene._font.texts[-1])

    def test_hud_without_moving_platforms(self):
        scene = self._scene({"platforms": [LEVEL["platforms"][0]]})
        scene.update(1.0)
        scene.draw(pygame.Surface((320, 200)))
        self.assertIn("beat   0.00", scene._font.texts[-1])

    def test_pause_and_reset_keys(self):
        scene = self._scene(LEVEL)
        self.assertTrue(scene.handle_event(pygame.event.Event(pygame.KEYDOWN, key=pygame.K_SPACE)))
        scene.update(0.6)
        anim = scene.platforms[1].animator
        self.assertEqual(anim.elapsed, 0.0)
        scene.handle_event(pygame.event.Event(pygame.KEYDOWN, key=pygame.K_SPACE))
        scene.update(0.6)
        self.assertAlmostEqual(anim.elapsed, 0.6)
        self.assertTrue(scene.handle_event(pygame.event.Event(pygame.KEYDOWN, key=pygame.K_r)))
        self.assertEqual(anim.elapsed, 0.0)
        scene.handle_event(pygame.event.Event(pygame.KEYDOWN, key=pygame.K_ESCAPE))
        self.assertTrue(scene.request_quit)


if __name__ == "__main__":
    unittest.main()
