"""
Tests for the preset library and animation delay table.
"""

import random

import pytest

from models.enums import AnimationPreset
from patterns.codec import is_valid_pattern, create_empty_pattern
from patterns.animation_delays import DELAY_FUNCTIONS, calculate_animation_delay, build_delay_map
from patterns.presets import (
    PRESET_GRID_SIZE,
    DOT_FRAMES,
    DASH_FRAMES,
    GAP_FRAMES,
    PresetLibrary,
    create_expanding_circles,
    create_rotating_cross,
    create_radar_sweep,
    create_building_blocks,
    create_pulse_wave,
    create_morse_signal,
)


class TestPresetLibrary:

    def test_all_presets_are_valid(self, cache):
        library = PresetLibrary(cache)
        presets = library.get_all()

        assert len(presets) == 10
        for preset in presets:
            assert preset.frames, preset.name
            assert preset.tempo >= 16
            for frame in preset.frames:
                assert is_valid_pattern(frame)
                assert len(frame) == PRESET_GRID_SIZE

    def test_names_are_unique(self):
        names = PresetLibrary().names()
        assert len(names) == len(set(names))
        assert names[0] == "Loading"

    def test_lookup_is_case_sensitive(self):
        library = PresetLibrary()
        assert library.get_preset_by_name("SOS").tempo == 100
        assert library.get_preset_by_name("sos") is None

    def test_random_preset_uses_rng(self):
        library = PresetLibrary()
        a = library.get_random_preset(random.Random(3))
        b = library.get_random_preset(random.Random(3))
        assert a.name == b.name

    def test_copy_frames_is_independent(self):
        preset = PresetLibrary().get_preset_by_name("Heart")
        frames = preset.copy_frames()
        frames[0][0][0] = not frames[0][0][0]
        assert preset.frames[0][0][0] != frames[0][0][0]

    def test_library_builds_once(self, cache):
        library = PresetLibrary(cache)
        library.get_all()
        misses = cache.misses
        library.get_all()
        assert cache.misses == misses


class TestFrameBuilders:

    def test_frame_counts(self):
        assert len(create_expanding_circles()) == 8
        assert len(create_rotating_cross()) == 9
        assert len(create_radar_sweep()) == 16
        assert len(create_building_blocks()) == 15
        assert len(create_pulse_wave()) == 5

    def test_radar_sweep_every_frame_lit(self):
        for frame in create_radar_sweep():
            assert any(any(row) for row in frame)

    def test_building_blocks_fill_bottom_up(self):
        frames = create_building_blocks()
        assert frames[0][7] == [True] * 8
        assert not any(frames[0][6])
        assert all(all(row) for row in frames[7])

    def test_morse_signal_timing(self):
        frames = create_morse_signal(".-")
        assert len(frames) == DOT_FRAMES + GAP_FRAMES + DASH_FRAMES + GAP_FRAMES

        dot = frames[0]
        assert dot[3][3] and dot[4][4]
        assert not dot[3][1]

        dash = frames[DOT_FRAMES + GAP_FRAMES]
        assert all(dash[3][c] for c in range(1, 7))

        assert frames[DOT_FRAMES] == create_empty_pattern(8)

    def test_morse_sos(self):
        assert len(create_morse_signal("...---...")) == 6 * (DOT_FRAMES + GAP_FRAMES) + 3 * (DASH_FRAMES + GAP_FRAMES)


class TestAnimationDelays:

    def test_table_covers_every_preset(self):
        assert set(DELAY_FUNCTIONS) == set(AnimationPreset)

    def test_known_values(self):
        assert calculate_animation_delay(3, 4, 8, AnimationPreset.FADE) == 0
        assert calculate_animation_delay(2, 3, 8, AnimationPreset.SCALE) == 100
        assert calculate_animation_delay(0, 5, 8, AnimationPreset.SLIDE) == 150
        assert calculate_animation_delay(2, 1, 8, AnimationPreset.CASCADE) == 90
        assert calculate_animation_delay(4, 4, 8, AnimationPreset.RIPPLE) == 0

    def test_random_is_bounded_and_seedable(self):
        a = build_delay_map(6, AnimationPreset.RANDOM, random.Random(5))
        b = build_delay_map(6, AnimationPreset.RANDOM, random.Random(5))
        assert a == b
        assert all(0 <= delay < 200 for row in a for delay in row)

    @pytest.mark.parametrize("preset", [p for p in AnimationPreset if p != AnimationPreset.RANDOM])
    def test_deterministic_presets_are_non_negative(self, preset):
        delay_map = build_delay_map(8, preset)
        assert len(delay_map) == 8
        assert all(delay >= 0 for row in delay_map for delay in row)
