"""
Tests for ConfigManager: include merging, typed sections, fallback.
"""

import textwrap

import pytest

from managers.config_manager import ConfigManager
from models.config import AppConfig
from models.enums import LogLevel


def write(path, text):
    path.write_text(textwrap.dedent(text), encoding="utf-8")


@pytest.fixture
def config_dir(tmp_path):
    directory = tmp_path / "config"
    directory.mkdir()
    write(directory / "factory_defaults.yaml", """
        sequencer:
          tempo_ms: 300
        labels:
          - Default
    """)
    return directory


def load(tmp_path):
    manager = ConfigManager(base_dir=tmp_path)
    return manager, manager.load()


class TestConfigManager:

    def test_monolithic(self, tmp_path, config_dir):
        write(config_dir / "config.yaml", """
            sequencer:
              tempo_ms: 120
              iterations: 3
            orchestrator:
              hold_duration_ms: 1500
            logging:
              level: debug
              use_colors: false
            labels: [A, B]
            preset: SOS
        """)
        manager, config = load(tmp_path)

        assert config.sequencer.tempo_ms == 120
        assert config.sequencer.iterations == 3
        assert config.orchestrator.hold_duration_ms == 1500
        assert config.orchestrator.transition_duration_ms == 600
        assert config.logging.level == LogLevel.DEBUG
        assert config.logging.use_colors is False
        assert manager.labels == ["A", "B"]
        assert manager.preset_name == "SOS"

    def test_includes_merge_and_main_file_wins(self, tmp_path, config_dir):
        write(config_dir / "config.yaml", """
            include:
              - playback.yaml
              - editor.yaml
            labels: [Override]
        """)
        write(config_dir / "playback.yaml", """
            sequencer:
              tempo_ms: 90
            labels: [FromInclude]
        """)
        write(config_dir / "editor.yaml", """
            editor:
              default_grid_size: 9
        """)
        manager, config = load(tmp_path)

        assert config.sequencer.tempo_ms == 90
        assert config.editor.default_grid_size == 9
        assert manager.labels == ["Override"]
        assert "include" not in manager.data

    def test_missing_include_falls_back(self, tmp_path, config_dir):
        write(config_dir / "config.yaml", """
            include:
              - missing.yaml
        """)
        manager, config = load(tmp_path)

        assert config.sequencer.tempo_ms == 300
        assert manager.labels == ["Default"]

    def test_invalid_yaml_falls_back(self, tmp_path, config_dir):
        write(config_dir / "config.yaml", "sequencer: [unclosed\n")
        _, config = load(tmp_path)
        assert config.sequencer.tempo_ms == 300

    def test_non_mapping_falls_back(self, tmp_path, config_dir):
        write(config_dir / "config.yaml", "- just\n- a list\n")
        _, config = load(tmp_path)
        assert config.sequencer.tempo_ms == 300

    def test_invalid_iterations_falls_back(self, tmp_path, config_dir):
        write(config_dir / "config.yaml", """
            sequencer:
              iterations: 0
        """)
        _, config = load(tmp_path)
        assert config.sequencer.tempo_ms == 300

    def test_invalid_log_level_falls_back(self, tmp_path, config_dir):
        write(config_dir / "config.yaml", """
            logging:
              level: chatty
        """)
        _, config = load(tmp_path)
        assert config.logging.level == LogLevel.INFO

    def test_missing_everything_uses_builtin_defaults(self, tmp_path):
        manager, config = load(tmp_path)
        assert config == AppConfig()
        assert manager.labels == []
        assert manager.preset_name is None

    def test_unknown_keys_ignored(self, tmp_path, config_dir):
        write(config_dir / "config.yaml", """
            cache:
              capacity: 5
              eviction: lru
        """)
        manager, config = load(tmp_path)
        assert config.cache.capacity == 5
        assert manager.cache.capacity == 5

    @pytest.mark.parametrize("value, expected", [
        ("infinite", "infinite"),
        ("INFINITE", "infinite"),
        (4, 4),
        ("7", 7),
    ])
    def test_iterations_parsing(self, value, expected):
        assert ConfigManager._parse_iterations(value) == expected

    def test_bundled_config_loads(self):
        manager = ConfigManager()
        config = manager.load()

        assert config.sequencer.iterations == "infinite"
        assert config.sequencer.tick_interval_ms == 16
        assert manager.labels[:2] == ["Loading", "Processing"]
        assert manager.preset_name == "Loading"
