"""
Config Manager

Loads the YAML configuration (with include system support) and builds the
typed AppConfig used by the engine, editor and logger.
"""

import yaml
from dataclasses import fields
from pathlib import Path
from typing import Any, Dict, List, Optional, Type, TypeVar

from models.config import (
    AppConfig,
    SequencerSettings,
    OrchestratorSettings,
    CacheSettings,
    EditorSettings,
    LoggingSettings,
)
from models.enums import LogLevel
from models.pattern import INFINITE
from utils.logger import get_logger, LogCategory
from utils.serialization import Serializer

log = get_logger().for_category(LogCategory.CONFIG)

TSettings = TypeVar("TSettings")


class ConfigManager:
    """
    Main configuration manager with include system support

    Loads config.yaml and processes the include: directive to merge modular
    YAML files. Falls back to factory_defaults.yaml if anything goes wrong.

    Example:
        config_manager = ConfigManager()
        config = config_manager.load()

        tempo = config.sequencer.tempo_ms
        labels = config_manager.labels
    """

    def __init__(
        self,
        config_path: str = "config/config.yaml",
        defaults_path: str = "config/factory_defaults.yaml",
        base_dir: Optional[Path] = None
    ):
        """
        Initialize ConfigManager

        Args:
            config_path: Path to main config.yaml (relative to base_dir)
            defaults_path: Path to factory defaults fallback
            base_dir: Directory paths are resolved against (default: src/)
        """
        self.base_dir = Path(base_dir) if base_dir else Path(__file__).parent.parent
        self.config_path = Path(config_path)
        self.factory_defaults_path = Path(defaults_path)
        self.data: Dict[str, Any] = {}
        self.config = AppConfig()

    def load(self) -> AppConfig:
        """
        Load YAML configuration with include system support

        Process:
        1. Load main config.yaml
        2. If it has 'include:' list, load and merge those files
        3. Otherwise treat as monolithic config
        4. Fallback to factory defaults on failure
        5. Build typed settings

        Returns:
            AppConfig built from the merged data
        """
        try:
            full_path = self.base_dir / self.config_path
            with open(full_path, "r", encoding="utf-8") as f:
                main_config = yaml.safe_load(f) or {}

            if not isinstance(main_config, dict):
                raise ValueError(f"{self.config_path} must contain a mapping")

            if 'include' in main_config:
                log.info("Using include-based configuration")
                self.data = self._load_with_includes(main_config['include'], full_path.parent)
                self.data.update({k: v for k, v in main_config.items() if k != 'include'})
            else:
                log.info("Using monolithic configuration")
                self.data = main_config

            self.config = self._build_config(self.data)

        except Exception as ex:
            log.error("Failed to load config.yaml", error=str(ex), error_type=type(ex).__name__)
            log.warn("Falling back to factory defaults")
            self.data = self._load_factory_defaults()
            self.config = self._build_config(self.data)

        return self.config

    def _load_factory_defaults(self) -> Dict[str, Any]:
        defaults_path = self.base_dir / self.factory_defaults_path
        try:
            with open(defaults_path, "r", encoding="utf-8") as f:
                return yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as ex:
            log.error("Failed to load factory defaults, using built-in values", error=str(ex))
            return {}

    def _load_with_includes(self, include_list: List[str], config_dir: Path) -> Dict[str, Any]:
        """
        Load and merge multiple YAML files from include list

        Args:
            include_list: List of filenames to load (e.g., ["playback.yaml", "editor.yaml"])
            config_dir: Directory containing config files

        Returns:
            Merged config dict (later files win on duplicate keys)
        """
        merged: Dict[str, Any] = {}

        for filename in include_list:
            filepath = config_dir / filename
            try:
                with open(filepath, 'r', encoding='utf-8') as f:
                    file_data = yaml.safe_load(f)
                    if file_data:
                        merged.update(file_data)
                        log.info(f"Loaded {filename}", keys=str(list(file_data.keys())))
            except FileNotFoundError:
                log.error(f"File not found: {filename}")
                raise
            except Exception as ex:
                log.error(f"Error loading {filename}", error=str(ex))
                raise

        log.info("Config merge complete", total_keys=len(merged), keys=str(list(merged.keys())[:10]))
        return merged

    # ===== Typed settings =====

    def _build_config(self, data: Dict[str, Any]) -> AppConfig:
        logging_data = dict(data.get("logging") or {})
        if "level" in logging_data:
            logging_data["level"] = Serializer.str_to_enum(str(logging_data["level"]), LogLevel)

        sequencer_data = dict(data.get("sequencer") or {})
        if "iterations" in sequencer_data:
            sequencer_data["iterations"] = self._parse_iterations(sequencer_data["iterations"])

        return AppConfig(
            sequencer=self._section("sequencer", sequencer_data, SequencerSettings),
            orchestrator=self._section("orchestrator", data.get("orchestrator"), OrchestratorSettings),
            cache=self._section("cache", data.get("cache"), CacheSettings),
            editor=self._section("editor", data.get("editor"), EditorSettings),
            logging=self._section("logging", logging_data, LoggingSettings),
            raw=data,
        )

    @staticmethod
    def _section(name: str, section: Optional[Dict[str, Any]], settings_type: Type[TSettings]) -> TSettings:
        """Build one settings dataclass, ignoring unknown keys"""
        section = section or {}
        known = {f.name for f in fields(settings_type)}

        unknown = sorted(set(section) - known)
        if unknown:
            log.warn(f"Ignoring unknown keys in '{name}'", keys=str(unknown))

        return settings_type(**{k: v for k, v in section.items() if k in known})

    @staticmethod
    def _parse_iterations(value: Any):
        if isinstance(value, str) and value.lower() == INFINITE:
            return INFINITE
        iterations = int(value)
        if iterations < 1:
            raise ValueError(f"sequencer.iterations must be >= 1 or '{INFINITE}', got {value}")
        return iterations

    # ===== Accessors =====

    @property
    def sequencer(self) -> SequencerSettings:
        return self.config.sequencer

    @property
    def orchestrator(self) -> OrchestratorSettings:
        return self.config.orchestrator

    @property
    def cache(self) -> CacheSettings:
        return self.config.cache

    @property
    def editor(self) -> EditorSettings:
        return self.config.editor

    @property
    def logging(self) -> LoggingSettings:
        return self.config.logging

    @property
    def labels(self) -> List[str]:
        """Label list for the TransitionOrchestrator demo"""
        return [str(label) for label in self.data.get("labels", [])]

    @property
    def preset_name(self) -> Optional[str]:
        """Preset played by the demo runner"""
        return self.data.get("preset")
