"""TOML configuration loader for tsmscan."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

try:  # pragma: no cover - fallback for Python <3.11
    import tomllib
except ImportError:  # pragma: no cover - fallback path
    import tomli as tomllib

from ..inventory.models import EngineFormat
from .errors import ConfigurationError, PathValidationError
from .settings import DEFAULT_SETTINGS, Settings

logger = logging.getLogger(__name__)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def load_config_dict(path: Union[str, Path]) -> Dict[str, Any]:
    config_path = Path(path)
    try:
        with config_path.open("rb") as handle:
            return tomllib.load(handle)
    except FileNotFoundError as exc:
        raise ConfigurationError(
            str(config_path), "Configuration file not found"
        ) from exc
    except tomllib.TOMLDecodeError as exc:
        raise ConfigurationError(
            str(config_path), "Invalid TOML syntax", details=str(exc)
        ) from exc


class TOMLConfigLoader:
    """Load and validate tsmscan configuration files."""

    DEFAULT_CONFIG_NAME = "tsmscan.toml"

    def __init__(self, config_path: Optional[Union[str, Path]] = None):
        self.config_path = self._resolve_config_path(config_path)
        self.config_data = load_config_dict(self.config_path)

    @classmethod
    def from_dict(
        cls, data: Dict[str, Any], config_path: Optional[Path] = None
    ) -> "TOMLConfigLoader":
        loader = cls.__new__(cls)
        loader.config_path = config_path
        loader.config_data = dict(data)
        return loader

    # ------------------------------------------------------------------
    # Path resolution helpers
    # ------------------------------------------------------------------
    def _resolve_config_path(self, provided: Optional[Union[str, Path]]) -> Path:
        if provided:
            candidate = Path(provided)
            if candidate.exists():
                return candidate
            raise ConfigurationError(str(candidate), "Configuration file not found")

        found = self.find_config()
        if found is not None:
            return found

        searched = "\n".join(str(path) for path in self.search_paths())
        raise ConfigurationError(None, "Configuration file not found", details=searched)

    @classmethod
    def search_paths(cls) -> List[Path]:
        return [
            Path.cwd() / cls.DEFAULT_CONFIG_NAME,
            Path.home() / ".config" / "tsmscan" / cls.DEFAULT_CONFIG_NAME,
        ]

    @classmethod
    def find_config(cls) -> Optional[Path]:
        for candidate in cls.search_paths():
            if candidate.exists():
                return candidate
        return None

    # ------------------------------------------------------------------
    # Access helpers
    # ------------------------------------------------------------------
    def get_section(self, name: str) -> Dict[str, Any]:
        return dict(self.config_data.get(name, {}))

    def get_value(self, section: str, key: str, default: Any = None) -> Any:
        return self.get_section(section).get(key, default)

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------
    def validate_config(self) -> List[str]:
        errors: List[str] = []
        errors.extend(self._validate_paths())
        errors.extend(self._validate_detector_config())
        errors.extend(self._validate_report_config())
        errors.extend(self._validate_logging_config())
        return errors

    def _validate_paths(self) -> List[str]:
        errors: List[str] = []
        data_root = self.get_value("paths", "data_root")
        if data_root is not None and (not isinstance(data_root, str) or not data_root):
            errors.append("paths.data_root must be a non-empty string")
        return errors

    def _validate_detector_config(self) -> List[str]:
        errors: List[str] = []
        detector = self.get_section("detector")
        for key in ("open_timeout_sec", "lock_poll_interval_sec"):
            value = detector.get(key)
            if value is None:
                continue
            if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
                errors.append(f"detector.{key} must be a positive number")
        for key in ("meta_bucket", "format_key", "legacy_format_value"):
            value = detector.get(key)
            if value is not None and (not isinstance(value, str) or not value):
                errors.append(f"detector.{key} must be a non-empty string")
        return errors

    def _validate_report_config(self) -> List[str]:
        errors: List[str] = []
        report = self.get_section("report")
        exclude = report.get("exclude_format")
        if exclude not in (None, ""):
            try:
                EngineFormat.from_label(exclude)
            except ValueError as exc:
                errors.append(f"report.exclude_format: {exc}")
        databases = report.get("databases")
        if databases is not None and (
            not isinstance(databases, list)
            or not all(isinstance(name, str) and name for name in databases)
        ):
            errors.append("report.databases must be a list of database names")
        return errors

    def _validate_logging_config(self) -> List[str]:
        errors: List[str] = []
        level = self.get_value("logging", "level")
        if level is not None and str(level).upper() not in LOG_LEVELS:
            errors.append(f"logging.level must be one of {', '.join(LOG_LEVELS)}")
        return errors

    # ------------------------------------------------------------------
    # Settings construction
    # ------------------------------------------------------------------
    def create_settings(self, **overrides: Any) -> Settings:
        errors = self.validate_config()
        if errors:
            raise ConfigurationError(
                str(self.config_path) if self.config_path else None,
                "Invalid configuration",
                details="\n".join(errors),
            )

        paths = self.get_section("paths")
        detector = self.get_section("detector")
        report = self.get_section("report")
        logging_section = self.get_section("logging")

        defaults = DEFAULT_SETTINGS
        exclude = report.get("exclude_format", defaults.EXCLUDE_FORMAT)
        return Settings(
            DATA_ROOT=overrides.get(
                "data_root", paths.get("data_root", defaults.DATA_ROOT)
            ),
            OPEN_TIMEOUT_SEC=float(
                overrides.get(
                    "open_timeout",
                    detector.get("open_timeout_sec", defaults.OPEN_TIMEOUT_SEC),
                )
            ),
            LOCK_POLL_INTERVAL_SEC=float(
                detector.get(
                    "lock_poll_interval_sec", defaults.LOCK_POLL_INTERVAL_SEC
                )
            ),
            META_BUCKET=detector.get("meta_bucket", defaults.META_BUCKET),
            FORMAT_KEY=detector.get("format_key", defaults.FORMAT_KEY),
            LEGACY_FORMAT_VALUE=detector.get(
                "legacy_format_value", defaults.LEGACY_FORMAT_VALUE
            ),
            EXCLUDE_FORMAT=overrides.get("exclude_format", exclude or None),
            DATABASES=tuple(
                overrides.get("databases", report.get("databases", defaults.DATABASES))
            ),
            LOG_LEVEL=overrides.get(
                "log_level", logging_section.get("level", defaults.LOG_LEVEL)
            ).upper(),
            LOG_FILE=logging_section.get("file", defaults.LOG_FILE),
            LOG_FORMAT=logging_section.get("format", defaults.LOG_FORMAT),
        )

    def load_config(self, cli_overrides: Optional[Dict[str, Any]] = None) -> Settings:
        overrides = cli_overrides or {}
        return self.create_settings(**overrides)


def validate_data_root(settings: Settings) -> Path:
    """Return the data root as a Path, checking it is an existing directory."""
    root = Path(settings.DATA_ROOT)
    if not root.exists():
        raise PathValidationError(str(root), "does not exist")
    if not root.is_dir():
        raise PathValidationError(str(root))
    return root


def load_settings(
    config_path: Optional[Union[str, Path]] = None, **overrides: Any
) -> Settings:
    """Build Settings from a TOML file, or from defaults when none is found.

    An explicitly given ``config_path`` must exist; the default search
    locations are optional.
    """
    if config_path is None:
        config_path = TOMLConfigLoader.find_config()
    if config_path is None:
        logger.debug("No configuration file found, using defaults")
        return TOMLConfigLoader.from_dict({}).create_settings(**overrides)

    loader = TOMLConfigLoader(config_path)
    logger.debug(f"Loading configuration from {loader.config_path}")
    return loader.create_settings(**overrides)


def print_config(cfg: Settings) -> None:
    print("tsmscan Configuration")
    print("=" * 50)
    print("\n[PATHS]")
    print(f"Data Root: {cfg.DATA_ROOT}")

    print("\n[DETECTOR]")
    print(f"Open Timeout: {cfg.OPEN_TIMEOUT_SEC}s")
    print(f"Lock Poll Interval: {cfg.LOCK_POLL_INTERVAL_SEC}s")
    print(f"Meta Bucket: {cfg.META_BUCKET}")
    print(f"Format Key: {cfg.FORMAT_KEY}")

    print("\n[REPORT]")
    print(f"Exclude Format: {cfg.EXCLUDE_FORMAT or '-'}")
    print(f"Databases: {', '.join(cfg.DATABASES) or 'all'}")

    print("\n[LOGGING]")
    print(f"Level: {cfg.LOG_LEVEL}")
    print(f"File: {cfg.LOG_FILE or '-'}")


__all__ = [
    "ConfigurationError",
    "PathValidationError",
    "TOMLConfigLoader",
    "load_config_dict",
    "load_settings",
    "print_config",
    "validate_data_root",
]
