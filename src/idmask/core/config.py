"""Configuration management for the ID masking system."""

from pathlib import Path

import yaml
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import (
    ConfigFileNotFoundError,
    ConfigLoadError,
    ConfigurationError,
    EmptyConfigFileError,
    InvalidYamlError,
    RatioOutOfRangeError,
)


class MaskingConfig(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="MASKING_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )
    """Thresholds for structure recovery, field matching and region synthesis."""

    # Structure recovery
    line_cluster_tolerance: float = Field(
        0.6, gt=0.0, description="Max center deviation, as a fraction of line height"
    )
    synthetic_line_height: int = Field(30, ge=1, description="Line pitch for text-only input")
    synthetic_word_width: int = Field(80, ge=1, description="Word width for text-only input")
    synthetic_word_gap: int = Field(10, ge=0, description="Word gap for text-only input")

    # Field grammars
    national_id_min_digits: int = Field(13, ge=1, description="Digits required for an ID number")
    license_min_digits: int = Field(10, ge=1, description="Digits required for a license number")

    # Address block
    address_max_follow_lines: int = Field(3, ge=0, description="Lines absorbed after the anchor")
    address_gap_factor: float = Field(2.5, gt=0.0, description="Max gap, in line heights")

    # Geometry
    colocation_tolerance_px: int = Field(10, ge=0, description="Same-row tolerance in pixels")
    vertical_padding_ratio: float = Field(0.15, description="Line box shrink, top and bottom")
    overlap_suppression_ratio: float = Field(
        0.3, description="Line coverage above which a line is not reported as other text"
    )

    @field_validator("overlap_suppression_ratio")
    @classmethod
    def validate_overlap_ratio(cls, v: float) -> float:
        if not (0.0 <= v <= 1.0):
            raise RatioOutOfRangeError("overlap_suppression_ratio")
        return v

    @field_validator("vertical_padding_ratio")
    @classmethod
    def validate_padding_ratio(cls, v: float) -> float:
        # Each side is shrunk, so more than half would invert the box
        if not (0.0 <= v < 0.5):
            raise RatioOutOfRangeError("vertical_padding_ratio")
        return v


class OCRConfig(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="OCR_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )
    """Settings for the Tesseract collaborator."""

    language: str = Field("kor+eng", description="Tesseract language string")
    timeout_seconds: int = Field(30, ge=0, description="Per-image timeout (0 disables)")
    tesseract_cmd: str | None = Field(None, description="Path to the tesseract binary")


class AppConfig(BaseSettings):
    """Main application configuration that loads from multiple sources."""

    model_config = SettingsConfigDict(
        env_prefix="APP_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    log_level: str = Field("INFO", description="Application log level")
    log_format: str = Field(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s", description="Log format"
    )

    masking: MaskingConfig = Field(default_factory=MaskingConfig)
    ocr: OCRConfig = Field(default_factory=OCRConfig)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level

    @classmethod
    def load_from_env(cls, env_file: str | Path | None = ".env") -> "AppConfig":
        """Load configuration from environment variables and .env file."""
        if env_file:
            env_file = Path(env_file)
            if env_file.exists():
                return cls(_env_file=env_file)
        return cls()

    @classmethod
    def load_with_overrides(
        cls,
        yaml_path: str | Path | None = None,
        env_file: str | Path | None = ".env",
    ) -> "AppConfig":
        """Load from env/.env, then let a YAML file replace the whole config."""
        if yaml_path:
            return cls.from_yaml(yaml_path)
        return cls.load_from_env(env_file)


def load_config_from_yaml(config_path: str | Path, config_class: type) -> BaseSettings:
    """Load configuration from YAML file."""
    config_path = Path(config_path)

    if not config_path.exists():
        raise ConfigFileNotFoundError(str(config_path))

    try:
        with config_path.open(encoding="utf-8") as f:
            config_data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise InvalidYamlError(str(config_path), str(e)) from e

    if config_data is None:
        raise EmptyConfigFileError(str(config_path))

    try:
        if issubclass(config_class, BaseSettings):
            # YAML values win; skip the .env file for this instance
            return config_class(_env_file=None, **config_data)
        return config_class(**config_data)
    except ConfigurationError:
        raise
    except Exception as e:
        raise ConfigLoadError(str(e)) from e


def _add_yaml_methods():
    """Add YAML loading methods to configuration classes."""

    @classmethod
    def from_yaml(cls, config_path: str | Path):
        """Load configuration from YAML file."""
        return load_config_from_yaml(config_path, cls)

    @classmethod
    def from_env_and_yaml(cls, yaml_path: str | Path | None = None, env_file: str = ".env"):
        """Load configuration from environment variables and optionally override with YAML."""
        if yaml_path and Path(yaml_path).exists():
            return cls.from_yaml(yaml_path)
        return cls(_env_file=env_file if Path(env_file).exists() else None)

    for config_class in [MaskingConfig, OCRConfig, AppConfig]:
        config_class.from_yaml = from_yaml
        config_class.from_env_and_yaml = from_env_and_yaml


_add_yaml_methods()
