"""
Pipeline configuration management.

Loads pipeline settings from an optional YAML file and applies
environment overrides for provider credentials.
"""

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from fontcatalog.core.exceptions import ConfigError

DEFAULT_SAMPLE_TEXT = "The Quick Brown\nFox jumps over\nthe lazy dog!"


class SourceLayout(BaseModel):
    """File names expected inside each record folder."""

    metadata_file: str = "METADATA.pb"
    description_file: str = "DESCRIPTION.en_us.html"
    article_dir: str = "article"
    article_file: str = "ARTICLE.en_us.html"
    date_field: str = "date_added"


class RenderSettings(BaseModel):
    """Sample image rendered for the vision model."""

    width: int = Field(1024, gt=0)
    height: int = Field(512, gt=0)
    font_size: int = Field(96, gt=0)
    margin: int = Field(20, ge=0)
    sample_text: str = DEFAULT_SAMPLE_TEXT


class ProviderSettings(BaseModel):
    """AI provider endpoint, credentials and model names."""

    base_url: str = "https://api.mistral.ai/v1"
    api_key: str | None = None
    timeout_seconds: float = Field(60.0, gt=0)
    vision_model: str = "pixtral-large-latest"
    rewrite_model: str = "mistral-large-latest"
    embedding_model: str = "mistral-embed"


class PipelineConfig(BaseModel):
    """
    Complete pipeline configuration.

    Attributes:
        source: Record folder layout
        render: Sample image settings
        provider: AI provider settings
        font_extensions: Extensions that mark a font file
        variant_markers: Name fragments that mark a style variant file
        preferred_marker: Name fragment preferred among equal variant status
        exclusions: Record id substrings that are always skipped (case-insensitive)
        delay_seconds: Blocking pause between records
        classify_enabled: Call the vision model for descriptors
        advanced_summary: Rewrite the composed summary with the chat model
        lookup_url_template: Template for the per-font lookup URL
        report_dir: Directory receiving batch reports
    """

    source: SourceLayout = Field(default_factory=SourceLayout)
    render: RenderSettings = Field(default_factory=RenderSettings)
    provider: ProviderSettings = Field(default_factory=ProviderSettings)
    font_extensions: list[str] = Field(default_factory=lambda: [".ttf", ".otf"])
    variant_markers: list[str] = Field(default_factory=lambda: ["Italic", "Bold", "Black"])
    preferred_marker: str = "Regular"
    exclusions: list[str] = Field(default_factory=lambda: ["jsmath"])
    delay_seconds: float = Field(0.125, ge=0.0)
    classify_enabled: bool = True
    advanced_summary: bool = True
    lookup_url_template: str = "https://fonts.google.com/specimen/{name}"
    report_dir: str = "reports"

    @field_validator("font_extensions")
    @classmethod
    def normalize_extensions(cls, v: list[str]) -> list[str]:
        """Lower-case extensions and make sure each starts with a dot."""
        return [ext.lower() if ext.startswith(".") else f".{ext.lower()}" for ext in v]

    @field_validator("lookup_url_template")
    @classmethod
    def check_url_placeholder(cls, v: str) -> str:
        if "{name}" not in v:
            raise ValueError("lookup_url_template must contain a '{name}' placeholder")
        return v


class PipelineConfigLoader:
    """
    Loads pipeline configuration from YAML plus environment.

    Expected YAML format (every key optional):
    ```yaml
    exclusions: [jsmath]
    delay_seconds: 0.125
    advanced_summary: true
    provider:
      vision_model: pixtral-large-latest
      embedding_model: mistral-embed
    render:
      font_size: 96
    ```

    Environment overrides: MISTRAL_API_KEY, MISTRAL_BASE_URL.
    """

    def __init__(self, config_path: str | Path | None = None):
        """
        Initialize the config loader.

        Args:
            config_path: Path to a YAML file, or None for defaults only

        Raises:
            FileNotFoundError: If a path is given but does not exist
        """
        self.config_path = Path(config_path) if config_path else None
        if self.config_path is not None and not self.config_path.exists():
            raise FileNotFoundError(f"Pipeline configuration file not found: {config_path}")

    def load(self) -> PipelineConfig:
        """
        Load, merge and validate the configuration.

        Returns:
            Validated PipelineConfig

        Raises:
            ConfigError: If the YAML is not a mapping or fails validation
        """
        raw = self._read_yaml()
        self._apply_env_overrides(raw)

        try:
            return PipelineConfig.model_validate(raw)
        except ValidationError as e:
            raise ConfigError(f"Invalid pipeline configuration: {e}") from e

    def _read_yaml(self) -> dict[str, Any]:
        if self.config_path is None:
            return {}

        with open(self.config_path) as f:
            config = yaml.safe_load(f)

        if config is None:
            return {}
        if not isinstance(config, dict):
            raise ConfigError("Configuration file must contain a mapping at the top level")
        return config

    def _apply_env_overrides(self, raw: dict[str, Any]) -> None:
        provider = raw.setdefault("provider", {})
        if not isinstance(provider, dict):
            raise ConfigError("'provider' section must be a mapping")

        api_key = os.getenv("MISTRAL_API_KEY")
        if api_key:
            provider["api_key"] = api_key

        base_url = os.getenv("MISTRAL_BASE_URL")
        if base_url:
            provider["base_url"] = base_url
