"""
Benchmark Configuration Module

Provides the packaged protocol defaults (benchmark_config.yaml) and the
user-facing Configuration model that travels to every worker process.
"""

from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml
from pydantic import BaseModel, Field, ValidationError

from docscan_bench.domain.errors import ConfigurationError, DocumentFileNotFound

# Cache for the packaged defaults
_config_cache: Optional[Dict[str, Any]] = None

# Config directory path
CONFIG_DIR = Path(__file__).parent

DEFAULT_USER_CONFIG_PATH = Path.home() / ".docscan" / "docscan-config.yaml"


def get_config() -> Dict[str, Any]:
    """
    Load the packaged benchmark defaults.

    Returns cached config on subsequent calls.

    Returns:
        Dict with the models, processing and benchmark sections
    """
    global _config_cache

    if _config_cache is not None:
        return _config_cache

    config_path = CONFIG_DIR / "benchmark_config.yaml"

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, 'r') as f:
        _config_cache = yaml.safe_load(f)

    return _config_cache


def get_benchmark_setting(key: str) -> Any:
    return get_config()["benchmark"][key]


def reload_config() -> None:
    """
    Clear config cache and reload from disk.

    Useful for testing or dynamic config updates.
    """
    global _config_cache
    _config_cache = None


def _default(section: str, key: str) -> Any:
    return get_config()[section][key]


class ProcessingSettings(BaseModel):
    """Generation and rendering parameters."""

    max_tokens: int = Field(default_factory=lambda: _default("processing", "max_tokens"), gt=0)
    temperature: float = Field(default_factory=lambda: _default("processing", "temperature"), ge=0.0, le=2.0)
    pdf_dpi: int = Field(default_factory=lambda: _default("processing", "pdf_dpi"), gt=0)


class BenchmarkSettings(BaseModel):
    """Candidate lists; None means use the packaged defaults."""

    hugging_face_username: Optional[str] = None
    visual_models: Optional[List[str]] = None
    text_models: Optional[List[str]] = None


class Configuration(BaseModel):
    """
    Runtime configuration.

    Serialized into every worker input, so it must stay JSON-compatible.

    Attributes:
        visual_model_name: Current visual model, also the ground truth oracle
        text_model_name: Current text model, also the ground truth oracle
        model_cache_dir: Hugging Face cache override, the hub default when None
        processing: Generation and rendering parameters
        verbose: Print per-document progress
        benchmark: Candidate model overrides
    """

    visual_model_name: str = Field(default_factory=lambda: _default("models", "visual_model_name"))
    text_model_name: str = Field(default_factory=lambda: _default("models", "text_model_name"))
    model_cache_dir: Optional[str] = None
    processing: ProcessingSettings = Field(default_factory=ProcessingSettings)
    verbose: bool = False
    benchmark: BenchmarkSettings = Field(default_factory=BenchmarkSettings)

    def with_models(self, visual_model_name: str, text_model_name: str) -> "Configuration":
        return self.model_copy(
            update={"visual_model_name": visual_model_name, "text_model_name": text_model_name}
        )

    def candidate_visual_models(self) -> List[str]:
        return list(self.benchmark.visual_models or get_benchmark_setting("default_visual_models"))

    def candidate_text_models(self) -> List[str]:
        return list(self.benchmark.text_models or get_benchmark_setting("default_text_models"))


def load_configuration(path: Optional[Union[str, Path]] = None) -> Configuration:
    """
    Load a user configuration file.

    Args:
        path: Explicit config path. When omitted, ~/.docscan/docscan-config.yaml
            is used if it exists, otherwise the packaged defaults.

    Returns:
        Validated Configuration

    Raises:
        DocumentFileNotFound: If an explicit path does not exist
        ConfigurationError: If the file is not valid YAML or fails validation
    """
    if path is None:
        if not DEFAULT_USER_CONFIG_PATH.exists():
            return Configuration()
        path = DEFAULT_USER_CONFIG_PATH

    config_path = Path(path).expanduser()
    if not config_path.exists():
        raise DocumentFileNotFound(str(config_path))

    try:
        with open(config_path, 'r') as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigurationError(f"{config_path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationError(f"{config_path}: expected a mapping at top level")

    try:
        return Configuration.model_validate(data)
    except ValidationError as e:
        raise ConfigurationError(f"{config_path}: {e}") from e


def save_configuration(config: Configuration, path: Union[str, Path]) -> Path:
    """Write config as YAML, creating parent directories."""
    config_path = Path(path).expanduser()
    config_path.parent.mkdir(parents=True, exist_ok=True)
    with open(config_path, 'w') as f:
        yaml.safe_dump(config.model_dump(mode="json", exclude_none=True), f, sort_keys=False)
    return config_path


__all__ = [
    'CONFIG_DIR',
    'DEFAULT_USER_CONFIG_PATH',
    'get_config',
    'get_benchmark_setting',
    'reload_config',
    'ProcessingSettings',
    'BenchmarkSettings',
    'Configuration',
    'load_configuration',
    'save_configuration',
]
