# src/qbank/config.py
"""Configuration loading utilities for qbank.

This module provides configuration loading for the CLI and for applications
using qbank as a library. It handles:
- Finding and loading qbank.yaml config files
- Loading .env files for API keys
- Building Settings objects from YAML and QBANK_* environment variables
- Checking which external services are configured
- Creating QBank instances from configuration
"""

from __future__ import annotations

import os
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any

import yaml
from pydantic import ValidationError

from qbank.settings import Settings

if TYPE_CHECKING:
    from qbank.qbank import QBank
    from qbank.stores import VectorStore

CONFIG_FILES = ["qbank.yaml", "qbank.yml", ".qbankrc"]
ENV_FILE = ".env"

BACKENDS = ("pinecone", "chroma")
DEFAULT_BACKEND = "pinecone"
DEFAULT_INDEX_NAME = "ai-math-tutor-v2"
DEFAULT_CHROMA_DIR = "./qbank_data/chroma"

# Environment variable holding the key for each LiteLLM provider prefix
PROVIDER_KEY_ENV = {
    "openai": "OPENAI_API_KEY",
    "azure": "AZURE_API_KEY",
    "gemini": "GEMINI_API_KEY",
    "vertex_ai": "GOOGLE_APPLICATION_CREDENTIALS",
    "bedrock": "AWS_ACCESS_KEY_ID",
    "cohere": "COHERE_API_KEY",
    "mistral": "MISTRAL_API_KEY",
    "voyage": "VOYAGE_API_KEY",
}


@dataclass
class ConfigError:
    """Error during configuration loading."""

    message: str
    suggestion: str | None = None


def load_env_file(env_path: str | Path = ENV_FILE) -> None:
    """Load environment variables from a .env file if it exists.

    Existing environment variables are never overridden.

    Args:
        env_path: Path to .env file (default: .env in current directory)
    """
    path = Path(env_path)
    if not path.exists():
        return

    with open(path, encoding="utf-8") as f:
        for line in f:
            line = line.strip()
            if not line or line.startswith("#") or "=" not in line:
                continue
            key, _, value = line.partition("=")
            key = key.strip()
            if key.startswith("export "):
                key = key[len("export ") :].strip()
            value = value.strip().strip("'\"")
            if key and key not in os.environ:
                os.environ[key] = value


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """Find a configuration file in the start directory or its parents.

    Args:
        start_dir: Directory to start searching from (default: cwd)

    Returns:
        Path to config file if found, None otherwise
    """
    current = start_dir or Path.cwd()
    for _ in range(10):  # Limit search depth
        for config_name in CONFIG_FILES:
            config_path = current / config_name
            if config_path.exists():
                return config_path
        parent = current.parent
        if parent == current:
            break
        current = parent
    return None


VALID_ROOT_KEYS = {
    "backend",
    "embedding_model",
    "pinecone_index",
    "pinecone_host",
    "chroma_dir",
    "namespace",
    "settings",
}

VALID_SETTINGS_KEYS = set(Settings.model_fields)


def validate_config(config: dict[str, Any], config_path: Path | None = None) -> list[str]:
    """Validate config and return warnings about unknown keys.

    Args:
        config: The loaded configuration dictionary
        config_path: Path to config file (for error messages)

    Returns:
        List of warning messages (empty if no issues)
    """
    warnings = []

    unknown_root = set(config.keys()) - VALID_ROOT_KEYS
    if unknown_root:
        path_str = str(config_path) if config_path else "config"
        warnings.append(f"Unknown config keys in {path_str}: {', '.join(sorted(unknown_root))}")

    settings = config.get("settings", {})
    if isinstance(settings, dict):
        unknown_settings = set(settings.keys()) - VALID_SETTINGS_KEYS
        if unknown_settings:
            warnings.append(f"Unknown settings keys: {', '.join(sorted(unknown_settings))}")

    return warnings


def load_config(config_path: Path | str | None = None) -> dict[str, Any]:
    """Load configuration from a YAML file.

    Args:
        config_path: Explicit path to config file, or None to search

    Returns:
        Configuration dictionary (empty if no config found)
    """
    config_path = Path(config_path) if config_path is not None else find_config_file()
    if config_path is None:
        return {}

    with open(config_path, encoding="utf-8") as f:
        config = yaml.safe_load(f) or {}

    if not isinstance(config, dict):
        raise ValueError(f"{config_path} must contain a mapping at the top level")
    return config


def _safe_int(value: str | None) -> int | None:
    """Parse int from string, returning None on invalid value."""
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        return None


def _safe_float(value: str | None) -> float | None:
    if value is None:
        return None
    try:
        return float(value)
    except ValueError:
        return None


_ENV_SETTINGS: dict[str, tuple[str, Callable[[str | None], Any]]] = {
    "QBANK_NAMESPACE": ("namespace", lambda v: v or None),
    "QBANK_TOP_K": ("top_k", _safe_int),
    "QBANK_REQUEST_TIMEOUT": ("request_timeout", _safe_float),
    "QBANK_EMBEDDING_MODEL": ("embedding_model", lambda v: v or None),
    "QBANK_EMBEDDING_DIMENSIONS": ("embedding_dimensions", _safe_int),
    "QBANK_EMBEDDING_BATCH_SIZE": ("embedding_batch_size", _safe_int),
    "QBANK_UPSERT_BATCH_SIZE": ("upsert_batch_size", _safe_int),
    "QBANK_LIST_PAGE_SIZE": ("list_page_size", _safe_int),
    "QBANK_MAX_LIST_PAGES": ("max_list_pages", _safe_int),
    "QBANK_NUM_RETRIES": ("num_retries", _safe_int),
}


def get_settings_from_env() -> dict[str, Any]:
    """Read behavioral settings from QBANK_* environment variables.

    Only variables that are set and parse cleanly are returned, so YAML
    settings stay in effect unless explicitly overridden.
    """
    result: dict[str, Any] = {}
    for env_name, (setting, parse) in _ENV_SETTINGS.items():
        if env_name not in os.environ:
            continue
        value = parse(os.environ[env_name])
        if value is not None:
            result[setting] = value
    return result


def get_settings_from_yaml(config: dict[str, Any]) -> dict[str, Any]:
    """Extract settings from a YAML config.

    Settings live under a 'settings:' section; ``namespace`` and
    ``embedding_model`` are also accepted at the root.
    """
    result: dict[str, Any] = {}
    for key in ("namespace", "embedding_model"):
        if config.get(key):
            result[key] = config[key]

    yaml_settings = config.get("settings", {}) or {}
    for key in VALID_SETTINGS_KEYS:
        if key in yaml_settings:
            result[key] = yaml_settings[key]
    return result


def build_settings(
    config: dict[str, Any] | None = None,
    env_settings: dict[str, Any] | None = None,
) -> Settings:
    """Build a Settings object from YAML config and env vars.

    Precedence (highest to lowest):
    1. Environment variables
    2. YAML config
    3. Settings class defaults

    Raises:
        pydantic.ValidationError: If a value is out of range.
    """
    config = config or {}
    yaml_settings = get_settings_from_yaml(config)
    env_settings = env_settings if env_settings is not None else get_settings_from_env()
    return Settings(**{**yaml_settings, **env_settings})


def provider_key_env(model: str) -> str | None:
    """Environment variable LiteLLM reads the key for ``model`` from."""
    prefix = model.split("/", 1)[0].lower() if "/" in model else "openai"
    return PROVIDER_KEY_ENV.get(prefix)


def is_local_model(model: str) -> bool:
    """Check if a model runs locally (doesn't need an API key)."""
    model_lower = model.lower()
    return any(pattern in model_lower for pattern in ("ollama", "local", "llama.cpp", "llamacpp"))


@dataclass
class QBankConfig:
    """Configuration for creating a QBank instance."""

    backend: str
    settings: Settings
    embedding_api_key: str | None = None
    pinecone_api_key: str | None = None
    pinecone_index: str = DEFAULT_INDEX_NAME
    pinecone_host: str | None = None
    chroma_dir: str | None = None
    config_path: str | None = None
    warnings: list[str] = field(default_factory=list)

    def is_embedding_configured(self) -> bool:
        """True if the embedding provider has a credential (or needs none)."""
        model = self.settings.embedding_model
        if self.embedding_api_key or is_local_model(model):
            return True
        env_name = provider_key_env(model)
        return bool(env_name and os.environ.get(env_name))

    def is_vector_store_configured(self) -> bool:
        """True if the selected backend has what it needs to connect."""
        if self.backend == "chroma":
            return bool(self.chroma_dir)
        return bool(self.pinecone_api_key and self.pinecone_index)

    @property
    def is_configured(self) -> bool:
        return self.is_embedding_configured() and self.is_vector_store_configured()


def get_qbank_config(config_path: str | Path | None = None) -> QBankConfig | ConfigError:
    """Get configuration for creating a QBank instance.

    Missing credentials are not an error here; they are reported through
    QBankConfig.is_embedding_configured / is_vector_store_configured.

    Args:
        config_path: Override config file path

    Returns:
        QBankConfig with all settings, or ConfigError if invalid
    """
    resolved_path = Path(config_path) if config_path is not None else find_config_file()
    try:
        config = load_config(resolved_path)
    except (OSError, yaml.YAMLError, ValueError) as e:
        return ConfigError(
            message=f"Could not read config: {e}",
            suggestion="Check the YAML syntax in qbank.yaml",
        )

    backend = (os.environ.get("QBANK_BACKEND") or config.get("backend") or DEFAULT_BACKEND).lower()
    if backend not in BACKENDS:
        return ConfigError(
            message=f"Unknown backend '{backend}'",
            suggestion=f"Supported backends: {', '.join(BACKENDS)}",
        )

    try:
        settings = build_settings(config)
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()
        )
        return ConfigError(
            message=f"Invalid settings: {problems}",
            suggestion="Check the settings section of qbank.yaml and QBANK_* variables",
        )

    chroma_dir = os.environ.get("QBANK_CHROMA_DIR") or config.get("chroma_dir")
    if backend == "chroma" and not chroma_dir:
        chroma_dir = DEFAULT_CHROMA_DIR

    return QBankConfig(
        backend=backend,
        settings=settings,
        embedding_api_key=os.environ.get("QBANK_EMBEDDING_API_KEY") or None,
        pinecone_api_key=os.environ.get("PINECONE_API_KEY") or None,
        pinecone_index=(
            os.environ.get("PINECONE_INDEX_NAME")
            or config.get("pinecone_index")
            or DEFAULT_INDEX_NAME
        ),
        pinecone_host=os.environ.get("PINECONE_INDEX_HOST") or config.get("pinecone_host"),
        chroma_dir=chroma_dir,
        config_path=str(resolved_path) if resolved_path else None,
        warnings=validate_config(config, resolved_path),
    )


def create_store(config: QBankConfig) -> VectorStore:
    """Create the vector store selected by the configuration."""
    from qbank.stores import ChromaVectorStore, PineconeVectorStore

    settings = config.settings
    store_kwargs: dict[str, Any] = {
        "dimension": settings.embedding_dimensions,
        "upsert_batch_size": settings.upsert_batch_size,
        "list_page_size": settings.list_page_size,
        "max_list_pages": settings.max_list_pages,
    }

    if config.backend == "chroma":
        return ChromaVectorStore(config.chroma_dir or DEFAULT_CHROMA_DIR, **store_kwargs)
    if config.backend == "pinecone":
        return PineconeVectorStore(
            api_key=config.pinecone_api_key,
            index_name=config.pinecone_index,
            index_host=config.pinecone_host,
            **store_kwargs,
        )
    raise ValueError(f"Unknown backend: {config.backend}")


def create_qbank(config: QBankConfig) -> QBank:
    """Create a QBank instance from configuration.

    The instance is disabled (retrieval returns empty contexts without any
    network call) when embedding or vector store credentials are missing.
    """
    from qbank.qbank import QBank

    return QBank.with_litellm(
        store=create_store(config),
        settings=config.settings,
        api_key=config.embedding_api_key,
        enabled=config.is_configured,
    )


def get_qbank(config_path: str | Path | None = None) -> QBank | ConfigError:
    """Create a QBank instance based on configuration.

    Convenience wrapper around get_qbank_config and create_qbank.
    """
    config = get_qbank_config(config_path)
    if isinstance(config, ConfigError):
        return config
    return create_qbank(config)
