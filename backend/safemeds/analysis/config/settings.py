"""
Application Configuration

Settings and configuration management for the medication safety pipeline.
"""

from dataclasses import dataclass, field
from typing import Optional, Dict, Any
import os


@dataclass
class ModelConfig:
    """Generative model configuration."""

    type: str = "gemini"  # gemini, openai, ollama, dummy
    model: str = "gemini-2.5-flash"
    api_key: Optional[str] = None
    base_url: Optional[str] = None  # Override API endpoint (Ollama URL, proxies)
    timeout: int = 60  # Request timeout in seconds
    identification_temperature: Optional[float] = None  # None = model default
    reasoning_temperature: float = 0.0  # Lowest variance for reproducible verdicts


@dataclass
class OpenFDAConfig:
    """openFDA drug label API configuration."""

    base_url: str = "https://api.fda.gov/drug/label.json"
    api_key: Optional[str] = None
    timeout: int = 15
    max_summary_length: int = 5000


@dataclass
class PipelineConfig:
    """Pipeline orchestration configuration."""

    reference_data_enabled: bool = True
    validate_images: bool = True


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = "INFO"
    log_file: Optional[str] = None
    format: str = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"


@dataclass
class AppConfig:
    """
    Main application configuration.

    Aggregates all component configurations.
    """

    model: ModelConfig = field(default_factory=ModelConfig)
    openfda: OpenFDAConfig = field(default_factory=OpenFDAConfig)
    pipeline: PipelineConfig = field(default_factory=PipelineConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_env(cls) -> "AppConfig":
        """
        Create configuration from environment variables.

        Environment variables:
            SAFEMEDS_MODEL_TYPE: Model provider (gemini/openai/ollama/dummy)
            SAFEMEDS_MODEL: Model name
            SAFEMEDS_API_KEY: Model API key (falls back to GEMINI_API_KEY,
                API_KEY or OPENAI_API_KEY depending on the provider)
            SAFEMEDS_MODEL_BASE_URL: Model API base URL
            SAFEMEDS_MODEL_TIMEOUT: Model request timeout in seconds
            SAFEMEDS_REASONING_TEMPERATURE: Safety reasoning temperature
            SAFEMEDS_OPENFDA_URL: openFDA label endpoint
            SAFEMEDS_OPENFDA_API_KEY: openFDA API key
            SAFEMEDS_LOG_LEVEL: Logging level
            SAFEMEDS_LOG_FILE: Log file path
        """
        config = cls()

        # Model
        if model_type := os.getenv("SAFEMEDS_MODEL_TYPE"):
            config.model.type = model_type.lower()
            if config.model.type == "openai":
                config.model.model = "gpt-4o-mini"
            elif config.model.type == "ollama":
                config.model.model = "llama3.2-vision"
        if model := os.getenv("SAFEMEDS_MODEL"):
            config.model.model = model

        if api_key := os.getenv("SAFEMEDS_API_KEY"):
            config.model.api_key = api_key
        elif config.model.type == "openai":
            config.model.api_key = os.getenv("OPENAI_API_KEY")
        elif api_key := os.getenv("GEMINI_API_KEY"):
            config.model.api_key = api_key
        elif api_key := os.getenv("API_KEY"):
            config.model.api_key = api_key

        if base_url := os.getenv("SAFEMEDS_MODEL_BASE_URL"):
            config.model.base_url = base_url
        if timeout := os.getenv("SAFEMEDS_MODEL_TIMEOUT"):
            config.model.timeout = int(timeout)
        if temperature := os.getenv("SAFEMEDS_REASONING_TEMPERATURE"):
            config.model.reasoning_temperature = float(temperature)

        # openFDA
        if fda_url := os.getenv("SAFEMEDS_OPENFDA_URL"):
            config.openfda.base_url = fda_url
        if fda_key := os.getenv("SAFEMEDS_OPENFDA_API_KEY"):
            config.openfda.api_key = fda_key

        # Logging
        if log_level := os.getenv("SAFEMEDS_LOG_LEVEL"):
            config.logging.level = log_level.upper()
        if log_file := os.getenv("SAFEMEDS_LOG_FILE"):
            config.logging.log_file = log_file

        return config

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AppConfig":
        """Create configuration from dictionary. Unknown keys are ignored."""
        config = cls()

        for section in ("model", "openfda", "pipeline", "logging"):
            if section in data:
                target = getattr(config, section)
                for key, value in data[section].items():
                    if hasattr(target, key):
                        setattr(target, key, value)

        return config

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary. API keys are never included."""
        return {
            "model": {
                "type": self.model.type,
                "model": self.model.model,
                "base_url": self.model.base_url,
                "timeout": self.model.timeout,
                "identification_temperature": self.model.identification_temperature,
                "reasoning_temperature": self.model.reasoning_temperature,
            },
            "openfda": {
                "base_url": self.openfda.base_url,
                "timeout": self.openfda.timeout,
                "max_summary_length": self.openfda.max_summary_length,
            },
            "pipeline": {
                "reference_data_enabled": self.pipeline.reference_data_enabled,
                "validate_images": self.pipeline.validate_images,
            },
            "logging": {
                "level": self.logging.level,
                "log_file": self.logging.log_file,
            },
        }


def get_default_config() -> AppConfig:
    """Get default application configuration."""
    return AppConfig.from_env()
