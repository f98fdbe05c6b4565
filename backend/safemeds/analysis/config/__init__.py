"""
Configuration Module

Application settings and configuration management.
"""

from .settings import (
    AppConfig,
    ModelConfig,
    OpenFDAConfig,
    PipelineConfig,
    LoggingConfig,
    get_default_config,
)

__all__ = [
    "AppConfig",
    "ModelConfig",
    "OpenFDAConfig",
    "PipelineConfig",
    "LoggingConfig",
    "get_default_config",
]
