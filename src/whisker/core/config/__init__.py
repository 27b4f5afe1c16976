"""Configuration: bundled YAML defaults, user file, WHISKER_* env overrides."""
from .base import BaseDomainConfig
from .cache import clear_all_caches, config_fingerprint, get_cached_config, is_cached, register_cache_clearer
from .domains import RenderConfig, TemplateConfig
from .manager import CONFIG_PATH_ENV, ConfigManager

__all__ = [
    "BaseDomainConfig",
    "ConfigManager",
    "CONFIG_PATH_ENV",
    "RenderConfig",
    "TemplateConfig",
    "clear_all_caches",
    "config_fingerprint",
    "get_cached_config",
    "is_cached",
    "register_cache_clearer",
]
