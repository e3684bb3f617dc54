from .models import GeneratorConfig, GrammarConfig, LoggingConfig, ShaderGenConfig
from .loader import ConfigLoader, load_config

__all__ = [
    "GeneratorConfig",
    "GrammarConfig",
    "LoggingConfig",
    "ShaderGenConfig",
    "ConfigLoader",
    "load_config",
]
