# shadergen/config/models.py

import logging
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from ..core.grammar.rewrite import MAX_DEPTH_LIMIT


class GrammarConfig(BaseModel):
    path: Optional[str] = None  # None selects the bundled default grammar
    strict: bool = False        # Reject rules that cannot be expanded at the depth cap


class GeneratorConfig(BaseModel):
    max_depth: int = 10
    seed: Optional[int] = None
    channels: List[str] = Field(default_factory=lambda: ["r", "g", "b"])

    @field_validator('max_depth')
    @classmethod
    def validate_max_depth(cls, v: int) -> int:
        if not 1 <= v <= MAX_DEPTH_LIMIT:
            raise ValueError(f"max_depth must be between 1 and {MAX_DEPTH_LIMIT}, got {v}")
        return v

    @field_validator('channels')
    @classmethod
    def validate_channels(cls, v: List[str]) -> List[str]:
        if not v:
            raise ValueError("At least one channel is required")
        if len(set(v)) != len(v):
            raise ValueError(f"Channel names must be unique, got {v}")
        return v


class LoggingConfig(BaseModel):
    level: str = "INFO"
    log_file: Optional[str] = None

    @field_validator('level')
    @classmethod
    def validate_level(cls, v: str) -> str:
        level = v.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown logging level '{v}'")
        return level


class ShaderGenConfig(BaseModel):
    grammar: GrammarConfig = Field(default_factory=GrammarConfig)
    generator: GeneratorConfig = Field(default_factory=GeneratorConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
