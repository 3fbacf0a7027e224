"""Configuration module — exports Settings, RecommendationConfig and load_config."""

from showrec.config.loader import load_config
from showrec.config.recommendation import BlendWeights, RecommendationConfig
from showrec.config.settings import Settings

__all__ = ["BlendWeights", "RecommendationConfig", "Settings", "load_config"]
