"""Configuration loading utilities."""

from award_graph.config.loader import get_config, load_config_from_files, reload_config
from award_graph.config.schemas import PipelineConfig


def load_config():
    """Convenience function to load config with default paths.

    For use in notebooks and scripts where you don't need to specify paths.
    """
    return get_config()


__all__ = ["PipelineConfig", "get_config", "load_config", "load_config_from_files", "reload_config"]
