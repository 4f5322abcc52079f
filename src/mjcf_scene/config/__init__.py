from .loader import SceneConfig, load_config

__all__ = ["load_config", "SceneConfig"]
