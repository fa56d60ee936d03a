from .loader import load_config
from .models import GitreeConfig, SerializerConfig, StoreConfig

__all__ = [
    "GitreeConfig",
    "SerializerConfig",
    "StoreConfig",
    "load_config",
]
