from .client import RedisCacheClient

__all__ = ["RedisCacheClient"]
