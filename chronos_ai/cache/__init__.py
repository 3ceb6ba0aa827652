from .cache_manager import CacheEntry, ResponseCache, make_cache_key, name_signature

__all__ = [
    "CacheEntry",
    "ResponseCache",
    "make_cache_key",
    "name_signature"
]
