from .store import CACHE_FILE, ResultCache, fingerprint

__all__ = [
    "CACHE_FILE",
    "ResultCache",
    "fingerprint",
]
