from .canonical import CanonicalRequest, CanonicalResult

__all__ = ["CanonicalRequest", "CanonicalResult"]
