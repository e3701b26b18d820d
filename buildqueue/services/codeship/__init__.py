# Codeship services - Codeship API integration
from .client import CodeshipClient

__all__ = ["CodeshipClient"]
