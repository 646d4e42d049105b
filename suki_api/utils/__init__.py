"""
==============================================================================
Utilities Package
==============================================================================

Modules:
--------
- validators: Store id parsing and short code normalization

==============================================================================
"""

from .validators import ShortCodeValidator, StoreIdParser

__all__ = [
    "ShortCodeValidator",
    "StoreIdParser",
]
