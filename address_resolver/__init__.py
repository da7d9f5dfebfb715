"""
Address Resolver - Validazione indirizzi e geocodifica inversa con Google Maps Geocoding API
"""

__version__ = "1.0.0"
__author__ = "Address Resolver"

from .models import AddressInput, ReverseResult, ValidationVerdict
from .resolver import ReverseResolver
from .validator import AddressValidator

__all__ = [
    "AddressInput",
    "ReverseResult",
    "ValidationVerdict",
    "AddressValidator",
    "ReverseResolver",
    "__version__",
]
