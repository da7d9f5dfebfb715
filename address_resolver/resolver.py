"""
Geocodifica inversa: da coordinate a indirizzo strutturato.
"""

import logging
from typing import Optional

from .cache import Cache, MemoryCache
from .components import find_component, first_long_name, parse_formatted_address
from .config import (
    DEFAULT_COUNTRY,
    DEFAULT_LANGUAGE,
    FALLBACK_LANGUAGE,
    REVERSE_CACHE_TTL,
    REVERSE_COMPONENT_TYPES,
    messages_for,
)
from .geocoding import with_language_fallback
from .models import GeometryPrecision, ProviderResult, ReverseLookup, ReverseOutcome, ReverseResult

logger = logging.getLogger(__name__)


def _precision_rank(result: ProviderResult) -> int:
    # Precisione assente o sconosciuta in coda
    if result.geometry_precision is None:
        return len(GeometryPrecision)
    return result.geometry_precision.rank


def most_precise(results: list[ProviderResult]) -> ProviderResult:
    """Restituisce il candidato più preciso; a parità vince l'ordine di Google."""
    return sorted(results, key=_precision_rank)[0]


def build_reverse_result(result: ProviderResult, default_country: str = DEFAULT_COUNTRY) -> ReverseResult:
    """
    Ricostruisce l'indirizzo dal candidato scelto.

    I componenti strutturati hanno la precedenza; via e civico mancanti
    vengono ricavati dall'indirizzo formattato.

    Args:
        result: Candidato scelto
        default_country: Paese usato se nessun componente lo indica

    Returns:
        ReverseResult completo
    """
    components = result.address_components
    formatted = result.formatted_address or ""

    country = first_long_name(components, REVERSE_COMPONENT_TYPES["country"])
    city = first_long_name(components, REVERSE_COMPONENT_TYPES["city"])
    street = first_long_name(components, REVERSE_COMPONENT_TYPES["street"])
    number = first_long_name(components, REVERSE_COMPONENT_TYPES["number"])

    if not street or not number:
        parsed = parse_formatted_address(formatted)
        if parsed is not None:
            street, number = parsed

    if not country:
        country_comp = find_component(components, ["country"])
        if country_comp is not None:
            country = country_comp.short_name

    return ReverseResult(
        country=country or default_country,
        city=city,
        street=street,
        number=number,
        formatted_address=formatted,
        geometry_precision=result.geometry_precision,
    )


class ReverseResolver:
    """Risolve coordinate in indirizzi, con cache per (lat, lng, lingua)."""

    def __init__(
        self,
        geocoder,
        cache: Optional[Cache] = None,
        ttl: float = REVERSE_CACHE_TTL,
        default_country: str = DEFAULT_COUNTRY,
        fallback_language: str = FALLBACK_LANGUAGE,
    ):
        """
        Args:
            geocoder: Oggetto con metodo reverse_geocode(latitude, longitude, language)
            cache: Cache con get/set; se None ne viene creata una in memoria
            ttl: Durata delle voci in cache (secondi)
            default_country: Paese di default
            fallback_language: Lingua del secondo tentativo
        """
        self.geocoder = geocoder
        self.cache = cache if cache is not None else MemoryCache()
        self.ttl = ttl
        self.default_country = default_country
        self.fallback_language = fallback_language

    def reverse(
        self,
        latitude: Optional[float],
        longitude: Optional[float],
        language: str = DEFAULT_LANGUAGE,
    ) -> ReverseLookup:
        """
        Geocodifica inversa di una posizione.

        Args:
            latitude: Latitudine (None se non fornita)
            longitude: Longitudine (None se non fornita)
            language: Lingua dei risultati

        Returns:
            ReverseLookup con il risultato o il motivo del fallimento
        """
        msg = messages_for(language)
        cache_key = ("rev", latitude, longitude, language)

        cached = self.cache.get(cache_key)
        if cached is not None:
            logger.info(f"Cache hit per ({latitude}, {longitude}, {language})")
            return ReverseLookup(outcome=ReverseOutcome.OK, result=cached)

        if latitude is None or longitude is None:
            return ReverseLookup(outcome=ReverseOutcome.BAD_REQUEST, message=msg["missing_coordinates"])

        response, unreachable = with_language_fallback(
            lambda lang: self.geocoder.reverse_geocode(latitude, longitude, lang),
            language,
            self.fallback_language,
        )

        if unreachable:
            logger.error(f"Servizio di geocodifica non raggiungibile per ({latitude}, {longitude})")
            return ReverseLookup(outcome=ReverseOutcome.UPSTREAM_ERROR, message=msg["upstream_error"])

        if not response.ok:
            logger.info(f"Nessun indirizzo per ({latitude}, {longitude}): {response.status}")
            return ReverseLookup(outcome=ReverseOutcome.NOT_FOUND, message=msg["location_not_found"])

        result = build_reverse_result(most_precise(response.results), self.default_country)
        self.cache.set(cache_key, result, self.ttl)

        return ReverseLookup(outcome=ReverseOutcome.OK, result=result)
