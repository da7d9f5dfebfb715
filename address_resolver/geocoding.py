"""
Servizio di geocodifica con Google Maps API.
"""

import logging
import time
from typing import Callable, Optional

import requests

from .config import API_KEY, FALLBACK_LANGUAGE, REQUEST_TIMEOUT, REQUESTS_PER_SECOND
from .models import ProviderResponse

logger = logging.getLogger(__name__)


class GeocodingService:
    """Servizio per geocodifica diretta e inversa con Google Maps API."""

    GEOCODE_URL = "https://maps.googleapis.com/maps/api/geocode/json"

    def __init__(self, api_key: Optional[str] = None, timeout: Optional[float] = None):
        self.api_key = api_key or API_KEY
        if not self.api_key:
            raise ValueError(
                "API key Google Maps richiesta. "
                "Imposta GOOGLE_MAPS_API_KEY come variabile d'ambiente."
            )
        self.timeout = timeout if timeout is not None else REQUEST_TIMEOUT
        self._last_request_time = 0
        self._request_interval = 1.0 / REQUESTS_PER_SECOND

    def _rate_limit(self):
        """Applica rate limiting tra le richieste."""
        now = time.time()
        elapsed = now - self._last_request_time
        if elapsed < self._request_interval:
            time.sleep(self._request_interval - elapsed)
        self._last_request_time = time.time()

    def geocode(self, address: str, language: str) -> ProviderResponse:
        """
        Geocodifica un indirizzo testuale.

        Args:
            address: Indirizzo completo ("via civico, città, paese")
            language: Lingua dei risultati

        Returns:
            ProviderResponse con i candidati trovati
        """
        return self._request({"address": address, "language": language})

    def reverse_geocode(self, latitude: float, longitude: float, language: str) -> ProviderResponse:
        """
        Geocodifica inversa di una coppia di coordinate.

        Args:
            latitude: Latitudine
            longitude: Longitudine
            language: Lingua dei risultati

        Returns:
            ProviderResponse con i candidati trovati
        """
        return self._request({"latlng": f"{latitude},{longitude}", "language": language})

    def _request(self, params: dict) -> ProviderResponse:
        """Esegue la chiamata HTTP. Gli errori di rete diventano REQUEST_ERROR."""
        self._rate_limit()

        try:
            response = requests.get(
                self.GEOCODE_URL,
                params={**params, "key": self.api_key},
                timeout=self.timeout,
            )
            response.raise_for_status()
            data = response.json()
        except (requests.RequestException, ValueError) as e:
            logger.warning(f"Errore richiesta API: {e}")
            return ProviderResponse(status="REQUEST_ERROR", error_message=str(e))

        if not isinstance(data, dict):
            logger.warning("Risposta API non valida")
            return ProviderResponse(status="REQUEST_ERROR", error_message="Risposta non valida")

        try:
            result = ProviderResponse.from_api(data)
        except (AttributeError, TypeError, ValueError) as e:
            logger.warning(f"Struttura risposta API inattesa: {e}")
            return ProviderResponse(status="REQUEST_ERROR", error_message=str(e))

        if result.status not in ("OK", "ZERO_RESULTS"):
            logger.warning(f"Geocoding status {result.status}: {result.error_message or ''}")
        return result


def with_language_fallback(
    call: Callable[[str], ProviderResponse],
    language: str,
    fallback_language: str = FALLBACK_LANGUAGE,
) -> tuple[ProviderResponse, bool]:
    """
    Esegue una chiamata e, se non produce risultati, la ripete una sola volta in inglese.

    Args:
        call: Funzione che riceve la lingua e interroga il servizio
        language: Lingua richiesta
        fallback_language: Lingua del secondo tentativo

    Returns:
        Tupla (ultima risposta, True se entrambi i tentativi sono falliti per errore di rete)
    """
    first = call(language)
    if first.ok:
        return first, False

    logger.warning(f"Nessun risultato in '{language}' ({first.status}), riprovo in '{fallback_language}'")
    second = call(fallback_language)
    return second, first.request_failed and second.request_failed
