"""
Validazione di un indirizzo inserito dall'utente.
"""

import logging
from typing import Optional

from .components import contains, find_component
from .config import (
    ADDRESS_FIELDS,
    DEFAULT_LANGUAGE,
    FALLBACK_LANGUAGE,
    STREET_LEVEL_TYPES,
    VALIDATION_COMPONENT_TYPES,
    messages_for,
)
from .geocoding import with_language_fallback
from .models import (
    AddressComponent,
    AddressInput,
    GeometryPrecision,
    ProviderResult,
    ValidationVerdict,
    VerdictOutcome,
)

logger = logging.getLogger(__name__)


class AddressValidator:
    """Confronta l'indirizzo dell'utente con il primo risultato di Google."""

    def __init__(self, geocoder, fallback_language: str = FALLBACK_LANGUAGE):
        """
        Args:
            geocoder: Oggetto con metodo geocode(address, language)
            fallback_language: Lingua del secondo tentativo
        """
        self.geocoder = geocoder
        self.fallback_language = fallback_language

    def validate(self, address: AddressInput, language: str = DEFAULT_LANGUAGE) -> ValidationVerdict:
        """
        Valida un indirizzo.

        Args:
            address: Campi inseriti dall'utente
            language: Lingua dei messaggi e dei risultati

        Returns:
            ValidationVerdict con esito ed errori per campo
        """
        msg = messages_for(language)

        errors = self._check_required(address, msg)
        if errors:
            return ValidationVerdict(outcome=VerdictOutcome.BAD_REQUEST, field_errors=errors)

        query = address.to_query()
        response, unreachable = with_language_fallback(
            lambda lang: self.geocoder.geocode(query, lang),
            language,
            self.fallback_language,
        )

        if unreachable:
            logger.error(f"Servizio di geocodifica non raggiungibile per '{query}'")
            return ValidationVerdict(
                outcome=VerdictOutcome.UPSTREAM_ERROR, message=msg["upstream_error"]
            )

        if not response.ok:
            logger.info(f"Indirizzo non trovato: '{query}' ({response.status})")
            return ValidationVerdict(
                outcome=VerdictOutcome.NOT_FOUND, message=msg["address_not_found"]
            )

        return self._verdict(address, response.results[0], msg)

    def _check_required(self, address: AddressInput, msg: dict) -> dict[str, str]:
        """Verifica che tutti i campi siano compilati."""
        errors = {}
        for name in ADDRESS_FIELDS:
            if not getattr(address, name).strip():
                errors[name] = msg["required"]
        return errors

    def _verdict(self, address: AddressInput, result: ProviderResult, msg: dict) -> ValidationVerdict:
        """Confronta i componenti e calcola il verdetto finale."""
        components = result.address_components
        errors = {}

        for name in ADDRESS_FIELDS:
            comp = find_component(components, VALIDATION_COMPONENT_TYPES[name])
            if not self._matches(name, comp, getattr(address, name)):
                errors[name] = msg[f"invalid_{name}"]

        is_rooftop = result.geometry_precision == GeometryPrecision.ROOFTOP
        is_street_address = bool(result.result_types & STREET_LEVEL_TYPES)

        valid = not errors and is_rooftop and is_street_address and not result.partial_match

        message = None
        if not valid and not errors:
            # Campi corretti ma risultato non puntuale
            if result.partial_match:
                message = msg["partial_match"]
            elif not is_rooftop:
                message = msg["not_rooftop"]
            else:
                message = msg["not_street_address"]

        return ValidationVerdict(
            outcome=VerdictOutcome.VALID if valid else VerdictOutcome.INVALID,
            field_errors=errors,
            formatted_address=result.formatted_address,
            message=message,
            geometry_precision=result.geometry_precision,
            partial_match=result.partial_match,
            result_types=result.result_types,
        )

    @staticmethod
    def _matches(name: str, comp: Optional[AddressComponent], value: str) -> bool:
        if comp is None:
            return False
        if contains(comp.long_name, value):
            return True
        # Il paese può essere indicato anche con il codice ISO
        return name == "country" and contains(comp.short_name, value)


def validate_address(
    geocoder,
    country: str,
    city: str,
    street: str,
    number: str,
    language: str = DEFAULT_LANGUAGE,
) -> ValidationVerdict:
    """Scorciatoia funzionale per AddressValidator.validate."""
    address = AddressInput.from_values(country=country, city=city, street=street, number=number)
    return AddressValidator(geocoder).validate(address, language)
