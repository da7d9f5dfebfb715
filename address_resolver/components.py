"""
Normalizzazione stringhe ed estrazione componenti di indirizzo.
"""

import re
from typing import Iterable, Optional

from .models import AddressComponent

_NON_ALNUM = re.compile(r"[^a-z0-9]")

# "Via Roma 12", "Rustaveli Ave 12a"
_STREET_NUMBER = re.compile(r"^(.+?)\s+([0-9]+[a-zA-Z]?)$")


def normalize(value: str) -> str:
    """
    Normalizza una stringa per il confronto.

    Minuscolo, senza spazi ai bordi, solo lettere ASCII e cifre.
    I caratteri non latini vengono rimossi.
    """
    return _NON_ALNUM.sub("", value.lower().strip())


def contains(haystack: str, needle: str) -> bool:
    """Verifica se ``needle`` normalizzato è contenuto in ``haystack`` normalizzato."""
    return normalize(needle) in normalize(haystack)


def find_component(
    components: Iterable[AddressComponent], candidate_types: Iterable[str]
) -> Optional[AddressComponent]:
    """
    Restituisce il primo componente che ha almeno uno dei tipi richiesti.

    Args:
        components: Componenti nell'ordine restituito da Google
        candidate_types: Tipi accettati

    Returns:
        Il componente trovato, None se nessuno corrisponde
    """
    wanted = set(candidate_types)
    for comp in components:
        if comp.types & wanted:
            return comp
    return None


def first_long_name(components: list[AddressComponent], type_groups: list[list[str]]) -> str:
    """
    Prova i gruppi di tipi in ordine e restituisce il primo long_name non vuoto.

    Diversamente da find_component, un gruppo che non produce nulla
    passa la mano al gruppo successivo.
    """
    for group in type_groups:
        comp = find_component(components, group)
        if comp is not None and comp.long_name:
            return comp.long_name
    return ""


def parse_formatted_address(formatted_address: str) -> Optional[tuple[str, str]]:
    """
    Ricava via e civico dalla prima parte di un indirizzo formattato.

    Esempi:
        "Rustaveli Ave 12, Tbilisi, Georgia" -> ("Rustaveli Ave", "12")
        "Tbilisi, Georgia" -> ("Tbilisi", "")
        "Georgia" -> None

    Returns:
        Tupla (via, civico), None se l'indirizzo ha una sola parte
    """
    parts = [p.strip() for p in formatted_address.split(",")]
    if len(parts) < 2:
        return None

    first_part = parts[0]
    match = _STREET_NUMBER.match(first_part)
    if match:
        return match.group(1).strip(), match.group(2).strip()
    return first_part, ""
