"""
Modelli dati per il risolutore di indirizzi.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class GeometryPrecision(Enum):
    """Precisione della geometria restituita da Google (location_type)."""

    ROOFTOP = "ROOFTOP"
    RANGE_INTERPOLATED = "RANGE_INTERPOLATED"
    GEOMETRIC_CENTER = "GEOMETRIC_CENTER"
    APPROXIMATE = "APPROXIMATE"

    @property
    def rank(self) -> int:
        """Posizione nell'ordine di precisione (0 = più preciso)."""
        return list(GeometryPrecision).index(self)

    @classmethod
    def parse(cls, value: Optional[str]) -> Optional["GeometryPrecision"]:
        """Converte il location_type grezzo, None se assente o sconosciuto."""
        if value is None:
            return None
        try:
            return cls(value)
        except ValueError:
            return None


class VerdictOutcome(Enum):
    """Esito di una validazione."""

    VALID = "valid"
    INVALID = "invalid"
    NOT_FOUND = "not_found"
    BAD_REQUEST = "bad_request"
    UPSTREAM_ERROR = "upstream_error"


class ReverseOutcome(Enum):
    """Esito di una geocodifica inversa."""

    OK = "ok"
    NOT_FOUND = "not_found"
    BAD_REQUEST = "bad_request"
    UPSTREAM_ERROR = "upstream_error"


@dataclass(frozen=True)
class AddressInput:
    """Indirizzo inserito dall'utente."""

    country: str = ""
    city: str = ""
    street: str = ""
    number: str = ""

    @classmethod
    def from_values(cls, **values) -> "AddressInput":
        """Costruisce l'input da valori grezzi (None diventa stringa vuota, 12 diventa "12")."""
        return cls(**{k: "" if v is None else str(v) for k, v in values.items()})

    def to_query(self) -> str:
        """Restituisce la stringa di ricerca per la geocodifica."""
        return f"{self.street} {self.number}, {self.city}, {self.country}"

    def __str__(self) -> str:
        return self.to_query()


@dataclass(frozen=True)
class AddressComponent:
    """Componente di indirizzo restituito da Google."""

    long_name: str
    short_name: str
    types: frozenset = frozenset()

    @classmethod
    def from_api(cls, data: dict) -> "AddressComponent":
        long_name = data.get("long_name")
        short_name = data.get("short_name")
        return cls(
            long_name="" if long_name is None else str(long_name),
            short_name="" if short_name is None else str(short_name),
            types=frozenset(data.get("types") or ()),
        )


@dataclass
class ProviderResult:
    """Un candidato restituito dalla geocodifica."""

    formatted_address: Optional[str]
    address_components: list[AddressComponent] = field(default_factory=list)
    geometry_precision: Optional[GeometryPrecision] = None
    result_types: frozenset = frozenset()
    partial_match: bool = False

    @classmethod
    def from_api(cls, data: dict) -> "ProviderResult":
        """Costruisce il risultato dal JSON di Google."""
        geometry = data.get("geometry") or {}
        return cls(
            formatted_address=data.get("formatted_address"),
            address_components=[
                AddressComponent.from_api(c) for c in data.get("address_components") or []
            ],
            geometry_precision=GeometryPrecision.parse(geometry.get("location_type")),
            result_types=frozenset(data.get("types") or ()),
            partial_match=data.get("partial_match") is True,
        )


@dataclass
class ProviderResponse:
    """Risposta completa della geocodifica."""

    status: str
    results: list[ProviderResult] = field(default_factory=list)
    error_message: Optional[str] = None

    @property
    def ok(self) -> bool:
        """True se la risposta contiene almeno un risultato utilizzabile."""
        return self.status == "OK" and len(self.results) > 0

    @property
    def request_failed(self) -> bool:
        """True se la richiesta non ha raggiunto il servizio."""
        return self.status == "REQUEST_ERROR"

    @classmethod
    def from_api(cls, data: dict) -> "ProviderResponse":
        return cls(
            status=data.get("status", "UNKNOWN_ERROR"),
            results=[ProviderResult.from_api(r) for r in data.get("results") or []],
            error_message=data.get("error_message"),
        )


@dataclass
class ValidationVerdict:
    """Risultato della validazione di un indirizzo."""

    outcome: VerdictOutcome
    field_errors: dict[str, str] = field(default_factory=dict)
    formatted_address: Optional[str] = None
    message: Optional[str] = None
    geometry_precision: Optional[GeometryPrecision] = None
    partial_match: bool = False
    result_types: frozenset = frozenset()

    @property
    def valid(self) -> bool:
        return self.outcome == VerdictOutcome.VALID

    def to_dict(self) -> dict:
        """Rappresentazione JSON del verdetto."""
        return {
            "valid": self.valid,
            "outcome": self.outcome.value,
            "formatted_address": self.formatted_address,
            "errors": dict(self.field_errors),
            "message": self.message,
            "geometry_type": self.geometry_precision.value if self.geometry_precision else None,
            "partial": self.partial_match,
            "types": sorted(self.result_types),
        }

    def __str__(self) -> str:
        if self.valid:
            return f"[OK] {self.formatted_address}"
        detail = self.message or ", ".join(f"{k}: {v}" for k, v in self.field_errors.items())
        return f"[{self.outcome.name}] {detail}"


@dataclass(frozen=True)
class ReverseResult:
    """Indirizzo ricostruito da coordinate."""

    country: str
    city: str
    street: str
    number: str
    formatted_address: str
    geometry_precision: Optional[GeometryPrecision] = None

    def to_dict(self) -> dict:
        return {
            "country": self.country,
            "city": self.city,
            "street": self.street,
            "number": self.number,
            "formatted_address": self.formatted_address,
            "location_type": self.geometry_precision.value if self.geometry_precision else None,
        }


@dataclass
class ReverseLookup:
    """Esito di una richiesta di geocodifica inversa."""

    outcome: ReverseOutcome
    result: Optional[ReverseResult] = None
    message: Optional[str] = None

    @property
    def found(self) -> bool:
        return self.outcome == ReverseOutcome.OK and self.result is not None
