"""
API HTTP per validazione indirizzi e geocodifica inversa.
"""

import logging
from typing import Optional, Union

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from . import __version__
from .cache import MemoryCache
from .config import DEFAULT_LANGUAGE, messages_for
from .geocoding import GeocodingService
from .models import AddressInput, ReverseOutcome, ValidationVerdict, VerdictOutcome
from .resolver import ReverseResolver
from .validator import AddressValidator

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(message)s",
    handlers=[logging.StreamHandler()],
)
logger = logging.getLogger(__name__)


class ValidateRequest(BaseModel):
    country: Optional[str] = None
    city: Optional[str] = None
    street: Optional[str] = None
    number: Optional[Union[str, int]] = None
    lang: str = DEFAULT_LANGUAGE


class ReverseRequest(BaseModel):
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    lang: str = DEFAULT_LANGUAGE


VERDICT_STATUS = {
    VerdictOutcome.BAD_REQUEST: 400,
    VerdictOutcome.UPSTREAM_ERROR: 502,
}

REVERSE_STATUS = {
    ReverseOutcome.OK: 200,
    ReverseOutcome.BAD_REQUEST: 400,
    ReverseOutcome.NOT_FOUND: 404,
    ReverseOutcome.UPSTREAM_ERROR: 502,
}


def create_app(
    validator: Optional[AddressValidator] = None,
    resolver: Optional[ReverseResolver] = None,
) -> FastAPI:
    """
    Crea l'applicazione FastAPI.

    Se validatore e risolutore non sono forniti vengono creati alla prima
    richiesta con un unico GeocodingService e una cache in memoria. Senza
    API key le richieste ricevono 502 con il messaggio upstream_error.
    """
    app = FastAPI(
        title="Address Resolver",
        description="Validazione indirizzi e geocodifica inversa con Google Maps API",
        version=__version__,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
    )

    services = {"validator": validator, "resolver": resolver}

    def get_validator() -> AddressValidator:
        if services["validator"] is None:
            services["validator"] = AddressValidator(_geocoder())
        return services["validator"]

    def get_resolver() -> ReverseResolver:
        if services["resolver"] is None:
            services["resolver"] = ReverseResolver(_geocoder(), cache=MemoryCache())
        return services["resolver"]

    def _geocoder() -> GeocodingService:
        if "geocoder" not in services:
            services["geocoder"] = GeocodingService()
        return services["geocoder"]

    @app.get("/")
    def health():
        return {"status": "OK", "endpoints": ["/validate", "/reverse-geocode"]}

    @app.post("/validate")
    def validate(req: ValidateRequest):
        address = AddressInput.from_values(
            country=req.country, city=req.city, street=req.street, number=req.number
        )
        try:
            validator = get_validator()
        except ValueError as e:
            logger.error(f"Servizio di geocodifica non configurato: {e}")
            verdict = ValidationVerdict(
                outcome=VerdictOutcome.UPSTREAM_ERROR,
                message=messages_for(req.lang)["upstream_error"],
            )
        else:
            verdict = validator.validate(address, req.lang)
        logger.info(f"Validazione '{address}': {verdict.outcome.name}")
        return JSONResponse(
            status_code=VERDICT_STATUS.get(verdict.outcome, 200),
            content=verdict.to_dict(),
        )

    @app.post("/reverse-geocode")
    def reverse_geocode(req: ReverseRequest):
        try:
            resolver = get_resolver()
        except ValueError as e:
            logger.error(f"Servizio di geocodifica non configurato: {e}")
            return JSONResponse(
                status_code=REVERSE_STATUS[ReverseOutcome.UPSTREAM_ERROR],
                content={
                    "error": messages_for(req.lang)["upstream_error"],
                    "outcome": ReverseOutcome.UPSTREAM_ERROR.value,
                },
            )
        lookup = resolver.reverse(req.latitude, req.longitude, req.lang)
        if lookup.found:
            return lookup.result.to_dict()
        return JSONResponse(
            status_code=REVERSE_STATUS[lookup.outcome],
            content={"error": lookup.message, "outcome": lookup.outcome.value},
        )

    return app


app = create_app()
