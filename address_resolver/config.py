"""
Configurazione per il risolutore di indirizzi.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

# Carica .env dalla directory del progetto
_env_path = Path(__file__).parent.parent / ".env"
load_dotenv(_env_path)

# Google Maps API Key - caricata da .env o variabile d'ambiente
API_KEY = os.environ.get("GOOGLE_MAPS_API_KEY", "")

# Lingue
DEFAULT_LANGUAGE = os.environ.get("DEFAULT_LANGUAGE", "ka")
FALLBACK_LANGUAGE = "en"

# Paese di default per la geocodifica inversa quando nessun componente lo indica
DEFAULT_COUNTRY = os.environ.get("DEFAULT_COUNTRY", "საქართველო")

# Cache geocodifica inversa (secondi)
REVERSE_CACHE_TTL = 60 * 60 * 24

# Timeout richieste HTTP verso Google (secondi)
REQUEST_TIMEOUT = float(os.environ.get("REQUEST_TIMEOUT", "10"))

# Rate limiting per Google Maps API
REQUESTS_PER_SECOND = 40

# Server HTTP
API_HOST = os.environ.get("API_HOST", "127.0.0.1")
API_PORT = int(os.environ.get("API_PORT", "4000"))

# Priorità tipi componente per la validazione (primo componente che corrisponde)
VALIDATION_COMPONENT_TYPES = {
    "country": ["country"],
    "city": ["locality", "administrative_area_level_2", "administrative_area_level_1"],
    "street": ["route", "street_address"],
    "number": ["street_number", "premise"],
}

# Priorità per la geocodifica inversa (primo gruppo non vuoto)
REVERSE_COMPONENT_TYPES = {
    "country": [["country"]],
    "city": [["locality"], ["administrative_area_level_2"], ["administrative_area_level_1"]],
    "street": [["route"], ["neighborhood"], ["sublocality"]],
    "number": [["street_number"], ["premise"]],
}

# Tipi di risultato che indicano un indirizzo puntuale
STREET_LEVEL_TYPES = {"street_address", "premise"}

# Campi obbligatori, nell'ordine del form
ADDRESS_FIELDS = ("country", "city", "street", "number")

# Messaggi localizzati
MESSAGES = {
    "ka": {
        "required": "სავალდებულო ველი",
        "invalid_country": "ქვეყანა არასწორია",
        "invalid_city": "ქალაქი არასწორია",
        "invalid_street": "ქუჩა არასწორია",
        "invalid_number": "ნომერი არასწორია",
        "address_not_found": "მისამართი ვერ მოიძებნა",
        "partial_match": "მისამართი ნაწილობრივია",
        "not_rooftop": "მისამართი არ არის ზუსტი",
        "not_street_address": "მისამართი არ არის ქუჩის დონის",
        "location_not_found": "ლოკაცია ვერ მოიძებნა",
        "missing_coordinates": "კოორდინატები არ არის მითითებული",
        "upstream_error": "გეოკოდირების სერვისი მიუწვდომელია",
    },
    "en": {
        "required": "Required field",
        "invalid_country": "Invalid country",
        "invalid_city": "Invalid city",
        "invalid_street": "Invalid street",
        "invalid_number": "Invalid number",
        "address_not_found": "Address not found",
        "partial_match": "Address is partial",
        "not_rooftop": "Address is not precise",
        "not_street_address": "Address is not a street address",
        "location_not_found": "Location not found",
        "missing_coordinates": "Missing coordinates",
        "upstream_error": "Geocoding service unavailable",
    },
}


def messages_for(language: str) -> dict:
    """Restituisce i messaggi per la lingua, con fallback sulla lingua di default."""
    return MESSAGES.get(language) or MESSAGES.get(DEFAULT_LANGUAGE) or MESSAGES["en"]
