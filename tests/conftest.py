"""
Fixture comuni: geocoder finto e costruttori di risposte Google.
"""

import pytest

from address_resolver.models import ProviderResponse


def component(long_name, short_name=None, *types):
    return {
        "long_name": long_name,
        "short_name": short_name if short_name is not None else long_name,
        "types": list(types),
    }


def google_result(
    components,
    formatted_address="",
    location_type="ROOFTOP",
    types=("street_address",),
    partial_match=None,
):
    data = {
        "formatted_address": formatted_address,
        "address_components": components,
        "geometry": {"location_type": location_type},
        "types": list(types),
    }
    if partial_match is not None:
        data["partial_match"] = partial_match
    return data


def ok_response(*results) -> ProviderResponse:
    return ProviderResponse.from_api({"status": "OK", "results": list(results)})


def zero_results() -> ProviderResponse:
    return ProviderResponse(status="ZERO_RESULTS")


def request_error() -> ProviderResponse:
    return ProviderResponse(status="REQUEST_ERROR", error_message="timeout")


RUSTAVELI_COMPONENTS = [
    component("12", "12", "street_number"),
    component("Rustaveli Avenue", "Rustaveli Ave", "route"),
    component("Tbilisi", "Tbilisi", "locality", "political"),
    component("Georgia", "GE", "country", "political"),
]


class FakeGeocoder:
    """Geocoder finto: restituisce le risposte per lingua e registra le chiamate."""

    def __init__(self, responses=None, default=None):
        self.responses = responses or {}
        self.default = default if default is not None else zero_results()
        self.calls = []

    def _answer(self, language):
        return self.responses.get(language, self.default)

    def geocode(self, address, language):
        self.calls.append(("geocode", address, language))
        return self._answer(language)

    def reverse_geocode(self, latitude, longitude, language):
        self.calls.append(("reverse", latitude, longitude, language))
        return self._answer(language)


class FakeClock:
    def __init__(self, now=1000.0):
        self.now = now

    def __call__(self):
        return self.now


@pytest.fixture
def rustaveli_response():
    return ok_response(
        google_result(RUSTAVELI_COMPONENTS, formatted_address="Rustaveli Ave 12, Tbilisi, Georgia")
    )


@pytest.fixture
def clock():
    return FakeClock()
