"""
Test geocodifica inversa.
"""

from address_resolver.cache import MemoryCache
from address_resolver.config import MESSAGES, REVERSE_CACHE_TTL
from address_resolver.models import GeometryPrecision, ProviderResult, ReverseOutcome
from address_resolver.resolver import ReverseResolver, build_reverse_result, most_precise

from conftest import (
    RUSTAVELI_COMPONENTS,
    FakeGeocoder,
    component,
    google_result,
    ok_response,
    request_error,
)

LAT, LNG = 41.6938, 44.8015


def result_from(**kwargs) -> ProviderResult:
    return ProviderResult.from_api(google_result(**kwargs))


class TestMostPrecise:
    def test_rooftop_wins_regardless_of_order(self):
        candidates = [
            result_from(components=[], formatted_address="a", location_type="APPROXIMATE"),
            result_from(components=[], formatted_address="b", location_type="ROOFTOP"),
            result_from(components=[], formatted_address="c", location_type="GEOMETRIC_CENTER"),
        ]
        assert most_precise(candidates).formatted_address == "b"

    def test_ties_keep_provider_order(self):
        candidates = [
            result_from(components=[], formatted_address="first", location_type="RANGE_INTERPOLATED"),
            result_from(components=[], formatted_address="second", location_type="RANGE_INTERPOLATED"),
        ]
        assert most_precise(candidates).formatted_address == "first"

    def test_unknown_precision_sorts_last(self):
        candidates = [
            result_from(components=[], formatted_address="unknown", location_type="SOMETHING_NEW"),
            result_from(components=[], formatted_address="approx", location_type="APPROXIMATE"),
        ]
        assert most_precise(candidates).formatted_address == "approx"


class TestBuildReverseResult:
    def test_structured_components(self):
        result = build_reverse_result(
            result_from(components=RUSTAVELI_COMPONENTS, formatted_address="Rustaveli Ave 12, Tbilisi, Georgia")
        )
        assert result.country == "Georgia"
        assert result.city == "Tbilisi"
        assert result.street == "Rustaveli Avenue"
        assert result.number == "12"
        assert result.geometry_precision == GeometryPrecision.ROOFTOP

    def test_fallback_parses_formatted_address(self):
        components = [
            component("Tbilisi", "Tbilisi", "locality"),
            component("Georgia", "GE", "country"),
        ]
        result = build_reverse_result(
            result_from(components=components, formatted_address="Rustaveli Ave 12, Tbilisi, Georgia")
        )
        assert result.street == "Rustaveli Ave"
        assert result.number == "12"
        assert result.city == "Tbilisi"

    def test_fallback_without_number(self):
        components = [component("Georgia", "GE", "country")]
        result = build_reverse_result(result_from(components=components, formatted_address="Tbilisi, Georgia"))
        assert result.street == "Tbilisi"
        assert result.number == ""
        # La città non viene mai ricavata dall'indirizzo formattato
        assert result.city == ""

    def test_fallback_overrides_component_street_when_number_missing(self):
        components = [
            component("Rustaveli Avenue", "Rustaveli Ave", "route"),
            component("Georgia", "GE", "country"),
        ]
        result = build_reverse_result(
            result_from(components=components, formatted_address="Rustaveli Ave 7b, Tbilisi, Georgia")
        )
        assert (result.street, result.number) == ("Rustaveli Ave", "7b")

    def test_single_part_keeps_components(self):
        components = [
            component("Mtatsminda", "Mtatsminda", "neighborhood"),
            component("Georgia", "GE", "country"),
        ]
        result = build_reverse_result(result_from(components=components, formatted_address="Georgia"))
        assert result.street == "Mtatsminda"
        assert result.number == ""

    def test_street_from_neighborhood_and_number_from_premise(self):
        components = [
            component("Building 3", "3", "premise"),
            component("Vake", "Vake", "neighborhood"),
            component("Georgia", "GE", "country"),
        ]
        result = build_reverse_result(result_from(components=components, formatted_address="x, y"))
        assert (result.street, result.number) == ("Vake", "Building 3")

    def test_city_first_non_empty_group(self):
        components = [
            component("Kakheti", "Kakheti", "administrative_area_level_1"),
            component("Telavi Municipality", "Telavi", "administrative_area_level_2"),
        ]
        result = build_reverse_result(result_from(components=components, formatted_address="a, b"))
        assert result.city == "Telavi Municipality"

    def test_country_short_name_when_long_name_empty(self):
        components = [component("", "GE", "country")]
        result = build_reverse_result(result_from(components=components, formatted_address="a, b"))
        assert result.country == "GE"

    def test_configured_default_country(self):
        result = build_reverse_result(
            result_from(components=[], formatted_address="Somewhere 1, Nowhere"), default_country="Armenia"
        )
        assert result.country == "Armenia"


class TestReverseResolver:
    def test_resolves_and_caches(self, rustaveli_response, clock):
        geocoder = FakeGeocoder({"en": rustaveli_response})
        resolver = ReverseResolver(geocoder, cache=MemoryCache(clock=clock))

        first = resolver.reverse(LAT, LNG, "en")
        second = resolver.reverse(LAT, LNG, "en")

        assert first.outcome == ReverseOutcome.OK
        assert second.result == first.result
        assert len(geocoder.calls) == 1

    def test_cache_expires_after_ttl(self, rustaveli_response, clock):
        geocoder = FakeGeocoder({"en": rustaveli_response})
        resolver = ReverseResolver(geocoder, cache=MemoryCache(clock=clock))

        resolver.reverse(LAT, LNG, "en")
        clock.now += REVERSE_CACHE_TTL + 1
        resolver.reverse(LAT, LNG, "en")

        assert len(geocoder.calls) == 2

    def test_cache_key_includes_language(self, rustaveli_response):
        geocoder = FakeGeocoder(default=rustaveli_response)
        resolver = ReverseResolver(geocoder)

        resolver.reverse(LAT, LNG, "en")
        resolver.reverse(LAT, LNG, "ka")

        assert len(geocoder.calls) == 2

    def test_picks_most_precise_candidate(self):
        response = ok_response(
            google_result([], formatted_address="Approx, Georgia", location_type="APPROXIMATE"),
            google_result(RUSTAVELI_COMPONENTS, formatted_address="Rustaveli Ave 12, Tbilisi, Georgia"),
            google_result([], formatted_address="Center, Georgia", location_type="GEOMETRIC_CENTER"),
        )
        lookup = ReverseResolver(FakeGeocoder({"en": response})).reverse(LAT, LNG, "en")
        assert lookup.result.formatted_address == "Rustaveli Ave 12, Tbilisi, Georgia"

    def test_missing_coordinates(self):
        geocoder = FakeGeocoder()
        lookup = ReverseResolver(geocoder).reverse(None, LNG, "en")

        assert lookup.outcome == ReverseOutcome.BAD_REQUEST
        assert lookup.message == MESSAGES["en"]["missing_coordinates"]
        assert geocoder.calls == []

    def test_zero_coordinates_are_valid(self, rustaveli_response):
        geocoder = FakeGeocoder({"en": rustaveli_response})
        lookup = ReverseResolver(geocoder).reverse(0.0, 0.0, "en")
        assert lookup.found
        assert geocoder.calls == [("reverse", 0.0, 0.0, "en")]

    def test_retries_in_english_then_not_found(self):
        geocoder = FakeGeocoder()
        lookup = ReverseResolver(geocoder).reverse(LAT, LNG, "ka")

        assert lookup.outcome == ReverseOutcome.NOT_FOUND
        assert lookup.message == MESSAGES["ka"]["location_not_found"]
        assert [call[3] for call in geocoder.calls] == ["ka", "en"]

    def test_failures_are_not_cached(self, rustaveli_response):
        geocoder = FakeGeocoder()
        resolver = ReverseResolver(geocoder)
        resolver.reverse(LAT, LNG, "en")

        geocoder.default = rustaveli_response
        assert resolver.reverse(LAT, LNG, "en").found

    def test_upstream_error(self):
        lookup = ReverseResolver(FakeGeocoder(default=request_error())).reverse(LAT, LNG, "en")
        assert lookup.outcome == ReverseOutcome.UPSTREAM_ERROR

    def test_default_country_is_never_empty(self):
        response = ok_response(google_result([], formatted_address="Somewhere 4, Nowhere"))
        resolver = ReverseResolver(FakeGeocoder({"en": response}), default_country="Georgia")
        lookup = resolver.reverse(LAT, LNG, "en")
        assert lookup.result.country == "Georgia"
        assert lookup.result.to_dict()["country"] == "Georgia"
