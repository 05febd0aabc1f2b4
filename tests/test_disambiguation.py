import itertools
import unittest

from artist_geo.countries import KNOWN_COUNTRIES
from artist_geo.disambiguation import resolve
from artist_geo.models import RawLocationRecord, ResolvedLocation


def _raw(**fields) -> RawLocationRecord:
    fields.setdefault("name", "Test Artist")
    return RawLocationRecord(**fields)


class TestResolveCoordinates(unittest.TestCase):
    def test_missing_record_returns_none(self) -> None:
        self.assertIsNone(resolve(None))

    def test_area_without_coordinates_returns_none(self) -> None:
        self.assertIsNone(resolve(_raw(area_name="Sweden", begin_area_name="Stockholm")))

    def test_single_coordinate_is_treated_as_absent(self) -> None:
        self.assertIsNone(resolve(_raw(city="Austin", lat=30.27)))
        self.assertIsNone(resolve(_raw(city="Austin", lng=-97.74)))

    def test_unparseable_or_out_of_range_coordinates_are_absent(self) -> None:
        self.assertIsNone(resolve(_raw(city="Austin", lat="north", lng=-97.74)))
        self.assertIsNone(resolve(_raw(city="Austin", lat=95.0, lng=-97.74)))
        self.assertIsNone(resolve(_raw(city="Austin", lat=float("nan"), lng=-97.74)))

    def test_numeric_strings_are_accepted(self) -> None:
        result = resolve(_raw(city="Austin", lat="30.27", lng="-97.74"))
        self.assertEqual(result, ResolvedLocation(30.27, -97.74, "Austin", "United States"))

    def test_zero_coordinates_are_valid(self) -> None:
        result = resolve(_raw(lat=0.0, lng=0.0))
        self.assertEqual(result, ResolvedLocation(0.0, 0.0, None, None))


class TestCandidateRules(unittest.TestCase):
    def test_trusted_stored_pair_is_used_as_is(self) -> None:
        result = resolve(
            _raw(
                city="Seattle",
                country="United States",
                area_name="Washington",
                begin_area_name="Tacoma",
                lat=47.6,
                lng=-122.3,
            )
        )
        self.assertEqual((result.city, result.country), ("Seattle", "United States"))

    def test_both_areas_with_country_area(self) -> None:
        result = resolve(
            _raw(begin_area_name="Manchester", area_name="United Kingdom", lat=53.48, lng=-2.24)
        )
        self.assertEqual((result.city, result.country), ("Manchester", "United Kingdom"))

    def test_both_areas_with_region_prefers_country_code(self) -> None:
        result = resolve(
            _raw(
                begin_area_name="Brooklyn",
                area_name="New York",
                country_code="US",
                lat=40.68,
                lng=-73.94,
            )
        )
        self.assertEqual((result.city, result.country), ("Brooklyn", "United States"))

    def test_both_areas_with_region_and_no_code_keeps_region(self) -> None:
        result = resolve(
            _raw(begin_area_name="Brooklyn", area_name="New York", lat=40.68, lng=-73.94)
        )
        self.assertEqual((result.city, result.country), ("Brooklyn", "New York"))

    def test_only_begin_area_uses_country_code(self) -> None:
        result = resolve(
            _raw(begin_area_name="Gothenburg", country_code="SE", lat=57.7, lng=11.97)
        )
        self.assertEqual((result.city, result.country), ("Gothenburg", "Sweden"))

    def test_only_begin_area_prefers_stored_country(self) -> None:
        result = resolve(
            _raw(
                begin_area_name="Gothenburg",
                country="Sweden",
                country_code="NO",
                lat=57.7,
                lng=11.97,
            )
        )
        self.assertEqual((result.city, result.country), ("Gothenburg", "Sweden"))

    def test_only_country_area_leaves_city_empty(self) -> None:
        result = resolve(_raw(area_name="Japan", lat=35.68, lng=139.69))
        self.assertEqual((result.city, result.country), (None, "Japan"))

    def test_only_country_area_keeps_stored_city(self) -> None:
        result = resolve(_raw(area_name="Japan", city="Osaka", lat=34.69, lng=135.5))
        self.assertEqual((result.city, result.country), ("Osaka", "Japan"))

    def test_only_city_area_uses_stored_country(self) -> None:
        result = resolve(_raw(area_name="Paris", country="France", lat=48.85, lng=2.35))
        self.assertEqual((result.city, result.country), ("Paris", "France"))

    def test_only_city_area_keeps_unmapped_code(self) -> None:
        result = resolve(
            _raw(area_name="Reykjavík", country_code="IS", lat=64.15, lng=-21.94)
        )
        self.assertEqual((result.city, result.country), ("Reykjavík", "IS"))

    def test_only_city_area_falls_back_to_coordinate_box(self) -> None:
        result = resolve(_raw(area_name="Bristol", lat=51.45, lng=-2.58))
        self.assertEqual((result.city, result.country), ("Bristol", "United Kingdom"))


class TestCorrectionPasses(unittest.TestCase):
    def test_swapped_city_and_country(self) -> None:
        result = resolve(
            _raw(
                area_name=None,
                begin_area_name=None,
                city="United States",
                country="Austin",
                lat=30.27,
                lng=-97.74,
            )
        )
        self.assertEqual((result.city, result.country), ("Austin", "United States"))

    def test_country_code_is_mapped_to_display_name(self) -> None:
        result = resolve(
            _raw(country_code="GB", city="London", country=None, lat=51.5, lng=-0.12)
        )
        self.assertEqual(result.country, "United Kingdom")
        self.assertEqual(result.city, "London")

    def test_lowercase_country_code_is_mapped(self) -> None:
        result = resolve(_raw(country_code="de", city="Berlin", lat=52.52, lng=13.4))
        self.assertEqual(result.country, "Germany")

    def test_raw_code_in_country_matches_code_case_insensitively(self) -> None:
        result = resolve(_raw(country="gb", country_code="GB", lat=51.5, lng=-0.1))
        self.assertEqual((result.city, result.country), (None, "United Kingdom"))

        result = resolve(_raw(city="Austin", country="us", country_code="US", lat=30.27, lng=-97.74))
        self.assertEqual((result.city, result.country), ("Austin", "United States"))

    def test_city_stored_in_country_field_moves_to_city(self) -> None:
        result = resolve(_raw(country="Berlin", lat=52.52, lng=13.4))
        self.assertEqual((result.city, result.country), ("Berlin", None))

    def test_duplicate_city_country_rederived_from_code(self) -> None:
        result = resolve(
            _raw(city="Detroit", country="Detroit", country_code="US", lat=42.33, lng=-83.05)
        )
        self.assertEqual((result.city, result.country), ("Detroit", "United States"))

    def test_duplicate_with_unmapped_code_keeps_raw_code(self) -> None:
        result = resolve(
            _raw(city="Monaco", country="Monaco", country_code="MC", lat=43.73, lng=7.42)
        )
        self.assertEqual((result.city, result.country), ("Monaco", "MC"))

    def test_duplicate_outside_boxes_drops_country(self) -> None:
        result = resolve(_raw(city="Lagos", country="Lagos", lat=6.52, lng=3.38))
        self.assertEqual((result.city, result.country), ("Lagos", None))

    def test_coordinate_inference_for_city_only(self) -> None:
        result = resolve(
            _raw(city="Austin", country=None, country_code=None, lat=30.27, lng=-97.74)
        )
        self.assertEqual(result.country, "United States")

    def test_coordinate_inference_uses_first_matching_box(self) -> None:
        # Toronto sits inside the continental US box, which is checked first.
        result = resolve(_raw(city="Toronto", lat=43.65, lng=-79.38))
        self.assertEqual(result.country, "United States")
        result = resolve(_raw(city="Edmonton", lat=53.55, lng=-113.49))
        self.assertEqual(result.country, "Canada")

    def test_country_name_in_both_fields_keeps_only_country(self) -> None:
        result = resolve(_raw(city="Canada", country="Canada", lat=45.42, lng=-75.69))
        self.assertEqual((result.city, result.country), (None, "Canada"))

    def test_country_name_as_city_is_dropped(self) -> None:
        result = resolve(_raw(area_name="Germany", city="France", lat=52.52, lng=13.4))
        self.assertEqual((result.city, result.country), (None, "Germany"))


class TestResolveProperties(unittest.TestCase):
    def test_resolve_is_idempotent(self) -> None:
        raw = _raw(city="United States", country="Austin", lat=30.27, lng=-97.74)
        self.assertEqual(resolve(raw), resolve(raw))

    def test_city_never_equals_country_or_a_country_name(self) -> None:
        texts = [None, "Austin", "United States", "New York", "Canada"]
        codes = [None, "US", "CA", "XX"]
        for city, country, area, begin_area, code in itertools.product(
            texts, texts, texts, texts, codes
        ):
            raw = _raw(
                city=city,
                country=country,
                area_name=area,
                begin_area_name=begin_area,
                country_code=code,
                lat=30.27,
                lng=-97.74,
            )
            result = resolve(raw)
            with self.subTest(raw=raw):
                self.assertIsNotNone(result)
                if result.city and result.country:
                    self.assertNotEqual(result.city, result.country)
                self.assertNotIn(result.city, KNOWN_COUNTRIES)


if __name__ == "__main__":
    unittest.main()
