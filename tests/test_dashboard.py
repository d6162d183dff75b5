import unittest
from zoneinfo import ZoneInfo

from weather_dashboard.dashboard import WeatherDashboard
from weather_dashboard.errors import GeolocationError
from weather_dashboard.models import Coordinates, CoordinateQuery, GeoCandidate, TextQuery

from payloads import FakeSource, FakeTimer, make_current_payload, not_found


class DeniedPosition:
    def get_current_position(self, **_kwargs):
        raise GeolocationError(1)


class FixedPosition:
    def get_current_position(self, **_kwargs):
        return Coordinates(lat=51.5, lon=-0.1)


def _dashboard(source=None, position=None):
    FakeTimer.created = []
    source = source or FakeSource()
    dashboard = WeatherDashboard(source.source, position, tz=ZoneInfo("UTC"), timer_factory=FakeTimer)
    return dashboard, source


class TestDashboardActions(unittest.TestCase):
    def test_use_my_location_fetches_by_coordinates(self):
        dashboard, source = _dashboard(position=FixedPosition())
        self.assertTrue(dashboard.use_my_location())
        self.assertEqual(source.calls[0], ("weather", CoordinateQuery(51.5, -0.1)))
        self.assertEqual(dashboard.state.error, "")

    def test_denied_location_loads_default_city_and_keeps_advisory(self):
        dashboard, source = _dashboard(position=DeniedPosition())

        self.assertTrue(dashboard.use_my_location())

        self.assertEqual(source.calls[0], ("weather", TextQuery("London")))
        self.assertIsNotNone(dashboard.state.current)
        self.assertEqual(
            dashboard.state.error, "Geolocation permission denied. Showing weather for a default city."
        )

    def test_fallback_failure_reports_fetch_error(self):
        dashboard, _source = _dashboard(source=FakeSource(current=not_found()), position=DeniedPosition())
        self.assertFalse(dashboard.use_my_location())
        self.assertEqual(dashboard.state.error, "City not found. Please check the spelling.")

    def test_unsupported_geolocation_sets_message_without_fetch(self):
        dashboard, source = _dashboard(position=None)
        self.assertFalse(dashboard.use_my_location())
        self.assertEqual(source.calls, [])
        self.assertEqual(dashboard.state.error, "Geolocation is not supported by your browser.")

    def test_search_uses_search_box_text(self):
        dashboard, source = _dashboard()
        dashboard.on_input_change("Paris")
        self.assertTrue(dashboard.search())
        self.assertEqual(source.calls[0], ("weather", TextQuery("Paris")))
        self.assertEqual(dashboard.state.search_text, "")

    def test_empty_search_is_ignored(self):
        dashboard, source = _dashboard()
        self.assertFalse(dashboard.search(""))
        self.assertEqual(source.calls, [])

    def test_select_suggestion_fetches_by_coordinates(self):
        dashboard, source = _dashboard()
        candidate = GeoCandidate(name="Springfield", state="Illinois", country="US", lat=39.8, lon=-89.64)
        self.assertTrue(dashboard.select_suggestion(candidate))
        self.assertEqual(source.calls[0], ("weather", CoordinateQuery(39.8, -89.64)))


class TestDisplaySnapshot(unittest.TestCase):
    def test_snapshot_after_success(self):
        dashboard, _source = _dashboard()
        dashboard.search("London")

        snap = dashboard.to_display()

        self.assertFalse(snap["loading"])
        self.assertEqual(snap["unit"], "C")
        self.assertEqual(snap["current"]["temperature"], "27°C")
        self.assertEqual(snap["current"]["air_quality"], "Fair")
        self.assertEqual(snap["current"]["rain_chance"], "25%")
        self.assertIn("maps.google.com", snap["current"]["map_url"])
        self.assertEqual(len(snap["hourly"]), 5)
        self.assertEqual(len(snap["daily"]), 5)
        self.assertEqual(len(snap["chart"]), 40)

    def test_snapshot_switches_unit(self):
        dashboard, source = _dashboard()
        dashboard.search("London")
        calls = len(source.calls)

        dashboard.toggle_unit()
        snap = dashboard.to_display()

        self.assertEqual(len(source.calls), calls)
        self.assertEqual(snap["unit"], "F")
        self.assertEqual(snap["current"]["temperature"], "80°F")

    def test_snapshot_hides_air_quality_when_absent(self):
        dashboard, _source = _dashboard(source=FakeSource(air={"list": []}))
        dashboard.search("London")
        self.assertNotIn("air_quality", dashboard.to_display()["current"])

    def test_snapshot_empty_after_failure(self):
        dashboard, source = _dashboard()
        dashboard.search("London")
        source.current_payload = not_found()
        dashboard.search("Lndon")

        snap = dashboard.to_display()
        self.assertIsNone(snap["current"])
        self.assertEqual(snap["hourly"], [])
        self.assertEqual(snap["chart"], [])
        self.assertEqual(snap["error"], "City not found. Please check the spelling.")

    def test_suggestions_rendered_as_labels(self):
        dashboard, _source = _dashboard()
        dashboard.on_input_change("Lon")
        FakeTimer.created[-1].fire()
        self.assertEqual(
            dashboard.to_display()["suggestions"], ["London, England, GB", "London, Ontario, CA"]
        )

    def test_close_cancels_pending_autocomplete(self):
        dashboard, source = _dashboard()
        dashboard.on_input_change("Lon")
        dashboard.close()
        FakeTimer.created[-1].fire()
        self.assertEqual(source.calls, [])


if __name__ == "__main__":
    unittest.main()
