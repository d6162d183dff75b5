import unittest

import requests
from fastapi.testclient import TestClient

from weather_dashboard.main import app as fastapi_app
from weather_dashboard import upstream


class DummyResp:
    def __init__(self, payload, status_code=200, url="", text=""):
        self._payload = payload
        self.status_code = status_code
        self.url = url
        self.text = text

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")

    def json(self):
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload


class RecordingSession:
    def __init__(self, response):
        self.response = response
        self.calls = []

    def get(self, url, params=None, timeout=None):
        self.calls.append({"url": url, "params": dict(params or {}), "timeout": timeout})
        if isinstance(self.response, Exception):
            raise self.response
        return self.response


class TestProxyApi(unittest.TestCase):
    def setUp(self):
        from weather_dashboard.config import settings

        self.settings = settings
        self._orig_key = settings.openweather_api_key
        self._orig_session = upstream.session
        settings.openweather_api_key = "test-key"
        self.client = TestClient(fastapi_app)

    def tearDown(self):
        self.settings.openweather_api_key = self._orig_key
        upstream.session = self._orig_session

    def _use(self, response):
        session = RecordingSession(response)
        upstream.session = session
        return session

    def test_weather_by_name_forwards_params_and_key(self):
        session = self._use(DummyResp({"name": "London"}))

        resp = self.client.get("/api/weather", params={"endpoint": "weather", "q": "London"})

        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json(), {"name": "London"})
        call = session.calls[0]
        self.assertEqual(call["url"], "https://api.openweathermap.org/data/2.5/weather")
        self.assertEqual(call["params"], {"q": "London", "appid": "test-key"})

    def test_every_endpoint_maps_to_its_route(self):
        expected = {
            "weather": "/data/2.5/weather",
            "forecast": "/data/2.5/forecast",
            "air_pollution": "/data/2.5/air_pollution",
            "geo": "/geo/1.0/direct",
        }
        for endpoint, path in expected.items():
            session = self._use(DummyResp([]))
            resp = self.client.get("/api/weather", params={"endpoint": endpoint, "lat": "1", "lon": "2"})
            self.assertEqual(resp.status_code, 200)
            self.assertTrue(session.calls[0]["url"].endswith(path))
            self.assertNotIn("endpoint", session.calls[0]["params"])

    def test_geo_list_body_passes_through(self):
        payload = [{"name": "London", "country": "GB", "lat": 51.5, "lon": -0.1}]
        session = self._use(DummyResp(payload))
        resp = self.client.get("/api/weather", params={"endpoint": "geo", "q": "Lon", "limit": "5"})
        self.assertEqual(resp.json(), payload)
        self.assertEqual(session.calls[0]["params"]["limit"], "5")

    def test_missing_endpoint_is_400(self):
        session = self._use(DummyResp({}))
        resp = self.client.get("/api/weather", params={"q": "London"})
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json(), {"error": "Invalid endpoint"})
        self.assertEqual(session.calls, [])

    def test_unknown_endpoint_is_400(self):
        self._use(DummyResp({}))
        resp = self.client.get("/api/weather", params={"endpoint": "onecall"})
        self.assertEqual(resp.status_code, 400)

    def test_missing_key_is_500_before_any_upstream_call(self):
        self.settings.openweather_api_key = None
        session = self._use(DummyResp({}))

        resp = self.client.get("/api/weather", params={"endpoint": "weather", "q": "London"})

        self.assertEqual(resp.status_code, 500)
        self.assertEqual(resp.json(), {"error": "Server API key not configured"})
        self.assertEqual(session.calls, [])

    def test_missing_key_checked_before_endpoint(self):
        self.settings.openweather_api_key = ""
        self._use(DummyResp({}))
        resp = self.client.get("/api/weather", params={"endpoint": "nope"})
        self.assertEqual(resp.status_code, 500)

    def test_upstream_404_is_mirrored(self):
        body = {"cod": "404", "message": "city not found"}
        self._use(DummyResp(body, status_code=404))
        resp = self.client.get("/api/weather", params={"endpoint": "weather", "q": "Lndon"})
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(resp.json(), body)

    def test_upstream_text_error_body_is_mirrored(self):
        self._use(DummyResp(ValueError("no json"), status_code=502, text="Bad Gateway"))
        resp = self.client.get("/api/weather", params={"endpoint": "forecast", "lat": "1", "lon": "2"})
        self.assertEqual(resp.status_code, 502)
        self.assertEqual(resp.json(), "Bad Gateway")

    def test_upstream_error_with_empty_body_uses_generic_body(self):
        self._use(DummyResp(ValueError("no json"), status_code=502))
        resp = self.client.get("/api/weather", params={"endpoint": "forecast", "lat": "1", "lon": "2"})
        self.assertEqual(resp.status_code, 502)
        self.assertEqual(resp.json(), {"error": "Error fetching data"})

    def test_transport_failure_is_500(self):
        self._use(requests.ConnectionError("boom"))
        resp = self.client.get("/api/weather", params={"endpoint": "weather", "q": "London"})
        self.assertEqual(resp.status_code, 500)
        self.assertEqual(resp.json(), {"error": "Error fetching data"})

    def test_key_never_returned_to_client(self):
        self._use(DummyResp({"cod": 401, "message": "Invalid API key"}, status_code=401))
        resp = self.client.get("/api/weather", params={"endpoint": "weather", "q": "London"})
        self.assertEqual(resp.status_code, 401)
        self.assertNotIn("test-key", resp.text)


if __name__ == "__main__":
    unittest.main()
