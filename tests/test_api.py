import unittest

from fastapi.testclient import TestClient

from app import session_manager
from app.data_sources.open_meteo_client import GeocodeResult
from app.errors import NetworkFailure
from app.main import app as fastapi_app


def _payload():
    return {
        "timezone": "Asia/Kolkata",
        "current_weather": {"temperature": 30.0, "windspeed": 12.0, "weathercode": 0},
        "hourly": {"time": ["2024-06-01T12:00", "2024-06-01T13:00"], "temperature_2m": [30.0, 31.0]},
        "daily": {"time": ["2024-06-01"], "weathercode": [0], "temperature_2m_max": [33.0], "temperature_2m_min": [27.0]},
    }


class StubSource:
    def __init__(self):
        self.results = [GeocodeResult(name="Oslo", latitude=59.91, longitude=10.75, admin1="Oslo", country_code="NO")]
        self.forecast_error = None
        self.forecast_calls = 0

    def geocode(self, query):
        return self.results if query != "nowhere" else []

    def fetch_forecast(self, latitude, longitude, *, timezone="auto"):
        self.forecast_calls += 1
        if self.forecast_error:
            raise self.forecast_error
        return _payload()


class TestApi(unittest.TestCase):
    def setUp(self):
        self.source = StubSource()
        session_manager.use_in_memory_state_for_tests(data_source=self.source)
        self.client = TestClient(fastapi_app)

    def _start(self):
        resp = self.client.post("/v1/session/start")
        self.assertEqual(resp.status_code, 200)
        return resp.json()

    def test_start_session_shows_default_place(self):
        data = self._start()
        self.assertTrue(data["session_id"])
        self.assertEqual(data["status"], "Updated successfully.")
        self.assertEqual(data["phase"], "idle")
        self.assertEqual(data["place"]["label"], "Mumbai")
        self.assertEqual(data["view"]["temperature"], "30°C")
        self.assertEqual(data["view"]["theme"], "theme-sunny")
        self.assertEqual(len(data["view"]["chart"]["values"]), 2)
        self.assertEqual(data["favorites"], [])

    def test_start_session_restores_last_seen(self):
        sid = self._start()["session_id"]
        self.client.post(f"/v1/session/{sid}/search", json={"query": "Oslo"})
        data = self._start()
        self.assertEqual(data["place"]["label"], "Oslo, Oslo, NO")

    def test_search_not_found(self):
        sid = self._start()["session_id"]
        data = self.client.post(f"/v1/session/{sid}/search", json={"query": "nowhere"}).json()
        self.assertEqual(data["status"], "Location not found")
        self.assertEqual(data["place"]["label"], "Mumbai")

    def test_failed_load_keeps_view(self):
        sid = self._start()["session_id"]
        self.source.forecast_error = NetworkFailure("down")
        data = self.client.post(f"/v1/session/{sid}/search", json={"query": "Oslo"}).json()
        self.assertEqual(data["status"], "Failed to load weather.")
        self.assertEqual(data["view"]["place_label"], "Mumbai")

    def test_toggle_units(self):
        sid = self._start()["session_id"]
        data = self.client.post(f"/v1/session/{sid}/units/toggle").json()
        self.assertEqual(data["units"], "imperial")
        self.assertEqual(data["view"]["temperature"], "86°F")
        self.assertEqual(data["view"]["unit_button"], "°F")
        self.assertEqual(self.source.forecast_calls, 1)

    def test_location_endpoint(self):
        sid = self._start()["session_id"]
        denied = self.client.post(f"/v1/session/{sid}/location", json={"error": "User denied Geolocation"}).json()
        self.assertEqual(denied["status"], "Location denied or failed")
        ok = self.client.post(f"/v1/session/{sid}/location", json={"latitude": 1.5, "longitude": 2.5}).json()
        self.assertEqual(ok["place"]["label"], "My location")
        self.assertEqual(ok["view"]["map"], {"lat": 1.5, "lon": 2.5, "zoom": 8})

    def test_location_unsupported(self):
        sid = self._start()["session_id"]
        data = self.client.post(f"/v1/session/{sid}/location", json={"error": "unsupported"}).json()
        self.assertEqual(data["status"], "Geolocation not supported")
        self.assertEqual(data["place"]["label"], "Mumbai")

    def test_favorites_flow(self):
        sid = self._start()["session_id"]
        saved = self.client.post(f"/v1/session/{sid}/favorites", json={"label": "Home"}).json()
        self.assertEqual(saved["status"], "Saved to favorites")
        self.assertEqual(saved["favorites"][0]["label"], "Home")

        loaded = self.client.post(f"/v1/session/{sid}/favorites/0/load")
        self.assertEqual(loaded.status_code, 200)
        self.assertEqual(loaded.json()["place"]["label"], "Home")

        removed = self.client.delete(f"/v1/session/{sid}/favorites/0").json()
        self.assertEqual(removed["favorites"], [])

        self.assertEqual(self.client.delete(f"/v1/session/{sid}/favorites/0").status_code, 404)
        self.assertEqual(self.client.post(f"/v1/session/{sid}/favorites/3/load").status_code, 404)

    def test_get_state(self):
        sid = self._start()["session_id"]
        data = self.client.get(f"/v1/session/{sid}").json()
        self.assertEqual(data["session_id"], sid)
        self.assertEqual(data["place"]["label"], "Mumbai")

    def test_unknown_session_404(self):
        self.assertEqual(self.client.get("/v1/session/unknown").status_code, 404)
        self.assertEqual(self.client.post("/v1/session/unknown/units/toggle").status_code, 404)
        resp = self.client.post("/v1/session/unknown/search", json={"query": "Oslo"})
        self.assertEqual(resp.status_code, 404)


if __name__ == "__main__":
    unittest.main()
