import unittest

from weather_dashboard.main import app


class TestMain(unittest.TestCase):
    def test_app_metadata(self):
        self.assertEqual(app.title, "Weather Monitoring Dashboard")
        paths = {route.path for route in app.routes}
        self.assertIn("/api/weather", paths)


if __name__ == "__main__":
    unittest.main()
