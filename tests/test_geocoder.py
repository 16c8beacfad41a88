import os
import unittest
from unittest.mock import Mock, patch

os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///:memory:")

from devcamper.core.config import settings
from devcamper.services.geocoder import GeocodingError, distance_miles, geocode

_MAPQUEST_PAYLOAD = {
    "results": [
        {
            "locations": [
                {
                    "street": "233 Bay State Rd",
                    "adminArea5": "Boston",
                    "adminArea3": "MA",
                    "postalCode": "02215",
                    "adminArea1": "US",
                    "latLng": {"lat": 42.350846, "lng": -71.103744},
                }
            ]
        }
    ]
}


def _mock_client(status_code=200, payload=None):
    response = Mock()
    response.status_code = status_code
    response.json.return_value = payload
    client = Mock()
    client.__enter__ = Mock(return_value=client)
    client.__exit__ = Mock(return_value=False)
    client.get.return_value = response
    return client


class GeocoderTests(unittest.TestCase):
    def setUp(self):
        self._backup = {
            "GEOCODER_PROVIDER": settings.GEOCODER_PROVIDER,
            "GEOCODER_API_KEY": settings.GEOCODER_API_KEY,
        }
        settings.GEOCODER_PROVIDER = "mapquest"
        settings.GEOCODER_API_KEY = "key"

    def tearDown(self):
        for key, value in self._backup.items():
            setattr(settings, key, value)

    def test_dummy_provider_resolves_nothing(self):
        settings.GEOCODER_PROVIDER = "dummy"
        self.assertIsNone(geocode("233 Bay State Rd Boston MA"))

    def test_mapquest_result_is_parsed(self):
        client = _mock_client(payload=_MAPQUEST_PAYLOAD)
        with patch("devcamper.services.geocoder.httpx.Client", return_value=client):
            loc = geocode("233 Bay State Rd Boston MA 02215")
        params = client.get.call_args.kwargs["params"]
        self.assertEqual(params["location"], "233 Bay State Rd Boston MA 02215")
        self.assertEqual(params["key"], "key")
        self.assertAlmostEqual(loc.latitude, 42.350846)
        self.assertAlmostEqual(loc.longitude, -71.103744)
        self.assertEqual(loc.city, "Boston")
        self.assertEqual(loc.zipcode, "02215")
        self.assertEqual(loc.formatted_address, "233 Bay State Rd, Boston, MA 02215, US")

    def test_empty_result_set(self):
        with patch("devcamper.services.geocoder.httpx.Client", return_value=_mock_client(payload={"results": []})):
            self.assertIsNone(geocode("nowhere"))

    def test_http_error_raises(self):
        with patch("devcamper.services.geocoder.httpx.Client", return_value=_mock_client(status_code=403, payload={})):
            with self.assertRaises(GeocodingError):
                geocode("Boston")

    def test_missing_api_key_raises(self):
        settings.GEOCODER_API_KEY = ""
        with self.assertRaises(GeocodingError):
            geocode("Boston")

    def test_unknown_provider_raises(self):
        settings.GEOCODER_PROVIDER = "somewhere"
        with self.assertRaises(GeocodingError):
            geocode("Boston")

    def test_distance_between_boston_and_lowell(self):
        miles = distance_miles(42.350846, -71.103744, 42.646389, -71.327606)
        self.assertGreater(miles, 20)
        self.assertLess(miles, 25)
        self.assertEqual(distance_miles(42.0, -71.0, 42.0, -71.0), 0)


if __name__ == "__main__":
    unittest.main()
