import tempfile
import uuid
from pathlib import Path
from unittest import mock

from tests.base import ApiTestBase

from devcamper.core.config import settings
from devcamper.models.bootcamp import Bootcamp
from devcamper.models.course import Course
from devcamper.services.geocoder import GeoLocation, GeocodingError


def _bootcamp_payload(**overrides) -> dict:
    payload = {
        "name": "Devworks Bootcamp",
        "description": "Full stack JavaScript bootcamp",
        "website": "https://devworks.com",
        "phone": "(111) 111-1111",
        "email": "enroll@devworks.com",
        "address": "233 Bay State Rd Boston MA 02215",
        "careers": ["Web Development", "UI/UX"],
        "housing": True,
    }
    payload.update(overrides)
    return payload


class BootcampsApiTests(ApiTestBase):
    def setUp(self):
        super().setUp()
        self.publisher_id = self._create_user(email="publisher@example.com", role="publisher")
        self.other_publisher_id = self._create_user(email="other@example.com", role="publisher")
        self.admin_id = self._create_user(email="admin@example.com", role="admin")
        self.user_id = self._create_user(email="user@example.com", role="user")

    def test_list_is_public_and_paginated(self):
        for i in range(3):
            self._create_bootcamp(owner_id=self.publisher_id, name=f"Camp {i}")
        res = self.client.get("/api/v1/bootcamps", params={"limit": 2, "sort": "name"})
        self.assertEqual(res.status_code, 200)
        body = res.json()
        self.assertTrue(body["success"])
        self.assertEqual(body["count"], 2)
        self.assertEqual([row["name"] for row in body["data"]], ["Camp 0", "Camp 1"])
        self.assertEqual(body["pagination"], {"next": {"page": 2, "limit": 2}})
        self.assertEqual(body["data"][0]["courses"], [])

    def test_list_filters_and_projection_over_http(self):
        self._create_bootcamp(owner_id=self.publisher_id, name="Camp A", careers=["Business"], housing=True)
        self._create_bootcamp(owner_id=self.publisher_id, name="Camp B", careers=["UI/UX"], housing=False)

        res = self.client.get("/api/v1/bootcamps?careers[in]=Business&select=name,housing")
        self.assertEqual(res.status_code, 200)
        data = res.json()["data"]
        self.assertEqual(len(data), 1)
        self.assertEqual(data[0]["name"], "Camp A")
        self.assertEqual(set(data[0]) - {"courses"}, {"id", "name", "housing"})

        res = self.client.get("/api/v1/bootcamps?housing=false")
        self.assertEqual([row["name"] for row in res.json()["data"]], ["Camp B"])

    def test_oversized_pagination_falls_back_to_defaults(self):
        self._create_bootcamp(owner_id=self.publisher_id)
        res = self.client.get("/api/v1/bootcamps?page=99999999999999999999&limit=99999999999999999999")
        self.assertEqual(res.status_code, 200)
        body = res.json()
        self.assertEqual(body["count"], 1)
        self.assertEqual(body["pagination"], {})

    def test_unsupported_operator_is_400_envelope(self):
        res = self.client.get("/api/v1/bootcamps?average_cost[ne]=5")
        self.assertEqual(res.status_code, 400)
        body = res.json()
        self.assertFalse(body["success"])
        self.assertIn("ne", body["error"])

    def test_get_single_and_not_found(self):
        bootcamp_id = self._create_bootcamp(owner_id=self.publisher_id)
        res = self.client.get(f"/api/v1/bootcamps/{bootcamp_id}")
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.json()["data"]["slug"], "devworks-bootcamp")

        missing = uuid.uuid4()
        res = self.client.get(f"/api/v1/bootcamps/{missing}")
        self.assertEqual(res.status_code, 404)
        self.assertEqual(res.json(), {"success": False, "error": f"Bootcamp not found with id of {missing}"})

        res = self.client.get("/api/v1/bootcamps/not-an-id")
        self.assertEqual(res.status_code, 404)

    def test_create_requires_authentication_and_role(self):
        res = self.client.post("/api/v1/bootcamps", json=_bootcamp_payload())
        self.assertEqual(res.status_code, 401)
        self.assertEqual(res.json()["error"], "Not authorized to access this route")

        res = self.client.post("/api/v1/bootcamps", json=_bootcamp_payload(), headers=self._auth(self.user_id, "user"))
        self.assertEqual(res.status_code, 403)
        self.assertEqual(res.json()["error"], "User role user is not authorized to access this route")

    def test_publisher_creates_one_bootcamp_with_geocoded_location(self):
        location = GeoLocation(latitude=42.35, longitude=-71.1, city="Boston", state="MA", zipcode="02215", country="US")
        headers = self._auth(self.publisher_id, "publisher")
        with mock.patch("devcamper.api.v1.bootcamps.geocode", return_value=location) as geocode:
            res = self.client.post("/api/v1/bootcamps", json=_bootcamp_payload(), headers=headers)
        self.assertEqual(res.status_code, 201)
        geocode.assert_called_once_with("233 Bay State Rd Boston MA 02215")
        data = res.json()["data"]
        self.assertEqual(data["user_id"], str(self.publisher_id))
        self.assertEqual(data["city"], "Boston")
        self.assertEqual(data["latitude"], 42.35)
        self.assertEqual(data["photo"], "no-photo.jpg")

        res = self.client.post("/api/v1/bootcamps", json=_bootcamp_payload(name="Second Camp"), headers=headers)
        self.assertEqual(res.status_code, 400)
        self.assertIn("has already published a bootcamp", res.json()["error"])

    def test_admin_may_publish_several_bootcamps(self):
        headers = self._auth(self.admin_id, "admin")
        for name in ("Admin Camp 1", "Admin Camp 2"):
            res = self.client.post("/api/v1/bootcamps", json=_bootcamp_payload(name=name), headers=headers)
            self.assertEqual(res.status_code, 201)

    def test_create_validation_and_duplicate_name(self):
        headers = self._auth(self.admin_id, "admin")
        res = self.client.post("/api/v1/bootcamps", json=_bootcamp_payload(careers=["Astrology"]), headers=headers)
        self.assertEqual(res.status_code, 400)
        self.assertFalse(res.json()["success"])

        self.assertEqual(self.client.post("/api/v1/bootcamps", json=_bootcamp_payload(), headers=headers).status_code, 201)
        res = self.client.post("/api/v1/bootcamps", json=_bootcamp_payload(), headers=headers)
        self.assertEqual(res.status_code, 400)
        self.assertEqual(res.json()["error"], "Duplicate field value entered")

    def test_geocoder_failure_is_bad_gateway(self):
        headers = self._auth(self.publisher_id, "publisher")
        with mock.patch("devcamper.api.v1.bootcamps.geocode", side_effect=GeocodingError("timeout")):
            res = self.client.post("/api/v1/bootcamps", json=_bootcamp_payload(), headers=headers)
        self.assertEqual(res.status_code, 502)

    def test_update_is_limited_to_owner_or_admin(self):
        bootcamp_id = self._create_bootcamp(owner_id=self.publisher_id)

        res = self.client.put(
            f"/api/v1/bootcamps/{bootcamp_id}",
            json={"housing": False},
            headers=self._auth(self.other_publisher_id, "publisher"),
        )
        self.assertEqual(res.status_code, 403)

        res = self.client.put(
            f"/api/v1/bootcamps/{bootcamp_id}",
            json={"name": "Renamed Camp", "housing": False},
            headers=self._auth(self.publisher_id, "publisher"),
        )
        self.assertEqual(res.status_code, 200)
        data = res.json()["data"]
        self.assertEqual(data["slug"], "renamed-camp")
        self.assertFalse(data["housing"])

        res = self.client.put(
            f"/api/v1/bootcamps/{bootcamp_id}",
            json={"phone": "(999) 999-9999"},
            headers=self._auth(self.admin_id, "admin"),
        )
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.json()["data"]["phone"], "(999) 999-9999")

    def test_delete_cascades_to_courses(self):
        bootcamp_id = self._create_bootcamp(owner_id=self.publisher_id)
        with self.SessionLocal() as db:
            db.add(
                Course(
                    bootcamp_id=bootcamp_id,
                    user_id=self.publisher_id,
                    title="Front End",
                    description="HTML/CSS",
                    weeks=8,
                    tuition=8000,
                    minimum_skill="beginner",
                )
            )
            db.commit()

        res = self.client.delete(f"/api/v1/bootcamps/{bootcamp_id}", headers=self._auth(self.other_publisher_id, "publisher"))
        self.assertEqual(res.status_code, 403)

        res = self.client.delete(f"/api/v1/bootcamps/{bootcamp_id}", headers=self._auth(self.publisher_id, "publisher"))
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.json(), {"success": True, "data": {}})
        with self.SessionLocal() as db:
            self.assertIsNone(db.get(Bootcamp, bootcamp_id))
            self.assertEqual(db.query(Course).count(), 0)

    def test_radius_search(self):
        self._create_bootcamp(owner_id=self.publisher_id, name="Boston Camp", latitude=42.350846, longitude=-71.103744)
        self._create_bootcamp(owner_id=self.other_publisher_id, name="Lowell Camp", latitude=42.646389, longitude=-71.327606)
        self._create_bootcamp(owner_id=self.admin_id, name="Burlington Camp", latitude=44.477839, longitude=-73.196489)
        self._create_bootcamp(owner_id=self.admin_id, name="Nowhere Camp")

        center = GeoLocation(latitude=42.35, longitude=-71.1)
        with mock.patch("devcamper.api.v1.bootcamps.geocode", return_value=center):
            res = self.client.get("/api/v1/bootcamps/radius/02215/30")
        self.assertEqual(res.status_code, 200)
        body = res.json()
        self.assertEqual(body["count"], 2)
        self.assertEqual({row["name"] for row in body["data"]}, {"Boston Camp", "Lowell Camp"})

        with mock.patch("devcamper.api.v1.bootcamps.geocode", return_value=center):
            res = self.client.get("/api/v1/bootcamps/radius/02215/500")
        self.assertEqual(res.json()["count"], 3)

    def test_radius_search_unknown_zipcode(self):
        with mock.patch("devcamper.api.v1.bootcamps.geocode", return_value=None):
            res = self.client.get("/api/v1/bootcamps/radius/00000/10")
        self.assertEqual(res.status_code, 400)
        res = self.client.get("/api/v1/bootcamps/radius/02215/-1")
        self.assertEqual(res.status_code, 400)

    def test_photo_upload(self):
        bootcamp_id = self._create_bootcamp(owner_id=self.publisher_id)
        headers = self._auth(self.publisher_id, "publisher")
        url = f"/api/v1/bootcamps/{bootcamp_id}/photo"

        with tempfile.TemporaryDirectory() as tmp:
            with mock.patch.object(settings, "FILE_UPLOAD_PATH", tmp):
                res = self.client.put(url, headers=headers)
                self.assertEqual(res.status_code, 400)
                self.assertEqual(res.json()["error"], "Please upload a file")

                res = self.client.put(url, headers=headers, files={"file": ("notes.txt", b"hello", "text/plain")})
                self.assertEqual(res.status_code, 400)
                self.assertEqual(res.json()["error"], "Please upload an image file")

                with mock.patch.object(settings, "MAX_FILE_UPLOAD_BYTES", 4):
                    res = self.client.put(url, headers=headers, files={"file": ("big.png", b"\x89PNG1234", "image/png")})
                self.assertEqual(res.status_code, 400)

                res = self.client.put(url, headers=headers, files={"file": ("me.PNG", b"\x89PNG", "image/png")})
                self.assertEqual(res.status_code, 200)
                filename = f"photo_{bootcamp_id}.png"
                self.assertEqual(res.json(), {"success": True, "data": filename})
                self.assertEqual((Path(tmp) / filename).read_bytes(), b"\x89PNG")

        with self.SessionLocal() as db:
            self.assertEqual(db.get(Bootcamp, bootcamp_id).photo, filename)

    def test_photo_upload_by_non_owner_is_forbidden(self):
        bootcamp_id = self._create_bootcamp(owner_id=self.publisher_id)
        res = self.client.put(
            f"/api/v1/bootcamps/{bootcamp_id}/photo",
            headers=self._auth(self.other_publisher_id, "publisher"),
            files={"file": ("me.png", b"\x89PNG", "image/png")},
        )
        self.assertEqual(res.status_code, 403)
