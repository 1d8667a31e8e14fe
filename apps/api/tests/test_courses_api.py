"""Course API ownership, partial update and not-found tests."""

from __future__ import annotations

import base64
import os
import tempfile
import unittest

from fastapi.testclient import TestClient

from course_api.core.config import get_settings
from course_api.errors import DuplicateAccountError, NotFoundError
from course_api.main import create_app, status_for
from course_api.routes.dependencies import get_course_service


def basic_auth(username: str, secret: str) -> dict[str, str]:
    token = base64.b64encode(f"{username}:{secret}".encode("utf-8")).decode("ascii")
    return {"Authorization": f"Basic {token}"}


X_AUTH = basic_auth("x@example.com", "pw1")
Y_AUTH = basic_auth("y@example.com", "pw2")

COURSE = {
    "title": "Build a Basic Bookcase",
    "description": "High-end furniture projects are great to dream about.",
    "estimatedTime": "12 hours",
    "materialsNeeded": "1/2 x 3/4 inch parting strip",
}


class _SettingsEnvCase(unittest.TestCase):
    _env_keys = ("COURSES_STORAGE_BACKEND", "COURSES_BCRYPT_ROUNDS", "COURSES_DATABASE_PATH")

    def setUp(self) -> None:
        self._old_env = {k: os.environ.get(k) for k in self._env_keys}
        os.environ["COURSES_STORAGE_BACKEND"] = "memory"
        os.environ["COURSES_BCRYPT_ROUNDS"] = "4"
        get_settings.cache_clear()

    def tearDown(self) -> None:
        for key, value in self._old_env.items():
            if value is None:
                os.environ.pop(key, None)
            else:
                os.environ[key] = value
        get_settings.cache_clear()


class _CourseApiCase(_SettingsEnvCase):
    def setUp(self) -> None:
        super().setUp()
        self.app = create_app()
        self.client = TestClient(self.app)
        self.x_id = self._register("x@example.com", "pw1")
        self.y_id = self._register("y@example.com", "pw2")

    def _register(self, email: str, password: str) -> int:
        response = self.client.post(
            "/api/users",
            json={"firstName": "First", "lastName": "Last", "emailAddress": email, "password": password},
        )
        self.assertEqual(response.status_code, 201)
        return response.json()["id"]

    def _create_course(self, headers: dict[str, str], **overrides: str) -> int:
        response = self.client.post("/api/courses", headers=headers, json={**COURSE, **overrides})
        self.assertEqual(response.status_code, 201)
        return response.json()["id"]


class CourseCreateAndReadTests(_CourseApiCase):
    def test_create_sets_owner_and_location(self) -> None:
        response = self.client.post("/api/courses", headers=X_AUTH, json={**COURSE, "userId": self.y_id})

        self.assertEqual(response.status_code, 201)
        course = response.json()
        self.assertEqual(response.headers["Location"], f"/api/courses/{course['id']}")
        self.assertEqual(course["userId"], self.x_id)
        self.assertEqual(course["estimatedTime"], "12 hours")
        self.assertEqual(course["materialsNeeded"], "1/2 x 3/4 inch parting strip")

    def test_optional_fields_default_to_null(self) -> None:
        course_id = self._create_course(X_AUTH, estimatedTime=None, materialsNeeded=None)

        course = self.client.get(f"/api/courses/{course_id}").json()

        self.assertIsNone(course["estimatedTime"])
        self.assertIsNone(course["materialsNeeded"])

    def test_reads_are_public_and_embed_owner_without_password(self) -> None:
        course_id = self._create_course(X_AUTH)

        listed = self.client.get("/api/courses")
        single = self.client.get(f"/api/courses/{course_id}")

        self.assertEqual(listed.status_code, 200)
        self.assertEqual([course["id"] for course in listed.json()], [course_id])
        self.assertEqual(single.status_code, 200)
        owner = single.json()["owner"]
        self.assertEqual(owner["id"], self.x_id)
        self.assertEqual(owner["emailAddress"], "x@example.com")
        self.assertNotIn("password", owner)

    def test_create_reports_every_missing_required_field(self) -> None:
        response = self.client.post("/api/courses", headers=X_AUTH, json={"title": "", "estimatedTime": "1h"})

        self.assertEqual(response.status_code, 400)
        errors = response.json()["details"]["errors"]
        self.assertEqual(
            errors,
            [
                {"field": "title", "message": 'Please provide a value for "title"'},
                {"field": "description", "message": 'Please provide a value for "description"'},
            ],
        )
        self.assertEqual(self.app.state.store.course_write_count, 0)

    def test_unknown_course_is_not_found(self) -> None:
        response = self.client.get("/api/courses/999")

        self.assertEqual(response.status_code, 404)
        self.assertEqual(
            response.json(),
            {
                "code": "RESOURCE_NOT_FOUND",
                "message": "Course not found, course: 999. Please search for another course.",
            },
        )


class CourseOwnershipTests(_CourseApiCase):
    def test_non_owner_update_is_forbidden_and_course_unchanged(self) -> None:
        course_id = self._create_course(X_AUTH)

        response = self.client.put(f"/api/courses/{course_id}", headers=Y_AUTH, json={"title": "Taken over"})

        self.assertEqual(response.status_code, 403)
        self.assertEqual(response.json()["code"], "FORBIDDEN")
        self.assertEqual(response.json()["message"], f"You are not allowed to update the course: {course_id}.")
        stored = self.client.get(f"/api/courses/{course_id}").json()
        self.assertEqual(stored["title"], COURSE["title"])

    def test_non_owner_delete_is_forbidden_and_course_remains(self) -> None:
        course_id = self._create_course(X_AUTH)

        response = self.client.delete(f"/api/courses/{course_id}", headers=Y_AUTH)

        self.assertEqual(response.status_code, 403)
        self.assertEqual(response.json()["message"], f"You are not allowed to delete the course: {course_id}.")
        self.assertEqual(self.client.get(f"/api/courses/{course_id}").status_code, 200)

    def test_denied_and_unauthenticated_are_distinct(self) -> None:
        course_id = self._create_course(X_AUTH)

        unauthenticated = self.client.put(f"/api/courses/{course_id}", json={"title": "New"})
        forbidden = self.client.put(f"/api/courses/{course_id}", headers=Y_AUTH, json={"title": "New"})

        self.assertEqual(unauthenticated.status_code, 401)
        self.assertEqual(forbidden.status_code, 403)

    def test_owner_partial_update_keeps_untouched_fields(self) -> None:
        course_id = self._create_course(X_AUTH)

        response = self.client.put(
            f"/api/courses/{course_id}",
            headers=X_AUTH,
            json={"description": "A new description", "title": "", "userId": self.y_id},
        )

        self.assertEqual(response.status_code, 204)
        self.assertEqual(response.content, b"")
        stored = self.client.get(f"/api/courses/{course_id}").json()
        self.assertEqual(stored["description"], "A new description")
        self.assertEqual(stored["title"], COURSE["title"])
        self.assertEqual(stored["estimatedTime"], COURSE["estimatedTime"])
        self.assertEqual(stored["materialsNeeded"], COURSE["materialsNeeded"])
        self.assertEqual(stored["userId"], self.x_id)

    def test_owner_update_can_set_optional_fields(self) -> None:
        course_id = self._create_course(X_AUTH, estimatedTime=None)

        self.client.put(f"/api/courses/{course_id}", headers=X_AUTH, json={"estimatedTime": "3 hours"})

        self.assertEqual(self.client.get(f"/api/courses/{course_id}").json()["estimatedTime"], "3 hours")

    def test_missing_course_update_is_not_found_not_denied(self) -> None:
        response = self.client.put("/api/courses/999", headers=Y_AUTH, json={"title": "New"})

        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json()["code"], "RESOURCE_NOT_FOUND")

    def test_owner_delete_then_repeat_is_not_found(self) -> None:
        course_id = self._create_course(X_AUTH)

        first = self.client.delete(f"/api/courses/{course_id}", headers=X_AUTH)
        second = self.client.delete(f"/api/courses/{course_id}", headers=X_AUTH)

        self.assertEqual(first.status_code, 204)
        self.assertEqual(second.status_code, 404)
        self.assertEqual(self.client.get(f"/api/courses/{course_id}").status_code, 404)


class ErrorBoundaryTests(_CourseApiCase):
    def test_error_classes_map_to_status_codes(self) -> None:
        self.assertEqual(status_for(DuplicateAccountError("exists")), 400)
        self.assertEqual(status_for(NotFoundError("missing")), 404)

    def test_unexpected_failure_renders_error_envelope(self) -> None:
        class _BrokenService:
            def list_courses(self):
                raise RuntimeError("storage exploded")

        self.app.dependency_overrides[get_course_service] = lambda: _BrokenService()
        client = TestClient(self.app, raise_server_exceptions=False)

        with self.assertLogs("course_api.main", level="ERROR"):
            response = client.get("/api/courses")

        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json(), {"code": "INTERNAL_ERROR", "message": "Internal server error"})

    def test_non_integer_course_id_is_validation_error(self) -> None:
        response = self.client.get("/api/courses/abc")

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["details"]["errors"][0]["field"], "courseId")


class SqliteBackedAppTests(_SettingsEnvCase):
    def setUp(self) -> None:
        super().setUp()
        self._tmpdir = tempfile.TemporaryDirectory()
        os.environ["COURSES_STORAGE_BACKEND"] = "sqlite"
        os.environ["COURSES_DATABASE_PATH"] = os.path.join(self._tmpdir.name, "courses.db")
        get_settings.cache_clear()

    def tearDown(self) -> None:
        self._tmpdir.cleanup()
        super().tearDown()

    def test_ownership_flow_and_store_closed_on_shutdown(self) -> None:
        app = create_app()
        with TestClient(app) as client:
            for email, password in (("x@example.com", "pw1"), ("y@example.com", "pw2")):
                created = client.post(
                    "/api/users",
                    json={"firstName": "F", "lastName": "L", "emailAddress": email, "password": password},
                )
                self.assertEqual(created.status_code, 201)

            course = client.post("/api/courses", headers=X_AUTH, json=COURSE)
            self.assertEqual(course.status_code, 201)
            course_id = course.json()["id"]

            self.assertEqual(
                client.put(f"/api/courses/{course_id}", headers=Y_AUTH, json={"title": "No"}).status_code,
                403,
            )
            self.assertEqual(
                client.put(f"/api/courses/{course_id}", headers=X_AUTH, json={"title": "Yes"}).status_code,
                204,
            )
            self.assertEqual(client.get(f"/api/courses/{course_id}").json()["title"], "Yes")

        with self.assertRaises(RuntimeError):
            app.state.store.find_course(course_id)

    def test_out_of_range_course_ids_are_rejected_before_storage(self) -> None:
        app = create_app()
        with TestClient(app) as client:
            for course_id in ("99999999999999999999", str(2**63), "0", "-1"):
                with self.subTest(course_id=course_id):
                    response = client.get(f"/api/courses/{course_id}")

                    self.assertEqual(response.status_code, 400)
                    self.assertEqual(response.json()["details"]["errors"][0]["field"], "courseId")

            self.assertEqual(client.get(f"/api/courses/{2**63 - 1}").status_code, 404)
