"""
HTTP round trips through the FastAPI app with an in-memory database.
"""

import unittest
from datetime import timedelta

from fastapi.testclient import TestClient
from sqlmodel import Session

from barbershop.db import get_session
from barbershop.main import create_app
from barbershop.services.availability import BOOKED
from factories import make_engine, upcoming_monday

PASSWORD = "s3cret-pass"


class ApiTestCase(unittest.TestCase):

    def setUp(self):
        self.engine = make_engine()

        def override_session():
            with Session(self.engine) as session:
                yield session

        app = create_app(lifespan=None)
        app.dependency_overrides[get_session] = override_session
        self.api = TestClient(app)
        self.monday = upcoming_monday()

    def tearDown(self):
        self.api.close()
        self.engine.dispose()

    def register(self, email, role="client", **extra):
        response = self.api.post("/users", json={"email": email, "password": PASSWORD, "role": role, **extra})
        self.assertEqual(response.status_code, 201, response.text)
        return response.json()

    def login(self, email):
        response = self.api.post("/auth/login", data={"username": email, "password": PASSWORD})
        self.assertEqual(response.status_code, 200, response.text)
        return {"Authorization": f"Bearer {response.json()['access_token']}"}

    def user(self, email, role="client", **extra):
        self.register(email, role, **extra)
        return self.login(email)

    def barber_with_service(self, email="barber@example.com", duration=30):
        headers = self.user(email, "barber", first_name="Bob")
        barber = self.api.post("/barbers", json={"bio": "fades"}, headers=headers)
        self.assertEqual(barber.status_code, 201, barber.text)
        service = self.api.post(
            "/services", json={"name": "Haircut", "duration_minutes": duration, "price": 50000}, headers=headers
        )
        self.assertEqual(service.status_code, 201, service.text)
        return headers, barber.json()["id"], service.json()["id"]

    def book(self, headers, barber_id, service_id, start_time, on_date=None, **extra):
        return self.api.post("/bookings", json={
            "barber_id": barber_id,
            "service_id": service_id,
            "date": (on_date or self.monday).isoformat(),
            "start_time": start_time,
            **extra,
        }, headers=headers)


class TestUsers(ApiTestCase):

    def test_health(self):
        self.assertEqual(self.api.get("/health").json(), {"status": "ok"})

    def test_register_login_and_me(self):
        headers = self.user("ann@example.com", first_name="Ann")
        me = self.api.get("/me", headers=headers).json()
        self.assertEqual(me["email"], "ann@example.com")
        self.assertEqual(me["role"], "client")
        self.assertEqual(me["first_name"], "Ann")

    def test_duplicate_email(self):
        self.register("ann@example.com")
        response = self.api.post("/users", json={"email": "ann@example.com", "password": PASSWORD, "role": "client"})
        self.assertEqual(response.status_code, 409)

    def test_bad_credentials(self):
        self.register("ann@example.com")
        response = self.api.post("/auth/login", data={"username": "ann@example.com", "password": "wrong-pass"})
        self.assertEqual(response.status_code, 401)

    def test_requires_token(self):
        self.assertEqual(self.api.get("/me").status_code, 401)


class TestBarberSchedule(ApiTestCase):

    def test_profile_seeds_default_week(self):
        headers, barber_id, _ = self.barber_with_service()
        week = self.api.get("/barbers/me/schedule", headers=headers).json()
        self.assertEqual(len(week), 7)
        self.assertEqual(week[0]["day"], "monday")
        self.assertEqual(week[0]["lunch_start"], "13:00")
        self.assertFalse(week[6]["is_working"])

    def test_second_profile_conflicts(self):
        headers, _, _ = self.barber_with_service()
        self.assertEqual(self.api.post("/barbers", json={}, headers=headers).status_code, 409)

    def test_clients_cannot_create_profiles_or_services(self):
        headers = self.user("ann@example.com")
        self.assertEqual(self.api.post("/barbers", json={}, headers=headers).status_code, 403)
        response = self.api.post("/services", json={"name": "x", "duration_minutes": 30, "price": 1}, headers=headers)
        self.assertEqual(response.status_code, 403)

    def test_replace_week(self):
        headers, barber_id, _ = self.barber_with_service()
        response = self.api.put("/barbers/me/schedule", json=[
            {"day": "tuesday", "start_time": "10:00", "end_time": "14:00"},
        ], headers=headers)
        self.assertEqual(response.status_code, 200, response.text)
        self.assertEqual([e["day"] for e in response.json()], ["tuesday"])

        week = self.api.get(f"/barbers/{barber_id}/schedule",
                            params={"week_start": self.monday.isoformat()}).json()
        self.assertTrue(week[0]["is_off"])
        self.assertFalse(week[1]["is_off"])
        self.assertEqual(week[1]["times"][-1], "14:00")

    def test_invalid_week_is_rejected(self):
        headers, _, _ = self.barber_with_service()
        response = self.api.put("/barbers/me/schedule", json=[
            {"day": "monday", "start_time": "10:00", "end_time": "14:00", "lunch_start": "15:00", "lunch_end": "16:00"},
        ], headers=headers)
        self.assertEqual(response.status_code, 400)
        response = self.api.put("/barbers/me/schedule", json=[
            {"day": "monday", "start_time": "9:00", "end_time": "14:00"},
        ], headers=headers)
        self.assertEqual(response.status_code, 422)

    def test_services_listing(self):
        _, barber_id, service_id = self.barber_with_service()
        services = self.api.get(f"/barbers/{barber_id}/services").json()
        self.assertEqual([s["id"] for s in services], [service_id])
        self.assertEqual(self.api.get("/barbers/999/services").status_code, 404)

    def test_unknown_barber_schedule(self):
        self.assertEqual(self.api.get("/barbers/999/schedule").status_code, 404)


class TestBookingFlow(ApiTestCase):

    def setUp(self):
        super().setUp()
        self.barber_headers, self.barber_id, self.service_id = self.barber_with_service()
        self.ann = self.user("ann@example.com", first_name="Ann")
        self.ben = self.user("ben@example.com")

    def test_monday_scenario(self):
        first = self.book(self.ann, self.barber_id, self.service_id, "14:00")
        self.assertEqual(first.status_code, 201, first.text)
        self.assertEqual(first.json()["end_time"], "14:30")
        self.assertEqual(first.json()["status"], "PENDING")
        self.assertEqual(first.json()["client"]["first_name"], "Ann")

        second = self.book(self.ben, self.barber_id, self.service_id, "14:15")
        self.assertEqual(second.status_code, 400)
        self.assertEqual(second.json()["detail"], BOOKED)

        third = self.book(self.ben, self.barber_id, self.service_id, "14:30")
        self.assertEqual(third.status_code, 201, third.text)
        self.assertEqual(third.json()["end_time"], "15:00")

        week = self.api.get(f"/barbers/{self.barber_id}/schedule",
                            params={"week_start": self.monday.isoformat()}).json()
        slots = {s["time"]: s["available"] for s in week[0]["slots"]}
        self.assertFalse(slots["14:00"])
        self.assertFalse(slots["14:40"])
        self.assertTrue(slots["15:20"])
        self.assertEqual(week[0]["booked_ranges"], [
            {"start": "14:00", "end": "14:30"}, {"start": "14:30", "end": "15:00"},
        ])

    def test_lunch_and_closed_day(self):
        lunch = self.book(self.ann, self.barber_id, self.service_id, "13:30")
        self.assertEqual(lunch.status_code, 400)
        self.assertIn("lunch", lunch.json()["detail"])

        sunday = self.book(self.ann, self.barber_id, self.service_id, "10:00", on_date=self.monday + timedelta(days=6))
        self.assertEqual(sunday.status_code, 400)

    def test_clients_only_and_validation(self):
        self.assertEqual(self.book(self.barber_headers, self.barber_id, self.service_id, "10:00").status_code, 403)
        self.assertEqual(self.book(self.ann, self.barber_id, self.service_id, "10:0").status_code, 422)
        self.assertEqual(self.book(self.ann, 999, self.service_id, "10:00").status_code, 404)

    def test_availability_probe(self):
        self.book(self.ann, self.barber_id, self.service_id, "10:00")
        params = {"date": self.monday.isoformat(), "service_id": self.service_id}

        busy = self.api.get(f"/barbers/{self.barber_id}/availability", params={**params, "start_time": "10:10"}).json()
        self.assertFalse(busy["is_available"])
        self.assertEqual(busy["end_time"], "10:40")
        self.assertEqual(busy["reason"], BOOKED)

        free = self.api.get(f"/barbers/{self.barber_id}/availability", params={**params, "start_time": "10:30"}).json()
        self.assertTrue(free["is_available"])
        self.assertIsNone(free["reason"])

    def test_reschedule_and_cancel(self):
        booking_id = self.book(self.ann, self.barber_id, self.service_id, "10:00").json()["id"]

        stranger = self.api.patch(f"/bookings/{booking_id}/reschedule",
                                  json={"date": self.monday.isoformat(), "start_time": "11:00"}, headers=self.ben)
        self.assertEqual(stranger.status_code, 403)

        moved = self.api.patch(f"/bookings/{booking_id}/reschedule",
                               json={"date": self.monday.isoformat(), "start_time": "10:15", "reason": "late"},
                               headers=self.ann)
        self.assertEqual(moved.status_code, 200, moved.text)
        self.assertEqual(moved.json()["end_time"], "10:45")
        self.assertEqual(moved.json()["notes"], "[Rescheduled: late]")

        cancelled = self.api.delete(f"/bookings/{booking_id}", headers=self.ann)
        self.assertEqual(cancelled.json()["status"], "CANCELLED")

        again = self.api.patch(f"/bookings/{booking_id}/reschedule",
                               json={"date": self.monday.isoformat(), "start_time": "11:00"}, headers=self.ann)
        self.assertEqual(again.status_code, 400)

        self.assertEqual(self.api.delete("/bookings/999", headers=self.ann).status_code, 404)

    def test_status_changes_by_barber(self):
        booking_id = self.book(self.ann, self.barber_id, self.service_id, "10:00").json()["id"]
        response = self.api.patch(f"/bookings/{booking_id}/status", json={"status": "CONFIRMED"},
                                  headers=self.barber_headers)
        self.assertEqual(response.status_code, 200, response.text)
        self.assertEqual(response.json()["status"], "CONFIRMED")

        bad = self.api.patch(f"/bookings/{booking_id}/status", json={"status": "DONE"}, headers=self.barber_headers)
        self.assertEqual(bad.status_code, 422)

    def test_bulk_status(self):
        ids = [self.book(self.ann, self.barber_id, self.service_id, t).json()["id"] for t in ("10:00", "11:00")]

        self.assertEqual(self.api.patch("/bookings/bulk-status", json={"booking_ids": ids, "status": "CONFIRMED"},
                                        headers=self.ann).status_code, 403)

        missing = self.api.patch("/bookings/bulk-status",
                                 json={"booking_ids": ids + [999], "status": "CONFIRMED"}, headers=self.barber_headers)
        self.assertEqual(missing.status_code, 404)

        response = self.api.patch("/bookings/bulk-status",
                                  json={"booking_ids": ids, "status": "COMPLETED", "reason": "done"},
                                  headers=self.barber_headers)
        self.assertEqual(response.status_code, 200, response.text)
        self.assertEqual({b["status"] for b in response.json()}, {"COMPLETED"})

        listing = self.api.get("/barbers/me/bookings", params={"status": "COMPLETED"}, headers=self.barber_headers)
        self.assertEqual(listing.json()["pagination"]["total"], 2)

    def test_listings_and_notifications(self):
        self.book(self.ann, self.barber_id, self.service_id, "10:00")
        self.book(self.ben, self.barber_id, self.service_id, "11:00")

        mine = self.api.get("/bookings/me", headers=self.ann).json()
        self.assertEqual(mine["pagination"]["total"], 1)
        self.assertEqual(mine["pagination"]["limit"], 10)
        self.assertEqual(mine["bookings"][0]["start_time"], "10:00")

        notifications = self.api.get("/notifications/me", headers=self.barber_headers).json()
        self.assertEqual(len(notifications), 2)
        self.assertEqual({n["title"] for n in notifications}, {"New booking"})

        barber_page = self.api.get("/barbers/me/bookings", headers=self.barber_headers).json()
        self.assertEqual(barber_page["pagination"]["limit"], 10)
        self.assertEqual(barber_page["pagination"]["total"], 2)


if __name__ == "__main__":
    unittest.main()
