"""Booking flow: validation, ownership and the double-booking switch."""

from datetime import datetime

import pytest

from garage_booking.core.config import settings
from garage_booking.services import appointment_service
from tests.conftest import add_vehicle

URL = "/api/v1/appointments"


def booking(garage_id: int, vehicle_id: int, **overrides) -> dict:
    data = {
        "garageId": garage_id,
        "vehicleId": vehicle_id,
        "serviceType": "Oil Change",
        "date": "2026-03-11T10:30:00",
        "status": "scheduled",
        "notes": "Squeaky brakes too",
        "paymentMethod": "cash",
        "paymentStatus": "pending",
    }
    data.update(overrides)
    return data


@pytest.fixture
async def vehicle(client, auth_headers) -> dict:
    return await add_vehicle(client, auth_headers)


class TestCreate:
    async def test_books_and_injects_user(self, client, garages, vehicle, auth_headers, frozen_now):
        resp = await client.post(URL, json=booking(garages[0].id, vehicle["id"], userId=999), headers=auth_headers)
        assert resp.status_code == 201, resp.text
        body = resp.json()
        assert body["userId"] == vehicle["userId"]
        assert body["date"] == "2026-03-11T10:30:00"
        assert body["paymentMethod"] == "cash"

        listed = (await client.get(URL, headers=auth_headers)).json()
        assert [a["id"] for a in listed] == [body["id"]]

    async def test_requires_auth(self, client, garages, frozen_now):
        resp = await client.post(URL, json=booking(garages[0].id, 1))
        assert resp.status_code == 401

    async def test_malformed_payload(self, client, garages, vehicle, auth_headers, frozen_now):
        resp = await client.post(
            URL,
            json={"garageId": garages[0].id, "vehicleId": vehicle["id"], "date": "not-a-date", "paymentMethod": "bitcoin"},
            headers=auth_headers,
        )
        assert resp.status_code == 400
        fields = {e["field"] for e in resp.json()["detail"]["errors"]}
        assert {"serviceType", "date", "paymentMethod"} <= fields

    async def test_unknown_garage(self, client, vehicle, auth_headers, frozen_now):
        resp = await client.post(URL, json=booking(999, vehicle["id"]), headers=auth_headers)
        assert resp.status_code == 404

    async def test_unknown_vehicle(self, client, garages, auth_headers, frozen_now):
        resp = await client.post(URL, json=booking(garages[0].id, 999), headers=auth_headers)
        assert resp.status_code == 404

    async def test_someone_elses_vehicle(self, client, garages, vehicle, other_auth_headers, frozen_now):
        resp = await client.post(URL, json=booking(garages[0].id, vehicle["id"]), headers=other_auth_headers)
        assert resp.status_code == 403
        assert resp.json()["detail"] == "Not authorized"

    async def test_service_not_offered(self, client, garages, vehicle, auth_headers, frozen_now):
        resp = await client.post(
            URL, json=booking(garages[1].id, vehicle["id"], serviceType="Oil Change"), headers=auth_headers
        )
        assert resp.status_code == 400
        assert resp.json()["detail"]["errors"][0]["field"] == "serviceType"

    @pytest.mark.parametrize(
        "when",
        [
            "2026-03-10T09:00:00",  # already passed today
            "2026-03-09T10:00:00",  # yesterday
            "2026-04-20T10:00:00",  # beyond the 30 day horizon
            "2026-03-11T10:15:00",  # off the half-hour grid
            "2026-03-11T07:30:00",  # before opening
            "2026-03-11T18:30:00",  # after closing
        ],
    )
    async def test_rejects_unbookable_times(self, client, garages, vehicle, auth_headers, frozen_now, when):
        resp = await client.post(URL, json=booking(garages[0].id, vehicle["id"], date=when), headers=auth_headers)
        assert resp.status_code == 400
        assert resp.json()["detail"]["errors"][0]["field"] == "date"

    async def test_first_slot_today(self, client, garages, vehicle, auth_headers, frozen_now):
        resp = await client.post(
            URL, json=booking(garages[0].id, vehicle["id"], date="2026-03-10T09:30:00"), headers=auth_headers
        )
        assert resp.status_code == 201

    async def test_aware_timestamp_converted_to_garage_time(self, client, garages, vehicle, auth_headers, frozen_now):
        # Tunis is UTC+1 in March
        resp = await client.post(
            URL, json=booking(garages[0].id, vehicle["id"], date="2026-03-11T09:30:00Z"), headers=auth_headers
        )
        assert resp.status_code == 201
        assert resp.json()["date"] == "2026-03-11T10:30:00"


class TestDoubleBooking:
    async def test_allowed_by_default(self, client, garages, vehicle, auth_headers, frozen_now):
        payload = booking(garages[0].id, vehicle["id"])
        assert (await client.post(URL, json=payload, headers=auth_headers)).status_code == 201
        assert (await client.post(URL, json=payload, headers=auth_headers)).status_code == 201

    async def test_rejected_when_disabled(self, client, garages, vehicle, auth_headers, frozen_now, monkeypatch):
        monkeypatch.setattr(settings, "allow_double_booking", False)
        payload = booking(garages[0].id, vehicle["id"])
        assert (await client.post(URL, json=payload, headers=auth_headers)).status_code == 201
        assert (await client.post(URL, json=payload, headers=auth_headers)).status_code == 409
        other_time = booking(garages[0].id, vehicle["id"], date="2026-03-11T11:00:00")
        assert (await client.post(URL, json=other_time, headers=auth_headers)).status_code == 201


class TestManage:
    async def _book(self, client, garages, vehicle, auth_headers) -> dict:
        resp = await client.post(URL, json=booking(garages[0].id, vehicle["id"]), headers=auth_headers)
        assert resp.status_code == 201
        return resp.json()

    async def test_get_update_delete(self, client, garages, vehicle, auth_headers, frozen_now):
        appt = await self._book(client, garages, vehicle, auth_headers)
        url = f"{URL}/{appt['id']}"

        assert (await client.get(url, headers=auth_headers)).json()["serviceType"] == "Oil Change"

        resp = await client.patch(
            url,
            json={"date": "2026-03-12T14:00:00", "serviceType": "Diagnostics", "paymentStatus": "completed"},
            headers=auth_headers,
        )
        assert resp.status_code == 200
        body = resp.json()
        assert body["date"] == "2026-03-12T14:00:00"
        assert body["serviceType"] == "Diagnostics"
        assert body["paymentStatus"] == "completed"

        assert (await client.delete(url, headers=auth_headers)).status_code == 204
        assert (await client.get(url, headers=auth_headers)).status_code == 404

    async def test_status_update_keeps_date(self, client, garages, vehicle, auth_headers, frozen_now):
        appt = await self._book(client, garages, vehicle, auth_headers)
        resp = await client.patch(f"{URL}/{appt['id']}", json={"status": "cancelled"}, headers=auth_headers)
        assert resp.json()["status"] == "cancelled"
        assert resp.json()["date"] == appt["date"]

    async def test_resending_own_date_after_slot_passed(
        self, client, garages, vehicle, auth_headers, frozen_now, monkeypatch
    ):
        appt = await self._book(client, garages, vehicle, auth_headers)
        monkeypatch.setattr(appointment_service, "garage_now", lambda: datetime(2026, 3, 11, 11, 15))
        resp = await client.patch(
            f"{URL}/{appt['id']}",
            json={"date": appt["date"], "status": "completed"},
            headers=auth_headers,
        )
        assert resp.status_code == 200, resp.text
        assert resp.json()["status"] == "completed"
        assert resp.json()["date"] == appt["date"]

    async def test_reschedule_validated(self, client, garages, vehicle, auth_headers, frozen_now):
        appt = await self._book(client, garages, vehicle, auth_headers)
        resp = await client.patch(f"{URL}/{appt['id']}", json={"date": "2026-03-12T19:00:00"}, headers=auth_headers)
        assert resp.status_code == 400

    async def test_other_user_is_forbidden(self, client, garages, vehicle, auth_headers, other_auth_headers, frozen_now):
        appt = await self._book(client, garages, vehicle, auth_headers)
        url = f"{URL}/{appt['id']}"
        assert (await client.get(url, headers=other_auth_headers)).status_code == 403
        assert (await client.patch(url, json={"notes": "x"}, headers=other_auth_headers)).status_code == 403
        assert (await client.delete(url, headers=other_auth_headers)).status_code == 403
        assert (await client.get(URL, headers=other_auth_headers)).json() == []

    async def test_missing(self, client, auth_headers):
        assert (await client.delete(f"{URL}/42", headers=auth_headers)).status_code == 404
