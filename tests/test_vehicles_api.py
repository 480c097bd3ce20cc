from sqlalchemy import select

from garage_booking.models.vehicle import Vehicle
from garage_booking.services import vehicle_service
from tests.conftest import add_vehicle, vehicle_payload

URL = "/api/v1/vehicles"


async def primary_ids(session_maker, user_id: int) -> list[int]:
    async with session_maker() as s:
        result = await s.execute(
            select(Vehicle.id).where(Vehicle.user_id == user_id, Vehicle.is_primary == True)  # noqa: E712
        )
        return [row[0] for row in result.all()]


class TestVehicles:
    async def test_create_and_list(self, client, auth_headers):
        created = await add_vehicle(client, auth_headers, nextServiceMileage=60000)
        assert created["licensePlate"] == "123 TU 4567"
        assert created["isPrimary"] is False
        listed = (await client.get(URL, headers=auth_headers)).json()
        assert [v["id"] for v in listed] == [created["id"]]

    async def test_requires_auth(self, client):
        assert (await client.get(URL)).status_code == 401
        assert (await client.get(URL, headers={"Authorization": "Bearer nonsense"})).status_code == 401

    async def test_invalid_payload(self, client, auth_headers):
        resp = await client.post(URL, json=vehicle_payload(year="soon", vin=None), headers=auth_headers)
        assert resp.status_code == 400
        fields = {e["field"] for e in resp.json()["detail"]["errors"]}
        assert fields == {"year", "vin"}

    async def test_single_primary_on_create(self, client, auth_headers, session_maker):
        first = await add_vehicle(client, auth_headers, isPrimary=True)
        second = await add_vehicle(client, auth_headers, isPrimary=True, vin="VF1RJA00000000002")
        assert await primary_ids(session_maker, first["userId"]) == [second["id"]]

    async def test_single_primary_on_update(self, client, auth_headers, session_maker):
        first = await add_vehicle(client, auth_headers, isPrimary=True)
        second = await add_vehicle(client, auth_headers, vin="VF1RJA00000000002")
        resp = await client.patch(f"{URL}/{second['id']}", json={"isPrimary": True}, headers=auth_headers)
        assert resp.status_code == 200
        assert resp.json()["isPrimary"] is True
        assert await primary_ids(session_maker, first["userId"]) == [second["id"]]

    async def test_primary_is_per_user(self, client, auth_headers, other_auth_headers, session_maker):
        mine = await add_vehicle(client, auth_headers, isPrimary=True)
        theirs = await add_vehicle(client, other_auth_headers, isPrimary=True)
        assert await primary_ids(session_maker, mine["userId"]) == [mine["id"]]
        assert await primary_ids(session_maker, theirs["userId"]) == [theirs["id"]]

    async def test_partial_update_keeps_other_fields(self, client, auth_headers):
        created = await add_vehicle(client, auth_headers)
        resp = await client.patch(f"{URL}/{created['id']}", json={"status": "in_service"}, headers=auth_headers)
        assert resp.json()["status"] == "in_service"
        assert resp.json()["model"] == "Clio"

    async def test_ownership(self, client, auth_headers, other_auth_headers):
        created = await add_vehicle(client, auth_headers)
        url = f"{URL}/{created['id']}"
        assert (await client.patch(url, json={"status": "sold"}, headers=other_auth_headers)).status_code == 403
        assert (await client.delete(url, headers=other_auth_headers)).status_code == 403
        assert (await client.delete(f"{URL}/999", headers=auth_headers)).status_code == 404
        assert (await client.delete(url, headers=auth_headers)).status_code == 204
        assert (await client.get(URL, headers=auth_headers)).json() == []

    async def test_lost_primary_race_is_conflict(self, client, auth_headers, session_maker, monkeypatch):
        first = await add_vehicle(client, auth_headers, isPrimary=True)

        async def _other_request_won(*args, **kwargs):
            return None

        monkeypatch.setattr(vehicle_service, "_clear_primary", _other_request_won)
        resp = await client.post(
            URL, json=vehicle_payload(isPrimary=True, vin="VF1RJA00000000002"), headers=auth_headers
        )
        assert resp.status_code == 409
        second = await add_vehicle(client, auth_headers, vin="VF1RJA00000000003")
        resp = await client.patch(f"{URL}/{second['id']}", json={"isPrimary": True}, headers=auth_headers)
        assert resp.status_code == 409
        assert await primary_ids(session_maker, first["userId"]) == [first["id"]]
