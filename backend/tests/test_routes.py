"""
Transporter Backend — API Endpoint Tests
==========================================

What:  End-to-end HTTP tests against create_app() with a real SQLite database.
How:   HTTPX AsyncClient over ASGITransport; tables created per test.

What we test:
    ✅ List endpoints return 200 and a JSON array, empty or not
    ✅ Create-then-read returns the same attributes
    ✅ Unknown ids return 404 for GET and PUT; PUT never creates a row
    ✅ Malformed or out-of-range ids and malformed bodies are client errors (422)
    ✅ Duplicate licence numbers return 409
    ✅ Truck lookup is served on GET
    ✅ CORS header on success and error responses; request ID echoed
"""

import pytest

ORIGIN = {"Origin": "http://dashboard.example"}


class TestDriverEndpoints:

    @pytest.mark.asyncio
    async def test_list_drivers_empty(self, test_client):
        response = await test_client.get("/api/v1/drivers")

        assert response.status_code == 200
        assert response.json() == []

    @pytest.mark.asyncio
    async def test_create_then_read(self, test_client, driver_payload):
        created = await test_client.post("/api/v1/driver", json=driver_payload)

        assert created.status_code == 201
        body = created.json()
        assert isinstance(body["id"], int)

        fetched = await test_client.get(f"/api/v1/driver/{body['id']}")

        assert fetched.status_code == 200
        for field, value in driver_payload.items():
            assert fetched.json()[field] == value
        assert fetched.json()["status"] == "active"

    @pytest.mark.asyncio
    async def test_list_contains_created_drivers(self, test_client, driver_payload):
        await test_client.post("/api/v1/driver", json=driver_payload)
        await test_client.post(
            "/api/v1/driver",
            json={**driver_payload, "name": "Siti", "driver_license_number": "SIM-B1-0002"},
        )

        response = await test_client.get("/api/v1/drivers")

        assert response.status_code == 200
        assert [d["name"] for d in response.json()] == ["Budi Santoso", "Siti"]

    @pytest.mark.asyncio
    async def test_get_missing_driver_is_404(self, test_client):
        response = await test_client.get("/api/v1/driver/999")

        assert response.status_code == 404
        assert response.json()["error"] == "not_found"

    @pytest.mark.asyncio
    async def test_get_non_integer_id_is_client_error(self, test_client):
        response = await test_client.get("/api/v1/driver/abc")

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_update_driver(self, test_client, driver_payload):
        created = (await test_client.post("/api/v1/driver", json=driver_payload)).json()
        changes = {**driver_payload, "phone_number": "+6289999999999", "status": "inactive"}

        response = await test_client.put(f"/api/v1/driver/{created['id']}", json=changes)

        assert response.status_code == 200
        assert response.json()["id"] == created["id"]
        assert response.json()["phone_number"] == "+6289999999999"
        fetched = await test_client.get(f"/api/v1/driver/{created['id']}")
        assert fetched.json()["status"] == "inactive"

    @pytest.mark.asyncio
    async def test_update_missing_driver_does_not_create(self, test_client, driver_payload):
        response = await test_client.put("/api/v1/driver/42", json=driver_payload)

        assert response.status_code == 404
        assert (await test_client.get("/api/v1/drivers")).json() == []
        assert (await test_client.get("/api/v1/driver/42")).status_code == 404

    @pytest.mark.asyncio
    async def test_malformed_body_is_rejected(self, test_client, driver_payload):
        missing_name = {k: v for k, v in driver_payload.items() if k != "name"}

        response = await test_client.post("/api/v1/driver", json=missing_name)

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_invalid_json_is_rejected(self, test_client):
        response = await test_client.post(
            "/api/v1/driver",
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_duplicate_license_is_409(self, test_client, driver_payload):
        await test_client.post("/api/v1/driver", json=driver_payload)

        response = await test_client.post(
            "/api/v1/driver", json={**driver_payload, "name": "Someone Else"}
        )

        assert response.status_code == 409
        assert response.json()["error"] == "conflict"
        assert response.json()["details"] == {"field": "driver_license_number"}

    @pytest.mark.asyncio
    async def test_client_supplied_id_is_ignored(self, test_client, driver_payload):
        response = await test_client.post("/api/v1/driver", json={**driver_payload, "id": 500})

        assert response.status_code == 201
        assert response.json()["id"] != 500


class TestTruckEndpoints:

    @pytest.mark.asyncio
    async def test_list_trucks_empty(self, test_client):
        response = await test_client.get("/api/v1/trucks")

        assert response.status_code == 200
        assert response.json() == []

    @pytest.mark.asyncio
    async def test_truck_lifecycle(self, test_client, truck_payload):
        created = await test_client.post("/api/v1/truck", json=truck_payload)
        assert created.status_code == 201
        truck_id = created.json()["id"]

        fetched = await test_client.get(f"/api/v1/truck/{truck_id}")
        assert fetched.status_code == 200
        assert fetched.json()["license_number"] == truck_payload["license_number"]

        updated = await test_client.put(
            f"/api/v1/truck/{truck_id}", json={**truck_payload, "truck_type": "wingbox"}
        )
        assert updated.status_code == 200
        assert updated.json()["truck_type"] == "wingbox"

        listed = await test_client.get("/api/v1/trucks")
        assert [t["id"] for t in listed.json()] == [truck_id]

    @pytest.mark.asyncio
    async def test_get_missing_truck_is_404(self, test_client):
        response = await test_client.get("/api/v1/truck/31")

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_update_missing_truck_is_404(self, test_client, truck_payload):
        response = await test_client.put("/api/v1/truck/31", json=truck_payload)

        assert response.status_code == 404
        assert (await test_client.get("/api/v1/trucks")).json() == []

    @pytest.mark.asyncio
    async def test_duplicate_plate_is_409(self, test_client, truck_payload):
        await test_client.post("/api/v1/truck", json=truck_payload)

        response = await test_client.post("/api/v1/truck", json=truck_payload)

        assert response.status_code == 409

    @pytest.mark.asyncio
    async def test_update_into_taken_plate_is_409(self, test_client, truck_payload):
        await test_client.post("/api/v1/truck", json=truck_payload)
        other = (
            await test_client.post(
                "/api/v1/truck", json={**truck_payload, "license_number": "L 8001 UZ"}
            )
        ).json()

        response = await test_client.put(f"/api/v1/truck/{other['id']}", json=truck_payload)

        assert response.status_code == 409


class TestCrossCutting:

    @pytest.mark.asyncio
    async def test_cors_header_on_success(self, test_client):
        response = await test_client.get("/api/v1/drivers", headers=ORIGIN)

        assert response.headers["access-control-allow-origin"] == "*"

    @pytest.mark.asyncio
    async def test_cors_header_on_error(self, test_client):
        response = await test_client.get("/api/v1/driver/1", headers=ORIGIN)

        assert response.status_code == 404
        assert response.headers["access-control-allow-origin"] == "*"

    @pytest.mark.asyncio
    async def test_cors_preflight(self, test_client):
        response = await test_client.options(
            "/api/v1/driver",
            headers={**ORIGIN, "Access-Control-Request-Method": "POST"},
        )

        assert response.status_code == 200
        assert response.headers["access-control-allow-origin"] == "*"

    @pytest.mark.asyncio
    async def test_request_id_echoed(self, test_client):
        response = await test_client.get(
            "/api/v1/driver/1", headers={"X-Request-ID": "trace-123"}
        )

        assert response.headers["x-request-id"] == "trace-123"
        assert response.json()["request_id"] == "trace-123"

    @pytest.mark.asyncio
    async def test_unknown_route_is_404(self, test_client):
        response = await test_client.get("/api/v1/trailers")

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_wrong_method_is_405(self, test_client):
        response = await test_client.post("/api/v1/drivers", json={})

        assert response.status_code == 405

    @pytest.mark.asyncio
    async def test_health(self, test_client):
        response = await test_client.get("/health")

        assert response.status_code == 200
        assert response.json()["database"] == "connected"


class TestIdentifierRange:

    @pytest.mark.asyncio
    @pytest.mark.parametrize("resource", ["driver", "truck"])
    @pytest.mark.parametrize("bad_id", [0, -1, 2**31, 2**63])
    async def test_get_out_of_range_id_is_client_error(self, test_client, resource, bad_id):
        response = await test_client.get(f"/api/v1/{resource}/{bad_id}")

        assert response.status_code == 422

    @pytest.mark.asyncio
    @pytest.mark.parametrize("bad_id", [2**31, 2**63])
    async def test_put_out_of_range_driver_id(self, test_client, driver_payload, bad_id):
        response = await test_client.put(f"/api/v1/driver/{bad_id}", json=driver_payload)

        assert response.status_code == 422
        assert (await test_client.get("/api/v1/drivers")).json() == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize("bad_id", [2**31, 2**63])
    async def test_put_out_of_range_truck_id(self, test_client, truck_payload, bad_id):
        response = await test_client.put(f"/api/v1/truck/{bad_id}", json=truck_payload)

        assert response.status_code == 422
        assert (await test_client.get("/api/v1/trucks")).json() == []

    @pytest.mark.asyncio
    async def test_largest_id_is_a_plain_miss(self, test_client):
        response = await test_client.get(f"/api/v1/driver/{2**31 - 1}")

        assert response.status_code == 404


class TestTruckBodyFormat:

    @pytest.mark.asyncio
    async def test_truck_fields_are_snake_case(self, test_client, truck_payload):
        await test_client.post("/api/v1/truck", json=truck_payload)

        truck = (await test_client.get("/api/v1/trucks")).json()[0]

        assert {"license_number", "truck_type", "license_type", "production_year"} <= set(truck)
        assert "License_number" not in truck
