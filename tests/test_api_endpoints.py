"""
End-to-end tests of the HTTP API against an in-memory database.
"""
import re

import pytest


def create_car_type(client, auth_headers, payload):
    response = client.post("/entity-types", json=payload, headers=auth_headers("admin"))
    assert response.status_code == 201
    return response.json()


def create_car(client, auth_headers, owner="owner-1", **overrides):
    payload = {
        "typeId": "car",
        "name": "Family car",
        "attributes": [
            {"name": "make", "type": "string", "required": True, "value": "Ford"},
            {"name": "color", "type": "string", "value": "red"},
        ],
    }
    payload.update(overrides)
    response = client.post("/entities", json=payload, headers=auth_headers(owner))
    assert response.status_code == 201, response.text
    return response.json()


class TestRootAndHealth:
    """Test service endpoints."""

    def test_root(self, client):
        """Test the root banner."""
        response = client.get("/")
        assert response.status_code == 200
        assert "API is running" in response.json()["message"]

    def test_health(self, client):
        """Test basic health check."""
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_database_health(self, client):
        """Test database health reports catalog sizes."""
        response = client.get("/health/database")
        assert response.json()["status"] == "healthy"
        assert response.json()["entities"] == 0


class TestEntityTypeEndpoints:
    """Test entity type registration over HTTP."""

    def test_create_requires_auth(self, client, car_type_payload):
        """Test create requires auth."""
        response = client.post("/entity-types", json=car_type_payload)
        assert response.status_code == 401
        assert response.json()["kind"] == "auth"
        assert response.headers["WWW-Authenticate"] == "Bearer"

    def test_create_rejects_bad_token(self, client, car_type_payload):
        """Test create rejects bad token."""
        response = client.post(
            "/entity-types", json=car_type_payload, headers={"Authorization": "Bearer not-a-jwt"}
        )
        assert response.status_code == 401

    def test_create_list_and_get(self, client, auth_headers, car_type_payload):
        """Test creating, listing and fetching an entity type."""
        created = create_car_type(client, auth_headers, car_type_payload)
        assert created["id"] == "car"
        assert created["predefinedAttributes"][0] == {
            "name": "make",
            "type": "string",
            "required": True,
            "defaultValue": None,
            "isUserDefined": False,
            "value": None,
            "notApplicable": False,
        }

        listed = client.get("/entity-types").json()
        assert [t["id"] for t in listed] == ["car"]
        assert client.get("/entity-types/car").json()["name"] == "Car"

    def test_duplicate_id_is_conflict(self, client, auth_headers, car_type_payload):
        """Test duplicate id is conflict."""
        create_car_type(client, auth_headers, car_type_payload)

        response = client.post(
            "/entity-types",
            json={**car_type_payload, "name": "Another"},
            headers=auth_headers("admin"),
        )
        assert response.status_code == 409
        assert response.json()["kind"] == "conflict"
        assert client.get("/entity-types/car").json()["name"] == "Car"

    def test_duplicate_attribute_names(self, client, auth_headers):
        """Test duplicate attribute names."""
        response = client.post(
            "/entity-types",
            json={"id": "boat", "name": "Boat", "predefinedAttributes": [{"name": "hull"}, {"name": "hull"}]},
            headers=auth_headers(),
        )
        assert response.status_code == 400
        assert "Duplicate attribute name: hull" in response.json()["detail"]

    def test_unknown_type_is_not_found(self, client):
        """Test unknown type is not found."""
        response = client.get("/entity-types/boat")
        assert response.status_code == 404
        assert response.json() == {"detail": "Entity type not found: boat", "kind": "not_found"}


class TestEntityEndpoints:
    """Test entity creation and the owner's views."""

    def test_create_computes_missing_info(self, client, auth_headers, car_type_payload):
        """Test create computes missing info."""
        create_car_type(client, auth_headers, car_type_payload)

        entity = create_car(client, auth_headers)

        assert entity["ownerId"] == "owner-1"
        assert entity["missingInfoAttributes"] == ["year"]
        assert entity["requestedByUsers"] == []
        assert entity["interactionLog"] == []
        assert [a["name"] for a in entity["attributes"]] == ["make", "color", "year", "automatic"]

        missing = client.get(f"/entities/{entity['id']}/missing-info").json()
        assert missing == {"entityId": entity["id"], "missingInfoAttributes": ["year"]}

    def test_not_applicable_is_not_missing(self, client, auth_headers):
        """Test not applicable is not missing."""
        entity = create_car(client, auth_headers, attributes=[
            {"name": "vin", "required": True, "notApplicable": True, "value": "ignored"},
        ])
        assert entity["missingInfoAttributes"] == []
        assert entity["attributes"][0]["value"] is None

    def test_supplied_id_and_conflict(self, client, auth_headers):
        """Test supplied id and conflict."""
        create_car(client, auth_headers, id="car-42")

        response = client.post(
            "/entities", json={"id": "car-42", "typeId": "car", "name": "Again"}, headers=auth_headers()
        )
        assert response.status_code == 409
        assert client.get("/entities/car-42").json()["name"] == "Family car"

    def test_wrong_value_type_is_rejected(self, client, auth_headers):
        """Test wrong value type is rejected."""
        response = client.post(
            "/entities",
            json={"typeId": "car", "name": "Bad", "attributes": [{"name": "year", "type": "number", "value": "soon"}]},
            headers=auth_headers(),
        )
        assert response.status_code == 400
        assert response.json()["kind"] == "validation"

    def test_malformed_body_is_validation_error(self, client, auth_headers):
        """Test malformed body is validation error."""
        response = client.post("/entities", json={"name": "No type"}, headers=auth_headers())
        assert response.status_code == 400
        assert "typeId" in response.json()["detail"]

    def test_my_entities(self, client, auth_headers):
        """Test the caller only sees their own entities."""
        create_car(client, auth_headers, owner="owner-1", name="Mine")
        create_car(client, auth_headers, owner="owner-2", name="Theirs")

        response = client.get("/entities", headers=auth_headers("owner-1"))
        assert [e["name"] for e in response.json()] == ["Mine"]
        assert client.get("/entities").status_code == 401

    def test_unknown_entity(self, client):
        """Test error when the entity does not exist."""
        response = client.get("/entities/missing")
        assert response.status_code == 404
        assert response.json()["kind"] == "not_found"


class TestRequestInfoEndpoints:
    """Test information requests and the owner's request view."""

    def test_request_info_twice(self, client, auth_headers, car_type_payload):
        """Test request info twice."""
        create_car_type(client, auth_headers, car_type_payload)
        entity = create_car(client, auth_headers)
        url = f"/entities/{entity['id']}/request-info"

        first = client.post(url, json={"attributeNames": ["year"]}, headers=auth_headers("buyer"))
        second = client.post(url, json={"message": "Any service history?"}, headers=auth_headers("buyer"))

        assert first.status_code == 201
        assert first.json() == {"success": True, "entityId": entity["id"]}
        assert second.status_code == 201

        state = client.get(f"/entities/{entity['id']}/requests", headers=auth_headers("owner-1")).json()
        assert state["requestedByUsers"] == ["buyer"]
        assert state["missingInfoAttributes"] == ["year"]
        assert [e["action"] for e in state["interactionLog"]] == ["attribute_requested"] * 2
        assert state["interactionLog"][0]["userId"] == "buyer"
        assert state["interactionLog"][0]["details"] == {"message": None, "attributeNames": ["year"]}
        assert state["interactionLog"][1]["details"]["message"] == "Any service history?"

    def test_request_info_requires_auth(self, client, auth_headers):
        """Test request info requires auth."""
        entity = create_car(client, auth_headers)
        response = client.post(f"/entities/{entity['id']}/request-info", json={})
        assert response.status_code == 401

    def test_request_info_unknown_entity(self, client, auth_headers):
        """Test request info unknown entity."""
        response = client.post("/entities/missing/request-info", json={}, headers=auth_headers("buyer"))
        assert response.status_code == 404

    def test_owner_may_request_on_own_entity(self, client, auth_headers):
        """Test owner may request on own entity."""
        entity = create_car(client, auth_headers)
        response = client.post(
            f"/entities/{entity['id']}/request-info", json={}, headers=auth_headers("owner-1")
        )
        assert response.status_code == 201
        assert client.get(f"/entities/{entity['id']}").json()["requestedByUsers"] == ["owner-1"]

    def test_requests_hidden_from_non_owner(self, client, auth_headers):
        """Test requests hidden from non owner."""
        entity = create_car(client, auth_headers)
        response = client.get(f"/entities/{entity['id']}/requests", headers=auth_headers("buyer"))
        assert response.status_code == 403
        assert response.json()["kind"] == "forbidden"


class TestMarketplaceEndpoints:
    """Test public listing and filtering."""

    @pytest.fixture
    def listings(self, client, auth_headers):
        create_car(client, auth_headers, name="Red Ford")
        create_car(client, auth_headers, name="Blue Fiat", attributes=[
            {"name": "make", "value": "Fiat"},
            {"name": "color", "value": "blue"},
            {"name": "automatic", "type": "boolean", "value": True},
        ])
        create_car(client, auth_headers, name="A book", typeId="book", attributes=[
            {"name": "title", "value": "Dune"},
        ])

    def test_public_listing_needs_no_auth(self, client, listings):
        """Test public listing needs no auth."""
        response = client.get("/public/entities")
        assert response.status_code == 200
        assert len(response.json()) == 3

    def test_search_by_type_and_values(self, client, listings):
        """Test search by type and values."""
        response = client.post(
            "/public/entities/search",
            json={"typeId": "car", "filters": {"color": ["blue", "green"], "make": "fi"}},
        )
        body = response.json()
        assert [e["name"] for e in body["entities"]] == ["Blue Fiat"]

        filters = {f["name"]: f for f in body["filters"]}
        assert set(filters) == {"make", "color", "automatic"}
        assert filters["color"]["values"] == ["red", "blue"]
        assert filters["color"]["widget"] == "multi_select"
        assert filters["automatic"]["widget"] == "tri_state"

    def test_search_without_type_or_filters(self, client, listings):
        """Test search without type or filters."""
        response = client.post("/public/entities/search", json={})
        assert len(response.json()["entities"]) == 3

    def test_empty_filter_values_are_ignored(self, client, listings):
        """Test empty filter values are ignored."""
        response = client.post(
            "/public/entities/search", json={"typeId": "car", "filters": {"color": "", "make": []}}
        )
        assert len(response.json()["entities"]) == 2


class TestAuthEndpoints:
    """Test one-time code sign-in."""

    def read_code(self, email_sender):
        match = re.search(r"<strong>(\d{6})</strong>", email_sender.sent[-1]["html"])
        assert match
        return match.group(1)

    def test_send_and_verify_otp(self, client, email_sender):
        """Test send and verify otp."""
        response = client.post("/auth/send-otp", json={"email": "Ann@Example.com"})
        assert response.status_code == 200
        assert response.json() == {"message": "OTP sent to email."}
        assert email_sender.sent[-1]["to"] == "ann@example.com"

        code = self.read_code(email_sender)
        response = client.post("/auth/verify-otp", json={"email": "ann@example.com", "token": code})
        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "OTP verified. User session created."
        assert body["session"]["user"]["email"] == "ann@example.com"

        # The session works as a bearer credential
        headers = {"Authorization": f"Bearer {body['session']['access_token']}"}
        assert client.get("/entities", headers=headers).status_code == 200

    def test_code_is_single_use(self, client, email_sender):
        """Test code is single use."""
        client.post("/auth/send-otp", json={"email": "ann@example.com"})
        code = self.read_code(email_sender)

        assert client.post("/auth/verify-otp", json={"email": "ann@example.com", "token": code}).status_code == 200
        response = client.post("/auth/verify-otp", json={"email": "ann@example.com", "token": code})
        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid or expired OTP."

    def test_same_user_on_second_sign_in(self, client, email_sender):
        """Test same user on second sign in."""
        user_ids = []
        for _ in range(2):
            client.post("/auth/send-otp", json={"email": "ann@example.com"})
            response = client.post(
                "/auth/verify-otp", json={"email": "ann@example.com", "token": self.read_code(email_sender)}
            )
            user_ids.append(response.json()["session"]["user"]["id"])
        assert user_ids[0] == user_ids[1]

    def test_non_ascii_token_is_rejected(self, client, email_sender):
        """Test a token with non-ASCII characters is an invalid code, not a server error."""
        # Setup
        client.post("/auth/send-otp", json={"email": "ann@example.com"})

        # Test
        response = client.post("/auth/verify-otp", json={"email": "ann@example.com", "token": "12345é"})
        assert response.status_code == 401
        assert response.json() == {"detail": "Invalid or expired OTP.", "kind": "auth"}

        # The outstanding code still works
        code = self.read_code(email_sender)
        assert client.post("/auth/verify-otp", json={"email": "ann@example.com", "token": code}).status_code == 200

    def test_missing_email(self, client):
        """Test missing email."""
        response = client.post("/auth/send-otp", json={})
        assert response.status_code == 400
        assert response.json()["detail"] == "Email is required."

    def test_missing_token(self, client):
        """Test missing token."""
        response = client.post("/auth/verify-otp", json={"email": "ann@example.com"})
        assert response.status_code == 400
        assert response.json()["detail"] == "Email and token are required."

    def test_email_failure_is_bad_gateway(self, client, email_sender):
        """Test email failure is bad gateway."""
        email_sender.fail = True
        response = client.post("/auth/send-otp", json={"email": "ann@example.com"})
        assert response.status_code == 502
        assert response.json()["kind"] == "upstream"
