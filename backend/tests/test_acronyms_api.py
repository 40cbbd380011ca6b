"""
TIL Backend — Acronym API Tests
================================

What:  End-to-end tests for /api/acronyms/ through the FastAPI app.
How:   HTTPX AsyncClient over ASGITransport; fresh app and database per test.

What we test:
    ✅ Create → list shows the record once, fields echoed, id assigned
    ✅ Update is a full replacement (long form and owner)
    ✅ Delete shrinks the collection by exactly one
    ✅ Search by short and by long form
    ✅ /sorted, /first, /{id}/user, /{id}/categories
    ✅ 401 without or with an invalid token, 400 on bad bodies, 404 on unknown ids
"""

import uuid

import pytest

ACRONYMS_URI = "/api/acronyms/"


async def _create(client, auth_user, acronym_payload, short="OMG", long="Oh My God"):
    response = await client.post(
        ACRONYMS_URI,
        json=acronym_payload(auth_user["id"], short, long),
        headers=auth_user["headers"],
    )
    assert response.status_code == 201
    return response.json()


class TestAcronymCrud:
    """Create / read / update / delete."""

    @pytest.mark.asyncio
    async def test_create_then_list(self, test_client, auth_user, acronym_payload):
        created = await _create(test_client, auth_user, acronym_payload)

        response = await test_client.get(ACRONYMS_URI)

        assert response.status_code == 200
        acronyms = response.json()
        assert len(acronyms) == 1
        assert acronyms[0] == created
        assert created["id"] is not None
        assert created["short"] == "OMG"
        assert created["long"] == "Oh My God"
        assert created["userID"] == auth_user["id"]

    @pytest.mark.asyncio
    async def test_get_by_id(self, test_client, auth_user, acronym_payload):
        created = await _create(test_client, auth_user, acronym_payload)

        response = await test_client.get(f"{ACRONYMS_URI}{created['id']}")

        assert response.status_code == 200
        assert response.json() == created

    @pytest.mark.asyncio
    async def test_update_replaces_long_form_and_owner(
        self, test_client, auth_user, acronym_payload
    ):
        created = await _create(test_client, auth_user, acronym_payload)
        other = await test_client.post(
            "/api/users/",
            json={"name": "Bob", "username": "bob", "password": "password"},
        )
        new_owner_id = other.json()["id"]

        response = await test_client.put(
            f"{ACRONYMS_URI}{created['id']}",
            json=acronym_payload(new_owner_id, "OMG", "Oh My Gosh"),
            headers=auth_user["headers"],
        )
        assert response.status_code == 200

        fetched = (await test_client.get(f"{ACRONYMS_URI}{created['id']}")).json()
        assert fetched["short"] == "OMG"
        assert fetched["long"] == "Oh My Gosh"
        assert fetched["userID"] == new_owner_id

    @pytest.mark.asyncio
    async def test_delete_removes_exactly_one(self, test_client, auth_user, acronym_payload):
        keep = await _create(test_client, auth_user, acronym_payload, "LOL", "Laugh Out Loud")
        gone = await _create(test_client, auth_user, acronym_payload)

        response = await test_client.delete(
            f"{ACRONYMS_URI}{gone['id']}", headers=auth_user["headers"]
        )

        assert response.status_code == 204
        remaining = (await test_client.get(ACRONYMS_URI)).json()
        assert remaining == [keep]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("method", ["get", "put", "delete"])
    async def test_unknown_id_returns_404(
        self, test_client, auth_user, acronym_payload, method
    ):
        kwargs = {"headers": auth_user["headers"]}
        if method == "put":
            kwargs["json"] = acronym_payload(auth_user["id"])

        response = await getattr(test_client, method)(f"{ACRONYMS_URI}999", **kwargs)

        assert response.status_code == 404
        assert response.json()["error"] == "not_found"

    @pytest.mark.asyncio
    async def test_create_with_unknown_owner_returns_404(
        self, test_client, auth_user, acronym_payload
    ):
        response = await test_client.post(
            ACRONYMS_URI,
            json=acronym_payload(str(uuid.uuid4())),
            headers=auth_user["headers"],
        )

        assert response.status_code == 404
        assert (await test_client.get(ACRONYMS_URI)).json() == []


class TestAcronymQueries:
    """Search, first and sorted."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("term", ["OMG", "Oh My God"])
    async def test_search_by_short_or_long(
        self, test_client, auth_user, acronym_payload, term
    ):
        created = await _create(test_client, auth_user, acronym_payload)
        await _create(test_client, auth_user, acronym_payload, "LOL", "Laugh Out Loud")

        response = await test_client.get(ACRONYMS_URI, params={"term": term})

        assert response.status_code == 200
        assert response.json() == [created]

    @pytest.mark.asyncio
    async def test_blank_search_term_returns_400(self, test_client):
        response = await test_client.get(ACRONYMS_URI, params={"term": "  "})

        assert response.status_code == 400
        assert response.json()["details"] == {"field": "term"}

    @pytest.mark.asyncio
    async def test_sorted_puts_lol_before_omg(self, test_client, auth_user, acronym_payload):
        await _create(test_client, auth_user, acronym_payload, "OMG", "Oh My God")
        await _create(test_client, auth_user, acronym_payload, "LOL", "Laugh Out Loud")

        response = await test_client.get(f"{ACRONYMS_URI}sorted")

        assert [a["short"] for a in response.json()] == ["LOL", "OMG"]

    @pytest.mark.asyncio
    async def test_first(self, test_client, auth_user, acronym_payload):
        created = await _create(test_client, auth_user, acronym_payload)
        await _create(test_client, auth_user, acronym_payload, "LOL", "Laugh Out Loud")

        response = await test_client.get(f"{ACRONYMS_URI}first")

        assert response.status_code == 200
        assert response.json() == created

    @pytest.mark.asyncio
    async def test_first_on_empty_store_returns_404(self, test_client):
        response = await test_client.get(f"{ACRONYMS_URI}first")

        assert response.status_code == 404


class TestAcronymRelationships:
    """/{id}/user and /{id}/categories."""

    async def _category(self, client, auth_user, name):
        response = await client.post(
            "/api/categories/", json={"name": name}, headers=auth_user["headers"]
        )
        assert response.status_code == 201
        return response.json()

    @pytest.mark.asyncio
    async def test_owner_is_public_projection(self, test_client, auth_user, acronym_payload):
        created = await _create(test_client, auth_user, acronym_payload)

        response = await test_client.get(f"{ACRONYMS_URI}{created['id']}/user")

        assert response.status_code == 200
        assert response.json() == {
            "id": auth_user["id"],
            "name": "Alice",
            "username": auth_user["username"],
        }

    @pytest.mark.asyncio
    async def test_categories_in_attachment_order(
        self, test_client, auth_user, acronym_payload
    ):
        acronym = await _create(test_client, auth_user, acronym_payload)
        teenager = await self._category(test_client, auth_user, "Teenager")
        funny = await self._category(test_client, auth_user, "Funny")

        for category in (teenager, funny):
            response = await test_client.post(
                f"{ACRONYMS_URI}{acronym['id']}/categories/{category['id']}",
                headers=auth_user["headers"],
            )
            assert response.status_code == 201

        response = await test_client.get(f"{ACRONYMS_URI}{acronym['id']}/categories")

        assert response.json() == [teenager, funny]

    @pytest.mark.asyncio
    async def test_reattach_and_detach(self, test_client, auth_user, acronym_payload):
        acronym = await _create(test_client, auth_user, acronym_payload)
        funny = await self._category(test_client, auth_user, "Funny")
        link = f"{ACRONYMS_URI}{acronym['id']}/categories/{funny['id']}"

        await test_client.post(link, headers=auth_user["headers"])
        again = await test_client.post(link, headers=auth_user["headers"])
        assert again.status_code == 201
        listed = (await test_client.get(f"{ACRONYMS_URI}{acronym['id']}/categories")).json()
        assert listed == [funny]

        detached = await test_client.delete(link, headers=auth_user["headers"])
        assert detached.status_code == 204
        listed = (await test_client.get(f"{ACRONYMS_URI}{acronym['id']}/categories")).json()
        assert listed == []

    @pytest.mark.asyncio
    async def test_attach_unknown_category_returns_404(
        self, test_client, auth_user, acronym_payload
    ):
        acronym = await _create(test_client, auth_user, acronym_payload)

        response = await test_client.post(
            f"{ACRONYMS_URI}{acronym['id']}/categories/999", headers=auth_user["headers"]
        )

        assert response.status_code == 404


class TestAcronymAuthAndValidation:
    """401 and 400 responses."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "headers",
        [{}, {"Authorization": "Bearer not-a-real-token"}, {"Authorization": "Token abc"}],
    )
    async def test_create_without_valid_token_returns_401(
        self, test_client, auth_user, acronym_payload, headers
    ):
        response = await test_client.post(
            ACRONYMS_URI, json=acronym_payload(auth_user["id"]), headers=headers
        )

        assert response.status_code == 401
        assert response.headers["WWW-Authenticate"] == "Bearer"
        assert (await test_client.get(ACRONYMS_URI)).json() == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "method, suffix",
        [("put", ""), ("delete", ""), ("post", "/categories/1"), ("delete", "/categories/1")],
    )
    async def test_mutations_require_token(
        self, test_client, auth_user, acronym_payload, method, suffix
    ):
        created = await _create(test_client, auth_user, acronym_payload)
        kwargs = {"json": acronym_payload(auth_user["id"])} if method == "put" else {}

        response = await getattr(test_client, method)(
            f"{ACRONYMS_URI}{created['id']}{suffix}", **kwargs
        )

        assert response.status_code == 401

    @pytest.mark.asyncio
    @pytest.mark.parametrize("missing", ["short", "long", "userID"])
    async def test_missing_field_returns_400(
        self, test_client, auth_user, acronym_payload, missing
    ):
        body = acronym_payload(auth_user["id"])
        del body[missing]

        response = await test_client.post(ACRONYMS_URI, json=body, headers=auth_user["headers"])

        assert response.status_code == 400
        payload = response.json()
        assert payload["error"] == "validation_error"
        assert any(missing in err["loc"] for err in payload["details"]["errors"])

    @pytest.mark.asyncio
    async def test_non_integer_id_returns_400(self, test_client):
        response = await test_client.get(f"{ACRONYMS_URI}abc")

        assert response.status_code == 400

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "path",
        [
            str(2**70),
            str(2**31),
            "0",
            "-1",
            f"{2**70}/user",
            f"{2**70}/categories",
        ],
    )
    async def test_out_of_range_id_returns_400(self, test_client, path):
        response = await test_client.get(f"{ACRONYMS_URI}{path}")

        assert response.status_code == 400
        assert response.json()["error"] == "validation_error"

    @pytest.mark.asyncio
    async def test_largest_valid_id_returns_404(self, test_client):
        response = await test_client.get(f"{ACRONYMS_URI}{2**31 - 1}")

        assert response.status_code == 404

    @pytest.mark.asyncio
    @pytest.mark.parametrize("method", ["post", "delete"])
    async def test_out_of_range_category_id_returns_400(
        self, test_client, auth_user, acronym_payload, method
    ):
        created = await _create(test_client, auth_user, acronym_payload)

        response = await getattr(test_client, method)(
            f"{ACRONYMS_URI}{created['id']}/categories/{2**70}",
            headers=auth_user["headers"],
        )

        assert response.status_code == 400
