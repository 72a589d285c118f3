"""Tests for the /users HTTP surface and the status-only error contract."""

import pytest

from .helpers import tomorrow, yesterday


async def _create_owner(client, name="Finn"):
    response = await client.post("/users", json={"name": name})
    assert response.status_code == 201
    return response.json()


class TestHealth:
    @pytest.mark.asyncio
    async def test_health(self, client):
        response = await client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "healthy", "service": "taskboard"}


class TestBodyParsing:
    @pytest.mark.asyncio
    async def test_create_owner_from_json(self, client):
        owner = await _create_owner(client, "Priti")
        assert owner["name"] == "Priti"
        assert isinstance(owner["id"], int)

    @pytest.mark.asyncio
    async def test_create_owner_from_form(self, client):
        response = await client.post("/users", data={"name": "Priti"})
        assert response.status_code == 201
        assert response.json()["name"] == "Priti"

    @pytest.mark.asyncio
    async def test_form_booleans_and_blank_due(self, client):
        owner = await _create_owner(client)
        response = await client.post(
            f"/users/{owner['id']}/tasks",
            data={"name": "sweep", "complete": "on", "due": ""},
        )
        assert response.status_code == 201
        task = response.json()
        assert task["complete"] is True
        assert task["due"] is None

    @pytest.mark.asyncio
    async def test_malformed_json_is_bad_request(self, client):
        response = await client.post(
            "/users",
            content="{not json",
            headers={"content-type": "application/json"},
        )
        assert response.status_code == 400
        assert response.text == "Bad Request"

    @pytest.mark.asyncio
    async def test_missing_name_is_bad_request(self, client):
        response = await client.post("/users", json={})
        assert response.status_code == 400
        assert response.text == "Bad Request"


class TestErrorContract:
    @pytest.mark.asyncio
    async def test_unknown_owner_is_plain_not_found(self, client):
        response = await client.get("/users/999")
        assert response.status_code == 404
        assert response.text == "Not Found"
        assert response.headers["content-type"].startswith("text/plain")

    @pytest.mark.asyncio
    async def test_unknown_route_is_plain_not_found(self, client):
        response = await client.get("/nowhere")
        assert response.status_code == 404
        assert response.text == "Not Found"

    @pytest.mark.asyncio
    async def test_non_integer_id_is_bad_request(self, client):
        response = await client.get("/users/abc")
        assert response.status_code == 400
        assert response.text == "Bad Request"

    @pytest.mark.asyncio
    async def test_wrong_method_keeps_status(self, client):
        response = await client.delete("/users")
        assert response.status_code == 405
        assert response.text == "Method Not Allowed"


class TestOwnerTasks:
    @pytest.mark.asyncio
    async def test_create_task_assigns_owner(self, client):
        owner = await _create_owner(client)
        response = await client.post(
            f"/users/{owner['id']}/tasks",
            json={"name": "bake a cake", "due": tomorrow().isoformat()},
        )

        assert response.status_code == 201
        task = response.json()
        assert task["owner_id"] == owner["id"]
        assert task["complete"] is False
        assert task["overdue"] is False
        assert task["time_remaining"] > 0

    @pytest.mark.asyncio
    async def test_create_task_for_missing_owner(self, client):
        response = await client.post("/users/5/tasks", json={"name": "x"})
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_list_incomplete_tasks(self, client):
        owner = await _create_owner(client)
        for name, complete in [("a", True), ("b", True), ("c", False), ("d", False)]:
            await client.post(
                f"/users/{owner['id']}/tasks", json={"name": name, "complete": complete}
            )

        everything = await client.get(f"/users/{owner['id']}/tasks")
        incomplete = await client.get(f"/users/{owner['id']}/tasks", params={"status": "incomplete"})
        complete = await client.get(f"/users/{owner['id']}/tasks", params={"status": "complete"})

        assert len(everything.json()) == 4
        assert sorted(t["name"] for t in incomplete.json()) == ["c", "d"]
        assert sorted(t["name"] for t in complete.json()) == ["a", "b"]

    @pytest.mark.asyncio
    async def test_assign_existing_task(self, client):
        finn = await _create_owner(client, "Finn")
        jake = await _create_owner(client, "Jake")
        created = await client.post(f"/users/{finn['id']}/tasks", json={"name": "x"})
        task_id = created.json()["id"]

        response = await client.put(f"/users/{jake['id']}/tasks/{task_id}")

        assert response.status_code == 200
        assert response.json()["owner_id"] == jake["id"]

    @pytest.mark.asyncio
    async def test_assign_missing_task(self, client):
        owner = await _create_owner(client)
        response = await client.put(f"/users/{owner['id']}/tasks/77")
        assert response.status_code == 404


class TestTaskEndpoints:
    @pytest.mark.asyncio
    async def test_task_without_due_has_null_time_remaining(self, client):
        owner = await _create_owner(client)
        created = await client.post(f"/users/{owner['id']}/tasks", json={"name": "someday"})

        response = await client.get(f"/users/tasks/{created.json()['id']}")

        assert response.status_code == 200
        assert response.json()["time_remaining"] is None
        assert response.json()["overdue"] is False

    @pytest.mark.asyncio
    async def test_overdue_task(self, client):
        owner = await _create_owner(client)
        created = await client.post(
            f"/users/{owner['id']}/tasks",
            json={"name": "late", "due": yesterday().isoformat()},
        )
        assert created.json()["overdue"] is True
        assert created.json()["time_remaining"] < 0

    @pytest.mark.asyncio
    async def test_patch_marks_complete(self, client):
        owner = await _create_owner(client)
        created = await client.post(
            f"/users/{owner['id']}/tasks",
            json={"name": "late", "due": yesterday().isoformat()},
        )

        response = await client.patch(
            f"/users/tasks/{created.json()['id']}", data={"complete": "true"}
        )

        assert response.status_code == 200
        assert response.json()["complete"] is True
        assert response.json()["overdue"] is False
        assert response.json()["name"] == "late"

    @pytest.mark.asyncio
    async def test_complete_all_and_clear_completed(self, client):
        owner = await _create_owner(client)
        for name, complete in [("a", True), ("b", False), ("c", False)]:
            await client.post(
                f"/users/{owner['id']}/tasks", json={"name": name, "complete": complete}
            )

        completed = await client.post("/users/tasks/complete-all")
        assert completed.json() == {"updated": 2}

        again = await client.post("/users/tasks/complete-all")
        assert again.json() == {"updated": 0}

        cleared = await client.delete("/users/tasks/completed")
        assert cleared.json() == {"deleted": 3}

        remaining = await client.get("/users/tasks")
        assert remaining.json() == []

    @pytest.mark.asyncio
    async def test_list_all_tasks_filter(self, client):
        owner = await _create_owner(client)
        await client.post(f"/users/{owner['id']}/tasks", json={"name": "a", "complete": True})
        await client.post(f"/users/{owner['id']}/tasks", json={"name": "b"})

        response = await client.get("/users/tasks", params={"status": "incomplete"})

        assert [t["name"] for t in response.json()] == ["b"]


class TestOwners:
    @pytest.mark.asyncio
    async def test_list_and_get_owners(self, client):
        finn = await _create_owner(client, "Finn")
        await _create_owner(client, "Jake")

        listed = await client.get("/users")
        fetched = await client.get(f"/users/{finn['id']}")

        assert sorted(o["name"] for o in listed.json()) == ["Finn", "Jake"]
        assert fetched.json() == finn
