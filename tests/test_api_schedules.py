import pytest
from httpx import AsyncClient

from .factories import SeededTenant
from .utils import user_headers


def _schedule_payload(tenant: SeededTenant, **overrides) -> dict:
    payload = {"name": "Lunch menu", "layout_id": tenant.layout_id, "priority": 60}
    payload.update(overrides)
    return payload


@pytest.mark.anyio("asyncio")
async def test_schedule_api_crud(api_client: AsyncClient, tenant: SeededTenant) -> None:
    headers = user_headers(customer_id=tenant.customer_id)
    payload = _schedule_payload(
        tenant, start_time="11:30:00", end_time="14:00:00", days_of_week=["Tue", "Mon"]
    )

    create_response = await api_client.post("/api/v1/schedules", json=payload, headers=headers)
    assert create_response.status_code == 201
    created = create_response.json()
    schedule_id = created["schedule_id"]
    assert created["customer_id"] == tenant.customer_id
    assert created["days_of_week"] == ["Mon", "Tue"]
    assert created["is_active"] is True

    list_response = await api_client.get("/api/v1/schedules", headers=headers)
    assert list_response.status_code == 200
    body = list_response.json()
    assert [item["schedule_id"] for item in body["data"]] == [schedule_id]
    assert body["pagination"] == {"page": 1, "limit": 10, "total": 1, "total_pages": 1}

    update_response = await api_client.patch(
        f"/api/v1/schedules/{schedule_id}", json={"priority": 90, "is_active": False}, headers=headers
    )
    assert update_response.status_code == 200
    updated = update_response.json()
    assert updated["priority"] == 90
    assert updated["is_active"] is False
    assert updated["name"] == "Lunch menu"

    assignment_response = await api_client.post(
        f"/api/v1/schedules/{schedule_id}/assignments",
        json={"assignment_type": "Player", "target_player_id": tenant.player_id},
        headers=headers,
    )
    assert assignment_response.status_code == 201
    assignment = assignment_response.json()
    assert assignment["assignment_type"] == "Player"

    detail_response = await api_client.get(f"/api/v1/schedules/{schedule_id}", headers=headers)
    assert detail_response.status_code == 200
    assert [a["assignment_id"] for a in detail_response.json()["assignments"]] == [
        assignment["assignment_id"]
    ]

    remove_response = await api_client.delete(
        f"/api/v1/schedules/{schedule_id}/assignments/{assignment['assignment_id']}", headers=headers
    )
    assert remove_response.status_code == 204

    delete_response = await api_client.delete(f"/api/v1/schedules/{schedule_id}", headers=headers)
    assert delete_response.status_code == 204

    missing_response = await api_client.get(f"/api/v1/schedules/{schedule_id}", headers=headers)
    assert missing_response.status_code == 404
    assert missing_response.json()["code"] == "schedule-not-found"


@pytest.mark.anyio("asyncio")
async def test_schedule_api_requires_authentication(api_client: AsyncClient) -> None:
    response = await api_client.get("/api/v1/schedules")
    assert response.status_code == 401

    response = await api_client.get("/api/v1/schedules", headers={"Authorization": "Bearer not-a-token"})
    assert response.status_code == 401


@pytest.mark.anyio("asyncio")
async def test_schedule_api_enforces_roles(api_client: AsyncClient, tenant: SeededTenant) -> None:
    viewer = user_headers(customer_id=tenant.customer_id, role="Viewer")
    manager = user_headers(customer_id=tenant.customer_id, role="SiteManager")

    forbidden = await api_client.post("/api/v1/schedules", json=_schedule_payload(tenant), headers=viewer)
    assert forbidden.status_code == 403
    assert forbidden.json()["code"] == "forbidden"

    created = await api_client.post("/api/v1/schedules", json=_schedule_payload(tenant), headers=manager)
    assert created.status_code == 201
    schedule_id = created.json()["schedule_id"]

    listed = await api_client.get("/api/v1/schedules", headers=viewer)
    assert listed.status_code == 200

    delete_response = await api_client.delete(f"/api/v1/schedules/{schedule_id}", headers=manager)
    assert delete_response.status_code == 403


@pytest.mark.anyio("asyncio")
async def test_schedule_api_is_tenant_scoped(api_client: AsyncClient, tenant: SeededTenant) -> None:
    owner = user_headers(customer_id=tenant.customer_id)
    stranger = user_headers(customer_id=tenant.other_customer_id)

    created = await api_client.post("/api/v1/schedules", json=_schedule_payload(tenant), headers=owner)
    schedule_id = created.json()["schedule_id"]

    assert (await api_client.get(f"/api/v1/schedules/{schedule_id}", headers=stranger)).status_code == 404
    assert (await api_client.get("/api/v1/schedules", headers=stranger)).json()["data"] == []

    foreign_layout = await api_client.post(
        "/api/v1/schedules",
        json=_schedule_payload(tenant, layout_id=tenant.other_layout_id),
        headers=owner,
    )
    assert foreign_layout.status_code == 404
    assert foreign_layout.json()["code"] == "layout-not-found"


@pytest.mark.anyio("asyncio")
async def test_schedule_api_validates_payloads(api_client: AsyncClient, tenant: SeededTenant) -> None:
    headers = user_headers(customer_id=tenant.customer_id)

    out_of_range = await api_client.post(
        "/api/v1/schedules", json=_schedule_payload(tenant, priority=150), headers=headers
    )
    assert out_of_range.status_code == 422

    partial_clock = await api_client.post(
        "/api/v1/schedules", json=_schedule_payload(tenant, start_time="09:00:00"), headers=headers
    )
    assert partial_clock.status_code == 422

    created = await api_client.post(
        "/api/v1/schedules",
        json=_schedule_payload(tenant, start_date="2025-01-01", end_date="2025-01-31"),
        headers=headers,
    )
    schedule_id = created.json()["schedule_id"]

    inverted = await api_client.patch(
        f"/api/v1/schedules/{schedule_id}", json={"end_date": "2024-12-01"}, headers=headers
    )
    assert inverted.status_code == 422
    assert inverted.json()["code"] == "invalid-schedule"

    null_name = await api_client.patch(f"/api/v1/schedules/{schedule_id}", json={"name": None}, headers=headers)
    assert null_name.status_code == 422


@pytest.mark.anyio("asyncio")
async def test_assignment_api_validates_targets(api_client: AsyncClient, tenant: SeededTenant) -> None:
    headers = user_headers(customer_id=tenant.customer_id)
    created = await api_client.post("/api/v1/schedules", json=_schedule_payload(tenant), headers=headers)
    url = f"/api/v1/schedules/{created.json()['schedule_id']}/assignments"

    two_targets = await api_client.post(
        url,
        json={"assignment_type": "Site", "target_site_id": tenant.site_id, "target_player_id": tenant.player_id},
        headers=headers,
    )
    assert two_targets.status_code == 422

    other_customer = await api_client.post(
        url, json={"assignment_type": "Customer", "target_customer_id": tenant.other_customer_id}, headers=headers
    )
    assert other_customer.status_code == 422
    assert other_customer.json()["code"] == "invalid-assignment"

    foreign_site = await api_client.post(
        url, json={"assignment_type": "Site", "target_site_id": tenant.other_site_id}, headers=headers
    )
    assert foreign_site.status_code == 404
    assert foreign_site.json()["code"] == "site-not-found"

    foreign_player = await api_client.post(
        url, json={"assignment_type": "Player", "target_player_id": tenant.other_player_id}, headers=headers
    )
    assert foreign_player.status_code == 404
    assert foreign_player.json()["code"] == "player-not-found"

    own_customer = await api_client.post(
        url, json={"assignment_type": "Customer", "target_customer_id": tenant.customer_id}, headers=headers
    )
    assert own_customer.status_code == 201


@pytest.mark.anyio("asyncio")
async def test_schedule_list_paginates(api_client: AsyncClient, tenant: SeededTenant) -> None:
    headers = user_headers(customer_id=tenant.customer_id)
    for priority in (10, 20, 30):
        await api_client.post(
            "/api/v1/schedules",
            json=_schedule_payload(tenant, name=f"Schedule {priority}", priority=priority),
            headers=headers,
        )

    response = await api_client.get("/api/v1/schedules", params={"page": 2, "limit": 2}, headers=headers)
    assert response.status_code == 200
    body = response.json()
    assert [item["name"] for item in body["data"]] == ["Schedule 10"]
    assert body["pagination"] == {"page": 2, "limit": 2, "total": 3, "total_pages": 2}

    too_large = await api_client.get("/api/v1/schedules", params={"limit": 500}, headers=headers)
    assert too_large.status_code == 422
