
async def test_create_category_defaults(client, admin_headers):
    response = await client.post(
        "/api/v1/categories/create",
        json={"category_name": "Blood Donation"},
        headers=admin_headers,
    )

    assert response.status_code == 200
    body = response.json()
    assert body["code"] == "blood-donation"
    assert body["color_hex"] == "#6366F1"
    assert body["is_active"] is True


async def test_create_category_duplicate_name(client, admin_headers, category):
    response = await client.post(
        "/api/v1/categories/create",
        json={"category_name": "Tree Plantation", "code": "trees"},
        headers=admin_headers,
    )

    assert response.status_code == 400
    assert response.json()["errors"] == {
        "category_name": "category_name already exists"
    }


async def test_create_category_bad_color(client, admin_headers):
    response = await client.post(
        "/api/v1/categories/create",
        json={"category_name": "Rally", "color_hex": "green"},
        headers=admin_headers,
    )

    assert response.status_code == 422


async def test_create_category_requires_admin(client, lead_headers):
    response = await client.post(
        "/api/v1/categories/create",
        json={"category_name": "Rally"},
        headers=lead_headers,
    )

    assert response.status_code == 403


async def test_list_categories_with_event_counts(
    client, volunteer_headers, category, event
):
    response = await client.get("/api/v1/categories/list", headers=volunteer_headers)

    assert response.json()[0]["code"] == "tree-plantation"
    assert response.json()[0]["event_count"] == 1


async def test_deactivated_category_only_in_full_listing(
    client, admin_headers, category
):
    await client.post(
        f"/api/v1/categories/{category.id}/deactivate", headers=admin_headers
    )

    active = await client.get("/api/v1/categories/list", headers=admin_headers)
    everything = await client.get("/api/v1/categories/all", headers=admin_headers)

    assert active.json() == []
    assert everything.json()[0]["is_active"] is False

    restored = await client.post(
        f"/api/v1/categories/{category.id}/reactivate", headers=admin_headers
    )
    assert restored.json()["is_active"] is True


async def test_update_category(client, admin_headers, category):
    response = await client.put(
        f"/api/v1/categories/{category.id}",
        json={"description": "Saplings and tree guards", "color_hex": "#15803D"},
        headers=admin_headers,
    )

    assert response.json()["description"] == "Saplings and tree guards"
    assert response.json()["category_name"] == "Tree Plantation"


async def test_get_category_by_code(client, volunteer_headers, category):
    found = await client.get(
        "/api/v1/categories/code/tree-plantation", headers=volunteer_headers
    )
    missing = await client.get(
        "/api/v1/categories/code/unknown", headers=volunteer_headers
    )

    assert found.json()["id"] == category.id
    assert missing.status_code == 404


async def test_delete_category_in_use_conflicts(client, admin_headers, event, category):
    response = await client.delete(
        f"/api/v1/categories/{category.id}", headers=admin_headers
    )

    assert response.status_code == 409


async def test_delete_unused_category(client, admin_headers, category):
    response = await client.delete(
        f"/api/v1/categories/{category.id}", headers=admin_headers
    )
    gone = await client.get(f"/api/v1/categories/{category.id}", headers=admin_headers)

    assert response.json() == {"message": "Category deleted"}
    assert gone.status_code == 404


async def test_inactive_category_rejected_for_new_events(
    client, session, admin_headers, category, event_lead
):
    await client.post(
        f"/api/v1/categories/{category.id}/deactivate", headers=admin_headers
    )

    response = await client.post(
        "/api/v1/events/create",
        json={
            "event_name": "Cleanup",
            "start_date": "2030-01-10",
            "end_date": "2030-01-10",
            "declared_hours": 2,
            "category_id": category.id,
        },
        headers=admin_headers,
    )

    assert response.status_code == 400
