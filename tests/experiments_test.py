from fastapi import status


def test_health(client):
    response = client.get("/health")
    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"status": "healthy"}
    assert "X-Request-ID" in response.headers

def test_request_id_is_echoed(client, headers):
    response = client.get("/experiments", headers={**headers, "X-Request-ID": "abc123"})
    assert response.headers["X-Request-ID"] == "abc123"

def test_invalid_token_rejected(client):
    response = client.get("/experiments", headers={"Authorization": "Bearer wrong-token"})
    assert response.status_code == status.HTTP_401_UNAUTHORIZED

def test_missing_token_rejected(client):
    response = client.get("/experiments")
    assert response.status_code in (status.HTTP_401_UNAUTHORIZED, status.HTTP_403_FORBIDDEN)

def test_create_experiment(client, headers, store):
    payload = {
        "name": "Homepage Test",
        "description": "A/B test on homepage",
        "variants": ["control", "variant_a", "variant_b"],
        "traffic_allocation": {"control": 40, "variant_a": 30, "variant_b": 30},
        "status": "draft",
    }
    response = client.post("/experiments/homepage", json=payload, headers=headers)
    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["id"] == "homepage"
    assert data["name"] == "Homepage Test"
    assert data["variants"] == ["control", "variant_a", "variant_b"]
    assert data["traffic_allocation"] == {"control": 40, "variant_a": 30, "variant_b": 30}
    assert data["status"] == "draft"
    assert "homepage" in store.experiments

def test_create_experiment_without_body_uses_defaults(client, headers):
    response = client.post("/experiments/defaults", headers=headers)
    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["name"] == "defaults"
    assert data["status"] == "active"
    assert data["traffic_allocation"] == {"control": 50, "variant_a": 50, "variant_b": 0, "variant_c": 0}

def test_create_existing_experiment_returns_it_unchanged(client, headers):
    client.post("/experiments/exp1", json={"status": "paused"}, headers=headers)
    response = client.post("/experiments/exp1", json={"status": "active"}, headers=headers)
    assert response.json()["status"] == "paused"

def test_create_experiment_rejects_bad_variants(client, headers):
    for variants in ([], ["control", "control"], ["control", "variant_z"]):
        response = client.post("/experiments/bad", json={"variants": variants}, headers=headers)
        assert response.status_code == 422

def test_create_experiment_rejects_out_of_range_allocation(client, headers):
    response = client.post("/experiments/bad", json={"traffic_allocation": {"control": 150}}, headers=headers)
    assert response.status_code == 422

def test_list_and_get_experiments(client, headers):
    client.post("/experiments/second", headers=headers)
    client.post("/experiments/first", headers=headers)

    response = client.get("/experiments", headers=headers)
    assert [e["id"] for e in response.json()] == ["second", "first"]

    assert client.get("/experiments/first", headers=headers).json()["id"] == "first"
    assert client.get("/experiments/missing", headers=headers).status_code == status.HTTP_404_NOT_FOUND

def test_update_status(client, headers):
    client.post("/experiments/exp1", headers=headers)

    response = client.put("/experiments/exp1/status", json={"status": "completed"}, headers=headers)
    assert response.status_code == status.HTTP_204_NO_CONTENT
    assert client.get("/experiments/exp1", headers=headers).json()["status"] == "completed"

def test_update_status_unknown_experiment(client, headers, store):
    response = client.put("/experiments/nonexistent/status", json={"status": "active"}, headers=headers)
    assert response.status_code == status.HTTP_204_NO_CONTENT
    assert "nonexistent" not in store.experiments

def test_get_variant_is_sticky(client, headers):
    first = client.get("/experiments/exp1/variant/user123", headers=headers)
    assert first.status_code == status.HTTP_200_OK
    data = first.json()
    assert data["experiment_id"] == "exp1"
    assert data["user_id"] == "user123"
    assert data["variant"] in ("control", "variant_a")
    assert data["assigned_at"] is not None

    second = client.get("/experiments/exp1/variant/user123", headers=headers).json()
    assert second == data

def test_get_variant_for_paused_experiment(client, headers, store):
    client.post("/experiments/paused", json={"status": "paused", "traffic_allocation": {"control": 0, "variant_a": 100}}, headers=headers)

    data = client.get("/experiments/paused/variant/user123", headers=headers).json()
    assert data["variant"] == "control"
    assert data["assigned_at"] is None
    assert store.assignments == {}

    client.put("/experiments/paused/status", json={"status": "active"}, headers=headers)
    data = client.get("/experiments/paused/variant/user123", headers=headers).json()
    assert data["variant"] == "variant_a"

def test_results_unknown_experiment(client, headers):
    response = client.get("/experiments/missing/results", headers=headers)
    assert response.status_code == status.HTTP_404_NOT_FOUND
