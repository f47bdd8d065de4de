"""Integration tests for /v1/simulator"""

from fastapi.testclient import TestClient

ALICE = {"X-User-ID": "alice"}


def test_calculate_reference_loan(client: TestClient):
    """POST /v1/simulator/calculate rounds summary figures to whole units"""
    response = client.post(
        "/v1/simulator/calculate",
        json={"principal": 1000, "annual_rate_percent": 5, "term_months": 24},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["installment_amount"] == 44
    assert data["total_paid"] == 1053
    assert data["total_interest"] == 53
    assert len(data["schedule"]) == 12
    assert data["schedule"][0] == {
        "period_index": 1,
        "installment": 44,
        "principal_portion": 40,
        "interest_portion": 4,
        "remaining_balance": 960,
    }


def test_calculate_does_not_require_authentication(client: TestClient):
    """The calculator is a pure function open to anonymous callers"""
    response = client.post(
        "/v1/simulator/calculate",
        json={"principal": 1200, "annual_rate_percent": 0, "term_months": 12},
    )
    assert response.status_code == 200
    assert response.json()["installment_amount"] == 100


def test_calculate_invalid_term(client: TestClient):
    """Non-positive terms are rejected with 422"""
    response = client.post(
        "/v1/simulator/calculate",
        json={"principal": 1000, "annual_rate_percent": 5, "term_months": 0},
    )
    assert response.status_code == 422
    assert "term_months" in response.json()["detail"]


def test_calculate_negative_principal(client: TestClient):
    response = client.post(
        "/v1/simulator/calculate",
        json={"principal": -5, "annual_rate_percent": 5, "term_months": 12},
    )
    assert response.status_code == 422


def test_calculate_very_long_term(client: TestClient):
    response = client.post(
        "/v1/simulator/calculate",
        json={"principal": 1000, "annual_rate_percent": 5, "term_months": 200000},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["installment_amount"] == 4
    assert data["total_paid"] == 833333
    assert len(data["schedule"]) == 12


def test_calculate_extreme_rate(client: TestClient):
    response = client.post(
        "/v1/simulator/calculate",
        json={"principal": 1000, "annual_rate_percent": 1e12, "term_months": 100},
    )

    assert response.status_code == 200
    assert response.json()["installment_amount"] == 833333333333


def test_calculate_unrepresentable_loan(client: TestClient):
    """Figures beyond float range are rejected rather than failing the request"""
    response = client.post(
        "/v1/simulator/calculate",
        json={"principal": 1e308, "annual_rate_percent": 1e6, "term_months": 12},
    )
    assert response.status_code == 422


def test_compare_offers(client: TestClient):
    """POST /v1/simulator/compare keeps input order and zeroes the worst offer's savings"""
    response = client.post(
        "/v1/simulator/compare",
        json={
            "principal": 100000,
            "offers": [
                {"label": "Bank A", "annual_rate_percent": 8.5, "term_months": 60},
                {"label": "Bank B", "annual_rate_percent": 9.0, "term_months": 60},
                {"label": "Credit Union", "annual_rate_percent": 8.5, "term_months": 36},
            ],
        },
    )

    assert response.status_code == 200
    offers = response.json()["offers"]
    assert [o["label"] for o in offers] == ["Bank A", "Bank B", "Credit Union"]
    assert offers[1]["savings_vs_worst"] == 0
    assert offers[0]["savings_vs_worst"] > 0
    assert offers[2]["savings_vs_worst"] > offers[0]["savings_vs_worst"]


def test_compare_no_offers(client: TestClient):
    response = client.post("/v1/simulator/compare", json={"principal": 1000, "offers": []})
    assert response.status_code == 200
    assert response.json()["offers"] == []


def test_save_simulation_awards_bonus_every_time(client: TestClient):
    """Each saved run pays 25 coins and creates the profile on first use"""
    body = {"principal": 500000, "annual_rate_percent": 8.5, "term_months": 240, "simulation_type": "home"}

    first = client.post("/v1/simulator/simulations", json=body, headers=ALICE)
    second = client.post("/v1/simulator/simulations", json=body, headers=ALICE)

    assert first.status_code == 200
    assert first.json()["coins_awarded"] == 25
    assert first.json()["total_coins"] == 25
    assert second.json()["total_coins"] == 50
    assert second.json()["level"] == 1

    simulation = first.json()["simulation"]
    assert simulation["simulation_type"] == "home"
    assert simulation["simulation_id"]
    assert simulation["installment_amount"] > 0


def test_save_simulation_requires_authentication(client: TestClient):
    response = client.post(
        "/v1/simulator/simulations",
        json={"principal": 1000, "annual_rate_percent": 5, "term_months": 12},
    )
    assert response.status_code == 401


def test_save_simulation_rejects_unknown_type(client: TestClient):
    response = client.post(
        "/v1/simulator/simulations",
        json={"principal": 1000, "annual_rate_percent": 5, "term_months": 12, "simulation_type": "yacht"},
        headers=ALICE,
    )
    assert response.status_code == 422


def test_invalid_simulation_awards_nothing(client: TestClient):
    """A rejected run leaves the profile untouched"""
    response = client.post(
        "/v1/simulator/simulations",
        json={"principal": 1000, "annual_rate_percent": 5, "term_months": -1},
        headers=ALICE,
    )
    assert response.status_code == 422
    assert client.get("/v1/profile", headers=ALICE).json() is None


def test_list_simulations(client: TestClient, clock):
    """GET /v1/simulator/simulations returns the caller's runs, newest first"""
    for months in (12, 24, 36):
        client.post(
            "/v1/simulator/simulations",
            json={"principal": 10000, "annual_rate_percent": 10, "term_months": months, "simulation_type": "car"},
            headers=ALICE,
        )
        clock.advance(hours=1)
    client.post(
        "/v1/simulator/simulations",
        json={"principal": 10000, "annual_rate_percent": 10, "term_months": 48},
        headers={"X-User-ID": "bob"},
    )

    response = client.get("/v1/simulator/simulations", headers=ALICE)

    assert response.status_code == 200
    data = response.json()
    assert data["user_id"] == "alice"
    assert [s["term_months"] for s in data["simulations"]] == [36, 24, 12]
