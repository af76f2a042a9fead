from __future__ import annotations

from flask.testing import FlaskClient


def test_projection_endpoint_returns_sample_result(client: FlaskClient, sample_inputs):
    resp = client.post("/api/projection", json=sample_inputs)

    assert resp.status_code == 200
    body = resp.get_json()
    assert body["periodsNeeded"] == 8
    assert body["endDate"] == "2025-09-01"
    assert body["unreachable"] is False
    assert body["outcome"] == "reached"
    assert len(body["ledger"]) == 8
    assert body["ledger"][0] == {"periodIndex": 1, "date": "2025-02-01", "balance": 3003.0}
    assert body["ledger"][-1]["balance"] == 10052.14


def test_unreachable_goal_is_a_normal_response(client: FlaskClient):
    resp = client.post(
        "/api/projection",
        json={
            "startingBalance": 1000,
            "periodicIncome": 1000,
            "periodicExpenses": 1000,
            "targetBalance": 2000,
        },
    )

    assert resp.status_code == 200
    body = resp.get_json()
    assert body["unreachable"] is True
    assert body["periodsNeeded"] == "unreachable"
    assert body["ledger"] == []


def test_negative_input_returns_422_with_field(client: FlaskClient, sample_inputs):
    sample_inputs["periodicExpenses"] = -10

    resp = client.post("/api/projection", json=sample_inputs)

    assert resp.status_code == 422
    detail = resp.get_json()["detail"]
    assert detail[0]["field"] == "periodicExpenses"
    assert "ledger" not in resp.get_json()


def test_unknown_field_is_rejected(client: FlaskClient, sample_inputs):
    sample_inputs["monthlyRent"] = 900

    resp = client.post("/api/projection", json=sample_inputs)

    assert resp.status_code == 422
    assert resp.get_json()["detail"][0]["field"] == "monthlyRent"


def test_non_object_payload_is_rejected(client: FlaskClient):
    resp = client.post("/api/projection", json=[1, 2, 3])

    assert resp.status_code == 422


def test_form_submission_coerces_text_fields(client: FlaskClient):
    resp = client.post(
        "/api/projection",
        data={
            "startingBalance": "2,000",
            "periodicIncome": "3 500",
            "periodicExpenses": "2700",
            "additionalDeposit": "",
            "annualInterestRatePercent": "1,2",
            "targetBalance": "$10,000",
            "startDate": "2025-01-01",
        },
    )

    assert resp.status_code == 200
    body = resp.get_json()
    # no additional deposit, so 800/month instead of 1000
    assert body["ledger"][0]["balance"] == 2802.8
    assert body["unreachable"] is False


def test_form_submission_with_garbage_is_rejected(client: FlaskClient):
    resp = client.post(
        "/api/projection",
        data={
            "startingBalance": "lots",
            "periodicIncome": "100",
            "periodicExpenses": "0",
            "targetBalance": "500",
        },
    )

    assert resp.status_code == 422
    assert resp.get_json()["detail"][0]["field"] == "startingBalance"


def test_projection_can_be_displayed_in_another_currency(client: FlaskClient, sample_inputs):
    base = client.post("/api/projection", json=sample_inputs).get_json()
    resp = client.post("/api/projection?currency=EUR&display=USD", json=sample_inputs)

    assert resp.status_code == 200
    body = resp.get_json()
    assert body["periodsNeeded"] == base["periodsNeeded"]
    assert body["endDate"] == base["endDate"]
    assert body["ledger"][0]["balance"] == 3243.24
    assert body["totalContributions"] == 8640.0


def test_unknown_display_currency_returns_400(client: FlaskClient, sample_inputs):
    resp = client.post("/api/projection?display=XYZ", json=sample_inputs)

    assert resp.status_code == 400
    assert resp.get_json()["detail"][0]["field"] == "currency"


def test_rates_endpoint_serves_table(client: FlaskClient):
    resp = client.get("/api/rates?base=usd")

    assert resp.status_code == 200
    body = resp.get_json()
    assert body["base"] == "USD"
    assert body["rates"]["USD"] == 1.0
    assert body["source"] == "fallback"


def test_huge_amount_returns_422_not_500(client: FlaskClient, sample_inputs):
    sample_inputs["startingBalance"] = 1e30
    sample_inputs["targetBalance"] = 0

    resp = client.post("/api/projection", json=sample_inputs)

    assert resp.status_code == 422
    assert resp.get_json()["detail"][0]["field"] == "startingBalance"


def test_form_submission_reads_european_decimal_comma(client: FlaskClient):
    resp = client.post(
        "/api/projection",
        data={
            "startingBalance": "1.234,56",
            "periodicIncome": "100",
            "periodicExpenses": "0",
            "targetBalance": "1.000,00",
        },
    )

    assert resp.status_code == 200
    body = resp.get_json()
    assert body["periodsNeeded"] == 0
    assert body["ledger"][0]["balance"] == 1234.56


def test_form_submission_with_exponent_is_rejected(client: FlaskClient):
    resp = client.post(
        "/api/projection",
        data={
            "startingBalance": "0",
            "periodicIncome": "1e5",
            "periodicExpenses": "0",
            "targetBalance": "500",
        },
    )

    assert resp.status_code == 422
    assert resp.get_json()["detail"][0]["field"] == "periodicIncome"


def test_malformed_currency_query_returns_422(client: FlaskClient, sample_inputs):
    resp = client.post("/api/projection?display=dollars", json=sample_inputs)

    assert resp.status_code == 422
    assert resp.get_json()["detail"][0]["loc"] == ["display"]


def test_malformed_rates_base_returns_422(client: FlaskClient):
    resp = client.get("/api/rates?base=E1")

    assert resp.status_code == 422
    assert resp.get_json()["detail"][0]["loc"] == ["base"]
