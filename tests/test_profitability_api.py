from __future__ import annotations

from fastapi.testclient import TestClient

from factories import FakeSupabaseClient
from fairway.api.dependencies import get_profitability_service
from fairway.main import create_app
from fairway.repositories.profitability_repository import ProfitabilityRepository
from fairway.services.profitability_service import ProfitabilityService


def test_profitability_report(client):
    response = client.get("/api/v1/profitability/report?start_date=2026-07-01&end_date=2026-07-31")
    assert response.status_code == 200
    payload = response.json()
    assert payload["data"]["period"] == {"start": "2026-07-01", "end": "2026-07-31"}
    assert payload["data"]["summary"]["profitMarginPercent"] == 33.33
    assert payload["data"]["byProductType"][0]["productType"] == "tee_time"
    assert payload["meta"]["timeWindow"] == "2026-07-01..2026-07-31"
    assert payload["meta"]["currency"] == "EUR"


def test_profitability_report_accepts_relative_window(client):
    response = client.get("/api/v1/profitability/report?time_window=90d")
    assert response.status_code == 200
    payload = response.json()
    assert payload["data"]["summary"]["totalTransactions"] == 1


def test_profitability_report_rejects_inverted_window(client):
    response = client.get("/api/v1/profitability/report?start_date=2026-07-31&end_date=2026-07-01")
    assert response.status_code == 400
    payload = response.json()
    assert payload["error"]["code"] == "bad_request"
    assert payload["error"]["details"]["startDate"] == "2026-07-31"


def test_profitability_report_validation_error(client):
    response = client.get("/api/v1/profitability/report?time_window=soon")
    assert response.status_code == 422
    payload = response.json()
    assert payload["error"]["code"] == "validation_error"


def test_booking_profitability_detail(client):
    response = client.get("/api/v1/profitability/bookings/booking-1")
    assert response.status_code == 200
    payload = response.json()
    assert payload["data"]["costSource"] == "net_rate"
    assert payload["data"]["addOnBreakdown"][0]["type"] == "buggy"
    assert payload["meta"]["timeWindow"] == "na"


def test_booking_profitability_not_found(client):
    response = client.get("/api/v1/profitability/bookings/missing")
    assert response.status_code == 404
    payload = response.json()
    assert payload["error"]["code"] == "not_found"


def test_profitability_report_tolerates_incomplete_catalog_rows():
    client = FakeSupabaseClient(
        {
            "booking_requests": [
                {
                    "id": "b-1",
                    "course_id": "course-1",
                    "tee_time": "2026-07-15T09:00:00+00:00",
                    "status": "CONFIRMED",
                    "total_amount_cents": 6000,
                    "add_ons_json": '[{"id": "addon-1"}]',
                }
            ],
            "golf_courses": [{"id": "course-1", "name": "Los Naranjos"}],
            "course_rate_periods": [
                {"id": "p-1", "course_id": "course-1", "start_date": None, "end_date": "10-31", "net_rate": 40}
            ],
            "course_add_ons": [{"id": "addon-1", "course_id": "course-1", "type": None, "price_cents": None}],
        }
    )
    app = create_app()
    app.dependency_overrides[get_profitability_service] = lambda: ProfitabilityService(
        repository=ProfitabilityRepository(client=client)
    )

    response = TestClient(app).get("/api/v1/profitability/report?start_date=2026-07-01&end_date=2026-07-31")

    assert response.status_code == 200
    summary = response.json()["data"]["summary"]
    assert summary["totalTransactions"] == 1
    assert summary["totalRevenue"] == 60
