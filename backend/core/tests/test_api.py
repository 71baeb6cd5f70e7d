import pytest

from records.store import get_store

pytestmark = pytest.mark.django_db


def test_dashboard_for_every_role(make_client):
    for role in ("Admin", "QuotationCreator", "BookingCreator", "Reviewer"):
        r = make_client(role).get("/api/dashboard/")
        assert r.status_code == 200
        assert r.json()["quotation_status_summary"]["completed"] == 4
        assert len(r.json()["bookings_by_month"]) == 6


def test_reseed_restores_seed_data(make_client):
    client = make_client("Admin")
    client.delete("/api/quotations/QTN-001003/")
    assert len(get_store().quotations) == 11

    r = client.post("/api/admin/reseed")

    assert r.status_code == 200
    assert r.json() == {"quotations": 12, "bookings": 4, "buy_rates": 42, "schedules": 15}
    assert len(get_store().quotations) == 12


@pytest.mark.parametrize("role", ["QuotationCreator", "BookingCreator", "Reviewer"])
def test_reseed_is_admin_only(make_client, role):
    assert make_client(role).post("/api/admin/reseed").status_code == 403
