import pytest

pytestmark = pytest.mark.django_db

NEW_RATE = {
    "carrier": "CMDU",
    "pol": "SGSIN",
    "pod": "DEHAM",
    "commodity": "GDSM",
    "freight_mode_type": "Sea",
    "equipment": "40HC",
    "weight_capacity": "28 TON",
    "min_booking": "1 TEU",
    "rate": "1875.50",
    "valid_from": "2026-01-01",
    "valid_to": "2026-03-31",
}


class TestBuyRates:
    def test_list(self, make_client):
        r = make_client("Reviewer").get("/api/buy-rates/", {"page_size": 50})
        assert r.status_code == 200
        assert r.json()["count"] == 42

    def test_create_update_delete(self, make_client):
        client = make_client("Admin")

        r = client.post("/api/buy-rates/", NEW_RATE, format="json")
        assert r.status_code == 201
        created = r.json()
        assert created["id"] == "BR-3043"
        assert created["rate"] == "1875.50"

        r = client.patch(f"/api/buy-rates/{created['id']}/", {"rate": "1900"}, format="json")
        assert r.status_code == 200
        assert r.json()["rate"] == "1900.00"

        assert client.delete(f"/api/buy-rates/{created['id']}/").status_code == 204
        assert client.get(f"/api/buy-rates/{created['id']}/").status_code == 404

    def test_validity_window(self, make_client):
        r = make_client("Admin").post(
            "/api/buy-rates/", {**NEW_RATE, "valid_to": "2025-12-31"}, format="json"
        )
        assert r.status_code == 400
        assert "valid_to" in r.json()["errors"]

    def test_rate_must_be_positive(self, make_client):
        r = make_client("Admin").post("/api/buy-rates/", {**NEW_RATE, "rate": "0"}, format="json")
        assert r.status_code == 400
        assert "rate" in r.json()["errors"]

    def test_missing_fields_rejected_by_serializer(self, make_client):
        r = make_client("Admin").post("/api/buy-rates/", {"carrier": "CMDU"}, format="json")
        assert r.status_code == 400
        assert "pol" in r.json()["errors"]

    @pytest.mark.parametrize("role", ["Reviewer", "QuotationCreator", "BookingCreator"])
    def test_only_admin_writes(self, make_client, role):
        r = make_client(role).post("/api/buy-rates/", NEW_RATE, format="json")
        assert r.status_code == 403


class TestSchedules:
    def test_search_by_port_name(self, make_client):
        r = make_client("Reviewer").get("/api/schedules/", {"search": "hamburg"})
        assert r.json()["count"] == 1
        assert r.json()["results"][0]["carrier"] == "HLCU"

    def test_eta_before_etd(self, make_client):
        r = make_client("Admin").post(
            "/api/schedules/",
            {
                "carrier": "MAEU",
                "origin": "SGSIN",
                "destination": "NLRTM",
                "service_route": "M9",
                "allocation": 2,
                "etd": "2026-05-10T00:00:00Z",
                "eta": "2026-05-01T00:00:00Z",
            },
            format="json",
        )
        assert r.status_code == 400
        assert "eta" in r.json()["errors"]

    def test_create(self, make_client):
        r = make_client("Admin").post(
            "/api/schedules/",
            {
                "carrier": "MAEU",
                "origin": "SGSIN",
                "destination": "NLRTM",
                "service_route": "M9",
                "allocation": 2,
                "etd": "2026-05-01T00:00:00Z",
                "eta": "2026-05-25T00:00:00Z",
            },
            format="json",
        )
        assert r.status_code == 201
        assert r.json()["id"] == "SCH-4016"
        assert r.json()["frequency"] == "Weekly"


class TestReferenceLookups:
    def test_ports(self, make_client):
        r = make_client("BookingCreator").get("/api/ports/")
        assert r.status_code == 200
        assert {"code": "DEHAM", "name": "Hamburg", "country": "Germany"} in r.json()

    def test_schedule_rate_search(self, make_client):
        r = make_client("Reviewer").get("/api/schedule-rates/search", {"origin": "ham"})
        body = r.json()
        assert body["count"] == 1
        assert body["results"][0]["origin"] == "DEHAM"

    def test_schedule_rate_search_no_match(self, make_client):
        r = make_client("Reviewer").get("/api/schedule-rates/search", {"origin": "atlantis"})
        assert r.status_code == 200
        assert r.json()["results"] == []
