"""API tests against an in-memory database."""
from datetime import date

import pytest

from models import Container, Milestone, Shipment

ITEMS_URL = "/api/demurrage/items"


@pytest.fixture
def seeded(db_session, client):
    """Three shipments: overdue import, untariffed import, returned export."""
    overdue = Shipment(
        reference="PROC-001",
        customer_id=42,
        customer_name="Acme Imports",
        carrier="Maersk",
        origin="Shanghai, CN",
        destination="Santos, BR",
        eta=date(2024, 1, 1),
        free_time="7 days",
    )
    untariffed = Shipment(
        reference="PROC-002",
        customer_name="Acme Imports",
        carrier="Hapag-Lloyd",
        origin="Hamburg, DE",
        destination="Santos, BR",
        eta=date(2024, 1, 8),
        free_time="7 days",
    )
    export = Shipment(
        reference="PROC-003",
        customer_id=77,
        customer_name="Globex Exports",
        carrier="MSC",
        origin="Santos, BR",
        destination="Rotterdam, NL",
        free_time="5",
    )
    db_session.add_all([overdue, untariffed, export])
    db_session.flush()

    db_session.add_all([
        Container(shipment_id=overdue.id, number="MSCU1234567", container_type="40'DV"),
        Container(shipment_id=untariffed.id, number="HLXU1111111", container_type="40HC"),
        Container(shipment_id=export.id, number="TGHU7654321", container_type="20'OT"),
        Milestone(shipment_id=export.id, name="Retirada do vazio", effective_date=date(2024, 1, 2)),
        Milestone(shipment_id=export.id, name="Gate In", effective_date=date(2024, 1, 9)),
    ])
    db_session.commit()

    tariffs = [
        ("/api/tariffs/cost", {
            "carrier": "Maersk",
            "container_class": "dry",
            "tiers": [{"start": 1, "end": 5, "rate": 50}, {"start": 6, "end": None, "rate": 80}],
        }),
        ("/api/tariffs/cost", {
            "carrier": "MSC",
            "container_class": "special",
            "tiers": [{"start": 1, "rate": 120}],
        }),
        ("/api/tariffs/sale", {
            "container_class": "dry",
            "tiers": [{"start": 1, "end": 3, "rate": 70}, {"start": 4, "rate": 100}],
        }),
        ("/api/tariffs/sale", {
            "container_class": "special",
            "tiers": [{"start": 1, "rate": 200}],
        }),
    ]
    for url, payload in tariffs:
        response = client.post(url, json=payload)
        assert response.status_code == 201, response.text

    return client


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["database"] == "healthy"


def test_list_items(seeded):
    response = seeded.get(ITEMS_URL)

    assert response.status_code == 200
    items = response.json()
    assert [item["shipment_id"] for item in items] == ["PROC-003", "PROC-001", "PROC-002"]

    returned, overdue, untariffed = items

    assert returned["clock_type"] == "detention"
    assert returned["container_class"] == "special"
    assert returned["free_time_expiry"] == "2024-01-06"
    assert returned["effective_end"] == "2024-01-09"
    assert returned["overdue_days"] == 3
    assert (returned["total_cost"], returned["total_sale"]) == (360.0, 600.0)

    assert overdue["status"] == "overdue"
    assert overdue["overdue_days"] == 5
    assert [chunk["period_label"] for chunk in overdue["chunks"]] == ["Day 1 to 3", "Day 4 to 5"]
    assert (overdue["total_cost"], overdue["total_sale"], overdue["total_profit"]) == (250.0, 410.0, 160.0)

    assert untariffed["status"] == "at_risk"
    assert untariffed["missing_tariff"] == "Hapag-Lloyd"
    assert untariffed["chunks"] == []


def test_list_items_filters(seeded):
    overdue = seeded.get(ITEMS_URL, params={"status": "overdue"}).json()
    detention = seeded.get(ITEMS_URL, params={"clock_type": "detention"}).json()

    assert {item["shipment_id"] for item in overdue} == {"PROC-001", "PROC-003"}
    assert [item["shipment_id"] for item in detention] == ["PROC-003"]


def test_invalid_filter_is_rejected(seeded):
    response = seeded.get(ITEMS_URL, params={"status": "late"})

    assert response.status_code == 422


def test_get_item(seeded):
    response = seeded.get(f"{ITEMS_URL}/PROC-001/mscu-1234567/demurrage")

    assert response.status_code == 200
    assert response.json()["container_number"] == "MSCU1234567"


def test_get_unknown_item(seeded):
    response = seeded.get(f"{ITEMS_URL}/PROC-001/MSCU1234567/detention")

    assert response.status_code == 404
    assert response.json()["error"] == "BillingItemNotFoundError"


def test_summary(seeded):
    summary = seeded.get("/api/demurrage/summary").json()

    assert summary["as_of"] == "2024-01-12"
    assert summary["total_items"] == 3
    assert summary["overdue_items"] == 2
    assert summary["at_risk_items"] == 1
    assert summary["total_overdue_days"] == 8
    assert summary["total_cost"] == 610.0
    assert summary["total_sale"] == 1010.0
    assert summary["total_profit"] == 400.0
    assert summary["missing_tariffs"] == ["Hapag-Lloyd"]


def test_invoice_closed_item_once(seeded):
    url = f"{ITEMS_URL}/PROC-003/TGHU7654321/detention/invoice"

    response = seeded.post(url, json={})

    assert response.status_code == 201, response.text
    body = response.json()
    assert body["invoice_reference"] == "DEM-TGHU7654321"
    assert body["amount"] == 600.0
    assert body["currency"] == "USD"
    assert body["due_date"] == "2024-02-11"
    assert body["email_subject"].startswith("Detention Invoice")
    assert "Globex Exports" in body["email_body"]

    item = seeded.get(f"{ITEMS_URL}/PROC-003/TGHU7654321/detention").json()
    assert item["status"] == "invoiced"
    assert item["invoiced_on"] == "2024-01-12"

    repeat = seeded.post(url, json={})
    assert repeat.status_code == 409
    assert "already invoiced" in repeat.json()["detail"]

    summary = seeded.get("/api/demurrage/summary").json()
    assert summary["invoiced_items"] == 1
    assert summary["total_sale"] == 410.0


def test_invoice_running_clock(seeded):
    url = f"{ITEMS_URL}/PROC-001/MSCU1234567/demurrage/invoice"

    refused = seeded.post(url, json={})
    assert refused.status_code == 409
    assert "still running" in refused.json()["detail"]

    accepted = seeded.post(url, json={"allow_mid_period": True, "currency": "BRL", "exchange_rate": "4.95"})
    assert accepted.status_code == 201
    assert accepted.json()["amount"] == 410.0
    assert accepted.json()["currency"] == "BRL"
    assert "4.95" in accepted.json()["email_body"]


def test_invoice_missing_tariff(seeded):
    response = seeded.post(
        f"{ITEMS_URL}/PROC-002/HLXU1111111/demurrage/invoice",
        json={"allow_mid_period": True},
    )

    assert response.status_code == 409
    assert "missing tariff: Hapag-Lloyd" in response.json()["detail"]


def test_list_tariffs(seeded):
    cost = seeded.get("/api/tariffs/cost").json()
    sale = seeded.get("/api/tariffs/sale").json()

    assert [(t["carrier"], t["container_class"]) for t in cost] == [("MSC", "special"), ("Maersk", "dry")]
    assert [t["container_class"] for t in sale] == ["dry", "special"]
    assert sale[0]["tiers"][1] == {"start": 4, "end": None, "rate": 100.0}


@pytest.mark.parametrize(
    "tiers",
    [
        [{"start": 2, "rate": 50}],
        [{"start": 1, "end": 5, "rate": 50}, {"start": 7, "rate": 80}],
        [{"start": 1, "rate": 50}, {"start": 6, "rate": 80}],
        [{"start": 1, "rate": -5}],
        [],
    ],
)
def test_invalid_tariff_is_rejected(client, tiers):
    response = client.post("/api/tariffs/sale", json={"container_class": "reefer", "tiers": tiers})

    assert response.status_code == 422


def test_duplicate_tariff_is_rejected(seeded):
    response = seeded.post(
        "/api/tariffs/cost",
        json={"carrier": "Maersk", "container_class": "dry", "tiers": [{"start": 1, "rate": 10}]},
    )

    assert response.status_code == 422
    assert "Duplicate" in response.json()["detail"]


def test_record_return_date_stops_the_clock(seeded):
    response = seeded.patch(
        "/api/containers/PROC-001/MSCU1234567/dates",
        json={"effective_return_date": "2024-01-10"},
    )

    assert response.status_code == 200
    assert response.json()["effective_return_date"] == "2024-01-10"

    item = seeded.get(f"{ITEMS_URL}/PROC-001/MSCU1234567/demurrage").json()
    assert item["overdue_days"] == 3
    assert item["total_sale"] == 210.0
    assert item["effective_end"] == "2024-01-10"


def test_record_dates_for_unknown_container(seeded):
    response = seeded.patch(
        "/api/containers/PROC-001/XXXU0000000/dates",
        json={"gate_in_date": "2024-01-10"},
    )

    assert response.status_code == 404


def test_return_recorded_after_mid_period_invoice_keeps_invoiced_figures(seeded):
    invoice = seeded.post(
        f"{ITEMS_URL}/PROC-001/MSCU1234567/demurrage/invoice",
        json={"allow_mid_period": True},
    )
    assert invoice.status_code == 201

    seeded.patch(
        "/api/containers/PROC-001/MSCU1234567/dates",
        json={"effective_return_date": "2024-01-20"},
    )

    item = seeded.get(f"{ITEMS_URL}/PROC-001/MSCU1234567/demurrage").json()
    assert item["status"] == "invoiced"
    assert item["effective_end"] == "2024-01-20"
    assert item["overdue_days"] == 5
    assert item["total_sale"] == invoice.json()["amount"] == 410.0


def test_update_sale_tariff_reprices_items(seeded):
    dry = next(t for t in seeded.get("/api/tariffs/sale").json() if t["container_class"] == "dry")

    response = seeded.put(f"/api/tariffs/sale/{dry['id']}", json={"tiers": [{"start": 1, "rate": 90}]})

    assert response.status_code == 200, response.text
    assert response.json()["tiers"] == [{"start": 1, "end": None, "rate": 90.0}]

    item = seeded.get(f"{ITEMS_URL}/PROC-001/MSCU1234567/demurrage").json()
    assert (item["total_cost"], item["total_sale"], item["total_profit"]) == (250.0, 450.0, 200.0)


def test_update_cost_tariff_rekeys_carrier(seeded):
    maersk = next(t for t in seeded.get("/api/tariffs/cost").json() if t["carrier"] == "Maersk")

    response = seeded.put(
        f"/api/tariffs/cost/{maersk['id']}",
        json={"carrier": "Hapag-Lloyd", "tiers": [{"start": 1, "rate": 40}]},
    )

    assert response.status_code == 200, response.text
    assert response.json()["carrier"] == "Hapag-Lloyd"

    item = seeded.get(f"{ITEMS_URL}/PROC-001/MSCU1234567/demurrage").json()
    assert item["missing_tariff"] == "Maersk"


def test_update_unknown_tariff(seeded):
    response = seeded.put("/api/tariffs/sale/999", json={"tiers": [{"start": 1, "rate": 90}]})

    assert response.status_code == 404
    assert response.json()["error"] == "TariffNotFoundError"


def test_update_tariff_with_gap_is_rejected(seeded):
    dry = next(t for t in seeded.get("/api/tariffs/sale").json() if t["container_class"] == "dry")

    response = seeded.put(
        f"/api/tariffs/sale/{dry['id']}",
        json={"tiers": [{"start": 1, "end": 3, "rate": 70}, {"start": 5, "rate": 100}]},
    )

    assert response.status_code == 422
    unchanged = seeded.get(f"{ITEMS_URL}/PROC-001/MSCU1234567/demurrage").json()
    assert unchanged["total_sale"] == 410.0
