from io import BytesIO

import pytest
from fastapi.testclient import TestClient
from openpyxl import load_workbook

from reporting_service.app.main import app
from reporting_service.app.router import export_router
from reporting_service.app.router.export_router import get_odoo_client
from shared.core.config import OdooConfig

XLSX = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


@pytest.fixture
def client_for():
    def _client(odoo):
        app.dependency_overrides[get_odoo_client] = lambda: odoo
        return TestClient(app)

    yield _client
    app.dependency_overrides.clear()


def test_export_both_sheets(client_for, fake_odoo):
    response = client_for(fake_odoo).post("/api/export", json={"report_type": "both"})

    assert response.status_code == 200
    assert response.headers["content-type"] == XLSX
    assert response.headers["cache-control"] == "no-store"
    assert "rent_roll_export_" in response.headers["content-disposition"]

    wb = load_workbook(BytesIO(response.content))
    assert wb.sheetnames == ["Rent Roll", "Asset Tape"]
    assert wb["Rent Roll"]["B2"].value == "Asset Ref"
    assert wb["Rent Roll"]["B3"].value == "A-100"
    assert wb["Asset Tape"]["B4"].value == "B-200"


def test_export_fetches_in_order(client_for, fake_odoo):
    client_for(fake_odoo).post("/api/export", json={"reference_ids": ["A-100", " ", "B-200"]})

    models = [call[0] for call in fake_odoo.calls]
    assert models == ["property.property", "property.tenancy", "property.tenancy.option"]
    assert fake_odoo.calls[0][1] == [["reference_id", "in", ["A-100", "B-200"]]]
    assert fake_odoo.calls[1][1] == [["main_property_id", "in", [2, 1]]]
    assert fake_odoo.calls[2][1] == [["tenancy_id", "in", [10, 11]]]


def test_asset_tape_only_skips_options(client_for, fake_odoo):
    response = client_for(fake_odoo).post(
        "/api/export", json={"report_type": "asset_tape", "columns": ["nope"]})

    assert response.status_code == 200
    assert load_workbook(BytesIO(response.content)).sheetnames == ["Asset Tape"]
    assert "property.tenancy.option" not in [call[0] for call in fake_odoo.calls]


def test_rent_roll_columns_in_canonical_order(client_for, fake_odoo):
    response = client_for(fake_odoo).post("/api/export", json={
        "report_type": "rent_roll",
        "columns": ["psm", "bogus", "reference_id"],
    })

    ws = load_workbook(BytesIO(response.content))["Rent Roll"]
    assert [c.value for c in ws[2][1:]] == ["Asset Ref", "PSM (monthly)"]


def test_no_valid_column_is_client_error(client_for, fake_odoo):
    response = client_for(fake_odoo).post(
        "/api/export", json={"report_type": "rent_roll", "columns": ["bogus"]})

    assert response.status_code == 400
    assert response.json()["message"] == "No valid column requested"
    assert fake_odoo.calls == []


def test_unknown_fund_rejected_before_fetch(client_for, fake_odoo):
    response = client_for(fake_odoo).post("/api/export", json={"fund_name": "Mystery Fund"})

    assert response.status_code == 422
    body = response.json()
    assert body["status"] == "Failure"
    assert body["data"][0]["field"] == "fund_name"
    assert fake_odoo.calls == []


def test_fund_and_operator_filters(client_for, make_odoo, odoo_records):
    odoo = make_odoo({**odoo_records, "res.company": [{"id": 7, "name": "Core Fund I"}]})
    response = client_for(odoo).post("/api/export", json={
        "fund_name": "Core Fund I",
        "operator_code": "north",
        "salesperson_id": 3,
    })

    assert response.status_code == 200
    assert odoo.calls[0][0] == "res.company"
    assert odoo.calls[1][1] == [
        ["sales_person_id", "=", 3],
        ["company_id", "=", 7],
        ["operator_id", "=", 11],
    ]


def test_fund_without_company_is_client_error(client_for, fake_odoo):
    response = client_for(fake_odoo).post("/api/export", json={"fund_name": "Core Fund II"})

    assert response.status_code == 400
    assert [call[0] for call in fake_odoo.calls] == ["res.company"]


def test_zero_assets_is_not_found(client_for, make_odoo):
    odoo = make_odoo({})
    response = client_for(odoo).post("/api/export", json={"reference_ids": ["ZZZ"]})

    assert response.status_code == 404
    assert response.json()["message"] == "No asset found for the given filters"
    assert [call[0] for call in odoo.calls] == ["property.property"]


def test_assets_without_tenancies_still_export(client_for, make_odoo, odoo_records):
    odoo = make_odoo({"property.property": odoo_records["property.property"]})
    response = client_for(odoo).post("/api/export", json={})

    assert response.status_code == 200
    wb = load_workbook(BytesIO(response.content))
    assert wb["Rent Roll"]["B3"].value is None
    assert wb["Asset Tape"]["B3"].value == "A-100"


def test_gateway_failure_is_bad_gateway(client_for, failing_odoo):
    response = client_for(failing_odoo).post("/api/export", json={})

    assert response.status_code == 502
    assert "Access Denied" in response.json()["message"]


def test_lookups(client_for, fake_odoo):
    response = client_for(fake_odoo).get("/api/export/lookups")

    assert response.status_code == 200
    body = response.json()
    assert [c["key"] for c in body["columns"]][:3] == ["reference_id", "city", "street_nr"]
    assert body["columns"][-1] == {
        "key": "current_ancillary_costs", "label": "Ancillary costs (current)", "is_default": False}
    assert len(body["operators"]) == 4
    assert fake_odoo.calls == []


def test_export_routes_are_registered():
    paths = {route.path for route in app.routes}
    assert {"/api/export", "/api/export/lookups"} <= paths


def test_tenancy_text_is_written_verbatim(client_for, make_odoo, odoo_records):
    tenancies = [dict(odoo_records["property.tenancy"][1], name="=Shop\x0b 1")]
    odoo = make_odoo({**odoo_records, "property.tenancy": tenancies})
    response = client_for(odoo).post("/api/export", json={
        "report_type": "rent_roll", "columns": ["reference_id", "tenancy_name"]})

    assert response.status_code == 200
    ws = load_workbook(BytesIO(response.content))["Rent Roll"]
    assert ws["C3"].value == "=Shop 1"
    assert ws["C3"].data_type == "s"


def test_blank_form_fields_are_ignored(client_for, fake_odoo):
    response = client_for(fake_odoo).post("/api/export", json={
        "reference_ids": ["", " A-100 ", "A-100"],
        "fund_name": "",
        "operator_code": " ",
        "salesperson_id": "",
    })

    assert response.status_code == 200
    assert fake_odoo.calls[0][1] == [["reference_id", "in", ["A-100"]]]


def test_validation_runs_without_odoo_settings(monkeypatch):
    monkeypatch.setattr(export_router, "ODOO_CONFIG", OdooConfig(
        url="", db="", user="", api_key="", fetch_limit=10, timeout=5))
    app.dependency_overrides.clear()

    response = TestClient(app).post("/api/export", json={"fund_name": "Mystery Fund"})

    assert response.status_code == 422
    assert response.json()["data"][0]["field"] == "fund_name"
