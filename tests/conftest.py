from datetime import datetime

import pytest

from shared.utils.odoo_client import OdooRpcError


class FakeOdooClient:
    """Stands in for OdooClient: serves canned records per model and records every call."""

    def __init__(self, records=None, error=None):
        self.records = records or {}
        self.error = error
        self.calls = []

    def search_read(self, model, domain, fields, limit=None, offset=0):
        self.calls.append((model, domain, fields))
        if self.error:
            raise self.error
        return list(self.records.get(model, []))

    def available_fields(self, model, wanted):
        return list(wanted)


@pytest.fixture
def now():
    return datetime(2026, 1, 1, 12, 0, 0)


@pytest.fixture
def odoo_records():
    return {
        "property.property": [
            {"id": 2, "reference_id": "B-200", "main_property_id": False,
             "city": "Lyon", "street": "Rue Garibaldi", "nr": "12", "zip": "69003",
             "entity_id": [5, "Propco Lyon SAS"], "location_id": [8, "Part-Dieu"],
             "construction_year": 1985, "last_modernization": 2015,
             "plot_area": 4200.0, "no_of_parking": 40},
            {"id": 1, "reference_id": "A-100", "main_property_id": False,
             "city": "Paris", "street": "Rue de Rivoli", "nr": 5, "zip": "75001",
             "entity_id": [4, "Propco Paris SAS"], "location_id": False,
             "construction_year": 1990, "last_modernization": 0,
             "plot_area": 1000.0, "no_of_parking": 10},
            {"id": 3, "reference_id": "A-101", "main_property_id": [1, "A-100"]},
        ],
        "property.tenancy": [
            {"id": 10, "main_property_id": [2, "B-200"], "name": "Bakery",
             "space": 100.0, "current_rent": 1200.0, "total_current_rent": 100.0,
             "current_ancillary_costs": 20.0, "date_start": "2020-01-01",
             "date_end_display": False},
            {"id": 11, "main_property_id": [1, "A-100"], "name": "Office 1",
             "space": 250.0, "current_rent": 60000.0, "total_current_rent": 5000.0,
             "current_ancillary_costs": 400.0, "date_start": "2022-03-01",
             "date_end_display": "2030-02-28"},
        ],
        "property.tenancy.option": [
            {"id": 100, "tenancy_id": [11, "Office 1"], "duration": 5.0},
            {"id": 101, "tenancy_id": [11, "Office 1"], "duration": 3.0},
        ],
    }


@pytest.fixture
def fake_odoo(odoo_records):
    return FakeOdooClient(odoo_records)


@pytest.fixture
def failing_odoo():
    return FakeOdooClient(error=OdooRpcError("Odoo RPC error: Access Denied"))


@pytest.fixture
def make_odoo():
    return FakeOdooClient
