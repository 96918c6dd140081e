import math
from decimal import Decimal

import pytest

from core.catalog import CATALOG, dispatch, list_operations, schema_overview
from core.models import ErrorKind, OperationFailure, OperationResult


def test_vacant_units_scenario(small_store):
    """Vacant listing returns VR and VU units in unit order"""
    result = dispatch(small_store, "get_vacant_units")
    assert isinstance(result, OperationResult)
    assert [row["unit"] for row in result.payload] == [102, 103]
    assert "Vacant Units: 2 units available" in result.digest
    assert "Vacant Ready" in result.digest


def test_occupancy_stats_scenario(small_store):
    result = dispatch(small_store, "get_occupancy_stats")
    stats = result.payload
    assert stats["total"] == 3
    assert stats["occupied"] == 1
    assert stats["vacant"] == 2
    assert stats["notice"] == 0
    assert stats["occupancy_rate"] == 33.3
    assert stats["vacancy_rate"] == 66.7
    assert "33.3% occupied" in result.digest


def test_occupancy_stats_empty_store(store):
    """Empty table gives a 0.0 rate, not an error or NaN"""
    result = dispatch(store, "get_occupancy_stats")
    assert isinstance(result, OperationResult)
    assert result.payload["total"] == 0
    assert result.payload["occupancy_rate"] == 0.0
    assert math.isfinite(result.payload["occupancy_rate"])
    assert "0.0% occupied" in result.digest


def test_revenue_analysis_scenario(small_store):
    revenue = dispatch(small_store, "get_revenue_analysis").payload
    assert revenue["occupied_revenue"] == Decimal("1200")
    assert revenue["potential_revenue"] == Decimal("3600")
    assert revenue["vacancy_loss"] == Decimal("2400")
    assert revenue["average_rent"] == Decimal("1200.00")
    assert revenue["occupied_count"] == 1
    assert revenue["annual_revenue"] == Decimal("14400")


def test_revenue_analysis_empty_store(store):
    """No rows: every figure is zero and the loss identity still holds"""
    revenue = dispatch(store, "get_revenue_analysis").payload
    assert revenue["occupied_revenue"] == 0
    assert revenue["potential_revenue"] == 0
    assert revenue["vacancy_loss"] == 0
    assert revenue["average_rent"] == 0
    assert revenue["potential_revenue"] - revenue["occupied_revenue"] == revenue["vacancy_loss"]


def test_revenue_loss_identity_with_cents(mixed_store):
    revenue = dispatch(mixed_store, "get_revenue_analysis").payload
    assert revenue["potential_revenue"] - revenue["occupied_revenue"] == revenue["vacancy_loss"]
    # Notice unit (1900) is the only priced non-occupied unit
    assert revenue["vacancy_loss"] == Decimal("1900.00")


def test_type_search_is_case_insensitive(mixed_store):
    upper = dispatch(mixed_store, "search_units_by_type", {"unit_type": "1-BEDROOM"})
    lower = dispatch(mixed_store, "search_units_by_type", {"unit_type": "1-bedroom"})
    assert upper.payload == lower.payload
    assert len(upper.payload) == 12


def test_type_search_two_bedroom_phrase(mixed_store):
    result = dispatch(mixed_store, "search_units_by_type", {"unit_type": "2 bedroom units"})
    assert [row["unit"] for row in result.payload] == [201, 202, 203]


def test_type_search_substring_fallback(mixed_store):
    result = dispatch(mixed_store, "search_units_by_type", {"unit_type": "2X2.1"})
    assert [row["unit"] for row in result.payload] == [201, 203]


def test_type_search_digest_truncates_at_ten(mixed_store):
    result = dispatch(mixed_store, "search_units_by_type", {"unit_type": "1x1"})
    assert len(result.payload) == 12
    assert result.digest.count("• **Unit") == 10
    assert "*Showing first 10 of 12 results*" in result.digest


def test_tenant_search(mixed_store):
    result = dispatch(mixed_store, "search_by_tenant_name", {"name": "Doe"})
    assert [row["unit"] for row in result.payload] == [201]
    assert 'Tenants matching "Doe": 1 found' in result.digest


def test_tenant_search_digest_truncates_at_ten(mixed_store):
    result = dispatch(mixed_store, "search_by_tenant_name", {"name": "Smith"})
    assert len(result.payload) == 12
    assert result.digest.count("• **Smith") == 10
    assert "*Showing first 10 of 12 results*" in result.digest


def test_lease_expirations_year_match(store, unit_record):
    store.load_records([
        unit_record(1, lease_ends="03/15/2025"),
        unit_record(2, lease_ends="03/15/2024"),
    ])
    result = dispatch(store, "get_lease_expirations", {"year": "2025"})
    assert [row["unit"] for row in result.payload] == [1]


def test_lease_expirations_only_occupied_and_ordered(mixed_store):
    result = dispatch(mixed_store, "get_lease_expirations", {"year": "2025"})
    units = [row["unit"] for row in result.payload]
    # 202 is on notice, so it's excluded even though its lease ends in 2025
    assert 202 not in units
    assert len(units) == 12
    lease_ends = [row["lease_ends"] for row in result.payload]
    assert lease_ends == sorted(lease_ends)
    # Unlimited listing: no truncation note
    assert "Showing first" not in result.digest


def test_custom_sql_query(small_store):
    result = dispatch(small_store, "custom_sql_query", {"sql": "SELECT unit FROM rent_roll ORDER BY unit DESC"})
    assert result.payload == [{"unit": 103}, {"unit": 102}, {"unit": 101}]
    assert "**Results:** 3 rows returned" in result.digest


def test_custom_sql_invalid_statement(small_store):
    """Malformed SQL comes back as a query_error with the engine's message"""
    result = dispatch(small_store, "custom_sql_query", {"sql": "SELEC * FROM rent_roll"})
    assert isinstance(result, OperationFailure)
    assert result.kind is ErrorKind.QUERY_ERROR
    assert "syntax error" in result.diagnostic
    assert result.diagnostic in result.detail


def test_custom_sql_unknown_column(small_store):
    result = dispatch(small_store, "custom_sql_query", {"sql": "SELECT rent FROM rent_roll"})
    assert result.kind is ErrorKind.QUERY_ERROR
    assert "no such column" in result.diagnostic


def test_unknown_operation(spy_store):
    result = dispatch(spy_store, "delete_unit", {"unit": 101})
    assert isinstance(result, OperationFailure)
    assert result.kind is ErrorKind.UNKNOWN_OPERATION
    assert "delete_unit" in result.detail
    assert spy_store.calls == []


@pytest.mark.parametrize("name", sorted(
    name for name, op in CATALOG.items() if op.arguments
))
def test_missing_argument_rejected_without_store_access(spy_store, name):
    result = dispatch(spy_store, name, {})
    field = CATALOG[name].arguments[0].name
    assert result.kind is ErrorKind.INVALID_ARGUMENT
    assert field in result.detail
    assert spy_store.calls == []


@pytest.mark.parametrize("bad_value", [2025, 3.5, True, ["x"], {"a": 1}])
@pytest.mark.parametrize("name", sorted(
    name for name, op in CATALOG.items() if op.arguments
))
def test_mistyped_argument_rejected_without_store_access(spy_store, name, bad_value):
    field = CATALOG[name].arguments[0].name
    result = dispatch(spy_store, name, {field: bad_value})
    assert result.kind is ErrorKind.INVALID_ARGUMENT
    assert field in result.detail
    assert spy_store.calls == []


def test_none_arguments_treated_as_missing(spy_store):
    result = dispatch(spy_store, "search_by_tenant_name", None)
    assert result.kind is ErrorKind.INVALID_ARGUMENT
    assert spy_store.calls == []


def test_extra_arguments_are_ignored(small_store):
    result = dispatch(small_store, "get_vacant_units", {"limit": 5})
    assert isinstance(result, OperationResult)
    assert len(result.payload) == 2


def test_catalog_operations_bind_caller_values(spy_store):
    """Caller text never lands in the SQL string of a catalog operation"""
    hostile = "x'; DROP TABLE rent_roll; --"
    for name, field in [
        ("search_units_by_type", "unit_type"),
        ("search_by_tenant_name", "name"),
        ("get_lease_expirations", "year"),
    ]:
        dispatch(spy_store, name, {field: hostile})
    assert len(spy_store.calls) == 3
    for sql, params in spy_store.calls:
        assert hostile not in sql
        assert f"%{hostile}%" in params


def test_list_operations():
    operations = {op["name"]: op for op in list_operations()}
    assert set(operations) == {
        "get_vacant_units",
        "get_occupancy_stats",
        "search_units_by_type",
        "search_by_tenant_name",
        "get_lease_expirations",
        "get_revenue_analysis",
        "custom_sql_query",
    }
    assert operations["search_units_by_type"]["input_schema"]["required"] == ["unit_type"]
    assert operations["get_lease_expirations"]["input_schema"]["properties"]["year"]["type"] == "string"
    assert operations["get_vacant_units"]["input_schema"]["required"] == []
    assert operations["custom_sql_query"]["trusted_caller"] is True


def test_schema_overview(small_store):
    overview = schema_overview(small_store)
    assert overview.total == 3
    assert overview.occupied == 1
    assert overview.vacant == 2
    assert overview.occupancy_rate == 33.3
    assert {row["status"]: row["count"] for row in overview.status_breakdown} == {
        "O": 1, "VR": 1, "VU": 1,
    }
    assert [row["unit"] for row in overview.sample_rows] == [101, 102, 103]
    assert "**Total Units:** 3" in overview.text
    assert "**Occupied:** 1 (33.3%)" in overview.text
    assert "- VR: 1 units" in overview.text


def test_schema_overview_is_idempotent(small_store):
    assert schema_overview(small_store) == schema_overview(small_store)


def test_schema_overview_empty_store(store):
    overview = schema_overview(store)
    assert overview.total == 0
    assert overview.occupancy_rate == 0.0
    assert overview.sample_rows == []
