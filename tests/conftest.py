import pytest

from core.models import UnitRecord, UnitStatus
from core.store import RentRollStore


def make_record(unit, status=UnitStatus.OCCUPIED, **fields) -> UnitRecord:
    defaults = {
        "name": f"Tenant {unit}",
        "type": "1x1.1",
        "sq_ft": 750,
        "monthly_rent": 1200.0,
        "deposit": 500.0,
        "moved_in": "01/01/2023",
        "lease_ends": "12/31/2025",
    }
    defaults.update(fields)
    return UnitRecord(unit=unit, status=status, **defaults)


@pytest.fixture
def unit_record():
    return make_record


# Empty in-memory store
@pytest.fixture
def store():
    with RentRollStore(":memory:") as s:
        yield s


# The three-unit scenario: one occupied, two vacant
@pytest.fixture
def small_store(store):
    store.load_records([
        make_record(101, UnitStatus.OCCUPIED, monthly_rent=1200.0, lease_ends="03/15/2025"),
        make_record(102, UnitStatus.VACANT_READY, name="", monthly_rent=1300.0, lease_ends=None),
        make_record(103, UnitStatus.VACANT_UNIT, name="", monthly_rent=1100.0, lease_ends=None),
    ])
    return store


# A wider mix of types, statuses and lease dates
@pytest.fixture
def mixed_store(store):
    records = [
        make_record(100 + i, UnitStatus.OCCUPIED, name=f"Smith {i}", type="1x1.2",
                    monthly_rent=1000.0 + i * 10, lease_ends=f"0{1 + i % 9}/01/2025")
        for i in range(12)
    ]
    records += [
        make_record(201, UnitStatus.OCCUPIED, name="Jane Doe", type="2x2.1",
                    monthly_rent=1850.5, lease_ends="03/15/2024"),
        make_record(202, UnitStatus.NOTICE_UNKNOWN, name="John Roe", type="2x2.3",
                    monthly_rent=1900.0, lease_ends="06/30/2025"),
        make_record(203, UnitStatus.VACANT_READY, name="", type="2x2.1",
                    monthly_rent=None, lease_ends=None),
    ]
    store.load_records(records)
    return store


class SpyStore:
    """Stands in for RentRollStore and records every execute() call."""

    def __init__(self):
        self.calls = []

    def execute(self, query, params=()):
        self.calls.append((query, tuple(params)))
        return []


@pytest.fixture
def spy_store():
    return SpyStore()
