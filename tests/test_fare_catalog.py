"""Tests for the fare catalog index."""

import csv

import pytest

from fare_estimator.domain.catalog import FareCatalog, formula_from_record
from fare_estimator.domain.errors import DataIntegrityError
from fare_estimator.domain.models import FareFormula, FixedFareEntry, FixedFareTable


def test_find_formula_by_mode_and_sub_type(catalog):
    formula = catalog.find_formula("taxi", "regular")

    assert formula is not None
    assert formula.base_fare == 45.0


def test_find_formula_without_sub_type_needs_a_single_candidate():
    catalog = FareCatalog.load(
        [
            FareFormula("jeepney", "traditional", 13.0, 1.8),
            FareFormula("jeepney", "modern", 15.0, 2.2),
            FareFormula("taxi", "regular", 45.0, 13.5),
        ]
    )

    assert catalog.find_formula("taxi") == FareFormula("taxi", "regular", 45.0, 13.5)
    assert catalog.find_formula("jeepney") is None
    assert catalog.find_formula("ferry") is None


def test_duplicate_formula_is_rejected():
    with pytest.raises(DataIntegrityError, match="Duplicate fare formula"):
        FareCatalog.load(
            [
                FareFormula("taxi", "regular", 45.0, 13.5),
                FareFormula("taxi", "regular", 40.0, 13.5),
            ]
        )


def test_same_mode_with_different_sub_types_is_allowed():
    catalog = FareCatalog.load(
        [
            FareFormula("bus", "ordinary", 13.0, 2.25),
            FareFormula("bus", "aircon", 15.0, 2.65),
        ]
    )

    assert len(catalog.formulas()) == 2


def test_formula_records_from_csv_rows():
    formula = formula_from_record(
        {
            "mode": " bus ",
            "sub_type": "aircon",
            "base_fare": "15.00",
            "per_kilometer": "2.65",
            "minimum_fare": "",
            "provincial_multiplier": "1.1",
            "notes": "  ",
        }
    )

    assert formula == FareFormula(
        "bus", "aircon", 15.0, 2.65, minimum_fare=None, provincial_multiplier=1.1
    )


@pytest.mark.parametrize(
    "record",
    [
        {"mode": "bus", "sub_type": "x", "base_fare": "-1", "per_kilometer": "2"},
        {"mode": "bus", "sub_type": "x", "base_fare": "abc", "per_kilometer": "2"},
        {"mode": "bus", "sub_type": "x", "per_kilometer": "2"},
        {"mode": "", "sub_type": "x", "base_fare": "1", "per_kilometer": "2"},
        {"mode": "bus", "sub_type": "x", "base_fare": "1", "per_kilometer": "nan"},
        {"mode": None, "sub_type": "x", "base_fare": "1", "per_kilometer": "2"},
        {"sub_type": "x", "base_fare": "1", "per_kilometer": "2"},
    ],
)
def test_invalid_formula_records_fail_the_load(record):
    with pytest.raises(DataIntegrityError):
        FareCatalog.load([record])


def test_find_fixed_is_exact_and_directional(catalog):
    entry = catalog.find_fixed("Batangas Port", "Calapan Port")

    assert entry is not None
    assert entry.price == 340.0
    assert catalog.find_fixed("Calapan Port", "Batangas Port") is None
    assert catalog.find_fixed("batangas port", "Calapan Port") is None
    assert catalog.find_fixed("PortA", "PortZ") is None


def test_find_fixed_can_be_restricted_to_a_mode(catalog):
    assert catalog.find_fixed("Batangas Port", "Calapan Port", mode="ferry") is not None
    assert catalog.find_fixed("Batangas Port", "Calapan Port", mode="lrt1") is None
    assert (
        catalog.find_fixed(
            "Batangas Port", "Calapan Port", mode="ferry", sub_type="business"
        )
        is None
    )


def test_find_fixed_searches_tables_in_order():
    catalog = FareCatalog.load(
        [],
        [
            FixedFareTable("ferry", "economy", (FixedFareEntry("A", "B", 100.0),)),
            FixedFareTable("ferry", "business", (FixedFareEntry("A", "B", 250.0),)),
        ],
    )

    # "business" sorts before "economy"
    assert catalog.find_fixed("A", "B").price == 250.0
    assert [t.sub_type for t in catalog.fixed_tables()] == ["business", "economy"]


def test_duplicate_fixed_pair_is_rejected():
    table = FixedFareTable(
        "ferry",
        "economy",
        (FixedFareEntry("A", "B", 100.0), FixedFareEntry("A", "B", 120.0)),
    )

    with pytest.raises(DataIntegrityError, match="Duplicate fixed fare"):
        FareCatalog.load([], [table])


def test_duplicate_fixed_table_is_rejected():
    table = FixedFareTable("ferry", "economy", (FixedFareEntry("A", "B", 100.0),))

    with pytest.raises(DataIntegrityError, match="Duplicate fixed fare table"):
        FareCatalog.load([], [table, table])


def test_fixed_keys(catalog):
    assert catalog.fixed_keys("ferry", "economy") == frozenset(
        {"Batangas Port", "Calapan Port", "Cebu Port", "Tagbilaran Port"}
    )
    assert catalog.fixed_keys("ferry", "missing") == frozenset()


def test_catalog_is_read_only(catalog):
    with pytest.raises(TypeError):
        catalog._formulas[("bike", "")] = FareFormula("bike", "", 0.0, 0.0)
    with pytest.raises(AttributeError):
        catalog._tables = ()


def test_short_csv_row_is_not_read_as_mode_none(tmp_path):
    path = tmp_path / "fare_formulas.csv"
    path.write_text("base_fare,per_kilometer,mode\n13.00,1.80\n", encoding="utf-8")
    with path.open(encoding="utf-8", newline="") as f:
        rows = list(csv.DictReader(f))

    assert rows[0]["mode"] is None
    with pytest.raises(DataIntegrityError):
        FareCatalog.load(rows)


def test_empty_catalog_can_be_built_directly():
    catalog = FareCatalog()

    assert catalog.formulas() == ()
    assert catalog.find_fixed("A", "B") is None
    assert FareCatalog()._formulas is catalog._formulas
