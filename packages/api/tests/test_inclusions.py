# This project was developed with assistance from AI tools.
"""Tests for inclusion map parsing."""

import pytest

from rekro_api.core.errors import ValidationError
from rekro_api.schemas.application import Inclusion
from rekro_api.services.inclusions import dump_inclusions, parse_inclusions


def test_known_keys_are_parsed_and_unknown_ignored():
    parsed = parse_inclusions({
        "furniture": {"selected": True, "price": 25},
        "bills": {"selected": False, "price": 0},
        "cleaning": None,
        "jacuzzi": {"selected": True, "price": 100},
    })
    assert parsed == {
        "furniture": Inclusion(selected=True, price=25),
        "bills": Inclusion(selected=False, price=0),
    }


def test_none_is_empty():
    assert parse_inclusions(None) == {}


def test_numeric_string_price_is_accepted():
    parsed = parse_inclusions({"carpark": {"selected": True, "price": "25"}})
    assert parsed["carpark"] == Inclusion(selected=True, price=25)


@pytest.mark.parametrize(
    "entry, message",
    [
        ("yes", "must be an object"),
        ({}, "selected must be a boolean"),
        ({"price": 10}, "selected must be a boolean"),
        ({"selected": True}, "price must be a non-negative number"),
        ({"selected": "true", "price": 10}, "selected must be a boolean"),
        ({"selected": True, "price": "ten"}, "price must be a non-negative number"),
        ({"selected": True, "price": "  "}, "price must be a non-negative number"),
        ({"selected": True, "price": True}, "price must be a non-negative number"),
        ({"selected": True, "price": -5}, "price must be a non-negative number"),
        ({"selected": True, "price": float("nan")}, "price must be a non-negative number"),
        ({"selected": True, "price": "inf"}, "price must be a non-negative number"),
    ],
)
def test_strict_mode_rejects_malformed_entries(entry, message):
    with pytest.raises(ValidationError, match=message):
        parse_inclusions({"cleaning": entry})


def test_strict_mode_rejects_non_mapping():
    with pytest.raises(ValidationError, match="keyed by inclusion name"):
        parse_inclusions(["furniture"])


def test_coerce_mode_defaults_each_field_separately():
    parsed = parse_inclusions(
        {
            "carpark": {"selected": "yes", "price": 40},
            "storage": {"selected": True, "price": "oops"},
            "bills": {},
            "furniture": {"selected": True, "price": "12.5"},
        },
        strict=False,
    )
    assert parsed["carpark"] == Inclusion(selected=False, price=40)
    assert parsed["storage"] == Inclusion(selected=True, price=0)
    assert parsed["bills"] == Inclusion(selected=False, price=0)
    assert parsed["furniture"] == Inclusion(selected=True, price=12.5)


def test_coerce_mode_non_object_entry_defaults():
    assert parse_inclusions({"cleaning": 5}, strict=False) == {"cleaning": Inclusion()}


def test_coerce_mode_non_mapping_is_empty():
    assert parse_inclusions("garbage", strict=False) == {}


def test_dump_is_json_ready():
    dumped = dump_inclusions({"bills": Inclusion(selected=True, price=12.5)})
    assert dumped == {"bills": {"selected": True, "price": 12.5}}
