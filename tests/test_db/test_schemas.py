"""Tests for the Ecofi to ACE rename tables."""

import pytest
from pydantic import ValidationError

from ecofi_ace.db.models import FieldMapping
from ecofi_ace.db.schemas import (
    DAILY_COLUMNS,
    DAILY_FIELDS,
    STATION_COLUMNS,
    WIND_FACTOR,
)


def test_station_columns():
    assert dict(STATION_COLUMNS) == {
        "wsname": "wst_name",
        "wslat": "wst_lat",
        "wslong": "wst_long",
        "wsalt": "wst_elev",
        "countrycode": "wst_loc_1",
        "x_wgs84": "ecofi_x_wgs84",
        "y_wgs84": "ecogi_y_wgs84",
        "wstype": "ecofi_wstype",
    }


def test_daily_columns():
    assert dict(DAILY_COLUMNS) == {
        "weatherdate": "w_date",
        "tmin": "tmin",
        "tmax": "tmax",
        "tmoy": "tavd",
        "rhmin": "rhumd",
        "rhmax": "rhuxd",
        "rainfall": "rain",
        "windtot": "wind",
        "radiation": "srad",
        "sunshine": "sunh",
        "eto": "eto",
        "rhmoy": "ecofi_rhmoy",
        "windmax": "ecofi_windmax",
        "grad": "ecofi_grad",
    }


def test_wind_factor():
    assert WIND_FACTOR == 86.4
    wind = next(f for f in DAILY_FIELDS if f.source == "windtot")
    assert wind.units == "km/day"


def test_rename_tables_are_read_only():
    with pytest.raises(TypeError):
        STATION_COLUMNS["wsname"] = "name"
    with pytest.raises(TypeError):
        DAILY_COLUMNS["extra"] = "extra"


def test_field_mapping_is_frozen():
    mapping = FieldMapping(source="tmin", ace="tmin")
    with pytest.raises(ValidationError):
        mapping.ace = "tmax"


def test_field_mapping_requires_names():
    with pytest.raises(ValidationError):
        FieldMapping(source="", ace="tmin")
