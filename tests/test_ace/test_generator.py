"""Tests for writing ACE datasets."""

import gzip
import io
import json

from ecofi_ace.ace.generator import generate, write_file
from ecofi_ace.ace.models import AceDataset, AceRecord, AceWeather


def _dataset():
    ds = AceDataset()
    weather = AceWeather({"wst_id": "1", "wst_name": "A"})
    weather.daily_weather.add(AceRecord({"w_date": "20200101", "wind": "259.20000000000002"}))
    ds.add_weather(weather.rebuild_component())
    return ds


def test_generate_compressed():
    buf = io.BytesIO()
    generate(buf, _dataset())

    doc = json.loads(gzip.decompress(buf.getvalue()))

    assert doc["experiments"] == []
    assert doc["soils"] == []
    assert len(doc["weathers"]) == 1
    assert doc["weathers"][0]["dailyWeather"][0]["wind"] == "259.20000000000002"


def test_generate_plain():
    buf = io.BytesIO()
    generate(buf, _dataset(), compress=False)

    doc = json.loads(buf.getvalue())

    assert doc["weathers"][0]["wst_id"] == "1"
    assert doc["weathers"][0]["wid"]


def test_generate_empty_dataset():
    buf = io.BytesIO()
    generate(buf, AceDataset(), compress=False)
    assert json.loads(buf.getvalue())["weathers"] == []


def test_write_file_compresses_aceb_only(tmp_path):
    aceb = write_file(tmp_path / "out" / "weather.aceb", _dataset())
    plain = write_file(tmp_path / "weather.json", _dataset())

    assert json.loads(gzip.decompress(aceb.read_bytes()))["weathers"][0]["wst_name"] == "A"
    assert json.loads(plain.read_bytes())["weathers"][0]["wst_name"] == "A"
