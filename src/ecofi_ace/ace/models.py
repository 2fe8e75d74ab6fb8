"""ACE (Agricultural Crop Experiments) weather data model.

Only the weather side of ACE is modelled: a dataset of stations, each
with scalar string fields and an ordered collection of daily records.
Every value is stored as a string keyed by its ACE variable name.
"""

import hashlib
import json
from collections.abc import Iterable, Iterator
from decimal import Decimal, InvalidOperation

DAILY_WEATHER_KEY = "dailyWeather"
WEATHER_ID_KEY = "wid"


def _plain_number(value: str) -> str:
    """Rewrite a numeric string in plain decimal form, else return it unchanged."""
    try:
        number = Decimal(value)
    except InvalidOperation:
        return value
    if not number.is_finite():
        return value
    return format(number.normalize(), "f")


class AceComponent:
    """An ordered mapping of ACE variable names to string values."""

    def __init__(self, values: dict[str, str] | None = None):
        self._values: dict[str, str] = {}
        for key, value in (values or {}).items():
            self.update(key, value)

    def update(
        self,
        key: str,
        value: str | None,
        overwrite: bool = True,
        trim: bool = True,
        coerce_numeric: bool = False,
    ) -> "AceComponent":
        """Set ``key`` to ``value``.

        ``None`` is ignored. With ``trim`` surrounding whitespace is
        stripped; with ``coerce_numeric`` numeric strings are written in
        plain decimal form; without ``overwrite`` an existing value wins.
        """
        if value is None:
            return self
        value = str(value)
        if trim:
            value = value.strip()
        if coerce_numeric:
            value = _plain_number(value)
        if overwrite or key not in self._values:
            self._values[key] = value
        return self

    def get_value(self, key: str, default: str | None = None) -> str | None:
        return self._values.get(key, default)

    def keys(self) -> list[str]:
        return list(self._values)

    def to_dict(self) -> dict[str, str]:
        return dict(self._values)

    def __contains__(self, key: object) -> bool:
        return key in self._values

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._values!r})"


class AceRecord(AceComponent):
    """A single daily observation."""


class AceRecordCollection:
    """Ordered collection of daily records."""

    def __init__(self, records: Iterable[AceRecord] = ()):
        self._records: list[AceRecord] = list(records)

    def add(self, record: AceRecord) -> None:
        self._records.append(record)

    def extend(self, records: Iterable[AceRecord]) -> None:
        self._records.extend(records)

    def to_list(self) -> list[dict[str, str]]:
        return [record.to_dict() for record in self._records]

    def __iter__(self) -> Iterator[AceRecord]:
        return iter(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def __getitem__(self, index: int) -> AceRecord:
        return self._records[index]


class AceWeather(AceComponent):
    """A weather station and its daily weather.

    The station identifier (``wid``) is derived from the content, so two
    stations holding the same values share an id. It is cached once
    computed; pass ``rebuild=True`` to :meth:`get_id` after changes.
    """

    def __init__(
        self,
        values: dict[str, str] | None = None,
        daily_weather: AceRecordCollection | None = None,
    ):
        super().__init__(values)
        self.daily_weather = daily_weather if daily_weather is not None else AceRecordCollection()
        self._id: str | None = None

    def _canonical(self) -> bytes:
        payload = {"values": self.to_dict(), DAILY_WEATHER_KEY: self.daily_weather.to_list()}
        return json.dumps(payload, sort_keys=True, separators=(",", ":")).encode("utf-8")

    def get_id(self, rebuild: bool = False) -> str:
        if self._id is None or rebuild:
            self._id = hashlib.sha1(self._canonical()).hexdigest()
        return self._id

    def to_json_dict(self) -> dict:
        """Station as an ACE JSON object, daily records included."""
        data: dict = {WEATHER_ID_KEY: self.get_id()}
        data.update(self.to_dict())
        data[DAILY_WEATHER_KEY] = self.daily_weather.to_list()
        return data

    def rebuild_component(self) -> bytes:
        """Recompute the id and serialize the station to UTF-8 JSON."""
        self.get_id(rebuild=True)
        return json.dumps(self.to_json_dict(), ensure_ascii=False).encode("utf-8")

    @classmethod
    def from_json(cls, source: bytes | str) -> "AceWeather":
        data = json.loads(source)
        wid = data.pop(WEATHER_ID_KEY, None)
        daily = AceRecordCollection(AceRecord(rec) for rec in data.pop(DAILY_WEATHER_KEY, []))
        weather = cls(data, daily)
        weather._id = wid
        return weather


class AceDataset:
    """Ordered collection of weather stations.

    Stations are kept in insertion order and never merged, even when
    two share the same ``wst_id``.
    """

    def __init__(self):
        self._weathers: list[AceWeather] = []

    def add_weather(self, source: bytes | str | AceWeather) -> AceWeather:
        """Append a station, given as an object or as serialized JSON."""
        weather = source if isinstance(source, AceWeather) else AceWeather.from_json(source)
        self._weathers.append(weather)
        return weather

    @property
    def weathers(self) -> list[AceWeather]:
        return list(self._weathers)

    def __len__(self) -> int:
        return len(self._weathers)

    def __iter__(self) -> Iterator[AceWeather]:
        return iter(self._weathers)
