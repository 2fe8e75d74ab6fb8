"""Table mappings for Ecofi weather databases.

Ecofi keeps weather stations in ``ws`` and their daily observations in
``wdataday``. The two tables share the ``wscode`` column but no foreign
key is declared, so the relationship is rebuilt by lookup at read time.
"""

from types import MappingProxyType

from ecofi_ace.db.models import FieldMapping

STATION_TABLE = "ws"
DAILY_TABLE = "wdataday"
JOIN_COLUMN = "wscode"

DATE_COLUMN = "weatherdate"
WIND_COLUMN = "windtot"

# m/s to km/day
WIND_FACTOR = 86.4

STATION_FIELDS = (
    FieldMapping(source="wsname", ace="wst_name", description="Station name"),
    FieldMapping(source="wslat", ace="wst_lat", description="Latitude", units="decimal degrees"),
    FieldMapping(source="wslong", ace="wst_long", description="Longitude", units="decimal degrees"),
    FieldMapping(source="wsalt", ace="wst_elev", description="Elevation", units="m"),
    # 2-char ISO code, ACE expects 3 chars. Passed through as-is.
    FieldMapping(source="countrycode", ace="wst_loc_1", description="Country code (ISO 3166 alpha-2)"),
    FieldMapping(source="x_wgs84", ace="ecofi_x_wgs84", description="X coordinate, WGS84"),
    # Misspelt target kept for compatibility with existing consumers.
    FieldMapping(source="y_wgs84", ace="ecogi_y_wgs84", description="Y coordinate, WGS84"),
    FieldMapping(source="wstype", ace="ecofi_wstype", description="Ecofi station type"),
)

DAILY_FIELDS = (
    FieldMapping(
        source=DATE_COLUMN, ace="w_date", description="Observation date",
        units="YYYYMMDD", transform="ISO basic date",
    ),
    FieldMapping(source="tmin", ace="tmin", description="Minimum air temperature", units="°C"),
    FieldMapping(source="tmax", ace="tmax", description="Maximum air temperature", units="°C"),
    FieldMapping(source="tmoy", ace="tavd", description="Mean air temperature", units="°C"),
    FieldMapping(source="rhmin", ace="rhumd", description="Minimum relative humidity", units="%"),
    FieldMapping(source="rhmax", ace="rhuxd", description="Maximum relative humidity", units="%"),
    FieldMapping(source="rainfall", ace="rain", description="Rainfall", units="mm"),
    FieldMapping(
        source=WIND_COLUMN, ace="wind", description="Wind run", units="km/day",
        transform=f"m/s x {WIND_FACTOR}",
    ),
    FieldMapping(source="radiation", ace="srad", description="Solar radiation", units="MJ/m²/day"),
    FieldMapping(source="sunshine", ace="sunh", description="Sunshine duration", units="h"),
    FieldMapping(source="eto", ace="eto", description="Reference evapotranspiration", units="mm"),
    FieldMapping(source="rhmoy", ace="ecofi_rhmoy", description="Mean relative humidity", units="%"),
    FieldMapping(source="windmax", ace="ecofi_windmax", description="Maximum wind speed"),
    FieldMapping(source="grad", ace="ecofi_grad", description="Global radiation"),
)

# Column mappings: Ecofi column name → ACE field name
STATION_COLUMNS = MappingProxyType({f.source: f.ace for f in STATION_FIELDS})
DAILY_COLUMNS = MappingProxyType({f.source: f.ace for f in DAILY_FIELDS})

REQUIRED_TABLES = (STATION_TABLE, DAILY_TABLE)
