"""Write ACE datasets as JSON, optionally gzip-compressed (``.aceb``)."""

import gzip
import json
from pathlib import Path
from typing import BinaryIO

from ecofi_ace.ace.models import AceDataset

ACEB_SUFFIX = ".aceb"


def to_document(dataset: AceDataset) -> dict:
    """Build the top-level ACE JSON document for ``dataset``."""
    return {
        "experiments": [],
        "soils": [],
        "weathers": [weather.to_json_dict() for weather in dataset],
    }


def generate(stream: BinaryIO, dataset: AceDataset, compress: bool = True) -> None:
    """Serialize ``dataset`` to ``stream``.

    Parameters
    ----------
    stream : BinaryIO
        Writable binary stream. It is not closed.
    dataset : AceDataset
        Dataset to write.
    compress : bool
        Gzip the JSON document, as in ``.aceb`` files.
    """
    payload = json.dumps(to_document(dataset), ensure_ascii=False).encode("utf-8")
    if compress:
        with gzip.GzipFile(fileobj=stream, mode="wb") as gz:
            gz.write(payload)
    else:
        stream.write(payload)


def write_file(path: str | Path, dataset: AceDataset) -> Path:
    """Write ``dataset`` to ``path``; only ``.aceb`` files are compressed."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("wb") as fh:
        generate(fh, dataset, compress=path.suffix.lower() == ACEB_SUFFIX)
    return path
