"""Local JSON export source adapter.

Reads the same payload shapes the REST API returns from a file on disk. Useful
for dry runs and for replaying a captured upstream response.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import List

from adapters.notam_records import build_notices, pick_notam_list
from core.models import Notice
from core.notice_ids import LOCATION_FIELDS, first_value
from core.ports import SourceError


class JsonFileSource:
    def __init__(self, path: Path, filter_location: bool = True) -> None:
        self.path = path
        self.filter_location = filter_location

    async def fetch(self, location_code: str) -> List[Notice]:
        try:
            payload = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            raise SourceError(f"Cannot read NOTAM export {self.path}: {exc}") from exc

        records = pick_notam_list(payload)
        if records is None:
            raise SourceError(f"Unexpected NOTAM payload shape in {self.path}")

        if self.filter_location:
            # Records without a location are kept; they cannot be attributed.
            wanted = location_code.upper()
            records = [
                record
                for record in records
                if not isinstance(record, dict)
                or (first_value(record, LOCATION_FIELDS) or wanted).upper() == wanted
            ]
        return build_notices(records)
