from __future__ import annotations

import asyncio
import json
from pathlib import Path

import pytest

from adapters.file_source import JsonFileSource
from adapters.notam_records import build_notice, build_notices, pick_notam_list
from core.ports import SourceError


def test_build_notice_text_layout() -> None:
    notice = build_notice(
        {
            "icaoId": "KBLM",
            "notamNumber": "A0001/24",
            "traditionalMessage": "RWY 14/32 CLSD",
            "effectiveFrom": "2024-05-01T10:00Z",
            "effectiveTo": "2024-05-02T10:00Z",
        }
    )
    assert notice.id == "A0001/24"
    assert notice.number == "A0001/24"
    assert notice.text == "KBLM A0001/24 | RWY 14/32 CLSD | Start: 2024-05-01T10:00Z | End: 2024-05-02T10:00Z"
    assert notice.raw["icaoId"] == "KBLM"


def test_build_notice_without_number() -> None:
    notice = build_notice({"location": "KBLM", "condition": "OBST", "text": "CRANE 200FT AGL"})
    assert notice.number is None
    assert notice.id == "KBLM_OBST"
    assert notice.text == "KBLM | CRANE 200FT AGL"


@pytest.mark.parametrize(
    ("payload", "expected"),
    [
        ([{"id": 1}], [{"id": 1}]),
        ({"items": [{"id": 2}]}, [{"id": 2}]),
        ({"data": []}, []),
        ({"unrelated": True}, []),
        ({"notams": "oops"}, None),
        ("text", None),
    ],
)
def test_pick_notam_list(payload, expected) -> None:
    assert pick_notam_list(payload) == expected


def test_build_notices_skips_non_dict_records() -> None:
    notices = build_notices([{"id": "A1", "text": "x"}, "junk", None])
    assert [notice.id for notice in notices] == ["A1"]


def test_file_source_filters_by_location(tmp_path: Path) -> None:
    path = tmp_path / "export.json"
    path.write_text(
        json.dumps(
            {
                "notams": [
                    {"id": "A1", "location": "KBLM", "text": "RWY CLSD"},
                    {"id": "B1", "location": "KEWR", "text": "TWY CLSD"},
                    {"id": "C1", "text": "unattributed"},
                ]
            }
        ),
        encoding="utf-8",
    )
    notices = asyncio.run(JsonFileSource(path).fetch("kblm"))
    assert [notice.id for notice in notices] == ["A1", "C1"]


def test_file_source_missing_file_raises(tmp_path: Path) -> None:
    with pytest.raises(SourceError):
        asyncio.run(JsonFileSource(tmp_path / "absent.json").fetch("KBLM"))
