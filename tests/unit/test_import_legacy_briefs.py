"""Tests for mapping legacy brief exports."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path

import pytest

from app.models.brief import BriefStatus
from scripts.import_legacy_briefs import keep_single_active, legacy_row_to_dto, load_rows


@pytest.mark.parametrize(
    ("row", "expected"),
    [
        ({"status": "published"}, BriefStatus.ACTIVE),
        ({"status": "Live"}, BriefStatus.ACTIVE),
        ({"status": "active"}, BriefStatus.ACTIVE),
        ({"status": "draft"}, BriefStatus.DRAFT),
        ({"is_published": True}, BriefStatus.ACTIVE),
        ({"is_published": False}, BriefStatus.DRAFT),
        ({}, BriefStatus.DRAFT),
    ],
)
def test_legacy_status_shapes_map_to_two_states(row: dict, expected: BriefStatus) -> None:
    dto = legacy_row_to_dto({"title": "T", "content": "Body", **row})

    assert dto is not None
    assert dto.status == expected


def test_legacy_row_keeps_content_fields() -> None:
    dto = legacy_row_to_dto(
        {
            "title": " Weekly ",
            "content": "Legacy body",
            "radar_points": ["a", "", "b"],
            "status": "published",
            "publish_date": "2026-03-01T09:00:00Z",
        }
    )

    assert dto is not None
    assert dto.title == "Weekly"
    assert dto.deep_dive_text == "Legacy body"
    assert dto.radar_points == ["a", "b"]
    assert dto.publish_date == datetime(2026, 3, 1, 9, tzinfo=timezone.utc)


def test_legacy_row_without_body_is_skipped() -> None:
    assert legacy_row_to_dto({"title": "Only a title"}) is None


def test_keep_single_active_demotes_older_rows() -> None:
    rows = [
        {"title": "Old", "content": "x", "status": "live", "publish_date": "2026-01-01T00:00:00Z"},
        {"title": "New", "content": "x", "is_published": True, "publish_date": "2026-02-01T00:00:00Z"},
        {"title": "Draft", "content": "x"},
    ]
    dtos = [legacy_row_to_dto(row) for row in rows]

    result = keep_single_active([dto for dto in dtos if dto is not None])

    assert {dto.title: dto.status for dto in result} == {
        "Old": BriefStatus.DRAFT,
        "New": BriefStatus.ACTIVE,
        "Draft": BriefStatus.DRAFT,
    }


def test_load_rows_accepts_wrapped_export(tmp_path: Path) -> None:
    path = tmp_path / "export.json"
    path.write_text(json.dumps({"rows": [{"title": "a"}, "junk"]}), encoding="utf-8")

    assert load_rows(path) == [{"title": "a"}]
