"""Import briefs exported from the legacy `legal_briefs` / `weekly_briefs` tables.

Input is a JSON array of rows (or `{"rows": [...]}`). Either legacy status
shape is accepted and mapped onto draft/active. If the export holds several
active rows, only the most recently published one stays active.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy import update

from app.core.database import close_db, get_session_context
from app.core.db_retry import run_with_transient_db_retry
from app.core.logging import setup_logging
from app.models.base import as_utc
from app.models.brief import Brief, BriefStatus
from app.models.dtos import BriefCreateDTO
from app.schemas.brief import BriefContent

logger = logging.getLogger("app.scripts.import_legacy_briefs")


def _parse_datetime(value: Any) -> datetime | None:
    if not value or not isinstance(value, str):
        return None
    try:
        return as_utc(datetime.fromisoformat(value.replace("Z", "+00:00")))
    except ValueError:
        return None


def legacy_row_to_dto(row: dict[str, Any]) -> BriefCreateDTO | None:
    """Map one legacy row; rows without a title or body are skipped (None)."""
    try:
        content = BriefContent.model_validate(row)
    except PydanticValidationError:
        return None

    status = BriefStatus.from_legacy(
        status=row.get("status") if isinstance(row.get("status"), str) else None,
        is_published=row.get("is_published") if isinstance(row.get("is_published"), bool) else None,
    )
    publish_date = _parse_datetime(row.get("publish_date"))
    if status == BriefStatus.ACTIVE and publish_date is None:
        publish_date = _parse_datetime(row.get("created_at"))

    return BriefCreateDTO(
        title=content.title,
        deep_dive_text=content.deep_dive_text,
        category=content.category,
        fun_fact=content.fun_fact,
        radar_points=list(content.radar_points),
        jargon_term=content.jargon_term,
        jargon_def=content.jargon_def,
        social_caption=content.social_caption,
        cover_image=content.cover_image,
        audio_summary_url=row.get("audio_summary_url") or None,
        status=status,
        publish_date=publish_date,
    )


def keep_single_active(dtos: list[BriefCreateDTO]) -> list[BriefCreateDTO]:
    """Demote all but the most recently published active row to draft."""
    active = [dto for dto in dtos if dto.status == BriefStatus.ACTIVE]
    if len(active) <= 1:
        return dtos
    winner = max(active, key=lambda dto: dto.publish_date or datetime.min.replace(tzinfo=timezone.utc))
    for dto in active:
        if dto is not winner:
            dto.status = BriefStatus.DRAFT
    logger.warning("Multiple active rows in export", extra={"demoted": len(active) - 1})
    return dtos


def load_rows(path: Path) -> list[dict[str, Any]]:
    data = json.loads(path.read_text(encoding="utf-8"))
    if isinstance(data, dict):
        data = data.get("rows", [])
    if not isinstance(data, list):
        raise SystemExit("Expected a JSON array of rows")
    return [row for row in data if isinstance(row, dict)]


async def _import(path: Path, *, dry_run: bool) -> tuple[int, int]:
    rows = load_rows(path)
    dtos = [dto for dto in (legacy_row_to_dto(row) for row in rows) if dto is not None]
    dtos = keep_single_active(dtos)
    skipped = len(rows) - len(dtos)
    if dry_run:
        return len(dtos), skipped

    async def _write_once() -> None:
        async with get_session_context() as session:
            if any(dto.status == BriefStatus.ACTIVE for dto in dtos):
                # The imported active row replaces whatever is live now.
                await session.execute(
                    update(Brief)
                    .where(Brief.status == BriefStatus.ACTIVE)
                    .values(status=BriefStatus.DRAFT)
                )
            for dto in dtos:
                Brief.create(session, dto)
            await session.flush()

    await run_with_transient_db_retry(
        _write_once,
        operation_name="import_legacy_briefs",
        log_context={"rows": len(dtos)},
    )
    return len(dtos), skipped


async def _run(args: argparse.Namespace) -> tuple[int, int]:
    try:
        return await _import(Path(args.path), dry_run=args.dry_run)
    finally:
        await close_db()


def main() -> int:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("path", help="JSON export of legacy brief rows")
    parser.add_argument("--dry-run", action="store_true")
    args = parser.parse_args()

    setup_logging()
    imported, skipped = asyncio.run(_run(args))
    print(f"Imported {imported} briefs, skipped {skipped}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
