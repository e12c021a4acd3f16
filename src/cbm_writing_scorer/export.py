from __future__ import annotations

import csv
import io
from dataclasses import asdict
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Sequence

from .models import KPI, AuditRow, RubricScore, VirtualTerminalInsertion

AUDIT_FIELDS = ["tag", "message", "span", "replacement"]


def audit_row_dict(row: AuditRow) -> Dict[str, str]:
    start, end = row.span
    return {
        "tag": row.tag,
        "message": row.message,
        "span": f"{start}-{end}",
        "replacement": row.replacement,
    }


def rows_to_csv(rows: Sequence[Mapping[str, Any]], fieldnames: List[str] | None = None) -> str:
    """Render dict rows as CSV text; an empty input yields an empty string."""
    if not rows:
        return ""
    keys = fieldnames or list(rows[0].keys())
    buffer = io.StringIO()
    writer = csv.DictWriter(buffer, fieldnames=keys, extrasaction="ignore", lineterminator="\n")
    writer.writeheader()
    for row in rows:
        writer.writerow({key: "" if row.get(key) is None else row.get(key) for key in keys})
    return buffer.getvalue()


def audit_rows_to_csv(rows: Iterable[AuditRow], path: Path | str | None = None) -> str:
    """Serialize audit rows as CSV, also writing them to ``path`` when given."""
    content = rows_to_csv([audit_row_dict(row) for row in rows], AUDIT_FIELDS)
    if path is not None:
        target = Path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding="utf-8")
    return content


def kpis_to_dict(kpis: KPI) -> Dict[str, Any]:
    return asdict(kpis)


def rubric_to_dict(score: RubricScore) -> Dict[str, Any]:
    return {
        "tww": score.tww,
        "wsc": score.wsc,
        "cws": score.cws,
        "eligible_boundaries": score.eligible_boundaries,
    }


def insertion_to_dict(insertion: VirtualTerminalInsertion) -> Dict[str, Any]:
    return {
        "before_b_index": insertion.before_b_index,
        "char": insertion.char,
        "reason": insertion.reason.value,
        "message": insertion.message,
    }
