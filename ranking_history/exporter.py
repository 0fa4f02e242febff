"""CSV / JSON エクスポート.

どちらも降順の日付軸を使い、日付は YYYY-MM-DD (UTC) で出力する。
"""

from __future__ import annotations

import csv
import io
import json
import logging
from collections.abc import Sequence
from datetime import date
from pathlib import Path

from ranking_history.config import EXPORT_FILENAME_PREFIX
from ranking_history.models import AlignedAxis, Order

logger = logging.getLogger(__name__)

CSV_MIME = "text/csv"
JSON_MIME = "application/json"

_EXTENSIONS = {"csv": "csv", "json": "json"}
_MIME_TYPES = {"csv": CSV_MIME, "json": JSON_MIME}


def _require_descending(axis: AlignedAxis) -> None:
    if axis.order is not Order.DESCENDING:
        raise ValueError("export requires a descending axis")


def json_number(value: float | int) -> float | int:
    """JSON 用の数値. 整数値の float は int にして CSV と表記を揃える."""
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


def format_number(value: float | int) -> str:
    """ロケールに依存しない数値表記. 整数値の float は小数点なしで出す."""
    return repr(json_number(value))


def export_csv(axis: AlignedAxis, entities: Sequence[str]) -> str:
    """CSV 文字列を作る.

    ヘッダ: Date, <code> Rank, <code> Points, ...
    データのない国の欄は空欄（0 にはしない）。国が0件なら空文字列。
    """
    _require_descending(axis)
    if not entities:
        return ""

    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")

    header = ["Date"]
    for code in entities:
        header += [f"{code} Rank", f"{code} Points"]
    writer.writerow(header)

    for key in axis.dates:
        row = [key]
        for code in entities:
            record = axis.get(code, key)
            if record is None:
                row += ["", ""]
            else:
                row += [str(record.rank), format_number(record.points)]
        writer.writerow(row)

    return buf.getvalue()


def export_json(axis: AlignedAxis, entities: Sequence[str]) -> list[dict]:
    """日付ごとのエントリのリストを作る.

    [{"date": "2024-06-01", "USA": {"rank", "points", "countryName"}, ...}, ...]
    データのない国のキーは出力しない（null にもしない）。
    """
    _require_descending(axis)
    if not entities:
        return []

    document: list[dict] = []
    for key in axis.dates:
        entry: dict = {"date": key}
        for code in entities:
            record = axis.get(code, key)
            if record is None:
                continue
            item = {"rank": record.rank, "points": json_number(record.points)}
            if record.display_name:
                item["countryName"] = record.display_name
            entry[code] = item
        document.append(entry)

    return document


def dump_json(document: list[dict]) -> str:
    return json.dumps(document, ensure_ascii=False, indent=2)


def export_filename(fmt: str, today: date) -> str:
    """ranking_history_<YYYY-MM-DD>.<ext>"""
    if fmt not in _EXTENSIONS:
        raise ValueError(f"unknown export format: {fmt!r}")
    return f"{EXPORT_FILENAME_PREFIX}_{today.isoformat()}.{_EXTENSIONS[fmt]}"


def export_mime(fmt: str) -> str:
    """形式ごとの MIME タイプ (text/csv, application/json)."""
    if fmt not in _MIME_TYPES:
        raise ValueError(f"unknown export format: {fmt!r}")
    return _MIME_TYPES[fmt]


def write_export(content: str, directory: Path, filename: str, mime_type: str) -> Path:
    """エクスポート内容をファイルに保存する."""
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / filename
    path.write_text(content, encoding="utf-8")
    logger.info(
        "エクスポート保存: %s (%s, %d bytes)", path, mime_type, len(content.encode("utf-8"))
    )
    return path
