"""日付キーの正規化.

グラフ・エクスポート・同日判定のすべてでこのモジュールの date_key を使う。
日付の境界は常に UTC で判定する。
"""

from __future__ import annotations

from datetime import datetime, timezone

from dateutil import parser as dateutil_parser


def parse_timestamp(raw: str | None) -> datetime | None:
    """API の日時文字列を UTC の datetime に変換する.

    ISO 8601 形式を受け付ける。小数秒の桁数は問わない (例: .0000000)。
    タイムゾーン指定のない値は UTC とみなす。

    Returns:
        UTC の datetime。パースできない場合は None。
    """
    if not raw or not isinstance(raw, str):
        return None

    try:
        dt = dateutil_parser.isoparse(raw.strip())
    except (ValueError, OverflowError):
        return None

    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def date_key(dt: datetime) -> str:
    """日付キー (YYYY-MM-DD, UTC) を返す.

    文字列として比較した順序が時系列順と一致する。
    """
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc).date().isoformat()


def utc_year(dt: datetime) -> int:
    """UTC での暦年."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc).year


def shift_years(dt: datetime, years: int) -> datetime:
    """暦年単位で dt をずらす. 2/29 は存在しない年では 2/28 にする."""
    try:
        return dt.replace(year=dt.year + years)
    except ValueError:
        return dt.replace(year=dt.year + years, day=28)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)
