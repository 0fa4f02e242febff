"""期間フィルタ."""

from __future__ import annotations

from datetime import datetime, timezone

from ranking_history.config import CUSTOM_RANGE_SPAN, RANGE_CHOICES
from ranking_history.dates import shift_years, utc_now, utc_year
from ranking_history.models import (
    AllTime,
    CustomYears,
    HistoryMap,
    RankingRecord,
    RelativeYears,
    TimeRange,
)


def filter_history(
    history: list[RankingRecord], spec: TimeRange, now: datetime
) -> list[RankingRecord]:
    """期間指定に含まれるレコードだけを返す.

    AllTime は入力をそのまま返す。それ以外では日時が不明なレコードは除外する。
    CustomYears の start > end は空の結果になるだけでエラーにはしない。
    """
    if isinstance(spec, AllTime):
        return list(history)

    if isinstance(spec, RelativeYears):
        if now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)
        cutoff = shift_years(now, -spec.years)
        return [
            r for r in history
            if r.published_at is not None and r.published_at >= cutoff
        ]

    if isinstance(spec, CustomYears):
        return [
            r for r in history
            if r.published_at is not None
            and spec.start <= utc_year(r.published_at) <= spec.end
        ]

    raise TypeError(f"unknown time range: {spec!r}")


def filter_history_map(
    history: HistoryMap, spec: TimeRange, now: datetime
) -> HistoryMap:
    """HistoryMap の全ての国に filter_history を適用する."""
    return {code: filter_history(records, spec, now) for code, records in history.items()}


def parse_time_range(
    token: str,
    start_year: int | None = None,
    end_year: int | None = None,
    now: datetime | None = None,
) -> TimeRange:
    """画面・CLI の期間指定 ("1y".."6y", "all", "custom") を TimeRange に変換する.

    custom で年の指定がない場合は直近 CUSTOM_RANGE_SPAN 年とする。

    Raises:
        ValueError: 未知の指定
    """
    token = token.strip().lower()
    if token not in RANGE_CHOICES:
        raise ValueError(f"unknown time range: {token!r} (choices: {', '.join(RANGE_CHOICES)})")

    if token == "all":
        return AllTime()

    if token == "custom":
        current_year = utc_year(now or utc_now())
        start = start_year if start_year is not None else current_year - CUSTOM_RANGE_SPAN
        end = end_year if end_year is not None else current_year
        return CustomYears(start, end)

    return RelativeYears(int(token[:-1]))
