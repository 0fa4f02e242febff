"""複数国の履歴を共通の日付軸に揃えるモジュール."""

from __future__ import annotations

import logging

from ranking_history.dates import date_key
from ranking_history.models import AlignedAxis, HistoryMap, Order, RankingRecord

logger = logging.getLogger(__name__)


def align(history: HistoryMap, order: Order = Order.ASCENDING) -> AlignedAxis:
    """全ての国の日付キーを統合した軸を作る.

    同じ国で同じ日付キーのレコードが複数ある場合は日時が最も新しいものを残す。
    日時が不明なレコードは軸に含めない。

    Args:
        history: 期間フィルタ適用済みの HistoryMap
        order: Order.ASCENDING (グラフ) / Order.DESCENDING (エクスポート)
    """
    lookups: dict[str, dict[str, RankingRecord]] = {}
    dates: set[str] = set()

    for code, records in history.items():
        by_date: dict[str, RankingRecord] = {}
        for record in records:
            if record.published_at is None:
                logger.warning(
                    "%s: 日時不明のレコードを軸から除外 (PubDate=%r)", code, record.pub_date
                )
                continue
            key = date_key(record.published_at)
            kept = by_date.get(key)
            if kept is None or record.published_at > kept.published_at:
                by_date[key] = record
        lookups[code] = by_date
        dates.update(by_date)

    return AlignedAxis(
        dates=sorted(dates, reverse=order is Order.DESCENDING),
        order=order,
        lookups=lookups,
    )
