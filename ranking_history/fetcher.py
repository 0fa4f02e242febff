"""複数国の履歴を並行取得するモジュール.

1国1リクエストをスレッドプールで同時に発行し、全タスクの完了を待ってから
スナップショットと HistoryMap を組み立てる。ある国の失敗は他の国に影響しない。
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from datetime import datetime, timezone

from ranking_history.config import (
    DEFAULT_FOOTBALL_TYPE,
    DEFAULT_GENDER,
    FETCH_MAX_WORKERS,
    GENDERS,
)
from ranking_history.models import HistoryMap, RankingRecord, RankingSnapshot
from ranking_history.provider import EmptyHistoryError, RetrievalError, fetch_history

logger = logging.getLogger(__name__)

_OLDEST = datetime.min.replace(tzinfo=timezone.utc)

FetchFunc = Callable[[str, str, str], list[RankingRecord]]


@dataclass
class FetchResult:
    """1回の取得サイクルの結果."""

    snapshots: list[RankingSnapshot] = field(default_factory=list)
    history: HistoryMap = field(default_factory=dict)
    failures: dict[str, str] = field(default_factory=dict)  # 国コード -> 失敗理由


def unique_codes(entity_codes: Iterable[str]) -> list[str]:
    """重複を除き、選択順を保ったコード一覧を返す."""
    seen: set[str] = set()
    codes: list[str] = []
    for code in entity_codes:
        code = code.strip().upper()
        if code and code not in seen:
            seen.add(code)
            codes.append(code)
    return codes


def latest_first(records: Iterable[RankingRecord]) -> list[RankingRecord]:
    """日時の降順に並べる. 日時不明のレコードは末尾."""
    return sorted(
        records,
        key=lambda r: r.published_at or _OLDEST,
        reverse=True,
    )


def build_snapshot(
    entity_code: str, records: list[RankingRecord], gender: str = ""
) -> RankingSnapshot:
    """最新レコードとその直前のレコードからスナップショットを作る.

    直前のレコードがない場合は previous = current。
    """
    ordered = latest_first(records)
    current = ordered[0]
    previous = ordered[1] if len(ordered) > 1 else current
    return RankingSnapshot(
        entity_code=entity_code,
        current=current,
        previous=previous,
        gender=gender,
    )


def fetch_all(
    entity_codes: Iterable[str],
    gender: str = DEFAULT_GENDER,
    football_type: str = DEFAULT_FOOTBALL_TYPE,
    fetch: FetchFunc = fetch_history,
    max_workers: int = FETCH_MAX_WORKERS,
) -> FetchResult:
    """選択された全ての国の履歴を並行取得する.

    失敗した国・0件の国は結果から除外する（ログのみ）。
    結果の並びは完了順ではなく選択順。

    Args:
        entity_codes: 国コード（選択順）
        gender: "1" or "2"
        football_type: "football", "futsal", "beach"
        fetch: 1国分の取得関数（テスト時に差し替え）
        max_workers: 同時リクエスト数の上限。0 なら国数分を全て同時に発行

    Returns:
        FetchResult
    """
    codes = unique_codes(entity_codes)
    result = FetchResult()
    if not codes:
        return result

    fetched: dict[str, list[RankingRecord]] = {}
    workers = min(max_workers, len(codes)) if max_workers > 0 else len(codes)
    with ThreadPoolExecutor(max_workers=workers) as executor:
        future_to_code = {
            executor.submit(fetch, code, gender, football_type): code
            for code in codes
        }

        for future in as_completed(future_to_code):
            code = future_to_code[future]
            try:
                records = future.result()
            except EmptyHistoryError as e:
                logger.warning("履歴なし: %s", code)
                result.failures[code] = e.reason
                continue
            except RetrievalError as e:
                logger.error("取得失敗: %s, error=%s", code, e.reason)
                result.failures[code] = e.reason
                continue
            except Exception as e:
                logger.exception("取得中に予期しないエラー: %s", code)
                result.failures[code] = repr(e)
                continue

            if not records:
                logger.warning("履歴なし: %s", code)
                result.failures[code] = "no ranking records"
                continue
            fetched[code] = records

    gender_label = GENDERS.get(gender, gender)
    for code in codes:
        if code not in fetched:
            continue
        records = fetched[code]
        result.snapshots.append(build_snapshot(code, records, gender_label))
        result.history[code] = list(records)

    logger.info(
        "取得完了: 成功 %d 件, 失敗 %d 件",
        len(result.history), len(result.failures),
    )
    return result
