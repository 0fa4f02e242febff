"""ランキング履歴 API の取得モジュール.

1回のリクエストで1か国分の全履歴を取得する。
レスポンス形式:
  {"rankings": [{"IdCountry", "TeamName": [{"Description"}], "Rank", "TotalPoints", "PubDate"}, ...]}
"""

from __future__ import annotations

import logging

import requests

from ranking_history.config import (
    DEFAULT_FOOTBALL_TYPE,
    DEFAULT_GENDER,
    RANKING_API_LOCALE,
    RANKING_API_URL,
    REQUEST_TIMEOUT,
    USER_AGENT,
)
from ranking_history.dates import parse_timestamp
from ranking_history.models import RankingRecord

logger = logging.getLogger(__name__)


class RetrievalError(Exception):
    """1か国分の履歴取得に失敗した."""

    def __init__(self, entity_code: str, reason: str):
        super().__init__(f"{entity_code}: {reason}")
        self.entity_code = entity_code
        self.reason = reason


class EmptyHistoryError(RetrievalError):
    """取得には成功したが有効なレコードが0件."""

    def __init__(self, entity_code: str):
        super().__init__(entity_code, "no ranking records")


def fetch_history(
    entity_code: str,
    gender: str = DEFAULT_GENDER,
    football_type: str = DEFAULT_FOOTBALL_TYPE,
) -> list[RankingRecord]:
    """指定国のランキング履歴を取得する.

    Args:
        entity_code: 国コード (例: "USA")
        gender: "1" (男子) or "2" (女子)
        football_type: "football", "futsal", "beach"

    Returns:
        RankingRecord のリスト（順不同）

    Raises:
        RetrievalError: 通信失敗・HTTP エラー・不正なレスポンス
        EmptyHistoryError: レコードが0件
    """
    params = {
        "gender": gender,
        "countryCode": entity_code,
        "footballType": football_type,
        "locale": RANKING_API_LOCALE,
    }
    headers = {
        "User-Agent": USER_AGENT,
        "Accept": "application/json",
    }

    logger.info("取得中: %s (gender=%s, type=%s)", entity_code, gender, football_type)
    try:
        resp = requests.get(RANKING_API_URL, params=params, headers=headers, timeout=REQUEST_TIMEOUT)
        resp.raise_for_status()
        payload = resp.json()
    except requests.RequestException as e:
        raise RetrievalError(entity_code, str(e)) from e
    except ValueError as e:
        # JSON デコード失敗
        raise RetrievalError(entity_code, f"invalid JSON: {e}") from e

    records = parse_history(payload, entity_code)
    if not records:
        raise EmptyHistoryError(entity_code)
    return records


def parse_history(payload, entity_code: str) -> list[RankingRecord]:
    """API レスポンスから RankingRecord のリストを組み立てる.

    rank / points が不正なレコードは警告を出して読み飛ばす。
    日時がパースできないレコードは published_at=None として残す。

    Raises:
        RetrievalError: rankings 配列がない
    """
    rankings = payload.get("rankings") if isinstance(payload, dict) else None
    if not isinstance(rankings, list):
        raise RetrievalError(entity_code, "malformed payload: 'rankings' list missing")

    records: list[RankingRecord] = []
    for item in rankings:
        record = _parse_record(item, entity_code)
        if record is not None:
            records.append(record)

    skipped = len(rankings) - len(records)
    if skipped:
        logger.warning("%s: 不正なレコードを %d 件スキップ", entity_code, skipped)
    return records


def _parse_record(item, entity_code: str) -> RankingRecord | None:
    """1件分の履歴をパースする. 不正な場合は None."""
    if not isinstance(item, dict):
        return None

    rank = item.get("Rank")
    points = item.get("TotalPoints")
    if isinstance(rank, bool) or not isinstance(rank, int) or rank < 1:
        return None
    if isinstance(points, bool) or not isinstance(points, (int, float)) or points < 0:
        return None

    pub_date = item.get("PubDate") or ""
    published_at = parse_timestamp(pub_date)
    if published_at is None:
        logger.warning("%s: 日時不明のレコード (PubDate=%r)", entity_code, pub_date)

    return RankingRecord(
        entity_code=entity_code,
        published_at=published_at,
        rank=rank,
        points=float(points),
        display_name=_team_name(item),
        pub_date=str(pub_date),
    )


def _team_name(item: dict) -> str | None:
    """TeamName[0].Description を安全に取得する."""
    names = item.get("TeamName")
    if not isinstance(names, list):
        return None
    for entry in names:
        if isinstance(entry, dict) and entry.get("Description"):
            return entry["Description"]
    return None
