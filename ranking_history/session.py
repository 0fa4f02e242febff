"""画面の状態管理（選択・条件・取得結果）.

取得サイクルごとに連番を振り、最新のサイクル以外の結果は破棄する。
"""

from __future__ import annotations

import logging
import threading
from datetime import datetime

from ranking_history.aligner import align
from ranking_history.chart import build_chart_data
from ranking_history.config import DEFAULT_FOOTBALL_TYPE, DEFAULT_GENDER, FETCH_MAX_WORKERS
from ranking_history.dates import utc_now
from ranking_history.exporter import export_csv, export_json
from ranking_history.fetcher import FetchFunc, FetchResult, fetch_all, unique_codes
from ranking_history.models import (
    AllTime,
    ChartData,
    HistoryMap,
    Order,
    RankingSnapshot,
    TimeRange,
)
from ranking_history.provider import fetch_history
from ranking_history.timerange import filter_history_map

logger = logging.getLogger(__name__)


class RankingSession:
    """国の選択状態と直近の取得結果を保持する."""

    def __init__(
        self,
        gender: str = DEFAULT_GENDER,
        football_type: str = DEFAULT_FOOTBALL_TYPE,
        time_range: TimeRange | None = None,
        fetch: FetchFunc | None = None,
        max_workers: int = FETCH_MAX_WORKERS,
    ):
        self.gender = gender
        self.football_type = football_type
        self.time_range: TimeRange = time_range or AllTime()
        self.selected: list[str] = []
        self.history: HistoryMap = {}
        self.snapshots: list[RankingSnapshot] = []
        self.failures: dict[str, str] = {}
        self._fetch = fetch or fetch_history
        self._max_workers = max_workers
        self._cycle = 0
        self._lock = threading.Lock()

    # --- 選択 ---

    def toggle(self, code: str) -> None:
        """選択済みなら外し、未選択なら末尾に追加する."""
        code = code.strip().upper()
        if code in self.selected:
            self.selected.remove(code)
        else:
            self.selected.append(code)

    def select(self, codes) -> None:
        self.selected = unique_codes(codes)

    def clear_selection(self) -> None:
        self.selected = []

    # --- 取得 ---

    def begin_cycle(self) -> int:
        with self._lock:
            self._cycle += 1
            return self._cycle

    def commit(self, cycle_id: int, result: FetchResult) -> bool:
        """最新サイクルの結果なら反映する. 古いサイクルの結果は破棄."""
        with self._lock:
            if cycle_id != self._cycle:
                logger.info("古い取得結果を破棄: cycle=%d (最新=%d)", cycle_id, self._cycle)
                return False
            self.history = result.history
            self.snapshots = result.snapshots
            self.failures = result.failures
            return True

    def fetch(self) -> FetchResult | None:
        """選択中の国の履歴を取得する. 未選択なら何もしない."""
        if not self.selected:
            logger.info("国が選択されていないため取得をスキップ")
            return None

        cycle_id = self.begin_cycle()
        result = fetch_all(
            list(self.selected),
            gender=self.gender,
            football_type=self.football_type,
            fetch=self._fetch,
            max_workers=self._max_workers,
        )
        self.commit(cycle_id, result)
        return result

    # --- 表示・出力 ---

    @property
    def entities(self) -> list[str]:
        """取得に成功した国（選択順）."""
        return list(self.history)

    def chart_data(self, now: datetime | None = None) -> ChartData | None:
        if not self.history:
            return None
        filtered = filter_history_map(self.history, self.time_range, now or utc_now())
        return build_chart_data(align(filtered, Order.ASCENDING), self.entities)

    def export_csv(self) -> str | None:
        if not self.history:
            return None
        return export_csv(align(self.history, Order.DESCENDING), self.entities)

    def export_json(self) -> list[dict] | None:
        if not self.history:
            return None
        return export_json(align(self.history, Order.DESCENDING), self.entities)
