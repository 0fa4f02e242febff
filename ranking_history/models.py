"""データモデル定義."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


@dataclass(frozen=True)
class RankingRecord:
    """ある国の1回分のランキング発表を表す."""

    entity_code: str  # 国コード (例: USA)
    published_at: datetime | None  # UTC。パース不能な場合は None
    rank: int  # 1始まり
    points: float
    display_name: str | None = None  # 国名 (例: United States)
    pub_date: str = ""  # API が返した元の日時文字列


# 国コード -> その国のレコード一覧（順不同）
HistoryMap = dict[str, list[RankingRecord]]


@dataclass(frozen=True)
class RankingSnapshot:
    """国ごとの最新順位と直前の順位."""

    entity_code: str
    current: RankingRecord
    previous: RankingRecord
    gender: str = ""  # "Men" or "Women"

    @property
    def display_name(self) -> str:
        return self.current.display_name or self.entity_code

    @property
    def rank_change(self) -> int:
        """順位の変動。正の値は上昇."""
        return self.previous.rank - self.current.rank

    @property
    def trend(self) -> str:
        if self.rank_change > 0:
            return "up"
        if self.rank_change < 0:
            return "down"
        return "same"


def sorted_by_rank(snapshots: list[RankingSnapshot]) -> list[RankingSnapshot]:
    """表示用に現在順位の昇順で並べ替える."""
    return sorted(snapshots, key=lambda s: (s.current.rank, s.entity_code))


@dataclass(frozen=True)
class AllTime:
    """全期間."""


@dataclass(frozen=True)
class RelativeYears:
    """現在から n 年前まで."""

    years: int


@dataclass(frozen=True)
class CustomYears:
    """start 年〜end 年（両端含む）."""

    start: int
    end: int


TimeRange = AllTime | RelativeYears | CustomYears


class Order(Enum):
    """日付軸の並び順."""

    ASCENDING = "asc"  # グラフ用
    DESCENDING = "desc"  # エクスポート用


@dataclass
class AlignedAxis:
    """全対象国の日付を統合した軸と、国ごとの 日付キー -> レコード 対応表."""

    dates: list[str]
    order: Order
    lookups: dict[str, dict[str, RankingRecord]] = field(default_factory=dict)

    def get(self, entity_code: str, date_key: str) -> RankingRecord | None:
        return self.lookups.get(entity_code, {}).get(date_key)

    def display_name(self, entity_code: str) -> str | None:
        """その国のレコードに含まれる国名を返す（最新のものを優先）."""
        records = self.lookups.get(entity_code, {})
        for key in sorted(records, reverse=True):
            if records[key].display_name:
                return records[key].display_name
        return None


@dataclass
class ChartSeries:
    """グラフ1系列."""

    entity_code: str
    label: str
    values: list[int | None]  # None = 欠測（線を途切れさせる）
    color: str


@dataclass
class ChartData:
    """グラフ描画に渡すデータ."""

    labels: list[str]
    series: list[ChartSeries]

    def to_dict(self) -> dict:
        """Chart.js の data 形式に変換する."""
        return {
            "labels": list(self.labels),
            "datasets": [
                {
                    "label": s.label,
                    "data": list(s.values),
                    "borderColor": s.color,
                    "backgroundColor": s.color,
                    "spanGaps": False,
                }
                for s in self.series
            ],
        }
