"""グラフ用データの組み立て."""

from __future__ import annotations

import colorsys
import logging
from collections.abc import Sequence

from ranking_history.config import COLORS, HUE_SHIFT_DEGREES
from ranking_history.models import AlignedAxis, ChartData, ChartSeries, Order

logger = logging.getLogger(__name__)


def series_color(index: int, palette: Sequence[str] = COLORS) -> str:
    """選択順 index に対応する色を返す.

    パレットを一周するたびに色相を HUE_SHIFT_DEGREES 度ずつ回転させる。
    """
    base = palette[index % len(palette)]
    wraps = index // len(palette)
    if wraps == 0:
        return base
    return _rotate_hue(base, wraps * HUE_SHIFT_DEGREES)


def _rotate_hue(hex_color: str, degrees: int) -> str:
    r, g, b = (int(hex_color[i:i + 2], 16) / 255 for i in (1, 3, 5))
    h, l, s = colorsys.rgb_to_hls(r, g, b)
    h = (h + degrees / 360) % 1.0
    r, g, b = colorsys.hls_to_rgb(h, l, s)
    return "#{:02x}{:02x}{:02x}".format(*(round(c * 255) for c in (r, g, b)))


def series_label(entity_code: str, display_name: str | None) -> str:
    """凡例の表示名 例: "United States (USA)"."""
    return f"{display_name or entity_code} ({entity_code})"


def build_chart_data(axis: AlignedAxis, entities: Sequence[str]) -> ChartData:
    """昇順の日付軸から国ごとの順位系列を作る.

    データのない日付は None（補間しない）。
    """
    if axis.order is not Order.ASCENDING:
        raise ValueError("chart data requires an ascending axis")

    series: list[ChartSeries] = []
    for index, code in enumerate(entities):
        values: list[int | None] = []
        for key in axis.dates:
            record = axis.get(code, key)
            values.append(record.rank if record is not None else None)

        series.append(ChartSeries(
            entity_code=code,
            label=series_label(code, axis.display_name(code)),
            values=values,
            color=series_color(index),
        ))

    logger.debug("グラフデータ: %d 日付, %d 系列", len(axis.dates), len(series))
    return ChartData(labels=list(axis.dates), series=series)


class ChartSlot:
    """描画ハンドルの保持者.

    新しいハンドルを入れる前に古いハンドルの destroy() を呼ぶ。
    """

    def __init__(self):
        self._handle = None

    @property
    def handle(self):
        return self._handle

    def replace(self, handle) -> None:
        self.clear()
        self._handle = handle

    def clear(self) -> None:
        handle, self._handle = self._handle, None
        if handle is not None:
            handle.destroy()
