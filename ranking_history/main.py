"""ランキング履歴取得 — メインエントリーポイント.

処理フロー:
  1. 指定された国コードの履歴を並行取得
  2. 最新順位（前回比）をログ出力
  3. 期間フィルタを適用してグラフ用データを作成
  4. CSV / JSON をエクスポート
"""

from __future__ import annotations

import argparse
import logging
import sys
import time
from datetime import datetime
from pathlib import Path

from ranking_history.config import (
    DEFAULT_FOOTBALL_TYPE,
    DEFAULT_GENDER,
    DEFAULT_RANGE,
    EXPORT_DIR,
    FOOTBALL_TYPES,
    GENDERS,
    LOG_DIR,
    LOG_LEVEL,
    RANGE_CHOICES,
)
from ranking_history.dates import utc_now
from ranking_history.exporter import dump_json, export_filename, export_mime, write_export
from ranking_history.models import sorted_by_rank
from ranking_history.session import RankingSession
from ranking_history.timerange import parse_time_range

_TREND_MARKS = {"up": "▲", "down": "▼", "same": "−"}


def setup_logging() -> None:
    """ロギングの初期設定."""
    log_file = LOG_DIR / f"ranking_history_{datetime.now().strftime('%Y%m%d')}.log"
    logging.basicConfig(
        level=getattr(logging, LOG_LEVEL, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        handlers=[
            logging.StreamHandler(sys.stdout),
            logging.FileHandler(log_file, encoding="utf-8"),
        ],
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ranking-history",
        description="複数国のランキング履歴を取得して比較・エクスポートする",
    )
    parser.add_argument("codes", nargs="*", help="国コード (例: USA BRA)")
    parser.add_argument("--gender", choices=sorted(GENDERS), default=DEFAULT_GENDER)
    parser.add_argument("--football-type", choices=FOOTBALL_TYPES, default=DEFAULT_FOOTBALL_TYPE)
    parser.add_argument("--range", dest="time_range", choices=RANGE_CHOICES, default=DEFAULT_RANGE)
    parser.add_argument("--start-year", type=int)
    parser.add_argument("--end-year", type=int)
    parser.add_argument("--out-dir", default=str(EXPORT_DIR))
    parser.add_argument("--format", dest="fmt", choices=("csv", "json", "both"), default="both")
    return parser


def run(argv: list[str] | None = None) -> int:
    """メイン処理. 終了コードを返す."""
    args = build_parser().parse_args(argv)
    setup_logging()
    logger = logging.getLogger(__name__)

    if not args.codes:
        logger.warning("国コードが指定されていません。終了します。")
        return 0

    logger.info("=== ランキング履歴取得 開始 ===")
    start_time = time.time()

    now = utc_now()
    session = RankingSession(
        gender=args.gender,
        football_type=args.football_type,
        time_range=parse_time_range(args.time_range, args.start_year, args.end_year, now=now),
    )
    session.select(args.codes)

    # 1. 取得
    session.fetch()
    if not session.history:
        logger.error("全ての国で取得に失敗しました: %s", ", ".join(session.failures))
        return 1

    for code, reason in session.failures.items():
        logger.warning("データなし: %s (%s)", code, reason)

    # 2. 最新順位
    for snap in sorted_by_rank(session.snapshots):
        logger.info(
            "  #%d %s (%s, %s) %s%d  %.2f pts",
            snap.current.rank, snap.display_name, snap.gender, snap.entity_code,
            _TREND_MARKS[snap.trend], abs(snap.rank_change), snap.current.points,
        )

    # 3. グラフ用データ
    chart = session.chart_data(now)
    logger.info(
        "グラフデータ: %d 日付, 系列=%s",
        len(chart.labels), ", ".join(s.label for s in chart.series),
    )

    # 4. エクスポート
    out_dir = Path(args.out_dir)
    today = now.date()
    if args.fmt in ("csv", "both"):
        write_export(session.export_csv(), out_dir, export_filename("csv", today), export_mime("csv"))
    if args.fmt in ("json", "both"):
        write_export(
            dump_json(session.export_json()) + "\n",
            out_dir, export_filename("json", today), export_mime("json"),
        )

    elapsed = time.time() - start_time
    logger.info("=== ランキング履歴取得 完了 ===")
    logger.info("成功: %d 件, 失敗: %d 件, 所要時間: %.1f 秒",
                len(session.history), len(session.failures), elapsed)
    return 0


if __name__ == "__main__":
    sys.exit(run())
