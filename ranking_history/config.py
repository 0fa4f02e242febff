"""設定モジュール — 環境変数・定数定義."""

import os
from pathlib import Path

from dotenv import load_dotenv

# .env はプロジェクトルートに配置
_PROJECT_ROOT = Path(__file__).resolve().parent.parent
load_dotenv(_PROJECT_ROOT / ".env")

# --- ランキング API ---
RANKING_API_URL: str = os.environ.get(
    "RANKING_API_URL", "https://inside.fifa.com/api/rankings/by-country"
)
RANKING_API_LOCALE: str = os.environ.get("RANKING_API_LOCALE", "en")

# --- User-Agent ---
USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/120.0.0.0 Safari/537.36"
)

# --- リクエスト設定 ---
REQUEST_TIMEOUT = float(os.environ.get("REQUEST_TIMEOUT", "15"))  # 秒
FETCH_MAX_WORKERS = int(os.environ.get("FETCH_MAX_WORKERS", "0"))  # 0 = 上限なし（国数分を同時に発行）

# --- 検索条件 ---
GENDERS = {
    "1": "Men",
    "2": "Women",
}
DEFAULT_GENDER = "1"

FOOTBALL_TYPES = ("football", "futsal", "beach")
DEFAULT_FOOTBALL_TYPE = "football"

# --- 期間 ---
RANGE_CHOICES = ("1y", "2y", "3y", "4y", "5y", "6y", "all", "custom")
DEFAULT_RANGE = "all"
CUSTOM_RANGE_SPAN = 10  # custom 指定時の既定の年数

# --- グラフ配色 ---
COLORS = (
    "#3b82f6",  # blue-500
    "#ef4444",  # red-500
    "#10b981",  # emerald-500
    "#f59e0b",  # amber-500
    "#8b5cf6",  # violet-500
    "#ec4899",  # pink-500
    "#06b6d4",  # cyan-500
    "#f97316",  # orange-500
    "#6366f1",  # indigo-500
    "#84cc16",  # lime-500
    "#14b8a6",  # teal-500
    "#d946ef",  # fuchsia-500
    "#e11d48",  # rose-600
    "#22c55e",  # green-500
    "#0ea5e9",  # sky-500
    "#a855f7",  # purple-500
    "#f43f5e",  # rose-500
    "#64748b",  # slate-500
    "#a3e635",  # lime-400
    "#2dd4bf",  # teal-400
    "#fbbf24",  # amber-400
    "#c084fc",  # purple-400
    "#f472b6",  # pink-400
    "#38bdf8",  # sky-400
    "#818cf8",  # indigo-400
    "#fb7185",  # rose-400
    "#34d399",  # emerald-400
    "#a78bfa",  # violet-400
    "#e879f9",  # fuchsia-400
    "#22d3ee",  # cyan-400
)
HUE_SHIFT_DEGREES = 37  # パレット一周ごとの色相回転

# --- エクスポート ---
EXPORT_DIR = Path(os.environ.get("EXPORT_DIR", _PROJECT_ROOT / "exports"))
EXPORT_FILENAME_PREFIX = "ranking_history"

# --- ログ ---
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()
LOG_DIR = Path(os.environ.get("LOG_DIR", _PROJECT_ROOT / "logs"))
LOG_DIR.mkdir(parents=True, exist_ok=True)
