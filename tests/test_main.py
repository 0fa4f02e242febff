"""main モジュールのテスト."""

import json
from datetime import datetime, timezone
from unittest.mock import patch

from ranking_history.main import build_parser, run
from ranking_history.models import RankingRecord
from ranking_history.provider import RetrievalError


def _fetch(code, gender, kind):
    if code == "XXX":
        raise RetrievalError(code, "FIFA API responded with 404")
    return [
        RankingRecord(code, datetime(2024, 1, 1, tzinfo=timezone.utc), 5, 1650.0, code.title()),
        RankingRecord(code, datetime(2024, 6, 1, tzinfo=timezone.utc), 3, 1680.5, code.title()),
    ]


class TestBuildParser:
    """build_parser のテスト."""

    def test_defaults(self):
        args = build_parser().parse_args(["USA"])
        assert args.codes == ["USA"]
        assert args.gender == "1"
        assert args.football_type == "football"
        assert args.time_range == "all"
        assert args.fmt == "both"

    def test_custom_range(self):
        args = build_parser().parse_args(["USA", "--range", "custom", "--start-year", "2010", "--end-year", "2020"])
        assert (args.time_range, args.start_year, args.end_year) == ("custom", 2010, 2020)


class TestRun:
    """run のテスト."""

    @patch("ranking_history.main.setup_logging")
    @patch("ranking_history.session.fetch_history", side_effect=_fetch)
    def test_writes_exports(self, mock_fetch, mock_logging, tmp_path):
        code = run(["USA", "XXX", "--out-dir", str(tmp_path)])

        assert code == 0
        csv_files = list(tmp_path.glob("ranking_history_*.csv"))
        json_files = list(tmp_path.glob("ranking_history_*.json"))
        assert len(csv_files) == 1
        assert len(json_files) == 1
        assert csv_files[0].read_text(encoding="utf-8").splitlines()[0] == "Date,USA Rank,USA Points"
        assert json.loads(json_files[0].read_text(encoding="utf-8"))[0]["USA"]["rank"] == 3

    @patch("ranking_history.main.setup_logging")
    @patch("ranking_history.session.fetch_history", side_effect=_fetch)
    def test_all_failed(self, mock_fetch, mock_logging, tmp_path):
        assert run(["XXX", "--out-dir", str(tmp_path)]) == 1
        assert list(tmp_path.iterdir()) == []

    @patch("ranking_history.main.setup_logging")
    @patch("ranking_history.session.fetch_history")
    def test_no_codes(self, mock_fetch, mock_logging):
        assert run([]) == 0
        mock_fetch.assert_not_called()

    @patch("ranking_history.main.setup_logging")
    @patch("ranking_history.session.fetch_history", side_effect=_fetch)
    def test_csv_only(self, mock_fetch, mock_logging, tmp_path):
        assert run(["USA", "--format", "csv", "--range", "1y", "--out-dir", str(tmp_path)]) == 0
        assert [p.suffix for p in tmp_path.iterdir()] == [".csv"]
