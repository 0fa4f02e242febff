"""session モジュールのユニットテスト."""

import threading
from datetime import datetime, timezone
from unittest.mock import MagicMock

from ranking_history.fetcher import FetchResult
from ranking_history.models import CustomYears, RankingRecord, RelativeYears
from ranking_history.provider import RetrievalError
from ranking_history.session import RankingSession


def _record(code: str, y: int, m: int, rank: int, name: str | None = None) -> RankingRecord:
    return RankingRecord(
        entity_code=code,
        published_at=datetime(y, m, 1, tzinfo=timezone.utc),
        rank=rank,
        points=1000.0 + rank,
        display_name=name,
    )


HISTORIES = {
    "USA": [_record("USA", 2024, 1, 5, "USA"), _record("USA", 2024, 6, 3, "USA")],
    "BRA": [_record("BRA", 2024, 6, 1, "Brazil")],
    "ARG": [_record("ARG", 2022, 12, 3, "Argentina")],
}


def _fetch(code, gender, kind):
    if code not in HISTORIES:
        raise RetrievalError(code, "FIFA API responded with 404")
    return HISTORIES[code]


class TestSelection:
    """選択操作のテスト."""

    def test_toggle(self):
        session = RankingSession(fetch=_fetch)
        session.toggle("usa")
        session.toggle("BRA")
        session.toggle("USA")

        assert session.selected == ["BRA"]

    def test_clear(self):
        session = RankingSession(fetch=_fetch)
        session.select(["USA", "BRA", "USA"])
        assert session.selected == ["USA", "BRA"]

        session.clear_selection()
        assert session.selected == []


class TestFetch:
    """fetch のテスト."""

    def test_no_selection_is_noop(self):
        fetch = MagicMock()
        session = RankingSession(fetch=fetch)

        assert session.fetch() is None
        fetch.assert_not_called()
        assert session.export_csv() is None
        assert session.export_json() is None
        assert session.chart_data() is None

    def test_fetch_replaces_history(self):
        session = RankingSession(fetch=_fetch)
        session.select(["USA", "BRA"])
        session.fetch()
        assert session.entities == ["USA", "BRA"]

        session.select(["ARG", "XXX"])
        session.fetch()
        assert session.entities == ["ARG"]
        assert list(session.failures) == ["XXX"]

    def test_stale_cycle_discarded(self):
        session = RankingSession(fetch=_fetch)
        stale = session.begin_cycle()
        latest = session.begin_cycle()

        newer = FetchResult(history={"BRA": HISTORIES["BRA"]})
        older = FetchResult(history={"USA": HISTORIES["USA"]})

        assert session.commit(latest, newer) is True
        assert session.commit(stale, older) is False
        assert session.entities == ["BRA"]

    def test_slow_superseded_fetch_discarded(self):
        """遅れて完了した古い取得結果が新しい結果を上書きしないこと."""
        release = threading.Event()
        started = threading.Event()

        def fetch(code, gender, kind):
            if code == "USA":
                started.set()
                release.wait(timeout=5)
            return HISTORIES[code]

        session = RankingSession(fetch=fetch)
        session.select(["USA"])
        worker = threading.Thread(target=session.fetch)
        worker.start()
        started.wait(timeout=5)

        session.select(["BRA"])
        session.fetch()
        release.set()
        worker.join(timeout=5)

        assert session.entities == ["BRA"]


class TestViews:
    """グラフ・エクスポートのテスト."""

    def _session(self, time_range=None) -> RankingSession:
        session = RankingSession(fetch=_fetch, time_range=time_range)
        session.select(["USA", "BRA"])
        session.fetch()
        return session

    def test_chart_and_csv_scenario(self):
        session = self._session()

        chart = session.chart_data(datetime(2025, 1, 1, tzinfo=timezone.utc))
        assert chart.labels == ["2024-01-01", "2024-06-01"]
        assert chart.series[1].values == [None, 1]

        assert session.export_csv().splitlines() == [
            "Date,USA Rank,USA Points,BRA Rank,BRA Points",
            "2024-06-01,3,1003,1,1001",
            "2024-01-01,5,1005,,",
        ]

    def test_chart_respects_time_range(self):
        session = self._session(CustomYears(2024, 2024))
        session.time_range = RelativeYears(1)

        chart = session.chart_data(datetime(2025, 3, 1, tzinfo=timezone.utc))
        assert chart.labels == ["2024-06-01"]

    def test_export_ignores_time_range(self):
        session = self._session(RelativeYears(1))
        document = session.export_json()
        assert [entry["date"] for entry in document] == ["2024-06-01", "2024-01-01"]

    def test_snapshots(self):
        session = self._session()
        snap = session.snapshots[0]
        assert snap.entity_code == "USA"
        assert snap.current.rank == 3
        assert snap.previous.rank == 5
        assert snap.gender == "Men"
