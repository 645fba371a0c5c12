# tests/journal/test_group_analyzer.py
"""Tests for GroupAnalyzer and the bucket helpers."""
from datetime import date, datetime

import pandas as pd
import pytest

from src.config.settings import AppSettings, CustomFieldOption, ListCustomField
from src.journal.group_analyzer import (
    AnalysisCriterion,
    CustomFieldCriterion,
    GroupAnalyzer,
    GroupKey,
    holding_time_bucket,
    lot_size_bucket,
    r_multiple_bucket,
    risk_percent_bucket,
    score_grade,
    week_of_month,
)
from src.journal.models import Direction, Journal, Sentiments, Trade
from src.journal.trade_calculator import TradeCalculator


def make_settings() -> AppSettings:
    return AppSettings(
        custom_fields=[
            ListCustomField(
                id="confluences",
                title="Confluences",
                allow_multiple=True,
                options=[CustomFieldOption(value="FVG"), CustomFieldOption(value="OB")],
            )
        ]
    )


def make_trade(
    trade_id: str,
    pair: str = "EURUSD",
    direction: Direction = Direction.BUY,
    closing_price: float = 1.1050,
    open_time: datetime = datetime(2024, 3, 4, 9, 30),
    **kwargs,
) -> Trade:
    """Create a 1 lot trade entered at 1.1000 with a 50 pip stop."""
    stop_loss = 1.0950 if direction == Direction.BUY else 1.1050
    return Trade(
        id=trade_id,
        pair=pair,
        direction=direction,
        lot_size=1.0,
        entry_price=1.1000,
        open_time=open_time,
        close_time=open_time.replace(hour=open_time.hour + 1),
        closing_price=closing_price,
        stop_loss=stop_loss,
        **kwargs,
    )


def make_journal(trades: list[Trade]) -> Journal:
    """Create a journal and calculate its trades."""
    settings = make_settings()
    journal = Journal(id="j1", name="Test", capital=100000.0, trades=trades)
    calculator = TradeCalculator(settings)
    for trade in journal.trades:
        trade.auto = calculator.calculate(trade, journal)
    return journal


@pytest.fixture
def analyzer() -> GroupAnalyzer:
    return GroupAnalyzer(make_settings())


class TestBuckets:
    """Tests for the bucket helper functions."""

    def test_week_of_month_starts_on_sunday(self):
        """Test weeks roll over on Sundays."""
        assert week_of_month(date(2024, 3, 1)) == 1
        assert week_of_month(date(2024, 3, 2)) == 1
        assert week_of_month(date(2024, 3, 3)) == 2
        assert week_of_month(date(2024, 3, 31)) == 6

    @pytest.mark.parametrize(
        "r_multiple,bucket",
        [(1.4, "1R"), (1.5, "2R"), (-0.4, "0R"), (-1.6, "-2R"), (-7.0, "< -5R"), (12.0, "> 10R")],
    )
    def test_r_multiple_bucket(self, r_multiple, bucket):
        """Test R-multiples round half up into whole-R buckets."""
        assert r_multiple_bucket(r_multiple) == bucket

    def test_score_grade(self):
        """Test grade boundaries."""
        assert score_grade(100.0) == "A+ (90-100)"
        assert score_grade(85.0) == "A (80-89)"
        assert score_grade(49.9) == "F (< 50)"

    def test_lot_size_bucket(self):
        """Test lot size boundaries."""
        assert lot_size_bucket(0.05) == "Micro (<=0.05)"
        assert lot_size_bucket(0.5) == "Small (0.11-0.50)"
        assert lot_size_bucket(2.0) == "Heavy (>1.00)"

    def test_risk_percent_bucket(self):
        """Test risk percent boundaries."""
        assert risk_percent_bucket(0.5) == "0 - 0.5%"
        assert risk_percent_bucket(1.0) == "0.51 - 1%"
        assert risk_percent_bucket(6.0) == "> 5%"

    def test_holding_time_bucket(self):
        """Test holding time boundaries."""
        assert holding_time_bucket(3.0) == "< 5 min"
        assert holding_time_bucket(10.0) == "5-15 min"
        assert holding_time_bucket(60.0) == "30-60 min"
        assert holding_time_bucket(2000.0) == "> 1 day"


class TestGroupBy:
    """Tests for bucketing trades."""

    def test_group_by_pair(self, analyzer):
        """Test trades are bucketed by pair in order of appearance."""
        journal = make_journal(
            [
                make_trade("t1", pair="GBPUSD"),
                make_trade("t2", open_time=datetime(2024, 3, 5, 9, 30)),
                make_trade("t3", pair="GBPUSD", open_time=datetime(2024, 3, 6, 9, 30)),
            ]
        )

        groups = analyzer.group_by(journal.trades, GroupKey.PAIR)

        assert list(groups) == ["GBPUSD", "EURUSD"]
        assert [t.id for t in groups["GBPUSD"]] == ["t1", "t3"]

    def test_calendar_keys(self, analyzer):
        """Test month, weekday, day and hour labels."""
        journal = make_journal([make_trade("t1")])
        trade = journal.trades[0]

        assert analyzer.criterion_values(trade, GroupKey.MONTH) == ["March"]
        assert analyzer.criterion_values(trade, GroupKey.DAY_OF_WEEK) == ["Monday"]
        assert analyzer.criterion_values(trade, GroupKey.DAY_OF_MONTH) == ["4"]
        assert analyzer.criterion_values(trade, GroupKey.HOUR_OF_DAY) == ["9:00"]
        assert analyzer.criterion_values(trade, GroupKey.WEEK_OF_MONTH) == ["Week 2"]

    def test_multi_valued_sentiments(self, analyzer):
        """Test a trade lands in every sentiment bucket it carries."""
        journal = make_journal(
            [
                make_trade("t1", sentiments=Sentiments(before=["Calm"], after=["Happy"])),
                make_trade(
                    "t2",
                    open_time=datetime(2024, 3, 5, 9, 30),
                    sentiments=Sentiments(before=["Calm"]),
                ),
            ]
        )

        groups = analyzer.group_by(journal.trades, GroupKey.SENTIMENT)

        assert len(groups["Calm"]) == 2
        assert len(groups["Happy"]) == 1

    def test_custom_field_multi_select(self, analyzer):
        """Test multi-select custom fields count the trade per value."""
        journal = make_journal(
            [
                make_trade("t1", custom_stats={"confluences": ["FVG", "OB"]}),
                make_trade("t2", open_time=datetime(2024, 3, 5, 9, 30)),
            ]
        )

        groups = analyzer.group_by(journal.trades, CustomFieldCriterion("confluences"))

        assert set(groups) == {"FVG", "OB", "N/A"}
        assert analyzer.criterion_label(CustomFieldCriterion("confluences")) == "Confluences"

    def test_analysis_category(self, analyzer):
        """Test analysis selections are labelled by timeframe."""
        journal = make_journal(
            [make_trade("t1", analysis_selections={"H4": {"bias": ["b_bull"]}})]
        )

        values = analyzer.criterion_values(journal.trades[0], AnalysisCriterion("bias"))

        assert values == ["H4: Bullish"]

    def test_alignment(self, analyzer):
        """Test bias alignment with the trade direction."""
        journal = make_journal(
            [
                make_trade(
                    "t1",
                    analysis_selections={
                        "D1": {"bias": ["b_bull"]},
                        "H1": {"bias": ["b_bear"]},
                    },
                )
            ]
        )

        values = analyzer.criterion_values(journal.trades[0], GroupKey.ALIGNMENT)

        assert values == ["D1: Aligned", "H1: Misaligned"]

    def test_plan_adherence(self, analyzer):
        """Test scores of 80 and above count as compliant."""
        journal = make_journal(
            [
                make_trade("t1"),
                make_trade("t2", closing_price=1.0980, open_time=datetime(2024, 3, 5, 9, 30)),
            ]
        )

        groups = analyzer.group_by(journal.trades, GroupKey.PLAN_ADHERENCE)

        # A manual loss costs 20 points, which still leaves it compliant
        assert [t.id for t in groups["Compliant"]] == ["t1", "t2"]

    def test_open_trades_skipped(self, analyzer):
        """Test open trades are not bucketed."""
        open_trade = make_trade("t2", open_time=datetime(2024, 3, 5, 9, 30))
        open_trade.closing_price = None
        journal = make_journal([make_trade("t1"), open_trade])

        groups = analyzer.group_by(journal.trades, GroupKey.DIRECTION)

        assert [t.id for t in groups["Buy"]] == ["t1"]

    def test_unsupported_criterion(self, analyzer):
        """Test an unknown criterion is rejected."""
        journal = make_journal([make_trade("t1")])

        with pytest.raises(ValueError, match="Unsupported"):
            analyzer.criterion_values(journal.trades[0], "Moon Phase")


class TestAnalyze:
    """Tests for per-bucket metrics and reports."""

    def make_trades(self) -> list[Trade]:
        return make_journal(
            [
                make_trade("t1"),
                make_trade("t2", closing_price=1.0950, open_time=datetime(2024, 3, 5, 9, 30)),
                make_trade(
                    "t3",
                    pair="GBPUSD",
                    direction=Direction.SELL,
                    closing_price=1.0950,
                    open_time=datetime(2024, 3, 6, 9, 30),
                ),
            ]
        ).trades

    def test_analyze(self, analyzer):
        """Test metrics per pair."""
        metrics = analyzer.analyze(self.make_trades(), GroupKey.PAIR)

        assert metrics["EURUSD"].trades == 2
        assert metrics["EURUSD"].win_rate == pytest.approx(50.0)
        assert metrics["EURUSD"].total_pl == pytest.approx(0.0)
        assert metrics["GBPUSD"].total_pl == pytest.approx(500.0)

    def test_nested_report(self, analyzer):
        """Test a two-level report with keys and criteria paths."""
        rows = analyzer.build_report(self.make_trades(), [GroupKey.PAIR, GroupKey.OUTCOME])

        assert [row.label for row in rows] == ["EURUSD", "GBPUSD"]
        eurusd = rows[0]
        assert eurusd.key == "0-EURUSD"
        assert eurusd.metrics.trades == 2
        assert [sub.key for sub in eurusd.sub_rows] == ["1-EURUSD/Win", "1-EURUSD/Loss"]
        assert eurusd.sub_rows[1].criteria == [("Pair", "EURUSD"), ("Outcome", "Loss")]
        assert eurusd.sub_rows[1].sub_rows == []

    def test_report_to_frame(self, analyzer):
        """Test flattening a report into a DataFrame."""
        rows = analyzer.build_report(self.make_trades(), [GroupKey.PAIR, GroupKey.OUTCOME])

        frame = GroupAnalyzer.to_frame(rows)

        assert isinstance(frame, pd.DataFrame)
        assert list(frame["key"]) == [
            "0-EURUSD",
            "1-EURUSD/Win",
            "1-EURUSD/Loss",
            "0-GBPUSD",
            "1-GBPUSD/Win",
        ]
        assert {"Pair", "Outcome", "win_rate", "profit_factor"} <= set(frame.columns)

    def test_empty_report(self, analyzer):
        """Test no trades gives no rows."""
        assert analyzer.build_report([], [GroupKey.PAIR]) == []
        assert GroupAnalyzer.to_frame([]).empty
