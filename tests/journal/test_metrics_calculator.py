# tests/journal/test_metrics_calculator.py
"""Tests for MetricsCalculator."""
from datetime import datetime, timedelta

import pytest

from src.journal.metrics_calculator import (
    NOT_ENOUGH_TRADES_FEEDBACK,
    MetricsCalculator,
    closed_trades,
    profit_factor,
)
from src.journal.models import (
    AutoCalculated,
    Direction,
    Journal,
    Outcome,
    Trade,
    TradeResult,
    TradeStatus,
)
from src.scoring.models import DisciplineScore, TiltmeterScore

START = datetime(2024, 3, 4, 9, 0)


def make_auto(
    pl: float,
    score: float = 100.0,
    r_multiple: float | None = None,
    duration_minutes: float = 60.0,
    status: TradeStatus = TradeStatus.CLOSED,
) -> AutoCalculated:
    """Create calculated fields for a trade with the given P/L."""
    if pl > 0:
        outcome, result = Outcome.WIN, TradeResult.TP
    elif pl < 0:
        outcome, result = Outcome.LOSS, TradeResult.SL
    else:
        outcome, result = Outcome.NEUTRAL, TradeResult.BE
    return AutoCalculated(
        status=status,
        result=result,
        outcome=outcome,
        pips=pl / 10,
        pl=pl,
        r_multiple=pl / 100 if r_multiple is None else r_multiple,
        rr=2.0,
        risk_amount=100.0,
        risk_percent=1.0,
        gain_percent=pl / 100,
        holding_time="1h",
        duration_minutes=duration_minutes,
        session="New York",
        ipda_zone="New York Killzone",
        news_impact="N/A",
        mfe_pips=0.0,
        mae_pips=0.0,
        spread_cost=0.0,
        commission_cost=0.0,
        swap_cost=0.0,
        matched_setups=[],
        score=DisciplineScore(value=score, remark=""),
        tiltmeter=TiltmeterScore(0.0, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0),
        xp=10,
    )


def make_closed_trade(
    trade_id: str,
    pl: float,
    day: int = 0,
    hour: int = 9,
    lot_size: float = 1.0,
    **auto_kwargs,
) -> Trade:
    """Create a calculated, closed trade opened `day` days after START."""
    open_time = START + timedelta(days=day, hours=hour - START.hour)
    return Trade(
        id=trade_id,
        pair="EURUSD",
        direction=Direction.BUY,
        lot_size=lot_size,
        entry_price=1.1,
        open_time=open_time,
        close_time=open_time + timedelta(hours=1),
        closing_price=1.1 + pl / 100000,
        auto=make_auto(pl, **auto_kwargs),
    )


def make_open_trade(trade_id: str) -> Trade:
    """Create a calculated, still open trade."""
    return Trade(
        id=trade_id,
        pair="EURUSD",
        direction=Direction.BUY,
        lot_size=1.0,
        entry_price=1.1,
        open_time=START,
        auto=make_auto(0.0, status=TradeStatus.OPEN),
    )


class TestProfitFactor:
    """Tests for the finite profit factor."""

    def test_ratio(self):
        """Test ordinary profit factor."""
        assert profit_factor(100.0, 80.0) == pytest.approx(1.25)

    def test_no_losses(self):
        """Test the sentinel replaces infinity."""
        assert profit_factor(100.0, 0.0) == 1000.0

    def test_nothing(self):
        """Test no profit and no loss gives 1."""
        assert profit_factor(0.0, 0.0) == 1.0


class TestCalculate:
    """Tests for MetricsCalculator.calculate."""

    def test_empty_list(self):
        """Test aggregating nothing gives all-zero metrics."""
        metrics = MetricsCalculator().calculate([])

        assert metrics.trades == 0
        assert metrics.win_rate == 0.0
        assert metrics.total_pl == 0.0
        assert metrics.profit_factor == 0.0
        assert metrics.expectancy == 0.0
        assert metrics.max_win_streak == 0
        assert metrics.avg_duration == "<1m"

    def test_three_trade_group(self):
        """Test win rate, gross figures and profit factor of [100, -50, -30]."""
        trades = [
            make_closed_trade("t1", 100.0, day=0),
            make_closed_trade("t2", -50.0, day=1),
            make_closed_trade("t3", -30.0, day=2),
        ]

        metrics = MetricsCalculator().calculate(trades)

        assert metrics.trades == 3
        assert metrics.win_rate == pytest.approx(33.33, abs=0.01)
        assert metrics.gross_profit == pytest.approx(100.0)
        assert metrics.gross_loss == pytest.approx(80.0)
        assert metrics.profit_factor == pytest.approx(1.25)
        assert metrics.total_pl == pytest.approx(20.0)
        assert metrics.avg_pl == pytest.approx(20.0 / 3)
        assert metrics.avg_win == pytest.approx(100.0)
        assert metrics.avg_loss == pytest.approx(40.0)
        assert metrics.expectancy == pytest.approx(100.0 / 3 - 80.0 / 3)

    def test_all_winners_use_sentinel(self):
        """Test profit factor stays finite without losses."""
        trades = [make_closed_trade("t1", 100.0), make_closed_trade("t2", 50.0, day=1)]

        metrics = MetricsCalculator().calculate(trades)

        assert metrics.profit_factor == 1000.0
        assert metrics.win_rate == 100.0

    def test_streaks(self):
        """Test streaks are counted in chronological order."""
        pls = [10.0, 10.0, -5.0, -5.0, -5.0, 10.0]
        trades = [make_closed_trade(f"t{i}", pl, day=i) for i, pl in enumerate(pls)]
        trades.reverse()

        metrics = MetricsCalculator().calculate(trades)

        assert metrics.max_win_streak == 2
        assert metrics.max_loss_streak == 3

    def test_neutral_breaks_streak(self):
        """Test a neutral trade resets both streaks."""
        pls = [10.0, 0.0, 10.0]
        trades = [make_closed_trade(f"t{i}", pl, day=i) for i, pl in enumerate(pls)]

        metrics = MetricsCalculator().calculate(trades)

        assert metrics.max_win_streak == 1

    def test_open_and_missed_trades_excluded(self):
        """Test only closed, logged trades are aggregated."""
        missed = make_closed_trade("t3", 500.0, day=2)
        missed.is_missing = True
        trades = [make_closed_trade("t1", 100.0), make_open_trade("t2"), missed]

        metrics = MetricsCalculator().calculate(trades)

        assert metrics.trades == 1
        assert metrics.total_pl == pytest.approx(100.0)

    def test_averages(self):
        """Test R, lot size, duration and score averages."""
        trades = [
            make_closed_trade("t1", 200.0, lot_size=1.0, score=90.0, duration_minutes=30.0),
            make_closed_trade("t2", -100.0, day=1, lot_size=0.5, score=70.0, duration_minutes=150.0),
        ]

        metrics = MetricsCalculator().calculate(trades, capital=10000.0)

        assert metrics.total_r == pytest.approx(1.0)
        assert metrics.avg_r == pytest.approx(0.5)
        assert metrics.avg_lot_size == pytest.approx(0.75)
        assert metrics.avg_duration_minutes == pytest.approx(90.0)
        assert metrics.avg_duration == "1.5h"
        assert metrics.avg_score == pytest.approx(80.0)
        assert metrics.avg_win_score == pytest.approx(90.0)
        assert metrics.avg_loss_score == pytest.approx(70.0)
        assert metrics.gain_percent == pytest.approx(1.0)

    def test_uncalculated_trade_raises(self):
        """Test aggregating a trade that was never calculated fails loudly."""
        trade = make_closed_trade("t1", 100.0)
        trade.auto = None

        with pytest.raises(ValueError, match="t1"):
            closed_trades([trade])


class TestOverall:
    """Tests for journal-wide statistics."""

    def test_empty(self):
        """Test no trades gives zero stats."""
        stats = MetricsCalculator().calculate_overall([])

        assert stats.total_trades == 0
        assert stats.best_time == "N/A"
        assert stats.current_streak.count == 0

    def test_overall(self):
        """Test counts, days, best hour and streak."""
        trades = [
            make_closed_trade("t1", 100.0, day=0, hour=9, score=80.0),
            make_closed_trade("t2", 300.0, day=1, hour=14, score=100.0),
            make_closed_trade("t3", -50.0, day=2, hour=9, score=60.0),
            make_closed_trade("t4", -20.0, day=4, hour=10, score=90.0),
        ]

        stats = MetricsCalculator().calculate_overall(trades)

        assert stats.total_trades == 4
        assert stats.win_count == 2
        assert stats.loss_count == 2
        assert stats.gross_win_pl == pytest.approx(400.0)
        assert stats.gross_loss_pl == pytest.approx(70.0)
        assert stats.total_pl == pytest.approx(330.0)
        assert stats.day_count == 4
        assert stats.per_day_pl == pytest.approx(82.5)
        assert stats.best_time == "14:00"
        assert stats.highest_score == 100.0
        assert stats.lowest_score == 60.0
        assert stats.avg_score == pytest.approx(82.5)
        assert stats.current_streak.outcome == Outcome.LOSS
        assert stats.current_streak.count == 2

    def test_single_day_counts_as_one(self):
        """Test day count never drops below 1."""
        stats = MetricsCalculator().calculate_overall([make_closed_trade("t1", 10.0)])

        assert stats.day_count == 1
        assert stats.per_day_pl == pytest.approx(10.0)


class TestDrawdown:
    """Tests for maximum drawdown."""

    def test_peak_to_trough(self):
        """Test the deepest fall of cumulative P/L is found."""
        pls = [100.0, -50.0, -80.0, 200.0, -30.0]
        trades = [make_closed_trade(f"t{i}", pl, day=i) for i, pl in enumerate(pls)]

        assert MetricsCalculator().calculate_max_drawdown(trades) == pytest.approx(130.0)

    def test_no_trades(self):
        """Test no drawdown without trades."""
        assert MetricsCalculator().calculate_max_drawdown([]) == 0.0


class TestMdScore:
    """Tests for the composite MD score."""

    def make_journal(self, pls: list[float]) -> Journal:
        trades = [make_closed_trade(f"t{i}", pl, day=i) for i, pl in enumerate(pls)]
        return Journal(id="j1", name="Test", capital=10000.0, trades=trades)

    def test_too_few_trades(self):
        """Test fewer than 5 trades gives zeros and an explanation."""
        md_score = MetricsCalculator().calculate_md_score(self.make_journal([100.0] * 4))

        assert md_score.total_score == 0.0
        assert md_score.feedback == NOT_ENOUGH_TRADES_FEEDBACK

    def test_components(self):
        """Test each component of a five-trade journal."""
        journal = self.make_journal([100.0, -50.0, 100.0, -50.0, 100.0])

        md_score = MetricsCalculator().calculate_md_score(journal)

        assert md_score.profitability_score == pytest.approx(30.0)
        assert md_score.consistency_score == pytest.approx(17.44, abs=0.01)
        assert md_score.risk_management_score == pytest.approx(19.0)
        assert md_score.discipline_score == pytest.approx(20.0)
        assert md_score.total_score == pytest.approx(86.44, abs=0.01)
        assert md_score.feedback.startswith("Exceptional performance")

    def test_weak_discipline_feedback(self):
        """Test a weak discipline component drives the feedback."""
        trades = [
            make_closed_trade(f"t{i}", 100.0, day=i, score=20.0) for i in range(5)
        ]
        journal = Journal(id="j1", name="Test", capital=10000.0, trades=trades)

        md_score = MetricsCalculator().calculate_md_score(journal)

        assert md_score.discipline_score == pytest.approx(4.0)
        assert md_score.feedback.startswith("Discipline is lacking")
