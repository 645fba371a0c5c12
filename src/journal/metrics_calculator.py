# src/journal/metrics_calculator.py
"""Calculator for trading performance metrics."""
import math
from collections import defaultdict

from src.config.thresholds import (
    MD_SCORE_MIN_TRADES,
    MD_SCORE_PROFIT_FACTOR_CAP,
    PROFIT_FACTOR_NO_TRADES,
    PROFIT_FACTOR_SENTINEL,
)
from src.journal.models import (
    GroupMetrics,
    Journal,
    MdScore,
    Outcome,
    OverallStats,
    Streak,
    Trade,
)
from src.journal.trade_helpers import format_duration, market_clock

NOT_ENOUGH_TRADES_FEEDBACK = "Need at least 5 trades to calculate a meaningful MD Score."


def closed_trades(trades: list[Trade]) -> list[Trade]:
    """Closed, non-missed trades in chronological order.

    Raises:
        ValueError: If a closed trade was never run through the calculator.
    """
    closed = sorted(
        (t for t in trades if not t.is_missing and not t.is_open),
        key=lambda t: t.open_time,
    )
    uncalculated = [t.id for t in closed if t.auto is None]
    if uncalculated:
        raise ValueError(f"Trades not calculated yet: {', '.join(uncalculated)}")
    return closed


def profit_factor(gross_profit: float, gross_loss: float) -> float:
    """Gross profit over gross loss, kept finite when there are no losses."""
    if gross_loss > 0:
        return gross_profit / gross_loss
    if gross_profit > 0:
        return PROFIT_FACTOR_SENTINEL
    return PROFIT_FACTOR_NO_TRADES


def max_streaks(trades: list[Trade]) -> tuple[int, int]:
    """Longest win and loss streaks of chronologically ordered trades."""
    max_win = max_loss = current_win = current_loss = 0
    for trade in trades:
        outcome = trade.computed.outcome
        if outcome == Outcome.WIN:
            current_win += 1
            current_loss = 0
        elif outcome == Outcome.LOSS:
            current_loss += 1
            current_win = 0
        else:
            current_win = current_loss = 0
        max_win = max(max_win, current_win)
        max_loss = max(max_loss, current_loss)
    return max_win, max_loss


def _mean(values: list[float]) -> float:
    return sum(values) / len(values) if values else 0.0


class MetricsCalculator:
    """Calculates trading performance metrics from calculated trades."""

    def calculate(self, trades: list[Trade], capital: float = 0.0) -> GroupMetrics:
        """Calculate group metrics for a bucket of trades.

        Open and missed trades are left out.

        Args:
            trades: Trades to aggregate, in any order.
            capital: Account capital used for the gain percentage.

        Returns:
            GroupMetrics with all calculated values.
        """
        closed = closed_trades(trades)
        if not closed:
            return self._empty_metrics()

        autos = [t.computed for t in closed]
        winners = [a for a in autos if a.outcome == Outcome.WIN]
        losers = [a for a in autos if a.outcome == Outcome.LOSS]

        total = len(autos)
        win_rate = len(winners) / total
        loss_rate = len(losers) / total

        gross_profit = sum(a.pl for a in winners)
        gross_loss = abs(sum(a.pl for a in losers))
        total_pl = gross_profit - gross_loss

        avg_win = gross_profit / len(winners) if winners else 0.0
        avg_loss = gross_loss / len(losers) if losers else 0.0

        total_r = sum(a.r_multiple for a in autos)
        max_win_streak, max_loss_streak = max_streaks(closed)
        avg_duration_minutes = _mean([a.duration_minutes for a in autos])

        return GroupMetrics(
            trades=total,
            win_count=len(winners),
            loss_count=len(losers),
            win_rate=win_rate * 100,
            gross_profit=gross_profit,
            gross_loss=gross_loss,
            total_pl=total_pl,
            gain_percent=total_pl / capital * 100 if capital > 0 else 0.0,
            avg_pl=total_pl / total,
            avg_win=avg_win,
            avg_loss=avg_loss,
            total_r=total_r,
            avg_r=total_r / total,
            profit_factor=profit_factor(gross_profit, gross_loss),
            expectancy=win_rate * avg_win - loss_rate * avg_loss,
            max_win_streak=max_win_streak,
            max_loss_streak=max_loss_streak,
            avg_lot_size=_mean([t.lot_size for t in closed]),
            avg_duration_minutes=avg_duration_minutes,
            avg_duration=format_duration(avg_duration_minutes),
            avg_score=_mean([a.score.value for a in autos]),
            avg_win_score=_mean([a.score.value for a in winners]),
            avg_loss_score=_mean([a.score.value for a in losers]),
        )

    def _empty_metrics(self) -> GroupMetrics:
        """Return metrics with zero values for an empty trade list."""
        return GroupMetrics(
            trades=0,
            win_count=0,
            loss_count=0,
            win_rate=0.0,
            gross_profit=0.0,
            gross_loss=0.0,
            total_pl=0.0,
            gain_percent=0.0,
            avg_pl=0.0,
            avg_win=0.0,
            avg_loss=0.0,
            total_r=0.0,
            avg_r=0.0,
            profit_factor=0.0,
            expectancy=0.0,
            max_win_streak=0,
            max_loss_streak=0,
            avg_lot_size=0.0,
            avg_duration_minutes=0.0,
            avg_duration=format_duration(0.0),
            avg_score=0.0,
            avg_win_score=0.0,
            avg_loss_score=0.0,
        )

    def calculate_overall(self, trades: list[Trade]) -> OverallStats:
        """Calculate journal-wide statistics.

        Args:
            trades: Every trade of the journal.

        Returns:
            OverallStats, zero-valued when there are no closed trades.
        """
        closed = closed_trades(trades)
        if not closed:
            return OverallStats(
                total_trades=0,
                win_count=0,
                loss_count=0,
                gross_win_pl=0.0,
                gross_loss_pl=0.0,
                total_pl=0.0,
                day_count=0,
                avg_pl=0.0,
                per_day_pl=0.0,
                avg_duration=format_duration(0.0),
                avg_trade_distance=format_duration(0.0),
                best_time="N/A",
                avg_score=0.0,
                highest_score=0.0,
                lowest_score=0.0,
                current_streak=Streak(outcome=None, count=0),
                max_win_streak=0,
                max_loss_streak=0,
            )

        autos = [t.computed for t in closed]
        total = len(closed)
        gross_win = sum(a.pl for a in autos if a.pl > 0)
        gross_loss = abs(sum(a.pl for a in autos if a.pl < 0))
        total_pl = gross_win - gross_loss

        first_day = market_clock(closed[0].open_time).date()
        last_day = max(market_clock(t.close_time).date() for t in closed)
        day_count = max(1, (last_day - first_day).days)

        gaps = [
            (current.open_time - previous.close_time).total_seconds() / 60
            for previous, current in zip(closed, closed[1:])
        ]

        pl_by_hour: dict[int, float] = defaultdict(float)
        for trade in closed:
            pl_by_hour[market_clock(trade.open_time).hour] += trade.computed.pl
        best_hour = max(pl_by_hour, key=lambda hour: pl_by_hour[hour])

        scores = [a.score.value for a in autos]
        max_win_streak, max_loss_streak = max_streaks(closed)

        return OverallStats(
            total_trades=total,
            win_count=sum(1 for a in autos if a.outcome == Outcome.WIN),
            loss_count=sum(1 for a in autos if a.outcome == Outcome.LOSS),
            gross_win_pl=gross_win,
            gross_loss_pl=gross_loss,
            total_pl=total_pl,
            day_count=day_count,
            avg_pl=total_pl / total,
            per_day_pl=total_pl / day_count,
            avg_duration=format_duration(_mean([a.duration_minutes for a in autos])),
            avg_trade_distance=format_duration(_mean(gaps)),
            best_time=f"{best_hour:02d}:00",
            avg_score=_mean(scores),
            highest_score=max(scores),
            lowest_score=min(scores),
            current_streak=self._current_streak(closed),
            max_win_streak=max_win_streak,
            max_loss_streak=max_loss_streak,
        )

    @staticmethod
    def _current_streak(trades: list[Trade]) -> Streak:
        last = trades[-1].computed.outcome
        count = 0
        for trade in reversed(trades):
            if trade.computed.outcome != last:
                break
            count += 1
        return Streak(outcome=last, count=count)

    def calculate_max_drawdown(self, trades: list[Trade]) -> float:
        """Calculate the deepest peak-to-trough drop of cumulative P/L.

        Args:
            trades: Trades to walk in chronological order.

        Returns:
            Maximum drawdown in account currency.
        """
        cumulative_pl = 0.0
        peak = 0.0
        max_drawdown = 0.0

        for trade in closed_trades(trades):
            cumulative_pl += trade.computed.pl
            if cumulative_pl > peak:
                peak = cumulative_pl
            drawdown = peak - cumulative_pl
            if drawdown > max_drawdown:
                max_drawdown = drawdown

        return max_drawdown

    def calculate_md_score(self, journal: Journal) -> MdScore:
        """Rate a journal from 0 to 100.

        Profitability (30) from the profit factor, consistency (30) from win
        rate and Sharpe ratio, risk management (20) from drawdown usage and
        discipline (20) from the average discipline score.

        Args:
            journal: Journal whose trades have been calculated.

        Returns:
            MdScore, zero-valued below five closed trades.
        """
        closed = closed_trades(journal.trades)
        if len(closed) < MD_SCORE_MIN_TRADES:
            return MdScore(
                total_score=0.0,
                profitability_score=0.0,
                consistency_score=0.0,
                risk_management_score=0.0,
                discipline_score=0.0,
                feedback=NOT_ENOUGH_TRADES_FEEDBACK,
            )

        returns = [t.computed.pl for t in closed]
        gross_profit = sum(r for r in returns if r > 0)
        gross_loss = abs(sum(r for r in returns if r < 0))
        if gross_loss > 0:
            pf = gross_profit / gross_loss
        else:
            pf = MD_SCORE_PROFIT_FACTOR_CAP if gross_profit > 0 else 0.0
        profitability = min(30.0, max(0.0, pf / MD_SCORE_PROFIT_FACTOR_CAP * 30))

        win_rate = sum(1 for t in closed if t.computed.outcome == Outcome.WIN) / len(closed)
        mean_return = _mean(returns)
        std_dev = math.sqrt(_mean([(r - mean_return) ** 2 for r in returns]))
        sharpe = mean_return / std_dev if std_dev > 0 else 0.0
        consistency = min(30.0, max(0.0, win_rate * 20 + max(0.0, sharpe) * 10))

        limit = journal.rules.max_drawdown.limit(journal.capital)
        drawdown = self.calculate_max_drawdown(closed)
        drawdown_usage = drawdown / limit * 100 if limit > 0 else 0.0
        risk_management = max(0.0, 20 - drawdown_usage / 5)

        discipline = _mean([t.computed.score.value for t in closed]) / 100 * 20

        total = profitability + consistency + risk_management + discipline
        return MdScore(
            total_score=round(total, 2),
            profitability_score=round(profitability, 2),
            consistency_score=round(consistency, 2),
            risk_management_score=round(risk_management, 2),
            discipline_score=round(discipline, 2),
            feedback=self._md_feedback(total, profitability, consistency, risk_management, discipline),
        )

    @staticmethod
    def _md_feedback(
        total: float,
        profitability: float,
        consistency: float,
        risk_management: float,
        discipline: float,
    ) -> str:
        # Weak components override the overall verdict, the last one wins
        if discipline < 10:
            return "Discipline is lacking. Adhere more closely to your trading plan and checklists."
        if risk_management < 10:
            return "Risk management is a concern. Re-evaluate your position sizing and stop loss strategy."
        if consistency < 10:
            return "Consistency needs work. Analyze your win rate and the volatility of your returns."
        if profitability < 10:
            return "Profitability is low. Review your strategy for a better risk/reward profile."
        if total >= 85:
            return "Exceptional performance! You are demonstrating mastery across all key areas."
        if total >= 70:
            return "Very good performance. You have a profitable and consistent approach."
        if total < 50:
            return "Area for improvement. Focus on strengthening your weakest component."
        return "A solid, balanced performance. Keep refining your edge."
