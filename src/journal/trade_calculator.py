# src/journal/trade_calculator.py
"""Per-trade calculator deriving every automatic field of a trade."""
import logging

from src.config.settings import AppSettings, PairConfig
from src.config.thresholds import FALLBACK_PAIR, PRICE_MATCH_TOLERANCE_PIPS, ROUND_DIGITS
from src.journal.models import (
    AutoCalculated,
    BreakevenType,
    Direction,
    Journal,
    Outcome,
    Strategy,
    Trade,
    TradeResult,
    TradeStatus,
)
from src.journal.trade_helpers import (
    format_holding_time,
    ipda_zone,
    resolve_session,
    signed_price_move,
)
from src.scoring.discipline_rules import ScoringContext
from src.scoring.discipline_scorer import DisciplineScorer
from src.scoring.tiltmeter import TiltmeterCalculator
from src.scoring.trade_xp import calculate_trade_xp

logger = logging.getLogger(__name__)


def _round(value: float) -> float:
    return round(value, ROUND_DIGITS)


class TradeCalculator:
    """Derives a trade's automatic fields from its user-entered values.

    The calculation is a pure function of the trade, its journal and the
    settings the calculator was built with: calling it twice with the same
    inputs gives identical results.

    Attributes:
        settings: Application settings (pair table, keyword and field impacts).
    """

    def __init__(
        self,
        settings: AppSettings,
        scorer: DisciplineScorer | None = None,
    ):
        """Initialize the calculator.

        Args:
            settings: Application settings to calculate with.
            scorer: Discipline scorer. Defaults to the full rule table.
        """
        self._settings = settings
        self._scorer = scorer or DisciplineScorer()
        self._tiltmeter = TiltmeterCalculator(settings)

    @property
    def settings(self) -> AppSettings:
        return self._settings

    def resolve_pair(self, symbol: str) -> PairConfig:
        """Return the pair's configuration, or the fallback configuration.

        Unknown pairs and pairs with a non-positive pip size or pip value use
        the "Other" entry.
        """
        pair = self._settings.pairs_config.get(symbol)
        if pair is not None and pair.is_usable:
            return pair

        if pair is None:
            logger.warning(f"Unknown pair {symbol}, using '{FALLBACK_PAIR}' configuration")
        else:
            logger.warning(
                f"Pair {symbol} has pip_size={pair.pip_size} pip_value={pair.pip_value}, "
                f"using '{FALLBACK_PAIR}' configuration"
            )
        return self._settings.pairs_config[FALLBACK_PAIR]

    def calculate(self, trade: Trade, journal: Journal) -> AutoCalculated:
        """Calculate the automatic fields of a trade.

        Args:
            trade: Trade with its user-entered fields.
            journal: Journal providing capital, plan, strategies and other trades.

        Returns:
            AutoCalculated with every derived field.
        """
        pair = self.resolve_pair(trade.pair)
        is_open = trade.is_open

        risk_pips = (
            abs(trade.entry_price - trade.stop_loss) / pair.pip_size
            if trade.stop_loss > 0
            else 0.0
        )
        risk_amount = risk_pips * trade.lot_size * pair.pip_value
        reward_pips = (
            abs(trade.take_profit - trade.entry_price) / pair.pip_size
            if trade.take_profit > 0
            else 0.0
        )
        rr = reward_pips / risk_pips if risk_pips > 0 else 0.0

        commission_cost = trade.commission
        swap_cost = trade.swap
        spread_cost = pair.spread * pair.pip_value * trade.lot_size

        if is_open:
            status = TradeStatus.OPEN
            result = TradeResult.RUNNING
            outcome = Outcome.NEUTRAL
            pips = pl = r_multiple = duration_minutes = 0.0
            holding_time = "Open"
        else:
            status = TradeStatus.CLOSED
            gross_pl = self._gross_pl(trade, pair)
            lot_value = trade.lot_size * pair.pip_value
            pips = gross_pl / lot_value if lot_value > 0 else 0.0

            extra_spread_cost = trade.extra_spread * pair.pip_value * trade.lot_size
            pl = gross_pl - commission_cost - swap_cost - extra_spread_cost
            r_multiple = pl / risk_amount if risk_amount > 0 else 0.0

            result = self._result(trade, pair)
            outcome = self._outcome(pl)

            duration_minutes = max(
                0.0, (trade.close_time - trade.open_time).total_seconds() / 60
            )
            holding_time = format_holding_time(duration_minutes)

        capital = journal.capital
        risk_percent = risk_amount / capital * 100 if capital > 0 else 0.0
        gain_percent = pl / capital * 100 if capital > 0 else 0.0

        score = self._scorer.compute_score(
            ScoringContext(
                trade=trade,
                journal=journal,
                settings=self._settings,
                result=result,
                outcome=outcome,
                risk_amount=risk_amount,
                rr=rr,
            )
        )
        tiltmeter = self._tiltmeter.calculate(
            trade, score=score.value, r_multiple=r_multiple, outcome=outcome, pl=pl
        )
        xp = calculate_trade_xp(
            outcome, score=score.value, rr=rr, has_entry_reasons=bool(trade.entry_reasons)
        )

        return AutoCalculated(
            status=status,
            result=result,
            outcome=outcome,
            pips=_round(pips),
            pl=_round(pl),
            r_multiple=_round(r_multiple),
            rr=_round(rr),
            risk_amount=_round(risk_amount),
            risk_percent=_round(risk_percent),
            gain_percent=_round(gain_percent),
            holding_time=holding_time,
            duration_minutes=_round(duration_minutes),
            session=resolve_session(trade.open_time, journal.plan),
            ipda_zone=ipda_zone(trade.open_time, journal.plan.timezone),
            news_impact=self._news_impact(trade),
            mfe_pips=_round(self._excursion_pips(trade.mfe, trade, pair)),
            mae_pips=_round(self._excursion_pips(trade.mae, trade, pair)),
            spread_cost=_round(spread_cost),
            commission_cost=_round(commission_cost),
            swap_cost=_round(swap_cost),
            matched_setups=self._matched_setups(trade, journal.find_strategy(trade.strategy)),
            score=score,
            tiltmeter=tiltmeter,
            xp=xp,
        )

    def _gross_pl(self, trade: Trade, pair: PairConfig) -> float:
        """P/L before costs, realising partial closes at their own prices."""
        gross = 0.0
        remaining = trade.lot_size
        for partial in trade.partials:
            move = signed_price_move(trade.direction, trade.entry_price, partial.price)
            gross += move / pair.pip_size * partial.lot_size * pair.pip_value
            remaining -= partial.lot_size

        if remaining > 0:
            move = signed_price_move(trade.direction, trade.entry_price, trade.closing_price)
            gross += move / pair.pip_size * remaining * pair.pip_value
        return gross

    def _result(self, trade: Trade, pair: PairConfig) -> TradeResult:
        tolerance = pair.pip_size * PRICE_MATCH_TOLERANCE_PIPS
        close = trade.closing_price

        if (
            trade.breakeven != BreakevenType.NONE
            and abs(close - trade.entry_price) < tolerance
        ):
            return TradeResult.BE
        if trade.take_profit > 0 and abs(close - trade.take_profit) < tolerance:
            return TradeResult.TP
        if trade.stop_loss > 0 and abs(close - trade.stop_loss) < tolerance:
            # A stop moved to or through entry protects profit, it is not a stop-out
            if trade.direction == Direction.BUY:
                safe_stop = trade.stop_loss >= trade.entry_price
            else:
                safe_stop = trade.stop_loss <= trade.entry_price
            return TradeResult.STOP if safe_stop else TradeResult.SL
        return TradeResult.STOP

    @staticmethod
    def _outcome(pl: float) -> Outcome:
        if pl > 0:
            return Outcome.WIN
        if pl < 0:
            return Outcome.LOSS
        return Outcome.NEUTRAL

    @staticmethod
    def _news_impact(trade: Trade) -> str:
        impacts = [e.impact for e in trade.news_events if e.impact is not None]
        if not impacts:
            return "N/A"
        return max(impacts, key=lambda impact: impact.rank).value

    @staticmethod
    def _excursion_pips(price: float | None, trade: Trade, pair: PairConfig) -> float:
        if not price or price <= 0:
            return 0.0
        return abs(price - trade.entry_price) / pair.pip_size

    @staticmethod
    def _matched_setups(trade: Trade, strategy: Strategy | None) -> list[str]:
        """Names of the strategy's setups fully present in the trade's analysis."""
        if strategy is None or not trade.analysis_selections:
            return []

        matched = []
        for setup in strategy.setups:
            if not setup.rules:
                continue
            is_match = all(
                all(
                    set(rule_ids)
                    <= set(
                        trade.analysis_selections.get(combination.timeframe, {}).get(
                            sub_category_id, []
                        )
                    )
                    for sub_category_id, rule_ids in combination.selected_rules.items()
                )
                and combination.timeframe in trade.analysis_selections
                for combination in setup.rules
            )
            if is_match:
                matched.append(setup.name)
        return matched
