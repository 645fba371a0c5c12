# src/journal/journal_manager.py
"""Manager holding the application state: settings and journals."""
import logging
from datetime import date, datetime

from src.config.settings import AppSettings
from src.gamification.models import GamificationState
from src.gamification.progression_evaluator import ProgressionEvaluator
from src.journal.external import TradeImageParser
from src.journal.group_analyzer import Criterion, GroupAnalyzer
from src.journal.metrics_calculator import MetricsCalculator
from src.journal.models import (
    GroupMetrics,
    Journal,
    MdScore,
    OverallStats,
    ReportRow,
    Trade,
)
from src.journal.trade_calculator import TradeCalculator

logger = logging.getLogger(__name__)


class JournalManager:
    """Owns the settings and journals and keeps every trade's derived fields current.

    A trade is scored against the other trades of its day and week, so the
    journal is recomputed whenever one of its trades is added, updated or
    removed, and every journal is recomputed when the settings change.
    """

    def __init__(self, settings: AppSettings) -> None:
        """Initialize the manager.

        Args:
            settings: Application settings.
        """
        self._journals: dict[str, Journal] = {}
        self._build_components(settings)

    def _build_components(self, settings: AppSettings) -> None:
        self._settings = settings
        self._metrics_calculator = MetricsCalculator()
        self._calculator = TradeCalculator(settings)
        self._group_analyzer = GroupAnalyzer(settings, self._metrics_calculator)
        self._evaluator = ProgressionEvaluator(
            settings, metrics_calculator=self._metrics_calculator
        )

    @property
    def settings(self) -> AppSettings:
        return self._settings

    @property
    def journals(self) -> list[Journal]:
        return list(self._journals.values())

    def add_journal(self, journal: Journal) -> Journal:
        """Register a journal and calculate all of its trades.

        Raises:
            ValueError: If a journal with the same id already exists.
        """
        if journal.id in self._journals:
            raise ValueError(f"Journal already exists: {journal.id}")
        self._journals[journal.id] = journal
        self.recompute_journal(journal.id)
        logger.info(f"Added journal {journal.id} with {len(journal.trades)} trades")
        return journal

    def get_journal(self, journal_id: str) -> Journal:
        """Return a journal by id.

        Raises:
            ValueError: If the journal does not exist.
        """
        journal = self._journals.get(journal_id)
        if journal is None:
            raise ValueError(f"Unknown journal: {journal_id}")
        return journal

    def get_trade(self, journal_id: str, trade_id: str) -> Trade:
        journal = self.get_journal(journal_id)
        for trade in journal.trades:
            if trade.id == trade_id:
                return trade
        raise ValueError(f"Unknown trade {trade_id} in journal {journal_id}")

    def add_trade(self, journal_id: str, trade: Trade) -> Trade:
        """Add a trade to a journal and recompute the journal.

        Trades opened later the same day or week are scored against the new
        one, so the whole journal is recalculated in chronological order.

        Raises:
            ValueError: If the journal is unknown or the trade id is taken.
        """
        journal = self.get_journal(journal_id)
        if any(t.id == trade.id for t in journal.trades):
            raise ValueError(f"Trade already exists: {trade.id}")

        journal.trades.append(trade)
        self.recompute_journal(journal_id)
        logger.info(
            f"Logged trade {trade.id}: {trade.pair} {trade.direction.value} "
            f"{trade.auto.result.value} P/L={trade.auto.pl} score={trade.auto.score.value}"
        )
        return trade

    def update_trade(self, journal_id: str, trade: Trade) -> Trade:
        """Replace a trade's user-entered fields and recompute the journal.

        The running averages captured when the trade was first logged are kept.

        Raises:
            ValueError: If the journal or trade is unknown.
        """
        journal = self.get_journal(journal_id)
        existing = self.get_trade(journal_id, trade.id)
        index = journal.trades.index(existing)

        trade.avg_score_at_time = existing.avg_score_at_time
        trade.avg_pl_at_time = existing.avg_pl_at_time
        journal.trades[index] = trade
        self.recompute_journal(journal_id)
        logger.debug(f"Updated trade {trade.id} in journal {journal_id}")
        return trade

    def remove_trade(self, journal_id: str, trade_id: str) -> Trade:
        """Remove a trade from a journal and recompute the trades left.

        Raises:
            ValueError: If the journal or trade is unknown.
        """
        journal = self.get_journal(journal_id)
        trade = self.get_trade(journal_id, trade_id)
        journal.trades.remove(trade)
        self.recompute_journal(journal_id)
        logger.info(f"Removed trade {trade_id} from journal {journal_id}")
        return trade

    def add_trade_from_image(
        self,
        journal_id: str,
        parser: TradeImageParser,
        image: bytes,
        trade_id: str,
    ) -> Trade:
        """Parse a chart image into a trade and log it.

        Args:
            journal_id: Journal to add the trade to.
            parser: Image parser implementation.
            image: Raw image bytes.
            trade_id: Id for the new trade.

        Returns:
            The calculated trade.
        """
        draft = parser.parse_trade_from_image(image)
        trade = Trade(
            id=trade_id,
            pair=draft.pair,
            direction=draft.direction,
            lot_size=draft.lot_size,
            entry_price=draft.entry_price,
            open_time=draft.open_time,
            close_time=draft.close_time,
            closing_price=draft.closing_price,
            stop_loss=draft.stop_loss,
            take_profit=draft.take_profit,
            entry_reasons=list(draft.entry_reasons),
            notes=draft.notes,
            image_count=1,
        )
        return self.add_trade(journal_id, trade)

    def update_settings(self, settings: AppSettings) -> None:
        """Replace the settings and recompute every journal."""
        self._build_components(settings)
        for journal_id in self._journals:
            self.recompute_journal(journal_id)
        logger.info(f"Settings updated, recomputed {len(self._journals)} journals")

    def recompute_journal(self, journal_id: str) -> None:
        """Recalculate every trade of a journal in chronological order.

        Trades without running averages get them from the trades before them.
        """
        journal = self.get_journal(journal_id)
        for trade in journal.trades:
            trade.auto = None

        for trade in sorted(journal.trades, key=lambda t: t.open_time):
            if trade.avg_score_at_time is None:
                self._snapshot_averages(journal, trade)
            trade.auto = self._calculator.calculate(trade, journal)
        logger.debug(f"Recomputed {len(journal.trades)} trades of journal {journal_id}")

    @staticmethod
    def _snapshot_averages(journal: Journal, trade: Trade) -> None:
        previous = [
            t
            for t in journal.logged_trades
            if t.auto is not None and t.open_time < trade.open_time
        ]
        if not previous:
            return
        trade.avg_score_at_time = round(
            sum(t.auto.score.value for t in previous) / len(previous), 2
        )
        trade.avg_pl_at_time = round(sum(t.auto.pl for t in previous) / len(previous), 2)

    def get_group_metrics(
        self, journal_id: str, criterion: Criterion | None = None
    ) -> dict[str, GroupMetrics]:
        """Aggregate a journal's trades, overall or per bucket of a criterion."""
        journal = self.get_journal(journal_id)
        if criterion is None:
            return {
                "All": self._metrics_calculator.calculate(journal.trades, journal.capital)
            }
        return self._group_analyzer.analyze(journal.trades, criterion, journal.capital)

    def get_report(self, journal_id: str, criteria: list[Criterion]) -> list[ReportRow]:
        journal = self.get_journal(journal_id)
        return self._group_analyzer.build_report(journal.trades, criteria, journal.capital)

    def get_overall_stats(self, journal_id: str) -> OverallStats:
        return self._metrics_calculator.calculate_overall(self.get_journal(journal_id).trades)

    def get_md_score(self, journal_id: str) -> MdScore:
        return self._metrics_calculator.calculate_md_score(self.get_journal(journal_id))

    def get_gamification(
        self, journal_id: str, as_of: date | None = None
    ) -> GamificationState:
        """Evaluate a journal's gamification state.

        Args:
            journal_id: Journal to evaluate.
            as_of: Evaluation date. Defaults to today.
        """
        as_of = as_of or datetime.now().date()
        return self._evaluator.evaluate(self.get_journal(journal_id), as_of)

