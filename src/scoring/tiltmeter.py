# src/scoring/tiltmeter.py
"""Tiltmeter: how emotionally "on tilt" a trade looks."""
from src.config.settings import AppSettings, KeywordType, OptionCustomField
from src.config.thresholds import (
    TILT_CUSTOM_FIELD_WEIGHT,
    TILT_DEFAULT_AVG_SCORE,
    TILT_NEUTRAL_RESULT,
    TILT_PL_WEIGHT,
    TILT_R_CEILING,
    TILT_R_FLOOR,
    TILT_R_PIVOT,
    TILT_R_WEIGHT,
    TILT_RESULT_WEIGHT,
    TILT_SCORE_WEIGHT,
    TILT_SENTIMENT_WEIGHT,
)
from src.journal.models import Outcome, Trade
from src.scoring.models import TiltmeterScore


def _clamp(value: float, low: float = -1.0, high: float = 1.0) -> float:
    return max(low, min(high, value))


class TiltmeterCalculator:
    """Combines six signals of a trade into a tilt value in [-1, 1].

    Positive values mean the trade was taken in a good state, negative values
    point at tilt. Components and weights:

    - score vs. the running average score (0.30)
    - sentiment balance of the logged tags (0.20)
    - impact balance of the chosen custom-field options (0.20)
    - realised R around a 1.5R pivot (0.10)
    - outcome (0.10)
    - P/L vs. the running average P/L (0.10)
    """

    def __init__(self, settings: AppSettings):
        self._settings = settings

    def calculate(
        self,
        trade: Trade,
        score: float,
        r_multiple: float,
        outcome: Outcome,
        pl: float,
    ) -> TiltmeterScore:
        """Calculate the tiltmeter for a trade.

        Args:
            trade: Trade with sentiments, custom stats and running averages.
            score: Discipline score of the trade.
            r_multiple: Realised R-multiple.
            outcome: Trade outcome.
            pl: Net P/L.

        Returns:
            TiltmeterScore with every component and the weighted total.
        """
        avg_score = trade.avg_score_at_time or TILT_DEFAULT_AVG_SCORE
        score_component = 1.0 if score > avg_score else -1.0

        sentiment_component = self._sentiment_balance(trade)
        custom_field_component = self._custom_field_balance(trade)
        r_component = self._r_component(r_multiple)

        if outcome == Outcome.WIN:
            result_component = 1.0
        elif outcome == Outcome.LOSS:
            result_component = -1.0
        else:
            result_component = TILT_NEUTRAL_RESULT

        avg_pl = trade.avg_pl_at_time or 0.0
        if avg_pl != 0:
            pl_component = _clamp((pl - avg_pl) / abs(avg_pl))
        else:
            pl_component = 1.0 if pl > 0 else (-1.0 if pl < 0 else 0.0)

        total = (
            score_component * TILT_SCORE_WEIGHT
            + sentiment_component * TILT_SENTIMENT_WEIGHT
            + custom_field_component * TILT_CUSTOM_FIELD_WEIGHT
            + r_component * TILT_R_WEIGHT
            + result_component * TILT_RESULT_WEIGHT
            + pl_component * TILT_PL_WEIGHT
        )

        return TiltmeterScore(
            final_tilt=round(_clamp(total), 4),
            score_component=score_component,
            sentiment_component=round(sentiment_component, 4),
            custom_field_component=round(custom_field_component, 4),
            r_component=round(r_component, 4),
            result_component=result_component,
            pl_component=round(pl_component, 4),
        )

    def _sentiment_balance(self, trade: Trade) -> float:
        tags = trade.sentiments.all()
        if not tags:
            return 0.0
        impacts = self._settings.keyword_impacts(KeywordType.SENTIMENT)
        balance = 0
        for tag in tags:
            impact = impacts.get(tag.lower())
            if impact is None:
                continue
            balance += 1 if impact.is_positive else -1
        return balance / len(tags)

    def _custom_field_balance(self, trade: Trade) -> float:
        balance = 0
        counted = 0
        for field_id, raw in trade.custom_stats.items():
            definition = self._settings.find_custom_field(field_id)
            if not isinstance(definition, OptionCustomField):
                continue
            values = raw if isinstance(raw, list) else [raw]
            for value in values:
                option = next((o for o in definition.options if o.value == value), None)
                if option is None:
                    continue
                counted += 1
                if option.impact is not None:
                    balance += 1 if option.impact.is_positive else -1
        return balance / counted if counted else 0.0

    @staticmethod
    def _r_component(r_multiple: float) -> float:
        capped = max(TILT_R_FLOOR, min(TILT_R_CEILING, r_multiple))
        if capped >= TILT_R_PIVOT:
            component = (capped - TILT_R_PIVOT) / (TILT_R_CEILING - TILT_R_PIVOT)
        else:
            component = (capped - TILT_R_PIVOT) / (TILT_R_PIVOT - TILT_R_FLOOR)
        return _clamp(component)
