# src/journal/codec.py
"""Conversion of plain dictionaries (e.g. parsed JSON) into journal models."""
from datetime import datetime

from src.journal.models import (
    BreakevenType,
    Direction,
    Journal,
    JournalType,
    NewsEvent,
    NewsImpact,
    PartialClose,
    RuleCombination,
    Sentiments,
    Setup,
    Strategy,
    Trade,
)
from src.journal.settings import JournalRules, TradingPlan


def _datetime(value: str | None) -> datetime | None:
    return datetime.fromisoformat(value) if value else None


def _rule_combinations(items: list[dict]) -> list[RuleCombination]:
    return [
        RuleCombination(
            timeframe=item["timeframe"],
            selected_rules=item.get("selected_rules", {}),
        )
        for item in items
    ]


def dict_to_trade(data: dict) -> Trade:
    """Convert a dictionary to a Trade. Any `auto` block is ignored."""
    sentiments = data.get("sentiments", {})
    return Trade(
        id=data["id"],
        pair=data["pair"],
        direction=Direction(data["direction"]),
        lot_size=data["lot_size"],
        entry_price=data["entry_price"],
        open_time=datetime.fromisoformat(data["open_time"]),
        close_time=_datetime(data.get("close_time")),
        closing_price=data.get("closing_price"),
        stop_loss=data.get("stop_loss") or 0.0,
        take_profit=data.get("take_profit") or 0.0,
        partials=[
            PartialClose(lot_size=p["lot_size"], price=p["price"])
            for p in data.get("partials", [])
        ],
        breakeven=BreakevenType(data.get("breakeven", BreakevenType.NONE.value)),
        commission=data.get("commission", 0.0),
        swap=data.get("swap", 0.0),
        extra_spread=data.get("extra_spread", 0.0),
        strategy=data.get("strategy"),
        tag=data.get("tag"),
        entry_reasons=data.get("entry_reasons", []),
        selected_rule_ids=data.get("selected_rule_ids", []),
        analysis_selections=data.get("analysis_selections", {}),
        custom_stats=data.get("custom_stats", {}),
        news_events=[
            NewsEvent(
                name=event["name"],
                impact=NewsImpact(event["impact"]) if event.get("impact") else None,
            )
            for event in data.get("news_events", [])
        ],
        sentiments=Sentiments(
            before=sentiments.get("before", []),
            during=sentiments.get("during", []),
            after=sentiments.get("after", []),
        ),
        notes=data.get("notes", ""),
        lessons_learned=data.get("lessons_learned", ""),
        image_count=data.get("image_count", 0),
        mfe=data.get("mfe"),
        mae=data.get("mae"),
        avg_score_at_time=data.get("avg_score_at_time"),
        avg_pl_at_time=data.get("avg_pl_at_time"),
        is_missing=data.get("is_missing", False),
    )


def dict_to_strategy(data: dict) -> Strategy:
    return Strategy(
        name=data["name"],
        description=data.get("description", ""),
        rules=_rule_combinations(data.get("rules", [])),
        setups=[
            Setup(name=setup["name"], rules=_rule_combinations(setup.get("rules", [])))
            for setup in data.get("setups", [])
        ],
    )


def dict_to_journal(data: dict) -> Journal:
    """Convert a dictionary to a Journal with uncalculated trades.

    Raises:
        pydantic.ValidationError: If the plan or rules are invalid.
    """
    return Journal(
        id=data["id"],
        name=data["name"],
        capital=data["capital"],
        plan=TradingPlan(**data.get("plan", {})),
        rules=JournalRules(**data.get("rules", {})),
        type=JournalType(data.get("type", JournalType.PERSONAL.value)),
        initial_deposit=data.get("initial_deposit"),
        created_at=_datetime(data.get("created_at")),
        strategies=[dict_to_strategy(s) for s in data.get("strategies", [])],
        trades=[dict_to_trade(t) for t in data.get("trades", [])],
    )
