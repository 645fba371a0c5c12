# tests/journal/test_codec.py
"""Tests for dictionary to journal conversion."""
import json
from datetime import datetime
from pathlib import Path

import pytest
from pydantic import ValidationError

from src.journal.codec import dict_to_journal, dict_to_strategy, dict_to_trade
from src.journal.models import BreakevenType, Direction, JournalType, NewsImpact

SAMPLE_JOURNAL = Path(__file__).parents[2] / "data" / "journal.json"


def make_trade_dict(**overrides) -> dict:
    data = {
        "id": "t1",
        "pair": "EURUSD",
        "direction": "Buy",
        "lot_size": 0.5,
        "entry_price": 1.1,
        "open_time": "2024-03-04T09:30:00",
    }
    data.update(overrides)
    return data


class TestDictToTrade:
    """Tests for dict_to_trade."""

    def test_minimal_trade(self):
        """Test an open trade with only the required fields."""
        trade = dict_to_trade(make_trade_dict())

        assert trade.id == "t1"
        assert trade.direction == Direction.BUY
        assert trade.open_time == datetime(2024, 3, 4, 9, 30)
        assert trade.close_time is None
        assert trade.stop_loss == 0.0
        assert trade.breakeven == BreakevenType.NONE
        assert trade.is_open
        assert trade.auto is None

    def test_full_trade(self):
        """Test nested partials, news and sentiments."""
        trade = dict_to_trade(
            make_trade_dict(
                direction="Sell",
                close_time="2024-03-04T11:00:00",
                closing_price=1.095,
                stop_loss=None,
                partials=[{"lot_size": 0.2, "price": 1.098}],
                breakeven="Trail SL",
                news_events=[{"name": "CPI", "impact": "High"}, {"name": "Speech"}],
                sentiments={"before": ["Calm"], "after": ["Relieved"]},
                custom_stats={"sleep_hours": 7.5},
            )
        )

        assert trade.direction == Direction.SELL
        assert not trade.is_open
        assert trade.stop_loss == 0.0
        assert trade.partials[0].price == 1.098
        assert trade.breakeven == BreakevenType.TRAIL_SL
        assert trade.news_events[0].impact == NewsImpact.HIGH
        assert trade.news_events[1].impact is None
        assert trade.sentiments.all() == ["Calm", "Relieved"]
        assert trade.custom_stats["sleep_hours"] == 7.5

    def test_auto_block_ignored(self):
        """Test stored derived fields are never trusted."""
        trade = dict_to_trade(make_trade_dict(auto={"pl": 1000}))

        assert trade.auto is None

    def test_invalid_direction(self):
        """Test an unknown direction is rejected."""
        with pytest.raises(ValueError):
            dict_to_trade(make_trade_dict(direction="Long"))

    def test_missing_required_field(self):
        """Test a missing pair is rejected."""
        data = make_trade_dict()
        del data["pair"]

        with pytest.raises(KeyError):
            dict_to_trade(data)


class TestDictToJournal:
    """Tests for dict_to_journal."""

    def test_defaults(self):
        """Test a journal with only id, name and capital."""
        journal = dict_to_journal({"id": "j1", "name": "Test", "capital": 5000})

        assert journal.type == JournalType.PERSONAL
        assert journal.plan.risk_per_trade == 1.0
        assert journal.rules.max_drawdown.value == 10.0
        assert journal.trades == []

    def test_strategy_rule_ids(self):
        """Test strategies keep every rule combination."""
        strategy = dict_to_strategy(
            {
                "name": "Breakout",
                "rules": [
                    {"timeframe": "H4", "selected_rules": {"bias": ["b_bull"]}},
                    {"timeframe": "M15", "selected_rules": {"zone": ["z_disc"]}},
                ],
                "setups": [{"name": "Retest"}],
            }
        )

        assert strategy.rule_ids == {"b_bull", "z_disc"}
        assert strategy.setups[0].rules == []

    def test_invalid_plan(self):
        """Test plan validation errors surface as ValidationError."""
        data = {
            "id": "j1",
            "name": "Test",
            "capital": 5000,
            "plan": {"no_trade_zones": [{"start": "25:00", "end": "26:00"}]},
        }

        with pytest.raises(ValidationError):
            dict_to_journal(data)

    def test_sample_journal_file(self):
        """Test the bundled sample journal loads."""
        data = json.loads(SAMPLE_JOURNAL.read_text())

        journal = dict_to_journal(data)

        assert journal.id == "main"
        assert journal.capital == 10000
        assert journal.plan.max_trades_per_day == 3
        assert journal.plan.kill_zones[0].name == "London Open"
        assert [t.id for t in journal.trades] == ["t1", "t2", "t3"]
        assert journal.find_strategy("Trend Continuation").setups[0].name == "Discount Buy"
        assert journal.trades[2].news_events[0].impact == NewsImpact.HIGH
