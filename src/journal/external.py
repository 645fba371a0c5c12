# src/journal/external.py
"""Interfaces for services outside the metrics engine."""
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime

from src.journal.models import Direction


@dataclass
class TradeDraft:
    """Trade fields extracted from a chart screenshot, to be reviewed by the user."""

    pair: str
    direction: Direction
    entry_price: float
    open_time: datetime
    lot_size: float = 0.0
    stop_loss: float = 0.0
    take_profit: float = 0.0
    closing_price: float | None = None
    close_time: datetime | None = None
    notes: str = ""
    entry_reasons: list[str] = field(default_factory=list)


class TradeImageParser(ABC):
    """Extracts a trade draft from a chart image."""

    @abstractmethod
    def parse_trade_from_image(self, image: bytes) -> TradeDraft:
        """Parse a chart image.

        Args:
            image: Raw image bytes.

        Returns:
            The extracted TradeDraft.
        """


class SupportAssistant(ABC):
    """Answers user questions about the application."""

    @abstractmethod
    def get_support_response(self, query: str) -> str:
        """Return an answer to a support question."""
