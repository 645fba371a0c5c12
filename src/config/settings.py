# src/config/settings.py
from enum import Enum
from pathlib import Path
from typing import Annotated, Literal, Optional, Union

import yaml
from pydantic import BaseModel, Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.config.thresholds import FALLBACK_PAIR
from src.scoring.models import Impact


class PairConfig(BaseModel):
    """Per-instrument constants.

    Attributes:
        pip_size: Price distance of one pip.
        pip_value: Account-currency value of one pip for one standard lot.
        spread: Typical spread in pips.
    """

    pip_size: float
    pip_value: float
    spread: float = 0.0

    @property
    def is_usable(self) -> bool:
        """Check that both divisors are positive."""
        return self.pip_size > 0 and self.pip_value > 0


def default_pairs() -> dict[str, PairConfig]:
    """Return the built-in pair table."""
    table = {
        "EURUSD": (0.0001, 10, 0.9),
        "GBPUSD": (0.0001, 10, 1.1),
        "USDJPY": (0.01, 8.86, 1.0),
        "AUDUSD": (0.0001, 10, 0.9),
        "USDCAD": (0.0001, 10, 1.5),
        "USDCHF": (0.0001, 10, 1.4),
        "NZDUSD": (0.0001, 10, 1.4),
        "EURGBP": (0.0001, 13.56, 1.0),
        "EURJPY": (0.01, 6.77, 1.6),
        "GBPJPY": (0.01, 6.7719, 2.5),
        "AUDJPY": (0.01, 6.771949, 1.6),
        "XAUUSD": (0.1, 10, 1.12),
        "XAGUSD": (0.001, 5, 3.6),
        "US30": (1, 1, 2.6),
        "US500": (0.1, 1, 5.9),
        "USTEC": (0.1, 1, 20.1),
        "UK100": (0.1, 1, 66.6),
        "BTCUSD": (0.01, 0.01, 25.0),
        "ETHUSD": (0.01, 1, 1.5),
        "USOIL": (0.01, 10, 0.8),
        FALLBACK_PAIR: (0.0001, 10, 2.0),
    }
    return {
        name: PairConfig(pip_size=pip_size, pip_value=pip_value, spread=spread)
        for name, (pip_size, pip_value, spread) in table.items()
    }


class KeywordType(str, Enum):
    """Where a scored keyword is looked up."""

    SENTIMENT = "Sentiment"
    KEYWORD = "Keyword"


class KeywordScoreEffect(BaseModel):
    """Maps a sentiment tag or note keyword to a score impact."""

    keyword: str
    impact: Impact
    type: KeywordType = KeywordType.SENTIMENT


class CustomFieldOption(BaseModel):
    value: str
    impact: Optional[Impact] = None


class ListCustomField(BaseModel):
    id: str
    title: str
    type: Literal["List"] = "List"
    allow_multiple: bool = False
    options: list[CustomFieldOption] = Field(default_factory=list)


class ButtonCustomField(BaseModel):
    id: str
    title: str
    type: Literal["Button"] = "Button"
    allow_multiple: bool = False
    options: list[CustomFieldOption] = Field(default_factory=list)


class PlainTextCustomField(BaseModel):
    id: str
    title: str
    type: Literal["Plain Text"] = "Plain Text"


class NumericRange(BaseModel):
    min: float
    max: float

    @model_validator(mode="after")
    def check_bounds(self) -> "NumericRange":
        if self.min > self.max:
            raise ValueError(f"Numeric range min {self.min} is above max {self.max}")
        return self


class NumericCustomField(BaseModel):
    id: str
    title: str
    type: Literal["Numeric"] = "Numeric"
    range: Union[Literal["Any", "Positive", "Negative"], NumericRange] = "Any"

    def accepts(self, value: float) -> bool:
        """Check a value against the field's range."""
        if isinstance(self.range, NumericRange):
            return self.range.min <= value <= self.range.max
        if self.range == "Positive":
            return value > 0
        if self.range == "Negative":
            return value < 0
        return True


class DateCustomField(BaseModel):
    id: str
    title: str
    type: Literal["Date"] = "Date"


class TimeCustomField(BaseModel):
    id: str
    title: str
    type: Literal["Time"] = "Time"


CustomField = Annotated[
    Union[
        ListCustomField,
        ButtonCustomField,
        PlainTextCustomField,
        NumericCustomField,
        DateCustomField,
        TimeCustomField,
    ],
    Field(discriminator="type"),
]

OptionCustomField = (ListCustomField, ButtonCustomField)


class AnalysisOption(BaseModel):
    id: str
    value: str


class AnalysisSubCategory(BaseModel):
    id: str
    title: str
    options: list[AnalysisOption] = Field(default_factory=list)

    def find_option(self, option_id: str) -> Optional[AnalysisOption]:
        """Find an option by its id."""
        return next((o for o in self.options if o.id == option_id), None)


class AnalysisCategory(BaseModel):
    id: str
    title: str
    sub_categories: list[AnalysisSubCategory] = Field(default_factory=list)


def default_analysis_configurations() -> list[AnalysisCategory]:
    """Return the built-in bias / volatility / zone analysis categories."""
    return [
        AnalysisCategory(
            id="bias",
            title="Bias",
            sub_categories=[
                AnalysisSubCategory(
                    id="bias",
                    title="Bias",
                    options=[
                        AnalysisOption(id="b_bull", value="Bullish"),
                        AnalysisOption(id="b_bear", value="Bearish"),
                        AnalysisOption(id="b_range", value="Ranging"),
                    ],
                )
            ],
        ),
        AnalysisCategory(
            id="volatility",
            title="Volatility",
            sub_categories=[
                AnalysisSubCategory(
                    id="volatility",
                    title="Volatility",
                    options=[
                        AnalysisOption(id="v_high", value="High"),
                        AnalysisOption(id="v_med", value="Medium"),
                        AnalysisOption(id="v_low", value="Low"),
                    ],
                )
            ],
        ),
        AnalysisCategory(
            id="zone",
            title="Zone",
            sub_categories=[
                AnalysisSubCategory(
                    id="zone",
                    title="Zone",
                    options=[
                        AnalysisOption(id="z_disc", value="Discount"),
                        AnalysisOption(id="z_prem", value="Premium"),
                        AnalysisOption(id="z_eq", value="Equilibrium"),
                    ],
                )
            ],
        ),
    ]


class AppSettings(BaseModel):
    """Configuration consumed by the metrics engine.

    Attributes:
        display_currency: ISO code used when formatting money.
        currency_rates: USD to currency conversion rates.
        pairs_config: Pip table keyed by pair symbol, must contain "Other".
        keyword_scores: Sentiment and note keyword impacts.
        custom_fields: User-defined trade fields.
        analysis_configurations: Analysis checklist categories.
    """

    display_currency: str = "USD"
    currency_rates: dict[str, float] = Field(default_factory=lambda: {"USD": 1.0})
    pairs_config: dict[str, PairConfig] = Field(default_factory=default_pairs)
    keyword_scores: list[KeywordScoreEffect] = Field(default_factory=list)
    custom_fields: list[CustomField] = Field(default_factory=list)
    analysis_configurations: list[AnalysisCategory] = Field(
        default_factory=default_analysis_configurations
    )

    @model_validator(mode="after")
    def require_fallback_pair(self) -> "AppSettings":
        """The fallback pair must exist and be usable."""
        fallback = self.pairs_config.get(FALLBACK_PAIR)
        if fallback is None:
            raise ValueError(f"pairs_config must define an '{FALLBACK_PAIR}' entry")
        if not fallback.is_usable:
            raise ValueError(
                f"'{FALLBACK_PAIR}' pair needs positive pip_size and pip_value, "
                f"got {fallback.pip_size} / {fallback.pip_value}"
            )
        return self

    def keyword_impacts(self, keyword_type: KeywordType) -> dict[str, Impact]:
        """Return a lowercase keyword -> impact table for one keyword type."""
        return {
            effect.keyword.lower(): effect.impact
            for effect in self.keyword_scores
            if effect.type == keyword_type
        }

    def find_custom_field(self, field_id: str) -> Optional[CustomField]:
        return next((f for f in self.custom_fields if f.id == field_id), None)

    def find_sub_category(self, sub_category_id: str) -> Optional[AnalysisSubCategory]:
        for category in self.analysis_configurations:
            for sub_category in category.sub_categories:
                if sub_category.id == sub_category_id:
                    return sub_category
        return None

    def find_analysis_category(self, category_id: str) -> Optional[AnalysisCategory]:
        return next(
            (c for c in self.analysis_configurations if c.id == category_id), None
        )


class EnvironmentSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="TRADEJOURNAL_")

    display_currency: Optional[str] = None
    log_level: str = "INFO"


class Settings(BaseModel):
    app: AppSettings = Field(default_factory=AppSettings)
    environment: EnvironmentSettings = Field(default_factory=EnvironmentSettings)

    @classmethod
    def from_yaml(cls, path: Path) -> "Settings":
        """Load settings from YAML file with env var overrides."""
        with open(path) as f:
            data = yaml.safe_load(f) or {}

        environment = EnvironmentSettings()
        app = AppSettings(**data.get("app", {}))
        if environment.display_currency:
            app = app.model_copy(update={"display_currency": environment.display_currency})

        return cls(app=app, environment=environment)
