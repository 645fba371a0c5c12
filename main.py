# main.py
"""Main entry point: loads settings and a journal, then logs its analytics."""
import json
import logging
import sys
from datetime import date
from pathlib import Path

import yaml
from dotenv import load_dotenv
from pydantic import ValidationError

from src.config.settings import Settings
from src.journal.codec import dict_to_journal
from src.journal.group_analyzer import GroupKey
from src.journal.journal_manager import JournalManager
from src.journal.models import Journal
from src.presentation import CurrencyFormatter

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='[%(asctime)s] %(levelname)s: %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S'
)
logger = logging.getLogger(__name__)

CONFIG_PATH = Path("config/settings.yaml")
JOURNAL_PATH = Path("data/journal.json")


def load_and_validate_config(config_path: Path = CONFIG_PATH) -> Settings:
    """Load and validate configuration.

    Returns:
        Settings object loaded from YAML.

    Raises:
        SystemExit: If the config file is missing or invalid.
    """
    load_dotenv()
    logger.info("✓ Loaded environment variables")

    if not config_path.exists():
        logger.error(f"{config_path} not found")
        sys.exit(1)

    try:
        settings = Settings.from_yaml(config_path)
    except (OSError, ValueError, yaml.YAMLError) as e:
        logger.error(f"Failed to load {config_path}: {e}")
        sys.exit(1)

    logging.getLogger().setLevel(settings.environment.log_level.upper())
    logger.info(f"✓ Settings loaded from {config_path}")
    return settings


def load_journal(journal_path: Path) -> Journal:
    """Load a journal from a JSON file.

    Raises:
        SystemExit: If the file is missing or malformed.
    """
    try:
        with open(journal_path) as f:
            data = json.load(f)
        journal = dict_to_journal(data)
    except ValidationError as e:
        logger.error(f"Invalid plan or rules in {journal_path}: {e}")
        sys.exit(1)
    except (OSError, KeyError, ValueError) as e:
        logger.error(f"Failed to load journal {journal_path}: {e}")
        sys.exit(1)

    logger.info(f"✓ Loaded journal '{journal.name}' with {len(journal.trades)} trades")
    return journal


def print_summary(manager: JournalManager, journal_id: str, as_of: date) -> None:
    """Log a journal's headline metrics."""
    journal = manager.get_journal(journal_id)
    money = CurrencyFormatter(manager.settings)
    overall = manager.get_group_metrics(journal_id)["All"]
    stats = manager.get_overall_stats(journal_id)
    md_score = manager.get_md_score(journal_id)
    state = manager.get_gamification(journal_id, as_of)

    logger.info("=" * 60)
    logger.info(f"Journal: {journal.name} ({journal.type.value})")
    logger.info(f"Balance: {money.format(journal.balance)}")
    logger.info(
        f"Trades: {overall.trades} | Win rate: {overall.win_rate:.2f}% | "
        f"Profit factor: {overall.profit_factor:.2f}"
    )
    logger.info(
        f"Total P/L: {money.format(overall.total_pl)} | "
        f"Expectancy: {money.format(overall.expectancy)} | Avg R: {overall.avg_r:.2f}"
    )
    streak = stats.current_streak
    streak_outcome = streak.outcome.value if streak.outcome else "-"
    logger.info(
        f"Avg score: {stats.avg_score:.2f} | Best time: {stats.best_time} | "
        f"Current streak: {streak.count} {streak_outcome}"
    )
    logger.info(f"MD score: {md_score.total_score} - {md_score.feedback}")
    logger.info(
        f"Level: {state.current_level.name} | XP: {state.xp} | "
        f"Achievements: {len(state.unlocked_achievements)} | "
        f"Badges: {len(state.unlocked_badges)}"
    )
    logger.info("=" * 60)

    for pair, metrics in manager.get_group_metrics(journal_id, GroupKey.PAIR).items():
        logger.info(
            f"  {pair}: {metrics.trades} trades, {metrics.win_rate:.2f}% wins, "
            f"P/L {money.format(metrics.total_pl)}"
        )


def main() -> None:
    settings = load_and_validate_config()
    journal_path = Path(sys.argv[1]) if len(sys.argv) > 1 else JOURNAL_PATH
    journal = load_journal(journal_path)

    manager = JournalManager(settings.app)
    manager.add_journal(journal)
    print_summary(manager, journal.id, date.today())


if __name__ == "__main__":
    main()
