"""
Schedule configuration.

Everything the grid engine needs to know about the cinema is passed in as a
ScheduleConfig object: the halls, the visible window and the quick-add
catalog. Nothing here is module-level mutable state, so tests can build any
configuration they like.

The visible window hours are persisted in a small JSON file:

    data/settings.json
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Optional

from cineplanner.errors import ConfigError

logger = logging.getLogger(__name__)

SLOT_MINUTES = 15
MINUTES_PER_DAY = 24 * 60

DEFAULT_START_HOUR = 9
DEFAULT_END_HOUR = 23

DEFAULT_HALLS: tuple[str, ...] = ("Zaal 1", "Zaal 2", "Zaal 3", "Zaal 4", "Zaal 5")


@dataclass(frozen=True)
class CatalogMovie:
    """A predefined movie that can be quick-added to the schedule."""

    title: str
    genre: str
    duration: int


DEFAULT_CATALOG: tuple[CatalogMovie, ...] = (
    CatalogMovie("Dune: Part Two", "Sci-Fi", 166),
    CatalogMovie("Inside Out 2", "Animatie", 96),
    CatalogMovie("Bad Boys: Ride or Die", "Actie/Komedie", 115),
    CatalogMovie("Deadpool & Wolverine", "Actie/Komedie", 127),
    CatalogMovie("Furiosa: A Mad Max Saga", "Actie/Sci-Fi", 148),
    CatalogMovie("Despicable Me 4", "Animatie/Komedie", 95),
    CatalogMovie("The Super Mario Bros. Movie", "Animatie", 92),
    CatalogMovie("Elemental", "Animatie", 101),
    CatalogMovie("The Little Mermaid", "Fantasie", 135),
    CatalogMovie("Joy Ride", "Komedie", 95),
    CatalogMovie("De Oneindig", "Drama", 110),
    CatalogMovie("Ruby Kieuwman", "Komedie", 98),
    CatalogMovie("Spider-Man: Across the Spider-Verse", "Animatie", 140),
    CatalogMovie("Casper en Emma", "Kinderfilm", 75),
    CatalogMovie("Indiana Jones and the Dial of Destiny", "Actie/Avontuur", 154),
    CatalogMovie("Insidious: The Red Door", "Horror", 107),
    CatalogMovie("Juf Roos", "Kinderfilm", 60),
    CatalogMovie("Mission: Impossible - Dead Reckoning Part One", "Actie", 163),
    CatalogMovie("The Flash", "Actie/Sci-Fi", 144),
    CatalogMovie("Oppenheimer", "Biografie/Drama", 180),
    CatalogMovie("Barbie", "Komedie", 114),
    CatalogMovie("Meg 2: The Trench", "Actie/Sci-Fi", 116),
    CatalogMovie("Gran Turismo", "Actie/Drama", 134),
    CatalogMovie("The Nun II", "Horror", 110),
    CatalogMovie("A Haunting in Venice", "Mysterie/Misdaad", 103),
    CatalogMovie("Expend4bles", "Actie", 103),
    CatalogMovie("The Creator", "Sci-Fi", 133),
    CatalogMovie("Saw X", "Horror", 118),
    CatalogMovie("Taylor Swift: The Eras Tour", "Concertfilm", 165),
    CatalogMovie("Five Nights at Freddy's", "Horror", 109),
)


@dataclass(frozen=True)
class ScheduleConfig:
    halls: tuple[str, ...] = DEFAULT_HALLS
    start_hour: int = DEFAULT_START_HOUR
    end_hour: int = DEFAULT_END_HOUR
    catalog: tuple[CatalogMovie, ...] = field(default=DEFAULT_CATALOG, repr=False)
    # Remote document store; None means the local JSON file is the store.
    remote_url: Optional[str] = None

    def find_catalog_movie(self, title: str) -> Optional[CatalogMovie]:
        wanted = title.strip().lower()
        for m in self.catalog:
            if m.title.lower() == wanted:
                return m
        return None


def validate_window(start_hour: object, end_hour: object) -> list[str]:
    """
    Return a list of problems with the visible window bounds (empty = valid).

    start_hour must be in [0, 23], end_hour in [1, 24], start < end.
    """
    problems: list[str] = []
    if not isinstance(start_hour, int) or isinstance(start_hour, bool) or not 0 <= start_hour <= 23:
        problems.append(f"start_hour must be an integer in 0..23, got {start_hour!r}")
    if not isinstance(end_hour, int) or isinstance(end_hour, bool) or not 1 <= end_hour <= 24:
        problems.append(f"end_hour must be an integer in 1..24, got {end_hour!r}")
    if not problems and start_hour >= end_hour:  # type: ignore[operator]
        problems.append(f"start_hour ({start_hour}) must be before end_hour ({end_hour})")
    return problems


def validate_halls(halls: tuple[str, ...]) -> list[str]:
    problems: list[str] = []
    if not halls:
        problems.append("At least one hall is required")
    if len(set(halls)) != len(halls):
        problems.append("Hall names must be unique")
    if any(not str(h).strip() for h in halls):
        problems.append("Hall names must not be empty")
    return problems


def check_config(config: ScheduleConfig) -> None:
    """
    Raise ConfigError if the configuration is not usable as-is.
    """
    problems = validate_halls(config.halls) + validate_window(config.start_hour, config.end_hour)
    if problems:
        raise ConfigError("; ".join(problems))


def _default_settings_path() -> Path:
    """
    Return the default path of settings.json inside the package.

    A function instead of a constant so tests can point elsewhere.
    """
    base_dir = Path(__file__).resolve().parent
    return base_dir / "data" / "settings.json"


def load_settings(path: str | Path | None = None, base: Optional[ScheduleConfig] = None) -> ScheduleConfig:
    """
    Load persisted settings on top of `base` (defaults if None).

    A missing or unreadable file yields the base config. Window values are
    taken as stored; an invalid window is recovered later by the default
    window fallback in timegrid.visible_slots. A hall list that is empty,
    has duplicates or blank names is ignored.
    """
    config = base if base is not None else ScheduleConfig()
    settings_path = Path(path) if path is not None else _default_settings_path()

    if not settings_path.exists():
        return config

    try:
        data = json.loads(settings_path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError, UnicodeDecodeError) as e:
        logger.warning("Ignoring unreadable settings file %s: %s", settings_path, e)
        return config

    if not isinstance(data, dict):
        return config

    changes: dict[str, object] = {}
    for key in ("start_hour", "end_hour"):
        if key in data:
            changes[key] = data[key]

    halls = data.get("halls")
    if isinstance(halls, list) and halls:
        loaded = tuple(str(h) for h in halls)
        hall_problems = validate_halls(loaded)
        if hall_problems:
            logger.warning(
                "Ignoring halls in %s (%s), keeping %s",
                settings_path,
                "; ".join(hall_problems),
                ", ".join(config.halls),
            )
        else:
            changes["halls"] = loaded

    remote_url = data.get("remote_url")
    if isinstance(remote_url, str) and remote_url.strip():
        changes["remote_url"] = remote_url.strip()

    config = replace(config, **changes)
    problems = validate_window(config.start_hour, config.end_hour)
    if problems:
        logger.warning("Settings in %s have an invalid window: %s", settings_path, "; ".join(problems))
    return config


def save_settings(config: ScheduleConfig, path: str | Path | None = None) -> None:
    """
    Save the user-editable settings. Creates parent directories if needed.
    """
    settings_path = Path(path) if path is not None else _default_settings_path()
    settings_path.parent.mkdir(parents=True, exist_ok=True)

    payload: dict[str, object] = {
        "start_hour": config.start_hour,
        "end_hour": config.end_hour,
        "halls": list(config.halls),
    }
    if config.remote_url:
        payload["remote_url"] = config.remote_url

    settings_path.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")
