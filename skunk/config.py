"""Game catalog loading."""

import logging
from collections.abc import Iterable
from functools import lru_cache
from pathlib import Path

from .codec import encode_game
from .models import Game
from .schemas import GamesFile
from .utils import load_json, save_json

logger = logging.getLogger('skunk.config')

DEFAULT_CATALOG_PATH = Path(__file__).parent / 'data' / 'games.json'


def load_game_catalog(path: Path | str) -> dict[str, Game]:
    """
    Load a game catalog file.

    The file holds {"games": [...]} with each entry in the same shape
    as a game wire record.

    Args:
        path: Path to the catalog JSON file

    Returns:
        Dict of game_id -> Game, in file order

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If the file fails validation or repeats a game id
    """
    catalog_file = load_json(path, schema=GamesFile)

    games: dict[str, Game] = {}
    for record in catalog_file.games:
        if record.id in games:
            raise ValueError(f'Duplicate game id in {path}: {record.id}')
        games[record.id] = record.to_game()

    logger.info(f'Loaded {len(games)} games from {path}')
    return games


@lru_cache(maxsize=1)
def get_default_catalog() -> dict[str, Game]:
    """
    Load the packaged catalog of classic games.

    Cached after first load; callers must not mutate the returned dict.
    """
    return load_game_catalog(DEFAULT_CATALOG_PATH)


def get_game(game_id: str) -> Game | None:
    """Look up a game in the packaged catalog."""
    return get_default_catalog().get(game_id)


def save_game_catalog(games: Iterable[Game], path: Path | str) -> None:
    """Write games to a catalog file that load_game_catalog() can read back."""
    records = [encode_game(game) for game in games]
    save_json(path, {'games': records})
    logger.info(f'Saved {len(records)} games to {path}')


def clear_catalog_cache() -> None:
    """Clear the cached default catalog so the next call reloads it."""
    get_default_catalog.cache_clear()
