import json
from collections.abc import Callable
from pathlib import Path
from typing import Any

from catchery import log_warning

from ..character.character_class import CharacterClass
from ..combat.combatant import EnemyTemplate
from .error_handling import EngineError
from .logging import log_debug
from .utils import Singleton

DEFAULT_DATA_DIR = Path(__file__).resolve().parent.parent / "data"


class ContentRepository(metaclass=Singleton):
    """
    One-stop registry for the game data that needs fast by-name access.
    """

    classes: dict[str, CharacterClass]
    enemies: dict[str, EnemyTemplate]

    def __init__(self, data_dir: Path | None = None) -> None:
        """
        Initialize the ContentRepository.

        Args:
            data_dir (Path | None):
                The directory containing data files to load. Defaults to the
                data shipped with the package.

        """
        self.reload(data_dir or DEFAULT_DATA_DIR)

    def reload(self, root: Path) -> None:
        """
        (Re)load all JSON assets from disk.

        Args:
            root (Path):
                The directory containing data files to load.
        """
        self.data_dir = root
        self.classes = _load_json_file(
            root / "character_classes.json",
            self._load_character_classes,
            "character classes",
        )
        self.enemies = _load_json_file(
            root / "enemies.json",
            self._load_enemies,
            "enemies",
        )

    def _get_from_collection(self, collection_name: str, item_name: str) -> Any | None:
        """
        Generic helper to get an item from any collection.

        Args:
            collection_name (str):
                Name of the collection attribute (e.g., 'classes', 'enemies')
            item_name (str):
                Name of the item to retrieve

        Returns:
            Any | None:
                The item if found, None otherwise

        """
        collection: dict[str, Any] = getattr(self, collection_name, {})
        entry = collection.get(item_name)
        if entry is None:
            log_warning(
                f"Item '{item_name}' not found in collection '{collection_name}'.",
                {
                    "collection_name": collection_name,
                    "item_name": item_name,
                    "available": sorted(collection),
                },
            )
        return entry

    def get_character_class(self, name: str) -> CharacterClass | None:
        """Get a character class by name, or None if not found."""
        return self._get_from_collection("classes", name)

    def get_enemy(self, name: str) -> EnemyTemplate | None:
        """Get an enemy template by name, or None if not found."""
        return self._get_from_collection("enemies", name)

    @staticmethod
    def _load_character_classes(data: list[dict]) -> dict[str, CharacterClass]:
        """
        Load character classes from JSON data.

        Args:
            data (list[dict]): List of character class data dictionaries.

        Returns:
            dict[str, CharacterClass]: Dictionary mapping class names to CharacterClass objects.

        Raises:
            ValueError: If duplicate class names are found.

        """
        classes = {}
        for class_data in data:
            character_class = CharacterClass(**class_data)
            if character_class.name in classes:
                raise ValueError(f"Duplicate class name: {character_class.name}")
            classes[character_class.name] = character_class
        return classes

    @staticmethod
    def _load_enemies(data: list[dict]) -> dict[str, EnemyTemplate]:
        """
        Load enemy templates from JSON data.

        Args:
            data (list[dict]): List of enemy data dictionaries.

        Returns:
            dict[str, EnemyTemplate]: Dictionary mapping enemy names to templates.

        Raises:
            ValueError: If duplicate enemy names are found.

        """
        enemies = {}
        for enemy_data in data:
            enemy = EnemyTemplate(**enemy_data)
            if enemy.name in enemies:
                raise ValueError(f"Duplicate enemy name: {enemy.name}")
            enemies[enemy.name] = enemy
        return enemies


def _load_json_file(
    filepath: Path,
    loader_func: Callable[[list[dict]], dict[str, Any]],
    description: str,
) -> dict[str, Any]:
    """Helper to load and validate JSON files"""
    log_debug(f"Loading {description} from {filepath}")
    try:
        if not filepath.is_file():
            raise FileNotFoundError(f"File not found: {filepath}")
        with open(filepath, encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, list):
            raise ValueError(f"Expected list in {filepath}, got {type(data).__name__}")
        if not data:
            raise ValueError(f"Empty data list in {filepath}")
        return loader_func(data)
    except (json.JSONDecodeError, FileNotFoundError, ValueError, EngineError) as e:
        raise ValueError(f"File {filepath} raised an error: {e}") from e
