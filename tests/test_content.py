"""
Tests for the content repository and the packaged game data.
"""

import json

import pytest

from tabletop_engine.core.content import DEFAULT_DATA_DIR, ContentRepository

CLASS_NAMES = ["Fighter", "Wizard", "Rogue", "Cleric", "Ranger", "Paladin", "Barbarian", "Bard"]


def write_data(root, classes, enemies):
    (root / "character_classes.json").write_text(json.dumps(classes), encoding="utf-8")
    (root / "enemies.json").write_text(json.dumps(enemies), encoding="utf-8")
    return root


VALID_CLASS = {"name": "Fighter", "hit_die": 10}
VALID_ENEMY = {"name": "Rat", "hit_points": 2, "armor_class": 10}


def test_packaged_content_loads():
    repo = ContentRepository()
    assert repo.data_dir == DEFAULT_DATA_DIR
    assert sorted(repo.classes) == sorted(CLASS_NAMES)
    assert sorted(repo.enemies) == ["Goblin", "Orc", "Skeleton", "Wolf"]


def test_repository_is_a_singleton():
    assert ContentRepository() is ContentRepository()


def test_class_unlock_schedule():
    """
    Test that the packaged classes unlock ability i at level i + 1 and
    spell i at level 2(i + 1).
    """
    wizard = ContentRepository().get_character_class("Wizard")
    assert wizard.hit_die == 6
    assert wizard.get_abilities_at_level(1) == ["Spellcasting"]
    assert wizard.get_spells_at_level(1) == []
    assert wizard.get_spells_at_level(2) == ["Magic Missile"]
    assert wizard.get_all_spells_up_to_level(6) == ["Magic Missile", "Fireball", "Lightning Bolt"]
    assert wizard.get_all_spells_up_to_level(20)[-1] == "Teleport"


@pytest.mark.parametrize("name", CLASS_NAMES)
def test_every_class_has_a_default_attack(name):
    character_class = ContentRepository().get_character_class(name)
    assert character_class.default_attack is not None
    assert character_class.get_abilities_at_level(1)


def test_enemy_templates():
    goblin = ContentRepository().get_enemy("Goblin")
    assert goblin.hit_points == 7
    assert goblin.armor_class == 15
    assert goblin.attacks[0].name == "Scimitar Attack"
    assert goblin.description


def test_missing_entries_warn_and_return_none(mocker):
    warn = mocker.patch("tabletop_engine.core.content.log_warning")
    repo = ContentRepository()
    assert repo.get_character_class("Necromancer") is None
    assert repo.get_enemy("Dragon") is None
    assert warn.call_count == 2


def test_custom_data_directory(tmp_path):
    repo = ContentRepository(write_data(tmp_path, [VALID_CLASS], [VALID_ENEMY]))
    assert list(repo.classes) == ["Fighter"]
    assert repo.get_enemy("Rat").hit_points == 2


def test_reload(tmp_path):
    repo = ContentRepository()
    repo.reload(write_data(tmp_path, [VALID_CLASS], [VALID_ENEMY]))
    assert repo.data_dir == tmp_path
    assert list(repo.enemies) == ["Rat"]


@pytest.mark.parametrize(
    "classes, enemies",
    [
        ([VALID_CLASS, VALID_CLASS], [VALID_ENEMY]),
        ([VALID_CLASS], [VALID_ENEMY, VALID_ENEMY]),
        ([], [VALID_ENEMY]),
        ({"name": "Fighter"}, [VALID_ENEMY]),
        ([VALID_CLASS], [{"name": "Rat", "hit_points": 0, "armor_class": 10}]),
        ([{**VALID_CLASS, "abilities_by_level": {"first": ["Rage"]}}], [VALID_ENEMY]),
        ([{**VALID_CLASS, "spells_by_level": {"0": ["Light"]}}], [VALID_ENEMY]),
        (
            [VALID_CLASS],
            [{**VALID_ENEMY, "attacks": [{"name": "Bite", "damage": "1dX"}]}],
        ),
    ],
)
def test_invalid_data_is_rejected(tmp_path, classes, enemies):
    with pytest.raises(ValueError):
        ContentRepository(write_data(tmp_path, classes, enemies))


def test_missing_and_malformed_files(tmp_path):
    with pytest.raises(ValueError, match="not found"):
        ContentRepository(tmp_path)

    (tmp_path / "character_classes.json").write_text("[{", encoding="utf-8")
    with pytest.raises(ValueError):
        ContentRepository(tmp_path)
