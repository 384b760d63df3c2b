"""Tests for field-level validation."""

from __future__ import annotations

import pytest

from guildhall.core.exceptions import InvalidInputError, ResourceNotFoundError
from guildhall.models.characters import Warrior, create_mage, create_rogue, create_warrior
from guildhall.models.enums import EquipmentType
from guildhall.models.guild import Equipment, Guild
from guildhall.services.validation import (
    validate_character,
    validate_character_name,
    validate_equipment,
    validate_guild,
    validate_id,
    validate_level,
)


class TestNames:
    """Tests for name validation."""

    @pytest.mark.parametrize("name", ["Bob", "A" * 50])
    def test_valid_character_names(self, name: str) -> None:
        validate_character_name(name)

    @pytest.mark.parametrize("name", [None, "", "   ", "Al", "A" * 51])
    def test_invalid_character_names(self, name: str | None) -> None:
        with pytest.raises(InvalidInputError) as exc_info:
            validate_character_name(name)
        assert exc_info.value.details["field_name"] == "name"

    def test_guild_name_length(self) -> None:
        validate_guild(Guild(guild_name="A" * 100))
        with pytest.raises(InvalidInputError):
            validate_guild(Guild(guild_name="A" * 101))
        with pytest.raises(InvalidInputError):
            validate_guild(Guild(guild_name="Ab"))


class TestLevelsAndIds:
    """Tests for level and id checks."""

    @pytest.mark.parametrize("level", [1, 100])
    def test_level_bounds(self, level: int) -> None:
        validate_level(level)

    @pytest.mark.parametrize("level", [0, 101])
    def test_level_out_of_range(self, level: int) -> None:
        with pytest.raises(InvalidInputError):
            validate_level(level)

    @pytest.mark.parametrize("entity_id", [0, -4])
    def test_non_positive_id_not_found(self, entity_id: int) -> None:
        with pytest.raises(ResourceNotFoundError):
            validate_id(entity_id, resource="character")


class TestCharacterValidation:
    """Tests for validate_character."""

    def test_valid_characters(self, sample_warrior: Warrior) -> None:
        validate_character(sample_warrior)
        validate_character(create_mage("Merlin", 1, 0, 0, "Arcane"))
        validate_character(create_rogue("Shadow", 1, 0, 0, 0.0))

    def test_null_character(self) -> None:
        with pytest.raises(InvalidInputError):
            validate_character(None)

    def test_short_name(self) -> None:
        with pytest.raises(InvalidInputError):
            validate_character(create_warrior("Al", 1, 10, 10, "Axe"))

    def test_negative_strength(self) -> None:
        with pytest.raises(InvalidInputError) as exc_info:
            validate_character(create_warrior("Thorin", 1, -5, 10, "Axe"))
        assert exc_info.value.details["field_name"] == "strength"

    def test_negative_mana(self) -> None:
        with pytest.raises(InvalidInputError):
            validate_character(create_mage("Merlin", 1, -1, 10, "Arcane"))

    def test_blank_spell_school(self) -> None:
        with pytest.raises(InvalidInputError):
            validate_character(create_mage("Merlin", 1, 10, 10, " "))

    def test_negative_agility(self) -> None:
        with pytest.raises(InvalidInputError):
            validate_character(create_rogue("Shadow", 1, -1, 10, 0.1))

    def test_blank_weapon(self) -> None:
        with pytest.raises(InvalidInputError):
            validate_character(create_warrior("Thorin", 1, 10, 10, ""))


class TestEquipmentValidation:
    def test_blank_name(self) -> None:
        with pytest.raises(InvalidInputError):
            validate_equipment(Equipment(name="  ", equipment_type=EquipmentType.ARMOR))
