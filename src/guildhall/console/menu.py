"""Interactive numbered menu rendered with rich.

The menu only prompts for input and prints results; every action is
delegated to a controller, which never raises domain errors.
"""

from __future__ import annotations

from typing import Any, Callable

from rich.console import Console
from rich.markup import escape
from rich.prompt import Confirm, FloatPrompt, IntPrompt, Prompt
from rich.table import Table

from guildhall.console.controllers import Controllers
from guildhall.core.logging import bind_context, clear_context
from guildhall.models.characters import GameEntity
from guildhall.models.combat import CombatReport
from guildhall.models.enums import CharacterSortKey, CharacterType, EquipmentType, Rarity
from guildhall.models.guild import Equipment, Guild
from guildhall.models.results import CharacterStatistics, GuildStatistics, OperationResult


MENU_SECTIONS: tuple[tuple[str, tuple[tuple[int, str], ...]], ...] = (
    (
        "Character operations",
        (
            (1, "Create Character"),
            (2, "View All Characters"),
            (3, "View Character by ID"),
            (4, "Update Character"),
            (5, "Delete Character"),
            (6, "Add Experience to Character"),
            (7, "Level Up Character"),
            (8, "Filter Characters by Type"),
            (9, "Character Statistics"),
        ),
    ),
    (
        "Guild operations",
        (
            (10, "Create Guild"),
            (11, "View All Guilds"),
            (12, "View Guild by ID"),
            (13, "Update Guild"),
            (14, "Delete Guild"),
            (15, "Add Character to Guild"),
            (16, "Remove Character from Guild"),
            (17, "Level Up Guild"),
            (18, "Guild Statistics"),
            (19, "View Guild Members"),
        ),
    ),
    (
        "Extras",
        (
            (20, "Simulate Combat"),
            (21, "Equip Item"),
            (22, "View Equipment"),
        ),
    ),
    ("", ((0, "Exit Application"),)),
)


class ConsoleMenu:
    """Menu loop over the character and guild controllers."""

    def __init__(self, controllers: Controllers, console: Console | None = None) -> None:
        self.characters = controllers.characters
        self.guilds = controllers.guilds
        self.console = console or Console()
        self._actions: dict[int, Callable[[], None]] = {
            1: self.create_character,
            2: self.list_characters,
            3: self.view_character,
            4: self.update_character,
            5: self.delete_character,
            6: self.add_experience,
            7: self.level_up_character,
            8: self.filter_characters,
            9: self.character_statistics,
            10: self.create_guild,
            11: self.list_guilds,
            12: self.view_guild,
            13: self.update_guild,
            14: self.delete_guild,
            15: self.join_guild,
            16: self.leave_guild,
            17: self.level_up_guild,
            18: self.guild_statistics,
            19: self.guild_members,
            20: self.simulate_combat,
            21: self.equip_item,
            22: self.view_equipment,
        }

    # =========================================================================
    # Loop
    # =========================================================================

    def run(self) -> None:
        """Show the menu until the user picks 0."""
        while True:
            self.show_menu()
            choice = IntPrompt.ask("Enter your choice", console=self.console)
            if choice == 0:
                self.console.print("\nExiting application...")
                return

            action = self._actions.get(choice)
            if action is None:
                self.console.print("[red]✗ Invalid option! Please try again.[/red]")
                continue

            bind_context(menu_option=choice)
            try:
                action()
            finally:
                clear_context()

    def show_menu(self) -> None:
        table = Table(title="MAIN MENU", show_header=False, box=None)
        table.add_column("option", justify="right", style="cyan")
        table.add_column("label")
        for section, entries in MENU_SECTIONS:
            if section:
                table.add_row("", f"[bold]{section}[/bold]")
            for number, label in entries:
                table.add_row(str(number), label)
        self.console.print()
        self.console.print(table)

    # =========================================================================
    # Rendering
    # =========================================================================

    def show(self, result: OperationResult) -> None:
        if not result.success:
            kind = result.error_kind.value if result.error_kind else "error"
            self.console.print(f"[red]✗ {escape(result.message)}[/red] [dim]({kind})[/dim]")
            return

        self.console.print(f"[green]✓ {escape(result.message)}[/green]")
        data = result.data
        if isinstance(data, GameEntity):
            self.console.print(data.display_info())
        elif isinstance(data, Guild):
            self.console.print(data.display_info())
        elif isinstance(data, list) and data and isinstance(data[0], GameEntity):
            self.console.print(self._character_table(data))
        elif isinstance(data, list) and data and isinstance(data[0], Guild):
            self.console.print(self._guild_table(data))
        elif isinstance(data, list) and data and isinstance(data[0], Equipment):
            self.console.print(self._equipment_table(data))
        elif isinstance(data, CharacterStatistics):
            self._print_character_statistics(data)
        elif isinstance(data, GuildStatistics):
            self._print_guild_statistics(data)
        elif isinstance(data, CombatReport):
            self._print_combat(data)

    @staticmethod
    def _character_table(characters: list[Any]) -> Table:
        table = Table(title="Characters")
        for column in ("ID", "Name", "Type", "Level", "XP", "HP", "Guild", "Power"):
            table.add_column(column)
        for c in characters:
            table.add_row(
                str(c.id),
                c.name,
                c.character_type.display_name,
                str(c.level),
                str(c.experience),
                str(c.health_points),
                str(c.guild_id) if c.guild_id is not None else "-",
                str(c.calculate_power()),
            )
        return table

    @staticmethod
    def _guild_table(guilds: list[Guild]) -> Table:
        table = Table(title="Guilds")
        for column in ("ID", "Name", "Level", "Members", "Founded"):
            table.add_column(column)
        for g in guilds:
            table.add_row(
                str(g.id), g.guild_name, str(g.level), str(g.member_count), f"{g.created_date:%Y-%m-%d}"
            )
        return table

    @staticmethod
    def _equipment_table(items: list[Equipment]) -> Table:
        table = Table(title="Equipment")
        for column in ("ID", "Name", "Type", "Bonus", "Rarity"):
            table.add_column(column)
        for item in items:
            table.add_row(
                str(item.id), item.name, item.equipment_type.value, str(item.bonus_stats), item.rarity.value
            )
        return table

    def _print_character_statistics(self, stats: CharacterStatistics) -> None:
        self.console.print(f"Total characters: {stats.total}")
        for character_type, count in stats.by_type.items():
            self.console.print(f"  {character_type.display_name}s: {count}")
        self.console.print(f"Average level: {stats.average_level:.2f}")
        self.console.print(f"Total experience: {stats.total_experience}")
        self.console.print(f"Without a guild: {stats.unaffiliated}")
        if stats.strongest_name:
            self.console.print(f"Strongest: {stats.strongest_name} (power {stats.strongest_power})")

    def _print_guild_statistics(self, stats: GuildStatistics) -> None:
        self.console.print(f"Total guilds: {stats.total_guilds}")
        self.console.print(f"Total members: {stats.total_members}")
        self.console.print(f"Average level: {stats.average_level:.2f}")
        if stats.largest_guild_name:
            self.console.print(
                f"Largest: {stats.largest_guild_name} ({stats.largest_guild_members} members)"
            )

    def _print_combat(self, report: CombatReport) -> None:
        for attack in report.rounds:
            self.console.print(
                f"  Round {attack.round_number}: {attack.attacker} hits {attack.defender}"
                f" for {attack.damage} ({attack.defender_health} HP left)"
            )

    # =========================================================================
    # Prompts
    # =========================================================================

    def _ask_int(self, label: str, default: int | None = None) -> int:
        if default is None:
            return IntPrompt.ask(label, console=self.console)
        return IntPrompt.ask(label, console=self.console, default=default)

    def _ask_character_type(self) -> str:
        return Prompt.ask(
            "Character type",
            console=self.console,
            choices=[t.value for t in CharacterType],
            case_sensitive=False,
        ).upper()

    def _ask_variant_stats(self, character_type: str) -> dict[str, Any]:
        if character_type == CharacterType.WARRIOR:
            return {
                "strength": self._ask_int("Strength"),
                "armor": self._ask_int("Armor"),
                "weapon_type": Prompt.ask("Weapon type", console=self.console),
            }
        if character_type == CharacterType.MAGE:
            return {
                "mana": self._ask_int("Mana"),
                "intelligence": self._ask_int("Intelligence"),
                "spell_school": Prompt.ask("Spell school", console=self.console),
            }
        return {
            "agility": self._ask_int("Agility"),
            "stealth": self._ask_int("Stealth"),
            "critical_chance": FloatPrompt.ask("Critical chance (0.0-1.0)", console=self.console),
        }

    # =========================================================================
    # Character actions
    # =========================================================================

    def create_character(self) -> None:
        character_type = self._ask_character_type()
        name = Prompt.ask("Name", console=self.console)
        level = self._ask_int("Level", default=1)
        stats = self._ask_variant_stats(character_type)
        self.show(self.characters.create_character(character_type, name=name, level=level, **stats))

    def list_characters(self) -> None:
        sort_by = Prompt.ask(
            "Sort by",
            console=self.console,
            choices=[key.value for key in CharacterSortKey],
            default=CharacterSortKey.ID.value,
        )
        self.show(self.characters.list_characters(sort_by))

    def view_character(self) -> None:
        self.show(self.characters.get_character(self._ask_int("Character ID")))

    def update_character(self) -> None:
        character_id = self._ask_int("Character ID")
        current = self.characters.get_character(character_id)
        if not current.success:
            self.show(current)
            return
        character = current.data
        self.console.print(character.display_info())
        name = Prompt.ask("New name", console=self.console, default=character.name)
        level = self._ask_int("New level", default=character.level)
        stats = self._ask_variant_stats(character.character_type)
        self.show(self.characters.update_character(character_id, name=name, level=level, **stats))

    def delete_character(self) -> None:
        character_id = self._ask_int("Character ID")
        if Confirm.ask(f"Delete character {character_id}?", console=self.console):
            self.show(self.characters.delete_character(character_id))

    def add_experience(self) -> None:
        character_id = self._ask_int("Character ID")
        self.show(self.characters.add_experience(character_id, self._ask_int("Experience to add")))

    def level_up_character(self) -> None:
        self.show(self.characters.level_up(self._ask_int("Character ID")))

    def filter_characters(self) -> None:
        self.show(self.characters.characters_by_type(self._ask_character_type()))

    def character_statistics(self) -> None:
        self.show(self.characters.statistics())

    def simulate_combat(self) -> None:
        attacker_id = self._ask_int("Attacker ID")
        defender_id = self._ask_int("Defender ID")
        self.show(self.characters.simulate_combat(attacker_id, defender_id))

    def equip_item(self) -> None:
        character_id = self._ask_int("Character ID")
        name = Prompt.ask("Item name", console=self.console)
        equipment_type = Prompt.ask(
            "Item type", console=self.console, choices=[t.value for t in EquipmentType], case_sensitive=False
        )
        bonus = self._ask_int("Bonus stats", default=0)
        rarity = Prompt.ask(
            "Rarity",
            console=self.console,
            choices=[r.value for r in Rarity],
            default=Rarity.COMMON.value,
            case_sensitive=False,
        )
        self.show(self.characters.add_equipment(character_id, name, equipment_type, bonus, rarity))

    def view_equipment(self) -> None:
        self.show(self.characters.list_equipment(self._ask_int("Character ID")))

    # =========================================================================
    # Guild actions
    # =========================================================================

    def create_guild(self) -> None:
        name = Prompt.ask("Guild name", console=self.console)
        self.show(self.guilds.create_guild(name, self._ask_int("Level", default=1)))

    def list_guilds(self) -> None:
        self.show(self.guilds.list_guilds())

    def view_guild(self) -> None:
        self.show(self.guilds.get_guild(self._ask_int("Guild ID")))

    def update_guild(self) -> None:
        guild_id = self._ask_int("Guild ID")
        current = self.guilds.get_guild(guild_id)
        if not current.success:
            self.show(current)
            return
        guild = current.data
        name = Prompt.ask("New name", console=self.console, default=guild.guild_name)
        level = self._ask_int("New level", default=guild.level)
        self.show(self.guilds.update_guild(guild_id, name, level))

    def delete_guild(self) -> None:
        guild_id = self._ask_int("Guild ID")
        if Confirm.ask(f"Delete guild {guild_id}?", console=self.console):
            self.show(self.guilds.delete_guild(guild_id))

    def join_guild(self) -> None:
        character_id = self._ask_int("Character ID")
        guild_id = self._ask_int("Guild ID")
        self.show(self.guilds.add_character_to_guild(character_id, guild_id))

    def leave_guild(self) -> None:
        self.show(self.guilds.remove_character_from_guild(self._ask_int("Character ID")))

    def level_up_guild(self) -> None:
        self.show(self.guilds.level_up_guild(self._ask_int("Guild ID")))

    def guild_statistics(self) -> None:
        self.show(self.guilds.statistics())

    def guild_members(self) -> None:
        self.show(self.guilds.guild_members(self._ask_int("Guild ID")))


__all__ = [
    "ConsoleMenu",
    "MENU_SECTIONS",
]
