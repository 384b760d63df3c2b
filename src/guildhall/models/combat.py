"""Deterministic combat simulation between two characters.

Fighters alternate attacks, the first argument striking first. Each hit
deals ``attack() - defend()`` damage with a minimum of 1. Health is tracked
locally so the characters themselves are never modified.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from guildhall.models.characters import GameEntity


class CombatRound(BaseModel):
    """A single attack within a combat."""

    round_number: int = Field(ge=1)
    attacker: str
    defender: str
    damage: int = Field(ge=1)
    defender_health: int = Field(ge=0)


class CombatReport(BaseModel):
    """Outcome of a simulated combat.

    Attributes:
        first: Name of the character that struck first.
        second: Name of the other character.
        rounds: Every attack in order.
        winner_id: Id of the winner, ``None`` on a draw.
        winner_name: Name of the winner, ``None`` on a draw.
    """

    first: str
    second: str
    rounds: list[CombatRound] = Field(default_factory=list)
    winner_id: int | None = None
    winner_name: str | None = None

    @property
    def is_draw(self) -> bool:
        return self.winner_name is None

    @property
    def round_count(self) -> int:
        return self.rounds[-1].round_number if self.rounds else 0


def simulate_combat(
    first: GameEntity,
    second: GameEntity,
    *,
    max_rounds: int = 20,
) -> CombatReport:
    """Fight ``first`` against ``second`` until one falls or rounds run out.

    Args:
        first: Character that attacks first each round.
        second: Opposing character.
        max_rounds: Round limit after which the fight is a draw.

    Returns:
        The combat report.
    """
    fighters = (first, second)
    health = [first.health_points, second.health_points]
    report = CombatReport(first=first.name, second=second.name)

    for round_number in range(1, max_rounds + 1):
        for attacker_index in (0, 1):
            defender_index = 1 - attacker_index
            attacker = fighters[attacker_index]
            defender = fighters[defender_index]

            damage = max(1, attacker.attack() - defender.defend())
            health[defender_index] = max(0, health[defender_index] - damage)
            report.rounds.append(
                CombatRound(
                    round_number=round_number,
                    attacker=attacker.name,
                    defender=defender.name,
                    damage=damage,
                    defender_health=health[defender_index],
                )
            )

            if health[defender_index] == 0:
                report.winner_id = attacker.id
                report.winner_name = attacker.name
                return report

    return report


__all__ = [
    "CombatRound",
    "CombatReport",
    "simulate_combat",
]
