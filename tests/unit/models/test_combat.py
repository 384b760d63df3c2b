"""Tests for the deterministic combat simulation."""

from __future__ import annotations

from guildhall.models.characters import Mage, Rogue, Warrior, create_warrior
from guildhall.models.combat import simulate_combat


class TestSimulateCombat:
    """Tests for simulate_combat."""

    def test_first_fighter_strikes_first(self, sample_warrior: Warrior, sample_mage: Mage) -> None:
        report = simulate_combat(sample_warrior, sample_mage)

        first = report.rounds[0]
        assert first.round_number == 1
        assert first.attacker == "Thorin"
        assert first.defender == "Merlin"
        # 70 attack against 25 defense
        assert first.damage == 45
        assert first.defender_health == 75

    def test_winner(self, sample_warrior: Warrior, sample_mage: Mage) -> None:
        """Warrior deals 45 per hit, mage deals 60; 120 HP mage falls in round 3."""
        report = simulate_combat(sample_warrior, sample_mage)

        assert report.winner_name == "Thorin"
        assert not report.is_draw
        assert report.round_count == 3
        assert report.rounds[-1].defender_health == 0

    def test_minimum_damage_is_one(self) -> None:
        weak = create_warrior("Weakling", 1, 0, 0, "Stick")
        tank = create_warrior("Bulwark", 1, 0, 500, "Shield")

        report = simulate_combat(weak, tank, max_rounds=3)

        assert all(attack.damage == 1 for attack in report.rounds)
        assert report.is_draw
        assert report.winner_id is None
        assert report.round_count == 3
        assert len(report.rounds) == 6

    def test_characters_not_modified(self, sample_rogue: Rogue, sample_mage: Mage) -> None:
        before = (sample_rogue.health_points, sample_mage.health_points)

        simulate_combat(sample_rogue, sample_mage)

        assert (sample_rogue.health_points, sample_mage.health_points) == before

    def test_deterministic(self, sample_rogue: Rogue, sample_warrior: Warrior) -> None:
        assert simulate_combat(sample_rogue, sample_warrior) == simulate_combat(sample_rogue, sample_warrior)
