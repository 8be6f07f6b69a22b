"""
Tests for reward shaping.

Tests cover:
- Combat, movement and social category rewards
- Combined rewards and breakdowns
- Custom weight tables and validation
"""

import sys
import os

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import pytest
from eye_ai.core.errors import ConstructionError, InvalidArgumentError
from eye_ai.learning.reward_shaper import (
    CombatOutcome,
    MovementOutcome,
    RewardShaper,
    RewardWeights,
    SocialOutcome,
)


@pytest.fixture
def shaper():
    return RewardShaper()


class TestCombatReward:
    def test_kill_with_damage(self, shaper):
        assert shaper.combat_reward(2.0, 1.0, True, False) == pytest.approx(105.0)

    def test_death(self, shaper):
        assert shaper.combat_reward(0.0, 0.0, False, True) == pytest.approx(-50.0)

    def test_damage_exchange_is_linear(self, shaper):
        assert shaper.combat_reward(3.0, 0.0, False, False) == pytest.approx(30.0)
        assert shaper.combat_reward(0.0, 2.5, False, False) == pytest.approx(-37.5)

    def test_nothing_happened(self, shaper):
        assert shaper.combat_reward(0.0, 0.0, False, False) == 0.0

    @pytest.mark.parametrize("dealt, received", [(-1.0, 0.0), (0.0, -1.0), (float("nan"), 0.0),
                                                 (0.0, float("inf"))])
    def test_rejects_invalid_damage(self, shaper, dealt, received):
        with pytest.raises(InvalidArgumentError):
            shaper.combat_reward(dealt, received, False, False)


class TestMovementReward:
    def test_stuck(self, shaper):
        assert shaper.movement_reward(True, False, 0.0) == pytest.approx(-5.0)

    def test_exploration(self, shaper):
        assert shaper.movement_reward(False, True, 0.0) == pytest.approx(20.0)

    def test_efficient_movement_per_second(self, shaper):
        assert shaper.movement_reward(False, False, 4.0) == pytest.approx(4.0)

    def test_exploring_while_moving(self, shaper):
        assert shaper.movement_reward(False, True, 1.0) == pytest.approx(21.0)

    def test_rejects_negative_duration(self, shaper):
        with pytest.raises(InvalidArgumentError):
            shaper.movement_reward(False, False, -1.0)


class TestSocialReward:
    def test_help_player(self, shaper):
        assert shaper.social_reward(True, False, False) == pytest.approx(25.0)

    def test_hinder_player(self, shaper):
        assert shaper.social_reward(False, True, False) == pytest.approx(-25.0)

    def test_teamwork(self, shaper):
        assert shaper.social_reward(False, False, True) == pytest.approx(15.0)

    def test_help_and_teamwork_add(self, shaper):
        assert shaper.social_reward(True, False, True) == pytest.approx(40.0)


class TestCalculateReward:
    def test_no_outcomes(self, shaper):
        total, breakdown = shaper.calculate_reward()
        assert total == 0.0
        assert breakdown == {}

    def test_categories_are_summed(self, shaper):
        total, breakdown = shaper.calculate_reward(
            combat=CombatOutcome(damage_dealt=1.0, made_kill=True),
            movement=MovementOutcome(is_stuck=True),
            social=SocialOutcome(successful_team_action=True),
        )
        assert breakdown == pytest.approx({'combat': 110.0, 'movement': -5.0, 'social': 15.0})
        assert total == pytest.approx(120.0)
        assert isinstance(total, float)

    def test_only_given_categories_appear(self, shaper):
        total, breakdown = shaper.calculate_reward(movement=MovementOutcome(discovered_new_area=True))
        assert list(breakdown) == ['movement']
        assert total == pytest.approx(20.0)

    def test_shaper_is_pure(self, shaper):
        outcome = CombatOutcome(damage_received=2.0)
        first = shaper.calculate_reward(combat=outcome)
        second = shaper.calculate_reward(combat=outcome)
        assert first == second


class TestWeights:
    def test_default_weights(self):
        weights = RewardWeights()
        assert weights.kill == 100
        assert weights.death == -50
        assert weights.stuck == -5
        assert weights.teamwork == 15

    def test_custom_weights(self):
        shaper = RewardShaper(RewardWeights(kill=1.0, stuck=-1.0))
        assert shaper.combat_reward(0.0, 0.0, True, False) == pytest.approx(1.0)
        assert shaper.movement_reward(True, False, 0.0) == pytest.approx(-1.0)

    def test_weights_are_frozen(self):
        weights = RewardWeights()
        with pytest.raises(AttributeError):
            weights.kill = 5.0

    def test_rejects_non_finite_weight(self):
        with pytest.raises(ConstructionError):
            RewardShaper(RewardWeights(kill=float("nan")))
