"""
Reward Shaping for EyeAI agents
Maps categorized game-event outcomes to scalar training rewards

Categories:
- Combat: damage dealt/received, kills, deaths
- Movement: being stuck, exploration, sustained movement
- Social: helping or hindering players, team actions

All scoring is pure. Magnitudes live in a frozen RewardWeights table, so one
shaper can be shared by every agent thread.
"""
import logging
from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

from eye_ai.config import config
from eye_ai.core.errors import ConstructionError, InvalidArgumentError
from eye_ai.utils.math_utils import is_finite_number

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RewardWeights:
    """Reward and penalty magnitudes"""
    # Combat
    damage_dealt: float = field(default_factory=lambda: config.REWARD_DAMAGE_DEALT)
    damage_received: float = field(default_factory=lambda: config.PENALTY_DAMAGE_RECEIVED)
    kill: float = field(default_factory=lambda: config.REWARD_KILL)
    death: float = field(default_factory=lambda: config.PENALTY_DEATH)
    # Movement
    efficient_movement: float = field(default_factory=lambda: config.REWARD_EFFICIENT_MOVEMENT)
    stuck: float = field(default_factory=lambda: config.PENALTY_STUCK)
    exploration: float = field(default_factory=lambda: config.REWARD_EXPLORATION)
    # Social
    help_player: float = field(default_factory=lambda: config.REWARD_HELP_PLAYER)
    hinder_player: float = field(default_factory=lambda: config.PENALTY_HINDER_PLAYER)
    teamwork: float = field(default_factory=lambda: config.REWARD_TEAMWORK)


@dataclass(frozen=True)
class CombatOutcome:
    damage_dealt: float = 0.0
    damage_received: float = 0.0
    made_kill: bool = False
    died: bool = False


@dataclass(frozen=True)
class MovementOutcome:
    is_stuck: bool = False
    discovered_new_area: bool = False
    seconds_of_movement: float = 0.0


@dataclass(frozen=True)
class SocialOutcome:
    helped_player: bool = False
    hindered_player: bool = False
    successful_team_action: bool = False


def _check_amount(name: str, value) -> float:
    if not is_finite_number(value) or value < 0:
        raise InvalidArgumentError(f"{name} must be a finite, non-negative number, got {value!r}")
    return float(value)


class RewardShaper:
    """
    Stateless reward calculator
    Category rewards are independent and summed when several apply to one step
    """

    def __init__(self, weights: Optional[RewardWeights] = None):
        """
        Args:
            weights: Reward magnitudes (defaults to the configured table)
        """
        self.weights = weights if weights is not None else RewardWeights()
        for name, value in vars(self.weights).items():
            if not is_finite_number(value):
                raise ConstructionError(f"Reward weight {name} must be finite, got {value!r}")

    def combat_reward(self, damage_dealt: float, damage_received: float,
                      made_kill: bool, died: bool) -> float:
        """
        Weighted damage exchange plus fixed kill/death terms

        Args:
            damage_dealt: Damage the agent dealt
            damage_received: Damage the agent took
            made_kill: Agent killed an entity
            died: Agent died

        Returns:
            Combat reward
        """
        w = self.weights
        reward = _check_amount("damage_dealt", damage_dealt) * w.damage_dealt
        reward += _check_amount("damage_received", damage_received) * w.damage_received
        if made_kill:
            reward += w.kill
        if died:
            reward += w.death
        return reward

    def movement_reward(self, is_stuck: bool, discovered_new_area: bool,
                        seconds_of_movement: float) -> float:
        """
        Penalize being stuck, reward exploration and sustained movement

        Args:
            is_stuck: Agent failed to make progress
            discovered_new_area: Agent entered an unvisited area
            seconds_of_movement: Seconds of efficient movement

        Returns:
            Movement reward
        """
        w = self.weights
        reward = 0.0
        if is_stuck:
            reward += w.stuck
        if discovered_new_area:
            reward += w.exploration
        reward += _check_amount("seconds_of_movement", seconds_of_movement) * w.efficient_movement
        return reward

    def social_reward(self, helped_player: bool, hindered_player: bool,
                      successful_team_action: bool) -> float:
        """Fixed bonuses and penalties for cooperative or adversarial outcomes"""
        w = self.weights
        reward = 0.0
        if helped_player:
            reward += w.help_player
        if hindered_player:
            reward += w.hinder_player
        if successful_team_action:
            reward += w.teamwork
        return reward

    def calculate_reward(self,
                         combat: Optional[CombatOutcome] = None,
                         movement: Optional[MovementOutcome] = None,
                         social: Optional[SocialOutcome] = None) -> Tuple[float, Dict[str, float]]:
        """
        Sum the categories that apply to one step

        Args:
            combat: Combat outcome, if any
            movement: Movement outcome, if any
            social: Social outcome, if any

        Returns:
            Tuple of (total_reward, reward_breakdown)
        """
        breakdown = {}

        if combat is not None:
            breakdown['combat'] = self.combat_reward(
                combat.damage_dealt, combat.damage_received, combat.made_kill, combat.died
            )
        if movement is not None:
            breakdown['movement'] = self.movement_reward(
                movement.is_stuck, movement.discovered_new_area, movement.seconds_of_movement
            )
        if social is not None:
            breakdown['social'] = self.social_reward(
                social.helped_player, social.hindered_player, social.successful_team_action
            )

        total = float(sum(breakdown.values()))
        logger.debug(f"Shaped reward {total:.3f}: {breakdown}")
        return total, breakdown
