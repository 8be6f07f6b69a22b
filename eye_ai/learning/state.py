"""
State and action keys for tabular learning
Discretizes raw agent observations into immutable, hashable table keys
"""
import logging
from dataclasses import dataclass
from enum import IntEnum

logger = logging.getLogger(__name__)

class Action(IntEnum):
    """Discrete actions an agent can take"""
    MOVE_TO = 0
    ATTACK_ENTITY = 1
    USE_ITEM = 2
    INTERACT_BLOCK = 3
    CHAT_MESSAGE = 4
    FOLLOW_PLAYER = 5
    FLEE_FROM = 6
    IDLE = 7

# Discretization settings
HEALTH_BUCKETS = 5  # Max health is 20.0
MAX_HEALTH = 20.0
HUNGER_BUCKETS = 4  # Max hunger is 20
MAX_HUNGER = 20
MAX_COUNTED_ENTITIES = 3  # Counts above this collapse into one bucket
LIGHT_BUCKETS = 3  # Light level 0-15
MAX_LIGHT = 15
DAY_LENGTH_TICKS = 24000
NIGHT_START_TICK = 13000


def _bucket(value: float, max_value: float, buckets: int) -> int:
    ratio = min(max(value / max_value, 0.0), 1.0)
    # ratio == 1.0 belongs to the top bucket
    return min(int(ratio * buckets), buckets - 1)


@dataclass(frozen=True)
class GameStateKey:
    """
    Discretized state descriptor used as a Q-table key
    Structural equality and a stable hash, never a reference to a live entity
    """
    health_bucket: int
    hunger_bucket: int
    nearby_hostiles: int
    nearby_players: int
    is_day: bool
    light_bucket: int

    @classmethod
    def from_observation(cls, health: float, hunger: int, hostile_count: int,
                         player_count: int, time_of_day: int, light_level: int) -> "GameStateKey":
        """
        Build a key from raw observation values

        Args:
            health: Agent health (0-20)
            hunger: Agent hunger (0-20)
            hostile_count: Hostile entities in range
            player_count: Players in range
            time_of_day: World time in ticks
            light_level: Light level at the agent (0-15)

        Returns:
            Discretized key
        """
        return cls(
            health_bucket=_bucket(health, MAX_HEALTH, HEALTH_BUCKETS),
            hunger_bucket=_bucket(hunger, MAX_HUNGER, HUNGER_BUCKETS),
            nearby_hostiles=min(max(int(hostile_count), 0), MAX_COUNTED_ENTITIES),
            nearby_players=min(max(int(player_count), 0), MAX_COUNTED_ENTITIES),
            is_day=(int(time_of_day) % DAY_LENGTH_TICKS) < NIGHT_START_TICK,
            light_bucket=_bucket(light_level, MAX_LIGHT, LIGHT_BUCKETS),
        )
