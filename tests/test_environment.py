"""
Tests for the corridor training scenario and the training entry point.

Tests cover:
- Movement, blocking and combat rules with shaped rewards
- Episode termination
- End-to-end training run through main()
"""

import sys
import os

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import pytest
from eye_ai.core.environment import CorridorEnvironment, CorridorState
from eye_ai.core.errors import ConstructionError, InvalidArgumentError
from eye_ai.learning.state import Action
import main as entry_point


def walk_to_hostile(env: CorridorEnvironment):
    for _ in range(env.hostile_position - 1):
        env.step(Action.MOVE_TO)


class TestCorridorEnvironment:
    def test_reset(self):
        env = CorridorEnvironment(length=8, seed=0)
        assert env.reset() == CorridorState(position=0, hostile_alive=True)
        assert env.hostile_position == 4

    @pytest.mark.parametrize("kwargs", [{"length": 2}, {"max_steps": 0}])
    def test_rejects_invalid_parameters(self, kwargs):
        with pytest.raises(ConstructionError):
            CorridorEnvironment(**kwargs)

    def test_moving_into_new_cell(self):
        env = CorridorEnvironment(seed=0)
        env.reset()
        state, reward, done, info = env.step(Action.MOVE_TO)
        assert state.position == 1
        assert reward == pytest.approx(21.0)
        assert not done
        assert info['reward_breakdown'] == {'movement': 21.0}

    def test_revisiting_a_cell_earns_only_movement(self):
        env = CorridorEnvironment(seed=0)
        env.reset()
        env.step(Action.MOVE_TO)
        env.step(Action.MOVE_TO)
        state, reward, _, _ = env.step(Action.FLEE_FROM)
        assert state.position == 1
        assert reward == pytest.approx(1.0)
        _, reward, _, _ = env.step(Action.MOVE_TO)
        assert reward == pytest.approx(1.0)

    def test_flee_at_start_is_stuck(self):
        env = CorridorEnvironment(seed=0)
        env.reset()
        state, reward, _, _ = env.step(Action.FLEE_FROM)
        assert state.position == 0
        assert reward == pytest.approx(-5.0)

    def test_other_actions_are_stuck(self):
        env = CorridorEnvironment(seed=0)
        env.reset()
        for action in (Action.IDLE, Action.USE_ITEM, Action.CHAT_MESSAGE, Action.ATTACK_ENTITY):
            state, reward, _, _ = env.step(action)
            assert state.position == 0
            assert reward == pytest.approx(-5.0)

    def test_live_hostile_blocks_and_hits_back(self):
        env = CorridorEnvironment(seed=0)
        env.reset()
        walk_to_hostile(env)
        state, reward, _, info = env.step(Action.MOVE_TO)
        assert state == CorridorState(position=3, hostile_alive=True)
        assert reward in (pytest.approx(-20.0), pytest.approx(-35.0))
        assert set(info['reward_breakdown']) == {'combat', 'movement'}

    def test_killing_hostile_opens_the_corridor(self):
        env = CorridorEnvironment(seed=0)
        env.reset()
        walk_to_hostile(env)
        state, reward, _, info = env.step(Action.ATTACK_ENTITY)
        assert state == CorridorState(position=3, hostile_alive=False)
        assert reward == pytest.approx(110.0)
        assert info['reward_breakdown'] == {'combat': 110.0}

        state, reward, _, _ = env.step(Action.MOVE_TO)
        assert state.position == 4
        assert reward == pytest.approx(21.0)

    def test_reaching_exit_ends_episode(self):
        env = CorridorEnvironment(length=8, seed=0)
        env.reset()
        walk_to_hostile(env)
        env.step(Action.ATTACK_ENTITY)
        done = False
        info = {}
        while not done:
            _, _, done, info = env.step(Action.MOVE_TO)
        assert info['reached_exit']
        assert env.position == 7
        assert info['episode_length'] == 3 + 1 + 4
        assert info['episode_reward'] == pytest.approx(3 * 21.0 + 110.0 + 4 * 21.0)

    def test_step_limit_ends_episode(self):
        env = CorridorEnvironment(max_steps=3, seed=0)
        env.reset()
        results = [env.step(Action.IDLE) for _ in range(3)]
        assert [done for _, _, done, _ in results] == [False, False, True]
        assert not results[-1][3]['reached_exit']

    def test_unknown_action_raises(self):
        env = CorridorEnvironment(seed=0)
        env.reset()
        with pytest.raises(InvalidArgumentError):
            env.step(42)

    def test_reset_restores_hostile(self):
        env = CorridorEnvironment(seed=0)
        env.reset()
        walk_to_hostile(env)
        env.step(Action.ATTACK_ENTITY)
        assert env.reset() == CorridorState(0, True)
        assert env.episode_reward == 0.0


class TestMain:
    def test_short_training_run(self):
        summary = entry_point.main([
            "--episodes", "5",
            "--max-steps", "20",
            "--capacity", "64",
            "--batch-size", "8",
            "--seed", "0",
        ])
        assert summary['episodes'] == 5
        assert 0 <= summary['exits'] <= 5
        assert summary['greedy_steps'] <= 20
        assert summary['trainer']['step_count'] > 0
        assert 0 < summary['trainer']['buffer']['buffer_size'] <= 64
        assert summary['trainer']['errors']['total_errors'] == 0
