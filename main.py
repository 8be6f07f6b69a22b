"""
Main Entry Point: EyeAI learning core
Trains a Q-learning agent with prioritized replay on the corridor scenario
"""
import argparse
import logging

from eye_ai.config import config
from eye_ai.core.environment import CorridorEnvironment
from eye_ai.learning import EpsilonSchedule, PrioritizedReplayBuffer, QLearningAgent, ReplayTrainer
from eye_ai.utils.logger import setup_logger

def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Train a tabular agent with prioritized experience replay")
    parser.add_argument("--episodes", type=int, default=200, help="Number of training episodes")
    parser.add_argument("--corridor-length", type=int, default=8, help="Cells between start and exit")
    parser.add_argument("--max-steps", type=int, default=50, help="Step limit per episode")
    parser.add_argument("--capacity", type=int, default=config.REPLAY_BUFFER_SIZE, help="Replay buffer capacity")
    parser.add_argument("--batch-size", type=int, default=config.BATCH_SIZE, help="Replay batch size")
    parser.add_argument("--train-every", type=int, default=1, help="Environment steps per training step")
    parser.add_argument("--seed", type=int, default=None, help="Seed for environment, agent and buffer")
    parser.add_argument("--verbose", action="store_true", help="Detailed logging")
    return parser.parse_args(argv)

def run_training(args, logger: logging.Logger) -> dict:
    """
    Run the full decide -> shape -> store -> train loop

    Returns:
        Summary with the final greedy rollout and trainer statistics
    """
    env = CorridorEnvironment(length=args.corridor_length, max_steps=args.max_steps, seed=args.seed)
    agent = QLearningAgent(seed=args.seed, exploration_rate=1.0)
    replay_buffer = PrioritizedReplayBuffer(capacity=args.capacity, seed=args.seed)
    trainer = ReplayTrainer(agent, replay_buffer, batch_size=args.batch_size)
    schedule = EpsilonSchedule(start=1.0, end=config.EPSILON_END, decay_steps=max(1, args.episodes * 3 // 4))

    total_steps = 0
    exits = 0
    for episode in range(args.episodes):
        schedule.apply(agent, episode)
        state = env.reset()
        done = False
        info = {}
        while not done:
            action = agent.decide_action(state)
            next_state, reward, done, info = env.step(action)
            replay_buffer.push(state, action, reward, next_state, terminal=info['reached_exit'])
            state = next_state
            total_steps += 1
            if total_steps % args.train_every == 0:
                trainer.train_step()

        exits += int(info['reached_exit'])
        if (episode + 1) % max(1, args.episodes // 10) == 0:
            logger.info(f"Episode {episode + 1}/{args.episodes} | reward: {info['episode_reward']:.1f} | "
                        f"steps: {info['episode_length']} | epsilon: {agent.get_exploration_rate():.3f} | "
                        f"exits: {exits}")

    # Greedy rollout with the learned table
    agent.set_exploration_rate(0.0)
    state = env.reset()
    done = False
    while not done:
        state, _, done, info = env.step(agent.decide_action(state))

    summary = {
        'episodes': args.episodes,
        'exits': exits,
        'greedy_reached_exit': info['reached_exit'],
        'greedy_steps': info['episode_length'],
        'trainer': trainer.get_statistics(),
    }
    logger.info(f"Greedy rollout: reached exit={summary['greedy_reached_exit']} in {summary['greedy_steps']} steps")
    logger.info(f"Q-table states: {summary['trainer']['agent']['state_count']} | "
                f"training steps: {summary['trainer']['step_count']}")
    return summary

def main(argv=None):
    """Main entry point"""
    args = parse_args(argv)
    logger = setup_logger("eye_ai", detailed=args.verbose)

    print("\n" + "=" * 80)
    print(" " * 25 + "EYEAI LEARNING CORE")
    print(" " * 18 + "Prioritized Replay + Tabular Q-Learning")
    print("=" * 80 + "\n")

    logger.info(f"Episodes: {args.episodes} | Corridor: {args.corridor_length} | "
                f"Capacity: {args.capacity} | Batch: {args.batch_size}")
    return run_training(args, logger)

if __name__ == "__main__":
    main()
