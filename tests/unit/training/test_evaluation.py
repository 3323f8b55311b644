"""Tests for evaluation module."""

import numpy as np
import pytest

from glade.env.decoder import ActionSpec
from glade.rl.model import ActorCritic, TorchPolicy
from glade.scenes import build_balancer_scene, build_jumper_scene
from glade.training.evaluation import EvalStats, evaluate_policy


def test_eval_stats_dataclass() -> None:
    stats = EvalStats(mean_reward=0.5, std_reward=0.0, mean_episode_length=120.5, episodes=2, rewards=[0.5, 0.5])
    assert stats.mean_reward == 0.5
    assert stats.episodes == 2


def test_seeds_must_match_episodes() -> None:
    with pytest.raises(ValueError, match="seeds length"):
        evaluate_policy(lambda rng: build_balancer_scene(), None, episodes=2, seeds=[0])


def test_heuristic_balancer_survives_until_truncation() -> None:
    stats = evaluate_policy(lambda rng: build_balancer_scene(), None, episodes=2, seeds=[0, 1], max_frames=100)
    assert stats.episodes == 2
    assert stats.mean_episode_length == 100
    # Two full seconds of survival per episode.
    assert stats.mean_reward == pytest.approx(0.2)
    assert stats.std_reward == pytest.approx(0.0)


def test_torch_policy_on_jumper() -> None:
    spec = ActionSpec(discrete_branches=(2,))
    policy = TorchPolicy(ActorCritic(obs_dim=2, action_spec=spec, hidden_dim=16), deterministic=True)
    stats = evaluate_policy(lambda rng: build_jumper_scene(), policy, episodes=1, seeds=[3])
    assert stats.episodes == 1
    assert len(stats.rewards) == 1
    assert np.isfinite(stats.mean_reward)
    assert stats.mean_episode_length == 500
