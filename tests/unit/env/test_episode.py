import pytest

from glade.env.episode import EpisodeState


def test_begin_resets_reward_and_steps():
    ep = EpisodeState()
    ep.begin()
    ep.add_reward(0.5)
    ep.advance()
    ep.end("a", "done")

    ep.begin()
    assert ep.cumulative_reward == 0.0
    assert ep.step_count == 0
    assert ep.active
    assert ep.episode_index == 1


def test_reward_only_accumulates_while_active():
    ep = EpisodeState()
    with pytest.raises(RuntimeError):
        ep.add_reward(1.0)
    with pytest.raises(RuntimeError):
        ep.advance()


def test_end_summarizes_and_deactivates():
    ep = EpisodeState()
    ep.begin()
    ep.add_reward(0.25)
    ep.add_reward(-1.0)
    for _ in range(3):
        ep.advance()

    summary = ep.end("balancer", "ball_fell")
    assert not ep.active
    assert summary.agent_id == "balancer"
    assert summary.episode_index == 0
    assert summary.cumulative_reward == pytest.approx(-0.75)
    assert summary.step_count == 3
    assert summary.to_dict()["reason"] == "ball_fell"
