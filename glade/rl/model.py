from __future__ import annotations

import numpy as np
import torch
from torch import nn

from ..env.decoder import ActionSpec

# Epsilon for numerical stability in tanh squashing (consistent throughout)
TANH_EPS = 1e-6


def _atanh(x: torch.Tensor) -> torch.Tensor:
    # Clamp to avoid atanh(±1) = ±inf; use 1 - TANH_EPS for consistency
    x = torch.clamp(x, -1.0 + TANH_EPS, 1.0 - TANH_EPS)
    return 0.5 * (torch.log1p(x) - torch.log1p(-x))


class ActorCritic(nn.Module):
    """Feed-forward actor-critic for a flat observation vector.

    Continuous specs get a tanh-squashed Gaussian head (actions in [-1, 1]);
    discrete specs get one categorical head per branch.
    """

    def __init__(self, obs_dim: int, action_spec: ActionSpec, hidden_dim: int = 128):
        super().__init__()
        self.obs_dim = int(obs_dim)
        self.action_spec = action_spec
        self.hidden_dim = int(hidden_dim)

        self.encoder = nn.Sequential(
            nn.Linear(self.obs_dim, self.hidden_dim),
            nn.Tanh(),
            nn.Linear(self.hidden_dim, self.hidden_dim),
            nn.Tanh(),
        )
        if action_spec.is_discrete:
            self.branches = list(action_spec.discrete_branches)
            self.actor = nn.Linear(self.hidden_dim, sum(self.branches))
            self.actor_logstd = None
        else:
            self.branches = []
            self.actor = nn.Linear(self.hidden_dim, action_spec.continuous_size)
            self.actor_logstd = nn.Parameter(torch.zeros(action_spec.continuous_size))
        self.critic = nn.Linear(self.hidden_dim, 1)

        # Small init helps keep early actions mild.
        nn.init.orthogonal_(self.actor.weight, gain=0.01)
        nn.init.zeros_(self.actor.bias)
        nn.init.orthogonal_(self.critic.weight, gain=1.0)
        nn.init.zeros_(self.critic.bias)

    def get_action_and_value(
        self,
        obs: torch.Tensor,
        action: torch.Tensor | None = None,
        deterministic: bool = False,
    ) -> tuple[torch.Tensor, torch.Tensor, torch.Tensor, torch.Tensor]:
        """
        obs: [batch, obs_dim]
        action: optional [batch, action_size]; continuous actions in [-1, 1]
        returns (action, logprob, entropy, value)
        """
        x = self.encoder(obs.float())
        value = self.critic(x).squeeze(-1)
        if self.action_spec.is_discrete:
            action, logprob, entropy = self._discrete_head(x, action, deterministic)
        else:
            action, logprob, entropy = self._continuous_head(x, action, deterministic)
        return action, logprob, entropy, value

    def _continuous_head(
        self, x: torch.Tensor, action: torch.Tensor | None, deterministic: bool
    ) -> tuple[torch.Tensor, torch.Tensor, torch.Tensor]:
        assert self.actor_logstd is not None
        mean = self.actor(x)
        std = torch.exp(self.actor_logstd.expand_as(mean))
        dist = torch.distributions.Normal(mean, std)

        if action is None:
            u = mean if deterministic else dist.rsample()
            action = torch.tanh(u)
        else:
            action = action.float()
            u = _atanh(action)

        # Log-prob with Jacobian correction for tanh squashing
        log_jacobian = torch.log(1.0 - action.pow(2) + TANH_EPS).sum(-1)
        logprob = dist.log_prob(u).sum(-1) - log_jacobian
        entropy = dist.entropy().sum(-1) + log_jacobian
        return action, logprob, entropy

    def _discrete_head(
        self, x: torch.Tensor, action: torch.Tensor | None, deterministic: bool
    ) -> tuple[torch.Tensor, torch.Tensor, torch.Tensor]:
        logits = torch.split(self.actor(x), self.branches, dim=-1)
        dists = [torch.distributions.Categorical(logits=lg) for lg in logits]

        if action is None:
            picks = [lg.argmax(-1) if deterministic else d.sample() for lg, d in zip(logits, dists, strict=True)]
            action = torch.stack(picks, dim=-1)
        action = action.long()

        logprob = torch.stack([d.log_prob(action[..., i]) for i, d in enumerate(dists)], dim=-1).sum(-1)
        entropy = torch.stack([d.entropy() for d in dists], dim=-1).sum(-1)
        return action, logprob, entropy

    @torch.no_grad()
    def get_value(self, obs: torch.Tensor) -> torch.Tensor:
        return self.critic(self.encoder(obs.float())).squeeze(-1)


class TorchPolicy:
    """Adapts an ActorCritic to the loop's Policy interface."""

    def __init__(self, model: ActorCritic, deterministic: bool = False, device: torch.device | None = None):
        self.model = model
        self.deterministic = deterministic
        self.device = device or torch.device("cpu")
        self.model.to(self.device)

    @torch.no_grad()
    def act(self, observation: np.ndarray, action_spec: ActionSpec) -> np.ndarray:
        if action_spec != self.model.action_spec:
            raise ValueError(f"Policy was built for {self.model.action_spec}, asked for {action_spec}")
        obs = torch.as_tensor(observation, dtype=torch.float32, device=self.device).unsqueeze(0)
        action, _, _, _ = self.model.get_action_and_value(obs, deterministic=self.deterministic)
        return action.squeeze(0).cpu().numpy()
