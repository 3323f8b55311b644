from .config import BalancerConfig, HummingbirdConfig, JumperConfig, LoopConfig
from .env.loop import AgentEnvironmentLoop
from .scenes import build_balancer_scene, build_hummingbird_scene, build_jumper_scene

__all__ = [
    "AgentEnvironmentLoop",
    "BalancerConfig",
    "HummingbirdConfig",
    "JumperConfig",
    "LoopConfig",
    "build_balancer_scene",
    "build_hummingbird_scene",
    "build_jumper_scene",
]
