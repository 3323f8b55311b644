import dataclasses

import pytest

from glade.config import BalancerConfig, HummingbirdConfig, JumperConfig, LoopConfig
from glade.server.config import Settings


def test_defaults():
    assert LoopConfig().dt == 0.02
    assert HummingbirdConfig().max_pitch_angle == 80.0
    assert BalancerConfig().max_rotation_angle == 45.0
    assert JumperConfig().upward_force == 100.0
    assert JumperConfig().target_tag == "target"


def test_configs_are_frozen():
    with pytest.raises(dataclasses.FrozenInstanceError):
        LoopConfig().dt = 0.1  # type: ignore[misc]


def test_settings_from_environment(monkeypatch):
    monkeypatch.setenv("GLADE_PORT", "9001")
    monkeypatch.setenv("GLADE_HOST", "127.0.0.1")
    settings = Settings()
    assert settings.PORT == 9001
    assert settings.HOST == "127.0.0.1"
