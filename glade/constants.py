from __future__ import annotations

# ==============================================================================
# Observation schemas
# ==============================================================================

# rotation quaternion(4) + to_flower(3) + in_front dot(1) + facing dot(1) + distance(1)
HUMMINGBIRD_OBS_SLOTS = 10

# ball position(3) + platform rotation quaternion(4)
BALANCER_OBS_SLOTS = 7

# player height(1) + target height(1)
JUMPER_OBS_SLOTS = 2

# ==============================================================================
# Flower area
# ==============================================================================

# Diameter of the area where agents and flowers live; normalizes distances.
AREA_DIAMETER = 20.0

# Nectar a flower holds after a reset.
FULL_NECTAR = 1.0

# Random plant pose on reset (degrees).
PLANT_TILT_DEG = 5.0
PLANT_YAW_DEG = 180.0

# ==============================================================================
# Safe spawn
# ==============================================================================

SAFE_SPAWN_RADIUS = 0.05
MAX_SPAWN_ATTEMPTS = 100

# ==============================================================================
# Collider tags
# ==============================================================================

TAG_NECTAR = "nectar"
TAG_FLOWER = "flower"
TAG_BOUNDARY = "boundary"
TAG_TARGET = "target"

# Survival bonus fires once per this many accumulated seconds.
SURVIVAL_PERIOD_S = 1.0

# Tolerance for float accumulation of fixed timesteps.
CLOCK_EPS = 1e-9
