"""Simulation defaults and tunables, overridable through the environment."""

import os

# Default parameters for a fresh simulator
DEFAULT_PROBABILITY = float(os.getenv("STATSIM_PROBABILITY", "0.5"))
DEFAULT_TRIALS = int(os.getenv("STATSIM_TRIALS", "100"))
DEFAULT_EXPERIMENTS = int(os.getenv("STATSIM_EXPERIMENTS", "1000"))

# Pause between experiments so clients can render incremental progress
DEFAULT_DELAY_MS = int(os.getenv("STATSIM_DELAY_MS", "30"))
MIN_ANIMATION_SPEED_MS = 10
MAX_ANIMATION_SPEED_MS = 200

# None means a freshly seeded generator per simulator
_seed = os.getenv("STATSIM_SEED")
RANDOM_SEED = int(_seed) if _seed else None

# Absorbs round-trip error from parsing probabilities typed as text
PROBABILITY_TOLERANCE = 1e-10

# Capped-bin histogram policy
MAX_HISTOGRAM_BINS = 20
