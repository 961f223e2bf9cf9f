"""
Threshold Constants

Centralized numeric parameters of the availability score, the weight
bounds and the simulation sampling bands.

IMPORTANT: The score formula and the tie-break rely on these exact values.
Changing them changes which provider owns a slot.
"""

# ============================================================================
# Availability Score
# SYNC WITH: slot_allocator/algorithms/availability_score.py
# ============================================================================

# Exponent rate of the scarcity bonus e^(-DECAY_RATE * (capacity - 1))
DECAY_RATE = 1.2

# Scores are truncated (not rounded) to this many places before comparison
SCORE_DECIMALS = 2


# ============================================================================
# Weights
# SYNC WITH: slot_allocator/engine/models.py (Weights)
# ============================================================================

MIN_WEIGHT = 0.1
MAX_WEIGHT = 0.9
DEFAULT_W1 = 0.8  # 0.8 * remaining + 0.2 * scarcity
WEIGHT_DECIMALS = 10


# ============================================================================
# Simulation Sampling Bands (rank fraction [start, end) of resolver output)
# SYNC WITH: slot_allocator/engine/simulation.py
# ============================================================================

STAGE1_BAND = (0.0, 0.2)  # Widened to at least one entry
STAGE2_BAND = (0.2, 0.5)
STAGE3_BAND = (0.5, 0.7)


# ============================================================================
# Simulation Timing Defaults (milliseconds)
# ============================================================================

ITERATION_PERIOD_MS = 1440
VISIBILITY_DELAY_MS = 480
SETTLE_DELAY_MS = 240
