"""Tunable numbers for the pet's needs, moods and progression."""

# Decay, per hour of neglect.
HUNGER_DECAY_RATE = 5.0
BOREDOM_DECAY_RATE = 4.0
# Below this many hours, repeated invocations do not decay at all.
MIN_DECAY_HOURS = 0.005

# Mood rules.
BEHIND_THRESHOLD = 5
BEHIND_HAPPINESS_PENALTY = 15
AHEAD_THRESHOLD = 10
STRESS_THRESHOLD_HOURS = 1.0
HUNGRY_BELOW = 20
LOW_HAPPINESS_BELOW = 30
OLD_BRANCH_WEEKS = 2
OLD_BRANCH_LIMIT = 2
TRUNK_BRANCH_NAMES = frozenset({"main", "master", "develop", "HEAD"})
BOREDOM_THRESHOLD_HOURS = 6.0
PLAY_BOREDOM_FACTOR = 1.5
COMMIT_HAPPINESS_BOOST = 25
CONTENT_HAPPINESS_ABOVE = 85
CONTENT_HUNGER_ABOVE = 60
CARED_FOR_MINUTES = 30
CARED_FOR_HAPPINESS_ABOVE = 60

# Progression.
LEVEL_BASE_EXP = 100
LEVEL_EXP_INCREMENT = 50
LEVEL_UP_HAPPINESS_BOOST = 20
LEVEL_UP_HUNGER_BOOST = 10
LEVEL_ACHIEVEMENTS = (
    (5, "REACH_LEVEL_5", "Reached Level 5"),
    (10, "REACH_LEVEL_10", "Reached Level 10"),
)

# Event rewards.
COMMIT_WITH_CHANGES = 10
MERGE_SUCCESS = 20
RESOLVE_CONFLICT = 40
PUSH_CHANGES = 5
CLEAN_BRANCH = 8

# Interactions.
FEED_HUNGER_GAIN = 25
FEED_HAPPINESS_GAIN = 5
PLAY_HAPPINESS_GAIN = 20
PLAY_HUNGER_LOSS = 8
