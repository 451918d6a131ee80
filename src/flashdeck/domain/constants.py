"""Centralized constants for the flashdeck scheduler.

All magic numbers and scheduling defaults live here so every layer
imports from a single source of truth.
"""

# ---------- Easiness factor ----------
MIN_EASINESS_FACTOR = 1.3
INITIAL_EASINESS_FACTOR = 2.5

# ---------- Learning steps (minutes) ----------
LEARNING_STEPS_MINUTES = (1, 10)
RELEARNING_STEPS_MINUTES = (10,)

# Consecutive GOOD ratings needed to leave LEARNING
LEARNING_GRADUATION_REPETITIONS = 2

# ---------- SM-2 intervals (days) ----------
FIRST_INTERVAL_DAYS = 1
SECOND_INTERVAL_DAYS = 6
GRADUATING_INTERVAL_DAYS = 1

# ---------- Time ----------
SECONDS_PER_MINUTE = 60
SECONDS_PER_DAY = 86400

# ---------- Interval formatting ----------
DAYS_PER_WEEK = 7
DAYS_PER_MONTH = 30
MAX_DAYS_DISPLAY = 30
MAX_WEEKS_DISPLAY_DAYS = 90
