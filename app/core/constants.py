"""Application constants."""

# Exercise filter sentinel meaning "every exercise"
ALL_EXERCISES = "All"

# Chart bars never shrink below this fraction of the full height
MIN_BAR_FRACTION = 0.2
MAX_BAR_FRACTION = 1.0

# CSV export
CSV_HEADER = "Date,Exercise,Sets,Reps,Weight (kg)"
CSV_FILENAME = "workout-history.csv"
