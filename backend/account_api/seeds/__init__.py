"""Reference data seeds."""
