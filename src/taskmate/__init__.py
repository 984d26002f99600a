"""Personal task tracker for the terminal."""
