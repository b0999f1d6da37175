"""Engine settings loading."""
