"""Pure planning engine: recurrence, projection, equipment, adaptation, plates."""
