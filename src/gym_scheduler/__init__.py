"""gym-scheduler: recurring workout planning and zone-aware session adaptation."""

__version__ = "0.1.0"
