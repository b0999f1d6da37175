"""
Exercise catalog registry.

The bundled catalog is loaded from YAML at import time.  If loading fails
for any reason (parse error, every entry invalid, missing data files), a
RuntimeError is raised: the application cannot start without a catalog.

Engine functions take the catalog as an argument; this module only
provides the default one used by the CLI.
"""

from ..models import Zone
from .base import Exercise


def _build_catalog() -> tuple[Exercise, ...]:
    from .loader import load_catalog_from_yaml

    loaded = load_catalog_from_yaml()
    if not loaded:
        raise RuntimeError(
            "gym-scheduler: no exercise definitions could be loaded from YAML. "
            "Check that src/gym_scheduler/exercises/*.yaml files are present and valid."
        )
    return tuple(loaded)


def _build_zones() -> tuple[Zone, ...]:
    from .loader import load_default_zones

    return tuple(load_default_zones())


EXERCISE_CATALOG: tuple[Exercise, ...] = _build_catalog()
DEFAULT_ZONES: tuple[Zone, ...] = _build_zones()


def get_exercise(exercise_id: str) -> Exercise:
    """
    Return the catalog Exercise for the given exercise_id.

    Args:
        exercise_id: Catalog identifier, e.g. "bench_press"

    Returns:
        Exercise for the requested id

    Raises:
        ValueError: If exercise_id is not in the catalog
    """
    for exercise in EXERCISE_CATALOG:
        if exercise.exercise_id == exercise_id:
            return exercise
    valid = ", ".join(e.exercise_id for e in EXERCISE_CATALOG)
    raise ValueError(f"Unknown exercise '{exercise_id}'. Valid IDs: {valid}")
