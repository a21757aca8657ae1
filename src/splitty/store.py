"""JSON file storage for events."""

import logging
from pathlib import Path

from .models import Event

logger = logging.getLogger(__name__)


def load_event(path: Path) -> Event:
    """Load an event from a JSON file."""
    event = Event.model_validate_json(path.read_text(encoding="utf-8"))
    logger.debug(
        f"Loaded event '{event.title}' from {path}: "
        f"{len(event.participants)} participants, {len(event.expenses)} expenses"
    )
    return event


def save_event(event: Event, path: Path) -> None:
    """Write an event to a JSON file, replacing its previous contents."""
    path.write_text(event.model_dump_json(indent=2), encoding="utf-8")
    logger.info(f"Saved event '{event.title}' to {path}")
