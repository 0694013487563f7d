"""Load volunteers and events from a YAML seed file into a DataStore.

File layout::

    volunteers:
      - id: 1
        full_name: Ada Lovelace
        location: Houston
        skills: [first aid, logistics]
        preferences: community
        availability: {start: 2025-01-01T00:00:00Z, end: 2025-12-31T23:59:59Z}
    events:
      - id: 10
        name: Food Drive
        location: Houston
        required_skills: first aid, logistics
        start_time: 2025-03-01T09:00:00Z
        end_time: 2025-03-01T17:00:00Z
        preference_tag: community
"""

from pathlib import Path
from typing import Any, Dict, List, Tuple, Union

import yaml
from pydantic import ValidationError as PydanticValidationError

from app.domain.exceptions import ValidationError
from app.domain.models import Event, Volunteer
from app.logging import get_logger

from .base import DataStore

logger = get_logger(__name__, component="seed")


def load_seed_file(path: Union[str, Path]) -> Tuple[List[Volunteer], List[Event]]:
    """
    Parse a seed file into domain models.

    Args:
        path: Path to the YAML seed file

    Returns:
        Tuple of (volunteers, events)

    Raises:
        ValidationError: If the file is unreadable or any record is malformed
    """
    path = Path(path)
    try:
        with open(path, "r") as f:
            document = yaml.safe_load(f)
    except OSError as e:
        raise ValidationError(f"Cannot read seed file {path}: {e}")
    except yaml.YAMLError as e:
        raise ValidationError(f"Seed file {path} is not valid YAML: {e}")

    if document is None:
        return [], []
    if not isinstance(document, dict):
        raise ValidationError(f"Seed file {path} must contain a mapping at the top level")

    errors: List[str] = []
    volunteers = _parse_records(document.get("volunteers"), "volunteers", Volunteer, "volunteer_id", errors)
    events = _parse_records(document.get("events"), "events", Event, "event_id", errors)

    for section, records, id_attr in (
        ("volunteers", volunteers, "volunteer_id"),
        ("events", events, "event_id"),
    ):
        seen = set()
        for record in records:
            record_id = getattr(record, id_attr)
            if record_id in seen:
                errors.append(f"{section}: duplicate id {record_id}")
            seen.add(record_id)

    if errors:
        raise ValidationError(f"Seed file {path} contains malformed records", errors=errors)

    return volunteers, events


def seed_store(store: DataStore, path: Union[str, Path]) -> Tuple[int, int]:
    """
    Load a seed file and save every record into the store.

    Existing records with the same id are overwritten.

    Returns:
        Tuple of (volunteer_count, event_count)
    """
    volunteers, events = load_seed_file(path)

    for volunteer in volunteers:
        store.save_volunteer(volunteer)
    for event in events:
        store.save_event(event)

    logger.info(
        f"Seeded {len(volunteers)} volunteers and {len(events)} events from {path}",
        extra={
            "event": "seed.loaded",
            "volunteer_count": len(volunteers),
            "event_count": len(events),
            "backend": store.backend_name,
        },
    )
    return len(volunteers), len(events)


def _parse_records(raw: Any, section: str, model, id_field: str, errors: List[str]) -> list:
    if raw is None:
        return []
    if not isinstance(raw, list):
        errors.append(f"{section}: expected a list, got {type(raw).__name__}")
        return []

    records = []
    for index, item in enumerate(raw):
        if not isinstance(item, dict):
            errors.append(f"{section}[{index}]: expected a mapping")
            continue

        data: Dict[str, Any] = dict(item)
        if "id" in data and id_field not in data:
            data[id_field] = data.pop("id")

        record_id = data.get(id_field)
        if isinstance(record_id, bool) or not isinstance(record_id, int) or record_id <= 0:
            errors.append(f"{section}[{index}]: id must be a positive integer, got {record_id!r}")
            continue

        try:
            records.append(model.model_validate(data))
        except PydanticValidationError as e:
            for error in e.errors():
                field_path = ".".join(str(loc) for loc in error["loc"])
                errors.append(f"{section}[{index}].{field_path}: {error['msg']}")

    return records
