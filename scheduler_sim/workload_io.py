from __future__ import annotations

import csv
import json
import logging
from pathlib import Path
from typing import Iterable, List, Sequence, Tuple

from .models import Process
from .presets import palette_color
from .registry import validate_processes

logger = logging.getLogger(__name__)


def load_workload(path: str | Path) -> Tuple[Process, ...]:
    """
    Load a workload from a JSON or CSV file into a tuple of Process descriptors.
    """
    path = Path(path)
    suffix = path.suffix.lower()

    if suffix == ".json":
        processes = _load_json(path)
    elif suffix == ".csv":
        processes = _load_csv(path)
    else:
        raise ValueError(f"Unsupported workload format: {suffix} (use .json or .csv)")

    validate_processes(processes)
    logger.info("Loaded %d processes from %s", len(processes), path)
    return tuple(processes)


def save_workload(path: str | Path, processes: Sequence[Process]) -> Path:
    """
    Write the static descriptor fields of processes to a JSON file.
    """
    path = Path(path)
    payload = [
        {
            "pid": p.pid,
            "name": p.name,
            "arrival_time": p.arrival_time,
            "burst_time": p.burst_time,
            "priority": p.priority,
            "color": p.color,
        }
        for p in processes
    ]
    with path.open("w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2)
        f.write("\n")
    logger.info("Saved %d processes to %s", len(payload), path)
    return path


def _load_json(path: Path) -> List[Process]:
    with path.open("r", encoding="utf-8") as f:
        raw = json.load(f)

    if not isinstance(raw, list):
        raise ValueError("JSON workload must be a list of process objects")

    return [_process_from_mapping(entry, idx) for idx, entry in enumerate(raw)]


def _load_csv(path: Path) -> List[Process]:
    processes: List[Process] = []
    with path.open("r", encoding="utf-8", newline="") as f:
        reader = csv.DictReader(f)
        for idx, row in enumerate(reader):
            processes.append(_process_from_mapping(row, idx))
    return processes


def _first(mapping, keys: Iterable[str]):
    for key in keys:
        value = mapping.get(key)
        if value not in (None, ""):
            return value
    raise KeyError(keys)


def _process_from_mapping(mapping, index: int) -> Process:
    try:
        pid = str(_first(mapping, ("pid", "id")))
        arrival_time = int(mapping["arrival_time"])
        burst_time = int(mapping["burst_time"])
        priority_val = mapping.get("priority")
        priority = int(priority_val) if priority_val not in (None, "") else 0
    except (KeyError, TypeError, ValueError, AttributeError) as exc:
        raise ValueError(f"Invalid process entry: {mapping!r}") from exc

    return Process(
        pid=pid,
        name=str(mapping.get("name") or pid),
        arrival_time=arrival_time,
        burst_time=burst_time,
        priority=priority,
        color=str(mapping.get("color") or palette_color(index)),
        remaining_time=burst_time,
    )
