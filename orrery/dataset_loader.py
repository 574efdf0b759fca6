#!/usr/bin/env python3
"""
Dataset JSON loading utilities.

This module defines the JSON schema and loader for system datasets
(datasets/*.json): an ordered list of bodies with their real-world
quantities, plus optional animation settings.

Schema
======
Dataset JSON (datasets/*.json):
{
  "name": "Human-friendly dataset name",
  "description": "Optional description",
  "time_scale": 1.0,                 # optional, default None
  "settings": {                      # optional ScalingSystem overrides
    "planet_scale": 1.5,
    "distance_spread": 800,
    "sun_radius": 300,
    "global_speed": 1.5
  },
  "planets": [                       # "bodies" is accepted as an alias
    {
      "name": "Earth",
      "type": "planet",
      "radius_km": 6371,
      "distance_from_sun_km": 149598023,
      "orbital_period_days": 365.256,
      "rotation_period_hours": 23.934,
      "mean_anomaly_deg": 358.617,
      "eccentricity": 0.0167,
      "axial_tilt_deg": 23.44,
      "color": [100, 149, 237],
      "satellites": [
        {
          "name": "Moon",
          "radius_km": 1737.4,
          "distance_from_parent_km": 384400,
          "orbital_period_days": 27.322,
          "rotation_period_hours": 655.7
        }
      ]
    }
  ]
}

Records are kept raw here; defaulting happens when bodies are built, so a
dataset with holes in it still loads. Users can add their own JSON files into
the datasets folder and they'll be picked up by the loader.
"""
import json
import logging
import os
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from .errors import DatasetError
from .utils import finite_or_none

DATASETS_DIR = os.path.join(os.path.dirname(os.path.dirname(__file__)), "datasets")
DEFAULT_DATASET = "solar_system.json"

logger = logging.getLogger(__name__)


@dataclass
class Dataset:
  """A loaded dataset: raw body records plus optional settings."""
  name: str
  records: List[dict] = field(default_factory=list)
  description: str = ""
  time_scale: Optional[float] = None
  settings: Dict[str, object] = field(default_factory=dict)


def _read_json(path: str) -> dict:
  try:
    with open(path, "r", encoding="utf-8") as f:
      data = json.load(f)
  except (OSError, ValueError) as exc:
    raise DatasetError(f"cannot read dataset {path}: {exc}") from exc
  if not isinstance(data, dict):
    raise DatasetError(f"dataset {path} must contain a JSON object")
  return data


def resolve_dataset_path(path_or_name: str) -> str:
  """Accept a path to a JSON file or the file name of a bundled dataset."""
  if os.path.isfile(path_or_name):
    return path_or_name
  return os.path.join(DATASETS_DIR, path_or_name)


def list_datasets() -> List[Tuple[str, str]]:
  """Return list of (file_name, display_name) for available datasets."""
  items: List[Tuple[str, str]] = []
  if not os.path.isdir(DATASETS_DIR):
    return items
  for fn in sorted(os.listdir(DATASETS_DIR)):
    if not fn.lower().endswith(".json"):
      continue
    try:
      display = _read_json(os.path.join(DATASETS_DIR, fn)).get("name")
    except DatasetError:
      display = None
    items.append((fn, display or os.path.splitext(fn)[0]))
  return items


def load_dataset(path_or_name: str = DEFAULT_DATASET) -> Dataset:
  """
  Load a dataset JSON by path or bundled file name.
  Raises DatasetError if the file is missing or not a JSON object.
  """
  path = resolve_dataset_path(path_or_name)
  try:
    data = _read_json(path)
  except DatasetError as exc:
    logger.error("%s", exc)
    raise

  display_name = data.get("name") or os.path.splitext(os.path.basename(path))[0]
  raw_bodies = data.get("planets")
  if raw_bodies is None:
    raw_bodies = data.get("bodies", [])
  if not isinstance(raw_bodies, list):
    raise DatasetError(f"dataset {path}: body list must be a JSON array")

  records: List[dict] = []
  for i, b in enumerate(raw_bodies):
    if not isinstance(b, dict):
      logger.warning("%s: skipping body entry %d (not an object)", display_name, i)
      continue
    records.append(b)

  time_scale = finite_or_none(data.get("time_scale"))
  if time_scale is None and data.get("time_scale") is not None:
    logger.warning("%s: ignoring invalid time_scale %r", display_name, data.get("time_scale"))

  settings = data.get("settings") or {}
  if not isinstance(settings, dict):
    logger.warning("%s: ignoring non-object settings block", display_name)
    settings = {}

  logger.info("Loaded dataset '%s' (%d bodies) from %s", display_name, len(records), path)
  return Dataset(
    name=display_name,
    records=records,
    description=str(data.get("description") or ""),
    time_scale=time_scale,
    settings=settings,
  )
