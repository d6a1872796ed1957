"""
Read/write adapter for the stored carousel ``parents`` representation.

Two stored shapes exist:

- current: a list of parent groups, each ``{"title", "dropdowns": [...]}``
- legacy: a flat list of dropdown entries, stored either in the old
  ``dropdowns`` column or directly in ``parents``

Everything above the store only ever sees the current shape.
"""

import json
import logging
from typing import Any


logger = logging.getLogger(__name__)


def _load_json_list(raw: str | None, column: str) -> list:
    if not raw:
        return []
    try:
        value = json.loads(raw)
    except (TypeError, ValueError):
        logger.warning("Ignoring unparseable carousel %s column", column)
        return []
    if not isinstance(value, list):
        logger.warning("Ignoring carousel %s column that is not a list", column)
        return []
    return value


def _coerce_competition_id(value: Any) -> int | None:
    if value is None or value == "":
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def normalize_dropdown(entry: Any) -> dict:
    if not isinstance(entry, dict):
        return {"title": str(entry) if entry is not None else None, "content": None, "competition_id": None}
    return {
        "title": entry.get("title"),
        "content": entry.get("content"),
        "competition_id": _coerce_competition_id(entry.get("competition_id")),
    }


def _is_parent_group(entry: Any) -> bool:
    return isinstance(entry, dict) and "dropdowns" in entry


def normalize_parents(raw_parents: str | None, raw_dropdowns: str | None = None) -> list[dict]:
    parents = _load_json_list(raw_parents, "parents")

    if parents and any(_is_parent_group(entry) for entry in parents):
        groups = []
        for entry in parents:
            if _is_parent_group(entry):
                dropdowns = entry.get("dropdowns") or []
                if not isinstance(dropdowns, list):
                    dropdowns = []
                groups.append({
                    "title": entry.get("title"),
                    "dropdowns": [normalize_dropdown(dropdown) for dropdown in dropdowns],
                })
            else:
                # Stray flat entry mixed into the hierarchical list.
                groups.append({"title": None, "dropdowns": [normalize_dropdown(entry)]})
        return groups

    legacy = parents or _load_json_list(raw_dropdowns, "dropdowns")
    if not legacy:
        return []
    return [{"title": None, "dropdowns": [normalize_dropdown(entry) for entry in legacy]}]


def serialize_parents(parents: list[dict] | None) -> str:
    groups = []
    for parent in parents or []:
        groups.append({
            "title": parent.get("title"),
            "dropdowns": [normalize_dropdown(dropdown) for dropdown in parent.get("dropdowns") or []],
        })
    return json.dumps(groups)


def referenced_competition_ids(groups: list[dict]) -> set[int]:
    return {
        dropdown["competition_id"]
        for group in groups
        for dropdown in group["dropdowns"]
        if dropdown["competition_id"] is not None
    }


def attach_competitions(groups: list[dict], competitions: dict[int, Any]) -> list[dict]:
    for group in groups:
        for dropdown in group["dropdowns"]:
            competition = competitions.get(dropdown["competition_id"])
            dropdown["competition_name"] = competition.name if competition else None
            dropdown["competition_icon"] = competition.icon if competition else None
    return groups
