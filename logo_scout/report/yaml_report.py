# logo_scout/report/yaml_report.py

"""
The canonical ``groups.yaml`` document: a list of groups, each a list of
``{site, logoUrl, hash}`` mappings.
"""
from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Sequence, Union

import yaml

from logo_scout.models import Group

GroupData = List[List[Dict[str, str]]]


def groups_to_data(groups: Sequence[Group]) -> GroupData:
    return [[record.as_dict() for record in group] for group in groups]


def render_yaml(groups: Sequence[Group], output_path: Union[Path, str]) -> Path:
    """Write *groups* as YAML and return the path of the file."""
    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)
    with output.open("w", encoding="utf-8") as f:
        yaml.safe_dump(groups_to_data(groups), f, allow_unicode=True, sort_keys=False, default_flow_style=False)
    return output


def load_groups(path: Union[Path, str]) -> GroupData:
    """Read a groups document written by :func:`render_yaml`."""
    p = Path(path)
    if not p.is_file():
        raise FileNotFoundError(f"Groups file not found: {p}")
    try:
        data = yaml.safe_load(p.read_text(encoding="utf-8")) or []
    except yaml.YAMLError as exc:
        raise ValueError(f"Invalid YAML in {p}: {exc}") from exc
    if not isinstance(data, list) or not all(isinstance(g, list) for g in data):
        raise TypeError(f"{p} must contain a list of groups")
    return data
