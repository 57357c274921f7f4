# File: logo_scout/report/__init__.py
"""logo_scout.report: serialization of logo groups (YAML, JSON, HTML) used by the CLI and tests."""

from __future__ import annotations

from .html_report import render_html
from .json_report import render_json
from .yaml_report import groups_to_data, load_groups, render_yaml

__all__ = ["groups_to_data", "load_groups", "render_yaml", "render_json", "render_html"]
