# File: logo_scout/report/html_report.py
"""logo_scout.report.html_report: HTML gallery of logo groups rendered with Jinja2."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional, Union

from jinja2 import Environment, FileSystemLoader, select_autoescape

from logo_scout.clusterer import group_spread
from logo_scout.engine import RunResult

TEMPLATE_NAME = "report.html.j2"
DEFAULT_TEMPLATE_DIR = Path(__file__).parent / "templates"


def render_html(
    result: RunResult,
    template_dir: Optional[Union[Path, str]],
    output_path: Union[Path, str],
) -> Path:
    """Render the HTML report from the template and save it at *output_path*.

    Args:
        result: RunResult of a finished run.
        template_dir: directory with Jinja2 templates; ``None`` uses the bundled one.
        output_path: path of the resulting HTML file.

    Returns:
        Path of the saved HTML file.

    Example:
    ```python
    from logo_scout.report.html_report import render_html
    html_path = render_html(result, template_dir=None, output_path='reports/groups.html')
    ```
    """
    template_dir = Path(template_dir) if template_dir else DEFAULT_TEMPLATE_DIR
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    env = Environment(
        loader=FileSystemLoader(str(template_dir)),
        autoescape=select_autoescape(["html", "xml", "j2"]),
    )
    template = env.get_template(TEMPLATE_NAME)

    context: dict[str, Any] = {
        "groups": [
            {"members": group, "spread": group_spread(group)}
            for group in sorted(result.groups, key=len, reverse=True)
        ],
        "stats": result.stats,
        "missing": result.missing_sites(),
    }

    html_content = template.render(**context)
    output_path.write_text(html_content, encoding="utf-8")

    return output_path
