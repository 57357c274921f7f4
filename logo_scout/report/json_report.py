# logo_scout/report/json_report.py

"""
JSON report of a LogoScout run: the groups plus run statistics.
"""
import json
from pathlib import Path

from logo_scout.engine import RunResult
from logo_scout.report.yaml_report import groups_to_data


def render_json(result: RunResult, output_path: Path | str) -> Path:
    """
    Save *result* as JSON at *output_path*.

    :param result: RunResult of a finished run
    :param output_path: path of the JSON file
    :return: Path of the saved file

    Example:
    ```python
    from logo_scout.report.json_report import render_json
    report_path = render_json(result, 'reports/groups.json')
    ```
    """
    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)

    data = {
        'groups': groups_to_data(result.groups),
        'stats': result.stats.as_dict(),
        'missing': result.missing_sites(),
    }

    with output.open('w', encoding='utf-8') as f:
        json.dump(data, f, ensure_ascii=False, indent=2)

    return output
