# hopcrawl/report/json_report.py

"""
JSON report for hopcrawl: serializes the visited-page rows to a file.
"""
import json
from pathlib import Path
from typing import Any, Dict, List


def render_json(rows: List[Dict[str, Any]], output_path: Path | str, pretty: bool = True) -> Path:
    """
    Save *rows* as JSON at *output_path*, creating parent directories.

    :param rows: one mapping per visited page
    :param output_path: path of the JSON file
    :param pretty: indent the output by 2 spaces
    :return: Path of the saved file

    Example:
    ```python
    from hopcrawl.report.json_report import render_json
    report_path = render_json(rows, 'reports/crawl.json')
    ```
    """
    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)

    with output.open('w', encoding='utf-8') as f:
        json.dump(rows, f, ensure_ascii=False, indent=2 if pretty else None)

    return output
