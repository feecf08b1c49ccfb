"""JSON output for `--json` views."""

import json
import sys
from pathlib import Path


def export_json(data, output: str | None = None) -> None:
    """Write `data` as indented JSON to `output`, or to stdout if None."""
    text = json.dumps(data, indent=2, ensure_ascii=False)
    if output:
        Path(output).parent.mkdir(parents=True, exist_ok=True)
        with open(output, 'w', encoding='utf-8') as f:
            f.write(text + '\n')
        print(f"Exported JSON to {output}")
    else:
        print(text)
