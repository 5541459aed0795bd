"""Write the idea API's OpenAPI document, or check a committed copy for drift.

Run with:  python -m scripts.export_openapi [--out PATH] [--check]
"""
from __future__ import annotations

import argparse
import json
import os
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from ideagen.main import create_app

DEFAULT_OUT = Path(__file__).resolve().parents[1] / "openapi.json"


def render_schema() -> str:
    schema: Dict[str, Any] = create_app().openapi()
    return json.dumps(schema, indent=2, sort_keys=True) + "\n"


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Export the idea generation OpenAPI schema")
    parser.add_argument(
        "--out",
        type=Path,
        default=Path(os.getenv("OPENAPI_OUT", str(DEFAULT_OUT))),
        help="Destination file (default: openapi.json at the repo root)",
    )
    parser.add_argument(
        "--check",
        action="store_true",
        help="Exit 1 if the destination differs from the live schema instead of writing it",
    )
    args = parser.parse_args(argv)

    rendered = render_schema()
    out: Path = args.out.resolve()
    if args.check:
        current = out.read_text(encoding="utf-8") if out.exists() else ""
        if current != rendered:
            print(f"{out} is out of date; re-run without --check", file=sys.stderr)
            return 1
        print(f"{out} is up to date")
        return 0

    out.write_text(rendered, encoding="utf-8")
    print(f"Wrote {out}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
