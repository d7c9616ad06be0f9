from __future__ import annotations

import argparse
import json
import os
import sys
from datetime import date
from typing import Any, Dict, Optional

SCRIPT_DIR = os.path.dirname(os.path.abspath(__file__))
PROJECT_ROOT = os.path.abspath(os.path.join(SCRIPT_DIR, ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)


def load_env_file(env_path: str) -> None:
    if not os.path.exists(env_path):
        return
    with open(env_path, "r", encoding="utf-8") as env_file:
        for line in env_file:
            line = line.strip()
            if not line or line.startswith("#") or "=" not in line:
                continue
            key, value = line.split("=", 1)
            os.environ.setdefault(key, value)


def parse_date(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"Invalid date '{value}', expected YYYY-MM-DD") from exc


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Print the booking profitability report for a tee-time window as JSON."
    )
    parser.add_argument("--start", type=parse_date, default=None, help="Window start (YYYY-MM-DD).")
    parser.add_argument("--end", type=parse_date, default=None, help="Window end (YYYY-MM-DD).")
    parser.add_argument(
        "--time-window",
        default=None,
        help="Relative window such as 30d or 3m, used when --start/--end are omitted.",
    )
    parser.add_argument(
        "--env-file",
        default=".env",
        help="Environment file path (default: .env).",
    )
    parser.add_argument(
        "--camel-case",
        action="store_true",
        help="Emit API-style camelCase keys instead of snake_case.",
    )
    return parser.parse_args()


def run_report(
    start: Optional[date], end: Optional[date], time_window: Optional[str], camel_case: bool
) -> Dict[str, Any]:
    from fairway.api.dependencies import get_profitability_service
    from fairway.core.logging import configure_logging

    configure_logging(os.environ.get("LOG_LEVEL"))
    service = get_profitability_service()
    start_date, end_date = service.resolve_window(start, end, time_window)
    report = service.get_report(start_date, end_date)
    return report.model_dump(mode="json", by_alias=camel_case)


def main() -> int:
    args = parse_args()
    load_env_file(args.env_file)
    from fairway.core.errors import AppError

    try:
        payload = run_report(args.start, args.end, args.time_window, args.camel_case)
    except AppError as exc:
        print(json.dumps({"error": {"code": exc.code, "message": exc.message}}), file=sys.stderr)
        return 1
    print(json.dumps(payload, indent=2, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
