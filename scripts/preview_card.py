"""
Preview (or commit) the schedule for a single phrase card.

Reads a request body in the same shape the preview endpoint accepts:
    {"card": {...}, "now": "2025-01-01T00:00:00Z", "config": {...}}

Usage:
    # Show all four ratings
    python -m scripts.preview_card request.json

    # Use the forgetting-curve model and print JSON
    python -m scripts.preview_card request.json --model forgetting_curve --json

    # Show what committing a rating would store
    python -m scripts.preview_card request.json --commit good
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Optional

from core.scheduling import PreviewRequest, compute_previews, get_estimator, process_review
from core.scheduling.constants import ALL_RATINGS


def load_request(path: str) -> PreviewRequest:
    """Load a request body from a file path, or stdin for "-"."""
    raw = sys.stdin.read() if path == "-" else Path(path).read_text(encoding="utf-8")
    return PreviewRequest.model_validate(json.loads(raw))


def preview_card(
    request_path: str,
    model: str = "multiplicative",
    as_json: bool = False,
    commit: Optional[str] = None
) -> None:
    request = load_request(request_path)
    estimator = get_estimator(model)

    if commit:
        outcome, event_data = process_review(
            request.card, commit, request.config, request.now, estimator=estimator
        )
        result = {
            "card": outcome.card.model_dump(mode="json"),
            "event": event_data,
        }
        print(json.dumps(result, indent=2, default=str))
        return

    previews = compute_previews(request.card, request.now, request.config, estimator=estimator)

    if as_json:
        print(json.dumps({"success": True, "intervals": previews.model_dump()}, indent=2))
        return

    print(f"{'='*60}")
    print(f"Card {request.card.id} ({request.card.scheduler.state.value}) at {request.now.isoformat()}")
    print(f"{'='*60}")
    for rating in ALL_RATINGS:
        preview = previews.for_rating(rating)
        print(f"{rating.value:<6} {preview.label:>10} {preview.interval_ms:>14,} ms  due {preview.due_at}")


def main():
    parser = argparse.ArgumentParser(
        description="Preview scheduling outcomes for a phrase card"
    )
    parser.add_argument(
        "request",
        help="Path to a JSON request body ('-' for stdin)"
    )
    parser.add_argument(
        "--model",
        default="multiplicative",
        help="Long-term interval model (multiplicative or forgetting_curve)"
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the response JSON instead of a table"
    )
    parser.add_argument(
        "--commit",
        choices=[rating.value for rating in ALL_RATINGS],
        help="Show the updated card and review event for this rating"
    )

    args = parser.parse_args()

    preview_card(
        request_path=args.request,
        model=args.model,
        as_json=args.json,
        commit=args.commit
    )


if __name__ == "__main__":
    main()
