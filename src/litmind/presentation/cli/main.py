"""
CLI entry point

Operator commands for generating and inspecting recommendations.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from typing import List, Optional

from dotenv import find_dotenv, load_dotenv

from litmind.application.services.recommendation_service import RecommendationService
from litmind.domain.recommendation import Recommendation, RecommendationError

# Load local .env automatically so provider keys and backends apply to CLI runs.
load_dotenv(find_dotenv(usecwd=True), override=False)


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="litmind",
        description="LitMind - personalized literature recommendations",
    )
    parser.add_argument("--db-url", help="Database URL (default: LITMIND_DB_URL)")

    subparsers = parser.add_subparsers(dest="command", help="available commands")

    generate_parser = subparsers.add_parser("generate", help="regenerate a user's recommendations")
    generate_parser.add_argument("user_id", type=int)
    generate_parser.add_argument("--json", action="store_true", help="print JSON")

    list_parser = subparsers.add_parser("list", help="show a user's current recommendations")
    list_parser.add_argument("user_id", type=int)
    list_parser.add_argument("--json", action="store_true", help="print JSON")

    feedback_parser = subparsers.add_parser("feedback", help="attach feedback to a recommendation")
    feedback_parser.add_argument("user_id", type=int)
    feedback_parser.add_argument("recommendation_id", type=int)
    feedback_parser.add_argument("feedback", help="e.g. NOT_INTERESTED")

    record_parser = subparsers.add_parser("record", help="append a behavior event")
    record_parser.add_argument("user_id", type=int)
    record_parser.add_argument("behavior_type", help="VIEW, ANALYZE or UPLOAD")
    record_parser.add_argument("--document-id", type=int, default=None)
    record_parser.add_argument("--payload", default=None, help="JSON object stored with the event")

    relevance_parser = subparsers.add_parser(
        "relevance", help="topic similarity of a document to a user's known topics"
    )
    relevance_parser.add_argument("user_id", type=int)
    relevance_parser.add_argument("document_id", type=int)

    parser.add_argument("--version", "-v", action="store_true", help="show version")

    return parser


_service: Optional[RecommendationService] = None


def _get_service(db_url: Optional[str] = None) -> RecommendationService:
    global _service
    if _service is None:
        from litmind.infrastructure.adapters import build_recommendation_service

        _service = build_recommendation_service(db_url=db_url)
    return _service


def _print_recommendations(items: List[Recommendation], *, as_json: bool) -> None:
    if as_json:
        print(json.dumps([r.to_dict() for r in items], ensure_ascii=False, indent=2))
        return
    if not items:
        print("no recommendations")
        return
    for r in items:
        target = r.external_paper_id or f"document {r.recommended_document_id}"
        print(f"[{r.id}] {r.score:.2f} {r.title} ({r.source_label}, {target}) - {r.reason}")


async def _run_and_close(service: RecommendationService, coro):
    try:
        return await coro
    finally:
        await service.close()


def run_cli(args: Optional[list] = None) -> int:
    """
    Run the CLI.

    Returns:
        exit code
    """
    parser = create_parser()
    parsed = parser.parse_args(args)

    if parsed.version:
        print("LitMind v0.1.0")
        return 0

    if not parsed.command:
        parser.print_help()
        return 0

    try:
        service = _get_service(parsed.db_url)

        if parsed.command == "generate":
            items = asyncio.run(_run_and_close(service, service.generate(parsed.user_id)))
            _print_recommendations(items, as_json=parsed.json)

        elif parsed.command == "list":
            items = asyncio.run(
                _run_and_close(service, service.get_recommendations(parsed.user_id))
            )
            _print_recommendations(items, as_json=parsed.json)

        elif parsed.command == "feedback":
            updated = asyncio.run(
                _run_and_close(
                    service,
                    service.update_feedback(
                        parsed.user_id, parsed.recommendation_id, parsed.feedback
                    ),
                )
            )
            print(f"feedback saved: [{updated.id}] {updated.feedback}")

        elif parsed.command == "record":
            payload = json.loads(parsed.payload) if parsed.payload else {}
            if not isinstance(payload, dict):
                raise ValueError("--payload must be a JSON object")
            event = service.record_behavior(
                parsed.user_id, parsed.document_id, parsed.behavior_type, payload
            )
            print(f"recorded: [{event.id}] {event.behavior_type.value}")

        elif parsed.command == "relevance":
            score = service.score_document_relevance(parsed.user_id, parsed.document_id)
            print(f"{score:.4f}")

        return 0

    except (RecommendationError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


def main() -> None:
    sys.exit(run_cli())


if __name__ == "__main__":
    main()
