"""
Jira Ticket Writer — Entry Point

Usage:
    # Run the HTTP API (POST /api/prompt, GET /api/agents, GET /health)
    python main.py --mode server

    # Run a single prompt from the command line
    python main.py --mode single --text "app crashes on save" --scope ui

    # Answer a clarification question from a previous round
    python main.py --mode single --text "app crashes on save" --scope ui \\
        --clarification "Clicking Save on the invoice form"
"""

from __future__ import annotations

import argparse
import json
import sys


def _configure() -> None:
    from config.logging_config import configure_logging
    configure_logging()


def start_server() -> None:
    import uvicorn
    from config.settings import get_settings
    _configure()
    settings = get_settings()
    uvicorn.run("api.server:app", host=settings.server_host, port=settings.server_port, reload=False)


def run_single(text: str, scopes: list[str], agent: str | None, clarifications: list[str]) -> int:
    _configure()

    from pydantic import ValidationError

    from agents.supervisor import run_workflow
    from llm.errors import CompletionError, ConfigurationError, UnrecognizedIssueTypeError, UpstreamError
    from llm.openai_client import resolve_api_key
    from schemas.api import PromptRequest, PromptStatus

    try:
        request = PromptRequest(
            text=text,
            agent=agent,
            scope=scopes,
            previous_clarifications=clarifications,
        )
        resolve_api_key()
        response = run_workflow(request)
    except ValidationError as exc:
        print(f"ERROR: invalid request: {exc.errors()[0]['msg']}", file=sys.stderr)
        return 2
    except (ConfigurationError, UpstreamError, CompletionError, UnrecognizedIssueTypeError) as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1

    print(json.dumps(response.to_payload(), indent=2, ensure_ascii=False))

    if response.status == PromptStatus.NEEDS_INFO:
        print(
            "\nAnswer the question and re-run with --clarification added.",
            file=sys.stderr,
        )
    return 0 if response.status != PromptStatus.ERROR else 1


def main() -> None:
    parser = argparse.ArgumentParser(description="Jira Ticket Writer")
    parser.add_argument(
        "--mode",
        choices=["server", "single"],
        default="server",
        help="Run mode",
    )
    parser.add_argument("--text", help="Free-form request (required for --mode single)")
    parser.add_argument(
        "--scope",
        action="append",
        default=None,
        help="Scope tag, repeatable (ui, api, ux, infra, proactive-frame)",
    )
    parser.add_argument("--agent", default=None, help="Model identifier, e.g. gpt-4o-mini")
    parser.add_argument(
        "--clarification",
        action="append",
        default=[],
        help="Answer to a previous clarification question, repeatable and ordered",
    )

    args = parser.parse_args()

    if args.mode == "server":
        start_server()
    elif args.mode == "single":
        if not args.text:
            print("ERROR: --text is required with --mode single", file=sys.stderr)
            sys.exit(1)
        sys.exit(run_single(args.text, args.scope or ["ui"], args.agent, args.clarification))


if __name__ == "__main__":
    main()
