"""Command-line interface for reviewbot."""

from __future__ import annotations

import argparse
import logging
import os
import sys
from typing import Optional

from .agent import ReviewAgent, default_prompt
from .commit import generate_commit_message
from .config import DEFAULT_MODELS, describe_provider, load_config
from .diffs import get_file_changes_in_directory
from .exceptions import ReviewBotError
from .models import (
    DEFAULT_MAX_SUBJECT_LENGTH,
    CommitMessageRequest,
    CommitType,
)


class CLI:
    """Parse arguments and dispatch to the review, commit and diff commands."""

    def __init__(self) -> None:
        self.parser = self._create_parser()

    def _create_parser(self) -> argparse.ArgumentParser:
        parser = argparse.ArgumentParser(
            prog="reviewbot",
            description="Ask a language model to review local git changes.",
        )
        parser.add_argument(
            "--debug", action="store_true", help="Enable debug logging"
        )
        sub = parser.add_subparsers(dest="command")

        review = sub.add_parser("review", help="Run the LLM review agent")
        self._add_root(review)
        review.add_argument(
            "--provider",
            choices=sorted(DEFAULT_MODELS),
            help="LLM provider: "
            + ", ".join(describe_provider(p) for p in sorted(DEFAULT_MODELS)),
        )
        review.add_argument("--model", help="Model name override")
        review.add_argument("--endpoint", help="API endpoint override")
        review.add_argument(
            "--api-key-env", help="Environment variable holding the API key"
        )
        review.add_argument(
            "--max-steps", type=int, help="Maximum model turns (default 10)"
        )
        review.add_argument("prompt", nargs="?", help="Custom review prompt")

        commit = sub.add_parser(
            "commit-message", help="Print a Conventional Commit message"
        )
        self._add_root(commit)
        commit.add_argument(
            "--type", choices=[t.value for t in CommitType], dest="commit_type"
        )
        commit.add_argument("--scope")
        commit.add_argument("--summary", help="Subject line override")
        commit.add_argument(
            "--no-body", action="store_true", help="Print only the header"
        )
        commit.add_argument(
            "--max-subject-length",
            type=int,
            default=DEFAULT_MAX_SUBJECT_LENGTH,
        )

        changes = sub.add_parser("changes", help="Print zero-context diffs")
        self._add_root(changes)
        return parser

    @staticmethod
    def _add_root(parser: argparse.ArgumentParser) -> None:
        parser.add_argument(
            "--root",
            dest="root_dir",
            help="Repository root (default: $ROOT_DIR or current directory)",
        )

    def run(self, args: Optional[list[str]] = None) -> int:
        try:
            parsed = self.parser.parse_args(args)
        except SystemExit as e:
            return int(e.code or 0)

        debug = parsed.debug or os.environ.get("REVIEWBOT_DEBUG", "").lower() in {
            "1",
            "true",
            "yes",
            "on",
        }
        logging.basicConfig(
            level=logging.DEBUG if debug else logging.WARNING,
            format="%(levelname)s %(name)s: %(message)s",
        )

        command = parsed.command or "review"
        try:
            if command == "commit-message":
                return self._commit_message(parsed)
            if command == "changes":
                return self._changes(parsed)
            return self._review(parsed)
        except ReviewBotError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1

    def _root(self, parsed: argparse.Namespace) -> str:
        return (
            getattr(parsed, "root_dir", None)
            or os.environ.get("ROOT_DIR")
            or "."
        )

    def _review(self, parsed: argparse.Namespace) -> int:
        config = load_config(
            overrides={
                "provider": getattr(parsed, "provider", None),
                "model": getattr(parsed, "model", None),
                "endpoint": getattr(parsed, "endpoint", None),
                "api_key_env": getattr(parsed, "api_key_env", None),
                "root_dir": getattr(parsed, "root_dir", None),
                "max_steps": getattr(parsed, "max_steps", None),
            }
        )
        prompt = getattr(parsed, "prompt", None) or default_prompt(config.root_dir)
        ReviewAgent(config).run(prompt)
        return 0

    def _commit_message(self, parsed: argparse.Namespace) -> int:
        try:
            request = CommitMessageRequest(
                root_dir=self._root(parsed),
                type=parsed.commit_type,
                scope=parsed.scope,
                summary=parsed.summary,
                include_body=not parsed.no_body,
                max_subject_length=parsed.max_subject_length,
            )
        except ValueError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 2
        print(generate_commit_message(request))
        return 0

    def _changes(self, parsed: argparse.Namespace) -> int:
        entries = get_file_changes_in_directory(self._root(parsed))
        if not entries:
            print("No changes found.")
            return 0
        for entry in entries:
            print(f"=== {entry.file}")
            print(entry.diff.rstrip("\n"))
        return 0


def main(argv: Optional[list[str]] = None) -> int:
    return CLI().run(argv)


if __name__ == "__main__":
    sys.exit(main())
