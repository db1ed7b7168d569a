"""CLI commands for ranking sessions and ranking diffs."""

import json
import logging
import sys
import uuid
from pathlib import Path
from typing import Any

import click
import structlog
from pydantic import ValidationError

from songrank.cli.error_hints import format_validation_error
from songrank.diff import DiffResult, compare_rankings
from songrank.items.loader import (
    ItemsValidationError,
    load_items,
    load_ordering,
    read_document,
)
from songrank.items.records import items_to_rows
from songrank.merge import DraftEnvelope, extend_ranking, resume_from_envelope
from songrank.observability.logging import configure_logging, session_context
from songrank.ranker import ComparisonAnswer, Ranker, RankingError, RankingState
from songrank.settings import AppSettings, get_settings


logger = structlog.get_logger()

ANSWER_KEYS: dict[str, ComparisonAnswer] = {
    "b": ComparisonAnswer.BETTER,
    "w": ComparisonAnswer.WORSE,
    "u": ComparisonAnswer.UNKNOWN,
}
SAVE_KEY = "s"

DIRECTION_MARKS = {"up": "+", "down": "-", "same": "="}


def _setup(verbose: bool) -> AppSettings:
    """Read settings and configure logging for a command."""
    settings = get_settings()
    level = logging.DEBUG if verbose else settings.logging_level
    configure_logging(level=level, json_format=settings.json_logs)
    return settings


def _fail_validation(error: ItemsValidationError) -> None:
    """Print item file errors with hints and exit."""
    click.echo(f"Validation failed for {error.file_path}:", err=True)
    for detail in error.errors:
        formatted = format_validation_error(
            location=detail["loc"],
            message=detail["msg"],
            error_type=detail.get("type", "unknown"),
        )
        click.echo(f"  - {formatted}", err=True)
    sys.exit(1)


def _fail_draft(path: Path, error: ValidationError) -> None:
    """Print draft schema errors with hints and exit."""
    click.echo(f"Invalid draft {path}:", err=True)
    for detail in error.errors():
        location = ".".join(str(part) for part in detail["loc"])
        formatted = format_validation_error(location, detail["msg"], detail["type"])
        click.echo(f"  - {formatted}", err=True)
    sys.exit(1)


def _write_json(path: Path, payload: Any) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload, indent=2, ensure_ascii=False) + "\n", encoding="utf-8")


def _save_draft(path: Path, envelope: DraftEnvelope, state: RankingState) -> None:
    draft = envelope.model_copy(update={"state": state})
    _write_json(path, draft.to_json_dict())
    logger.info(
        "draft_saved",
        draft_path=str(path),
        ranked=len(state.ranked),
        remaining=len(state.remaining),
    )
    click.echo(f"Draft saved to {path}. Resume with: songrank resume {path}")


def _print_question(state: RankingState) -> None:
    pending = state.pending_comparison
    if pending is None:
        return
    click.echo("")
    click.echo(
        f"[{state.comparison_count} answered, about {state.estimated_remaining} to go, "
        f"{len(state.remaining)} songs left]"
    )
    click.echo(f"  A: {pending.new_item.label}")
    click.echo(f"  B: {pending.probe_item.label}")


def _run_session(
    ranker: Ranker,
    envelope: DraftEnvelope,
    draft_path: Path | None,
    out_path: Path | None,
) -> None:
    """Ask questions until the ranking completes or the user saves.

    Args:
        ranker: Ranker to drive.
        envelope: Draft payload to save alongside the state.
        draft_path: Where ``s`` saves the draft.
        out_path: Where the finished ranking is written.
    """
    with session_context(ranker.session_id):
        _ask_until_done(ranker, envelope, draft_path, out_path)


def _ask_until_done(
    ranker: Ranker,
    envelope: DraftEnvelope,
    draft_path: Path | None,
    out_path: Path | None,
) -> None:
    choices = [*ANSWER_KEYS, SAVE_KEY]

    while not ranker.is_complete:
        state = ranker.state
        _print_question(state)
        choice = click.prompt(
            "Is A better than B? [b]etter / [w]orse / [u]nknown / [s]ave and quit",
            type=click.Choice(choices, case_sensitive=False),
            show_choices=False,
        ).lower()

        if choice == SAVE_KEY:
            if draft_path is None:
                click.echo("No --save-draft path given; exiting without saving.", err=True)
                sys.exit(1)
            _save_draft(draft_path, envelope, state)
            return

        ranker.submit_answer(ANSWER_KEYS[choice], state.pending_comparison)

    final = ranker.state
    rows = items_to_rows(final.ranked, envelope.existing_ranked_songs)
    click.echo("")
    click.echo(f"Ranking complete after {final.comparison_count} comparisons:")
    for row in rows:
        click.echo(f"  {row['rank']:>3}. {row['title']} - {row['artist']}")

    if out_path is not None:
        _write_json(out_path, rows)
        click.echo(f"Ranking written to {out_path}")


@click.group()
@click.version_option(version="0.1.0")
def cli() -> None:
    """Rank songs through pairwise comparisons."""


@cli.command()
@click.argument("items_path", type=click.Path(exists=True, path_type=Path))
@click.option(
    "--existing",
    "existing_path",
    type=click.Path(exists=True, path_type=Path),
    help="Finished ranking to extend with the new songs.",
)
@click.option(
    "--save-draft",
    "draft_path",
    type=click.Path(path_type=Path),
    help="Where to save the draft when quitting early.",
)
@click.option(
    "--out",
    "out_path",
    type=click.Path(path_type=Path),
    help="Where to write the finished ranking as JSON rows.",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging.")
def rank(
    items_path: Path,
    existing_path: Path | None,
    draft_path: Path | None,
    out_path: Path | None,
    verbose: bool,
) -> None:
    """Rank the songs in ITEMS_PATH, optionally extending an existing ranking."""
    settings = _setup(verbose)

    try:
        new_items = load_items(items_path)
        existing = load_ordering(existing_path) if existing_path else []
    except ItemsValidationError as e:
        _fail_validation(e)
        return

    ranker = extend_ranking(
        existing,
        new_items,
        session_id=uuid.uuid4().hex[:12],
        max_probe_iterations=settings.max_probe_iterations,
    )
    envelope = DraftEnvelope(
        songs=[item.to_json_dict() for item in new_items],
        existing_ranked_songs=items_to_rows(existing),
    )
    _run_session(ranker, envelope, draft_path, out_path)


@cli.command()
@click.argument("draft_path", type=click.Path(exists=True, path_type=Path))
@click.option(
    "--save-draft",
    "save_path",
    type=click.Path(path_type=Path),
    help="Where to save the draft again (default: overwrite DRAFT_PATH).",
)
@click.option(
    "--out",
    "out_path",
    type=click.Path(path_type=Path),
    help="Where to write the finished ranking as JSON rows.",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging.")
def resume(
    draft_path: Path,
    save_path: Path | None,
    out_path: Path | None,
    verbose: bool,
) -> None:
    """Resume the ranking saved in DRAFT_PATH."""
    settings = _setup(verbose)

    try:
        document = read_document(draft_path)
    except ItemsValidationError as e:
        _fail_validation(e)
        return

    if not isinstance(document, dict):
        click.echo(f"Invalid draft {draft_path}: expected a mapping", err=True)
        sys.exit(1)

    try:
        # A bare snapshot is accepted as well as a full draft row payload.
        if "state" in document or "songs" in document:
            envelope = DraftEnvelope.model_validate(document)
        else:
            envelope = DraftEnvelope(state=RankingState.model_validate(document))
        ranker = resume_from_envelope(
            envelope,
            session_id=uuid.uuid4().hex[:12],
            max_probe_iterations=settings.max_probe_iterations,
        )
    except ValidationError as e:
        _fail_draft(draft_path, e)
        return
    except RankingError as e:
        logger.error("draft_resume_failed", draft_path=str(draft_path), error=str(e))
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    _run_session(ranker, envelope, save_path or draft_path, out_path)


def _render_diff(result: DiffResult, sort_by: str) -> None:
    """Print a diff as a table."""
    click.echo(
        f"Similarity: {result.similarity}%  (rank correlation {result.rank_correlation}%)"
    )
    shared = result.sorted_by_b() if sort_by == "b" else result.sorted_by_a()
    if shared:
        click.echo("")
        click.echo("  yours  theirs  move  song")
        for s in shared:
            move = f"{DIRECTION_MARKS[s.direction.value]}{s.diff_amount}"
            click.echo(f"  {s.rank_a:>5}  {s.rank_b:>6}  {move:>4}  {s.item.label}")

    for heading, items in (
        ("Only in yours", result.only_in_a),
        ("Only in theirs", result.only_in_b),
    ):
        if items:
            click.echo("")
            click.echo(f"{heading}:")
            for item in items:
                click.echo(f"  - {item.label}")


@cli.command()
@click.argument("yours_path", type=click.Path(exists=True, path_type=Path))
@click.argument("theirs_path", type=click.Path(exists=True, path_type=Path))
@click.option(
    "--sort-by",
    type=click.Choice(["a", "b"]),
    default=None,
    help="Order shared songs by your rank (a) or theirs (b).",
)
@click.option("--json", "as_json", is_flag=True, help="Print the diff as JSON.")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging.")
def diff(
    yours_path: Path,
    theirs_path: Path,
    sort_by: str | None,
    as_json: bool,
    verbose: bool,
) -> None:
    """Compare two finished rankings."""
    settings = _setup(verbose)

    try:
        yours = load_ordering(yours_path)
        theirs = load_ordering(theirs_path)
    except ItemsValidationError as e:
        _fail_validation(e)
        return

    result = compare_rankings(yours, theirs)
    if as_json:
        click.echo(json.dumps(result.to_json_dict(), indent=2, ensure_ascii=False))
        return
    _render_diff(result, sort_by or settings.default_sort)


@cli.command()
@click.argument("items_path", type=click.Path(exists=True, path_type=Path))
def validate(items_path: Path) -> None:
    """Validate a song list without ranking it."""
    _setup(verbose=False)

    try:
        items = load_items(items_path)
    except ItemsValidationError as e:
        _fail_validation(e)
        return

    click.echo(f"{len(items)} songs are valid.")


if __name__ == "__main__":
    cli()
