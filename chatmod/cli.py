"""chatmod CLI — try the moderation pipeline from a terminal."""

import sys

import click
import yaml
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from chatmod import __version__
from chatmod.log import configure_logging

console = Console()


def _load(config_path: str | None):
    from chatmod.moderation.config import resolve_config

    try:
        return resolve_config(config_path)
    except (OSError, ValueError, yaml.YAMLError) as e:
        console.print(f"[red]Failed to load config:[/] {e}")
        sys.exit(1)


def _verdict_style(verdict) -> str:
    if not verdict.accepted:
        return "[red]BLOCKED[/]"
    if verdict.was_transformed:
        return "[yellow]FILTERED[/]"
    return "[green]OK[/]"


@click.group()
@click.version_option(version=__version__)
@click.option("--log-level", default=None, help="Logging level (default: $CHATMOD_LOG_LEVEL or WARNING)")
def main(log_level: str | None):
    """chatmod — auto-moderation for outgoing chat messages.

    Checks messages for duplicates, profanity, flooding and shouting
    before they are published.
    """
    configure_logging(log_level)


# ── Check ────────────────────────────────────────────────────────────


@main.command()
@click.argument("text")
@click.option("--sender", "-s", default="cli-user", help="Sender identity")
@click.option("--config", "-c", "config_path", default=None, help="YAML config file")
@click.option("--no-profanity", is_flag=True, help="Disable the profanity filter")
@click.option("--no-rate-limit", is_flag=True, help="Disable the rate limit")
@click.option("--no-caps", is_flag=True, help="Disable caps normalization")
def check(
    text: str,
    sender: str,
    config_path: str | None,
    no_profanity: bool,
    no_rate_limit: bool,
    no_caps: bool,
):
    """Evaluate a single message and print the verdict."""
    from chatmod.moderation import ModerationInputError, ModerationPipeline

    pipeline = ModerationPipeline(_load(config_path))
    pipeline.set_toggles(
        profanity_filter_enabled=False if no_profanity else None,
        rate_limit_enabled=False if no_rate_limit else None,
        caps_normalization_enabled=False if no_caps else None,
    )

    try:
        verdict = pipeline.evaluate(sender, text)
    except ModerationInputError as e:
        console.print(f"[red]Invalid message:[/] {e}")
        sys.exit(1)

    console.print(f"\n{_verdict_style(verdict)} {escape(verdict.output_text)}")
    if verdict.reason_code.value != "none":
        console.print(f"  reason: {verdict.reason_code.value} ({verdict.reason})")
    if not verdict.accepted:
        sys.exit(2)


# ── Replay ───────────────────────────────────────────────────────────


@main.command()
@click.argument("script_path", type=click.Path(exists=True, dir_okay=False))
@click.option("--config", "-c", "config_path", default=None, help="YAML config file")
def replay(script_path: str, config_path: str | None):
    """Replay a YAML list of messages through one pipeline.

    Each entry needs ``text`` and may set ``sender`` (default "user") and
    ``at_ms`` (default: 1000 ms after the previous entry).
    """
    from chatmod.moderation import ModerationInputError, ModerationPipeline
    from chatmod.moderation.stats import ModerationStats

    try:
        with open(script_path) as f:
            entries = yaml.safe_load(f) or []
    except yaml.YAMLError as e:
        console.print(f"  [red]Failed to parse:[/] {e}")
        sys.exit(1)
    if isinstance(entries, dict):
        entries = entries.get("messages", [])
    if not isinstance(entries, list):
        console.print("[red]Expected a list of messages.[/]")
        sys.exit(1)

    pipeline = ModerationPipeline(_load(config_path))
    stats = ModerationStats(started_at=0.0)

    table = Table(title=f"Replay ({len(entries)} messages)")
    table.add_column("At (ms)", justify="right", style="dim")
    table.add_column("Sender", style="cyan")
    table.add_column("Verdict")
    table.add_column("Reason")
    table.add_column("Output")

    at_ms = 0
    for i, entry in enumerate(entries):
        if not isinstance(entry, dict) or "text" not in entry:
            console.print(f"[red]Entry {i + 1} has no 'text'.[/]")
            sys.exit(1)
        at_ms = int(entry.get("at_ms", at_ms + 1000 if i else 0))
        sender = str(entry.get("sender", "user"))
        try:
            verdict = pipeline.evaluate(sender, entry["text"], at_ms)
        except ModerationInputError as e:
            table.add_row(str(at_ms), escape(sender), "[red]INVALID[/]", str(e), "")
            continue
        stats.record_verdict(verdict)
        if verdict.accepted:
            stats.record_sent(verdict)
        reason = "" if verdict.reason_code.value == "none" else verdict.reason_code.value
        table.add_row(str(at_ms), escape(sender), _verdict_style(verdict), reason, escape(verdict.output_text))

    console.print(table)
    summary = stats.to_dict(now=at_ms / 1000)
    lines = [
        f"Sent: {summary['messages_sent']}",
        f"Blocked: {summary['messages_blocked']}",
        f"Filtered: {summary['messages_filtered']}",
    ]
    for reason, count in sorted(summary["by_reason"].items()):
        lines.append(f"  {reason}: {count}")
    console.print(Panel("\n".join(lines), title="Moderation Summary"))


# ── Config ───────────────────────────────────────────────────────────


@main.command(name="config")
@click.option("--config", "-c", "config_path", default=None, help="YAML config file")
def show_config(config_path: str | None):
    """Print the effective moderation configuration as YAML."""
    from chatmod.moderation.config import dump_config

    console.print(dump_config(_load(config_path)), markup=False, highlight=False)


# ── Similarity ───────────────────────────────────────────────────────


@main.command(name="similarity")
@click.argument("first")
@click.argument("second")
def show_similarity(first: str, second: str):
    """Print the edit distance and similarity of two messages."""
    from chatmod.moderation.similarity import levenshtein_distance, similarity

    console.print(f"distance: {levenshtein_distance(first, second)}")
    console.print(f"similarity: {similarity(first, second):.3f}")


if __name__ == "__main__":
    main()
