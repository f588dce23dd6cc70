"""Command-line interface for textbayes.

Provides ``learn``, ``classify``, and ``inspect`` commands with rich
terminal output using the ``click`` and ``rich`` libraries.

Usage::

    textbayes learn model.json examples.jsonl
    textbayes classify model.json "cheap pills, buy now" --top 2
    textbayes inspect model.json
"""

from __future__ import annotations

import json
import logging
import sys
from collections.abc import Iterator
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from .classifier import NaiveBayes

console = Console()


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )


def _read_examples(path: Path) -> Iterator[tuple[str, str]]:
    """Yield ``(text, category)`` pairs from a labeled data file.

    ``.jsonl``/``.json`` files hold one ``{"text": ..., "category": ...}``
    object per line; anything else is read as ``category<TAB>text`` lines.
    Blank lines are skipped.
    """
    is_json = path.suffix.lower() in (".jsonl", ".json")
    with open(path, "r", encoding="utf-8") as f:
        for lineno, line in enumerate(f, 1):
            line = line.rstrip("\n")
            if not line.strip():
                continue
            if is_json:
                try:
                    record = json.loads(line)
                except ValueError as e:
                    raise ValueError(f"{path.name}:{lineno}: invalid JSON ({e})") from e
                if not isinstance(record, dict) or "text" not in record or "category" not in record:
                    raise ValueError(
                        f"{path.name}:{lineno}: expected an object with `text` and `category`"
                    )
                yield str(record["text"]), str(record["category"])
            else:
                category, sep, text = line.partition("\t")
                if not sep or not category:
                    raise ValueError(f"{path.name}:{lineno}: expected `category<TAB>text`")
                yield text, category


@click.group()
@click.version_option(package_name="textbayes")
@click.option("--verbose", "-v", is_flag=True, help="Log learning and scoring details.")
@click.pass_context
def main(ctx: click.Context, verbose: bool) -> None:
    """🧮 textbayes — online Naive Bayes text classification.

    Train a model incrementally from labeled text and rank categories
    for new text.
    """
    _configure_logging(verbose)
    ctx.obj = {"verbose": verbose}


@main.command()
@click.argument("model", type=click.Path(dir_okay=False, path_type=Path))
@click.argument("data", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--min-token-size", type=click.IntRange(min=1), default=None,
              help="Ignore tokens shorter than this (new models only).")
@click.option("--ignore-token", "ignored_tokens", multiple=True,
              help="Token to exclude from training; repeatable (new models only).")
@click.option("--ignore-pattern", default=None,
              help="Regex removed from training text (new models only).")
@click.pass_context
def learn(
    ctx: click.Context,
    model: Path,
    data: Path,
    min_token_size: int | None,
    ignored_tokens: tuple[str, ...],
    ignore_pattern: str | None,
) -> None:
    """Train MODEL on the labeled examples in DATA.

    MODEL is created if it does not exist; otherwise training continues
    from its saved state and keeps its stored options.

    Example: textbayes learn model.json examples.jsonl
    """
    verbose = ctx.obj["verbose"]

    with console.status("[bold blue]Learning...", spinner="dots"):
        try:
            if model.exists():
                classifier = NaiveBayes.load(model)
            else:
                classifier = NaiveBayes({
                    "min_token_size": min_token_size,
                    "ignored_tokens": list(ignored_tokens),
                    "ignore_pattern": ignore_pattern,
                })

            # Verbosity applies to this run only and is not saved with the model
            stored_verbose = classifier.options.verbose
            classifier.options.verbose = verbose

            learned = 0
            for text, category in _read_examples(data):
                classifier.learn(text, category)
                learned += 1

            classifier.options.verbose = stored_verbose
            classifier.save(model)
        except (OSError, TypeError, ValueError) as e:
            console.print(f"[bold red]Error:[/] {e}")
            sys.exit(1)

    console.print(Panel(
        f"Learned [bold]{learned}[/] document(s) from {data.name}\n"
        f"Categories: {len(classifier.categories)} | "
        f"Documents: {classifier.total_documents} | "
        f"Vocabulary: {classifier.vocabulary_size}",
        title=f"🧮 {model.name}",
        border_style="blue",
    ))


@main.command()
@click.argument("model", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("text")
@click.option("--top", "-n", type=click.IntRange(min=1), default=3, show_default=True,
              help="Number of categories to show.")
@click.option("--output", "-o", type=click.Choice(["rich", "json"]), default="rich",
              help="Output format.")
@click.pass_context
def classify(ctx: click.Context, model: Path, text: str, top: int, output: str) -> None:
    """Rank the most likely categories of TEXT.

    Example: textbayes classify model.json "limited offer, act now"
    """
    try:
        classifier = NaiveBayes.load(model)
    except (OSError, TypeError, ValueError) as e:
        console.print(f"[bold red]Error:[/] {e}")
        sys.exit(1)
    classifier.options.verbose = ctx.obj["verbose"]

    ranked = classifier.categorize_multiple(text, top)

    if output == "json":
        click.echo(json.dumps([r.to_dict() for r in ranked], indent=2))
        return

    if not ranked:
        console.print("[yellow]The model has not learned any categories yet.[/]")
        return

    table = Table(title=f"Categories — {model.name}")
    table.add_column("#", justify="right", width=4)
    table.add_column("Category", style="cyan")
    table.add_column("Score", justify="right")
    for i, result in enumerate(ranked, 1):
        table.add_row(
            str(i),
            result.category,
            f"{result.score:.6f}",
            style="bold green" if i == 1 else None,
        )
    console.print(table)


@main.command()
@click.argument("model", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--output", "-o", type=click.Choice(["rich", "json"]), default="rich",
              help="Output format.")
def inspect(model: Path, output: str) -> None:
    """Show the statistics stored in MODEL.

    Example: textbayes inspect model.json
    """
    try:
        classifier = NaiveBayes.load(model)
    except (OSError, TypeError, ValueError) as e:
        console.print(f"[bold red]Error:[/] {e}")
        sys.exit(1)

    try:
        classifier.check_invariants()
        problem = None
    except ValueError as e:
        problem = str(e)

    if output == "json":
        click.echo(json.dumps({
            "total_documents": classifier.total_documents,
            "vocabulary_size": classifier.vocabulary_size,
            "categories": {
                category: {
                    "documents": classifier.doc_count[category],
                    "words": classifier.word_count[category],
                    "distinct_tokens": len(classifier.word_frequency_count[category]),
                }
                for category in classifier.categories
            },
            "options": classifier.options.to_dict(),
            "consistent": problem is None,
            "problem": problem,
        }, indent=2))
        return

    _render_model(classifier, model.name, problem)


# ------------------------------------------------------------------
# Rich rendering helpers
# ------------------------------------------------------------------

def _render_model(classifier: NaiveBayes, filename: str, problem: str | None) -> None:
    """Render model statistics with rich formatting."""
    console.print()
    console.print(Panel(
        f"Documents: {classifier.total_documents} | "
        f"Categories: {len(classifier.categories)} | "
        f"Vocabulary: {classifier.vocabulary_size}",
        title=f"🧮 {filename}",
        border_style="blue",
    ))

    if classifier.categories:
        table = Table(title="Categories", show_lines=False)
        table.add_column("Category", style="cyan")
        table.add_column("Docs", justify="right")
        table.add_column("Prior", justify="right")
        table.add_column("Words", justify="right")
        table.add_column("Distinct", justify="right")

        for category in classifier.categories:
            docs = classifier.doc_count[category]
            prior = docs / classifier.total_documents if classifier.total_documents else 0.0
            table.add_row(
                category,
                str(docs),
                f"{prior:.1%}",
                str(classifier.word_count[category]),
                str(len(classifier.word_frequency_count[category])),
            )
        console.print(table)

    if problem:
        console.print(f"[bold red]Inconsistent model:[/] {problem}")
    else:
        console.print("[dim green]All counters are consistent.[/]")
    console.print()


if __name__ == "__main__":
    main()
