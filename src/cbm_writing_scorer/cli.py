from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, TypedDict

import typer
import yaml

from .config import ScorerConfig, load_config
from .export import audit_rows_to_csv, insertion_to_dict, kpis_to_dict, rubric_to_dict
from .grammar import build_checker_from_config
from .models import AuditRow, Document
from .session import ScoringSession

app = typer.Typer(help="CBM writing scorer CLI.", no_args_is_help=True)

# File types the CLI knows how to expand into Document instances.
SUPPORTED_INPUT_EXTENSIONS = {".txt"}


class DocumentSummary(TypedDict):
    doc_id: str
    kpis: Dict[str, Any]
    rubric: Dict[str, Any]
    insertions: List[Dict[str, Any]]


@app.callback()
def configure(
    log_level: str = typer.Option(
        "WARNING", "--log-level", help="Logging level (DEBUG, INFO, WARNING, ...)."
    ),
) -> None:
    """Score student writing samples with the CBM rubric."""
    logging.basicConfig(
        level=getattr(logging, log_level.upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@app.command()
def score(
    input_path: Path = typer.Option(
        ..., exists=True, readable=True, dir_okay=True, file_okay=True
    ),
    config: Path | None = typer.Option(None, "--config", "-c"),
    minutes: float | None = typer.Option(
        None, "--minutes", "-m", help="Writing duration used for CWS per minute."
    ),
    languagetool: bool | None = typer.Option(
        None,
        "--languagetool/--no-languagetool",
        help="Toggle the LanguageTool grammar checker.",
    ),
    language: str | None = typer.Option(
        None, "--language", help="Language code sent to the grammar checker."
    ),
    lexicon: Path | None = typer.Option(
        None, "--lexicon", exists=True, dir_okay=False, help="Extra word list for spelling."
    ),
    audit_csv: Path | None = typer.Option(
        None, "--audit-csv", dir_okay=False, help="Write flagged issues to this CSV file."
    ),
) -> None:
    """Score the input samples and emit a JSON summary."""
    # Start from the configuration file (or defaults) and layer CLI overrides on top.
    cfg = load_config(config)
    if languagetool is not None:
        cfg.languagetool.enabled = languagetool
    if language:
        cfg.language = language
    if lexicon:
        cfg.lexicon_path = str(lexicon)

    documents = _load_documents(input_path)
    checker = build_checker_from_config(cfg)

    summary: List[DocumentSummary] = []
    audit: List[AuditRow] = []
    for document in documents:
        session = ScoringSession(cfg)
        session.update_text(document.text)
        # A checker outage leaves the heuristic proposals in place.
        session.run_check(checker)
        summary.append(
            {
                "doc_id": document.doc_id,
                "kpis": kpis_to_dict(session.kpis(minutes)),
                "rubric": rubric_to_dict(session.rubric()),
                "insertions": [insertion_to_dict(ins) for ins in session.insertions],
            }
        )
        audit.extend(session.audit_rows())

    if audit_csv is not None:
        audit_rows_to_csv(audit, audit_csv)
    typer.echo(json.dumps({"documents": summary}, indent=2))


@app.command("print-config")
def print_config() -> None:
    """Print the default configuration as YAML."""
    cfg = ScorerConfig()
    typer.echo(yaml.safe_dump(cfg.to_dict(), sort_keys=False))


def main() -> None:
    app()


def _load_documents(input_path: Path) -> List[Document]:
    """Expand the input path into documents keyed by their relative path."""
    if input_path.is_file():
        return [_document_from_file(input_path, input_path.name)]

    files = sorted(
        p
        for p in input_path.rglob("*")
        if p.is_file() and p.suffix.lower() in SUPPORTED_INPUT_EXTENSIONS
    )
    return [_document_from_file(file, str(file.relative_to(input_path))) for file in files]


def _document_from_file(path: Path, doc_id: str) -> Document:
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise typer.BadParameter(f"Cannot read {path}: {exc}") from exc
    return Document(doc_id=doc_id, text=text)


if __name__ == "__main__":
    main()
