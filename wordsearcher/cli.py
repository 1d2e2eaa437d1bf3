#!/usr/bin/env python3
"""
Wordsearcher — Command Line Client & Store Tools

A single-file CLI that:
  • Emits the PostgreSQL DDL for the verse, custom range and reading plan tables
  • Runs the API server (uvicorn)
  • Calls every API endpoint and prints the JSON response

The client commands talk to a running server; point them elsewhere with
``--base-url`` or the ``WORDSEARCHER_URL`` environment variable.
"""

from __future__ import annotations

import json
import sys
from typing import Any

import httpx
import typer

app = typer.Typer(add_completion=False, help="Wordsearcher — scripture range & search CLI")

DEFAULT_BASE_URL = "http://localhost:8000/v1"

BaseUrl = typer.Option(DEFAULT_BASE_URL, "--base-url", envvar="WORDSEARCHER_URL")


# ---------------------------
# DDL
# ---------------------------
CORE_DDL = """
CREATE TABLE IF NOT EXISTS verse (
  book       INTEGER NOT NULL CHECK (book BETWEEN 1 AND 66),
  book_name  TEXT    NOT NULL,
  chapter    INTEGER NOT NULL,
  verse      INTEGER NOT NULL,
  text       TEXT    NOT NULL,
  keywords   TEXT    NOT NULL DEFAULT '',
  PRIMARY KEY (book, chapter, verse)
);

CREATE TABLE IF NOT EXISTS customrange (
  name         TEXT PRIMARY KEY,
  type         TEXT NOT NULL,
  booknumber   INTEGER NOT NULL,
  customrange  INTEGER[] NOT NULL DEFAULT '{}'
);

CREATE TABLE IF NOT EXISTS readingplan (
  name    TEXT    NOT NULL,
  number  INTEGER NOT NULL,
  days    TEXT[]  NOT NULL DEFAULT '{}',
  PRIMARY KEY (name, number)
);
""".strip()


def fts_index_ddl(dictionary: str) -> str:
    return (
        "CREATE INDEX IF NOT EXISTS verse_text_gin\n"
        f"  ON verse USING GIN (to_tsvector('{dictionary}', text));"
    )


@app.command("emit-ddl")
def emit_ddl(
    target: str = typer.Argument("postgres", help="Only postgres is supported"),
    dictionary: str = typer.Option("english", help="Text search dictionary for the FTS index"),
) -> None:
    """Emit the corpus tables and full-text index."""
    if target != "postgres":
        raise typer.Exit(code=2)

    print(CORE_DDL)
    print()
    print(fts_index_ddl(dictionary))


# ---------------------------
# Server
# ---------------------------
@app.command()
def serve(
    host: str = typer.Option("0.0.0.0"),
    port: int = typer.Option(8000),
    reload: bool = typer.Option(False, help="Reload on code changes (development)"),
) -> None:
    """Run the API with uvicorn."""
    import uvicorn

    uvicorn.run("wordsearcher.app.main:app", host=host, port=port, reload=reload)


# ---------------------------
# Client
# ---------------------------
def call_api(
    base_url: str,
    method: str,
    path: str,
    *,
    params: dict[str, Any] | None = None,
    body: dict[str, Any] | None = None,
    client: httpx.Client | None = None,
) -> Any:
    """Call the API and return the decoded JSON, exiting non-zero on HTTP errors."""
    own_client = client is None
    client = client or httpx.Client(base_url=base_url, timeout=30.0)
    try:
        response = client.request(method, path, params=params, json=body)
    except httpx.HTTPError as exc:
        typer.secho(f"Request failed: {exc}", fg=typer.colors.RED, bold=True, err=True)
        raise typer.Exit(code=1) from exc
    finally:
        if own_client:
            client.close()

    if response.is_error:
        try:
            detail = response.json().get("detail", response.text)
        except ValueError:
            detail = response.text
        typer.secho(
            f"{response.status_code}: {detail}", fg=typer.colors.RED, bold=True, err=True
        )
        raise typer.Exit(code=1)
    return response.json()


def _print(payload: Any) -> None:
    typer.echo(json.dumps(payload, indent=2, ensure_ascii=False))


@app.command()
def verse(
    book: int = typer.Argument(..., help="Book number (1-66)"),
    chapter: int = typer.Argument(...),
    verse_start: int = typer.Argument(0, help="0 returns the whole chapter"),
    verse_end: int = typer.Argument(0),
    base_url: str = BaseUrl,
) -> None:
    """Print a verse range, or a whole chapter."""
    _print(
        call_api(
            base_url,
            "GET",
            "/verses",
            params={
                "book": book,
                "chapter": chapter,
                "verse_start": verse_start,
                "verse_end": verse_end,
            },
        )
    )


@app.command()
def books(
    start: int = typer.Argument(...),
    end: int = typer.Argument(...),
    base_url: str = BaseUrl,
) -> None:
    """Print every verse in a range of books."""
    _print(call_api(base_url, "GET", "/verses/books", params={"start": start, "end": end}))


@app.command()
def chapters(
    book: int = typer.Argument(...),
    start: int = typer.Argument(...),
    end: int = typer.Argument(...),
    base_url: str = BaseUrl,
) -> None:
    """Print every verse in a range of chapters of one book."""
    _print(
        call_api(
            base_url,
            "GET",
            "/verses/chapters",
            params={"book": book, "start": start, "end": end},
        )
    )


@app.command()
def custom(name: str = typer.Argument(...), base_url: str = BaseUrl) -> None:
    """Print a named custom range."""
    _print(call_api(base_url, "GET", f"/verses/custom-ranges/{name}"))


@app.command()
def search(
    term: str = typer.Argument(...),
    filter_mode: str = typer.Option("all", "--filter", help="all | exact | in"),
    location: str = typer.Option("all", help="all | nt | ot | law | bookname"),
    option: list[str] = typer.Option([], "--option", help="Extra per-mode values"),
    base_url: str = BaseUrl,
) -> None:
    """Search verse text; results are ordered by relevance."""
    _print(
        call_api(
            base_url,
            "POST",
            "/search",
            body={"term": term, "filter": filter_mode, "location": location, "options": option},
        )
    )


@app.command()
def plan(name: str = typer.Argument(...), base_url: str = BaseUrl) -> None:
    """Print every track of a reading plan."""
    _print(call_api(base_url, "GET", f"/plans/{name}"))


@app.command("plan-day")
def plan_day(
    name: str = typer.Argument(...),
    day: int = typer.Argument(..., help="Zero based day of the plan"),
    base_url: str = BaseUrl,
) -> None:
    """Print one day's readings of a reading plan."""
    _print(call_api(base_url, "GET", f"/plans/{name}/days/{day}"))


def main() -> None:
    try:
        app()
    except KeyboardInterrupt:
        sys.exit(130)


# ---------------------------
# Entrypoint
# ---------------------------
if __name__ == "__main__":
    main()
