"""CLI command implementations"""

import json
from pathlib import Path
from typing import Annotated, Optional

import typer
from pydantic import ValidationError

from chatsaver.config import Settings, load_config
from chatsaver.core.export import build_html, build_markdown, write_conversation
from chatsaver.core.extract.extract import extract_message
from chatsaver.core.models import Capture, Conversation
from chatsaver.core.pipeline import conversation_from_capture
from chatsaver.core.render.render import render
from chatsaver.core.service import RequestType, handle_request
from chatsaver.crud.database import init_db, make_engine, reset_db
from chatsaver.crud.store import ConversationStore, SQLConversationStore
from chatsaver.logging_config import configure_logging


def _fail(msg: str, cause: Exception = None) -> None:
    """Print a user-friendly error to stderr and exit 1."""
    typer.echo(f"Error: {msg}", err=True)
    if cause:
        typer.echo(f"  {cause}", err=True)
    raise typer.Exit(1)


def _settings(overrides: dict = None) -> Settings:
    """Load config with standard CLI error handling, then configure logging from it."""
    try:
        settings = load_config(overrides=overrides)
    except ValueError as e:
        _fail(str(e))
    configure_logging(settings.log_level)
    return settings


def _store(settings: Settings) -> ConversationStore:
    engine = make_engine(settings.db_url)
    init_db(engine)
    return SQLConversationStore(engine)


def _request(store: ConversationStore, kind: RequestType, **params) -> dict:
    """Run a store request; exit with its error message on failure."""
    response = handle_request(store, {"type": kind.value, **params})
    if not response["success"]:
        _fail(response["error"])
    return response


def _read(path: str) -> str:
    try:
        return Path(path).read_text(encoding="utf-8")
    except OSError as e:
        _fail(f"Cannot read {path}", e)


def _load(store: ConversationStore, conversation_id: str) -> Conversation:
    record = _request(store, RequestType.GET_CONVERSATION, id=conversation_id)["conversation"]
    if record is None:
        _fail(f"No conversation with id '{conversation_id}'")
    return Conversation.model_validate(record)


def _echo_rows(records: list[dict]) -> None:
    for r in records:
        typer.echo(f"{r['id']}  {r['source']:<8}  {len(r['messages']):>3} msgs  {r['title']}")


def init_cmd(
    reset: Annotated[bool, typer.Option("--reset", help="Drop and recreate all tables")] = False,
    ):
    """Initialize database schema. Use --reset to clear existing data."""
    settings = _settings()
    engine = make_engine(settings.db_url)
    if reset:
        reset_db(engine)
        typer.echo("Existing data cleared.")
    else:
        init_db(engine)
    typer.echo(f"Database initialized at: {settings.db_url}")


def extract_cmd(
    path: Annotated[str, typer.Argument(help="HTML file holding one message element")],
    fmt: Annotated[str, typer.Option("--format", help="md, html or json")] = "md",
    ):
    """Convert a message's HTML to markdown (and/or sanitized HTML)."""
    _settings()
    if fmt not in ("md", "html", "json"):
        _fail(f"Unsupported format: {fmt}")

    extracted = extract_message(_read(path), include_html=fmt != "md")
    if fmt == "md":
        typer.echo(extracted.content)
    elif fmt == "html":
        typer.echo(extracted.content_html or "")
    else:
        typer.echo(json.dumps(
            {"content": extracted.content, "contentHtml": extracted.content_html},
            indent=2, ensure_ascii=False,
        ))


def render_cmd(
    path: Annotated[str, typer.Argument(help="Markdown file to render")],
    ):
    """Render markdown to an HTML fragment."""
    _settings()
    typer.echo(render(_read(path)))


def save_cmd(
    path: Annotated[str, typer.Argument(help="Capture JSON: {source, url, title?, messages: [{role?, html}]}")],
    no_html: Annotated[bool, typer.Option("--no-html", help="Do not store sanitized HTML")] = False,
    ):
    """Extract a captured conversation and save it to the database."""
    settings = _settings(overrides={"include_html": False} if no_html else None)
    try:
        capture = Capture.model_validate_json(_read(path))
    except ValidationError as e:
        _fail(f"Invalid capture file {path}", e)

    conv = conversation_from_capture(capture, include_html=settings.include_html)
    if conv is None:
        _fail(f"No messages found in {path}")

    saved = _request(_store(settings), RequestType.SAVE_CONVERSATION, conversation=conv.to_record())["result"]
    typer.echo(f"Saved {saved['id']} ({len(saved['messages'])} messages): {saved['title']}")


def list_cmd():
    """List saved conversations, most recently updated first."""
    settings = _settings()
    records = _request(_store(settings), RequestType.GET_ALL_CONVERSATIONS)["conversations"]
    if not records:
        typer.echo("No conversations saved.")
        raise typer.Exit(1)
    _echo_rows(records)


def search_cmd(
    query: Annotated[str, typer.Argument(help="Text to look for in titles and messages")],
    ):
    """Case-insensitive search over titles and message content."""
    settings = _settings()
    records = _request(_store(settings), RequestType.SEARCH_CONVERSATIONS, query=query)["conversations"]
    if not records:
        typer.echo(f"No conversations match '{query}'.")
        raise typer.Exit(1)
    _echo_rows(records)


def show_cmd(
    conversation_id: Annotated[str, typer.Argument(help="Conversation id")],
    fmt: Annotated[Optional[str], typer.Option("--format", help="md or html")] = None,
    ):
    """Print one conversation as markdown or HTML."""
    settings = _settings(overrides={"export_format": fmt})
    conv = _load(_store(settings), conversation_id)
    typer.echo(build_markdown(conv) if settings.export_format == "md" else build_html(conv))


def delete_cmd(
    conversation_id: Annotated[str, typer.Argument(help="Conversation id")],
    ):
    """Delete a saved conversation."""
    settings = _settings()
    store = _store(settings)
    _load(store, conversation_id)
    _request(store, RequestType.DELETE_CONVERSATION, id=conversation_id)
    typer.echo(f"Deleted {conversation_id}")


def stats_cmd():
    """Show totals: conversations, messages and per-source counts."""
    settings = _settings()
    stats = _request(_store(settings), RequestType.GET_STATS)["stats"]
    typer.echo(f"Conversations: {stats['totalConversations']}")
    typer.echo(f"Messages: {stats['totalMessages']}")
    for source, count in sorted(stats["sources"].items()):
        typer.echo(f"  {source}: {count}")


def export_cmd(
    conversation_id: Annotated[Optional[str], typer.Argument(help="Conversation id")] = None,
    all_convs: Annotated[bool, typer.Option("--all", help="Export every saved conversation")] = False,
    out: Annotated[Optional[str], typer.Option("--out-dir", help="Output directory")] = None,
    fmt: Annotated[Optional[str], typer.Option("--format", help="md or html")] = None,
    ):
    """Write conversations to the output directory as markdown or HTML files."""
    settings = _settings(overrides={"output_dir": out, "export_format": fmt})
    store = _store(settings)
    output_dir = Path(settings.output_dir)

    if all_convs:
        records = _request(store, RequestType.GET_ALL_CONVERSATIONS)["conversations"]
        convs = [Conversation.model_validate(r) for r in records]
    elif conversation_id:
        convs = [_load(store, conversation_id)]
    else:
        _fail("Give a conversation id or --all")

    if not convs:
        typer.echo("No conversations to export.")
        raise typer.Exit(1)

    try:
        paths = [write_conversation(c, output_dir, settings.export_format) for c in convs]
    except OSError as e:
        _fail("Export failed", e)

    for conv, path in zip(convs, paths):
        typer.echo(f"  {conv.id} -> {path}")
    typer.echo(f"Exported {len(paths)} conversation(s) to {output_dir}/")
