from dataclasses import dataclass, field
from importlib.metadata import PackageNotFoundError, version as package_version
import json
import logging
from pathlib import Path
import time
from typing import Any
import webbrowser

import typer

from pubconfig.config import Settings
from pubconfig.core.canonical import document_json
from pubconfig.diff import (
    CURRENT_BASELINE,
    diff_documents,
    parse_baseline_choice,
    render_diff_summary,
    render_diff_text,
)
from pubconfig.diff.compare import baseline_label
from pubconfig.store import (
    ConfigStore,
    FileSystemConfigStore,
    HttpConfigStore,
    StoreError,
    filter_publishers,
    normalize_document_id,
    parse_version,
)
from pubconfig.ui import UIServerConfig, build_ui_url, start_ui_server

app = typer.Typer(help="pubconfig CLI: browse, diff and edit versioned publisher configurations")


@dataclass(slots=True)
class _CLIOptions:
    settings: Settings = field(default_factory=Settings)
    stable_json: bool = True


_CLI_OPTIONS = _CLIOptions()


def _resolve_cli_version() -> str:
    try:
        return package_version("pubconfig")
    except PackageNotFoundError:
        from pubconfig import __version__ as local_version

        return local_version


def _version_callback(value: bool) -> None:
    if not value:
        return
    typer.echo(_resolve_cli_version(), color=False)
    raise typer.Exit()


@app.callback()
def app_options(
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show pubconfig version and exit.",
    ),
    data_dir: Path | None = typer.Option(
        None,
        "--data-dir",
        help="Directory holding publisher documents (default: PUBCONFIG_DATA_DIR or ./data).",
    ),
    history_dir: Path | None = typer.Option(
        None,
        "--history-dir",
        help="Directory holding version history (default: <data-dir>/history).",
    ),
    store_url: str | None = typer.Option(
        None,
        "--store-url",
        help="Use a running pubconfig server as the store instead of the local data directory.",
    ),
    log_level: str | None = typer.Option(
        None,
        "--log-level",
        help="Logging level (default: PUBCONFIG_LOG_LEVEL or WARNING).",
    ),
    stable_json: bool = typer.Option(
        True,
        "--stable-json/--pretty-json",
        help="Emit stable compact JSON (or pretty JSON).",
    ),
) -> None:
    """Global store and output options for all CLI commands."""
    try:
        settings = Settings.from_env()
    except ValueError as error:
        typer.echo(f"configuration failed: {error}", err=True)
        raise typer.Exit(code=1) from error

    if data_dir is not None:
        settings.data_dir = data_dir
    if history_dir is not None:
        settings.history_dir = history_dir
    if store_url:
        settings.store_url = store_url
    if log_level:
        settings.log_level = log_level.upper()

    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    _CLI_OPTIONS.settings = settings
    _CLI_OPTIONS.stable_json = stable_json


def _echo(message: str, *, err: bool = False) -> None:
    typer.echo(message, err=err)


def _echo_json(payload: Any, *, err: bool = False) -> None:
    if _CLI_OPTIONS.stable_json:
        rendered = json.dumps(payload, ensure_ascii=True, sort_keys=True, separators=(",", ":"))
    else:
        rendered = json.dumps(payload, ensure_ascii=True, sort_keys=True, indent=2)
    typer.echo(rendered, err=err)


def _fail(command: str, error: Exception, *, json_output: bool = False) -> typer.Exit:
    message = f"{command} failed: {error}"
    if json_output:
        _echo_json({"status": "error", "exit_code": 1, "message": message})
    else:
        _echo(message, err=True)
    return typer.Exit(code=1)


def _open_store() -> ConfigStore:
    settings = _CLI_OPTIONS.settings
    if settings.store_url:
        return HttpConfigStore(settings.store_url)
    return FileSystemConfigStore(settings.data_dir, settings.resolved_history_dir)


def _load_choice(store: ConfigStore, document_id: str, choice: str | int) -> dict[str, Any]:
    if choice == CURRENT_BASELINE:
        return store.load(document_id)
    return store.load_version(document_id, int(choice))


@app.command()
def publishers(
    search: str | None = typer.Option(
        None,
        "--search",
        help="Case-insensitive filter on publisher id and alias.",
    ),
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Emit machine-readable publisher list.",
    ),
) -> None:
    """List publishers from the directory file."""
    store = _open_store()
    try:
        entries = filter_publishers(store.list_publishers(), search)
    except StoreError as error:
        raise _fail("publishers", error, json_output=json_output) from error

    if json_output:
        _echo_json({"status": "ok", "publishers": [entry.to_dict() for entry in entries]})
        return
    if not entries:
        _echo("No publishers found")
        return
    for entry in entries:
        _echo(f"{entry.id}\t{entry.alias}\t{entry.file}")


@app.command()
def show(
    document_id: str = typer.Argument(..., help="Document file name, e.g. aurora.json."),
    version: int | None = typer.Option(
        None,
        "--version",
        help="Show a stored version instead of the current document.",
    ),
) -> None:
    """Print a document (or one of its versions) as formatted JSON."""
    store = _open_store()
    try:
        if version is None:
            document = store.load(document_id)
        else:
            document = store.load_version(document_id, parse_version(version))
    except (StoreError, ValueError) as error:
        raise _fail("show", error) from error
    _echo(document_json(document))


@app.command()
def versions(
    document_id: str = typer.Argument(..., help="Document file name, e.g. aurora.json."),
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Emit machine-readable version list.",
    ),
) -> None:
    """List stored versions of a document, newest first."""
    store = _open_store()
    try:
        found = store.list_versions(document_id)
    except (StoreError, ValueError) as error:
        raise _fail("versions", error, json_output=json_output) from error

    if json_output:
        _echo_json({"status": "ok", "document_id": normalize_document_id(document_id), "versions": found})
        return
    if not found:
        _echo("no versions recorded")
        return
    for item in found:
        _echo(f"v{item}")


@app.command()
def diff(
    document_id: str = typer.Argument(..., help="Document file name, e.g. aurora.json."),
    against: str = typer.Option(
        CURRENT_BASELINE,
        "--against",
        help="Baseline: 'current' or a version number.",
    ),
    to: str = typer.Option(
        CURRENT_BASELINE,
        "--to",
        help="Target: 'current' or a version number.",
    ),
    changes_only: bool = typer.Option(
        False,
        "--changes-only",
        help="Print only added and removed lines.",
    ),
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Emit machine-readable diff output.",
    ),
) -> None:
    """Line diff of two stored states of a document."""
    store = _open_store()
    try:
        baseline_choice = parse_baseline_choice(against)
        target_choice = parse_baseline_choice(to)
        baseline = _load_choice(store, document_id, baseline_choice)
        target = _load_choice(store, document_id, target_choice)
    except (StoreError, ValueError) as error:
        raise _fail("diff", error, json_output=json_output) from error

    result = diff_documents(
        baseline,
        target,
        baseline_label=baseline_label(baseline_choice),
        current_label=baseline_label(target_choice),
    )
    if json_output:
        _echo_json({**result.to_dict(), "status": "ok", "exit_code": 0})
        return
    _echo(render_diff_summary(result))
    _echo(render_diff_text(result, changes_only=changes_only))


@app.command(name="init-history")
def init_history() -> None:
    """Record version 1 for every document that has no history yet."""
    settings = _CLI_OPTIONS.settings
    if settings.store_url:
        raise _fail("init-history", ValueError("only available for a local data directory"))
    store = FileSystemConfigStore(settings.data_dir, settings.resolved_history_dir)
    try:
        initialized = store.initialize_history()
    except OSError as error:
        raise _fail("init-history", error) from error
    if not initialized:
        _echo("history up to date")
        return
    for name in initialized:
        _echo(f"initialized {name}")


@app.command()
def serve(
    host: str | None = typer.Option(
        None,
        "--host",
        help="Host interface to bind (default: PUBCONFIG_HOST or 127.0.0.1).",
    ),
    port: int | None = typer.Option(
        None,
        "--port",
        help="Port to bind (default: PUBCONFIG_PORT or 3000; 0 selects an ephemeral port).",
    ),
    publisher: str | None = typer.Option(
        None,
        "--publisher",
        help="Publisher file to open when the editor loads.",
    ),
    browser: bool = typer.Option(
        False,
        "--browser/--no-browser",
        help="Open the editor URL in the default browser.",
    ),
    check: bool = typer.Option(
        False,
        "--check",
        help="Start server, verify startup path, then exit.",
    ),
) -> None:
    """Serve the store API and browser editor for the local data directory."""
    settings = _CLI_OPTIONS.settings
    effective_port = 0 if check else (settings.port if port is None else port)
    config = UIServerConfig(
        host=host or settings.host,
        port=effective_port,
        data_dir=settings.data_dir,
        history_dir=settings.resolved_history_dir,
        required_fields=settings.required_fields,
    )

    try:
        with start_ui_server(config) as (server, _thread):
            bound_host, bound_port = server.server_address[:2]
            ui_url = build_ui_url(bound_host, bound_port, document_id=publisher)
            if check:
                _echo(f"serve check ok: {ui_url}")
                return

            _echo(f"serving: {ui_url}")
            if browser:
                webbrowser.open(ui_url)
            try:
                while True:
                    time.sleep(0.25)
            except KeyboardInterrupt:
                _echo("server stopped")
    except OSError as error:
        raise _fail("serve", error) from error


def main() -> None:
    app()
