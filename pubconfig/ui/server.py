"""Local HTTP server: publisher store API plus the browser form editor."""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass, field
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
import json
import logging
from pathlib import Path
import threading
from typing import Any, Callable, Iterator
from urllib.parse import parse_qs, quote, unquote, urlparse

from pubconfig.config import DEFAULT_REQUIRED_FIELDS
from pubconfig.core.canonical import DocumentSerializationError, document_json, parse_document
from pubconfig.diff.compare import BaselineSupersededError
from pubconfig.diff.formatting import render_diff_html
from pubconfig.editor.html import render_form_html
from pubconfig.editor.session import EditSession
from pubconfig.notices import NoticeBoard
from pubconfig.store.base import filter_publishers, normalize_document_id, parse_version
from pubconfig.store.exceptions import (
    DocumentNotFoundError,
    InvalidDocumentError,
    InvalidDocumentIdError,
    StoreError,
    StoreUnavailableError,
)
from pubconfig.store.filesystem import FileSystemConfigStore

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class UIServerConfig:
    host: str = "127.0.0.1"
    port: int = 3000
    data_dir: Path = Path("data")
    history_dir: Path | None = None
    required_fields: tuple[str, ...] = field(default=DEFAULT_REQUIRED_FIELDS)
    initialize_history: bool = True


def build_ui_url(host: str, port: int, *, document_id: str | None = None) -> str:
    suffix = f"/?publisher={quote(document_id)}" if document_id else "/"
    return f"http://{host}:{port}{suffix}"


def status_for_error(error: Exception) -> int:
    """HTTP status for a store or validation failure."""
    if isinstance(error, InvalidDocumentIdError):
        return 400
    if isinstance(error, DocumentNotFoundError):
        return 404
    if isinstance(error, (InvalidDocumentError, DocumentSerializationError)):
        return 422
    if isinstance(error, StoreUnavailableError):
        return 502
    if isinstance(error, StoreError):
        return 500
    return 400


def create_ui_server(config: UIServerConfig) -> ThreadingHTTPServer:
    store = FileSystemConfigStore(
        config.data_dir,
        config.history_dir,
        initialize=config.initialize_history,
    )
    sessions: dict[str, EditSession] = {}
    sessions_lock = threading.Lock()

    def session_for(raw_id: str, *, reload: bool = False) -> EditSession:
        document_id = normalize_document_id(raw_id)
        with sessions_lock:
            session = sessions.get(document_id)
        if session is not None:
            if reload or not session.loaded:
                session.load(document_id)
            return session

        session = EditSession(
            store,
            required_fields=config.required_fields,
            notifier=NoticeBoard(),
        )
        if session.load(document_id):
            with sessions_lock:
                session = sessions.setdefault(document_id, session)
        return session

    def drain_notices(session: EditSession) -> list[dict[str, Any]]:
        board = session.notifier
        if not isinstance(board, NoticeBoard):
            return []
        return [notice.to_dict() for notice in board.drain()]

    def session_state(session: EditSession, **extra: Any) -> dict[str, Any]:
        widget = session.render()
        payload = {
            "document_id": session.document_id,
            "loaded": session.loaded,
            "form_html": render_form_html(widget),
            "preview": session.preview_json(),
            "dirty": session.has_unsaved_changes(),
            "notices": drain_notices(session),
        }
        payload.update(extra)
        return payload

    class Handler(BaseHTTPRequestHandler):
        def do_GET(self) -> None:  # noqa: N802
            parsed = urlparse(self.path)
            route = parsed.path
            query = parse_qs(parsed.query)
            parts = _route_parts(route)

            if route == "/":
                self._write_html(_render_index_html())
                return

            if parts == ["api", "publishers"]:
                self._handle_publishers(query)
                return

            if len(parts) >= 3 and parts[:2] == ["api", "publisher"]:
                self._handle_publisher_get(parts[2], parts[3:])
                return

            if len(parts) == 3 and parts[:2] == ["api", "session"]:
                self._handle_session(lambda: session_state(session_for(parts[2])))
                return

            if len(parts) == 4 and parts[:2] == ["api", "session"] and parts[3] == "compare":
                self._handle_compare(parts[2], query)
                return

            self._write_json(404, {"error": "Not found"})

        def do_PUT(self) -> None:  # noqa: N802
            parts = _route_parts(urlparse(self.path).path)
            if len(parts) == 3 and parts[:2] == ["api", "publisher"]:
                self._handle_publisher_put(parts[2])
                return
            self._write_json(404, {"error": "Not found"})

        def do_POST(self) -> None:  # noqa: N802
            parts = _route_parts(urlparse(self.path).path)
            if len(parts) != 4 or parts[:2] != ["api", "session"]:
                self._write_json(404, {"error": "Not found"})
                return

            document_id, command = parts[2], parts[3]
            if command == "open":
                self._handle_session(lambda: session_state(session_for(document_id, reload=True)))
                return
            if command == "action":
                self._handle_session(lambda: self._apply_action(document_id))
                return
            if command == "save":
                self._handle_session(lambda: self._save(document_id))
                return
            self._write_json(404, {"error": "Not found"})

        def _handle_publishers(self, query: dict[str, list[str]]) -> None:
            try:
                publishers = store.list_publishers()
            except StoreError as error:
                self._write_error(error)
                return
            matches = filter_publishers(publishers, _first(query.get("search")))
            self._write_json(200, {"publishers": [item.to_dict() for item in matches]})

        def _handle_publisher_get(self, raw_id: str, rest: list[str]) -> None:
            try:
                if not rest:
                    self._write_document(200, store.load(raw_id))
                elif rest == ["versions"]:
                    self._write_json(200, store.list_versions(raw_id))
                elif len(rest) == 2 and rest[0] == "versions":
                    self._handle_version(raw_id, rest[1])
                elif rest == ["download"]:
                    document_id = normalize_document_id(raw_id)
                    self._write_document(200, store.load(document_id), attachment=document_id)
                else:
                    self._write_json(404, {"error": "Not found"})
            except (StoreError, ValueError) as error:
                self._write_error(error)

        def _handle_version(self, raw_id: str, raw_version: str) -> None:
            version = parse_version(raw_version)
            try:
                document = store.load_version(raw_id, version)
            except DocumentNotFoundError:
                self._write_json(404, {"error": "Version not found"})
                return
            self._write_document(200, document)

        def _handle_publisher_put(self, raw_id: str) -> None:
            try:
                document_id = normalize_document_id(raw_id)
                document = parse_document(self._read_body_text(), source="request body")
                version = store.save(document_id, document)
            except DocumentSerializationError as error:
                self._write_json(400, {"error": str(error)})
                return
            except (StoreError, ValueError) as error:
                self._write_error(error)
                return
            self._write_json(200, {"success": True, "version": version})

        def _apply_action(self, document_id: str) -> dict[str, Any]:
            request = self._read_json_body()
            session = session_for(document_id)
            path = request.get("path") or []
            if not isinstance(path, list):
                raise ValueError("path must be a JSON array")
            payload = request.get("payload") or {}
            if not isinstance(payload, dict):
                raise ValueError("payload must be a JSON object")
            ok = session.apply(str(request.get("action", "")), path, payload)
            return session_state(session, ok=ok)

        def _save(self, document_id: str) -> dict[str, Any]:
            session = session_for(document_id)
            result = session.save_changes()
            return session_state(session, save=result.to_dict())

        def _handle_compare(self, document_id: str, query: dict[str, list[str]]) -> None:
            try:
                session = session_for(document_id)
            except StoreError as error:
                self._write_error(error)
                return
            against = _first(query.get("against"))
            try:
                diff = session.compare(against)
            except BaselineSupersededError:
                self._write_json(409, {"superseded": True, "against": against})
                return
            view = session.compare_view()
            if diff is None or view is None:
                self._write_json(400, session_state(session, error="Comparison unavailable"))
                return
            self._write_json(
                200,
                {
                    "choice": view.choice,
                    "versions": session.available_versions(),
                    "diff": diff.to_dict(),
                    "diff_html": render_diff_html(diff),
                    "notices": drain_notices(session),
                },
            )

        def _handle_session(self, operation: Callable[[], dict[str, Any]]) -> None:
            try:
                payload = operation()
            except (StoreError, ValueError) as error:
                self._write_error(error)
                return
            self._write_json(200, payload)

        def _read_body_text(self) -> str:
            raw_length = self.headers.get("Content-Length")
            try:
                length = int(raw_length) if raw_length else 0
            except ValueError:
                length = 0
            if length <= 0:
                return ""
            try:
                return self.rfile.read(length).decode("utf-8")
            except UnicodeDecodeError as error:
                raise DocumentSerializationError("request body must be UTF-8") from error

        def _read_json_body(self) -> dict[str, Any]:
            try:
                text = self._read_body_text()
            except DocumentSerializationError:
                return {}
            if not text:
                return {}
            try:
                data = json.loads(text)
            except json.JSONDecodeError:
                return {}
            if not isinstance(data, dict):
                return {}
            return data

        def _write_error(self, error: Exception) -> None:
            status = status_for_error(error)
            if status >= 500:
                logger.error("%s %s failed: %s", self.command, self.path, error)
            self._write_json(status, {"error": str(error)})

        def _write_document(
            self,
            status_code: int,
            document: dict[str, Any],
            *,
            attachment: str | None = None,
        ) -> None:
            body = document_json(document).encode("utf-8")
            self.send_response(status_code)
            self.send_header("Content-Type", "application/json; charset=utf-8")
            self.send_header("Cache-Control", "no-store")
            if attachment:
                self.send_header("Content-Disposition", f'attachment; filename="{attachment}"')
            self.send_header("Content-Length", str(len(body)))
            self.end_headers()
            self.wfile.write(body)

        def _write_html(self, html: str) -> None:
            body = html.encode("utf-8")
            self.send_response(200)
            self.send_header("Content-Type", "text/html; charset=utf-8")
            self.send_header("Content-Length", str(len(body)))
            self.end_headers()
            self.wfile.write(body)

        def _write_json(self, status_code: int, payload: Any) -> None:
            body = json.dumps(payload, ensure_ascii=True, sort_keys=True).encode("utf-8")
            self.send_response(status_code)
            self.send_header("Content-Type", "application/json; charset=utf-8")
            self.send_header("Cache-Control", "no-store")
            self.send_header("Content-Length", str(len(body)))
            self.end_headers()
            self.wfile.write(body)

        def log_message(self, format: str, *args: object) -> None:  # noqa: A002
            logger.debug("%s - %s", self.address_string(), format % args)

    server = ThreadingHTTPServer((config.host, config.port), Handler)
    server.sessions = sessions  # type: ignore[attr-defined]
    return server


@contextmanager
def start_ui_server(config: UIServerConfig) -> Iterator[tuple[ThreadingHTTPServer, threading.Thread]]:
    server = create_ui_server(config)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    try:
        yield server, thread
    finally:
        server.shutdown()
        server.server_close()
        thread.join(timeout=2)


def _route_parts(route: str) -> list[str]:
    return [unquote(part) for part in route.strip("/").split("/") if part]


def _first(values: list[str] | None) -> str | None:
    if not values:
        return None
    return values[0]


def _render_index_html() -> str:
    return """<!doctype html>
<html lang="en">
<head>
  <meta charset="utf-8" />
  <meta name="viewport" content="width=device-width, initial-scale=1" />
  <title>Publisher Config Editor</title>
  <style>
    :root {
      --bg: #f5f6f8;
      --panel: #ffffff;
      --ink: #1f2933;
      --accent: #2563eb;
      --added: #dcfce7;
      --removed: #fee2e2;
      --muted: #6b7280;
      --border: #d1d5db;
      --error: #b91c1c;
      --success: #047857;
    }
    * { box-sizing: border-box; }
    body { margin: 0; font-family: system-ui, sans-serif; background: var(--bg); color: var(--ink); }
    header { padding: 12px 20px; background: var(--panel); border-bottom: 1px solid var(--border); display: flex; gap: 12px; align-items: center; }
    header h1 { font-size: 18px; margin: 0; flex: 1; }
    main { display: grid; grid-template-columns: 260px 1fr 380px; gap: 16px; padding: 16px; }
    .panel { background: var(--panel); border: 1px solid var(--border); border-radius: 8px; padding: 12px; min-height: 200px; }
    .base-input { padding: 6px 8px; border: 1px solid var(--border); border-radius: 4px; font: inherit; }
    .base-button { padding: 6px 10px; border: 1px solid var(--border); border-radius: 4px; background: #f9fafb; cursor: pointer; font: inherit; }
    .base-button.primary { background: var(--accent); color: #fff; border-color: var(--accent); }
    .publisher-list { list-style: none; padding: 0; margin: 8px 0 0; }
    .publisher-list li { padding: 6px 8px; border-radius: 4px; cursor: pointer; }
    .publisher-list li.active, .publisher-list li:hover { background: #e0e7ff; }
    .publisher-list small { color: var(--muted); display: block; }
    .form-field { border-left: 2px solid var(--border); padding: 4px 0 4px 10px; margin: 6px 0; }
    .form-field__header { display: flex; align-items: center; gap: 8px; }
    .form-field__label, .form-field-checkbox-label { font-weight: 600; }
    .form-field__content.collapsed { display: none; }
    .toggle-button .toggle-icon { display: inline-block; transition: transform 0.1s; }
    .toggle-button.expanded .toggle-icon { transform: rotate(90deg); }
    .delete-button { color: var(--error); }
    .array-item { display: flex; gap: 8px; align-items: flex-start; margin: 4px 0; }
    .array-item-content { flex: 1; }
    .radio-group { display: flex; gap: 12px; }
    .add-field { display: flex; gap: 6px; margin-top: 8px; }
    .required-fields__header, .optional-fields__header { font-size: 14px; color: var(--muted); text-transform: uppercase; }
    pre.preview { white-space: pre-wrap; font-size: 12px; margin: 0; }
    .dirty { color: var(--error); font-size: 13px; }
    .notices { position: fixed; right: 16px; bottom: 16px; display: flex; flex-direction: column; gap: 6px; }
    .notice { padding: 8px 12px; border-radius: 6px; color: #fff; background: var(--muted); }
    .notice.error { background: var(--error); }
    .notice.success { background: var(--success); }
    .compare { display: none; grid-column: 1 / -1; }
    .compare.open { display: block; }
    .diff-line { display: grid; grid-template-columns: 40px 40px 20px 1fr; font-family: monospace; font-size: 12px; }
    .diff-line.added { background: var(--added); }
    .diff-line.removed { background: var(--removed); }
    .diff-line__number { color: var(--muted); text-align: right; padding-right: 6px; }
    .diff-line__content { white-space: pre; }
  </style>
</head>
<body>
  <header>
    <h1>Publisher Config Editor</h1>
    <span id="dirty" class="dirty"></span>
    <button id="compare-button" class="base-button" disabled>Compare</button>
    <button id="download-button" class="base-button" disabled>Download JSON</button>
    <button id="save-button" class="base-button primary" disabled>Save</button>
  </header>
  <main>
    <section class="panel">
      <input id="search" class="base-input" type="search" placeholder="Search publishers" />
      <ul id="publishers" class="publisher-list"></ul>
    </section>
    <section class="panel" id="form"><p class="form-empty">Select a publisher to edit.</p></section>
    <section class="panel"><pre id="preview" class="preview"></pre></section>
    <section class="panel compare" id="compare">
      <label>Compare current edits against
        <select id="baseline" class="base-input"></select>
      </label>
      <button id="compare-close" class="base-button">Close</button>
      <div id="diff"></div>
    </section>
  </main>
  <div id="notices" class="notices"></div>
  <script>
    const state = { id: null, dirty: false, publishers: [], compareRequest: 0 };
    const form = document.getElementById("form");

    async function api(method, url, body) {
      const options = { method, headers: {} };
      if (body !== undefined) {
        options.headers["Content-Type"] = "application/json";
        options.body = JSON.stringify(body);
      }
      const response = await fetch(url, options);
      const data = await response.json();
      if (!response.ok) {
        if (data && data.notices) showNotices(data.notices);
        throw new Error((data && data.error) || response.statusText);
      }
      return data;
    }

    function sessionUrl(suffix) {
      return "/api/session/" + encodeURIComponent(state.id) + suffix;
    }

    function showNotices(notices) {
      const container = document.getElementById("notices");
      for (const notice of notices || []) {
        const item = document.createElement("div");
        item.className = "notice " + notice.level;
        item.textContent = notice.message;
        container.appendChild(item);
        setTimeout(() => item.remove(), 4000);
      }
    }

    function fail(error) {
      showNotices([{ level: "error", message: error.message }]);
    }

    function applyState(data, rerender) {
      if (rerender) form.innerHTML = data.form_html;
      document.getElementById("preview").textContent = data.preview;
      state.dirty = data.dirty;
      document.getElementById("dirty").textContent = data.dirty ? "Unsaved changes" : "";
      for (const id of ["save-button", "compare-button", "download-button"]) {
        document.getElementById(id).disabled = !data.loaded;
      }
      showNotices(data.notices);
    }

    function renderPublishers() {
      const query = document.getElementById("search").value.trim().toLowerCase();
      const list = document.getElementById("publishers");
      list.innerHTML = "";
      const matches = state.publishers.filter((item) =>
        !query || item.id.toLowerCase().includes(query) || item.alias.toLowerCase().includes(query));
      if (!matches.length) {
        const empty = document.createElement("li");
        empty.textContent = "No publishers found";
        list.appendChild(empty);
        return;
      }
      for (const item of matches) {
        const row = document.createElement("li");
        row.className = item.file === state.id ? "active" : "";
        row.innerHTML = "<span></span><small></small>";
        row.firstChild.textContent = item.alias;
        row.lastChild.textContent = item.id;
        row.addEventListener("click", () => openPublisher(item.file));
        list.appendChild(row);
      }
    }

    async function loadPublishers() {
      try {
        const data = await api("GET", "/api/publishers");
        state.publishers = data.publishers;
      } catch (error) {
        fail(error);
      }
      renderPublishers();
    }

    async function openPublisher(file) {
      if (state.dirty && !confirm("Discard unsaved changes?")) return;
      state.id = file;
      renderPublishers();
      closeCompare();
      try {
        applyState(await api("POST", sessionUrl("/open")), true);
      } catch (error) {
        fail(error);
      }
    }

    async function sendAction(action, path, payload, rerender) {
      try {
        applyState(await api("POST", sessionUrl("/action"), { action, path, payload }), rerender);
      } catch (error) {
        fail(error);
      }
    }

    form.addEventListener("click", (event) => {
      const target = event.target.closest("[data-action]");
      if (!target || !["toggle", "remove", "add_item", "remove_item", "add_field"].includes(target.dataset.action)) return;
      const path = JSON.parse(target.dataset.path);
      const payload = {};
      if (target.dataset.index !== undefined) payload.index = Number(target.dataset.index);
      if (target.dataset.action === "add_field") {
        const row = target.closest(".add-field");
        payload.key = row.querySelector(".add-field__input").value;
        payload.field_type = row.querySelector(".add-field__select").value;
      }
      sendAction(target.dataset.action, path, payload, true);
    });

    form.addEventListener("input", (event) => {
      const target = event.target;
      if (target.dataset.action !== "input") return;
      sendAction("input", JSON.parse(target.dataset.path), { value: target.value }, false);
    });

    form.addEventListener("change", (event) => {
      const target = event.target;
      if (target.dataset.action !== "select") return;
      sendAction("select", JSON.parse(target.dataset.path), { value: target.value }, false);
    });

    document.getElementById("search").addEventListener("input", renderPublishers);

    document.getElementById("save-button").addEventListener("click", async () => {
      if (state.dirty && !confirm("Are you sure you want to save these changes?")) return;
      try {
        applyState(await api("POST", sessionUrl("/save"), {}), true);
      } catch (error) {
        fail(error);
      }
    });

    document.getElementById("download-button").addEventListener("click", () => {
      const blob = new Blob([document.getElementById("preview").textContent], { type: "application/json" });
      const link = document.createElement("a");
      link.href = URL.createObjectURL(blob);
      link.download = state.id;
      link.click();
      URL.revokeObjectURL(link.href);
    });

    async function loadCompare(against) {
      const query = against ? "?against=" + encodeURIComponent(against) : "";
      const request = ++state.compareRequest;
      try {
        const data = await api("GET", sessionUrl("/compare" + query));
        if (request !== state.compareRequest) return;
        const select = document.getElementById("baseline");
        const options = [["current", "Current Saved (Original)"]].concat(
          data.versions.map((version) => [String(version), "Version " + version]));
        select.innerHTML = "";
        for (const [value, label] of options) {
          const option = document.createElement("option");
          option.value = value;
          option.textContent = label;
          option.selected = value === String(data.choice);
          select.appendChild(option);
        }
        document.getElementById("diff").innerHTML = data.diff_html;
        showNotices(data.notices);
      } catch (error) {
        if (request === state.compareRequest) fail(error);
      }
    }

    function closeCompare() {
      document.getElementById("compare").classList.remove("open");
    }

    document.getElementById("compare-button").addEventListener("click", () => {
      document.getElementById("compare").classList.add("open");
      loadCompare(null);
    });
    document.getElementById("baseline").addEventListener("change", (event) => loadCompare(event.target.value));
    document.getElementById("compare-close").addEventListener("click", closeCompare);

    loadPublishers().then(() => {
      const requested = new URLSearchParams(window.location.search).get("publisher");
      if (requested) openPublisher(requested);
    });
  </script>
</body>
</html>
"""
