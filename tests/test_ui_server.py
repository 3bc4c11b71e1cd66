import json
from pathlib import Path
from urllib.error import HTTPError
from urllib.request import Request, urlopen

import pytest

from pubconfig.store import (
    DocumentNotFoundError,
    HttpConfigStore,
    InvalidDocumentError,
    StoreError,
    StoreUnavailableError,
)
from pubconfig.ui import UIServerConfig, start_ui_server


def _request(url: str, *, method: str = "GET", payload: object | None = None, raw: bytes | None = None) -> tuple[int, object]:
    data = raw if raw is not None else (json.dumps(payload).encode("utf-8") if payload is not None else None)
    request = Request(  # noqa: S310 (local test server)
        url,
        data=data,
        headers={"Content-Type": "application/json"},
        method=method,
    )
    try:
        with urlopen(request, timeout=5) as response:
            return response.getcode(), json.loads(response.read().decode("utf-8"))
    except HTTPError as error:
        return error.code, json.loads(error.read().decode("utf-8"))


@pytest.fixture
def base_url(data_dir: Path):
    config = UIServerConfig(host="127.0.0.1", port=0, data_dir=data_dir)
    with start_ui_server(config) as (server, _thread):
        host, port = server.server_address[:2]
        yield f"http://{host}:{port}"


def test_index_page_renders_editor_shell(base_url: str) -> None:
    with urlopen(base_url + "/", timeout=5) as response:  # noqa: S310
        html = response.read().decode("utf-8")

    assert "<h1>Publisher Config Editor</h1>" in html
    assert 'id="search"' in html
    assert "Are you sure you want to save these changes?" in html
    assert "Current Saved (Original)" in html


def test_publishers_endpoint_lists_and_filters(base_url: str) -> None:
    status, payload = _request(base_url + "/api/publishers")
    assert status == 200
    assert [item["id"] for item in payload["publishers"]] == ["pub-aurora", "pub-nova"]

    _status, filtered = _request(base_url + "/api/publishers?search=NOVA")
    assert [item["file"] for item in filtered["publishers"]] == ["nova.json"]


def test_document_endpoints_follow_store_semantics(base_url: str) -> None:
    status, document = _request(base_url + "/api/publisher/aurora.json")
    assert status == 200
    assert list(document)[:3] == ["publisherId", "aliasName", "pages"]

    document["maxAds"] = 10
    status, saved = _request(base_url + "/api/publisher/aurora.json", method="PUT", payload=document)
    assert (status, saved) == (200, {"success": True, "version": 2})

    _status, versions = _request(base_url + "/api/publisher/aurora.json/versions")
    assert versions == [2, 1]

    _status, first = _request(base_url + "/api/publisher/aurora.json/versions/1")
    assert first["maxAds"] == 4

    status, missing = _request(base_url + "/api/publisher/aurora.json/versions/7")
    assert (status, missing) == (404, {"error": "Version not found"})


def test_versions_of_untracked_document_are_empty(base_url: str, data_dir: Path) -> None:
    (data_dir / "late.json").write_text('{"publisherId": "late"}', encoding="utf-8")

    _status, versions = _request(base_url + "/api/publisher/late.json/versions")

    assert versions == []


def test_error_statuses(base_url: str, data_dir: Path) -> None:
    (data_dir / "broken.json").write_text("{oops", encoding="utf-8")

    status, _payload = _request(base_url + "/api/publisher/ghost.json")
    assert status == 404

    status, payload = _request(base_url + "/api/publisher/broken.json")
    assert status == 422
    assert "broken.json" in payload["error"]

    status, _payload = _request(base_url + "/api/publisher/.hidden")
    assert status == 400

    status, _payload = _request(base_url + "/api/publisher/aurora.json/versions/zero")
    assert status == 400

    status, payload = _request(base_url + "/api/publisher/aurora.json", method="PUT", raw=b"[1, 2]")
    assert status == 400
    assert "JSON object" in payload["error"]

    status, _payload = _request(base_url + "/api/unknown")
    assert status == 404


def test_download_sets_attachment_header(base_url: str) -> None:
    with urlopen(base_url + "/api/publisher/nova/download", timeout=5) as response:  # noqa: S310
        disposition = response.headers["Content-Disposition"]
        body = response.read().decode("utf-8")

    assert disposition == 'attachment; filename="nova.json"'
    assert body.startswith('{\n  "publisherId": "pub-nova",')


def test_session_endpoints_drive_the_editor(base_url: str, data_dir: Path) -> None:
    session_url = base_url + "/api/session/aurora.json"

    status, opened = _request(session_url + "/open", method="POST", payload={})
    assert status == 200
    assert opened["loaded"] is True
    assert opened["dirty"] is False
    assert 'data-action="add_item"' in opened["form_html"]

    _status, edited = _request(
        session_url + "/action",
        method="POST",
        payload={"action": "add_item", "path": ["pages"]},
    )
    assert edited["ok"] is True
    assert edited["dirty"] is True
    assert edited["preview"].count('"pageType"') == 2

    _status, rejected = _request(
        session_url + "/action",
        method="POST",
        payload={"action": "add_field", "path": [], "payload": {"key": "pages", "field_type": "array"}},
    )
    assert rejected["ok"] is False
    assert rejected["notices"] == [{"level": "error", "message": "Field already exists"}]

    _status, saved = _request(session_url + "/save", method="POST", payload={})
    assert saved["save"]["status"] == "saved"
    assert saved["save"]["version"] == 2
    assert saved["dirty"] is False
    assert json.loads((data_dir / "history" / "aurora" / "v2.json").read_text(encoding="utf-8"))["pages"][1] == {
        "pageType": "",
        "selector": "",
        "enabled": False,
    }

    _status, compared = _request(session_url + "/compare?against=1")
    assert compared["choice"] == 1
    assert compared["versions"] == [1]
    assert compared["diff"]["summary"]["added"] > 0
    assert 'class="diff-line added"' in compared["diff_html"]


def test_session_for_missing_document_reports_notice(base_url: str) -> None:
    status, payload = _request(base_url + "/api/session/ghost.json/open", method="POST", payload={})

    assert status == 200
    assert payload["loaded"] is False
    assert payload["notices"][0]["level"] == "error"


def test_unknown_documents_do_not_accumulate_sessions(data_dir: Path) -> None:
    config = UIServerConfig(host="127.0.0.1", port=0, data_dir=data_dir)
    with start_ui_server(config) as (server, _thread):
        host, port = server.server_address[:2]
        base = f"http://{host}:{port}"

        for name in ("ghost.json", "phantom.json", "ghost.json"):
            status, payload = _request(f"{base}/api/session/{name}/open", method="POST", payload={})
            assert status == 200
            assert payload["loaded"] is False
        _request(f"{base}/api/session/aurora.json/open", method="POST", payload={})

        assert list(server.sessions) == ["aurora.json"]


def test_http_store_round_trip_against_server(base_url: str) -> None:
    store = HttpConfigStore(base_url)

    document = store.load("nova")
    assert document["targeting"] == {"geo": "US", "premium": True}

    document["refreshRate"] = 2.5
    assert store.save("nova.json", document) == 2
    assert store.list_versions("nova.json") == [2, 1]
    assert store.load_version("nova.json", 1)["refreshRate"] == 1.5
    assert [publisher.id for publisher in store.list_publishers()] == ["pub-aurora", "pub-nova"]


def test_http_store_maps_error_statuses(base_url: str, data_dir: Path) -> None:
    (data_dir / "broken.json").write_text("{oops", encoding="utf-8")
    store = HttpConfigStore(base_url)

    with pytest.raises(DocumentNotFoundError):
        store.load("ghost.json")
    with pytest.raises(DocumentNotFoundError):
        store.load_version("aurora.json", 9)
    with pytest.raises(InvalidDocumentError):
        store.load("broken.json")


def test_http_store_reports_unreachable_server() -> None:
    store = HttpConfigStore("http://127.0.0.1:9", timeout_seconds=0.5)

    with pytest.raises(StoreUnavailableError):
        store.load("aurora.json")
    assert issubclass(StoreUnavailableError, StoreError)
