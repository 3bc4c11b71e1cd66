"""Path addressing into a nested JSON document."""

from __future__ import annotations

from typing import Any, Iterable

from pubconfig.core.types import DocumentPath, PathToken


class PathError(LookupError):
    """Raised when a path does not resolve inside a document."""


def to_path(tokens: Iterable[Any]) -> DocumentPath:
    """Coerce raw tokens (for example from a JSON request) into a path."""
    path: list[PathToken] = []
    for token in tokens:
        if isinstance(token, bool):
            raise PathError(f"Invalid path token: {token!r}")
        if isinstance(token, (str, int)):
            path.append(token)
            continue
        raise PathError(f"Invalid path token: {token!r}")
    return tuple(path)


def get_at_path(root: Any, path: DocumentPath) -> Any:
    current = root
    for depth, token in enumerate(path):
        current = _step(current, token, path[: depth + 1])
    return current


def set_at_path(root: Any, path: DocumentPath, value: Any) -> None:
    if not path:
        raise PathError("Cannot replace the document root by path")
    container = get_at_path(root, path[:-1])
    token = path[-1]
    if isinstance(container, dict):
        container[str(token)] = value
        return
    if isinstance(container, list):
        index = _list_index(container, token, path)
        container[index] = value
        return
    raise PathError(f"Path does not address a container: {format_path(path[:-1])}")


def delete_at_path(root: Any, path: DocumentPath) -> Any:
    if not path:
        raise PathError("Cannot delete the document root")
    container = get_at_path(root, path[:-1])
    token = path[-1]
    if isinstance(container, dict):
        key = str(token)
        if key not in container:
            raise PathError(f"Path not found: {format_path(path)}")
        return container.pop(key)
    if isinstance(container, list):
        index = _list_index(container, token, path)
        return container.pop(index)
    raise PathError(f"Path does not address a container: {format_path(path[:-1])}")


def format_path(path: DocumentPath) -> str:
    """Render a path as a JSON pointer."""
    if not path:
        return ""
    return "".join(f"/{_escape_json_pointer(str(token))}" for token in path)


def _step(current: Any, token: PathToken, partial: DocumentPath) -> Any:
    if isinstance(current, dict):
        key = str(token)
        if key not in current:
            raise PathError(f"Path not found: {format_path(partial)}")
        return current[key]
    if isinstance(current, list):
        return current[_list_index(current, token, partial)]
    raise PathError(f"Path not found: {format_path(partial)}")


def _list_index(container: list[Any], token: PathToken, path: DocumentPath) -> int:
    try:
        index = int(token)
    except (TypeError, ValueError) as error:
        raise PathError(f"Array index must be an integer: {format_path(path)}") from error
    if index < 0 or index >= len(container):
        raise PathError(f"Array index out of range: {format_path(path)}")
    return index


def _escape_json_pointer(token: str) -> str:
    return token.replace("~", "~0").replace("/", "~1")
