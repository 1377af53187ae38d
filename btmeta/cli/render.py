"""Text rendering of decoded values and torrent metadata."""

from __future__ import annotations

import json
from typing import Any

from btmeta.core.values import ByteString, Dictionary, Integer, List, Value
from btmeta.models import TorrentInfo


def render_bytes(data: bytes) -> str:
    """Render bytes as UTF-8 text, or ``<hex:...>`` when not valid UTF-8."""
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError:
        return f"<hex:{data.hex()}>"


def _json_string(data: bytes) -> str:
    return json.dumps(render_bytes(data), ensure_ascii=False)


def render_value(value: Value) -> str:
    """Render a decoded value as a single line of JSON.

    Lists keep their order and dictionaries keep their decoded key order.
    The tree is walked with an explicit stack so any depth the decoder
    accepted can be rendered.
    """
    parts: list[str] = []
    # str entries are literal JSON punctuation, everything else is a value
    stack: list[Value | str] = [value]
    while stack:
        item = stack.pop()
        if isinstance(item, str):
            parts.append(item)
        elif isinstance(item, ByteString):
            parts.append(_json_string(item.data))
        elif isinstance(item, Integer):
            parts.append(str(item.value))
        elif isinstance(item, List):
            parts.append("[")
            stack.append("]")
            for index in range(len(item.items) - 1, -1, -1):
                stack.append(item.items[index])
                if index:
                    stack.append(", ")
        elif isinstance(item, Dictionary):
            parts.append("{")
            stack.append("}")
            for index in range(len(item.entries) - 1, -1, -1):
                key, child = item.entries[index]
                stack.append(child)
                stack.append(f"{_json_string(key.data)}: ")
                if index:
                    stack.append(", ")
        else:
            msg = f"Cannot render {type(item).__name__}"
            raise TypeError(msg)
    return "".join(parts)


def info_lines(info: TorrentInfo) -> list[str]:
    """Lines printed by the ``info`` command, in order."""
    lines = [
        f"Tracker URL: {info.tracker_url}",
        f"Length: {info.length}",
        f"Info Hash: {info.info_hash}",
        f"Piece Length: {info.piece_length}",
        "Piece Hashes:",
    ]
    lines.extend(info.piece_hashes)
    return lines


def info_json(info: TorrentInfo) -> str:
    """Render torrent metadata as indented JSON."""
    data: dict[str, Any] = {
        "tracker_url": info.tracker_url,
        "length": info.length,
        "info_hash": info.info_hash,
        "piece_length": info.piece_length,
        "piece_hashes": info.piece_hashes,
    }
    if info.name is not None:
        data["name"] = render_bytes(info.name)
    if info.comment is not None:
        data["comment"] = render_bytes(info.comment)
    if info.created_by is not None:
        data["created_by"] = render_bytes(info.created_by)
    if info.creation_date is not None:
        data["creation_date"] = info.creation_date
    data["private"] = info.is_private
    return json.dumps(data, indent=2, ensure_ascii=False)
