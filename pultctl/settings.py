"""INI settings store using the key and array layout of Qt's INI format."""

from __future__ import annotations

import codecs
from collections.abc import Mapping
from pathlib import Path
from typing import Any

_SPECIAL_CHARS = frozenset(',;="\\')


def _to_text(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _quote(text: str) -> str:
    if text != text.strip() or any(ch in _SPECIAL_CHARS for ch in text):
        escaped = text.replace("\\", "\\\\").replace('"', '\\"')
        return f'"{escaped}"'
    return text


def _unquote(raw: str) -> str:
    raw = raw.strip()
    if len(raw) < 2 or raw[0] != '"' or raw[-1] != '"':
        return raw
    out = []
    chars = iter(raw[1:-1])
    for ch in chars:
        out.append(next(chars, "") if ch == "\\" else ch)
    return "".join(out)


def _convert(raw: str, default: Any) -> Any:
    if isinstance(default, bool):
        return raw.strip().lower() not in ("", "0", "false")
    if isinstance(default, int):
        try:
            return int(raw.strip())
        except ValueError:
            return 0
    if isinstance(default, float):
        try:
            return float(raw.strip())
        except ValueError:
            return 0.0
    return raw


def _normalize(key: str) -> str:
    return "/".join(part for part in key.replace("\\", "/").split("/") if part)


class IniSettings:
    """Key/value store backed by an INI file.

    Keys are slash-separated paths and are matched case-insensitively.
    Arrays follow the ``prefix/size`` and ``prefix/<n>/key`` (1-based) layout.
    Entries returned by :meth:`read_array` are views sharing the same store.
    """

    def __init__(self, path, encoding="utf-8"):
        self._path = Path(path)
        self._encoding = codecs.lookup(encoding).name
        self._prefix = ""
        self._store: dict[str, tuple[str, str]] = {}
        if self._path.exists():
            self._parse(self._path.read_text(encoding=self._encoding))

    @property
    def path(self) -> Path:
        return self._path

    def _view(self, prefix: str) -> IniSettings:
        view = object.__new__(type(self))
        view._path = self._path
        view._encoding = self._encoding
        view._prefix = prefix
        view._store = self._store
        return view

    def _full(self, key: str) -> str:
        key = _normalize(key)
        return f"{self._prefix}/{key}" if self._prefix else key

    def _parse(self, text: str) -> None:
        section = ""
        for line in text.lstrip("\ufeff").splitlines():
            stripped = line.strip()
            if not stripped or stripped[0] in ";#":
                continue
            if stripped.startswith("[") and stripped.endswith("]"):
                name = stripped[1:-1].strip()
                section = "" if name.lower() == "general" else _normalize(name)
                continue
            if "=" not in stripped:
                continue
            key, raw = stripped.split("=", 1)
            key = _normalize(key)
            full = f"{section}/{key}" if section else key
            self._store[full.lower()] = (full, _unquote(raw))

    def __contains__(self, key: str) -> bool:
        return self._full(key).lower() in self._store

    def value(self, key, default=None):
        """Return the value at ``key`` converted to the type of ``default``."""
        entry = self._store.get(self._full(key).lower())
        if entry is None:
            return default
        return _convert(entry[1], default)

    def set_value(self, key, value):
        full = self._full(key)
        self._store[full.lower()] = (full, _to_text(value))

    def array_size(self, prefix):
        """Return the recorded size of the array at ``prefix`` (0 if absent)."""
        return self.value(f"{_normalize(prefix)}/size", 0)

    def read_array(self, prefix):
        """Return one view per entry of the array at ``prefix``."""
        base = self._full(prefix)
        return [self._view(f"{base}/{n}") for n in range(1, self.array_size(prefix) + 1)]

    def write_array(self, prefix, items):
        """Write an array.

        ``items`` is a sequence of mappings, or a mapping of zero-based index
        to mapping. Values that are lists or tuples become nested arrays.
        The array size becomes the highest written index plus one.
        """
        prefix = _normalize(prefix)
        entries = items.items() if isinstance(items, Mapping) else enumerate(items)
        size = 0
        for index, fields in entries:
            entry_prefix = f"{prefix}/{index + 1}"
            for key, val in fields.items():
                if isinstance(val, (list, tuple)):
                    self.write_array(f"{entry_prefix}/{key}", val)
                else:
                    self.set_value(f"{entry_prefix}/{key}", val)
            size = max(size, index + 1)
        self.set_value(f"{prefix}/size", size)

    def save(self):
        """Write the whole store back to its file."""
        sections: dict[str, list[tuple[str, str]]] = {"General": []}
        for key, raw in self._store.values():
            if "/" in key:
                section, sub = key.split("/", 1)
            else:
                section, sub = "General", key
            sections.setdefault(section, []).append((sub, raw))
        lines = []
        for section, pairs in sections.items():
            if not pairs:
                continue
            if lines:
                lines.append("")
            lines.append(f"[{section}]")
            lines.extend(f"{sub.replace('/', chr(92))}={_quote(raw)}" for sub, raw in pairs)
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text("\n".join(lines) + "\n", encoding=self._encoding)