"""Single-pass scanner locating ``{{...}}`` placeholders in a byte buffer."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from .diagnostics import DiagnosticEmitter, ensure_emitter


OPEN = b"{{"
CLOSE = b"}}"
_OPEN_BRACE = ord("{")
_ESCAPE = ord("\\")


@dataclass(frozen=True, slots=True)
class RawSpan:
    """Byte range of a tag (delimiters included) and its inner text.

    Escape spans cover ``\\{{`` or ``\\}}``; their ``inner`` is the literal
    delimiter pair they stand for.
    """

    start: int
    end: int
    inner: str
    escaped: bool = False


def location(data: bytes, position: int) -> tuple[int, int]:
    """Return the 1-based ``(line, column)`` of ``position`` in ``data``."""
    line = data.count(b"\n", 0, position) + 1
    column = position - (data.rfind(b"\n", 0, position) + 1) + 1
    return line, column


def _unescape(raw: bytes) -> str:
    text = raw.replace(b"\\" + OPEN, OPEN).replace(b"\\" + CLOSE, CLOSE)
    return text.decode("utf-8", errors="replace")


def scan(
    buffer: bytes | bytearray,
    *,
    emitter: DiagnosticEmitter | None = None,
    source: Path | str | None = None,
) -> list[RawSpan]:
    """Return every well-formed tag span in ``buffer``, left to right.

    Spans never overlap and their starts strictly increase. An opening
    ``{{`` with no matching ``}}`` before the next ``{{`` (or the end of the
    buffer), and a ``}}`` with no opener, are left as literal text and
    reported as warnings.
    """
    emitter = ensure_emitter(emitter)
    data = bytes(buffer)
    label = f" in {source}" if source else ""

    def _orphan(kind: str, position: int) -> None:
        line, column = location(data, position)
        emitter.warning(f"{kind} at {line}:{column}{label}; leaving it as literal text.")

    spans: list[RawSpan] = []
    pending: int | None = None
    pending_escapes: list[RawSpan] = []
    length = len(data)
    index = 0

    while index < length:
        if data[index] == _ESCAPE and data[index + 1 : index + 3] in (OPEN, CLOSE):
            escape = RawSpan(index, index + 3, data[index + 1 : index + 3].decode("ascii"), True)
            if pending is None:
                spans.append(escape)
            else:
                pending_escapes.append(escape)
            index += 3
            continue

        if data.startswith(OPEN, index):
            # A run of braces opens at its innermost pair.
            while index + 2 < length and data[index + 2] == _OPEN_BRACE:
                index += 1
            if pending is not None:
                _orphan("Unterminated tag opener", pending)
                spans.extend(pending_escapes)
                pending_escapes.clear()
            pending = index
            index += 2
            continue

        if data.startswith(CLOSE, index):
            if pending is None:
                _orphan("Unmatched tag closer", index)
            else:
                spans.append(RawSpan(pending, index + 2, _unescape(data[pending + 2 : index])))
                pending = None
                pending_escapes.clear()
            index += 2
            continue

        index += 1

    if pending is not None:
        _orphan("Unterminated tag opener", pending)
        spans.extend(pending_escapes)

    return spans


__all__ = ["CLOSE", "OPEN", "RawSpan", "location", "scan"]
