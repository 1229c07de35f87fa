"""Content-type sniffing from a file's leading bytes.

Follows the WHATWG MIME sniffing algorithm closely enough to tell text,
markup and well-known binary containers apart: signatures are tried in
order, and anything left over is ``text/plain`` unless it contains a
binary control byte, in which case it is ``application/octet-stream``.
"""

from __future__ import annotations

from dataclasses import dataclass

SNIFF_LEN = 512
OCTET_STREAM = "application/octet-stream"
TEXT_PLAIN = "text/plain; charset=utf-8"

_WHITESPACE = b"\t\n\x0c\r "
_BINARY_BYTES = frozenset([*range(0x00, 0x09), 0x0B, *range(0x0E, 0x1B), *range(0x1C, 0x20)])


@dataclass(frozen=True, slots=True)
class _Exact:
    prefix: bytes
    content_type: str

    def match(self, data: bytes, first: int) -> str | None:  # noqa: ARG002
        return self.content_type if data.startswith(self.prefix) else None


@dataclass(frozen=True, slots=True)
class _Masked:
    mask: bytes
    pattern: bytes
    content_type: str
    skip_ws: bool = False

    def match(self, data: bytes, first: int) -> str | None:
        if self.skip_ws:
            data = data[first:]
        if len(data) < len(self.pattern):
            return None
        for want, mask, have in zip(self.pattern, self.mask, data):
            if have & mask != want:
                return None
        return self.content_type


@dataclass(frozen=True, slots=True)
class _HtmlTag:
    tag: bytes

    def match(self, data: bytes, first: int) -> str | None:
        data = data[first:]
        if len(data) < len(self.tag) + 1:
            return None
        if data[: len(self.tag)].upper() != self.tag:
            return None
        # The tag must be terminated by a space or a closing bracket.
        if data[len(self.tag)] not in b" >":
            return None
        return "text/html; charset=utf-8"


@dataclass(frozen=True, slots=True)
class _Text:
    def match(self, data: bytes, first: int) -> str | None:
        if any(byte in _BINARY_BYTES for byte in data[first:]):
            return None
        return TEXT_PLAIN


_HTML_TAGS = (
    b"<!DOCTYPE HTML",
    b"<HTML",
    b"<HEAD",
    b"<SCRIPT",
    b"<IFRAME",
    b"<H1",
    b"<DIV",
    b"<FONT",
    b"<TABLE",
    b"<A",
    b"<STYLE",
    b"<TITLE",
    b"<B",
    b"<BODY",
    b"<BR",
    b"<P",
    b"<!--",
)

_SIGNATURES = (
    *(_HtmlTag(tag) for tag in _HTML_TAGS),
    _Masked(b"\xff\xff\xff\xff\xff", b"<?xml", "text/xml; charset=utf-8", skip_ws=True),
    _Exact(b"%PDF-", "application/pdf"),
    _Exact(b"%!PS-Adobe-", "application/postscript"),
    _Masked(b"\xff\xff\x00\x00", b"\xfe\xff\x00\x00", "text/plain; charset=utf-16be"),
    _Masked(b"\xff\xff\x00\x00", b"\xff\xfe\x00\x00", "text/plain; charset=utf-16le"),
    _Masked(b"\xff\xff\xff\x00", b"\xef\xbb\xbf\x00", TEXT_PLAIN),
    _Exact(b"\x00\x00\x01\x00", "image/x-icon"),
    _Exact(b"\x00\x00\x02\x00", "image/x-icon"),
    _Exact(b"BM", "image/bmp"),
    _Exact(b"GIF87a", "image/gif"),
    _Exact(b"GIF89a", "image/gif"),
    _Masked(
        b"\xff\xff\xff\xff\x00\x00\x00\x00\xff\xff\xff\xff\xff\xff",
        b"RIFF\x00\x00\x00\x00WEBPVP",
        "image/webp",
    ),
    _Exact(b"\x89PNG\x0d\x0a\x1a\x0a", "image/png"),
    _Exact(b"\xff\xd8\xff", "image/jpeg"),
    _Masked(b"\xff\xff\xff\xff", b".snd", "audio/basic"),
    _Masked(
        b"\xff\xff\xff\xff\x00\x00\x00\x00\xff\xff\xff\xff",
        b"FORM\x00\x00\x00\x00AIFF",
        "audio/aiff",
    ),
    _Masked(b"\xff\xff\xff", b"ID3", "audio/mpeg"),
    _Masked(b"\xff\xff\xff\xff\xff", b"OggS\x00", "application/ogg"),
    _Masked(
        b"\xff\xff\xff\xff\xff\xff\xff\xff",
        b"MThd\x00\x00\x00\x06",
        "audio/midi",
    ),
    _Masked(
        b"\xff\xff\xff\xff\x00\x00\x00\x00\xff\xff\xff\xff",
        b"RIFF\x00\x00\x00\x00AVI ",
        "video/avi",
    ),
    _Masked(
        b"\xff\xff\xff\xff\x00\x00\x00\x00\xff\xff\xff\xff",
        b"RIFF\x00\x00\x00\x00WAVE",
        "audio/wave",
    ),
    _Exact(b"\x1a\x45\xdf\xa3", "video/webm"),
    _Exact(b"wOFF", "font/woff"),
    _Exact(b"wOF2", "font/woff2"),
    _Exact(b"\x1f\x8b\x08", "application/x-gzip"),
    _Exact(b"PK\x03\x04", "application/zip"),
    _Exact(b"Rar!\x1a\x07\x00", "application/x-rar-compressed"),
    _Exact(b"Rar!\x1a\x07\x01\x00", "application/x-rar-compressed"),
    _Exact(b"\x00asm", "application/wasm"),
    _Text(),
)


def _first_non_ws(data: bytes) -> int:
    for index, byte in enumerate(data):
        if byte not in _WHITESPACE:
            return index
    return len(data)


def detect_content_type(data: bytes) -> str:
    """Return a MIME type for ``data``; never fails, falls back to octet-stream."""
    data = data[:SNIFF_LEN]
    first = _first_non_ws(data)
    for signature in _SIGNATURES:
        content_type = signature.match(data, first)
        if content_type is not None:
            return content_type
    return OCTET_STREAM


def is_binary(content_type: str) -> bool:
    return "octet-stream" in content_type
