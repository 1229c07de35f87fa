from __future__ import annotations

import io
import unittest
from pathlib import Path

from dive.fs.filtering import ExclusionFilter
from dive.fs.records import RecordReader
from dive.fs.sniff import OCTET_STREAM, detect_content_type, is_binary
from dive.search.pattern import Matcher, PatternError


class MatcherTests(unittest.TestCase):
    def test_regex_is_partial_match(self) -> None:
        matcher = Matcher.compile("wor.d")
        self.assertTrue(matcher.matches("hello world\n"))
        self.assertFalse(matcher.matches("hello"))

    def test_literal_does_not_interpret_metacharacters(self) -> None:
        matcher = Matcher.compile("a.c", literal=True)
        self.assertTrue(matcher.matches("xa.cx"))
        self.assertFalse(matcher.matches("abc"))

    def test_literal_is_case_sensitive(self) -> None:
        matcher = Matcher.compile("Hello", literal=True)
        self.assertFalse(matcher.matches("hello"))

    def test_dollar_anchors_before_trailing_newline(self) -> None:
        matcher = Matcher.compile("o$")
        self.assertTrue(matcher.matches("hello\n"))
        self.assertTrue(matcher.matches("hello"))
        self.assertFalse(matcher.matches("hello\nworld\n"))

    def test_invalid_regex_raises(self) -> None:
        with self.assertRaises(PatternError) as ctx:
            Matcher.compile("(unclosed")
        self.assertEqual(ctx.exception.expression, "(unclosed")

    def test_invalid_regex_is_fine_in_literal_mode(self) -> None:
        self.assertTrue(Matcher.compile("(", literal=True).matches("f(x)"))


class SniffTests(unittest.TestCase):
    def test_plain_text(self) -> None:
        self.assertEqual(detect_content_type(b"hello\nworld\n"), "text/plain; charset=utf-8")

    def test_control_bytes_are_binary(self) -> None:
        content_type = detect_content_type(b"hello\x00\x01world\n")
        self.assertEqual(content_type, OCTET_STREAM)
        self.assertTrue(is_binary(content_type))

    def test_known_signatures(self) -> None:
        self.assertEqual(detect_content_type(b"\x89PNG\r\n\x1a\n\x00\x00"), "image/png")
        self.assertEqual(detect_content_type(b"%PDF-1.7\n"), "application/pdf")
        self.assertEqual(detect_content_type(b"PK\x03\x04\x14\x00"), "application/zip")

    def test_markup_skips_leading_whitespace(self) -> None:
        self.assertEqual(detect_content_type(b"  \n<html>"), "text/html; charset=utf-8")
        self.assertEqual(detect_content_type(b"<?xml version='1.0'?>"), "text/xml; charset=utf-8")

    def test_html_tag_needs_terminator(self) -> None:
        self.assertEqual(detect_content_type(b"<pizza>"), "text/plain; charset=utf-8")

    def test_only_first_512_bytes_count(self) -> None:
        data = b"a" * 512 + b"\x00"
        self.assertFalse(is_binary(detect_content_type(data)))


class RecordReaderTests(unittest.IsolatedAsyncioTestCase):
    async def _collect(self, data: bytes, separator: bytes, chunk_size: int = 3) -> list[bytes]:
        reader = RecordReader(io.BytesIO(data), separator, chunk_size=chunk_size)
        return [record async for record in reader.records()]

    async def test_splits_across_chunk_boundaries(self) -> None:
        records = await self._collect(b"hello\nworld\n", b"\n")
        self.assertEqual(records, [b"hello\n", b"world\n"])

    async def test_trailing_record_without_separator(self) -> None:
        records = await self._collect(b"one\ntwo", b"\n")
        self.assertEqual(records, [b"one\n", b"two"])

    async def test_carriage_separator(self) -> None:
        records = await self._collect(b"a\rb\nc\r", b"\r", chunk_size=64)
        self.assertEqual(records, [b"a\r", b"b\nc\r"])

    async def test_empty_input(self) -> None:
        self.assertEqual(await self._collect(b"", b"\n"), [])

    def test_rejects_multibyte_separator(self) -> None:
        with self.assertRaises(ValueError):
            RecordReader(io.BytesIO(b""), b"\r\n")


class ExclusionFilterTests(unittest.TestCase):
    def test_matches_base_name_only(self) -> None:
        exclusions = ExclusionFilter([".git", "*.egg-info"])
        self.assertTrue(exclusions.excluded(Path("repo/.git")))
        self.assertTrue(exclusions.excluded(Path("dive.egg-info")))
        self.assertFalse(exclusions.excluded(Path(".git/objects")))
        self.assertFalse(exclusions.excluded(Path("src")))

    def test_current_directory_is_never_excluded(self) -> None:
        self.assertFalse(ExclusionFilter(["*"]).excluded(Path(".")))

    def test_disabled(self) -> None:
        self.assertFalse(ExclusionFilter([".git"], disabled=True).excluded(Path(".git")))


if __name__ == "__main__":
    unittest.main()
