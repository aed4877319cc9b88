"""Tests for ml_results.core.multipart — envelope splitting and aggregation."""

import pytest

from ml_results.core.multipart import aggregate, parse_multipart, parse_response, split_parts
from ml_results.core.records import Record
from tests.harness.builders import make_multipart, make_part, make_xml_parts


def contents(records):
    return [r.content for r in records]


# ─── Basic envelopes ─────────────────────────────────────────────────────────


class TestParseMultipart:
    def test_two_parts_in_order(self, two_part_body):
        records = parse_multipart(two_part_body)
        assert len(records) == 2
        assert contents(records) == ["First", "Second"]
        assert [r.content_type for r in records] == ["text/plain", "text/plain"]

    def test_explicit_boundary_gives_same_result(self, two_part_body):
        assert parse_multipart(two_part_body, "abc123") == parse_multipart(two_part_body)

    def test_lf_line_endings(self):
        body = make_multipart([make_part("A"), make_part("B")], boundary="xyz", newline="\n")
        assert contents(parse_multipart(body)) == ["A", "B"]

    def test_returns_tuple_of_records(self, two_part_body):
        records = parse_multipart(two_part_body)
        assert isinstance(records, tuple)
        assert all(isinstance(r, Record) for r in records)

    def test_header_fields_carried_per_part(self):
        body = make_multipart(make_xml_parts(3))
        records = parse_multipart(body)
        assert [r.uri for r in records] == [
            "/ligands/00000.xml",
            "/ligands/00001.xml",
            "/ligands/00002.xml",
        ]
        assert {r.primitive for r in records} == {"element"}
        assert {r.path for r in records} == {"/ligand"}

    def test_multiline_body_keeps_inner_line_endings(self):
        body = make_multipart([make_part("line1\r\n\r\nline2", content_type="text/plain")])
        assert contents(parse_multipart(body)) == ["line1\r\n\r\nline2"]


# ─── Boundary handling ───────────────────────────────────────────────────────


class TestBoundaries:
    def test_metacharacter_boundary_explicit(self):
        body = make_multipart([make_part("A"), make_part("B")], boundary="a+b.c(1)")
        assert contents(parse_multipart(body, "a+b.c(1)")) == ["A", "B"]

    def test_metacharacter_boundary_detected(self):
        body = make_multipart([make_part("A"), make_part("B")], boundary="a+b*c")
        assert contents(parse_multipart(body)) == ["A", "B"]

    def test_boundary_inside_body_line_does_not_split(self):
        body = make_multipart([
            make_part("see --abc123 inline"),
            make_part("--abc123x is not a delimiter"),
        ])
        assert contents(parse_multipart(body)) == [
            "see --abc123 inline",
            "--abc123x is not a delimiter",
        ]

    def test_dashed_boundary_needs_content_type(self):
        body = make_multipart([make_part("A"), make_part("B")], boundary="ML-7f3a")
        # Detection only recognises dash-free tokens; without a hint it is one part.
        assert len(parse_multipart(body)) == 1
        records = parse_response(body, content_type="multipart/mixed; boundary=ML-7f3a")
        assert contents(records) == ["A", "B"]

    def test_explicit_boundary_beats_content_type(self, two_part_body):
        records = parse_response(
            two_part_body,
            content_type="multipart/mixed; boundary=wrong",
            boundary="abc123",
        )
        assert contents(records) == ["First", "Second"]


# ─── Preamble, epilogue, degenerate envelopes ────────────────────────────────


class TestEnvelopeEdges:
    def test_preamble_discarded(self, two_part_body):
        records = parse_multipart("This is the preamble.\r\n" + two_part_body)
        assert contents(records) == ["First", "Second"]

    def test_epilogue_discarded(self, two_part_body):
        records = parse_multipart(two_part_body + "epilogue text\r\n")
        assert contents(records) == ["First", "Second"]

    def test_unterminated_envelope_keeps_last_part(self):
        body = make_multipart([make_part("A"), make_part("B")], terminate=False)
        assert contents(parse_multipart(body)) == ["A", "B"]

    def test_empty_segments_skipped(self):
        body = "--b\r\n--b\r\n\r\n--b\r\nContent-Type: text/plain\r\n\r\nX\r\n--b--\r\n"
        assert parse_multipart(body) == (Record(content_type="text/plain", content="X"),)

    def test_blank_line_after_delimiter_still_reads_headers(self):
        body = "--b\n\nContent-Type: text/plain\n\nFirst\n--b--"
        assert parse_multipart(body) == (Record(content_type="text/plain", content="First"),)

    def test_part_without_separator_is_all_content(self):
        body = "--b\r\nheaderless\r\n--b--\r\n"
        assert parse_multipart(body) == (Record(content="headerless"),)

    def test_terminal_marker_only_is_empty(self):
        assert parse_multipart("--abc123--\r\n") == ()

    def test_empty_input(self):
        assert parse_multipart("") == ()
        assert parse_multipart(None) == ()


class TestSinglePartFallback:
    def test_no_boundary_parses_whole_text(self):
        records = parse_multipart("Content-Type: text/plain\n\nHello")
        assert records == (Record(content_type="text/plain", content="Hello"),)

    def test_boundary_that_never_occurs(self):
        records = parse_multipart("Content-Type: text/plain\n\nHello", "nothere")
        assert contents(records) == ["Hello"]

    def test_plain_text_without_headers(self):
        assert parse_multipart("42") == (Record(content="42"),)

    def test_split_parts_reports_no_delimiter(self):
        assert split_parts("no delimiters here", "abc") is None

    def test_comment_line_is_not_a_boundary(self):
        body = "Content-Type: text/plain\n\nintro line\n-- note\nmore"
        assert parse_multipart(body) == (
            Record(content_type="text/plain", content="intro line\n-- note\nmore"),
        )

    def test_comment_line_in_unheadered_text(self):
        body = "select 1\n--TODO\nselect 2"
        assert contents(parse_multipart(body)) == [body]

    def test_detected_boundary_trusted_with_terminal_marker(self, two_part_body):
        records = parse_multipart("preamble\r\n" + two_part_body)
        assert contents(records) == ["First", "Second"]

    def test_explicit_boundary_is_not_second_guessed(self):
        body = "preamble\n--abc\nContent-Type: text/plain\n\nX\n"
        assert contents(parse_multipart(body, "abc")) == ["X"]
        assert len(parse_multipart(body)) == 1


# ─── Aggregation ─────────────────────────────────────────────────────────────


class TestAggregate:
    def test_joins_contents_with_newline(self, two_part_body):
        assert aggregate(two_part_body) == "First\nSecond"

    def test_single_part(self):
        assert aggregate("Content-Type: text/plain\n\nHello") == "Hello"

    def test_empty(self):
        assert aggregate("") == ""

    @pytest.mark.parametrize(
        "body",
        [
            make_multipart([make_part("A"), make_part("B\nC")], boundary="q"),
            make_multipart(make_xml_parts(4), boundary="a+b"),
            "Content-Type: text/plain\n\nsolo",
            "--b\r\n\r\nContent-Type: text/plain\r\n\r\nafter blank\r\n--b--",
        ],
    )
    def test_consistent_with_parse_multipart(self, body):
        assert aggregate(body) == "\n".join(contents(parse_multipart(body)))


# ─── Scale ───────────────────────────────────────────────────────────────────


class TestLargeResponse:
    def test_five_thousand_parts(self):
        body = make_multipart(make_xml_parts(5000), boundary="ML_BOUNDARY_7b3f")
        records = parse_multipart(body)
        assert len(records) == 5000
        assert records[0].content_type == "application/xml"
        assert "<ligand>" in records[0].content
        assert records[-1].uri == "/ligands/04999.xml"

    def test_aggregate_large(self):
        body = make_multipart(make_xml_parts(5000), boundary="ML_BOUNDARY_7b3f")
        combined = aggregate(body)
        assert combined.count("\n") == 4999
        assert combined.startswith("<ligand><id>0</id></ligand>")
