"""Unit tests for the version-dispatched record decoder.

WHY: The decoder carries all per-version branching. A wrong token index
silently shifts every field after it; a character-based slice corrupts
every blob after the first non-ASCII byte.

HOW: Tests cover each rule:
  - Version layouts (token counts, indicator positions, field presence)
  - Positional integer fields per version
  - Blob slicing order, absent blobs, byte-domain lengths
  - Base64 payload for versions 4 and 5
  - Failures: short read, bad integers, missing tokens, bad version

RULES:
- Lines are built with conftest.make_line unless the test is about a
  malformed layout
"""

import pytest

from propdump_converter.core import decoder
from propdump_converter.core.decoder import decode_record, split_tokens
from propdump_converter.core.errors import (
    RecordParseError,
    ShortReadError,
    UnsupportedVersionError,
)
from propdump_converter.core.record import SUPPORTED_VERSIONS, VERSION_LAYOUTS

from conftest import make_line


class TestVersionLayouts:

    def test_supported_versions(self):
        assert SUPPORTED_VERSIONS == {2, 3, 4, 5}

    @pytest.mark.parametrize("version, count, indices", [
        (2, 10, (6, 7, 8, None)),
        (3, 12, (8, 9, 10, None)),
        (4, 14, (9, 10, 11, 12)),
        (5, 14, (9, 10, 11, 12)),
    ])
    def test_layout_table(self, version, count, indices):
        layout = VERSION_LAYOUTS[version]
        assert layout.token_count == count
        assert layout.length_indices == indices

    def test_field_presence(self):
        assert not VERSION_LAYOUTS[2].has_orientation
        assert VERSION_LAYOUTS[3].has_orientation
        assert not VERSION_LAYOUTS[3].has_object_type
        assert VERSION_LAYOUTS[4].has_object_type
        assert VERSION_LAYOUTS[5].has_object_type


class TestSplitTokens:

    def test_last_token_keeps_spaces(self):
        assert split_tokens("a b c d e", 3) == ["a", "b", "c d e"]

    def test_fewer_tokens_than_limit(self):
        assert split_tokens("a b", 5) == ["a", "b"]

    def test_consecutive_spaces_make_empty_tokens(self):
        assert split_tokens("a  b", 5) == ["a", "", "b"]


class TestVersion2:

    def test_positional_fields_and_blobs(self):
        line = b"1234 1000000000 100 -200 300 900 5 11 16 tree1hello worldcreate solid off"
        record = decode_record(1, 2, line)
        assert record.owner == 1234
        assert record.build_timestamp == 1000000000
        assert record.position == (100, -200, 300)
        assert record.y_orient == 900
        assert record.model == "tree1"
        assert record.description == "hello world"
        assert record.action == "create solid off"

    def test_version_gated_fields_absent(self):
        record = decode_record(1, 2, make_line(2, model=b"tree1"))
        assert record.x_orient is None
        assert record.z_orient is None
        assert record.object_type == 0
        assert record.v4_data is None

    def test_minimal_line_without_remainder(self):
        record = decode_record(1, 2, b"1 2 3 4 5 6 0 0 0")
        assert record.model is None
        assert record.description is None
        assert record.action is None


class TestVersion3:

    def test_orientation_fields(self):
        line = make_line(3, x_orient=45, z_orient=-90, y_orient=1800, model=b"wall")
        record = decode_record(1, 3, line)
        assert record.x_orient == 45
        assert record.z_orient == -90
        assert record.y_orient == 1800
        assert record.object_type == 0
        assert record.model == "wall"
        assert record.description is None

    def test_indicators_follow_orientation(self):
        line = b"7 8 1 2 3 4 5 6 1 2 3 abbccc"
        record = decode_record(1, 3, line)
        assert (record.model, record.description, record.action) == ("a", "bb", "ccc")


class TestVersions4And5:

    @pytest.mark.parametrize("version", [4, 5])
    def test_object_type_and_orientation(self, version):
        line = make_line(version, object_type=2, x_orient=10, z_orient=20, model=b"m")
        record = decode_record(1, version, line)
        assert record.object_type == 2
        assert record.x_orient == 10
        assert record.z_orient == 20

    def test_payload_is_base64(self):
        line = b"1 2 3 4 5 6 7 8 2 3 0 0 4 abc\xde\xad\xbe\xef"
        record = decode_record(1, 5, line)
        assert record.model == "abc"
        assert record.v4_data == "3q2+7w=="
        assert record.v4_data_bytes == b"\xde\xad\xbe\xef"

    def test_payload_after_all_strings(self):
        line = make_line(4, model=b"m1", description=b"d 2", action=b"a3", data=b"\x01\x02")
        record = decode_record(1, 4, line)
        assert (record.model, record.description, record.action) == ("m1", "d 2", "a3")
        assert record.v4_data_bytes == b"\x01\x02"

    def test_payload_bytes_are_not_text_decoded(self):
        # 0x81 is undefined in Windows-1252; it must survive as raw payload
        line = make_line(4, data=b"\x81\x00\xff")
        assert decode_record(1, 4, line).v4_data_bytes == b"\x81\x00\xff"


class TestBlobSlicing:

    def test_lengths_count_bytes_not_utf8(self):
        line = make_line(2, model=b"caf\xe9", description=b"Zo\xeb's")
        record = decode_record(1, 2, line)
        assert record.model == "café"
        assert record.description == "Zoë's"

    def test_zero_indicator_means_absent(self):
        record = decode_record(1, 2, make_line(2, description=b"only"))
        assert record.model is None
        assert record.description == "only"
        assert record.action is None

    def test_embedded_newline_kept(self):
        record = decode_record(1, 2, make_line(2, description=b"one\r\ntwo"))
        assert record.description == "one\r\ntwo"

    def test_trailing_bytes_ignored(self):
        line = make_line(2, model=b"abc") + b"junk"
        assert decode_record(1, 2, line).model == "abc"

    def test_short_read(self):
        with pytest.raises(ShortReadError) as exc_info:
            decode_record(3, 2, b"1 2 3 4 5 6 10 0 0 short")
        err = exc_info.value
        assert err.sequence == 3
        assert err.field == "model"
        assert err.expected == 10
        assert err.available == 5
        assert "line 3" in str(err)

    def test_short_read_on_later_blob(self):
        with pytest.raises(ShortReadError) as exc_info:
            decode_record(1, 4, b"1 2 3 4 5 6 7 8 9 1 1 1 5 abc")
        assert exc_info.value.field == "v4_data"

    def test_indicator_above_scratch_limit(self, monkeypatch):
        monkeypatch.setattr(decoder, "BLOB_SCRATCH_SIZE", 4)
        with pytest.raises(RecordParseError) as exc_info:
            decode_record(1, 2, make_line(2, model=b"toolong"))
        assert not isinstance(exc_info.value, ShortReadError)


class TestMalformedLines:

    def test_non_numeric_field(self):
        with pytest.raises(RecordParseError) as exc_info:
            decode_record(7, 2, b"1 2 abc 4 5 6 0 0 0 x")
        assert exc_info.value.sequence == 7
        assert str(exc_info.value).startswith("Error parsing line 7")

    def test_non_numeric_length(self):
        with pytest.raises(RecordParseError):
            decode_record(1, 2, b"1 2 3 4 5 6 x 0 0 abc")

    def test_negative_length(self):
        with pytest.raises(RecordParseError):
            decode_record(1, 2, b"1 2 3 4 5 6 -1 0 0 abc")

    def test_missing_tokens(self):
        with pytest.raises(RecordParseError):
            decode_record(1, 4, b"1 2 3 4 5")

    def test_underscore_digits_rejected(self):
        with pytest.raises(RecordParseError):
            decode_record(1, 2, b"1_000 2 3 4 5 6 0 0 0 x")

    def test_int32_overflow(self):
        with pytest.raises(RecordParseError):
            decode_record(1, 2, b"2147483648 2 3 4 5 6 0 0 0 x")

    def test_timestamp_is_64_bit(self):
        record = decode_record(1, 2, b"1 1099511627776 3 4 5 6 0 0 0 x")
        assert record.build_timestamp == 2 ** 40

    def test_signed_values(self):
        record = decode_record(1, 2, b"+5 2 -3 4 5 -6 0 0 0 x")
        assert record.owner == 5
        assert record.x == -3
        assert record.y_orient == -6


class TestUnsupportedVersion:

    @pytest.mark.parametrize("version", [0, 1, 6, 99])
    def test_fails_immediately(self, version):
        with pytest.raises(UnsupportedVersionError) as exc_info:
            decode_record(1, version, make_line(4))
        assert str(exc_info.value) == "Error parsing line 1"
        assert exc_info.value.version == version

    def test_is_a_record_parse_error(self):
        with pytest.raises(RecordParseError):
            decode_record(5, 6, b"")
