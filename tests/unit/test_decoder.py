"""Tests for the record decoder state machine."""

import pytest

from gpx_stream.errors import SourceError, StructuralError
from gpx_stream.pipeline import DecoderState, RecordDecoder, Token, TokenKind, XmlTokenCursor
from gpx_stream.types import Record

START = Token(TokenKind.RECORD_START)
END = Token(TokenKind.RECORD_END)
ENVELOPE_END = Token(TokenKind.ENVELOPE_END)
STREAM_END = Token(TokenKind.STREAM_END)


def attr(name: str, value: str) -> Token:
    return Token(TokenKind.ATTRIBUTE, name, value)


class TestRecordDecoder:
    """Tests for RecordDecoder."""

    def test_decodes_records_in_order(self) -> None:
        """Test one Record per structural unit, in order."""
        tokens = [
            START, attr("lat", "1"), attr("lon", "2"), END,
            START, attr("lat", "3"), END,
            ENVELOPE_END,
        ]
        decoder = RecordDecoder(tokens)

        assert list(decoder) == [Record(lat="1", lon="2"), Record(lat="3")]
        assert decoder.state is DecoderState.DONE
        assert decoder.records_decoded == 2

    def test_ignores_unrelated_attributes(self) -> None:
        """Test that only the fixed field set is kept."""
        tokens = [START, attr("name", "x"), attr("lat", "1"), attr("ele", "7"), END, ENVELOPE_END]

        record = next(RecordDecoder(tokens))

        assert record == Record(lat="1", lon=None)
        assert record.extras == {}

    def test_keeps_requested_extras(self) -> None:
        """Test extra fields requested through configuration."""
        tokens = [START, attr("name", "x"), attr("lat", "1"), attr("lon", "2"), END, ENVELOPE_END]

        record = next(RecordDecoder(tokens, extra_fields=["name"]))

        assert record.get("name") == "x"
        assert record.get("lat") == "1"

    def test_custom_field_names(self) -> None:
        """Test renamed latitude/longitude attributes."""
        tokens = [START, attr("latitude", "1"), attr("longitude", "2"), END, ENVELOPE_END]

        record = next(RecordDecoder(tokens, lat_field="latitude", lon_field="longitude"))

        assert record == Record(lat="1", lon="2")

    def test_empty_envelope(self) -> None:
        """Test a well-formed envelope with no records."""
        decoder = RecordDecoder([ENVELOPE_END])

        assert list(decoder) == []
        assert decoder.state is DecoderState.DONE

    def test_done_is_terminal(self) -> None:
        """Test that a finished decoder stays exhausted."""
        decoder = RecordDecoder([ENVELOPE_END, START, END])
        list(decoder)

        with pytest.raises(StopIteration):
            next(decoder)

    def test_stream_end_while_seeking(self) -> None:
        """Test that input ending without the envelope end is an error."""
        decoder = RecordDecoder([START, attr("lat", "1"), END, STREAM_END])

        assert next(decoder) == Record(lat="1")
        with pytest.raises(StructuralError, match="envelope terminator"):
            next(decoder)
        assert decoder.state is DecoderState.ERROR

    def test_exhausted_tokens_count_as_stream_end(self) -> None:
        """Test that a token cursor running dry is not a normal end."""
        with pytest.raises(StructuralError):
            list(RecordDecoder([START, END]))

    @pytest.mark.parametrize("terminator", [STREAM_END, ENVELOPE_END, START])
    def test_missing_record_end(self, terminator: Token) -> None:
        """Test that an unclosed record is an error."""
        decoder = RecordDecoder([START, attr("lat", "1"), terminator, END, ENVELOPE_END])

        with pytest.raises(StructuralError, match="Record end missing"):
            next(decoder)

    def test_stray_token_between_records(self) -> None:
        """Test that an attribute outside a record is an error."""
        with pytest.raises(StructuralError, match="Unexpected attribute"):
            next(RecordDecoder([attr("lat", "1"), ENVELOPE_END]))

    def test_error_is_terminal(self) -> None:
        """Test that a failed decoder keeps failing."""
        decoder = RecordDecoder([STREAM_END, ENVELOPE_END])

        with pytest.raises(StructuralError):
            next(decoder)
        with pytest.raises(StructuralError, match="already failed"):
            next(decoder)

    def test_tokenizer_errors_mark_decoder_failed(self) -> None:
        """Test that upstream failures move the decoder to ERROR."""

        def chunks():
            yield b"<gpx>"
            raise OSError("broken pipe")

        decoder = RecordDecoder(XmlTokenCursor(chunks()))

        with pytest.raises(SourceError):
            next(decoder)
        assert decoder.state is DecoderState.ERROR

    def test_malformed_markup_marks_decoder_failed(self) -> None:
        """Test that broken XML upstream is terminal for the decoder."""
        decoder = RecordDecoder(XmlTokenCursor([b'<gpx><wpt lat="1" lon="2"></trk></gpx>']))

        with pytest.raises(StructuralError, match="Malformed input"):
            next(decoder)
        assert decoder.state is DecoderState.ERROR
        with pytest.raises(StructuralError, match="already failed"):
            next(decoder)

    def test_pulls_only_one_record_ahead(self) -> None:
        """Test that the decoder never consumes tokens past the current record."""
        consumed = []

        def tokens():
            for token in [START, attr("lat", "1"), END, START, attr("lat", "2"), END, ENVELOPE_END]:
                consumed.append(token)
                yield token

        decoder = RecordDecoder(tokens())
        next(decoder)

        assert len(consumed) == 3
