"""
Unit tests for Sequence (IMAP part address "1.2.10").
"""

import pytest

from domain.errors import SequenceParseError
from domain.sequence import Sequence


class TestSequenceParse:

    def test_parses_dotted_path(self):
        assert list(Sequence.parse(b"1.2.10")) == [1, 2, 10]

    def test_single_index(self):
        assert list(Sequence.parse(b"3")) == [3]

    def test_accepts_str(self):
        assert Sequence.parse("1.1") == Sequence.parse(b"1.1")

    @pytest.mark.parametrize("raw", [b"1", b"1.1", b"2.3.4", b"1.2.10", b"10.20.30.40"])
    def test_format_round_trip(self, raw):
        seq = Sequence.parse(raw)
        assert str(seq) == raw.decode()
        assert bytes(seq) == raw

    @pytest.mark.parametrize("raw", [b"", b".", b"1.", b".1", b"1..2", b"a", b"1.b", b"+1", b" 1"])
    def test_malformed_raises(self, raw):
        with pytest.raises(SequenceParseError) as exc:
            Sequence.parse(raw)
        assert exc.value.error_code == "invalid_sequence"

    def test_empty_constructor_raises(self):
        with pytest.raises(SequenceParseError):
            Sequence([])


class TestSequenceQueue:

    def test_pop_front_consumes_in_order(self):
        seq = Sequence.parse(b"1.2.3")
        assert seq.pop_front() == 1
        assert seq.pop_front() == 2
        assert len(seq) == 1
        assert seq.pop_front() == 3
        assert seq.is_empty()

    def test_pop_front_on_exhausted_returns_none(self):
        seq = Sequence.parse(b"1")
        seq.pop_front()
        assert seq.pop_front() is None

    def test_values_are_not_range_checked(self):
        # 0 y números grandes se aceptan; el rango lo valida el árbol
        assert list(Sequence.parse(b"0.99999")) == [0, 99999]

    def test_equality(self):
        assert Sequence.parse(b"1.1") == Sequence([1, 1])
        assert Sequence.parse(b"1.1") != Sequence([1, 2])

    def test_repr(self):
        assert repr(Sequence.parse(b"1.2")) == "Sequence('1.2')"
