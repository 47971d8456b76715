"""
Tests for routing fetched part literals into the Body trees.
"""

import pytest

from application.services.part_router import attach_fetched_part, incomplete_uids
from application.use_cases.assemble_bodystructures_usecase import find_all_bodystructure_with_uid


@pytest.fixture
def bodies(multi_fetch):
    return find_all_bodystructure_with_uid(multi_fetch)


def _part_response(uid: bytes, section: bytes, payload: bytes) -> bytes:
    return (
        b"* 174 FETCH (UID " + uid + b" BODY[" + section + b"] {" + str(len(payload)).encode() + b"}\r\n"
        + payload + b"\r\n)\r\n"
        + b"a7 OK Fetch completed.\r\n"
    )


class TestAttachFetchedPart:

    def test_attaches_payload(self, bodies):
        ok = attach_fetched_part(bodies, b"a5 UID FETCH 649 BODY.PEEK[1]", _part_response(b"649", b"1", b"PGI+aGk8"))
        assert ok is True
        assert bodies[b"649"].parts[0].data == b"PGI+aGk8"
        assert bodies[b"649"].are_all_bodies_with_data() is True

    def test_second_part_of_two(self, bodies):
        assert attach_fetched_part(bodies, b"a6 UID FETCH 650 BODY[2]", _part_response(b"650", b"2", b"UEsDBA=="))
        assert bodies[b"650"].parts[1].data == b"UEsDBA=="
        assert bodies[b"650"].parts[0].data == b""

    def test_unknown_uid(self, bodies):
        assert attach_fetched_part(bodies, b"a5 UID FETCH 1 BODY[1]", _part_response(b"1", b"1", b"x")) is False

    def test_unrecognised_command(self, bodies):
        assert attach_fetched_part(bodies, b"a5 FETCH 649 BODY[1]", _part_response(b"649", b"1", b"x")) is False

    def test_out_of_range_section(self, bodies):
        assert attach_fetched_part(bodies, b"a5 UID FETCH 649 BODY[3]", _part_response(b"649", b"3", b"x")) is False
        assert bodies[b"649"].parts[0].data == b""

    def test_incomplete_response(self, bodies):
        truncated = b"* 174 FETCH (UID 649 BODY[1] {8}\r\nPGI+"
        assert attach_fetched_part(bodies, b"a5 UID FETCH 649 BODY[1]", truncated) is False


def test_incomplete_uids(bodies):
    assert sorted(incomplete_uids(bodies)) == [b"649", b"650"]
    attach_fetched_part(bodies, b"a5 UID FETCH 649 BODY[1]", _part_response(b"649", b"1", b"x"))
    assert incomplete_uids(bodies) == [b"650"]
