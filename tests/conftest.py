"""
Fixtures compartidas: respuestas IMAP crudas tal como llegan del servidor.
"""

import pytest


FETCH_649 = (
    b'* 154 FETCH (UID 649 FLAGS () RFC822.SIZE 2394 INTERNALDATE "05-Dec-2023 06:16:58 +0000" '
    b'BODYSTRUCTURE (("text" "html" ("charset" "utf-8") NIL NIL "base64" 1188 16 NIL NIL NIL NIL) '
    b'"mixed" ("boundary" "===============1522363357941492443==") NIL NIL NIL) '
    b'BODY[HEADER.FIELDS (DATE SUBJECT FROM TO)] {126}\r\n'
    b'Subject: =?utf-8?b?5L2g5aW9?=\r\n'
    b'From: alice@example.com\r\n'
    b'To: bob@example.com\r\n'
    b'Date: Tue, 05 Dec 2023 06:16:58 -0000\r\n'
    b'\r\n'
    b')\r\n'
)

FETCH_650 = (
    b'* 155 FETCH (UID 650 FLAGS () RFC822.SIZE 2869 INTERNALDATE "05-Dec-2023 06:16:58 +0000" '
    b'BODYSTRUCTURE (("text" "html" ("charset" "utf-8") NIL NIL "base64" 54 1 NIL NIL NIL NIL)'
    b'("application" "octet-stream" NIL NIL NIL "base64" 1336 NIL '
    b'("attachment" ("filename*" "utf-8\'\'%E5%85%AC.txt.zip")) NIL NIL) '
    b'"mixed" ("boundary" "===============6973775584883558730==") NIL NIL NIL) '
    b'BODY[HEADER.FIELDS (DATE SUBJECT FROM TO)] {45}\r\n'
    b'Subject: adjunto\r\n'
    b'From: alice@example.com\r\n'
    b'\r\n'
    b')\r\n'
)

TAGGED_OK = b"a1 OK Fetch completed (0.004 + 0.000 + 0.003 secs).\r\n"


@pytest.fixture
def fetch_649() -> bytes:
    return FETCH_649


@pytest.fixture
def fetch_650() -> bytes:
    return FETCH_650


@pytest.fixture
def multi_fetch() -> bytes:
    return FETCH_649 + FETCH_650 + TAGGED_OK
