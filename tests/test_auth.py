import pytest

from mime_mailer.auth import (
    STATE_DONE,
    STATE_START,
    Authenticator,
    ServerInfo,
    UnencryptedAuth,
    new_unencrypted_authenticator,
)
from mime_mailer.errors import MailError, ProtocolError


def test_start_returns_plain_initial_response():
    auth = new_unencrypted_authenticator("user", "pass")
    assert auth.state == STATE_START

    mechanism, response = auth.start(ServerInfo(name="smtp.local"))

    assert mechanism == "PLAIN"
    assert response == b"\x00user\x00pass"
    assert auth.state == STATE_DONE


def test_start_does_not_require_tls():
    auth = UnencryptedAuth("user", "pass")
    mechanism, _ = auth.start(ServerInfo(name="smtp.local", tls=False, auth=("LOGIN",)))
    assert mechanism == "PLAIN"


def test_start_encodes_utf8_credentials():
    _, response = UnencryptedAuth("josé", "pässword").start(ServerInfo(name="smtp.local"))
    assert response == b"\x00" + "josé".encode() + b"\x00" + "pässword".encode()


@pytest.mark.parametrize("challenge", [b"", b"anything", b"\x00\xff", b"Username:"])
def test_next_rejects_further_challenges(challenge):
    auth = UnencryptedAuth("user", "pass")
    auth.start(ServerInfo(name="smtp.local"))

    with pytest.raises(ProtocolError, match="unexpected server challenge"):
        auth.next(challenge, True)


def test_next_without_more_returns_nothing():
    auth = UnencryptedAuth("user", "pass")
    auth.start(ServerInfo(name="smtp.local"))
    assert auth.next(b"2.7.0 Authentication successful", False) is None


def test_protocol_error_is_mail_error():
    with pytest.raises(MailError) as excinfo:
        UnencryptedAuth("u", "p").next(b"", True)
    assert excinfo.value.code == "protocol_error"


def test_base_authenticator_is_abstract():
    auth = Authenticator()
    with pytest.raises(NotImplementedError):
        auth.start(ServerInfo(name="smtp.local"))
    with pytest.raises(NotImplementedError):
        auth.next(b"", False)
