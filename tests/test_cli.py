"""Tests for CLI commands and helper functions."""

import pytest
from click.testing import CliRunner

from mime_mailer.cli import build_message, main, print_error, print_success
from mime_mailer.errors import TransportError
from mime_mailer.mime import BOUNDARY
from mime_mailer.transport import SMTPTransport


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    for name in ("MIME_MAILER_CONFIG", "MIME_MAILER_SERVER", "MIME_MAILER_USER",
                 "MIME_MAILER_PASSWORD", "MIME_MAILER_FROM", "MIME_MAILER_START_TLS",
                 "MIME_MAILER_LOG_LEVEL", "MIME_MAILER_TIMEOUT"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    # Keep the root logger untouched between invocations.
    monkeypatch.setattr("mime_mailer.cli.configure_logging", lambda level: None)


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def sent(monkeypatch):
    calls = []

    def fake_send(server_address, authenticator, message, *, transport=None):
        calls.append(("send", server_address, authenticator, message, transport))

    def fake_send_unencrypted(server_address, username, password, message, *, transport=None):
        calls.append(("send_unencrypted", server_address, (username, password), message, transport))

    monkeypatch.setattr("mime_mailer.cli.send_message", fake_send)
    monkeypatch.setattr("mime_mailer.cli.send_unencrypted", fake_send_unencrypted)
    return calls


class TestHelperFunctions:
    """Tests for CLI helper functions."""

    def test_build_message(self, tmp_path):
        (tmp_path / "a.txt").write_bytes(b"A")
        (tmp_path / "fwd.eml").write_bytes(b"Subject: x\n\ny")

        msg = build_message(
            from_addr="a@x.com",
            to=("b@x.com",),
            cc=(),
            bcc=("c@x.com",),
            subject="Hi",
            body="<p>hello</p>",
            html=True,
            attach=(str(tmp_path / "a.txt"),),
            inline=(str(tmp_path / "fwd.eml"),),
        )

        assert msg.body_content_type == "text/html"
        assert msg.recipient_list() == ["b@x.com", "c@x.com"]
        assert msg.attachments["a.txt"].inline is False
        assert msg.attachments["fwd.eml"].inline is True

    def test_print_helpers(self, capsys):
        print_success("done")
        print_error("broken")

        captured = capsys.readouterr()
        assert "done" in captured.out
        assert "Error:" in captured.err and "broken" in captured.err


class TestRenderCommand:
    def test_render_plain_message(self, runner):
        result = runner.invoke(main, ["render", "--subject", "Hi", "--body", "hello"])

        assert result.exit_code == 0
        assert result.stdout_bytes == (
            b"From: \nTo: \nSubject: Hi\nMIME-Version: 1.0\n"
            b"Content-Type: text/plain; charset=utf-8\nhello"
        )

    def test_render_with_attachment(self, runner, tmp_path):
        (tmp_path / "f.txt").write_bytes(b"AB")

        result = runner.invoke(
            main,
            ["render", "--from", "a@x.com", "--to", "b@x.com", "--bcc", "hidden@x.com",
             "-s", "Files", "--body", "see attached", "--attach", "f.txt"],
        )

        assert result.exit_code == 0
        assert b"QUI=" in result.stdout_bytes
        assert b"hidden@x.com" not in result.stdout_bytes
        assert result.stdout_bytes.endswith(f"--{BOUNDARY}--".encode())

    def test_render_body_from_stdin(self, runner):
        result = runner.invoke(main, ["render", "--body-file", "-", "--html"], input="<p>hi</p>")

        assert result.exit_code == 0
        assert result.stdout_bytes.endswith(b"Content-Type: text/html; charset=utf-8\n<p>hi</p>")

    def test_render_rejects_body_and_body_file(self, runner, tmp_path):
        (tmp_path / "body.txt").write_text("x")
        result = runner.invoke(main, ["render", "--body", "x", "--body-file", "body.txt"])
        assert result.exit_code == 2

    def test_render_missing_attachment(self, runner):
        result = runner.invoke(main, ["render", "--attach", "missing.bin"])

        assert result.exit_code == 1
        assert "Cannot read attachment" in result.output


class TestRecipientsCommand:
    def test_recipients_includes_bcc(self, runner):
        result = runner.invoke(
            main,
            ["recipients", "--to", "a@x.com", "--to", "b@x.com", "--cc", "c@x.com", "--bcc", "a@x.com"],
        )

        assert result.exit_code == 0
        assert result.output.splitlines() == ["a@x.com", "b@x.com", "c@x.com", "a@x.com"]


class TestSendCommand:
    def test_send_with_credentials(self, runner, sent):
        result = runner.invoke(
            main,
            ["send", "--server", "smtp.local:2525", "--user", "u", "--password", "p",
             "--from", "a@x.com", "--to", "b@x.com", "--cc", "c@x.com", "-s", "Hi", "--body", "hello"],
        )

        assert result.exit_code == 0, result.output
        kind, server, credentials, message, transport = sent[0]
        assert kind == "send_unencrypted"
        assert server == "smtp.local:2525"
        assert credentials == ("u", "p")
        assert message.from_addr == "a@x.com"
        assert isinstance(transport, SMTPTransport)
        assert "Message sent to 2 recipients via smtp.local:2525" in result.output

    def test_send_without_credentials(self, runner, sent):
        result = runner.invoke(main, ["send", "--server", "smtp.local", "--from", "a@x.com", "--to", "b@x.com"])

        assert result.exit_code == 0, result.output
        kind, server, authenticator, _, _ = sent[0]
        assert kind == "send"
        assert authenticator is None
        assert "1 recipient via" in result.output

    def test_send_reads_defaults_from_config(self, runner, sent, tmp_path):
        config_file = tmp_path / "mailer.ini"
        config_file.write_text(
            "[smtp]\nserver = cfg.local:25\nuser = cfg-user\npassword = cfg-pass\ntimeout = 3\nstart_tls = no\n"
            "[message]\nfrom = cfg@x.com\n"
        )

        result = runner.invoke(main, ["send", "--config", str(config_file), "--to", "b@x.com"])

        assert result.exit_code == 0, result.output
        kind, server, credentials, message, transport = sent[0]
        assert (kind, server, credentials) == ("send_unencrypted", "cfg.local:25", ("cfg-user", "cfg-pass"))
        assert message.from_addr == "cfg@x.com"
        assert transport.timeout == 3.0
        assert transport.start_tls is False

    def test_send_requires_server(self, runner, sent):
        result = runner.invoke(main, ["send", "--from", "a@x.com", "--to", "b@x.com"])

        assert result.exit_code == 1
        assert "No SMTP server" in result.output
        assert sent == []

    def test_send_reports_mail_errors(self, runner, monkeypatch):
        def failing_send(*args, **kwargs):
            raise TransportError("Connection refused")

        monkeypatch.setattr("mime_mailer.cli.send_message", failing_send)

        result = runner.invoke(main, ["send", "--server", "smtp.local:25", "--from", "a@x.com", "--to", "b@x.com"])

        assert result.exit_code == 1
        assert "Connection refused" in result.output

    def test_send_reports_invalid_config(self, runner, tmp_path):
        result = runner.invoke(main, ["send", "--config", str(tmp_path / "missing.ini")])

        assert result.exit_code == 1
        assert "Config file not found" in result.output


def test_log_level_option_configures_logging(runner, monkeypatch):
    levels = []
    monkeypatch.setattr("mime_mailer.cli.configure_logging", levels.append)
    monkeypatch.setenv("MIME_MAILER_LOG_LEVEL", "ERROR")

    runner.invoke(main, ["recipients"])
    runner.invoke(main, ["--log-level", "DEBUG", "recipients"])

    assert levels == ["ERROR", "DEBUG"]


def test_log_level_read_from_config_file(runner, monkeypatch, tmp_path):
    levels = []
    monkeypatch.setattr("mime_mailer.cli.configure_logging", levels.append)
    (tmp_path / "mime_mailer.ini").write_text("[logging]\nlevel = debug\n")

    runner.invoke(main, ["recipients"])
    runner.invoke(main, ["--log-level", "ERROR", "recipients"])

    assert levels == ["DEBUG", "ERROR"]


def test_log_level_defaults_to_warning(runner, monkeypatch):
    levels = []
    monkeypatch.setattr("mime_mailer.cli.configure_logging", levels.append)

    runner.invoke(main, ["recipients"])

    assert levels == ["WARNING"]


def test_invalid_config_falls_back_to_default_log_level(runner, monkeypatch, tmp_path):
    levels = []
    monkeypatch.setattr("mime_mailer.cli.configure_logging", levels.append)
    (tmp_path / "mime_mailer.ini").write_text("[smtp]\ntimeout = soon\n")

    result = runner.invoke(main, ["recipients", "--to", "a@x.com"])

    assert result.exit_code == 0
    assert levels == ["WARNING"]
