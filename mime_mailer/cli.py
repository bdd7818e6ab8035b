# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Command-line interface for mime-mailer.

Usage:
    mime-mailer render --from me@example.com --to you@example.com -s Hi --body hello
    mime-mailer recipients --to a@example.com --bcc hidden@example.com
    mime-mailer send --server smtp.example.com:25 --user me --password secret \\
        --from me@example.com --to you@example.com -s Report \\
        --body-file body.txt --attach report.pdf

Defaults for ``send`` are read from mime_mailer.ini and MIME_MAILER_*
environment variables (see :mod:`mime_mailer.config_loader`).
"""

from __future__ import annotations

import functools
import sys
from typing import Any, Callable, Optional, Sequence

import click
from rich.console import Console
from rich.markup import escape

from mime_mailer.config_loader import DEFAULT_LOG_LEVEL, load_settings
from mime_mailer.errors import MailError
from mime_mailer.logger import configure_logging
from mime_mailer.message import Message, new_html_message, new_message
from mime_mailer.sender import send as send_message
from mime_mailer.sender import send_unencrypted
from mime_mailer.transport import SMTPTransport

console = Console()
err_console = Console(stderr=True)


def print_error(message: str) -> None:
    """Print a formatted error message to stderr.

    Args:
        message: Error message text to display.
    """
    err_console.print(f"[red]Error:[/red] {escape(message)}")


def print_success(message: str) -> None:
    """Print a formatted success message with checkmark.

    Args:
        message: Success message text to display.
    """
    console.print(f"[green]✓[/green] {message}")


def build_message(
    *,
    from_addr: Optional[str],
    to: Sequence[str],
    cc: Sequence[str],
    bcc: Sequence[str],
    subject: str,
    body: str,
    html: bool,
    attach: Sequence[str],
    inline: Sequence[str],
) -> Message:
    """Assemble a :class:`Message` from command line values.

    Raises:
        OSError: If an attachment cannot be read.
    """
    factory = new_html_message if html else new_message
    message = factory(subject, body)
    message.from_addr = from_addr or ""
    message.to = list(to)
    message.cc = list(cc)
    message.bcc = list(bcc)
    for path in attach:
        message.attach(path)
    for path in inline:
        message.inline(path)
    return message


def message_options(func: Callable[..., Any]) -> Callable[..., Any]:
    """Attach the options shared by every command that builds a message."""
    options = [
        click.option("--from", "from_addr", help="Sender address (From header and envelope)."),
        click.option("--to", "to", multiple=True, help="Recipient; repeat for several."),
        click.option("--cc", "cc", multiple=True, help="Carbon-copy recipient; repeat for several."),
        click.option("--bcc", "bcc", multiple=True, help="Blind-copy recipient; repeat for several."),
        click.option("--subject", "-s", default="", help="Subject line."),
        click.option("--body", "-b", default=None, help="Body text."),
        click.option(
            "--body-file",
            type=click.File("r", encoding="utf-8"),
            default=None,
            help="Read the body from a file ('-' for stdin).",
        ),
        click.option("--html", is_flag=True, help="Send the body as text/html."),
        click.option("--attach", "-a", "attach", multiple=True, help="File to attach as base64."),
        click.option("--inline", "inline", multiple=True, help="Message file to embed as message/rfc822."),
    ]
    for option in reversed(options):
        func = option(func)

    @functools.wraps(func)
    def wrapper(*args, body: Optional[str], body_file, **kwargs):
        if body is not None and body_file is not None:
            raise click.UsageError("Use either --body or --body-file, not both.")
        text = body_file.read() if body_file is not None else (body or "")
        return func(*args, body=text, **kwargs)

    return wrapper


def _build_or_exit(**kwargs) -> Message:
    try:
        return build_message(**kwargs)
    except OSError as exc:
        print_error(f"Cannot read attachment: {exc}")
        sys.exit(1)


@click.group()
@click.version_option(package_name="mime-mailer")
@click.option(
    "--log-level",
    default=None,
    help="Logging level (DEBUG, INFO, WARNING, ERROR). "
    f"Defaults to [logging] level or MIME_MAILER_LOG_LEVEL, else {DEFAULT_LOG_LEVEL}.",
)
def main(log_level: Optional[str]) -> None:
    """Compose MIME messages and deliver them over SMTP."""
    if log_level is None:
        try:
            log_level = load_settings().log_level
        except MailError:
            # ``send`` reports configuration errors; other commands do not need settings.
            log_level = DEFAULT_LOG_LEVEL
    configure_logging(log_level)


@main.command("render")
@message_options
def render_cmd(**kwargs) -> None:
    """Write the serialized message to stdout."""
    message = _build_or_exit(**kwargs)
    stdout = click.get_binary_stream("stdout")
    stdout.write(message.bytes())
    stdout.flush()


@main.command("recipients")
@message_options
def recipients_cmd(**kwargs) -> None:
    """Print the envelope recipients (To, Cc, then Bcc), one per line."""
    message = _build_or_exit(**kwargs)
    for address in message.recipient_list():
        click.echo(address)


@main.command("send")
@click.option("--server", default=None, help="SMTP server as host:port.")
@click.option("--user", "-u", default=None, help="Username for PLAIN authentication.")
@click.option("--password", "-p", default=None, help="Password for PLAIN authentication.")
@click.option("--config", "config_path", default=None, help="Path to an INI settings file.")
@message_options
def send_cmd(server: Optional[str], user: Optional[str], password: Optional[str], config_path: Optional[str], **kwargs) -> None:
    """Build the message and deliver it through the SMTP server."""
    try:
        settings = load_settings(config_path)
    except MailError as exc:
        print_error(str(exc))
        sys.exit(1)

    server = server or settings.server
    if not server:
        print_error("No SMTP server given (use --server or MIME_MAILER_SERVER).")
        sys.exit(1)
    user = user or settings.user
    password = password if password is not None else settings.password
    kwargs["from_addr"] = kwargs.get("from_addr") or settings.from_addr

    message = _build_or_exit(**kwargs)
    transport = SMTPTransport(timeout=settings.timeout, start_tls=settings.start_tls)
    try:
        if user:
            send_unencrypted(server, user, password or "", message, transport=transport)
        else:
            send_message(server, None, message, transport=transport)
    except MailError as exc:
        print_error(str(exc))
        sys.exit(1)

    count = len(message.recipient_list())
    print_success(f"Message sent to {count} recipient{'s' if count != 1 else ''} via {server}")


if __name__ == "__main__":
    main()
