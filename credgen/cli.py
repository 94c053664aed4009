"""CLI for credgen: serve the API, or generate passwords and usernames locally."""

import argparse
import logging
import threading
import webbrowser

from rich import print
from rich.markup import escape
from rich.table import Table

from .charsets import PASSWORD_LENGTH, USERNAME_LENGTH
from .config import ConfigError, load_config
from .generator import generate_password, generate_username
from .log import configure_logging
from .validation import LengthError, check_length

logger = logging.getLogger(__name__)

EXIT_USAGE = 2


def _resolve(param, raw, spec):
    """Validate a length from the command line; print and return None on failure."""
    value = check_length(param, raw, spec)
    if isinstance(value, LengthError):
        print(f"[red]{value.message}[/red]")
        return None
    return value


def cmd_serve(args):
    try:
        settings = load_config(args.config)
    except ConfigError as e:
        print(f"[red]{e}[/red]")
        return 1
    if args.host:
        settings["host"] = args.host
    if args.port is not None:
        settings["port"] = args.port

    configure_logging(settings["log_level"])

    # imported here so `credgen generate` does not pull in flask
    from .web.api import create_app

    app = create_app(settings)
    url = f"http://{settings['host']}:{settings['port']}"
    logger.info("API running at %s", url)
    if args.open:
        threading.Timer(1.0, webbrowser.open, args=(url,)).start()
    app.run(host=settings["host"], port=settings["port"], threaded=True, use_reloader=False)
    logger.info("Server stopped.")
    return 0


def cmd_password(args):
    length = _resolve("length", args.length, PASSWORD_LENGTH)
    if length is None:
        return EXIT_USAGE
    for i in range(args.copies):
        print(f"[bold green]Password #{i+1}:[/bold green] {escape(generate_password(length))}")
    return 0


def cmd_username(args):
    length = _resolve("length", args.length, USERNAME_LENGTH)
    if length is None:
        return EXIT_USAGE
    for i in range(args.copies):
        print(f"[bold green]Username #{i+1}:[/bold green] {generate_username(length)}")
    return 0


def cmd_credentials(args):
    pass_len = _resolve("passwordLength", args.length, PASSWORD_LENGTH)
    if pass_len is None:
        return EXIT_USAGE
    user_len = _resolve("usernameLength", args.username_length, USERNAME_LENGTH)
    if user_len is None:
        return EXIT_USAGE

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("#", width=4)
    table.add_column("Username")
    table.add_column("Password")
    for i in range(args.copies):
        table.add_row(str(i + 1), generate_username(user_len), escape(generate_password(pass_len)))
    print(table)
    return 0


def _copies(value):
    n = int(value)
    if n < 1:
        raise argparse.ArgumentTypeError("copies must be >= 1")
    return n


def build_parser():
    parser = argparse.ArgumentParser(prog="credgen")
    sub = parser.add_subparsers(dest="cmd", required=True)

    srv = sub.add_parser("serve", help="Run the HTTP API")
    srv.add_argument("--host", type=str, help="Bind address (default from config)")
    srv.add_argument("--port", type=int, help="Port (default from config)")
    srv.add_argument("--config", "-c", type=str, help="Path to a JSON config file")
    srv.add_argument("--open", action="store_true", help="Open the front-end in a browser")
    srv.set_defaults(func=cmd_serve)

    gen = sub.add_parser("generate", help="Generate credentials without the server")
    gsub = gen.add_subparsers(dest="kind", required=True)

    pw = gsub.add_parser("password", help="Generate passwords")
    pw.add_argument("--length", type=str, help=f"Password length ({PASSWORD_LENGTH.min}-{PASSWORD_LENGTH.max})")
    pw.add_argument("--copies", type=_copies, default=1, help="How many to generate")
    pw.set_defaults(func=cmd_password)

    us = gsub.add_parser("username", help="Generate usernames")
    us.add_argument("--length", type=str, help=f"Username length ({USERNAME_LENGTH.min}-{USERNAME_LENGTH.max})")
    us.add_argument("--copies", type=_copies, default=1, help="How many to generate")
    us.set_defaults(func=cmd_username)

    cr = gsub.add_parser("credentials", help="Generate username/password pairs")
    cr.add_argument("--length", type=str, help="Password length")
    cr.add_argument("--username-length", type=str, help="Username length")
    cr.add_argument("--copies", type=_copies, default=1, help="How many pairs to generate")
    cr.set_defaults(func=cmd_credentials)

    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    return args.func(args)


if __name__ == "__main__":
    raise SystemExit(main())
