"""
Command-line interface for rq.

Builds exactly one HTTP request from the flags, sends it (unless --debug) and
prints the response.

Usage:
    rq https://httpbin.org/get
    rq POST https://httpbin.org/post -d '{"a": 1}' -H Content-Type=application/json
    rq https://httpbin.org/headers -H @headers.json -b "$TOKEN" -v
    rq https://example.com/file.zip -o file.zip
    rq https://httpbin.org/json -j
    rq PUT https://httpbin.org/put -F '{"file": "report.csv", "note": "weekly"}' --debug

Exit Codes:
    0 - Response rendered (any HTTP status) or debug dump printed
    1 - Error (invalid input, network failure, timeout, write failure)
    2 - Invalid command-line usage
"""

import argparse
import sys
import uuid
from typing import List, Optional

from . import __version__
from .core.client import build_client
from .core.config import HttpMethod, RequestConfig
from .core.env_config import RqSettings, load_settings
from .core.exceptions import RqError
from .core.executor import execute
from .core.logging import LoggingConfig, RqLogger, configure_logging
from .core.request_builder import build_request
from .core.response_handler import handle_response


def positive_int(value: str) -> int:
    """argparse type: integer > 0."""
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid integer: {value!r}")
    if number <= 0:
        raise argparse.ArgumentTypeError(f"must be positive: {value!r}")
    return number


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="rq",
        description="Build one HTTP request, send it and print the response.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Values starting with @ are read from a file:
  -H @headers.json   JSON object of header name -> string value
  -c @cookies.txt    raw Cookie header value
  -d @body.bin       request body streamed from the file

Environment:
  RQ_USER_AGENT, RQ_DEFAULT_TIMEOUT, RQ_PROXY, RQ_LOG_LEVEL, RQ_LOG_FORMAT,
  RQ_LOG_FILE, RQ_CONFIG_FILE
        """
    )

    parser.add_argument(
        "target",
        nargs="+",
        metavar="[METHOD] URL",
        help="URL to request, optionally preceded by the method"
    )

    request_group = parser.add_argument_group("request")
    request_group.add_argument(
        "-X", "--method",
        help=f"HTTP method ({', '.join(m.value for m in HttpMethod)}); unknown methods fall back to GET"
    )
    request_group.add_argument("-u", "--basic", metavar="USER:PASS", help="Basic authentication")
    request_group.add_argument("-b", "--bearer", metavar="TOKEN", help="Bearer token")
    request_group.add_argument("-d", "--data", metavar="BODY", help="Request body or @file")
    request_group.add_argument(
        "-F", "--form",
        metavar="JSON",
        help="Multipart form as a JSON object; values naming existing files are uploaded"
    )
    request_group.add_argument(
        "-H", "--header",
        dest="headers",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Header (repeatable) or @file with a JSON object"
    )
    request_group.add_argument("-c", "--cookies", help="Cookie header value or @file")
    request_group.add_argument(
        "-t", "--timeout",
        type=positive_int,
        metavar="SECONDS",
        help="Request timeout in seconds"
    )

    transport_group = parser.add_argument_group("transport")
    transport_group.add_argument("-p", "--proxy", metavar="URL", help="Proxy for all schemes")
    transport_group.add_argument(
        "--no-redirects",
        action="store_true",
        help="Do not follow redirects"
    )
    transport_group.add_argument("--http2", action="store_true", help="Force HTTP/2")
    transport_group.add_argument("-A", "--user-agent", help="Override the User-Agent")

    output_group = parser.add_argument_group("output")
    output_group.add_argument("-o", "--download", metavar="PATH", help="Save the response body to a file")
    output_group.add_argument(
        "-j", "--pretty-print",
        action="store_true",
        help="Pretty-print JSON responses"
    )
    output_group.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Print request and response metadata"
    )
    output_group.add_argument(
        "-n", "--debug", "--dry-run",
        dest="debug",
        action="store_true",
        help="Build and print the request without sending it"
    )

    config_group = parser.add_argument_group("configuration")
    config_group.add_argument("--config", metavar="FILE", help="YAML/JSON file with defaults")
    config_group.add_argument(
        "--log-level",
        type=str.upper,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Enable logging at this level (stderr)"
    )
    config_group.add_argument(
        "--log-format",
        type=str.lower,
        choices=["text", "json", "colored"],
        help="Log format"
    )
    config_group.add_argument("--log-file", metavar="PATH", help="Also write logs to this file")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    return parser


def split_target(parser: argparse.ArgumentParser, target: List[str]) -> "tuple[Optional[str], str]":
    """`[METHOD] URL` -> (method, url)."""
    if len(target) == 1:
        return None, target[0]
    if len(target) == 2:
        return target[0], target[1]
    parser.error("expected [METHOD] URL")


def config_from_args(args: argparse.Namespace, positional_method: Optional[str], url: str) -> RequestConfig:
    """
    Собрать RequestConfig из аргументов.

    -X/--method важнее метода, указанного перед URL.
    """
    return RequestConfig.create(
        url,
        method=args.method or positional_method,
        basic=args.basic,
        bearer=args.bearer,
        headers=args.headers,
        cookies=args.cookies,
        data=args.data,
        form=args.form,
        download=args.download,
        proxy=args.proxy,
        allow_redirects=not args.no_redirects,
        http2_only=args.http2,
        timeout_seconds=args.timeout,
        user_agent=args.user_agent,
        pretty_print=args.pretty_print,
        verbose=args.verbose,
        debug=args.debug,
    )


def create_logger(args: argparse.Namespace, settings: RqSettings) -> Optional[RqLogger]:
    """
    Logger for this invocation, or None when logging is not requested.
    """
    level = args.log_level or settings.log_level
    log_file = args.log_file or settings.log_file
    if level is None and log_file is None:
        return None

    config = LoggingConfig.create(
        level=level or "INFO",
        format=args.log_format or settings.log_format,
        enable_console=level is not None,
        file_path=log_file,
        extra_fields={"run_id": uuid.uuid4().hex[:8]},
    )
    return configure_logging(config)


def run(config: RequestConfig, settings: RqSettings, logger: Optional[RqLogger] = None) -> int:
    """
    Один цикл запрос/ответ.

    Returns:
        Exit code (0)

    Raises:
        RqError: Любая необработанная ошибка
    """
    with build_client(config, settings, logger) as client:
        request = build_request(config, client, logger)
        response = execute(
            client,
            request,
            debug=config.debug,
            verbose=config.verbose,
            logger=logger,
        )
        if response is None:
            return 0

        try:
            handle_response(response, config, logger=logger)
        finally:
            response.close()

    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entrypoint."""
    parser = build_parser()
    args = parser.parse_args(argv)
    positional_method, url = split_target(parser, args.target)

    try:
        settings = load_settings(args.config)
    except RqError as e:
        print(f"error: {e.message}", file=sys.stderr)
        return 1

    try:
        logger = create_logger(args, settings)
    except (OSError, ValueError) as e:
        print(f"error: cannot configure logging: {e}", file=sys.stderr)
        return 1

    try:
        config = config_from_args(args, positional_method, url)
        return run(config, settings, logger)
    except RqError as e:
        if logger:
            logger.debug("Run aborted", error_type=type(e).__name__)
        print(f"error: {e.message}", file=sys.stderr)
        return 1
    finally:
        if logger:
            logger.close()


if __name__ == "__main__":
    sys.exit(main())
