from typing import Any, List, Optional, Type
import argparse
import logging
import sys

from .request import RequestBuilder
from .settings import Settings
from .errors import HTTPacketException

log = logging.getLogger(__name__)

def create_argument(parser: argparse.ArgumentParser, *names: str, type: Type[Any]) -> None:
    parser.add_argument(*names, type=type, required=False, default=None)

def create_arguments() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='httpacket',
        description='Builds a raw HTTP/1.1 request and writes it to stdout.'
    )

    parser.add_argument('method', nargs='?', default=None)
    parser.add_argument('path', nargs='?', default='/')

    create_argument(parser, '--host', type=str)
    create_argument(parser, '--from', type=str)
    create_argument(parser, '--data', '-d', type=str)
    create_argument(parser, '--user-agent', '-A', type=str)
    create_argument(parser, '--accept-charset', type=str)
    create_argument(parser, '--settings', '-s', type=str)

    parser.add_argument('--header', '-H', action='append', default=[])
    parser.add_argument('--content-length', action='store_true')
    parser.add_argument('--verbose', '-v', action='store_true')

    return parser

def demo() -> RequestBuilder:
    return (
        RequestBuilder.post('search.php')
            .with_host('http://example.com')
            .with_from('lukebrodowski@gmail.com')
            .with_body('Some sample data.')
    )

def build(args: argparse.Namespace) -> RequestBuilder:
    settings = Settings.from_json(args.settings) if args.settings else Settings.from_env()
    request = RequestBuilder.create(args.method, args.path, settings=settings)

    if args.host is not None:
        request.with_host(args.host)

    if getattr(args, 'from') is not None:
        request.with_from(getattr(args, 'from'))

    if args.user_agent is not None:
        request.with_user_agent(args.user_agent)

    if args.accept_charset is not None:
        request.with_accept_charset(args.accept_charset)

    for header in args.header:
        name, sep, value = header.partition(':')
        if not sep:
            raise HTTPacketException(f'Invalid header {header!r}, expected "Name: value"')

        request.with_header(name.strip(), value.strip())

    if args.data is not None:
        request.with_body(args.data)

    if args.content_length:
        request.with_content_length()

    return request

def main(argv: Optional[List[str]] = None) -> int:
    parser = create_arguments()
    argv = sys.argv[1:] if argv is None else argv
    args = parser.parse_args(argv)

    if args.method is None and argv:
        parser.error('a METHOD is required when options are given')

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG)

    try:
        request = demo() if args.method is None else build(args)
    except HTTPacketException as exc:
        log.debug('[CLI] Failed to build the request.', exc_info=exc)
        print(f'httpacket: error: {exc}', file=sys.stderr)
        return 2

    sys.stdout.buffer.write(request.to_bytes())
    sys.stdout.buffer.flush()

    return 0

if __name__ == '__main__':
    sys.exit(main())
