# Entry point of the live bracket server

import argparse
import logging
import sys

from core.elimination import build_bracket, get_round_label
from core.errors import BracketError


def format_bracket(bracket):
    lines = []
    total_rounds = len(bracket)
    for round_index, round_matches in enumerate(bracket):
        lines.append(f"\n{get_round_label(round_index, total_rounds)}")
        for match in round_matches:
            slot1, slot2 = (name or 'TBD' for name in match.slots)
            line = f"  M{match.position + 1}: {slot1} vs {slot2}"
            if match.winner:
                line += f"  -> {match.winner}"
            lines.append(line)
    return "\n".join(lines)


def preview(names):
    try:
        bracket = build_bracket(names)
    except BracketError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    print(format_bracket(bracket))
    return 0


def serve(host, port, debug):
    from app import app
    logging.basicConfig(level=logging.DEBUG if debug else logging.INFO)
    app.run(host=host, port=port, debug=debug, threaded=True)
    return 0


def main(argv=None):
    from app import HOST, PORT

    parser = argparse.ArgumentParser(description='Live single elimination bracket')
    subparsers = parser.add_subparsers(dest='command', required=True)

    serve_parser = subparsers.add_parser('serve', help='Run the bracket server')
    serve_parser.add_argument('--host', default=HOST)
    serve_parser.add_argument('--port', type=int, default=PORT)
    serve_parser.add_argument('--debug', action='store_true')

    preview_parser = subparsers.add_parser('preview', help='Print the bracket for the given names')
    preview_parser.add_argument('names', nargs='+')

    args = parser.parse_args(argv)
    if args.command == 'serve':
        return serve(args.host, args.port, args.debug)
    return preview(args.names)


if __name__ == '__main__':
    sys.exit(main())
