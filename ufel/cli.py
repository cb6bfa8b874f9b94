"""
Command line entry point.

    ufel                 run main.fel if it exists, otherwise start the repl
    ufel prog.fel        run a file
    ufel -e '1 2 +'      run text
    ufel --repl          start the repl

On success each value left on the stack is printed, bottom first. On failure
the error, and every error aggregated with it, goes to stderr and the exit
status is 1.
"""
import argparse
import logging
from pathlib import Path
import sys
from typing import Optional, Sequence

from ufel.box import show
from ufel.errors import UfelError
from ufel.runtime import Ufel

logger = logging.getLogger(__name__)

DEFAULT_FILE = 'main.fel'

def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog='ufel', description='Run Ufel programs.')
    parser.add_argument('path', nargs='?', type=Path, help=f'source file (default: {DEFAULT_FILE})')
    parser.add_argument('-e', '--eval', metavar='TEXT', help='run TEXT instead of a file')
    parser.add_argument('--repl', action='store_true', help='start the interactive repl')
    parser.add_argument('-v', '--verbose', action='store_true', help='log debug output to stderr')
    return parser

def main(argv: Optional[Sequence[str]] = None) -> int:
    args = _build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(levelname)s %(name)s: %(message)s',
    )

    path = args.path
    if args.repl or (args.eval is None and path is None and not Path(DEFAULT_FILE).exists()):
        from ufel.repl import main as repl
        repl()
        return 0

    rt = Ufel()
    try:
        if args.eval is not None:
            rt.run_str(args.eval)
        else:
            path = path if path is not None else Path(DEFAULT_FILE)
            logger.debug("running %s", path)
            rt.run_file(path)
    except UfelError as err:
        for e in err:
            print(e, file=sys.stderr)
        return 1
    except OSError as err:
        print(err, file=sys.stderr)
        return 1

    for val in rt.take_stack():
        print(show(val))
    return 0
