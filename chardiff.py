#!/usr/bin/env python3


"""Lists the character edits that turn one text file into another."""


import argparse
import levenshtein
import logging
import sys


from rich.console import Console
from typing import List, Optional


STYLES = {
    levenshtein.Insertion: 'green',
    levenshtein.Deletion: 'red',
    levenshtein.Substitution: 'yellow',
}


def describe(change: levenshtein.Change) -> str:
    if isinstance(change, levenshtein.Substitution):
        return f'{change.old!r} with {change.new!r} at position {change.position}'
    return f'{change.char!r} at position {change.position}'


def show(changes: levenshtein.Script, console: Console) -> None:
    if not changes:
        console.print('Files are identical ✓', style='green', markup=False,
                emoji=False, highlight=False)
        return
    for change in changes:
        console.print(f'{type(change).__name__} {describe(change)}',
                style=STYLES[type(change)], markup=False, emoji=False,
                highlight=False)


def read_text(path: str, encoding: str) -> str:
    with open(path, encoding=encoding, newline='') as f:
        return f.read()


def parse_args(argv: Optional[List[str]]=None) -> argparse.Namespace:
    arg_parser = argparse.ArgumentParser(description=__doc__)
    arg_parser.add_argument('path1', help='original file')
    arg_parser.add_argument('path2', help='changed file')
    arg_parser.add_argument('-e', '--encoding', default='utf-8',
            help='Encoding of both files (default: %(default)s).')
    arg_parser.add_argument('--max-cells', type=int,
            default=levenshtein.MAX_CELLS,
            help='Refuse inputs whose distance matrix would have more cells '
            'than this (default: %(default)s).')
    arg_parser.add_argument('--forward', action='store_true',
            help='List edits from the start of the files instead of from the '
            'end.')
    arg_parser.add_argument('-v', '--verbose', action='count', default=0,
            help='Verbosity. Give once for progress, twice for debugging.')
    return arg_parser.parse_args(argv)


def main(argv: Optional[List[str]]=None, console: Optional[Console]=None) -> int:
    args = parse_args(argv)
    if args.verbose == 1:
        logging.basicConfig(level=logging.INFO)
    elif args.verbose >= 2:
        logging.basicConfig(level=logging.DEBUG)
    if console is None:
        console = Console(highlight=False)
    try:
        text1 = read_text(args.path1, args.encoding)
        text2 = read_text(args.path2, args.encoding)
        logging.info('Read %d and %d characters', len(text1), len(text2))
        changes = levenshtein.diff(text1, text2, args.max_cells)
    except (OSError, LookupError, UnicodeDecodeError,
            levenshtein.MatrixTooLargeError) as e:
        print(f'chardiff: {e}', file=sys.stderr)
        return 1
    logging.info('%d edits', len(changes))
    if args.forward:
        changes.reverse()
    show(changes, console)
    return 0


if __name__ == '__main__':
    sys.exit(main())
