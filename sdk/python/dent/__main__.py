"""CLI: python -m dent <file.dent|-> [query]"""

import argparse
import logging
import sys

from .engine import Dent
from .errors import DentError
from .query import QueryError, parse_query, resolve


def main(argv=None) -> int:
    ap = argparse.ArgumentParser(
        prog="python -m dent",
        description="Query a dent file and print the selected value in dent notation.",
    )
    ap.add_argument("file", help="dent file to read, or - for stdin")
    ap.add_argument("query", nargs="?", default=".", help="path to select, e.g. .foo.bar[0].baz")
    ap.add_argument("--base-dir", help="directory @import paths resolve against when reading stdin")
    ap.add_argument("--allow-duplicate-keys", action="store_true", help="let later keys overwrite earlier ones")
    ap.add_argument("-v", "--verbose", action="store_true", help="log import resolution")
    args = ap.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        steps = parse_query(args.query)
    except QueryError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    dent = Dent(allow_duplicate_keys=args.allow_duplicate_keys)
    try:
        if args.file == "-":
            doc = dent.parse(sys.stdin.read(), base_dir=args.base_dir)
        else:
            doc = dent.parse_file(args.file)
    except DentError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    with doc:
        try:
            node = resolve(doc.root, steps)
        except QueryError as exc:
            print(f"error: {exc}", file=sys.stderr)
            return 1
        print(node.to_str())
    return 0


if __name__ == "__main__":
    sys.exit(main())
