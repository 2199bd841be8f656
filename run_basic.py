# -*- coding: utf-8 -*-
"""
Run a line-numbered BASIC program.
실행: python run_basic.py program.bas [--max-steps N] [--start-line N]
"""

import argparse
import logging
import sys

from basic_interpreter import BasicInterpreter, BasicError

log = logging.getLogger("run_basic")


def build_arg_parser():
    p = argparse.ArgumentParser(description="Line-numbered integer BASIC interpreter")
    p.add_argument("source", help="BASIC program file")
    p.add_argument("--max-steps", type=int, default=None,
                   help="Abort after this many statements (guards against endless GOTO loops)")
    p.add_argument("--start-line", type=int, default=None,
                   help="Skip forward to this line number before executing anything")
    p.add_argument("--dump-vars", action="store_true",
                   help="Print the non-zero variables after a normal finish")
    p.add_argument("--debug", action="store_true", help="Trace statements and jumps on stderr")
    return p


def main(argv=None):
    args = build_arg_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.debug else logging.WARNING,
                        format="%(levelname)s: %(message)s", stream=sys.stderr)

    try:
        interp = BasicInterpreter.from_file(args.source)
    except OSError as e:
        log.error("cannot read %s: %s", args.source, e.strerror or e)
        return 2
    except BasicError as e:
        log.error("%s", e)
        return 1

    try:
        interp.run(max_steps=args.max_steps, start_line=args.start_line)
    except BasicError:
        # already reported by the interpreter
        sys.stdout.flush()
        return 1

    if args.dump_vars:
        for name, value in interp.variables.as_dict().items():
            if value:
                print(f"{name} = {value}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
