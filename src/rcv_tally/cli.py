"""
Module that contains the command line app.

Why does this file exist, and why not put this in __main__?

  You might be tempted to import things from __main__ later, but that will cause
  problems: the code will get executed twice:

  - When you run `python -mrcv_tally` python will execute
    ``__main__.py`` as a script. That means there won't be any
    ``rcv_tally.__main__`` in ``sys.modules``.
  - When you import __main__ it will get executed again (as a module) because
    there's no ``rcv_tally.__main__`` in ``sys.modules``.
"""
import argparse
import logging
import pathlib
import sys

import rcv_tally.parsers as parsers
import rcv_tally.tables as tables

from rcv_tally.election import ElectionRunner
from rcv_tally.errors import InputError
from rcv_tally.tally import Tally

USAGE = "%(prog)s [-log N] <votes_file>"


class _ArgumentParser(argparse.ArgumentParser):

    # usage errors exit with 1, same as an unreadable votes file
    def error(self, message):
        self.print_usage(sys.stdout)
        self.exit(1)


def _add_log_handler():
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter("LOG: %(message)s"))

    package_logger = logging.getLogger("rcv_tally")
    saved = (package_logger.level, package_logger.propagate)

    # LOG: lines go to stdout only, not also to handlers configured on the root logger
    package_logger.addHandler(handler)
    package_logger.setLevel(logging.INFO)
    package_logger.propagate = False
    return handler, saved


def _remove_log_handler(handler, saved):
    package_logger = logging.getLogger("rcv_tally")
    package_logger.removeHandler(handler)
    level, propagate = saved
    package_logger.setLevel(level)
    package_logger.propagate = propagate


def main(argv=None):

    # argument parse and valid
    p = _ArgumentParser(prog="rcv-tally", usage=USAGE, description="Tally a ranked choice (instant runoff) election.")

    p.add_argument("-log", dest="log_level", type=int, default=0, metavar="N",
                   help="Verbosity of LOG: trace lines. 0 prints only round tables and the outcome.")
    p.add_argument("--save-dir", default=None,
                   help="If given, the round by round table is also written as CSV under this directory.")
    p.add_argument("votes_file", help="Ballot file: candidate count, candidate names, then one group of ids per ballot.")

    args = p.parse_args(argv)
    votes_path = pathlib.Path(args.votes_file)

    handler, saved = _add_log_handler()
    try:
        return _run(votes_path, args.log_level, args.save_dir)
    finally:
        _remove_log_handler(handler, saved)


def _print_round_header(round_num):
    print(f"=== ROUND {round_num} ===")


def _run(votes_path, log_level, save_dir):

    try:
        tally = Tally(parser_func=parsers.ballot_file,
                      parser_args={"cvr_path": votes_path, "log_level": log_level},
                      log_level=log_level)
    except InputError as err:
        print(f"ERROR: {err}")
        print("Could not load votes file. Exiting with error code 1")
        return 1

    runner = ElectionRunner(tally, unique_id=votes_path.stem, on_round_start=_print_round_header)
    for snapshot in runner.round_iter():
        print(snapshot.get_table_text())
        if snapshot.votes_text is not None:
            print(snapshot.votes_text)

    result = runner.get_result()
    print(result.get_outcome_text())

    if save_dir:
        tables.write_round_by_round_table(result, save_dir)

    return 0
