import argparse
import logging
import sys
from typing import IO, Any, NoReturn, Sequence

import intlang.logging

logger = logging.getLogger(__name__)

__all__ = ["ArgumentParser", "getArgParser", "parse_args"]

PROJECT_NAME = "setup-int-lang"


class ArgumentParser(argparse.ArgumentParser):
    """
    :py:class:`argparse.ArgumentParser` which exits with status 1 instead of 2
    on invalid command line arguments.
    """

    def error(self, message: str) -> NoReturn:
        self.print_usage(sys.stderr)
        self.exit(1, f"{self.prog}: error: {message}\n")


def getArgParser(**kwargs: Any) -> ArgumentParser:
    """
    Create an instance of :py:class:`ArgumentParser` and set the global
    arguments (e.g. for logging).

    :param kwargs: passed to :py:class:`argparse.ArgumentParser()` constructor.
    :returns: an instance of :py:class:`ArgumentParser`.
    """
    kwargs.setdefault("prog", PROJECT_NAME)
    kwargs.setdefault("formatter_class", argparse.RawDescriptionHelpFormatter)
    kwargs.setdefault("allow_abbrev", False)

    ap = ArgumentParser(**kwargs)
    intlang.logging.set_argparser(ap)

    return ap


def parse_args(
    argparser: argparse.ArgumentParser,
    argv: Sequence[str] | None = None,
    log_stream: IO[str] | None = None,
) -> argparse.Namespace:
    """
    Parses arguments given on the command line and sets up the logging
    interface using the :py:mod:`intlang.logging` module.

    :param argparser:
        An instance of :py:class:`argparse.ArgumentParser`. It **must** be
        created by calling the :py:func:`getArgParser` function, otherwise this
        function may access undefined arguments.
    :param argv: the arguments to parse, ``sys.argv[1:]`` by default
    :param log_stream: stream for the log records, ``sys.stderr`` by default
    :returns:
        an instance of :py:class:`argparse.Namespace` with the parsed arguments.
    """
    args = argparser.parse_args(argv)

    intlang.logging.init(args, log_stream)
    logger.debug(f"Parsed arguments:\n{args}")

    return args
