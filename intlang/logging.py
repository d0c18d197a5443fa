import logging
from argparse import ArgumentParser, Namespace
from typing import IO

__all__ = ["LOG_LEVELS", "setTerminalLogging", "set_argparser", "init"]

LOG_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
    "critical": logging.CRITICAL,
}


def setTerminalLogging(stream: IO[str] | None = None) -> logging.Logger:
    # create console handler, stderr by default
    handler = logging.StreamHandler(stream)

    # create formatter
    try:
        import colorlog

        formatter: logging.Formatter = colorlog.ColoredFormatter(
            "{log_color}{levelname:8}{reset} {message_log_color}{message}",
            datefmt=None,
            reset=True,
            log_colors={
                "DEBUG": "cyan",
                "INFO": "green",
                "WARNING": "yellow",
                "ERROR": "bold_red",
                "CRITICAL": "bold_red",
            },
            secondary_log_colors={
                "message": {
                    "ERROR": "bold_white",
                    "CRITICAL": "bold_white",
                },
            },
            style="{",
        )
    except ImportError:
        formatter = logging.Formatter("{levelname:8} {message}", style="{")
    handler.setFormatter(formatter)

    # add the handler to the root logger, replacing one from a previous call
    logger = logging.getLogger()
    for old in logger.handlers[:]:
        if getattr(old, "_intlang_terminal", False):
            logger.removeHandler(old)
    handler._intlang_terminal = True  # type: ignore[attr-defined]
    logger.addHandler(handler)

    return logger


def set_argparser(argparser: ArgumentParser) -> None:
    """
    Add arguments for configuring global logging values to an instance of
    :py:class:`argparse.ArgumentParser`.

    This function is called internally from the :py:mod:`intlang.config` module.

    :param argparser: an instance of :py:class:`argparse.ArgumentParser`
    """
    argparser.add_argument(
        "--log-level",
        action="store",
        choices=LOG_LEVELS.keys(),
        default="info",
        help="the verbosity level for terminal logging (default: %(default)s)",
    )
    argparser.add_argument(
        "-d",
        "--debug",
        action="store_const",
        const="debug",
        dest="log_level",
        help="shortcut for '--log-level debug'",
    )
    argparser.add_argument(
        "-q",
        "--quiet",
        action="store_const",
        const="warning",
        dest="log_level",
        help="shortcut for '--log-level warning'",
    )


def init(args: Namespace, stream: IO[str] | None = None) -> None:
    """
    Initialize the :py:mod:`logging` module with the arguments parsed by
    :py:class:`argparse.ArgumentParser`.

    :param args:
        an instance of :py:class:`argparse.Namespace`. It is expected that
        :py:func:`set_argparser()` was called prior to parsing the arguments.
    :param stream: stream for the log records, ``sys.stderr`` by default
    """
    logger = logging.getLogger()
    logger.setLevel(LOG_LEVELS[args.log_level])

    # httpx logs every request on the info level
    logging.getLogger("httpx").setLevel(logging.WARNING)

    setTerminalLogging(stream)
