import logging
import sys


def setup_root_logger(log_name="torchapprox", level=logging.DEBUG):
    """
    Send the records of ``log_name`` and its children to stdout.

    The integrators log call summaries at DEBUG level; this is meant for
    interactive debugging. Calling it again does not add a second handler.
    """
    L = logging.getLogger(log_name)
    L.setLevel(level)
    for handler in L.handlers:
        if getattr(handler, "_torchapprox_stream", False):
            handler.setLevel(level)
            return L

    ch = logging.StreamHandler(sys.stdout)
    ch.setLevel(level)
    ch._torchapprox_stream = True
    formatter = logging.Formatter(
        "[%(relativeCreated)d:%(levelname)s:%(name)s]\n    %(message)s",
    )
    ch.setFormatter(formatter)
    L.addHandler(ch)
    return L
