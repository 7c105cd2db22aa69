import sys
import logging
from contextlib import contextmanager
from typing import Callable, Iterator, Optional, TextIO

logger = logging.getLogger(__name__)


@contextmanager
def muted(target: logging.Logger) -> Iterator[logging.Logger]:
    """
    Silences `target` for the duration of the block.

    Propagation is switched off and a NullHandler attached (without one,
    logging's last-resort handler would still print warnings). The saved
    propagate flag is restored and the NullHandler detached on every exit
    path, including when the block raises.
    """
    saved_propagate = target.propagate
    null_handler = logging.NullHandler()
    target.propagate = False
    target.addHandler(null_handler)
    try:
        yield target
    finally:
        target.removeHandler(null_handler)
        target.propagate = saved_propagate


def _reset_logger(item: logging.Logger, keep: Optional[Callable[[logging.Handler], bool]]) -> None:
    for handler in list(item.handlers):
        if keep is not None and keep(handler):
            continue
        item.removeHandler(handler)
        handler.close()
    for log_filter in list(item.filters):
        item.removeFilter(log_filter)
    item.setLevel(logging.NOTSET)
    item.propagate = True
    item.disabled = False


def reset_logging(keep: Optional[Callable[[logging.Handler], bool]] = None) -> None:
    """
    Returns the logging registry to an empty configuration.

    Every known logger loses its handlers and filters and goes back to
    NOTSET with propagation on; the root logger returns to WARNING. Handlers
    for which `keep` returns True stay attached and open.
    """
    logging.disable(logging.NOTSET)
    for item in list(logging.root.manager.loggerDict.values()):
        if isinstance(item, logging.Logger):
            _reset_logger(item, keep)
    _reset_logger(logging.root, keep)
    logging.root.setLevel(logging.WARNING)


def install_console_handler(stream: Optional[TextIO] = None) -> logging.Handler:
    """Attaches one console StreamHandler (stderr by default) to the root logger."""
    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    logging.root.addHandler(handler)
    return handler
