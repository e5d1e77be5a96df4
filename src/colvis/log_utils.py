# src/colvis/log_utils.py
import logging
from collections.abc import Sequence

# third-party loggers that are too chatty at DEBUG
_NOISY_LOGGERS = ("matplotlib", "PIL", "fontTools")


def setup_logging(
    verbose: bool = False,
    quiet: Sequence[str] = _NOISY_LOGGERS
) -> None:
    """
    Configure root logging for scripts and notebooks.

    Visitors only emit DEBUG records (chosen FFT path, clustering convergence, ...),
    so they stay silent unless `verbose` is set.
    """
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)s | %(message)s",
        datefmt="%d-%m-%Y %H:%M:%S",
        force=True
    )
    for name in quiet:
        logging.getLogger(name).setLevel(logging.WARNING)
