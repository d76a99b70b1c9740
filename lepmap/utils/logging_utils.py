import logging
import sys

# Libraries behind the download, vector I/O and plotting steps that log chattily at INFO/DEBUG
NOISY_LOGGERS = ("urllib3", "pyogrio", "fiona", "rasterio", "matplotlib", "PIL")


def setup_logging(level=logging.INFO, verbose: bool = False):
    """Log lepmap progress to stdout; --verbose turns on DEBUG (e.g. per-page GBIF fetches)."""
    log_level = logging.DEBUG if verbose else level
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stdout,
        force=True,
    )
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
