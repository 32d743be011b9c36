"""Configure logging for the datablog package."""

import logging

import coloredlogs


def get_logger(name: str):
    """Helper function to nest a logger under the 'datablog' logger and return it."""
    if name == "datablog" or name.startswith("datablog."):
        return logging.getLogger(name)
    return logging.getLogger(f"datablog.{name}")


def configure_root_logger(
    logfile: str | None = None,
    loglevel: str = "INFO",
    dependency_loglevels: dict[str, int] | None = None,
    propagate: bool = False,
) -> None:
    """Configure the root datablog logger.

    Args:
        logfile: Path to logfile or None.
        loglevel: Level of detail at which to log, by default INFO.
        dependency_loglevels: Dictionary mapping dependency name to desired loglevel.
            This allows us to filter excessive logs from dependencies.
        propagate: Whether to propagate logs to ancestor loggers. Useful for ensuring
            that pytest has access to datablog logs during testing.
    """
    if dependency_loglevels is None:
        dependency_loglevels = {"urllib3": logging.WARNING, "pyogrio": logging.WARNING}
    for dependency_name, dependency_loglevel in dependency_loglevels.items():
        logging.getLogger(dependency_name).setLevel(dependency_loglevel)

    logger = logging.getLogger("datablog")
    log_format = "%(asctime)s [%(levelname)8s] %(name)s:%(lineno)s %(message)s"
    coloredlogs.install(fmt=log_format, level=loglevel, logger=logger)

    logger.addHandler(logging.NullHandler())

    if logfile is not None:
        file_logger = logging.FileHandler(logfile)
        file_logger.setFormatter(logging.Formatter(log_format))
        logger.addHandler(file_logger)

    logger.propagate = propagate
