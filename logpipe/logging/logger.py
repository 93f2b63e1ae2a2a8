import logging
import sys

_HTTP_LOGGERS = ("httpx", "httpcore")


class Log:
    """Process-wide logging facade for the pipeline."""

    _logger: logging.Logger = logging.getLogger("logpipe")

    @classmethod
    def configure(cls, log_level: str) -> None:
        """Attach a stdout handler and set the level.

        HTTP client libraries stay at WARNING unless DEBUG is requested,
        otherwise every retried request would log twice.
        """
        level = log_level.upper()
        cls._logger.setLevel(level)
        if not cls._logger.handlers:
            handler = logging.StreamHandler(sys.stdout)
            handler.setFormatter(
                logging.Formatter("%(asctime)s [%(levelname)s] %(message)s")
            )
            cls._logger.addHandler(handler)
        for name in _HTTP_LOGGERS:
            logging.getLogger(name).setLevel(level if level == "DEBUG" else "WARNING")

    @classmethod
    def info(cls, message: str, **kwargs: object) -> None:
        cls._logger.info(message, extra=kwargs)

    @classmethod
    def error(cls, message: str, **kwargs: object) -> None:
        cls._logger.error(message, extra=kwargs)

    @classmethod
    def warning(cls, message: str, **kwargs: object) -> None:
        cls._logger.warning(message, extra=kwargs)

    @classmethod
    def debug(cls, message: str, **kwargs: object) -> None:
        cls._logger.debug(message, extra=kwargs)
