import logging
import logging.handlers
import queue
from pathlib import Path
from typing import Optional, Union

from basketsvc.util.basicpatterns import Singleton

UVICORN_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")


def _build_handlers(
    log_file: Path, log_level: int, log_on_console: bool
) -> list[logging.Handler]:
    logging_format = "%(threadName)-20s%(levelname)s: %(name)s: %(message)s"
    logging_date_format = "%Y-%m-%d %H:%M:%S"
    file_logging_format = "%(asctime)s.%(msecs)03d %(levelname)-8s %(threadName)-20s %(name)s: %(message)s"
    console_log_level = logging.WARNING

    handlers: list[logging.Handler] = []
    try:
        file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
    except OSError:
        console_log_level = log_level
    else:
        file_handler.setLevel(log_level)
        file_handler.setFormatter(
            logging.Formatter(file_logging_format, logging_date_format)
        )
        handlers.append(file_handler)
    finally:
        if log_on_console:
            console_handler = logging.StreamHandler()
            console_handler.set_name("console")
            console_handler.setFormatter(logging.Formatter(logging_format))
            console_handler.setLevel(console_log_level)
            handlers.append(console_handler)

    return handlers


class LogConfig(metaclass=Singleton):
    """Route every log record through a queue to a background listener thread.

    Request handlers only enqueue records: the file and console handlers run
    in the listener thread.
    """

    def __init__(
        self,
        log_file: Optional[Path] = None,
        log_level: Union[int, str] = logging.INFO,
        log_on_console: bool = True,
    ):
        self.log_file = log_file or Path("basketsvc.log")
        self.log_level = logging.getLevelName(log_level) if isinstance(log_level, str) else log_level
        self.log_on_console = log_on_console

        logging.captureWarnings(True)

        self.log_queue: queue.Queue[logging.LogRecord] = queue.Queue(maxsize=-1)
        self.log_listener = logging.handlers.QueueListener(
            self.log_queue,
            *_build_handlers(self.log_file, self.log_level, self.log_on_console),
            respect_handler_level=True,
        )

    def init_logging(self) -> None:
        self.log_listener.start()
        configure_root_logger(self.log_queue, self.log_level)

    def stop_logging(self) -> None:
        self.log_listener.stop()


def configure_root_logger(
    log_queue: "queue.Queue[logging.LogRecord]", log_level: Union[int, str]
) -> None:
    handler = logging.handlers.QueueHandler(log_queue)
    root = logging.getLogger()
    root.addHandler(handler)
    root.setLevel(log_level)

    # Let uvicorn records reach the root queue handler.
    for name in UVICORN_LOGGERS:
        uvicorn_logger = logging.getLogger(name)
        uvicorn_logger.handlers.clear()
        uvicorn_logger.propagate = True
