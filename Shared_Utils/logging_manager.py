import logging
import os
from logging.handlers import TimedRotatingFileHandler


class CustomLogger(logging.Logger):
    # Define custom logging levels
    WITHDRAWAL_LEVEL_NUM = 21
    PLAN_SENT_NUM = 23
    BAD_REQUEST_NUM = 25

    logging.addLevelName(WITHDRAWAL_LEVEL_NUM, "WITHDRAWAL")
    logging.addLevelName(PLAN_SENT_NUM, "PLAN_SENT")
    logging.addLevelName(BAD_REQUEST_NUM, "BAD_REQUEST")

    def withdrawal(self, message, *args, **kwargs):
        if self.isEnabledFor(self.WITHDRAWAL_LEVEL_NUM):
            self._log(self.WITHDRAWAL_LEVEL_NUM, f"WITHDRAWAL: {message}", args, **kwargs)

    def plan_sent(self, message, *args, **kwargs):
        if self.isEnabledFor(self.PLAN_SENT_NUM):
            self._log(self.PLAN_SENT_NUM, f"PLAN_SENT: {message}", args, **kwargs)

    def bad_request(self, message, *args, **kwargs):
        if self.isEnabledFor(self.BAD_REQUEST_NUM):
            self._log(self.BAD_REQUEST_NUM, f"BAD_REQUEST: {message}", args, **kwargs)

    def insufficient_funds(self, message, *args, **kwargs):
        if self.isEnabledFor(logging.INFO):
            self._log(logging.INFO, f"INSUFFICIENT_FUNDS: {message}", args, **kwargs)


logging.setLoggerClass(CustomLogger)


class CustomFormatter(logging.Formatter):
    grey = "\x1b[38;21m"
    blue = "\x1b[34;21m"
    green = "\x1b[32;21m"
    yellow = "\x1b[33;21m"
    red = "\x1b[31;21m"
    magenta = "\x1b[35;21m"
    orange = "\x1b[38;5;214m"
    bold_red = "\x1b[31;1m"
    reset = "\x1b[0m"
    format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s (%(filename)s:%(lineno)d)"

    FORMATS = {
        logging.DEBUG: grey + format + reset,
        logging.INFO: grey + format + reset,
        logging.WARNING: orange + format + reset,
        logging.ERROR: red + format + reset,
        logging.CRITICAL: bold_red + format + reset,
        CustomLogger.WITHDRAWAL_LEVEL_NUM: green + format + reset,
        CustomLogger.PLAN_SENT_NUM: yellow + format + reset,
        CustomLogger.BAD_REQUEST_NUM: magenta + format + reset
    }

    def format(self, record):
        log_fmt = self.FORMATS.get(record.levelno, self._fmt)
        formatter = logging.Formatter(log_fmt, "%Y-%m-%d %H:%M:%S")
        return formatter.format(record)


class LoggerManager:
    _instance = None
    _is_initialized = False

    def __new__(cls, *args, **kwargs):
        if not cls._instance:
            cls._instance = super(LoggerManager, cls).__new__(cls)
        return cls._instance

    def __init__(self, config, log_dir=None):
        if not self._is_initialized:
            self._log_level = config.get('log_level', logging.INFO)
            self.log_dir = log_dir or config.get('log_dir') or "logs"
            self.loggers = {}
            self.setup_logging()
            self._is_initialized = True

    @property
    def log_level(self):
        return self._log_level

    @classmethod
    def reset(cls):
        """Drop the singleton so the next LoggerManager(...) reconfigures (tests, CLI re-entry)."""
        if cls._instance is not None:
            for logger in cls._instance.loggers.values():
                for handler in list(logger.handlers):
                    handler.close()
                logger.handlers.clear()
        cls._instance = None
        cls._is_initialized = False

    def setup_logging(self):
        self.setup_logger('allocator_logger', 'allocator')
        self.setup_logger('planner_logger', 'planner')
        self.setup_logger('shared_logger', 'shared')

    def setup_logger(self, logger_name, subfolder):
        log_path = os.path.join(self.log_dir, subfolder)
        os.makedirs(log_path, exist_ok=True)

        log_file = os.path.join(log_path, f"{logger_name}.log")
        logger = CustomLogger(logger_name)
        logger.setLevel(logging.DEBUG)  # File will always capture everything

        if logger.hasHandlers():
            logger.handlers.clear()

        # Console Handler → Only shows INFO+ by default (DEBUG only if --verbose)
        console_handler = logging.StreamHandler()
        console_handler.setLevel(self._log_level)
        console_handler.setFormatter(CustomFormatter())
        logger.addHandler(console_handler)

        # File Handler → Always keep full DEBUG logs for postmortem analysis
        file_handler = TimedRotatingFileHandler(
            log_file, when="midnight", interval=1, backupCount=2
        )
        file_handler.setLevel(logging.DEBUG)
        file_formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s (%(filename)s:%(lineno)d)"
        )
        file_handler.setFormatter(file_formatter)
        logger.addHandler(file_handler)

        self.loggers[logger_name] = logger

    def get_logger(self, logger_name):
        return self.loggers.get(logger_name)
