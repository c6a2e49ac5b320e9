import datetime
import enum
import logging
import sys

# Define the custom log levels
CRITICAL = logging.CRITICAL
FATAL = CRITICAL
ERROR = logging.ERROR
RESULT = 35
WARNING = logging.WARNING   # 30
WARN = WARNING
STATUS = 25
INFO = logging.INFO         # 20
VERBOSE = 19
DEBUG = logging.DEBUG       # 10
TRACE = 5
NOTSET = logging.NOTSET

DEFAULT_STREAM_LOG_LEVEL = logging.INFO

custom_levels = {
    'RESULT': RESULT,
    'STATUS': STATUS,
    'VERBOSE': VERBOSE,
    'TRACE': TRACE,
}


# Custom colors for various logging levels
class COLORS(enum.Enum):
    red = "\033[0;31m"
    green = "\033[0;32m"
    yellow = "\033[0;33m"
    cyan = "\033[0;36m"
    igrey = "\033[0;90m"
    bred = "\033[1;31m"
    bblue = "\033[1;34m"
    normal = "\033[0m"


level_to_color_map = {
    ERROR: COLORS.bred,
    CRITICAL: COLORS.bred,
    WARNING: COLORS.yellow,
    RESULT: COLORS.green,
    STATUS: COLORS.bblue,
    INFO: COLORS.normal,
    VERBOSE: COLORS.normal,
    DEBUG: COLORS.normal,
    TRACE: COLORS.igrey,
}


def get_level_color(level):
    return level_to_color_map.get(level, COLORS.normal).value


def log_level_factory(level_name):
    level_num = custom_levels.get(level_name, logging.NOTSET)

    def log_func(self, message, *args, **kwargs):
        if self.isEnabledFor(level_num):
            self._log(level_num, message, args, **kwargs)
    return log_func


class RimLogger(logging.Logger):
    def _log(self, level, msg, args, exc_info=None, extra=None, stack_info=False, stacklevel=3):
        # Copied from logging.Logger._log so that findCaller skips the custom level
        # helpers above and reports the line that actually logged.
        fn, lno, func, sinfo = self.findCaller(stack_info, stacklevel)
        if exc_info:
            if isinstance(exc_info, BaseException):
                exc_info = (type(exc_info), exc_info, exc_info.__traceback__)
            elif not isinstance(exc_info, tuple):
                exc_info = sys.exc_info()

        record = self.makeRecord(self.name, level, fn, lno, msg, args, exc_info, func, extra, sinfo)
        self.handle(record)


# Add the custom levels to the logger
for custom_name, custom_num in custom_levels.items():
    logging.addLevelName(custom_num, custom_name)
    setattr(RimLogger, custom_name.lower(), log_level_factory(custom_name))


class ColoredStandardFormatter(logging.Formatter):
    def format(self, record):
        formatted_time = f"{datetime.datetime.now().strftime('%Y-%m-%d %H:%M:%S')}"
        color = get_level_color(record.levelno)
        return f"{color}{formatted_time}|{record.levelname}: {record.getMessage()}{COLORS['normal'].value}"


class ColoredDebugFormatter(logging.Formatter):
    def format(self, record):
        formatted_time = f"{datetime.datetime.now().strftime('%Y-%m-%d %H:%M:%S.%f')}"
        color = get_level_color(record.levelno)
        return f"{color}{formatted_time}|{record.levelname}:{record.threadName}:{record.module}:{record.lineno}: " \
               f"{record.getMessage()}{COLORS['normal'].value}"


def setup_logging(name=__name__, stream_log_level=DEFAULT_STREAM_LOG_LEVEL):
    if isinstance(stream_log_level, str):
        stream_log_level = logging.getLevelName(stream_log_level.upper())

    _logger = RimLogger(name)
    _logger.setLevel(TRACE)

    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(ColoredStandardFormatter())
    stream_handler.setLevel(stream_log_level)
    _logger.addHandler(stream_handler)

    return _logger


def apply_logging_options(_logger, args):
    if args is None:
        return
    stream_handlers = [h for h in _logger.handlers if not hasattr(h, 'baseFilename')]

    if getattr(args, "verbose", False):
        for stream_handler in stream_handlers:
            if stream_handler.level > VERBOSE:
                stream_handler.setLevel(VERBOSE)

    if getattr(args, "debug", False):
        for stream_handler in stream_handlers:
            stream_handler.setFormatter(ColoredDebugFormatter())
            if stream_handler.level > DEBUG:
                stream_handler.setLevel(DEBUG)

    # Raw probe output and per-row parsing details
    if getattr(args, "trace", False):
        for stream_handler in stream_handlers:
            stream_handler.setFormatter(ColoredDebugFormatter())
            stream_handler.setLevel(TRACE)

    if getattr(args, "stream_log_level", None):
        for stream_handler in stream_handlers:
            stream_handler.setLevel(args.stream_log_level.upper())
