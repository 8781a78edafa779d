"""Module for initializing settings related to the built-in registry logger
Functions:
-get_logger
-overwrite_logger_level"""

import logging, coloredlogs
import os

VALID_LVLS = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL', 'OFF']
_LOG_LVL = os.getenv('LOG_LEVEL', None)
if _LOG_LVL:
    assert _LOG_LVL in VALID_LVLS, "Log level {} not in valid levels {}".format(_LOG_LVL, VALID_LVLS)
    _LOG_LVL = -1 if _LOG_LVL == 'OFF' else getattr(logging, _LOG_LVL)
else:
    _LOG_LVL = logging.WARNING

_LOG_DIR = os.getenv('LOG_DIR', None)

format = '%(asctime)s.%(msecs)03d %(name)s[%(process)d] <{}> %(levelname)-2s %(message)s'.format(
    os.getenv('HOST_NAME', 'Registry')
)

"""
Custom Log Levels
"""
CUSTOM_LEVELS = {
    'TEST': 14,
    'NOTICE': 22,
    'FATAL': 99
}

for log_name, log_level in CUSTOM_LEVELS.items():
    logging.addLevelName(log_level, log_name)


def apply_custom_level(log, name: str, level: int):
    def _lvl_func(message, *args, **kws):
        if level >= log.getEffectiveLevel():
            log._log(level, message, args, **kws)

    setattr(log, name.lower(), _lvl_func)


"""
Custom Styling
"""

LEVEL_STYLES = {
    'fatal': {'color': 'white', 'bold': True, 'background': 'red', 'underline': True},
    'critical': {'color': 'white', 'bold': True, 'background': 'red'},
    'error': {'color': 'red'},
    'warning': {'color': 'yellow'},
    'notice': {'color': 'magenta'},
    'info': {'color': 'white'},
    'debug': {'color': 'green'},
    'test': {'color': 'magenta'},
}

FIELD_STYLES = {
    'asctime': {'color': 'green'},
    'hostname': {'color': 'magenta'},
    'levelname': {'color': 'black', 'bright': True},
    'name': {'color': 'blue'},
    'programname': {'color': 'cyan'}
}


class ColoredStreamHandler(logging.StreamHandler):
    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.setFormatter(
            coloredlogs.ColoredFormatter(format, level_styles=LEVEL_STYLES, field_styles=FIELD_STYLES)
        )


def _ignore(*args, **kwargs):
    pass


class MockLogger:
    def __getattr__(self, item):
        return _ignore


_configured = False


def _configure():
    global _configured
    if _configured:
        return

    handlers = [ColoredStreamHandler()]

    if _LOG_DIR:
        os.makedirs(_LOG_DIR, exist_ok=True)
        file_handler = logging.FileHandler(os.path.join(_LOG_DIR, 'nftregistry.log'), delay=True)
        file_handler.setFormatter(logging.Formatter(format))
        handlers.append(file_handler)

    root = logging.getLogger('nftregistry')
    for handler in handlers:
        root.addHandler(handler)
    root.propagate = False

    _configured = True


def get_logger(name=''):
    if _LOG_LVL < 0:
        return MockLogger()

    _configure()

    log = logging.getLogger('nftregistry.{}'.format(name) if name else 'nftregistry')
    log.setLevel(_LOG_LVL)

    for log_name, log_level in CUSTOM_LEVELS.items():
        apply_custom_level(log, log_name, log_level)

    return log


def overwrite_logger_level(level):
    global _LOG_LVL
    _LOG_LVL = level

    for name in list(logging.Logger.manager.loggerDict.keys()):
        if name.startswith('nftregistry'):
            logging.getLogger(name).setLevel(level)
