# log.py
"""
Package logger of the calculator.

Everything in Calculator logs through `log`. The level comes from the
environment when the package is imported (DEBUG=true or
CALCULATOR_LOG=debug|info|warning|error, CRITICAL otherwise) and is raised
to DEBUG while the 'debug' setting is on (see set_debug).
"""
import logging
import os

log = logging.getLogger('Calculator')
logging.basicConfig(format='[Calculator] %(levelname)s %(message)s')

# Level to go back to when the 'debug' setting is switched off again
_level_before_debug = None


def has_env(varname, value='true'):
    """
    Check environment variable is set.
    """
    return os.environ.get(varname, '').lower() == value


def set_debug(enabled):
    """Follow the 'debug' setting: DEBUG while it is on, the previous level once it is off."""
    global _level_before_debug
    if enabled and _level_before_debug is None:
        _level_before_debug = log.level
        log.setLevel(logging.DEBUG)
    elif not enabled and _level_before_debug is not None:
        log.setLevel(_level_before_debug)
        _level_before_debug = None


if has_env('DEBUG'):
    log.setLevel(logging.DEBUG)
elif has_env('CALCULATOR_LOG', 'debug'):
    log.setLevel(logging.DEBUG)
elif has_env('CALCULATOR_LOG', 'info'):
    log.setLevel(logging.INFO)
elif has_env('CALCULATOR_LOG', 'warning'):
    log.setLevel(logging.WARNING)
elif has_env('CALCULATOR_LOG', 'error'):
    log.setLevel(logging.ERROR)
else:
    log.setLevel(logging.CRITICAL)
