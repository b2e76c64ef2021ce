# Copyright (c) 2021 DDN. All rights reserved.
# Use of this source code is governed by a MIT-style
# license that can be found in the LICENSE file.

import logging
import os
import sys

# This log is for the low level detail of device scanning: directory walks,
# symlink resolution and sysfs writes. Only interesting when things go wrong.
daemon_log = logging.getLogger("daemon")
daemon_log.propagate = False

# This log is for messages about attach, detach and resize operations invoked
# at the user's request.
console_log = logging.getLogger("console")
console_log.propagate = False

logging_in_debug_mode = os.path.exists("/tmp/emf-sas-debug")

if logging_in_debug_mode or "pytest" in sys.argv[0] or "nosetests" in sys.argv[0]:
    daemon_log.setLevel(logging.DEBUG)
    console_log.setLevel(logging.DEBUG)
else:
    daemon_log.setLevel(logging.WARN)
    console_log.setLevel(logging.WARN)

sas_loggers = [daemon_log, console_log]


# these are signal handlers used to adjust loglevel at runtime
def increase_loglevel(signal, frame):
    for logger in sas_loggers:
        # impossible to go below 10 -- logging resets to WARN
        logger.setLevel(logger.getEffectiveLevel() - 10)
        logger.critical("Log level set to %s" % logging.getLevelName(logger.getEffectiveLevel()))


def decrease_loglevel(signal, frame):
    for logger in sas_loggers:
        current_level = logger.getEffectiveLevel()
        # No point in setting higher than this
        if current_level >= logging.CRITICAL:
            return
        logger.setLevel(current_level + 10)
        logger.critical("Log level set to %s" % logging.getLevelName(logger.getEffectiveLevel()))


def _add_handler(logger, handler_class, make_handler, matches=lambda handler: True):
    # setup may run more than once per process, one handler of each kind per logger
    for handler in logger.handlers:
        if isinstance(handler, handler_class) and matches(handler):
            return
    logger.addHandler(make_handler())


def stream_log_setup(stream=sys.stderr, console_level=logging.INFO, daemon_level=logging.WARNING):
    for logger, level in [(console_log, console_level), (daemon_log, daemon_level)]:
        _add_handler(
            logger,
            logging.StreamHandler,
            lambda: logging.StreamHandler(stream),
            lambda handler: handler.stream is stream,
        )
        logger.setLevel(level)


def journal_log_setup(console_level=logging.INFO, daemon_level=logging.WARNING):
    """
    Send both logs to the systemd journal. Needs the 'journal' extra (systemd-python).
    """
    from systemd.journal import JournalHandler

    for logger, identifier, level in [
        (console_log, "emf-sas-console", console_level),
        (daemon_log, "emf-sas-daemon", daemon_level),
    ]:
        _add_handler(logger, JournalHandler, lambda: JournalHandler(SYSLOG_IDENTIFIER=identifier))
        logger.setLevel(level)
