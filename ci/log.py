# SPDX-FileCopyrightText: 2024 SAP SE or an SAP affiliate company and Gardener contributors
#
# SPDX-License-Identifier: Apache-2.0

from copy import copy
import logging
import sys


class Bcolors:
    RESET_ALL = '\033[0m'
    BOLD = '\033[1m'
    RED = '\033[31m'
    GREEN = '\033[32m'
    YELLOW = '\033[33m'
    BLUE = '\033[34m'


_level_colours = {
    logging.DEBUG: Bcolors.BLUE,
    logging.INFO: Bcolors.GREEN,
    logging.WARNING: Bcolors.YELLOW,
    logging.ERROR: Bcolors.RED,
    logging.CRITICAL: Bcolors.RED,
}


class CCFormatter(logging.Formatter):
    '''
    adds a `levelprefix` field to log-records, which is the level-name, coloured if the
    stream is attached to a terminal
    '''
    def __init__(self, *args, stream=None, **kwargs):
        super().__init__(*args, **kwargs)
        self.stream = stream or sys.stderr

    def color_level_name(self, level_name, level_number):
        if not (colour := _level_colours.get(level_number)):
            return str(level_name)
        return f'{Bcolors.BOLD}{colour}{level_name}{Bcolors.RESET_ALL}'

    def formatMessage(self, record):
        record_copy = copy(record)
        levelname = record_copy.levelname
        if self.stream.isatty():
            levelname = self.color_level_name(levelname, record_copy.levelno)
        record_copy.__dict__['levelprefix'] = levelname
        return super().formatMessage(record_copy)


def configure_default_logging(
    stdout_level=None,
    force=True,
    stream=None,
):
    if not stdout_level:
        stdout_level = logging.INFO
    stream = stream or sys.stderr

    # make sure to have a clean root logger (in case setup is called multiple times)
    if force:
        for h in list(logging.root.handlers):
            logging.root.removeHandler(h)
            h.close()

    sh = logging.StreamHandler(stream)
    sh.setLevel(stdout_level)
    sh.setFormatter(CCFormatter(fmt=default_fmt_string(), stream=stream))

    logging.root.addHandler(hdlr=sh)
    logging.root.setLevel(level=stdout_level)

    # too verbose
    logging.getLogger('github3').setLevel(logging.WARNING)
    logging.getLogger('urllib3').setLevel(logging.WARNING)
    logging.getLogger('git.cmd').setLevel(logging.INFO)


def default_fmt_string():
    return '%(asctime)s [%(levelprefix)s] %(name)s: %(message)s'
