# SPDX-FileCopyrightText: 2024 SAP SE or an SAP affiliate company and Gardener contributors
#
# SPDX-License-Identifier: Apache-2.0

import os
import pathlib
import random
import string

import yaml


def existing_file(path):
    if isinstance(path, pathlib.Path):
        is_file = path.is_file()
    else:
        is_file = os.path.isfile(path)
    if not is_file:
        raise ValueError(f'not an existing file: {path}')
    return path


def existing_dir(path):
    if isinstance(path, pathlib.Path):
        is_dir = path.is_dir()
    else:
        is_dir = os.path.isdir(path)
    if not is_dir:
        raise ValueError(f'not an existing directory: {path}')
    return path


def parse_yaml_file(path, max_elements_count=100000):
    with open(path) as f:
        parsed = yaml.load(f, Loader=yaml.SafeLoader)
        # mitigate yaml bomb
        _count_elements(parsed, max_elements_count=max_elements_count)
        return parsed


def _count_elements(value, count=0, max_elements_count=100000):
    if isinstance(value, dict):
        for k, v in value.items():
            count = _count_elements(k, count=count, max_elements_count=max_elements_count)
            count = _count_elements(v, count=count, max_elements_count=max_elements_count)
    elif isinstance(value, list):
        for v in value:
            count = _count_elements(v, count=count, max_elements_count=max_elements_count)
    else:
        count += 1

    if count > max_elements_count:
        raise ValueError(f'too many elements (>{max_elements_count})')

    return count


def random_str(prefix=None, length=12):
    if prefix:
        length -= len(prefix)
    else:
        prefix = ''
    return prefix + ''.join(random.choice(string.ascii_lowercase) for _ in range(length))
