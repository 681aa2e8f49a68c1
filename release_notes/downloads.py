# SPDX-FileCopyrightText: 2024 SAP SE or an SAP affiliate company and Gardener contributors
#
# SPDX-License-Identifier: Apache-2.0

import enum
import fnmatch
import hashlib
import logging
import os

import ci.util

logger = logging.getLogger(__name__)


class ArtefactCategory(enum.Enum):
    GENERIC = 'generic'
    CLIENT = 'client'
    SERVER = 'server'
    NODE = 'node'


# (category, title, filename-patterns); order determines rendering-order
_categories = (
    (ArtefactCategory.GENERIC, None, ('kubernetes.tar.gz', '*-src.tar.gz')),
    (ArtefactCategory.CLIENT, 'Client Binaries', ('*-client-*',)),
    (ArtefactCategory.SERVER, 'Server Binaries', ('*-server-*',)),
    (ArtefactCategory.NODE, 'Node Binaries', ('*-node-*',)),
)


def sha256_hexdigest(path: str) -> str:
    buf_size = 1024 * 1024 # 1MiB
    digest = hashlib.sha256()

    with open(path, 'rb') as f:
        while (data := f.read(buf_size)):
            digest.update(data)

    return digest.hexdigest()


def categorise(fname: str) -> ArtefactCategory | None:
    # specific categories have precedence over generic one
    for category, _, patterns in reversed(_categories):
        if any(fnmatch.fnmatch(fname, pattern) for pattern in patterns):
            return category
    return None


def _table(
    paths: list[str],
    url_prefix: str,
) -> list[str]:
    lines = [
        'filename | sha256 hash',
        '-------- | -----------',
    ]
    for path in paths:
        fname = os.path.basename(path)
        lines.append(f'[{fname}]({url_prefix}/{fname}) | `{sha256_hexdigest(path)}`')

    return lines


def download_tables(
    release_tag: str,
    artefacts_dir: str,
    base_url: str,
) -> str:
    '''
    renders markdown-tables listing the release-artefacts found in the given directory, along
    w/ their sha256-digests. Artefacts are grouped by category (see `ArtefactCategory`); files
    not matching any category are ignored.
    '''
    ci.util.existing_dir(artefacts_dir)
    url_prefix = f'{base_url.rstrip("/")}/{release_tag}'

    paths_by_category = {category: [] for category, _, _ in _categories}
    for fname in sorted(os.listdir(artefacts_dir)):
        path = os.path.join(artefacts_dir, fname)
        if not os.path.isfile(path):
            continue
        if not (category := categorise(fname)):
            logger.debug(f'ignoring {fname=}')
            continue
        paths_by_category[category].append(path)

    lines = [f'## Downloads for {release_tag}']
    for category, title, _ in _categories:
        if not (paths := paths_by_category[category]):
            continue
        lines.append('')
        if title:
            lines.extend((f'### {title}', ''))
        lines.extend(_table(paths=paths, url_prefix=url_prefix))

    return '\n'.join(lines)
