# SPDX-FileCopyrightText: 2024 SAP SE or an SAP affiliate company and Gardener contributors
#
# SPDX-License-Identifier: Apache-2.0

import logging
import re

import semver

logger = logging.getLogger(__name__)

'''
matches release-tags as created on release-branches, e.g.:

v1.2.3
v1.2.3-beta.0
1.2.3-rc.1
v1.3.0-alpha
'''
_version_tag_pattern = r'v?\d+\.\d+\.\d+(?:-(?:alpha|beta|rc)(?:\.\d+)?)?'
version_tag_re = re.compile(_version_tag_pattern)
version_range_re = re.compile(
    rf'(?P<start>{_version_tag_pattern})\.\.(?P<end>{_version_tag_pattern})'
)
_dotzero_re = re.compile(r'v?\d+\.\d+\.0')
_major_minor_re = re.compile(r'v?(?P<major>\d+)\.(?P<minor>\d+)(?:\.\d+.*)?')


def parse_to_semver(
    version,
    invalid_semver_ok: bool=False,
) -> semver.VersionInfo | None:
    '''
    parses the given version into a semver.VersionInfo object.

    Different from strict semver, the given version is preprocessed, if required, to
    convert the version into a valid semver version, if possible:

    - strip away `v` prefix
    - append patch-level `.0` for two-digit versions
    '''
    if isinstance(version, semver.VersionInfo):
        return version
    if version is None:
        raise ValueError('version must not be None')

    version_str = str(version)
    semver_str = version_str.removeprefix('v')

    try:
        return semver.VersionInfo.parse(semver_str)
    except ValueError:
        pass # try extending `.0` as patch-level

    numeric, sep, suffix = semver_str.partition('-')
    if numeric.count('.') == 1:
        numeric += '.0'

    try:
        return semver.VersionInfo.parse(numeric + sep + suffix)
    except ValueError:
        if invalid_semver_ok:
            return None
        raise ValueError(f'not a valid (semver) version: `{version_str}`')


def is_version_tag(tag: str) -> bool:
    return bool(version_tag_re.fullmatch(tag))


def is_dotzero(tag: str) -> bool:
    '''
    returns whether the given tag denotes the first final release of a new major- or minor-line
    (e.g. `v1.3.0`, but not `v1.3.0-beta.1` or `v1.3.1`)
    '''
    return bool(_dotzero_re.fullmatch(tag))


def major_minor(tag: str) -> tuple[int, int] | None:
    if not (match := _major_minor_re.fullmatch(tag)):
        return None
    return int(match.group('major')), int(match.group('minor'))


def major_minor_prefix(tag: str) -> str | None:
    '''
    returns the release-line-prefix of the given tag, retaining a `v`-prefix, if present
    (e.g. `v1.3` for `v1.3.0-beta.2`)
    '''
    if not (parsed := major_minor(tag)):
        return None
    major, minor = parsed
    prefix = 'v' if tag.startswith('v') else ''
    return f'{prefix}{major}.{minor}'


def parent_branch(branch: str) -> str | None:
    '''
    strips the trailing version-component from the given branch-name, e.g.:

    release-1.3.1 -> release-1.3
    release-1.3   -> release-1
    master        -> None
    '''
    if not (match := re.fullmatch(r'(?P<parent>.*\d)\.\d+', branch)):
        return None
    return match.group('parent')
