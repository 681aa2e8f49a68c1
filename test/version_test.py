# SPDX-FileCopyrightText: 2024 SAP SE or an SAP affiliate company and Gardener contributors
#
# SPDX-License-Identifier: Apache-2.0

import pytest

import version


def test_parse_to_semver():
    assert str(version.parse_to_semver('v1.2.3')) == '1.2.3'
    assert str(version.parse_to_semver('1.2')) == '1.2.0'
    assert str(version.parse_to_semver('v1.3.0-beta.1')) == '1.3.0-beta.1'

    assert version.parse_to_semver('abcdef', invalid_semver_ok=True) is None
    with pytest.raises(ValueError):
        version.parse_to_semver('abcdef')


@pytest.mark.parametrize('tag,expected', (
    ('v1.2.3', True),
    ('1.2.3', True),
    ('v1.3.0-alpha', True),
    ('v1.3.0-beta.2', True),
    ('v1.3.0-rc.1', True),
    ('v1.3', False),
    ('v1.3.0-foo.1', False),
    ('master', False),
))
def test_is_version_tag(tag, expected):
    assert version.is_version_tag(tag) is expected


def test_version_range_re():
    match = version.version_range_re.fullmatch('v1.2.0-beta.1..v1.2.0-rc.0')
    assert match.group('start') == 'v1.2.0-beta.1'
    assert match.group('end') == 'v1.2.0-rc.0'

    assert not version.version_range_re.fullmatch('v1.2.0..HEAD')
    assert not version.version_range_re.fullmatch('v1.2.0')


def test_is_dotzero():
    assert version.is_dotzero('v1.3.0')
    assert version.is_dotzero('2.0.0')

    assert not version.is_dotzero('v1.3.0-beta.1')
    assert not version.is_dotzero('v1.3.1')
    assert not version.is_dotzero('v1.3.10')


def test_major_minor_prefix():
    assert version.major_minor('v1.3.0-beta.2') == (1, 3)
    assert version.major_minor_prefix('v1.3.0-beta.2') == 'v1.3'
    assert version.major_minor_prefix('1.3.4') == '1.3'

    assert version.major_minor('master') is None
    assert version.major_minor_prefix('master') is None


def test_parent_branch():
    assert version.parent_branch('release-1.3.1') == 'release-1.3'
    assert version.parent_branch('release-1.3') == 'release-1'
    assert version.parent_branch('master') is None
