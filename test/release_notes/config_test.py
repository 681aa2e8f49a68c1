# SPDX-FileCopyrightText: 2024 SAP SE or an SAP affiliate company and Gardener contributors
#
# SPDX-License-Identifier: Apache-2.0

import pytest

import release_notes.config as rncfg
import release_notes.model as rnm


def test_defaults():
    cfg = rncfg.cfg_from_dict(None)

    assert cfg.default_branch == 'master'
    assert cfg.labels.action_required == 'release-note-action-required'
    assert cfg.labels.normal == 'release-note'
    assert cfg.changelog_path('CHANGELOG-1.3.md') == 'CHANGELOG-1.3.md'


def test_read_cfg(tmpdir):
    cfg_file = tmpdir.join('release-notes.yaml')
    cfg_file.write('\n'.join((
        'repo_url: github.com/example/project',
        'default_branch: main',
        'last_releases:',
        '  main: v1.3.0-beta.2',
        '  release-1.2: v1.2.4',
        'labels:',
        '  normal: note',
        'changelog_dir: CHANGELOG/',
    )))

    cfg = rncfg.read_cfg(str(cfg_file))

    assert cfg.repo_url == 'github.com/example/project'
    assert cfg.labels.normal == 'note'
    assert cfg.labels.action_required == 'release-note-action-required'
    assert cfg.changelog_path('CHANGELOG-1.3.md') == 'CHANGELOG/CHANGELOG-1.3.md'

    last_releases = cfg.last_release_table()
    assert last_releases.default_branch == 'main'
    assert last_releases.last_release('release-1.2') == 'v1.2.4'
    assert last_releases.last_release('release-1.1') == 'v1.3.0-beta.2'


def test_read_cfg_without_cfg_file(tmpdir, monkeypatch):
    monkeypatch.chdir(tmpdir)

    assert rncfg.read_cfg() == rncfg.ReleaseNotesCfg()


@pytest.mark.parametrize('contents', (
    'unknown_attribute: 42',
    'last_releases: [v1.2.0]',
    '- not a mapping',
    'repo_url: [unbalanced',
))
def test_read_cfg_invalid(tmpdir, contents):
    cfg_file = tmpdir.join('release-notes.yaml')
    cfg_file.write(contents)

    with pytest.raises(rnm.ConfigError):
        rncfg.read_cfg(str(cfg_file))


def test_read_cfg_missing_file(tmpdir):
    with pytest.raises(rnm.ConfigError):
        rncfg.read_cfg(str(tmpdir.join('absent.yaml')))
