# SPDX-FileCopyrightText: 2024 SAP SE or an SAP affiliate company and Gardener contributors
#
# SPDX-License-Identifier: Apache-2.0

import unittest.mock

import git.exc
import github3.exceptions
import pytest
import requests.exceptions

import ci.log
import release_notes.cli as rncli
import release_notes.model as rnm


@pytest.fixture(autouse=True)
def no_logging_cfg(monkeypatch):
    monkeypatch.setattr(ci.log, 'configure_default_logging', unittest.mock.MagicMock())


def exit_code(argv) -> int:
    with pytest.raises(SystemExit) as exc_info:
        rncli.main(argv)
    return exc_info.value.code


def test_parse_args():
    args = rncli.parse_args([
        'v1.2.0..v1.2.1',
        '--branch', 'release-1.2',
        '--release-tars', '/tmp/artefacts',
        '--preview',
    ])

    assert args.range == 'v1.2.0..v1.2.1'
    assert args.branch == 'release-1.2'
    assert args.artefacts_dir == '/tmp/artefacts'
    assert args.preview
    assert not args.full


def test_missing_repo_url(tmpdir, monkeypatch):
    monkeypatch.chdir(tmpdir)

    assert exit_code(['--repo-path', str(tmpdir)]) == rncli.EXIT_RANGE_ERROR


def test_not_a_git_repository(tmpdir, monkeypatch):
    monkeypatch.chdir(tmpdir)

    assert exit_code([
        '--repo-path', str(tmpdir),
        '--repo-url', 'github.com/example/project',
    ]) == rncli.EXIT_RANGE_ERROR


def test_malformed_repo_url(tmpdir, monkeypatch):
    monkeypatch.chdir(tmpdir)

    assert exit_code([
        '--repo-path', str(tmpdir),
        '--repo-url', 'github.com/only-org',
    ]) == rncli.EXIT_RANGE_ERROR


def test_inaccessible_repository(git_repo, tmpdir, monkeypatch):
    monkeypatch.chdir(tmpdir)
    monkeypatch.setattr(rncli.github, 'github_api', unittest.mock.MagicMock())
    monkeypatch.setattr(
        rncli.github.util,
        'GitHubRepositoryHelper',
        unittest.mock.MagicMock(side_effect=RuntimeError('failed to retrieve repository')),
    )

    assert exit_code([
        '--repo-path', git_repo.working_tree_dir,
        '--repo-url', 'github.com/example/project',
    ]) == rncli.EXIT_RANGE_ERROR


def test_ci_state_lookup_with_missing_command():
    ci_state_lookup = rncli.ci_state_lookup_from_command('no-such-ci-state-command')

    assert ci_state_lookup('master') is None


@pytest.mark.parametrize('error,expected_exit_code', (
    (rnm.RangeResolutionError('no last release'), rncli.EXIT_RANGE_ERROR),
    (rnm.InvalidRangeError('invalid range'), rncli.EXIT_RANGE_ERROR),
    (rnm.FetchError('empty body'), rncli.EXIT_FETCH_ERROR),
    (rnm.ChangelogTargetError('not a version-tag'), rncli.EXIT_ASSEMBLY_ERROR),
    (rnm.HtmlConversionError('pandoc not found'), rncli.EXIT_ASSEMBLY_ERROR),
    (
        github3.exceptions.ForbiddenError(unittest.mock.MagicMock(status_code=403)),
        rncli.EXIT_FETCH_ERROR,
    ),
    (requests.exceptions.ConnectionError('connection reset'), rncli.EXIT_FETCH_ERROR),
    (git.exc.GitCommandError('git fetch', 128), rncli.EXIT_FETCH_ERROR),
))
def test_exit_codes(monkeypatch, error, expected_exit_code):
    monkeypatch.setattr(rncli, 'run', unittest.mock.MagicMock(side_effect=error))

    assert exit_code([]) == expected_exit_code


def test_run(git_repo, tmpdir, monkeypatch, capsys):
    monkeypatch.chdir(tmpdir)
    monkeypatch.setattr(rncli.github, 'github_api', unittest.mock.MagicMock())
    monkeypatch.setattr(rncli.github.util, 'GitHubRepositoryHelper', unittest.mock.MagicMock())

    document = rnm.ReleaseDocument(release_tag='v1.2.1')
    document.append('# v1.2.1', name='title')
    generate_release_notes = unittest.mock.MagicMock(return_value=document)
    monkeypatch.setattr(rncli.rnp, 'generate_release_notes', generate_release_notes)

    markdown_file = str(tmpdir.join('notes.md'))

    assert exit_code([
        'v1.2.1',
        '--repo-path', git_repo.working_tree_dir,
        '--repo-url', 'github.com/example/project',
        '--markdown-file', markdown_file,
    ]) == 0

    assert capsys.readouterr().out.strip() == markdown_file
    with open(markdown_file) as f:
        assert f.read() == '# v1.2.1\n'

    kwargs = generate_release_notes.call_args.kwargs
    assert kwargs['branch'] == 'master'
    assert kwargs['user_range'] == 'v1.2.1'
    assert not kwargs['preview']
