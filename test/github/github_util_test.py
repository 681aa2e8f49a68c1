# SPDX-FileCopyrightText: 2024 SAP SE or an SAP affiliate company and Gardener contributors
#
# SPDX-License-Identifier: Apache-2.0

import unittest.mock

import github3.exceptions
import pytest

import github
import github.util as ghu


@pytest.fixture
def github_api():
    return unittest.mock.MagicMock()


@pytest.fixture
def helper(github_api):
    return ghu.GitHubRepositoryHelper(
        owner='example',
        name='project',
        github_api=github_api,
    )


def not_found():
    return github3.exceptions.NotFoundError(unittest.mock.MagicMock(status_code=404))


def test_ctor(github_api):
    with pytest.raises(ValueError):
        ghu.GitHubRepositoryHelper(owner='example', name='project', github_api=None)

    ghu.GitHubRepositoryHelper(owner='example', name='project', github_api=github_api)
    github_api.repository.assert_called_once_with(owner='example', repository='project')


def test_search_pull_requests_with_label(helper, github_api):
    github_api._json.return_value = {'total_count': 1, 'items': [{'number': 42}]}

    page = helper.search_pull_requests_with_label(label='release-note', page=2, per_page=50)

    assert page == {'total_count': 1, 'items': [{'number': 42}]}
    github_api._build_url.assert_called_once_with('search', 'issues')
    github_api._get.assert_called_once_with(
        github_api._build_url.return_value,
        params={
            'q': 'repo:example/project is:pr is:merged label:"release-note"',
            'page': 2,
            'per_page': 50,
        },
    )
    github_api._json.assert_called_once_with(github_api._get.return_value, 200)


def test_pull_request_details(helper):
    pull_request = helper.repository.pull_request.return_value
    pull_request.number = 42
    pull_request.title = 'Fix crash on startup'
    pull_request.body = None
    pull_request.user.login = 'alice'

    assert helper.pull_request_details(42) == {
        'number': 42,
        'title': 'Fix crash on startup',
        'body': '',
        'user': {'login': 'alice'},
    }


def test_pull_request_details_not_retrieved(helper):
    helper.repository.pull_request.side_effect = not_found()
    assert helper.pull_request_details(42) == {}

    helper.repository.pull_request.side_effect = None
    helper.repository.pull_request.return_value = None
    assert helper.pull_request_details(42) == {}


def test_raw_file_contents(helper):
    helper.repository.file_contents.return_value.decoded = b'## Highlights\n'

    assert helper.raw_file_contents('draft.md') == '## Highlights\n'
    helper.repository.file_contents.assert_called_once_with('draft.md', ref='master')

    helper.repository.file_contents.side_effect = not_found()
    assert helper.raw_file_contents('absent.md', branch='release-1.3') is None


def test_pending_pull_requests(helper, github_api):
    def search_result(number):
        result = unittest.mock.MagicMock()
        result.issue.number = number
        result.issue.title = f'title {number}'
        result.issue.user.login = 'bob'
        return result

    github_api.search_issues.return_value = iter((search_result(9), search_result(3)))

    pending = helper.pending_pull_requests(branch='release-1.3', label='cherrypick-candidate')

    assert [pr['number'] for pr in pending] == [3, 9]
    github_api.search_issues.assert_called_once_with(
        'repo:example/project is:pr is:open base:release-1.3 label:"cherrypick-candidate"'
    )


@pytest.mark.parametrize('repo_url,expected', (
    ('github.com/example/project', ('github.com', 'example', 'project')),
    ('https://github.com/example/project.git', ('github.com', 'example', 'project')),
    ('github.example.org/example/project/', ('github.example.org', 'example', 'project')),
))
def test_host_org_and_repo(repo_url, expected):
    assert github.host_org_and_repo(repo_url) == expected


@pytest.mark.parametrize('repo_url', (
    'github.com/only-org',
    'github.com/example/project/extra',
))
def test_host_org_and_repo_malformed(repo_url):
    with pytest.raises(ValueError):
        github.host_org_and_repo(repo_url)


def test_github_api(monkeypatch):
    monkeypatch.delenv('GITHUB_SERVER_URL', raising=False)

    assert type(github.github_api('github.com/example/project', token='t')) is github3.GitHub

    enterprise_api = github.github_api('github.example.org/example/project', token='t')
    assert isinstance(enterprise_api, github3.GitHubEnterprise)
    assert enterprise_api.url == 'https://github.example.org'
    assert enterprise_api.session.base_url == 'https://github.example.org/api/v3'


def test_pull_request_and_user_urls():
    repo_url = 'https://github.example.org/example/project.git'

    assert github.pull_request_url(repo_url, 42) == (
        'https://github.example.org/example/project/pull/42'
    )
    assert github.user_profile_url(repo_url, 'alice') == 'https://github.example.org/alice'
