# SPDX-FileCopyrightText: 2024 SAP SE or an SAP affiliate company and Gardener contributors
#
# SPDX-License-Identifier: Apache-2.0

import os

import github3


def host_org_and_repo(
    repo_url: str=None,
) -> tuple[str, str, str]:
    '''
    returns a three-tuple of `host`, `org`, `repo`. If repo_url is passed, it is assumed point to
    a github-hosted repository (it may or may not have a schema). Otherwise, fallback to
    environment variables GITHUB_SERVER_URL, GITHUB_REPOSITORY, as set for GitHub-Actions-runs
    is done.
    '''
    if repo_url:
        if '://' in repo_url:
            repo_url = repo_url.split('://')[-1]
        parts = repo_url.strip('/').removesuffix('.git').split('/')
        if len(parts) != 3:
            raise ValueError(f'expected repo-url of form {{host}}/{{org}}/{{repo}}: {repo_url}')
        host, org, repo = parts
    else:
        host = os.environ['GITHUB_SERVER_URL'].removeprefix('https://')
        org, repo = os.environ['GITHUB_REPOSITORY'].split('/')

    return host, org, repo


def pull_request_url(repo_url: str, number: int) -> str:
    host, org, repo = host_org_and_repo(repo_url)
    return f'https://{host}/{org}/{repo}/pull/{number}'


def user_profile_url(repo_url: str, login: str) -> str:
    host, _, _ = host_org_and_repo(repo_url)
    return f'https://{host}/{login}'


def github_api(
    repo_url: str=None,
    token: str=None,
) -> github3.GitHub:
    '''
    returns an initialised github-api instance. If no token is passed, `GITHUB_TOKEN` is honoured
    (anonymous access is used if absent, which is subject to very strict rate-limits).
    '''
    host, _, _ = host_org_and_repo(
        repo_url=repo_url,
    )

    token = token or os.environ.get('GITHUB_TOKEN')

    if host == 'github.com':
        return github3.GitHub(token=token)

    server_url = os.environ.get('GITHUB_SERVER_URL', f'https://{host}')
    return github3.GitHubEnterprise(
        url=server_url,
        token=token,
    )
