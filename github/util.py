# SPDX-FileCopyrightText: 2024 SAP SE or an SAP affiliate company and Gardener contributors
#
# SPDX-License-Identifier: Apache-2.0


import logging

from github3.exceptions import NotFoundError
from github3.github import GitHub

logger = logging.getLogger(__name__)


class RepositoryHelperBase:
    def __init__(
        self,
        owner: str,
        name: str,
        github_api: GitHub=None,
        default_branch: str='master',
    ):
        '''
        Args:
            owner (str):    repository owner (also called organisation in GitHub)
            name (str):     repository name
            default_branch (str): branch to use for operations when not specified
            github_api (GitHub): github api to use
        '''
        if not github_api:
            raise ValueError('must pass github_api')

        self.github = github_api

        self.repository = self._create_repository(
            owner=owner,
            name=name
        )
        self.owner = owner
        self.repository_name = name

        self.default_branch = default_branch

    def _create_repository(self, owner: str, name: str):
        try:
            return self.github.repository(
                owner=owner,
                repository=name,
            )
        except NotFoundError as nfe:
            raise RuntimeError(
                f'failed to retrieve repository {owner}/{name}',
                nfe,
            )


class GitHubRepositoryHelper(RepositoryHelperBase):
    def search_pull_requests_with_label(
        self,
        label: str,
        page: int=1,
        per_page: int=100,
    ) -> dict:
        '''
        returns one page of merged pull-requests bearing the given label, in the format of
        GitHub's search-API (`{'total_count': int, 'items': [{'number': int, ...}, ...]}`).

        Pagination is deliberately left to the caller, so that failures of single pages can be
        told apart from empty results.
        '''
        query = f'repo:{self.owner}/{self.repository_name} is:pr is:merged label:"{label}"'
        url = self.github._build_url('search', 'issues')
        response = self.github._get(
            url,
            params={
                'q': query,
                'page': page,
                'per_page': per_page,
            },
        )
        return self.github._json(response, 200)

    def pull_request_details(self, number: int) -> dict:
        '''
        returns `{'number': int, 'title': str, 'body': str, 'user': {'login': str}}` for the
        pull-request of the given number. `body` is empty if the pull-request has no description.
        An empty dict is returned if the pull-request could not be retrieved (not found, or empty
        response, e.g. because of rate-limiting).
        '''
        try:
            pull_request = self.repository.pull_request(number)
        except NotFoundError:
            logger.warning(f'pull-request #{number} not found')
            return {}

        if not pull_request:
            return {}

        return {
            'number': pull_request.number,
            'title': pull_request.title or '',
            'body': pull_request.body or '',
            'user': {'login': pull_request.user.login if pull_request.user else ''},
        }

    def raw_file_contents(self, path: str, branch: str=None) -> str | None:
        '''
        returns the (utf-8-decoded) contents of the file at `path` on the given branch, or None
        if it does not exist
        '''
        branch = branch or self.default_branch
        try:
            contents = self.repository.file_contents(path, ref=branch)
        except NotFoundError:
            logger.info(f'{path=} not found on {branch=}')
            return None

        return contents.decoded.decode('utf-8')

    def pending_pull_requests(self, branch: str, label: str) -> list[dict]:
        '''
        returns open pull-requests against the given branch that bear the given label, as
        `{'number': int, 'title': str, 'user': {'login': str}}`, ordered by number
        '''
        query = (
            f'repo:{self.owner}/{self.repository_name} is:pr is:open '
            f'base:{branch} label:"{label}"'
        )
        pending = []
        for result in self.github.search_issues(query):
            issue = result.issue
            pending.append({
                'number': issue.number,
                'title': issue.title,
                'user': {'login': issue.user.login},
            })

        return sorted(pending, key=lambda pr: pr['number'])
