# SPDX-FileCopyrightText: 2024 SAP SE or an SAP affiliate company and Gardener contributors
#
# SPDX-License-Identifier: Apache-2.0


import contextlib
import dataclasses
import enum
import logging
import os
import urllib.parse

import git
import git.exc
import git.remote

from ci.util import random_str

logger = logging.getLogger(__name__)


class AuthType(enum.StrEnum):
    '''
    HTTP_TOKEN: API-Token as understood by GitHub
    PRESET: assume existing .git/config contains needed cfg
    '''
    HTTP_TOKEN = 'http-token'
    PRESET = 'preset'


@dataclasses.dataclass(kw_only=True)
class GitCfg:
    '''
    Configuration for interacting w/ a git-repository's remote. If no values are set, `GitHelper`
    will assume the underlying repository's `.git/config` was already adequately prepared (i.e.
    a remote named `origin` exists and needs no extra credentials).

    repo_url: if set, use as remote. Note: auth_type needs to match url-schema
    auth: (user, token)-tuple; if set, use for interactions w/ remote
    auth_type: type of auth
    '''
    repo_url: str | None = None
    auth: tuple[str, str] | None = None
    auth_type: AuthType = AuthType.PRESET


class GitHelper:
    '''
    read-only access to a local git-repository, as needed for collecting release-notes
    '''
    def __init__(
        self,
        repo,
        git_cfg: GitCfg | None=None,
        remote_name: str='origin',
    ):
        if repo is None:
            raise ValueError(repo)
        if isinstance(repo, str):
            repo = git.Repo(repo)
        if not isinstance(repo, git.Repo):
            raise ValueError(repo)

        self.repo = repo
        self.git_cfg = git_cfg or GitCfg()
        self.remote_name = remote_name

    @contextlib.contextmanager
    def _authenticated_remote(self):
        auth_type = self.git_cfg.auth_type

        if auth_type is AuthType.PRESET:
            yield os.environ, self.repo.remote(self.remote_name)
            return
        elif auth_type is AuthType.HTTP_TOKEN:
            url = _url_with_credentials(git_cfg=self.git_cfg)
        else:
            raise NotImplementedError(auth_type)

        remote = git.remote.Remote.add(
            repo=self.repo,
            name=random_str(),
            url=url,
        )
        logger.debug(f'authenticated {remote.name=} using {auth_type=}')

        try:
            yield os.environ.copy(), remote
        finally:
            self.repo.delete_remote(remote)

    def fetch_tags(self):
        '''
        fetches tags and branches from remote. Branches are always stored as remote-tracking refs
        of `remote_name` (also if a temporary, authenticated remote is used for fetching)
        '''
        refspec = f'+refs/heads/*:refs/remotes/{self.remote_name}/*'
        with self._authenticated_remote() as (cmd_env, remote):
            with remote.repo.git.custom_environment(**cmd_env):
                remote.fetch(refspec=refspec, tags=True, recurse_submodules='no')

    def remote_branch_ref(self, branch: str) -> str:
        return f'refs/remotes/{self.remote_name}/{branch}'

    def resolve_ref(self, ref: str) -> git.Commit | None:
        # let git parse the ref, so `git describe`-output is understood as well
        try:
            hexsha = self.repo.git.rev_parse('--verify', '--quiet', f'{ref}^{{commit}}')
            return self.repo.commit(hexsha)
        except (git.exc.BadName, git.exc.GitCommandError, ValueError) as e:
            logger.debug(f'failed to resolve {ref=}: {e}')
            return None

    def tag_at(self, commit: git.Commit) -> str | None:
        '''
        returns the name of a tag pointing exactly to the given commit (if any)
        '''
        for tag in sorted(self.repo.tags, key=lambda t: t.name):
            if tag.commit == commit:
                return tag.name
        return None

    def describe(self, ref: str) -> str | None:
        try:
            return self.repo.git.describe('--tags', ref)
        except git.exc.GitCommandError as e:
            logger.debug(f'failed to describe {ref=}: {e}')
            return None

    def range_exists(self, commit_range: str) -> bool:
        try:
            self.repo.git.rev_list('--max-count=1', commit_range)
            return True
        except git.exc.GitCommandError as e:
            logger.debug(f'{commit_range=} could not be resolved: {e}')
            return False

    def is_ancestor(self, ancestor_ref: str, ref: str) -> bool:
        if not (ancestor := self.resolve_ref(ancestor_ref)):
            return False
        if not (commit := self.resolve_ref(ref)):
            return False
        return self.repo.is_ancestor(ancestor, commit)

    def merge_commit_subjects(self, commit_range: str) -> list[str]:
        '''
        returns the subjects of all merge-commits in the given range, newest first (i.e. in
        the stable order emitted by `git log`)
        '''
        output = self.repo.git.log('--merges', '--format=%s', commit_range)
        return [line for line in output.splitlines() if line.strip()]

    def file_contents(self, path: str, ref: str) -> str | None:
        '''
        returns the contents of the file at `path` as of `ref`, or None if absent
        '''
        try:
            return self.repo.git.show(f'{ref}:{path}')
        except git.exc.GitCommandError as e:
            logger.debug(f'{path=} not present at {ref=}: {e}')
            return None


def _url_with_credentials(
    git_cfg: GitCfg,
):
    if git_cfg.auth_type is AuthType.PRESET:
        return git_cfg.repo_url
    elif git_cfg.auth_type is AuthType.HTTP_TOKEN:
        pass # ok to proceed
    else:
        raise ValueError(f'not implemented: {git_cfg.auth_type=}')

    if not git_cfg.repo_url:
        raise ValueError('repo-url must not be None')

    base_url = urllib.parse.urlparse(git_cfg.repo_url)
    scheme = base_url.scheme or 'https'
    netloc = base_url.netloc
    path = base_url.path
    if not netloc:
        # repo-url w/o scheme (e.g. github.com/org/repo)
        netloc, _, path = base_url.path.partition('/')
        path = f'/{path}'

    user, secret = git_cfg.auth
    credentials_str = f'{user}:{secret}'

    return f'{scheme}://{credentials_str}@{netloc}{path}'
