# SPDX-FileCopyrightText: 2024 SAP SE or an SAP affiliate company and Gardener contributors
#
# SPDX-License-Identifier: Apache-2.0

import os

import git
import pytest

import gitutil


class RepoBuilder:
    '''
    creates (merge-)commits, tags and remote-tracking-refs in a local git-repository
    '''
    def __init__(self, repo: git.Repo):
        self.repo = repo

    def commit(self, message: str, files: dict[str, str]=None) -> git.Commit:
        for path, contents in (files or {}).items():
            with open(os.path.join(self.repo.working_tree_dir, path), 'w') as f:
                f.write(contents)
            self.repo.index.add([path])

        return self.repo.index.commit(message)

    def merge(self, subject: str) -> git.Commit:
        head = self.repo.head.commit
        change = self.repo.index.commit(
            f'change for: {subject}',
            parent_commits=[head],
            head=False,
        )
        return self.repo.index.commit(
            subject,
            parent_commits=[head, change],
        )

    def tag(self, name: str, commit: git.Commit=None):
        return self.repo.create_tag(name, ref=commit or self.repo.head.commit)

    def remote_branch(self, branch: str, commit: git.Commit=None):
        commit = commit or self.repo.head.commit
        self.repo.git.update_ref(f'refs/remotes/origin/{branch}', commit.hexsha)


@pytest.fixture
def git_repo(tmpdir):
    repo = git.Repo.init(tmpdir)
    with repo.config_writer() as cfg_writer:
        cfg_writer.set_value('user', 'name', 'test')
        cfg_writer.set_value('user', 'email', 'test@example.com')

    repo.index.commit('first commit')

    return repo


@pytest.fixture
def repo_builder(git_repo):
    return RepoBuilder(git_repo)


@pytest.fixture
def git_helper(git_repo):
    return gitutil.GitHelper(repo=git_repo)
