# SPDX-FileCopyrightText: 2024 SAP SE or an SAP affiliate company and Gardener contributors
#
# SPDX-License-Identifier: Apache-2.0

import logging
import re

import gitutil
import release_notes.model as rnm

logger = logging.getLogger(__name__)


'''
matches subjects of merge-commits created by GitHub, e.g.:

Merge pull request #123 from user/branch
'''
_merge_pull_request_re = re.compile(r'Merge pull request #\d+')

'''
matches subjects of merge-commits of automated cherry-picks, which carry the numbers of all
cherry-picked (upstream) pull-requests, e.g.:

Merge pull request #99 from user/automated-cherry-pick-of-#12-#34-#56-upstream-release-1.3
'''
_cherry_pick_re = re.compile(r'automated-cherry-pick-of-(?:#\d+-)+')
_pr_number_re = re.compile(r'#(\d+)')

# position of `#<number>` in "Merge pull request #<number> from ..."
_MERGE_SUBJECT_PR_TOKEN_IDX = 3


def pr_refs_from_subject(subject: str) -> tuple[rnm.PullRequestRef, ...]:
    '''
    returns the pull-requests referenced by the given merge-commit-subject.

    For merges of automated cherry-picks, all cherry-picked pull-requests are returned (but not
    the cherry-pick-pull-request itself). For other pull-request-merges, exactly one pull-request
    is returned. Subjects of other commits yield an empty tuple.
    '''
    if (cherry_pick := _cherry_pick_re.search(subject)):
        return tuple(
            rnm.PullRequestRef(number=int(number), source_merge_subject=subject)
            for number in _pr_number_re.findall(cherry_pick.group())
        )

    if not _merge_pull_request_re.search(subject):
        return ()

    tokens = subject.split()
    if len(tokens) <= _MERGE_SUBJECT_PR_TOKEN_IDX:
        return ()

    if not (number := _pr_number_re.fullmatch(tokens[_MERGE_SUBJECT_PR_TOKEN_IDX])):
        logger.debug(f'unexpected merge-commit subject: {subject}')
        return ()

    return (rnm.PullRequestRef(number=int(number.group(1)), source_merge_subject=subject),)


def pr_refs_from_subjects(subjects) -> set[rnm.PullRequestRef]:
    pr_refs = set()
    for subject in subjects:
        pr_refs.update(pr_refs_from_subject(subject))

    return pr_refs


def scan_merge_commits(
    release_range: rnm.ReleaseRange,
    git_helper: gitutil.GitHelper,
) -> set[rnm.PullRequestRef]:
    subjects = git_helper.merge_commit_subjects(str(release_range))
    logger.info(f'found {len(subjects)} merge-commits in range {release_range}')

    pr_refs = pr_refs_from_subjects(subjects)
    logger.info(f'merged pull-requests in range {release_range}: {len(pr_refs)}')
    logger.debug(', '.join(f'#{ref.number}' for ref in sorted(pr_refs, key=lambda r: r.number)))

    return pr_refs
