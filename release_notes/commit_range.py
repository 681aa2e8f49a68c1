# SPDX-FileCopyrightText: 2024 SAP SE or an SAP affiliate company and Gardener contributors
#
# SPDX-License-Identifier: Apache-2.0

import logging

import gitutil
import release_notes.model as rnm
import version

logger = logging.getLogger(__name__)


def branch_head_ref(
    branch: str,
    git_helper: gitutil.GitHelper,
) -> str:
    '''
    returns a human-readable reference to the head of the remote-tracking branch for the given
    branch-name: the tag pointing to the head-commit (if any), the output of `git describe`
    otherwise, falling back to the commit-digest.
    '''
    remote_ref = git_helper.remote_branch_ref(branch)
    if not (branch_head := git_helper.resolve_ref(remote_ref)):
        raise rnm.InvalidRangeError(f'could not determine branch head of {branch=} ({remote_ref})')

    if (tag := git_helper.tag_at(branch_head)):
        return tag

    # better readable range-end by describing head commit
    if (described := git_helper.describe(branch_head.hexsha)):
        return described

    return branch_head.hexsha


def resolve_range(
    user_range: str | None,
    branch: str,
    last_releases: rnm.LastReleaseTable,
    git_helper: gitutil.GitHelper,
) -> rnm.ReleaseRange:
    '''
    determines the commit-range to collect release-notes for.

    `user_range` may be either of:

    - a range of two version-tags (`v1.2.0..v1.2.1`), which is used as is
    - a single tag (`v1.2.1`), which is used as range-end
    - None, in which case the head of `branch` is used as range-end

    In the latter two cases, the range-start is looked up from `last_releases`.

    raises `RangeResolutionError` if no range-start can be determined, and `InvalidRangeError` if
    the resulting range is not valid w.r.t. the repository's history.
    '''
    if user_range and (match := version.version_range_re.fullmatch(user_range.strip())):
        start_tag = match.group('start')
        end_ref = match.group('end')
        logger.info(f'using explicitly passed range {start_tag}..{end_ref}')
    else:
        end_ref = user_range.strip() if user_range else None

        if not (start_tag := last_releases.last_release(branch)):
            raise rnm.RangeResolutionError(
                f'unable to determine last release for {branch=} (tried: '
                f'{", ".join(last_releases.candidate_branches(branch))})'
            )

        if not end_ref:
            end_ref = branch_head_ref(branch=branch, git_helper=git_helper)

    release_range = rnm.ReleaseRange(
        start_tag=start_tag,
        end_ref=end_ref,
        branch=branch,
    )

    _warn_if_descending(release_range)

    if not git_helper.range_exists(str(release_range)):
        raise rnm.InvalidRangeError(f'invalid range: {release_range}')

    if not git_helper.is_ancestor(release_range.start_tag, release_range.end_ref):
        raise rnm.InvalidRangeError(
            f'{release_range.start_tag} is not an ancestor of {release_range.end_ref}'
        )

    logger.info(f'collecting release-notes for range {release_range}')
    return release_range


def _warn_if_descending(release_range: rnm.ReleaseRange):
    start = version.parse_to_semver(release_range.start_tag, invalid_semver_ok=True)
    end = version.parse_to_semver(release_range.end_ref, invalid_semver_ok=True)

    if start and end and end < start:
        logger.warning(f'{release_range.end_ref} is a predecessor of {release_range.start_tag}')
