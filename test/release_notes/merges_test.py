# SPDX-FileCopyrightText: 2024 SAP SE or an SAP affiliate company and Gardener contributors
#
# SPDX-License-Identifier: Apache-2.0

import release_notes.merges as rnme
import release_notes.model as rnm


def numbers(refs) -> list[int]:
    return sorted(ref.number for ref in refs)


def test_ordinary_merge_subject():
    subject = 'Merge pull request #123 from alice/fix-crash'

    refs = rnme.pr_refs_from_subject(subject)

    assert refs == (rnm.PullRequestRef(number=123),)
    assert refs[0].source_merge_subject == subject


def test_cherry_pick_subject_expands_to_all_prs():
    subject = (
        'Merge pull request #99 from bob/automated-cherry-pick-of-#12-#34-#56-upstream-release-1.3'
    )

    assert numbers(rnme.pr_refs_from_subject(subject)) == [12, 34, 56]


def test_cherry_pick_subject_with_single_pr():
    subject = 'Merge pull request #99 from bob/automated-cherry-pick-of-#12-upstream-release-1.3'

    assert numbers(rnme.pr_refs_from_subject(subject)) == [12]


def test_unrelated_subjects():
    assert rnme.pr_refs_from_subject('Merge branch \'master\' into feature') == ()
    assert rnme.pr_refs_from_subject('Fix typo (#17)') == ()
    assert rnme.pr_refs_from_subject('Merge pull request') == ()


def test_duplicates_collapse():
    refs = rnme.pr_refs_from_subjects((
        'Merge pull request #12 from alice/feature',
        'Merge pull request #99 from bob/automated-cherry-pick-of-#12-#34-upstream-release-1.3',
        'Merge pull request #34 from carol/other-feature',
    ))

    assert numbers(refs) == [12, 34]


def test_scan_merge_commits(git_helper, repo_builder):
    repo_builder.tag('v1.2.0')
    repo_builder.merge('Merge pull request #100 from alice/fix-crash')
    repo_builder.commit('Fix typo (#101)')
    repo_builder.merge(
        'Merge pull request #102 from bob/automated-cherry-pick-of-#7-#8-upstream-release-1.2'
    )
    repo_builder.tag('v1.2.1')
    repo_builder.merge('Merge pull request #103 from carol/after-release')

    refs = rnme.scan_merge_commits(
        release_range=rnm.ReleaseRange(start_tag='v1.2.0', end_ref='v1.2.1', branch='master'),
        git_helper=git_helper,
    )

    assert numbers(refs) == [7, 8, 100]
