# SPDX-FileCopyrightText: 2024 SAP SE or an SAP affiliate company and Gardener contributors
#
# SPDX-License-Identifier: Apache-2.0

'''
Assembly of release-notes documents.

Two shapes of documents are distinguished:

- bootstrap: for the first release of a new major- or minor-line (`vX.Y.0`). The changelog is
  either a pre-authored draft, or a generic template w/ placeholders, followed by a list of all
  pre-releases of the release-line
- delta: for all other releases. The changelog consists of the release-notes of all pull-requests
  merged since the last release
'''

import collections.abc
import logging

import release_notes.model as rnm
import release_notes.render as rnr
import version

logger = logging.getLogger(__name__)

DraftFetcher = collections.abc.Callable[[str], str | None]
ChangelogReader = collections.abc.Callable[[str], str | None]

GENERIC_TEMPLATE = '''\
## Major Themes

* TBD

## Other notable improvements

* TBD

## Known Issues

* TBD

## Provider-specific Notes

* TBD
'''

NO_NOTABLE_CHANGES = '**No notable changes for this release**'


def is_major_bootstrap(release_tag: str, force_full: bool=False) -> bool:
    return force_full or version.is_dotzero(release_tag)


def changelog_file_name(release_tag: str) -> str:
    if not (parsed := version.major_minor(release_tag)):
        raise rnm.ChangelogTargetError(
            f'cannot determine changelog-file: {release_tag=} is not a version-tag'
        )
    major, minor = parsed
    return f'CHANGELOG-{major}.{minor}.md'


def draft_path(release_tag: str, path_template: str) -> str:
    '''
    returns the path to the release-notes-draft for the release-line of the given tag, by
    formatting the given template (supported placeholders: `major`, `minor`)
    '''
    if not (parsed := version.major_minor(release_tag)):
        raise rnm.ChangelogTargetError(
            f'cannot determine release-notes-draft: {release_tag=} is not a version-tag'
        )
    major, minor = parsed
    return path_template.format(major=major, minor=minor)


def previous_releases_section(
    release_tag: str,
    changelog: str | None,
) -> str:
    '''
    returns a markdown-section listing previous releases of the release-line of the given tag
    (typically alpha-, beta- and rc-releases), as listed in the table-of-contents of the given
    changelog. Returns an empty str if there are none.
    '''
    if not changelog:
        return ''

    prefix = version.major_minor_prefix(release_tag)
    if not prefix:
        raise rnm.ChangelogTargetError(f'{release_tag=} is not a version-tag')

    own_entry = f'- [{release_tag}]'
    entries = [
        line.rstrip() for line in changelog.splitlines()
        if line.startswith(f'- [{prefix}.') and not line.startswith(own_entry)
    ]
    if not entries:
        return ''

    return '\n'.join((
        f'### Previous Releases Included in {release_tag}',
        '',
        *entries,
    ))


def bootstrap_changelog(
    release_tag: str,
    draft_fetcher: DraftFetcher,
    changelog_reader: ChangelogReader,
) -> str:
    if (draft := draft_fetcher(release_tag)) and draft.strip():
        logger.info(f'using release-notes-draft for {release_tag}')
        body = draft.strip('\n')
    else:
        logger.info(f'no release-notes-draft found for {release_tag} - using generic template')
        body = GENERIC_TEMPLATE.rstrip('\n')

    changelog = changelog_reader(changelog_file_name(release_tag))
    if (previous_releases := previous_releases_section(release_tag, changelog)):
        body = f'{body}\n\n{previous_releases}'

    return body


def delta_changelog(
    start_tag: str,
    action_notes: collections.abc.Sequence[rnm.ClassifiedNote],
    normal_notes: collections.abc.Sequence[rnm.ClassifiedNote],
) -> str:
    lines = [f'## Changelog since {start_tag}']

    if action_notes:
        lines.extend(('', '### Action Required', '', rnr.join_notes(action_notes)))
    if normal_notes:
        lines.extend(('', '### Other notable changes', '', rnr.join_notes(normal_notes)))
    if not action_notes and not normal_notes:
        lines.extend(('', NO_NOTABLE_CHANGES))

    return '\n'.join(lines)


def pending_pull_requests_section(
    branch: str,
    pending: collections.abc.Sequence[dict],
) -> str:
    lines = [f'## PENDING PRs on the {branch} branch', '']
    if not pending:
        lines.append('* None')
    for pr in pending:
        lines.append(f'* {pr["title"].strip()} (#{pr["number"]}, @{pr["user"]["login"]})')

    return '\n'.join(lines)


def ci_state_section(branch: str, ci_state: str) -> str:
    return '\n'.join((
        f'## State of {branch} branch',
        '',
        ci_state.strip('\n'),
    ))


def assemble(
    release_tag: str,
    start_tag: str,
    is_major_bootstrap: bool,
    notes_by_category: collections.abc.Mapping[
        rnm.NoteCategory, collections.abc.Sequence[rnm.ClassifiedNote]
    ],
    draft_fetcher: DraftFetcher,
    changelog_reader: ChangelogReader,
    downloads: str | None=None,
    pending_section: str | None=None,
    ci_section: str | None=None,
) -> rnm.ReleaseDocument:
    '''
    assembles the release-notes document. `downloads`, `pending_section` and `ci_section` are
    optional pre-rendered markdown-sections, which are included as given.
    '''
    document = rnm.ReleaseDocument(release_tag=release_tag)
    document.append(f'# {release_tag}', name='title')
    document.append(downloads, name='downloads')

    if is_major_bootstrap:
        changelog = bootstrap_changelog(
            release_tag=release_tag,
            draft_fetcher=draft_fetcher,
            changelog_reader=changelog_reader,
        )
    else:
        changelog = delta_changelog(
            start_tag=start_tag,
            action_notes=notes_by_category.get(rnm.NoteCategory.ACTION_REQUIRED, ()),
            normal_notes=notes_by_category.get(rnm.NoteCategory.NORMAL, ()),
        )
    document.append(changelog, name='changelog')

    document.append(pending_section, name='pending')
    document.append(ci_section, name='ci')

    return document
