# SPDX-FileCopyrightText: 2024 SAP SE or an SAP affiliate company and Gardener contributors
#
# SPDX-License-Identifier: Apache-2.0

import collections.abc
import logging
import re
import typing

import release_notes.model as rnm

logger = logging.getLogger(__name__)


class TrackerClient(typing.Protocol):
    def pull_request_details(self, number: int) -> dict:
        ...

    def raw_file_contents(self, path: str, branch: str=None) -> str | None:
        ...


r'''
This pattern matches the first code-block tagged as release-note, e.g.:

```release-note
{note_message}
```

Note: [^\S\n] is "all whitespaces except \n"

\x60 -> `
'''
_release_note_block_re = re.compile(
    pattern=(
        r'^[^\S\n]*\x60{3}[^\S\n]*release-note[^\S\n]*\n'
        r'(?P<note>.*?)'
        r'^[^\S\n]*\x60{3}'
    ),
    flags=re.DOTALL | re.MULTILINE,
)
_leading_bullet_re = re.compile(r'^\s*(?:[-*]\s+)*')

# placeholder as found in the pull-request-template
_PLACEHOLDER = 'none'


def extract_release_note(body: str | None) -> str | None:
    '''
    returns the contents of the first `release-note`-block found in the given pull-request-body
    w/ blank lines removed, and all but the first line indented (so they render as a nested list
    below the first line). Returns None if there is no such block, or if it is empty.
    '''
    if not body:
        return None

    if not (match := _release_note_block_re.search(body.replace('\r\n', '\n'))):
        return None

    lines = [line.rstrip() for line in match.group('note').split('\n') if line.strip()]
    if not lines:
        return None
    if len(lines) == 1 and lines[0].strip().lower() == _PLACEHOLDER:
        return None

    first, *continuation = lines
    return '\n'.join([first, *(f'  {line}' for line in continuation)])


def format_note(
    content: str,
    number: int,
    author: str,
) -> str:
    '''
    prefixes the first line of the given release-note w/ a (single) bullet-point, and appends
    the attribution-suffix to it
    '''
    first, _, continuation = content.partition('\n')
    first = _leading_bullet_re.sub('', first, count=1)

    note = f'* {first} (#{number}, @{author})'
    if continuation:
        note = f'{note}\n{continuation}'
    return note


def render_note(
    pr: rnm.PullRequestRef,
    tracker: TrackerClient,
) -> str:
    # every pull-request has a title; its absence indicates an empty response
    if not (raw := tracker.pull_request_details(pr.number)) or not raw.get('title'):
        raise rnm.FetchError(
            f'failed to retrieve details of pull-request #{pr.number} - most likely, GitHub '
            'rate-limits were exceeded (consider passing an auth-token, or retry later)'
        )
    details = rnm.PullRequestDetails.from_dict(raw)

    if not (content := extract_release_note(details.body)):
        logger.debug(f'#{pr.number} has no release-note-block - using title')
        content = details.title

    return format_note(
        content=content,
        number=details.number,
        author=details.author,
    )


def render_notes(
    prs: collections.abc.Iterable[rnm.PullRequestRef],
    category: rnm.NoteCategory,
    tracker: TrackerClient,
) -> list[rnm.ClassifiedNote]:
    return [
        rnm.ClassifiedNote(
            pr=pr,
            category=category,
            rendered_markdown=render_note(pr=pr, tracker=tracker),
        ) for pr in prs
    ]


def join_notes(notes: collections.abc.Iterable[rnm.ClassifiedNote]) -> str:
    return '\n\n'.join(note.rendered_markdown for note in notes)
