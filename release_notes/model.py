# SPDX-FileCopyrightText: 2024 SAP SE or an SAP affiliate company and Gardener contributors
#
# SPDX-License-Identifier: Apache-2.0

import collections.abc
import dataclasses
import enum
import logging
import types

import version

logger = logging.getLogger(__name__)


class ReleaseNotesError(RuntimeError):
    '''
    base class for errors that abort release-notes generation
    '''
    pass


class RangeResolutionError(ReleaseNotesError):
    '''
    raised if no start-tag could be determined for the release-range
    '''
    pass


class InvalidRangeError(ReleaseNotesError):
    '''
    raised if a release-range cannot be resolved in the repository's history
    '''
    pass


class FetchError(ReleaseNotesError):
    '''
    raised if GitHub returned empty contents for a pull-request (most likely due to rate-limits)
    '''
    pass


class ChangelogTargetError(ReleaseNotesError):
    '''
    raised if a release-tag does not allow to determine the changelog-file to read from
    '''
    pass


class ConfigError(ReleaseNotesError):
    pass


class HtmlConversionError(ReleaseNotesError):
    pass


@dataclasses.dataclass(frozen=True)
class ReleaseRange:
    start_tag: str
    end_ref: str
    branch: str

    def __str__(self):
        return f'{self.start_tag}..{self.end_ref}'


class LastReleaseTable(collections.abc.Mapping):
    '''
    read-only mapping of branch-names to the tag of the last release made from the respective
    branch.

    Lookups via `last_release` fall back from the given branch to its parent-branch (see
    `version.parent_branch`), and finally to the default-branch.
    '''
    def __init__(
        self,
        last_releases: collections.abc.Mapping[str, str],
        default_branch: str='master',
    ):
        self._last_releases = types.MappingProxyType(dict(last_releases))
        self.default_branch = default_branch

    def __getitem__(self, branch: str) -> str:
        return self._last_releases[branch]

    def __iter__(self):
        return iter(self._last_releases)

    def __len__(self):
        return len(self._last_releases)

    def candidate_branches(self, branch: str) -> tuple[str, ...]:
        candidates = [branch]
        if (parent := version.parent_branch(branch)):
            candidates.append(parent)
        candidates.append(self.default_branch)

        # retain order, rm duplicates
        return tuple(dict.fromkeys(candidates))

    def last_release(self, branch: str) -> str | None:
        for candidate in self.candidate_branches(branch):
            if (tag := self._last_releases.get(candidate)):
                if candidate != branch:
                    logger.info(f'no last release for {branch=}, using {tag=} from {candidate=}')
                return tag

        return None


@dataclasses.dataclass(frozen=True)
class PullRequestRef:
    '''
    reference to a pull-request, as found in a merge-commit's subject. Only the number is
    considered for equality (a pull-request may be referenced by more than one merge-commit,
    e.g. if it was cherry-picked).
    '''
    number: int
    source_merge_subject: str = dataclasses.field(default='', compare=False)


@dataclasses.dataclass(frozen=True)
class PullRequestDetails:
    number: int
    title: str
    body: str
    author: str

    @staticmethod
    def from_dict(raw: dict) -> 'PullRequestDetails':
        user = raw.get('user') or {}
        return PullRequestDetails(
            number=raw['number'],
            title=raw.get('title') or '',
            body=raw.get('body') or '',
            author=user.get('login') or '',
        )


@dataclasses.dataclass(frozen=True)
class LabelSets:
    action_required: frozenset[int] = frozenset()
    normal: frozenset[int] = frozenset()


class NoteCategory(enum.StrEnum):
    ACTION_REQUIRED = 'action-required'
    NORMAL = 'normal'


@dataclasses.dataclass(frozen=True)
class ClassifiedNote:
    pr: PullRequestRef
    category: NoteCategory
    rendered_markdown: str


@dataclasses.dataclass(frozen=True)
class DocumentSection:
    body: str
    name: str = ''


@dataclasses.dataclass
class ReleaseDocument:
    release_tag: str
    sections: list[DocumentSection] = dataclasses.field(default_factory=list)

    def append(self, body: str, name: str=''):
        if not body:
            return
        self.sections.append(DocumentSection(body=body.strip('\n'), name=name))

    def section(self, name: str) -> DocumentSection | None:
        for section in self.sections:
            if section.name == name:
                return section
        return None

    def as_markdown(self) -> str:
        return '\n\n'.join(section.body for section in self.sections) + '\n'
