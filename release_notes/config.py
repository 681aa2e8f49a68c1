# SPDX-FileCopyrightText: 2024 SAP SE or an SAP affiliate company and Gardener contributors
#
# SPDX-License-Identifier: Apache-2.0

'''
Configuration for release-notes generation. Read from a YAML-file, e.g.:

repo_url: github.com/example/project
default_branch: master
last_releases:
  master: v1.3.0-beta.2
  release-1.2: v1.2.4
labels:
  action_required: release-note-action-required
  normal: release-note
'''

import dataclasses
import logging
import os

import dacite
import yaml

import ci.util
import release_notes.model as rnm

logger = logging.getLogger(__name__)

DEFAULT_CFG_FILE_NAME = '.release-notes.yaml'


@dataclasses.dataclass
class LabelsCfg:
    action_required: str = 'release-note-action-required'
    normal: str = 'release-note'
    cherry_pick: str = 'cherrypick-candidate'


@dataclasses.dataclass
class ReleaseNotesCfg:
    repo_url: str | None = None
    default_branch: str = 'master'
    last_releases: dict[str, str] = dataclasses.field(default_factory=dict)
    labels: LabelsCfg = dataclasses.field(default_factory=LabelsCfg)
    # supported placeholders: {major}, {minor}
    draft_path: str = 'release-{major}.{minor}/release-notes-draft.md'
    changelog_dir: str = ''
    downloads_base_url: str = 'https://dl.k8s.io'
    html_converter: str | None = None

    def last_release_table(self) -> rnm.LastReleaseTable:
        return rnm.LastReleaseTable(
            last_releases=self.last_releases,
            default_branch=self.default_branch,
        )

    def changelog_path(self, changelog_file_name: str) -> str:
        if not self.changelog_dir:
            return changelog_file_name
        return f'{self.changelog_dir.rstrip("/")}/{changelog_file_name}'


def cfg_from_dict(raw: dict | None) -> ReleaseNotesCfg:
    try:
        return dacite.from_dict(
            data_class=ReleaseNotesCfg,
            data=raw or {},
            config=dacite.Config(cast=[tuple], strict=True),
        )
    except dacite.DaciteError as e:
        raise rnm.ConfigError(f'invalid release-notes-configuration: {e}') from e


def read_cfg(path: str | None=None) -> ReleaseNotesCfg:
    '''
    reads configuration from the given path. If no path is given, `.release-notes.yaml` from the
    current working directory is read, if present (otherwise, defaults are returned).
    '''
    if not path:
        if not os.path.isfile(DEFAULT_CFG_FILE_NAME):
            logger.info(f'no {DEFAULT_CFG_FILE_NAME} found - using default configuration')
            return ReleaseNotesCfg()
        path = DEFAULT_CFG_FILE_NAME

    try:
        raw = ci.util.parse_yaml_file(ci.util.existing_file(path))
    except (OSError, ValueError, yaml.YAMLError) as e:
        raise rnm.ConfigError(f'failed to read configuration from {path=}: {e}') from e

    if raw is not None and not isinstance(raw, dict):
        raise rnm.ConfigError(f'expected a mapping in {path=}')

    logger.info(f'read configuration from {path=}')
    return cfg_from_dict(raw)
