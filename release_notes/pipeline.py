# SPDX-FileCopyrightText: 2024 SAP SE or an SAP affiliate company and Gardener contributors
#
# SPDX-License-Identifier: Apache-2.0

import collections.abc
import logging
import os
import tempfile

import github.util
import gitutil
import release_notes.classify as rnc
import release_notes.commit_range as rncr
import release_notes.config as rncfg
import release_notes.document as rnd
import release_notes.downloads as rndl
import release_notes.htmlize as rnh
import release_notes.merges as rnme
import release_notes.model as rnm
import release_notes.render as rnr

logger = logging.getLogger(__name__)

CiStateLookup = collections.abc.Callable[[str], str | None]


def default_markdown_path(branch: str) -> str:
    return os.path.join(
        tempfile.gettempdir(),
        f'release-notes-{branch.replace("/", "_")}.md',
    )


def collect_notes(
    release_range: rnm.ReleaseRange,
    cfg: rncfg.ReleaseNotesCfg,
    git_helper: gitutil.GitHelper,
    github_helper: github.util.GitHubRepositoryHelper,
) -> dict[rnm.NoteCategory, list[rnm.ClassifiedNote]]:
    pr_refs = rnme.scan_merge_commits(
        release_range=release_range,
        git_helper=git_helper,
    )

    action, normal = rnc.classify(
        prs=pr_refs,
        action_label=cfg.labels.action_required,
        normal_label=cfg.labels.normal,
        search=github_helper,
    )

    return {
        rnm.NoteCategory.ACTION_REQUIRED: rnr.render_notes(
            prs=action,
            category=rnm.NoteCategory.ACTION_REQUIRED,
            tracker=github_helper,
        ),
        rnm.NoteCategory.NORMAL: rnr.render_notes(
            prs=normal,
            category=rnm.NoteCategory.NORMAL,
            tracker=github_helper,
        ),
    }


def generate_release_notes(
    cfg: rncfg.ReleaseNotesCfg,
    branch: str,
    git_helper: gitutil.GitHelper,
    github_helper: github.util.GitHubRepositoryHelper,
    user_range: str | None=None,
    force_full: bool=False,
    artefacts_dir: str | None=None,
    preview: bool=False,
    ci_state_lookup: CiStateLookup | None=None,
) -> rnm.ReleaseDocument:
    '''
    generates the release-notes-document for the given branch (or range). Any error raised
    aborts generation (no partial documents are returned).
    '''
    release_range = rncr.resolve_range(
        user_range=user_range,
        branch=branch,
        last_releases=cfg.last_release_table(),
        git_helper=git_helper,
    )
    release_tag = release_range.end_ref

    if (is_major_bootstrap := rnd.is_major_bootstrap(release_tag, force_full=force_full)):
        logger.info(f'{release_tag} starts a new release-line - not collecting pull-requests')
        notes_by_category = {}
    else:
        notes_by_category = collect_notes(
            release_range=release_range,
            cfg=cfg,
            git_helper=git_helper,
            github_helper=github_helper,
        )

    def draft_fetcher(release_tag: str) -> str | None:
        return github_helper.raw_file_contents(
            path=rnd.draft_path(release_tag, cfg.draft_path),
            branch=cfg.default_branch,
        )

    def changelog_reader(changelog_file_name: str) -> str | None:
        return git_helper.file_contents(
            path=cfg.changelog_path(changelog_file_name),
            ref=git_helper.remote_branch_ref(cfg.default_branch),
        )

    if artefacts_dir:
        downloads = rndl.download_tables(
            release_tag=release_tag,
            artefacts_dir=artefacts_dir,
            base_url=cfg.downloads_base_url,
        )
    else:
        downloads = None

    pending_section = None
    ci_section = None
    if preview:
        pending_section = rnd.pending_pull_requests_section(
            branch=branch,
            pending=github_helper.pending_pull_requests(
                branch=branch,
                label=cfg.labels.cherry_pick,
            ),
        )
        if ci_state_lookup and (ci_state := ci_state_lookup(branch)):
            ci_section = rnd.ci_state_section(branch=branch, ci_state=ci_state)

    return rnd.assemble(
        release_tag=release_tag,
        start_tag=release_range.start_tag,
        is_major_bootstrap=is_major_bootstrap,
        notes_by_category=notes_by_category,
        draft_fetcher=draft_fetcher,
        changelog_reader=changelog_reader,
        downloads=downloads,
        pending_section=pending_section,
        ci_section=ci_section,
    )


def write_release_notes(
    document: rnm.ReleaseDocument,
    markdown_path: str,
    repo_url: str | None=None,
    htmlize_markdown: bool=False,
    html_path: str | None=None,
    html_converter: str=rnh.DEFAULT_CONVERTER,
) -> str:
    '''
    writes the given document as markdown (and optionally as html) and returns the written
    markdown
    '''
    markdown = document.as_markdown()
    if htmlize_markdown and repo_url:
        markdown = rnh.linkify(markdown, repo_url=repo_url)

    with open(markdown_path, 'w') as f:
        f.write(markdown)
    logger.info(f'wrote release-notes to {markdown_path}')

    if html_path:
        linkified = rnh.linkify(markdown, repo_url=repo_url) if repo_url else markdown
        html = rnh.markdown_to_html(linkified, converter=html_converter)
        with open(html_path, 'w') as f:
            f.write(html)
        logger.info(f'wrote html-release-notes to {html_path}')

    return markdown
