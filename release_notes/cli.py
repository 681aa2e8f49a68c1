#! /usr/bin/env python3
# SPDX-FileCopyrightText: 2024 SAP SE or an SAP affiliate company and Gardener contributors
#
# SPDX-License-Identifier: Apache-2.0

import argparse
import logging
import os
import subprocess
import sys

import git.exc
import github3.exceptions
import requests.exceptions

import ci.log
import github
import github.util
import gitutil
import release_notes.config as rncfg
import release_notes.htmlize as rnh
import release_notes.model as rnm
import release_notes.pipeline as rnp

logger = logging.getLogger(__name__)

EXIT_RANGE_ERROR = 1
EXIT_FETCH_ERROR = 2
EXIT_ASSEMBLY_ERROR = 3


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description='generate release-notes for merged pull-requests since the last release',
    )
    parser.add_argument(
        'range',
        nargs='?',
        default=None,
        help='either `<start-tag>..<end-tag>`, or an end-tag (default: head of --branch)',
    )
    parser.add_argument(
        '--branch',
        default=None,
        help='branch to generate release-notes for (defaults to configured default-branch)',
    )
    parser.add_argument(
        '--config',
        default=None,
        help=f'path to configuration-file (default: {rncfg.DEFAULT_CFG_FILE_NAME}, if present)',
    )
    parser.add_argument(
        '--repo-path',
        default=os.getcwd(),
        help='path to git-repository worktree',
    )
    parser.add_argument(
        '--repo-url',
        default=None,
        help='github-repo-url ({host}/{org}/{repo}); overwrites configured value',
    )
    parser.add_argument(
        '--github-token',
        default=os.environ.get('GITHUB_TOKEN', None),
        help='github-auth-token (defaults to env-var GITHUB_TOKEN)',
    )
    parser.add_argument(
        '--fetch',
        action='store_true',
        default=False,
        help='if set, tags are fetched from remote before resolving the range',
    )
    parser.add_argument(
        '--full',
        action='store_true',
        default=False,
        help='force full (bootstrap) release-notes, as for a new minor-release',
    )
    parser.add_argument(
        '--release-tars',
        dest='artefacts_dir',
        default=None,
        help='directory containing release-artefacts to render download-tables for',
    )
    parser.add_argument(
        '--preview',
        action='store_true',
        default=False,
        help='add sections for pending pull-requests and branch-state',
    )
    parser.add_argument(
        '--ci-state-command',
        default=None,
        help='command printing branch-state as markdown (called w/ branch-name as argument)',
    )
    parser.add_argument(
        '--markdown-file',
        default=None,
        help='output file (default: release-notes-<branch>.md in tmp-dir)',
    )
    parser.add_argument(
        '--html-file',
        default=None,
        help='if set, release-notes are also written as html to the given path',
    )
    parser.add_argument(
        '--htmlize-md',
        action='store_true',
        default=False,
        help='link pull-requests and users in markdown-output',
    )
    parser.add_argument(
        '--verbose',
        action='store_true',
        default=False,
    )

    return parser.parse_args(argv)


def ci_state_lookup_from_command(command: str):
    def ci_state_lookup(branch: str) -> str | None:
        try:
            res = subprocess.run(
                args=(command, branch),
                capture_output=True,
                text=True,
                check=False,
            )
        except OSError as e:
            logger.warning(f'{command=} could not be run: {e}')
            return None
        if res.returncode != 0:
            logger.warning(f'{command=} failed ({res.returncode=}): {res.stderr}')
            return None
        return res.stdout

    return ci_state_lookup


def run(args: argparse.Namespace) -> int:
    cfg = rncfg.read_cfg(args.config)
    repo_url = args.repo_url or cfg.repo_url
    if not repo_url:
        raise rnm.ConfigError('repo-url must be passed (either via --repo-url or configuration)')

    branch = args.branch or cfg.default_branch
    markdown_file = args.markdown_file or rnp.default_markdown_path(branch)

    try:
        host, org, repo = github.host_org_and_repo(repo_url)
    except ValueError as e:
        raise rnm.ConfigError(f'invalid repo-url: {e}') from e

    if args.github_token:
        git_cfg = gitutil.GitCfg(
            repo_url=f'https://{host}/{org}/{repo}',
            auth=('x-access-token', args.github_token),
            auth_type=gitutil.AuthType.HTTP_TOKEN,
        )
    else:
        git_cfg = None

    try:
        git_helper = gitutil.GitHelper(repo=args.repo_path, git_cfg=git_cfg)
    except (git.exc.InvalidGitRepositoryError, git.exc.NoSuchPathError) as e:
        raise rnm.ConfigError(f'not a git-repository: {args.repo_path}') from e

    if args.fetch:
        git_helper.fetch_tags()

    try:
        github_helper = github.util.GitHubRepositoryHelper(
            owner=org,
            name=repo,
            github_api=github.github_api(repo_url=repo_url, token=args.github_token),
            default_branch=cfg.default_branch,
        )
    except RuntimeError as e:
        raise rnm.ConfigError(f'repository {org}/{repo} is not accessible: {e}') from e

    if args.ci_state_command:
        ci_state_lookup = ci_state_lookup_from_command(args.ci_state_command)
    else:
        ci_state_lookup = None

    document = rnp.generate_release_notes(
        cfg=cfg,
        branch=branch,
        git_helper=git_helper,
        github_helper=github_helper,
        user_range=args.range,
        force_full=args.full,
        artefacts_dir=args.artefacts_dir,
        preview=args.preview,
        ci_state_lookup=ci_state_lookup,
    )

    rnp.write_release_notes(
        document=document,
        markdown_path=markdown_file,
        repo_url=repo_url,
        htmlize_markdown=args.htmlize_md,
        html_path=args.html_file,
        html_converter=cfg.html_converter or rnh.DEFAULT_CONVERTER,
    )
    print(markdown_file)
    return 0


def main(argv=None):
    args = parse_args(argv)
    ci.log.configure_default_logging(
        stdout_level=logging.DEBUG if args.verbose else logging.INFO,
    )

    try:
        exit_code = run(args)
    except (rnm.ConfigError, rnm.RangeResolutionError, rnm.InvalidRangeError) as e:
        logger.error(e)
        exit_code = EXIT_RANGE_ERROR
    except rnm.FetchError as e:
        logger.error(e)
        logger.error('hint: GitHub rate-limits may have been exceeded; pass --github-token')
        exit_code = EXIT_FETCH_ERROR
    except (
        github3.exceptions.GitHubError,
        requests.exceptions.RequestException,
        git.exc.GitCommandError,
    ) as e:
        logger.error(f'communication w/ remote failed: {e}')
        exit_code = EXIT_FETCH_ERROR
    except (rnm.ChangelogTargetError, rnm.HtmlConversionError) as e:
        logger.error(e)
        exit_code = EXIT_ASSEMBLY_ERROR

    sys.exit(exit_code)


if __name__ == '__main__':
    main()
