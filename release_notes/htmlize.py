# SPDX-FileCopyrightText: 2024 SAP SE or an SAP affiliate company and Gardener contributors
#
# SPDX-License-Identifier: Apache-2.0

import logging
import re
import shlex
import subprocess

import github
import release_notes.model as rnm

logger = logging.getLogger(__name__)

DEFAULT_CONVERTER = 'pandoc --from=gfm --to=html5 --standalone --metadata=title:release-notes'

_attribution_re = re.compile(r'\(#(?P<number>\d+), @(?P<user>[\w-]+)\)')


def linkify(
    markdown: str,
    repo_url: str,
) -> str:
    '''
    replaces attribution-suffixes (`(#123, @user)`) w/ links to the respective pull-request and
    user-profile
    '''
    def _link(match: re.Match) -> str:
        number = int(match.group('number'))
        user = match.group('user')
        pr_url = github.pull_request_url(repo_url, number)
        user_url = github.user_profile_url(repo_url, user)
        return f'([#{number}]({pr_url}), [@{user}]({user_url}))'

    return _attribution_re.sub(_link, markdown)


def markdown_to_html(
    markdown: str,
    converter: str=DEFAULT_CONVERTER,
) -> str:
    '''
    converts the given markdown to html, using the given (external) converter-command, which is
    expected to read markdown from stdin, and to write html to stdout
    '''
    args = shlex.split(converter)
    logger.info(f'converting to html using {args[0]}')

    try:
        res = subprocess.run(
            args=args,
            input=markdown,
            capture_output=True,
            text=True,
            check=True,
        )
    except FileNotFoundError as e:
        raise rnm.HtmlConversionError(f'html-converter not found: {args[0]}') from e
    except subprocess.CalledProcessError as e:
        raise rnm.HtmlConversionError(f'html-conversion failed: {e.stderr}') from e

    return res.stdout
