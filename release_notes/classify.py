# SPDX-FileCopyrightText: 2024 SAP SE or an SAP affiliate company and Gardener contributors
#
# SPDX-License-Identifier: Apache-2.0

import collections.abc
import logging
import math
import typing

import github3.exceptions
import requests.exceptions

import release_notes.model as rnm

logger = logging.getLogger(__name__)

PAGE_SIZE = 100


class LabelSearchClient(typing.Protocol):
    def search_pull_requests_with_label(
        self,
        label: str,
        page: int=1,
        per_page: int=100,
    ) -> dict:
        ...


def _numbers_from_page(page: object) -> tuple[int | None, list[int]]:
    '''
    returns total-count and pull-request-numbers from a search-result-page. Raises `ValueError`
    if the page is malformed.
    '''
    if not isinstance(page, dict):
        raise ValueError(f'unexpected search-result: {type(page)=}')

    total_count = page.get('total_count')
    items = page.get('items')

    if not isinstance(total_count, int) or not isinstance(items, list):
        raise ValueError(f'unexpected search-result: {total_count=}, {type(items)=}')

    return total_count, [item['number'] for item in items]


def label_pr_numbers(
    search: LabelSearchClient,
    label: str,
    page_size: int=PAGE_SIZE,
) -> frozenset[int]:
    '''
    returns the numbers of all pull-requests bearing the given label. Pages are retrieved until
    `ceil(total_count / page_size)` pages were read.

    Failing, empty or malformed pages are not retried; instead, collection for the given label
    stops, and the numbers collected so far are returned.
    '''
    numbers = set()
    page_count = 1
    page_idx = 1

    while page_idx <= page_count:
        try:
            page = search.search_pull_requests_with_label(
                label=label,
                page=page_idx,
                per_page=page_size,
            )
            total_count, page_numbers = _numbers_from_page(page)
        except (
            github3.exceptions.GitHubError,
            requests.exceptions.RequestException,
            KeyError,
            TypeError,
            ValueError,
        ) as e:
            logger.warning(f'failed to retrieve page {page_idx} for {label=}: {e}')
            break

        if not page_numbers:
            if total_count:
                logger.warning(f'page {page_idx} of pull-requests with {label=} is empty')
            break

        numbers.update(page_numbers)
        page_count = math.ceil(total_count / page_size)
        page_idx += 1

    logger.info(f'found {len(numbers)} pull-requests with {label=}')
    return frozenset(numbers)


def fetch_label_sets(
    search: LabelSearchClient,
    action_label: str,
    normal_label: str,
) -> rnm.LabelSets:
    return rnm.LabelSets(
        action_required=label_pr_numbers(search=search, label=action_label),
        normal=label_pr_numbers(search=search, label=normal_label),
    )


def ordered(
    prs: collections.abc.Iterable[rnm.PullRequestRef],
) -> list[rnm.PullRequestRef]:
    return sorted(set(prs), key=lambda pr: pr.number)


def partition(
    prs: collections.abc.Iterable[rnm.PullRequestRef],
    label_sets: rnm.LabelSets,
) -> tuple[list[rnm.PullRequestRef], list[rnm.PullRequestRef]]:
    '''
    partitions the given pull-requests into those requiring action, and "normal" ones (ordered
    by pull-request-number). Action-required-label takes precedence. Pull-requests bearing
    neither label are dropped.
    '''
    action = []
    normal = []

    for pr in ordered(prs):
        if pr.number in label_sets.action_required:
            action.append(pr)
        elif pr.number in label_sets.normal:
            normal.append(pr)
        else:
            logger.debug(f'#{pr.number} bears no release-note-label - skipping')

    return action, normal


def classify(
    prs: collections.abc.Iterable[rnm.PullRequestRef],
    action_label: str,
    normal_label: str,
    search: LabelSearchClient,
) -> tuple[list[rnm.PullRequestRef], list[rnm.PullRequestRef]]:
    label_sets = fetch_label_sets(
        search=search,
        action_label=action_label,
        normal_label=normal_label,
    )
    action, normal = partition(prs=prs, label_sets=label_sets)

    logger.info(f'{len(action)} pull-requests require action, {len(normal)} other notable changes')
    return action, normal
