# SPDX-FileCopyrightText: 2024 SAP SE or an SAP affiliate company and Gardener contributors
#
# SPDX-License-Identifier: Apache-2.0

'''
Release Notes Collector

Collects release notes for merged pull-requests of a GitHub-hosted repository.

For a patch release, all pull-requests merged between the last release tag (as configured per
release-branch) and the release tag (or head of the release-branch) are considered. Pull-requests
merged via automated cherry-picks are attributed to all original (upstream) pull-requests.
Pull-requests are classified using labels: pull-requests labeled as requiring action are listed
first, followed by other notable changes. Pull-requests bearing neither label are omitted.

For the first release of a new minor-line (`vX.Y.0`), a pre-authored draft (or a generic template)
is used instead, followed by a list of the release-line's pre-releases.
'''
