#
#  Copyright © 2021-2024 Mergify SAS
#
# Licensed under the Apache License, Version 2.0 (the "License"); you may
# not use this file except in compliance with the License. You may obtain
# a copy of the License at
#
#      http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS, WITHOUT
# WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied. See the
# License for the specific language governing permissions and limitations
# under the License.

from __future__ import annotations

import typing

from merge_me import exceptions
from merge_me import normalizer
from merge_me import paginator
from merge_me import queries


if typing.TYPE_CHECKING:
    from collections import abc

    from merge_me import github_types
    from merge_me import transport as transport_mod


NOT_FOUND_ERROR_TYPE = "NOT_FOUND"


def _is_pull_request_not_found(error: exceptions.GraphQLError) -> bool:
    if not error.errors or error.types != {NOT_FOUND_ERROR_TYPE}:
        return False
    return all(
        e.get("path") and e["path"][-1] == "pullRequest" for e in error.errors
    )


async def find_pull_requests_by_reference_name(
    transport: transport_mod.Transport,
    repository_owner: str,
    repository_name: str,
    reference_name: str,
) -> list[normalizer.PullRequestInformation]:
    """Return the open pull requests whose head branch is `reference_name`."""
    data = typing.cast(
        "github_types.FindPullRequestsInfoByReferenceNameResponse",
        await transport.execute(
            queries.get("FindPullRequestsInfoByReferenceName"),
            {
                "repositoryOwner": repository_owner,
                "repositoryName": repository_name,
                "referenceName": reference_name,
            },
        ),
    )
    repository = data.get("repository")
    if repository is None:
        return []

    nodes = normalizer.ensure_list(
        normalizer.get_path(repository, "pullRequests", "nodes"),
        "repository.pullRequests.nodes",
    )
    return [
        normalizer.normalize_pull_request(
            node,
            repository_owner=repository_owner,
            repository_name=repository_name,
        )
        for node in nodes
        if node is not None
    ]


async def find_pull_request_by_number(
    transport: transport_mod.Transport,
    repository_owner: str,
    repository_name: str,
    pull_request_number: int,
) -> normalizer.PullRequestInformation:
    try:
        data = typing.cast(
            "github_types.FindPullRequestInfoByNumberResponse",
            await transport.execute(
                queries.get("FindPullRequestInfoByNumber"),
                {
                    "repositoryOwner": repository_owner,
                    "repositoryName": repository_name,
                    "pullRequestNumber": pull_request_number,
                },
            ),
        )
    except exceptions.GraphQLError as e:
        if _is_pull_request_not_found(e):
            raise exceptions.NotFoundError(
                repository_owner,
                repository_name,
                pull_request_number,
            ) from e
        raise

    repository = data.get("repository")
    pull_request = (
        normalizer.ensure_mapping(repository, "repository").get("pullRequest")
        if repository is not None
        else None
    )
    if pull_request is None:
        raise exceptions.NotFoundError(
            repository_owner,
            repository_name,
            pull_request_number,
        )

    return normalizer.normalize_pull_request(
        pull_request,
        repository_owner=repository_owner,
        repository_name=repository_name,
    )


def _select_commits(
    data: dict[str, typing.Any],
) -> github_types.Connection | None:
    response = typing.cast("github_types.FindPullRequestCommitsResponse", data)
    repository = response.get("repository")
    if repository is None:
        return None
    pull_request = normalizer.ensure_mapping(repository, "repository").get(
        "pullRequest",
    )
    if pull_request is None:
        return None
    return typing.cast(
        "github_types.Connection",
        normalizer.ensure_mapping(
            normalizer.get_path(pull_request, "commits"),
            "repository.pullRequest.commits",
        ),
    )


async def find_pull_request_commits(
    transport: transport_mod.Transport,
    repository_owner: str,
    repository_name: str,
    pull_request_number: int,
    *,
    page_size: int | None = None,
) -> abc.AsyncGenerator[normalizer.CommitNode, None]:
    """Lazily iterate over the commits of a pull request, oldest first.

    Pages are fetched on demand, stop iterating to stop fetching.
    """
    edges = paginator.paginate(
        transport,
        queries.get("FindPullRequestCommits"),
        {
            "repositoryOwner": repository_owner,
            "repositoryName": repository_name,
            "pullRequestNumber": pull_request_number,
        },
        _select_commits,
        page_size=page_size,
    )
    try:
        async for edge in edges:
            yield normalizer.normalize_commit_edge(edge)
    except paginator.ConnectionNotFoundError as e:
        raise exceptions.NotFoundError(
            repository_owner,
            repository_name,
            pull_request_number,
        ) from e
    except exceptions.GraphQLError as e:
        if _is_pull_request_not_found(e):
            raise exceptions.NotFoundError(
                repository_owner,
                repository_name,
                pull_request_number,
            ) from e
        raise
    finally:
        await edges.aclose()


async def list_pull_request_commits(
    transport: transport_mod.Transport,
    repository_owner: str,
    repository_name: str,
    pull_request_number: int,
    *,
    page_size: int | None = None,
) -> list[normalizer.CommitNode]:
    return [
        commit
        async for commit in find_pull_request_commits(
            transport,
            repository_owner,
            repository_name,
            pull_request_number,
            page_size=page_size,
        )
    ]
