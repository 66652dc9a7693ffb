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

import dataclasses
import typing

from merge_me import exceptions
from merge_me import github_types


MERGEABLE_STATES: tuple[str, ...] = typing.get_args(github_types.MergeableState)
PULL_REQUEST_STATES: tuple[str, ...] = typing.get_args(github_types.PullRequestState)
MERGE_STATE_STATUSES: tuple[str, ...] = typing.get_args(
    github_types.MergeStateStatus,
)
REVIEW_STATES: tuple[str, ...] = typing.get_args(github_types.ReviewState)


@dataclasses.dataclass(frozen=True)
class Review:
    state: github_types.ReviewState


@dataclasses.dataclass(frozen=True)
class ReviewEdge:
    # None when the review is hidden from the viewer
    node: Review | None


@dataclasses.dataclass(frozen=True)
class PullRequestInformation:
    author_login: str
    commit_message: str
    commit_message_headline: str
    merge_state_status: github_types.MergeStateStatus | None
    mergeable_state: github_types.MergeableState
    merged: bool
    pull_request_id: str
    pull_request_number: int
    pull_request_state: github_types.PullRequestState
    pull_request_title: str
    repository_name: str
    repository_owner: str
    review_edges: tuple[ReviewEdge | None, ...]


@dataclasses.dataclass(frozen=True)
class CommitNode:
    # None when the commit author is not linked to a GitHub account
    author_login: str | None
    # None when the commit is not signed
    signature_is_valid: bool | None


def _validate_enum(field: str, value: typing.Any, allowed: tuple[str, ...]) -> str:  # noqa: ANN401
    if value not in allowed:
        raise exceptions.UnknownEnumValueError(field, value, allowed)
    return typing.cast("str", value)


def get_path(raw: typing.Mapping[str, typing.Any], *path: str) -> typing.Any:  # noqa: ANN401
    value: typing.Any = raw
    for key in path:
        if not isinstance(value, typing.Mapping) or key not in value:
            msg = f"`{'.'.join(path)}` is missing"
            raise exceptions.MalformedResponseError(msg)
        value = value[key]
    return value


def ensure_mapping(value: typing.Any, field: str) -> typing.Mapping[str, typing.Any]:  # noqa: ANN401
    if not isinstance(value, typing.Mapping):
        msg = f"`{field}` is not an object: {value!r}"
        raise exceptions.MalformedResponseError(msg)
    return value


def ensure_list(value: typing.Any, field: str) -> list[typing.Any]:  # noqa: ANN401
    if not isinstance(value, list):
        msg = f"`{field}` is not a list: {value!r}"
        raise exceptions.MalformedResponseError(msg)
    return value


def ensure_bool(value: typing.Any, field: str) -> bool:  # noqa: ANN401
    if not isinstance(value, bool):
        msg = f"`{field}` is not a boolean: {value!r}"
        raise exceptions.MalformedResponseError(msg)
    return value


def normalize_review_edges(
    raw: list[github_types.ReviewEdge | None] | None,
) -> tuple[ReviewEdge | None, ...]:
    edges: list[ReviewEdge | None] = []
    for edge in ensure_list(raw or [], "reviews.edges"):
        if edge is None:
            edges.append(None)
            continue
        node = ensure_mapping(edge, "reviews.edges").get("node")
        if node is None:
            edges.append(ReviewEdge(node=None))
            continue
        state = _validate_enum(
            "reviews.edges.node.state",
            get_path(ensure_mapping(node, "reviews.edges.node"), "state"),
            REVIEW_STATES,
        )
        review = Review(state=typing.cast("github_types.ReviewState", state))
        edges.append(ReviewEdge(node=review))
    return tuple(edges)


def normalize_pull_request(
    raw: github_types.PullRequest,
    *,
    repository_owner: str,
    repository_name: str,
) -> PullRequestInformation:
    commit_edges = ensure_list(get_path(raw, "commits", "edges"), "commits.edges")
    if not commit_edges:
        msg = f"pull request #{raw.get('number')} has no commit"
        raise exceptions.MalformedResponseError(msg)
    last_commit = get_path(commit_edges[-1], "node", "commit")

    author = raw.get("author")
    if author is None:
        # deleted accounts are reported as null authors
        author_login = "ghost"
    else:
        author_login = get_path(author, "login")

    merge_state_status = raw.get("mergeStateStatus")
    if merge_state_status is not None:
        merge_state_status = _validate_enum(
            "mergeStateStatus",
            merge_state_status,
            MERGE_STATE_STATUSES,
        )

    mergeable_state = _validate_enum(
        "mergeable",
        get_path(raw, "mergeable"),
        MERGEABLE_STATES,
    )
    pull_request_state = _validate_enum("state", get_path(raw, "state"), PULL_REQUEST_STATES)
    merged = ensure_bool(get_path(raw, "merged"), "merged")
    if merged and pull_request_state != "MERGED":
        msg = f"pull request #{raw.get('number')} is merged but its state is {pull_request_state}"
        raise exceptions.MalformedResponseError(msg)

    return PullRequestInformation(
        author_login=author_login,
        commit_message=get_path(last_commit, "message"),
        commit_message_headline=get_path(last_commit, "messageHeadline"),
        merge_state_status=typing.cast(
            "github_types.MergeStateStatus | None",
            merge_state_status,
        ),
        mergeable_state=typing.cast("github_types.MergeableState", mergeable_state),
        merged=merged,
        pull_request_id=get_path(raw, "id"),
        pull_request_number=get_path(raw, "number"),
        pull_request_state=typing.cast(
            "github_types.PullRequestState",
            pull_request_state,
        ),
        pull_request_title=get_path(raw, "title"),
        repository_name=repository_name,
        repository_owner=repository_owner,
        review_edges=normalize_review_edges(get_path(raw, "reviews", "edges")),
    )


def normalize_commit_node(raw: github_types.PullRequestCommitNode) -> CommitNode:
    commit = get_path(raw, "commit")
    if not isinstance(commit, typing.Mapping):
        msg = "`commit` is null"
        raise exceptions.MalformedResponseError(msg)

    author = commit.get("author")
    user = (
        ensure_mapping(author, "commit.author").get("user")
        if author is not None
        else None
    )
    author_login = get_path(user, "login") if user is not None else None

    signature = commit.get("signature")
    signature_is_valid = (
        ensure_bool(get_path(signature, "isValid"), "commit.signature.isValid")
        if signature is not None
        else None
    )

    return CommitNode(author_login=author_login, signature_is_valid=signature_is_valid)


def normalize_commit_edge(raw: github_types.PullRequestCommitEdge) -> CommitNode:
    return normalize_commit_node(get_path(raw, "node"))
