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
import json
import typing

import httpx


NOW = 1_700_000_000.0


@dataclasses.dataclass
class FakeSleep:
    calls: list[float] = dataclasses.field(default_factory=list)

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


def graphql_response(
    data: dict[str, typing.Any] | None = None,
    *,
    errors: list[dict[str, typing.Any]] | None = None,
    status_code: int = 200,
    headers: dict[str, str] | None = None,
) -> httpx.Response:
    body: dict[str, typing.Any] = {"data": data}
    if errors is not None:
        body["errors"] = errors
    return httpx.Response(status_code, json=body, headers=headers)


def pull_request_node(  # noqa: PLR0913
    number: int = 42,
    *,
    author: str | None = "octocat",
    state: str = "OPEN",
    merged: bool = False,
    mergeable: str = "MERGEABLE",
    merge_state_status: str | None = "CLEAN",
    reviews: list[dict[str, typing.Any] | None] | None = None,
    message: str = "Bump foo from 1.0.0 to 1.1.0\n\nSigned-off-by: octocat",
    headline: str = "Bump foo from 1.0.0 to 1.1.0",
) -> dict[str, typing.Any]:
    node: dict[str, typing.Any] = {
        "author": {"login": author} if author is not None else None,
        "commits": {
            "edges": [
                {"node": {"commit": {"message": message, "messageHeadline": headline}}},
            ],
        },
        "id": f"PR_kwDOA{number}",
        "mergeStateStatus": merge_state_status,
        "mergeable": mergeable,
        "merged": merged,
        "number": number,
        "reviews": {
            "edges": reviews
            if reviews is not None
            else [{"node": {"state": "APPROVED"}}],
        },
        "state": state,
        "title": f"Pull request #{number}",
    }
    if merge_state_status is None:
        del node["mergeStateStatus"]
    return node


def commit_node(
    login: str | None = "octocat",
    *,
    signature: bool | None = True,
    linked: bool = True,
) -> dict[str, typing.Any]:
    return {
        "commit": {
            "author": {"user": {"login": login} if linked else None},
            "signature": {"isValid": signature} if signature is not None else None,
        },
    }


def commits_page(
    nodes: list[dict[str, typing.Any]],
    *,
    end_cursor: str | None,
    has_next_page: bool,
) -> dict[str, typing.Any]:
    return {
        "repository": {
            "pullRequest": {
                "commits": {
                    "edges": [{"node": n} for n in nodes],
                    "pageInfo": {
                        "endCursor": end_cursor,
                        "hasNextPage": has_next_page,
                    },
                },
            },
        },
    }


@dataclasses.dataclass
class CommitsServer:
    """Serve the commits of a single pull request, page by page."""

    commits: list[dict[str, typing.Any]]
    received_variables: list[dict[str, typing.Any]] = dataclasses.field(
        init=False,
        default_factory=list,
    )

    def handle(self, request: httpx.Request) -> httpx.Response:
        variables = json.loads(request.content)["variables"]
        self.received_variables.append(variables)

        cursor = variables["endCursor"]
        start = int(cursor) if cursor is not None else 0
        end = min(start + variables["pageSize"], len(self.commits))
        return graphql_response(
            commits_page(
                self.commits[start:end],
                end_cursor=str(end) if end > start else None,
                has_next_page=end < len(self.commits),
            ),
        )
