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
from merge_me import utils


if typing.TYPE_CHECKING:
    from collections import abc

    from merge_me import github_types
    from merge_me import queries
    from merge_me import transport as transport_mod


ConnectionSelector = typing.Callable[
    [dict[str, typing.Any]],
    "github_types.Connection | None",
]


class ConnectionNotFoundError(exceptions.MergeMeError):
    pass


async def paginate(
    transport: transport_mod.Transport,
    query: queries.QueryDefinition,
    base_variables: abc.Mapping[str, typing.Any],
    connection_selector: ConnectionSelector,
    *,
    page_size: int | None = None,
) -> abc.AsyncGenerator[typing.Any, None]:
    """Iterate over every edge of a GraphQL connection.

    A page is requested only once the consumer has exhausted the previous
    one. Edges are yielded in the order returned by the server. Iteration
    stops when `pageInfo.hasNextPage` is false, an empty page does not stop
    it.

    Raises `ConnectionNotFoundError` when `connection_selector` returns None,
    i.e. the object owning the connection does not exist.
    """
    if page_size is None:
        page_size = transport.config.page_size

    end_cursor: str | None = None
    page = 0
    while True:
        page += 1
        data = await transport.execute(
            query,
            {**base_variables, "pageSize": page_size, "endCursor": end_cursor},
        )
        connection = connection_selector(data)
        if connection is None:
            msg = f"no connection found in {query.name} response"
            raise ConnectionNotFoundError(msg)

        try:
            edges = connection["edges"] or []
            page_info = connection["pageInfo"]
            has_next_page = page_info["hasNextPage"]
        except (KeyError, TypeError) as e:
            msg = f"invalid connection in {query.name} response: {e!r}"
            raise exceptions.MalformedResponseError(msg) from e

        if not isinstance(edges, list):
            msg = f"`edges` is not a list: {edges!r}"
            raise exceptions.MalformedResponseError(msg)
        if not isinstance(has_next_page, bool):
            msg = f"`pageInfo.hasNextPage` is not a boolean: {has_next_page!r}"
            raise exceptions.MalformedResponseError(msg)
        next_cursor = page_info.get("endCursor")
        if next_cursor is not None and not isinstance(next_cursor, str):
            msg = f"`pageInfo.endCursor` is not a string: {next_cursor!r}"
            raise exceptions.MalformedResponseError(msg)
        if has_next_page and edges and next_cursor in {None, end_cursor}:
            # the next request would return this very page again
            msg = f"{query.name}: page {page} does not move the cursor past {end_cursor!r}"
            raise exceptions.MalformedResponseError(msg)

        utils.debug(
            f"{query.name}: page {page} has {len(edges)} edge(s), hasNextPage={has_next_page}",
        )

        for edge in edges:
            yield edge

        if not has_next_page:
            return

        # An empty page can come without a cursor, keep the last one
        if next_cursor is not None:
            end_cursor = next_cursor
