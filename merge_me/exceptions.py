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


class MergeMeError(Exception):
    pass


@dataclasses.dataclass
class UnknownQueryError(MergeMeError):
    name: str

    def __str__(self) -> str:
        return f"unknown GraphQL query `{self.name}`"


@dataclasses.dataclass
class MissingVariableError(MergeMeError):
    query: str
    variables: tuple[str, ...]

    def __str__(self) -> str:
        return f"query `{self.query}` is missing required variable(s): {', '.join(self.variables)}"


@dataclasses.dataclass
class TransportExhaustedError(MergeMeError):
    attempts: int

    def __str__(self) -> str:
        return f"GraphQL request failed after {self.attempts} attempt(s)"


@dataclasses.dataclass
class RateLimitExceededError(MergeMeError):
    attempts: int

    def __str__(self) -> str:
        return f"GitHub rate limit still exceeded after {self.attempts} attempt(s)"


@dataclasses.dataclass
class GraphQLError(MergeMeError):
    messages: list[str]
    errors: list[dict[str, typing.Any]] = dataclasses.field(default_factory=list)

    def __str__(self) -> str:
        return "GraphQL error: " + "; ".join(self.messages)

    @property
    def types(self) -> set[str]:
        return {e["type"] for e in self.errors if isinstance(e.get("type"), str)}


@dataclasses.dataclass
class NotFoundError(MergeMeError):
    repository_owner: str
    repository_name: str
    pull_request_number: int

    def __str__(self) -> str:
        return f"pull request {self.repository_owner}/{self.repository_name}#{self.pull_request_number} not found"


@dataclasses.dataclass
class UnknownEnumValueError(MergeMeError):
    field: str
    value: typing.Any
    allowed: tuple[str, ...]

    def __str__(self) -> str:
        return f"unknown value {self.value!r} for `{self.field}`, expected one of: {', '.join(self.allowed)}"


@dataclasses.dataclass
class MalformedResponseError(MergeMeError):
    details: str

    def __str__(self) -> str:
        return f"malformed GraphQL response: {self.details}"
