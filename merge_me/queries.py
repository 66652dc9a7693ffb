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
import types
import typing

from merge_me import exceptions


if typing.TYPE_CHECKING:
    from collections import abc


@dataclasses.dataclass(frozen=True)
class QueryDefinition:
    name: str
    document: str
    # variable name -> GraphQL type, non-null types end with `!`
    variables: typing.Mapping[str, str]

    @property
    def required_variables(self) -> frozenset[str]:
        return frozenset(
            name for name, type_ in self.variables.items() if type_.endswith("!")
        )

    def validate(self, variables: abc.Mapping[str, typing.Any]) -> None:
        missing = sorted(
            name for name in self.required_variables if variables.get(name) is None
        )
        if missing:
            raise exceptions.MissingVariableError(self.name, tuple(missing))


FIND_PULL_REQUESTS_INFO_BY_REFERENCE_NAME = QueryDefinition(
    name="FindPullRequestsInfoByReferenceName",
    document="""
  query FindPullRequestsInfoByReferenceName($repositoryOwner: String!, $repositoryName: String!, $referenceName: String!) {
    repository(owner: $repositoryOwner, name: $repositoryName) {
      pullRequests(headRefName: $referenceName, first: 100, states: OPEN) {
        nodes {
          author {
            login
          }
          commits(last: 1) {
            edges {
              node {
                commit {
                  message
                  messageHeadline
                }
              }
            }
          }
          id
          mergeStateStatus
          mergeable
          merged
          number
          reviews(last: 100) {
            edges {
              node {
                state
              }
            }
          }
          state
          title
        }
      }
    }
  }
""",
    variables=types.MappingProxyType(
        {
            "repositoryOwner": "String!",
            "repositoryName": "String!",
            "referenceName": "String!",
        },
    ),
)

FIND_PULL_REQUEST_INFO_BY_NUMBER = QueryDefinition(
    name="FindPullRequestInfoByNumber",
    document="""
  query FindPullRequestInfoByNumber($repositoryOwner: String!, $repositoryName: String!, $pullRequestNumber: Int!) {
    repository(owner: $repositoryOwner, name: $repositoryName) {
      pullRequest(number: $pullRequestNumber) {
        author {
          login
        }
        commits(last: 1) {
          edges {
            node {
              commit {
                message
                messageHeadline
              }
            }
          }
        }
        id
        mergeStateStatus
        mergeable
        merged
        number
        reviews(last: 100) {
          edges {
            node {
              state
            }
          }
        }
        state
        title
      }
    }
  }
""",
    variables=types.MappingProxyType(
        {
            "repositoryOwner": "String!",
            "repositoryName": "String!",
            "pullRequestNumber": "Int!",
        },
    ),
)

FIND_PULL_REQUEST_COMMITS = QueryDefinition(
    name="FindPullRequestCommits",
    document="""
  query FindPullRequestCommits($repositoryOwner: String!, $repositoryName: String!, $pullRequestNumber: Int!, $pageSize: Int!, $endCursor: String) {
    repository(owner: $repositoryOwner, name: $repositoryName) {
      pullRequest(number: $pullRequestNumber) {
        commits(first: $pageSize, after: $endCursor) {
          edges {
            node {
              commit {
                author {
                  user {
                    login
                  }
                }
                signature {
                  isValid
                }
              }
            }
          }
          pageInfo {
            endCursor
            hasNextPage
          }
        }
      }
    }
  }
""",
    variables=types.MappingProxyType(
        {
            "repositoryOwner": "String!",
            "repositoryName": "String!",
            "pullRequestNumber": "Int!",
            "pageSize": "Int!",
            "endCursor": "String",
        },
    ),
)

CATALOG: typing.Mapping[str, QueryDefinition] = types.MappingProxyType(
    {
        query.name: query
        for query in (
            FIND_PULL_REQUESTS_INFO_BY_REFERENCE_NAME,
            FIND_PULL_REQUEST_INFO_BY_NUMBER,
            FIND_PULL_REQUEST_COMMITS,
        )
    },
)


def get(name: str) -> QueryDefinition:
    try:
        return CATALOG[name]
    except KeyError:
        raise exceptions.UnknownQueryError(name) from None
