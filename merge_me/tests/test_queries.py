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
import pytest

from merge_me import exceptions
from merge_me import queries


@pytest.mark.parametrize(
    "name",
    [
        "FindPullRequestsInfoByReferenceName",
        "FindPullRequestInfoByNumber",
        "FindPullRequestCommits",
    ],
)
def test_get_registered_query(name: str) -> None:
    query = queries.get(name)

    assert query.name == name
    assert f"query {name}(" in query.document
    for variable, type_ in query.variables.items():
        assert f"${variable}: {type_}" in query.document


def test_get_unknown_query() -> None:
    with pytest.raises(exceptions.UnknownQueryError) as exc_info:
        queries.get("FindEverything")

    assert exc_info.value.name == "FindEverything"


def test_catalog_is_read_only() -> None:
    with pytest.raises(TypeError):
        queries.CATALOG["FindEverything"] = queries.FIND_PULL_REQUEST_COMMITS  # type: ignore[index]


def test_required_variables() -> None:
    assert queries.FIND_PULL_REQUEST_COMMITS.required_variables == {
        "repositoryOwner",
        "repositoryName",
        "pullRequestNumber",
        "pageSize",
    }


def test_validate_accepts_missing_optional_variable() -> None:
    queries.FIND_PULL_REQUEST_COMMITS.validate(
        {
            "repositoryOwner": "ridedott",
            "repositoryName": "merge-me-action",
            "pullRequestNumber": 1,
            "pageSize": 10,
        },
    )


def test_validate_rejects_missing_required_variable() -> None:
    with pytest.raises(exceptions.MissingVariableError) as exc_info:
        queries.FIND_PULL_REQUESTS_INFO_BY_REFERENCE_NAME.validate(
            {"repositoryOwner": "ridedott", "repositoryName": "merge-me-action"},
        )

    assert exc_info.value.query == "FindPullRequestsInfoByReferenceName"
    assert exc_info.value.variables == ("referenceName",)
    assert "referenceName" in str(exc_info.value)
