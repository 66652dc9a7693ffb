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

import os
import typing

import pydantic


DEFAULT_GRAPHQL_URL = "https://api.github.com/graphql"


class TransportConfig(pydantic.BaseModel):
    model_config = pydantic.ConfigDict(frozen=True, extra="forbid")

    token: str = pydantic.Field(repr=False)
    graphql_url: str = DEFAULT_GRAPHQL_URL
    # per attempt, in seconds
    timeout: float = pydantic.Field(default=10.0, gt=0)

    max_transport_retries: int = pydantic.Field(default=3, ge=0)
    backoff_multiplier: float = pydantic.Field(default=0.5, gt=0)
    backoff_max: float = pydantic.Field(default=30.0, gt=0)
    backoff_jitter: float = pydantic.Field(default=1.0, ge=0)

    max_rate_limit_retries: int = pydantic.Field(default=3, ge=0)
    rate_limit_default_wait: float = pydantic.Field(default=60.0, ge=0)
    rate_limit_max_wait: float = pydantic.Field(default=900.0, ge=0)

    page_size: int = pydantic.Field(default=50, ge=1, le=100)

    @classmethod
    def from_env(cls, **overrides: typing.Any) -> TransportConfig:  # noqa: ANN401
        values: dict[str, typing.Any] = {}
        token = os.environ.get("GITHUB_TOKEN")
        if token:
            values["token"] = token
        graphql_url = os.environ.get("GITHUB_GRAPHQL_URL")
        if graphql_url:
            values["graphql_url"] = graphql_url
        values.update(overrides)
        return cls(**values)
