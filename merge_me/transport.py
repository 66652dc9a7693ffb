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

import asyncio
import contextlib
import dataclasses
import time
import typing

import httpx
import tenacity

from merge_me import exceptions
from merge_me import utils


if typing.TYPE_CHECKING:
    from collections import abc

    from merge_me import queries
    from merge_me.config import TransportConfig


RATE_LIMIT_STATUS_CODES = {403, 429}
RATE_LIMITED_ERROR_TYPE = "RATE_LIMITED"


@dataclasses.dataclass
class RateLimitedError(Exception):
    wait: float
    message: str


def _is_transient(exc: BaseException) -> bool:
    if isinstance(exc, httpx.TransportError):
        return True
    return (
        isinstance(exc, httpx.HTTPStatusError)
        and exc.response.status_code >= 500  # noqa: PLR2004
    )


def _wait_for_rate_limit_reset(retry_state: tenacity.RetryCallState) -> float:
    outcome = typing.cast("tenacity.Future", retry_state.outcome)
    exc = typing.cast("RateLimitedError", outcome.exception())
    return exc.wait


def _log_retry(retry_state: tenacity.RetryCallState) -> None:
    if retry_state.outcome is None or retry_state.next_action is None:
        return
    utils.debug(
        f"attempt {retry_state.attempt_number} failed with "
        f"{retry_state.outcome.exception()!r}, sleeping {retry_state.next_action.sleep:.2f} s",
    )


def _json_or_none(response: httpx.Response) -> typing.Any:  # noqa: ANN401
    try:
        return response.json()
    except ValueError:
        # not JSON, or not UTF-8
        return None


def _error_messages(errors: list[dict[str, typing.Any]]) -> list[str]:
    return [str(e.get("message") or e) for e in errors]


def _is_rate_limit_error(error: dict[str, typing.Any]) -> bool:
    if error.get("type") == RATE_LIMITED_ERROR_TYPE:
        return True
    return "rate limit" in str(error.get("message") or "").lower()


class Transport:
    """Execute GraphQL queries against the GitHub API.

    The transport holds nothing but its configuration, a new HTTP client is
    used for each request, so one instance can be shared by concurrent tasks.

    Network failures and 5xx answers are retried with exponential backoff and
    jitter. Rate limited answers are retried after the reset delay announced
    by GitHub. Both retry budgets are independent.
    """

    def __init__(
        self,
        config: TransportConfig,
        *,
        sleep: abc.Callable[[float], abc.Awaitable[None]] = asyncio.sleep,
        clock: abc.Callable[[], float] = time.time,
    ) -> None:
        self.config = config
        self._sleep = sleep
        self._clock = clock

    async def execute(
        self,
        query: queries.QueryDefinition,
        variables: abc.Mapping[str, typing.Any],
    ) -> dict[str, typing.Any]:
        query.validate(variables)
        payload = {"query": query.document, "variables": dict(variables)}

        retrying = tenacity.AsyncRetrying(
            sleep=self._sleep,
            wait=_wait_for_rate_limit_reset,
            stop=tenacity.stop_after_attempt(self.config.max_rate_limit_retries + 1),
            retry=tenacity.retry_if_exception_type(RateLimitedError),
            before_sleep=_log_retry,
        )
        try:
            return await retrying(self._execute_once, query, payload)
        except tenacity.RetryError as e:
            raise exceptions.RateLimitExceededError(
                e.last_attempt.attempt_number,
            ) from e.last_attempt.exception()

    async def _execute_once(
        self,
        query: queries.QueryDefinition,
        payload: dict[str, typing.Any],
    ) -> dict[str, typing.Any]:
        response = await self._post(query, payload)
        return self._parse_response(response)

    async def _post(
        self,
        query: queries.QueryDefinition,
        payload: dict[str, typing.Any],
    ) -> httpx.Response:
        retrying = tenacity.AsyncRetrying(
            sleep=self._sleep,
            wait=tenacity.wait_exponential(
                multiplier=self.config.backoff_multiplier,
                max=self.config.backoff_max,
            )
            + tenacity.wait_random(0, self.config.backoff_jitter),
            stop=tenacity.stop_after_attempt(self.config.max_transport_retries + 1),
            retry=tenacity.retry_if_exception(_is_transient),
            before_sleep=_log_retry,
        )
        try:
            return await retrying(self._post_once, query, payload)
        except tenacity.RetryError as e:
            raise exceptions.TransportExhaustedError(
                e.last_attempt.attempt_number,
            ) from e.last_attempt.exception()

    async def _post_once(
        self,
        query: queries.QueryDefinition,
        payload: dict[str, typing.Any],
    ) -> httpx.Response:
        utils.debug(f"executing {query.name} with {payload['variables']}")
        async with utils.get_github_http_client(
            self.config.token,
            self.config.timeout,
        ) as client:
            response = await client.post(self.config.graphql_url, json=payload)

        if response.status_code >= 500:  # noqa: PLR2004
            response.raise_for_status()
        return response

    def _parse_response(self, response: httpx.Response) -> dict[str, typing.Any]:
        body = _json_or_none(response)

        if response.status_code >= 400:  # noqa: PLR2004
            message = (
                str(body.get("message"))
                if isinstance(body, dict) and body.get("message")
                else response.text
            )
            if response.status_code in RATE_LIMIT_STATUS_CODES and (
                "rate limit" in message.lower()
                or "retry-after" in response.headers
                or response.headers.get("x-ratelimit-remaining") == "0"
            ):
                raise RateLimitedError(self._rate_limit_wait(response.headers), message)
            raise exceptions.GraphQLError(
                [f"HTTP {response.status_code}: {message}"],
            )

        if not isinstance(body, dict):
            msg = f"expected a JSON object, got: {response.text[:200]!r}"
            raise exceptions.MalformedResponseError(msg)

        errors = body.get("errors")
        if errors:
            if not isinstance(errors, list):
                errors = [errors]
            errors = [e if isinstance(e, dict) else {"message": str(e)} for e in errors]
            rate_limit_errors = [e for e in errors if _is_rate_limit_error(e)]
            if rate_limit_errors:
                raise RateLimitedError(
                    self._rate_limit_wait(response.headers),
                    "; ".join(_error_messages(rate_limit_errors)),
                )
            raise exceptions.GraphQLError(_error_messages(errors), errors)

        data = body.get("data")
        if not isinstance(data, dict):
            msg = "`data` is missing from the response"
            raise exceptions.MalformedResponseError(msg)
        return data

    def _rate_limit_wait(self, headers: httpx.Headers) -> float:
        wait: float | None = None

        retry_after = headers.get("retry-after")
        if retry_after is not None:
            with contextlib.suppress(ValueError):
                wait = float(retry_after)

        if wait is None:
            reset = headers.get("x-ratelimit-reset")
            if reset is not None:
                with contextlib.suppress(ValueError):
                    wait = max(0.0, float(reset) - self._clock())

        if wait is None:
            wait = self.config.rate_limit_default_wait

        return min(wait, self.config.rate_limit_max_wait)
