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
import typing

import pytest

from merge_me import config as config_mod
from merge_me import transport as transport_mod
from merge_me import utils
from merge_me.tests import utils as test_utils


@pytest.fixture(autouse=True)
def _unset_github_env(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.delenv("GITHUB_TOKEN", raising=False)
    monkeypatch.delenv("GITHUB_GRAPHQL_URL", raising=False)


@pytest.fixture(autouse=True)
def _reset_debug() -> typing.Generator[None, None, None]:
    yield
    utils.set_debug(False)


@pytest.fixture
def config() -> config_mod.TransportConfig:
    # No jitter, so backoff delays are predictable
    return config_mod.TransportConfig(token="secret-token", backoff_jitter=0)


@pytest.fixture
def fake_sleep() -> test_utils.FakeSleep:
    return test_utils.FakeSleep()


@pytest.fixture
def transport(
    config: config_mod.TransportConfig,
    fake_sleep: test_utils.FakeSleep,
) -> transport_mod.Transport:
    return transport_mod.Transport(
        config,
        sleep=fake_sleep,
        clock=lambda: test_utils.NOW,
    )
