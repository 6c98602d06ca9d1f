"""Shared fixtures for the widget tests."""

from __future__ import annotations

import sys
from pathlib import Path


PROJECT_ROOT = Path(__file__).resolve().parents[2]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))


import pytest

from aws_config_widgets.config import Settings
from aws_config_widgets.sources import ConfigRuleSource
from aws_config_widgets.tests.fakes import FakeConfigClient, FakeStsClient


@pytest.fixture
def config_client() -> FakeConfigClient:
    return FakeConfigClient()


@pytest.fixture
def sts_client() -> FakeStsClient:
    return FakeStsClient()


@pytest.fixture
def settings() -> Settings:
    return Settings()


@pytest.fixture
def source(config_client: FakeConfigClient, sts_client: FakeStsClient, settings: Settings) -> ConfigRuleSource:
    return ConfigRuleSource(settings=settings, config_client=config_client, sts_client=sts_client)


@pytest.fixture
def source_factory(config_client: FakeConfigClient, sts_client: FakeStsClient):
    """Return a stand-in for :meth:`ConfigRuleSource.for_region` recording regions."""

    regions = []

    def factory(region, settings):
        regions.append(region)
        return ConfigRuleSource(settings=settings, config_client=config_client, sts_client=sts_client)

    factory.regions = regions
    return factory
