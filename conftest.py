import pytest

from shipyard.core.credentials import Credential
from shipyard.core.models import PublishableUnit


@pytest.fixture
def release_units() -> list[PublishableUnit]:
    return [
        PublishableUnit(name="manifest", location="manifest/Cargo.toml"),
        PublishableUnit(name="convert", location="convert/Cargo.toml", dependencies=("manifest",)),
        PublishableUnit(
            name="runtime",
            location="runtime/Cargo.toml",
            dependencies=("manifest", "convert"),
            verify=False,
        ),
    ]


@pytest.fixture
def token() -> Credential:
    return Credential(env_name="CARGO_REGISTRY_TOKEN", value="cio-secret-token")
