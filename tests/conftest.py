import pytest


@pytest.fixture
def anyio_backend() -> str:
    # The response cache and service fan-out are built on asyncio.
    return "asyncio"
