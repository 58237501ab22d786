# Marketsync Test Fixtures
# Pytest fixtures for marketsync tests

import tempfile
import uuid
from collections.abc import Callable, Generator
from io import StringIO
from pathlib import Path
from typing import Any, Optional
from uuid import UUID

import pytest
import yaml
from rich.console import Console as RichConsole

from marketsync.config.loader import CONFIG_ENV_VAR
from marketsync.logger import MarketLogger
from marketsync.remote.client import RemoteClient, RemoteRequest, RemoteResponse, ResponseCallback
from marketsync.sync.engine import SyncEngine


class FakeRemoteClient(RemoteClient):
    """Records submitted requests; the test delivers replies explicitly."""

    def __init__(self) -> None:
        self.accept = True
        self.sent: list[RemoteRequest] = []
        self._outstanding: list[tuple[RemoteRequest, ResponseCallback]] = []

    def submit(self, request: RemoteRequest, on_response: ResponseCallback) -> bool:
        if not self.accept:
            return False
        self.sent.append(request)
        self._outstanding.append((request, on_response))
        return True

    @property
    def outstanding(self) -> int:
        return len(self._outstanding)

    def respond(
        self,
        status: int = 200,
        body: Optional[dict[str, Any]] = None,
        *,
        reason: str = "",
        index: int = 0,
    ) -> RemoteRequest:
        """Deliver a reply to an outstanding request, oldest first by default."""
        request, on_response = self._outstanding.pop(index)
        on_response(RemoteResponse(status=status, body=body or {}, reason=reason))
        return request


class FakeFolderTree:
    """Inventory containment built from child -> parent links."""

    def __init__(self, parents: dict[UUID, UUID]):
        self.parents = parents

    def is_descendant_of(self, obj_id: UUID, ancestor_id: UUID) -> bool:
        parent = self.parents.get(obj_id)
        while parent is not None:
            if parent == ancestor_id:
                return True
            parent = self.parents.get(parent)
        return False


def listing_reply(
    folder_id: UUID,
    listing_id: Optional[int] = 42,
    version_id: Optional[UUID] = None,
    is_listed: bool = False,
    edit_url: Optional[str] = None,
) -> dict[str, Any]:
    """Build a listings API reply body describing one listing."""
    listing: dict[str, Any] = {
        "is_listed": is_listed,
        "inventory_info": {
            "listing_folder_id": str(folder_id),
            "version_folder_id": str(version_id) if version_id else "00000000-0000-0000-0000-000000000000",
        },
    }
    if listing_id is not None:
        listing["id"] = listing_id
    if edit_url is not None:
        listing["edit_url"] = edit_url
    return {"listings": [listing]}


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def temp_home(temp_dir: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Create a temporary home directory."""
    home = temp_dir / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
    return home


@pytest.fixture
def sample_config() -> dict:
    """Create sample configuration dict."""
    return {
        "remote": {
            "base_url": "https://market.example.com/api/1/agent",
            "import_url": "https://market.example.com/api/1/viewer/agent",
        },
        "importer": {"auto_trigger_import": True, "poll_interval": 2.5},
        "output": {"verbose": False, "colored": False},
    }


@pytest.fixture
def config_file(temp_home: Path, sample_config: dict) -> Path:
    """Create a configuration file."""
    config_dir = temp_home / ".config" / "marketsync"
    config_dir.mkdir(parents=True)
    config_path = config_dir / "config.yaml"

    with open(config_path, "w", encoding="utf-8") as f:
        yaml.dump(sample_config, f, default_flow_style=False)

    return config_path


@pytest.fixture
def log_output() -> StringIO:
    return StringIO()


@pytest.fixture
def quiet_logger(log_output: StringIO) -> MarketLogger:
    """Verbose logger writing into a buffer."""
    return MarketLogger(RichConsole(file=log_output, no_color=True, width=200), verbose=True)


@pytest.fixture
def client() -> FakeRemoteClient:
    return FakeRemoteClient()


@pytest.fixture
def engine(client: FakeRemoteClient, quiet_logger: MarketLogger) -> Generator[SyncEngine, None, None]:
    engine = SyncEngine(client, logger=quiet_logger)
    yield engine
    engine.close()


@pytest.fixture
def make_listing(engine: SyncEngine, client: FakeRemoteClient) -> Callable[..., UUID]:
    """Create a listing through the engine and confirm it with a server reply."""

    def _make(
        folder_id: Optional[UUID] = None,
        listing_id: Optional[int] = 42,
        version_id: Optional[UUID] = None,
        is_listed: bool = False,
    ) -> UUID:
        folder_id = folder_id or uuid.uuid4()
        assert engine.create_listing(folder_id)
        client.respond(201, listing_reply(folder_id, listing_id, version_id, is_listed))
        engine.check_dirty_count()
        return folder_id

    return _make
