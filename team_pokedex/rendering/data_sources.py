import json
import re
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, List, Optional, Sequence, Union
from urllib.parse import urljoin

import httpx
from loguru import logger
from pydantic import TypeAdapter, ValidationError

from team_pokedex.clients.base_client import ApiClientError, BaseApiClient
from team_pokedex.models.enums import RuntimeEnvironment
from team_pokedex.models.team import TeamRecord

DATASET_FILENAME = "data.json"
NO_CACHE_HEADERS = {"Cache-Control": "no-store", "Pragma": "no-cache"}

_SIDECAR_RE = re.compile(
    r"^\s*window\.(?P<name>[A-Za-z_$][A-Za-z0-9_$]*)\s*=\s*(?P<payload>.*?);?\s*$",
    re.DOTALL,
)
_RECORDS_ADAPTER = TypeAdapter(List[TeamRecord])


class DataSourceError(Exception):
    """Raised internally when a dataset cannot be loaded or is malformed."""

    pass


def validate_records(payload: Any) -> List[TeamRecord]:
    if not isinstance(payload, list):
        raise DataSourceError(
            f"Dataset must be a JSON array, got {type(payload).__name__}"
        )
    try:
        return _RECORDS_ADAPTER.validate_python(payload)
    except ValidationError as e:
        raise DataSourceError(f"Dataset contains invalid records: {e}") from e


def parse_sidecar(text: str) -> Any:
    """Extracts the JSON payload from ``window.NAME = [...];``."""
    match = _SIDECAR_RE.match(text)
    if not match:
        raise DataSourceError("Sidecar is not a window global assignment")
    try:
        return json.loads(match.group("payload"))
    except json.JSONDecodeError as e:
        raise DataSourceError(f"Sidecar payload is not valid JSON: {e}") from e


class DataSource(ABC):
    """Strategy for getting the team dataset into the renderer.

    Implementations never raise: any failure is logged and an empty list is
    returned so the page still renders.
    """

    @abstractmethod
    async def load(self) -> List[TeamRecord]:
        pass


class EmbeddedDataSource(DataSource):
    """Dataset available without any fetch: in memory or in the JS sidecar."""

    def __init__(
        self,
        records: Optional[Sequence[Any]] = None,
        sidecar_path: Optional[Union[str, Path]] = None,
    ):
        self.records = records
        self.sidecar_path = Path(sidecar_path) if sidecar_path else None

    async def load(self) -> List[TeamRecord]:
        try:
            if self.records is not None:
                return validate_records(
                    [
                        r.model_dump() if isinstance(r, TeamRecord) else r
                        for r in self.records
                    ]
                )
            if self.sidecar_path is None:
                raise DataSourceError(
                    "No embedded data found. Make sure the data.js sidecar was generated."
                )
            text = self.sidecar_path.read_text(encoding="utf-8")
            return validate_records(parse_sidecar(text))
        except (DataSourceError, OSError, UnicodeDecodeError) as e:
            logger.error(f"Could not load embedded team data: {e}")
            return []


class DatasetClient(BaseApiClient):
    service_name: str = "team dataset"


class HttpDataSource(DataSource):
    """Fetches the team dataset over HTTP, bypassing caches."""

    def __init__(
        self,
        data_url: str,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.url = data_url
        self.transport = transport

    @classmethod
    def next_to_page(
        cls, page_url: str, transport: Optional[httpx.AsyncBaseTransport] = None
    ) -> "HttpDataSource":
        """Source for the data.json served alongside ``page_url``."""
        return cls(urljoin(page_url, DATASET_FILENAME), transport=transport)

    async def load(self) -> List[TeamRecord]:
        try:
            async with DatasetClient(transport=self.transport) as client:
                payload = await client.get_json(self.url, headers=NO_CACHE_HEADERS)
            return validate_records(payload)
        except (ApiClientError, DataSourceError) as e:
            logger.error(f"Could not load {self.url}: {e}")
            return []


def select_data_source(
    environment: RuntimeEnvironment,
    *,
    records: Optional[Sequence[Any]] = None,
    sidecar_path: Optional[Union[str, Path]] = None,
    data_url: Optional[str] = None,
    page_url: Optional[str] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> DataSource:
    """Picks the loading strategy for the given runtime environment.

    Over HTTP the dataset is either addressed directly (``data_url``) or
    looked up as the data.json next to ``page_url``.
    """
    if environment == RuntimeEnvironment.LOCAL_FILE:
        return EmbeddedDataSource(records=records, sidecar_path=sidecar_path)
    if data_url:
        return HttpDataSource(data_url, transport=transport)
    if page_url:
        return HttpDataSource.next_to_page(page_url, transport=transport)
    raise ValueError("An HTTP data source needs a dataset or page URL")
