# site_deploy/storage/base.py
"""Deployment orchestrator abstract base class"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, Coroutine, Dict, List, Optional, Sequence, TypeVar

import httpx

from ..api.exceptions import (
    ConfigurationError,
    ConflictRecoverable,
    FatalProviderError,
    TransientNetworkError,
)
from ..constants import CNAME_FILE, DEFAULT_FILE_MODE, Provider
from ..models.config import UploadConfig
from ..models.events import DeployEvent, EventKind, EventSink
from ..models.patch import Patch
from ..models.project import ProjectAnalysis
from ..utils.async_utils import run_in_batches

logger = logging.getLogger(__name__)

T = TypeVar('T')
R = TypeVar('R')


@dataclass(frozen=True)
class PreparedFile:
    """File content ready to be uploaded"""
    path: str
    content: bytes
    mode: str = DEFAULT_FILE_MODE


def _error_message(response: httpx.Response) -> str:
    try:
        data = response.json()
    except ValueError:
        return response.reason_phrase or f"HTTP {response.status_code}"

    if isinstance(data, dict):
        error = data.get("error")
        if isinstance(error, dict) and error.get("message"):
            return error["message"]
        if data.get("message"):
            return data["message"]
    return response.reason_phrase or f"HTTP {response.status_code}"


class Orchestrator(ABC):
    """Publishes an analyzed project to a hosting provider.

    Every deployment reports progress exclusively through the event sink
    and ends with either a success event or exactly one error event.
    An instance holds per-deployment state; run concurrent deployments on
    separate instances.
    """

    provider: Provider
    default_api_url: str = ""

    def __init__(self,
                 config: Optional[UploadConfig] = None,
                 api_url: Optional[str] = None,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        """
        Initialize orchestrator

        Args:
            config: Upload behaviour (batch size, retries, delays)
            api_url: Provider API base URL override
            transport: httpx transport override, used by tests
        """
        self.config = config or UploadConfig()
        self.api_url = (api_url or self.default_api_url).rstrip("/")
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None
        self._sink: EventSink = lambda event: None

    async def deploy(self,
                     credential: str,
                     target_id: str,
                     analysis: ProjectAnalysis,
                     patches: Optional[Sequence[Patch]] = None,
                     custom_domain: Optional[str] = None,
                     sink: Optional[EventSink] = None,
                     *,
                     description: Optional[str] = None,
                     private: bool = False) -> str:
        """
        Publish a project

        Args:
            credential: Provider access token
            target_id: Repository name or site ID
            analysis: Analyzed project
            patches: Patches that override or extend the manifest
            custom_domain: Custom domain to attach, if supported
            sink: Callback receiving DeployEvent objects
            description: Free-text description of the target
            private: Create the target with restricted visibility

        Returns:
            Public URL of the deployment

        Raises:
            ConfigurationError: If credential or target is missing
            DeployError: If any provider step fails
        """
        self._sink = sink if sink is not None else (lambda event: None)

        try:
            if not credential:
                raise ConfigurationError(f"An access token is required to deploy to {self.provider.value}")
            if not target_id:
                raise ConfigurationError("A target name is required")

            async with self._create_client(credential) as client:
                self._client = client
                return await self._publish(
                    target_id,
                    analysis,
                    list(patches or []),
                    custom_domain,
                    description=description,
                    private=private,
                )
        except Exception as e:
            logger.error(f"Deployment to {self.provider.value} failed: {e}")
            self._emit("Deployment failed", EventKind.ERROR, details=str(e) or "Unknown error occurred")
            raise
        finally:
            self._client = None

    @abstractmethod
    async def _publish(self,
                       target_id: str,
                       analysis: ProjectAnalysis,
                       patches: List[Patch],
                       custom_domain: Optional[str],
                       description: Optional[str] = None,
                       private: bool = False) -> str:
        """Provider-specific publish protocol; returns the public URL"""
        pass

    @abstractmethod
    def _auth_headers(self, credential: str) -> Dict[str, str]:
        """Headers that authenticate every request"""
        pass

    def _create_client(self, credential: str) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.api_url,
            headers=self._auth_headers(credential),
            timeout=self.config.timeout,
            transport=self._transport,
        )

    def _emit(self,
              step: str,
              kind: EventKind = EventKind.INFO,
              details: Optional[str] = None,
              progress: Optional[int] = None) -> None:
        self._sink(DeployEvent(step=step, kind=kind, details=details, progress=progress))

    async def _request(self,
                       method: str,
                       url: str,
                       *,
                       step: str,
                       conflict_statuses: Sequence[int] = (),
                       **kwargs) -> httpx.Response:
        """
        Send a request and map failures onto the error taxonomy

        Args:
            method: HTTP method
            url: Path relative to the API base, or an absolute URL
            step: Human-readable step name used in error messages
            conflict_statuses: Statuses that mean "already exists"
            **kwargs: Passed to httpx

        Returns:
            Successful response

        Raises:
            ConflictRecoverable: On a conflict status
            TransientNetworkError: On connection errors, 429 and 5xx
            FatalProviderError: On any other non-2xx response
        """
        try:
            response = await self._client.request(method, url, **kwargs)
        except httpx.TransportError as e:
            raise TransientNetworkError(f"{step}: {e}") from e

        status = response.status_code
        if status in conflict_statuses:
            raise ConflictRecoverable(f"{step}: {_error_message(response)}", status)
        if status == 429 or status >= 500:
            raise TransientNetworkError(f"{step}: {_error_message(response)}", status)
        if response.is_error:
            raise FatalProviderError(f"{step}: {_error_message(response)}", status)

        logger.debug(f"{method} {url} -> {status}")
        return response

    def prepare_files(self,
                      analysis: ProjectAnalysis,
                      patches: Sequence[Patch],
                      custom_domain: Optional[str] = None) -> List[PreparedFile]:
        """
        Materialize the final file set

        Manifest files come first; a patch replaces the file at its path or
        is appended; the custom-domain marker is added last.

        Args:
            analysis: Analyzed project
            patches: Patches to overlay
            custom_domain: Domain written to the CNAME marker

        Returns:
            Files with unique paths, in upload order
        """
        self._emit("Preparing files from analysis...")
        files: Dict[str, bytes] = {f.path: f.read_bytes() for f in analysis.manifest}

        if patches:
            self._emit(f"Applying {len(patches)} auto-fixes...")
            for patch in patches:
                files[patch.path] = patch.to_bytes()

        if custom_domain:
            self._emit(f"Adding CNAME for {custom_domain}...")
            files[CNAME_FILE] = custom_domain.encode("utf-8")

        self._emit(f"Prepared {len(files)} files for upload.")
        return [PreparedFile(path=path, content=content) for path, content in files.items()]

    async def _upload_in_batches(self,
                                 items: Sequence[T],
                                 processor: Callable[[T], Coroutine[Any, Any, R]]) -> List[R]:
        """
        Upload items in fixed-width batches with per-item retry

        A progress event follows every completed batch.

        Raises:
            FatalProviderError: When an item exhausts its attempts
        """
        def report(completed: int, total: int) -> None:
            self._emit(
                f"Uploaded {completed}/{total} files...",
                progress=int(completed * 100 / total + 0.5),
            )

        try:
            return await run_in_batches(
                items,
                processor,
                batch_size=self.config.batch_size,
                max_attempts=self.config.max_attempts,
                retry_delay=self.config.retry_delay,
                retry_on=(TransientNetworkError,),
                on_batch=report,
            )
        except TransientNetworkError as e:
            raise FatalProviderError(
                f"Upload failed after {self.config.max_attempts} attempts: {e}",
                e.status_code,
            ) from e
