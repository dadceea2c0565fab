# site_deploy/storage/firebase.py
"""Firebase Hosting deployment through the content-addressed REST API"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from ..api.exceptions import FatalProviderError
from ..constants import FIREBASE_API_BASE, FIREBASE_CACHE_CONTROL, Provider
from ..models.events import EventKind
from ..models.patch import Patch
from ..models.project import ProjectAnalysis
from ..utils.hash_utils import FileHashIndex
from .base import Orchestrator

logger = logging.getLogger(__name__)


@dataclass
class UploadTargets:
    """Upload locations returned by populateFiles"""
    by_hash: Dict[str, str] = field(default_factory=dict)
    base_url: Optional[str] = None

    def url_for(self, digest: str) -> str:
        if digest in self.by_hash:
            return self.by_hash[digest]
        if self.base_url:
            return f"{self.base_url.rstrip('/')}/{digest}"
        raise FatalProviderError(f"No upload URL returned for hash {digest}")


class FirebaseHostingOrchestrator(Orchestrator):
    """Publish a project as a new Firebase Hosting version.

    Files are registered by SHA-256 hash and only the hashes the service
    does not hold yet are uploaded. The version is then finalized and
    released.
    """

    provider = Provider.FIREBASE
    default_api_url = FIREBASE_API_BASE

    def _auth_headers(self, credential: str) -> Dict[str, str]:
        return {"Authorization": f"Bearer {credential}"}

    async def _publish(self,
                       target_id: str,
                       analysis: ProjectAnalysis,
                       patches: List[Patch],
                       custom_domain: Optional[str],
                       description: Optional[str] = None,
                       private: bool = False) -> str:
        if custom_domain:
            logger.debug(f"Ignoring custom domain {custom_domain}; attach it to site {target_id} in the console")

        version_name = await self._create_version(target_id)

        files = self.prepare_files(analysis, patches)
        self._emit("Calculating file hashes...")
        index = FileHashIndex.build((f.path, f.content) for f in files)

        self._emit("Registering files...")
        required, upload_targets = await self._populate_files(version_name, index)

        if required:
            self._emit(f"Uploading {len(required)} new files...")

            async def upload(digest: str) -> None:
                await self._request(
                    "POST", upload_targets.url_for(digest),
                    step=f"Failed to upload file with hash {digest}",
                    content=index.content_for(digest),
                    headers={"Content-Type": "application/octet-stream"},
                )

            await self._upload_in_batches(required, upload)
        else:
            self._emit("All files already exist on the hosting service.")

        self._emit("Finalizing version...")
        await self._request(
            "PATCH", f"/{version_name}",
            step="Failed to finalize version",
            params={"update_mask": "status"},
            json={"status": "FINALIZED"},
        )

        self._emit("Releasing to live...")
        await self._request(
            "POST", f"/sites/{target_id}/releases",
            step="Failed to release",
            params={"versionName": version_name},
        )

        url = f"https://{target_id}.web.app"
        self._emit("Deployment complete!", EventKind.SUCCESS, details=url)
        return url

    async def _create_version(self, site_id: str) -> str:
        """Create a version; returns its resource name sites/{site}/versions/{id}"""
        self._emit("Creating new version...")
        response = await self._request(
            "POST", f"/sites/{site_id}/versions",
            step="Failed to create version",
            json={
                "config": {
                    "headers": [
                        {"glob": "**", "headers": {"Cache-Control": FIREBASE_CACHE_CONTROL}},
                    ],
                },
            },
        )
        version_name = response.json()["name"]
        self._emit(f"Version created: {version_name.rsplit('/', 1)[-1]}", EventKind.SUCCESS)
        return version_name

    async def _populate_files(self,
                              version_name: str,
                              index: FileHashIndex) -> Tuple[List[str], UploadTargets]:
        """
        Register the path to hash map

        Returns:
            Tuple of (hashes that must be uploaded, where to upload them)
        """
        response = await self._request(
            "POST", f"/{version_name}:populateFiles",
            step="Failed to populate files",
            json={"files": {f"/{path}": digest for path, digest in index.hashes_by_path.items()}},
        )
        data = response.json()
        required = list(data.get("uploadRequiredHashes") or [])
        targets = UploadTargets(
            by_hash=dict(data.get("uploadUrlMap") or {}),
            base_url=data.get("uploadUrl"),
        )

        logger.debug(f"{len(required)} of {index.unique_count} unique files must be uploaded")
        return required, targets
