# site_deploy/storage/github.py
"""GitHub Pages deployment through the Git data API"""

import asyncio
import base64
import logging
from functools import partial
from typing import Any, Dict, List, Optional, Tuple

from ..api.exceptions import ConflictRecoverable, DeployError
from ..constants import (
    DEFAULT_COMMIT_MESSAGE,
    DEFAULT_REPO_DESCRIPTION,
    GITHUB_API_BASE,
    Provider,
)
from ..models.events import EventKind
from ..models.patch import Patch
from ..models.project import ProjectAnalysis
from .base import Orchestrator, PreparedFile

logger = logging.getLogger(__name__)

DEFAULT_BRANCH = "main"


class GitHubPagesOrchestrator(Orchestrator):
    """Publish a project as a single force-pushed commit and enable Pages.

    Protocol: identify the user, create (or reuse) the repository, upload
    one blob per file, build a tree on top of the branch head, commit,
    force-move the branch and finally turn on Pages for that branch.
    """

    provider = Provider.GITHUB
    default_api_url = GITHUB_API_BASE

    def _auth_headers(self, credential: str) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {credential}",
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        }

    async def _publish(self,
                       target_id: str,
                       analysis: ProjectAnalysis,
                       patches: List[Patch],
                       custom_domain: Optional[str],
                       description: Optional[str] = None,
                       private: bool = False) -> str:
        owner = await self._authenticate()
        repo_path = f"/repos/{owner}/{target_id}"

        branch = await self._ensure_repository(owner, target_id, repo_path, description, private)
        files = self.prepare_files(analysis, patches, custom_domain)
        head_sha, base_tree_sha = await self._read_head(repo_path, branch)

        self._emit("Uploading files...")
        tree_items = await self._upload_in_batches(files, partial(self._create_blob, repo_path))

        self._emit("Creating file tree...")
        tree_sha = await self._create_tree(repo_path, tree_items, base_tree_sha)

        self._emit("Creating commit...")
        commit_sha = await self._create_commit(repo_path, tree_sha, head_sha)

        self._emit("Updating repository reference...")
        await self._update_ref(repo_path, branch, commit_sha, exists=head_sha is not None)

        pages_url = await self._enable_pages(repo_path, branch, f"https://{owner}.github.io/{target_id}/")

        self._emit("Deployment complete!", EventKind.SUCCESS, details=pages_url)
        return pages_url

    async def _authenticate(self) -> str:
        self._emit("Authenticating...")
        response = await self._request("GET", "/user", step="Authentication failed")
        owner = response.json()["login"]
        self._emit(f"Authenticated as {owner}", EventKind.SUCCESS)
        return owner

    async def _ensure_repository(self,
                                 owner: str,
                                 name: str,
                                 repo_path: str,
                                 description: Optional[str],
                                 private: bool) -> str:
        """Create the repository or fall back to the existing one; returns its default branch"""
        self._emit(f'Setting up repository "{name}"...')

        try:
            response = await self._request(
                "POST", "/user/repos",
                step="Failed to create repository",
                conflict_statuses=(409, 422),
                json={
                    "name": name,
                    "description": description or DEFAULT_REPO_DESCRIPTION,
                    "private": private,
                    "auto_init": True,
                },
            )
            self._emit("Repository created successfully.", EventKind.SUCCESS)
        except ConflictRecoverable:
            self._emit(f'Repository "{name}" already exists. Fetching details...')
            response = await self._request("GET", repo_path, step="Failed to read repository")

        branch = response.json().get("default_branch") or DEFAULT_BRANCH
        logger.debug(f"Using branch {branch} of {owner}/{name}")
        return branch

    async def _read_head(self, repo_path: str, branch: str) -> Tuple[Optional[str], Optional[str]]:
        """
        Read the branch head

        Returns:
            Tuple of (commit sha, tree sha), both None for an empty repository
        """
        try:
            response = await self._request(
                "GET", f"{repo_path}/git/ref/heads/{branch}",
                step="Failed to read branch reference",
                conflict_statuses=(404, 409),
            )
        except ConflictRecoverable:
            self._emit("No existing commit found. Starting fresh...")
            return None, None

        head_sha = response.json()["object"]["sha"]
        response = await self._request(
            "GET", f"{repo_path}/git/commits/{head_sha}",
            step="Failed to read latest commit",
        )
        return head_sha, response.json()["tree"]["sha"]

    async def _create_blob(self, repo_path: str, prepared: PreparedFile) -> Dict[str, Any]:
        response = await self._request(
            "POST", f"{repo_path}/git/blobs",
            step=f"Failed to upload {prepared.path}",
            json={
                "content": base64.b64encode(prepared.content).decode("ascii"),
                "encoding": "base64",
            },
        )
        return {
            "path": prepared.path,
            "mode": prepared.mode,
            "type": "blob",
            "sha": response.json()["sha"],
        }

    async def _create_tree(self,
                           repo_path: str,
                           items: List[Dict[str, Any]],
                           base_tree_sha: Optional[str]) -> str:
        payload: Dict[str, Any] = {"tree": items}
        if base_tree_sha:
            payload["base_tree"] = base_tree_sha

        response = await self._request(
            "POST", f"{repo_path}/git/trees", step="Failed to create tree", json=payload
        )
        return response.json()["sha"]

    async def _create_commit(self, repo_path: str, tree_sha: str, parent_sha: Optional[str]) -> str:
        payload: Dict[str, Any] = {"message": DEFAULT_COMMIT_MESSAGE, "tree": tree_sha}
        if parent_sha:
            payload["parents"] = [parent_sha]

        response = await self._request(
            "POST", f"{repo_path}/git/commits", step="Failed to create commit", json=payload
        )
        return response.json()["sha"]

    async def _update_ref(self, repo_path: str, branch: str, commit_sha: str, exists: bool) -> None:
        if exists:
            await self._request(
                "PATCH", f"{repo_path}/git/refs/heads/{branch}",
                step="Failed to update branch",
                json={"sha": commit_sha, "force": True},
            )
        else:
            await self._request(
                "POST", f"{repo_path}/git/refs",
                step="Failed to create branch",
                json={"ref": f"refs/heads/{branch}", "sha": commit_sha},
            )

    async def _enable_pages(self, repo_path: str, branch: str, default_url: str) -> str:
        """Turn on Pages for the branch; returns the hosting URL"""
        self._emit("Enabling GitHub Pages...")

        # Pages rejects a branch the API has not caught up with yet
        await asyncio.sleep(self.config.settle_delay)

        try:
            response = await self._request(
                "POST", f"{repo_path}/pages",
                step="Failed to enable GitHub Pages",
                conflict_statuses=(409,),
                json={"source": {"branch": branch, "path": "/"}},
            )
        except ConflictRecoverable:
            self._emit("GitHub Pages already enabled.")
            return await self._read_pages_url(repo_path, default_url)

        self._emit("GitHub Pages enabled successfully!", EventKind.SUCCESS)
        return response.json().get("html_url") or default_url

    async def _read_pages_url(self, repo_path: str, default_url: str) -> str:
        try:
            response = await self._request("GET", f"{repo_path}/pages", step="Failed to read GitHub Pages")
        except DeployError as e:
            logger.debug(f"Keeping default Pages URL: {e}")
            return default_url
        return response.json().get("html_url") or default_url
