import base64
import json
from typing import Dict, Optional

import httpx
import pytest

from site_deploy.api.analyzer import analyze_archive
from site_deploy.core.archive_ingestor import build_archive
from site_deploy.models import UploadConfig

GITHUB_URL = "https://github.test"
FIREBASE_URL = "https://firebase.test/v1beta1"
FIREBASE_UPLOAD_HOST = "upload.firebase.test"


class FakeGitHub:
    """In-memory stand-in for the parts of the GitHub REST API a deploy uses"""

    def __init__(self,
                 owner: str = "octocat",
                 repo_exists: bool = False,
                 empty: bool = False,
                 pages_enabled: bool = False,
                 pages_status: Optional[int] = None,
                 blob_failures: Optional[Dict[bytes, int]] = None):
        self.owner = owner
        self.repo_exists = repo_exists
        self.head = None if empty else "c0"
        self.pages_enabled = pages_enabled
        self.pages_status = pages_status
        self.blob_failures = dict(blob_failures or {})
        self.requests = []
        self.blobs = {}
        self.trees = []
        self.commits = []
        self.refs = []

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def paths(self, method: str):
        return [path for m, path in self.requests if m == method]

    def handler(self, request: httpx.Request) -> httpx.Response:
        method, path = request.method, request.url.path
        self.requests.append((method, path))
        body = json.loads(request.content) if request.content else {}

        if path == "/user" and method == "GET":
            return httpx.Response(200, json={"login": self.owner})

        if path == "/user/repos" and method == "POST":
            if self.repo_exists:
                return httpx.Response(422, json={"message": "name already exists on this account"})
            self.repo_exists = True
            return httpx.Response(201, json={"default_branch": "main"})

        parts = path.split("/")
        if parts[1:3] != ["repos", self.owner] or len(parts) < 4:
            return httpx.Response(404, json={"message": "Not Found"})
        name, sub = parts[3], "/".join(parts[4:])

        if sub == "" and method == "GET":
            return httpx.Response(200, json={"default_branch": "main"})

        if sub == "git/ref/heads/main" and method == "GET":
            if self.head is None:
                return httpx.Response(409, json={"message": "Git Repository is empty."})
            return httpx.Response(200, json={"object": {"sha": self.head}})

        if sub == f"git/commits/{self.head}" and method == "GET":
            return httpx.Response(200, json={"tree": {"sha": "t0"}})

        if sub == "git/blobs" and method == "POST":
            content = base64.b64decode(body["content"])
            if self.blob_failures.get(content, 0) > 0:
                self.blob_failures[content] -= 1
                return httpx.Response(502, json={"message": "Server Error"})
            sha = f"b{len(self.blobs)}"
            self.blobs[sha] = content
            return httpx.Response(201, json={"sha": sha})

        if sub == "git/trees" and method == "POST":
            self.trees.append(body)
            return httpx.Response(201, json={"sha": "t1"})

        if sub == "git/commits" and method == "POST":
            self.commits.append(body)
            return httpx.Response(201, json={"sha": "c1"})

        if sub == "git/refs/heads/main" and method == "PATCH":
            self.refs.append(("update", body))
            return httpx.Response(200, json={"object": {"sha": body["sha"]}})

        if sub == "git/refs" and method == "POST":
            self.refs.append(("create", body))
            return httpx.Response(201, json={"object": {"sha": body["sha"]}})

        if sub == "pages":
            pages_url = f"https://{self.owner}.github.io/{name}/"
            if method == "GET":
                return httpx.Response(200, json={"html_url": pages_url})
            if self.pages_status:
                return httpx.Response(self.pages_status, json={"message": "Pages unavailable"})
            if self.pages_enabled:
                return httpx.Response(409, json={"message": "GitHub Pages is already enabled."})
            self.pages_enabled = True
            return httpx.Response(201, json={"html_url": pages_url})

        return httpx.Response(404, json={"message": "Not Found"})

    def blob_contents(self, tree: dict) -> Dict[str, bytes]:
        return {item["path"]: self.blobs[item["sha"]] for item in tree["tree"]}


class FakeFirebase:
    """In-memory stand-in for the Firebase Hosting REST API"""

    def __init__(self, site: str = "demo"):
        self.site = site
        self.stored: Dict[str, bytes] = {}
        self.uploads = []
        self.registered = []
        self.finalized = []
        self.releases = []
        self.version_configs = []

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def handler(self, request: httpx.Request) -> httpx.Response:
        method, path = request.method, request.url.path

        if request.url.host == FIREBASE_UPLOAD_HOST:
            digest = path.rsplit("/", 1)[-1]
            self.stored[digest] = request.content
            self.uploads.append(digest)
            return httpx.Response(200)

        body = json.loads(request.content) if request.content else {}
        prefix = f"/v1beta1/sites/{self.site}"

        if path == f"{prefix}/versions" and method == "POST":
            self.version_configs.append(body)
            name = f"sites/{self.site}/versions/v{len(self.version_configs)}"
            return httpx.Response(200, json={"name": name, "status": "CREATED"})

        if path.endswith(":populateFiles") and method == "POST":
            files = body["files"]
            self.registered.append(files)
            required = [h for h in dict.fromkeys(files.values()) if h not in self.stored]
            version = path[len("/v1beta1/"):-len(":populateFiles")]
            return httpx.Response(200, json={
                "uploadRequiredHashes": required,
                "uploadUrl": f"https://{FIREBASE_UPLOAD_HOST}/upload/{version}/files",
            })

        if path.startswith(f"{prefix}/versions/") and method == "PATCH":
            assert request.url.params.get("update_mask") == "status"
            self.finalized.append(path[len("/v1beta1/"):])
            return httpx.Response(200, json={"status": body["status"]})

        if path == f"{prefix}/releases" and method == "POST":
            self.releases.append(request.url.params.get("versionName"))
            return httpx.Response(200, json={"name": f"{prefix}/releases/r1"})

        return httpx.Response(404, json={"error": {"code": 404, "message": "Requested entity was not found."}})


@pytest.fixture
def fast_upload():
    """Upload settings with no waiting between attempts"""
    return UploadConfig(retry_delay=0, settle_delay=0)


@pytest.fixture
def make_analysis():
    """Build a ProjectAnalysis from a {path: content} mapping"""
    def factory(files, fix_paths=False):
        return analyze_archive(build_archive(files), fix_paths=fix_paths)
    return factory


@pytest.fixture
def static_site_files():
    return {
        "index.html": '<html><head><link href="style.css" rel="stylesheet"></head><body></body></html>',
        "style.css": "body { margin: 0; }",
    }
