import json

import pytest
from click.testing import CliRunner

from site_deploy.api.deployer import Deployer
from site_deploy.cli.commands import deploy as deploy_command
from site_deploy.cli.commands.analyze import default_target_name
from site_deploy.cli.main import cli
from site_deploy.core.archive_ingestor import build_archive

from conftest import GITHUB_URL, FakeGitHub


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("GITHUB_TOKEN", "FIREBASE_TOKEN", "SITE_DEPLOY_CONFIG"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def site_zip(tmp_path, static_site_files):
    archive = tmp_path / "my-site.zip"
    archive.write_bytes(build_archive({f"my-site/{k}": v for k, v in static_site_files.items()}))
    return archive


def test_analyze_json_report(runner, site_zip):
    result = runner.invoke(cli, ["analyze", str(site_zip), "--json"])

    assert result.exit_code == 0, result.output
    report = json.loads(result.output)
    assert report["project_type"] == "Static Website"
    assert report["target"] == "my-site"
    assert report["patches"] == []
    assert report["root_prefix"] == "my-site/"


def test_analyze_reports_issues(runner, tmp_path):
    archive = tmp_path / "vite-app.zip"
    archive.write_bytes(build_archive({
        "package.json": '{"devDependencies": {"vite": "^5"}}',
        "vite.config.js": "export default defineConfig({})",
        "node_modules/vite/index.js": "",
    }))

    result = runner.invoke(cli, ["analyze", str(archive)])

    assert result.exit_code == 0, result.output
    assert "Vite" in result.output
    assert "node_modules/vite/index.js" in result.output


def test_analyze_invalid_upload(runner, tmp_path):
    archive = tmp_path / "notes.zip"
    archive.write_bytes(build_archive({"notes/deep/readme.md": "# hi"}))

    result = runner.invoke(cli, ["analyze", str(archive)])

    assert result.exit_code == 1
    assert "Analysis failed" in result.output


def test_deploy_without_token_fails_early(runner, site_zip, monkeypatch):
    monkeypatch.chdir(site_zip.parent)
    created = []
    monkeypatch.setattr(deploy_command, "Deployer", lambda *a, **kw: created.append(a))

    result = runner.invoke(cli, ["deploy", str(site_zip), "--provider", "github", "--target", "my-site"])

    assert result.exit_code == 1
    assert "Deployment aborted" in result.output
    assert "GITHUB_TOKEN" in result.output
    assert created == []


def test_deploy_to_github(runner, site_zip, tmp_path, monkeypatch):
    fake = FakeGitHub()
    config = tmp_path / "deploy.yaml"
    config.write_text(
        f"github:\n  api_url: {GITHUB_URL}\n"
        "upload:\n  retry_delay: 0\n  settle_delay: 0\n"
    )
    monkeypatch.setenv("GITHUB_TOKEN", "ghp_env")
    monkeypatch.setattr(
        deploy_command, "Deployer", lambda config: Deployer(config, transport=fake.transport)
    )

    result = runner.invoke(cli, [
        "deploy", str(site_zip),
        "--provider", "github",
        "--target", "my-site",
        "--domain", "www.example.com",
        "--config", str(config),
    ])

    assert result.exit_code == 0, result.output
    assert "https://octocat.github.io/my-site/" in result.output
    assert "CNAME" in fake.blob_contents(fake.trees[0])


def test_deploy_failure_exit_code(runner, site_zip, tmp_path, monkeypatch):
    fake = FakeGitHub(pages_status=403)
    config = tmp_path / "deploy.yaml"
    config.write_text(f"github:\n  api_url: {GITHUB_URL}\n  token: ghp_file\nupload:\n  settle_delay: 0\n")
    monkeypatch.setattr(
        deploy_command, "Deployer", lambda config: Deployer(config, transport=fake.transport)
    )

    result = runner.invoke(cli, [
        "deploy", str(site_zip), "--provider", "github", "--target", "my-site", "--config", str(config),
    ])

    assert result.exit_code == 1
    assert "unavailable" in result.output


def test_default_target_name(tmp_path):
    archive = tmp_path / "My Site (final).zip"
    archive.write_bytes(b"")
    assert default_target_name(archive) == "My-Site-final"
    assert default_target_name(tmp_path / "not-there") == "not-there"


def test_deploy_prints_progress_events(runner, site_zip, tmp_path, monkeypatch):
    fake = FakeGitHub()
    config = tmp_path / "deploy.yaml"
    config.write_text(f"github:\n  api_url: {GITHUB_URL}\n  token: ghp_file\nupload:\n  settle_delay: 0\n")
    monkeypatch.setattr(
        deploy_command, "Deployer", lambda config: Deployer(config, transport=fake.transport)
    )

    result = runner.invoke(cli, [
        "deploy", str(site_zip), "--provider", "github", "--target", "my-site", "--config", str(config),
    ])

    assert result.exit_code == 0, result.output
    assert "Authenticated as octocat" in result.output
    assert "Uploaded 2/2 files..." in result.output
    assert "Deployment complete!" in result.output


def test_analyze_shows_bracketed_file_names(runner, tmp_path):
    site = tmp_path / "blog"
    (site / "posts").mkdir(parents=True)
    (site / "index.html").write_text("<html></html>")
    (site / "posts" / "[slug].html").write_text("<html></html>")

    result = runner.invoke(cli, ["analyze", str(site)])

    assert result.exit_code == 0, result.output
    assert "posts/[slug].html" in result.output
