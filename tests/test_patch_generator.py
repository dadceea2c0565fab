from site_deploy.constants import WORKFLOW_PATH
from site_deploy.core.patch_generator import (
    FALLBACK_STEP,
    PatchContext,
    UPLOAD_STEP_ANCHOR,
    add_spa_fallback,
    generate_patches,
)
from site_deploy.models import Patch, ProjectType


def test_static_site_needs_no_patches(make_analysis, static_site_files):
    analysis = make_analysis(static_site_files)
    assert generate_patches(analysis, "my-site") == []


def test_fallback_is_noop_without_workflow(make_analysis, static_site_files):
    analysis = make_analysis(static_site_files)
    assert add_spa_fallback(PatchContext(analysis=analysis, target_name="my-site"), ()) == ()

    # An SPA whose patch list holds no workflow is left as is
    spa = PatchContext(analysis=analysis.evolve(project_type=ProjectType.VITE), target_name="my-site")
    unrelated = (Patch(path="README.md", content="hi", description="readme"),)
    assert add_spa_fallback(spa, unrelated) == unrelated


def test_node_project_gets_workflow_without_fallback(make_analysis):
    analysis = make_analysis({"package.json": "{}", "server.js": ""})

    patches = generate_patches(analysis, "api")

    assert [p.path for p in patches] == [WORKFLOW_PATH]
    workflow = patches[0].content
    assert "run: npm run build" in workflow
    assert "path: ./dist" in workflow
    assert "404.html" not in workflow
    assert "${{ steps.deployment.outputs.page_url }}" in workflow


def test_angular_fallback_uses_target_output_dir(make_analysis):
    analysis = make_analysis({"angular.json": "{}", "package.json": "{}", "src/main.ts": ""})

    patches = generate_patches(analysis, "shop")

    workflow = patches[0].content
    assert "path: ./dist/shop" in workflow
    step = FALLBACK_STEP.format(output="dist/shop")
    assert step + UPLOAD_STEP_ANCHOR in workflow
    assert workflow.count("Create 404 fallback") == 1


def test_vite_config_gets_base_path(make_analysis):
    analysis = make_analysis({
        "package.json": "{}",
        "vite.config.js": "import { defineConfig } from 'vite'\nexport default defineConfig({\n  plugins: [],\n})\n",
        "index.html": "<div id=app></div>",
    })

    patches = generate_patches(analysis, "demo")

    assert [p.path for p in patches] == [WORKFLOW_PATH, "vite.config.js"]
    assert 'defineConfig({\n  base: "/demo/",' in patches[1].content
    assert "cp dist/index.html dist/404.html || true" in patches[0].content


def test_vite_config_with_base_is_left_alone(make_analysis):
    analysis = make_analysis({
        "vite.config.ts": "export default defineConfig({ base: './' })",
        "package.json": "{}",
    })
    assert [p.path for p in generate_patches(analysis, "demo")] == [WORKFLOW_PATH]


def test_unrecognized_vite_config_is_not_patched(make_analysis, caplog):
    analysis = make_analysis({"vite.config.js": "module.exports = {}", "package.json": "{}"})

    patches = generate_patches(analysis, "demo")

    assert [p.path for p in patches] == [WORKFLOW_PATH]
    assert "base path not injected" in caplog.text


def test_next_config_gets_static_export(make_analysis):
    analysis = make_analysis({
        "package.json": "{}",
        "next.config.js": "const nextConfig = {\n  reactStrictMode: true,\n}\nmodule.exports = nextConfig\n",
    })

    patches = generate_patches(analysis, "blog")

    assert [p.path for p in patches] == [WORKFLOW_PATH, "next.config.js"]
    assert "nextConfig = {\n  output: 'export'," in patches[1].content
    assert "path: ./out" in patches[0].content
    # Next.js is not treated as a client-rendered SPA
    assert "404.html" not in patches[0].content


def test_next_config_already_exporting(make_analysis):
    analysis = make_analysis({
        "package.json": "{}",
        "next.config.mjs": "export default { output: 'export' }",
    })
    assert [p.path for p in generate_patches(analysis, "blog")] == [WORKFLOW_PATH]


def test_generation_does_not_mutate_between_calls(make_analysis):
    analysis = make_analysis({"vue.config.js": "", "package.json": "{}"})

    first = generate_patches(analysis, "a")
    second = generate_patches(analysis, "a")

    assert first == second
    assert first[0].content.count("Create 404 fallback") == 1


def test_vite_without_config_gets_generated_config(make_analysis):
    analysis = make_analysis({"package.json": "{}", "src/main.jsx": "", "index.html": ""})
    analysis = analysis.evolve(project_type=ProjectType.VITE)

    patches = generate_patches(analysis, "demo")

    assert [p.path for p in patches] == [WORKFLOW_PATH, "vite.config.js"]
    config = patches[1].content
    assert 'base: "/demo/",' in config
    assert "export default defineConfig({" in config
    assert patches[1].description == "Create vite.config.js with correct base path"


def test_cra_workflow_builds_and_copies_fallback(make_analysis):
    analysis = make_analysis({
        "package.json": '{"dependencies": {"react-scripts": "5.0.1"}}',
        "public/index.html": "",
        "src/index.js": "",
    })
    assert analysis.project_type == ProjectType.CRA

    patches = generate_patches(analysis, "my-app")

    assert [p.path for p in patches] == [WORKFLOW_PATH]
    workflow = patches[0].content
    assert patches[0].description == "Create GitHub Actions workflow for Create React App"
    assert "run: npm run build" in workflow
    assert "path: ./build" in workflow
    assert "run: cp build/index.html build/404.html || true" in workflow
    assert workflow.index("Create 404 fallback") < workflow.index("Upload artifact")
