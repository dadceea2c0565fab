from hypothesis import given, settings
from hypothesis import strategies as st

from site_deploy.api.analyzer import analyze_archive
from site_deploy.core.archive_ingestor import build_archive
from site_deploy.core.issue_detector import (
    ABSOLUTE_PATH_WARNING,
    NESTED_INDEX_WARNING,
    NO_INDEX_WARNING,
    SOURCE_WITH_BUILD_WARNING,
    SOURCE_WITHOUT_BUILD_WARNING,
    extract_asset_refs,
    find_missing_assets,
)
from site_deploy.models import ProjectType


@settings(max_examples=20, deadline=None)
@given(count=st.integers(min_value=1, max_value=50))
def test_absolute_path_warning_reported_once(count):
    files = {f"page{i}.html": '<script src="/x.js"></script>' for i in range(count)}
    files["x.js"] = ""

    analysis = analyze_archive(build_archive(files))

    assert analysis.warnings.count(ABSOLUTE_PATH_WARNING) == 1


def test_fifty_files_one_warning(make_analysis):
    files = {f"js/f{i}.js": 'el.innerHTML = \'<img src="/x">\'' for i in range(50)}
    files["index.html"] = "<html></html>"

    analysis = make_analysis(files)

    assert analysis.warnings == (ABSOLUTE_PATH_WARNING,)


def test_protocol_relative_url_is_not_absolute_path(make_analysis):
    analysis = make_analysis({"index.html": '<script src="//cdn.example/x.js"></script>'})
    assert ABSOLUTE_PATH_WARNING not in analysis.warnings


def test_missing_asset_named(make_analysis):
    analysis = make_analysis({"index.html": '<link href="css/app.css" rel="stylesheet">'})
    assert analysis.warnings == ("Missing asset referenced in index.html: 'css/app.css'",)


def test_cdn_reference_is_not_missing(make_analysis):
    analysis = make_analysis({"index.html": '<script src="https://cdn.example/x.js"></script>'})
    assert analysis.warnings == ()


def test_extract_asset_refs_normalizes():
    html = (
        '<a href="#top"></a>'
        '<script src="./js/app.js?v=3"></script>'
        '<img src="img/logo.png#frag">'
        '<a href="mailto:me@example.com"></a>'
        '<link href="/abs.css">'
    )
    assert extract_asset_refs(html) == ["js/app.js", "img/logo.png"]


def test_missing_assets_are_unique_and_ordered():
    html = '<img src="a.png"><img src="b.png"><img src="a.png"><img src="c.png">'
    assert find_missing_assets(html, ["b.png"]) == ["a.png", "c.png"]


def test_source_upload_with_build_folder(make_analysis):
    analysis = make_analysis({
        "package.json": "{}",
        "src/main.js": "",
        "dist/index.html": "<html></html>",
    })
    assert analysis.project_type == ProjectType.NODE_PROJECT
    assert SOURCE_WITH_BUILD_WARNING in analysis.warnings


def test_source_upload_without_build(make_analysis):
    analysis = make_analysis({"package.json": "{}", "src/main.js": ""})
    assert SOURCE_WITHOUT_BUILD_WARNING in analysis.warnings


def test_nested_index_warning(make_analysis):
    analysis = make_analysis({
        "site/index.html": "<html></html>",
        "readme.txt": "zip the contents",
    })
    assert analysis.project_type == ProjectType.UNKNOWN
    assert analysis.warnings == (NESTED_INDEX_WARNING.format(path="site/index.html"),)


def test_no_index_warning(make_analysis):
    analysis = make_analysis({"notes.txt": "hello"})
    assert analysis.warnings == (NO_INDEX_WARNING,)


def test_static_site_without_problems(make_analysis, static_site_files):
    analysis = make_analysis(static_site_files)
    assert analysis.project_type == ProjectType.STATIC_SITE
    assert analysis.warnings == ()
