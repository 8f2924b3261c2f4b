"""Tests for site_bundle module."""

from flowvce.models import GeneratedSite, SiteMetadata
from flowvce.project_files import update_content
from flowvce.site_bundle import (
    records_to_mapping,
    records_to_site,
    render_preview_html,
    site_to_records,
)
from flowvce.tree_builder import build_file_tree

META = SiteMetadata("Bakery", "Fresh bread", "light", True)


def _site(**kwargs) -> GeneratedSite:
    values = dict(
        html="<html><head><title>B</title></head><body><h1>B</h1></body></html>",
        css="h1{color:red}",
        js="console.log(1)",
        metadata=META,
    )
    values.update(kwargs)
    return GeneratedSite(**values)


class TestSiteToRecords:
    def test_entry_files(self):
        records = site_to_records(_site())
        assert [r.path for r in records] == ["index.html", "styles.css", "script.js"]
        assert [r.language for r in records] == ["html", "css", "javascript"]
        assert all(r.is_generated for r in records)
        assert records[1].size == len("h1{color:red}")

    def test_assets_go_under_assets_folder(self):
        records = site_to_records(_site(assets={"logo.svg": "<svg/>"}))
        tree = build_file_tree(records)
        assert [n.name for n in tree] == ["index.html", "styles.css", "script.js", "assets"]
        assert tree[3].children[0].path == "assets/logo.svg"

    def test_unique_ids(self):
        records = site_to_records(_site())
        assert len({r.id for r in records}) == 3


class TestRecordsToSite:
    def test_edits_flow_back(self):
        records = site_to_records(_site(assets={"a.txt": "x"}))
        records = update_content(records, "styles.css", "h1{color:blue}")
        site = records_to_site(records, META)
        assert site.css == "h1{color:blue}"
        assert site.assets == {"a.txt": "x"}
        assert site.metadata is META

    def test_missing_entry_files_are_empty(self):
        assert records_to_site([], META).html == ""


class TestRecordsToMapping:
    def test_mapping(self):
        mapping = records_to_mapping(site_to_records(_site()))
        assert mapping["script.js"] == "console.log(1)"


class TestRenderPreviewHtml:
    def test_inlines_css_and_js(self):
        html = render_preview_html(_site())
        assert html.index("<style>") < html.index("</head>")
        assert "h1{color:red}" in html
        assert html.index("<script>") < html.index("</body>")
        assert "console.log(1)" in html

    def test_fragment_without_head_or_body(self):
        html = render_preview_html(_site(html="<h1>Hi</h1>"))
        assert html.startswith("<style>")
        assert html.rstrip().endswith("</script>")
