import re

import pytest

from core.nodes import filter_list
from epub.assets import DefaultAssetProvisioner
from epub.autolink import BacktickAutolinker, text_to_xhtml
from epub.templates import XhtmlTemplateRenderer, get_image_media_type, page_href, page_item_id

UUID = "urn:uuid:00000000-0000-4000-8000-000000000000"
DATETIME = "2024-01-02T03:04:05Z"


@pytest.fixture
def renderer():
    return XhtmlTemplateRenderer()


class TestPackageDocuments:
    """Test cases for content.opf / toc.ncx / nav.html / title.html."""

    def test_content_template(self, renderer, make_config, sample_nodes):
        opf = renderer.content_template(make_config(), sample_nodes, UUID, DATETIME, ["README"])

        assert f'<dc:identifier id="pub-id">{UUID}</dc:identifier>' in opf
        assert f'<meta property="dcterms:modified">{DATETIME}</meta>' in opf
        assert "<dc:title>Demo v1.0.0</dc:title>" in opf
        assert 'href="modules/README.html"' in opf
        assert 'href="modules/A.html"' in opf
        assert 'properties="nav"' in opf
        assert 'id="logo"' not in opf

    def test_toc_template(self, renderer, make_config, sample_nodes):
        ncx = renderer.toc_template(make_config(), sample_nodes, UUID)

        assert f'<meta name="dtb:uid" content="{UUID}"/>' in ncx
        assert ncx.count("<navPoint ") == 3
        assert '<content src="modules/C.html"/>' in ncx

    def test_nav_template(self, renderer, make_config, sample_nodes):
        nav = renderer.nav_template(make_config(), sample_nodes, ["README"])
        assert 'epub:type="toc"' in nav
        assert nav.index("modules/README.html") < nav.index("modules/A.html")

    def test_title_template(self, renderer, make_config):
        page = renderer.title_template(make_config(homepage_url="https://example.com/demo"))
        assert '<h1 class="title">Demo</h1>' in page
        assert "v1.0.0" in page
        assert 'href="https://example.com/demo"' in page

    def test_page_ids_are_valid_xml_names(self, renderer, make_config, sample_nodes):
        extras = ["GETTING STARTED", "1-INTRO"]
        config = make_config()
        opf = renderer.content_template(config, sample_nodes, UUID, DATETIME, extras)
        ncx = renderer.toc_template(config, sample_nodes, UUID, extras)
        nav = renderer.nav_template(config, sample_nodes, extras)

        assert '<item id="page-GETTING--STARTED" href="modules/GETTING%20STARTED.html"' in opf
        assert '<item id="page-1-INTRO" href="modules/1-INTRO.html"' in opf
        assert '<itemref idref="page-1-INTRO"/>' in opf
        assert '<content src="modules/GETTING%20STARTED.html"/>' in ncx
        assert '<a href="modules/GETTING%20STARTED.html">GETTING STARTED</a>' in nav
        for item_id in re.findall(r'<item id="([^"]+)"', opf):
            assert re.match(r"^[A-Za-z_][A-Za-z0-9_.-]*$", item_id), item_id

    def test_page_item_id_and_href(self):
        assert page_item_id("Demo.Error") == "page-Demo.Error"
        assert page_item_id("a b/c") == "page-a--b--c"
        assert page_href("Demo.Error") == "modules/Demo.Error.html"
        assert page_href("a b") == "modules/a%20b.html"

    def test_text_is_escaped(self, renderer, make_config, sample_nodes):
        opf = renderer.content_template(make_config(project="A&B"), sample_nodes, UUID, DATETIME)
        assert "<dc:title>A&amp;B v1.0.0</dc:title>" in opf

    def test_deterministic(self, renderer, make_config, sample_nodes):
        config = make_config()
        assert (renderer.content_template(config, sample_nodes, UUID, DATETIME)
                == renderer.content_template(config, sample_nodes, UUID, DATETIME))


class TestPages:
    """Test cases for node and extra pages."""

    def test_module_page(self, renderer, make_config, sample_nodes):
        page = renderer.module_page(make_config(), sample_nodes[0])

        assert '<h1 id="content">A</h1>' in page
        assert 'id="run/2"' in page
        assert 'href="#run/2"' in page
        assert "run(x, y)" in page
        assert "<code>A</code>" in page
        assert 'href="../css/epub.css"' in page

    def test_extra_template(self, renderer, make_config):
        page = renderer.extra_template(make_config(title="README"), "        <p>Hi</p>")
        assert '<h1 id="content">README</h1>' in page
        assert "<p>Hi</p>" in page


class TestAutolink:
    """Test cases for the default autolinker."""

    def test_paragraphs_and_headings(self):
        html = text_to_xhtml("# Title\n\nfirst\nline\n\n<second>")
        assert "<h2>Title</h2>" in html
        assert "<p>first line</p>" in html
        assert "<p>&lt;second&gt;</p>" in html

    def test_links_known_nodes(self, sample_nodes):
        html = BacktickAutolinker().project_doc("See `A`, `A.run/2` and `Unknown.x/1`.", sample_nodes)
        assert '<a href="A.html"><code>A</code></a>' in html
        assert '<a href="A.html#run/2"><code>A.run/2</code></a>' in html
        assert "<code>Unknown.x/1</code>" in html
        assert 'href="Unknown.html' not in html


class TestAssets:
    """Test cases for asset provisioning."""

    def test_generate_assets(self, output_dir):
        DefaultAssetProvisioner().generate_assets(output_dir)
        assert (output_dir / "META-INF" / "container.xml").exists()
        assert (output_dir / "META-INF" / "com.apple.ibooks.display-options.xml").exists()
        assert (output_dir / "OEBPS" / "css" / "epub.css").exists()

    def test_process_logo(self, make_config, tmp_path):
        logo = tmp_path / "brand.JPG"
        logo.write_bytes(b"jpeg")
        config = DefaultAssetProvisioner().process_logo(make_config(logo=str(logo)), tmp_path / "assets")

        assert config.logo == "logo.jpg"
        assert (tmp_path / "assets" / "logo.jpg").read_bytes() == b"jpeg"
        assert get_image_media_type(config.logo) == "image/jpeg"


class TestFilterList:
    """Test cases for node classification."""

    def test_categories(self, sample_nodes):
        assert [n.id for n in filter_list("modules", sample_nodes)] == ["A"]
        assert [n.id for n in filter_list("exceptions", sample_nodes)] == ["B"]
        assert [n.id for n in filter_list("protocols", sample_nodes)] == ["C"]

    def test_unknown_kind(self, sample_nodes):
        with pytest.raises(ValueError):
            filter_list("callbacks", sample_nodes)
