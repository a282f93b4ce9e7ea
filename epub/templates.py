"""
EPUB3用テンプレート生成モジュール。

content.opf、toc.ncx、nav.html、タイトルページ、各ノードのページ、
追加ドキュメントのページを生成します。出力は入力が同じなら常に同一です。
"""
from abc import ABC, abstractmethod
from collections.abc import Sequence
from html import escape
from pathlib import Path
from urllib.parse import quote

from core.config import ASSETS_DIR, CSS_DIR, MODULES_DIR, EpubConfig
from core.nodes import DocumentationNode
from epub.autolink import text_to_xhtml
from epub.assets import CSS_FILENAME
from epub.sanitizer import sanitize_id


# 画像ファイル拡張子からMIMEタイプへのマッピング
IMAGE_MEDIA_TYPES = {
    '.png': 'image/png',
    '.jpg': 'image/jpeg',
    '.jpeg': 'image/jpeg',
}


def get_image_media_type(filename: str) -> str:
    """
    画像ファイル名からMIMEタイプを取得する。

    Parameters
    ----------
    filename : str
        画像ファイル名（拡張子付き）。

    Returns
    -------
    str
        MIMEタイプ。未知の拡張子の場合は'application/octet-stream'。
    """
    ext = Path(filename).suffix.lower()
    return IMAGE_MEDIA_TYPES.get(ext, 'application/octet-stream')


def page_item_id(page_id: str) -> str:
    """
    ページのmanifest item id を返す。

    ページIDは数字で始まったり空白を含んだりするため、そのままでは
    XMLの名前として使えません。接頭辞を付けてサニタイズします。
    """
    return f"page-{sanitize_id(page_id)}"


def page_href(page_id: str) -> str:
    """OEBPS からページへの相対パス（パーセントエンコード済み）を返す。"""
    return f"{MODULES_DIR}/{quote(page_id, safe='')}.html"


class TemplateRenderer(ABC):
    """ページ・ナビゲーション文書を生成するテンプレートの抽象基底クラス。"""

    @abstractmethod
    def content_template(
        self,
        config: EpubConfig,
        nodes: list[DocumentationNode],
        uuid: str,
        datetime: str,
        extras: Sequence[str] = ()
    ) -> str:
        """content.opf を生成する。"""

    @abstractmethod
    def toc_template(
        self,
        config: EpubConfig,
        nodes: list[DocumentationNode],
        uuid: str,
        extras: Sequence[str] = ()
    ) -> str:
        """toc.ncx を生成する。"""

    @abstractmethod
    def nav_template(
        self,
        config: EpubConfig,
        nodes: list[DocumentationNode],
        extras: Sequence[str] = ()
    ) -> str:
        """nav.html を生成する。"""

    @abstractmethod
    def title_template(self, config: EpubConfig) -> str:
        """title.html を生成する。"""

    @abstractmethod
    def module_page(self, config: EpubConfig, node: DocumentationNode) -> str:
        """ノード1件分のページを生成する。"""

    @abstractmethod
    def extra_template(self, config: EpubConfig, content: str) -> str:
        """追加ドキュメントのページを生成する。config.title をタイトルに使う。"""


def _book_title(config: EpubConfig) -> str:
    return f"{config.project} v{config.version}"


def _page_head(title: str, css_path: str) -> str:
    """各XHTMLページ共通の<head>要素。"""
    return f'''<head>
    <meta charset="utf-8"/>
    <title>{escape(title)}</title>
    <link rel="stylesheet" type="text/css" href="{css_path}"/>
</head>'''


def _xhtml_document(title: str, body: str, lang: str, css_path: str) -> str:
    return f'''<?xml version="1.0" encoding="UTF-8"?>
<!DOCTYPE html>
<html xmlns="http://www.w3.org/1999/xhtml" xmlns:epub="http://www.idpf.org/2007/ops" xml:lang="{lang}" lang="{lang}">
{_page_head(title, css_path)}
<body>
{body}
</body>
</html>
'''


def _page_entries(
    nodes: list[DocumentationNode],
    extras: Sequence[str]
) -> list[tuple[str, str]]:
    """(ページID, 表示タイトル) のリストを 追加ドキュメント → ノード の順で返す。"""
    return [(title, title) for title in extras] + [(n.id, n.title) for n in nodes]


class XhtmlTemplateRenderer(TemplateRenderer):
    """標準のXHTMLテンプレート。"""

    # ----------------------------------------------------------------------
    # パッケージ文書
    # ----------------------------------------------------------------------

    def content_template(self, config, nodes, uuid, datetime, extras=()):
        """
        OPF 3.0 パッケージ文書を生成する。

        Parameters
        ----------
        config : EpubConfig
            プロジェクト設定。logo はパッケージ内のファイル名であること。
        nodes : list[DocumentationNode]
            モジュール・例外・プロトコルを連結したノードのリスト。
        uuid : str
            パッケージID（urn:uuid:...）。toc.ncx と同じ値を渡す。
        datetime : str
            dcterms:modified に使用する日時。
        extras : list[str]
            追加ドキュメントのページID（大文字のファイル名）。

        Returns
        -------
        str
            生成されたOPFドキュメント。
        """
        manifest_items = [
            '        <item id="nav" href="nav.html" media-type="application/xhtml+xml" properties="nav"/>',
            '        <item id="ncx" href="toc.ncx" media-type="application/x-dtbncx+xml"/>',
            f'        <item id="css" href="{CSS_DIR}/{CSS_FILENAME}" media-type="text/css"/>',
            '        <item id="title" href="title.html" media-type="application/xhtml+xml"/>',
        ]
        if config.logo:
            manifest_items.append(
                f'        <item id="logo" href="{ASSETS_DIR}/{escape(config.logo)}" '
                f'media-type="{get_image_media_type(config.logo)}"/>'
            )

        spine_items = [
            '        <itemref idref="title"/>',
            '        <itemref idref="nav"/>',
        ]
        for page_id, _ in _page_entries(nodes, extras):
            item_id = page_item_id(page_id)
            manifest_items.append(
                f'        <item id="{item_id}" href="{page_href(page_id)}" '
                f'media-type="application/xhtml+xml"/>'
            )
            spine_items.append(f'        <itemref idref="{item_id}"/>')

        return f'''<?xml version="1.0" encoding="UTF-8"?>
<package xmlns="http://www.idpf.org/2007/opf" version="3.0" unique-identifier="pub-id" xml:lang="{config.language}">
    <metadata xmlns:dc="http://purl.org/dc/elements/1.1/">
        <dc:identifier id="pub-id">{uuid}</dc:identifier>
        <dc:title>{escape(_book_title(config))}</dc:title>
        <dc:language>{config.language}</dc:language>
        <meta property="dcterms:modified">{datetime}</meta>
    </metadata>
    <manifest>
{chr(10).join(manifest_items)}
    </manifest>
    <spine toc="ncx">
{chr(10).join(spine_items)}
    </spine>
</package>
'''

    def toc_template(self, config, nodes, uuid, extras=()):
        """NCX目次を生成する。dtb:uid は content.opf と同じパッケージID。"""
        nav_points = []
        for order, (page_id, title) in enumerate(_page_entries(nodes, extras), 1):
            nav_points.append(f'''        <navPoint id="nav-{order}" playOrder="{order}">
            <navLabel><text>{escape(title)}</text></navLabel>
            <content src="{page_href(page_id)}"/>
        </navPoint>''')

        return f'''<?xml version="1.0" encoding="UTF-8"?>
<ncx xmlns="http://www.daisy.org/z3986/2005/ncx/" version="2005-1" xml:lang="{config.language}">
    <head>
        <meta name="dtb:uid" content="{uuid}"/>
        <meta name="dtb:depth" content="1"/>
        <meta name="dtb:totalPageCount" content="0"/>
        <meta name="dtb:maxPageNumber" content="0"/>
    </head>
    <docTitle><text>{escape(_book_title(config))}</text></docTitle>
    <navMap>
{chr(10).join(nav_points)}
    </navMap>
</ncx>
'''

    def nav_template(self, config, nodes, extras=()):
        """EPUB3 nav文書を生成する。"""
        nav_items = "\n".join([
            f'            <li><a href="{page_href(page_id)}">{escape(title)}</a></li>'
            for page_id, title in _page_entries(nodes, extras)
        ])
        body = f'''    <nav epub:type="toc" id="toc" role="doc-toc">
        <h1>Table of Contents</h1>
        <ol>
{nav_items}
        </ol>
    </nav>'''
        return _xhtml_document(
            f"{_book_title(config)} - Table of Contents", body,
            config.language, f"{CSS_DIR}/{CSS_FILENAME}"
        )

    def title_template(self, config):
        """タイトルページを生成する。"""
        lines = ['    <section epub:type="titlepage" class="titlepage">']
        if config.logo:
            lines.append(
                f'        <div class="logo"><img src="{ASSETS_DIR}/{escape(config.logo)}" '
                f'alt="{escape(config.project)}"/></div>'
            )
        lines.append(f'        <h1 class="title">{escape(config.project)}</h1>')
        lines.append(f'        <h2 class="version">v{escape(config.version)}</h2>')
        if config.homepage_url:
            url = escape(config.homepage_url)
            lines.append(f'        <p class="homepage"><a href="{url}">{url}</a></p>')
        lines.append('    </section>')
        return _xhtml_document(
            _book_title(config), "\n".join(lines),
            config.language, f"{CSS_DIR}/{CSS_FILENAME}"
        )

    # ----------------------------------------------------------------------
    # 各ページ
    # ----------------------------------------------------------------------

    def module_page(self, config, node):
        """
        ノードのページを生成する。

        各関数のセクションには id="<名前>/<アリティ>" を付与する。
        "/" はid属性に使えないため、出力前にサニタイズが必要です。
        """
        lines = [
            f'    <section class="{node.type.value}">',
            f'        <h1 id="content">{escape(node.title)}</h1>',
        ]
        if node.moduledoc:
            lines.append(f'        <div class="moduledoc">\n{text_to_xhtml(node.moduledoc)}\n        </div>')

        if node.docs:
            lines.append('        <ul class="summary">')
            for entry in node.docs:
                lines.append(
                    f'            <li><a href="#{escape(entry.id)}">{escape(entry.id)}</a></li>'
                )
            lines.append('        </ul>')

        for entry in node.docs:
            signature = entry.signature or entry.id
            lines.append(f'        <div class="detail" id="{escape(entry.id)}">')
            lines.append(
                f'            <h2 class="signature"><span class="type">{escape(entry.type)}</span> '
                f'{escape(signature)}</h2>'
            )
            if entry.doc:
                lines.append(f'            <div class="docstring">\n{text_to_xhtml(entry.doc)}\n            </div>')
            lines.append('        </div>')
        lines.append('    </section>')

        return _xhtml_document(
            f"{node.title} - {_book_title(config)}", "\n".join(lines),
            config.language, f"../{CSS_DIR}/{CSS_FILENAME}"
        )

    def extra_template(self, config, content):
        """追加ドキュメントのページを生成する。"""
        title = config.title or ""
        body = f'''    <section class="extra">
        <h1 id="content">{escape(title)}</h1>
{content}
    </section>'''
        return _xhtml_document(
            f"{title} - {_book_title(config)}", body,
            config.language, f"../{CSS_DIR}/{CSS_FILENAME}"
        )
