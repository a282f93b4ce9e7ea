"""
ドキュメントテキストのXHTML変換と自動リンクモジュール。

追加ドキュメントやモジュールドキュメントのテキストを、段落・見出し・
インラインコード程度の簡易なXHTMLに変換します。
インラインコードがノード名（`Foo`）や関数（`Foo.bar/2`）を指す場合は
そのページへのリンクにします。
"""
import re
from abc import ABC, abstractmethod
from collections.abc import Callable
from html import escape

from core.nodes import DocumentationNode

# 見出し記法: # 見出し
_HEADING_PATTERN = re.compile(r'^(#{1,6})\s+(.*)$')

# インラインコード: `code`
_CODE_PATTERN = re.compile(r'`([^`]+)`')

# 関数参照: Module.name/arity
_FUNCTION_REF_PATTERN = re.compile(r'^(?P<module>[A-Z][\w.]*)\.(?P<function>[^./\s]+/\d+)$')


class Autolinker(ABC):
    """追加ドキュメントをリンク付きXHTMLに変換する抽象基底クラス。"""

    @abstractmethod
    def project_doc(self, content: str, nodes: list[DocumentationNode]) -> str:
        """テキストを、全ノードへのリンクを含むXHTML本文に変換する。"""


def _split_blocks(text: str) -> list[str]:
    """空行区切りでブロックに分割する。"""
    blocks = re.split(r'\n\s*\n', text.replace("\r\n", "\n").strip())
    return [b for b in blocks if b.strip()]


def text_to_xhtml(
    text: str,
    code_formatter: Callable[[str], str] | None = None,
    indent: str = "        "
) -> str:
    """
    テキストを段落・見出しのXHTMLに変換する。

    Parameters
    ----------
    text : str
        変換元テキスト。
    code_formatter : Callable[[str], str] | None
        インラインコードの中身（未エスケープ）を受け取り、XHTMLを返す関数。
        None の場合は <code> で囲むだけ。
    indent : str
        各行の先頭に付けるインデント。

    Returns
    -------
    str
        生成されたXHTML断片。
    """
    if code_formatter is None:
        code_formatter = lambda code: f"<code>{escape(code)}</code>"

    def inline(segment: str) -> str:
        parts = _CODE_PATTERN.split(segment)
        # split結果は 通常テキスト, コード, 通常テキスト, ... の交互
        return "".join(
            code_formatter(part) if i % 2 else escape(part)
            for i, part in enumerate(parts)
        )

    lines: list[str] = []
    for block in _split_blocks(text):
        heading = _HEADING_PATTERN.match(block)
        if heading and "\n" not in block:
            # ページの h1 はテンプレート側で出力するため h2 以下にずらす
            level = min(len(heading.group(1)) + 1, 6)
            lines.append(f"{indent}<h{level}>{inline(heading.group(2).strip())}</h{level}>")
        else:
            joined = " ".join(line.strip() for line in block.splitlines())
            lines.append(f"{indent}<p>{inline(joined)}</p>")
    return "\n".join(lines)


class BacktickAutolinker(Autolinker):
    """インラインコードで書かれたノード参照をリンクにする標準の自動リンク。"""

    def project_doc(self, content, nodes):
        known_ids = {node.id for node in nodes}

        def link_code(code: str) -> str:
            code_html = f"<code>{escape(code)}</code>"
            if code in known_ids:
                return f'<a href="{escape(code)}.html">{code_html}</a>'
            ref = _FUNCTION_REF_PATTERN.match(code)
            if ref and ref.group("module") in known_ids:
                href = f"{ref.group('module')}.html#{ref.group('function')}"
                return f'<a href="{escape(href)}">{code_html}</a>'
            return code_html

        return text_to_xhtml(content, code_formatter=link_code)
