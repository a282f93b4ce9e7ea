"""
XHTMLサニタイズモジュール。

テンプレートで生成したページのid属性とリンクのフラグメントを、
XHTML/EPUBで使用可能な文字（A-Za-z0-9_.-）のみに書き換えます。
"""
import re

from core.config import EXTERNAL_SCHEMES, ID_REPLACEMENT, INVALID_ID_CHARS

# href="..." 属性（= の後の空白を許容）
HREF_PATTERN = re.compile(r'(?<![\w-])href=\s*"([^"]+)"', re.IGNORECASE)

# id="..." 属性（data-id 等は対象外）
ID_PATTERN = re.compile(r'(?<![\w:-])id="([^"]+)"')

_EXTERNAL_PREFIXES: tuple[str, ...] = tuple(f"{scheme}://" for scheme in EXTERNAL_SCHEMES)


def sanitize_id(value: str) -> str:
    """使用できない文字の連続を "--" に置換する。"""
    return INVALID_ID_CHARS.sub(ID_REPLACEMENT, value)


def is_external_link(link: str) -> bool:
    """http:// などの外部スキームで始まるリンクかどうか。"""
    return link.lower().startswith(_EXTERNAL_PREFIXES)


def sanitize_href(link: str) -> str:
    """
    リンク先のフラグメントをサニタイズする。

    最初の "#" より後ろだけを書き換え、それより前はそのまま残します。
    外部リンクとフラグメントを持たないリンクはそのまま返します。

    Examples
    --------
    >>> sanitize_href("modules/Foo.html#run/2")
    'modules/Foo.html#run--2'
    >>> sanitize_href("http://example.com#a b")
    'http://example.com#a b'
    """
    if is_external_link(link):
        return link
    target, _, fragment = link.partition("#")
    if not fragment:
        return link
    return f"{target}#{sanitize_id(fragment)}"


def _replace_href(match: re.Match) -> str:
    return f'href="{sanitize_href(match.group(1))}"'


def _replace_id(match: re.Match) -> str:
    return f'id="{sanitize_id(match.group(1))}"'


def valid_xhtml_ids(content: str) -> str:
    """
    ページ全体のリンクとid属性をサニタイズする。

    1. href属性: 外部スキーム以外のリンクのフラグメントを書き換える
    2. id属性: 値を書き換える

    対象属性以外のマークアップは変更せず、何度適用しても結果は同じです。
    """
    content = HREF_PATTERN.sub(_replace_href, content)
    return ID_PATTERN.sub(_replace_id, content)
