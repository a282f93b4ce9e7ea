"""
EPUB生成モジュール。

ページの並列生成、XHTMLサニタイズ、テンプレート生成、パッケージングを提供する。
"""
from epub.builder import build_epub
from epub.identifiers import uuid4, package_identifier, format_datetime
from epub.packaging import files_to_add, package_epub, delete_staging
from epub.sanitizer import sanitize_id, sanitize_href, valid_xhtml_ids
from epub.staging import run_batch, generate_extras, generate_list
from epub.templates import TemplateRenderer, XhtmlTemplateRenderer
from epub.autolink import Autolinker, BacktickAutolinker
from epub.assets import AssetProvisioner, DefaultAssetProvisioner

__all__ = [
    "build_epub",
    "uuid4",
    "package_identifier",
    "format_datetime",
    "files_to_add",
    "package_epub",
    "delete_staging",
    "sanitize_id",
    "sanitize_href",
    "valid_xhtml_ids",
    "run_batch",
    "generate_extras",
    "generate_list",
    "TemplateRenderer",
    "XhtmlTemplateRenderer",
    "Autolinker",
    "BacktickAutolinker",
    "AssetProvisioner",
    "DefaultAssetProvisioner",
]
