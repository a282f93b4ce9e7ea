"""
EPUB生成ツールの設定モジュール。

プロジェクト設定のデータクラスと、パッケージングで使用される
定数を一元管理します。
"""
import re
from dataclasses import dataclass


# --- EPUBパッケージ設定 ---
MIMETYPE_CONTENT = "application/epub+zip"  # mimetypeファイルの内容
MIMETYPE_FILENAME = "mimetype"
META_INF_DIR = "META-INF"
OEBPS_DIR = "OEBPS"
MODULES_DIR = "modules"  # OEBPS/modules/ 以下に各ページを出力
CSS_DIR = "css"
ASSETS_DIR = "assets"

# アーカイブ生成後に削除するステージング要素
STAGING_ENTRIES: tuple[str, ...] = (META_INF_DIR, MIMETYPE_FILENAME, OEBPS_DIR)

# 圧縮して格納する拡張子（それ以外は無圧縮、mimetypeは拡張子なしのため無圧縮）
COMPRESSED_EXTENSIONS: frozenset[str] = frozenset({
    ".css", ".html", ".ncx", ".opf", ".jpg", ".png", ".xml",
})

# --- XHTMLサニタイズ設定 ---
EXTERNAL_SCHEMES: tuple[str, ...] = ("http", "https", "ftp", "mailto", "irc")
INVALID_ID_CHARS = re.compile(r"[^A-Za-z0-9_.-]+")
ID_REPLACEMENT = "--"

# --- 入力ファイル設定 ---
EXTRA_EXTENSIONS: tuple[str, ...] = (".md",)
LOGO_EXTENSIONS: tuple[str, ...] = (".png", ".jpg", ".jpeg")

# EPUB3ドキュメントのデフォルト言語
LANG = "en"


@dataclass(frozen=True)
class EpubConfig:
    """EPUB生成の設定を保持するデータクラス。

    各ワーカーは設定を共有するため frozen とし、ページごとの
    タイトル割り当ては dataclasses.replace でコピーを作って行う。
    """
    project: str                          # プロジェクト名
    version: str                          # バージョン文字列
    output: str = "doc"                   # 出力（ステージング）ディレクトリ
    extras: tuple[str, ...] = ()          # 追加ドキュメント（.md）のパス
    logo: str | None = None               # ロゴ画像のパス（処理後はファイル名）
    title: str | None = None              # 追加ドキュメントページのタイトル
    language: str = LANG                  # EPUB言語タグ
    homepage_url: str | None = None       # タイトルページに表示するURL
    fail_on_unreadable: bool = False      # アーカイブ時に読めないファイルをエラーにする
    max_workers: int | None = None        # 並列数の上限（None: 全件同時）

    @property
    def epub_filename(self) -> str:
        """出力EPUBファイル名を返す。"""
        return f"{self.project}-v{self.version}.epub"
