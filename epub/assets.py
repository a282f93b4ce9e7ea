"""
静的アセット配置モジュール。

META-INF の XML ファイル、CSS、ロゴ画像をステージングディレクトリに配置します。
"""
import dataclasses
import shutil
from abc import ABC, abstractmethod
from pathlib import Path

from core import logger
from core.config import (
    ASSETS_DIR, CSS_DIR, LOGO_EXTENSIONS, META_INF_DIR, OEBPS_DIR, EpubConfig,
)
from core.exceptions import ConfigurationError, FileNotFoundError_
from core.messages import msg


CSS_FILENAME = "epub.css"

CSS_CONTENT = """
body {
    font-family: sans-serif;
    line-height: 1.4;
}
h1 {
    font-size: 1.5em;
    margin-bottom: 1em;
}
h2, h3, h4, h5 {
    font-weight: normal;
}
code {
    font-family: monospace;
}
.titlepage {
    text-align: center;
    margin-top: 3em;
}
.titlepage .logo img {
    max-width: 50%;
}
.detail {
    margin-top: 1.5em;
    border-top: 1px solid #cccccc;
}
.signature .type {
    color: #666666;
}
"""

CONTAINER_XML = ('<?xml version="1.0" encoding="UTF-8"?>'
                 '<container version="1.0" xmlns="urn:oasis:names:tc:opendocument:xmlns:container">'
                 '<rootfiles>'
                 '<rootfile full-path="OEBPS/content.opf" media-type="application/oebps-package+xml"/>'
                 '</rootfiles>'
                 '</container>')

# iBooks でカスタムフォントを有効にする設定
IBOOKS_DISPLAY_OPTIONS_XML = ('<?xml version="1.0" encoding="UTF-8"?>'
                              '<display_options>'
                              '<platform name="*">'
                              '<option name="specified-fonts">true</option>'
                              '</platform>'
                              '</display_options>')


class AssetProvisioner(ABC):
    """静的アセットを配置する抽象基底クラス。"""

    @abstractmethod
    def generate_assets(self, output: Path) -> None:
        """META-INF と OEBPS/css 以下のファイルを配置する。"""

    @abstractmethod
    def process_logo(self, config: EpubConfig, assets_dir: Path) -> EpubConfig:
        """ロゴを assets_dir にコピーし、logo をファイル名に置き換えた設定を返す。"""


class DefaultAssetProvisioner(AssetProvisioner):
    """組み込みのCSSとMETA-INFファイルを書き出す標準の実装。"""

    def generate_assets(self, output):
        """
        META-INF/container.xml、iBooks表示設定、CSSを出力する。

        Parameters
        ----------
        output : Path
            ステージングディレクトリのルート。
        """
        meta_inf = output / META_INF_DIR
        css_dir = output / OEBPS_DIR / CSS_DIR
        meta_inf.mkdir(parents=True, exist_ok=True)
        css_dir.mkdir(parents=True, exist_ok=True)

        with open(meta_inf / "container.xml", "w", encoding="utf-8") as f:
            f.write(CONTAINER_XML)
        with open(meta_inf / "com.apple.ibooks.display-options.xml", "w", encoding="utf-8") as f:
            f.write(IBOOKS_DISPLAY_OPTIONS_XML)
        with open(css_dir / CSS_FILENAME, "w", encoding="utf-8") as f:
            f.write(CSS_CONTENT)

    def process_logo(self, config, assets_dir):
        """
        ロゴ画像を logo.<拡張子> としてコピーする。

        Raises
        ------
        FileNotFoundError_
            ロゴ画像が見つからない場合。
        ConfigurationError
            対応していない拡張子の場合。
        """
        logo_path = Path(config.logo)
        ext = logo_path.suffix.lower()
        if ext not in LOGO_EXTENSIONS:
            raise ConfigurationError(
                msg("unsupported_logo_format", allowed=", ".join(LOGO_EXTENSIONS), path=logo_path),
                str(logo_path),
            )
        if not logo_path.is_file():
            raise FileNotFoundError_(str(logo_path), msg("file_type_logo"))

        assets_dir.mkdir(parents=True, exist_ok=True)
        filename = f"logo{ext}"
        shutil.copy(logo_path, assets_dir / filename)
        logger.info(msg("logo_copied", file=filename))

        return dataclasses.replace(config, logo=filename)
