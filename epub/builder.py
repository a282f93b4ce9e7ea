"""
ドキュメントノードと追加ドキュメントからEPUBを生成するモジュール。

ステージングディレクトリの作成、ページの並列生成、ZIPパッケージング、
ステージングの削除を順に実行します。
"""
import shutil
from pathlib import Path

from core import logger
from core.config import ASSETS_DIR, OEBPS_DIR, EpubConfig
from core.messages import msg
from core.nodes import DocumentationNode, filter_list
from epub.assets import AssetProvisioner, DefaultAssetProvisioner
from epub.autolink import Autolinker, BacktickAutolinker
from epub.identifiers import format_datetime, package_identifier
from epub.packaging import delete_staging, package_epub, write_mimetype
from epub.staging import check_page_names, generate_extras, generate_list, modules_dir
from epub.templates import TemplateRenderer, XhtmlTemplateRenderer


def _prepare_output(output: Path) -> None:
    """出力ディレクトリを作り直す（既存の内容は削除）。"""
    if output.exists():
        shutil.rmtree(output)
    modules_dir(output).mkdir(parents=True)
    logger.debug(msg("staging_ready", path=output))


def _write(path: Path, content: str) -> None:
    with open(path, "w", encoding="utf-8") as f:
        f.write(content)


def build_epub(
    nodes: list[DocumentationNode],
    config: EpubConfig,
    renderer: TemplateRenderer | None = None,
    autolinker: Autolinker | None = None,
    provisioner: AssetProvisioner | None = None
) -> Path:
    """
    ドキュメントノードからEPUBファイルを生成する。

    Parameters
    ----------
    nodes : list[DocumentationNode]
        全ドキュメントノード。モジュール・例外・プロトコルに分類して出力する。
    config : EpubConfig
        プロジェクト設定。
    renderer : TemplateRenderer | None
        ページのテンプレート。None の場合は XhtmlTemplateRenderer。
    autolinker : Autolinker | None
        追加ドキュメントの変換。None の場合は BacktickAutolinker。
    provisioner : AssetProvisioner | None
        静的アセットの配置。None の場合は DefaultAssetProvisioner。

    Returns
    -------
    Path
        生成されたEPUBファイルのパス（<output>/<project>-v<version>.epub）。

    Raises
    ------
    EpubGenerationError
        設定の誤り、入力ファイルの欠落、パッケージングの失敗。
        途中で失敗した場合、ステージングディレクトリは調査用に残る。

    Notes
    -----
    content.opf / toc.ncx / nav.html / title.html は全ノードと共通の
    パッケージID・日時を使うため、並列化せず順に生成します。
    """
    renderer = renderer or XhtmlTemplateRenderer()
    autolinker = autolinker or BacktickAutolinker()
    provisioner = provisioner or DefaultAssetProvisioner()

    output = Path(config.output).expanduser().resolve()
    oebps = output / OEBPS_DIR

    logger.section(msg("epub_start", project=config.project, version=config.version))

    # 1. ノードの分類とページ名の重複チェック（出力ディレクトリに触れる前）
    modules = filter_list("modules", nodes)
    exceptions = filter_list("exceptions", nodes)
    protocols = filter_list("protocols", nodes)
    all_nodes = modules + exceptions + protocols
    check_page_names(config.extras, all_nodes)

    # 2. ステージングディレクトリの作成とアセット配置
    _prepare_output(output)
    provisioner.generate_assets(output)
    if config.logo:
        config = provisioner.process_logo(config, oebps / ASSETS_DIR)

    # 3. mimetype と追加ドキュメント
    write_mimetype(output)
    extras = generate_extras(output, config, nodes, renderer, autolinker)

    # 4. パッケージIDと日時（1回だけ生成し、content.opf と toc.ncx で共有）
    uuid = package_identifier()
    datetime = format_datetime()
    logger.debug(msg("package_id", uuid=uuid))

    _write(oebps / "content.opf", renderer.content_template(config, all_nodes, uuid, datetime, extras))
    _write(oebps / "toc.ncx", renderer.toc_template(config, all_nodes, uuid, extras))
    _write(oebps / "nav.html", renderer.nav_template(config, all_nodes, extras))
    _write(oebps / "title.html", renderer.title_template(config))
    logger.info(msg("navigation_written"))

    # 5. 各ノードのページ
    generate_list(msg("job_modules"), output, config, modules, renderer)
    generate_list(msg("job_exceptions"), output, config, exceptions, renderer)
    generate_list(msg("job_protocols"), output, config, protocols, renderer)

    # 6. パッケージング (ZIP) とステージングの削除
    epub_file = package_epub(output, config)
    delete_staging(output)

    logger.success(msg("epub_saved", file=epub_file))
    return epub_file
