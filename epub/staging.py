"""
ページの並列生成モジュール。

追加ドキュメントと各ノードのページを並列に生成し、
ステージングディレクトリの OEBPS/modules/ に書き出します。
各ワーカーは別々のファイルに書き込むため、ロックは不要です。
"""
import dataclasses
from collections.abc import Callable, Iterable, Sequence
from concurrent.futures import ThreadPoolExecutor, wait
from pathlib import Path

from core import logger
from core.config import EXTRA_EXTENSIONS, MODULES_DIR, OEBPS_DIR, EpubConfig
from core.exceptions import ConfigurationError, FileNotFoundError_, UnsupportedExtraFormatError
from core.messages import msg
from core.nodes import DocumentationNode
from epub.autolink import Autolinker
from epub.sanitizer import valid_xhtml_ids
from epub.templates import TemplateRenderer, page_item_id


def run_batch(
    job: str,
    func: Callable,
    items: Iterable,
    max_workers: int | None = None
) -> list:
    """
    全アイテムを同時に起動し、すべての完了を待つ（fork-join）。

    Parameters
    ----------
    job : str
        ログ出力用のジョブ名。
    func : Callable
        アイテム1件を処理する関数。
    items : Iterable
        処理対象。
    max_workers : int | None
        同時実行数の上限。None の場合はアイテム数と同じ。

    Returns
    -------
    list
        items と同じ順序の結果リスト。

    Raises
    ------
    Exception
        いずれかのアイテムが失敗した場合、全アイテムの完了後に
        最初に投入したアイテムの例外をそのまま送出する。

    Notes
    -----
    失敗したアイテムがあっても他のアイテムは中断されません。
    リトライや部分的な成功はありません。
    """
    items = list(items)
    if not items:
        return []

    logger.debug(msg("batch_start", job=job, count=len(items)))
    workers = min(max_workers, len(items)) if max_workers else len(items)

    with ThreadPoolExecutor(max_workers=workers) as executor:
        futures = [executor.submit(func, item) for item in items]
        wait(futures)

    failures = [(item, f.exception()) for item, f in zip(items, futures) if f.exception() is not None]
    for item, exc in failures:
        logger.error(msg("batch_unit_failed", job=job, item=getattr(item, "id", item), error=exc), exc)
    if failures:
        logger.error(msg("batch_failed", job=job, failed=len(failures), total=len(items)))
        raise failures[0][1]

    return [f.result() for f in futures]


def modules_dir(output: Path) -> Path:
    """ページの出力先ディレクトリ（OEBPS/modules）を返す。"""
    return output / OEBPS_DIR / MODULES_DIR


def extra_title(input_path: str | Path) -> str:
    """追加ドキュメントのページタイトル（大文字のファイル名）を返す。"""
    return Path(input_path).stem.upper()


def check_page_names(
    extras: Sequence[str],
    nodes: Sequence[DocumentationNode] = ()
) -> None:
    """
    追加ドキュメントとノードのページ名が重複していないか確認する。

    各ページは OEBPS/modules/<ページ名>.html に並列で書き出され、
    content.opf の item id にもなるため、重複は生成前に検出する。

    Parameters
    ----------
    extras : Sequence[str]
        追加ドキュメントのパス。
    nodes : Sequence[DocumentationNode]
        ページを出力するノード。

    Raises
    ------
    ConfigurationError
        同じページ名（またはサニタイズ後に同じ item id）になる
        入力が2つ以上ある場合。
    """
    seen: dict[str, str] = {}
    pages = [(extra_title(p), str(p)) for p in extras] + [(n.id, n.id) for n in nodes]
    for page, source in pages:
        key = page_item_id(page)
        if key in seen:
            raise ConfigurationError(
                msg("page_name_conflict", page=page, first=seen[key], second=source), source
            )
        seen[key] = source


def generate_extra(
    input_path: str,
    output: Path,
    config: EpubConfig,
    nodes: list[DocumentationNode],
    renderer: TemplateRenderer,
    autolinker: Autolinker
) -> str:
    """
    追加ドキュメント1件をページに変換して書き出す。

    Returns
    -------
    str
        ページタイトル（OEBPS/modules/<タイトル>.html）。

    Raises
    ------
    UnsupportedExtraFormatError
        拡張子が .md ではない場合。ファイルは書き出さない。
    FileNotFoundError_
        入力ファイルが見つからない場合。
    ConfigurationError
        入力ファイルが UTF-8 として読み込めない場合。
    """
    path = Path(input_path)
    if path.suffix.lower() not in EXTRA_EXTENSIONS:
        raise UnsupportedExtraFormatError(str(path))
    if not path.is_file():
        raise FileNotFoundError_(str(path), msg("file_type_extra"))

    title = extra_title(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            text = f.read()
    except UnicodeDecodeError as e:
        raise ConfigurationError(msg("extra_not_utf8", path=path, error=e), str(path)) from e
    content = autolinker.project_doc(text, nodes)

    page_config = dataclasses.replace(config, title=title)
    extra_html = valid_xhtml_ids(renderer.extra_template(page_config, content))

    with open(modules_dir(output) / f"{title}.html", "w", encoding="utf-8") as f:
        f.write(extra_html)
    return title


def generate_extras(
    output: Path,
    config: EpubConfig,
    nodes: list[DocumentationNode],
    renderer: TemplateRenderer,
    autolinker: Autolinker
) -> list[str]:
    """全追加ドキュメントを並列に生成し、ページタイトルのリストを返す。"""
    check_page_names(config.extras)
    return run_batch(
        msg("job_extras"),
        lambda input_path: generate_extra(input_path, output, config, nodes, renderer, autolinker),
        config.extras,
        max_workers=config.max_workers,
    )


def generate_module_page(
    output: Path,
    config: EpubConfig,
    node: DocumentationNode,
    renderer: TemplateRenderer
) -> Path:
    """ノード1件のページを OEBPS/modules/<node.id>.html に書き出す。"""
    content = valid_xhtml_ids(renderer.module_page(config, node))
    page_path = modules_dir(output) / f"{node.id}.html"
    with open(page_path, "w", encoding="utf-8") as f:
        f.write(content)
    return page_path


def generate_list(
    job: str,
    output: Path,
    config: EpubConfig,
    nodes: list[DocumentationNode],
    renderer: TemplateRenderer
) -> list[Path]:
    """ノードのリストのページを並列に生成する。"""
    return run_batch(
        job,
        lambda node: generate_module_page(output, config, node, renderer),
        nodes,
        max_workers=config.max_workers,
    )
