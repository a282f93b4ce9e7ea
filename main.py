"""
EPUB生成ツールのメインモジュール。

プロジェクトファイル（JSON）に記述されたドキュメントノードと
追加ドキュメントからEPUBを生成する。
"""
import sys
from datetime import datetime
from pathlib import Path

from core import logger
from core.exceptions import EpubGenerationError
from core.logger import LogLevel
from core.messages import msg
from core.project_reader import load_project
from epub.builder import build_epub


def _prompt_project_path() -> str:
    """プロジェクトファイルのパス入力を行う。"""
    logger.separator("-")
    # 引用符付き入力への対応: "path" や 'path' をトリム
    return input(msg("prompt_project_path")).strip().strip('"').strip("'")


def process_project(project_path: str | Path) -> Path:
    """
    プロジェクトファイルを読み込んでEPUBを生成する。

    Parameters
    ----------
    project_path : str | Path
        プロジェクトファイルのパス。

    Returns
    -------
    Path
        生成されたEPUBファイルのパス。
    """
    start_time = datetime.now()
    logger.info(msg("processing_start", time=start_time.strftime('%Y-%m-%d %H:%M:%S')))

    config, nodes = load_project(project_path)
    epub_file = build_epub(nodes, config)

    end_time = datetime.now()
    logger.separator("=", 50)
    logger.info(msg("processing_end", time=end_time.strftime('%Y-%m-%d %H:%M:%S')))
    logger.info(msg("elapsed_time", time=end_time - start_time))
    logger.info(msg("output_file", path=epub_file))
    return epub_file


def main(argv: list[str] | None = None) -> int:
    """
    EPUB生成ツールのメイン処理。終了コードを返す。

    引数: [--debug] [プロジェクトファイル]。パスを省略した場合は入力を求める。
    """
    args = list(sys.argv[1:] if argv is None else argv)
    debug = "--debug" in args
    if debug:
        args.remove("--debug")
    logger.configure(LogLevel.DEBUG if debug else LogLevel.INFO)

    logger.separator("=")
    logger.info(msg("tool_title"))
    logger.separator("=")

    project_path = args[0] if args else _prompt_project_path()

    try:
        process_project(project_path)
    except (EpubGenerationError, OSError) as e:
        logger.error(str(e), e)
        logger.info(msg("processing_aborted"))
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
