"""
EPUBパッケージングモジュール。

ステージングディレクトリのファイルを収集し、EPUB仕様に従った
順序と圧縮方式でZIPパッケージングを行います。
"""
import shutil
import zipfile
from pathlib import Path

from core import logger
from core.config import (
    COMPRESSED_EXTENSIONS, META_INF_DIR, MIMETYPE_CONTENT, MIMETYPE_FILENAME,
    OEBPS_DIR, STAGING_ENTRIES, EpubConfig,
)
from core.exceptions import PackagingError
from core.messages import msg


def write_mimetype(output: Path) -> None:
    """mimetypeファイルを出力する。"""
    with open(output / MIMETYPE_FILENAME, "w", encoding="ascii", newline="") as f:
        f.write(MIMETYPE_CONTENT)


def compress_type_for(name: str) -> int:
    """
    ファイル名の拡張子から圧縮方式を決める。

    COMPRESSED_EXTENSIONS に含まれる拡張子は ZIP_DEFLATED、
    それ以外（拡張子のない mimetype を含む）は ZIP_STORED。
    """
    if Path(name).suffix.lower() in COMPRESSED_EXTENSIONS:
        return zipfile.ZIP_DEFLATED
    return zipfile.ZIP_STORED


def _read_member(path: Path, root: Path, fail_on_unreadable: bool) -> tuple[str, bytes] | None:
    """メンバー1件を読み込む。読めない場合は None（strict なら例外）。"""
    name = path.relative_to(root).as_posix()
    try:
        return name, path.read_bytes()
    except OSError as e:
        if fail_on_unreadable:
            raise PackagingError(msg("staging_file_unreadable_strict", path=name, error=e)) from e
        logger.warning(msg("staging_file_unreadable", path=name, error=e))
        return None


def files_to_add(root: Path, fail_on_unreadable: bool = False) -> list[tuple[str, bytes]]:
    """
    ZIPに格納するメンバーを順序どおりに収集する。

    Parameters
    ----------
    root : Path
        ステージングディレクトリのルート。
    fail_on_unreadable : bool
        True の場合、読めないファイルがあれば PackagingError を送出する。
        False の場合は警告を出してスキップする。

    Returns
    -------
    list[tuple[str, bytes]]
        (相対パス, 内容) のリスト。

    Raises
    ------
    PackagingError
        mimetype がない場合、または strict 指定で読めないファイルがある場合。

    Notes
    -----
    格納順序::

        1. mimetype（先頭、EPUBリーダーが形式判定に使用）
        2. META-INF/*
        3. OEBPS/**（全階層）
    """
    mimetype_path = root / MIMETYPE_FILENAME
    if not mimetype_path.is_file():
        raise PackagingError(msg("mimetype_missing", path=mimetype_path))

    candidates = [mimetype_path]
    candidates.extend(sorted(p for p in (root / META_INF_DIR).glob("*") if p.is_file()))
    candidates.extend(sorted(p for p in (root / OEBPS_DIR).rglob("*") if p.is_file()))

    members: list[tuple[str, bytes]] = []
    for path in candidates:
        member = _read_member(path, root, fail_on_unreadable or path == mimetype_path)
        if member is not None:
            members.append(member)
    return members


def package_epub(output: Path, config: EpubConfig) -> Path:
    """
    EPUB3形式でZIPパッケージングを行う。

    Parameters
    ----------
    output : Path
        ステージングディレクトリのルート。EPUBファイルもここに出力する。
    config : EpubConfig
        プロジェクト設定（ファイル名と読み込みエラー時の方針に使用）。

    Returns
    -------
    Path
        <output>/<project>-v<version>.epub

    Raises
    ------
    PackagingError
        ZIPファイルを作成できない場合。
    """
    output = Path(output).expanduser().resolve()
    target = output / config.epub_filename
    members = files_to_add(output, config.fail_on_unreadable)

    try:
        with zipfile.ZipFile(target, "w") as z:
            for name, data in members:
                z.writestr(name, data, compress_type=compress_type_for(name))
    except OSError as e:
        raise PackagingError(msg("archive_failed", path=target, error=e), str(target)) from e

    logger.info(msg("archive_written", file=target.name, count=len(members)))
    return target


def delete_staging(output: Path) -> None:
    """アーカイブ生成後、META-INF / mimetype / OEBPS を削除する。"""
    for name in STAGING_ENTRIES:
        item = output / name
        if item.is_dir():
            shutil.rmtree(item)
        elif item.exists():
            item.unlink()
    logger.debug(msg("staging_cleaned", path=output))
