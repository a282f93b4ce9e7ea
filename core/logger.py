"""
ロギングユーティリティモジュール。

DocPub 全体のログ出力をまとめます。ページ生成はワーカースレッドで
並列に実行されるため、出力はすべて logging モジュール経由で行い、
DEBUG レベルではスレッド名を併記します。

コンソールへの出力は configure() を呼び出したときだけ有効になります。
ライブラリとして使う場合は呼び出し側のロギング設定に従います。
"""
import logging
import sys
from enum import IntEnum
from typing import TextIO

from core.messages import msg


class LogLevel(IntEnum):
    """ログレベル定義。"""
    DEBUG = logging.DEBUG
    INFO = logging.INFO
    WARNING = logging.WARNING
    ERROR = logging.ERROR


_FORMAT = "%(message)s"
_DEBUG_FORMAT = "[%(threadName)s] %(message)s"

_logger = logging.getLogger("DocPub")
_logger.setLevel(logging.INFO)
_handler: logging.Handler | None = None


def configure(level: LogLevel = LogLevel.INFO, stream: TextIO | None = None) -> None:
    """
    コンソール出力用のハンドラを設定する。

    Parameters
    ----------
    level : LogLevel
        出力するログレベル。
    stream : TextIO | None
        出力先。None の場合は標準出力。

    Notes
    -----
    何度呼び出してもハンドラは1つだけです（前回のハンドラを置き換える）。
    標準出力が UTF-8 以外（Windows の cp932 など）の場合、
    表現できない文字は置換して出力します。
    """
    global _handler
    if stream is None:
        stream = sys.stdout
        encoding = (getattr(stream, "encoding", None) or "").lower()
        reconfigure = getattr(stream, "reconfigure", None)
        if encoding and encoding != "utf-8" and reconfigure is not None:
            reconfigure(errors="replace")

    if _handler is not None:
        _logger.removeHandler(_handler)
    _handler = logging.StreamHandler(stream)
    _logger.addHandler(_handler)
    set_log_level(level)


def set_log_level(level: LogLevel) -> None:
    """ログレベルを設定する。DEBUG ではワーカースレッド名を出力する。"""
    _logger.setLevel(level)
    if _handler is not None:
        fmt = _DEBUG_FORMAT if level <= LogLevel.DEBUG else _FORMAT
        _handler.setFormatter(logging.Formatter(fmt))


def debug(message: str) -> None:
    _logger.debug(message)


def info(message: str) -> None:
    _logger.info(message)


def warning(message: str) -> None:
    """警告メッセージを出力する。"""
    _logger.warning(msg("log_warning", message=message))


def error(message: str, exc: BaseException | None = None) -> None:
    """
    エラーメッセージを出力する。

    exc を渡した場合、DEBUG レベルのときだけトレースバックも出力する。
    """
    exc_info = exc if exc is not None and _logger.isEnabledFor(logging.DEBUG) else None
    _logger.error(f"❌ {message}", exc_info=exc_info)


def success(message: str) -> None:
    """成功メッセージを出力する。"""
    _logger.info(f"✅ {msg('log_success', message=message)}")


def section(title: str) -> None:
    """処理段階の見出しを出力する。"""
    _logger.info("-" * 30)
    _logger.info(f"★{title}")


def separator(char: str = "=", length: int = 60) -> None:
    _logger.info(char * length)
