"""
コアモジュール。

共通の例外、ロガー、設定、ドキュメントノード、プロジェクト読み込みを提供する。
"""
from core.exceptions import (
    EpubGenerationError,
    ConfigurationError,
    UnsupportedExtraFormatError,
    PackagingError,
    RandomSourceError,
)
from core.logger import (
    debug, info, warning, error, success, section, separator,
    configure, set_log_level, LogLevel
)
from core.config import (
    EpubConfig,
    MIMETYPE_CONTENT,
    COMPRESSED_EXTENSIONS,
    EXTERNAL_SCHEMES,
)
from core.nodes import DocEntry, DocumentationNode, NodeType, filter_list
from core.project_reader import load_project

__all__ = [
    # exceptions
    "EpubGenerationError", "ConfigurationError", "UnsupportedExtraFormatError",
    "PackagingError", "RandomSourceError",
    # logger
    "debug", "info", "warning", "error", "success", "section", "separator",
    "configure", "set_log_level", "LogLevel",
    # config
    "EpubConfig", "MIMETYPE_CONTENT", "COMPRESSED_EXTENSIONS", "EXTERNAL_SCHEMES",
    # nodes
    "DocEntry", "DocumentationNode", "NodeType", "filter_list",
    # project_reader
    "load_project",
]
