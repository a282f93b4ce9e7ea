"""
EPUB生成処理用のカスタム例外クラス。

処理パイプラインの各段階で発生するエラーを明確に分類し、
適切なエラーハンドリングを可能にします。
"""
from core.messages import msg


class EpubGenerationError(Exception):
    """EPUB生成処理の基底例外クラス。"""
    pass


class FileNotFoundError_(EpubGenerationError):
    """必要なファイルが見つからない場合の例外。"""

    def __init__(self, file_path: str, file_type: str = ""):
        self.file_path = file_path
        self.file_type = file_type
        super().__init__(msg("exception_file_not_found", file_type=file_type, file_path=file_path))


class ConfigurationError(EpubGenerationError):
    """設定内容（追加ドキュメント、ロゴ、プロジェクトファイル）の誤り。"""

    def __init__(self, message: str, source_file: str = ""):
        self.source_file = source_file
        super().__init__(message)


class UnsupportedExtraFormatError(ConfigurationError):
    """追加ドキュメントの拡張子が .md ではない場合の例外。"""

    def __init__(self, source_file: str):
        super().__init__(msg("unsupported_extra_format", path=source_file), source_file)


class PackagingError(EpubGenerationError):
    """ZIPパッケージング時のエラー。"""

    def __init__(self, message: str, output_file: str = ""):
        self.output_file = output_file
        super().__init__(message)


class RandomSourceError(EpubGenerationError):
    """パッケージID用の乱数を取得できない場合のエラー。"""

    def __init__(self, message: str):
        super().__init__(message)
