"""
パッケージIDと作成日時の生成モジュール。
"""
import secrets
import uuid
from datetime import datetime, timezone

from core.exceptions import RandomSourceError
from core.messages import msg


def uuid4() -> str:
    """
    暗号論的乱数から UUID v4 文字列を生成する。

    16バイトの乱数のうち、バージョンの4ビットを 4 に、
    バリアントの2ビットを 10 に固定します。

    Returns
    -------
    str
        8-4-4-4-12 形式の小文字16進文字列。

    Raises
    ------
    RandomSourceError
        OSの乱数源から乱数を取得できない場合。
    """
    try:
        random_bytes = secrets.token_bytes(16)
    except (OSError, NotImplementedError) as e:
        raise RandomSourceError(msg("random_source_failed", error=e)) from e
    return str(uuid.UUID(bytes=random_bytes, version=4))


def package_identifier() -> str:
    """content.opf / toc.ncx で共有するパッケージIDを生成する。"""
    return f"urn:uuid:{uuid4()}"


def format_datetime(now: datetime | None = None) -> str:
    """
    UTC の現在時刻を YYYY-MM-DDTHH:MM:SSZ 形式で返す。

    Parameters
    ----------
    now : datetime | None
        フォーマット対象の時刻（タイムゾーン付き）。None の場合は現在時刻。
    """
    if now is None:
        now = datetime.now(timezone.utc)
    else:
        now = now.astimezone(timezone.utc)
    return (f"{now.year:04d}-{now.month:02d}-{now.day:02d}"
            f"T{now.hour:02d}:{now.minute:02d}:{now.second:02d}Z")
