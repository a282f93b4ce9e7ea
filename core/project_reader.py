"""
プロジェクトファイル読み取りモジュール。

JSON形式のプロジェクトファイルから設定とドキュメントノードを読み取り、
EPUB生成に使用します。
"""
import json
from pathlib import Path

from core.config import EpubConfig
from core.exceptions import ConfigurationError, FileNotFoundError_
from core.messages import msg
from core.nodes import DocEntry, DocumentationNode, NodeType


# 必須項目
_REQUIRED_FIELDS: tuple[str, ...] = ("project", "version", "nodes")


def _resolve(base_dir: Path, value: str) -> str:
    """プロジェクトファイルからの相対パスを解決する。"""
    path = Path(value).expanduser()
    if not path.is_absolute():
        path = base_dir / path
    return str(path)


def _int_field(raw: dict, name: str, default: int | None, minimum: int) -> int | None:
    """整数の項目を読み取る。bool・文字列・小数・下限未満は不正な値とする。"""
    value = raw.get(name, default)
    if value is None and default is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int) or value < minimum:
        raise ConfigurationError(msg("project_invalid_field", field=name, value=value))
    return value


def _list_field(raw: dict, name: str) -> list:
    """配列の項目を読み取る。"""
    value = raw.get(name, [])
    if not isinstance(value, list):
        raise ConfigurationError(msg("project_invalid_field", field=name, value=value))
    return value


def parse_doc_entry(raw: dict) -> DocEntry:
    """関数ドキュメント1件分の辞書を DocEntry に変換する。"""
    if not isinstance(raw, dict):
        raise ConfigurationError(msg("project_invalid_field", field="nodes[].docs[]", value=raw))
    name = raw.get("name", "")
    arity = _int_field(raw, "arity", 0, minimum=0)
    return DocEntry(
        id=raw.get("id") or f"{name}/{arity}",
        name=name,
        arity=arity,
        type=raw.get("type", "def"),
        signature=raw.get("signature", ""),
        doc=raw.get("doc"),
    )


def parse_node(raw: dict) -> DocumentationNode:
    """
    ノード1件分の辞書を DocumentationNode に変換する。

    Raises
    ------
    ConfigurationError
        辞書ではない場合、id がない場合、または種別が不明な場合。
    """
    if not isinstance(raw, dict):
        raise ConfigurationError(msg("project_invalid_field", field="nodes[]", value=raw))
    if "id" not in raw:
        raise ConfigurationError(msg("project_missing_field", field="nodes[].id"))
    node_id = str(raw["id"])
    type_value = raw.get("type", NodeType.MODULE.value)
    try:
        node_type = NodeType(type_value)
    except ValueError:
        raise ConfigurationError(msg("unknown_node_type", type=type_value, id=node_id))

    return DocumentationNode(
        id=node_id,
        type=node_type,
        title=raw.get("title", ""),
        moduledoc=raw.get("moduledoc"),
        docs=tuple(parse_doc_entry(d) for d in _list_field(raw, "docs")),
    )


def load_project(project_path: str | Path) -> tuple[EpubConfig, list[DocumentationNode]]:
    """
    プロジェクトファイルを読み込む。

    Parameters
    ----------
    project_path : str | Path
        プロジェクトファイル（JSON）のパス

    Returns
    -------
    tuple[EpubConfig, list[DocumentationNode]]
        設定とノードのリスト

    Raises
    ------
    FileNotFoundError_
        プロジェクトファイルが見つからない場合
    ConfigurationError
        UTF-8 のJSONとして解析できない場合、必須項目がない場合、
        または項目の型・値が不正な場合

    Notes
    -----
    output / extras / logo の相対パスはプロジェクトファイルの
    ディレクトリを基準に解決されます。
    """
    path = Path(project_path)
    if not path.is_file():
        raise FileNotFoundError_(str(path), msg("file_type_project"))

    try:
        with open(path, "r", encoding="utf-8") as f:
            raw = json.load(f)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ConfigurationError(msg("project_invalid_json", path=path, error=e), str(path)) from e

    if not isinstance(raw, dict):
        raise ConfigurationError(msg("project_invalid_field", field="(root)", value=type(raw).__name__), str(path))
    for name in _REQUIRED_FIELDS:
        if name not in raw:
            raise ConfigurationError(msg("project_missing_field", field=name), str(path))

    base_dir = path.resolve().parent
    logo = raw.get("logo")

    config = EpubConfig(
        project=str(raw["project"]),
        version=str(raw["version"]),
        output=_resolve(base_dir, str(raw.get("output", "doc"))),
        extras=tuple(_resolve(base_dir, str(e)) for e in _list_field(raw, "extras")),
        logo=_resolve(base_dir, str(logo)) if logo else None,
        language=raw.get("language", EpubConfig.language),
        homepage_url=raw.get("homepage_url"),
        fail_on_unreadable=bool(raw.get("fail_on_unreadable", False)),
        max_workers=_int_field(raw, "max_workers", None, minimum=1),
    )
    nodes = [parse_node(n) for n in _list_field(raw, "nodes")]
    return config, nodes
