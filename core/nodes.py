"""
ドキュメントノードのデータモデル。

モジュール・例外・プロトコルなどのドキュメント対象と、
その分類処理を提供します。
"""
from dataclasses import dataclass, field
from enum import Enum


class NodeType(Enum):
    """ドキュメントノードの種別。"""
    MODULE = "module"
    EXCEPTION = "exception"
    PROTOCOL = "protocol"
    IMPL = "impl"
    BEHAVIOUR = "behaviour"


@dataclass(frozen=True)
class DocEntry:
    """関数・マクロ・コールバック1件分のドキュメント。"""
    id: str                      # 例: "run/2"（ページ内のid属性に使用）
    name: str
    arity: int
    type: str = "def"            # "def" / "defmacro" / "callback" など
    signature: str = ""
    doc: str | None = None


@dataclass(frozen=True)
class DocumentationNode:
    """1ページに対応するドキュメントノード。"""
    id: str                      # 出力ファイル名の stem
    type: NodeType = NodeType.MODULE
    title: str = ""
    moduledoc: str | None = None
    docs: tuple[DocEntry, ...] = field(default=())

    def __post_init__(self):
        if not self.title:
            object.__setattr__(self, "title", self.id)


# 種別ごとの抽出条件
_EXCLUDED_FROM_MODULES = {NodeType.EXCEPTION, NodeType.PROTOCOL, NodeType.IMPL}


def filter_list(kind: str, nodes: list[DocumentationNode]) -> list[DocumentationNode]:
    """
    ノードを種別で抽出し、id順に並べて返す。

    Parameters
    ----------
    kind : str
        "modules"、"exceptions"、"protocols" のいずれか。
    nodes : list[DocumentationNode]
        全ノード。

    Returns
    -------
    list[DocumentationNode]
        抽出されたノードのリスト。

    Raises
    ------
    ValueError
        未知の kind が指定された場合。
    """
    if kind == "modules":
        selected = [n for n in nodes if n.type not in _EXCLUDED_FROM_MODULES]
    elif kind == "exceptions":
        selected = [n for n in nodes if n.type is NodeType.EXCEPTION]
    elif kind == "protocols":
        selected = [n for n in nodes if n.type is NodeType.PROTOCOL]
    else:
        raise ValueError(f"unknown node kind: {kind}")
    return sorted(selected, key=lambda n: n.id)
