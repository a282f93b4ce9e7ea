"""
UIメッセージ国際化モジュール。

OSのロケールに基づいて日本語/英語のUIメッセージを自動切替する。
"""
import locale
import os
import subprocess
import sys

MESSAGES: dict[str, dict[str, str]] = {
    "ja": {
        # ツールタイトル
        "tool_title": "DocPub - Documentation EPUB Packager",

        # パス入力
        "prompt_project_path": "プロジェクトファイル（.json）のパスを指定してください\n",

        # 処理ログ
        "processing_start": "処理開始: {time}",
        "processing_end": "処理終了: {time}",
        "elapsed_time": "所要時間: {time}",
        "output_file": "生成ファイル: {path}",
        "processing_aborted": "処理を中断しました。",

        # エラー・バリデーション
        "unsupported_extra_format": "対応していないファイル形式です（対応形式: .md）: {path}",
        "unsupported_logo_format": "対応していないロゴ形式です（対応形式: {allowed}）: {path}",
        "project_invalid_json": "プロジェクトファイルを解析できません: {path}（{error}）",
        "project_missing_field": "プロジェクトファイルに必須項目がありません: {field}",
        "unknown_node_type": "不明なノード種別です: {type}（ノード: {id}）",
        "random_source_failed": "乱数を取得できません: {error}",
        "archive_failed": "EPUBファイルを作成できません: {path}（{error}）",
        "mimetype_missing": "mimetypeファイルがありません: {path}",
        "staging_file_unreadable": "読み込めないファイルをスキップします: {path}（{error}）",
        "staging_file_unreadable_strict": "ファイルを読み込めません: {path}（{error}）",
        "extra_not_utf8": "追加ドキュメントをUTF-8として読み込めません: {path}（{error}）",
        "project_invalid_field": "プロジェクトファイルの項目の値が不正です: {field} = {value!r}",
        "page_name_conflict": "ページ名 {page} が重複しています: {first} と {second}",

        # ロガープレフィックス
        "log_warning": "警告: {message}",
        "log_success": "成功: {message}",

        # 例外メッセージ
        "exception_file_not_found": "{file_type}が見つかりません: {file_path}",

        # ファイル種別名（FileNotFoundError_ の file_type 引数用）
        "file_type_extra": "追加ドキュメント",
        "file_type_logo": "ロゴ画像",
        "file_type_project": "プロジェクトファイル",

        # 並列処理ログ
        "batch_start": "{job}: {count} 件を並列処理します。",
        "batch_unit_failed": "{job} に失敗しました: {item}: {error}",
        "batch_failed": "{job}: {total} 件中 {failed} 件が失敗しました。",
        "job_extras": "追加ドキュメント",
        "job_modules": "モジュール",
        "job_exceptions": "例外",
        "job_protocols": "プロトコル",

        # EPUBビルダーログ
        "epub_start": "{project} v{version} のEPUBを生成します。",
        "staging_ready": "作業フォルダを作成しました: {path}",
        "logo_copied": "ロゴをコピーしました: {file}",
        "package_id": "パッケージID: {uuid}",
        "navigation_written": "content.opf / toc.ncx / nav.html / title.html を出力しました。",
        "archive_written": "EPUBファイルを書き出しました: {file}（{count} エントリ）",
        "staging_cleaned": "作業ファイルを削除しました: {path}",
        "epub_saved": "EPUBファイルを生成しました: {file}",
    },
    "en": {
        # Tool title
        "tool_title": "DocPub - Documentation EPUB Packager",

        # Path input
        "prompt_project_path": "Enter the path to the project file (.json)\n",

        # Processing log
        "processing_start": "Processing started: {time}",
        "processing_end": "Processing ended: {time}",
        "elapsed_time": "Elapsed time: {time}",
        "output_file": "Output file: {path}",
        "processing_aborted": "Processing aborted.",

        # Errors / validation
        "unsupported_extra_format": "file format not recognized, allowed format is: .md ({path})",
        "unsupported_logo_format": "logo format not recognized, allowed formats are: {allowed} ({path})",
        "project_invalid_json": "Cannot parse project file: {path} ({error})",
        "project_missing_field": "Project file is missing a required field: {field}",
        "unknown_node_type": "Unknown node type: {type} (node: {id})",
        "random_source_failed": "Cannot obtain random bytes: {error}",
        "archive_failed": "Cannot create EPUB file: {path} ({error})",
        "mimetype_missing": "mimetype file is missing: {path}",
        "staging_file_unreadable": "Skipping unreadable file: {path} ({error})",
        "staging_file_unreadable_strict": "Cannot read file: {path} ({error})",
        "extra_not_utf8": "Extra document is not valid UTF-8: {path} ({error})",
        "project_invalid_field": "Invalid value in project file: {field} = {value!r}",
        "page_name_conflict": "Page name {page} is used more than once: {first} and {second}",

        # Logger prefixes
        "log_warning": "Warning: {message}",
        "log_success": "Success: {message}",

        # Exception messages
        "exception_file_not_found": "{file_type} not found: {file_path}",

        # File type names (for FileNotFoundError_ file_type argument)
        "file_type_extra": "Extra document",
        "file_type_logo": "Logo image",
        "file_type_project": "Project file",

        # Concurrent jobs
        "batch_start": "{job}: processing {count} item(s) concurrently.",
        "batch_unit_failed": "{job} failed: {item}: {error}",
        "batch_failed": "{job}: {failed} of {total} item(s) failed.",
        "job_extras": "Extras",
        "job_modules": "Modules",
        "job_exceptions": "Exceptions",
        "job_protocols": "Protocols",

        # EPUB builder log
        "epub_start": "Generating EPUB for {project} v{version}.",
        "staging_ready": "Staging directory created: {path}",
        "logo_copied": "Logo copied: {file}",
        "package_id": "Package id: {uuid}",
        "navigation_written": "Wrote content.opf / toc.ncx / nav.html / title.html.",
        "archive_written": "Wrote EPUB archive: {file} ({count} members)",
        "staging_cleaned": "Staging files removed: {path}",
        "epub_saved": "EPUB file generated: {file}",
    },
}

# OS言語判定
def _detect_ui_language() -> str:
    """OSのロケールから UI 言語を判定する。"""
    # macOS: システム言語設定（AppleLanguages）を最優先
    # LANG=C.UTF-8 等はシステム言語と無関係なため、macOS設定を先にチェック
    if sys.platform == "darwin":
        try:
            result = subprocess.run(
                ["defaults", "read", "-g", "AppleLanguages"],
                capture_output=True, text=True, timeout=2
            )
            if result.returncode == 0:
                # 出力例: ("ja-JP", "en-US", ...) → 先頭の言語コードを取得
                for line in result.stdout.splitlines():
                    line = line.strip().strip('",() ')
                    if line:
                        return "ja" if line.startswith("ja") else "en"
        except (OSError, subprocess.SubprocessError):
            pass
    # 環境変数をチェック（LC_ALL, LC_MESSAGES, LANG）
    # C / C.UTF-8 / POSIX はデフォルト値のため言語指定なしとして除外
    for env_var in ("LC_ALL", "LC_MESSAGES", "LANG"):
        value = os.environ.get(env_var, "")
        if value and not value.startswith("C") and value != "POSIX":
            return "ja" if value.startswith("ja") else "en"
    # フォールバック: locale.getlocale()
    # Windows では "Japanese_Japan" のように返るため、大文字小文字を無視して判定
    try:
        loc = locale.getlocale()[0] or ""
    except ValueError:
        loc = ""
    return "ja" if loc.lower().startswith("ja") else "en"

_ui_lang = _detect_ui_language()


def set_ui_language(lang_code: str) -> None:
    """
    UIメッセージ言語を手動で設定する。

    Parameters
    ----------
    lang_code : str
        言語コード（例: "ja_JP", "en_US"）。
        "ja" で始まる場合は日本語、それ以外は英語を使用する。
    """
    global _ui_lang
    _ui_lang = "ja" if lang_code.startswith("ja") else "en"


def msg(key: str, **kwargs) -> str:
    """
    指定キーのUIメッセージを現在のロケールに応じて返す。

    Parameters
    ----------
    key : str
        メッセージキー
    **kwargs
        メッセージ内のプレースホルダーに渡す値

    Returns
    -------
    str
        ロケールに応じたメッセージ文字列
    """
    template = MESSAGES[_ui_lang].get(key, key)
    if kwargs:
        return template.format(**kwargs)
    return template
