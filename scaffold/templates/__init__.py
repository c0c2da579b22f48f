"""
templates: 單一檔案內容的 render 函式

每個函式都是 (設定子集) -> str 的純函式，不讀寫檔案、不碰快照以外的狀態。
TypeScript / JavaScript 的差異集中在這裡的幾個小工具處理。
"""

from scaffold.schema import Language


def import_from(language: Language, names: list[str], module: str) -> str:
    joined = ", ".join(names)
    if language.is_typed:
        return f"import {{ {joined} }} from '{module}';"
    return f"const {{ {joined} }} = require('{module}');"


def export_kw(language: Language) -> str:
    """TS 直接在宣告前加 export；JS 改在檔尾 module.exports"""
    return "export " if language.is_typed else ""


def module_exports(language: Language, names: list[str]) -> str:
    if language.is_typed:
        return ""
    return f"\nmodule.exports = {{ {', '.join(names)} }};\n"


def typed(language: Language, annotation: str) -> str:
    """只有 TS 才輸出型別註記，例如 typed(lang, ': Page')"""
    return annotation if language.is_typed else ""


def join_blocks(*blocks: str) -> str:
    """組合多段內容，略過空段落，段落之間空一行"""
    return "\n\n".join(b.strip("\n") for b in blocks if b and b.strip()) + "\n"
