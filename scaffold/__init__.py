"""
Playwright 測試專案產生器 (scaffold)

根據一份設定快照 (語言、瀏覽器、CI workflow、容器、fixture、整合)，
產生一套彼此一致的 Playwright 測試專案檔案，並打包成 zip。

產出全部在記憶體內完成，不會寫入任何目錄，直到呼叫端決定存檔。

用法:
    python -m scaffold --spec playwright.json --output framework.zip

    from scaffold import ConfigurationSnapshot, generate
    archive = generate(ConfigurationSnapshot.from_dict(data))
    archive.write_to("framework.zip")

產出結構 (依設定增減)：
    playwright-framework/
    ├── playwright.config.ts
    ├── package.json
    ├── tsconfig.json
    ├── .env.example
    ├── tests/
    │   ├── example.spec.ts
    │   ├── pages/
    │   ├── fixtures/
    │   └── utils/
    ├── test-data/
    ├── .github/workflows/
    ├── Dockerfile
    └── README.md
"""

from scaffold.engine import FrameworkGenerator, GenerationResult, generate, preview
from scaffold.schema import ConfigurationSnapshot
from scaffold.validator import conflicts, recommendations, validate

__all__ = [
    "ConfigurationSnapshot",
    "FrameworkGenerator",
    "GenerationResult",
    "generate",
    "preview",
    "validate",
    "conflicts",
    "recommendations",
]
