"""
文件範本：目錄樹與 README.md
"""


def directory_tree(root: str, directories: list[str]) -> str:
    """把排序好的目錄清單畫成樹狀圖"""
    tree: dict = {}
    for path in directories:
        node = tree
        for part in path.split("/"):
            node = node.setdefault(part, {})

    lines = [f"{root}/"]

    def walk(node: dict, prefix: str):
        names = list(node)
        for i, name in enumerate(names):
            last = i == len(names) - 1
            lines.append(f"{prefix}{'└── ' if last else '├── '}{name}/")
            walk(node[name], prefix + ("    " if last else "│   "))

    walk(tree, "")
    return "\n".join(lines)


def _file_list(records) -> str:
    if not records:
        return "None"
    return "\n".join(
        f"- `{r.path}`" + (f" - {r.description}" if r.description else "") for r in records
    )


def readme(project_name: str, tree: str, stats, groups: dict, scripts: dict) -> str:
    """
    README.md

    Args:
        stats: ProjectStats
        groups: FileCategory.value -> FileRecord 列表
        scripts: package.json scripts
    """
    lines = [
        f"# {project_name}",
        "",
        "Playwright testing framework generated from a configuration snapshot.",
        "",
        "## Project Overview",
        "",
        f"- **Total Files**: {stats.total_files}",
        f"- **Total Directories**: {stats.total_directories}",
    ]
    for category, label in (
        ("config", "Configuration Files"),
        ("test", "Test Files"),
        ("page", "Page Objects"),
        ("fixture", "Fixtures"),
        ("util", "Utilities"),
        ("ci", "CI Pipelines"),
        ("docker", "Docker Files"),
    ):
        lines.append(f"- **{label}**: {stats.by_category.get(category, 0)}")
    lines.append(f"- **Average File Size**: {stats.average_size} bytes")
    if stats.largest:
        lines.append(f"- **Largest File**: `{stats.largest[0]}` ({stats.largest[1]} bytes)")
    if stats.smallest:
        lines.append(f"- **Smallest File**: `{stats.smallest[0]}` ({stats.smallest[1]} bytes)")

    lines += ["", "## Project Structure", "", "```", tree, "```", "",
              "## Quick Start", "", "```bash", "npm install",
              "npx playwright install --with-deps", "npm test", "```", "",
              "## Available Scripts", ""]
    lines += [f"- `npm run {name}` - `{command}`" for name, command in scripts.items()]

    if stats.by_language:
        lines += ["", "## Technologies Used", ""]
        lines += [f"- **{lang.capitalize()}**: {count} files"
                  for lang, count in stats.by_language.items()]

    lines += ["", "## Key Components", ""]
    for category, label in (
        ("config", "Configuration Files"),
        ("test", "Test Files"),
        ("page", "Page Objects"),
        ("fixture", "Fixtures"),
        ("util", "Utilities"),
    ):
        lines += [f"### {label}", "", _file_list(groups.get(category, [])), ""]

    if groups.get("docker"):
        lines += ["## Docker Support", "", _file_list(groups["docker"]), "",
                  "```bash", "docker compose up --build", "```", ""]
    if groups.get("ci"):
        lines += ["## CI/CD", "", _file_list(groups["ci"]), ""]
    return "\n".join(lines).rstrip("\n") + "\n"
