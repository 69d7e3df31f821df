"""pkgdeps 文本格式解析

格式:
    # 注释
    https://github.com/owner/libfoo v1.2.0
    https://github.com/owner/bar

空行和 # 开头的行被忽略；每行以空白分隔为 url 与可选 version。
解析结果保持文件顺序，不做排序或去重。
"""

from __future__ import annotations

from pathlib import Path

from sprout.core.dep.models import Dependency
from sprout.utils.git import extract_package_name


def parse_dependency_line(line: str) -> Dependency | None:
    stripped = line.strip()
    if not stripped or stripped.startswith("#"):
        return None
    parts = stripped.split()
    url = parts[0]
    version = parts[1] if len(parts) > 1 else None
    return Dependency(url=url, name=extract_package_name(url), version=version)


def parse_dependency_file(path: str | Path) -> list[Dependency]:
    p = Path(path)
    if not p.is_file():
        return []
    deps: list[Dependency] = []
    for line in p.read_text(encoding="utf-8").splitlines():
        dep = parse_dependency_line(line)
        if dep is not None:
            deps.append(dep)
    return deps
