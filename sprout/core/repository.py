"""仓库列表管理 — 平铺文本文件，每行一个规范化后的 git URL

职责:
- 添加/删除仓库 URL（单个、本地文件批量、远程列表批量）
- 按包名解析 URL、按子串搜索
"""

from __future__ import annotations

import logging
import urllib.error
import urllib.request
from pathlib import Path

from sprout.core.exceptions import RepositoryError
from sprout.utils.fs import append_line, read_lines, write_lines
from sprout.utils.git import extract_package_name, git_latest_tag, normalize_git_url
from sprout.utils.net import validate_url_scheme
from sprout.utils.shell import CommandExecutor

logger = logging.getLogger(__name__)


class Repository:
    """仓库列表"""

    def __init__(self, repos_file: str, executor: CommandExecutor | None = None) -> None:
        self.repos_file = Path(repos_file)
        self._executor = executor

    def initialize(self) -> None:
        self.repos_file.parent.mkdir(parents=True, exist_ok=True)
        if not self.repos_file.exists():
            self.repos_file.touch()

    def list_repositories(self) -> list[str]:
        return read_lines(self.repos_file)

    def add_repository(self, url: str) -> str:
        """添加仓库，返回其最新 tag（无 tag 时为 HEAD）"""
        self.initialize()
        normalized = normalize_git_url(url)
        latest = git_latest_tag(url, executor=self._executor)
        if normalized in self.list_repositories():
            logger.info("仓库已存在，跳过: %s", normalized)
            return latest
        append_line(self.repos_file, normalized)
        logger.info("仓库已添加: %s (最新 tag: %s)", normalized, latest)
        return latest

    def add_repositories_from_file(self, path: str) -> int:
        """从本地文件逐行添加，返回处理的行数"""
        p = Path(path)
        if not p.exists():
            raise RepositoryError(f"仓库列表文件不存在: {path}")
        lines = read_lines(p)
        for line in lines:
            self.add_repository(line)
        return len(lines)

    def add_repositories_from_url(self, url: str) -> int:
        """从远程文本列表逐行添加，返回处理的行数"""
        validate_url_scheme(url, context="repository list")
        try:
            with urllib.request.urlopen(url, timeout=60) as resp:  # nosec B310
                text = resp.read().decode("utf-8")
        except (OSError, urllib.error.URLError) as e:
            raise RepositoryError(f"无法获取仓库列表: {url}: {e}", url=url) from e
        lines = [line.strip() for line in text.splitlines() if line.strip()]
        for line in lines:
            self.add_repository(line)
        return len(lines)

    def remove_repository(self, url: str) -> None:
        self.initialize()
        normalized = normalize_git_url(url)
        repos = self.list_repositories()
        remaining = [r for r in repos if r != normalized]
        if len(remaining) == len(repos):
            raise RepositoryError(f"仓库不存在: {normalized}", url=normalized)
        write_lines(self.repos_file, remaining)
        logger.info("仓库已移除: %s", normalized)

    def search_repositories(self, query: str) -> list[str]:
        """URL 中包含 query 的仓库（不区分大小写）"""
        q = query.lower()
        return [r for r in self.list_repositories() if q in r.lower()]

    def find_package_url(self, name: str) -> str | None:
        """按包名精确解析 URL，未找到返回 None"""
        target = name.lower()
        for repo in self.list_repositories():
            if extract_package_name(repo) == target:
                return repo
        return None

    def find_package_urls(self, name: str) -> list[str]:
        """URL 中包含 name 的全部仓库（remove-repo 用于模糊匹配）"""
        return self.search_repositories(name)
