"""Git 工具 — clone / 远程 tag 查询 / URL 规范化"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path

from sprout.core.exceptions import ValidationError
from sprout.core.models import HEAD
from sprout.utils.shell import CommandExecutor, get_executor

logger = logging.getLogger(__name__)

_SAFE_REF_RE = re.compile(r"^[a-zA-Z0-9_./@+\-]+$")


@dataclass
class GitTag:
    name: str
    commit: str


def normalize_git_url(url: str) -> str:
    """去掉末尾的 .git 后缀"""
    url = url.strip()
    return url[:-4] if url.endswith(".git") else url


def extract_package_name(url: str) -> str:
    """包名 = 规范化 URL 最后一段的小写形式"""
    normalized = normalize_git_url(url).rstrip("/")
    return normalized.rsplit("/", 1)[-1].lower()


def git_clone(
    url: str, dest: str | Path, *,
    branch: str | None = None,
    depth: int | None = None,
    executor: CommandExecutor | None = None,
) -> bool:
    """克隆仓库到 dest，返回是否成功"""
    if branch and not _SAFE_REF_RE.match(branch):
        raise ValidationError(f"ref 包含非法字符: {branch}")
    args = ["git", "-c", "advice.detachedHead=false", "clone"]
    if depth:
        args += ["--depth", str(depth)]
    if branch:
        args += ["--branch", branch]
    args += [url, str(dest)]

    r = (executor or get_executor()).execute(args)
    if not r.success:
        logger.error("无法克隆仓库 %s: %s", url, r.tail(300))
        return False
    return True


def git_get_tags(url: str, *, executor: CommandExecutor | None = None) -> list[GitTag]:
    """列出远程仓库的 tag（按 ls-remote 输出顺序）"""
    r = (executor or get_executor()).execute(
        ["git", "ls-remote", "--tags", "--refs", url],
    )
    if not r.success:
        logger.warning("无法获取 tag: %s", url)
        return []

    tags: list[GitTag] = []
    for line in r.stdout.splitlines():
        parts = line.strip().split("\t")
        if len(parts) != 2:
            continue
        commit, ref = parts
        tags.append(GitTag(name=ref.removeprefix("refs/tags/"), commit=commit))
    return tags


def git_latest_tag(url: str, *, executor: CommandExecutor | None = None) -> str:
    """最后列出的 tag；没有 tag 时返回 HEAD"""
    tags = git_get_tags(url, executor=executor)
    if not tags:
        return HEAD
    return tags[-1].name
