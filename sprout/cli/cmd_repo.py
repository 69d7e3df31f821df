"""CLI — 仓库列表管理命令"""

from __future__ import annotations

from typing import Any

import click

from sprout.cli import _svc
from sprout.core.exceptions import RepositoryError, ValidationError
from sprout.utils.net import is_http_url
from sprout.utils.setup import ensure_root


def register(group: click.Group) -> None:
    group.add_command(add_repo)
    group.add_command(add_repo_pkg)
    group.add_command(remove_repo)


@click.command(name="add-repo")
@click.argument("url")
def add_repo(url: str) -> None:
    """添加一个 git 仓库 (别名 ar)"""
    svc = _svc()
    ensure_root(svc.config)
    tag = svc.repository.add_repository(url)
    click.echo(f"仓库已添加: {url} (最新 tag: {tag})")


@click.command(name="add-repo-pkg")
@click.argument("source")
def add_repo_pkg(source: str) -> None:
    """从本地文件或 http(s) 地址批量添加仓库 (别名 arp)"""
    svc = _svc()
    ensure_root(svc.config)
    if is_http_url(source):
        count = svc.repository.add_repositories_from_url(source)
    else:
        count = svc.repository.add_repositories_from_file(source)
    click.echo(f"已处理 {count} 个仓库")


@click.command(name="remove-repo")
@click.argument("target")
def remove_repo(target: str) -> None:
    """按 URL 或包名从仓库列表中删除 (别名 rr)"""
    svc = _svc()
    ensure_root(svc.config)
    url = target if "://" in target or "@" in target else _match_one(svc, target)
    svc.repository.remove_repository(url)
    click.echo(f"仓库已删除: {url}")


def _match_one(svc: Any, name: str) -> str:
    matches = svc.repository.find_package_urls(name)
    if not matches:
        raise RepositoryError(f"仓库不存在: {name}")
    if len(matches) > 1:
        raise ValidationError(f"匹配到多个仓库，请给出完整 URL: {name}", details=matches)
    return matches[0]
