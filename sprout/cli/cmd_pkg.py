"""CLI — 包安装、删除、查询与版本切换命令"""

from __future__ import annotations

import click

from sprout.cli import _svc
from sprout.core.models import HEAD
from sprout.core.package_manager import parse_package_spec
from sprout.utils.setup import ensure_root


def register(group: click.Group) -> None:
    group.add_command(install)
    group.add_command(install_repo)
    group.add_command(remove)
    group.add_command(list_packages)
    group.add_command(search)
    group.add_command(update)
    group.add_command(files)
    group.add_command(switch)
    group.add_command(versions)


@click.command()
@click.argument("packages", nargs=-1, required=True)
def install(packages: tuple[str, ...]) -> None:
    """按包名安装，可写作 name:version (别名 i)"""
    svc = _svc()
    ensure_root(svc.config)
    for spec in packages:
        outcome = svc.packages.install(spec)
        if outcome.skipped:
            click.echo(f"已安装，跳过: {outcome.package.label}")
        else:
            click.echo(f"安装完成: {outcome.package.label} ({outcome.build_system})")


@click.command(name="install-repo")
@click.argument("url")
@click.option("--version", "version", default=HEAD, show_default=True, help="tag 或分支")
def install_repo(url: str, version: str) -> None:
    """直接从 git URL 安装 (别名 ir)"""
    svc = _svc()
    ensure_root(svc.config)
    outcome = svc.packages.install_from_url(url, version)
    click.echo(f"安装完成: {outcome.package.label} ({outcome.build_system})")


@click.command()
@click.argument("package")
@click.option("--purge", is_flag=True, help="最后一个版本删除后同时清理 include/lib/桌面入口")
def remove(package: str, purge: bool) -> None:
    """删除已安装版本，未指定版本时删除最新版本 (别名 r)"""
    svc = _svc()
    ensure_root(svc.config)
    name, _, version = package.partition(":")
    pkg = svc.packages.remove(name, version or None, purge=purge)
    click.echo(f"已删除: {pkg.label}")


@click.command(name="list")
def list_packages() -> None:
    """列出已安装的包 (别名 l)"""
    installed = _svc().packages.list_installed()
    if not installed:
        click.echo("没有已安装的包。")
        return
    for item in installed:
        click.echo(f"  {item.name:20s} {item.version}")


@click.command()
@click.argument("query")
def search(query: str) -> None:
    """在仓库列表中搜索 (别名 s)"""
    results = _svc().packages.search(query)
    if not results:
        click.echo(f"未找到匹配的包: {query}")
        return
    for name, url in results:
        click.echo(f"  {name:20s} {url}")


@click.command()
def update() -> None:
    """重新构建所有已安装的包 (别名 u)"""
    svc = _svc()
    ensure_root(svc.config)
    updated = svc.packages.update()
    click.echo(f"已更新 {len(updated)} 个包")


@click.command()
@click.argument("name")
def files(name: str) -> None:
    """列出包的已安装文件 (别名 f)"""
    for version, paths in _svc().packages.files(name).items():
        click.echo(f"{name}:{version}")
        for p in paths:
            click.echo(f"  {p}")


@click.command()
@click.argument("package")
@click.argument("version", required=False)
def switch(package: str, version: str | None) -> None:
    """切换规范链接指向的版本，可写作 name:version (别名 sw)"""
    svc = _svc()
    ensure_root(svc.config)
    pkg = parse_package_spec(f"{package}:{version}" if version else package)
    svc.packages.switch_version(pkg.name, pkg.version)
    click.echo(f"已切换: {pkg.label}")


@click.command()
@click.argument("name")
def versions(name: str) -> None:
    """列出包的已安装版本 (别名 v)"""
    for status in _svc().packages.list_versions(name):
        marker = " <- 当前" if status.active else ""
        click.echo(f"  {status.version}{marker}")
