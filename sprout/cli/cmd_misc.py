"""CLI — 杂项命令（构建系统探测、配置查看、环境准备、桌面入口）"""

from __future__ import annotations

from pathlib import Path

import click

from sprout.cli import _svc
from sprout.core.exceptions import PackageNotFoundError
from sprout.utils.setup import ensure_root, setup_environment
from sprout.utils.yaml_io import dump_yaml


def register(group: click.Group) -> None:
    group.add_command(detect)
    group.add_command(show_config)
    group.add_command(setup)
    group.add_command(desktop)


@click.command()
@click.argument("project_dir", default=".", type=click.Path(exists=True, file_okay=False))
@click.option("--name", default=None, help="包名（用于匹配自定义 bldit 脚本，默认取目录名）")
def detect(project_dir: str, name: str | None) -> None:
    """探测项目将使用的构建系统"""
    builder = _svc().builder
    found = builder.detect_build_system(project_dir, package_name=name)
    if found is None:
        click.echo("未检测到构建系统")
        return
    click.echo(found)


@click.command(name="config")
def show_config() -> None:
    """以 YAML 打印当前生效的配置"""
    click.echo(dump_yaml(_svc().config.to_dict()), nl=False)


@click.command()
def setup() -> None:
    """创建必需目录，并在 bin 目录不在 PATH 中时写入 shell 配置"""
    svc = _svc()
    ensure_root(svc.config)
    setup_environment(svc.config)
    svc.repository.initialize()
    click.echo("环境已就绪")


@click.command()
@click.argument("name")
@click.option("--exec", "exec_path", default=None, help="启动命令（默认为 bin 目录下的同名可执行文件）")
def desktop(name: str, exec_path: str | None) -> None:
    """为已安装的包创建桌面入口"""
    svc = _svc()
    ensure_root(svc.config)
    if not svc.versions.is_installed(name):
        raise PackageNotFoundError(name, f"包未安装: {name}")
    path = svc.installer.create_desktop_file(
        name, exec_path or str(Path(svc.config.bin_dir) / name),
    )
    click.echo(f"桌面入口已创建: {path}")
