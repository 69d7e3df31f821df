"""sprout 命令行接口

CLI 按领域拆分为子模块，每个模块注册自己的命令到 main group。
每个命令都有一个短别名（如 install → i），由 AliasedGroup 解析。
"""

from __future__ import annotations

import os
from typing import Any

import click

from sprout import __version__
from sprout.core.config import init_config
from sprout.core.exceptions import SproutError
from sprout.services.container import get_container, reset_container
from sprout.utils.logger import setup_logging

ALIASES = {
    "ar": "add-repo",
    "arp": "add-repo-pkg",
    "rr": "remove-repo",
    "i": "install",
    "ir": "install-repo",
    "r": "remove",
    "l": "list",
    "s": "search",
    "u": "update",
    "f": "files",
    "sw": "switch",
    "v": "versions",
}


class AliasedGroup(click.Group):
    """支持命令别名，并把 SproutError 转为带错误码的 CLI 错误"""

    def get_command(self, ctx: click.Context, cmd_name: str) -> click.Command | None:
        return super().get_command(ctx, ALIASES.get(cmd_name, cmd_name))

    def resolve_command(
        self, ctx: click.Context, args: list[str],
    ) -> tuple[str | None, click.Command | None, list[str]]:
        # 帮助与错误信息里显示完整命令名
        _, cmd, rest = super().resolve_command(ctx, args)
        return (cmd.name if cmd else None), cmd, rest

    def invoke(self, ctx: click.Context) -> Any:
        try:
            return super().invoke(ctx)
        except SproutError as e:
            raise click.ClickException(f"[{e.code}] {e}") from e


def _svc() -> Any:
    """获取全局服务容器的快捷方式"""
    return get_container()


@click.group(cls=AliasedGroup)
@click.option("--config", "config_path", default="", help="配置文件路径（默认读取 SPROUT_CONFIG）")
@click.version_option(version=__version__)
def main(config_path: str) -> None:
    """sprout - 从 git 源码构建并安装软件包"""
    setup_logging(
        level=os.getenv("SPROUT_LOG_LEVEL", "INFO"),
        json_output=os.getenv("SPROUT_LOG_JSON", "") == "1",
    )
    try:
        init_config(config_path)
    except SproutError as e:
        raise click.ClickException(f"[{e.code}] {e}") from e
    reset_container()


# 注册各领域子命令
from sprout.cli.cmd_repo import register as _reg_repo  # noqa: E402
from sprout.cli.cmd_pkg import register as _reg_pkg  # noqa: E402
from sprout.cli.cmd_misc import register as _reg_misc  # noqa: E402

_reg_repo(main)
_reg_pkg(main)
_reg_misc(main)
