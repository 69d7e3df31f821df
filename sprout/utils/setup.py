"""运行环境准备 — 目录初始化、PATH 引导、root 权限检查"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from sprout.core.config import Config
from sprout.core.exceptions import ConfigError
from sprout.utils.fs import append_line, ensure_dir

logger = logging.getLogger(__name__)


def shell_config_file(shell: str = "", home: str | Path | None = None) -> Path | None:
    """根据 $SHELL 推断 rc 文件位置，无法识别时返回 None"""
    shell = shell or os.environ.get("SHELL", "")
    base = Path(home) if home else Path.home()
    if "bash" in shell:
        return base / ".bashrc"
    if "zsh" in shell:
        return base / ".zshrc"
    if "fish" in shell:
        return base / ".config/fish/config.fish"
    if "nu" in shell:
        return base / ".config/nushell/config.nu"
    return None


def path_command(bin_dir: str, shell: str) -> str:
    """生成把 bin_dir 加入 PATH 的 shell 语句"""
    if "fish" in shell:
        return f"fish_add_path -aP {bin_dir}"
    if "nu" in shell:
        return f'use std/util "path add"\npath add "{bin_dir}"'
    return f"PATH=$PATH:{bin_dir}"


def add_to_path(bin_dir: str, *, shell: str = "", home: str | Path | None = None) -> Path | None:
    """把 bin_dir 写入 shell rc 文件，返回被修改的文件（未修改返回 None）"""
    shell = shell or os.environ.get("SHELL", "")
    rc = shell_config_file(shell, home)
    if rc is None:
        logger.warning("无法识别 shell 配置文件，请手动把 %s 加入 PATH", bin_dir)
        return None
    if not rc.exists():
        logger.warning("shell 配置文件不存在: %s", rc)
        return None
    if bin_dir in rc.read_text(encoding="utf-8"):
        return None
    append_line(rc, path_command(bin_dir, shell))
    logger.warning("PATH 已修改，请重启 shell 或执行: source %s", rc)
    return rc


def setup_environment(config: Config) -> None:
    """创建必需目录；bin_dir 不在 PATH 中时尝试写入 rc 文件"""
    for d in config.essential_dirs():
        ensure_dir(d)
    path_env = os.environ.get("PATH", "").split(os.pathsep)
    if config.bin_dir not in path_env:
        add_to_path(config.bin_dir)


def ensure_root(config: Config) -> None:
    """require_root 开启时要求以 root 运行"""
    if not config.require_root:
        return
    if os.geteuid() != 0:
        raise ConfigError("该命令需要 root 权限，请使用 sudo 或 doas 运行")
