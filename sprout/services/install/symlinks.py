"""软链接生命周期管理

全局 bin 目录中的两类链接:
  - 规范链接 <exe>          指向当前激活版本
  - 版本链接 <exe>@<version> 每个已安装版本各一份，与激活状态无关

写入策略（每次写入前检查）:
  - 目标位置是目录（含指向目录的软链接）→ 跳过，绝不碰系统目录
  - 已是指向期望目标的软链接 → 幂等跳过，不计入新建数
  - 指向别处的软链接或普通文件 → 删除后重建

删除时的归属检查: 只删除「是软链接且解析后的绝对目标位于该安装目录下」的条目，
避免误删同名但属于其他共存版本或其他包的链接。
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from sprout.core.models import LinkOutcome, PackageVersion
from sprout.utils.fs import is_within, resolve_link, walk_dir

logger = logging.getLogger(__name__)


def versioned_name(file_name: str, version: str) -> str:
    return f"{file_name}@{version}"


def place_symlink(target: str | Path, link_path: str | Path) -> LinkOutcome:
    """按写入策略创建或修复 link_path → target"""
    link = Path(link_path)
    target = str(target)
    try:
        if link.is_symlink() and os.path.normpath(str(resolve_link(link))) == os.path.normpath(target):
            return LinkOutcome.UNCHANGED
        # is_dir 会跟随软链接: 指向目录的软链接（如 /usr/bin/X11 -> .）同样不碰
        if link.is_dir():
            logger.warning("目标位置是目录，跳过: %s", link)
            return LinkOutcome.SKIPPED
        if link.is_symlink() or link.exists():
            link.unlink()
        os.symlink(target, link)
    except OSError as e:
        logger.warning("无法创建软链接 %s -> %s: %s", link, target, e)
        return LinkOutcome.FAILED
    return LinkOutcome.CREATED


class SymlinkManager:
    """全局 bin 目录软链接管理器"""

    def __init__(self, bin_dir: str, pkgs_dir: str) -> None:
        self.bin_dir = Path(bin_dir)
        self.pkgs_dir = Path(pkgs_dir)

    @staticmethod
    def _files(install_dir: Path) -> list[Path]:
        return [p for p in walk_dir(install_dir) if not p.is_dir() or p.is_symlink()]

    def create_symlinks(
        self, install_dir: str | Path,
        package_name: str | None = None,
        version: str | None = None,
    ) -> int:
        """为安装目录中每个非目录条目发布规范链接和（给定包名与版本时）版本链接

        返回实际新建或重新指向的链接数。
        """
        root = Path(install_dir).absolute()
        count = 0
        for path in self._files(root):
            links = [self.bin_dir / path.name]
            if package_name and version:
                links.append(self.bin_dir / versioned_name(path.name, version))
            for link in links:
                if place_symlink(path, link) is LinkOutcome.CREATED:
                    count += 1
        logger.debug("已发布 %d 个软链接: %s", count, root)
        return count

    def remove_symlinks(
        self, install_dir: str | Path,
        package_name: str | None = None,
        version: str | None = None,
    ) -> int:
        """删除归属于 install_dir 的规范链接和（给定包名与版本时）版本链接，返回删除数"""
        root = Path(install_dir).absolute()
        count = 0
        for path in walk_dir(root):
            links = [self.bin_dir / path.name]
            if package_name and version:
                links.append(self.bin_dir / versioned_name(path.name, version))
            for link in links:
                if self._unlink_if_owned(link, root):
                    count += 1
        return count

    @staticmethod
    def _unlink_if_owned(link: Path, install_dir: Path) -> bool:
        if not link.is_symlink():
            # 不存在或是普通文件/目录（可能属于系统），一律不碰
            return False
        try:
            target = resolve_link(link)
        except OSError as e:
            logger.warning("无法读取软链接 %s: %s", link, e)
            return False
        if not is_within(target, install_dir):
            return False
        link.unlink()
        return True

    def remove_symlinks_for_package(self, package_name: str) -> int:
        """删除指向该包任一版本的规范链接"""
        return self.remove_symlinks(self.pkgs_dir / package_name)

    def switch_version(self, package_name: str, version: str) -> bool:
        """把规范链接重新指向指定版本；版本链接保持不变

        版本未安装或没有任何链接可指向时返回 False。
        """
        install_dir = PackageVersion(package_name, version).install_dir(self.pkgs_dir).absolute()
        if not install_dir.is_dir():
            return False
        switched = False
        for path in self._files(install_dir):
            outcome = place_symlink(path, self.bin_dir / path.name)
            if outcome in (LinkOutcome.CREATED, LinkOutcome.UNCHANGED):
                switched = True
        return switched

    def _links_into(self, package_name: str) -> list[tuple[str, Path]]:
        """bin 目录中解析到该包存储根目录下的软链接 (名称, 绝对目标)"""
        if not self.bin_dir.is_dir():
            return []
        pkg_root = (self.pkgs_dir / package_name).absolute()
        result: list[tuple[str, Path]] = []
        for entry in sorted(os.scandir(self.bin_dir), key=lambda e: e.name):
            if not entry.is_symlink():
                continue
            try:
                target = resolve_link(entry.path)
            except OSError:
                continue
            if is_within(target, pkg_root) and target != pkg_root:
                result.append((entry.name, target))
        return result

    def list_versioned_symlinks(self, package_name: str) -> list[str]:
        """名称含 @ 且指向该包存储目录的链接"""
        return [name for name, _ in self._links_into(package_name) if "@" in name]

    def active_version(self, package_name: str) -> str | None:
        """规范链接当前指向的版本（按第一个找到的规范链接判断）"""
        pkg_root = (self.pkgs_dir / package_name).absolute()
        for name, target in self._links_into(package_name):
            if "@" in name:
                continue
            return target.relative_to(pkg_root).parts[0]
        return None
