"""安装器 — 把分类后的构建产物复制到安装目录与系统目录

流程:
  1. 确保安装目录存在
  2. 扫描构建目录
  3. 复制特殊目录:
       include 目录 → include_dir/<package>/
       lib 目录     → lib_dir/<package>/
       bin 目录     → <install_dir>/bin/（不进系统 bin，避免以包名命名的目录挡住可执行文件链接）
  4. 复制零散可执行文件到安装目录，零散库/头文件到系统 lib/include 目录（保留权限位）
  5. 发布软链接

任何失败都包装为 InstallError。已复制的文件不会回滚。
"""

from __future__ import annotations

import logging
from pathlib import Path

from sprout.core.exceptions import InstallError
from sprout.core.models import ScannedFileSet
from sprout.services.install.scanner import FileScanner
from sprout.services.install.symlinks import SymlinkManager
from sprout.utils.fs import copy_dir, copy_file_with_permissions, ensure_dir

logger = logging.getLogger(__name__)


class Installer:
    """构建产物安装器"""

    def __init__(
        self,
        lib_dir: str,
        include_dir: str,
        apps_dir: str,
        symlinks: SymlinkManager,
        scanner: FileScanner | None = None,
    ) -> None:
        self.lib_dir = Path(lib_dir)
        self.include_dir = Path(include_dir)
        self.apps_dir = Path(apps_dir)
        self.symlinks = symlinks
        self.scanner = scanner or FileScanner()

    def install(
        self, package_name: str, build_dir: str | Path,
        install_dir: str | Path, version: str,
    ) -> int:
        """安装构建产物并发布软链接，返回新建的软链接数"""
        try:
            dest = ensure_dir(install_dir)
            scanned = self.scanner.scan(build_dir)
            logger.info("扫描结果 %s: %s", package_name, scanned.summary())

            self._copy_special_dirs(scanned, package_name, dest)
            self._copy_loose_files(scanned, dest)
            logger.info("已安装构建产物: %s:%s", package_name, version)

            count = self.symlinks.create_symlinks(dest, package_name, version)
            logger.info("已创建 %d 个软链接", count)
        except InstallError:
            raise
        except Exception as e:
            raise InstallError(f"安装 {package_name} 失败: {e}", package_name) from e

        logger.info(
            "如需桌面入口，可手动创建: %s",
            self.desktop_file_path(package_name),
        )
        return count

    def _copy_special_dirs(self, scanned: ScannedFileSet, package_name: str, install_dir: Path) -> None:
        targets = (
            (scanned.include_dirs, self.include_dir / package_name),
            (scanned.lib_dirs, self.lib_dir / package_name),
            (scanned.bin_dirs, install_dir / "bin"),
        )
        for sources, dest in targets:
            for src in sources:
                if not Path(src).is_dir():
                    logger.warning("跳过非目录条目: %s", src)
                    continue
                copy_dir(src, dest)

    def _copy_loose_files(self, scanned: ScannedFileSet, install_dir: Path) -> None:
        ensure_dir(self.lib_dir)
        ensure_dir(self.include_dir)
        for exe in scanned.executables:
            copy_file_with_permissions(exe, install_dir / Path(exe).name)
        for lib in scanned.libraries:
            copy_file_with_permissions(lib, self.lib_dir / Path(lib).name)
        for header in scanned.headers:
            copy_file_with_permissions(header, self.include_dir / Path(header).name)

    def desktop_file_path(self, package_name: str) -> Path:
        return self.apps_dir / f"{package_name}.desktop"

    def create_desktop_file(self, package_name: str, exec_path: str) -> Path:
        """写入 freedesktop 桌面入口"""
        path = self.desktop_file_path(package_name)
        ensure_dir(path.parent)
        path.write_text(
            "[Desktop Entry]\n"
            f"Name={package_name}\n"
            f"Exec={exec_path}\n"
            "Type=Application\n"
            "Terminal=false\n",
            encoding="utf-8",
        )
        logger.info("桌面入口已创建: %s", path)
        return path
