"""安装服务模块

拆分说明:
- scanner.py: 构建目录分类
- installer.py: 产物复制
- symlinks.py: 全局 bin 目录软链接生命周期
"""

from sprout.services.install.installer import Installer
from sprout.services.install.scanner import FileScanner
from sprout.services.install.symlinks import SymlinkManager

__all__ = ["FileScanner", "Installer", "SymlinkManager"]
