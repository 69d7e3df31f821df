"""sprout — 从 git 仓库编译安装的源码包管理器"""

__version__ = "0.1.0"
