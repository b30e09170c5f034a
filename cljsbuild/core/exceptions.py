"""统一异常体系

所有业务异常继承 CljsbuildError。命令行入口只捕获这一个基类，
打印 "Error: <message>" 并以 exit_code 退出，调用点不做零散的日志 + 退出。
"""

from __future__ import annotations


class CljsbuildError(Exception):
    """基础异常"""

    code: str = "UNKNOWN"
    exit_code: int = 1

    def __init__(self, message: str) -> None:
        super().__init__(message)


class ConfigError(CljsbuildError):
    """清单文件缺失或内容无效"""

    code = "CONFIG_ERROR"


class ConfigMissingError(ConfigError):
    """清单文件不存在"""

    code = "CONFIG_MISSING"


class ConfigKeyUndefinedError(ConfigError):
    """必需的配置项既没有写在清单里，也没有默认值"""

    code = "CONFIG_KEY_UNDEFINED"

    def __init__(self, key: str, section: str = "cljsbuild") -> None:
        super().__init__(f"未定义的清单配置项: {section}.{key}")
        self.key = key


class ValidationError(CljsbuildError):
    """输入数据校验失败"""

    code = "VALIDATION_ERROR"


class DependencyError(CljsbuildError):
    """依赖版本查询失败"""

    code = "DEPENDENCY_ERROR"


class RegistryLookupEmptyError(DependencyError):
    """所有制品仓库都没有匹配的版本（单个坐标内恢复，不终止批量查询）"""

    code = "REGISTRY_LOOKUP_EMPTY"

    def __init__(self, name: str) -> None:
        super().__init__(f"未找到依赖包版本: {name}")
        self.name = name


class NetworkError(DependencyError):
    """查询制品仓库时的传输层错误"""

    code = "NETWORK_ERROR"


class ExternalToolError(CljsbuildError):
    """外部工具 (mvn / java) 执行失败"""

    code = "EXTERNAL_TOOL_ERROR"
