"""
文档标题派生 - 按宿主版本选择标题规则

不同宿主版本的文档标题格式不同：有的不带扩展名，有的带。
核心逻辑不内嵌版本号，版本 -> 规则的映射来自运行期配置 host.title_conventions。

测试要点：
- test_strip_extension: 截取第一个"."之前的部分
- test_as_is: 原样返回
- test_unknown_version: 未配置版本抛 UnknownHostVersionError
"""

from __future__ import annotations

from ..interfaces import IHostWorkspace, ITitleResolver, UnknownHostVersionError


class PlainTitleResolver:
    """标题原样使用"""

    def title_of(self, workspace: IHostWorkspace) -> str:
        return workspace.title()


class StripExtensionTitleResolver:
    """标题带扩展名，截取第一个"."之前的部分"""

    def title_of(self, workspace: IHostWorkspace) -> str:
        title = workspace.title()
        index = title.find(".")
        if index < 0:
            return title
        return title[:index]


TITLE_CONVENTIONS: dict[str, type] = {
    "as_is": PlainTitleResolver,
    "strip_extension": StripExtensionTitleResolver,
}


def get_title_resolver(host_version: str, conventions: dict[str, str]) -> ITitleResolver:
    """
    按宿主版本获取标题派生器

    Args:
        host_version: 宿主版本（如 "2019"）
        conventions: 版本 -> 规则名 映射

    Raises:
        UnknownHostVersionError: 版本未配置或规则名未知
    """
    convention = conventions.get(host_version)
    if convention is None:
        raise UnknownHostVersionError(f"未知的宿主版本: {host_version}")
    resolver_cls = TITLE_CONVENTIONS.get(convention)
    if resolver_cls is None:
        raise UnknownHostVersionError(f"宿主版本 {host_version} 的标题规则未知: {convention}")
    return resolver_cls()
