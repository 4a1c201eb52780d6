"""
族图片打印 - 后端核心模块

模块结构：
- config/     运行期配置加载
- models/     数据模型定义
- naming/     文件名规范化与文档标题派生
- render/     缩放启发式/图片导出/居中裁切
- project/    视图准备/实例放置/工作区生命周期
- pipeline/   批处理编排
- host/       宿主（Revit）适配层
"""

__version__ = "0.1.0"
