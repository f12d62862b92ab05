"""渲染层接口。"""

from .server import create_app

__all__ = ["create_app"]
