"""
带 HTTP 状态码的业务异常

存储层异常（sqlalchemy.exc.*）不在这里包装，原样向上抛出。
"""


class TaskboardError(Exception):
    """所有业务异常的基类，status 决定最终的 HTTP 状态码"""

    status: int = 500

    def __init__(self, message: str = "", status: int | None = None):
        super().__init__(message)
        if status is not None:
            self.status = status


class NotFoundError(TaskboardError):
    status = 404


class BadRequestError(TaskboardError):
    status = 400
