"""统一业务异常模型。

所有跨模块抛出的业务级错误都应该继承自 BusinessError，
便于在代理服务或聊天界面做统一捕获与用户提示。
"""


class BusinessError(Exception):
    """业务异常基类。

    Attributes:
        code: 机器可读错误码（如 "STORE_WRITE_ERROR"）。
        message: 用户可读错误信息。
        http_status: 映射到 HTTP 时可用的状态码，默认 400。
        extra: 其他补充字段（例如 provider、status_code 等）。
    """

    def __init__(self, code: str, message: str, http_status: int = 400, **extra):
        self.code = code
        self.message = message
        self.http_status = http_status
        self.extra = extra
        super().__init__(message)


class NetworkError(BusinessError):
    """网络层错误，例如连接失败、DNS 解析失败等。"""


class ApiError(BusinessError):
    """上游或代理返回非 2xx 时抛出。"""


class RateLimitError(BusinessError):
    """上游限流（429）。不做自动重试。"""


class ValidationError(BusinessError):
    """参数或配置校验失败，例如缺少 API 密钥。"""


class MalformedResponseError(BusinessError):
    """响应体不是预期结构（非 JSON，或缺少 content[0].text）。"""


class StorageError(BusinessError):
    """本地键值存储写入失败。"""
