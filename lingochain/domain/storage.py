from dataclasses import dataclass
from typing import Any, Literal, Optional, Protocol


LoadStatus = Literal["loaded", "empty", "corrupt"]


@dataclass
class LoadResult:
    """一次读取的结果。

    - loaded: 读到了可解析的数据，value 为反序列化后的对象。
    - empty: 从未写入过（首次运行）。
    - corrupt: 条目存在但无法读取或解析，error 中保存原因。
    """

    status: LoadStatus
    value: Any = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status == "loaded"


class KeyValueStore(Protocol):
    def load(self, key: str) -> LoadResult:
        ...

    def save(self, key: str, value: Any) -> None:
        ...

    def delete(self, key: str) -> None:
        ...
