"""领域层模型与协议。

包含：
- models: 会话 Conversation、消息 UserMessage / AssistantMessage 以及上游请求模型。
- storage: 键值存储协议 KeyValueStore 与读取结果 LoadResult。
- exceptions: 业务异常类型定义。
"""
