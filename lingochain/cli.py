"""命令行入口。"""

from __future__ import annotations

import click

from lingochain import __version__
from lingochain.config.settings import settings


def _open_session(storage_root: str | None):
    from lingochain.infrastructure.storage.json_store import JsonKeyValueStore
    from lingochain.session import ChatSession

    session = ChatSession(
        JsonKeyValueStore(root=storage_root),
        on_error=lambda text: click.echo(f"Error: {text}", err=True),
    )
    session.load()
    return session


@click.group()
@click.version_option(version=__version__, prog_name="lingochain")
def cli():
    """lingochain：聊天客户端与 API 代理。"""
    pass


@cli.command()
@click.option("--host", default=None, help="监听地址（默认取配置）")
@click.option("--port", default=None, type=int, help="端口（默认 3000）")
def serve(host: str | None, port: int | None):
    """启动 /api/chat 代理服务。"""
    import uvicorn

    host = host or settings.host
    port = port or settings.port
    click.echo(f"Server running at http://{host}:{port}")
    uvicorn.run("lingochain.api.server:app", host=host, port=port)


@cli.command()
@click.option("--storage-root", default=None, help="会话存储目录")
def chats(storage_root: str | None):
    """列出已保存的会话，最近的在前。"""
    session = _open_session(storage_root)
    for row in session.summaries():
        marker = "*" if row.active else " "
        click.echo(f"{marker} {row.id}  {row.title}  [{row.time_label}]  {row.preview}")
    click.echo(f"{len(session.conversations)} chat(s)")


@cli.command()
@click.argument("message")
@click.option("--new", "new_chat", is_flag=True, help="先新建一个会话")
@click.option("--storage-root", default=None, help="会话存储目录")
@click.option("--api-url", default=None, help="代理地址（默认取配置）")
def send(message: str, new_chat: bool, storage_root: str | None, api_url: str | None):
    """在当前会话中发送 MESSAGE 并打印回复。"""
    from lingochain.client.proxy_client import ProxyClient

    session = _open_session(storage_root)
    if new_chat:
        session.create_conversation()
    reply = session.send_message(message, ProxyClient(api_url=api_url))
    if reply is None:
        raise click.UsageError("Message is empty")
    click.echo(reply.content)
    if reply.is_error:
        raise SystemExit(1)


@cli.command()
def gui():
    """打开桌面聊天窗口。"""
    from lingochain.gui.chat_window import main

    main()


if __name__ == "__main__":
    cli()
