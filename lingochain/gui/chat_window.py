import threading
import tkinter as tk
from tkinter import messagebox, scrolledtext

from lingochain.config.settings import settings
from lingochain.client.proxy_client import ProxyClient
from lingochain.infrastructure.storage.json_store import JsonKeyValueStore
from lingochain.session.chat_session import ChatSession, PendingSend
from lingochain.session.formatting import format_time


class App:
    def __init__(self, root, client=None, store=None):
        self.root = root
        self.root.title("Lingochain")
        self.client = client or ProxyClient()
        self.session = ChatSession(
            store or JsonKeyValueStore(),
            scheduler=lambda delay, fn: self.root.after(int(delay * 1000), self._after_recreate(fn)),
            on_error=self.show_error,
        )
        self._banner_job = None
        self._row_ids = []
        main = tk.PanedWindow(root, orient=tk.HORIZONTAL)
        main.pack(fill=tk.BOTH, expand=True)
        left = tk.Frame(main)
        right = tk.Frame(main)
        main.add(left, minsize=240)
        main.add(right)
        lf_top = tk.Frame(left)
        lf_top.pack(fill=tk.X)
        tk.Label(lf_top, text="Chats").pack(side=tk.LEFT)
        self.count_badge = tk.Label(lf_top, text="0")
        self.count_badge.pack(side=tk.LEFT)
        self.chat_list = tk.Listbox(left, height=20)
        self.chat_list.pack(fill=tk.BOTH, expand=True)
        self.chat_list.bind("<<ListboxSelect>>", self.on_select_chat)
        lf_btns = tk.Frame(left)
        lf_btns.pack(fill=tk.X)
        tk.Button(lf_btns, text="New chat", command=self.on_new_chat).pack(side=tk.LEFT)
        tk.Button(lf_btns, text="Delete", command=self.on_delete_chat).pack(side=tk.LEFT)
        tk.Button(lf_btns, text="Clear all", command=self.on_clear_all).pack(side=tk.LEFT)
        self.banner = tk.Label(right, text="", foreground="#d93025")
        self.chat = scrolledtext.ScrolledText(right, width=80, height=24)
        self.chat.pack(fill=tk.BOTH, expand=True)
        self.chat.tag_config("user", foreground="#1a73e8")
        self.chat.tag_config("assistant", foreground="#34a853")
        self.chat.tag_config("system", foreground="#5f6368")
        self.chat.tag_config("error", foreground="#d93025")
        rt_in = tk.Frame(right)
        rt_in.pack(fill=tk.X)
        self.entry = tk.Entry(rt_in)
        self.entry.pack(side=tk.LEFT, fill=tk.X, expand=True)
        self.entry.bind("<Return>", self.on_send_event)
        self.send_btn = tk.Button(rt_in, text="Send", command=self.on_send)
        self.send_btn.pack(side=tk.LEFT)
        tk.Button(rt_in, text="Clear chat", command=self.on_clear_chat).pack(side=tk.LEFT)
        self.status = tk.Label(right, text="")
        self.status.pack(fill=tk.X)
        self.session.load()
        self.refresh()
        self.entry.focus()

    def _after_recreate(self, fn):
        def run():
            fn()
            self.refresh()
        return run

    def refresh(self):
        self.render_chat_list()
        self.render_messages()

    def render_chat_list(self):
        rows = self.session.summaries()
        self.count_badge.config(text=str(len(rows)))
        self.chat_list.delete(0, tk.END)
        self._row_ids = [r.id for r in rows]
        for i, r in enumerate(rows):
            self.chat_list.insert(tk.END, f"{r.title}  ({r.time_label})  {r.preview}")
            if r.active:
                self.chat_list.selection_set(i)

    def render_messages(self):
        self.chat.delete(1.0, tk.END)
        conv = self.session.current
        if conv is None or not conv.messages:
            self.chat.insert(tk.END, "Start chatting...\n", "system")
            return
        for m in conv.messages:
            tag = "error" if getattr(m, "is_error", False) else m.role
            name = "You" if m.role == "user" else "Assistant"
            self.chat.insert(tk.END, f"{name} ({format_time(m.timestamp)}): {m.content}\n", tag)
        self.chat.see(tk.END)

    def on_select_chat(self, event):
        sel = self.chat_list.curselection()
        if not sel or sel[0] >= len(self._row_ids):
            return
        if self.session.switch_conversation(self._row_ids[sel[0]]):
            self.render_messages()

    def on_new_chat(self):
        self.session.create_conversation()
        self.refresh()
        self.entry.focus()

    def on_delete_chat(self):
        sel = self.chat_list.curselection()
        if not sel or sel[0] >= len(self._row_ids):
            return
        if not messagebox.askyesno("Delete", "Delete this chat?"):
            return
        self.session.delete_conversation(self._row_ids[sel[0]])
        self.refresh()

    def on_clear_chat(self):
        if self.session.current is None:
            return
        if not messagebox.askyesno("Clear", "Clear all messages in this chat?"):
            return
        self.session.clear_conversation()
        self.refresh()

    def on_clear_all(self):
        count = len(self.session.conversations)
        if count == 0:
            messagebox.showinfo("Clear all", "No chats to clear")
            return
        plural = "s" if count > 1 else ""
        msg = (
            f"This will permanently delete ALL {count} chat{plural} and their message history.\n\n"
            "Are you sure you want to continue?"
        )
        if not messagebox.askyesno("Clear all", msg):
            return
        self.session.clear_all()
        self.refresh()

    def on_send(self):
        pending = self.session.begin_send(self.entry.get())
        if pending is None:
            return
        self.entry.delete(0, tk.END)
        self.set_loading(True)
        self.refresh()

        def worker():
            try:
                reply = self.client.send(pending.text)
                self.root.after(0, lambda: self.on_response(pending, reply, None))
            except Exception as e:
                self.root.after(0, lambda err=e: self.on_response(pending, None, err))
        threading.Thread(target=worker, daemon=True).start()

    def on_send_event(self, event):
        self.on_send()
        return "break"

    def on_response(self, pending: PendingSend, reply, err):
        if err is not None:
            self.session.fail_send(pending, err)
        else:
            self.session.complete_send(pending, reply)
        self.set_loading(False)
        self.refresh()

    def set_loading(self, loading):
        state = tk.DISABLED if loading else tk.NORMAL
        self.send_btn.config(state=state)
        self.entry.config(state=state)
        self.status.config(text="Thinking..." if loading else "")
        if not loading:
            self.entry.focus()

    def show_error(self, text):
        self.banner.config(text=text)
        self.banner.pack(fill=tk.X, before=self.chat)
        if self._banner_job is not None:
            self.root.after_cancel(self._banner_job)
        self._banner_job = self.root.after(int(settings.error_banner_seconds * 1000), self.hide_error)

    def hide_error(self):
        self._banner_job = None
        self.banner.pack_forget()


def main():
    root = tk.Tk()
    App(root)
    root.mainloop()


if __name__ == "__main__":
    main()
