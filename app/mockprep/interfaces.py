"""
Abstractions for pluggable collaborators. Inversion of control: the pipeline
depends on these protocols, not on OpenAI, SQLite or Streamlit.

Common protocols:
- GenerationClient.send(prompt) -> (text, meta)
- DocumentStore.get / upsert / query
- AuthProvider.current_user_id() -> str | None
- Navigator.go_to(path)
- Notifier.success(...) / error(...)

Testing: Use simple fake implementations to test the controller without
network calls.
"""

from __future__ import annotations
from typing import Any, Optional, Protocol


class GenerationClient(Protocol):
    def send(self, prompt: str) -> tuple[str, dict]: ...


class DocumentStore(Protocol):
    def get(self, collection: str, doc_id: str) -> Optional[dict[str, Any]]: ...

    def upsert(
        self,
        collection: str,
        doc_id: str,
        fields: dict[str, Any],
        *,
        merge: bool = True,
    ) -> None: ...

    def query(
        self, collection: str, field: str, value: Any
    ) -> list[dict[str, Any]]: ...


class AuthProvider(Protocol):
    def current_user_id(self) -> Optional[str]: ...


class Navigator(Protocol):
    def go_to(self, path: str) -> None: ...


class Notifier(Protocol):
    def success(self, title: str, message: str) -> None: ...

    def error(self, title: str, message: str) -> None: ...
