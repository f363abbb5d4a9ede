"""Runtime options shared by the CLI and the session controller."""
import argparse
import os
from dataclasses import dataclass, fields
from typing import Optional

from .insights import BACKEND_NAMES, DEFAULT_OLLAMA_MODEL, DEFAULT_OLLAMA_URL, DEFAULT_SYNC_URL
from .ranking import DEFAULT_RELATED_LIMIT


@dataclass
class WeftOptions:
    graph: str = "tab_graph.json"
    history: str = os.path.join("data", "weft_history.json")
    no_history: bool = False
    insights_backend: str = "sync"
    sync_url: str = DEFAULT_SYNC_URL
    timeout: int = 20
    ollama_url: str = DEFAULT_OLLAMA_URL
    ollama_model: str = DEFAULT_OLLAMA_MODEL
    ollama_timeout: int = 120
    gguf: Optional[str] = None
    llama_n_ctx: int = 4096
    llama_n_threads: int = max(1, os.cpu_count() or 1)
    llama_n_gpu_layers: int = 0
    related_limit: int = DEFAULT_RELATED_LIMIT
    verbose: bool = False

    @property
    def history_path(self) -> Optional[str]:
        return None if self.no_history else self.history

    def backend_options(self) -> dict:
        return {
            "sync_url": self.sync_url,
            "timeout": self.timeout,
            "ollama_url": self.ollama_url,
            "ollama_model": self.ollama_model,
            "ollama_timeout": self.ollama_timeout,
            "gguf": self.gguf,
            "llama_n_ctx": self.llama_n_ctx,
            "llama_n_threads": self.llama_n_threads,
            "llama_n_gpu_layers": self.llama_n_gpu_layers,
        }


def add_arguments(ap: argparse.ArgumentParser) -> None:
    d = WeftOptions()
    ap.add_argument("--graph", default=d.graph, help="Tab graph JSON path")
    ap.add_argument("--history", default=d.history, help="Search history store path")
    ap.add_argument("--no-history", action="store_true", help="Keep search history in memory only")
    ap.add_argument("--insights-backend", choices=BACKEND_NAMES, default=d.insights_backend, help="Insight source tried before the offline report")
    ap.add_argument("--sync-url", default=d.sync_url, help="Insight server sync endpoint")
    ap.add_argument("--timeout", type=int, default=d.timeout, help="Insight server timeout seconds")
    ap.add_argument("--ollama-url", default=d.ollama_url, help="Ollama base URL")
    ap.add_argument("--ollama-model", default=d.ollama_model, help="Ollama model name")
    ap.add_argument("--ollama-timeout", type=int, default=d.ollama_timeout, help="Ollama request timeout")
    ap.add_argument("--gguf", help="Path to a GGUF model file for llama-cpp-python")
    ap.add_argument("--llama-n-ctx", type=int, default=d.llama_n_ctx, help="Context size for llama-cpp")
    ap.add_argument("--llama-n-threads", type=int, default=d.llama_n_threads, help="Threads for llama-cpp")
    ap.add_argument("--llama-n-gpu-layers", type=int, default=d.llama_n_gpu_layers, help="GPU layers for llama-cpp")
    ap.add_argument("--related-limit", type=int, default=d.related_limit, help="Related tabs shown per tab")
    ap.add_argument("-v", "--verbose", action="store_true", help="Verbose logging")


def options_from_args(args: argparse.Namespace) -> WeftOptions:
    values = {f.name: getattr(args, f.name) for f in fields(WeftOptions) if hasattr(args, f.name)}
    return WeftOptions(**values)
