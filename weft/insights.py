"""Browsing insight reports.

A backend (insight server, Ollama or a local GGUF model) is tried once; on any
failure the report is synthesized offline from the graph snapshot itself.
"""
import sys
import time
from collections import Counter
from dataclasses import dataclass
from typing import Dict, List, Optional, Protocol, Tuple

import requests

from .errors import RemoteSummaryFailure
from .graph import GraphSnapshot

TOP_GROUPS = 5
TOP_KEYWORDS = 10
TOP_DOMAINS = 5

REPORT_TITLE = "Browsing Memory Report"
NO_GROUPS_PLACEHOLDER = "_No clusters found yet._"
NO_KEYWORDS_PLACEHOLDER = "_Not enough data for themes._"
NO_DOMAINS_PLACEHOLDER = "_No sources recorded yet._"
EMPTY_STATE_MESSAGE = "No browsing data yet.\nBrowse some tabs to build your knowledge graph."

DEFAULT_SYNC_URL = "http://localhost:8000/sync"
DEFAULT_OLLAMA_URL = "http://localhost:11434"
DEFAULT_OLLAMA_MODEL = "llama3.1:8b"

SOURCE_OFFLINE = "offline"


@dataclass(frozen=True)
class InsightReport:
    tab_count: int
    group_count: int
    top_groups: Tuple[Tuple[str, int], ...]
    top_keywords: Tuple[str, ...]
    top_domains: Tuple[str, ...]

    def to_markdown(self) -> str:
        lines = [
            f"# {REPORT_TITLE}",
            f"**Tabs tracked:** {self.tab_count} | **Knowledge Clusters:** {self.group_count}",
            "",
            "## Top Research Topics",
        ]
        if self.top_groups:
            for rank, (label, size) in enumerate(self.top_groups, 1):
                lines.append(f"{rank}. **{label}** ({size} items)")
        else:
            lines.append(NO_GROUPS_PLACEHOLDER)

        lines.append("")
        lines.append("## Key Themes")
        if self.top_keywords:
            lines.append(", ".join(f"`{k}`" for k in self.top_keywords))
        else:
            lines.append(NO_KEYWORDS_PLACEHOLDER)

        lines.append("")
        lines.append("## Top Sources")
        if self.top_domains:
            lines.extend(f"- {d}" for d in self.top_domains)
        else:
            lines.append(NO_DOMAINS_PLACEHOLDER)
        return "\n".join(lines)


def synthesize_offline(snapshot: GraphSnapshot) -> Optional[InsightReport]:
    if snapshot.is_empty:
        return None

    # sorted() and most_common() are stable, so ties keep snapshot / first-seen order
    groups = sorted(snapshot.groups, key=lambda g: g.size, reverse=True)[:TOP_GROUPS]

    keyword_counts: Counter = Counter()
    domain_counts: Counter = Counter()
    for tab in snapshot.tabs:
        keyword_counts.update(tab.keywords)
        if tab.domain:
            domain_counts[tab.domain] += 1

    return InsightReport(
        tab_count=len(snapshot.primary_tabs()),
        group_count=len(snapshot.groups),
        top_groups=tuple((g.label, g.size) for g in groups),
        top_keywords=tuple(k for k, _ in keyword_counts.most_common(TOP_KEYWORDS)),
        top_domains=tuple(d for d, _ in domain_counts.most_common(TOP_DOMAINS)),
    )


class InsightBackend(Protocol):
    name: str

    def generate(self, snapshot: GraphSnapshot, active_id: Optional[str] = None) -> str:
        ...


def sync_payload(snapshot: GraphSnapshot, active_id: Optional[str] = None) -> Dict:
    return {
        "tabs": [
            {"id": t.id, "url": t.url, "title": t.title or "", "active": t.id == active_id}
            for t in snapshot.primary_tabs()
        ]
    }


def build_prompt(snapshot: GraphSnapshot) -> str:
    report = synthesize_offline(snapshot)
    titles = [t.title or t.url for t in snapshot.primary_tabs()][:50]
    return (
        "You are reviewing someone's browsing memory. Write a short markdown report with a "
        "'# ' title, '## ' sections and '- ' bullets covering their main research topics, "
        "recurring themes and suggested next reads.\n"
        f"Current statistics:\n{report.to_markdown() if report else 'No tabs.'}\n\n"
        "Open tab titles:\n" + "\n".join(f"- {t}" for t in titles) + "\n\nReport:"
    )


def _post_json(url: str, payload: Dict, timeout: Optional[float]) -> Dict:
    try:
        resp = requests.post(url, json=payload, timeout=timeout)
        resp.raise_for_status()
        data = resp.json()
    except requests.RequestException as exc:
        raise RemoteSummaryFailure(f"{url}: {exc}") from exc
    except ValueError as exc:
        raise RemoteSummaryFailure(f"{url}: response is not JSON") from exc
    if not isinstance(data, dict):
        raise RemoteSummaryFailure(f"{url}: unexpected response body")
    return data


def _require_text(value, where: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise RemoteSummaryFailure(f"{where}: empty insight text")
    return value.strip()


class SyncServerBackend:
    name = "sync"

    def __init__(self, url: str = DEFAULT_SYNC_URL, timeout: Optional[float] = 20) -> None:
        self.url = url
        self.timeout = timeout

    def generate(self, snapshot: GraphSnapshot, active_id: Optional[str] = None) -> str:
        data = _post_json(self.url, sync_payload(snapshot, active_id), self.timeout)
        return _require_text(data.get("insights"), self.url)


class OllamaBackend:
    name = "ollama"

    def __init__(
        self,
        model: str = DEFAULT_OLLAMA_MODEL,
        base_url: str = DEFAULT_OLLAMA_URL,
        timeout: Optional[float] = 120,
    ) -> None:
        self.model = model
        self.base_url = base_url
        self.timeout = timeout

    def generate(self, snapshot: GraphSnapshot, active_id: Optional[str] = None) -> str:
        url = self.base_url.rstrip("/") + "/api/generate"
        payload = {
            "model": self.model,
            "prompt": build_prompt(snapshot),
            "stream": False,
            "options": {"temperature": 0.2, "num_predict": 400},
        }
        data = _post_json(url, payload, self.timeout)
        return _require_text(data.get("response"), url)


class LlamaBackend:
    """Local GGUF model through llama-cpp-python (optional dependency)."""

    name = "gguf"

    def __init__(self, model_path: str, n_ctx: int = 4096, n_threads: int = 1, n_gpu_layers: int = 0, llm=None) -> None:
        self.model_path = model_path
        self.n_ctx = n_ctx
        self.n_threads = n_threads
        self.n_gpu_layers = n_gpu_layers
        self._llm = llm

    def _load(self):
        if self._llm is None:
            try:
                from llama_cpp import Llama
            except ImportError as exc:
                raise RemoteSummaryFailure(
                    "Missing dependency: llama-cpp-python. Install with: pip install 'weft[gguf]'"
                ) from exc
            try:
                self._llm = Llama(
                    model_path=self.model_path,
                    n_ctx=self.n_ctx,
                    n_threads=self.n_threads,
                    n_gpu_layers=self.n_gpu_layers,
                )
            except (OSError, ValueError) as exc:
                raise RemoteSummaryFailure(f"Could not load {self.model_path}: {exc}") from exc
        return self._llm

    def generate(self, snapshot: GraphSnapshot, active_id: Optional[str] = None) -> str:
        llm = self._load()
        try:
            out = llm(build_prompt(snapshot), max_tokens=400, temperature=0.2, stop=["\n\n\n"])
        except (RuntimeError, ValueError) as exc:
            raise RemoteSummaryFailure(f"{self.model_path}: {exc}") from exc
        choices = out.get("choices") if isinstance(out, dict) else None
        if not isinstance(choices, list) or not choices or not isinstance(choices[0], dict):
            raise RemoteSummaryFailure(f"{self.model_path}: unexpected completion")
        return _require_text(choices[0].get("text"), self.model_path)


@dataclass(frozen=True)
class Insight:
    text: str
    source: str
    generated_at: float


def generate_insights(
    snapshot: GraphSnapshot,
    backend: Optional[InsightBackend] = None,
    active_id: Optional[str] = None,
    verbose: bool = False,
) -> Optional[Insight]:
    """Richer insight when a backend answers, else the offline report, else None."""
    if backend is not None:
        try:
            text = backend.generate(snapshot, active_id)
            return Insight(text=text, source=backend.name, generated_at=time.time())
        except RemoteSummaryFailure as exc:
            if verbose:
                print(f"[INFO] {backend.name} insights unavailable ({exc}); using offline report.", file=sys.stderr)

    report = synthesize_offline(snapshot)
    if report is None:
        return None
    return Insight(text=report.to_markdown(), source=SOURCE_OFFLINE, generated_at=time.time())


def build_backend(name: str, **options) -> Optional[InsightBackend]:
    if name == SOURCE_OFFLINE:
        return None
    if name == "sync":
        return SyncServerBackend(url=options.get("sync_url", DEFAULT_SYNC_URL), timeout=options.get("timeout"))
    if name == "ollama":
        return OllamaBackend(
            model=options.get("ollama_model", DEFAULT_OLLAMA_MODEL),
            base_url=options.get("ollama_url", DEFAULT_OLLAMA_URL),
            timeout=options.get("ollama_timeout"),
        )
    if name == "gguf":
        model_path = options.get("gguf")
        if not model_path:
            raise ValueError("--gguf is required when --insights-backend=gguf")
        return LlamaBackend(
            model_path,
            n_ctx=options.get("llama_n_ctx", 4096),
            n_threads=options.get("llama_n_threads", 1),
            n_gpu_layers=options.get("llama_n_gpu_layers", 0),
        )
    raise ValueError(f"Unknown insights backend: {name}")


BACKEND_NAMES: List[str] = ["sync", "ollama", "gguf", SOURCE_OFFLINE]
