from dataclasses import dataclass
from fastapi import Request
from ytproxy.services.extractor import Extractor

@dataclass
class RuntimeState:
    """Per-application runtime state, stored on app.state.runtime"""
    extractor: Extractor
    ytdlp_version: str = "unknown"

def get_runtime(request: Request) -> RuntimeState:
    return request.app.state.runtime

def get_extractor(request: Request) -> Extractor:
    """FastAPI dependency resolving the injected extractor"""
    return get_runtime(request).extractor
