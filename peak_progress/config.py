import logging
from dataclasses import dataclass
from typing import Any, Mapping

BACKENDS = ("", "sheets", "file", "memory")
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


@dataclass(frozen=True)
class Settings:
    storage_key: str = "peak-progress-climbs"
    storage_backend: str = ""
    worksheet_name: str = "Climbs"
    local_store_path: str = "peak_progress_climbs.json"
    log_level: str = "INFO"


def load_settings(secrets: Mapping[str, Any]) -> Settings:
    """Read settings from ``st.secrets`` (or any mapping); missing keys keep their defaults."""
    d = Settings()
    backend = str(secrets.get("storage_backend", d.storage_backend)).strip().lower()
    if backend not in BACKENDS:
        raise ValueError(f"Unknown storage_backend {backend!r}; expected one of sheets, file, memory")
    return Settings(
        storage_key=str(secrets.get("storage_key", d.storage_key)),
        storage_backend=backend,
        worksheet_name=str(secrets.get("climbs_worksheet_name", d.worksheet_name)),
        local_store_path=str(secrets.get("local_store_path", d.local_store_path)),
        log_level=str(secrets.get("log_level", d.log_level)).upper(),
    )


def setup_logging(level: str = "INFO") -> None:
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    # Streamlit reruns the script; only attach our handler once.
    if any(getattr(h, "_peak_progress", False) for h in root.handlers):
        return
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler._peak_progress = True
    root.addHandler(handler)
