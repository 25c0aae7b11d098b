import os
from pathlib import Path
from typing import Mapping, Optional

from pydantic import BaseModel

from .models import SortCriterion

ENV_PREFIX = "LINKMINDER_"


class Settings(BaseModel):
    state_file: Path = Path("linkminder_state.json")
    links_key: str = "links"
    sort_key: str = "sortCriterion"
    default_sort: SortCriterion = SortCriterion.DATE_ADDED_DESC
    assume_https: bool = True
    host: str = "127.0.0.1"
    port: int = 8765
    log_level: str = "info"


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Defaults, overridden by LINKMINDER_<FIELD> environment variables."""
    env = os.environ if environ is None else environ
    overrides = {}
    for name in Settings.model_fields:
        value = env.get(ENV_PREFIX + name.upper())
        if value is not None and value != "":
            overrides[name] = value
    return Settings.model_validate(overrides)
