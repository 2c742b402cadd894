# emtct_core/infants/wiring.py
"""
Process-wide InfantRepository.

Views never construct a repository themselves; they call get_repository().
Tests swap in their own instance with use_repository().
"""
from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from typing import Iterator, Optional

from django.conf import settings

from emtct_core.infants.repository import InfantRepository
from emtct_core.infants.seed import demo_infants
from emtct_core.infants.store import DatabaseStore

logger = logging.getLogger(__name__)

_LOCK = threading.Lock()
_REPOSITORY: Optional[InfantRepository] = None


def build_repository() -> InfantRepository:
    repo = InfantRepository(DatabaseStore(settings.EMTCT_STORE_KEY))
    if repo.is_empty and getattr(settings, "EMTCT_SEED_DEMO_DATA", False):
        logger.info("Infant register is empty; seeding demo data")
        repo.replace_all(demo_infants())
    return repo


def get_repository() -> InfantRepository:
    global _REPOSITORY
    with _LOCK:
        if _REPOSITORY is None:
            _REPOSITORY = build_repository()
        return _REPOSITORY


def reset_repository() -> None:
    """Drop the cached instance so the next call reloads from the store."""
    global _REPOSITORY
    with _LOCK:
        _REPOSITORY = None


@contextmanager
def use_repository(repo: InfantRepository) -> Iterator[InfantRepository]:
    global _REPOSITORY
    with _LOCK:
        previous, _REPOSITORY = _REPOSITORY, repo
    try:
        yield repo
    finally:
        with _LOCK:
            _REPOSITORY = previous
