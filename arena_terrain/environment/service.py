"""
Terrain Service Module
======================

Owns the currently published terrain snapshot.

Generation may run synchronously or on a worker thread. Each request
takes a ticket; only the newest ticket may publish, so a generation
that is superseded by a newer match is dropped whole (last writer wins).
Consumers only ever observe a complete, immutable TerrainData.
"""

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import replace
from typing import Optional

from ..config import Config, TerrainConfig
from ..terrain import GenerationCancelled, TerrainData, TerrainGenerator
from .query import TerrainQuery

logger = logging.getLogger(__name__)


class TerrainService:
    """
    Snapshot publisher.

    Usage:
        service = TerrainService(config)
        service.generate_now()            # blocking
        future = service.request(seed=7)  # background
        query = service.query()
    """

    def __init__(self, config: Optional[Config] = None,
                 executor: Optional[ThreadPoolExecutor] = None):
        self.config = config or Config()
        self._executor = executor
        self._owns_executor = executor is None
        self._lock = threading.Lock()
        self._ticket = 0
        self._terrain: Optional[TerrainData] = None

    # ==================== Snapshot access ====================

    def current(self) -> Optional[TerrainData]:
        """Published snapshot, or None before the first publication"""
        return self._terrain

    def query(self) -> TerrainQuery:
        """Query over the current snapshot (flat fallback when none)"""
        return TerrainQuery(self._terrain, self.config.locomotion.max_traversable_slope)

    @property
    def latest_ticket(self) -> int:
        return self._ticket

    # ==================== Generation ====================

    def _next_ticket(self) -> int:
        with self._lock:
            self._ticket += 1
            return self._ticket

    def _is_stale(self, ticket: int) -> bool:
        return ticket != self._ticket

    def _config_for(self, terrain: Optional[TerrainConfig], seed: Optional[int]) -> Config:
        terrain = terrain or self.config.terrain
        if seed is not None:
            terrain = terrain.with_seed(seed)
        config = replace(self.config, terrain=terrain)
        # validation happens before any worker is scheduled
        return config.validate()

    def _run(self, ticket: int, config: Config) -> Optional[TerrainData]:
        generator = TerrainGenerator(config)
        try:
            terrain = generator.generate(cancelled=lambda: self._is_stale(ticket))
        except GenerationCancelled:
            return None
        return self._publish(ticket, terrain)

    def _publish(self, ticket: int, terrain: TerrainData) -> Optional[TerrainData]:
        with self._lock:
            if self._is_stale(ticket):
                logger.info("Discarding stale terrain (ticket %d, latest %d)", ticket, self._ticket)
                return None
            self._terrain = terrain
        logger.info("Published terrain seed=%d (ticket %d)", terrain.seed, ticket)
        return terrain

    def generate_now(self, terrain: Optional[TerrainConfig] = None,
                     seed: Optional[int] = None) -> Optional[TerrainData]:
        """
        Generate and publish on the calling thread.

        Returns:
            The published snapshot, or None if a newer request superseded it
        """
        config = self._config_for(terrain, seed)
        return self._run(self._next_ticket(), config)

    def request(self, terrain: Optional[TerrainConfig] = None,
                seed: Optional[int] = None) -> Future:
        """
        Generate on a worker thread.

        Returns:
            Future resolving to the published snapshot, or None when a
            newer request made this one obsolete
        """
        config = self._config_for(terrain, seed)
        ticket = self._next_ticket()
        if self._executor is None:
            self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix='terrain')
        return self._executor.submit(self._run, ticket, config)

    def invalidate(self):
        """Supersede any in-flight generation without starting a new one"""
        self._next_ticket()

    def clear(self):
        """Drop the published snapshot (e.g. when a match ends)"""
        with self._lock:
            self._ticket += 1
            self._terrain = None

    def shutdown(self, wait: bool = True):
        if self._executor is not None and self._owns_executor:
            self._executor.shutdown(wait=wait)
            self._executor = None

    def __enter__(self) -> 'TerrainService':
        return self

    def __exit__(self, *exc):
        self.shutdown()
