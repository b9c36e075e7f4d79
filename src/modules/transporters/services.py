"""Transporter directory service."""

from __future__ import annotations

from typing import List

import structlog
from pydantic import ValidationError

from modules.core.http import ApiClient, unwrap_collection
from modules.transporters.dtos import TransporterDTO

logger = structlog.get_logger(__name__)


class TransporterService:
    """Lists the transporters a wholesaler may assign an order to."""

    active_path = "/api/transporters/active"

    def __init__(self, api: ApiClient) -> None:
        self._api = api

    def list_active(self, online_only: bool = False) -> List[TransporterDTO]:
        body = self._api.get(self.active_path)
        transporters: List[TransporterDTO] = []
        for raw in unwrap_collection(body, "transporters"):
            try:
                transporters.append(TransporterDTO.model_validate(raw))
            except ValidationError as exc:
                logger.warning("transporter.malformed_entry_skipped", errors=exc.error_count())
        if online_only:
            transporters = [t for t in transporters if t.is_online]
        logger.info("transporter.list_fetched", count=len(transporters))
        return transporters
