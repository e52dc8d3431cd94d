# src/tickmark_api/adapters/presenters/materiality_presenter.py
# Copyright (c) Tickmark.
# SPDX-License-Identifier: MIT
"""Materiality presenter.

Purpose:
    Map materiality DTOs to HTTP schemas wrapped in ``SuccessEnvelope``.
    Read endpoints (current, history, guidance) carry an ETag; mutations and
    advisory calculations do not.

Layer:
    adapters/presenters
"""

from __future__ import annotations

from typing import Any

from fastapi import status

from tickmark_api.adapters.presenters.base_presenter import BasePresenter, PresentResult
from tickmark_api.adapters.schemas.http.envelopes import SuccessEnvelope
from tickmark_api.adapters.schemas.http.materiality_schemas import (
    IndustryGuidanceHTTP,
    MaterialityHistoryHTTP,
    MaterialityResultHTTP,
    MaterialityRevisionHTTP,
    MaterialitySaveResultHTTP,
    MaterialityVersionHTTP,
    QualitativeAdjustmentHTTP,
)
from tickmark_api.application.schemas.dto.materiality import (
    IndustryGuidanceDTO,
    MaterialityHistoryDTO,
    MaterialityResultDTO,
    MaterialityRevisionDTO,
    MaterialitySaveResultDTO,
    MaterialityVersionDTO,
    QualitativeAdjustmentDTO,
)


class MaterialityPresenter(BasePresenter):
    """Presenter for materiality endpoints."""

    def present_result(
        self, dto: MaterialityResultDTO, *, trace_id: str | None
    ) -> PresentResult[SuccessEnvelope[Any]]:
        payload = MaterialityResultHTTP.model_validate(dto.model_dump())
        return self.present_success(data=payload, trace_id=trace_id)

    def present_saved(
        self, dto: MaterialitySaveResultDTO, *, trace_id: str | None
    ) -> PresentResult[SuccessEnvelope[Any]]:
        """Present a save outcome; 201 when a new version was created, else 200."""
        payload = MaterialitySaveResultHTTP.model_validate(dto.model_dump())
        code = status.HTTP_201_CREATED if dto.created else status.HTTP_200_OK
        return self.present_success(data=payload, trace_id=trace_id, status_code=code)

    def present_version(
        self,
        dto: MaterialityVersionDTO | None,
        *,
        trace_id: str | None,
        etag: bool = False,
    ) -> PresentResult[SuccessEnvelope[Any]]:
        payload = MaterialityVersionHTTP.model_validate(dto.model_dump()) if dto else None
        return self.present_success(data=payload, trace_id=trace_id, etag=etag)

    def present_history(
        self, dto: MaterialityHistoryDTO, *, trace_id: str | None
    ) -> PresentResult[SuccessEnvelope[Any]]:
        payload = MaterialityHistoryHTTP.model_validate(dto.model_dump())
        return self.present_success(data=payload, trace_id=trace_id, etag=True)

    def present_guidance(
        self, dto: IndustryGuidanceDTO | None, *, trace_id: str | None
    ) -> PresentResult[SuccessEnvelope[Any]]:
        payload = IndustryGuidanceHTTP.model_validate(dto.model_dump()) if dto else None
        return self.present_success(data=payload, trace_id=trace_id, etag=True)

    def present_adjustment(
        self, dto: QualitativeAdjustmentDTO, *, trace_id: str | None
    ) -> PresentResult[SuccessEnvelope[Any]]:
        payload = QualitativeAdjustmentHTTP.model_validate(dto.model_dump())
        return self.present_success(data=payload, trace_id=trace_id)

    def present_revision(
        self, dto: MaterialityRevisionDTO, *, trace_id: str | None
    ) -> PresentResult[SuccessEnvelope[Any]]:
        payload = MaterialityRevisionHTTP.model_validate(dto.model_dump())
        return self.present_success(data=payload, trace_id=trace_id)
