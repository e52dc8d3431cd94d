# src/tickmark_api/adapters/presenters/sampling_presenter.py
# Copyright (c) Tickmark.
# SPDX-License-Identifier: MIT
"""Sampling presenter: DTOs to ``SuccessEnvelope`` payloads."""

from __future__ import annotations

from typing import Any

from tickmark_api.adapters.presenters.base_presenter import BasePresenter, PresentResult
from tickmark_api.adapters.schemas.http.envelopes import SuccessEnvelope
from tickmark_api.adapters.schemas.http.sampling_schemas import (
    AttributeEvaluationHTTP,
    MUSProjectionHTTP,
    MUSSelectionHTTP,
    SamplingResultHTTP,
)
from tickmark_api.application.schemas.dto.sampling import (
    AttributeEvaluationDTO,
    MUSProjectionDTO,
    MUSSelectionDTO,
    SamplingResultDTO,
)


class SamplingPresenter(BasePresenter):
    """Presenter for sampling endpoints."""

    def present_result(
        self, dto: SamplingResultDTO, *, trace_id: str | None
    ) -> PresentResult[SuccessEnvelope[Any]]:
        payload = SamplingResultHTTP.model_validate(dto.model_dump())
        return self.present_success(data=payload, trace_id=trace_id)

    def present_selection(
        self, dto: MUSSelectionDTO, *, trace_id: str | None
    ) -> PresentResult[SuccessEnvelope[Any]]:
        payload = MUSSelectionHTTP.model_validate(dto.model_dump())
        return self.present_success(data=payload, trace_id=trace_id)

    def present_projection(
        self, dto: MUSProjectionDTO, *, trace_id: str | None
    ) -> PresentResult[SuccessEnvelope[Any]]:
        payload = MUSProjectionHTTP.model_validate(dto.model_dump())
        return self.present_success(data=payload, trace_id=trace_id)

    def present_attribute(
        self, dto: AttributeEvaluationDTO, *, trace_id: str | None
    ) -> PresentResult[SuccessEnvelope[Any]]:
        payload = AttributeEvaluationHTTP.model_validate(dto.model_dump())
        return self.present_success(data=payload, trace_id=trace_id)
