# src/tickmark_api/adapters/routers/materiality_router.py
# Copyright (c) Tickmark.
# SPDX-License-Identifier: MIT
"""
Materiality Router.

Summary:
    Stateless materiality computation, industry guidance, and the per-engagement
    version ledger (save with optimistic concurrency, approve, current, history).

Layer:
    adapters/routers

Notes:
    Domain errors propagate to the app-level handlers, which render the
    canonical ErrorEnvelope (e.g. VERSION_CONFLICT as 409).
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Annotated, Any, cast
from uuid import UUID

from fastapi import Body, Depends, Path, Query, Request, Response, status

from tickmark_api.adapters.dependencies.materiality import (
    get_apply_qualitative_adjustments_uc,
    get_approve_materiality_uc,
    get_assess_materiality_revision_uc,
    get_compute_materiality_uc,
    get_current_materiality_uc,
    get_industry_guidance_uc,
    get_materiality_history_uc,
    get_save_materiality_uc,
)
from tickmark_api.adapters.presenters.materiality_presenter import MaterialityPresenter
from tickmark_api.adapters.routers.base_router import BaseRouter, trace_id_of
from tickmark_api.adapters.schemas.http.envelopes import SuccessEnvelope
from tickmark_api.adapters.schemas.http.materiality_schemas import (
    IndustryGuidanceHTTP,
    MaterialityApproveRequestHTTP,
    MaterialityHistoryHTTP,
    MaterialityInputsHTTP,
    MaterialityResultHTTP,
    MaterialityRevisionHTTP,
    MaterialityRevisionRequestHTTP,
    MaterialitySaveRequestHTTP,
    MaterialitySaveResultHTTP,
    MaterialityVersionHTTP,
    QualitativeAdjustmentHTTP,
    QualitativeAdjustmentRequestHTTP,
)
from tickmark_api.application.use_cases.materiality.approve_materiality import (
    ApproveMaterialityRequest,
    ApproveMaterialityUseCase,
)
from tickmark_api.application.use_cases.materiality.assess_materiality import (
    ApplyQualitativeAdjustmentsRequest,
    ApplyQualitativeAdjustmentsUseCase,
    AssessMaterialityRevisionRequest,
    AssessMaterialityRevisionUseCase,
)
from tickmark_api.application.use_cases.materiality.compute_materiality import (
    ComputeMaterialityRequest,
    ComputeMaterialityUseCase,
)
from tickmark_api.application.use_cases.materiality.get_industry_guidance import (
    GetIndustryGuidanceUseCase,
)
from tickmark_api.application.use_cases.materiality.get_materiality_history import (
    GetCurrentMaterialityUseCase,
    GetMaterialityHistoryUseCase,
)
from tickmark_api.application.use_cases.materiality.save_materiality import (
    SaveMaterialityRequest,
    SaveMaterialityUseCase,
)
from tickmark_api.domain.entities.materiality import MaterialityInputs, QualitativeFactorAssessment
from tickmark_api.domain.enums.materiality import BenchmarkType
from tickmark_api.domain.exceptions.calculation import InvalidInput

router = BaseRouter(version="v1", resource="materiality", tags=["Materiality"])
presenter = MaterialityPresenter()

_ERRORS = cast("dict[int | str, dict[str, Any]]", BaseRouter.std_error_responses())

EngagementId = Annotated[str, Path(min_length=1, max_length=64, examples=["eng-2024-001"])]


# Stored scale of the version ledger's amount and percentage columns.
_AMOUNT_QUANTUM = Decimal("1e-8")
_PERCENT_QUANTUM = Decimal("1e-6")


def _quantize(name: str, value: Decimal, quantum: Decimal) -> Decimal:
    """Round a finite value to the stored scale; non-finite values pass through.

    Raises:
        InvalidInput: When the value has too many integer digits to store.
    """
    if not value.is_finite():
        return value
    try:
        return value.quantize(quantum, rounding=ROUND_HALF_UP).normalize()
    except InvalidOperation as exc:
        raise InvalidInput(
            f"{name} is too large.", details={"field": name, "value": str(value)}
        ) from exc


def _to_inputs(body: MaterialityInputsHTTP) -> MaterialityInputs:
    """Map an HTTP inputs payload onto the domain value object.

    Amounts and percentages are rounded to the scale the version ledger stores,
    so a saved version compares equal to the same payload sent again.
    """
    return MaterialityInputs(
        benchmark_type=body.benchmark_type,
        benchmark_value=(
            _quantize("benchmark_value", body.benchmark_value, _AMOUNT_QUANTUM)
            if body.benchmark_value is not None
            else None
        ),
        overall_materiality_percentage=_quantize(
            "overall_materiality_percentage", body.overall_materiality_percentage, _PERCENT_QUANTUM
        ),
        performance_materiality_percentage=_quantize(
            "performance_materiality_percentage",
            body.performance_materiality_percentage,
            _PERCENT_QUANTUM,
        ),
        clearly_trivial_percentage=_quantize(
            "clearly_trivial_percentage", body.clearly_trivial_percentage, _PERCENT_QUANTUM
        ),
        benchmark_rationale=body.benchmark_rationale,
        percentage_rationale=body.percentage_rationale,
        additional_notes=body.additional_notes,
        industry=body.industry,
        risk_level=body.risk_level,
        benchmark_year=body.benchmark_year,
    )


@router.post(
    "/compute",
    response_model=SuccessEnvelope[MaterialityResultHTTP],
    status_code=status.HTTP_200_OK,
    responses=_ERRORS,
    summary="Compute materiality thresholds",
    operation_id="compute_materiality",
)
async def compute_materiality(
    request: Request,
    response: Response,
    body: Annotated[MaterialityInputsHTTP, Body()],
    uc: Annotated[ComputeMaterialityUseCase, Depends(get_compute_materiality_uc)],
) -> Any:
    """Derive overall, performance and clearly trivial thresholds without saving."""
    dto = await uc.execute(ComputeMaterialityRequest(inputs=_to_inputs(body)))
    result = presenter.present_result(dto, trace_id=trace_id_of(request))
    return BaseRouter.send_success(response, result)


@router.get(
    "/guidance",
    response_model=SuccessEnvelope[IndustryGuidanceHTTP | None],
    status_code=status.HTTP_200_OK,
    responses=_ERRORS,
    summary="Get industry guidance for a benchmark",
    operation_id="get_industry_guidance",
)
async def get_industry_guidance(
    request: Request,
    response: Response,
    benchmark_type: Annotated[BenchmarkType, Query(description="Benchmark to look up.")],
    uc: Annotated[GetIndustryGuidanceUseCase, Depends(get_industry_guidance_uc)],
    industry: Annotated[str | None, Query(max_length=64, examples=["saas"])] = None,
) -> Any:
    """Return recommended percentages; unknown industries fall back to the benchmark default."""
    dto = await uc.execute(industry, benchmark_type)
    result = presenter.present_guidance(dto, trace_id=trace_id_of(request))
    return BaseRouter.send_success(response, result)


@router.get(
    "/engagements/{engagement_id}/current",
    response_model=SuccessEnvelope[MaterialityVersionHTTP | None],
    status_code=status.HTTP_200_OK,
    responses=_ERRORS,
    summary="Get the current materiality version",
    operation_id="get_current_materiality",
)
async def get_current_materiality(
    request: Request,
    response: Response,
    engagement_id: EngagementId,
    uc: Annotated[GetCurrentMaterialityUseCase, Depends(get_current_materiality_uc)],
) -> Any:
    """Return the current version, or ``data: null`` when nothing has been saved."""
    dto = await uc.execute(engagement_id)
    result = presenter.present_version(dto, trace_id=trace_id_of(request), etag=True)
    return BaseRouter.send_success(response, result)


@router.get(
    "/engagements/{engagement_id}/history",
    response_model=SuccessEnvelope[MaterialityHistoryHTTP],
    status_code=status.HTTP_200_OK,
    responses=_ERRORS,
    summary="List materiality versions, newest first",
    operation_id="get_materiality_history",
)
async def get_materiality_history(
    request: Request,
    response: Response,
    engagement_id: EngagementId,
    uc: Annotated[GetMaterialityHistoryUseCase, Depends(get_materiality_history_uc)],
) -> Any:
    dto = await uc.execute(engagement_id)
    result = presenter.present_history(dto, trace_id=trace_id_of(request))
    return BaseRouter.send_success(response, result)


@router.post(
    "/engagements/{engagement_id}/versions",
    response_model=SuccessEnvelope[MaterialitySaveResultHTTP],
    status_code=status.HTTP_201_CREATED,
    responses=_ERRORS,
    summary="Save a new materiality version",
    operation_id="save_materiality",
)
async def save_materiality(
    request: Request,
    response: Response,
    engagement_id: EngagementId,
    body: Annotated[MaterialitySaveRequestHTTP, Body()],
    uc: Annotated[SaveMaterialityUseCase, Depends(get_save_materiality_uc)],
) -> Any:
    """Save inputs as a new version.

    Returns 201 when a version was created and 200 when the inputs matched the
    current version. A stale ``expected_current_version_id`` yields 409
    VERSION_CONFLICT.
    """
    req = SaveMaterialityRequest(
        engagement_id=engagement_id,
        expected_current_version_id=body.expected_current_version_id,
        inputs=_to_inputs(body),
        prepared_by=body.prepared_by,
    )
    dto = await uc.execute(req)
    result = presenter.present_saved(dto, trace_id=trace_id_of(request))
    return BaseRouter.send_success(response, result)


@router.post(
    "/versions/{version_id}/approve",
    response_model=SuccessEnvelope[MaterialityVersionHTTP],
    status_code=status.HTTP_200_OK,
    responses=_ERRORS,
    summary="Approve the current materiality version",
    operation_id="approve_materiality",
)
async def approve_materiality(
    request: Request,
    response: Response,
    version_id: UUID,
    body: Annotated[MaterialityApproveRequestHTTP, Body()],
    uc: Annotated[ApproveMaterialityUseCase, Depends(get_approve_materiality_uc)],
) -> Any:
    dto = await uc.execute(ApproveMaterialityRequest(version_id=version_id, approver=body.approver))
    result = presenter.present_version(dto, trace_id=trace_id_of(request))
    return BaseRouter.send_success(response, result)


@router.post(
    "/qualitative-adjustments",
    response_model=SuccessEnvelope[QualitativeAdjustmentHTTP],
    status_code=status.HTTP_200_OK,
    responses=_ERRORS,
    summary="Adjust materiality for qualitative factors",
    operation_id="apply_qualitative_adjustments",
)
async def apply_qualitative_adjustments(
    request: Request,
    response: Response,
    body: Annotated[QualitativeAdjustmentRequestHTTP, Body()],
    uc: Annotated[
        ApplyQualitativeAdjustmentsUseCase, Depends(get_apply_qualitative_adjustments_uc)
    ],
) -> Any:
    """Apply each factor's impact in its assessed direction.

    The combined adjustment is capped at +/-50% and the result is rounded to a
    whole currency unit. Nothing is saved.
    """
    factors = [
        QualitativeFactorAssessment(
            factor=f.factor,
            assessment=f.assessment,
            impact=f.impact,
            description=f.description,
        )
        for f in body.factors
    ]
    dto = uc.execute(
        ApplyQualitativeAdjustmentsRequest(base_materiality=body.base_materiality, factors=factors)
    )
    result = presenter.present_adjustment(dto, trace_id=trace_id_of(request))
    return BaseRouter.send_success(response, result)


@router.post(
    "/revision-check",
    response_model=SuccessEnvelope[MaterialityRevisionHTTP],
    status_code=status.HTTP_200_OK,
    responses=_ERRORS,
    summary="Check whether misstatements call for revising materiality",
    operation_id="assess_materiality_revision",
)
async def assess_materiality_revision(
    request: Request,
    response: Response,
    body: Annotated[MaterialityRevisionRequestHTTP, Body()],
    uc: Annotated[AssessMaterialityRevisionUseCase, Depends(get_assess_materiality_revision_uc)],
) -> Any:
    dto = uc.execute(
        AssessMaterialityRevisionRequest(
            overall_materiality=body.overall_materiality,
            aggregate_misstatements=body.aggregate_misstatements,
        )
    )
    result = presenter.present_revision(dto, trace_id=trace_id_of(request))
    return BaseRouter.send_success(response, result)
