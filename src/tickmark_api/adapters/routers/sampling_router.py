# src/tickmark_api/adapters/routers/sampling_router.py
# Copyright (c) Tickmark.
# SPDX-License-Identifier: MIT
"""
Sampling Router.

Summary:
    Sample size computation (MUS, classical variables, attribute), systematic
    monetary-unit selection, and evaluation of tested samples.

Layer:
    adapters/routers
"""

from __future__ import annotations

from typing import Annotated, Any, cast

from fastapi import Body, Depends, Request, Response, status

from tickmark_api.adapters.dependencies.sampling import (
    get_compute_sampling_uc,
    get_evaluate_attribute_sample_uc,
    get_evaluate_mus_sample_uc,
    get_select_mus_items_uc,
)
from tickmark_api.adapters.presenters.sampling_presenter import SamplingPresenter
from tickmark_api.adapters.routers.base_router import BaseRouter, trace_id_of
from tickmark_api.adapters.schemas.http.envelopes import SuccessEnvelope
from tickmark_api.adapters.schemas.http.sampling_schemas import (
    AttributeEvaluateRequestHTTP,
    AttributeEvaluationHTTP,
    AttributeRequestHTTP,
    ClassicalVariablesRequestHTTP,
    MUSEvaluateRequestHTTP,
    MUSProjectionHTTP,
    MUSRequestHTTP,
    MUSSelectionHTTP,
    MUSSelectRequestHTTP,
    SamplingComputeRequestHTTP,
    SamplingResultHTTP,
)
from tickmark_api.application.use_cases.sampling.compute_sampling import ComputeSamplingUseCase
from tickmark_api.application.use_cases.sampling.evaluate_sample import (
    EvaluateAttributeSampleRequest,
    EvaluateAttributeSampleUseCase,
    EvaluateMUSSampleRequest,
    EvaluateMUSSampleUseCase,
)
from tickmark_api.application.use_cases.sampling.select_mus_items import (
    SelectMUSItemsRequest,
    SelectMUSItemsUseCase,
)
from tickmark_api.domain.entities.sampling import (
    AttributeInput,
    ClassicalVariablesInput,
    MUSInput,
    SamplingInput,
)
from tickmark_api.domain.entities.sampling_evaluation import PopulationItem, TestedSampleItem

router = BaseRouter(version="v1", resource="sampling", tags=["Sampling"])
presenter = SamplingPresenter()

_ERRORS = cast("dict[int | str, dict[str, Any]]", BaseRouter.std_error_responses())


def _to_input(
    body: MUSRequestHTTP | ClassicalVariablesRequestHTTP | AttributeRequestHTTP,
) -> SamplingInput:
    """Map the discriminated HTTP payload onto its domain input."""
    if isinstance(body, MUSRequestHTTP):
        return MUSInput(
            population_value=body.population_value,
            tolerable_error=body.tolerable_error,
            confidence_level=body.confidence_level,
            expected_misstatements=body.expected_misstatements,
        )
    if isinstance(body, ClassicalVariablesRequestHTTP):
        return ClassicalVariablesInput(
            population_size=body.population_size,
            population_value=body.population_value,
            tolerable_error=body.tolerable_error,
            confidence_level=body.confidence_level,
        )
    return AttributeInput(
        population_size=body.population_size,
        expected_error_rate=body.expected_error_rate,
        confidence_level=body.confidence_level,
    )


@router.post(
    "/compute",
    response_model=SuccessEnvelope[SamplingResultHTTP],
    status_code=status.HTTP_200_OK,
    responses=_ERRORS,
    summary="Compute a sample size",
    operation_id="compute_sample_size",
)
async def compute_sample_size(
    request: Request,
    response: Response,
    body: Annotated[SamplingComputeRequestHTTP, Body()],
    uc: Annotated[ComputeSamplingUseCase, Depends(get_compute_sampling_uc)],
) -> Any:
    """Compute a sample size for the method named in ``method``.

    Missing required values yield ``sample_size: 0`` with ``trace.incomplete``
    set rather than an error.
    """
    dto = uc.execute(_to_input(body.root))
    result = presenter.present_result(dto, trace_id=trace_id_of(request))
    return BaseRouter.send_success(response, result)


@router.post(
    "/mus/select",
    response_model=SuccessEnvelope[MUSSelectionHTTP],
    status_code=status.HTTP_200_OK,
    responses=_ERRORS,
    summary="Select items by monetary unit",
    operation_id="select_mus_items",
)
async def select_mus_items(
    request: Request,
    response: Response,
    body: Annotated[MUSSelectRequestHTTP, Body()],
    uc: Annotated[SelectMUSItemsUseCase, Depends(get_select_mus_items_uc)],
) -> Any:
    req = SelectMUSItemsRequest(
        population=[PopulationItem(item_id=p.item_id, value=p.value) for p in body.population],
        sample_size=body.sample_size,
        start_point=body.start_point,
    )
    result = presenter.present_selection(uc.execute(req), trace_id=trace_id_of(request))
    return BaseRouter.send_success(response, result)


@router.post(
    "/mus/evaluate",
    response_model=SuccessEnvelope[MUSProjectionHTTP],
    status_code=status.HTTP_200_OK,
    responses=_ERRORS,
    summary="Project misstatement found in an MUS sample",
    operation_id="evaluate_mus_sample",
)
async def evaluate_mus_sample(
    request: Request,
    response: Response,
    body: Annotated[MUSEvaluateRequestHTTP, Body()],
    uc: Annotated[EvaluateMUSSampleUseCase, Depends(get_evaluate_mus_sample_uc)],
) -> Any:
    req = EvaluateMUSSampleRequest(
        items=[
            TestedSampleItem(
                item_id=i.item_id,
                book_value=i.book_value,
                audited_value=i.audited_value,
            )
            for i in body.items
        ],
        sampling_interval=body.sampling_interval,
        tolerable_misstatement=body.tolerable_misstatement,
        confidence_level=body.confidence_level,
    )
    result = presenter.present_projection(uc.execute(req), trace_id=trace_id_of(request))
    return BaseRouter.send_success(response, result)


@router.post(
    "/attribute/evaluate",
    response_model=SuccessEnvelope[AttributeEvaluationHTTP],
    status_code=status.HTTP_200_OK,
    responses=_ERRORS,
    summary="Evaluate a test of controls",
    operation_id="evaluate_attribute_sample",
)
async def evaluate_attribute_sample(
    request: Request,
    response: Response,
    body: Annotated[AttributeEvaluateRequestHTTP, Body()],
    uc: Annotated[EvaluateAttributeSampleUseCase, Depends(get_evaluate_attribute_sample_uc)],
) -> Any:
    req = EvaluateAttributeSampleRequest(
        sample_size=body.sample_size,
        deviations=body.deviations,
        tolerable_deviation_rate=body.tolerable_deviation_rate,
        confidence_level=body.confidence_level,
    )
    result = presenter.present_attribute(uc.execute(req), trace_id=trace_id_of(request))
    return BaseRouter.send_success(response, result)
