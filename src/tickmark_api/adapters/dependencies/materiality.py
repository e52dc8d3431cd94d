# src/tickmark_api/adapters/dependencies/materiality.py
# Copyright (c) Tickmark.
# SPDX-License-Identifier: MIT
"""Dependency wiring for materiality (UoW, gateway, use cases).

Purpose:
    FastAPI dependency providers consumed by the materiality router. Use-case
    providers depend on `get_materiality_uow` and
    `get_industry_guidance_gateway`, so tests override those two to run the
    real use cases against in-memory fakes.

Layer:
    adapters/dependencies
"""

from __future__ import annotations

from functools import lru_cache
from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from tickmark_api.adapters.gateways.static_industry_guidance_gateway import (
    StaticIndustryGuidanceGateway,
)
from tickmark_api.adapters.uow import SqlAlchemyUnitOfWork
from tickmark_api.application.uow import UnitOfWork
from tickmark_api.application.use_cases.materiality.approve_materiality import (
    ApproveMaterialityUseCase,
)
from tickmark_api.application.use_cases.materiality.assess_materiality import (
    ApplyQualitativeAdjustmentsUseCase,
    AssessMaterialityRevisionUseCase,
)
from tickmark_api.application.use_cases.materiality.compute_materiality import (
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
    SaveMaterialityUseCase,
)
from tickmark_api.domain.interfaces.gateways.industry_guidance_gateway import (
    IndustryGuidanceGateway,
)
from tickmark_api.infrastructure.database.session import get_sessionmaker


def get_materiality_uow() -> UnitOfWork:
    """Construct a fresh UnitOfWork bound to the global sessionmaker."""
    session_factory: async_sessionmaker[AsyncSession] = get_sessionmaker()
    return SqlAlchemyUnitOfWork(session_factory=session_factory)


@lru_cache(maxsize=1)
def get_industry_guidance_gateway() -> IndustryGuidanceGateway:
    """Return the process-wide industry guidance gateway."""
    return StaticIndustryGuidanceGateway()


UowDep = Annotated[UnitOfWork, Depends(get_materiality_uow)]
GuidanceDep = Annotated[IndustryGuidanceGateway, Depends(get_industry_guidance_gateway)]


def get_compute_materiality_uc(guidance: GuidanceDep) -> ComputeMaterialityUseCase:
    """Provide the stateless compute use case."""
    return ComputeMaterialityUseCase(guidance_gateway=guidance)


def get_save_materiality_uc(uow: UowDep, guidance: GuidanceDep) -> SaveMaterialityUseCase:
    """Provide the save use case."""
    return SaveMaterialityUseCase(uow, guidance_gateway=guidance)


def get_approve_materiality_uc(uow: UowDep) -> ApproveMaterialityUseCase:
    """Provide the approval use case."""
    return ApproveMaterialityUseCase(uow)


def get_materiality_history_uc(uow: UowDep) -> GetMaterialityHistoryUseCase:
    """Provide the history use case."""
    return GetMaterialityHistoryUseCase(uow)


def get_current_materiality_uc(uow: UowDep) -> GetCurrentMaterialityUseCase:
    """Provide the current-version use case."""
    return GetCurrentMaterialityUseCase(uow)


def get_industry_guidance_uc(guidance: GuidanceDep) -> GetIndustryGuidanceUseCase:
    """Provide the guidance lookup use case."""
    return GetIndustryGuidanceUseCase(guidance)


def get_apply_qualitative_adjustments_uc() -> ApplyQualitativeAdjustmentsUseCase:
    """Provide the qualitative adjustment use case."""
    return ApplyQualitativeAdjustmentsUseCase()


def get_assess_materiality_revision_uc() -> AssessMaterialityRevisionUseCase:
    """Provide the revision check use case."""
    return AssessMaterialityRevisionUseCase()
