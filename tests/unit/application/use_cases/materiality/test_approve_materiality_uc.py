# tests/unit/application/use_cases/materiality/test_approve_materiality_uc.py
from __future__ import annotations

from decimal import Decimal
from typing import Any
from uuid import uuid4

import pytest
from prometheus_client import REGISTRY

from tickmark_api.application.use_cases.materiality.approve_materiality import (
    ApproveMaterialityRequest,
    ApproveMaterialityUseCase,
)
from tickmark_api.application.use_cases.materiality.save_materiality import (
    SaveMaterialityRequest,
    SaveMaterialityUseCase,
)
from tickmark_api.domain.exceptions.calculation import InvalidInput
from tickmark_api.domain.exceptions.materiality import (
    AlreadyApproved,
    NotCurrentVersion,
    VersionNotFound,
)


async def _seed(uow: Any, clock: Any, inputs: Any) -> Any:
    result = await SaveMaterialityUseCase(uow, clock=clock).execute(
        SaveMaterialityRequest("eng-1", None, inputs)
    )
    return result.version


@pytest.mark.asyncio
async def test_approve_current_version(uow: Any, clock: Any, inputs_factory: Any) -> None:
    version = await _seed(uow, clock, inputs_factory())
    before = REGISTRY.get_sample_value("materiality_approvals_total") or 0.0

    approved = await ApproveMaterialityUseCase(uow, clock=clock).execute(
        ApproveMaterialityRequest(version_id=version.id, approver="  partner  ")
    )

    assert approved.is_approved is True
    assert approved.approved_by == "partner"
    assert approved.approved_at == clock()
    assert approved.thresholds == version.thresholds
    assert REGISTRY.get_sample_value("materiality_approvals_total") == before + 1


@pytest.mark.asyncio
async def test_approve_unknown_version(uow: Any, clock: Any) -> None:
    with pytest.raises(VersionNotFound) as exc:
        await ApproveMaterialityUseCase(uow, clock=clock).execute(
            ApproveMaterialityRequest(version_id=uuid4(), approver="partner")
        )
    assert exc.value.http_status == 404
    assert uow.rollbacks == 1


@pytest.mark.asyncio
async def test_approve_twice_fails(uow: Any, clock: Any, inputs_factory: Any) -> None:
    version = await _seed(uow, clock, inputs_factory())
    uc = ApproveMaterialityUseCase(uow, clock=clock)
    await uc.execute(ApproveMaterialityRequest(version_id=version.id, approver="a"))

    with pytest.raises(AlreadyApproved):
        await uc.execute(ApproveMaterialityRequest(version_id=version.id, approver="b"))

    stored = await uow.repo.get(version.id)
    assert stored.approved_by == "a"


@pytest.mark.asyncio
async def test_approve_superseded_version(uow: Any, clock: Any, inputs_factory: Any) -> None:
    first = await _seed(uow, clock, inputs_factory())
    await SaveMaterialityUseCase(uow, clock=clock).execute(
        SaveMaterialityRequest(
            "eng-1", first.id, inputs_factory(overall_materiality_percentage=Decimal("2"))
        )
    )

    with pytest.raises(NotCurrentVersion):
        await ApproveMaterialityUseCase(uow, clock=clock).execute(
            ApproveMaterialityRequest(version_id=first.id, approver="partner")
        )


@pytest.mark.asyncio
async def test_blank_approver_is_invalid(uow: Any, clock: Any, inputs_factory: Any) -> None:
    version = await _seed(uow, clock, inputs_factory())

    with pytest.raises(InvalidInput):
        await ApproveMaterialityUseCase(uow, clock=clock).execute(
            ApproveMaterialityRequest(version_id=version.id, approver="   ")
        )
    assert (await uow.repo.get(version.id)).is_approved is False
