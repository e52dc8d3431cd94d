# tests/unit/application/use_cases/materiality/test_save_materiality_uc.py
from __future__ import annotations

from decimal import Decimal
from typing import Any
from uuid import UUID, uuid4

import pytest
from prometheus_client import REGISTRY

from tickmark_api.adapters.gateways.static_industry_guidance_gateway import (
    StaticIndustryGuidanceGateway,
)
from tickmark_api.application.use_cases.materiality.approve_materiality import (
    ApproveMaterialityRequest,
    ApproveMaterialityUseCase,
)
from tickmark_api.application.use_cases.materiality.save_materiality import (
    SaveMaterialityRequest,
    SaveMaterialityUseCase,
)
from tickmark_api.domain.enums.materiality import MaterialityAdvisoryCode
from tickmark_api.domain.exceptions.calculation import InvalidInput
from tickmark_api.domain.exceptions.materiality import VersionConflict


def _saved(result: str) -> float:
    return REGISTRY.get_sample_value("materiality_versions_saved_total", {"result": result}) or 0.0


def _use_case(uow: Any, clock: Any) -> SaveMaterialityUseCase:
    return SaveMaterialityUseCase(uow, clock=clock)


@pytest.mark.asyncio
async def test_first_save_creates_version_one(uow: Any, clock: Any, inputs_factory: Any) -> None:
    before = _saved("created")

    result = await _use_case(uow, clock).execute(
        SaveMaterialityRequest(
            engagement_id="eng-1",
            expected_current_version_id=None,
            inputs=inputs_factory(overall_materiality_percentage=Decimal("1")),
            prepared_by="alice",
        )
    )

    assert result.created is True
    assert result.version.version == 1
    assert result.version.is_current is True
    assert result.version.is_approved is False
    assert result.version.previous_version_id is None
    assert result.version.prepared_by == "alice"
    assert result.version.thresholds.overall_materiality == Decimal("50000")
    assert result.version.thresholds.performance_materiality == Decimal("37500")
    assert result.version.thresholds.clearly_trivial_threshold == Decimal("2500")
    assert uow.commits == 1
    assert _saved("created") == before + 1


@pytest.mark.asyncio
async def test_second_save_links_to_previous(uow: Any, clock: Any, inputs_factory: Any) -> None:
    uc = _use_case(uow, clock)
    first = await uc.execute(
        SaveMaterialityRequest("eng-1", None, inputs_factory(), prepared_by="alice")
    )

    second = await uc.execute(
        SaveMaterialityRequest(
            "eng-1",
            first.version.id,
            inputs_factory(overall_materiality_percentage=Decimal("2")),
        )
    )

    assert second.created is True
    assert second.version.version == 2
    assert second.version.previous_version_id == first.version.id
    assert (await uow.repo.get(first.version.id)).is_current is False


@pytest.mark.asyncio
async def test_stale_expected_version_conflicts(uow: Any, clock: Any, inputs_factory: Any) -> None:
    uc = _use_case(uow, clock)
    await uc.execute(SaveMaterialityRequest("eng-1", None, inputs_factory()))

    with pytest.raises(VersionConflict) as exc:
        await uc.execute(
            SaveMaterialityRequest(
                "eng-1", None, inputs_factory(overall_materiality_percentage=Decimal("2"))
            )
        )

    assert exc.value.http_status == 409
    assert uow.rollbacks == 1
    history = await uow.repo.get_history("eng-1")
    assert [v.version for v in history] == [1]


@pytest.mark.asyncio
async def test_concurrent_editors_sharing_a_token_conflict(
    uow: Any, clock: Any, inputs_factory: Any
) -> None:
    uc = _use_case(uow, clock)
    first = await uc.execute(SaveMaterialityRequest("eng-1", None, inputs_factory()))
    token = first.version.id

    winner = await uc.execute(
        SaveMaterialityRequest(
            "eng-1", token, inputs_factory(overall_materiality_percentage=Decimal("1"))
        )
    )
    with pytest.raises(VersionConflict) as exc:
        await uc.execute(
            SaveMaterialityRequest(
                "eng-1", token, inputs_factory(overall_materiality_percentage=Decimal("2"))
            )
        )

    assert exc.value.details["current_version_id"] == str(winner.version.id)
    history = await uow.repo.get_history("eng-1")
    assert len(history) == 2
    assert [v.version for v in history] == [2, 1]
    current = await uow.repo.get_current("eng-1")
    assert current.inputs.overall_materiality_percentage == Decimal("1")


@pytest.mark.asyncio
async def test_unknown_expected_version_conflicts_on_empty_engagement(
    uow: Any, clock: Any, inputs_factory: Any
) -> None:
    with pytest.raises(VersionConflict):
        await _use_case(uow, clock).execute(
            SaveMaterialityRequest("eng-1", uuid4(), inputs_factory())
        )


@pytest.mark.asyncio
async def test_unchanged_inputs_return_current(uow: Any, clock: Any, inputs_factory: Any) -> None:
    uc = _use_case(uow, clock)
    first = await uc.execute(SaveMaterialityRequest("eng-1", None, inputs_factory()))
    before = _saved("unchanged")

    again = await uc.execute(SaveMaterialityRequest("eng-1", first.version.id, inputs_factory()))

    assert again.created is False
    assert again.version.id == first.version.id
    assert len(await uow.repo.get_history("eng-1")) == 1
    assert _saved("unchanged") == before + 1


@pytest.mark.asyncio
async def test_save_after_approval_forks_new_version(
    uow: Any, clock: Any, inputs_factory: Any
) -> None:
    uc = _use_case(uow, clock)
    first = await uc.execute(SaveMaterialityRequest("eng-1", None, inputs_factory()))
    await ApproveMaterialityUseCase(uow, clock=clock).execute(
        ApproveMaterialityRequest(version_id=first.version.id, approver="partner")
    )

    forked = await uc.execute(
        SaveMaterialityRequest(
            "eng-1", first.version.id, inputs_factory(benchmark_value=Decimal("6000000"))
        )
    )

    assert forked.created is True
    assert forked.version.version == 2
    assert forked.version.is_approved is False
    original = await uow.repo.get(first.version.id)
    assert original.is_approved is True
    assert original.approved_by == "partner"
    assert original.is_current is False


@pytest.mark.asyncio
async def test_advisories_returned_without_blocking(
    uow: Any, clock: Any, inputs_factory: Any
) -> None:
    uc = SaveMaterialityUseCase(uow, guidance_gateway=StaticIndustryGuidanceGateway(), clock=clock)

    result = await uc.execute(
        SaveMaterialityRequest(
            "eng-1", None, inputs_factory(benchmark_value=None, industry="saas")
        )
    )

    assert result.created is True
    codes = [a.code for a in result.advisories]
    assert codes == [
        MaterialityAdvisoryCode.NON_POSITIVE_BENCHMARK,
        MaterialityAdvisoryCode.BENCHMARK_PERCENTAGE_OUTSIDE_TYPICAL_RANGE,
    ]
    assert result.version.thresholds.overall_materiality == 0


@pytest.mark.asyncio
async def test_blank_engagement_is_invalid(uow: Any, clock: Any, inputs_factory: Any) -> None:
    with pytest.raises(InvalidInput):
        await _use_case(uow, clock).execute(SaveMaterialityRequest("  ", None, inputs_factory()))
    assert uow.commits == 0


@pytest.mark.asyncio
async def test_invalid_percentage_rejected_before_transaction(
    uow: Any, clock: Any, inputs_factory: Any
) -> None:
    with pytest.raises(InvalidInput):
        await _use_case(uow, clock).execute(
            SaveMaterialityRequest(
                "eng-1", None, inputs_factory(overall_materiality_percentage=Decimal("150"))
            )
        )
    assert uow.commits == 0
    assert uow.rollbacks == 0


@pytest.mark.asyncio
async def test_id_factory_is_used(uow: Any, clock: Any, inputs_factory: Any) -> None:
    fixed = UUID("00000000-0000-0000-0000-000000000001")
    uc = SaveMaterialityUseCase(uow, clock=clock, id_factory=lambda: fixed)

    result = await uc.execute(SaveMaterialityRequest("eng-1", None, inputs_factory()))

    assert result.version.id == fixed
