from __future__ import annotations

import itertools

import allure
import pytest

from commit_gate.hooks.results import HookResult, TaskResult, TaskStatus, fold_results, raise_to

pytestmark = [
    allure.epic("Hook Pipeline"),
    allure.feature("Result Lattice"),
]


@pytest.mark.parametrize("scale", [TaskResult, HookResult])
def test_raise_to_is_commutative_and_associative(scale) -> None:
    values = list(scale)
    for a, b in itertools.product(values, repeat=2):
        assert raise_to(a, b) is raise_to(b, a)
    for a, b, c in itertools.product(values, repeat=3):
        assert raise_to(a, raise_to(b, c)) is raise_to(raise_to(a, b), c)


def test_lowest_value_is_identity() -> None:
    for result in HookResult:
        assert raise_to(HookResult.CLEAN, result) is result
    for result in TaskResult:
        assert raise_to(TaskResult.ACCEPTED, result) is result


def test_ranking_follows_declared_order() -> None:
    assert [result.rank for result in HookResult] == [0, 1, 2, 3]
    assert raise_to(HookResult.HAS_UNSTAGED_CHANGES, HookResult.HAS_CHANGES) is (
        HookResult.HAS_UNSTAGED_CHANGES
    )
    assert raise_to(TaskResult.MODIFIED, TaskResult.REJECTED) is TaskResult.REJECTED


def test_fold_results_is_order_independent() -> None:
    results = [HookResult.HAS_CHANGES, HookResult.CLEAN, HookResult.HAS_UNSTAGED_CHANGES]
    for permutation in itertools.permutations(results):
        assert fold_results(permutation, HookResult.CLEAN) is HookResult.HAS_UNSTAGED_CHANGES
    assert fold_results([], HookResult.CLEAN) is HookResult.CLEAN


def test_is_success_only_for_clean_and_has_changes() -> None:
    assert HookResult.CLEAN.is_success
    assert HookResult.HAS_CHANGES.is_success
    assert not HookResult.HAS_UNSTAGED_CHANGES.is_success
    assert not HookResult.REJECTED.is_success
    assert [result.exit_code for result in HookResult] == [0, 0, 1, 1]


def test_hook_result_maps_to_status() -> None:
    assert HookResult.REJECTED.to_status() is TaskStatus.REJECTED
    assert HookResult.CLEAN.to_status() is TaskStatus.CLEAN


def test_merging_different_scales_is_rejected() -> None:
    with pytest.raises(TypeError, match="Cannot merge"):
        raise_to(HookResult.CLEAN, TaskResult.ACCEPTED)
