"""Tests for the parent resolver."""

from datetime import datetime
from unittest.mock import Mock

import pytest

from structure_organizer.core.resolver import ParentResolver, Resolution, TerminationReason
from structure_organizer.domain.items import Item
from structure_organizer.domain.policies import DateOrganizingPolicy
from structure_organizer.domain.references import ContainerRef
from structure_organizer.exceptions import ContainerNotFoundError, StoreLookupError
from structure_organizer.infrastructure.memory_store import InMemoryContainerStore


class FakeStore:
    """Store mapping container ids to policies; unknown ids are plain containers."""

    def __init__(self, policies=None):
        self.policies = dict(policies or {})
        self.lookups = []

    def get_organizing_policy(self, ref):
        self.lookups.append(ref)
        return self.policies.get(ref.id)


class CountingPolicy:
    """Policy returning a fixed candidate and counting calls."""

    def __init__(self, candidate):
        self.candidate = candidate
        self.calls = 0

    def get_target_container(self, item):
        self.calls += 1
        return self.candidate


A = ContainerRef(1)
B = ContainerRef(2)
C = ContainerRef(3)
D = ContainerRef(4)


@pytest.fixture
def item():
    return Item(name="Launch announcement", published=datetime(2024, 5, 2))


class TestPlainContainers:
    """Containers without a policy resolve to themselves."""

    def test_non_organizing_container_is_returned(self, item):
        resolver = ParentResolver(FakeStore())
        assert resolver.resolve(A, item) == A

    def test_none_resolves_to_none(self, item):
        store = Mock()
        resolver = ParentResolver(store)
        assert resolver.resolve(None, item) is None
        store.get_organizing_policy.assert_not_called()

    def test_empty_reference_is_not_looked_up(self, item):
        store = FakeStore()
        resolution = ParentResolver(store).resolve_with_trace(ContainerRef.EMPTY, item)
        assert resolution.resolved == ContainerRef.EMPTY
        assert resolution.terminated_by == TerminationReason.EMPTY_REFERENCE
        assert store.lookups == []

    def test_trace_for_plain_container(self, item):
        resolution = ParentResolver(FakeStore()).resolve_with_trace(A, item)
        assert resolution == Resolution(
            requested=A,
            resolved=A,
            visited=(),
            terminated_by=TerminationReason.NOT_ORGANIZING,
        )
        assert resolution.changed is False


class TestChains:
    """Organizing containers delegate until a plain container is reached."""

    def test_single_delegation(self, item):
        resolver = ParentResolver(FakeStore({1: CountingPolicy(B)}))
        assert resolver.resolve(A, item) == B

    def test_chain_ends_at_last_container(self, item):
        store = FakeStore({1: CountingPolicy(B), 2: CountingPolicy(C), 3: CountingPolicy(D)})
        resolution = ParentResolver(store).resolve_with_trace(A, item)
        assert resolution.resolved == D
        assert resolution.visited == (A, B, C)
        assert resolution.terminated_by == TerminationReason.NOT_ORGANIZING
        assert resolution.changed is True

    def test_item_is_passed_to_policy_unchanged(self, item):
        policy = Mock()
        policy.get_target_container.return_value = B
        ParentResolver(FakeStore({1: policy})).resolve(A, item)
        policy.get_target_container.assert_called_once_with(item)


class TestCycles:
    """Cycles and self references terminate without errors."""

    def test_self_referential_container(self, item):
        policy = CountingPolicy(A)
        resolution = ParentResolver(FakeStore({1: policy})).resolve_with_trace(A, item)
        assert resolution.resolved == A
        assert resolution.visited == (A,)
        assert resolution.terminated_by == TerminationReason.CYCLE_DETECTED
        assert policy.calls == 1

    def test_two_cycle_returns_first_revisited_container(self, item):
        policy_a = CountingPolicy(B)
        policy_b = CountingPolicy(A)
        resolution = ParentResolver(FakeStore({1: policy_a, 2: policy_b})).resolve_with_trace(A, item)
        assert resolution.resolved == A
        assert resolution.visited == (A, B)
        assert resolution.terminated_by == TerminationReason.CYCLE_DETECTED
        assert policy_a.calls == 1
        assert policy_b.calls == 1

    def test_cycle_entered_mid_chain(self, item):
        # A -> B -> C -> B
        store = FakeStore({1: CountingPolicy(B), 2: CountingPolicy(C), 3: CountingPolicy(B)})
        resolution = ParentResolver(store).resolve_with_trace(A, item)
        assert resolution.resolved == B
        assert resolution.visited == (A, B, C)

    def test_revisit_detected_despite_version_tag(self, item):
        class VersioningPolicy:
            """Returns its own container with a new work id on every call."""

            def __init__(self):
                self.calls = 0

            def get_target_container(self, item):
                self.calls += 1
                return A.with_version(self.calls)

        policy = VersioningPolicy()
        resolution = ParentResolver(FakeStore({1: policy})).resolve_with_trace(A, item)
        assert resolution.resolved == A.with_version(1)
        assert resolution.resolved.equivalent(A)
        assert resolution.changed is False
        assert policy.calls == 1


class TestInvalidCandidates:
    """Policies that do not supply a replacement leave the container unchanged."""

    @pytest.mark.parametrize("candidate", [None, ContainerRef.EMPTY, "2", 2])
    def test_invalid_candidate_keeps_current(self, item, candidate):
        policy = CountingPolicy(candidate)
        resolution = ParentResolver(FakeStore({1: policy})).resolve_with_trace(A, item)
        assert resolution.resolved == A
        assert resolution.terminated_by == TerminationReason.CYCLE_DETECTED
        assert policy.calls == 1

    def test_invalid_candidate_after_delegation(self, item):
        store = FakeStore({1: CountingPolicy(B), 2: CountingPolicy(None)})
        assert ParentResolver(store).resolve(A, item) == B


class TestErrors:
    """Collaborator failures propagate to the caller."""

    def test_lookup_failure_propagates(self, item):
        store = Mock()
        store.get_organizing_policy.side_effect = StoreLookupError("backend down")
        with pytest.raises(StoreLookupError, match="backend down"):
            ParentResolver(store).resolve(A, item)

    def test_lookup_failure_mid_chain_propagates(self, item):
        memory = InMemoryContainerStore()
        site = memory.add_container("Site")
        missing = ContainerRef(99)
        memory.set_policy(site, CountingPolicy(missing))
        with pytest.raises(ContainerNotFoundError):
            ParentResolver(memory).resolve(site, item)

    def test_policy_error_propagates(self, item):
        policy = Mock()
        policy.get_target_container.side_effect = KeyError("category")
        with pytest.raises(KeyError):
            ParentResolver(FakeStore({1: policy})).resolve(A, item)

    def test_try_resolve_success(self, item):
        result = ParentResolver(FakeStore({1: CountingPolicy(B)})).try_resolve(A, item)
        assert result.is_success()
        assert result.value() == B

    def test_try_resolve_wraps_lookup_failure(self, item):
        store = Mock()
        store.get_organizing_policy.side_effect = StoreLookupError("backend down")
        result = ParentResolver(store).try_resolve(A, item)
        assert result.is_failure()
        assert isinstance(result.error(), StoreLookupError)

    def test_try_resolve_does_not_wrap_policy_errors(self, item):
        policy = Mock()
        policy.get_target_container.side_effect = RuntimeError("boom")
        with pytest.raises(RuntimeError):
            ParentResolver(FakeStore({1: policy})).try_resolve(A, item)


class TestNewsExample:
    """Root is plain; News routes items by date into News/yyyy/mm."""

    @pytest.fixture
    def store(self):
        store = InMemoryContainerStore()
        root = store.add_container("Root")
        news = store.add_container("News", parent=root)
        year = store.add_container("2024", parent=news)
        store.add_container("05", parent=year)
        store.set_policy(news, DateOrganizingPolicy(store, news, create_missing=False))
        return store

    def test_root_is_unchanged(self, store, item):
        root = store.find_by_path("/Root")
        assert ParentResolver(store).resolve(root, item) == root

    def test_news_routes_by_date(self, store, item):
        news = store.find_by_path("/Root/News")
        resolved = ParentResolver(store).resolve(news, item)
        assert resolved == store.find_by_path("/Root/News/2024/05")
        assert store.path_of(resolved) == "/Root/News/2024/05"

    def test_nested_organizing_containers(self, store):
        # Articles redirects into News, which organizes by date
        from structure_organizer.domain.policies import RedirectPolicy

        root = store.find_by_path("/Root")
        news = store.find_by_path("/Root/News")
        articles = store.add_container("Articles", parent=root)
        store.set_policy(articles, RedirectPolicy(news))

        item = Item(name="Report", published=datetime(2024, 5, 20))
        resolution = ParentResolver(store).resolve_with_trace(articles, item)
        assert store.path_of(resolution.resolved) == "/Root/News/2024/05"
        assert resolution.visited == (articles, news)
