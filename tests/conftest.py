import pytest

from kubedeck.contexts import ConnectionTarget, node_for_target
from kubedeck.workspace import new_workspace


def make_target(n: int, provider: str = "GKE", region: str = "us-west-1") -> ConnectionTarget:
    return ConnectionTarget(id=f"context{n}", cluster_name=f"cluster{n}", provider=provider, region=region)


@pytest.fixture
def targets():
    return {
        1: make_target(1, "GKE", "us-west-1"),
        2: make_target(2, "AWS", "us-west-2"),
        3: make_target(3, "GKE", "us-east-1"),
    }


@pytest.fixture
def nodes(targets):
    return {n: node_for_target(t) for n, t in targets.items()}


@pytest.fixture
def workspace():
    return new_workspace(panel_id="panel-main")
