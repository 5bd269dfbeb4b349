"""Tests for the RAPL entity model built from a mock powercap tree."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

from powercap.errors import BuildIOError, ReadIOError, ReadParseError
from powercap.mock import MockBuilder
from powercap.rapl import IntelRapl, PowerCap, Socket

pytestmark = pytest.mark.skipif(
    sys.platform == "win32", reason="Colons not allowed in Windows paths"
)


@pytest.fixture()
def fake_powercap(tmp_path: Path) -> Path:
    """One socket (100 uJ, wraps at 500) with three 10 uJ domains."""
    MockBuilder(
        sockets=1,
        socket_energy=lambda _s: 100,
        socket_max_energy_range=lambda _s: 500,
        domain_energy=lambda _s, _d: 10,
        domain_max_energy_range=lambda _s, _d: 50,
    ).build(tmp_path)
    return tmp_path


@pytest.fixture()
def two_sockets(tmp_path: Path) -> Path:
    """Two sockets with distinct counters per socket and domain."""
    MockBuilder(
        sockets=2,
        domain_names=("core", "dram"),
        socket_energy=lambda s: 1000 * (s + 1),
        domain_energy=lambda s, d: 10 * (s + 1) + d,
    ).build(tmp_path)
    return tmp_path


class TestPowerCapBuild:
    """Tests for PowerCap.from_path()."""

    def test_discovers_mock_tree(self, fake_powercap: Path) -> None:
        cap = PowerCap.from_path(fake_powercap)
        assert list(cap.intel_rapl.sockets) == [0]
        assert sorted(cap.intel_rapl.sockets[0].domains) == [0, 1, 2]

    def test_accepts_str_path(self, fake_powercap: Path) -> None:
        cap = PowerCap.from_path(str(fake_powercap))
        assert len(cap.intel_rapl.sockets) == 1

    def test_ids_match_directory_names(self, two_sockets: Path) -> None:
        cap = PowerCap.from_path(two_sockets)
        for socket_id, socket in cap.intel_rapl.sockets.items():
            assert socket.id == socket_id
            assert socket.path.name == f"intel-rapl:{socket_id}"
            for domain_id, domain in socket.domains.items():
                assert domain.id == domain_id
                assert domain.path.name == f"intel-rapl:{socket_id}:{domain_id}"

    def test_missing_root_is_build_error(self, tmp_path: Path) -> None:
        with pytest.raises(BuildIOError):
            PowerCap.from_path(tmp_path / "nonexistent")

    def test_root_without_intel_rapl(self, tmp_path: Path) -> None:
        (tmp_path / "intel-rapl-mmio").mkdir()
        cap = PowerCap.from_path(tmp_path)
        assert dict(cap.intel_rapl.sockets) == {}
        assert cap.total_energy() == 0
        assert cap.snapshot().sockets == ()

    def test_intel_rapl_from_missing_path(self, tmp_path: Path) -> None:
        with pytest.raises(BuildIOError):
            IntelRapl.from_path(tmp_path / "intel-rapl")

    def test_graph_is_read_only(self, fake_powercap: Path) -> None:
        cap = PowerCap.from_path(fake_powercap)
        with pytest.raises(TypeError):
            cap.intel_rapl.sockets[7] = cap.intel_rapl.sockets[0]  # type: ignore[index]
        with pytest.raises(TypeError):
            del cap.intel_rapl.sockets[0].domains[0]  # type: ignore[attr-defined]


class TestMetrics:
    """Tests for the per-entity metric accessors."""

    def test_socket_metrics(self, fake_powercap: Path) -> None:
        socket = PowerCap.from_path(fake_powercap).intel_rapl.sockets[0]
        assert socket.enabled() is True
        assert socket.energy() == 100
        assert socket.max_energy_range() == 500
        assert socket.name() == "package-0"

    def test_domain_metrics(self, fake_powercap: Path) -> None:
        socket = PowerCap.from_path(fake_powercap).intel_rapl.sockets[0]
        names = {d.name() for d in socket.domains.values()}
        assert names == {"core", "uncore", "dram"}
        for domain in socket.domains.values():
            assert domain.enabled() is True
            assert domain.energy() == 10
            assert domain.max_energy_range() == 50

    def test_disabled(self, tmp_path: Path) -> None:
        MockBuilder(enabled=False).build(tmp_path)
        socket = PowerCap.from_path(tmp_path).intel_rapl.sockets[0]
        assert socket.enabled() is False
        assert all(not d.enabled() for d in socket.domains.values())

    def test_reads_live_values(self, fake_powercap: Path) -> None:
        socket = PowerCap.from_path(fake_powercap).intel_rapl.sockets[0]
        assert socket.energy() == 100
        (socket.path / "energy_uj").write_text("175\n")
        assert socket.energy() == 175

    def test_malformed_energy_is_isolated(self, fake_powercap: Path) -> None:
        socket = PowerCap.from_path(fake_powercap).intel_rapl.sockets[0]
        domain = socket.domains[1]
        (domain.path / "energy_uj").write_text("not-a-number\n")

        with pytest.raises(ReadParseError):
            domain.energy()
        assert domain.enabled() is True
        assert domain.name() == "uncore"

    def test_missing_metric_file(self, fake_powercap: Path) -> None:
        socket = PowerCap.from_path(fake_powercap).intel_rapl.sockets[0]
        (socket.path / "max_energy_range_uj").unlink()
        with pytest.raises(ReadIOError):
            socket.max_energy_range()
        assert socket.energy() == 100


class TestTotalEnergy:
    """Tests for the summed energy of sockets and of the whole tree."""

    def test_single_socket_scenario(self, fake_powercap: Path) -> None:
        cap = PowerCap.from_path(fake_powercap)
        assert cap.intel_rapl.total_energy() == 130
        assert cap.intel_rapl.sockets[0].total_energy() == 130

    def test_sum_over_sockets(self, two_sockets: Path) -> None:
        rapl = PowerCap.from_path(two_sockets).intel_rapl
        expected = sum(
            s.energy() + sum(d.energy() for d in s.domains.values())
            for s in rapl.sockets.values()
        )
        # (1000 + 10 + 11) + (2000 + 20 + 21)
        assert expected == 3062
        assert rapl.total_energy() == expected

    def test_socket_without_domains(self, tmp_path: Path) -> None:
        MockBuilder(domain_names=(), socket_energy=lambda _s: 42).build(tmp_path)
        socket = PowerCap.from_path(tmp_path).intel_rapl.sockets[0]
        assert dict(socket.domains) == {}
        assert socket.total_energy() == socket.energy() == 42

    def test_read_failure_propagates(self, fake_powercap: Path) -> None:
        cap = PowerCap.from_path(fake_powercap)
        (cap.intel_rapl.sockets[0].domains[2].path / "energy_uj").write_text("x\n")
        with pytest.raises(ReadParseError):
            cap.total_energy()

    def test_values_beyond_u64_do_not_wrap(self, tmp_path: Path) -> None:
        big = 2**64 - 1
        MockBuilder(
            domain_names=("core",),
            socket_energy=lambda _s: big,
            domain_energy=lambda _s, _d: big,
        ).build(tmp_path)
        assert PowerCap.from_path(tmp_path).total_energy() == 2 * big


class TestSocketConstruction:
    """Tests for building entities directly."""

    def test_from_path_unreadable(self, tmp_path: Path) -> None:
        with pytest.raises(BuildIOError):
            Socket.from_path(0, tmp_path / "intel-rapl:0")

    def test_repr(self, fake_powercap: Path) -> None:
        socket = PowerCap.from_path(fake_powercap).intel_rapl.sockets[0]
        assert repr(socket).startswith("Socket(id=0, ")
