"""Tests for CSV record sets."""

import csv

from rr_remediator.workflow import reports

from conftest import make_host, make_volume


def _read(path):
    with path.open(newline="", encoding="utf-8") as fh:
        return list(csv.DictReader(fh))


class TestReports:
    def test_report_path_sanitizes_cluster(self, tmp_path):
        path = reports.report_path(tmp_path, "Prod Cluster/01", "compliant")
        assert path == tmp_path / "Prod_Cluster_01_compliant.csv"

    def test_volume_report(self, tmp_path):
        volumes = [
            make_volume("naa.1", "esx01", iops=1, capacity_gb=1024),
            make_volume("naa.2", "esx02", policy="VMW_PSP_MRU", capacity_gb=2.5),
        ]
        path = reports.write_volume_report(tmp_path, "prod-01", "compliant", volumes)
        assert path == tmp_path / "prod-01_compliant.csv"
        assert _read(path) == [
            {"canonical_name": "naa.1", "capacity_gb": "1024.00", "host": "esx01", "policy": "VMW_PSP_RR", "iops": "1"},
            {"canonical_name": "naa.2", "capacity_gb": "2.50", "host": "esx02", "policy": "VMW_PSP_MRU", "iops": ""},
        ]

    def test_empty_sets_write_nothing(self, tmp_path):
        assert reports.write_volume_report(tmp_path, "prod-01", "compliant", []) is None
        assert reports.write_host_report(tmp_path, "prod-01", []) is None
        assert list(tmp_path.iterdir()) == []

    def test_host_report(self, tmp_path):
        path = reports.write_host_report(tmp_path, "prod-01", [make_host("esx02", power_state="poweredOff")])
        assert path.name == "prod-01_unhealthy_hosts.csv"
        assert _read(path) == [{"name": "esx02", "connection_state": "connected", "power_state": "poweredOff"}]
