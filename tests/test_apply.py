"""
Tests for the apply use case — converging a manifest with a mock pacman.
"""

from pacstate.core.models.manifest import Manifest
from pacstate.core.models.package import PackageResource
from pacstate.core.use_cases.apply import ApplyReport, ResourceResult, apply_manifest, reconcile_resource

from tests.samples import TOOL, info_block

QUIET = ["--noconfirm", "--noprogressbar"]


def _manifest(*packages: PackageResource) -> Manifest:
    return Manifest(packages=list(packages))


class TestPresent:
    def test_installs_missing_package(self, reconciler, runner):
        runner.queue_failure("-Qi", "vim", error="error: package 'vim' was not found")
        runner.set_response("-Qi", "vim", output=info_block("vim", "9.1-1"))

        result = reconcile_resource(PackageResource(name="vim"), reconciler)

        assert result.action == "installed"
        assert result.before is None
        assert result.after == "9.1-1"
        assert [TOOL, *QUIET, "-Sy", "vim"] in runner.calls

    def test_installs_from_source(self, reconciler, runner):
        runner.queue_response("-Qi", "mypkg", output="")
        runner.set_response("-Qi", "mypkg", output=info_block("mypkg", "1.0-1"))

        resource = PackageResource(name="mypkg", source="file:///srv/mypkg.pkg.tar.zst")
        result = reconcile_resource(resource, reconciler)

        assert result.action == "installed"
        assert [TOOL, *QUIET, "-U", "/srv/mypkg.pkg.tar.zst"] in runner.calls

    def test_leaves_installed_package_alone(self, reconciler, runner):
        runner.set_response("-Qi", "vim", output=info_block("vim", "9.1-1"))

        result = reconcile_resource(PackageResource(name="vim", ensure="installed"), reconciler)

        assert result.action == "unchanged"
        assert result.before == "9.1-1"
        assert runner.calls == [[TOOL, "-Qi", "vim"]]

    def test_dry_run_makes_no_changes(self, reconciler, runner):
        runner.set_failure("-Qi", "vim")

        result = reconcile_resource(PackageResource(name="vim"), reconciler, dry_run=True)

        assert result.action == "installed"
        assert runner.calls == [[TOOL, "-Qi", "vim"]]


class TestAbsent:
    def test_removes_installed_package(self, reconciler, runner):
        runner.set_response("-Qi", "nano", output=info_block("nano", "8.0-1"))

        result = reconcile_resource(PackageResource(name="nano", ensure="absent"), reconciler)

        assert result.action == "removed"
        assert result.before == "8.0-1"
        assert result.after is None
        assert runner.calls[-1] == [TOOL, *QUIET, "-R", "nano"]

    def test_missing_package_is_unchanged(self, reconciler, runner):
        runner.set_failure("-Qi", "nano")

        result = reconcile_resource(PackageResource(name="nano", ensure="purged"), reconciler)

        assert result.action == "unchanged"
        assert all("-R" not in argv for argv in runner.calls)


class TestLatest:
    def test_updates_when_catalog_is_newer(self, reconciler, runner):
        runner.queue_response("-Qi", "htop", output=info_block("htop", "3.2-1"))
        runner.set_response("-Qi", "htop", output=info_block("htop", "3.3-1"))
        runner.set_response("-Sp", output="3.3-1\n")

        result = reconcile_resource(PackageResource(name="htop", ensure="latest"), reconciler)

        assert result.action == "updated"
        assert (result.before, result.after) == ("3.2-1", "3.3-1")
        sy = runner.calls.index([TOOL, "-Sy"])
        sp = runner.calls.index([TOOL, "-Sp", "--print-format", "%v", "htop"])
        upgrade = runner.calls.index([TOOL, *QUIET, "-Sy", "htop"])
        assert sy < sp < upgrade

    def test_current_version_is_unchanged(self, reconciler, runner):
        runner.set_response("-Qi", "htop", output=info_block("htop", "3.3-1"))
        runner.set_response("-Sp", output="3.3-1\n")

        result = reconcile_resource(PackageResource(name="htop", ensure="latest"), reconciler)

        assert result.action == "unchanged"
        assert [TOOL, *QUIET, "-Sy", "htop"] not in runner.calls

    def test_missing_package_is_installed(self, reconciler, runner):
        runner.queue_failure("-Qi", "htop")
        runner.set_response("-Qi", "htop", output=info_block("htop", "3.3-1"))

        result = reconcile_resource(PackageResource(name="htop", ensure="latest"), reconciler)

        assert result.action == "installed"

    def test_dry_run_reports_target_version(self, reconciler, runner):
        runner.set_response("-Qi", "htop", output=info_block("htop", "3.2-1"))
        runner.set_response("-Sp", output="3.3-1\n")

        result = reconcile_resource(
            PackageResource(name="htop", ensure="latest"), reconciler, dry_run=True
        )

        assert result.action == "updated"
        assert result.after == "3.3-1"
        assert [TOOL, *QUIET, "-Sy", "htop"] not in runner.calls


class TestApplyManifest:
    def test_failure_does_not_stop_the_run(self, reconciler, runner):
        runner.set_failure("-Qi", "bad")
        runner.set_response("-Qi", "vim", output=info_block("vim", "9.1-1"))
        manifest = _manifest(
            PackageResource(name="bad", source="puppet://server/bad"),
            PackageResource(name="vim"),
        )

        report = apply_manifest(manifest, reconciler)

        assert [r.action for r in report.results] == ["failed", "unchanged"]
        assert "puppet:// URLs are not supported" in report.results[0].error
        assert report.status == "partial"
        assert report.failed == 1

    def test_execution_failure_is_recorded(self, reconciler, runner):
        runner.set_response("-Qi", "nano", output=info_block("nano", "8.0-1"))
        runner.set_failure("--noconfirm", "--noprogressbar", "-R", "nano", error="target not found")

        report = apply_manifest(_manifest(PackageResource(name="nano", ensure="absent")), reconciler)

        assert report.status == "failed"
        assert report.results[0].error == "target not found"

    def test_only_filter(self, reconciler, runner):
        manifest = _manifest(PackageResource(name="vim"), PackageResource(name="htop"))
        runner.set_response("-Qi", output=info_block("any", "1.0"))

        report = apply_manifest(manifest, reconciler, only=["htop"])

        assert [r.name for r in report.results] == ["htop"]
        assert runner.calls == [[TOOL, "-Qi", "htop"]]

    def test_empty_manifest(self, reconciler):
        report = apply_manifest(Manifest(), reconciler)
        assert report.total == 0
        assert report.status == "ok"


class TestReport:
    def test_to_dict(self):
        report = ApplyReport(
            results=[
                ResourceResult(name="vim", action="installed", after="9.1-1"),
                ResourceResult(name="nano"),
            ],
            dry_run=True,
        )
        d = report.to_dict()
        assert d["status"] == "ok"
        assert d["dry_run"] is True
        assert d["changed"] == 1
        assert d["results"][0] == {
            "name": "vim",
            "action": "installed",
            "before": None,
            "after": "9.1-1",
            "error": None,
        }
