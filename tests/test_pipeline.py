"""Tests for the deployment pipeline."""

import logging
from unittest.mock import Mock

import pytest

from c8ctl.core.deployment import deploy_resolved, resolve_resources
from c8ctl.core.exceptions import ApiError, DuplicateDefinitionError, PreconditionError
from c8ctl.core.models import DeploymentResult, ProblemDetail, ProcessDefinitionEntry


class TestResolveResources:
    """Tests for local resolution before any network call."""

    def test_no_paths(self, tmp_path):
        """Test an empty path list is a precondition error."""
        with pytest.raises(PreconditionError, match="No paths provided"):
            resolve_resources([], str(tmp_path))

    def test_no_resources_found(self, write_file, tmp_path):
        """Test a directory without resource files is a precondition error."""
        write_file("readme.md", "nothing to deploy")

        with pytest.raises(PreconditionError, match="No BPMN/DMN/Form files found"):
            resolve_resources([str(tmp_path)], str(tmp_path))

    def test_missing_path_only(self, tmp_path):
        """Test a missing root alone ends in the no-resources error."""
        with pytest.raises(PreconditionError, match="No BPMN/DMN/Form files found"):
            resolve_resources([str(tmp_path / "missing")], str(tmp_path))

    def test_duplicate_ids_rejected(self, write_file, bpmn_xml, tmp_path):
        """Test duplicate process ids abort with every contributing path."""
        a = write_file("one/a.bpmn", bpmn_xml("p1"))
        b = write_file("two/b.bpmn", bpmn_xml("p1"))

        with pytest.raises(DuplicateDefinitionError) as exc_info:
            resolve_resources([str(tmp_path)], str(tmp_path))

        assert exc_info.value.duplicates == {"p1": [str(a), str(b)]}
        assert "p1" in str(exc_info.value)

    def test_building_block_first(self, write_file, bpmn_xml, tmp_path):
        """Test a building block is ordered before an ungrouped resource."""
        write_file("standalone/y.bpmn", bpmn_xml("main-proc"))
        write_file("_bb-shared/x.bpmn", bpmn_xml("shared-proc"))

        resources = resolve_resources([str(tmp_path)], str(tmp_path))

        assert [r.name for r in resources] == ["x.bpmn", "y.bpmn"]
        assert resources[0].is_building_block is True
        assert resources[0].group_path == str(tmp_path / "_bb-shared")
        assert resources[1].is_building_block is False

    def test_process_application(self, write_file, bpmn_xml, tmp_path):
        """Test files below a .process-application marker are grouped."""
        write_file("app/.process-application")
        write_file("app/z.bpmn", bpmn_xml("z-proc"))

        resources = resolve_resources([str(tmp_path)], str(tmp_path))

        assert len(resources) == 1
        assert resources[0].is_process_application is True
        assert resources[0].group_path == str(tmp_path / "app")

    def test_one_resource_per_file(self, write_file, bpmn_xml, dmn_xml, form_json, tmp_path):
        """Test every discovered file yields exactly one resource."""
        write_file("a.bpmn", bpmn_xml("a"))
        write_file("sub/b.dmn", dmn_xml("b"))
        write_file("sub/c.form", form_json("c"))
        write_file("_bb-x/d.bpmn", bpmn_xml("d"))

        resources = resolve_resources([str(tmp_path)], str(tmp_path))

        assert sorted(r.name for r in resources) == ["a.bpmn", "b.dmn", "c.form", "d.bpmn"]

    def test_overlapping_roots_are_duplicates(self, write_file, bpmn_xml, tmp_path):
        """Test the same file reached through two roots collides with itself."""
        write_file("sub/a.bpmn", bpmn_xml("a"))

        with pytest.raises(DuplicateDefinitionError):
            resolve_resources([str(tmp_path), str(tmp_path / "sub")], str(tmp_path))


class TestDeployResolved:
    """Tests for submission and reconciliation."""

    def test_deploys_and_reports(self, write_file, bpmn_xml, tmp_path):
        """Test one call is made and rows carry the file's display fields."""
        write_file("_bb-shared/x.bpmn", bpmn_xml("shared-proc"))
        resources = resolve_resources([str(tmp_path)], str(tmp_path))
        client = Mock()
        client.deploy_resources.return_value = DeploymentResult(
            deployment_key="42",
            processes=[ProcessDefinitionEntry(id="shared-proc", version=1, key="7")],
        )

        outcome = deploy_resolved(client, "<default>", resources)

        client.deploy_resources.assert_called_once()
        assert outcome.result.deployment_key == "42"
        assert outcome.rows[0].file_name == "x.bpmn"
        assert outcome.rows[0].badge == "BB"

    def test_process_application_note(self, write_file, bpmn_xml, tmp_path, caplog):
        """Test a note is logged for batch deployments from a process application."""
        write_file("app/.process-application")
        write_file("app/z.bpmn", bpmn_xml("z-proc"))
        resources = resolve_resources([str(tmp_path)], str(tmp_path))
        client = Mock()
        client.deploy_resources.return_value = DeploymentResult(deployment_key="1")

        with caplog.at_level(logging.INFO, logger="c8ctl"):
            deploy_resolved(client, "<default>", resources)

        assert "batch deployment from process application" in caplog.text

    def test_no_note_without_process_application(self, write_file, bpmn_xml, tmp_path, caplog):
        """Test the note is absent when no process application is deployed."""
        write_file("_bb-building-block/bb.bpmn", bpmn_xml("bb"))
        resources = resolve_resources([str(tmp_path)], str(tmp_path))
        client = Mock()
        client.deploy_resources.return_value = DeploymentResult(deployment_key="1")

        with caplog.at_level(logging.INFO, logger="c8ctl"):
            deploy_resolved(client, "<default>", resources)

        assert "batch deployment from process application" not in caplog.text

    def test_submission_failure_propagates(self, write_file, bpmn_xml, tmp_path):
        """Test API rejections propagate unchanged and are not retried."""
        write_file("a.bpmn", bpmn_xml("a"))
        resources = resolve_resources([str(tmp_path)], str(tmp_path))
        client = Mock()
        client.deploy_resources.side_effect = ApiError(
            400, ProblemDetail(title="INVALID_ARGUMENT")
        )

        with pytest.raises(ApiError):
            deploy_resolved(client, "<default>", resources)

        assert client.deploy_resources.call_count == 1
