"""Shared fixtures for c8ctl tests."""

from pathlib import Path

import pytest

BPMN_TEMPLATE = """<?xml version="1.0" encoding="UTF-8"?>
<bpmn:definitions xmlns:bpmn="http://www.omg.org/spec/BPMN/20100524/MODEL" id="Definitions_1">
  <bpmn:process id="{process_id}" isExecutable="true">
    <bpmn:startEvent id="StartEvent_1" />
  </bpmn:process>
</bpmn:definitions>
"""

DMN_TEMPLATE = """<?xml version="1.0" encoding="UTF-8"?>
<definitions xmlns="https://www.omg.org/spec/DMN/20191111/MODEL/" id="Definitions_2" name="DRD">
  <decision id="{decision_id}" name="Decision">
    <decisionTable id="DecisionTable_1" />
  </decision>
</definitions>
"""

FORM_TEMPLATE = '{{"id": "{form_id}", "type": "default", "components": []}}'


@pytest.fixture
def bpmn_xml():
    """Build minimal BPMN content for a process id."""
    return lambda process_id: BPMN_TEMPLATE.format(process_id=process_id)


@pytest.fixture
def dmn_xml():
    """Build minimal DMN content for a decision id."""
    return lambda decision_id: DMN_TEMPLATE.format(decision_id=decision_id)


@pytest.fixture
def form_json():
    """Build minimal form JSON for a form id."""
    return lambda form_id: FORM_TEMPLATE.format(form_id=form_id)


@pytest.fixture
def write_file(tmp_path):
    """Write a file below tmp_path, creating parent directories."""

    def _write(relative: str, content: str = "") -> Path:
        path = tmp_path / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path

    return _write
