# SPDX-FileCopyrightText: 2024 Swiss Confederation
#
# SPDX-License-Identifier: MIT

import re
import json
import logging

import pytest

from common.logging import setup as log_setup, operations, splunk

# eg. 2024-02-07T14:38:19.565+01:00
TIMESTAMP = re.compile(r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}\.\d{3}[+-]\d{2}:\d{2}")


@pytest.fixture()
def splunk_caplog(caplog):
    caplog.handler.setFormatter(splunk.SplunkFormatter(defaults={"app_name": "registry", "correlation_id": "c0ffee"}))
    caplog.clear()
    return caplog


def logged(caplog) -> dict:
    assert len(caplog.records) == 1, "Expected exactly one record"
    return json.loads(caplog.text)


@pytest.mark.parametrize("level", ["DEBUG", "INFO", "WARNING", "ERROR"])
def test_record_is_one_json_object(splunk_caplog, level: str):
    with splunk_caplog.at_level("DEBUG"):
        logging.getLogger("presentation.test").log(getattr(logging, level), "Stored presentation %s", "abc")
        data = logged(splunk_caplog)
    assert data["message"] == "Stored presentation abc"
    assert data["level"] == level
    assert data["logger"] == "presentation.test"
    assert data["app"] == "registry"
    assert data["hash"] == "c0ffee"
    assert TIMESTAMP.fullmatch(data["@timestamp"])


def test_operations_entry_fields(splunk_caplog):
    entry = operations.OperationsLogEntry(
        message="Presentation signed.",
        status=operations.OperationsLogEntry.Status.success,
        operation=operations.OperationsLogEntry.Operation.only_test,
        step=operations.OperationsLogEntry.Step.only_test,
        application_id="app",
    )
    with splunk_caplog.at_level("INFO"):
        logging.getLogger("presentation.test").info(entry)
        data = logged(splunk_caplog)
    assert data["message"] == "Presentation signed. status=SUCCESS operation=ONLY_TEST step=ONLY_TEST application_id=app"
    assert (data["status"], data["operation"], data["step"]) == ("SUCCESS", "ONLY_TEST", "ONLY_TEST")
    assert data["application_id"] == "app"
    assert "presentation_id" not in data, "Unset fields should not be logged"


def test_exception_has_traceback(splunk_caplog):
    with splunk_caplog.at_level("INFO"):
        try:
            raise ValueError("broken template")
        except ValueError:
            logging.getLogger("presentation.test").exception("Rendering failed")
        data = logged(splunk_caplog)
    assert data["level"] == "ERROR"
    assert data["message"] == "Rendering failed"
    assert data["exception"].startswith("Traceback")
    assert "ValueError: broken template" in data["exception"]


def test_log_id_without_request():
    assert log_setup.get_log_id() == "unknown"
