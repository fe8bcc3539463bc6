# SPDX-FileCopyrightText: 2024 Swiss Confederation
#
# SPDX-License-Identifier: MIT

"""
Splunk compatible log output.
Every record is rendered as one JSON object per line.
"""

import json
import logging
import datetime

from pydantic import BaseModel


class SplunkExtendedLogEntry(BaseModel):
    """
    Structured log message.
    Pass an instance as message to a logger, all fields end up as separate keys in the splunk output.
    """

    message: str

    def fields(self) -> dict:
        """All fields besides the message, enums replaced by their value"""
        return self.model_dump(mode="json", exclude={"message"}, exclude_none=True)

    def __str__(self) -> str:
        extras = " ".join(f"{key}={value}" for key, value in self.fields().items())
        return f"{self.message} {extras}" if extras else self.message


class SplunkFormatter(logging.Formatter):
    """Formats records as json with the keys expected by the splunk index."""

    def __init__(self, defaults: dict = None) -> None:
        super().__init__(defaults=defaults)
        self._defaults = defaults or {}

    def _default(self, record: logging.LogRecord, name: str):
        value = getattr(record, name, None)
        return value if value is not None else self._defaults.get(name)

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.datetime.fromtimestamp(record.created).astimezone()
        data = {
            "@timestamp": timestamp.isoformat(timespec="milliseconds"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "app": self._default(record, "app_name"),
            "hash": self._default(record, "correlation_id"),
        }
        if isinstance(record.msg, SplunkExtendedLogEntry):
            data.update(record.msg.fields())
        if record.exc_info:
            data["exception"] = self.formatException(record.exc_info)
        return json.dumps(data)
