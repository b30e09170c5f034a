"""日志配置测试"""

from __future__ import annotations

import json
import logging

from cljsbuild.utils.logger import JSONFormatter, reset_logging, setup_logging


class TestSetupLogging:
    def teardown_method(self) -> None:
        reset_logging()

    def test_verbose_forces_debug(self) -> None:
        setup_logging(level="WARNING", verbose=True)
        assert logging.getLogger().level == logging.DEBUG

    def test_no_duplicate_handlers(self) -> None:
        setup_logging()
        setup_logging()
        assert len(logging.getLogger().handlers) == 1

    def test_json_formatter(self) -> None:
        record = logging.LogRecord(
            "cljsbuild.core.cache", logging.INFO, __file__, 1, "命中 %s", ("x",), None,
        )
        entry = json.loads(JSONFormatter().format(record))
        assert entry["level"] == "INFO"
        assert entry["logger"] == "cljsbuild.core.cache"
        assert entry["message"] == "命中 x"
